"""The ``ttar`` command: create (-c), list (-t) and extract (-x)."""

from __future__ import annotations

import click

from ..operations import Operation
from ._helpers import (
    TtarCommand,
    _archive_target,
    _reported_errors,
    _require_archive,
    _select_operation,
    _status,
    _status_fn,
)


@click.command(cls=TtarCommand, context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-c", "--create", is_flag=True, help="Create an archive from PATHs.")
@click.option("-t", "--list", "list_", is_flag=True, help="List the archive's contents.")
@click.option("-x", "--extract", is_flag=True, help="Extract the archive.")
@click.option("-f", "--file", "archive", envvar="TTAR_ARCHIVE",
              help="Archive file ('-' for stdout/stdin, or set TTAR_ARCHIVE).")
@click.option("-C", "--directory", type=click.Path(exists=True, file_okay=False),
              help="Change to DIRECTORY before archiving or extracting entries.")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output on stderr.")
@click.argument("paths", nargs=-1, type=click.Path())
@click.pass_context
def main(ctx, create, list_, extract, archive, directory, verbose, paths):
    """ttar — plain-text archives for directory trees.

    Stores regular text files, directories and symlinks in a single
    human-readable, diffable file.  Not safe for untrusted archives:
    paths are used exactly as stored.

    \b
    Examples:
      ttar -c -f fixtures.ttar fixtures
      ttar -t -f fixtures.ttar
      ttar -C /tmp/out -x -f fixtures.ttar

    \b
    Files containing the strings NULLBYTE or EOF cannot be archived.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    op = _select_operation(ctx, create, list_, extract)
    archive = _require_archive(ctx, archive)
    target = _archive_target(op, archive)

    with _reported_errors(ctx, op):
        result = op.run(target, paths, root=directory, status=_status_fn(ctx))

    if op == Operation.CREATE:
        _status(ctx, f"Wrote {result} record(s) to {archive}")
    elif op == Operation.LIST:
        for line in result:
            click.echo(line)
