"""Shared helpers for the CLI: exit-code mapping, status output, archive streams."""

from __future__ import annotations

import os
from contextlib import contextmanager

import click

from ..exceptions import (
    InputNotFoundError,
    MalformedArchiveError,
    UnsupportedContentError,
    UsageError,
)
from ..operations import Operation


# ---------------------------------------------------------------------------
# Exceptions with ttar's exit codes
# ---------------------------------------------------------------------------

class TtarUsageError(click.UsageError):
    """Bad, missing or conflicting arguments.  Exits 1, like every usage error."""
    exit_code = 1


class CreateError(click.ClickException):
    """A create failed because of its inputs (missing path, reserved token)."""
    exit_code = 2


class TtarCommand(click.Command):
    """Click command that reports option-parsing errors with exit code 1."""

    def parse_args(self, ctx, args):
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as exc:
            exc.exit_code = 1
            raise


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _status(ctx, msg):
    """Emit a status message to stderr when verbose mode (-v) is on."""
    if ctx.obj.get("verbose"):
        click.echo(msg, err=True)


def _status_fn(ctx):
    """Return a status callable for the library, or None when not verbose."""
    if not ctx.obj.get("verbose"):
        return None
    return lambda msg: _status(ctx, msg)


def _select_operation(ctx, create: bool, list_: bool, extract: bool) -> Operation:
    """Turn the -c / -t / -x flags into exactly one :class:`Operation`."""
    chosen = [op for flag, op in (
        (create, Operation.CREATE),
        (list_, Operation.LIST),
        (extract, Operation.EXTRACT),
    ) if flag]
    if len(chosen) > 1:
        raise TtarUsageError("Can only use one of -c, -t, -x", ctx=ctx)
    if not chosen:
        raise TtarUsageError("Specify one of -c, -t, -x", ctx=ctx)
    return chosen[0]


def _require_archive(ctx, archive: str | None) -> str:
    """Get the archive path, raising a usage error if missing."""
    if not archive:
        raise TtarUsageError(
            "Please specify an archive file with -f (or set TTAR_ARCHIVE).", ctx=ctx,
        )
    return archive


def _archive_target(op: Operation, archive: str):
    """Return what to hand to :meth:`Operation.run` for *archive*.

    ``-`` maps to stdout for create and stdin for list/extract.  Relative
    paths are made absolute against the invocation directory, so that -C
    only rebases the archive's entries.
    """
    if archive == "-":
        name = "stdout" if op == Operation.CREATE else "stdin"
        return click.get_binary_stream(name)
    return os.path.abspath(archive)


@contextmanager
def _reported_errors(ctx, op: Operation):
    """Translate library exceptions into click exceptions with ttar's exit codes."""
    try:
        yield
    except UsageError as exc:
        raise TtarUsageError(str(exc), ctx=ctx)
    except (InputNotFoundError, UnsupportedContentError) as exc:
        if op == Operation.CREATE:
            raise CreateError(str(exc))
        raise click.ClickException(str(exc))
    except MalformedArchiveError as exc:
        raise click.ClickException(str(exc))
    except OSError as exc:
        raise click.ClickException(str(exc))
