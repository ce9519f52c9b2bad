"""Encoder: walk filesystem paths and write a ttar stream."""

from __future__ import annotations

import os
import stat
from typing import BinaryIO, Callable, Iterable

from . import _grammar as g
from ._modes import query_mode
from .exceptions import InputNotFoundError

StatusFn = Callable[[str], None]


def _local_path(path: str, root: str | None) -> str:
    """Return the on-disk location of an archive path, rebased onto *root*."""
    if root is None:
        return path
    return os.path.join(root, path)


def _strip_trailing_slash(path: str) -> str:
    stripped = path.rstrip("/")
    return stripped or "/"


def _child_path(parent: str, name: str) -> str:
    if parent.endswith("/"):
        return parent + name
    return f"{parent}/{name}"


def _sorted_children(local: str) -> list[str]:
    """List a directory's entries (dotfiles included) in byte-wise order."""
    return sorted(os.listdir(local), key=os.fsencode)


def _write_symlink(sink: BinaryIO, path: str, local: str, status: StatusFn | None) -> None:
    target = os.readlink(local)
    sink.write(g.header(g.PATH, os.fsencode(path)))
    sink.write(g.header(g.SYMLINK_TO, os.fsencode(target)))
    if status is not None:
        status(f"    {path} -> {target}")
    sink.write(g.DIVIDER)


def _write_directory(sink: BinaryIO, path: str, local: str, status: StatusFn | None) -> None:
    mode = query_mode(local)
    sink.write(g.header(g.DIRECTORY, os.fsencode(path)))
    sink.write(g.header(g.MODE, mode))
    if status is not None:
        status(f"{mode.decode('ascii')} {path}/")
    sink.write(g.DIVIDER)


def _write_file(sink: BinaryIO, path: str, local: str, status: StatusFn | None) -> None:
    with open(local, "rb") as f:
        data = f.read()
    g.check_content(data, path)
    lines, payload = g.escape_content(data)
    sink.write(g.header(g.PATH, os.fsencode(path)))
    sink.write(g.header(g.LINES, str(lines).encode("ascii")))
    sink.write(payload)
    mode = query_mode(local)
    sink.write(g.header(g.MODE, mode))
    if status is not None:
        status(f"{mode.decode('ascii')} {path}")
    sink.write(g.DIVIDER)


def _create(sink: BinaryIO, path: str, root: str | None, status: StatusFn | None) -> int:
    local = _local_path(path, root)
    try:
        st = os.lstat(local)
    except FileNotFoundError:
        st = None

    if st is not None and stat.S_ISLNK(st.st_mode):
        _write_symlink(sink, path, local, status)
        return 1
    if st is not None and stat.S_ISDIR(st.st_mode):
        path = _strip_trailing_slash(path)
        local = _local_path(path, root)
        _write_directory(sink, path, local, status)
        count = 1
        for name in _sorted_children(local):
            count += _create(sink, _child_path(path, name), root, status)
        return count
    if st is not None and stat.S_ISREG(st.st_mode):
        _write_file(sink, path, local, status)
        return 1

    cwd = os.path.abspath(root) if root is not None else os.getcwd()
    raise InputNotFoundError(f"file not found: {path} (in {cwd})")


def create_archive(
    paths: Iterable[str | os.PathLike[str]],
    sink: BinaryIO,
    *,
    root: str | os.PathLike[str] | None = None,
    status: StatusFn | None = None,
) -> int:
    """Write a ttar stream for *paths* to the binary *sink*.

    Directories are walked depth-first, parents before children, with
    children in byte-wise sorted order.  Symlinks are recorded, never
    followed.

    Args:
        paths: Filesystem paths, recorded in the archive exactly as given.
        sink: Binary stream the archive is written to.
        root: Directory that relative *paths* are resolved against
            (defaults to the current directory).
        status: Optional callable receiving one progress line per entry.

    Returns:
        Number of records written.

    Raises:
        InputNotFoundError: A path does not exist (or is not a regular
            file, directory or symlink).
        UnsupportedContentError: A file contains ``NULLBYTE`` or ``EOF``.
    """
    root = os.fspath(root) if root is not None else None
    count = 0
    for path in paths:
        count += _create(sink, os.fspath(path), root, status)
    return count
