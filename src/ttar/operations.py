"""The three archive operations behind a single ``run`` entry point."""

from __future__ import annotations

import os
from contextlib import contextmanager
from enum import Enum
from typing import BinaryIO, Callable, Iterator, Sequence, Union

from .decoder import extract_archive, list_archive
from .encoder import create_archive
from .exceptions import InputNotFoundError, TtarError, UsageError

ArchiveArg = Union[str, "os.PathLike[str]", BinaryIO]
StatusFn = Callable[[str], None]


def _is_stream(archive) -> bool:
    return hasattr(archive, "read") or hasattr(archive, "write")


@contextmanager
def _open_for_reading(archive: ArchiveArg) -> Iterator[BinaryIO]:
    if _is_stream(archive):
        yield archive
        return
    try:
        f = open(archive, "rb")
    except FileNotFoundError:
        raise InputNotFoundError(f"Archive not found: {os.fspath(archive)}")
    with f:
        yield f


class Operation(str, Enum):
    """Archive operation: ``CREATE``, ``LIST`` or ``EXTRACT``."""
    CREATE = "create"
    LIST = "list"
    EXTRACT = "extract"

    def __str__(self) -> str:          # noqa: D105
        return self.value

    def run(
        self,
        archive: ArchiveArg,
        paths: Sequence[str] = (),
        *,
        root: str | os.PathLike[str] | None = None,
        status: StatusFn | None = None,
    ):
        """Run this operation against *archive*.

        *archive* is a filesystem path or an already-open binary stream.
        *paths* are the inputs for ``CREATE``; ``LIST`` and ``EXTRACT`` take
        none.  *root* rebases filesystem access for ``CREATE`` and
        ``EXTRACT``; a relative *archive* path is always resolved against
        the current directory.

        Returns:
            ``CREATE``: number of records written.
            ``LIST``: list of display lines.
            ``EXTRACT``: ``None``.
        """
        if self == Operation.CREATE:
            if not paths:
                raise UsageError("create requires at least one path")
            return _run_create(archive, paths, root, status)
        if paths:
            raise UsageError(f"{self.value} takes no paths, got: {' '.join(map(str, paths))}")
        with _open_for_reading(archive) as f:
            if self == Operation.LIST:
                return list_archive(f)
            extract_archive(f, root=root, status=status)
            return None


def _run_create(archive, paths, root, status) -> int:
    if _is_stream(archive):
        return create_archive(paths, archive, root=root, status=status)
    dest = os.fspath(archive)
    try:
        with open(dest, "wb") as f:
            return create_archive(paths, f, root=root, status=status)
    except TtarError:
        # A failed create leaves no archive behind.
        if os.path.exists(dest):
            os.remove(dest)
        raise
