"""Data structures describing archive records."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum


class RecordKind(str, Enum):
    """Kind of filesystem entry a record describes.

    Members: ``FILE``, ``DIRECTORY``, ``SYMLINK``.
    """
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"

    def __str__(self) -> str:          # noqa: D105
        return self.value


@dataclass
class Record:
    """One decoded archive record.

    Attributes:
        kind: :class:`RecordKind` of the entry.
        path: Path exactly as stored in the archive.
        mode: Mode string as stored, or ``None`` (symlinks carry none).
        lines: Declared ``Lines`` count (files only).
        content: Reconstructed file content (files only).
        target: Link target (symlinks only).
    """
    kind: RecordKind
    path: bytes
    mode: bytes | None = None
    lines: int = 0
    content: bytes = b""
    target: bytes | None = None

    @property
    def display(self) -> str:
        """Return the listing form of this record."""
        path = os.fsdecode(self.path)
        if self.kind == RecordKind.DIRECTORY:
            return f"{path}/"
        if self.kind == RecordKind.SYMLINK:
            return f"{path} -> {os.fsdecode(self.target or b'')}"
        return path
