"""Exceptions for ttar."""

from __future__ import annotations


class TtarError(Exception):
    """Base class for all errors raised by ttar."""


class UsageError(TtarError):
    """Raised when an operation is called with the wrong arguments."""


class InputNotFoundError(TtarError, FileNotFoundError):
    """Raised when an archive or an input path does not exist."""


class UnsupportedContentError(TtarError):
    """Raised when a file contains a reserved token (``NULLBYTE`` or ``EOF``).

    Such content cannot be represented in the archive grammar.
    """


class MalformedArchiveError(TtarError, ValueError):
    """Raised when an archive stream does not follow the record grammar.

    Attributes:
        line_no: 1-based line number of the offending line, or ``None``
            when the problem is detected at end of stream.
        line: Raw text of the offending line (bytes), if any.
    """

    def __init__(self, message: str, line_no: int | None = None, line: bytes | None = None):
        super().__init__(message)
        self.line_no = line_no
        self.line = line
