"""Record grammar for ttar streams.

A stream is a sequence of newline-terminated lines.  Outside a content
block every line is either a ``Keyword: value`` header or a ``#`` comment.
File content is carried verbatim except for two reserved tokens:

* ``NULLBYTE`` stands in for a single NUL byte.
* ``EOF`` at the end of a content line marks the file's last line as having
  no trailing newline.

Everything here works on ``bytes`` so that paths and content round-trip
without any decoding step.
"""

from __future__ import annotations

import re

from .exceptions import UnsupportedContentError

NULLBYTE = b"NULLBYTE"
EOF = b"EOF"

PATH = b"Path"
LINES = b"Lines"
DIRECTORY = b"Directory"
SYMLINK_TO = b"SymlinkTo"
MODE = b"Mode"

# Tested in this order against a header line.
KEYWORDS = (PATH, LINES, DIRECTORY, SYMLINK_TO, MODE)

DIVIDER = b"# ttar" + b" -" * 34 + b"\n"

_HEADER_RE = re.compile(rb"^(Path|Lines|Directory|SymlinkTo|Mode): (.*)$", re.DOTALL)
_LINES_RE = re.compile(rb"^[0-9]+$")


def header(keyword: bytes, value: bytes) -> bytes:
    """Return a complete header line, terminator included."""
    return keyword + b": " + value + b"\n"


def parse_header(line: bytes) -> tuple[bytes, bytes] | None:
    """Split a header line into ``(keyword, value)``.

    Returns ``None`` when *line* is not a recognised header.  A ``Lines``
    header only counts when its value is a decimal integer.
    """
    m = _HEADER_RE.match(line)
    if m is None:
        return None
    keyword, value = m.group(1), m.group(2)
    if keyword == LINES and not _LINES_RE.match(value):
        return None
    return keyword, value


def is_comment(line: bytes) -> bool:
    return line.startswith(b"#")


def check_content(data: bytes, path: str) -> None:
    """Raise :class:`UnsupportedContentError` if *data* collides with the grammar.

    Besides the two tokens themselves, a file without a final newline may
    not end in ``NULLBYT``: the appended ``EOF`` would complete a
    ``NULLBYTE`` token.
    """
    for token in (NULLBYTE, EOF):
        if token in data:
            raise UnsupportedContentError(
                f"ttar doesn't support files containing {token.decode()}: {path}"
            )
    if data and not data.endswith(b"\n") and data.endswith(NULLBYTE[:-1]):
        raise UnsupportedContentError(
            f"ttar doesn't support files ending in {NULLBYTE[:-1].decode()} "
            f"without a final newline: {path}"
        )


def escape_content(data: bytes) -> tuple[int, bytes]:
    """Return ``(line_count, payload)`` for a file's raw content.

    *line_count* is the number of newlines, plus one when the content is
    non-empty and its last byte is not a newline.  In that case the payload
    ends with the ``EOF`` token followed by the stream's own line terminator.
    The caller must have run :func:`check_content` first.
    """
    lines = data.count(b"\n")
    payload = data.replace(b"\0", NULLBYTE)
    if data and not data.endswith(b"\n"):
        lines += 1
        payload += EOF + b"\n"
    return lines, payload


def unescape_line(line: bytes) -> bytes:
    """Reverse :func:`escape_content` for one content line.

    *line* is given without its stream terminator.  The returned bytes are
    what must be appended to the output file.
    """
    data = line.replace(NULLBYTE, b"\0")
    if data.endswith(EOF):
        return data[:-len(EOF)]
    return data + b"\n"
