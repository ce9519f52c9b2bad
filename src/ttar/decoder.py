"""Decoder: the line-oriented state machine shared by list and extract.

:class:`Decoder` consumes stream lines and calls into a
:class:`RecordHandler`.  The handlers in this module are

* :class:`Lister` -- collects display lines, never touches the filesystem.
* :class:`Extractor` -- recreates files, directories and symlinks.
* :class:`RecordCollector` -- builds :class:`~ttar.records.Record` objects.

Both list and extract reject the same malformed input: unknown lines
outside a content block, headers that need a preceding ``Path`` or
``Directory``, ``Lines`` or ``SymlinkTo`` anywhere but right after ``Path``,
and content blocks cut short by end of stream.
"""

from __future__ import annotations

import os
import shutil
from enum import Enum
from typing import BinaryIO, Callable, Iterable

from . import _grammar as g
from ._modes import apply_mode
from .exceptions import MalformedArchiveError
from .records import Record, RecordKind

StatusFn = Callable[[str], None]


class State(str, Enum):
    """Decoder state: ``SCANNING`` for headers, ``IN_CONTENT`` inside a file."""
    SCANNING = "scanning"
    IN_CONTENT = "in_content"


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

class RecordHandler:
    """Actions taken by the decoder.  All methods default to no-ops."""

    def begin_path(self, path: bytes) -> None:
        pass

    def begin_file(self, path: bytes, lines: int) -> None:
        pass

    def content(self, line: bytes) -> None:
        pass

    def end_file(self, path: bytes) -> None:
        pass

    def directory(self, path: bytes) -> None:
        pass

    def symlink(self, path: bytes, target: bytes) -> None:
        pass

    def mode(self, path: bytes, mode: bytes) -> None:
        pass

    def end_archive(self) -> None:
        """Called once after the whole stream decoded without error."""

    def close(self) -> None:
        """Release any resources; called once, also on error."""


class Lister(RecordHandler):
    """Collect the inventory of an archive as display lines."""

    def __init__(self):
        self.lines: list[str] = []

    def begin_file(self, path, lines):
        self.lines.append(os.fsdecode(path))

    def directory(self, path):
        self.lines.append(f"{os.fsdecode(path)}/")

    def symlink(self, path, target):
        self.lines.append(f"{os.fsdecode(path)} -> {os.fsdecode(target)}")


def _remove(path: str) -> None:
    """Remove whatever is at *path* (file, symlink or directory tree)."""
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
    else:
        os.unlink(path)


def _exists(path: str) -> bool:
    return os.path.lexists(path)


class Extractor(RecordHandler):
    """Recreate archive entries on disk.

    Relative record paths are resolved against *root* (default: the
    current directory).  Existing entries at a ``Path`` target are removed
    before being recreated.  Nothing is rolled back on failure.

    Directory modes are applied once the whole archive has been extracted,
    deepest directories first, so a read-only directory does not block
    its own children.
    """

    def __init__(self, root: str | os.PathLike[str] | None = None,
                 status: StatusFn | None = None):
        self._root = os.fspath(root) if root is not None else None
        self._status = status
        self._out: BinaryIO | None = None
        self._dir_modes: dict[bytes, bytes] = {}

    def _local(self, path: bytes) -> str:
        p = os.fsdecode(path)
        if self._root is None:
            return p
        return os.path.join(self._root, p)

    def _report(self, msg: str) -> None:
        if self._status is not None:
            self._status(msg)

    @staticmethod
    def _make_parent(local: str) -> None:
        parent = os.path.dirname(local)
        if parent:
            os.makedirs(parent, exist_ok=True)

    def begin_path(self, path):
        self._dir_modes.pop(path, None)
        local = self._local(path)
        if _exists(local):
            _remove(local)

    def begin_file(self, path, lines):
        local = self._local(path)
        self._make_parent(local)
        self._out = open(local, "wb")
        self._report(os.fsdecode(path))

    def content(self, line):
        self._out.write(g.unescape_line(line))

    def end_file(self, path):
        self._close_out()

    def directory(self, path):
        local = self._local(path)
        if _exists(local) and (os.path.islink(local) or not os.path.isdir(local)):
            _remove(local)
        os.makedirs(local, exist_ok=True)
        self._dir_modes.pop(path, None)
        self._report(f"{os.fsdecode(path)}/")

    def symlink(self, path, target):
        local = self._local(path)
        self._make_parent(local)
        os.symlink(os.fsdecode(target), local)
        self._report(f"{os.fsdecode(path)} -> {os.fsdecode(target)}")

    def mode(self, path, mode):
        local = self._local(path)
        if os.path.isdir(local) and not os.path.islink(local):
            self._dir_modes[path] = mode
        else:
            apply_mode(local, mode)

    def end_archive(self):
        for path, mode in reversed(list(self._dir_modes.items())):
            apply_mode(self._local(path), mode)
        self._dir_modes.clear()

    def _close_out(self) -> None:
        if self._out is not None:
            self._out.close()
            self._out = None

    def close(self):
        self._close_out()


class RecordCollector(RecordHandler):
    """Build :class:`Record` objects from a stream, without disk access."""

    def __init__(self):
        self.records: list[Record] = []
        self._chunks: list[bytes] = []
        self._pending: Record | None = None

    def begin_file(self, path, lines):
        self._pending = Record(RecordKind.FILE, path, lines=lines)
        self.records.append(self._pending)
        self._chunks = []

    def content(self, line):
        self._chunks.append(g.unescape_line(line))

    def end_file(self, path):
        self._pending.content = b"".join(self._chunks)
        self._chunks = []

    def directory(self, path):
        self._pending = Record(RecordKind.DIRECTORY, path)
        self.records.append(self._pending)

    def symlink(self, path, target):
        self._pending = Record(RecordKind.SYMLINK, path, target=target)
        self.records.append(self._pending)

    def mode(self, path, mode):
        if self._pending is not None and self._pending.path == path:
            self._pending.mode = mode


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------

class Decoder:
    """Two-state parser for ttar streams.

    Feed it lines with their terminator stripped, then call :meth:`finish`.
    The current ``path`` and the ``remaining`` content-line counter live on
    the instance.
    """

    def __init__(self, handler: RecordHandler):
        self.handler = handler
        self.state = State.SCANNING
        self.path: bytes | None = None
        # Header that last advanced the current record.
        self.last_header: bytes | None = None
        self.remaining = 0
        self.line_no = 0

    def _malformed(self, message: str, line: bytes) -> MalformedArchiveError:
        text = line.decode("utf-8", "replace")
        return MalformedArchiveError(
            f"{message} in line {self.line_no}: {text}", self.line_no, line,
        )

    def _require_path(self, keyword: bytes, line: bytes) -> bytes:
        if self.path is None:
            raise self._malformed(f"{keyword.decode()} without a preceding Path", line)
        return self.path

    def _require_file_path(self, keyword: bytes, line: bytes) -> bytes:
        """``Lines`` and ``SymlinkTo`` must directly follow a ``Path`` header."""
        path = self._require_path(keyword, line)
        if self.last_header != g.PATH:
            raise self._malformed(
                f"{keyword.decode()} after {self.last_header.decode()}", line,
            )
        return path

    def _end_content(self) -> None:
        self.state = State.SCANNING
        self.handler.end_file(self.path)

    def feed(self, line: bytes) -> None:
        """Process one stream line."""
        self.line_no += 1

        if self.state == State.IN_CONTENT:
            self.handler.content(line)
            self.remaining -= 1
            if self.remaining == 0:
                self._end_content()
            return

        parsed = g.parse_header(line)
        if parsed is None:
            if g.is_comment(line):
                return
            raise self._malformed("Unknown keyword", line)

        keyword, value = parsed
        if keyword == g.PATH:
            self.path = value
            self.handler.begin_path(value)
        elif keyword == g.LINES:
            path = self._require_file_path(keyword, line)
            self.remaining = int(value)
            self.handler.begin_file(path, self.remaining)
            self.state = State.IN_CONTENT
            if self.remaining == 0:
                self._end_content()
        elif keyword == g.DIRECTORY:
            self.path = value
            self.handler.directory(value)
        elif keyword == g.SYMLINK_TO:
            self.handler.symlink(self._require_file_path(keyword, line), value)
        else:
            self.handler.mode(self._require_path(keyword, line), value)
            return
        self.last_header = keyword

    def finish(self) -> None:
        """Validate end of stream."""
        if self.state == State.IN_CONTENT:
            path = os.fsdecode(self.path)
            raise MalformedArchiveError(
                f"Truncated archive: {self.remaining} content line(s) "
                f"missing for {path} at end of stream",
                self.line_no,
            )

    def decode(self, stream: Iterable[bytes]) -> None:
        """Run the whole of *stream* through the state machine.

        *stream* yields raw lines (a binary file object works).  The
        handler is closed afterwards, also when an error is raised.
        """
        try:
            for raw in stream:
                if raw.endswith(b"\n"):
                    raw = raw[:-1]
                self.feed(raw)
            self.finish()
            self.handler.end_archive()
        finally:
            self.handler.close()


# ---------------------------------------------------------------------------
# Convenience functions
# ---------------------------------------------------------------------------

def list_archive(stream: Iterable[bytes]) -> list[str]:
    """Return the display lines for every record in *stream*.

    Files appear as their path, directories with a trailing ``/`` and
    symlinks as ``path -> target``.
    """
    lister = Lister()
    Decoder(lister).decode(stream)
    return lister.lines


def extract_archive(
    stream: Iterable[bytes],
    *,
    root: str | os.PathLike[str] | None = None,
    status: StatusFn | None = None,
) -> None:
    """Recreate the entries of *stream* on disk, relative to *root*."""
    Decoder(Extractor(root, status)).decode(stream)


def read_records(stream: Iterable[bytes]) -> list[Record]:
    """Decode *stream* into a list of :class:`Record` objects."""
    collector = RecordCollector()
    Decoder(collector).decode(stream)
    return collector.records
