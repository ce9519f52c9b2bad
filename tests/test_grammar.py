"""Tests for the record grammar helpers."""

import pytest

from ttar import _grammar as g
from ttar.exceptions import UnsupportedContentError


class TestEscapeContent:
    def test_trailing_newline(self):
        assert g.escape_content(b"a\nb\nc\n") == (3, b"a\nb\nc\n")

    def test_no_trailing_newline_adds_eof_line(self):
        assert g.escape_content(b"a\nb") == (2, b"a\nbEOF\n")

    def test_single_line_without_newline(self):
        assert g.escape_content(b"x") == (1, b"xEOF\n")

    def test_empty(self):
        assert g.escape_content(b"") == (0, b"")

    def test_nul_bytes(self):
        assert g.escape_content(b"a\x00b\n") == (1, b"aNULLBYTEb\n")

    def test_blank_lines_count(self):
        assert g.escape_content(b"\n\n") == (2, b"\n\n")


class TestCheckContent:
    @pytest.mark.parametrize("data", [
        b"has NULLBYTE inside\n", b"ends with EOF\n", b"EOF", b"NULLBYT", b"line\nNULLBYT",
    ])
    def test_reserved_tokens_rejected(self, data):
        with pytest.raises(UnsupportedContentError, match="f.txt"):
            g.check_content(data, "f.txt")

    def test_plain_content_accepted(self):
        g.check_content(b"hello\nworld\n", "f.txt")


class TestUnescapeLine:
    def test_plain_line_gets_newline(self):
        assert g.unescape_line(b"hello") == b"hello\n"

    def test_eof_strips_marker_and_newline(self):
        assert g.unescape_line(b"bEOF") == b"b"

    def test_nullbyte_restored(self):
        assert g.unescape_line(b"aNULLBYTEb") == b"a\x00b\n"

    def test_nul_then_eof(self):
        assert g.unescape_line(b"xNULLBYTEEOF") == b"x\x00"

    def test_empty_line(self):
        assert g.unescape_line(b"") == b"\n"


class TestParseHeader:
    @pytest.mark.parametrize("line, expected", [
        (b"Path: a/b.txt", (b"Path", b"a/b.txt")),
        (b"Lines: 12", (b"Lines", b"12")),
        (b"Directory: d", (b"Directory", b"d")),
        (b"SymlinkTo: ../x", (b"SymlinkTo", b"../x")),
        (b"Mode: 644", (b"Mode", b"644")),
        (b"Path: with spaces and: colons", (b"Path", b"with spaces and: colons")),
    ])
    def test_known_headers(self, line, expected):
        assert g.parse_header(line) == expected

    @pytest.mark.parametrize("line", [
        b"Lines: two",
        b"Lines: -1",
        b"Lines:3",
        b"Bogus: x",
        b"path: lowercase",
        b"",
        b"# ttar - - -",
    ])
    def test_not_headers(self, line):
        assert g.parse_header(line) is None

    def test_header_line(self):
        assert g.header(g.PATH, b"x") == b"Path: x\n"


class TestDivider:
    def test_divider_is_comment(self):
        assert g.is_comment(g.DIVIDER)
        assert g.DIVIDER.startswith(b"# ttar - - ")
        assert g.DIVIDER.endswith(b" -\n")
