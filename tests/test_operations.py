"""Tests for Operation.run."""

import io

import pytest

from ttar import Operation
from ttar.exceptions import InputNotFoundError, UnsupportedContentError, UsageError


class TestOperation:
    def test_values(self):
        assert [str(op) for op in Operation] == ["create", "list", "extract"]
        assert Operation("extract") is Operation.EXTRACT

    def test_create_list_extract(self, tree, tmp_path, tree_listing, snapshot):
        archive = tmp_path / "a.ttar"
        assert Operation.CREATE.run(archive, ["tree"], root=tree) == 9
        assert Operation.LIST.run(archive) == tree_listing
        out = tmp_path / "out"
        out.mkdir()
        assert Operation.EXTRACT.run(str(archive), root=out) is None
        assert snapshot(out) == snapshot(tree)

    def test_streams(self, tree):
        buf = io.BytesIO()
        Operation.CREATE.run(buf, ["tree"], root=tree)
        buf.seek(0)
        assert Operation.LIST.run(buf)[0] == "tree/"

    def test_create_requires_paths(self, tmp_path):
        with pytest.raises(UsageError):
            Operation.CREATE.run(tmp_path / "a.ttar", [])

    @pytest.mark.parametrize("op", [Operation.LIST, Operation.EXTRACT])
    def test_read_ops_take_no_paths(self, op, tmp_path):
        archive = tmp_path / "a.ttar"
        archive.write_bytes(b"")
        with pytest.raises(UsageError, match="takes no paths"):
            op.run(archive, ["extra"])

    @pytest.mark.parametrize("op", [Operation.LIST, Operation.EXTRACT])
    def test_missing_archive(self, op, tmp_path):
        with pytest.raises(InputNotFoundError, match="Archive not found"):
            op.run(tmp_path / "nope.ttar", root=tmp_path)

    def test_failed_create_leaves_no_archive(self, tmp_path):
        (tmp_path / "ok.txt").write_bytes(b"fine\n")
        (tmp_path / "bad.txt").write_bytes(b"NULLBYTE\n")
        archive = tmp_path / "a.ttar"
        with pytest.raises(UnsupportedContentError):
            Operation.CREATE.run(archive, ["ok.txt", "bad.txt"], root=tmp_path)
        assert not archive.exists()

    def test_missing_input_leaves_no_archive(self, tmp_path):
        archive = tmp_path / "a.ttar"
        with pytest.raises(InputNotFoundError):
            Operation.CREATE.run(archive, ["nope"], root=tmp_path)
        assert not archive.exists()

    def test_empty_archive_lists_nothing(self, tmp_path):
        archive = tmp_path / "a.ttar"
        archive.write_bytes(b"")
        assert Operation.LIST.run(archive) == []
