"""Shared fixtures for ttar tests."""

import os
import stat

import pytest
from click.testing import CliRunner


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def tree(tmp_path):
    """Create a sample tree under ``tmp_path/src`` and return that base dir.

    Tree (relative to the base):
        tree/                 755
        tree/.hidden          "secret\\n"
        tree/a.txt            "a\\nb\\nc\\n"
        tree/empty.txt        ""
        tree/link          -> a.txt
        tree/noeol.txt        "a\\nb"
        tree/nul.txt          "a\\0b\\n"
        tree/sub/             750
        tree/sub/deep.txt     "deep\\n", 600
    """
    base = tmp_path / "src"
    root = base / "tree"
    sub = root / "sub"
    sub.mkdir(parents=True)

    (root / ".hidden").write_bytes(b"secret\n")
    (root / "a.txt").write_bytes(b"a\nb\nc\n")
    (root / "empty.txt").write_bytes(b"")
    (root / "noeol.txt").write_bytes(b"a\nb")
    (root / "nul.txt").write_bytes(b"a\x00b\n")
    (sub / "deep.txt").write_bytes(b"deep\n")
    os.symlink("a.txt", root / "link")

    for f in (".hidden", "a.txt", "empty.txt", "noeol.txt", "nul.txt"):
        os.chmod(root / f, 0o644)
    os.chmod(sub / "deep.txt", 0o600)
    os.chmod(sub, 0o750)
    os.chmod(root, 0o755)
    return base


TREE_LISTING = [
    "tree/",
    "tree/.hidden",
    "tree/a.txt",
    "tree/empty.txt",
    "tree/link -> a.txt",
    "tree/noeol.txt",
    "tree/nul.txt",
    "tree/sub/",
    "tree/sub/deep.txt",
]


@pytest.fixture
def tree_listing():
    """Expected listing of the ``tree`` fixture."""
    return list(TREE_LISTING)


def _snapshot(base):
    """Map each relative path under *base* to (kind, payload, mode bits)."""
    result = {}
    for dirpath, dirnames, filenames in os.walk(base):
        for name in dirnames + filenames:
            full = os.path.join(dirpath, name)
            rel = os.path.relpath(full, base)
            st = os.lstat(full)
            if stat.S_ISLNK(st.st_mode):
                result[rel] = ("link", os.readlink(full), None)
            elif stat.S_ISDIR(st.st_mode):
                result[rel] = ("dir", None, stat.S_IMODE(st.st_mode))
            else:
                with open(full, "rb") as f:
                    result[rel] = ("file", f.read(), stat.S_IMODE(st.st_mode))
    return result


@pytest.fixture
def snapshot():
    """Return a function that describes a directory tree for comparison."""
    return _snapshot
