"""ttar CLI — create, list and extract plain-text archives."""

from ._commands import main  # noqa: F401 — entry point
