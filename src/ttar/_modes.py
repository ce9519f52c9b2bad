"""Mode strings: querying permissions on create, reapplying them on extract.

The archive stores whatever :func:`query_mode` returns and hands it back to
:func:`apply_mode` unchanged.  Octal strings are what this package writes;
symbolic ``chmod`` strings are accepted on extract so that hand-written
archives work too.
"""

from __future__ import annotations

import os
import re
import stat

from .exceptions import MalformedArchiveError

_OCTAL_RE = re.compile(r"[0-7]+")
_CLAUSE_RE = re.compile(r"([ugoa]*)((?:[-+=](?:[ugo]|[rwxXst]*))+)")
_ACTION_RE = re.compile(r"([-+=])([ugo]|[rwxXst]*)")

_SHIFT = {"u": 6, "g": 3, "o": 0}
_CLASS_MASK = {
    "u": stat.S_ISUID | stat.S_IRWXU,
    "g": stat.S_ISGID | stat.S_IRWXG,
    "o": stat.S_ISVTX | stat.S_IRWXO,
}
_RWX = {"r": 4, "w": 2, "x": 1}


def query_mode(path: str | os.PathLike[str]) -> bytes:
    """Return the permission bits of *path* as an octal string, e.g. ``b"644"``."""
    st = os.lstat(path)
    return format(stat.S_IMODE(st.st_mode), "o").encode("ascii")


def _perm_bits(perms: str, who: str, current: int, is_dir: bool) -> int:
    if perms in _SHIFT:
        # Copy another class's bits, e.g. "g=u".
        src = (current >> _SHIFT[perms]) & 0o7
        return sum(src << _SHIFT[w] for w in who)
    bits = 0
    for ch in perms:
        if ch in _RWX:
            rwx = _RWX[ch]
        elif ch == "X":
            rwx = 1 if is_dir or current & 0o111 else 0
        elif ch == "s":
            if "u" in who:
                bits |= stat.S_ISUID
            if "g" in who:
                bits |= stat.S_ISGID
            continue
        else:  # "t"
            if "o" in who:
                bits |= stat.S_ISVTX
            continue
        for w in who:
            bits |= rwx << _SHIFT[w]
    return bits


def resolve_mode(mode: bytes | str, current: int = 0) -> int:
    """Compute the permission bits that *mode* yields when applied to *current*.

    *current* is the entry's existing ``st_mode``; it is only consulted for
    symbolic strings.  Octal strings may carry file-type bits (``100644``),
    which are masked off.
    """
    text = mode.decode("ascii", "replace") if isinstance(mode, bytes) else mode
    if _OCTAL_RE.fullmatch(text):
        return int(text, 8) & 0o7777

    is_dir = stat.S_ISDIR(current)
    result = stat.S_IMODE(current)
    for clause in text.split(","):
        m = _CLAUSE_RE.fullmatch(clause)
        if m is None:
            raise MalformedArchiveError(f"Invalid mode string: {text!r}")
        who = m.group(1)
        if not who or "a" in who:
            who = "ugo"
        for op, perms in _ACTION_RE.findall(m.group(2)):
            bits = _perm_bits(perms, who, result, is_dir)
            if op == "+":
                result |= bits
            elif op == "-":
                result &= ~bits
            else:
                mask = 0
                for w in who:
                    mask |= _CLASS_MASK[w]
                result = (result & ~mask) | bits
    return result


def apply_mode(path: str | os.PathLike[str], mode: bytes | str) -> None:
    """Apply the mode string *mode* to *path*."""
    current = os.stat(path).st_mode
    os.chmod(path, resolve_mode(mode, current))
