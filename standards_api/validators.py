from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import PurePosixPath, PureWindowsPath

MAX_FILE_NAME_LEN = 200


def file_extension(name: str | None) -> str:
    """Lower-case extension without the dot ('' when there is none)."""
    return PurePosixPath(name or "").suffix.lower().lstrip(".")


def is_allowed_extension(name: str | None, allowed: Iterable[str]) -> bool:
    ext = file_extension(name)
    return bool(ext) and ext in {a.lower().lstrip(".") for a in allowed}


def sanitize_filename(name: str | None) -> str:
    # Keep only the basename of either path flavour
    base = PureWindowsPath(os.path.basename(name or "")).name
    base = base.replace("\\", "").replace("/", "")
    base = "".join(ch for ch in base if ord(ch) > 31 and ch != "\x7f")
    base = base.strip().lstrip(".")
    if not base:
        base = "file"
    if len(base) > MAX_FILE_NAME_LEN:
        stem, dot, ext = base.rpartition(".")
        if dot and len(ext) < 16:
            base = stem[: MAX_FILE_NAME_LEN - len(ext) - 1] + "." + ext
        else:
            base = base[:MAX_FILE_NAME_LEN]
    return base


def parse_positive_int(raw: str | int | None) -> int | None:
    """Form fields arrive as strings; returns None for anything that is not a positive integer."""
    if raw is None:
        return None
    if isinstance(raw, int):
        return raw if raw > 0 else None
    s = raw.strip()
    if not (s.isascii() and s.isdigit()):
        return None
    val = int(s)
    return val if val > 0 else None
