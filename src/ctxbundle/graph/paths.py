"""Workspace path canonicalization."""

from __future__ import annotations

import re

_LEADING_RE = re.compile(r"^(?:\./|/)+")
_DUP_SLASH_RE = re.compile(r"/{2,}")


def _normalize_once(value: str) -> str:
    value = value.strip().replace("\\", "/")
    value = _DUP_SLASH_RE.sub("/", value)
    value = _LEADING_RE.sub("", value)
    return value.strip()


def normalize_path(raw: str | None) -> str:
    """Canonicalize a workspace path.

    Backslashes become forward slashes, leading ``./`` and ``/`` are removed,
    duplicate slashes collapse and surrounding whitespace is trimmed. Blank
    or ``None`` input yields ``""``. The steps repeat until nothing changes,
    so the result is always a fixed point.
    """
    if raw is None:
        return ""
    value = str(raw)
    while True:
        nxt = _normalize_once(value)
        if nxt == value:
            return value
        value = nxt


def basename(path: str) -> str:
    """Last segment of a normalized path."""
    return normalize_path(path).rsplit("/", 1)[-1]


def parent_dir(path: str) -> str:
    """Everything before the last segment ('' for root-level files)."""
    normalized = normalize_path(path)
    if "/" not in normalized:
        return ""
    return normalized.rsplit("/", 1)[0]


def get_extension(path: str) -> str:
    """Lowercased extension of the file name, without the dot."""
    name = basename(path)
    idx = name.rfind(".")
    if idx == -1:
        return ""
    return name[idx + 1 :].lower()
