"""Lexical extraction of link/import-like references from file text.

This is a heuristic, not a parser: it recognizes ``href=``, ``src=`` and
``from`` followed by a quoted literal. Missed dependencies and coincidental
matches are both expected. A stricter extractor can be substituted through
the ``ReferenceExtractor`` protocol without touching graph or scoring code.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol

_REFERENCE_RE = re.compile(r"(href|src|from)\s*[:=]?\s*[\"']([^\"']+)[\"']", re.IGNORECASE)
_ABSOLUTE_URL_RE = re.compile(r"^[a-z]+://", re.IGNORECASE)


@dataclass(frozen=True)
class Reference:
    """A referenced literal and the keyword that introduced it."""

    keyword: str
    value: str


class ReferenceExtractor(Protocol):
    """Anything that can pull references out of file content."""

    def extract(self, content: str) -> list[Reference]: ...


class RegexReferenceExtractor:
    """Default quote-agnostic ``href|src|from`` extractor."""

    def extract(self, content: str) -> list[Reference]:
        refs: list[Reference] = []
        for m in _REFERENCE_RE.finditer(content or ""):
            value = m.group(2).strip()
            if not value or value.startswith("#") or _ABSOLUTE_URL_RE.match(value):
                continue
            refs.append(Reference(keyword=m.group(1).lower(), value=value))
        return refs


def extract_references(content: str) -> list[str]:
    """Return every referenced value in document order."""
    return [ref.value for ref in RegexReferenceExtractor().extract(content)]
