"""Budgeted selection over scored files.

Two disciplines:
  - count-only (``select_top``) for the lightweight retrieval trace;
  - count-and-character (``select_within_budget``) for the full bundle,
    where required files bypass both limits.

Both rank by score descending with a stable sort, so ties keep the
caller's original order.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ctxbundle.config import SnippetConfig

BUDGET_REASON = "context-budget"


@dataclass
class Candidate:
    """A file competing for a place in the context."""

    path: str
    score: float
    content: str = ""
    reasons: list[str] = field(default_factory=list)
    required: bool = False

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class Selection:
    selected: list[Candidate] = field(default_factory=list)
    dropped: list[Candidate] = field(default_factory=list)

    @property
    def chars_used(self) -> int:
        return sum(c.size for c in self.selected)


def rank(candidates: list[Candidate]) -> list[Candidate]:
    """Score-descending order; ``sorted`` is stable so ties keep input order."""
    return sorted(candidates, key=lambda c: c.score, reverse=True)


def select_top(candidates: list[Candidate], max_files: int) -> Selection:
    ranked = rank(candidates)
    return Selection(selected=ranked[:max_files], dropped=ranked[max_files:])


def select_within_budget(
    candidates: list[Candidate], max_files: int, max_chars: int
) -> Selection:
    """Greedy walk of the ranking under file-count and character limits.

    A file that does not fit is dropped with ``context-budget`` and the walk
    continues, so a later, smaller file may still be taken. Required files
    are always taken, even past either limit.
    """
    result = Selection()
    used_chars = 0
    for cand in rank(candidates):
        fits = used_chars + cand.size <= max_chars and len(result.selected) < max_files
        if cand.required or fits:
            result.selected.append(cand)
            used_chars += cand.size
        else:
            result.dropped.append(cand)
    return result


def build_snippet(content: str, tokens: list[str], config: SnippetConfig | None = None) -> str:
    """Excerpt around the first prompt-token hit, or the file head."""
    if not content:
        return ""
    cfg = config or SnippetConfig()
    lower = content.lower()
    for token in tokens:
        if len(token) < cfg.min_token_length:
            continue
        idx = lower.find(token)
        if idx != -1:
            start = max(0, idx - cfg.before)
            end = min(len(content), idx + cfg.after)
            return content[start:end]
    return content[: cfg.fallback_chars]
