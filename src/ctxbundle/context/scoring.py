"""Relevance scoring for workspace files.

Two weight sets exist side by side. ``DirectSelectionWeights`` drive the
graph-centric retrieval trace; ``BundleWeights`` drive the full bundle,
which adds lexical, preview-error and recency terms on top of the direct
score. The preview-error bonus differs between the two (35 vs 24) and the
direct check is case-sensitive while the bundle check is not.

Every score is a plain sum of independent terms.
"""

from __future__ import annotations

import re

from ctxbundle.config import BundleWeights, DirectSelectionWeights
from ctxbundle.graph.paths import basename, normalize_path, parent_dir

_TOKEN_SPLIT_RE = re.compile(r"[^a-z0-9_]+")
_WEB_EXTENSION_RE = re.compile(r"\.(html|css|js|ts|tsx|jsx)$", re.IGNORECASE)

FALLBACK_REASON = "global-context"


def tokenize(prompt: str | None, limit: int = 48) -> list[str]:
    """Distinct lowercase prompt tokens (length >= 2) in first-seen order."""
    tokens: list[str] = []
    seen: set[str] = set()
    for token in _TOKEN_SPLIT_RE.split((prompt or "").lower()):
        if len(token) < 2 or token in seen:
            continue
        seen.add(token)
        tokens.append(token)
    return tokens[:limit]


def lexical_score(
    path: str, content: str, tokens: list[str], weights: BundleWeights | None = None
) -> float:
    """Path and content token matches, combined and capped."""
    if not tokens:
        return 0
    w = weights or BundleWeights()
    corpus_path = path.lower()
    corpus_content = content[: w.content_window].lower()
    score = 0
    for token in tokens:
        if token in corpus_path:
            score += w.path_token
        if token in corpus_content:
            score += w.content_token
    return min(w.lexical_cap, score)


def preview_error_score(
    path: str, recent_errors: list[str], weights: BundleWeights | None = None
) -> float:
    """Bundle-path error bonus: case-insensitive basename match."""
    if not recent_errors:
        return 0
    base = basename(path).lower()
    if not base:
        return 0
    w = weights or BundleWeights()
    if any(base in line.lower() for line in recent_errors):
        return w.preview_error
    return 0


def recency_score(rank_index: int, weights: BundleWeights | None = None) -> float:
    """Earlier positions in the caller's list count as fresher."""
    w = weights or BundleWeights()
    return max(0, w.recency_base - rank_index // 2)


def error_proximity(path: str, recent_errors: list[str]) -> bool:
    """Direct-path check: case-sensitive basename match."""
    base = basename(path)
    return bool(base) and any(base in line for line in recent_errors)


def score_direct(
    path: str,
    active_file: str | None,
    recent_errors: list[str],
    degree: int,
    distance: int | None,
    weights: DirectSelectionWeights | None = None,
) -> tuple[float, list[str]]:
    """Graph-centric score of one file and the reasons behind it.

    ``distance`` is ``None`` for files unreachable from every seed.
    """
    w = weights or DirectSelectionWeights()
    normalized = normalize_path(path)
    active = normalize_path(active_file)
    reasons: list[str] = []
    score = 0

    if active and normalized == active:
        score += w.active_file
        reasons.append("active-file")
    # Root-level active files have an empty parent, which matches everything.
    if active and parent_dir(active) in normalized:
        score += w.active_directory
    near_error = error_proximity(normalized, recent_errors)
    if near_error:
        score += w.error_proximity
    if distance is not None:
        score += max(0, w.distance_base - min(w.distance_base, distance * w.distance_step))
    score += min(w.degree_cap, degree * w.degree_step)
    if _WEB_EXTENSION_RE.search(normalized):
        score += w.web_extension

    if degree > 0:
        reasons.append(f"dependency-degree:{degree}")
    if near_error:
        reasons.append("error-proximity")
    if distance is not None:
        reasons.append(f"dependency-distance:{distance}")
    if not reasons:
        reasons.append(FALLBACK_REASON)
    return score, reasons
