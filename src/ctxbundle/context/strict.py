"""Completeness-driven selection for ``strict_full`` mode.

The workspace-analysis step decides which paths must be read. Every path in
its required read set is force-included, even when that alone breaks the
character or file budget. Expanded-only paths compete for what is left.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ctxbundle.config import BundleWeights
from ctxbundle.context.models import WorkspaceAnalysis
from ctxbundle.context.scoring import lexical_score, preview_error_score
from ctxbundle.context.selection import Candidate, Selection, select_within_budget
from ctxbundle.graph.paths import normalize_path

logger = logging.getLogger("ctxbundle.context")

STRICT_REASON = "strict-full-context"
REQUIRED_REASON = "required-read-set"
EXPANDED_REASON = "expanded-read-set"
OUTSIDE_REASON = "not-in-expanded-read-set"


@dataclass
class StrictSelection(Selection):
    outside: list[str] = field(default_factory=list)  # snapshot paths not in any read set


def select_strict_full(
    contents: dict[str, str],
    analysis: WorkspaceAnalysis,
    tokens: list[str],
    recent_errors: list[str],
    max_files: int,
    max_chars: int,
    weights: BundleWeights | None = None,
) -> StrictSelection:
    """Select from the analysis read sets.

    Args:
        contents: Normalized path -> content for the snapshot, in input order.
        analysis: Required and expanded read sets (trusted as supplied).
        tokens: Prompt tokens for the lexical term.
        recent_errors: Preview error lines for the error-proximity term.
        max_files: File budget for expanded-only paths.
        max_chars: Character budget for expanded-only paths.
        weights: Bundle weights (bases and lexical/error constants).
    """
    w = weights or BundleWeights()
    required = {p for p in (normalize_path(x) for x in analysis.required_read_set) if p}

    # Required first, then expanded; dict keeps first-seen order.
    ordered = dict.fromkeys(
        path
        for path in map(normalize_path, [*analysis.required_read_set, *analysis.expanded_read_set])
        if path
    )

    candidates: list[Candidate] = []
    for path in ordered:
        content = contents.get(path)
        if content is None:
            logger.debug("Read-set path %s is not in the snapshot, skipping", path)
            continue
        is_required = path in required
        score = (
            (w.required_base if is_required else w.expanded_base)
            + lexical_score(path, content, tokens, w)
            + preview_error_score(path, recent_errors, w)
        )
        candidates.append(
            Candidate(
                path=path,
                score=score,
                content=content,
                reasons=[STRICT_REASON, REQUIRED_REASON if is_required else EXPANDED_REASON],
                required=is_required,
            )
        )

    picked = select_within_budget(candidates, max_files, max_chars)
    result = StrictSelection(selected=picked.selected, dropped=picked.dropped)

    if result.chars_used > max_chars or len(result.selected) > max_files:
        logger.warning(
            "Required read set exceeds budget: %d files / %d chars (budget %d files / %d chars)",
            len(result.selected), result.chars_used, max_files, max_chars,
        )

    considered = {c.path for c in candidates}
    result.outside = [path for path in contents if path not in considered]
    return result
