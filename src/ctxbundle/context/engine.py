"""Context retrieval and bundling.

Pipeline (one direction only):
  1. Snapshot: normalize paths, drop blanks, first record wins per path
  2. Graph: extract references, resolve them to files, count degrees
  3. Distances: multi-source BFS from the active file and error-implicated files
  4. Direct score: graph-centric ranking (the lightweight retrieval trace)
  5. Bundle score: direct score (inside the graph window) + lexical
     + preview-error + recency
  6. Selection: file-count and character budget, with snippets
  7. Trace: every snapshot path lands in exactly one of selected / dropped

``strict_full`` requests that carry a workspace analysis skip 4-6 and
select from the analysis read sets instead (see ``ctxbundle.context.strict``).

The bundler holds configuration only; each call is independent and
deterministic for a fixed clock.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from ctxbundle.config import RetrievalConfig
from ctxbundle.context.manifest import build_manifest, hash_content
from ctxbundle.context.models import (
    BundleRequest,
    ContextBundle,
    ContextBundleActiveFile,
    ContextBundleFile,
    ContextMode,
    ContextRetrievalItem,
    ContextRetrievalTrace,
)
from ctxbundle.context.scoring import (
    FALLBACK_REASON,
    lexical_score,
    preview_error_score,
    recency_score,
    score_direct,
    tokenize,
)
from ctxbundle.context.selection import (
    BUDGET_REASON,
    Candidate,
    Selection,
    build_snippet,
    select_top,
    select_within_budget,
)
from ctxbundle.context.strict import OUTSIDE_REASON, select_strict_full
from ctxbundle.graph.builder import DependencyGraphBuilder
from ctxbundle.graph.distance import bfs_distances, collect_seeds
from ctxbundle.graph.models import FileRecord
from ctxbundle.graph.paths import normalize_path
from ctxbundle.graph.references import ReferenceExtractor

logger = logging.getLogger("ctxbundle.context")


def epoch_millis() -> int:
    return int(time.time() * 1000)


@dataclass
class _Snapshot:
    records: list[FileRecord]  # normalized, de-duplicated
    contents: dict[str, str]
    positions: dict[str, int]  # index in the caller's original list


def _snapshot(files: list[FileRecord]) -> _Snapshot:
    records: list[FileRecord] = []
    contents: dict[str, str] = {}
    positions: dict[str, int] = {}
    for index, record in enumerate(files):
        path = normalize_path(record.path)
        if not path or path in contents:
            continue
        records.append(FileRecord(path=path, content=record.content))
        contents[path] = record.content
        positions[path] = index
    return _Snapshot(records, contents, positions)


def _to_items(candidates: list[Candidate], reasons: list[str] | None = None) -> list[ContextRetrievalItem]:
    return [
        ContextRetrievalItem(
            path=c.path,
            score=round(c.score, 2),
            reasons=list(reasons if reasons is not None else c.reasons),
        )
        for c in candidates
    ]


class ContextBundler:
    """Selects and bundles workspace files for one generation request.

    Usage:
        bundler = ContextBundler()
        bundle = bundler.build(BundleRequest(files=files, prompt="fix the navbar"))
        text = bundle.render()

    ``clock`` returns epoch milliseconds for ``generated_at`` and defaults to
    the wall clock; inject a constant one (``clock=lambda: 0``) when output
    must be reproducible byte for byte.
    """

    def __init__(
        self,
        config: RetrievalConfig | None = None,
        extractor: ReferenceExtractor | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self.config = config or RetrievalConfig()
        self.builder = DependencyGraphBuilder(extractor)
        self.clock = clock or epoch_millis

    # -------------------------------------------------------------------
    # Lightweight retrieval trace (count-only, graph-centric)
    # -------------------------------------------------------------------

    def trace(
        self,
        files: list[FileRecord],
        active_file: str | None = None,
        recent_preview_errors: list[str] | None = None,
        mode: ContextMode | None = None,
        max_items: int | None = None,
    ) -> ContextRetrievalTrace:
        """Rank files by graph signals and keep the top ``max_items``."""
        mode = self._resolve_mode(mode)
        limit = max_items if max_items is not None else self.config.max_files_for(mode.value)
        limit = self._clamp_files(limit)
        snapshot = _snapshot([FileRecord.model_validate(f) for f in files])
        errors = [str(line or "") for line in (recent_preview_errors or [])]

        selection = self._direct_select(snapshot, active_file, errors, limit)
        return ContextRetrievalTrace(
            selected=_to_items(selection.selected),
            dropped=_to_items(selection.dropped),
            budget_used=len(selection.selected),
            budget_max=limit,
            chars_used=selection.chars_used,
            generated_at=self.clock(),
            strategy=mode,
        )

    def _direct_select(
        self,
        snapshot: _Snapshot,
        active_file: str | None,
        errors: list[str],
        limit: int,
    ) -> Selection:
        graph = self.builder.build(snapshot.records)
        seeds = collect_seeds(snapshot.contents, active_file, errors)
        distances = bfs_distances(graph.adjacency(), seeds)
        logger.debug(
            "Direct selection: %d files, %d edges, %d seeds, %d reachable",
            len(snapshot.contents), len(graph.edges), len(seeds), len(distances),
        )

        candidates: list[Candidate] = []
        for path, content in snapshot.contents.items():
            score, reasons = score_direct(
                path,
                active_file,
                errors,
                graph.degree(path),
                distances.get(path),
                self.config.direct_weights,
            )
            candidates.append(Candidate(path=path, score=score, content=content, reasons=reasons))
        return select_top(candidates, limit)

    # -------------------------------------------------------------------
    # Full bundle
    # -------------------------------------------------------------------

    def build(self, request: BundleRequest | None = None, **kwargs) -> ContextBundle:
        """Build a context bundle.

        Accepts a ``BundleRequest`` or its fields as keyword arguments.
        """
        if request is None:
            request = BundleRequest(**kwargs)

        mode = self._resolve_mode(request.mode)
        max_files = self._clamp_files(
            request.max_files if request.max_files is not None
            else self.config.max_files_for(mode.value)
        )
        max_chars = (
            request.max_chars if request.max_chars is not None
            else self.config.default_max_chars
        )
        if max_chars < 0:
            logger.warning("max_chars=%d is negative, using 0", max_chars)
            max_chars = 0

        snapshot = _snapshot(request.files)
        tokens = tokenize(request.prompt, self.config.max_prompt_tokens)
        errors = request.recent_preview_errors
        analysis = request.workspace_analysis
        active_path = normalize_path(request.active_file)

        if analysis is not None and analysis.manifest is not None:
            manifest = list(analysis.manifest)
        else:
            manifest = build_manifest(snapshot.records)

        if mode is ContextMode.STRICT_FULL and analysis is not None:
            strict = select_strict_full(
                snapshot.contents, analysis, tokens, errors,
                max_files, max_chars, self.config.bundle_weights,
            )
            selected, dropped = strict.selected, strict.dropped
            dropped_items = _to_items(dropped, [BUDGET_REASON]) + [
                ContextRetrievalItem(path=path, score=0, reasons=[OUTSIDE_REASON])
                for path in strict.outside
            ]
        else:
            selection = self._bundle_select(snapshot, request.active_file, errors, tokens, max_files, max_chars)
            selected, dropped = selection.selected, selection.dropped
            dropped_items = _to_items(dropped, [BUDGET_REASON])

        bundle_files = [
            ContextBundleFile(
                path=c.path,
                content=c.content,
                snippet=build_snippet(c.content, tokens, self.config.snippet),
                hash=hash_content(c.path, c.content),
                size=c.size,
                score=round(c.score, 2),
            )
            for c in selected
        ]
        chars_used = sum(c.size for c in selected)
        logger.debug(
            "Bundle (%s): selected %d, dropped %d, %d/%d chars",
            mode.value, len(selected), len(dropped_items), chars_used, max_chars,
        )

        active = None
        if active_path and active_path in snapshot.contents:
            active_content = snapshot.contents[active_path]
            active = ContextBundleActiveFile(
                path=active_path,
                content=active_content,
                hash=hash_content(active_path, active_content),
            )

        return ContextBundle(
            manifest=manifest,
            files=bundle_files,
            active_file=active,
            retrieval_trace=ContextRetrievalTrace(
                selected=_to_items(selected),
                dropped=dropped_items,
                budget_used=len(selected),
                budget_max=max_files,
                chars_used=chars_used,
                chars_max=max_chars,
                generated_at=self.clock(),
                strategy=mode,
            ),
        )

    def _bundle_select(
        self,
        snapshot: _Snapshot,
        active_file: str | None,
        errors: list[str],
        tokens: list[str],
        max_files: int,
        max_chars: int,
    ) -> Selection:
        weights = self.config.bundle_weights
        window = max(max_files * 2, weights.graph_window_min)
        direct = self._direct_select(snapshot, active_file, errors, window)
        graph_by_path = {c.path: c for c in direct.selected}

        candidates: list[Candidate] = []
        for path, content in snapshot.contents.items():
            graph_cand = graph_by_path.get(path)
            lexical = lexical_score(path, content, tokens, weights)
            preview = preview_error_score(path, errors, weights)
            recency = recency_score(snapshot.positions[path], weights)

            reasons: list[str] = []
            if graph_cand is not None:
                reasons.extend(r for r in graph_cand.reasons if r != FALLBACK_REASON)
            if lexical > 0:
                reasons.append("lexical-match")
            if preview > 0:
                reasons.append("preview-error")
            if recency > 0:
                reasons.append("recency")
            if not reasons:
                reasons.append(FALLBACK_REASON)

            score = (graph_cand.score if graph_cand else 0) + lexical + preview + recency
            candidates.append(Candidate(path=path, score=score, content=content, reasons=reasons))

        return select_within_budget(candidates, max_files, max_chars)

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------

    def _resolve_mode(self, mode: ContextMode | str | None) -> ContextMode:
        if mode is None:
            return ContextMode(self.config.default_mode)
        return ContextMode(mode)

    @staticmethod
    def _clamp_files(max_files: int) -> int:
        if max_files < 1:
            logger.warning("max_files=%d is below 1, using 1", max_files)
            return 1
        return max_files


def build_context_bundle(
    files: list[FileRecord] | list[dict],
    *,
    config: RetrievalConfig | None = None,
    clock: Callable[[], int] | None = None,
    **kwargs,
) -> ContextBundle:
    """One-shot convenience wrapper around ``ContextBundler.build``.

    Without ``clock`` the trace is stamped with the wall clock, so only
    ``retrieval_trace.generated_at`` differs between otherwise identical
    calls. Pass a fixed clock for byte-identical output.
    """
    return ContextBundler(config=config, clock=clock).build(BundleRequest(files=files, **kwargs))
