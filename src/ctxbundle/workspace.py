"""Materialize a workspace snapshot from a directory on disk."""

from __future__ import annotations

import fnmatch
import os
from pathlib import Path

from ctxbundle.config import WorkspaceConfig
from ctxbundle.exceptions import WorkspaceError
from ctxbundle.graph.models import FileRecord


def _is_excluded(name: str, rel_path: str, patterns: list[str]) -> bool:
    return any(
        fnmatch.fnmatch(name, pattern) or fnmatch.fnmatch(rel_path, pattern)
        for pattern in patterns
    )


def collect_files(root: str | Path, config: WorkspaceConfig | None = None) -> list[Path]:
    """All non-excluded files under root, sorted by relative path."""
    root = Path(root).resolve()
    if not root.is_dir():
        raise WorkspaceError(f"Workspace root is not a directory: {root}")
    config = config or WorkspaceConfig()
    max_bytes = config.max_file_size_kb * 1024

    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = Path(dirpath).relative_to(root)
        dirnames[:] = sorted(
            d for d in dirnames
            if not _is_excluded(d, (rel_dir / d).as_posix(), config.exclude_patterns)
        )
        for filename in sorted(filenames):
            rel = (rel_dir / filename).as_posix()
            if _is_excluded(filename, rel, config.exclude_patterns):
                continue
            full = Path(dirpath) / filename
            try:
                if full.stat().st_size > max_bytes:
                    continue
            except OSError:
                continue
            files.append(full)

    files.sort(key=lambda p: p.relative_to(root).as_posix())
    return files


def load_workspace(root: str | Path, config: WorkspaceConfig | None = None) -> list[FileRecord]:
    """Read every collected file as UTF-8 text (invalid bytes replaced)."""
    root = Path(root).resolve()
    records: list[FileRecord] = []
    for full in collect_files(root, config):
        try:
            content = full.read_text(encoding="utf-8", errors="replace")
        except OSError:
            continue
        records.append(FileRecord(path=full.relative_to(root).as_posix(), content=content))
    return records
