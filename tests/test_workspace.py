"""Tests for loading a workspace snapshot from disk."""

from __future__ import annotations

from pathlib import Path

import pytest

from ctxbundle.config import WorkspaceConfig
from ctxbundle.exceptions import WorkspaceError
from ctxbundle.workspace import collect_files, load_workspace


class TestLoadWorkspace:
    def test_loads_relative_posix_paths(self, tmp_workspace: Path):
        records = load_workspace(tmp_workspace)
        assert [r.path for r in records] == [
            "index.html",
            "src/api.js",
            "src/app.js",
            "styles/main.css",
        ]
        assert records[0].content.startswith("<link")

    def test_excludes_patterns(self, tmp_workspace: Path):
        paths = [p.relative_to(tmp_workspace).as_posix() for p in collect_files(tmp_workspace)]
        assert not any(p.startswith("node_modules") for p in paths)
        assert "bundle.min.js" not in paths

    def test_custom_excludes(self, tmp_workspace: Path):
        config = WorkspaceConfig(exclude_patterns=["styles", "*.html"])
        paths = [r.path for r in load_workspace(tmp_workspace, config)]
        assert "styles/main.css" not in paths
        assert "index.html" not in paths
        assert "node_modules/left-pad/index.js" in paths

    def test_size_limit(self, tmp_workspace: Path):
        (tmp_workspace / "huge.txt").write_text("x" * 3000)
        config = WorkspaceConfig(max_file_size_kb=1)
        paths = [r.path for r in load_workspace(tmp_workspace, config)]
        assert "huge.txt" not in paths
        assert "src/app.js" in paths

    def test_invalid_bytes_replaced(self, tmp_path: Path):
        (tmp_path / "bin.txt").write_bytes(b"ok \xff\xfe done")
        records = load_workspace(tmp_path)
        assert records[0].content.startswith("ok ")
        assert "�" in records[0].content

    def test_missing_root(self, tmp_path: Path):
        with pytest.raises(WorkspaceError):
            load_workspace(tmp_path / "nope")
