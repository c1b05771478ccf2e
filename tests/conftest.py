"""Shared test fixtures for ctxbundle."""

from __future__ import annotations

from pathlib import Path

import pytest

from ctxbundle.context.engine import ContextBundler
from ctxbundle.graph.models import FileRecord

FIXED_MILLIS = 1_700_000_000_000


@pytest.fixture
def web_files() -> list[FileRecord]:
    """A small static web project with html/js/css cross references."""
    return [
        FileRecord(path="index.html", content='''<!doctype html>
<html>
  <head>
    <link rel="stylesheet" href="styles/main.css">
    <script type="module" src="./src/app.js"></script>
  </head>
  <body><a href="#top">Top</a><a href="https://example.com">ext</a></body>
</html>
'''),
        FileRecord(path="src/app.js", content='''import { renderNavbar } from "./components/navbar.js";
import { api } from "./api.js";

export function start() {
  renderNavbar(document.body);
  return api.load();
}
'''),
        FileRecord(path="src/components/navbar.js", content='''export function renderNavbar(root) {
  const nav = document.createElement("nav");
  nav.className = "navbar";
  root.appendChild(nav);
}
'''),
        FileRecord(path="src/api.js", content='''export const api = {
  load() { return fetch("/api/items").then((r) => r.json()); },
};
'''),
        FileRecord(path="styles/main.css", content=".navbar { display: flex; }\n"),
        FileRecord(path="README.md", content="# Demo\n\nA tiny demo site.\n"),
        FileRecord(path="package.json", content='{"name": "demo", "version": "1.0.0"}\n'),
    ]


@pytest.fixture
def abc_files() -> list[FileRecord]:
    """a.js references b.js; c.css is unrelated."""
    return [
        FileRecord(path="a.js", content='import b from "./b.js";\nb();\n'),
        FileRecord(path="b.js", content="export default function b() {}\n"),
        FileRecord(path="c.css", content="body { margin: 0; }\n"),
    ]


@pytest.fixture
def bundler() -> ContextBundler:
    """A bundler with a fixed clock so results are reproducible."""
    return ContextBundler(clock=lambda: FIXED_MILLIS)


@pytest.fixture
def tmp_workspace(tmp_path: Path) -> Path:
    """The web project written to disk, plus files the loader must skip."""
    (tmp_path / "index.html").write_text(
        '<link href="styles/main.css">\n<script src="src/app.js"></script>\n'
    )
    src = tmp_path / "src"
    src.mkdir()
    (src / "app.js").write_text('import { api } from "./api.js";\nexport const navbar = 1;\n')
    (src / "api.js").write_text("export const api = {};\n")
    styles = tmp_path / "styles"
    styles.mkdir()
    (styles / "main.css").write_text(".navbar { display: flex; }\n")

    modules = tmp_path / "node_modules" / "left-pad"
    modules.mkdir(parents=True)
    (modules / "index.js").write_text("module.exports = () => {};\n")
    (tmp_path / "bundle.min.js").write_text("!function(){}();\n")
    return tmp_path
