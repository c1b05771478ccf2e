"""Tests for paths, reference extraction, graph building and distances."""

from __future__ import annotations

import pytest

from ctxbundle.graph.builder import DependencyGraphBuilder, build_dependency_edges
from ctxbundle.graph.distance import bfs_distances, collect_seeds, find_error_seeds
from ctxbundle.graph.models import EdgeType, FileRecord
from ctxbundle.graph.paths import basename, get_extension, normalize_path, parent_dir
from ctxbundle.graph.references import Reference, RegexReferenceExtractor, extract_references


class TestNormalizePath:
    def test_strips_dot_slash_and_collapses(self):
        assert normalize_path("./src//App.tsx") == "src/App.tsx"

    def test_blank_and_none(self):
        assert normalize_path("") == ""
        assert normalize_path("   ") == ""
        assert normalize_path(None) == ""

    def test_backslashes_and_leading_slashes(self):
        assert normalize_path("\\src\\components\\Nav.tsx") == "src/components/Nav.tsx"
        assert normalize_path("///public/index.html") == "public/index.html"

    def test_trims_whitespace(self):
        assert normalize_path("  src/a.js \n") == "src/a.js"

    @pytest.mark.parametrize(
        "raw",
        [
            "./src//App.tsx",
            "././a.js",
            "/ ./a.js",
            " ./a",
            ".//x//y",
            "a\\\\b",
            "../up.js",
            "./",
            "/",
        ],
    )
    def test_idempotent(self, raw: str):
        once = normalize_path(raw)
        assert normalize_path(once) == once

    def test_helpers(self):
        assert basename("src/components/Nav.tsx") == "Nav.tsx"
        assert parent_dir("src/components/Nav.tsx") == "src/components"
        assert parent_dir("index.html") == ""
        assert get_extension("src/App.TSX") == "tsx"
        assert get_extension(".env") == "env"
        assert get_extension("Makefile") == ""


class TestReferenceExtractor:
    def test_extracts_from_import_href_src(self):
        content = (
            'import x from "./x.js";\n'
            "<link href='style.css'>\n"
            '<img src = "logo.png">\n'
        )
        assert extract_references(content) == ["./x.js", "style.css", "logo.png"]

    def test_skips_fragments_and_urls(self):
        content = '<a href="#top"></a><a href="https://example.com/a.js"></a><a href="about.html"></a>'
        assert extract_references(content) == ["about.html"]

    def test_colon_separator_and_case(self):
        refs = RegexReferenceExtractor().extract('{ SRC: "img/a.svg" }')
        assert refs == [Reference(keyword="src", value="img/a.svg")]

    def test_empty_content(self):
        assert extract_references("") == []


class TestDependencyGraphBuilder:
    def test_edges_resolve_and_type(self, web_files):
        edges = build_dependency_edges(web_files)
        pairs = {(e.source, e.target, e.type) for e in edges}

        assert ("index.html", "styles/main.css", EdgeType.ROUTE) in pairs
        assert ("index.html", "src/app.js", EdgeType.ASSET) in pairs
        assert ("src/app.js", "src/components/navbar.js", EdgeType.IMPORT) in pairs
        assert ("src/app.js", "src/api.js", EdgeType.IMPORT) in pairs
        assert all(e.weight == 1 for e in edges)

    def test_unresolved_references_dropped(self):
        files = [FileRecord(path="a.js", content='import x from "./missing.js";')]
        assert build_dependency_edges(files) == []

    def test_suffix_resolution(self):
        files = [
            FileRecord(path="main.js", content='import u from "utils.js";'),
            FileRecord(path="lib/utils.js", content=""),
        ]
        edges = build_dependency_edges(files)
        assert [(e.source, e.target) for e in edges] == [("main.js", "lib/utils.js")]

    def test_exact_match_preferred_over_suffix(self):
        files = [
            FileRecord(path="main.js", content='import u from "utils.js";'),
            FileRecord(path="lib/utils.js", content=""),
            FileRecord(path="utils.js", content=""),
        ]
        edges = build_dependency_edges(files)
        assert edges[0].target == "utils.js"

    def test_degree_counts_both_directions(self, abc_files):
        graph = DependencyGraphBuilder().build(abc_files)
        assert graph.degree("a.js") == 1
        assert graph.degree("b.js") == 1
        assert graph.degree("c.css") == 0
        assert graph.degree("unknown.js") == 0

    def test_repeated_reference_counts_twice(self):
        files = [
            FileRecord(path="a.js", content='import x from "./b.js";\nimport y from "./b.js";'),
            FileRecord(path="b.js", content=""),
        ]
        graph = DependencyGraphBuilder().build(files)
        assert len(graph.edges) == 2
        assert graph.degree("b.js") == 2
        assert list(graph.adjacency().neighbors("b.js")) == ["a.js"]

    def test_adjacency_is_symmetric(self, abc_files):
        adjacency = DependencyGraphBuilder().build(abc_files).adjacency()
        assert "b.js" in adjacency["a.js"]
        assert "a.js" in adjacency["b.js"]

    def test_blank_paths_skipped(self):
        files = [FileRecord(path="  ", content='import x from "./b.js";'), FileRecord(path="b.js")]
        graph = DependencyGraphBuilder().build(files)
        assert list(graph.graph.nodes()) == ["b.js"]
        assert graph.edges == []

    def test_custom_extractor(self):
        class AlwaysB:
            def extract(self, content: str) -> list[Reference]:
                return [Reference(keyword="require", value="b.py")]

        files = [FileRecord(path="a.py", content="anything"), FileRecord(path="b.py")]
        graph = DependencyGraphBuilder(AlwaysB()).build(files)
        assert [(e.source, e.target, e.type) for e in graph.edges] == [
            ("a.py", "b.py", EdgeType.IMPORT),
            ("b.py", "b.py", EdgeType.IMPORT),
        ]

    def test_stats(self, web_files):
        stats = DependencyGraphBuilder().build(web_files).get_stats()
        assert stats["files"] == len(web_files)
        assert stats["total_edges"] == 4
        assert stats["edge_types"]["import"] == 2


class TestDistances:
    def test_multi_source_bfs(self, web_files):
        adjacency = DependencyGraphBuilder().build(web_files).adjacency()
        distances = bfs_distances(adjacency, ["src/components/navbar.js"])

        assert distances["src/components/navbar.js"] == 0
        assert distances["src/app.js"] == 1
        assert distances["src/api.js"] == 2
        assert distances["index.html"] == 2
        assert distances["styles/main.css"] == 3
        assert "README.md" not in distances

    def test_shortest_from_any_seed(self, web_files):
        adjacency = DependencyGraphBuilder().build(web_files).adjacency()
        distances = bfs_distances(adjacency, ["src/components/navbar.js", "styles/main.css"])
        assert distances["index.html"] == 1
        assert distances["src/app.js"] == 1

    def test_no_seeds(self, abc_files):
        adjacency = DependencyGraphBuilder().build(abc_files).adjacency()
        assert bfs_distances(adjacency, []) == {}

    def test_seed_outside_graph(self, abc_files):
        adjacency = DependencyGraphBuilder().build(abc_files).adjacency()
        assert bfs_distances(adjacency, ["ghost.js"]) == {"ghost.js": 0}

    def test_error_seeds_match_basename(self):
        paths = ["src/app.js", "src/api.js", "styles/main.css"]
        errors = ["TypeError at app.js:12:5"]
        assert find_error_seeds(paths, errors) == ["src/app.js"]
        assert find_error_seeds(paths, ["TypeError at APP.JS"]) == []

    def test_collect_seeds(self):
        paths = ["src/app.js", "src/api.js"]
        seeds = collect_seeds(paths, "./src/app.js", ["failed to load api.js", "app.js broke"])
        assert seeds == ["src/app.js", "src/api.js"]
