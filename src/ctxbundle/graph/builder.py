"""Build a file dependency graph from extracted references."""

from __future__ import annotations

import logging
from collections.abc import Iterable

import networkx as nx

from ctxbundle.graph.models import DependencyEdge, EdgeType, FileRecord
from ctxbundle.graph.paths import normalize_path
from ctxbundle.graph.references import ReferenceExtractor, RegexReferenceExtractor

logger = logging.getLogger("ctxbundle.graph")

_KEYWORD_EDGE_TYPES: dict[str, EdgeType] = {
    "href": EdgeType.ROUTE,
    "src": EdgeType.ASSET,
}


class DependencyGraph:
    """Edges between workspace files plus the derived degree and adjacency.

    Nodes are normalized file paths. The underlying ``MultiDiGraph`` keeps
    one edge per extracted reference, so a file that references the same
    target twice contributes two to both endpoints' degree.
    """

    def __init__(self, graph: nx.MultiDiGraph, edges: list[DependencyEdge]) -> None:
        self.graph = graph
        self.edges = edges
        self._undirected: nx.Graph | None = None

    def degree(self, path: str) -> int:
        """Total edge count (in + out) for a path, 0 when unknown."""
        if not self.graph.has_node(path):
            return 0
        return int(self.graph.degree(path))

    def degrees(self) -> dict[str, int]:
        return {node: int(deg) for node, deg in self.graph.degree()}

    def adjacency(self) -> nx.Graph:
        """Undirected view used for distance computation."""
        if self._undirected is None:
            undirected = nx.Graph()
            undirected.add_nodes_from(self.graph.nodes())
            undirected.add_edges_from((e.source, e.target) for e in self.edges)
            self._undirected = undirected
        return self._undirected

    def get_stats(self) -> dict:
        edge_types: dict[str, int] = {}
        for edge in self.edges:
            edge_types[edge.type.value] = edge_types.get(edge.type.value, 0) + 1
        return {
            "files": self.graph.number_of_nodes(),
            "total_edges": len(self.edges),
            "connected_files": sum(1 for _, deg in self.graph.degree() if deg > 0),
            "edge_types": edge_types,
        }


class DependencyGraphBuilder:
    """Turns reference literals into resolved file-to-file edges."""

    def __init__(self, extractor: ReferenceExtractor | None = None) -> None:
        self.extractor = extractor or RegexReferenceExtractor()

    def build(self, files: Iterable[FileRecord]) -> DependencyGraph:
        records = list(files)
        known_order: list[str] = []
        known: set[str] = set()
        for record in records:
            path = normalize_path(record.path)
            if path and path not in known:
                known.add(path)
                known_order.append(path)

        graph = nx.MultiDiGraph()
        graph.add_nodes_from(known_order)
        edges: list[DependencyEdge] = []
        unresolved = 0

        for record in records:
            source = normalize_path(record.path)
            if not source:
                continue
            for ref in self.extractor.extract(record.content):
                target = self._resolve(normalize_path(ref.value), known, known_order)
                if target is None:
                    unresolved += 1
                    continue
                edge = DependencyEdge(
                    source=source,
                    target=target,
                    type=_KEYWORD_EDGE_TYPES.get(ref.keyword.lower(), EdgeType.IMPORT),
                    weight=1,
                )
                edges.append(edge)
                graph.add_edge(source, target, type=edge.type.value, weight=edge.weight)

        logger.debug(
            "Built dependency graph: %d files, %d edges, %d unresolved references",
            len(known_order), len(edges), unresolved,
        )
        return DependencyGraph(graph, edges)

    @staticmethod
    def _resolve(ref: str, known: set[str], known_order: list[str]) -> str | None:
        if not ref:
            return None
        if ref in known:
            return ref
        suffix = f"/{ref}"
        for path in known_order:
            if path.endswith(suffix):
                return path
        return None


def build_dependency_edges(
    files: Iterable[FileRecord], extractor: ReferenceExtractor | None = None
) -> list[DependencyEdge]:
    """Convenience wrapper returning only the edge list."""
    return DependencyGraphBuilder(extractor).build(files).edges
