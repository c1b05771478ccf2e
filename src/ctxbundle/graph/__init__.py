"""File dependency graph: path normalization, reference extraction, distances."""

from ctxbundle.graph.builder import DependencyGraph, DependencyGraphBuilder, build_dependency_edges
from ctxbundle.graph.distance import bfs_distances, collect_seeds, find_error_seeds
from ctxbundle.graph.models import DependencyEdge, EdgeType, FileRecord
from ctxbundle.graph.paths import normalize_path
from ctxbundle.graph.references import (
    Reference,
    ReferenceExtractor,
    RegexReferenceExtractor,
    extract_references,
)

__all__ = [
    "DependencyEdge",
    "DependencyGraph",
    "DependencyGraphBuilder",
    "EdgeType",
    "FileRecord",
    "Reference",
    "ReferenceExtractor",
    "RegexReferenceExtractor",
    "bfs_distances",
    "build_dependency_edges",
    "collect_seeds",
    "extract_references",
    "find_error_seeds",
    "normalize_path",
]
