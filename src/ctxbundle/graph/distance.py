"""Multi-source hop distances over the undirected dependency graph."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable

import networkx as nx

from ctxbundle.graph.paths import basename, normalize_path


def bfs_distances(adjacency: nx.Graph, seeds: Iterable[str]) -> dict[str, int]:
    """Unweighted BFS from every seed at once.

    All seeds start at distance 0. A node keeps the first distance assigned
    to it, which is its shortest hop count to any seed. Unreachable nodes
    are absent from the result.
    """
    distances: dict[str, int] = {}
    queue: deque[str] = deque()
    for seed in seeds:
        if seed in distances:
            continue
        distances[seed] = 0
        queue.append(seed)

    while queue:
        current = queue.popleft()
        if not adjacency.has_node(current):
            continue
        next_distance = distances[current] + 1
        for neighbor in adjacency.neighbors(current):
            if neighbor in distances:
                continue
            distances[neighbor] = next_distance
            queue.append(neighbor)

    return distances


def find_error_seeds(paths: Iterable[str], recent_errors: list[str]) -> list[str]:
    """Paths whose basename appears verbatim in any error line."""
    seeds: list[str] = []
    if not recent_errors:
        return seeds
    for path in paths:
        base = basename(path)
        if base and any(base in line for line in recent_errors):
            seeds.append(path)
    return seeds


def collect_seeds(
    paths: Iterable[str], active_file: str | None, recent_errors: list[str]
) -> list[str]:
    """Active file first, then error-implicated files, without duplicates."""
    seeds: list[str] = []
    active = normalize_path(active_file)
    if active:
        seeds.append(active)
    for path in find_error_seeds(paths, recent_errors):
        if path not in seeds:
            seeds.append(path)
    return seeds
