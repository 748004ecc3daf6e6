"""Structural queries: level-bounded neighborhoods and between-paths.

Both queries return a new graph induced on the selected nodes; the input
graph is never modified. Parameters are checked by the validate_* helpers
before a query runs.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from code_clarity.depgraph.graph import DependencyGraph
from code_clarity.errors import QueryValidationError


def induced_subgraph(graph: DependencyGraph, nodes: Iterable[str]) -> DependencyGraph:
    """Keep the given nodes and only the edges between two kept nodes."""
    keep = set(nodes)
    return DependencyGraph({
        node: [dep for dep in graph.dependencies(node) if dep in keep]
        for node in sorted(keep)
    })


def filter_by_level(graph: DependencyGraph, target: str, level: int) -> DependencyGraph:
    """Nodes within `level` undirected hops of target, with their edges."""
    reverse = graph.reverse_adjacency()

    visited = {target}
    frontier = [target]
    for _ in range(level):
        if not frontier:
            break
        next_frontier: list[str] = []
        for node in frontier:
            for neighbor in (*graph.dependencies(node), *reverse.get(node, ())):
                if neighbor not in visited:
                    visited.add(neighbor)
                    next_frontier.append(neighbor)
        frontier = next_frontier

    return induced_subgraph(graph, visited)


def _reachable(adjacency, source: str) -> set[str]:
    reached = {source}
    queue = deque([source])
    while queue:
        current = queue.popleft()
        for neighbor in adjacency.get(current, ()):
            if neighbor not in reached:
                reached.add(neighbor)
                queue.append(neighbor)
    return reached


def find_path_nodes(graph: DependencyGraph, targets: list[str]) -> DependencyGraph:
    """Nodes lying on some directed path between any two targets.

    For each ordered pair (A, B) a node counts only if it is reachable from A
    *and* can reach B. Targets are always kept, even when isolated.
    """
    unique_targets = list(dict.fromkeys(targets))
    reverse = graph.reverse_adjacency()

    forward_sets = {t: _reachable(graph, t) for t in unique_targets}
    backward_sets = {t: _reachable(reverse, t) for t in unique_targets}

    keep: set[str] = set(unique_targets)
    for a in unique_targets:
        for b in unique_targets:
            if a != b:
                keep |= forward_sets[a] & backward_sets[b]

    return induced_subgraph(graph, keep)


# ── Caller-side validation ────────────────────────────────────

def validate_level_query(graph: DependencyGraph, target: str, level: int) -> None:
    if level < 1:
        raise QueryValidationError(f"level must be at least 1, got {level}")
    if target not in graph:
        raise QueryValidationError(f"file not found in graph: {target}")


def validate_between_query(graph: DependencyGraph, targets: list[str]) -> None:
    missing = [t for t in targets if t not in graph]
    if missing:
        raise QueryValidationError(f"files not found in graph: {', '.join(missing)}")
    distinct = len(set(targets))
    if distinct < 2:
        raise QueryValidationError(f"at least 2 files are required, found {distinct}")
