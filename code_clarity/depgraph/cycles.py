"""Cycle analysis: strongly connected components via iterative Tarjan."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

from code_clarity.depgraph.graph import DependencyGraph
from code_clarity.models import Cycle, FileEdge


@dataclass(frozen=True)
class CycleAnalysis:
    cycles: tuple[Cycle, ...] = ()
    edge_flags: dict[FileEdge, bool] = field(default_factory=dict)
    node_flags: dict[str, bool] = field(default_factory=dict)

    @property
    def has_cycles(self) -> bool:
        return bool(self.cycles)


def strongly_connected_components(graph: DependencyGraph) -> tuple[list[list[str]], dict[str, int]]:
    """Return (components, discovery index) for every node.

    Roots and successors are visited in sorted order, so component contents
    and discovery indices are identical for identical graphs. The DFS keeps
    an explicit work stack; deep import chains never hit the recursion limit.
    """
    index: dict[str, int] = {}
    lowlink: dict[str, int] = {}
    on_stack: set[str] = set()
    stack: list[str] = []
    components: list[list[str]] = []

    def visit(node: str) -> None:
        index[node] = lowlink[node] = len(index)
        stack.append(node)
        on_stack.add(node)

    for root in graph.nodes():
        if root in index:
            continue
        visit(root)
        work = [(root, iter(sorted(set(graph[root]))))]

        while work:
            node, successors = work[-1]
            descended = False
            for succ in successors:
                if succ not in index:
                    visit(succ)
                    work.append((succ, iter(sorted(set(graph[succ])))))
                    descended = True
                    break
                if succ in on_stack:
                    lowlink[node] = min(lowlink[node], index[succ])
            if descended:
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                lowlink[parent] = min(lowlink[parent], lowlink[node])

            if lowlink[node] == index[node]:
                component: list[str] = []
                while True:
                    member = stack.pop()
                    on_stack.discard(member)
                    component.append(member)
                    if member == node:
                        break
                components.append(component)

    return components, index


def analyze_cycles(graph: DependencyGraph) -> CycleAnalysis:
    """Find every cycle and flag the edges and nodes that belong to one."""
    components, discovery = strongly_connected_components(graph)

    component_of: dict[str, int] = {}
    for i, component in enumerate(components):
        for member in component:
            component_of[member] = i

    cycles: list[Cycle] = []
    node_flags: dict[str, bool] = {node: False for node in graph}
    for component in components:
        if len(component) == 1:
            node = component[0]
            if node not in graph[node]:
                continue
        ordered = sorted(component, key=discovery.__getitem__)
        start = ordered.index(min(ordered))
        cycles.append(Cycle(tuple(ordered[start:] + ordered[:start])))
        for member in component:
            node_flags[member] = True

    cycles.sort(key=lambda c: c.path[0])

    edge_flags: dict[FileEdge, bool] = {}
    for edge in graph.edges():
        same = component_of[edge.from_path] == component_of[edge.to_path]
        multi = len(components[component_of[edge.from_path]]) > 1
        edge_flags[edge] = edge.from_path == edge.to_path or (same and multi)

    return CycleAnalysis(cycles=tuple(cycles), edge_flags=edge_flags, node_flags=node_flags)


def _shortest_hop_path(graph: DependencyGraph, source: str, target: str, members: set[str]) -> list[str]:
    """Shortest path of at least one edge from source to target inside members."""
    parents: dict[str, str] = {}
    queue = deque()
    for dep in sorted(graph[source]):
        if dep in members and dep not in parents:
            parents[dep] = source
            queue.append(dep)
    while queue:
        node = queue.popleft()
        if node == target:
            break
        for dep in sorted(graph[node]):
            if dep in members and dep not in parents:
                parents[dep] = node
                queue.append(dep)

    path = [target]
    while path[-1] != source or len(path) == 1:
        path.append(parents[path[-1]])
    path.reverse()
    return path


def cycle_walk(graph: DependencyGraph, cycle: Cycle) -> list[str]:
    """A closed walk over real edges that visits every member of a cycle.

    Starts and ends at the cycle's first node. A component that is not a
    single ring revisits nodes, e.g. ``a -> b -> a -> c -> a``.
    """
    members = set(cycle.path)
    start = cycle.path[0]
    walk = [start]
    visited = {start}
    for member in cycle.path[1:]:
        if member in visited:
            continue
        hops = _shortest_hop_path(graph, walk[-1], member, members)
        walk.extend(hops[1:])
        visited.update(hops)
    walk.extend(_shortest_hop_path(graph, walk[-1], start, members)[1:])
    return walk
