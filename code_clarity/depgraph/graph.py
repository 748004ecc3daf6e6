"""Immutable file dependency graph and its read-only query helpers."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from code_clarity.errors import ClosureViolationError
from code_clarity.models import BuildWarning, FileEdge


class DependencyGraph(Mapping):
    """Mapping of file path -> ordered tuple of the files it depends on.

    Every dependency target is also a key, so the graph is closed. Instances are
    never mutated; filtered views are new graphs. Equality compares the key
    set and the dependency *set* of each key, so two builds that resolved the
    same edges in a different order compare equal.
    """

    __slots__ = ("_adjacency",)

    def __init__(self, adjacency: Mapping[str, Iterable[str]] | None = None):
        self._adjacency: dict[str, tuple[str, ...]] = {
            node: _dedupe(deps) for node, deps in (adjacency or {}).items()
        }

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Iterable[str]]) -> DependencyGraph:
        """Build a graph, rejecting any dependency target that is not a key."""
        graph = cls(mapping)
        check_closure(graph._adjacency)
        return graph

    def __getitem__(self, node: str) -> tuple[str, ...]:
        return self._adjacency[node]

    def __iter__(self) -> Iterator[str]:
        return iter(self._adjacency)

    def __len__(self) -> int:
        return len(self._adjacency)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DependencyGraph):
            return NotImplemented
        if self._adjacency.keys() != other._adjacency.keys():
            return False
        return all(
            set(deps) == set(other._adjacency[node])
            for node, deps in self._adjacency.items()
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"DependencyGraph({len(self)} nodes, {self.edge_count()} edges)"

    def nodes(self) -> list[str]:
        """All nodes, sorted by path."""
        return sorted(self._adjacency)

    def dependencies(self, node: str) -> tuple[str, ...]:
        return self._adjacency.get(node, ())

    def edges(self) -> list[FileEdge]:
        """All edges, grouped by sorted source, in dependency order."""
        return [
            FileEdge(node, dep)
            for node in self.nodes()
            for dep in self._adjacency[node]
        ]

    def edge_count(self) -> int:
        return sum(len(deps) for deps in self._adjacency.values())

    def reverse_adjacency(self) -> dict[str, list[str]]:
        """Who depends on each node; sources are listed in sorted order."""
        reverse: dict[str, list[str]] = {node: [] for node in self._adjacency}
        for node in self.nodes():
            for dep in self._adjacency[node]:
                reverse[dep].append(node)
        return reverse


@dataclass(frozen=True)
class BuildResult:
    """A finished graph plus the files that degraded while building it."""
    graph: DependencyGraph
    warnings: tuple[BuildWarning, ...] = ()


def check_closure(adjacency: Mapping[str, Iterable[str]]) -> None:
    """Raise ClosureViolationError for the first dangling dependency."""
    for node in sorted(adjacency):
        for dep in adjacency[node]:
            if dep not in adjacency:
                raise ClosureViolationError(node, dep)


def contains_node(graph: DependencyGraph, path: str) -> bool:
    return path in graph


def adjacency_list(graph: DependencyGraph) -> dict[str, list[str]]:
    """Return a fresh, key-sorted copy of the graph's adjacency lists."""
    return {node: list(graph[node]) for node in graph.nodes()}


def _dedupe(paths: Iterable[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    result: list[str] = []
    for path in paths:
        if path not in seen:
            seen.add(path)
            result.append(path)
    return tuple(result)
