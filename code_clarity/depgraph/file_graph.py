"""Per-file and per-edge metadata derived from a dependency graph."""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, field

from code_clarity.depgraph.cycles import analyze_cycles
from code_clarity.depgraph.graph import DependencyGraph
from code_clarity.languages import is_test_file
from code_clarity.models import Cycle, EdgeMetadata, FileEdge, FileMetadata, FileStats


@dataclass(frozen=True)
class FileDependencyGraph:
    """A dependency graph plus everything the renderers need to draw it."""
    graph: DependencyGraph
    cycles: tuple[Cycle, ...] = ()
    edges: dict[FileEdge, EdgeMetadata] = field(default_factory=dict)
    files: dict[str, FileMetadata] = field(default_factory=dict)
    node_in_cycle: dict[str, bool] = field(default_factory=dict)

    def is_cycle_node(self, path: str) -> bool:
        return self.node_in_cycle.get(path, False)


def new_file_dependency_graph(
    graph: DependencyGraph,
    stats: dict[str, FileStats] | None = None,
    test_classifier: Callable[[str], bool] | None = None,
) -> FileDependencyGraph:
    classify = test_classifier or is_test_file
    stats = stats or {}

    analysis = analyze_cycles(graph)

    edges = {
        edge: EdgeMetadata(in_cycle=flag)
        for edge, flag in analysis.edge_flags.items()
    }

    files: dict[str, FileMetadata] = {}
    for path in graph.nodes():
        file_stats = stats.get(path)
        files[path] = FileMetadata(
            is_test=classify(path),
            extension=os.path.splitext(path)[1].lower(),
            stats=FileStats(
                additions=file_stats.additions,
                deletions=file_stats.deletions,
                is_new=file_stats.is_new,
            ) if file_stats is not None else None,
        )

    return FileDependencyGraph(
        graph=graph,
        cycles=analysis.cycles,
        edges=edges,
        files=files,
        node_in_cycle=dict(analysis.node_flags),
    )
