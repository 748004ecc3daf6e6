"""File dependency graph engine."""

from __future__ import annotations

from code_clarity.depgraph.builder import DependencyGraphBuilder, build_dependency_graph, normalize_path
from code_clarity.depgraph.cycles import CycleAnalysis, analyze_cycles, cycle_walk
from code_clarity.depgraph.file_graph import FileDependencyGraph, new_file_dependency_graph
from code_clarity.depgraph.graph import BuildResult, DependencyGraph, adjacency_list, contains_node
from code_clarity.depgraph.naming import build_node_names
from code_clarity.depgraph.queries import (
    filter_by_level,
    find_path_nodes,
    induced_subgraph,
    validate_between_query,
    validate_level_query,
)

__all__ = [
    "BuildResult",
    "CycleAnalysis",
    "DependencyGraph",
    "DependencyGraphBuilder",
    "FileDependencyGraph",
    "adjacency_list",
    "analyze_cycles",
    "build_dependency_graph",
    "build_node_names",
    "contains_node",
    "cycle_walk",
    "filter_by_level",
    "find_path_nodes",
    "induced_subgraph",
    "new_file_dependency_graph",
    "normalize_path",
    "validate_between_query",
    "validate_level_query",
]
