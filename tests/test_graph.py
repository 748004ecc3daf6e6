"""Tests for the DependencyGraph data model and query helpers."""

import pytest

from code_clarity.depgraph import DependencyGraph, adjacency_list, contains_node
from code_clarity.errors import ClosureViolationError
from code_clarity.models import FileEdge


def _graph(**deps):
    return DependencyGraph({f"/r/{k}": [f"/r/{d}" for d in v] for k, v in deps.items()})


class TestConstruction:
    def test_from_mapping_accepts_closed_graph(self):
        graph = DependencyGraph.from_mapping({"/r/a": ["/r/b"], "/r/b": []})
        assert graph.nodes() == ["/r/a", "/r/b"]

    def test_from_mapping_rejects_dangling_target(self):
        with pytest.raises(ClosureViolationError) as exc:
            DependencyGraph.from_mapping({"/r/a": ["/r/missing"]})
        assert exc.value.source == "/r/a"
        assert exc.value.target == "/r/missing"

    def test_duplicates_removed_order_kept(self):
        graph = DependencyGraph({"/r/a": ["/r/c", "/r/b", "/r/c"], "/r/b": [], "/r/c": []})
        assert graph["/r/a"] == ("/r/c", "/r/b")

    def test_self_reference_allowed(self):
        graph = DependencyGraph.from_mapping({"/r/a": ["/r/a"]})
        assert graph.dependencies("/r/a") == ("/r/a",)

    def test_input_mapping_is_copied(self):
        source = {"/r/a": ["/r/b"], "/r/b": []}
        graph = DependencyGraph(source)
        source["/r/a"].append("/r/c")
        assert graph["/r/a"] == ("/r/b",)


class TestEquality:
    def test_dependency_order_does_not_matter(self):
        first = DependencyGraph({"/r/a": ["/r/b", "/r/c"], "/r/b": [], "/r/c": []})
        second = DependencyGraph({"/r/a": ["/r/c", "/r/b"], "/r/c": [], "/r/b": []})
        assert first == second

    def test_different_key_sets_differ(self):
        assert _graph(a=[]) != _graph(a=[], b=[])

    def test_different_dependencies_differ(self):
        assert _graph(a=["b"], b=[]) != _graph(a=[], b=["a"])

    def test_not_hashable(self):
        with pytest.raises(TypeError):
            hash(_graph(a=[]))


class TestHelpers:
    def test_contains_node(self):
        graph = _graph(a=["b"], b=[])
        assert contains_node(graph, "/r/a")
        assert not contains_node(graph, "/r/z")

    def test_adjacency_list_is_sorted_fresh_copy(self):
        graph = _graph(b=[], a=["b"])
        adjacency = adjacency_list(graph)
        assert list(adjacency) == ["/r/a", "/r/b"]
        adjacency["/r/a"].append("/r/x")
        assert graph["/r/a"] == ("/r/b",)

    def test_edges_and_count(self):
        graph = _graph(a=["b", "c"], b=["c"], c=[])
        assert graph.edges() == [
            FileEdge("/r/a", "/r/b"),
            FileEdge("/r/a", "/r/c"),
            FileEdge("/r/b", "/r/c"),
        ]
        assert graph.edge_count() == 3

    def test_reverse_adjacency(self):
        graph = _graph(a=["c"], b=["c"], c=[])
        reverse = graph.reverse_adjacency()
        assert reverse["/r/c"] == ["/r/a", "/r/b"]
        assert reverse["/r/a"] == []

    def test_file_edge_structural_equality(self):
        assert FileEdge("/r/a", "/r/b") == FileEdge("/r/a", "/r/b")
        assert len({FileEdge("/r/a", "/r/b"), FileEdge("/r/a", "/r/b")}) == 1
