"""Tests for strongly connected component cycle analysis."""

from code_clarity.depgraph import DependencyGraph, analyze_cycles, cycle_walk
from code_clarity.models import FileEdge


def _graph(**deps):
    return DependencyGraph.from_mapping({f"/r/{k}": [f"/r/{d}" for d in v] for k, v in deps.items()})


def _p(name):
    return f"/r/{name}"


def test_three_node_cycle():
    graph = _graph(A=["B"], B=["C"], C=["A"], D=[])
    analysis = analyze_cycles(graph)

    assert len(analysis.cycles) == 1
    assert set(analysis.cycles[0]) == {_p("A"), _p("B"), _p("C")}
    for source, target in [("A", "B"), ("B", "C"), ("C", "A")]:
        assert analysis.edge_flags[FileEdge(_p(source), _p(target))] is True
    assert analysis.node_flags[_p("D")] is False
    assert all(analysis.node_flags[_p(n)] for n in "ABC")


def test_acyclic_graph():
    analysis = analyze_cycles(_graph(A=["B"], B=["C"], C=[]))
    assert analysis.cycles == ()
    assert not analysis.has_cycles
    assert not any(analysis.edge_flags.values())
    assert not any(analysis.node_flags.values())


def test_edge_into_cycle_is_not_flagged():
    analysis = analyze_cycles(_graph(A=["B"], B=["A"], D=["A"]))
    assert analysis.edge_flags[FileEdge(_p("D"), _p("A"))] is False
    assert analysis.edge_flags[FileEdge(_p("A"), _p("B"))] is True


def test_self_edge_is_one_node_cycle():
    analysis = analyze_cycles(_graph(A=["A", "B"], B=[]))
    assert [c.path for c in analysis.cycles] == [(_p("A"),)]
    assert analysis.edge_flags[FileEdge(_p("A"), _p("A"))] is True
    assert analysis.edge_flags[FileEdge(_p("A"), _p("B"))] is False
    assert analysis.node_flags[_p("A")] is True
    assert analysis.node_flags[_p("B")] is False


def test_cycle_starts_at_smallest_member_in_discovery_order():
    # DFS from a reaches c first (sorted successors), then b
    analysis = analyze_cycles(_graph(c=["b"], a=["c"], b=["a"]))
    assert analysis.cycles[0].path == (_p("a"), _p("c"), _p("b"))


def test_cycles_ordered_by_smallest_member():
    graph = _graph(x=["y"], y=["x"], b=["c"], c=["b"], m=["m"])
    starts = [c.path[0] for c in analyze_cycles(graph).cycles]
    assert starts == [_p("b"), _p("m"), _p("x")]


def test_deterministic_across_insertion_order():
    first = DependencyGraph({"/r/a": ["/r/b"], "/r/b": ["/r/c", "/r/a"], "/r/c": ["/r/a"]})
    second = DependencyGraph({"/r/c": ["/r/a"], "/r/b": ["/r/a", "/r/c"], "/r/a": ["/r/b"]})
    assert analyze_cycles(first).cycles == analyze_cycles(second).cycles


def test_every_edge_and_node_has_a_flag():
    graph = _graph(a=["b", "c"], b=["a"], c=[], d=[])
    analysis = analyze_cycles(graph)
    assert set(analysis.edge_flags) == set(graph.edges())
    assert set(analysis.node_flags) == set(graph)


def test_long_chain_does_not_hit_recursion_limit():
    size = 5000
    adjacency = {f"/r/n{i:05d}": [f"/r/n{i + 1:05d}"] for i in range(size)}
    adjacency[f"/r/n{size:05d}"] = ["/r/n00000"]
    analysis = analyze_cycles(DependencyGraph(adjacency))
    assert len(analysis.cycles) == 1
    assert len(analysis.cycles[0]) == size + 1


def _edges_of(walk):
    return list(zip(walk, walk[1:]))


def test_walk_follows_real_edges_through_branching_cycle():
    graph = _graph(a=["b", "c"], b=["a"], c=["a"])
    (cycle,) = analyze_cycles(graph).cycles

    walk = cycle_walk(graph, cycle)

    assert walk[0] == walk[-1] == _p("a")
    assert set(walk) == {_p("a"), _p("b"), _p("c")}
    for source, dep in _edges_of(walk):
        assert dep in graph[source]


def test_walk_of_simple_ring():
    graph = _graph(a=["b"], b=["c"], c=["a"])
    (cycle,) = analyze_cycles(graph).cycles
    assert cycle_walk(graph, cycle) == [_p("a"), _p("b"), _p("c"), _p("a")]


def test_walk_of_self_edge():
    graph = _graph(a=["a"])
    (cycle,) = analyze_cycles(graph).cycles
    assert cycle_walk(graph, cycle) == [_p("a"), _p("a")]
