"""Tests for building dependency graphs from file contents."""

import os

import pytest

from code_clarity.depgraph import DependencyGraphBuilder, build_dependency_graph, normalize_path
from code_clarity.errors import ClosureViolationError
from code_clarity.languages import ResolverRegistry
from code_clarity.languages.base import BaseImportResolver
from code_clarity.vcs import InMemoryContentSource

ROOT = os.path.abspath(os.path.join(os.sep, "proj"))


def _p(*parts):
    return os.path.join(ROOT, *parts)


def _project():
    return {
        _p("app", "__init__.py"): "",
        _p("app", "main.py"): "from app import models\nfrom .views import render\nimport os\n",
        _p("app", "models.py"): "from . import db\n",
        _p("app", "db.py"): "import sqlite3\n",
        _p("app", "views.py"): "from .models import Model\nfrom .models import Other\n",
        _p("README.md"): "# readme\n",
    }


def test_builds_closed_graph():
    files = _project()
    result = build_dependency_graph(list(files), InMemoryContentSource(files))
    graph = result.graph

    assert set(graph) == set(files)
    assert graph[_p("app", "main.py")] == (
        _p("app", "__init__.py"),
        _p("app", "models.py"),
        _p("app", "views.py"),
    )
    assert graph[_p("app", "models.py")] == (_p("app", "__init__.py"), _p("app", "db.py"))
    assert graph[_p("app", "db.py")] == ()
    assert result.warnings == ()

    for deps in graph.values():
        for dep in deps:
            assert dep in graph


def test_resolutions_deduplicated_in_first_seen_order():
    files = _project()
    graph = build_dependency_graph(list(files), InMemoryContentSource(files)).graph
    assert graph[_p("app", "views.py")] == (_p("app", "models.py"),)


def test_package_import_links_every_file_of_the_package():
    files = {
        _p("cmd", "main.go"): 'package main\n\nimport "example.com/app/store"\n',
        _p("store", "db.go"): "package store\n",
        _p("store", "cache.go"): "package store\n",
    }
    graph = build_dependency_graph(list(files), InMemoryContentSource(files)).graph
    assert graph[_p("cmd", "main.go")] == (_p("store", "cache.go"), _p("store", "db.go"))
    assert graph[_p("store", "db.go")] == ()


def test_unsupported_extension_is_standalone_node():
    files = _project()
    graph = build_dependency_graph(list(files), InMemoryContentSource(files)).graph
    assert graph[_p("README.md")] == ()


def test_duplicate_and_unnormalized_inputs_collapse():
    files = {_p("a.py"): "import b\n", _p("b.py"): ""}
    paths = [_p("a.py"), _p("sub", "..", "a.py"), _p("b.py")]
    graph = build_dependency_graph(paths, InMemoryContentSource(files)).graph
    assert len(graph) == 2
    assert graph[_p("a.py")] == (_p("b.py"),)


def test_relative_inputs_are_made_absolute():
    assert os.path.isabs(normalize_path("some/file.py"))


def test_parse_error_degrades_to_standalone_node():
    files = {_p("bad.py"): "def broken(:\n", _p("ok.py"): "import bad\n"}
    result = build_dependency_graph(list(files), InMemoryContentSource(files))

    assert result.graph[_p("bad.py")] == ()
    assert result.graph[_p("ok.py")] == (_p("bad.py"),)
    assert [w.path for w in result.warnings] == [_p("bad.py")]
    assert "parse" in result.warnings[0].reason


def test_unreadable_file_degrades_to_standalone_node():
    files = {_p("ok.py"): "import gone\n"}
    paths = [_p("ok.py"), _p("gone.py")]
    result = build_dependency_graph(paths, InMemoryContentSource(files))

    assert result.graph[_p("gone.py")] == ()
    assert result.graph[_p("ok.py")] == (_p("gone.py"),)
    assert result.warnings[0].path == _p("gone.py")


def test_parallel_build_matches_sequential():
    files = _project()
    paths = list(files)
    sequential = build_dependency_graph(paths, InMemoryContentSource(files), workers=1)
    parallel = build_dependency_graph(paths, InMemoryContentSource(files), workers=4)
    assert sequential.graph == parallel.graph
    assert list(sequential.graph) == list(parallel.graph)
    assert [sequential.graph[k] for k in paths] == [parallel.graph[k] for k in paths]


def test_build_is_deterministic():
    files = _project()
    first = build_dependency_graph(list(files), InMemoryContentSource(files))
    second = build_dependency_graph(list(reversed(list(files))), InMemoryContentSource(files))
    assert first.graph == second.graph


class _RogueResolver(BaseImportResolver):
    name = "Rogue"
    extensions = (".rogue",)

    def extract_imports(self, content, path):
        return ["anything"]

    def resolve(self, specifier, from_path, candidates):
        return _p("outside.rogue")


def test_closure_violation_is_fatal():
    registry = ResolverRegistry()
    registry.register(_RogueResolver())
    files = {_p("a.rogue"): "x"}

    with pytest.raises(ClosureViolationError):
        DependencyGraphBuilder(registry=registry).build(list(files), InMemoryContentSource(files))
