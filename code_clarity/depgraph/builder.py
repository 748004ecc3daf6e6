"""Dependency graph builder. Reads files and resolves imports into a closed graph."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from code_clarity.depgraph.graph import BuildResult, DependencyGraph, check_closure
from code_clarity.errors import ContentReadError, ImportParseError
from code_clarity.languages import ResolverRegistry, default_registry
from code_clarity.models import BuildWarning
from code_clarity.vcs.content import ContentSource

logger = logging.getLogger(__name__)


def normalize_path(path: str | os.PathLike) -> str:
    return os.path.normpath(os.path.abspath(os.fspath(path)))


@dataclass
class _FileOutcome:
    dependencies: list[str] = field(default_factory=list)
    warning: BuildWarning | None = None


class DependencyGraphBuilder:
    """Build a closed file dependency graph from a list of paths.

    Files whose extension has no resolver, or whose content cannot be read or
    parsed, become standalone nodes. The second case is reported as a
    BuildWarning on the result instead of failing the build.
    """

    def __init__(self, registry: ResolverRegistry | None = None, workers: int = 1):
        self.registry = registry or default_registry()
        self.workers = max(1, workers)

    def build(self, file_paths: list[str], content_source: ContentSource) -> BuildResult:
        # Step 1: Normalize and dedupe, keeping first-seen order
        paths: list[str] = []
        seen: set[str] = set()
        for raw in file_paths:
            path = normalize_path(raw)
            if path not in seen:
                seen.add(path)
                paths.append(path)
        candidates = frozenset(paths)

        # Step 2: Resolve each file's imports
        def process(path: str) -> _FileOutcome:
            return self._resolve_file(path, candidates, content_source)

        if self.workers > 1 and len(paths) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                outcomes = list(pool.map(process, paths))
        else:
            outcomes = [process(path) for path in paths]

        # Step 3: Assemble in input order so parallelism never changes the graph
        adjacency: dict[str, list[str]] = {}
        warnings: list[BuildWarning] = []
        for path, outcome in zip(paths, outcomes):
            adjacency[path] = outcome.dependencies
            if outcome.warning is not None:
                warnings.append(outcome.warning)

        unsupported = sorted({
            os.path.splitext(p)[1] or "<no extension>"
            for p in paths if not self.registry.for_path(p)
        })
        if unsupported:
            logger.debug(
                "dependency extraction unsupported for extensions %s; "
                "those files are standalone nodes",
                ", ".join(unsupported),
            )

        # Step 4: Closure check. A violation means a resolver is broken
        check_closure(adjacency)

        graph = DependencyGraph(adjacency)
        logger.info(
            "built dependency graph: %d nodes, %d edges, %d warnings",
            len(graph), graph.edge_count(), len(warnings),
        )
        return BuildResult(graph=graph, warnings=tuple(warnings))

    def _resolve_file(
        self,
        path: str,
        candidates: frozenset[str],
        content_source: ContentSource,
    ) -> _FileOutcome:
        resolver = self.registry.for_path(path)
        if resolver is None:
            return _FileOutcome()

        try:
            content = content_source.read(path).decode("utf-8", errors="replace")
            specifiers = resolver.extract_imports(content, path)
        except (ContentReadError, ImportParseError) as e:
            logger.warning("%s; treating it as a standalone node", e)
            return _FileOutcome(warning=BuildWarning(path=path, reason=str(e)))

        dependencies: list[str] = []
        resolved: set[str] = set()
        for specifier in specifiers:
            for target in resolver.resolve_all(specifier, path, candidates):
                if target not in resolved:
                    resolved.add(target)
                    dependencies.append(target)
        return _FileOutcome(dependencies=dependencies)


def build_dependency_graph(
    file_paths: list[str],
    content_source: ContentSource,
    registry: ResolverRegistry | None = None,
    workers: int = 1,
) -> BuildResult:
    """Build a dependency graph with the default (or given) resolver registry."""
    return DependencyGraphBuilder(registry=registry, workers=workers).build(file_paths, content_source)
