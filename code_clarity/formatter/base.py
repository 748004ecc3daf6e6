"""Abstract base renderer plus the node styling rules every format shares."""

from __future__ import annotations

import abc
import os
from collections import Counter
from dataclasses import dataclass

from code_clarity.depgraph.cycles import cycle_walk
from code_clarity.depgraph.file_graph import FileDependencyGraph
from code_clarity.depgraph.graph import adjacency_list
from code_clarity.depgraph.naming import build_node_names
from code_clarity.models import FileStats

EXTENSION_PALETTE = [
    "lightblue", "lightyellow", "mistyrose", "lightsalmon",
    "lightpink", "lavender", "peachpuff", "plum", "powderblue", "khaki",
    "palegoldenrod", "thistle",
]

TEST_FILL = "lightgreen"
DEFAULT_FILL = "white"
NEW_FILE_MARKER = "\U0001FAB4"  # potted plant


@dataclass(frozen=True)
class RenderOptions:
    label: str = ""


class BaseGraphFormatter(abc.ABC):
    """Base class for graph renderers."""

    name: str = ""

    @abc.abstractmethod
    def format(self, file_graph: FileDependencyGraph, options: RenderOptions | None = None) -> str:
        """Render the graph as text."""

    def visualization_url(self, output: str) -> str | None:
        """A shareable URL that opens the rendered output, if the format has one."""
        return None


def extension_colors(paths: list[str]) -> dict[str, str]:
    """Assign palette colors to extensions in sorted order."""
    extensions = sorted({os.path.splitext(p)[1] for p in paths} - {""})
    return {
        ext: EXTENSION_PALETTE[i % len(EXTENSION_PALETTE)]
        for i, ext in enumerate(extensions)
    }


def majority_extension(paths: list[str]) -> str:
    """Most common extension; ties go to the alphabetically first one."""
    counts = Counter(os.path.splitext(p)[1] for p in paths)
    if not counts:
        return ""
    return min(counts, key=lambda ext: (-counts[ext], ext))


def stats_line(stats: FileStats | None) -> str:
    if stats is None:
        return ""
    parts = []
    if stats.additions > 0:
        parts.append(f"+{stats.additions}")
    if stats.deletions > 0:
        parts.append(f"-{stats.deletions}")
    return " ".join(parts)


class GraphLayout:
    """Sorted nodes, display names and fill colors computed once per render."""

    def __init__(self, file_graph: FileDependencyGraph):
        self.file_graph = file_graph
        self.adjacency = adjacency_list(file_graph.graph)
        self.paths = sorted(self.adjacency)
        self.names = build_node_names(self.paths)
        self._colors = extension_colors(self.paths)
        self._majority = majority_extension(self.paths)
        self._multiple_extensions = len({os.path.splitext(p)[1] for p in self.paths}) > 1

    def sorted_edges(self) -> list[tuple[str, str]]:
        return [
            (source, dep)
            for source in self.paths
            for dep in sorted(self.adjacency[source])
        ]

    def fill_color(self, path: str) -> str:
        metadata = self.file_graph.files.get(path)
        if metadata is not None and metadata.is_test:
            return TEST_FILL
        ext = os.path.splitext(path)[1]
        if ext == self._majority or not self._multiple_extensions:
            return DEFAULT_FILL
        return self._colors.get(ext, DEFAULT_FILL)

    def label_lines(self, path: str) -> list[str]:
        """Display name (with the new-file marker) and an optional stats line."""
        metadata = self.file_graph.files.get(path)
        stats = metadata.stats if metadata is not None else None
        title = self.names[path]
        if stats is not None and stats.is_new:
            title = f"{NEW_FILE_MARKER} {title}"
        line = stats_line(stats)
        return [title, line] if line else [title]

    def is_new(self, path: str) -> bool:
        metadata = self.file_graph.files.get(path)
        return bool(metadata and metadata.stats and metadata.stats.is_new)

    def cycle_descriptions(self) -> list[str]:
        descriptions = []
        for i, cycle in enumerate(self.file_graph.cycles, 1):
            walk = cycle_walk(self.file_graph.graph, cycle)
            hops = [self.names.get(p, os.path.basename(p)) for p in walk]
            descriptions.append(f"C{i}: {' -> '.join(hops)}")
        return descriptions
