"""Mermaid flowchart renderer."""

from __future__ import annotations

import base64
import json

from code_clarity.depgraph.file_graph import FileDependencyGraph
from code_clarity.formatter.base import (
    DEFAULT_FILL,
    TEST_FILL,
    BaseGraphFormatter,
    GraphLayout,
    RenderOptions,
)
from code_clarity.models import FileEdge

MERMAID_LIVE_URL = "https://mermaid.live/edit#base64:"


def _escape(text: str) -> str:
    return text.replace('"', "#quot;")


class MermaidFormatter(BaseGraphFormatter):
    name = "mermaid"

    def format(self, file_graph: FileDependencyGraph, options: RenderOptions | None = None) -> str:
        options = options or RenderOptions()
        layout = GraphLayout(file_graph)
        node_ids = {path: f"n{i}" for i, path in enumerate(layout.paths)}

        lines: list[str] = []
        if options.label:
            lines += ["---", f"title: {options.label}", "---"]
        lines.append("flowchart LR")

        for cycle in layout.cycle_descriptions():
            lines.append(f"    %% {cycle}")

        for path in layout.paths:
            label = "<br/>".join(_escape(part) for part in layout.label_lines(path))
            lines.append(f'    {node_ids[path]}["{label}"]')

        edges = layout.sorted_edges()
        if edges:
            lines.append("")
        cycle_links: list[str] = []
        for i, (source, dep) in enumerate(edges):
            metadata = file_graph.edges.get(FileEdge(source, dep))
            if metadata is not None and metadata.in_cycle:
                lines.append(f"    {node_ids[source]} -.-> {node_ids[dep]}")
                cycle_links.append(str(i))
            else:
                lines.append(f"    {node_ids[source]} --> {node_ids[dep]}")

        # Styles
        test_nodes: list[str] = []
        new_nodes: list[str] = []
        cycle_nodes: list[str] = []
        by_fill: dict[str, list[str]] = {}
        for path in layout.paths:
            node_id = node_ids[path]
            fill = layout.fill_color(path)
            if fill == TEST_FILL:
                test_nodes.append(node_id)
            elif layout.is_new(path):
                new_nodes.append(node_id)
            elif fill != DEFAULT_FILL:
                by_fill.setdefault(fill, []).append(node_id)
            if file_graph.is_cycle_node(path):
                cycle_nodes.append(node_id)

        lines.append("")
        lines.append("    classDef testFile fill:#90EE90,stroke:#228B22,color:#000000")
        lines.append("    classDef newFile fill:#87CEEB,stroke:#4682B4")
        lines.append("    classDef cycleNode stroke:#FF0000,stroke-width:2px")
        for fill in sorted(by_fill):
            lines.append(f"    classDef ext_{fill} fill:{fill}")

        if test_nodes:
            lines.append(f"    class {','.join(test_nodes)} testFile")
        if new_nodes:
            lines.append(f"    class {','.join(new_nodes)} newFile")
        for fill in sorted(by_fill):
            lines.append(f"    class {','.join(by_fill[fill])} ext_{fill}")
        if cycle_nodes:
            lines.append(f"    class {','.join(cycle_nodes)} cycleNode")
        if cycle_links:
            lines.append(f"    linkStyle {','.join(cycle_links)} stroke:#FF0000,stroke-width:2px")

        return "\n".join(lines)

    def visualization_url(self, output: str) -> str | None:
        payload = {
            "code": output,
            "mermaid": {"theme": "default"},
            "autoSync": True,
            "updateDiagram": True,
        }
        encoded = base64.urlsafe_b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")
        return MERMAID_LIVE_URL + encoded
