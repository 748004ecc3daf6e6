"""Graphviz DOT renderer."""

from __future__ import annotations

import json
from urllib.parse import quote

from code_clarity.depgraph.file_graph import FileDependencyGraph
from code_clarity.formatter.base import BaseGraphFormatter, GraphLayout, RenderOptions
from code_clarity.models import FileEdge

GRAPHVIZ_ONLINE_URL = "https://dreampuf.github.io/GraphvizOnline/?engine=dot#"


def _quote(text: str) -> str:
    # DOT string escaping matches JSON for quotes, backslashes and newlines
    return json.dumps(text, ensure_ascii=False)


class DotFormatter(BaseGraphFormatter):
    name = "dot"

    def format(self, file_graph: FileDependencyGraph, options: RenderOptions | None = None) -> str:
        options = options or RenderOptions()
        layout = GraphLayout(file_graph)

        lines = [
            "digraph dependencies {",
            "  rankdir=LR;",
            "  node [shape=box];",
        ]
        if options.label:
            lines += [
                f"  label={_quote(options.label)};",
                "  labelloc=t;",
                "  labeljust=l;",
                "  fontsize=10;",
                "  fontname=Courier;",
            ]
        lines.append("")

        cycles = layout.cycle_descriptions()
        if cycles:
            lines.append("  // Cyclic paths:")
            lines += [f"  // {c}" for c in cycles]
            lines.append("")

        for path in layout.paths:
            attrs = [
                f"label={_quote(chr(10).join(layout.label_lines(path)))}",
                "style=filled",
                f"fillcolor={layout.fill_color(path)}",
            ]
            if file_graph.is_cycle_node(path):
                attrs.append("color=red")
            lines.append(f"  {_quote(layout.names[path])} [{', '.join(attrs)}];")

        edges = layout.sorted_edges()
        if layout.paths and edges:
            lines.append("")
        for source, dep in edges:
            edge = f"  {_quote(layout.names[source])} -> {_quote(layout.names[dep])}"
            metadata = file_graph.edges.get(FileEdge(source, dep))
            if metadata is not None and metadata.in_cycle:
                edge += " [color=red, style=dashed]"
            lines.append(edge + ";")

        lines.append("}")
        return "\n".join(lines)

    def visualization_url(self, output: str) -> str | None:
        return GRAPHVIZ_ONLINE_URL + quote(output, safe="")
