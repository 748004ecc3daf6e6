"""JSON renderer: the machine-readable graph document also served by `watch`."""

from __future__ import annotations

import json
from typing import Any

from code_clarity.depgraph.file_graph import FileDependencyGraph
from code_clarity.formatter.base import BaseGraphFormatter, GraphLayout, RenderOptions
from code_clarity.models import FileEdge


def graph_document(file_graph: FileDependencyGraph, options: RenderOptions | None = None) -> dict[str, Any]:
    options = options or RenderOptions()
    layout = GraphLayout(file_graph)

    nodes = []
    for path in layout.paths:
        metadata = file_graph.files.get(path)
        node: dict[str, Any] = {
            "path": path,
            "name": layout.names[path],
            "isTest": bool(metadata and metadata.is_test),
            "inCycle": file_graph.is_cycle_node(path),
        }
        if metadata is not None and metadata.stats is not None:
            node["stats"] = {
                "additions": metadata.stats.additions,
                "deletions": metadata.stats.deletions,
                "isNew": metadata.stats.is_new,
            }
        nodes.append(node)

    edges = []
    for source, dep in layout.sorted_edges():
        metadata = file_graph.edges.get(FileEdge(source, dep))
        edges.append({
            "from": source,
            "to": dep,
            "inCycle": bool(metadata and metadata.in_cycle),
        })

    document: dict[str, Any] = {}
    if options.label:
        document["label"] = options.label
    document["nodes"] = nodes
    document["edges"] = edges
    document["cycles"] = [{"path": list(cycle.path)} for cycle in file_graph.cycles]
    return document


class JsonFormatter(BaseGraphFormatter):
    name = "json"

    def format(self, file_graph: FileDependencyGraph, options: RenderOptions | None = None) -> str:
        return json.dumps(graph_document(file_graph, options), indent=2, ensure_ascii=False)
