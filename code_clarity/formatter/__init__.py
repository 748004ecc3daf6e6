"""Renderer registry."""

from __future__ import annotations

from code_clarity.errors import UnknownFormatError
from code_clarity.formatter.base import BaseGraphFormatter, RenderOptions
from code_clarity.formatter.dot_formatter import DotFormatter
from code_clarity.formatter.json_formatter import JsonFormatter, graph_document
from code_clarity.formatter.mermaid_formatter import MermaidFormatter

_FORMATTERS: dict[str, BaseGraphFormatter] = {
    "dot": DotFormatter(),
    "mermaid": MermaidFormatter(),
    "json": JsonFormatter(),
}

SUPPORTED_FORMATS = list(_FORMATTERS)


def get_formatter(name: str) -> BaseGraphFormatter:
    formatter = _FORMATTERS.get(name.lower())
    if formatter is None:
        raise UnknownFormatError(
            f"unknown format: {name!r} (supported: {', '.join(SUPPORTED_FORMATS)})"
        )
    return formatter


__all__ = [
    "BaseGraphFormatter",
    "RenderOptions",
    "SUPPORTED_FORMATS",
    "get_formatter",
    "graph_document",
]
