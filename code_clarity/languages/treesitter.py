"""Tree-sitter parsing shared by the non-Python resolvers."""

from __future__ import annotations

import threading
from collections.abc import Iterator

try:
    from tree_sitter_language_pack import get_parser
except ImportError as _err:
    raise ImportError(
        "tree-sitter-language-pack is required. Install with: "
        "pip install tree-sitter-language-pack"
    ) from _err

# Parsers are not safe to share between builder worker threads
_local = threading.local()


def _get_parser(grammar_name: str):
    cache = getattr(_local, "parser_cache", None)
    if cache is None:
        cache = _local.parser_cache = {}
    if grammar_name not in cache:
        cache[grammar_name] = get_parser(grammar_name)
    return cache[grammar_name]


def parse(content: str, grammar_name: str):
    """Parse source text and return the root node."""
    parser = _get_parser(grammar_name)
    tree = parser.parse(content.encode("utf-8"))
    return tree.root_node


def walk(root, skip: frozenset[str] = frozenset()) -> Iterator:
    """Yield nodes in pre-order, which is source order.

    Subtrees rooted at a node type in ``skip`` are not entered.
    """
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type in skip:
            continue
        yield node
        stack.extend(reversed(node.children))


def node_text(node) -> str:
    if node is None or not node.text:
        return ""
    return node.text.decode("utf-8", errors="replace")


def first_child(node, *types: str):
    """First direct named child whose type is one of ``types``."""
    for child in node.children:
        if child.is_named and child.type in types:
            return child
    return None


def unquote(node) -> str:
    """Content of a string literal node without its delimiters."""
    text = node_text(node).strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'`":
        return text[1:-1]
    return text
