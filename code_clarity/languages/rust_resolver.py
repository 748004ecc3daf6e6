"""Rust module resolver using tree-sitter."""

from __future__ import annotations

import os

from code_clarity.languages import treesitter
from code_clarity.languages.base import BaseImportResolver, Maturity, has_ancestor_dir

_MODULE_ROOTS = {"mod.rs", "lib.rs", "main.rs"}


class RustResolver(BaseImportResolver):
    name = "Rust"
    extensions = (".rs",)
    maturity = Maturity.BASIC_TESTS

    def extract_imports(self, content: str, path: str) -> list[str]:
        root = treesitter.parse(content, "rust")
        specifiers: list[str] = []
        for node in treesitter.walk(root):
            # `mod foo;` declares a child module file; inline `mod foo { ... }` does not
            if node.type != "mod_item" or node.child_by_field_name("body") is not None:
                continue
            name = treesitter.node_text(node.child_by_field_name("name"))
            if name:
                specifiers.append(name)
        return specifiers

    def resolve(self, specifier: str, from_path: str, candidates: frozenset[str]) -> str | None:
        directory = os.path.dirname(from_path)
        name = os.path.basename(from_path)
        if name not in _MODULE_ROOTS:
            directory = os.path.join(directory, os.path.splitext(name)[0])
        return self._first_existing(
            [
                os.path.join(directory, specifier + ".rs"),
                os.path.join(directory, specifier, "mod.rs"),
            ],
            candidates,
        )

    def is_test_file(self, path: str) -> bool:
        if not path.endswith(".rs"):
            return False
        return path.endswith("_test.rs") or has_ancestor_dir(path, {"tests"})
