"""Java and Kotlin import resolvers using tree-sitter."""

from __future__ import annotations

import os

from code_clarity.languages import treesitter
from code_clarity.languages.base import BaseImportResolver, Maturity, path_parts


class JavaResolver(BaseImportResolver):
    name = "Java"
    extensions = (".java",)
    maturity = Maturity.BASIC_TESTS

    grammar_name = "java"
    import_node_types: frozenset[str] = frozenset({"import_declaration"})
    name_node_types: tuple[str, ...] = ("scoped_identifier", "identifier")
    # Extensions a fully qualified class name may live in
    source_extensions: tuple[str, ...] = (".java",)

    def extract_imports(self, content: str, path: str) -> list[str]:
        root = treesitter.parse(content, self.grammar_name)
        specifiers: list[str] = []
        for node in treesitter.walk(root):
            if node.type not in self.import_node_types or not node.is_named:
                continue
            name = treesitter.first_child(node, *self.name_node_types)
            if name is None:
                continue
            specifier = "".join(treesitter.node_text(name).split()).replace("`", "")
            if self._is_wildcard(node):
                specifier += ".*"
            specifiers.append(specifier)
        return specifiers

    @staticmethod
    def _is_wildcard(node) -> bool:
        return any(child.type in ("asterisk", "wildcard_import", "*") for child in node.children)

    def resolve(self, specifier: str, from_path: str, candidates: frozenset[str]) -> str | None:
        parts = specifier.split(".")
        if parts[-1] == "*":
            parts = parts[:-1]

        # Static and nested imports name members; walk back to the class file
        while len(parts) >= 2:
            class_path = "/".join(parts)
            for ext in self.source_extensions:
                match = self._suffix_match(class_path + ext, candidates)
                if match:
                    return match
            parts = parts[:-1]
        return None

    def is_test_file(self, path: str) -> bool:
        stem, ext = os.path.splitext(os.path.basename(path))
        if ext not in self.extensions:
            return False
        if stem.endswith(("Test", "Tests")) or stem.startswith("Test"):
            return True
        parts = path_parts(path)
        return any(a == "src" and b == "test" for a, b in zip(parts, parts[1:]))


class KotlinResolver(JavaResolver):
    name = "Kotlin"
    extensions = (".kt", ".kts")
    maturity = Maturity.BASIC_TESTS

    grammar_name = "kotlin"
    import_node_types = frozenset({"import_header", "import"})
    name_node_types = ("identifier", "qualified_identifier")
    source_extensions = (".kt", ".java")
