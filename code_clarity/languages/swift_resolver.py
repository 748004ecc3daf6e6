"""Swift import resolver using tree-sitter."""

from __future__ import annotations

import os

from code_clarity.languages import treesitter
from code_clarity.languages.base import BaseImportResolver, Maturity, path_parts

# SwiftPM keeps each module in <root>/<Sources|Tests>/<Module>/
_MODULE_ROOTS = {"Sources", "Source", "Tests"}


def swift_module(path: str) -> str | None:
    """Module name of a file laid out the SwiftPM way, or None."""
    parts = path_parts(path)[:-1]
    for part, child in zip(parts, parts[1:]):
        if part in _MODULE_ROOTS:
            return child
    return None


class SwiftResolver(BaseImportResolver):
    name = "Swift"
    extensions = (".swift",)
    maturity = Maturity.UNTESTED

    def extract_imports(self, content: str, path: str) -> list[str]:
        root = treesitter.parse(content, "swift")
        specifiers: list[str] = []
        for node in treesitter.walk(root):
            if node.type != "import_declaration":
                continue
            name = treesitter.first_child(node, "identifier")
            if name is None:
                continue
            # `import struct Core.Point` still imports the module Core
            module = "".join(treesitter.node_text(name).split()).split(".")[0]
            if module:
                specifiers.append(module)
        return specifiers

    def resolve(self, specifier: str, from_path: str, candidates: frozenset[str]) -> str | None:
        targets = self.resolve_all(specifier, from_path, candidates)
        return targets[0] if targets else None

    def resolve_all(self, specifier: str, from_path: str, candidates: frozenset[str]) -> list[str]:
        names = [specifier]
        # A test target imports the module it tests
        for suffix in ("Tests", "Test"):
            if specifier.endswith(suffix) and len(specifier) > len(suffix):
                names.append(specifier[:-len(suffix)])
                break

        swift_files = sorted(p for p in candidates if p.endswith(".swift") and p != from_path)
        for name in names:
            members = [p for p in swift_files if swift_module(p) == name]
            if members:
                return members
        return []

    def is_test_file(self, path: str) -> bool:
        stem, ext = os.path.splitext(os.path.basename(path))
        if ext != ".swift":
            return False
        if stem.endswith(("Test", "Tests")):
            return True
        return "Tests" in path_parts(path)[:-1]
