"""C# using-directive resolver using tree-sitter."""

from __future__ import annotations

import os

from code_clarity.languages import treesitter
from code_clarity.languages.base import BaseImportResolver, Maturity, files_in_dir_with_suffix, path_parts

_NAME_TYPES = ("qualified_name", "identifier", "alias_qualified_name")


class CSharpResolver(BaseImportResolver):
    """Maps namespaces to directories by the usual folder-per-namespace layout.

    ``using A.B.Widget;`` resolves to a file ending in ``A/B/Widget.cs``;
    ``using A.B;`` resolves to every ``.cs`` file directly inside a directory
    ending in ``A/B``. Leading namespace segments are dropped one at a time
    (the root namespace is often the project folder), down to two segments.
    """

    name = "C#"
    extensions = (".cs",)
    maturity = Maturity.UNTESTED

    def extract_imports(self, content: str, path: str) -> list[str]:
        root = treesitter.parse(content, "csharp")
        specifiers: list[str] = []
        for node in treesitter.walk(root):
            if node.type != "using_directive":
                continue
            # The imported name follows any alias, so take the last one
            names = [c for c in node.children if c.is_named and c.type in _NAME_TYPES]
            if not names:
                continue
            specifier = "".join(treesitter.node_text(names[-1]).split())
            if specifier.startswith("global::"):
                specifier = specifier[len("global::"):]
            specifiers.append(specifier)
        return specifiers

    def resolve(self, specifier: str, from_path: str, candidates: frozenset[str]) -> str | None:
        targets = self.resolve_all(specifier, from_path, candidates)
        return targets[0] if targets else None

    def resolve_all(self, specifier: str, from_path: str, candidates: frozenset[str]) -> list[str]:
        parts = [part for part in specifier.split(".") if part]
        shortest = min(2, len(parts))
        for start in range(len(parts) - shortest + 1):
            suffix = "/".join(parts[start:])
            type_file = self._suffix_match(suffix + ".cs", candidates)
            if type_file is not None:
                return [type_file] if type_file != from_path else []
            files = files_in_dir_with_suffix(suffix, candidates, (".cs",))
            if files:
                directory = os.path.dirname(files[0])
                return [p for p in files if os.path.dirname(p) == directory and p != from_path]
        return []

    def is_test_file(self, path: str) -> bool:
        stem, ext = os.path.splitext(os.path.basename(path))
        if ext != ".cs":
            return False
        if stem.endswith(("Test", "Tests")):
            return True
        return any(part in ("Test", "Tests") for part in path_parts(path)[:-1])
