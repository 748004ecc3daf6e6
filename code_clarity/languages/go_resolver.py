"""Go import resolver using tree-sitter.

Go imports name packages, which are directories. An import resolves to
every Go file of the matching directory in the candidate set.
"""

from __future__ import annotations

import os

from code_clarity.languages import treesitter
from code_clarity.languages.base import BaseImportResolver, Maturity, files_in_dir_with_suffix


class GoResolver(BaseImportResolver):
    name = "Go"
    extensions = (".go",)
    maturity = Maturity.BASIC_TESTS

    def extract_imports(self, content: str, path: str) -> list[str]:
        root = treesitter.parse(content, "go")
        specifiers: list[str] = []
        for node in treesitter.walk(root):
            if node.type == "import_spec":
                target = node.child_by_field_name("path")
                if target is not None:
                    specifiers.append(treesitter.unquote(target))
        return specifiers

    def resolve(self, specifier: str, from_path: str, candidates: frozenset[str]) -> str | None:
        targets = self.resolve_all(specifier, from_path, candidates)
        return targets[0] if targets else None

    def resolve_all(self, specifier: str, from_path: str, candidates: frozenset[str]) -> list[str]:
        if specifier.startswith(("./", "../")):
            directory = os.path.normpath(os.path.join(os.path.dirname(from_path), specifier))
            files = sorted(p for p in candidates if p.endswith(".go") and os.path.dirname(p) == directory)
        else:
            files = self._package_files(specifier, candidates)
        source_dir = os.path.dirname(from_path)
        return [
            path for path in files
            if path != from_path
            # Test files only belong to their own package's build
            and (not path.endswith("_test.go") or os.path.dirname(path) == source_dir)
        ]

    @staticmethod
    def _package_files(specifier: str, candidates: frozenset[str]) -> list[str]:
        parts = [part for part in specifier.split("/") if part]
        # Standard library paths have no dot in their first element
        if not parts or "." not in parts[0]:
            return []

        # The module path prefix is unknown, so try the longest directory suffix first
        for start in range(len(parts)):
            files = files_in_dir_with_suffix("/".join(parts[start:]), candidates, (".go",))
            if files:
                directory = os.path.dirname(files[0])
                return [path for path in files if os.path.dirname(path) == directory]
        return []

    def is_test_file(self, path: str) -> bool:
        return path.endswith("_test.go")
