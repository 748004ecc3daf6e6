"""Dart import resolver using tree-sitter."""

from __future__ import annotations

import os

from code_clarity.languages import treesitter
from code_clarity.languages.base import BaseImportResolver, Maturity, has_ancestor_dir

# `part of` names the owning library, which is not a dependency
_SKIP = frozenset({"part_of_directive", "comment", "documentation_comment"})


class DartResolver(BaseImportResolver):
    name = "Dart"
    extensions = (".dart",)
    maturity = Maturity.STABLE

    def extract_imports(self, content: str, path: str) -> list[str]:
        root = treesitter.parse(content, "dart")
        specifiers: list[str] = []
        for node in treesitter.walk(root, skip=_SKIP):
            # import, export and part directives all carry their target in a uri node
            if node.type == "uri":
                literal = treesitter.first_child(node, "string_literal")
                if literal is not None:
                    specifiers.append(treesitter.unquote(literal))
        return specifiers

    def resolve(self, specifier: str, from_path: str, candidates: frozenset[str]) -> str | None:
        if specifier.startswith("dart:"):
            return None
        if specifier.startswith("package:"):
            # package:<name>/<path> lives under <package root>/lib/<path>
            _, _, rest = specifier[len("package:"):].partition("/")
            if not rest:
                return None
            return self._suffix_match("lib/" + rest, candidates)
        target = os.path.join(os.path.dirname(from_path), *specifier.split("/"))
        return self._first_existing([target], candidates)

    def is_test_file(self, path: str) -> bool:
        if not path.endswith(".dart"):
            return False
        return path.endswith("_test.dart") or has_ancestor_dir(path, {"test"})
