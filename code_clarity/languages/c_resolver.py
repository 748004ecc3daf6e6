"""C/C++ include resolver using tree-sitter."""

from __future__ import annotations

import os

from code_clarity.languages import treesitter
from code_clarity.languages.base import BaseImportResolver, Maturity, has_ancestor_dir


class CResolver(BaseImportResolver):
    name = "C/C++"
    extensions = (".c", ".h", ".cc", ".cpp", ".cxx", ".hpp", ".hh", ".hxx")
    maturity = Maturity.BASIC_TESTS

    def extract_imports(self, content: str, path: str) -> list[str]:
        grammar = "c" if path.lower().endswith(".c") else "cpp"
        root = treesitter.parse(content, grammar)
        specifiers: list[str] = []
        for node in treesitter.walk(root):
            if node.type != "preproc_include":
                continue
            # Only quoted includes can refer to project headers; <...> is a system_lib_string
            target = node.child_by_field_name("path")
            if target is not None and target.type == "string_literal":
                specifiers.append(treesitter.unquote(target))
        return specifiers

    def resolve(self, specifier: str, from_path: str, candidates: frozenset[str]) -> str | None:
        local = os.path.join(os.path.dirname(from_path), *specifier.split("/"))
        return self._first_existing([local], candidates) or self._suffix_match(specifier, candidates)

    def is_test_file(self, path: str) -> bool:
        stem, ext = os.path.splitext(os.path.basename(path))
        if ext not in self.extensions:
            return False
        if stem.startswith("test_") or stem.endswith(("_test", "_tests")):
            return True
        return has_ancestor_dir(path, {"test", "tests"})
