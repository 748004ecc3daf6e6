"""Ruby require resolver using tree-sitter."""

from __future__ import annotations

import os

from code_clarity.languages import treesitter
from code_clarity.languages.base import BaseImportResolver, Maturity, has_ancestor_dir

_RELATIVE_PREFIX = "relative:"


class RubyResolver(BaseImportResolver):
    name = "Ruby"
    extensions = (".rb",)
    maturity = Maturity.BASIC_TESTS

    def extract_imports(self, content: str, path: str) -> list[str]:
        root = treesitter.parse(content, "ruby")
        specifiers: list[str] = []
        for node in treesitter.walk(root):
            if node.type != "call" or node.child_by_field_name("receiver") is not None:
                continue
            method = treesitter.node_text(node.child_by_field_name("method"))
            if method not in ("require", "require_relative"):
                continue
            target = self._literal_argument(node)
            if target is None:
                continue
            if method == "require_relative":
                specifiers.append(_RELATIVE_PREFIX + target)
            else:
                specifiers.append(target)
        return specifiers

    @staticmethod
    def _literal_argument(node) -> str | None:
        arguments = node.child_by_field_name("arguments")
        if arguments is None:
            return None
        argument = treesitter.first_child(arguments, "string")
        # Interpolated paths cannot be resolved statically
        if argument is None or any(c.type == "interpolation" for c in argument.children):
            return None
        return treesitter.unquote(argument)

    def resolve(self, specifier: str, from_path: str, candidates: frozenset[str]) -> str | None:
        if specifier.startswith(_RELATIVE_PREFIX):
            target = specifier[len(_RELATIVE_PREFIX):]
            base = os.path.join(os.path.dirname(from_path), *target.split("/"))
            return self._first_existing([base, base + ".rb"], candidates)

        target = specifier if specifier.endswith(".rb") else specifier + ".rb"
        return self._suffix_match("lib/" + target, candidates) or self._suffix_match(target, candidates)

    def is_test_file(self, path: str) -> bool:
        if not path.endswith(".rb"):
            return False
        if path.endswith(("_test.rb", "_spec.rb")):
            return True
        return has_ancestor_dir(path, {"test", "spec"})
