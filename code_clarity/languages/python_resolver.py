"""Python import resolver using the ast module."""

from __future__ import annotations

import ast
import os

from code_clarity.errors import ImportParseError
from code_clarity.languages.base import BaseImportResolver, Maturity, has_ancestor_dir


class PythonResolver(BaseImportResolver):
    name = "Python"
    extensions = (".py",)
    maturity = Maturity.ACTIVELY_TESTED

    def extract_imports(self, content: str, path: str) -> list[str]:
        try:
            tree = ast.parse(content, filename=path)
        except SyntaxError as e:
            raise ImportParseError(path, f"line {e.lineno}: {e.msg}") from e

        specifiers: list[str] = []
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                specifiers.extend(alias.name for alias in node.names)
            elif isinstance(node, ast.ImportFrom):
                module = "." * node.level + (node.module or "")
                specifiers.append(module)
                # `from pkg import views` may name a submodule; attributes won't resolve
                separator = "." if node.module else ""
                specifiers.extend(
                    module + separator + alias.name for alias in node.names if alias.name != "*"
                )
        return specifiers

    def resolve(self, specifier: str, from_path: str, candidates: frozenset[str]) -> str | None:
        if specifier.startswith("."):
            return self._resolve_relative(specifier, from_path, candidates)
        return self._resolve_absolute(specifier, candidates)

    def _resolve_relative(self, specifier: str, from_path: str, candidates: frozenset[str]) -> str | None:
        level = len(specifier) - len(specifier.lstrip("."))
        base_dir = os.path.dirname(from_path)
        for _ in range(level - 1):
            base_dir = os.path.dirname(base_dir)

        module = specifier[level:]
        if not module:
            return self._first_existing([os.path.join(base_dir, "__init__.py")], candidates)

        module_path = os.path.join(base_dir, *module.split("."))
        return self._first_existing(
            [module_path + ".py", os.path.join(module_path, "__init__.py")],
            candidates,
        )

    def _resolve_absolute(self, specifier: str, candidates: frozenset[str]) -> str | None:
        if not specifier:
            return None
        module_path = "/".join(specifier.split("."))
        return (
            self._suffix_match(module_path + ".py", candidates)
            or self._suffix_match(module_path + "/__init__.py", candidates)
        )

    def is_test_file(self, path: str) -> bool:
        name = os.path.basename(path)
        if not name.endswith(".py"):
            return False
        if name.startswith("test_") or name.endswith("_test.py"):
            return True
        return has_ancestor_dir(path, {"tests", "test"})
