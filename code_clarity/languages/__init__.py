"""Import resolver registry and test-file classification."""

from __future__ import annotations

import logging
import os

from code_clarity.languages.base import BaseImportResolver, Maturity, has_ancestor_dir
from code_clarity.languages.c_resolver import CResolver
from code_clarity.languages.csharp_resolver import CSharpResolver
from code_clarity.languages.dart_resolver import DartResolver
from code_clarity.languages.go_resolver import GoResolver
from code_clarity.languages.js_resolver import JavaScriptResolver, SvelteResolver, TypeScriptResolver
from code_clarity.languages.jvm_resolver import JavaResolver, KotlinResolver
from code_clarity.languages.python_resolver import PythonResolver
from code_clarity.languages.ruby_resolver import RubyResolver
from code_clarity.languages.rust_resolver import RustResolver
from code_clarity.languages.swift_resolver import SwiftResolver

logger = logging.getLogger(__name__)


class ResolverRegistry:
    """Maps file extensions to the resolver that handles them."""

    def __init__(self):
        self._by_extension: dict[str, BaseImportResolver] = {}
        self._resolvers: list[BaseImportResolver] = []

    def register(self, resolver: BaseImportResolver) -> None:
        for ext in resolver.extensions:
            ext = ext.lower()
            existing = self._by_extension.get(ext)
            if existing is not None and existing is not resolver:
                logger.debug("extension %s: %s replaces %s", ext, resolver.name, existing.name)
            self._by_extension[ext] = resolver
        if resolver not in self._resolvers:
            self._resolvers.append(resolver)

    def for_extension(self, ext: str) -> BaseImportResolver | None:
        return self._by_extension.get(ext.lower())

    def for_path(self, path: str) -> BaseImportResolver | None:
        return self.for_extension(os.path.splitext(path)[1])

    def supports(self, ext: str) -> bool:
        return ext.lower() in self._by_extension

    def extensions(self) -> list[str]:
        return sorted(self._by_extension)

    def languages(self) -> list[BaseImportResolver]:
        return sorted(self._resolvers, key=lambda r: r.name.lower())


def default_registry() -> ResolverRegistry:
    """A fresh registry with every built-in resolver."""
    registry = ResolverRegistry()
    for resolver in (
        CResolver(),
        CSharpResolver(),
        DartResolver(),
        GoResolver(),
        JavaResolver(),
        JavaScriptResolver(),
        KotlinResolver(),
        PythonResolver(),
        RubyResolver(),
        RustResolver(),
        SvelteResolver(),
        SwiftResolver(),
        TypeScriptResolver(),
    ):
        registry.register(resolver)
    return registry


_DEFAULT = default_registry()


def is_supported_extension(ext: str) -> bool:
    return _DEFAULT.supports(ext)


def is_test_file(path: str) -> bool:
    """Classify a path as test code by its language's naming conventions."""
    resolver = _DEFAULT.for_path(path)
    if resolver is not None:
        return resolver.is_test_file(path)

    name = os.path.basename(path)
    stem = os.path.splitext(name)[0]
    if stem.endswith("_test") or ".test." in name or ".spec." in name:
        return True
    return has_ancestor_dir(path, {"test", "tests"})


__all__ = [
    "BaseImportResolver",
    "Maturity",
    "ResolverRegistry",
    "default_registry",
    "is_supported_extension",
    "is_test_file",
]
