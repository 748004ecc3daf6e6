"""JavaScript/TypeScript import resolver using tree-sitter."""

from __future__ import annotations

import os

from code_clarity.languages import treesitter
from code_clarity.languages.base import BaseImportResolver, Maturity, path_parts

_JS_EXTENSIONS = (".js", ".jsx", ".mjs", ".cjs")
_TS_EXTENSIONS = (".ts", ".tsx", ".mts", ".cts")

# Calls whose first string argument is a module specifier
_LOADER_CALLS = {"require", "import"}


class JavaScriptResolver(BaseImportResolver):
    name = "JavaScript"
    extensions = _JS_EXTENSIONS
    maturity = Maturity.BASIC_TESTS

    # Probe order when a specifier has no extension
    probe_extensions: tuple[str, ...] = _JS_EXTENSIONS + _TS_EXTENSIONS

    def grammar_for(self, path: str) -> str:
        return "javascript"

    def extract_imports(self, content: str, path: str) -> list[str]:
        return self._imports_from(treesitter.parse(content, self.grammar_for(path)))

    def _imports_from(self, root) -> list[str]:
        specifiers: list[str] = []
        for node in treesitter.walk(root):
            if node.type in ("import_statement", "export_statement"):
                source = node.child_by_field_name("source")
                if source is None:
                    # TypeScript: import x = require("...")
                    clause = treesitter.first_child(node, "import_require_clause")
                    source = clause.child_by_field_name("source") if clause else None
                if source is not None and source.type == "string":
                    specifiers.append(treesitter.unquote(source))
            elif node.type == "call_expression":
                specifier = self._loader_argument(node)
                if specifier:
                    specifiers.append(specifier)
        return specifiers

    @staticmethod
    def _loader_argument(node) -> str | None:
        """The string passed to require(...) or import(...), if literal."""
        function = node.child_by_field_name("function")
        if function is None or treesitter.node_text(function) not in _LOADER_CALLS:
            return None
        arguments = node.child_by_field_name("arguments")
        if arguments is None:
            return None
        for child in arguments.children:
            if child.is_named and child.type != "comment":
                return treesitter.unquote(child) if child.type == "string" else None
        return None

    def resolve(self, specifier: str, from_path: str, candidates: frozenset[str]) -> str | None:
        # Packages, node builtins and "node:" imports are all external
        if not specifier.startswith(("./", "../")) and specifier not in (".", ".."):
            return None

        base = os.path.normpath(os.path.join(os.path.dirname(from_path), specifier))
        return self._first_existing(self._probe_paths(base), candidates)

    def _probe_paths(self, base: str) -> list[str]:
        paths = [base]
        paths.extend(base + ext for ext in self.probe_extensions)
        paths.extend(os.path.join(base, "index" + ext) for ext in self.probe_extensions)
        return paths

    def is_test_file(self, path: str) -> bool:
        name = os.path.basename(path)
        stem, ext = os.path.splitext(name)
        if ext not in self.extensions:
            return False
        if stem.endswith((".test", ".spec")):
            return True
        return "__tests__" in path_parts(path)[:-1]


class TypeScriptResolver(JavaScriptResolver):
    name = "TypeScript"
    extensions = _TS_EXTENSIONS
    maturity = Maturity.ACTIVELY_TESTED
    probe_extensions = _TS_EXTENSIONS + (".d.ts",) + _JS_EXTENSIONS

    def grammar_for(self, path: str) -> str:
        return "tsx" if path.lower().endswith(".tsx") else "typescript"

    def _probe_paths(self, base: str) -> list[str]:
        paths = super()._probe_paths(base)
        # ESM TypeScript imports the emitted ".js" name of a ".ts" source
        stem, ext = os.path.splitext(base)
        if ext in _JS_EXTENSIONS:
            ts_ext = {".js": ".ts", ".jsx": ".tsx", ".mjs": ".mts", ".cjs": ".cts"}[ext]
            paths.insert(1, stem + ts_ext)
            if ts_ext == ".ts":
                paths.insert(2, stem + ".tsx")
        return paths


class SvelteResolver(JavaScriptResolver):
    """Imports of a component's <script> blocks, parsed as TypeScript."""

    name = "Svelte"
    extensions = (".svelte",)
    maturity = Maturity.BASIC_TESTS
    probe_extensions = (".svelte",) + _TS_EXTENSIONS + _JS_EXTENSIONS

    def extract_imports(self, content: str, path: str) -> list[str]:
        root = treesitter.parse(content, "svelte")
        specifiers: list[str] = []
        for node in treesitter.walk(root):
            if node.type != "script_element":
                continue
            script = treesitter.first_child(node, "raw_text")
            if script is not None:
                script_root = treesitter.parse(treesitter.node_text(script), "typescript")
                specifiers.extend(self._imports_from(script_root))
        return specifiers
