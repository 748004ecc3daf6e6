"""Abstract base import resolver."""

from __future__ import annotations

import abc
import enum
import os
import posixpath


class Maturity(enum.Enum):
    UNTESTED = 0
    BASIC_TESTS = 1
    ACTIVELY_TESTED = 2
    STABLE = 3

    @property
    def display_name(self) -> str:
        return {
            Maturity.UNTESTED: "Untested",
            Maturity.BASIC_TESTS: "Basic Tests",
            Maturity.ACTIVELY_TESTED: "Actively Tested",
            Maturity.STABLE: "Stable",
        }[self]

    @property
    def symbol(self) -> str:
        return {
            Maturity.UNTESTED: "○",
            Maturity.BASIC_TESTS: "◐",
            Maturity.ACTIVELY_TESTED: "●",
            Maturity.STABLE: "✓",
        }[self]


class BaseImportResolver(abc.ABC):
    """Base class for language-specific import resolvers.

    A resolver turns file content into raw import specifiers and maps each
    specifier to files of the candidate set, usually at most one.
    Specifiers that point outside the set (packages, the standard library)
    resolve to None.
    """

    name: str
    extensions: tuple[str, ...]
    maturity: Maturity = Maturity.UNTESTED

    @abc.abstractmethod
    def extract_imports(self, content: str, path: str) -> list[str]:
        """Return raw import specifiers in source order."""

    @abc.abstractmethod
    def resolve(self, specifier: str, from_path: str, candidates: frozenset[str]) -> str | None:
        """Resolve a specifier imported by from_path to a candidate path."""

    def resolve_all(self, specifier: str, from_path: str, candidates: frozenset[str]) -> list[str]:
        """All candidate paths a specifier refers to.

        Package-level imports (Go packages, C# namespaces, Swift modules) name
        a group of files, so resolvers for those languages override this.
        """
        target = self.resolve(specifier, from_path, candidates)
        return [target] if target is not None else []

    def is_test_file(self, path: str) -> bool:
        return False

    # ── Shared helpers ──────────────────────────────────────────

    @staticmethod
    def _first_existing(paths: list[str], candidates: frozenset[str]) -> str | None:
        for path in paths:
            normalized = os.path.normpath(path)
            if normalized in candidates:
                return normalized
        return None

    @staticmethod
    def _suffix_match(suffix: str, candidates: frozenset[str]) -> str | None:
        """Smallest candidate whose path ends with the given posix suffix."""
        needle = "/" + suffix.lstrip("/")
        matches = sorted(
            path for path in candidates
            if _to_posix(path).endswith(needle)
        )
        return matches[0] if matches else None


def _to_posix(path: str) -> str:
    return path.replace(os.sep, posixpath.sep)


def path_parts(path: str) -> list[str]:
    """Directory and file segments of a path, without the root."""
    return [part for part in _to_posix(path).split("/") if part]


def has_ancestor_dir(path: str, names: set[str]) -> bool:
    return any(part in names for part in path_parts(path)[:-1])


def files_in_dir_with_suffix(suffix: str, candidates: frozenset[str], extensions: tuple[str, ...]) -> list[str]:
    """Sorted candidates directly inside a directory whose posix path ends with suffix."""
    needle = "/" + suffix.strip("/")
    return sorted(
        path for path in candidates
        if path.endswith(extensions)
        and posixpath.dirname(_to_posix(path)).endswith(needle)
    )
