"""Exception hierarchy for code-clarity.

Everything raised on purpose inherits from CodeClarityError so the CLI and
the web layer can translate failures in one place.
"""

from __future__ import annotations


class CodeClarityError(Exception):
    """Base exception for all code-clarity errors."""


class ContentReadError(CodeClarityError):
    """A file's content could not be read from its content source."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"failed to read {path}: {reason}")


class ImportParseError(CodeClarityError):
    """Import specifiers could not be extracted from a file."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"failed to parse imports in {path}: {reason}")


class ClosureViolationError(CodeClarityError):
    """A dependency target is not a node of the graph.

    Only a defective resolver can cause this, so the whole build is aborted.
    """

    def __init__(self, source: str, target: str):
        self.source = source
        self.target = target
        super().__init__(
            f"dependency {target} of {source} is not a node of the graph"
        )


class QueryValidationError(CodeClarityError):
    """Parameters of a structural query were rejected."""


class GitError(CodeClarityError):
    """A git command failed or the path is not a repository."""


class UnknownFormatError(CodeClarityError):
    """No renderer is registered under the requested name."""
