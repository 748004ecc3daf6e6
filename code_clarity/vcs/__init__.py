"""Version-control plumbing and content sources."""

from __future__ import annotations

from code_clarity.vcs.content import (
    ContentSource,
    FilesystemContentSource,
    GitRevisionContentSource,
    InMemoryContentSource,
)

__all__ = [
    "ContentSource",
    "FilesystemContentSource",
    "GitRevisionContentSource",
    "InMemoryContentSource",
]
