"""Content sources: read file bytes from the working tree or a git revision."""

from __future__ import annotations

import abc
import os

from code_clarity.errors import ContentReadError, GitError
from code_clarity.vcs import git


class ContentSource(abc.ABC):
    """Supplies file content independently of where it is stored."""

    @abc.abstractmethod
    def read(self, path: str) -> bytes:
        """Return the bytes of an absolute path, or raise ContentReadError."""


class FilesystemContentSource(ContentSource):
    def read(self, path: str) -> bytes:
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as e:
            raise ContentReadError(path, e.strerror or str(e)) from e


class GitRevisionContentSource(ContentSource):
    """Reads files as they were at a specific revision."""

    def __init__(self, repo_path: str | os.PathLike, revision: str):
        self.repo_root = git.repository_root(repo_path)
        self.revision = revision

    def read(self, path: str) -> bytes:
        rel_path = os.path.relpath(path, self.repo_root)
        if rel_path.startswith(os.pardir):
            raise ContentReadError(path, f"outside repository {self.repo_root}")
        try:
            return git.file_content_at(self.repo_root, self.revision, rel_path)
        except GitError as e:
            raise ContentReadError(path, str(e)) from e


class InMemoryContentSource(ContentSource):
    """Content held in a dict; used for snapshots and tests."""

    def __init__(self, files: dict[str, bytes | str]):
        self._files = {
            os.path.normpath(path): data.encode("utf-8") if isinstance(data, str) else data
            for path, data in files.items()
        }

    def read(self, path: str) -> bytes:
        try:
            return self._files[os.path.normpath(path)]
        except KeyError:
            raise ContentReadError(path, "no such file") from None
