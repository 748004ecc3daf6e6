"""Data models shared by the graph engine, the renderers and the CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, order=True)
class FileEdge:
    """A directed edge between two files, used as a metadata key."""
    from_path: str
    to_path: str


@dataclass(frozen=True)
class EdgeMetadata:
    in_cycle: bool = False


@dataclass(frozen=True)
class FileStats:
    """Line statistics for one changed file."""
    additions: int = 0
    deletions: int = 0
    is_new: bool = False


@dataclass(frozen=True)
class FileMetadata:
    is_test: bool = False
    extension: str = ""
    stats: FileStats | None = None


@dataclass(frozen=True)
class Cycle:
    """One strongly connected component, starting at its smallest member."""
    path: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.path)

    def __iter__(self):
        return iter(self.path)

    def __contains__(self, item: object) -> bool:
        return item in self.path


@dataclass(frozen=True)
class BuildWarning:
    """A supported file that degraded to a standalone node."""
    path: str
    reason: str


@dataclass
class GraphConfig:
    """Configuration for a single `show` run."""
    repo_path: Path = field(default_factory=lambda: Path("."))
    commit: str | None = None
    includes: list[str] = field(default_factory=list)
    excludes: list[str] = field(default_factory=list)
    include_exts: list[str] = field(default_factory=list)
    exclude_exts: list[str] = field(default_factory=list)
    between: list[str] = field(default_factory=list)
    target_file: str | None = None
    level: int = 1
    output_format: str = "dot"
    workers: int = 1
    skip_dirs: list[str] = field(default_factory=lambda: [
        "node_modules", ".git", "__pycache__", ".dart_tool",
        "build", "dist", ".next", ".venv", "venv", "env",
        ".eggs", "*.egg-info", "target", ".gradle",
    ])


@dataclass
class WatchConfig:
    """Configuration for the live-reload watch server."""
    repo_path: Path = field(default_factory=lambda: Path("."))
    host: str = "127.0.0.1"
    port: int = 4900
    debounce_ms: int = 500
    state_poll_seconds: float = 2.0
    workers: int = 1
