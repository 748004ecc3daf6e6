"""Show pipeline: collect -> filter -> build -> scope -> enrich -> render."""

from __future__ import annotations

import fnmatch
import logging
import os
from dataclasses import dataclass
from typing import Callable

from code_clarity.depgraph import (
    DependencyGraph,
    FileDependencyGraph,
    build_dependency_graph,
    filter_by_level,
    find_path_nodes,
    new_file_dependency_graph,
    validate_between_query,
    validate_level_query,
)
from code_clarity.errors import GitError
from code_clarity.formatter import RenderOptions, get_formatter
from code_clarity.languages import is_supported_extension
from code_clarity.models import BuildWarning, FileStats, GraphConfig
from code_clarity.vcs import git
from code_clarity.vcs.content import ContentSource, FilesystemContentSource, GitRevisionContentSource

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int], None]

CLEAN_TREE_MESSAGE = """\
Working directory is clean (no uncommitted changes).

To visualize the most recent commit:
  code-clarity show -c HEAD

To visualize a specific commit:
  code-clarity show -c <commit-hash>"""


@dataclass
class ShowResult:
    output: str = ""
    file_graph: FileDependencyGraph | None = None
    warnings: tuple[BuildWarning, ...] = ()
    label: str = ""
    empty: bool = False


@dataclass(frozen=True)
class _Revision:
    from_commit: str = ""
    to_commit: str = ""
    is_range: bool = False


# ── Option helpers ────────────────────────────────────────────

def split_list(values: list[str] | tuple[str, ...] | None) -> list[str]:
    """Flatten repeatable, comma-separated option values."""
    result: list[str] = []
    for value in values or ():
        result.extend(part.strip() for part in value.split(",") if part.strip())
    return result


def normalize_extensions(option: str, raw: str) -> list[str]:
    """Parse ".go,java" into [".go", ".java"]; lower-cased and deduplicated."""
    exts: list[str] = []
    for part in raw.split(","):
        ext = part.strip()
        if not ext:
            raise ValueError(f"{option} cannot contain empty extensions")
        if os.sep in ext or "/" in ext:
            raise ValueError(f"{option} must be file extensions, got {part!r}")
        if not ext.startswith("."):
            ext = "." + ext
        if ext == ".":
            raise ValueError(f"{option} must include extension characters")
        ext = ext.lower()
        if ext not in exts:
            exts.append(ext)
    return exts


def resolve_input_path(base_dir: str, raw: str) -> str:
    if not raw:
        raise ValueError("path cannot be empty")
    path = raw if os.path.isabs(raw) else os.path.join(base_dir, raw)
    return os.path.normpath(path)


# ── File collection ───────────────────────────────────────────

def should_skip(path: str, skip_dirs: list[str]) -> bool:
    for part in path.replace(os.sep, "/").split("/"):
        for pattern in skip_dirs:
            if fnmatch.fnmatch(part, pattern):
                return True
    return False


def expand_paths(paths: list[str], skip_dirs: list[str], include_unsupported: bool = False) -> list[str]:
    """Expand directories into their files. Explicit file paths are kept as given."""
    result: list[str] = []
    for path in paths:
        if not os.path.exists(path):
            raise ValueError(f"failed to access {path}: no such file or directory")
        if not os.path.isdir(path):
            result.append(path)
            continue
        for dirpath, dirnames, filenames in os.walk(path):
            dirnames[:] = sorted(d for d in dirnames if not should_skip(d, skip_dirs))
            for filename in sorted(filenames):
                if include_unsupported or is_supported_extension(os.path.splitext(filename)[1]):
                    result.append(os.path.join(dirpath, filename))
    return result


def _collect_files(config: GraphConfig, base_dir: str, revision: _Revision) -> list[str] | None:
    """Files to build the graph from, or None when the working tree is clean."""
    if config.includes:
        includes = [resolve_input_path(base_dir, raw) for raw in config.includes]
        if config.commit:
            tree = git.commit_tree_files(base_dir, revision.to_commit)
            paths = [
                p for p in tree
                if any(p == inc or p.startswith(inc + os.sep) for inc in includes)
            ]
        else:
            paths = expand_paths(includes, config.skip_dirs, include_unsupported=True)
        if not paths:
            raise ValueError("no files found in specified paths")
        return paths

    if config.between:
        if config.commit:
            paths = git.commit_tree_files(base_dir, revision.to_commit)
            if not paths:
                raise ValueError(f"no files found in commit {revision.to_commit}")
            return paths
        paths = expand_paths([base_dir], config.skip_dirs)
        if not paths:
            raise ValueError("no supported files found in working directory")
        return paths

    if config.commit:
        if revision.is_range:
            paths = git.commit_range_files(base_dir, revision.from_commit, revision.to_commit)
            if not paths:
                raise ValueError(f"no files changed in commit range {config.commit}")
        else:
            paths = git.commit_files(base_dir, revision.to_commit)
            if not paths:
                raise ValueError(f"no files changed in commit {revision.to_commit}")
        return paths

    if config.target_file:
        paths = expand_paths([base_dir], config.skip_dirs)
        if not paths:
            raise ValueError("no supported files found in working directory")
        return paths

    paths = git.uncommitted_files(base_dir)
    return paths or None


# ── Filters ───────────────────────────────────────────────────

def apply_exclude_paths(paths: list[str], excludes: list[str]) -> list[str]:
    if not excludes:
        return paths
    filtered = [
        p for p in paths
        if not any(os.path.normpath(p) == ex or os.path.normpath(p).startswith(ex + os.sep) for ex in excludes)
    ]
    if not filtered:
        raise ValueError(f"no files remain after applying --exclude {','.join(excludes)!r}")
    return filtered


def apply_extension_filters(paths: list[str], include_exts: list[str], exclude_exts: list[str]) -> list[str]:
    if include_exts:
        paths = [p for p in paths if os.path.splitext(p)[1].lower() in include_exts]
        if not paths:
            raise ValueError(f"no files remain after applying --include-ext {','.join(include_exts)!r}")
    if exclude_exts:
        paths = [p for p in paths if os.path.splitext(p)[1].lower() not in exclude_exts]
        if not paths:
            raise ValueError(f"no files remain after applying --exclude-ext {','.join(exclude_exts)!r}")
    return paths


# ── Scoping, stats and label ──────────────────────────────────

def _scope(graph: DependencyGraph, config: GraphConfig, base_dir: str) -> DependencyGraph:
    if config.target_file:
        target = resolve_input_path(base_dir, config.target_file)
        validate_level_query(graph, target, config.level)
        return filter_by_level(graph, target, config.level)
    if config.between:
        targets = [resolve_input_path(base_dir, raw) for raw in config.between]
        validate_between_query(graph, targets)
        return find_path_nodes(graph, targets)
    return graph


def collect_stats(base_dir: str, config: GraphConfig, revision: _Revision) -> dict[str, FileStats]:
    """Line stats for the changes being shown; empty when unavailable."""
    try:
        if config.commit:
            if revision.is_range:
                return git.commit_range_file_stats(base_dir, revision.from_commit, revision.to_commit)
            return git.commit_file_stats(base_dir, revision.to_commit)
        return git.uncommitted_file_stats(base_dir)
    except GitError as e:
        logger.warning("failed to get file statistics: %s", e)
        return {}


def repo_label_name(repo_path: str) -> str:
    name = os.path.basename(os.path.normpath(repo_path))
    if name in ("", ".", os.sep):
        return "repo"
    return name


def build_label(base_dir: str, config: GraphConfig, revision: _Revision, file_count: int) -> str:
    """"<repo> • <hash>[-dirty] • N files"; empty when git has nothing to say."""
    try:
        if config.commit:
            if revision.is_range:
                commit_label = git.commit_range_label(base_dir, revision.from_commit, revision.to_commit)
            else:
                commit_label = git.short_commit_hash(base_dir, revision.to_commit)
        else:
            commit_label = git.current_commit_hash(base_dir)
            if git.has_uncommitted_changes(base_dir):
                commit_label += "-dirty"
    except GitError as e:
        logger.debug("no label: %s", e)
        return ""

    noun = "file" if file_count == 1 else "files"
    return f"{repo_label_name(base_dir)} • {commit_label} • {file_count} {noun}"


def _select_content_source(base_dir: str, config: GraphConfig, revision: _Revision) -> ContentSource:
    if revision.to_commit and not config.target_file:
        return GitRevisionContentSource(base_dir, revision.to_commit)
    return FilesystemContentSource()


def _parse_revision(base_dir: str, commit: str | None) -> _Revision:
    if not commit:
        return _Revision()
    from_commit, to_commit, is_range = git.parse_commit_range(commit)
    if is_range:
        from_commit, to_commit, _ = git.normalize_commit_range(base_dir, from_commit, to_commit)
    return _Revision(from_commit, to_commit, is_range)


# ── Orchestration ─────────────────────────────────────────────

def build_file_graph(
    config: GraphConfig,
    progress: ProgressCallback | None = None,
) -> tuple[FileDependencyGraph | None, tuple[BuildWarning, ...], str]:
    """Run every stage except rendering. Returns (None, (), "") for a clean tree."""
    base_dir = os.path.realpath(str(config.repo_path))
    if not os.path.isdir(base_dir):
        raise ValueError(f"repository path is not a directory: {config.repo_path}")
    revision = _parse_revision(base_dir, config.commit)

    # Stage 1: Collect
    if progress:
        progress("Collecting", 0, 1)
    paths = _collect_files(config, base_dir, revision)
    if paths is None:
        return None, (), ""
    if progress:
        progress("Collecting", 1, 1)

    # Stage 2: Filter
    excludes = [resolve_input_path(base_dir, raw) for raw in config.excludes]
    paths = apply_exclude_paths(paths, excludes)
    paths = apply_extension_filters(paths, config.include_exts, config.exclude_exts)

    # Stage 3: Build
    if progress:
        progress("Building", 0, len(paths))
    result = build_dependency_graph(
        paths,
        _select_content_source(base_dir, config, revision),
        workers=config.workers,
    )
    if progress:
        progress("Building", len(paths), len(paths))

    # Stage 4: Scope
    graph = _scope(result.graph, config, base_dir)

    # Stage 5: Enrich
    stats = collect_stats(base_dir, config, revision) if git.is_git_repository(base_dir) else {}
    label = build_label(base_dir, config, revision, len(graph))
    return new_file_dependency_graph(graph, stats), result.warnings, label


def run_show(config: GraphConfig, progress: ProgressCallback | None = None) -> ShowResult:
    """Build, scope and render the dependency graph described by config."""
    formatter = get_formatter(config.output_format)

    file_graph, warnings, label = build_file_graph(config, progress)
    if file_graph is None:
        return ShowResult(output=CLEAN_TREE_MESSAGE, empty=True)

    # JSON output carries its own structure; only diagrams get a title
    if formatter.name == "json":
        label = ""

    output = formatter.format(file_graph, RenderOptions(label=label))
    return ShowResult(output=output, file_graph=file_graph, warnings=warnings, label=label)


__all__ = [
    "CLEAN_TREE_MESSAGE",
    "ShowResult",
    "build_file_graph",
    "run_show",
]
