"""Thin wrappers around the git CLI: changed files, revisions and line stats."""

from __future__ import annotations

import hashlib
import logging
import os
import re
import subprocess

from code_clarity.errors import GitError
from code_clarity.models import FileStats

logger = logging.getLogger(__name__)

_RENAME_BRACE_RE = re.compile(r"\{([^{}]*) => ([^{}]*)\}")


def run_git(repo_path: str | os.PathLike, *args: str) -> str:
    """Run a git command in repo_path and return its stdout as text."""
    return _run(repo_path, args).decode("utf-8", errors="replace")


def _run(repo_path: str | os.PathLike, args: tuple[str, ...]) -> bytes:
    logger.debug("git %s (in %s)", " ".join(args), repo_path)
    try:
        proc = subprocess.run(
            ["git", *args],
            cwd=repo_path,
            capture_output=True,
            check=False,
        )
    except FileNotFoundError as e:
        raise GitError("git executable not found") from e
    except NotADirectoryError as e:
        raise GitError(f"not a directory: {repo_path}") from e
    if proc.returncode != 0:
        stderr = proc.stderr.decode("utf-8", errors="replace").strip()
        raise GitError(f"git {args[0]} failed: {stderr or f'exit status {proc.returncode}'}")
    return proc.stdout


def is_git_repository(path: str | os.PathLike) -> bool:
    if not os.path.isdir(path):
        return False
    try:
        run_git(path, "rev-parse", "--git-dir")
    except GitError:
        return False
    return True


def repository_root(path: str | os.PathLike) -> str:
    if not os.path.exists(path):
        raise GitError(f"repository path does not exist: {path}")
    root = run_git(path, "rev-parse", "--show-toplevel").strip()
    return os.path.normpath(root)


def _to_absolute(root: str, rel_paths: list[str]) -> list[str]:
    return [os.path.normpath(os.path.join(root, rel)) for rel in rel_paths if rel]


def _lines(output: str) -> list[str]:
    return [line for line in output.splitlines() if line.strip()]


# ── Revisions ─────────────────────────────────────────────────

def parse_commit_range(spec: str) -> tuple[str, str, bool]:
    """Split "a...b" or "a..b" into (from, to, True); a single ref gives ("", ref, False)."""
    for separator in ("...", ".."):
        if separator in spec:
            left, _, right = spec.partition(separator)
            if left and right:
                return left, right, True
    return "", spec, False


def validate_commit(repo_path: str | os.PathLike, commit: str) -> None:
    try:
        run_git(repo_path, "rev-parse", "--verify", "--quiet", f"{commit}^{{commit}}")
    except GitError:
        raise GitError(f"invalid commit: {commit}") from None


def is_ancestor(repo_path: str | os.PathLike, ancestor: str, descendant: str) -> bool:
    try:
        run_git(repo_path, "merge-base", "--is-ancestor", ancestor, descendant)
    except GitError:
        return False
    return True


def normalize_commit_range(repo_path: str | os.PathLike, from_commit: str, to_commit: str) -> tuple[str, str, bool]:
    """Order a range oldest-first. The flag reports whether it was swapped."""
    validate_commit(repo_path, from_commit)
    validate_commit(repo_path, to_commit)
    if is_ancestor(repo_path, to_commit, from_commit) and not is_ancestor(repo_path, from_commit, to_commit):
        return to_commit, from_commit, True
    return from_commit, to_commit, False


def short_commit_hash(repo_path: str | os.PathLike, commit: str) -> str:
    return run_git(repo_path, "rev-parse", "--short", commit).strip()


def current_commit_hash(repo_path: str | os.PathLike) -> str:
    return short_commit_hash(repo_path, "HEAD")


def commit_range_label(repo_path: str | os.PathLike, from_commit: str, to_commit: str) -> str:
    return f"{short_commit_hash(repo_path, from_commit)}...{short_commit_hash(repo_path, to_commit)}"


def has_uncommitted_changes(repo_path: str | os.PathLike) -> bool:
    return bool(run_git(repo_path, "status", "--porcelain").strip())


def repository_state_signature(repo_path: str | os.PathLike) -> str:
    """Digest that changes whenever HEAD moves or the working tree changes."""
    try:
        head = run_git(repo_path, "rev-parse", "HEAD").strip()
    except GitError:
        head = "<no-head>"
    status = run_git(repo_path, "status", "--porcelain", "--untracked-files=all")
    digest = hashlib.sha1(status.encode("utf-8")).hexdigest()
    return f"{head}:{digest}"


def file_content_at(repo_root: str, revision: str, rel_path: str) -> bytes:
    spec = f"{revision}:{rel_path.replace(os.sep, '/')}"
    return _run(repo_root, ("show", spec))


# ── Changed files ─────────────────────────────────────────────

def _status_entries(repo_path: str | os.PathLike) -> list[tuple[str, str]]:
    """(status code, path) pairs from `git status -z`, renames reported by new path."""
    raw = _run(repo_path, ("status", "--porcelain", "-z", "--untracked-files=all"))
    fields = raw.decode("utf-8", errors="replace").split("\0")
    entries: list[tuple[str, str]] = []
    i = 0
    while i < len(fields):
        entry = fields[i]
        i += 1
        if len(entry) < 4:
            continue
        code, path = entry[:2], entry[3:]
        if "R" in code or "C" in code:
            i += 1  # skip the original path
        entries.append((code, path))
    return entries


def uncommitted_files(repo_path: str | os.PathLike) -> list[str]:
    """Absolute paths of modified, added and untracked files that still exist."""
    root = repository_root(repo_path)
    paths: list[str] = []
    for code, rel in _status_entries(repo_path):
        if "D" in code:
            continue
        absolute = os.path.normpath(os.path.join(root, rel))
        if os.path.isfile(absolute):
            paths.append(absolute)
    return sorted(set(paths))


def commit_files(repo_path: str | os.PathLike, commit: str) -> list[str]:
    validate_commit(repo_path, commit)
    root = repository_root(repo_path)
    output = run_git(
        repo_path, "diff-tree", "--no-commit-id", "--name-only", "-r", "--root",
        "--diff-filter=d", commit,
    )
    return _to_absolute(root, _lines(output))


def commit_range_files(repo_path: str | os.PathLike, from_commit: str, to_commit: str) -> list[str]:
    root = repository_root(repo_path)
    output = run_git(repo_path, "diff", "--name-only", "--diff-filter=d", from_commit, to_commit)
    return _to_absolute(root, _lines(output))


def commit_tree_files(repo_path: str | os.PathLike, commit: str) -> list[str]:
    validate_commit(repo_path, commit)
    root = repository_root(repo_path)
    output = run_git(repo_path, "ls-tree", "-r", "--name-only", commit)
    return _to_absolute(root, _lines(output))


# ── Stats ─────────────────────────────────────────────────────

def parse_renamed_path(path: str) -> str:
    """Reduce numstat rename notation to the new path."""
    if "{" in path and " => " in path:
        path = _RENAME_BRACE_RE.sub(lambda m: m.group(2), path)
        return path.replace("//", "/")
    if " => " in path:
        return path.split(" => ", 1)[1]
    return path


def parse_numstat(output: str) -> dict[str, tuple[int, int]]:
    """Map relative path -> (additions, deletions); binary files count 0."""
    counts: dict[str, tuple[int, int]] = {}
    for line in _lines(output):
        parts = line.split("\t", 2)
        if len(parts) < 3:
            continue
        additions = int(parts[0]) if parts[0].isdigit() else 0
        deletions = int(parts[1]) if parts[1].isdigit() else 0
        counts[os.path.normpath(parse_renamed_path(parts[2].strip()))] = (additions, deletions)
    return counts


def _parse_name_status(output: str) -> set[str]:
    """Relative paths whose status marks them as added."""
    added: set[str] = set()
    for line in _lines(output):
        parts = line.split("\t")
        if len(parts) >= 2 and parts[0].startswith("A"):
            added.add(os.path.normpath(parts[-1]))
    return added


def _build_stats(root: str, counts: dict[str, tuple[int, int]], added: set[str]) -> dict[str, FileStats]:
    stats: dict[str, FileStats] = {}
    for rel in set(counts) | added:
        additions, deletions = counts.get(rel, (0, 0))
        stats[os.path.normpath(os.path.join(root, rel))] = FileStats(
            additions=additions,
            deletions=deletions,
            is_new=rel in added,
        )
    return stats


def _count_lines(path: str) -> int:
    try:
        with open(path, "rb") as f:
            return sum(1 for _ in f)
    except OSError:
        return 0


def uncommitted_file_stats(repo_path: str | os.PathLike) -> dict[str, FileStats]:
    root = repository_root(repo_path)
    try:
        counts = parse_numstat(run_git(repo_path, "diff", "--numstat", "HEAD"))
    except GitError:
        # No HEAD yet: everything is new
        counts = {}

    added: set[str] = set()
    for code, rel in _status_entries(repo_path):
        if code == "??" or "A" in code:
            added.add(os.path.normpath(rel))

    stats = _build_stats(root, counts, added)
    for rel in added:
        absolute = os.path.normpath(os.path.join(root, rel))
        current = stats[absolute]
        if current.additions == 0 and current.deletions == 0:
            stats[absolute] = FileStats(additions=_count_lines(absolute), deletions=0, is_new=True)
    return stats


def commit_file_stats(repo_path: str | os.PathLike, commit: str) -> dict[str, FileStats]:
    validate_commit(repo_path, commit)
    root = repository_root(repo_path)
    counts = parse_numstat(run_git(repo_path, "show", "--numstat", "--format=", "--root", commit))
    added = _parse_name_status(run_git(repo_path, "show", "--name-status", "--format=", "--root", commit))
    return _build_stats(root, counts, added)


def commit_range_file_stats(repo_path: str | os.PathLike, from_commit: str, to_commit: str) -> dict[str, FileStats]:
    root = repository_root(repo_path)
    counts = parse_numstat(run_git(repo_path, "diff", "--numstat", from_commit, to_commit))
    added = _parse_name_status(run_git(repo_path, "diff", "--name-status", from_commit, to_commit))
    return _build_stats(root, counts, added)
