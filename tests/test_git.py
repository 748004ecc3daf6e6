"""Tests for git plumbing and content sources."""

import os
import shutil
import subprocess

import pytest

from code_clarity.errors import ContentReadError, GitError
from code_clarity.models import FileStats
from code_clarity.vcs import FilesystemContentSource, GitRevisionContentSource, InMemoryContentSource
from code_clarity.vcs import git

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def _git(repo, *args):
    subprocess.run(
        ["git", "-c", "user.name=Test", "-c", "user.email=test@example.com",
         "-c", "commit.gpgsign=false", *args],
        cwd=repo, check=True, capture_output=True,
    )


def _write(path, content):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w") as f:
        f.write(content)


@pytest.fixture
def repo(tmp_path):
    root = os.path.realpath(str(tmp_path / "repo"))
    os.makedirs(root)
    _git(root, "init", "-q")
    _write(os.path.join(root, "a.py"), "import b\n")
    _write(os.path.join(root, "b.py"), "x = 1\n")
    _git(root, "add", ".")
    _git(root, "commit", "-q", "-m", "initial")
    return root


# ── Pure parsers ──────────────────────────────────────────────

@pytest.mark.parametrize("spec,expected", [
    ("main...feature", ("main", "feature", True)),
    ("v1..v2", ("v1", "v2", True)),
    ("HEAD~1", ("", "HEAD~1", False)),
])
def test_parse_commit_range(spec, expected):
    assert git.parse_commit_range(spec) == expected


@pytest.mark.parametrize("raw,expected", [
    ("src/{old => new}/a.py", "src/new/a.py"),
    ("old.py => new.py", "new.py"),
    ("plain/path.py", "plain/path.py"),
])
def test_parse_renamed_path(raw, expected):
    assert git.parse_renamed_path(raw) == expected


def test_parse_numstat():
    output = "3\t1\tsrc/a.py\n-\t-\timg.png\n\n10\t0\tlib/{x => y}/m.py\n"
    assert git.parse_numstat(output) == {
        os.path.normpath("src/a.py"): (3, 1),
        "img.png": (0, 0),
        os.path.normpath("lib/y/m.py"): (10, 0),
    }


# ── Content sources ───────────────────────────────────────────

def test_filesystem_source_missing_file(tmp_path):
    with pytest.raises(ContentReadError):
        FilesystemContentSource().read(str(tmp_path / "missing.py"))


def test_in_memory_source_normalizes_keys():
    source = InMemoryContentSource({"/r/a/../b.py": "hi"})
    assert source.read("/r/b.py") == b"hi"
    with pytest.raises(ContentReadError):
        source.read("/r/a.py")


# ── Repository-backed ─────────────────────────────────────────

@requires_git
def test_is_git_repository(repo, tmp_path):
    assert git.is_git_repository(repo)
    plain = tmp_path / "plain"
    plain.mkdir()
    assert not git.is_git_repository(str(plain))


@requires_git
def test_uncommitted_files_and_stats(repo):
    _write(os.path.join(repo, "a.py"), "import b\nimport c\n")
    _write(os.path.join(repo, "c.py"), "y = 2\nz = 3\n")

    assert git.uncommitted_files(repo) == [os.path.join(repo, "a.py"), os.path.join(repo, "c.py")]

    stats = git.uncommitted_file_stats(repo)
    assert stats[os.path.join(repo, "a.py")] == FileStats(additions=1, deletions=0, is_new=False)
    assert stats[os.path.join(repo, "c.py")] == FileStats(additions=2, deletions=0, is_new=True)
    assert git.has_uncommitted_changes(repo)


@requires_git
def test_clean_tree(repo):
    assert git.uncommitted_files(repo) == []
    assert not git.has_uncommitted_changes(repo)


@requires_git
def test_commit_files_and_stats(repo):
    _write(os.path.join(repo, "b.py"), "x = 2\n")
    _write(os.path.join(repo, "d.py"), "import b\n")
    _git(repo, "add", ".")
    _git(repo, "commit", "-q", "-m", "second")

    assert sorted(git.commit_files(repo, "HEAD")) == [os.path.join(repo, "b.py"), os.path.join(repo, "d.py")]
    stats = git.commit_file_stats(repo, "HEAD")
    assert stats[os.path.join(repo, "d.py")].is_new
    assert stats[os.path.join(repo, "b.py")] == FileStats(additions=1, deletions=1, is_new=False)

    range_files = git.commit_range_files(repo, "HEAD~1", "HEAD")
    assert sorted(range_files) == [os.path.join(repo, "b.py"), os.path.join(repo, "d.py")]


@requires_git
def test_invalid_commit(repo):
    with pytest.raises(GitError, match="invalid commit"):
        git.validate_commit(repo, "does-not-exist")


@requires_git
def test_normalize_commit_range_swaps_reversed_range(repo):
    _write(os.path.join(repo, "b.py"), "x = 2\n")
    _git(repo, "commit", "-q", "-am", "second")

    assert git.normalize_commit_range(repo, "HEAD", "HEAD~1") == ("HEAD~1", "HEAD", True)
    assert git.normalize_commit_range(repo, "HEAD~1", "HEAD") == ("HEAD~1", "HEAD", False)


@requires_git
def test_state_signature_tracks_working_tree(repo):
    before = git.repository_state_signature(repo)
    assert git.repository_state_signature(repo) == before
    _write(os.path.join(repo, "new.py"), "")
    assert git.repository_state_signature(repo) != before


@requires_git
def test_revision_content_source(repo):
    _write(os.path.join(repo, "b.py"), "x = 99\n")
    source = GitRevisionContentSource(repo, "HEAD")
    assert source.read(os.path.join(repo, "b.py")) == b"x = 1\n"
    with pytest.raises(ContentReadError):
        source.read(os.path.join(repo, "missing.py"))
