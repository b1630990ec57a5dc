"""Tests for git access and hook installation."""

import os
import shutil
import subprocess
from pathlib import Path

import pytest

from codecontext.git import (
    HOOK_MARKER,
    GitClient,
    find_repository_root,
    install_post_commit_hook,
)

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def git(cwd: Path, *args: str):
    subprocess.run(
        ["git", "-c", "user.name=Test", "-c", "user.email=test@example.com",
         "-c", "commit.gpgsign=false", *args],
        cwd=str(cwd),
        check=True,
        capture_output=True,
    )


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    git(tmp_path, "init", "-q")
    (tmp_path / "a.txt").write_text("alpha\n")
    (tmp_path / "b.txt").write_text("bravo\n" * 5)
    git(tmp_path, "add", ".")
    git(tmp_path, "commit", "-q", "-m", "Initial commit")
    return tmp_path


@requires_git
def test_changed_files(repo: Path):
    """Modified, added and renamed files are reported; untracked ones are not."""
    (repo / "a.txt").write_text("alpha changed\n")
    (repo / "c.txt").write_text("charlie\n")
    git(repo, "add", "c.txt")
    git(repo, "mv", "b.txt", "d.txt")
    (repo / "e.txt").write_text("untracked\n")

    changed = GitClient().changed_files(repo)

    assert sorted(changed) == ["a.txt", "c.txt", "d.txt"]


@requires_git
def test_changed_files_relative_to_subdirectory(repo: Path):
    (repo / "sub").mkdir()
    (repo / "sub" / "x.txt").write_text("x\n")
    git(repo, "add", ".")
    git(repo, "commit", "-q", "-m", "Add sub")
    (repo / "sub" / "x.txt").write_text("x changed\n")
    (repo / "a.txt").write_text("alpha changed\n")

    assert GitClient().changed_files(repo / "sub") == ["x.txt"]


@requires_git
def test_clean_repository_has_no_changes(repo: Path):
    assert GitClient().changed_files(repo) == []


@requires_git
def test_recent_commits(repo: Path):
    (repo / "a.txt").write_text("alpha 2\n")
    git(repo, "commit", "-q", "-am", "Second commit")

    commits = GitClient().recent_commits(repo, limit=5)

    assert [c.message for c in commits] == ["Second commit", "Initial commit"]
    assert all(len(c.id) == 40 and c.date is not None for c in commits)
    assert len(GitClient().recent_commits(repo, limit=1)) == 1


def test_missing_git_degrades_to_empty(tmp_path: Path):
    (tmp_path / ".git").mkdir()
    client = GitClient(executable="definitely-not-a-git-binary")

    assert client.changed_files(tmp_path) == []
    assert client.recent_commits(tmp_path) == []


def test_outside_repository(tmp_path: Path):
    assert find_repository_root(tmp_path) is None
    assert GitClient().changed_files(tmp_path) == []


def test_find_repository_root_from_subdirectory(tmp_path: Path):
    (tmp_path / ".git").mkdir()
    (tmp_path / "a" / "b").mkdir(parents=True)

    assert find_repository_root(tmp_path / "a" / "b") == tmp_path.resolve()


def test_install_post_commit_hook(tmp_path: Path):
    (tmp_path / ".git").mkdir()

    assert install_post_commit_hook(tmp_path)

    hook = tmp_path / ".git" / "hooks" / "post-commit"
    content = hook.read_text()
    assert HOOK_MARKER in content
    assert "codecontext refresh" in content
    assert os.access(hook, os.X_OK)
    assert install_post_commit_hook(tmp_path)


def test_foreign_hook_is_left_alone(tmp_path: Path):
    hooks = tmp_path / ".git" / "hooks"
    hooks.mkdir(parents=True)
    (hooks / "post-commit").write_text("#!/bin/sh\necho mine\n")

    assert not install_post_commit_hook(tmp_path)
    assert (hooks / "post-commit").read_text() == "#!/bin/sh\necho mine\n"


def test_hook_requires_repository(tmp_path: Path):
    assert not install_post_commit_hook(tmp_path)
    assert not (tmp_path / ".git").exists()
