"""Tests for choosing which directories to refresh."""

from pathlib import Path

from conftest import FakeGit

from codecontext.config import DEFAULT_IGNORE_PATTERNS
from codecontext.ignore import IgnoreFilter
from codecontext.refresh import plan_refresh, resolve_scope


def test_plan_collects_parent_directories(tmp_path: Path):
    (tmp_path / "src" / "lib").mkdir(parents=True)
    git = FakeGit(changed=["src/a.ts", "src/b.ts", "src/lib/c.ts", "README.md", "gone/d.ts"])

    plan = plan_refresh(tmp_path, git)

    root = tmp_path.resolve()
    assert plan == {root, root / "src", root / "src" / "lib"}


def test_plan_without_changes_or_git(tmp_path: Path):
    assert plan_refresh(tmp_path, FakeGit()) == set()
    assert plan_refresh(tmp_path, None) == set()


def test_explicit_path_wins(tmp_path: Path):
    (tmp_path / "sub").mkdir()
    git = FakeGit(changed=["other/x.ts"])

    scope = resolve_scope(tmp_path, IgnoreFilter(), git=git, path=Path("sub"), all_=True)

    assert scope == [(tmp_path / "sub").resolve()]


def test_all_walks_the_tree(tmp_path: Path):
    (tmp_path / "src").mkdir()
    (tmp_path / "dist").mkdir()

    scope = resolve_scope(tmp_path, IgnoreFilter(DEFAULT_IGNORE_PATTERNS), all_=True)

    root = tmp_path.resolve()
    assert scope == [root, root / "src"]


def test_changed_scope_is_sorted(tmp_path: Path):
    (tmp_path / "b").mkdir()
    (tmp_path / "a").mkdir()
    git = FakeGit(changed=["b/x.ts", "a/y.ts"])

    root = tmp_path.resolve()
    assert resolve_scope(tmp_path, IgnoreFilter(), git=git) == [root / "a", root / "b"]
