"""Tests for context views built from existing documents."""

from pathlib import Path

from codecontext.context import file_tree, find_documents, synthesize


def test_file_tree(tmp_path: Path):
    """Entries are sorted and drawn with box connectors."""
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "x.txt").write_text("x")
    (tmp_path / ".hidden").write_text("h")
    (tmp_path / "node_modules").mkdir()

    assert file_tree(tmp_path, 2) == "├── a.txt\n└── sub\n    └── x.txt"
    assert file_tree(tmp_path, 1) == "├── a.txt\n└── sub"


def test_directory_view_without_document(tmp_path: Path):
    (tmp_path / "main.py").write_text("")

    text = synthesize(tmp_path, "directory")

    assert text.startswith(f"# Context for {tmp_path.name}\n")
    assert "No claude.md documentation found. Run 'codecontext refresh' to generate documentation." in text
    assert text.endswith("## File Structure\n└── main.py\n")


def test_directory_view_with_document(tmp_path: Path):
    (tmp_path / "claude.md").write_text("# pkg\n\n## Purpose\nRuns jobs.\n")

    text = synthesize(tmp_path, "directory")

    assert "## Purpose\nRuns jobs." in text
    assert "No claude.md documentation found" not in text


def test_standard_view_truncates_parent(tmp_path: Path):
    """The parent document contributes only its first twenty lines."""
    child = tmp_path / "child"
    child.mkdir()
    (tmp_path / "claude.md").write_text("\n".join(f"line {n}" for n in range(30)))
    (child / "claude.md").write_text("child doc")

    text = synthesize(child, "standard")

    assert text.startswith("# Working Context\n\n## Current Directory: child\nchild doc\n")
    assert "## Parent Directory Context\nline 0\n" in text
    assert "line 19\n...\n" in text
    assert "line 20" not in text


def test_standard_view_without_documents(tmp_path: Path):
    text = synthesize(tmp_path, "standard")

    assert text == f"# Working Context\n\n## Current Directory: {tmp_path.name}\n## Parent Directory Context\n"


def test_project_view_is_capped(tmp_path: Path):
    for n in range(12):
        directory = tmp_path / f"d{n:02d}"
        directory.mkdir()
        (directory / "claude.md").write_text(f"# d{n:02d}\n")
    (tmp_path / "node_modules").mkdir()
    (tmp_path / "node_modules" / "claude.md").write_text("vendored")

    text = synthesize(tmp_path, "project")

    assert text.startswith("# Project-Wide Context\n\n## Project Structure\n├── d00\n")
    assert "## Directory Summaries" in text
    assert "### d09\n# d09\n\n..." in text
    assert "### d10" not in text
    assert "vendored" not in text


def test_find_documents_order(tmp_path: Path):
    (tmp_path / "b").mkdir()
    (tmp_path / "a").mkdir()
    for directory in (tmp_path, tmp_path / "a", tmp_path / "b"):
        (directory / "claude.md").write_text("doc")

    assert find_documents(tmp_path) == [
        tmp_path / "claude.md", tmp_path / "a" / "claude.md", tmp_path / "b" / "claude.md",
    ]
