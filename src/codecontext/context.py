"""Context views assembled from previously written claude.md documents."""

import logging
import os
from pathlib import Path
from typing import List, Literal, Optional, Set

from .documentation import DOCUMENT_NAME

logger = logging.getLogger(__name__)

View = Literal["directory", "project", "standard"]

DEPENDENCY_CACHE = "node_modules"
PROJECT_SKIP_DIRS = {"node_modules", "dist", "build"}
MAX_PROJECT_DOCUMENTS = 10
PROJECT_SUMMARY_LINES = 10
PARENT_SUMMARY_LINES = 20


def _read_document(directory: Path) -> Optional[str]:
    path = directory / DOCUMENT_NAME
    if not path.is_file():
        return None
    return path.read_text(encoding="utf-8")


def _head(text: str, count: int) -> str:
    return "\n".join(text.split("\n")[:count]) + "\n..."


def file_tree(directory: Path, max_depth: int) -> str:
    """Render a depth-bounded listing of directory with box-drawing connectors."""
    lines: List[str] = []
    visited: Set[Path] = set()

    def build_tree(current: Path, depth: int, prefix: str = ""):
        real = current.resolve()
        if real in visited:
            return
        visited.add(real)
        try:
            items = sorted(
                name for name in os.listdir(current)
                if not name.startswith(".") and name != DEPENDENCY_CACHE
            )
        except OSError as e:
            logger.debug(f"Cannot list {current}: {e}")
            return
        for i, item in enumerate(items):
            is_last = i == len(items) - 1
            lines.append(prefix + ("└── " if is_last else "├── ") + item)
            child = current / item
            if depth < max_depth and child.is_dir():
                extension = "    " if is_last else "│   "
                build_tree(child, depth + 1, prefix + extension)

    build_tree(directory, 1)
    return "\n".join(lines)


def directory_context(directory: Path) -> str:
    content = _read_document(directory)
    if content is None:
        content = (
            f"No {DOCUMENT_NAME} documentation found. "
            "Run 'codecontext refresh' to generate documentation."
        )
    return (
        f"# Context for {directory.name}\n\n"
        f"{content}\n\n"
        f"## File Structure\n"
        f"{file_tree(directory, 2)}\n"
    )


def find_documents(root: Path) -> List[Path]:
    """Documents under root in sorted walk order, skipping build output."""
    found = []
    for current, dirs, files in os.walk(root):
        dirs[:] = sorted(d for d in dirs if d not in PROJECT_SKIP_DIRS and not d.startswith("."))
        if DOCUMENT_NAME in files:
            found.append(Path(current) / DOCUMENT_NAME)
    return found


def project_context(root: Path) -> str:
    parts = [
        "# Project-Wide Context\n",
        "## Project Structure",
        file_tree(root, 1),
        "",
        "## Directory Summaries",
    ]
    for document in find_documents(root)[:MAX_PROJECT_DOCUMENTS]:
        relative = document.parent.relative_to(root).as_posix()
        content = document.read_text(encoding="utf-8")
        parts.append("")
        parts.append(f"### {relative}")
        parts.append(_head(content, PROJECT_SUMMARY_LINES))
    return "\n".join(parts) + "\n"


def standard_context(directory: Path) -> str:
    parts = ["# Working Context\n", f"## Current Directory: {directory.name}"]
    content = _read_document(directory)
    if content is not None:
        parts.append(content)
    parts.append("## Parent Directory Context")
    parent_content = _read_document(directory.parent)
    if parent_content is not None:
        parts.append(_head(parent_content, PARENT_SUMMARY_LINES))
    return "\n".join(parts) + "\n"


def synthesize(target: Path, view: View = "standard") -> str:
    """Render one of the three context views for target."""
    target = Path(target).resolve()
    if view == "directory":
        return directory_context(target)
    if view == "project":
        return project_context(target)
    return standard_context(target)
