"""Choosing which directories a refresh should re-analyze."""

import logging
from pathlib import Path
from typing import List, Optional, Set

from .analyzer import walk_directories
from .git import GitClient
from .ignore import IgnoreFilter

logger = logging.getLogger(__name__)


def plan_refresh(root: Path, git: Optional[GitClient]) -> Set[Path]:
    """Parent directories of every file changed since the last commit."""
    if git is None:
        return set()
    root = root.resolve()
    directories = {(root / changed).parent for changed in git.changed_files(root)}
    logger.debug(f"Planned {len(directories)} directories for refresh")
    return {d for d in directories if d.is_dir()}


def resolve_scope(
    root: Path,
    ignore_filter: IgnoreFilter,
    git: Optional[GitClient] = None,
    path: Optional[Path] = None,
    all_: bool = False,
) -> List[Path]:
    """Directories to analyze: an explicit path, the whole tree, or the plan."""
    root = root.resolve()
    if path is not None:
        return [(root / path).resolve()]
    if all_:
        return walk_directories(root, ignore_filter)
    return sorted(plan_refresh(root, git))
