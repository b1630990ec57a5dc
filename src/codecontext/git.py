"""Version-control access through the git executable."""

import logging
import os
import stat
import subprocess
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

HOOK_MARKER = "# codecontext post-commit hook"

POST_COMMIT_HOOK = f"""#!/bin/sh
{HOOK_MARKER}
# Automatically update documentation after commits

codecontext refresh
"""


@dataclass
class Commit:
    id: str
    date: Optional[datetime]
    message: str


def find_repository_root(path: Path) -> Optional[Path]:
    """Walk upward from path to the nearest directory holding a .git entry."""
    path = path.resolve()
    for candidate in (path, *path.parents):
        if (candidate / ".git").exists():
            return candidate
    return None


class GitClient:
    """Runs git with a bounded wait; every failure degrades to empty results."""

    def __init__(self, timeout: float = 10.0, executable: str = "git"):
        self.timeout = timeout
        self.executable = executable

    def _run(self, cwd: Path, *args: str) -> Optional[str]:
        try:
            result = subprocess.run(
                [self.executable, *args],
                cwd=str(cwd),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug(f"git {' '.join(args)} failed in {cwd}: {e}")
            return None
        if result.returncode != 0:
            logger.debug(f"git {' '.join(args)} exited {result.returncode}: {result.stderr.strip()}")
            return None
        return result.stdout

    def changed_files(self, root: Path) -> List[str]:
        """Modified, added and renamed (destination) files relative to root."""
        root = root.resolve()
        repo_root = find_repository_root(root)
        if repo_root is None:
            return []
        output = self._run(root, "-c", "core.quotepath=off", "status", "--porcelain=v1", "-z")
        if output is None:
            return []

        changed = []
        entries = output.split("\0")
        i = 0
        while i < len(entries):
            entry = entries[i]
            i += 1
            if len(entry) < 4:
                continue
            index_status, worktree_status, path = entry[0], entry[1], entry[3:]
            if index_status in ("R", "C"):
                # Rename entries are followed by their source path.
                i += 1
                changed.append(path)
            elif "M" in (index_status, worktree_status) or index_status == "A":
                changed.append(path)

        relative = []
        for path in changed:
            try:
                relative.append((repo_root / path).relative_to(root).as_posix())
            except ValueError:
                continue
        return relative

    def recent_commits(self, root: Path, limit: int = 5) -> List[Commit]:
        output = self._run(
            root, "log", f"--max-count={limit}", "--format=%H%x1f%aI%x1f%s%x1e"
        )
        if not output:
            return []
        commits = []
        for record in output.split("\x1e"):
            record = record.strip()
            if not record:
                continue
            fields = record.split("\x1f")
            if len(fields) != 3:
                continue
            commit_id, date, message = fields
            try:
                parsed_date: Optional[datetime] = datetime.fromisoformat(date)
            except ValueError:
                parsed_date = None
            commits.append(Commit(id=commit_id, date=parsed_date, message=message))
        return commits


def install_post_commit_hook(repo_root: Path) -> bool:
    """Install a hook that refreshes documentation after each commit.

    Returns False when repo_root is not a repository or a foreign hook
    already exists.
    """
    git_dir = repo_root / ".git"
    if not git_dir.is_dir():
        return False
    hooks_dir = git_dir / "hooks"
    hooks_dir.mkdir(parents=True, exist_ok=True)
    hook_path = hooks_dir / "post-commit"
    if hook_path.exists() and HOOK_MARKER not in hook_path.read_text(encoding="utf-8", errors="ignore"):
        logger.warning(f"Leaving existing hook untouched: {hook_path}")
        return False
    hook_path.write_text(POST_COMMIT_HOOK, encoding="utf-8")
    mode = os.stat(hook_path).st_mode
    hook_path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return True
