"""Gitignore-style path filtering."""

from typing import Iterable

import pathspec


def normalize_path(path: str) -> str:
    """Use forward slashes and drop leading ./ or / segments."""
    path = str(path).replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path.strip("/")


class IgnoreFilter:
    """Classifies relative paths against an ordered list of ignore patterns.

    Later patterns take precedence, so a ``!pattern`` may re-include a path
    excluded by an earlier rule. As in git, a path cannot be re-included once
    one of its parent directories is excluded.
    """

    def __init__(self, patterns: Iterable[str] = ()):
        self.patterns = list(patterns)
        self.spec = pathspec.PathSpec.from_lines("gitwildmatch", self.patterns)

    def _ignored_single(self, path: str, is_dir: bool) -> bool:
        # directory-only patterns match the trailing slash form
        return self.spec.match_file(f"{path}/" if is_dir else path)

    def ignores(self, path: str, is_dir: bool = False) -> bool:
        path = normalize_path(path)
        if not path:
            return False
        parts = path.split("/")
        for depth in range(1, len(parts)):
            if self._ignored_single("/".join(parts[:depth]), True):
                return True
        return self._ignored_single(path, is_dir)

    def included(self, path: str, is_dir: bool = False) -> bool:
        return not self.ignores(path, is_dir)
