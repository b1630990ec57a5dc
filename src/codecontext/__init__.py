"""
CodeContext - per-directory documentation for AI coding sessions.

Keeps a claude.md file in every directory of a project describing its
purpose, key files, recent changes and dependencies.
"""

__version__ = "0.1.0"

from .analyzer import DirectoryAnalyzer, walk_directories
from .context import synthesize
from .ignore import IgnoreFilter
from .parser import parse_text

__all__ = [
    "DirectoryAnalyzer",
    "IgnoreFilter",
    "parse_text",
    "synthesize",
    "walk_directories",
    "__version__",
]
