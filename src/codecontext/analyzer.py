"""Directory analysis: per-file facts, dependency edges and heuristics."""

import logging
import os
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .config import ProjectConfig
from .describer import SOURCE_EXTENSIONS, describe_file, is_test_file
from .documentation import DOCUMENT_NAME, write_document
from .git import GitClient, find_repository_root
from .ignore import IgnoreFilter
from .models import EXTERNAL, Change, DirectoryAnalysis, Dependency, FileAnalysis, ParsedFile
from .parser import parse_source_file

logger = logging.getLogger(__name__)

MAX_KEY_FILES = 10
MAX_COMMITS = 5

DIRECTORY_PURPOSES = {
    "src": "Source code directory containing the main application logic",
    "components": "React/Vue/Angular components for the user interface",
    "utils": "Utility functions and helper modules",
    "services": "Service layer for business logic and external integrations",
    "models": "Data models and database schemas",
    "controllers": "Request handlers and route controllers",
    "views": "View templates and UI layouts",
    "tests": "Test files and test utilities",
    "config": "Configuration files and environment settings",
    "scripts": "Build scripts and automation tools",
    "docs": "Documentation files and guides",
    "public": "Static assets served directly to users",
    "assets": "Images, fonts, and other media files",
    "styles": "CSS, SCSS, or other styling files",
    "api": "API endpoints and route definitions",
    "lib": "Third-party libraries or custom library code",
    "types": "TypeScript type definitions",
    "interfaces": "Interface definitions",
    "constants": "Application constants and configuration values",
    "middleware": "Express/Koa middleware functions",
    "hooks": "React hooks or other framework hooks",
    "store": "State management (Redux, Vuex, etc.)",
    "actions": "Redux/Flux actions",
    "reducers": "Redux reducers",
    "mutations": "Vuex mutations",
    "queries": "Database queries or GraphQL queries",
    "migrations": "Database migration files",
    "seeds": "Database seed files",
}

EXTENSION_PURPOSES = {
    ".tsx": "Contains React components and UI elements",
    ".jsx": "Contains React components and UI elements",
    ".vue": "Contains Vue.js components",
    ".py": "Python modules and scripts",
    ".go": "Go language source files",
    ".ts": "TypeScript modules",
    ".js": "JavaScript modules",
    ".md": "Documentation and notes",
}


def _has_type_definitions(name: str) -> bool:
    return name.endswith(".d.ts") or "types" in name


def directory_purpose(dir_path: Path, files: List[FileAnalysis]) -> str:
    name = dir_path.name
    if name in DIRECTORY_PURPOSES:
        return DIRECTORY_PURPOSES[name]
    extensions = Counter(Path(f.path).suffix for f in files if Path(f.path).suffix)
    if extensions:
        dominant = extensions.most_common(1)[0][0]
        if dominant in EXTENSION_PURPOSES:
            return EXTENSION_PURPOSES[dominant]
    return f"Contains {len(files)} files related to {name}"


def architecture_insights(files: List[FileAnalysis], dependencies: List[Dependency]) -> str:
    insights = []

    extensions = Counter(Path(f.path).suffix for f in files if Path(f.path).suffix)
    if extensions:
        ext, count = extensions.most_common(1)[0]
        insights.append(f"Primarily {ext} files ({count} {'file' if count == 1 else 'files'})")

    external = []
    for dep in dependencies:
        if dep.kind == "import" and not dep.source.startswith(".") and dep.source not in external:
            external.append(dep.source)
    if external:
        more = " and others" if len(external) > 3 else ""
        insights.append(f"Uses {', '.join(external[:3])}{more}")

    names = [Path(f.path).name for f in files]
    if any(is_test_file(n) for n in names):
        insights.append("Includes test files")
    if any(_has_type_definitions(n) for n in names):
        insights.append("Has TypeScript type definitions")

    return ". ".join(insights) or "Standard module structure"


def suggest_improvements(files: List[FileAnalysis]) -> List[str]:
    improvements = []
    names = [Path(f.path).name for f in files]

    has_tests = any(is_test_file(n) for n in names)
    has_code = any(Path(n).suffix in SOURCE_EXTENSIONS for n in names)
    if has_code and not has_tests:
        improvements.append("Add unit tests for the source files in this directory")

    if "readme.md" not in {n.lower() for n in names} and len(files) > 5:
        improvements.append("Add README.md for better documentation")

    has_js = any(Path(n).suffix in {".js", ".jsx"} for n in names)
    if has_js and not any(n.endswith(".d.ts") for n in names):
        improvements.append("Consider adding TypeScript or type definitions")

    return improvements


def dependency_edges(file_path: str, parsed: ParsedFile) -> List[Dependency]:
    edges = [
        Dependency(
            name=", ".join(imp.specifiers) or imp.source,
            kind="import",
            source=imp.source,
            target=file_path,
        )
        for imp in parsed.imports
    ]
    edges += [
        Dependency(name=exp.name, kind="export", source=file_path, target=EXTERNAL)
        for exp in parsed.exports
    ]
    return edges


def walk_directories(root: Path, ignore_filter: IgnoreFilter) -> List[Path]:
    """Depth-first list of every non-ignored directory under root, root first."""
    root = root.resolve()
    directories = []
    visited = set()
    stack = [root]

    while stack:
        current = stack.pop()
        real = current.resolve()
        if real in visited:
            continue
        visited.add(real)
        directories.append(current)

        try:
            with os.scandir(current) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            logger.debug(f"Skipping unreadable directory {current}: {e}")
            continue

        children = []
        for entry in entries:
            if entry.name.startswith("."):
                continue
            try:
                if not entry.is_dir():
                    continue
            except OSError:
                continue
            child = current / entry.name
            relative = child.relative_to(root).as_posix()
            if ignore_filter.ignores(relative, is_dir=True):
                continue
            children.append(child)
        stack.extend(reversed(children))

    return directories


class DirectoryAnalyzer:
    """Builds and persists a DirectoryAnalysis for one directory at a time."""

    def __init__(
        self,
        config: ProjectConfig,
        root: Optional[Path] = None,
        git: Optional[GitClient] = None,
        enricher=None,
        workers: int = 4,
    ):
        self.config = config
        self.root = root.resolve() if root else None
        self.git = git
        self.enricher = enricher
        self.workers = workers
        self.ignore_filter = IgnoreFilter(config.ignore_patterns)

    @property
    def ai_enabled(self) -> bool:
        return (
            self.config.mode != "quick"
            and self.enricher is not None
            and self.enricher.is_available()
        )

    def _relative(self, path: Path) -> str:
        if self.root is not None:
            try:
                return path.resolve().relative_to(self.root).as_posix()
            except ValueError:
                pass
        return path.name

    def _list_files(self, dir_path: Path) -> List[Path]:
        files = []
        for name in sorted(os.listdir(dir_path)):
            if name.startswith(".") or name == DOCUMENT_NAME:
                continue
            path = dir_path / name
            try:
                is_file = path.is_file()
            except OSError:
                continue
            if self.ignore_filter.ignores(self._relative(path), is_dir=not is_file):
                continue
            if is_file:
                files.append(path)
        return files

    def _analyze_file(self, path: Path) -> Optional[Tuple[FileAnalysis, Optional[ParsedFile]]]:
        try:
            info = describe_file(path)
        except OSError as e:
            logger.debug(f"Skipping unreadable file {path}: {e}")
            return None

        try:
            parsed = parse_source_file(path)
        except Exception as e:
            logger.warning(f"Structural analysis failed for {path}, using file metadata: {e!r}")
            parsed = None
        if parsed is None:
            return info, None

        info.description = parsed.main_purpose or info.description
        if self.ai_enabled:
            try:
                content = path.read_text(encoding="utf-8")
                info.description = self.enricher.describe_file(str(path), content, parsed)
            except Exception as e:
                logger.warning(f"AI description failed for {path}, using parsed purpose: {e}")

        exported = parsed.exported_functions
        if exported:
            info.primary_functions = [f"{f.name}({', '.join(f.params)})" for f in exported[:3]]
        return info, parsed

    def _recent_changes(self, dir_path: Path) -> List[Change]:
        if self.git is None:
            return []
        repo_root = find_repository_root(dir_path)
        if repo_root is None:
            return []
        return [
            Change(commit=commit.id[:7], date=commit.date, description=commit.message)
            for commit in self.git.recent_commits(repo_root, MAX_COMMITS)
        ]

    def analyze(self, dir_path: Path) -> DirectoryAnalysis:
        """Analyze one directory and write its claude.md document."""
        dir_path = Path(dir_path)
        files = self._list_files(dir_path)

        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            results = list(pool.map(self._analyze_file, files))

        file_analyses: List[FileAnalysis] = []
        parsed_files: Dict[str, ParsedFile] = {}
        dependencies: List[Dependency] = []
        for result in results:
            if result is None:
                continue
            info, parsed = result
            file_analyses.append(info)
            if parsed is not None:
                parsed_files[info.path] = parsed
                dependencies.extend(dependency_edges(info.path, parsed))

        recent_changes = self._recent_changes(dir_path)

        purpose = directory_purpose(dir_path, file_analyses)
        architecture = architecture_insights(file_analyses, dependencies)
        improvements = suggest_improvements(file_analyses)

        if self.ai_enabled:
            try:
                insights = self.enricher.analyze_directory(
                    str(dir_path), file_analyses, parsed_files, self.config.mode
                )
                purpose = insights.get("purpose") or purpose
                architecture = insights.get("architecture") or architecture
                improvements = list(insights.get("improvements") or []) or improvements
            except Exception as e:
                logger.warning(f"AI analysis failed for {dir_path}, using heuristics: {e}")

        analysis = DirectoryAnalysis(
            path=str(dir_path),
            purpose=purpose,
            architecture=architecture,
            key_files=sorted(file_analyses, key=lambda f: f.importance, reverse=True)[:MAX_KEY_FILES],
            recent_changes=recent_changes,
            improvements=improvements,
            dependencies=dependencies,
        )

        if self.ai_enabled and self.config.mode == "deep":
            try:
                suggestions = self.enricher.suggest_improvements(analysis, self.config.mode)
                if suggestions:
                    analysis.improvements = list(suggestions)
            except Exception as e:
                logger.warning(f"AI suggestions failed for {dir_path}: {e}")

        write_document(analysis)
        logger.debug(f"Documented {dir_path} ({len(file_analyses)} files)")
        return analysis

    def analyze_project(self, root: Optional[Path] = None) -> List[DirectoryAnalysis]:
        """Walk the project and analyze every directory found."""
        root = Path(root).resolve() if root else self.root
        if root is None:
            raise ValueError("A project root is required")
        if self.root is None:
            self.root = root
        records = []
        for directory in walk_directories(root, self.ignore_filter):
            try:
                records.append(self.analyze(directory))
            except OSError as e:
                logger.warning(f"Skipping {directory}: {e}")
        return records
