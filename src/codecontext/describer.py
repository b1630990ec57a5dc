"""Metadata-only file descriptions used before (or instead of) parsing."""

from datetime import datetime
from pathlib import Path
from typing import List

from .models import FileAnalysis

SOURCE_EXTENSIONS = {".ts", ".tsx", ".js", ".jsx", ".py"}

COMMON_FILES = {
    "package.json": "Node.js project manifest with dependencies and scripts",
    "tsconfig.json": "TypeScript compiler configuration",
    "webpack.config.js": "Webpack bundler configuration",
    "babel.config.js": "Babel transpiler configuration",
    ".eslintrc.json": "ESLint linting rules",
    ".gitignore": "Git ignore patterns",
    "README.md": "Project documentation and setup instructions",
    "Dockerfile": "Docker container configuration",
    "docker-compose.yml": "Docker Compose service definitions",
    ".env": "Environment variables (should be git-ignored)",
    "Makefile": "Build automation commands",
    "requirements.txt": "Python project dependencies",
    "pyproject.toml": "Python project metadata and build configuration",
    "setup.py": "Python package setup script",
    "go.mod": "Go module definition",
    "Cargo.toml": "Rust project manifest",
    "pom.xml": "Maven project configuration",
    "build.gradle": "Gradle build configuration",
}

# Compound suffixes come first so ".test.ts" wins over ".ts".
EXTENSION_DESCRIPTIONS = {
    ".test.ts": "TypeScript test file",
    ".test.js": "JavaScript test file",
    ".spec.ts": "TypeScript test specification",
    ".spec.js": "JavaScript test specification",
    ".d.ts": "TypeScript type declarations",
    ".ts": "TypeScript source file",
    ".tsx": "TypeScript React component",
    ".js": "JavaScript source file",
    ".jsx": "JavaScript React component",
    ".py": "Python source file",
    ".pyi": "Python type stub",
    ".go": "Go source file",
    ".java": "Java source file",
    ".cpp": "C++ source file",
    ".c": "C source file",
    ".rs": "Rust source file",
    ".vue": "Vue.js component",
    ".svelte": "Svelte component",
    ".css": "Stylesheet",
    ".scss": "SASS stylesheet",
    ".html": "HTML template",
    ".json": "JSON data file",
    ".yml": "YAML configuration file",
    ".yaml": "YAML configuration file",
    ".toml": "TOML configuration file",
    ".xml": "XML data file",
    ".sql": "SQL database script",
    ".sh": "Shell script",
    ".md": "Markdown documentation",
}

IMPORTANT_KEYWORDS = [
    "index", "main", "app", "server", "client",
    "package.json", "tsconfig.json", "webpack.config",
    "dockerfile", "docker-compose", ".env",
    "readme", "config", "setup", "install",
]

FUNCTION_KEYWORDS = {
    "index": ["Entry point", "Module exports"],
    "app": ["Application initialization", "Main app component"],
    "server": ["Server setup", "API endpoints"],
    "client": ["Client-side entry", "Browser initialization"],
    "config": ["Configuration management", "Environment setup"],
    "router": ["Route definitions", "Navigation setup"],
    "middleware": ["Request processing", "Authentication/Authorization"],
    "controller": ["Request handling", "Business logic coordination"],
    "service": ["Business logic", "External integrations"],
    "model": ["Data structure", "Database schema"],
    "utils": ["Helper functions", "Common utilities"],
    "constants": ["Shared constants", "Configuration values"],
    "types": ["Type definitions", "Interfaces"],
    "hooks": ["Custom React hooks", "State management"],
    "store": ["State management", "Data persistence"],
    "api": ["API client", "HTTP requests"],
    "auth": ["Authentication", "User management"],
    "database": ["Database connection", "Query execution"],
    "logger": ["Logging functionality", "Error tracking"],
    "validator": ["Input validation", "Data sanitization"],
    "parser": ["Data parsing", "Format conversion"],
    "formatter": ["Data formatting", "Output preparation"],
}


def is_test_file(name: str) -> bool:
    return ".test." in name or ".spec." in name or name.startswith("test_")


def describe_name(name: str) -> str:
    if name in COMMON_FILES:
        return COMMON_FILES[name]
    for suffix, description in EXTENSION_DESCRIPTIONS.items():
        if name.endswith(suffix):
            return description
    return f"{Path(name).suffix[1:].upper()} file"


def calculate_importance(name: str) -> int:
    lowered = name.lower()
    if any(keyword in lowered for keyword in IMPORTANT_KEYWORDS):
        return 10
    if is_test_file(name):
        return 3
    if Path(name).suffix.lower() in SOURCE_EXTENSIONS:
        return 7
    return 5


def guess_primary_functions(name: str) -> List[str]:
    stem = Path(name).stem.lower()
    for keyword, functions in FUNCTION_KEYWORDS.items():
        if keyword in stem:
            return list(functions)
    if is_test_file(name):
        return ["Unit tests", "Test cases"]
    return ["General functionality"]


def describe_file(path: Path) -> FileAnalysis:
    """Describe a file from its name and filesystem metadata only."""
    stat = path.stat()
    return FileAnalysis(
        path=str(path),
        description=describe_name(path.name),
        importance=calculate_importance(path.name),
        primary_functions=guess_primary_functions(path.name),
        last_modified=datetime.fromtimestamp(stat.st_mtime),
    )
