"""Rendering of the per-directory claude.md document."""

import re
from pathlib import Path
from typing import List, Tuple

from .models import DirectoryAnalysis

DOCUMENT_NAME = "claude.md"

KEY_FILE_RE = re.compile(r"^\d+\. `(?P<name>[^`]+)` \(importance (?P<importance>\d+)\)")


def _display_name(path: str, directory: str) -> str:
    try:
        return Path(path).relative_to(directory).as_posix()
    except ValueError:
        return path


def render_document(analysis: DirectoryAnalysis) -> str:
    """Render an analysis record as Markdown, most salient sections first."""
    directory = analysis.path
    lines = [f"# {Path(directory).name or directory}", ""]

    lines += ["## Purpose", analysis.purpose, ""]
    lines += ["## Architecture", analysis.architecture, ""]

    lines.append("## Key Files")
    if analysis.key_files:
        for rank, info in enumerate(analysis.key_files, start=1):
            name = _display_name(info.path, directory)
            lines.append(f"{rank}. `{name}` (importance {info.importance}) - {info.description}")
            if info.primary_functions:
                lines.append(f"   - Primary functions: {', '.join(info.primary_functions)}")
    else:
        lines.append("No files analyzed.")
    lines.append("")

    lines.append("## Recent Changes")
    if analysis.recent_changes:
        for change in analysis.recent_changes:
            date = change.date.strftime("%Y-%m-%d") if change.date else "unknown date"
            lines.append(f"- `{change.commit}` ({date}) {change.description} - {change.impact}")
    else:
        lines.append("No recent changes recorded.")
    lines.append("")

    lines.append("## Improvement Suggestions")
    if analysis.improvements:
        lines += [f"- {item}" for item in analysis.improvements]
    else:
        lines.append("No suggestions.")
    lines.append("")

    lines.append("## Dependencies")
    imports = [d for d in analysis.dependencies if d.kind == "import"]
    exports = [d for d in analysis.dependencies if d.kind == "export"]
    if not imports and not exports:
        lines.append("No dependencies detected.")
    if imports:
        lines.append("### Imports")
        for dep in imports:
            lines.append(f"- `{dep.source}` -> {_display_name(dep.target, directory)} ({dep.name})")
    if exports:
        lines.append("### Exports")
        for dep in exports:
            lines.append(f"- `{dep.name}` from {_display_name(dep.source, directory)}")
    lines.append("")

    return "\n".join(lines)


def write_document(analysis: DirectoryAnalysis) -> Path:
    path = Path(analysis.path) / DOCUMENT_NAME
    path.write_text(render_document(analysis), encoding="utf-8")
    return path


def parse_key_files(document: str) -> List[Tuple[str, int]]:
    """Read the ranked (name, importance) pairs back out of a document."""
    ranking = []
    in_section = False
    for line in document.splitlines():
        if line.startswith("## "):
            in_section = line.strip() == "## Key Files"
            continue
        if in_section:
            match = KEY_FILE_RE.match(line)
            if match:
                ranking.append((match.group("name"), int(match.group("importance"))))
    return ranking
