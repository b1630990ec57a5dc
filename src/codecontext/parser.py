"""Best-effort structural extraction from source files.

This is a tolerant, pattern-based extractor rather than a real parser. It
accepts false positives and negatives in exchange for needing no compiler
front end; callers should treat the result as a summary, not as ground truth.
"""

import ast
import logging
import re
from pathlib import Path
from typing import List, Optional

from .models import (
    ClassDecl,
    ExportDecl,
    FunctionDecl,
    ImportEdge,
    InterfaceDecl,
    ParsedFile,
)

logger = logging.getLogger(__name__)

SCRIPT_EXTENSIONS = {".ts", ".tsx", ".js", ".jsx"}
PYTHON_EXTENSIONS = {".py"}
PARSEABLE_EXTENSIONS = SCRIPT_EXTENSIONS | PYTHON_EXTENSIONS

UI_MARKERS = ("react", "tkinter", "pyqt", "pyside")
SERVER_MARKERS = ("express", "flask", "fastapi", "django")

GENERIC_PURPOSE = "Module implementation"

IMPORT_RE = re.compile(
    r"""import\s+(?:type\s+)?(?:(\*\s+as\s+\w+)|(\w+)|(\{[^}]+\}))\s+from\s+['"]([^'"]+)['"]"""
)
DEFAULT_IMPORT_RE = re.compile(r"""import\s+(\w+)\s+from\s+['"]([^'"]+)['"]""")
EXPORT_RE = re.compile(
    r"export\s+(default\s+)?(?:async\s+)?(const|let|var|function|class|interface|type)\s+(\w+)"
)
EXPORT_DEFAULT_RE = re.compile(
    r"export\s+default\s+(?!(?:async|function|class|interface|type|const|let|var)\b)(\w+)"
)
FUNCTION_RE = re.compile(
    r"(export\s+(?:default\s+)?)?(async\s+)?function\s+(\w+)\s*\(([^)]*)\)"
)
ARROW_RE = re.compile(r"(export\s+)?const\s+(\w+)\s*=\s*(async\s+)?\([^)]*\)\s*=>")
CLASS_RE = re.compile(r"(export\s+(?:default\s+)?)?class\s+(\w+)(?:\s+extends\s+[\w.]+)?[^{]*\{")
METHOD_RE = re.compile(r"(?:async\s+)?(\w+)\s*\([^)]*\)\s*(?::\s*[^{;]+)?\{")
INTERFACE_RE = re.compile(
    r"(export\s+)?interface\s+(\w+)\s*(?:extends\s+[^{]+)?\{([^}]+)\}"
)
PROPERTY_RE = re.compile(r"(\w+)\s*[?:]?\s*:")

EXPORT_KINDS = {
    "function": "function",
    "class": "class",
    "interface": "interface",
    "type": "type",
    "const": "variable",
    "let": "variable",
    "var": "variable",
}
NOT_METHODS = {"constructor", "if", "for", "while", "switch", "catch", "function", "return"}


def _block_body(content: str, open_brace: int) -> str:
    """Return the text between the brace at open_brace and its partner."""
    depth = 0
    for i in range(open_brace, len(content)):
        if content[i] == "{":
            depth += 1
        elif content[i] == "}":
            depth -= 1
            if depth == 0:
                return content[open_brace + 1:i]
    return content[open_brace + 1:]


class SourceParser:
    """Extracts imports, exports and declarations from source text."""

    @staticmethod
    def analyze_javascript(content: str) -> ParsedFile:
        """Extract structure from JavaScript/TypeScript with regular expressions."""
        result = ParsedFile()

        for match in IMPORT_RE.finditer(content):
            namespace, default, named, source = match.groups()
            if namespace:
                result.imports.append(ImportEdge(
                    source=source,
                    specifiers=[re.sub(r"\*\s+as\s+", "", namespace)],
                    kind="namespace",
                ))
            elif default:
                if not any(i.source == source and i.kind == "default" for i in result.imports):
                    result.imports.append(ImportEdge(source=source, specifiers=[default], kind="default"))
            elif named:
                names = [s.strip() for s in named.strip("{}").split(",") if s.strip()]
                result.imports.append(ImportEdge(source=source, specifiers=names, kind="named"))

        for match in DEFAULT_IMPORT_RE.finditer(content):
            name, source = match.groups()
            if not any(i.source == source and i.kind == "default" for i in result.imports):
                result.imports.append(ImportEdge(source=source, specifiers=[name], kind="default"))

        for match in EXPORT_RE.finditer(content):
            default, keyword, name = match.groups()
            result.exports.append(ExportDecl(
                name=name,
                kind=EXPORT_KINDS[keyword],
                is_default=bool(default),
            ))

        for match in EXPORT_DEFAULT_RE.finditer(content):
            name = match.group(1)
            if not any(e.name == name and e.is_default for e in result.exports):
                result.exports.append(ExportDecl(name=name, kind="variable", is_default=True))

        for match in FUNCTION_RE.finditer(content):
            exported, is_async, name, params = match.groups()
            result.functions.append(FunctionDecl(
                name=name,
                params=[p.strip().split()[0] for p in params.split(",") if p.strip()],
                is_async=bool(is_async),
                is_exported=bool(exported),
            ))

        # Arrow function parameters are not decomposed.
        for match in ARROW_RE.finditer(content):
            exported, name, is_async = match.groups()
            result.functions.append(FunctionDecl(
                name=name,
                params=[],
                is_async=bool(is_async),
                is_exported=bool(exported),
            ))

        for match in CLASS_RE.finditer(content):
            exported, name = match.groups()
            body = _block_body(content, match.end() - 1)
            methods = [
                m.group(1) for m in METHOD_RE.finditer(body)
                if m.group(1) not in NOT_METHODS
            ]
            result.classes.append(ClassDecl(name=name, methods=methods, is_exported=bool(exported)))

        for match in INTERFACE_RE.finditer(content):
            exported, name, body = match.groups()
            result.interfaces.append(InterfaceDecl(
                name=name,
                properties=PROPERTY_RE.findall(body),
                is_exported=bool(exported),
            ))

        return result

    @staticmethod
    def analyze_python(content: str) -> ParsedFile:
        """Extract top-level structure from Python code.

        Raises SyntaxError or ValueError when the source does not compile.
        """
        tree = ast.parse(content)
        result = ParsedFile()
        public_names: Optional[List[str]] = None

        for node in tree.body:
            if isinstance(node, ast.Assign) and any(
                isinstance(t, ast.Name) and t.id == "__all__" for t in node.targets
            ):
                if isinstance(node.value, (ast.List, ast.Tuple)):
                    public_names = [
                        elt.value for elt in node.value.elts
                        if isinstance(elt, ast.Constant) and isinstance(elt.value, str)
                    ]

        def is_public(name: str) -> bool:
            if public_names is not None:
                return name in public_names
            return not name.startswith("_")

        for node in tree.body:
            if isinstance(node, ast.Import):
                for alias in node.names:
                    result.imports.append(ImportEdge(
                        source=alias.name,
                        specifiers=[alias.asname or alias.name],
                        kind="namespace",
                    ))
            elif isinstance(node, ast.ImportFrom):
                source = "." * node.level + (node.module or "")
                names = [alias.asname or alias.name for alias in node.names]
                kind = "namespace" if names == ["*"] else "named"
                result.imports.append(ImportEdge(source=source, specifiers=names, kind=kind))
            elif isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
                exported = is_public(node.name)
                result.functions.append(FunctionDecl(
                    name=node.name,
                    params=[arg.arg for arg in node.args.args],
                    is_async=isinstance(node, ast.AsyncFunctionDef),
                    is_exported=exported,
                ))
                if exported:
                    result.exports.append(ExportDecl(name=node.name, kind="function"))
            elif isinstance(node, ast.ClassDef):
                exported = is_public(node.name)
                bases = {getattr(base, "id", getattr(base, "attr", "")) for base in node.bases}
                if bases & {"Protocol", "TypedDict"}:
                    properties = [
                        stmt.target.id for stmt in node.body
                        if isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name)
                    ]
                    result.interfaces.append(InterfaceDecl(
                        name=node.name, properties=properties, is_exported=exported
                    ))
                    kind = "interface"
                else:
                    methods = [
                        stmt.name for stmt in node.body
                        if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef))
                        and stmt.name != "__init__"
                    ]
                    result.classes.append(ClassDecl(
                        name=node.name, methods=methods, is_exported=exported
                    ))
                    kind = "class"
                if exported:
                    result.exports.append(ExportDecl(name=node.name, kind=kind))

        return result


def determine_purpose(parsed: ParsedFile, filename: str) -> str:
    """Guess a one-line purpose from the structure and the file name."""
    stem = Path(filename).stem.lower()

    if "test" in stem or "spec" in stem:
        return "Test suite for unit testing"
    if stem == "index":
        return "Module entry point that exports public API"
    if parsed.classes:
        main_class = parsed.classes[0]
        return f"Defines {main_class.name} class with {len(main_class.methods)} methods"
    if parsed.interfaces:
        return f"Type definitions including {', '.join(i.name for i in parsed.interfaces)}"
    exported = parsed.exported_functions
    if exported:
        return f"Provides {', '.join(f.name for f in exported)} functionality"
    sources = [i.source.lower() for i in parsed.imports]
    if any(marker in source for source in sources for marker in UI_MARKERS):
        return "React component" if any("react" in s for s in sources) else "UI component"
    if any(marker in source for source in sources for marker in SERVER_MARKERS):
        return "Express server/middleware" if any("express" in s for s in sources) else "Web server/middleware"
    return GENERIC_PURPOSE


def parse_text(content: str, filename: str) -> Optional[ParsedFile]:
    """Parse source text; returns None for extensions that are not parsed."""
    suffix = Path(filename).suffix.lower()
    if suffix in SCRIPT_EXTENSIONS:
        result = SourceParser.analyze_javascript(content)
    elif suffix in PYTHON_EXTENSIONS:
        result = SourceParser.analyze_python(content)
    else:
        return None
    result.main_purpose = determine_purpose(result, filename)
    return result


def parse_source_file(path: Path) -> Optional[ParsedFile]:
    """Read and parse one file; unreadable or broken files yield None."""
    if path.suffix.lower() not in PARSEABLE_EXTENSIONS:
        return None
    try:
        content = path.read_text(encoding="utf-8")
        return parse_text(content, path.name)
    except (OSError, UnicodeDecodeError, SyntaxError, ValueError) as e:
        logger.warning(f"Could not parse {path}: {e}")
        return None
