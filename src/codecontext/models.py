"""Data models for codecontext."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

# Marker used as the destination of export edges.
EXTERNAL = "external"


@dataclass
class FileAnalysis:
    """Description of a single file inside an analyzed directory."""

    path: str
    description: str
    importance: int
    primary_functions: List[str] = field(default_factory=list)
    last_modified: Optional[datetime] = None


@dataclass
class ImportEdge:
    source: str
    specifiers: List[str] = field(default_factory=list)
    kind: str = "named"  # named | default | namespace


@dataclass
class ExportDecl:
    name: str
    kind: str = "variable"  # function | class | interface | variable | type
    is_default: bool = False


@dataclass
class FunctionDecl:
    name: str
    params: List[str] = field(default_factory=list)
    is_async: bool = False
    is_exported: bool = False


@dataclass
class ClassDecl:
    name: str
    methods: List[str] = field(default_factory=list)
    is_exported: bool = False


@dataclass
class InterfaceDecl:
    name: str
    properties: List[str] = field(default_factory=list)
    is_exported: bool = False


@dataclass
class ParsedFile:
    """Structural summary of one source file."""

    imports: List[ImportEdge] = field(default_factory=list)
    exports: List[ExportDecl] = field(default_factory=list)
    functions: List[FunctionDecl] = field(default_factory=list)
    classes: List[ClassDecl] = field(default_factory=list)
    interfaces: List[InterfaceDecl] = field(default_factory=list)
    main_purpose: str = ""

    @property
    def exported_functions(self) -> List[FunctionDecl]:
        return [f for f in self.functions if f.is_exported]


@dataclass
class Dependency:
    """Directional, unresolved link between a module reference and a file."""

    name: str
    kind: str  # import | export | external
    source: str
    target: str


@dataclass
class Change:
    commit: str
    date: Optional[datetime]
    description: str
    impact: str = "Code changes"
    files: List[str] = field(default_factory=list)


@dataclass
class DirectoryAnalysis:
    """Aggregated summary of one directory, persisted as its document."""

    path: str
    purpose: str
    architecture: str
    key_files: List[FileAnalysis] = field(default_factory=list)
    recent_changes: List[Change] = field(default_factory=list)
    improvements: List[str] = field(default_factory=list)
    dependencies: List[Dependency] = field(default_factory=list)
