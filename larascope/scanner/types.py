"""Types for the structure scanner.

SourceStructure is what the regex scanner extracts from one PHP source;
FileReport wraps it with file metadata. FileListing is the output of a
directory listing.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class LineMetrics:
    total_lines: int = 0
    code_lines: int = 0
    comment_lines: int = 0
    blank_lines: int = 0

    def to_dict(self) -> dict:
        return {
            "total_lines": self.total_lines,
            "code_lines": self.code_lines,
            "comment_lines": self.comment_lines,
            "blank_lines": self.blank_lines,
        }


@dataclass
class ClassInfo:
    """A class declaration.

    kind is derived from the modifier (abstract/final), then the parent
    class, then the class name, e.g. "Controller" or "Regular Class".
    """

    name: str
    extends: Optional[str] = None
    implements: list[str] = field(default_factory=list)
    kind: str = "Regular Class"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "extends": self.extends,
            "implements": self.implements,
            "type": self.kind,
        }


@dataclass
class MethodInfo:
    name: str
    visibility: str
    is_static: bool = False

    def to_dict(self) -> dict:
        return {"name": self.name, "visibility": self.visibility, "is_static": self.is_static}


@dataclass
class EnumInfo:
    name: str
    backed_type: Optional[str] = None

    def to_dict(self) -> dict:
        return {"name": self.name, "backed_type": self.backed_type}


@dataclass
class SourceStructure:
    classes: list[ClassInfo] = field(default_factory=list)
    methods: list[MethodInfo] = field(default_factory=list)
    functions: list[str] = field(default_factory=list)
    traits: list[str] = field(default_factory=list)
    interfaces: list[str] = field(default_factory=list)
    enums: list[EnumInfo] = field(default_factory=list)
    metrics: LineMetrics = field(default_factory=LineMetrics)

    def to_dict(self) -> dict:
        return {
            "classes": [c.to_dict() for c in self.classes],
            "methods": [m.to_dict() for m in self.methods],
            "functions": self.functions,
            "traits": self.traits,
            "interfaces": self.interfaces,
            "enums": [e.to_dict() for e in self.enums],
            "metrics": self.metrics.to_dict(),
        }


@dataclass
class FileReport:
    """A single analysed file. content is already sanitised."""

    path: str
    content: str
    size_bytes: int
    category: str
    complexity_score: int
    structure: SourceStructure

    @property
    def lines(self) -> int:
        return self.structure.metrics.total_lines

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "content": self.content,
            "metadata": {
                "lines": self.lines,
                "size_bytes": self.size_bytes,
                "size_kb": round(self.size_bytes / 1024, 2),
                "category": self.category,
                "complexity_score": self.complexity_score,
            },
            "analysis": self.structure.to_dict(),
        }


@dataclass
class FileEntry:
    path: str
    name: str
    size: int
    modified: str
    category: str

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "name": self.name,
            "size": self.size,
            "size_kb": round(self.size / 1024, 2),
            "modified": self.modified,
            "category": self.category,
        }


@dataclass
class FileListing:
    files: list[FileEntry] = field(default_factory=list)
    truncated: bool = False

    def to_dict(self) -> dict:
        return {
            "total_files": len(self.files),
            "total_size_kb": round(sum(f.size for f in self.files) / 1024, 2),
            "truncated": self.truncated,
            "files": [f.to_dict() for f in self.files],
        }
