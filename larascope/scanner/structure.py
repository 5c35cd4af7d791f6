"""Regex-based PHP structure scanner.

Extracts classes, methods, functions, traits, interfaces and enums from
PHP source with regular expressions after stripping comments and string
literals. This is a lightweight text scanner, not a parser: it trades
precision for speed and zero dependencies on a PHP toolchain.

Also lists PHP files under a directory and scores how closely the
project follows the conventional Laravel directory layout.
"""

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Optional

from larascope.core.security import SecurityError, SecurityValidator
from larascope.scanner.types import (
    ClassInfo,
    EnumInfo,
    FileEntry,
    FileListing,
    FileReport,
    LineMetrics,
    MethodInfo,
    SourceStructure,
)

logger = logging.getLogger(__name__)

# Files larger than this are rejected by read_file().
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024

# Directories a conventional Laravel project is expected to have.
EXPECTED_DIRECTORIES: tuple[str, ...] = (
    "app/Models",
    "app/Http/Controllers",
    "app/Http/Middleware",
    "app/Providers",
    "app/Services",
    "app/Repositories",
    "database/migrations",
    "resources/views",
    "routes",
    "tests",
)

# Path segment → file category. First match wins.
_PATH_CATEGORIES: list[tuple[str, str]] = [
    ("/Models/", "Model"),
    ("/Repositories/", "Repository"),
    ("/Services/", "Service"),
    ("/Service/", "Service"),
    ("/Controllers/", "Controller"),
    ("/DTO/", "DTO"),
    ("/Enums/", "Enum"),
    ("/Exceptions/", "Exception"),
    ("/Providers/", "Provider"),
    ("/Middleware/", "Middleware"),
    ("/Tests/", "Test"),
    ("/migrations/", "Migration"),
    ("/Gateways/", "Gateway"),
    ("/Factories/", "Factory"),
    ("/Observers/", "Observer"),
    ("/Events/", "Event"),
    ("/Listeners/", "Listener"),
    ("/Jobs/", "Job"),
    ("/Mail/", "Mail"),
    ("/Notifications/", "Notification"),
    ("/Policies/", "Policy"),
    ("/Resources/", "Resource"),
    ("/Rules/", "Rule"),
    ("/Scopes/", "Scope"),
]

_CLASS_NAME_BLACKLIST = {
    "but", "and", "or", "the", "is", "was", "found", "ownership",
    "class", "function", "method", "property", "variable", "array",
    "string", "int", "bool", "float", "object", "resource", "null",
    "true", "false",
}
_METHOD_NAME_BLACKLIST = {"function", "method", "call", "invoke", "execute"}

_CLASS_NAME_RE = re.compile(r"^[A-Z][a-zA-Z0-9_]*$")
_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

# Comment / literal stripping, applied in order.
_STRIP_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"//.*$", re.MULTILINE), ""),
    (re.compile(r"^\s*#.*$", re.MULTILINE), ""),
    (re.compile(r"/\*.*?\*/", re.DOTALL), ""),
    (re.compile(r"'(?:\\.|[^\\'])*'"), "''"),
    (re.compile(r'"(?:\\.|[^\\"])*"'), '""'),
    (re.compile(r"<<<['\"]?(\w+)['\"]?.*?^\1;$", re.MULTILINE | re.DOTALL), ""),
]

_CLASS_PATTERN = re.compile(
    r"^\s*(?:(abstract|final)\s+)?class\s+(\w+)"
    r"(?:\s+extends\s+(\w+))?"
    r"(?:\s+implements\s+([\w,\s\\]+))?\s*\{",
    re.MULTILINE | re.IGNORECASE,
)
_METHOD_PATTERN = re.compile(
    r"(public|private|protected)\s+(?:static\s+)?function\s+(\w+)\s*\([^)]*\)",
    re.IGNORECASE,
)
_ENUM_PATTERN = re.compile(r"^\s*enum\s+(\w+)(?:\s*:\s*(\w+))?", re.MULTILINE | re.IGNORECASE)
_FUNCTION_PATTERN = re.compile(r"^\s*function\s+(\w+)\s*\(", re.MULTILINE)
_TRAIT_PATTERN = re.compile(r"^\s*trait\s+(\w+)", re.MULTILINE | re.IGNORECASE)
_INTERFACE_PATTERN = re.compile(r"^\s*interface\s+(\w+)", re.MULTILINE | re.IGNORECASE)


# ---------------------------------------------------------------------------
# Pure source analysis
# ---------------------------------------------------------------------------

def analyze_source(content: str) -> SourceStructure:
    """Extract the declaration structure of one PHP source string."""
    clean = strip_strings_and_comments(content)

    methods = [
        MethodInfo(
            name=match.group(2),
            visibility=match.group(1).lower(),
            is_static="static" in match.group(0).lower(),
        )
        for match in _METHOD_PATTERN.finditer(clean)
        if _is_valid_method_name(match.group(2))
    ]

    enums = [
        EnumInfo(name=match.group(1), backed_type=match.group(2))
        for match in _ENUM_PATTERN.finditer(clean)
        if _is_valid_class_name(match.group(1))
    ]

    return SourceStructure(
        classes=_extract_classes(clean, content),
        methods=methods,
        functions=_unique_valid(_FUNCTION_PATTERN.findall(clean), _is_valid_method_name),
        traits=_unique_valid(_TRAIT_PATTERN.findall(clean), _is_valid_class_name),
        interfaces=_unique_valid(_INTERFACE_PATTERN.findall(clean), _is_valid_class_name),
        enums=enums,
        metrics=line_metrics(content),
    )


def line_metrics(content: str) -> LineMetrics:
    lines = content.split("\n")
    metrics = LineMetrics(total_lines=len(lines))
    for line in lines:
        trimmed = line.strip()
        if not trimmed:
            metrics.blank_lines += 1
        elif trimmed.startswith(("//", "#", "/*", "*")):
            metrics.comment_lines += 1
        else:
            metrics.code_lines += 1
    return metrics


def strip_strings_and_comments(content: str) -> str:
    for pattern, replacement in _STRIP_PATTERNS:
        content = pattern.sub(replacement, content)
    return content


def complexity_score(structure: SourceStructure) -> int:
    return (
        len(structure.classes) * 3
        + len(structure.methods) * 2
        + len(structure.functions) * 2
        + len(structure.interfaces)
        + len(structure.traits)
        + len(structure.enums)
    )


def categorize_file(file_path: str) -> str:
    """Map a path to a coarse category based on its directory segments."""
    for segment, category in _PATH_CATEGORIES:
        if segment in file_path:
            return category
    return "Other"


def _extract_classes(clean: str, original: str) -> list[ClassInfo]:
    classes: list[ClassInfo] = []
    for match in _CLASS_PATTERN.finditer(clean):
        modifier, name, extends, implements = match.groups()
        if not _is_valid_class_name(name):
            continue
        classes.append(
            ClassInfo(
                name=name,
                extends=extends or None,
                implements=[i.strip() for i in implements.split(",") if i.strip()] if implements else [],
                kind=_class_kind(original, name, modifier),
            )
        )
    return classes


def _class_kind(content: str, class_name: str, modifier: Optional[str]) -> str:
    if modifier and modifier.lower() == "abstract":
        return "Abstract Class"
    if modifier and modifier.lower() == "final":
        return "Final Class"

    parent_match = re.search(
        rf"class\s+{re.escape(class_name)}\s+extends\s+(\w+)", content, re.IGNORECASE
    )
    if parent_match:
        parent = parent_match.group(1)
        for marker in ("Controller", "Model", "Exception", "Middleware"):
            if marker in parent:
                return marker
        return "Extended Class"

    for marker in ("Controller", "Model", "Service", "Repository", "Gateway", "Factory"):
        if marker in class_name:
            return marker
    return "Regular Class"


def _is_valid_class_name(name: str) -> bool:
    return (
        name.lower() not in _CLASS_NAME_BLACKLIST
        and bool(_CLASS_NAME_RE.match(name))
        and len(name) > 1
    )


def _is_valid_method_name(name: str) -> bool:
    return (
        name.lower() not in _METHOD_NAME_BLACKLIST
        and bool(_IDENTIFIER_RE.match(name))
        and len(name) > 1
    )


def _unique_valid(names: list[str], is_valid) -> list[str]:
    return [name for name in dict.fromkeys(names) if is_valid(name)]


# ---------------------------------------------------------------------------
# Filesystem-backed analysis
# ---------------------------------------------------------------------------

class StructureAnalyzer:
    """File-level analysis guarded by a SecurityValidator."""

    def __init__(
        self,
        security: SecurityValidator,
        project_root: Optional[Path] = None,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    ) -> None:
        self.security = security
        self.project_root = Path(project_root) if project_root is not None else security.project_root
        self.max_file_size = max_file_size

    def read_file(self, file_path: str) -> FileReport:
        """Read, sanitise and analyse one PHP file.

        Raises:
            SecurityError: If the path fails validation, names a restricted
                file, is not a .php file, or exceeds the size limit.
        """
        self.security.validate_path(file_path)

        if not self.security.is_readable_file(file_path):
            raise SecurityError("File is not accessible or contains sensitive data")

        full_path = self.project_root / file_path
        if not full_path.is_file():
            raise SecurityError(f"File {file_path} does not exist")

        if not file_path.endswith(".php"):
            raise SecurityError("Only PHP files are allowed")

        size = full_path.stat().st_size
        if size > self.max_file_size:
            raise SecurityError(f"File {file_path} exceeds the {self.max_file_size} byte limit")

        content = full_path.read_text(encoding="utf-8", errors="replace")
        structure = analyze_source(content)

        return FileReport(
            path=file_path,
            content=self.security.sanitize_content(content),
            size_bytes=len(content.encode("utf-8")),
            category=categorize_file(file_path),
            complexity_score=complexity_score(structure),
            structure=structure,
        )

    def list_files(
        self,
        directory: str = "app",
        name_filter: Optional[str] = None,
        include_tests: bool = False,
        limit: Optional[int] = None,
    ) -> FileListing:
        """List PHP files under `directory`, sorted by category then name.

        Raises:
            SecurityError: If the directory fails validation or is not a directory.
        """
        self.security.validate_path(directory)

        base = self.project_root / directory
        if not base.is_dir():
            raise SecurityError(f"Directory {directory} does not exist")

        entries: list[FileEntry] = []
        for path in base.rglob("*.php"):
            if not path.is_file():
                continue
            relative = path.relative_to(self.project_root).as_posix()
            if not include_tests and "tests" in Path(relative).parts:
                continue
            if name_filter and name_filter.lower() not in relative.lower():
                continue
            stat = path.stat()
            entries.append(
                FileEntry(
                    path=relative,
                    name=path.name,
                    size=stat.st_size,
                    modified=datetime.fromtimestamp(stat.st_mtime).strftime("%Y-%m-%d %H:%M:%S"),
                    category=categorize_file(relative),
                )
            )

        entries.sort(key=lambda e: (e.category, e.name))
        truncated = limit is not None and len(entries) > limit
        if truncated:
            logger.info("File listing for %s truncated to %d of %d files", directory, limit, len(entries))
            entries = entries[:limit]
        return FileListing(files=entries, truncated=truncated)

    def analyze_project(self) -> dict:
        """Check the conventional directory layout and count PHP files per directory."""
        directories: dict[str, dict] = {}
        for directory in EXPECTED_DIRECTORIES:
            path = self.project_root / directory
            exists = path.is_dir()
            directories[directory] = {
                "exists": exists,
                "php_files": sum(1 for p in path.rglob("*.php") if p.is_file()) if exists else 0,
            }

        present = [d for d, info in directories.items() if info["exists"]]
        missing = [d for d, info in directories.items() if not info["exists"]]
        return {
            "directories": directories,
            "total_php_files": sum(info["php_files"] for info in directories.values()),
            "structure_health": {
                "score": round(len(present) / len(EXPECTED_DIRECTORIES) * 100),
                "present": len(present),
                "expected": len(EXPECTED_DIRECTORIES),
                "missing": missing,
            },
        }
