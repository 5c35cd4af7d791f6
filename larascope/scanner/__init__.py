"""Scanner module for regex-based PHP structure extraction.

Public API:
    analyze_source(content) -> SourceStructure
    StructureAnalyzer(security).read_file(path) -> FileReport
"""

from larascope.scanner.structure import (
    StructureAnalyzer,
    analyze_source,
    categorize_file,
    complexity_score,
)
from larascope.scanner.types import FileListing, FileReport, SourceStructure

__all__ = [
    "StructureAnalyzer",
    "analyze_source",
    "categorize_file",
    "complexity_score",
    "FileListing",
    "FileReport",
    "SourceStructure",
]
