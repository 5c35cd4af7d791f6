"""Base class for project adapters.

An adapter carries the knowledge specific to one project archetype: which
paths may be read, which files are off limits, what domain patterns look
like, and which per-file recommendations apply. The classifier's
suggested_handler label selects the adapter through HANDLER_REGISTRY.
"""

from abc import ABC, abstractmethod
from typing import Optional

from larascope.core.config import DEFAULT_ALLOWED_PATHS, DEFAULT_RESTRICTED_FILES
from larascope.detector.prober import IndicatorProber
from larascope.detector.types import ManifestData
from larascope.scanner.structure import categorize_file
from larascope.scanner.types import FileReport


class ProjectAdapter(ABC):
    #: Handler label this adapter is registered under
    name: str = ""

    #: Project type reported by this adapter
    project_type: str = ""

    #: Complexity score above which a file gets a refactoring hint
    complexity_threshold: int = 10

    #: Minimum compatibility score at which this adapter is a good fit
    confidence_threshold: float = 0.7

    def __init__(
        self,
        complexity_threshold: Optional[int] = None,
        confidence_threshold: Optional[float] = None,
    ) -> None:
        # None keeps the class default
        if complexity_threshold is not None:
            self.complexity_threshold = complexity_threshold
        if confidence_threshold is not None:
            self.confidence_threshold = confidence_threshold

    def allowed_paths(self) -> list[str]:
        return list(DEFAULT_ALLOWED_PATHS)

    def restricted_files(self) -> list[str]:
        return list(DEFAULT_RESTRICTED_FILES)

    @abstractmethod
    def domain_patterns(self) -> dict:
        """Describe the class shapes this adapter recognises."""
        ...

    @abstractmethod
    def compatibility_score(self, prober: IndicatorProber, manifest: ManifestData) -> float:
        """How well this adapter fits the project, in [0, 1]."""
        ...

    def analysis_config(self) -> dict:
        return {
            "complexity_threshold": self.complexity_threshold,
            "confidence_threshold": self.confidence_threshold,
        }

    def categorize_domain_file(self, file_path: str) -> str:
        return categorize_file(file_path)

    def importance_score(self, report: FileReport) -> float:
        """0.3 baseline, 0.5 for files above the complexity threshold."""
        return 0.5 if report.complexity_score > self.complexity_threshold else 0.3

    def recommendations(self, report: FileReport) -> list[dict]:
        """Per-file recommendations: generic complexity hint plus domain checks."""
        recommendations: list[dict] = []
        if report.complexity_score > self.complexity_threshold:
            recommendations.append({
                "type": "complexity",
                "priority": "medium",
                "message": (
                    f"Complexity score {report.complexity_score} exceeds "
                    f"{self.complexity_threshold}; consider splitting this file"
                ),
                "file": report.path,
            })
        recommendations.extend(self.domain_recommendations(report))
        return recommendations

    def domain_recommendations(self, report: FileReport) -> list[dict]:
        return []

    def describe_file(self, report: FileReport) -> dict:
        """Adapter view of a file: domain category, importance and recommendations."""
        return {
            "domain_category": self.categorize_domain_file(report.path),
            "importance_score": round(self.importance_score(report), 2),
            "recommendations": self.recommendations(report),
        }
