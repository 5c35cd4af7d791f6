"""Shared types for the detector module.

ManifestData is the parsed composer manifest. RuleScore records how one
catalog rule scored against a project, and ClassificationResult is the
classifier's cached verdict. ProjectCharacteristics is the descriptive
summary returned by describe().
"""

from dataclasses import dataclass, field

# Reserved category sentinels. Neither is ever a catalog key.
UNKNOWN = "unknown"
GENERIC = "generic"


@dataclass(frozen=True)
class ManifestData:
    """Parsed composer.json. Absent fields are empty, never None."""

    name: str = ""
    description: str = ""
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)

    @property
    def all_dependency_names(self) -> set[str]:
        return set(self.dependencies) | set(self.dev_dependencies)


@dataclass
class RuleScore:
    """Score of a single rule.

    hits / total_signals is the raw match fraction; score is that fraction
    scaled by the rule's confidence weight. Evidence lists each matched
    signal (e.g. "file: routes/api.php").
    """

    category: str
    hits: int
    total_signals: int
    score: float
    evidence: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "hits": self.hits,
            "total_signals": self.total_signals,
            "score": round(self.score, 4),
            "evidence": self.evidence,
        }


@dataclass
class ClassificationResult:
    """Cached classifier verdict.

    scores holds every strictly-positive rule score in catalog order.
    Empty for "unknown" and for a "generic" result with no signal at all.
    """

    category: str
    scores: dict[str, RuleScore] = field(default_factory=dict)
    reason: str = ""

    @property
    def best_score(self) -> float:
        return max((s.score for s in self.scores.values()), default=0.0)

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "reason": self.reason,
            "scores": {name: s.to_dict() for name, s in self.scores.items()},
        }


@dataclass
class ProjectCharacteristics:
    """Descriptive project summary."""

    name: str
    description: str
    category: str
    features: list[str] = field(default_factory=list)
    directories: list[str] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    dev_dependencies: list[str] = field(default_factory=list)
    dependency_versions: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "type": self.category,
            "features": self.features,
            "directories": self.directories,
            "dependencies": self.dependencies,
            "dev_dependencies": self.dev_dependencies,
            "dependency_versions": self.dependency_versions,
        }
