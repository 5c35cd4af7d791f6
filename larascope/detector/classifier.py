"""Project classifier. Picks one category for a Laravel project.

Classification flow:
1. Host-runtime gate: the `artisan` bootstrap script must exist at the
   project root, otherwise the result is "unknown".
2. Manifest gate: composer.json must load, otherwise "unknown".
3. Score every rule in the merged catalog (built-ins, then custom rules).
4. No strictly-positive score → "generic".
5. Highest score wins. Ties go to the category ranked first by
   `category_priority`, then by catalog order.
6. A winning score below `score_floor` is not trusted → "generic".

The result is cached per instance. Registering custom rules clears the
cache; the manifest is loaded once and kept for the instance lifetime.
Instances are not thread-safe; use one per project.
"""

import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Optional

from larascope.core.config import Settings
from larascope.detector.manifest import MANIFEST_FILE, ManifestReader
from larascope.detector.prober import IndicatorProber
from larascope.detector.rules import DEFAULT_HANDLER, Rule, builtin_rules, coerce_rules, merge
from larascope.detector.scoring import evaluate
from larascope.detector.types import (
    GENERIC,
    UNKNOWN,
    ClassificationResult,
    ManifestData,
    ProjectCharacteristics,
    RuleScore,
)

logger = logging.getLogger(__name__)

HOST_MARKER = "artisan"
DEFAULT_SCORE_FLOOR = 0.1
DEFAULT_GENERIC_CONFIDENCE = 0.5

# Auth packages that mark a project as having authentication.
AUTH_PACKAGES: tuple[str, ...] = ("laravel/sanctum", "laravel/passport")

# Well-known directories reported by describe(), in report order.
COMMON_DIRECTORIES: tuple[str, ...] = (
    "app",
    "app/Models",
    "app/Http/Controllers",
    "app/Http/Controllers/API",
    "app/Services",
    "resources/views",
    "resources/views/admin",
    "database/migrations",
    "routes",
)


class ProjectClassifier:
    def __init__(
        self,
        project_root: Optional[Path] = None,
        *,
        prober: Optional[IndicatorProber] = None,
        manifest_reader: Optional[ManifestReader] = None,
        host_marker: str = HOST_MARKER,
        manifest_file: str = MANIFEST_FILE,
        score_floor: float = DEFAULT_SCORE_FLOOR,
        generic_confidence: float = DEFAULT_GENERIC_CONFIDENCE,
        category_priority: Optional[list[str]] = None,
    ) -> None:
        self.project_root = Path(project_root) if project_root is not None else Path.cwd()
        self.prober = prober or IndicatorProber(self.project_root)
        self.manifest_reader = manifest_reader or ManifestReader(self.project_root, manifest_file)
        self.host_marker = host_marker
        self.score_floor = score_floor
        self.generic_confidence = generic_confidence
        self.category_priority = list(category_priority or [])

        self._builtin_rules: dict[str, Rule] = builtin_rules()
        self._custom_rules: dict[str, Rule] = {}
        self._manifest: Optional[ManifestData] = None
        self._manifest_ok = False
        self._result: Optional[ClassificationResult] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProjectClassifier":
        return cls(
            settings.project_root,
            host_marker=settings.host_marker,
            manifest_file=settings.manifest_file,
            score_floor=settings.score_floor,
            generic_confidence=settings.generic_confidence,
            category_priority=settings.category_priority,
        )

    # ------------------------------------------------------------------
    # Rule catalog
    # ------------------------------------------------------------------

    def list_rules(self) -> dict[str, Rule]:
        """Merged catalog: built-ins first, then custom rules."""
        return merge(self._builtin_rules, self._custom_rules)

    def register_custom_rules(self, rules: Mapping[str, Any]) -> None:
        """Add or replace rules by category and invalidate the cached result.

        Raises:
            RuleValidationError: If any rule is malformed. The catalog is
                left untouched in that case.
        """
        validated = coerce_rules(rules)
        if not validated:
            return
        self._custom_rules.update(validated)
        self._result = None
        logger.info("Registered custom detection rules: %s", ", ".join(validated))

    def suggested_handler_for(self, category: str) -> str:
        rule = self.list_rules().get(category)
        return rule.suggested_handler if rule else DEFAULT_HANDLER

    def suggested_handler(self) -> str:
        return self.suggested_handler_for(self.detect_category())

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def detect_category(self) -> str:
        return self.classify().category

    def classify(self) -> ClassificationResult:
        """Return the cached ClassificationResult, computing it if needed."""
        if self._result is None:
            self._result = self._compute()
            logger.info(
                "Classification complete: category=%s best_score=%.2f reason=%s",
                self._result.category,
                self._result.best_score,
                self._result.reason,
            )
        return self._result

    def get_confidence(self) -> float:
        """Winning rule's score; 0.0 for "unknown", nominal value for "generic"."""
        result = self.classify()
        if result.category == UNKNOWN:
            return 0.0
        if result.category == GENERIC:
            return self.generic_confidence
        winner = result.scores.get(result.category)
        return winner.score if winner else self.generic_confidence

    def _compute(self) -> ClassificationResult:
        if not self.prober.file_exists(self.host_marker):
            return ClassificationResult(category=UNKNOWN, reason=f"host marker '{self.host_marker}' not found")

        manifest, ok = self._load_manifest()
        if not ok:
            return ClassificationResult(category=UNKNOWN, reason="manifest failed to load")

        scores: dict[str, RuleScore] = {}
        for category, rule in self.list_rules().items():
            rule_score = evaluate(rule, manifest, self.prober)
            if rule_score.score > 0:
                scores[category] = rule_score

        if not scores:
            return ClassificationResult(category=GENERIC, scores=scores, reason="no rule matched")

        winner = self._pick_winner(scores)
        if scores[winner].score < self.score_floor:
            return ClassificationResult(
                category=GENERIC,
                scores=scores,
                reason=f"best score {scores[winner].score:.2f} below floor {self.score_floor:.2f}",
            )

        return ClassificationResult(category=winner, scores=scores, reason="highest score")

    def _pick_winner(self, scores: dict[str, RuleScore]) -> str:
        """Highest score; ties broken by priority list, then catalog order."""
        best = max(s.score for s in scores.values())
        tied = [category for category, s in scores.items() if s.score == best]
        if len(tied) == 1:
            return tied[0]
        catalog_order = list(self.list_rules())
        return min(tied, key=lambda c: (self._priority_rank(c), catalog_order.index(c)))

    def _priority_rank(self, category: str) -> int:
        try:
            return self.category_priority.index(category)
        except ValueError:
            return len(self.category_priority)

    def manifest(self) -> ManifestData:
        """The memoized manifest; empty when it failed to load."""
        return self._load_manifest()[0]

    def _load_manifest(self) -> tuple[ManifestData, bool]:
        if self._manifest is None:
            self._manifest, self._manifest_ok = self.manifest_reader.load()
        return self._manifest, self._manifest_ok

    # ------------------------------------------------------------------
    # Characteristics
    # ------------------------------------------------------------------

    def describe(self) -> ProjectCharacteristics:
        """Summarise the project. Failing probes are left out, never raised."""
        manifest, _ = self._load_manifest()
        return ProjectCharacteristics(
            name=manifest.name or "unknown",
            description=manifest.description,
            category=self.detect_category(),
            features=self._detect_features(manifest),
            directories=self._existing_directories(),
            dependencies=list(manifest.dependencies),
            dev_dependencies=list(manifest.dev_dependencies),
            dependency_versions=dict(manifest.dependencies),
        )

    def _detect_features(self, manifest: ManifestData) -> list[str]:
        checks: list[tuple[str, Callable[[], bool]]] = [
            ("api", lambda: self.prober.file_exists("routes/api.php")),
            ("web", lambda: self.prober.file_exists("routes/web.php")),
            ("database", lambda: self.prober.directory_exists("database/migrations")),
            ("authentication", lambda: any(p in manifest.dependencies for p in AUTH_PACKAGES)),
            ("queues", lambda: self.prober.directory_exists("app/Jobs")),
        ]
        return [feature for feature, check in checks if _safe_probe(feature, check)]

    def _existing_directories(self) -> list[str]:
        return [
            directory
            for directory in COMMON_DIRECTORIES
            if _safe_probe(directory, lambda d=directory: self.prober.directory_exists(d))
        ]


def _safe_probe(label: str, check: Callable[[], bool]) -> bool:
    try:
        return bool(check())
    except Exception as exc:
        logger.warning("Probe '%s' failed, treating as absent: %s", label, exc)
        return False
