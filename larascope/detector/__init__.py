"""Detector module for classifying a Laravel project into a category.

Public API:
    ProjectClassifier(project_root).detect_category() -> str
"""

from larascope.detector.classifier import ProjectClassifier
from larascope.detector.manifest import ManifestReader
from larascope.detector.prober import IndicatorProber
from larascope.detector.rules import IndicatorSet, Rule, RuleValidationError, builtin_rules, merge
from larascope.detector.scoring import evaluate, score
from larascope.detector.types import (
    GENERIC,
    UNKNOWN,
    ClassificationResult,
    ManifestData,
    ProjectCharacteristics,
    RuleScore,
)

__all__ = [
    "ProjectClassifier",
    "ManifestReader",
    "IndicatorProber",
    "IndicatorSet",
    "Rule",
    "RuleValidationError",
    "builtin_rules",
    "merge",
    "evaluate",
    "score",
    "GENERIC",
    "UNKNOWN",
    "ClassificationResult",
    "ManifestData",
    "ProjectCharacteristics",
    "RuleScore",
]
