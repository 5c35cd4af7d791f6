"""Scoring engine: weighted signal matching for one rule.

Every signal is worth one point:
  file signal        → prober.file_exists()
  directory signal   → prober.directory_exists()
  dependency signal  → name in require ∪ require-dev

score = (hits / total_signals) × confidence_weight

A rule with no signals scores 0.0, so an empty rule can never win.
"""

from larascope.detector.prober import IndicatorProber
from larascope.detector.rules import Rule
from larascope.detector.types import ManifestData, RuleScore


def evaluate(rule: Rule, manifest: ManifestData, prober: IndicatorProber) -> RuleScore:
    """Probe every signal of `rule` and return the full RuleScore."""
    indicators = rule.indicators
    total = indicators.signal_count
    if total == 0:
        return RuleScore(category=rule.category, hits=0, total_signals=0, score=0.0)

    evidence: list[str] = []

    for path in indicators.files:
        if prober.file_exists(path):
            evidence.append(f"file: {path}")

    for path in indicators.directories:
        if prober.directory_exists(path):
            evidence.append(f"directory: {path}")

    declared = manifest.all_dependency_names
    for name in indicators.dependency_names:
        if name in declared:
            evidence.append(f"dependency: {name}")

    hits = len(evidence)
    return RuleScore(
        category=rule.category,
        hits=hits,
        total_signals=total,
        score=(hits / total) * rule.confidence_weight,
        evidence=evidence,
    )


def score(rule: Rule, manifest: ManifestData, prober: IndicatorProber) -> float:
    return evaluate(rule, manifest, prober).score
