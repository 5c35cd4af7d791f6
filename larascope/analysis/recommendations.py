"""Recommendation engine.

Turns a full project analysis report into four recommendation lists:
priority actions, architectural improvements, security recommendations
and performance optimizations. Every rule reads the report defensively;
a missing section simply produces no recommendation.
"""

import re
from typing import Any, Optional

# Oldest Laravel major version not flagged for upgrade.
MIN_LARAVEL_MAJOR = 10

# Structure health (percent) below which a cleanup is suggested.
STRUCTURE_HEALTH_THRESHOLD = 70

_VERSION_CONSTRAINT = re.compile(r"[\^~>=]*(\d+)\.")


def generate_recommendations(report: dict[str, Any]) -> dict[str, list[dict]]:
    return {
        "priority_actions": _priority_actions(report),
        "architectural_improvements": _architectural_improvements(report),
        "security_recommendations": _security_recommendations(report),
        "performance_optimizations": _performance_optimizations(report),
    }


def extract_major_version(constraint: str) -> Optional[int]:
    """Major version from a composer constraint such as "^9.0", "~9.2" or "9.*"."""
    match = _VERSION_CONSTRAINT.search(constraint)
    return int(match.group(1)) if match else None


def _priority_actions(report: dict[str, Any]) -> list[dict]:
    actions: list[dict] = []

    versions = _get(report, "project_info", "dependency_versions") or {}
    constraint = versions.get("laravel/framework")
    if isinstance(constraint, str):
        major = extract_major_version(constraint)
        if major is not None and major < MIN_LARAVEL_MAJOR:
            actions.append({
                "priority": "high",
                "action": "Upgrade Laravel Framework",
                "description": (
                    f"Current version ({major}.0) is outdated. "
                    f"Consider upgrading to Laravel {MIN_LARAVEL_MAJOR}+"
                ),
                "effort": "medium",
            })

    health = _get(report, "structure_analysis", "structure_health", "score")
    if isinstance(health, (int, float)) and health < STRUCTURE_HEALTH_THRESHOLD:
        actions.append({
            "priority": "medium",
            "action": "Improve Project Structure",
            "description": f"Structure health score is {health}%. Consider organizing code better",
            "effort": "low",
        })

    return actions


def _architectural_improvements(report: dict[str, Any]) -> list[dict]:
    improvements: list[dict] = []

    if not _get(report, "structure_analysis", "directories", "app/Services", "exists"):
        improvements.append({
            "category": "architecture",
            "recommendation": "Add Service Layer",
            "description": "Consider adding app/Services directory for business logic",
            "benefit": "Better separation of concerns and testability",
        })

    if not _get(report, "structure_analysis", "directories", "app/Repositories", "exists"):
        improvements.append({
            "category": "architecture",
            "recommendation": "Add Repository Pattern",
            "description": "Consider implementing repository pattern for data access",
            "benefit": "Better abstraction and testability of data layer",
        })

    return improvements


def _security_recommendations(report: dict[str, Any]) -> list[dict]:
    recommendations: list[dict] = []

    if _get(report, "project_info", "type") == "api_service":
        if not _get(report, "domain_specific_analysis", "authentication_analysis", "sanctum_present"):
            recommendations.append({
                "category": "security",
                "recommendation": "Add API Authentication",
                "description": "API service should have authentication (Laravel Sanctum recommended)",
                "severity": "high",
            })

    return recommendations


def _performance_optimizations(report: dict[str, Any]) -> list[dict]:
    return [{
        "category": "performance",
        "recommendation": "Implement Caching Strategy",
        "description": "Consider implementing Redis or file-based caching for better performance",
        "impact": "high",
    }]


def _get(data: Any, *keys: str) -> Any:
    """Nested dict lookup returning None on any missing key."""
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data
