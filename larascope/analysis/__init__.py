"""Domain analysis and recommendation generation."""

from larascope.analysis.domain import (
    DOMAIN_ANALYZERS,
    DomainAnalyzer,
    analyze_domain,
    get_domain_analyzer,
    security_considerations,
)
from larascope.analysis.recommendations import extract_major_version, generate_recommendations

__all__ = [
    "DOMAIN_ANALYZERS",
    "DomainAnalyzer",
    "analyze_domain",
    "get_domain_analyzer",
    "security_considerations",
    "extract_major_version",
    "generate_recommendations",
]
