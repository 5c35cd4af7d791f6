"""External static-analysis tool integrations."""

from larascope.external.phpstan import (
    PhpstanError,
    PhpstanIntegrator,
    PhpstanReport,
    generate_suggestions,
    integration_insights,
)

__all__ = [
    "PhpstanError",
    "PhpstanIntegrator",
    "PhpstanReport",
    "generate_suggestions",
    "integration_insights",
]
