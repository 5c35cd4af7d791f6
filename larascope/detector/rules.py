"""Rule catalog for project-type detection.

A Rule names a category, the signals that indicate it (files,
directories, composer dependencies), a confidence weight in [0, 1] and
an opaque handler label the caller may use to pick an adapter.

Built-in order matters: it is the default tie-break order.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from larascope.detector.types import GENERIC, UNKNOWN

DEFAULT_HANDLER = "generic"


class RuleValidationError(ValueError):
    """Raised when a custom rule is malformed."""


class IndicatorSet(BaseModel):
    """Signal lists for one rule. Any subset may be empty."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    files: tuple[str, ...] = ()
    directories: tuple[str, ...] = ()
    dependency_names: tuple[str, ...] = ()

    @property
    def signal_count(self) -> int:
        return len(self.files) + len(self.directories) + len(self.dependency_names)


class Rule(BaseModel):
    """One catalog entry, keyed by category."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    category: str = Field(..., min_length=1)
    indicators: IndicatorSet = Field(default_factory=IndicatorSet)
    confidence_weight: float = Field(default=0.5, ge=0.0, le=1.0)
    suggested_handler: str = Field(default=DEFAULT_HANDLER, min_length=1)

    @field_validator("category")
    @classmethod
    def category_not_reserved(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("category must not be blank")
        if v in (GENERIC, UNKNOWN):
            raise ValueError(f"'{v}' is a reserved category")
        return v


_BUILTIN_RULES: tuple[Rule, ...] = (
    Rule(
        category="ecommerce",
        indicators=IndicatorSet(
            files=(
                "app/Models/Cart.php",
                "app/Models/Product.php",
                "app/Models/Order.php",
            ),
            directories=(
                "app/Services/Cart",
                "app/Services/Payment",
                "app/Services/Product",
            ),
            dependency_names=(
                "stripe/stripe-php",
                "paypal/paypal-checkout-sdk",
                "laravel/cashier",
            ),
        ),
        confidence_weight=1.0,
        suggested_handler="ecommerce",
    ),
    Rule(
        category="api_service",
        indicators=IndicatorSet(
            files=("routes/api.php",),
            directories=(
                "app/Http/Controllers/API",
                "app/Http/Resources",
                "app/Http/Requests/API",
            ),
            dependency_names=(
                "laravel/sanctum",
                "laravel/passport",
                "tymon/jwt-auth",
            ),
        ),
        # API routes show up in most project types, so a full match is
        # trusted less than the other built-ins.
        confidence_weight=0.8,
        suggested_handler=DEFAULT_HANDLER,
    ),
    Rule(
        category="admin_dashboard",
        indicators=IndicatorSet(
            files=("app/Http/Controllers/AdminController.php",),
            directories=(
                "resources/views/admin",
                "app/Http/Controllers/Admin",
                "app/Http/Middleware/Admin",
            ),
            dependency_names=(
                "laravel/nova",
                "filament/filament",
                "backpack/crud",
            ),
        ),
        confidence_weight=1.0,
        suggested_handler=DEFAULT_HANDLER,
    ),
)


def builtin_rules() -> dict[str, Rule]:
    """Return a fresh copy of the built-in catalog in declaration order."""
    return {rule.category: rule for rule in _BUILTIN_RULES}


def merge(base: Mapping[str, Rule], custom: Mapping[str, Rule]) -> dict[str, Rule]:
    """Overlay custom rules onto base by category key.

    A custom rule with an existing key replaces that entry wholesale but
    keeps its position; new keys are appended in the order given.
    """
    merged = dict(base)
    merged.update(custom)
    return merged


def coerce_rules(rules: Mapping[str, Any]) -> dict[str, Rule]:
    """Validate a mapping of category -> Rule | dict into Rule objects.

    Dict entries may omit "category"; the mapping key is used. A rule whose
    category disagrees with its key is rejected. Nothing is returned unless
    every entry is valid.

    Raises:
        RuleValidationError: On the first malformed entry.
    """
    validated: dict[str, Rule] = {}
    for key, raw in rules.items():
        if not isinstance(key, str) or not key.strip():
            raise RuleValidationError("Rule category key must be a non-empty string")
        key = key.strip()

        if isinstance(raw, Rule):
            rule = raw
        elif isinstance(raw, Mapping):
            payload = dict(raw)
            payload.setdefault("category", key)
            try:
                rule = Rule.model_validate(payload)
            except ValidationError as exc:
                raise RuleValidationError(f"Invalid rule '{key}': {exc}") from exc
        else:
            raise RuleValidationError(
                f"Invalid rule '{key}': expected Rule or mapping, got {type(raw).__name__}"
            )

        if rule.category != key:
            raise RuleValidationError(
                f"Rule key '{key}' does not match its category '{rule.category}'"
            )
        validated[key] = rule
    return validated
