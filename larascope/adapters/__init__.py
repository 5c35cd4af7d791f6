"""Project adapter registry.

Maps the classifier's suggested_handler label to an adapter class.
"""

import logging
from typing import Optional

from larascope.adapters.base import ProjectAdapter
from larascope.adapters.ecommerce import ECommerceAdapter
from larascope.adapters.generic import GenericLaravelAdapter

logger = logging.getLogger(__name__)

# Registry: maps handler label -> adapter class
HANDLER_REGISTRY: dict[str, type[ProjectAdapter]] = {
    "generic": GenericLaravelAdapter,
    "ecommerce": ECommerceAdapter,
}


class AdapterError(LookupError):
    """Raised when no adapter is registered under a handler label."""


def get_adapter(
    handler: str,
    complexity_threshold: Optional[int] = None,
    confidence_threshold: Optional[float] = None,
) -> ProjectAdapter:
    """Return an adapter instance for a handler label.

    Thresholds left as None keep the adapter's own defaults.

    Raises:
        AdapterError: If the label is not registered.
    """
    adapter_cls = HANDLER_REGISTRY.get(handler.lower())
    if not adapter_cls:
        valid = ", ".join(sorted(HANDLER_REGISTRY))
        raise AdapterError(f"Unknown handler '{handler}'. Valid options: {valid}")
    return adapter_cls(complexity_threshold, confidence_threshold)


def resolve_adapter(
    handler: str,
    complexity_threshold: Optional[int] = None,
    confidence_threshold: Optional[float] = None,
) -> ProjectAdapter:
    """Like get_adapter(), but falls back to the generic adapter with a warning.

    Custom rules may name handlers this package does not ship.
    """
    try:
        return get_adapter(handler, complexity_threshold, confidence_threshold)
    except AdapterError:
        logger.warning("No adapter registered for handler '%s'; using generic", handler)
        return GenericLaravelAdapter(complexity_threshold, confidence_threshold)


__all__ = [
    "AdapterError",
    "ECommerceAdapter",
    "GenericLaravelAdapter",
    "HANDLER_REGISTRY",
    "ProjectAdapter",
    "get_adapter",
    "resolve_adapter",
]
