"""Parameter normalisation for tool inputs.

Callers (MCP clients, the CLI, scripts) hand options over in inconsistent
shapes: the literal strings "null"/"undefined", single-element lists
wrapping the real value, or JSON encoded as a string. These helpers fold
all of those into plain Python values. They are pure functions.
"""

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)

_NULL_STRINGS = {"null", "undefined"}


def normalize(value: Any) -> Any:
    """Return the normalised form of a single parameter."""
    if isinstance(value, str) and value in _NULL_STRINGS:
        return None

    if _is_wrapped_list(value):
        return value[0]

    if isinstance(value, str) and _looks_like_json(value):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value

    return value


def needs_normalization(value: Any) -> bool:
    """True when normalize() would change the value."""
    if isinstance(value, str) and value in _NULL_STRINGS:
        return True
    if _is_wrapped_list(value):
        return True
    if isinstance(value, str) and _looks_like_json(value):
        try:
            json.loads(value)
        except json.JSONDecodeError:
            return False
        return True
    return False


def normalize_many(parameters: dict[str, Any]) -> dict[str, Any]:
    return {key: normalize(value) for key, value in parameters.items()}


def normalize_with_logging(value: Any, name: str = "unknown") -> Any:
    """normalize() plus a DEBUG line describing the transformation."""
    normalized = normalize(value)
    if normalized is not value:
        logger.debug(
            "Parameter normalized: parameter=%s original_type=%s normalized_type=%s transformation=%s",
            name,
            type(value).__name__,
            type(normalized).__name__,
            transformation_type(value, normalized),
        )
    return normalized


def transformation_type(original: Any, normalized: Any) -> str:
    """Name the transformation normalize() applied to `original`."""
    if isinstance(original, str) and original in _NULL_STRINGS and normalized is None:
        return "string_to_null"
    if _is_wrapped_list(original):
        return "wrapped_list_unwrapped"
    if isinstance(original, str) and isinstance(normalized, (dict, list)):
        return "json_string_decoded"
    if type(original) is not type(normalized):
        return f"{type(original).__name__}_to_{type(normalized).__name__}"
    return "no_transformation"


def _is_wrapped_list(value: Any) -> bool:
    return isinstance(value, list) and len(value) == 1


def _looks_like_json(value: str) -> bool:
    return (value.startswith("{") and value.endswith("}")) or (
        value.startswith("[") and value.endswith("]")
    )
