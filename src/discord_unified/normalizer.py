"""Parameter normalization shared by the execute and query paths.

Two rewrites happen per key, in order:

1. caller-facing aliases are mapped to their canonical key;
2. values of a few count-like canonical keys are turned into text when
   they are numeric, because the backend takes those as strings.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

PARAM_ALIASES: Mapping[str, str] = {
    "limit": "count",
    "content": "message",
    "text": "message",
}

STRING_PARAMS: frozenset[str] = frozenset({"count", "limit", "position", "volume"})


def _is_number(value: Any) -> bool:
    # bool is an int subclass but is never a count
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_text(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def canonical_key(key: str) -> str:
    """Return the canonical name for *key* (itself if it is not an alias)."""
    return PARAM_ALIASES.get(key, key)


def normalize(parameters: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a new mapping with aliases applied and counts coerced to text.

    Keys that are neither aliases nor count-like pass through unchanged.
    When an alias and its canonical key are both given, the later one in
    iteration order wins.
    """
    normalized: dict[str, Any] = {}
    if not parameters:
        return normalized

    for key, value in parameters.items():
        actual = canonical_key(key)
        if actual in STRING_PARAMS and _is_number(value):
            normalized[actual] = _to_text(value)
        else:
            normalized[actual] = value
    return normalized
