"""Normalization helpers.

Centralizes defensive parsing and placeholder handling for vehicle
payloads.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

# Placeholder strings data sources use for "not available".
SENTINEL_STRINGS = frozenset({"", "--", "NaN", "nan", "null"})


def safe_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and value.strip() in SENTINEL_STRINGS:
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result):
        return None
    return result


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def is_meaningful(value: Any) -> bool:
    """Return True if the value carries data (not a placeholder)."""

    if value is None:
        return False
    if isinstance(value, str) and value.strip() in SENTINEL_STRINGS:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    if value == {}:
        return False
    return bool(value != [])


def first_present(data: Mapping[str, Any], *keys: str) -> Any:
    """Return the first meaningful value among *keys*, or ``None``.

    Data sources disagree on naming (``vehicleId`` vs ``vehicle_id``,
    ``soc`` vs ``status``); callers list every accepted alias in order of
    preference.
    """

    for key in keys:
        value = data.get(key)
        if is_meaningful(value):
            return value
    return None
