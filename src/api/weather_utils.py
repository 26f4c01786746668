from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pandas as pd


def _cast_to_float(value: Any) -> float | None:
    """Convert to float, or None when the value has no numeric reading."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", ".")

    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def _cast_to_int(value: Any) -> int | None:
    """Convert to int (truncating floats), or None."""
    number = _cast_to_float(value)
    if number is None:
        return None
    try:
        return int(number)
    except (OverflowError, ValueError):
        return None


def _normalize_scalar(value: Any) -> Any | None:
    """
    Flatten the scalar shapes a JSON payload or a pandas frame can produce:
    - None / pandas NA / NaN -> None
    - numpy scalars -> native Python value via .item()
    """
    if value is None:
        return None

    if isinstance(value, str | bool | int | float):
        if isinstance(value, float) and pd.isna(value):
            return None
        return value

    if pd.api.types.is_scalar(value) and pd.isna(value):
        return None

    if hasattr(value, "item"):
        try:
            value = value.item()
        except (TypeError, ValueError):
            return value

    return value


def safe_cast(value: Any, type_: type) -> Any | None:
    """
    Cast a raw payload value to int, float or str.

    Returns None when the value is missing or cannot be read as the
    requested type; never raises.
    """
    value = _normalize_scalar(value)
    if value is None:
        return None

    if type_ is float:
        return _cast_to_float(value)
    if type_ is int:
        return _cast_to_int(value)
    if type_ is str:
        text = str(value).strip()
        return text or None

    raise TypeError(f"safe_cast: unsupported target type {type_!r}")


def as_int(x: Any) -> int | None:
    return safe_cast(x, int)


def as_float(x: Any) -> float | None:
    return safe_cast(x, float)


def as_str(x: Any) -> str | None:
    return safe_cast(x, str)


def dig(payload: Any, *keys: str | int) -> Any | None:
    """Walk nested dicts/lists, returning None as soon as a level is missing."""
    node = payload
    for key in keys:
        if isinstance(key, int):
            if not isinstance(node, list | tuple) or not -len(node) <= key < len(node):
                return None
            node = node[key]
        else:
            if not isinstance(node, Mapping):
                return None
            node = node.get(key)
        if node is None:
            return None
    return node
