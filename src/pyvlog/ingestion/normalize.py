"""Normalization helpers.

Centralizes numeric coercion of raw, parser-produced record values.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from pyvlog.exceptions import MalformedSampleError


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result):
        return None
    return result


def is_finite_number(value: Any) -> bool:
    """Return True for real, finite numbers (``bool`` excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def require_float(value: Any, *, field: str, index: int | None = None) -> float:
    """Coerce *value* to a finite float or raise :class:`MalformedSampleError`."""
    result = safe_float(value)
    if result is None or not math.isfinite(result):
        where = f" in record {index}" if index is not None else ""
        raise MalformedSampleError(
            f"Field {field!r}{where} is missing or not a finite number: {value!r}",
            field=field,
            index=index,
        )
    return result


def require_field(record: Mapping[str, Any], field: str, *, index: int | None = None) -> float:
    """Look up *field* in *record* and coerce it with :func:`require_float`."""
    return require_float(record.get(field), field=field, index=index)
