"""Monetary amount parsing."""

from __future__ import annotations

import math
import re

_NON_NUMERIC_RE = re.compile(r"[₹$€£,\s]")


def parse_amount(raw: str | float | int | None) -> float | None:
    """Parse ``"₹12,500.50"``-style text into ``12500.5``.

    Currency symbols, thousands separators and spaces are ignored.  Anything
    that still is not a number yields ``None`` instead of raising.
    """
    if raw is None:
        return None
    if isinstance(raw, (int, float)):
        return float(raw)

    cleaned = _NON_NUMERIC_RE.sub("", str(raw))
    if not cleaned:
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    return value if math.isfinite(value) else None
