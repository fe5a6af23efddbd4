"""Assorted numeric helpers shared by the calculators and input parsing."""
from __future__ import annotations

import math
from typing import Optional


def parse_number(value) -> Optional[float]:
    """Return ``value`` as a finite float, or ``None`` when it is blank or invalid.

    Form fields arrive as strings (possibly empty) and JSON payloads may carry
    ``null``.  Anything that is not a finite number is treated as missing.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(" ", "").replace(",", ".")
        if not value:
            return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def is_finite(x) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool) and math.isfinite(x)


def nz(x, default=0.0):
    """Finite float for ``x`` or ``default``."""
    return float(x) if is_finite(x) else default


def safe_ratio(numerator, denominator) -> Optional[float]:
    """``numerator / denominator`` or ``None`` when the denominator is unknown or not positive."""
    if not is_finite(numerator) or not is_finite(denominator) or denominator <= 0:
        return None
    return numerator / denominator


def clamp_years(years, low, high, default) -> int:
    y = parse_number(years)
    if y is None:
        return default
    return int(min(max(int(y), low), high))
