"""Numeric safety helpers shared by the calculators.

Every value that reaches a guardrail or rate computation goes through one of
these so that NaN and infinity collapse to a known bound instead of leaking
into totals.
"""

from __future__ import annotations

import math


def finite_or(value: object, fallback: float) -> float:
    """Coerce *value* to a finite float, or return *fallback*.

    Numeric strings are accepted ("12.5" -> 12.5); booleans are not.
    """
    if isinstance(value, bool):
        return fallback
    if isinstance(value, int | float):
        try:
            number = float(value)
        except OverflowError:
            return fallback
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return fallback
    else:
        return fallback
    return number if math.isfinite(number) else fallback


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp *value* into [lo, hi]. Non-finite values return *lo*."""
    if not math.isfinite(value):
        return lo
    return min(hi, max(lo, value))


def safe_pct(value: float) -> float:
    """Clamp a decimal percentage into [0, 1]."""
    return clamp(value, 0.0, 1.0)
