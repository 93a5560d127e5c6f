"""Guardrail classification of an allocation against its target range."""

from __future__ import annotations

from vmx.models.enums import RangeStatus


def classify_range(pct: float, min_pct: float, max_pct: float) -> RangeStatus:
    """Classify *pct* against the closed interval [min_pct, max_pct].

    - LOW  => below the target minimum
    - HIGH => above the target maximum
    - OK   => within the range, boundaries included
    """
    if pct < min_pct:
        return RangeStatus.LOW
    if pct > max_pct:
        return RangeStatus.HIGH
    return RangeStatus.OK
