"""Formatting helpers for scenario output.

Budgets are communicated in whole currency units and one-decimal
percentages (e.g. '$19,500,000' and '25.6%').
"""

from __future__ import annotations

import math

_CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "AED": "AED ",
    "SAR": "SAR ",
}


def format_money(amount: float, currency: str = "USD") -> str:
    """Format an amount with no decimals, e.g. '$1,234,567' or '-$500'.

    Non-finite amounts format as zero. Unknown currency codes are used as a
    prefix ('CHF 1,000').
    """
    safe = amount if math.isfinite(amount) else 0.0
    symbol = _CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    sign = "-" if round(safe) < 0 else ""
    return f"{sign}{symbol}{abs(safe):,.0f}"


def format_pct(pct: float) -> str:
    """Format a decimal fraction as a percentage with one decimal."""
    safe = pct if math.isfinite(pct) else 0.0
    return f"{safe * 100:.1f}%"
