"""Tests for money and percentage formatting."""

from __future__ import annotations

import math

from vmx.formatting import format_money, format_pct


class TestFormatMoney:
    def test_usd(self) -> None:
        assert format_money(19_500_000) == "$19,500,000"

    def test_rounds_to_whole_units(self) -> None:
        assert format_money(1234.56) == "$1,235"

    def test_negative(self) -> None:
        assert format_money(-500.4) == "-$500"

    def test_negative_rounding_to_zero_has_no_sign(self) -> None:
        assert format_money(-0.4) == "$0"

    def test_known_symbols(self) -> None:
        assert format_money(1_000, "EUR") == "€1,000"
        assert format_money(1_000, "gbp") == "£1,000"
        assert format_money(1_000, "AED") == "AED 1,000"

    def test_unknown_currency_code_prefix(self) -> None:
        assert format_money(1_000, "CHF") == "CHF 1,000"

    def test_non_finite_is_zero(self) -> None:
        assert format_money(math.nan) == "$0"
        assert format_money(math.inf) == "$0"


class TestFormatPct:
    def test_one_decimal(self) -> None:
        assert format_pct(0.25641) == "25.6%"

    def test_whole(self) -> None:
        assert format_pct(1.0) == "100.0%"

    def test_non_finite_is_zero(self) -> None:
        assert format_pct(math.nan) == "0.0%"
