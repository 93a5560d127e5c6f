"""Soft costs, escalation, and cashflow schedule for a priced scenario.

Soft cost line items are percentages of a base (hard cost, FF&E, ...) or
fixed amounts. Escalation uses a mid-year convention: spend in year *n* is
escalated by ``(1 + rate) ** (n - 0.5) - 1``, weighted by that year's share
of the cashflow preset.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field, field_validator

from vmx.models.enums import CategoryId, EscalationScope, SoftCostBasis
from vmx.numeric import clamp, finite_or

if TYPE_CHECKING:
    from vmx.models.scenario import ScenarioResult

MIN_DURATION_YEARS = 1
MAX_DURATION_YEARS = 10
MAX_ESCALATION_RATE = 0.5


class SoftCostLineItem(BaseModel):
    """A single soft cost line."""

    id: str
    label: str
    basis: SoftCostBasis = SoftCostBasis.HARD
    rate: float = 0.0
    fixed_amount: float = 0.0
    enabled: bool = True

    @field_validator("rate")
    @classmethod
    def _rate_in_unit_interval(cls, v: float) -> float:
        return clamp(v, 0.0, 1.0)

    @field_validator("fixed_amount")
    @classmethod
    def _fixed_non_negative(cls, v: float) -> float:
        return clamp(v, 0.0, math.inf)


class CashflowPreset(BaseModel):
    """Share of spend per project year. Weights are normalized before use."""

    label: str
    year_weights: list[float]


class SoftCostsConfig(BaseModel):
    """Soft cost and escalation settings."""

    version: int = 1
    project_duration_years: int = 4
    annual_escalation_rate: float = 0.06
    escalation_scope: EscalationScope = EscalationScope.HARD_ONLY
    line_items: list[SoftCostLineItem] = Field(default_factory=list)
    cashflow_presets: dict[str, CashflowPreset] = Field(default_factory=dict)
    selected_preset_key: str = "4"

    @field_validator("project_duration_years")
    @classmethod
    def _duration_in_bounds(cls, v: int) -> int:
        return int(clamp(v, MIN_DURATION_YEARS, MAX_DURATION_YEARS))

    @field_validator("annual_escalation_rate")
    @classmethod
    def _escalation_in_bounds(cls, v: float) -> float:
        return clamp(v, 0.0, MAX_ESCALATION_RATE)


def default_soft_costs_config() -> SoftCostsConfig:
    """Typical luxury residential soft costs over a 4-year programme."""
    hard = SoftCostBasis.HARD
    ffe = SoftCostBasis.FFE
    return SoftCostsConfig(
        line_items=[
            SoftCostLineItem(id="architect_fee", label="Architect Fee (fee-only)", basis=hard, rate=0.06),
            SoftCostLineItem(id="interior_design_fee", label="Interior Design Fee (fee-only)", basis=hard, rate=0.06),
            SoftCostLineItem(id="id_procurement_fee", label="ID Procurement Fee (on FF&E)", basis=ffe, rate=0.06),
            SoftCostLineItem(
                id="freight_warehousing_install",
                label="Freight / Warehousing / Installation (on FF&E)",
                basis=ffe,
                rate=0.20,
            ),
            SoftCostLineItem(id="engineering", label="Engineering (structural/MEP)", basis=hard, rate=0.04),
            SoftCostLineItem(id="permits_fees", label="Permits & Fees", basis=hard, rate=0.02),
            SoftCostLineItem(id="owners_rep", label="Owner-side / PM / Admin", basis=hard, rate=0.015),
            SoftCostLineItem(id="insurance", label="Insurance (builder's risk / liability)", basis=hard, rate=0.01),
            SoftCostLineItem(id="soft_contingency", label="Soft Contingency", basis=hard, rate=0.03),
            SoftCostLineItem(id="legal_tax", label="Legal / Accounting", basis=hard, rate=0.005),
        ],
        cashflow_presets={
            "3": CashflowPreset(label="3-year default", year_weights=[0.35, 0.45, 0.20]),
            "4": CashflowPreset(label="4-year default", year_weights=[0.20, 0.35, 0.30, 0.15]),
            "5": CashflowPreset(
                label="5-year (more gradual)", year_weights=[0.15, 0.25, 0.25, 0.20, 0.15],
            ),
        },
        selected_preset_key="4",
    )


def normalize_weights(weights: list[float]) -> list[float]:
    """Scale weights to sum to 1; equal weights if they sum to <= 0."""
    total = sum(w for w in weights if math.isfinite(w))
    if not math.isfinite(total) or total <= 0:
        equal = 1 / max(1, len(weights))
        return [equal for _ in weights]
    return [(w if math.isfinite(w) else 0.0) / total for w in weights]


def _parse_line_item(raw: Any) -> SoftCostLineItem | None:
    if not isinstance(raw, dict):
        return None
    item_id = str(raw.get("id") or "")
    label = str(raw.get("label") or "")
    if not item_id or not label:
        return None
    try:
        basis = SoftCostBasis(raw.get("basis"))
    except ValueError:
        basis = SoftCostBasis.HARD
    return SoftCostLineItem(
        id=item_id,
        label=label,
        basis=basis,
        rate=finite_or(raw.get("rate"), 0.0),
        fixed_amount=finite_or(raw.get("fixed_amount"), 0.0),
        enabled=raw.get("enabled") is not False,
    )


def _parse_presets(raw: Any) -> dict[str, CashflowPreset] | None:
    if not isinstance(raw, dict):
        return None
    presets: dict[str, CashflowPreset] = {}
    for key, value in raw.items():
        if not isinstance(value, dict) or not isinstance(value.get("year_weights"), list):
            continue
        presets[str(key)] = CashflowPreset(
            label=str(value.get("label") or f"{key}-year"),
            year_weights=[clamp(finite_or(w, 0.0), 0.0, 1.0) for w in value["year_weights"]],
        )
    return presets or None


def parse_soft_costs_config(raw: Any) -> SoftCostsConfig:
    """Build a config from untrusted data, repairing instead of rejecting.

    Unknown bases fall back to ``hard``, line items without an id or label are
    dropped, numbers are clamped, and a preset is synthesized for the chosen
    duration if none exists.
    """
    default = default_soft_costs_config()
    if not isinstance(raw, dict):
        return default

    duration = int(
        clamp(
            finite_or(raw.get("project_duration_years"), default.project_duration_years),
            MIN_DURATION_YEARS,
            MAX_DURATION_YEARS,
        )
    )
    rate = finite_or(raw.get("annual_escalation_rate"), default.annual_escalation_rate)
    scope = (
        EscalationScope.HARD_PLUS_SOFT
        if raw.get("escalation_scope") == EscalationScope.HARD_PLUS_SOFT
        else EscalationScope.HARD_ONLY
    )

    line_items = default.line_items
    if isinstance(raw.get("line_items"), list):
        parsed = [_parse_line_item(li) for li in raw["line_items"]]
        line_items = [li for li in parsed if li is not None] or default.line_items

    presets = _parse_presets(raw.get("cashflow_presets")) or default.cashflow_presets
    selected_key = str(raw.get("selected_preset_key") or duration)

    duration_key = str(duration)
    if duration_key not in presets:
        presets = {
            **presets,
            duration_key: CashflowPreset(
                label=f"{duration}-year (auto)",
                year_weights=normalize_weights([1.0] * duration),
            ),
        }
        selected_key = duration_key

    return SoftCostsConfig(
        project_duration_years=duration,
        annual_escalation_rate=rate,
        escalation_scope=scope,
        line_items=line_items,
        cashflow_presets=presets,
        selected_preset_key=selected_key,
    )


class SoftCostLine(BaseModel):
    """Computed amount for one enabled soft cost line."""

    id: str
    label: str
    basis: SoftCostBasis
    rate: float
    amount: float


class SoftCostsSummary(BaseModel):
    """Soft cost roll-up and escalation for a scenario."""

    hard_base: float
    ffe_base: float
    hard_plus_ffe: float
    soft_base: float
    total_before_escalation: float
    escalation_base: float
    escalation_amount: float
    total_with_escalation: float
    breakdown: list[SoftCostLine]


class CashflowYear(BaseModel):
    """Spend drawn in one project year."""

    year: int
    weight: float
    base_draw: float
    escalation_draw: float
    total_draw: float
    cumulative_total: float
    cumulative_pct: float


class CashflowSchedule(BaseModel):
    rows: list[CashflowYear]
    totals: SoftCostsSummary


def _year_weights(config: SoftCostsConfig) -> list[float]:
    duration = config.project_duration_years
    preset = config.cashflow_presets.get(config.selected_preset_key) or config.cashflow_presets.get(
        str(duration)
    )
    raw = preset.year_weights if preset is not None else [1 / duration] * duration
    return normalize_weights(raw[:duration])


def _escalation_factor(rate: float, year_index: int) -> float:
    return (1 + rate) ** (year_index + 0.5) - 1


def compute_soft_costs(result: ScenarioResult, config: SoftCostsConfig) -> SoftCostsSummary:
    """Compute soft costs and escalation on top of a scenario's hard cost.

    Lines on ``total_before_escalation`` are applied to hard cost plus every
    other enabled soft cost line.
    """
    hard_base = max(0.0, finite_or(result.total_cost, 0.0))
    ffe_row = result.get_category(CategoryId.FF_E)
    ffe_base = max(0.0, finite_or(ffe_row.cost, 0.0)) if ffe_row is not None else 0.0
    hard_plus_ffe = hard_base + ffe_base

    bases = {
        SoftCostBasis.HARD: hard_base,
        SoftCostBasis.FFE: ffe_base,
        SoftCostBasis.HARD_PLUS_FFE: hard_plus_ffe,
    }

    enabled = [li for li in config.line_items if li.enabled]
    amounts: dict[int, float] = {}
    for index, item in enumerate(enabled):
        if item.basis == SoftCostBasis.FIXED:
            amounts[index] = item.fixed_amount
        elif item.basis in bases:
            amounts[index] = bases[item.basis] * item.rate

    subtotal = hard_base + sum(amounts.values())
    for index, item in enumerate(enabled):
        if item.basis == SoftCostBasis.TOTAL_BEFORE_ESCALATION:
            amounts[index] = subtotal * item.rate

    breakdown = [
        SoftCostLine(
            id=item.id,
            label=item.label,
            basis=item.basis,
            rate=item.rate,
            amount=max(0.0, finite_or(amounts[index], 0.0)),
        )
        for index, item in enumerate(enabled)
    ]
    soft_base = sum(line.amount for line in breakdown)
    total_before_escalation = hard_base + soft_base

    escalation_base = (
        total_before_escalation
        if config.escalation_scope == EscalationScope.HARD_PLUS_SOFT
        else hard_base
    )
    rate = config.annual_escalation_rate
    escalation_amount = sum(
        escalation_base * weight * _escalation_factor(rate, i)
        for i, weight in enumerate(_year_weights(config))
    )

    return SoftCostsSummary(
        hard_base=hard_base,
        ffe_base=ffe_base,
        hard_plus_ffe=hard_plus_ffe,
        soft_base=soft_base,
        total_before_escalation=total_before_escalation,
        escalation_base=escalation_base,
        escalation_amount=escalation_amount,
        total_with_escalation=total_before_escalation + escalation_amount,
        breakdown=breakdown,
    )


def compute_cashflow_schedule(result: ScenarioResult, config: SoftCostsConfig) -> CashflowSchedule:
    """Spread the escalated total across project years."""
    totals = compute_soft_costs(result, config)
    weights = _year_weights(config)
    rate = config.annual_escalation_rate

    rows: list[CashflowYear] = []
    cumulative = 0.0
    for i in range(config.project_duration_years):
        weight = weights[i] if i < len(weights) else 0.0
        base_draw = totals.total_before_escalation * weight
        escalation_draw = totals.escalation_base * weight * _escalation_factor(rate, i)
        total_draw = base_draw + escalation_draw
        cumulative += total_draw
        rows.append(
            CashflowYear(
                year=i + 1,
                weight=weight,
                base_draw=base_draw,
                escalation_draw=escalation_draw,
                total_draw=total_draw,
                cumulative_total=cumulative,
                cumulative_pct=cumulative / max(1.0, totals.total_with_escalation),
            )
        )

    return CashflowSchedule(rows=rows, totals=totals)
