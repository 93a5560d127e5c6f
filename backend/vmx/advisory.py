"""Advisory readout: guardrail watchouts, cost drivers and A/B comparison.

All functions here read finished :class:`ScenarioResult` objects; none of them
re-price anything.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from vmx.data.categories import VMX_CATEGORIES
from vmx.models.enums import CategoryId, RangeStatus
from vmx.models.scenario import ScenarioResult
from vmx.numeric import finite_or

KEY_DRIVER_PCT_THRESHOLD = 0.05


class Watchout(BaseModel):
    """A category outside its target range."""

    category_id: CategoryId
    label: str
    kind: Literal["under", "over"]
    delta_pct: float
    delta_cost: float
    current_pct: float
    target_min: float
    target_max: float


def compute_watchouts(result: ScenarioResult, max_items: int = 3) -> list[Watchout]:
    """Out-of-range categories, largest gap to the nearest boundary first."""
    total = result.total_cost if finite_or(result.total_cost, 0.0) > 0 else 1.0

    items: list[Watchout] = []
    for row in result.categories:
        pct = finite_or(row.pct_of_total, 0.0)
        lo = finite_or(row.target_min_pct, 0.0)
        hi = finite_or(row.target_max_pct, 1.0)
        if pct < lo:
            kind: Literal["under", "over"] = "under"
            gap = lo - pct
        elif pct > hi:
            kind = "over"
            gap = pct - hi
        else:
            continue
        items.append(
            Watchout(
                category_id=row.category_id,
                label=row.label,
                kind=kind,
                delta_pct=gap,
                delta_cost=gap * total,
                current_pct=pct,
                target_min=lo,
                target_max=hi,
            )
        )

    items.sort(key=lambda w: w.delta_pct, reverse=True)
    return items[:max_items]


class DriverLine(BaseModel):
    """Cost movement of one category against a baseline scenario."""

    category_id: CategoryId
    label: str
    delta_cost: float
    delta_pct: float


class DriverSummary(BaseModel):
    total_delta_cost: float
    total_delta_pct: float
    lines: list[DriverLine]


def _costs_by_category(result: ScenarioResult) -> dict[CategoryId, float]:
    return {row.category_id: row.cost for row in result.categories}


def compute_driver_lines(
    scenario: ScenarioResult,
    baseline: ScenarioResult,
    threshold: float = KEY_DRIVER_PCT_THRESHOLD,
    limit: int = 6,
) -> DriverSummary:
    """Categories whose cost moved by at least *threshold* vs the baseline."""
    scenario_costs = _costs_by_category(scenario)
    baseline_costs = _costs_by_category(baseline)

    lines: list[DriverLine] = []
    for cat in VMX_CATEGORIES:
        s_cost = scenario_costs.get(cat.id, 0.0)
        b_cost = baseline_costs.get(cat.id, 0.0)
        delta_pct = s_cost / b_cost - 1 if b_cost > 0 else 0.0
        if abs(delta_pct) < threshold:
            continue
        lines.append(
            DriverLine(
                category_id=cat.id,
                label=cat.label,
                delta_cost=s_cost - b_cost,
                delta_pct=delta_pct,
            )
        )

    lines.sort(key=lambda d: abs(d.delta_cost), reverse=True)

    return DriverSummary(
        total_delta_cost=scenario.total_cost - baseline.total_cost,
        total_delta_pct=(
            scenario.total_cost / baseline.total_cost - 1 if baseline.total_cost > 0 else 0.0
        ),
        lines=lines[:limit],
    )


class StatusCounts(BaseModel):
    ok: int = 0
    low: int = 0
    high: int = 0


class GuardrailGap(BaseModel):
    """Distance from an out-of-range allocation to the violated boundary."""

    category_id: CategoryId
    label: str
    status: RangeStatus
    actual: float
    min_pct: float
    max_pct: float
    gap_pct_points: float
    approx_cost_to_boundary: float


class Reallocation(BaseModel):
    category_id: CategoryId
    label: str
    amount: float


class ReallocationPlan(BaseModel):
    """Top moves toward each category's range midpoint."""

    increase: list[Reallocation]
    decrease: list[Reallocation]


class CostDriver(BaseModel):
    category_id: CategoryId
    label: str
    delta_cost: float


class ScenarioComparison(BaseModel):
    """Advisory readout comparing scenario B against scenario A."""

    currency: str
    a_total: float
    b_total: float
    total_delta: float
    delta_pct_vs_a: float
    a_counts: StatusCounts
    b_counts: StatusCounts
    a_guardrails: list[GuardrailGap]
    b_guardrails: list[GuardrailGap]
    drivers: list[CostDriver]
    realloc_a: ReallocationPlan
    realloc_b: ReallocationPlan


def _status_counts(result: ScenarioResult) -> StatusCounts:
    statuses = {row.category_id: row.range_status for row in result.categories}
    counts = StatusCounts()
    for cat in VMX_CATEGORIES:
        status = statuses.get(cat.id, RangeStatus.OK)
        if status == RangeStatus.OK:
            counts.ok += 1
        elif status == RangeStatus.LOW:
            counts.low += 1
        else:
            counts.high += 1
    return counts


def _guardrail_gaps(result: ScenarioResult) -> list[GuardrailGap]:
    gaps: list[GuardrailGap] = []
    for row in result.categories:
        if row.range_status == RangeStatus.OK:
            continue
        boundary = row.target_min_pct if row.range_status == RangeStatus.LOW else row.target_max_pct
        gap = abs(row.pct_of_total - boundary)
        gaps.append(
            GuardrailGap(
                category_id=row.category_id,
                label=row.label,
                status=row.range_status,
                actual=row.pct_of_total,
                min_pct=row.target_min_pct,
                max_pct=row.target_max_pct,
                gap_pct_points=gap * 100,
                approx_cost_to_boundary=gap * result.total_cost,
            )
        )
    gaps.sort(key=lambda g: g.approx_cost_to_boundary, reverse=True)
    return gaps


def _reallocation(result: ScenarioResult, limit: int = 3) -> ReallocationPlan:
    moves = [
        Reallocation(
            category_id=row.category_id,
            label=row.label,
            amount=((row.target_min_pct + row.target_max_pct) / 2 - row.pct_of_total)
            * result.total_cost,
        )
        for row in result.categories
    ]
    moves.sort(key=lambda m: abs(m.amount), reverse=True)
    return ReallocationPlan(
        increase=[m for m in moves if m.amount > 0][:limit],
        decrease=[m for m in moves if m.amount < 0][:limit],
    )


def compare_scenarios(a: ScenarioResult, b: ScenarioResult) -> ScenarioComparison:
    """Build the A/B advisory readout."""
    a_costs = _costs_by_category(a)
    b_costs = _costs_by_category(b)

    drivers = [
        CostDriver(
            category_id=cat.id,
            label=cat.label,
            delta_cost=b_costs.get(cat.id, 0.0) - a_costs.get(cat.id, 0.0),
        )
        for cat in VMX_CATEGORIES
    ]
    drivers = [d for d in drivers if d.delta_cost != 0]
    drivers.sort(key=lambda d: abs(d.delta_cost), reverse=True)

    total_delta = b.total_cost - a.total_cost
    return ScenarioComparison(
        currency=a.currency,
        a_total=a.total_cost,
        b_total=b.total_cost,
        total_delta=total_delta,
        delta_pct_vs_a=total_delta / a.total_cost if a.total_cost > 0 else 0.0,
        a_counts=_status_counts(a),
        b_counts=_status_counts(b),
        a_guardrails=_guardrail_gaps(a),
        b_guardrails=_guardrail_gaps(b),
        drivers=drivers[:3],
        realloc_a=_reallocation(a),
        realloc_b=_reallocation(b),
    )
