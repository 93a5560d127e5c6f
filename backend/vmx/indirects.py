"""US-style construction indirects layered on top of direct hard cost.

The VMX categories are direct hard costs. The construction contract adds:

    Direct Hard Cost
    + General Conditions (site staff, temporary works)
    + GC General Liability insurance (pass-through)
    + Construction Contingency
    + GC Fee (O&P), applied on the cost of the work or on direct cost only
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, field_validator

from vmx.models.enums import IndirectFeeBase, TierId
from vmx.numeric import clamp, finite_or


def _clamp_rate(value: float) -> float:
    return clamp(value, 0.0, 1.0)


class IndirectRates(BaseModel):
    """Indirect rates as decimals (0.10 = 10%), clamped to [0, 1]."""

    general_conditions_rate: float
    gl_insurance_rate: float
    contingency_rate: float
    fee_rate: float
    fee_base: IndirectFeeBase = IndirectFeeBase.COST_OF_WORK

    @field_validator(
        "general_conditions_rate",
        "gl_insurance_rate",
        "contingency_rate",
        "fee_rate",
    )
    @classmethod
    def _rate_in_unit_interval(cls, v: float) -> float:
        return _clamp_rate(v)


# Midpoints of typical US luxury residential ranges (2025) by tier.
_DEFAULT_RATES: dict[TierId, tuple[float, float, float, float]] = {
    TierId.SELECT: (0.06, 0.01, 0.05, 0.10),
    TierId.RESERVE: (0.08, 0.01, 0.05, 0.12),
    TierId.SIGNATURE: (0.10, 0.0125, 0.08, 0.14),
    TierId.LEGACY: (0.13, 0.015, 0.12, 0.16),
}


def default_indirect_rates(tier: TierId) -> IndirectRates:
    """Return the default indirect rates for a library tier."""
    gc, gl, contingency, fee = _DEFAULT_RATES[tier]
    return IndirectRates(
        general_conditions_rate=gc,
        gl_insurance_rate=gl,
        contingency_rate=contingency,
        fee_rate=fee,
    )


class IndirectLine(BaseModel):
    """One indirect cost line."""

    id: Literal["general_conditions", "gl_insurance", "contingency", "gc_fee"]
    label: str
    rate: float
    base: float
    amount: float


class ConstructionIndirects(BaseModel):
    """Direct hard cost rolled up to a construction contract total."""

    direct_hard_cost: float
    cost_of_work_subtotal: float
    total_indirects: float
    contract_total: float
    contract_psqft: float
    lines: list[IndirectLine]
    rates_used: IndirectRates


def compute_construction_indirects(
    direct_hard_cost: float,
    area_sqft: float,
    rates: IndirectRates,
) -> ConstructionIndirects:
    """Roll up direct hard cost into a contract total.

    Negative or non-finite direct cost counts as 0; area is floored at 1 SF
    so the per-SF figure is always defined.
    """
    direct = max(0.0, finite_or(direct_hard_cost, 0.0))
    area = max(1.0, finite_or(area_sqft, 1.0))

    gc = direct * rates.general_conditions_rate
    gl = direct * rates.gl_insurance_rate
    contingency = direct * rates.contingency_rate
    cost_of_work = direct + gc + gl + contingency

    fee_base = direct if rates.fee_base == IndirectFeeBase.DIRECT_ONLY else cost_of_work
    fee = fee_base * rates.fee_rate
    contract_total = cost_of_work + fee

    lines = [
        IndirectLine(
            id="general_conditions",
            label="General Conditions",
            rate=rates.general_conditions_rate,
            base=direct,
            amount=gc,
        ),
        IndirectLine(
            id="gl_insurance",
            label="GC GL Insurance",
            rate=rates.gl_insurance_rate,
            base=direct,
            amount=gl,
        ),
        IndirectLine(
            id="contingency",
            label="Construction Contingency",
            rate=rates.contingency_rate,
            base=direct,
            amount=contingency,
        ),
        IndirectLine(
            id="gc_fee",
            label="GC Fee (O&P)",
            rate=rates.fee_rate,
            base=fee_base,
            amount=fee,
        ),
    ]

    return ConstructionIndirects(
        direct_hard_cost=direct,
        cost_of_work_subtotal=cost_of_work,
        total_indirects=gc + gl + contingency + fee,
        contract_total=contract_total,
        contract_psqft=contract_total / area,
        lines=lines,
        rates_used=rates,
    )
