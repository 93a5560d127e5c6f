"""Enums for the VMX domain models.

Category ids keep their historical values (FACILITATING, FF_E, ...) because
persisted benchmark libraries and snapshots reference them verbatim.
"""

from enum import StrEnum


class CategoryId(StrEnum):
    """Elemental cost buckets (UniFormat-inspired 7-category model)."""

    FACILITATING = "FACILITATING"
    SUBSTRUCTURE = "SUBSTRUCTURE"
    SUPERSTRUCTURE = "SUPERSTRUCTURE"
    INTERNAL_FINISHES = "INTERNAL_FINISHES"
    FF_E = "FF_E"
    SERVICES = "SERVICES"
    EXTERNAL_WORKS = "EXTERNAL_WORKS"


class HeatBand(StrEnum):
    """Cost-intensity tier selectable per category."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class RangeStatus(StrEnum):
    """Directional guardrail result for an allocation vs its target range."""

    OK = "OK"
    LOW = "LOW"
    HIGH = "HIGH"


class TierId(StrEnum):
    """Benchmark library quality tiers."""

    SELECT = "select"
    RESERVE = "reserve"
    SIGNATURE = "signature"
    LEGACY = "legacy"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class IndirectFeeBase(StrEnum):
    """Base the GC fee is applied on."""

    COST_OF_WORK = "cost_of_work"
    DIRECT_ONLY = "direct_only"


class SoftCostBasis(StrEnum):
    """Base a soft cost line item is computed on."""

    HARD = "hard"
    FFE = "ffe"
    HARD_PLUS_FFE = "hard_plus_ffe"
    TOTAL_BEFORE_ESCALATION = "total_before_escalation"
    FIXED = "fixed"


class EscalationScope(StrEnum):
    """Which subtotal is escalated over the project duration."""

    HARD_ONLY = "hard_only"
    HARD_PLUS_SOFT = "hard_plus_soft"
