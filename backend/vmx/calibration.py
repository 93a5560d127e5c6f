"""Target range derivation ("Calibrate") for benchmark guardrails.

Default guardrails are anchored on the benchmark's own MEDIUM band:

1. **Implied Medium shares**: price every category at MEDIUM and take each
   category's share of the total. Area cancels out, so no area is needed.
2. **Half-width**: ``center * relative_tolerance``, floored at
   ``min_half_width_abs`` and capped at ``max_half_width_abs`` so small
   categories do not get zero-width ranges and large ones do not get
   near-100% ranges.
3. **Normalization**: every range is clamped into [0, 1] with
   ``min <= max``. Broken ranges are repaired, never rejected.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from pydantic import BaseModel, field_validator

from vmx.data.categories import CATEGORY_COUNT, VMX_CATEGORIES
from vmx.models.benchmark import TargetRange
from vmx.models.enums import CategoryId, HeatBand
from vmx.numeric import clamp, safe_pct

if TYPE_CHECKING:
    from vmx.models.benchmark import BenchmarkSet

logger = logging.getLogger(__name__)


class DerivationOptions(BaseModel):
    """Tunables for :func:`derive_target_ranges`.

    Out-of-bounds values are clamped rather than rejected; non-finite values
    collapse to the lower bound.
    """

    relative_tolerance: float = 0.20
    min_half_width_abs: float = 0.01
    max_half_width_abs: float = 0.06

    @field_validator("relative_tolerance")
    @classmethod
    def _clamp_relative(cls, v: float) -> float:
        return clamp(v, 0.0, 2.0)

    @field_validator("min_half_width_abs", "max_half_width_abs")
    @classmethod
    def _clamp_half_width(cls, v: float) -> float:
        return clamp(v, 0.0, 0.5)


def _usable_psqft(benchmark: BenchmarkSet, category_id: CategoryId, band: HeatBand) -> float | None:
    entry = benchmark.get_band(category_id, band)
    if entry is None or not math.isfinite(entry.psqft):
        return None
    return max(0.0, entry.psqft)


def representative_psqft(benchmark: BenchmarkSet, category_id: CategoryId) -> float:
    """Return the MEDIUM psqft for a category, with LOW/HIGH fallbacks.

    MEDIUM if usable; else the mean of LOW and HIGH; else whichever of the
    two exists; else 0.
    """
    medium = _usable_psqft(benchmark, category_id, HeatBand.MEDIUM)
    if medium is not None:
        return medium

    low = _usable_psqft(benchmark, category_id, HeatBand.LOW)
    high = _usable_psqft(benchmark, category_id, HeatBand.HIGH)
    if low is not None and high is not None:
        return (low + high) / 2
    if low is not None:
        return low
    if high is not None:
        return high
    return 0.0


def compute_implied_medium_shares(benchmark: BenchmarkSet) -> dict[CategoryId, float]:
    """Share of total cost per category if every category were priced at MEDIUM.

    Falls back to equal weights when the benchmark has no usable unit cost.
    Keys follow the fixed category order.
    """
    psqft_by_category = {
        cat.id: representative_psqft(benchmark, cat.id) for cat in VMX_CATEGORIES
    }
    total = sum(psqft_by_category.values())

    if not math.isfinite(total) or total <= 0:
        logger.debug(
            "Benchmark %s has no usable psqft; using equal weights", benchmark.id,
        )
        equal = 1 / CATEGORY_COUNT
        return {cat.id: equal for cat in VMX_CATEGORIES}

    return {cat.id: psqft_by_category[cat.id] / total for cat in VMX_CATEGORIES}


def normalize_range(min_pct: float, max_pct: float) -> tuple[float, float]:
    """Clamp a range into [0, 1] and collapse it to ``min`` if inverted."""
    lo = safe_pct(min_pct)
    hi = safe_pct(max_pct)
    if hi < lo:
        return lo, lo
    return lo, hi


def derive_target_ranges(
    benchmark: BenchmarkSet,
    options: DerivationOptions | None = None,
) -> list[TargetRange]:
    """Derive one target range per category from the implied Medium shares."""
    opts = options or DerivationOptions()
    shares = compute_implied_medium_shares(benchmark)

    ranges: list[TargetRange] = []
    for cat in VMX_CATEGORIES:
        center = safe_pct(shares[cat.id])
        half_rel = center * opts.relative_tolerance
        half = clamp(max(opts.min_half_width_abs, half_rel), 0.0, opts.max_half_width_abs)
        min_pct, max_pct = normalize_range(center - half, center + half)
        ranges.append(TargetRange(category_id=cat.id, min_pct=min_pct, max_pct=max_pct))
    return ranges


def ensure_complete_target_ranges(benchmark: BenchmarkSet) -> list[TargetRange]:
    """Return exactly one normalized target range per category.

    Configured ranges are kept (normalized; the last entry for a category
    wins). Missing categories get a derived range, and as a last resort the
    fully permissive [0, 1].
    """
    by_category: dict[CategoryId, TargetRange] = {}
    for existing in benchmark.target_ranges:
        min_pct, max_pct = normalize_range(existing.min_pct, existing.max_pct)
        by_category[existing.category_id] = TargetRange(
            category_id=existing.category_id, min_pct=min_pct, max_pct=max_pct,
        )

    missing = [cat.id for cat in VMX_CATEGORIES if cat.id not in by_category]
    derived: dict[CategoryId, TargetRange] = {}
    if missing:
        logger.debug(
            "Benchmark %s lacks target ranges for %s; deriving from Medium shares",
            benchmark.id,
            ", ".join(missing),
        )
        derived = {r.category_id: r for r in derive_target_ranges(benchmark)}

    complete: list[TargetRange] = []
    for cat in VMX_CATEGORIES:
        found = by_category.get(cat.id) or derived.get(cat.id)
        if found is None:
            found = TargetRange(category_id=cat.id, min_pct=0.0, max_pct=1.0)
        complete.append(found)
    return complete


def calibrate_benchmark(
    benchmark: BenchmarkSet,
    options: DerivationOptions | None = None,
) -> BenchmarkSet:
    """Return a copy of *benchmark* with freshly derived target ranges."""
    ranges = derive_target_ranges(benchmark, options)
    logger.info("Calibrated target ranges for benchmark %s", benchmark.id)
    return benchmark.model_copy(update={"target_ranges": ranges}, deep=True)
