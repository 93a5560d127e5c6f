"""Scenario computation engine for VMX budgets.

Turns per-category heat band selections into a priced, percentage-allocated,
guardrail-annotated :class:`ScenarioResult`:

1. **Guardrails**: resolve a complete set of target ranges. Missing or
   malformed ranges are derived from the benchmark instead of failing.
2. **Pricing**: for each category (fixed order) use the override $/SF if the
   selection carries one, else the benchmark's $/SF for the chosen band, and
   multiply by the area.
3. **Allocation**: divide each category cost by the scenario total.
4. **Classification**: flag each allocation LOW / OK / HIGH against its
   normalized target range.

Pricing inputs (area, selections, bands, total) hard-fail with a
:class:`~vmx.exceptions.ScenarioError`; guardrail inputs never do.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from vmx.calibration import ensure_complete_target_ranges, normalize_range
from vmx.classification import classify_range
from vmx.data.categories import VMX_CATEGORIES
from vmx.exceptions import (
    InvalidAreaError,
    MissingBenchmarkBandError,
    MissingSelectionError,
    NonPositiveTotalError,
)
from vmx.models.enums import CategoryId, HeatBand
from vmx.models.scenario import (
    BenchmarkSelection,
    CategoryResult,
    OverrideSelection,
    ScenarioResult,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from vmx.models.benchmark import BenchmarkSet

logger = logging.getLogger(__name__)


def build_default_selections(
    band: HeatBand = HeatBand.MEDIUM,
) -> list[BenchmarkSelection | OverrideSelection]:
    """One benchmark-priced selection per category, all at *band*."""
    return [BenchmarkSelection(category_id=cat.id, band=band) for cat in VMX_CATEGORIES]


def compute_scenario_result(
    area_sqft: float,
    benchmark: BenchmarkSet,
    selections: Iterable[BenchmarkSelection | OverrideSelection],
) -> ScenarioResult:
    """Price a scenario and classify each category against its guardrail.

    Args:
        area_sqft: Gross area in square feet. Must be finite and positive.
        benchmark: Benchmark providing $/SF per (category, band) and,
            optionally, target ranges.
        selections: One selection per category. If a category appears more
            than once, the last selection wins.

    Returns:
        A ScenarioResult with categories in fixed category order.

    Raises:
        InvalidAreaError: If the area is not a finite positive number.
        MissingSelectionError: If any category has no selection.
        MissingBenchmarkBandError: If a selected (category, band) pair has no
            entry in the benchmark.
        NonPositiveTotalError: If the summed category costs are <= 0.
    """
    if (
        isinstance(area_sqft, bool)
        or not isinstance(area_sqft, int | float)
        or not math.isfinite(area_sqft)
        or area_sqft <= 0
    ):
        raise InvalidAreaError(area_sqft)

    selection_by_category: dict[CategoryId, BenchmarkSelection | OverrideSelection] = {}
    for selection in selections:
        selection_by_category[selection.category_id] = selection

    target_ranges = {r.category_id: r for r in ensure_complete_target_ranges(benchmark)}

    priced: list[tuple[BenchmarkSelection | OverrideSelection, str, float, float]] = []
    for cat in VMX_CATEGORIES:
        selection = selection_by_category.get(cat.id)
        if selection is None:
            raise MissingSelectionError(cat.id)

        band_entry = benchmark.get_band(cat.id, selection.band)
        if band_entry is None:
            raise MissingBenchmarkBandError(cat.id, selection.band)

        psqft_used = selection.resolve_psqft(band_entry.psqft)
        priced.append((selection, cat.label, psqft_used, area_sqft * psqft_used))

    total_cost = sum(cost for _, _, _, cost in priced)
    if not total_cost > 0:
        raise NonPositiveTotalError(total_cost)

    categories: list[CategoryResult] = []
    for selection, label, psqft_used, cost in priced:
        pct = cost / total_cost
        target = target_ranges[selection.category_id]
        min_pct, max_pct = normalize_range(target.min_pct, target.max_pct)
        categories.append(
            CategoryResult(
                category_id=selection.category_id,
                label=label,
                band=selection.band,
                psqft_used=psqft_used,
                cost=cost,
                pct_of_total=pct,
                target_min_pct=min_pct,
                target_max_pct=max_pct,
                range_status=classify_range(pct, min_pct, max_pct),
            )
        )

    logger.debug(
        "Priced scenario on benchmark %s: %.0f SF, total %.2f %s",
        benchmark.id,
        area_sqft,
        total_cost,
        benchmark.currency,
    )

    return ScenarioResult(
        area_sqft=area_sqft,
        currency=benchmark.currency,
        total_cost=total_cost,
        total_psqft=total_cost / area_sqft,
        categories=categories,
    )
