"""Scenario input selections and computed result models."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Discriminator, Tag, computed_field

from vmx.models.enums import CategoryId, HeatBand, RangeStatus


class BenchmarkSelection(BaseModel):
    """Price a category at the benchmark's unit cost for the chosen band."""

    source: Literal["benchmark"] = "benchmark"
    category_id: CategoryId
    band: HeatBand

    def resolve_psqft(self, benchmark_psqft: float) -> float:
        return benchmark_psqft


class OverrideSelection(BaseModel):
    """Price a category at an explicit unit cost.

    The band is still recorded and must still exist in the benchmark; the
    override only replaces its unit cost.
    """

    source: Literal["override"] = "override"
    category_id: CategoryId
    band: HeatBand
    override_psqft: float

    def resolve_psqft(self, benchmark_psqft: float) -> float:
        return self.override_psqft


def _selection_source(value: Any) -> str:
    """Pick the selection variant, inferring it when ``source`` is omitted."""
    if isinstance(value, dict):
        source = value.get("source")
        if source is not None:
            return str(source)
        return "override" if value.get("override_psqft") is not None else "benchmark"
    return str(getattr(value, "source", "benchmark"))


ScenarioSelection = Annotated[
    Annotated[BenchmarkSelection, Tag("benchmark")]
    | Annotated[OverrideSelection, Tag("override")],
    Discriminator(_selection_source),
]


def make_selection(
    category_id: CategoryId,
    band: HeatBand,
    override_psqft: float | None = None,
) -> BenchmarkSelection | OverrideSelection:
    """Build the selection variant matching whether an override is given."""
    if override_psqft is None:
        return BenchmarkSelection(category_id=category_id, band=band)
    return OverrideSelection(
        category_id=category_id, band=band, override_psqft=override_psqft,
    )


class CategoryResult(BaseModel):
    """Priced and classified allocation for one category."""

    category_id: CategoryId
    label: str
    band: HeatBand
    psqft_used: float
    cost: float
    pct_of_total: float
    target_min_pct: float
    target_max_pct: float
    range_status: RangeStatus

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_out_of_range(self) -> bool:
        return self.range_status != RangeStatus.OK


class ScenarioResult(BaseModel):
    """Complete priced scenario, categories in fixed category order."""

    area_sqft: float
    currency: str
    total_cost: float
    total_psqft: float
    categories: list[CategoryResult]

    def get_category(self, category_id: CategoryId) -> CategoryResult | None:
        for row in self.categories:
            if row.category_id == category_id:
                return row
        return None

    def to_summary_dict(self) -> dict[str, Any]:
        """Produce a flat summary dict with display-ready strings."""
        from vmx.formatting import format_money, format_pct

        return {
            "area_sqft_formatted": f"{self.area_sqft:,.0f} SF",
            "currency": self.currency,
            "total_cost_formatted": format_money(self.total_cost, self.currency),
            "total_psqft_formatted": format_money(self.total_psqft, self.currency),
            "num_out_of_range": sum(1 for c in self.categories if c.is_out_of_range),
            "categories": [
                {
                    "category_id": c.category_id.value,
                    "label": c.label,
                    "band": c.band.value,
                    "cost_formatted": format_money(c.cost, self.currency),
                    "pct_of_total_formatted": format_pct(c.pct_of_total),
                    "target_formatted": (
                        f"{format_pct(c.target_min_pct)} - {format_pct(c.target_max_pct)}"
                    ),
                    "range_status": c.range_status.value,
                }
                for c in self.categories
            ],
        }
