"""Benchmark data models: categories, unit-cost bands and target ranges."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from vmx.models.enums import CategoryId, HeatBand


class CategoryDef(BaseModel):
    """Static definition of a cost category."""

    model_config = ConfigDict(frozen=True)

    id: CategoryId
    label: str
    sort_order: int


class BenchmarkBand(BaseModel):
    """Unit cost ($/sq ft) for one category at one heat band."""

    category_id: CategoryId
    band: HeatBand
    psqft: float


class TargetRange(BaseModel):
    """Acceptable share of total cost for a category, as decimals.

    Values are not validated here: ranges loaded from storage or typed by an
    admin may be inverted or out of [0, 1]. The calibration module repairs
    them before they are used for classification.
    """

    category_id: CategoryId
    min_pct: float
    max_pct: float


class BenchmarkSet(BaseModel):
    """A named collection of per-category, per-band unit costs."""

    id: str
    name: str
    currency: str = "USD"
    bands: list[BenchmarkBand] = Field(default_factory=list)
    target_ranges: list[TargetRange] = Field(default_factory=list)

    def get_band(self, category_id: CategoryId, band: HeatBand) -> BenchmarkBand | None:
        """Return the first band entry for (category_id, band), if any."""
        for entry in self.bands:
            if entry.category_id == category_id and entry.band == band:
                return entry
        return None
