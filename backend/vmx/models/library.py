"""Benchmark library models: regions holding one benchmark per tier."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from vmx.models.benchmark import BenchmarkSet  # noqa: TCH001 (pydantic resolves at runtime)
from vmx.models.enums import TierId


class RegionEntry(BaseModel):
    """A region with a benchmark for every tier."""

    id: str
    name: str
    by_tier: dict[TierId, BenchmarkSet]


class BenchmarkLibrary(BaseModel):
    """All regions known to the application."""

    version: Literal[2] = 2
    regions: list[RegionEntry] = Field(default_factory=list)

    def get_region(self, region_id: str) -> RegionEntry | None:
        for region in self.regions:
            if region.id == region_id:
                return region
        return None


class LibrarySelection(BaseModel):
    """The region and tier currently in use."""

    region_id: str
    tier: TierId = TierId.RESERVE
