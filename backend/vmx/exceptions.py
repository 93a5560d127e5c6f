"""Custom exception hierarchy for the VMX budgeting engine."""

from __future__ import annotations


class VmxError(Exception):
    """Base exception for all VMX errors."""


class ScenarioError(VmxError):
    """Raised when a scenario cannot be priced from its inputs."""


class InvalidAreaError(ScenarioError):
    """Raised when the scenario area is not a finite positive number."""

    def __init__(self, area_sqft: object) -> None:
        self.area_sqft = area_sqft
        super().__init__(f"area_sqft must be a positive number, got {area_sqft!r}")


class MissingSelectionError(ScenarioError):
    """Raised when a category has no band selection."""

    def __init__(self, category_id: str) -> None:
        self.category_id = category_id
        super().__init__(f"Missing selection for category {category_id}")


class MissingBenchmarkBandError(ScenarioError):
    """Raised when the benchmark has no unit cost for a (category, band) pair."""

    def __init__(self, category_id: str, band: str) -> None:
        self.category_id = category_id
        self.band = band
        super().__init__(f"Missing benchmark band for {category_id}:{band}")


class NonPositiveTotalError(ScenarioError):
    """Raised when the summed category costs are zero or negative."""

    def __init__(self, total_cost: float) -> None:
        self.total_cost = total_cost
        super().__init__(f"Total cost computed as non-positive ({total_cost})")


class LibraryError(VmxError):
    """Raised when a benchmark library operation cannot be applied."""


class UnknownRegionError(LibraryError):
    """Raised when a region id is not present in the library."""

    def __init__(self, region_id: str) -> None:
        self.region_id = region_id
        super().__init__(f"Unknown region '{region_id}'")
