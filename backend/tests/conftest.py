"""Shared fixtures for the VMX test suite."""

from __future__ import annotations

from collections.abc import Callable, Sequence

import pytest

from vmx.data.categories import VMX_CATEGORIES
from vmx.data.library import BenchmarkLibraryRepository
from vmx.data.store import InMemoryStore
from vmx.models.benchmark import BenchmarkBand, BenchmarkSet, TargetRange
from vmx.models.enums import HeatBand

# MEDIUM $/SF per category in fixed order; sums to 1950.
MEDIUM_PSQFT: tuple[float, ...] = (50.0, 250.0, 500.0, 450.0, 250.0, 270.0, 180.0)


def build_benchmark(
    medium: Sequence[float] = MEDIUM_PSQFT,
    *,
    low: Sequence[float] | None = None,
    high: Sequence[float] | None = None,
    ranges: Sequence[tuple[float, float]] | None = None,
    bench_id: str = "test-benchmark",
    currency: str = "USD",
) -> BenchmarkSet:
    """Benchmark with all three bands for every category.

    LOW and HIGH default to half and one-and-a-half times MEDIUM. Target
    ranges are omitted unless given (one ``(min, max)`` per category).
    """
    low = low if low is not None else [m * 0.5 for m in medium]
    high = high if high is not None else [m * 1.5 for m in medium]

    bands: list[BenchmarkBand] = []
    for cat, lo, mid, hi in zip(VMX_CATEGORIES, low, medium, high, strict=True):
        bands.append(BenchmarkBand(category_id=cat.id, band=HeatBand.LOW, psqft=lo))
        bands.append(BenchmarkBand(category_id=cat.id, band=HeatBand.MEDIUM, psqft=mid))
        bands.append(BenchmarkBand(category_id=cat.id, band=HeatBand.HIGH, psqft=hi))

    target_ranges = [
        TargetRange(category_id=cat.id, min_pct=lo, max_pct=hi)
        for cat, (lo, hi) in zip(VMX_CATEGORIES, ranges or [], strict=False)
    ]
    return BenchmarkSet(
        id=bench_id, name="Test Benchmark", currency=currency, bands=bands,
        target_ranges=target_ranges,
    )


@pytest.fixture()
def make_benchmark() -> Callable[..., BenchmarkSet]:
    """Factory for benchmarks with explicit per-category unit costs."""
    return build_benchmark


@pytest.fixture()
def benchmark() -> BenchmarkSet:
    """Benchmark with MEDIUM unit costs summing to 1950 $/SF, no target ranges."""
    return build_benchmark()


@pytest.fixture()
def repository() -> BenchmarkLibraryRepository:
    """Library repository over an empty in-memory store."""
    return BenchmarkLibraryRepository(InMemoryStore())
