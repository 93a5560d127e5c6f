"""Demo benchmark data for the VMX budgeting engine.

Units are $/sq ft. Values are indicative US luxury residential figures used
to seed a fresh library; administrators are expected to overwrite them.
"""

from __future__ import annotations

from vmx.models.benchmark import BenchmarkBand, BenchmarkSet, TargetRange
from vmx.models.enums import CategoryId, HeatBand, TierId
from vmx.models.library import BenchmarkLibrary, RegionEntry

# (category, LOW, MEDIUM, HIGH) $/SF
_DEMO_PSQFT: tuple[tuple[CategoryId, float, float, float], ...] = (
    (CategoryId.FACILITATING, 3.0, 51.0, 106.0),
    (CategoryId.SUBSTRUCTURE, 63.0, 256.0, 390.0),
    (CategoryId.SUPERSTRUCTURE, 280.0, 520.0, 780.0),
    (CategoryId.INTERNAL_FINISHES, 220.0, 460.0, 720.0),
    (CategoryId.FF_E, 120.0, 260.0, 420.0),
    (CategoryId.SERVICES, 140.0, 280.0, 440.0),
    (CategoryId.EXTERNAL_WORKS, 90.0, 180.0, 300.0),
)

# (category, min, max) share of direct hard cost
_DEMO_TARGETS: tuple[tuple[CategoryId, float, float], ...] = (
    (CategoryId.FACILITATING, 0.05, 0.10),
    (CategoryId.SUBSTRUCTURE, 0.15, 0.20),
    (CategoryId.SUPERSTRUCTURE, 0.25, 0.30),
    (CategoryId.INTERNAL_FINISHES, 0.20, 0.25),
    (CategoryId.FF_E, 0.10, 0.15),
    (CategoryId.SERVICES, 0.10, 0.15),
    (CategoryId.EXTERNAL_WORKS, 0.05, 0.10),
)


def _demo_bands() -> list[BenchmarkBand]:
    bands: list[BenchmarkBand] = []
    for category_id, low, medium, high in _DEMO_PSQFT:
        bands.append(BenchmarkBand(category_id=category_id, band=HeatBand.LOW, psqft=low))
        bands.append(BenchmarkBand(category_id=category_id, band=HeatBand.MEDIUM, psqft=medium))
        bands.append(BenchmarkBand(category_id=category_id, band=HeatBand.HIGH, psqft=high))
    return bands


DEMO_BENCHMARK = BenchmarkSet(
    id="demo-us-reserve",
    name="US — Demo — Reserve",
    currency="USD",
    bands=_demo_bands(),
    target_ranges=[
        TargetRange(category_id=c, min_pct=lo, max_pct=hi) for c, lo, hi in _DEMO_TARGETS
    ],
)

# Same figures, kept in USD until currency conversion is modelled.
DEMO_BENCHMARK_ME = DEMO_BENCHMARK.model_copy(
    update={"id": "demo-me-reserve", "name": "ME — Demo — Reserve"}, deep=True,
)


def is_middle_east_region(region_id: str, region_name: str) -> bool:
    rid = region_id.lower()
    name = region_name.lower()
    return rid == "me" or rid.startswith("me-") or name == "me" or "middle east" in name


def demo_base_for_region(region_id: str, region_name: str) -> BenchmarkSet:
    """Pick the demo benchmark a region should be seeded or reset from."""
    return DEMO_BENCHMARK_ME if is_middle_east_region(region_id, region_name) else DEMO_BENCHMARK


def make_demo_benchmark(base: BenchmarkSet, region_label: str, tier: TierId) -> BenchmarkSet:
    """Copy *base* with an id and name for the given region and tier."""
    return base.model_copy(
        update={
            "id": f"demo-{region_label.lower()}-{tier.value}",
            "name": f"{region_label} — Demo — {tier.label}",
        },
        deep=True,
    )


def demo_tiers(base: BenchmarkSet, region_label: str) -> dict[TierId, BenchmarkSet]:
    return {tier: make_demo_benchmark(base, region_label, tier) for tier in TierId}


def build_demo_library() -> BenchmarkLibrary:
    """Library with a US and an ME region, every tier seeded from demo data."""
    return BenchmarkLibrary(
        regions=[
            RegionEntry(id="us", name="US", by_tier=demo_tiers(DEMO_BENCHMARK, "US")),
            RegionEntry(id="me", name="ME", by_tier=demo_tiers(DEMO_BENCHMARK_ME, "ME")),
        ],
    )
