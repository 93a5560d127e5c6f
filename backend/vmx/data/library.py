"""Benchmark library persistence and schema repair.

Everything read from the key-value store is untrusted: it may come from an
older version, a hand-edited file, or a partial write. This module is the
only place that validates that data, so the calculators can assume
well-typed input:

- malformed bands are dropped, numeric strings are coerced, and any missing
  (category, band) pair is filled with a 0 $/SF entry;
- target ranges are completed and normalized;
- unusable regions are dropped, and an unusable library is replaced by the
  demo library.

Repaired data is written back so the next load is clean.
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import TYPE_CHECKING, Any

from vmx.calibration import calibrate_benchmark, ensure_complete_target_ranges
from vmx.data.categories import VMX_CATEGORIES
from vmx.data.demo import (
    DEMO_BENCHMARK,
    build_demo_library,
    demo_base_for_region,
    demo_tiers,
    make_demo_benchmark,
)
from vmx.exceptions import UnknownRegionError
from vmx.models.benchmark import BenchmarkBand, BenchmarkSet, TargetRange
from vmx.models.enums import CategoryId, HeatBand, TierId
from vmx.models.library import BenchmarkLibrary, LibrarySelection, RegionEntry
from vmx.numeric import finite_or

if TYPE_CHECKING:
    from vmx.calibration import DerivationOptions
    from vmx.data.store import KeyValueStore

logger = logging.getLogger(__name__)

LIBRARY_KEY = "vmx_benchmark_library_v2"
SELECTION_KEY = "vmx_benchmark_library_selection_v1"


# ---------------------------------------------------------------------------
# Schema repair
# ---------------------------------------------------------------------------


def _parse_enum(enum_cls: type[CategoryId] | type[HeatBand], value: Any) -> Any:
    if not isinstance(value, str):
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _parse_bands(raw_bands: Any) -> tuple[list[BenchmarkBand], bool]:
    changed = not isinstance(raw_bands, list)
    by_key: dict[tuple[CategoryId, HeatBand], BenchmarkBand] = {}

    for raw in raw_bands if isinstance(raw_bands, list) else []:
        if not isinstance(raw, dict):
            changed = True
            continue
        category_id = _parse_enum(CategoryId, raw.get("category_id"))
        band = _parse_enum(HeatBand, raw.get("band"))
        psqft = finite_or(raw.get("psqft"), math.nan)
        if category_id is None or band is None or math.isnan(psqft):
            changed = True
            continue
        by_key[(category_id, band)] = BenchmarkBand(category_id=category_id, band=band, psqft=psqft)

    for cat in VMX_CATEGORIES:
        for band in HeatBand:
            if (cat.id, band) not in by_key:
                by_key[(cat.id, band)] = BenchmarkBand(category_id=cat.id, band=band, psqft=0.0)
                changed = True

    return list(by_key.values()), changed


def _parse_target_ranges(raw_ranges: Any) -> list[TargetRange]:
    ranges: list[TargetRange] = []
    for raw in raw_ranges if isinstance(raw_ranges, list) else []:
        if not isinstance(raw, dict):
            continue
        category_id = _parse_enum(CategoryId, raw.get("category_id"))
        if category_id is None:
            continue
        ranges.append(
            TargetRange(
                category_id=category_id,
                min_pct=finite_or(raw.get("min_pct"), 0.0),
                max_pct=finite_or(raw.get("max_pct"), 1.0),
            )
        )
    return ranges


def normalize_benchmark_set(
    raw: Any,
    fallback: BenchmarkSet,
    name_hint: str | None = None,
) -> tuple[BenchmarkSet, bool]:
    """Validate and repair a stored benchmark set.

    Returns the repaired set and whether anything had to change.
    """
    if isinstance(raw, BenchmarkSet):
        raw = raw.model_dump(mode="json")
    if not isinstance(raw, dict):
        return fallback.model_copy(deep=True), True

    changed = False
    bench_id = raw.get("id")
    if not isinstance(bench_id, str):
        bench_id, changed = fallback.id, True
    name = raw.get("name")
    if not isinstance(name, str):
        name, changed = name_hint or fallback.name, True
    currency = raw.get("currency")
    if not isinstance(currency, str):
        currency, changed = fallback.currency, True

    bands, bands_changed = _parse_bands(raw.get("bands"))
    raw_ranges = raw.get("target_ranges")
    parsed_ranges = (
        _parse_target_ranges(raw_ranges)
        if isinstance(raw_ranges, list)
        else [r.model_copy() for r in fallback.target_ranges]
    )

    interim = BenchmarkSet(
        id=bench_id, name=name, currency=currency, bands=bands, target_ranges=parsed_ranges,
    )
    complete = ensure_complete_target_ranges(interim)
    ranges_changed = [r.model_dump() for r in complete] != [r.model_dump() for r in parsed_ranges]

    result = interim.model_copy(update={"target_ranges": complete})
    return result, changed or bands_changed or ranges_changed


def _normalize_by_tier(
    raw_by_tier: Any,
    region_id: str,
    region_name: str,
) -> tuple[dict[TierId, BenchmarkSet], bool]:
    changed = not isinstance(raw_by_tier, dict)
    source = raw_by_tier if isinstance(raw_by_tier, dict) else {}
    demo_base = demo_base_for_region(region_id, region_name)

    by_tier: dict[TierId, BenchmarkSet] = {}
    for tier in TierId:
        fallback = make_demo_benchmark(demo_base, region_name, tier)
        benchmark, tier_changed = normalize_benchmark_set(
            source.get(tier.value), fallback, f"{region_name} — {tier.label}",
        )
        by_tier[tier] = benchmark
        changed = changed or tier_changed
    return by_tier, changed


def migrate_library(raw: Any) -> tuple[BenchmarkLibrary, bool]:
    """Validate and repair a stored library; fall back to the demo library."""
    if not isinstance(raw, dict) or not isinstance(raw.get("regions"), list):
        return build_demo_library(), True

    changed = raw.get("version") != 2
    regions: list[RegionEntry] = []
    for raw_region in raw["regions"]:
        if (
            not isinstance(raw_region, dict)
            or not isinstance(raw_region.get("id"), str)
            or not isinstance(raw_region.get("name"), str)
        ):
            changed = True
            continue
        by_tier, tier_changed = _normalize_by_tier(
            raw_region.get("by_tier"), raw_region["id"], raw_region["name"],
        )
        changed = changed or tier_changed
        regions.append(RegionEntry(id=raw_region["id"], name=raw_region["name"], by_tier=by_tier))

    if not regions:
        return build_demo_library(), True
    return BenchmarkLibrary(regions=regions), changed


# ---------------------------------------------------------------------------
# Library transforms (pure: return a new library)
# ---------------------------------------------------------------------------


def slugify(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower().strip()).strip("-")


def _require_region(library: BenchmarkLibrary, region_id: str) -> RegionEntry:
    region = library.get_region(region_id)
    if region is None:
        raise UnknownRegionError(region_id)
    return region


def _replace_region(library: BenchmarkLibrary, updated: RegionEntry) -> BenchmarkLibrary:
    regions = [updated if r.id == updated.id else r for r in library.regions]
    return library.model_copy(update={"regions": regions})


def add_region(library: BenchmarkLibrary, name: str) -> tuple[BenchmarkLibrary, RegionEntry]:
    """Add a region seeded from US demo data, placed first in the list.

    Ids are slugs of the name, made unique with ``-2``, ``-3``, ...
    """
    base_id = slugify(name) or "region"
    region_id = base_id
    suffix = 2
    existing = {r.id for r in library.regions}
    while region_id in existing:
        region_id = f"{base_id}-{suffix}"
        suffix += 1

    region = RegionEntry(
        id=region_id,
        name=name,
        by_tier=demo_tiers(DEMO_BENCHMARK, name),
    )
    return library.model_copy(update={"regions": [region, *library.regions]}), region


def update_region_name(library: BenchmarkLibrary, region_id: str, name: str) -> BenchmarkLibrary:
    region = _require_region(library, region_id)
    return _replace_region(library, region.model_copy(update={"name": name}))


def copy_tier_within_region(
    library: BenchmarkLibrary,
    region_id: str,
    from_tier: TierId,
    to_tier: TierId,
) -> BenchmarkLibrary:
    """Copy one tier's benchmark over another tier in the same region."""
    region = _require_region(library, region_id)
    by_tier = dict(region.by_tier)
    by_tier[to_tier] = region.by_tier[from_tier].model_copy(deep=True)
    return _replace_region(library, region.model_copy(update={"by_tier": by_tier}))


def update_benchmark_for_region_tier(
    library: BenchmarkLibrary,
    region_id: str,
    tier: TierId,
    benchmark: BenchmarkSet | dict[str, Any],
) -> BenchmarkLibrary:
    """Replace a tier's benchmark, repairing it the same way a load would."""
    region = _require_region(library, region_id)
    fallback = make_demo_benchmark(demo_base_for_region(region.id, region.name), region.name, tier)
    repaired, _ = normalize_benchmark_set(benchmark, fallback, f"{region.name} — {tier.label}")
    by_tier = {**region.by_tier, tier: repaired}
    return _replace_region(library, region.model_copy(update={"by_tier": by_tier}))


def reset_region_tier_to_demo(
    library: BenchmarkLibrary,
    region_id: str,
    tier: TierId,
) -> BenchmarkLibrary:
    region = _require_region(library, region_id)
    demo = make_demo_benchmark(demo_base_for_region(region.id, region.name), region.name, tier)
    by_tier = {**region.by_tier, tier: demo}
    return _replace_region(library, region.model_copy(update={"by_tier": by_tier}))


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class BenchmarkLibraryRepository:
    """Loads, repairs and persists the benchmark library in a key-value store.

    Args:
        store: Any object with ``get(key)`` and ``set(key, value)`` on strings.

    Example::

        repo = BenchmarkLibraryRepository(InMemoryStore())
        benchmark = repo.get_benchmark("us", TierId.RESERVE)
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def load_library(self) -> BenchmarkLibrary:
        """Load the library, repairing and re-saving it if needed."""
        raw = self._store.get(LIBRARY_KEY)
        if not raw:
            return build_demo_library()
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Stored benchmark library is not valid JSON; using demo library")
            return build_demo_library()

        library, changed = migrate_library(parsed)
        if changed:
            logger.info("Repaired stored benchmark library; saving normalized copy")
            self.save_library(library)
        return library

    def save_library(self, library: BenchmarkLibrary) -> None:
        try:
            self._store.set(LIBRARY_KEY, library.model_dump_json())
        except OSError:
            logger.warning("Could not persist benchmark library", exc_info=True)

    def get_benchmark(self, region_id: str, tier: TierId) -> BenchmarkSet:
        region = _require_region(self.load_library(), region_id)
        return region.by_tier[tier]

    def add_region(self, name: str) -> RegionEntry:
        library, region = add_region(self.load_library(), name)
        self.save_library(library)
        logger.info("Added region %s (%s)", region.id, name)
        return region

    def update_region_name(self, region_id: str, name: str) -> RegionEntry:
        library = update_region_name(self.load_library(), region_id, name)
        self.save_library(library)
        return _require_region(library, region_id)

    def copy_tier(self, region_id: str, from_tier: TierId, to_tier: TierId) -> BenchmarkSet:
        library = copy_tier_within_region(self.load_library(), region_id, from_tier, to_tier)
        self.save_library(library)
        logger.info("Copied %s/%s to %s/%s", region_id, from_tier, region_id, to_tier)
        return _require_region(library, region_id).by_tier[to_tier]

    def update_benchmark(
        self,
        region_id: str,
        tier: TierId,
        benchmark: BenchmarkSet | dict[str, Any],
    ) -> BenchmarkSet:
        library = update_benchmark_for_region_tier(self.load_library(), region_id, tier, benchmark)
        self.save_library(library)
        return _require_region(library, region_id).by_tier[tier]

    def reset_tier_to_demo(self, region_id: str, tier: TierId) -> BenchmarkSet:
        library = reset_region_tier_to_demo(self.load_library(), region_id, tier)
        self.save_library(library)
        logger.info("Reset %s/%s to demo data", region_id, tier)
        return _require_region(library, region_id).by_tier[tier]

    def calibrate(
        self,
        region_id: str,
        tier: TierId,
        options: DerivationOptions | None = None,
    ) -> BenchmarkSet:
        """Replace a tier's target ranges with ranges derived from its bands."""
        calibrated = calibrate_benchmark(self.get_benchmark(region_id, tier), options)
        return self.update_benchmark(region_id, tier, calibrated)

    def load_selection(self) -> LibrarySelection:
        """Return the stored region/tier, or the first region at RESERVE."""
        library = self.load_library()
        fallback = LibrarySelection(
            region_id=library.regions[0].id if library.regions else "us",
            tier=TierId.RESERVE,
        )

        raw = self._store.get(SELECTION_KEY)
        if not raw:
            return fallback
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            return fallback
        if not isinstance(parsed, dict):
            return fallback

        region_id = parsed.get("region_id")
        if not isinstance(region_id, str) or library.get_region(region_id) is None:
            return fallback
        try:
            tier = TierId(parsed.get("tier"))
        except ValueError:
            tier = fallback.tier
        return LibrarySelection(region_id=region_id, tier=tier)

    def save_selection(self, region_id: str, tier: TierId) -> LibrarySelection:
        _require_region(self.load_library(), region_id)
        selection = LibrarySelection(region_id=region_id, tier=tier)
        try:
            self._store.set(SELECTION_KEY, selection.model_dump_json())
        except OSError:
            logger.warning("Could not persist library selection", exc_info=True)
        return selection
