"""VMX construction budget calculator.

Usage::

    from vmx import DEMO_BENCHMARK, build_default_selections, compute_scenario_result

    result = compute_scenario_result(
        area_sqft=15_000,
        benchmark=DEMO_BENCHMARK,
        selections=build_default_selections(),
    )
"""

from vmx.calibration import (
    DerivationOptions,
    calibrate_benchmark,
    compute_implied_medium_shares,
    derive_target_ranges,
    ensure_complete_target_ranges,
    normalize_range,
)
from vmx.classification import classify_range
from vmx.data.categories import VMX_CATEGORIES
from vmx.data.demo import DEMO_BENCHMARK
from vmx.data.library import BenchmarkLibraryRepository
from vmx.engine import build_default_selections, compute_scenario_result
from vmx.exceptions import (
    InvalidAreaError,
    MissingBenchmarkBandError,
    MissingSelectionError,
    NonPositiveTotalError,
    ScenarioError,
    VmxError,
)
from vmx.factory import create_default_repository
from vmx.models.benchmark import BenchmarkBand, BenchmarkSet, TargetRange
from vmx.models.enums import CategoryId, HeatBand, RangeStatus, TierId
from vmx.models.scenario import (
    BenchmarkSelection,
    CategoryResult,
    OverrideSelection,
    ScenarioResult,
    make_selection,
)

__all__ = [
    "DEMO_BENCHMARK",
    "VMX_CATEGORIES",
    "BenchmarkBand",
    "BenchmarkLibraryRepository",
    "BenchmarkSelection",
    "BenchmarkSet",
    "CategoryId",
    "CategoryResult",
    "DerivationOptions",
    "HeatBand",
    "InvalidAreaError",
    "MissingBenchmarkBandError",
    "MissingSelectionError",
    "NonPositiveTotalError",
    "OverrideSelection",
    "RangeStatus",
    "ScenarioError",
    "ScenarioResult",
    "TargetRange",
    "TierId",
    "VmxError",
    "build_default_selections",
    "calibrate_benchmark",
    "classify_range",
    "compute_implied_medium_shares",
    "compute_scenario_result",
    "create_default_repository",
    "derive_target_ranges",
    "ensure_complete_target_ranges",
    "make_selection",
    "normalize_range",
]
