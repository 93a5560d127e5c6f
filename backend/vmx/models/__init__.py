"""Domain models for the VMX budgeting engine."""

from vmx.models.benchmark import BenchmarkBand, BenchmarkSet, CategoryDef, TargetRange
from vmx.models.enums import (
    CategoryId,
    EscalationScope,
    HeatBand,
    IndirectFeeBase,
    RangeStatus,
    SoftCostBasis,
    TierId,
)
from vmx.models.library import BenchmarkLibrary, LibrarySelection, RegionEntry
from vmx.models.scenario import (
    BenchmarkSelection,
    CategoryResult,
    OverrideSelection,
    ScenarioResult,
    ScenarioSelection,
    make_selection,
)

__all__ = [
    "BenchmarkBand",
    "BenchmarkLibrary",
    "BenchmarkSelection",
    "BenchmarkSet",
    "CategoryDef",
    "CategoryId",
    "CategoryResult",
    "EscalationScope",
    "HeatBand",
    "IndirectFeeBase",
    "LibrarySelection",
    "OverrideSelection",
    "RangeStatus",
    "RegionEntry",
    "ScenarioResult",
    "ScenarioSelection",
    "SoftCostBasis",
    "TargetRange",
    "TierId",
    "make_selection",
]
