"""Tests for the public API surface of the vmx package.

Verifies that consumers can import everything they need from the top-level
``vmx`` package, price a scenario against the demo benchmark, and round-trip
results through JSON serialization.
"""

from __future__ import annotations

import json

import pytest

import vmx
from vmx import (
    DEMO_BENCHMARK,
    BenchmarkLibraryRepository,
    HeatBand,
    InvalidAreaError,
    ScenarioError,
    ScenarioResult,
    TierId,
    VmxError,
    build_default_selections,
    compute_scenario_result,
    create_default_repository,
)


class TestImports:
    def test_all_names_resolve(self) -> None:
        for name in vmx.__all__:
            assert hasattr(vmx, name), name

    def test_error_hierarchy(self) -> None:
        assert issubclass(InvalidAreaError, ScenarioError)
        assert issubclass(ScenarioError, VmxError)


class TestQuickStart:
    def test_docstring_example(self) -> None:
        result = compute_scenario_result(
            area_sqft=15_000,
            benchmark=DEMO_BENCHMARK,
            selections=build_default_selections(),
        )
        assert result.total_cost == pytest.approx(15_000 * 2007)

    def test_repository_from_factory(self) -> None:
        repo = create_default_repository()
        assert isinstance(repo, BenchmarkLibraryRepository)
        benchmark = repo.get_benchmark("us", TierId.RESERVE)
        result = compute_scenario_result(1_000, benchmark, build_default_selections(HeatBand.LOW))
        assert result.total_cost > 0

    def test_json_round_trip(self) -> None:
        result = compute_scenario_result(2_500, DEMO_BENCHMARK, build_default_selections())
        payload = json.loads(result.model_dump_json())
        restored = ScenarioResult.model_validate(payload)

        assert restored.total_cost == result.total_cost
        assert [c.range_status for c in restored.categories] == [
            c.range_status for c in result.categories
        ]
