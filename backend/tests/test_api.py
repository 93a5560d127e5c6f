"""Tests for the FastAPI application, backed by an in-memory library."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient

from vmx.api.app import create_app
from vmx.data.categories import VMX_CATEGORIES
from vmx.data.library import BenchmarkLibraryRepository
from vmx.data.store import InMemoryStore

# ---------------------------------------------------------------------------
# Fixtures / helpers
# ---------------------------------------------------------------------------


@pytest.fixture()
def client() -> TestClient:
    repository = BenchmarkLibraryRepository(InMemoryStore())
    return TestClient(create_app(repository=repository))


def _zero_benchmark() -> dict[str, Any]:
    return {
        "id": "zero",
        "name": "Zero",
        "bands": [
            {"category_id": c.id.value, "band": band, "psqft": 0}
            for c in VMX_CATEGORIES
            for band in ("LOW", "MEDIUM", "HIGH")
        ],
    }


def _selections(**bands: str) -> list[dict[str, Any]]:
    return [
        {"category_id": c.id.value, "band": bands.get(c.id.value, "MEDIUM")}
        for c in VMX_CATEGORIES
    ]


# ---------------------------------------------------------------------------
# Health / reference data
# ---------------------------------------------------------------------------


class TestHealthEndpoint:
    def test_health_returns_200(self, client: TestClient) -> None:
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["version"] == "0.1.0"

    def test_categories(self, client: TestClient) -> None:
        data = client.get("/api/categories").json()
        assert [c["id"] for c in data] == [c.id.value for c in VMX_CATEGORIES]
        assert data[2]["label"] == "Shell"


# ---------------------------------------------------------------------------
# Library
# ---------------------------------------------------------------------------


class TestLibraryEndpoints:
    def test_library(self, client: TestClient) -> None:
        data = client.get("/api/library").json()
        assert data["version"] == 2
        assert [r["id"] for r in data["regions"]] == ["us", "me"]

    def test_add_and_rename_region(self, client: TestClient) -> None:
        created = client.post("/api/regions", json={"name": "Palm Beach"})
        assert created.status_code == 201
        assert created.json()["id"] == "palm-beach"

        renamed = client.patch("/api/regions/palm-beach", json={"name": "West Palm"})
        assert renamed.status_code == 200
        assert renamed.json()["name"] == "West Palm"

    def test_add_region_requires_name(self, client: TestClient) -> None:
        assert client.post("/api/regions", json={"name": ""}).status_code == 422

    def test_rename_unknown_region(self, client: TestClient) -> None:
        response = client.patch("/api/regions/atlantis", json={"name": "X"})
        assert response.status_code == 404
        assert "atlantis" in response.json()["detail"]

    def test_get_benchmark(self, client: TestClient) -> None:
        data = client.get("/api/benchmarks/us/select").json()
        assert data["id"] == "demo-us-select"
        assert len(data["bands"]) == 21

    def test_get_benchmark_unknown_tier(self, client: TestClient) -> None:
        assert client.get("/api/benchmarks/us/platinum").status_code == 422

    def test_put_benchmark_repairs(self, client: TestClient) -> None:
        response = client.put(
            "/api/benchmarks/us/select",
            json={"id": "custom", "name": "Custom", "bands": [], "target_ranges": []},
        )
        assert response.status_code == 200
        data = response.json()
        assert len(data["bands"]) == 21
        assert len(data["target_ranges"]) == 7
        assert client.get("/api/benchmarks/us/select").json()["id"] == "custom"

    def test_put_benchmark_with_oversized_number(self, client: TestClient) -> None:
        bands = [{"category_id": "FF_E", "band": "LOW", "psqft": 10**400}]
        response = client.put(
            "/api/benchmarks/us/select", json={"id": "custom", "name": "Custom", "bands": bands},
        )
        assert response.status_code == 200
        ffe_low = [
            b for b in response.json()["bands"] if b["category_id"] == "FF_E" and b["band"] == "LOW"
        ]
        assert ffe_low[0]["psqft"] == 0

    def test_calibrate_and_reset(self, client: TestClient) -> None:
        demo = client.get("/api/benchmarks/us/reserve").json()
        calibrated = client.post("/api/benchmarks/us/reserve/calibrate")
        assert calibrated.status_code == 200
        assert calibrated.json()["target_ranges"] != demo["target_ranges"]

        reset = client.post("/api/benchmarks/us/reserve/reset")
        assert reset.json()["target_ranges"] == demo["target_ranges"]

    def test_calibrate_with_options(self, client: TestClient) -> None:
        response = client.post(
            "/api/benchmarks/us/reserve/calibrate",
            json={"relative_tolerance": 0.0, "min_half_width_abs": 0.0},
        )
        for r in response.json()["target_ranges"]:
            assert r["min_pct"] == pytest.approx(r["max_pct"])

    def test_copy_tier(self, client: TestClient) -> None:
        client.put("/api/benchmarks/us/select", json={"id": "custom", "name": "Custom", "bands": []})
        response = client.post(
            "/api/benchmarks/us/copy", json={"from_tier": "select", "to_tier": "legacy"},
        )
        assert response.status_code == 200
        assert response.json()["id"] == "custom"

    def test_selection(self, client: TestClient) -> None:
        assert client.get("/api/selection").json() == {"region_id": "us", "tier": "reserve"}

        saved = client.put("/api/selection", json={"region_id": "me", "tier": "legacy"})
        assert saved.status_code == 200
        assert client.get("/api/selection").json() == {"region_id": "me", "tier": "legacy"}

    def test_selection_unknown_region(self, client: TestClient) -> None:
        response = client.put("/api/selection", json={"region_id": "atlantis", "tier": "legacy"})
        assert response.status_code == 404


# ---------------------------------------------------------------------------
# Scenario endpoint: happy path
# ---------------------------------------------------------------------------


class TestScenarioSuccess:
    def test_default_selections(self, client: TestClient) -> None:
        response = client.post("/api/scenario", json={"area_sqft": 10_000})

        assert response.status_code == 200
        data = response.json()
        assert data["result"]["total_cost"] == pytest.approx(20_070_000)
        assert data["summary_dict"]["total_cost_formatted"] == "$20,070,000"
        assert [w["category_id"] for w in data["watchouts"]] == ["FACILITATING", "SUBSTRUCTURE"]
        assert "indirects" not in data

    def test_explicit_region_and_selections(self, client: TestClient) -> None:
        response = client.post(
            "/api/scenario",
            json={
                "area_sqft": 10_000,
                "region_id": "me",
                "tier": "legacy",
                "selections": _selections(SUPERSTRUCTURE="HIGH"),
            },
        )
        data = response.json()
        shell = data["result"]["categories"][2]
        assert shell["range_status"] == "HIGH"
        assert shell["is_out_of_range"] is True

    def test_override_without_source(self, client: TestClient) -> None:
        selections = _selections()
        selections[4] = {"category_id": "FF_E", "band": "MEDIUM", "override_psqft": 300}
        data = client.post("/api/scenario", json={"area_sqft": 1_000, "selections": selections}).json()

        ffe = data["result"]["categories"][4]
        assert ffe["psqft_used"] == 300
        assert ffe["cost"] == 300_000

    def test_include_indirects(self, client: TestClient) -> None:
        data = client.post(
            "/api/scenario", json={"area_sqft": 10_000, "include_indirects": True},
        ).json()
        indirects = data["indirects"]
        assert indirects["direct_hard_cost"] == pytest.approx(20_070_000)
        assert indirects["rates_used"]["fee_rate"] == 0.12
        assert indirects["contract_total"] > indirects["direct_hard_cost"]

    def test_custom_indirect_rates(self, client: TestClient) -> None:
        data = client.post(
            "/api/scenario",
            json={
                "area_sqft": 10_000,
                "include_indirects": True,
                "indirect_rates": {
                    "general_conditions_rate": 0,
                    "gl_insurance_rate": 0,
                    "contingency_rate": 0,
                    "fee_rate": 0,
                },
            },
        ).json()
        assert data["indirects"]["contract_total"] == pytest.approx(20_070_000)

    def test_inline_benchmark(self, client: TestClient, make_benchmark) -> None:
        bench = make_benchmark().model_dump(mode="json")
        data = client.post("/api/scenario", json={"area_sqft": 10_000, "benchmark": bench}).json()
        assert data["result"]["total_cost"] == pytest.approx(19_500_000)


# ---------------------------------------------------------------------------
# Scenario endpoint: errors
# ---------------------------------------------------------------------------


class TestScenarioErrors:
    def test_zero_area(self, client: TestClient) -> None:
        response = client.post("/api/scenario", json={"area_sqft": 0})
        assert response.status_code == 422
        assert "area_sqft" in response.json()["detail"]

    def test_missing_selection(self, client: TestClient) -> None:
        response = client.post("/api/scenario", json={"area_sqft": 1_000, "selections": _selections()[:6]})
        assert response.status_code == 422
        assert "Missing selection for category EXTERNAL_WORKS" in response.json()["detail"]

    def test_non_positive_total(self, client: TestClient) -> None:
        response = client.post("/api/scenario", json={"area_sqft": 1_000, "benchmark": _zero_benchmark()})
        assert response.status_code == 422
        assert "non-positive" in response.json()["detail"]

    def test_unknown_region(self, client: TestClient) -> None:
        response = client.post("/api/scenario", json={"area_sqft": 1_000, "region_id": "atlantis"})
        assert response.status_code == 404

    def test_invalid_band(self, client: TestClient) -> None:
        selections = _selections(FF_E="EXTREME")
        response = client.post("/api/scenario", json={"area_sqft": 1_000, "selections": selections})
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# Compare / soft costs
# ---------------------------------------------------------------------------


class TestCompareEndpoint:
    def test_compare(self, client: TestClient) -> None:
        response = client.post(
            "/api/scenario/compare",
            json={
                "a": {"area_sqft": 10_000},
                "b": {"area_sqft": 10_000, "selections": _selections(SUPERSTRUCTURE="HIGH")},
            },
        )
        assert response.status_code == 200
        comparison = response.json()["comparison"]
        assert comparison["total_delta"] == pytest.approx(2_600_000)
        assert comparison["drivers"][0]["category_id"] == "SUPERSTRUCTURE"

        drivers = response.json()["drivers_vs_a"]
        assert drivers["total_delta_cost"] == pytest.approx(2_600_000)
        assert [d["category_id"] for d in drivers["lines"]] == ["SUPERSTRUCTURE"]
        assert drivers["lines"][0]["delta_pct"] == pytest.approx(0.5)

    def test_compare_propagates_errors(self, client: TestClient) -> None:
        response = client.post(
            "/api/scenario/compare", json={"a": {"area_sqft": 10_000}, "b": {"area_sqft": -1}},
        )
        assert response.status_code == 422


class TestSoftCostsEndpoint:
    def test_default_config(self, client: TestClient) -> None:
        response = client.post("/api/soft-costs", json={"scenario": {"area_sqft": 10_000}})

        assert response.status_code == 200
        data = response.json()
        assert len(data["cashflow"]) == 4
        assert data["totals"]["hard_base"] == pytest.approx(20_070_000)
        assert data["cashflow"][-1]["cumulative_total"] == pytest.approx(
            data["totals"]["total_with_escalation"]
        )

    def test_config_is_repaired(self, client: TestClient) -> None:
        data = client.post(
            "/api/soft-costs",
            json={"scenario": {"area_sqft": 10_000}, "config": {"project_duration_years": 2}},
        ).json()
        assert data["config"]["selected_preset_key"] == "2"
        assert len(data["cashflow"]) == 2
