"""FastAPI application: create_app factory with /api endpoints."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

# Load .env from project root (backend/../.env or backend/.env)
_backend_dir = Path(__file__).resolve().parent.parent.parent
_project_root = _backend_dir.parent
load_dotenv(_project_root / ".env")
load_dotenv(_backend_dir / ".env")

from vmx.advisory import compare_scenarios, compute_driver_lines, compute_watchouts
from vmx.calibration import DerivationOptions
from vmx.data.categories import VMX_CATEGORIES
from vmx.engine import build_default_selections, compute_scenario_result
from vmx.exceptions import ScenarioError, UnknownRegionError, VmxError
from vmx.indirects import IndirectRates, compute_construction_indirects, default_indirect_rates
from vmx.models.benchmark import BenchmarkSet
from vmx.models.enums import TierId
from vmx.models.scenario import ScenarioSelection
from vmx.soft_costs import compute_cashflow_schedule, parse_soft_costs_config

if TYPE_CHECKING:
    from vmx.data.library import BenchmarkLibraryRepository
    from vmx.models.scenario import ScenarioResult

logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------


class RegionNameRequest(BaseModel):
    name: str = Field(min_length=1)


class CopyTierRequest(BaseModel):
    from_tier: TierId
    to_tier: TierId


class SelectionRequest(BaseModel):
    region_id: str
    tier: TierId


class ScenarioRequest(BaseModel):
    """Scenario to price.

    The benchmark is taken from ``benchmark`` if given, else from the library
    at ``region_id``/``tier``, else from the saved library selection.
    Omitted selections default to MEDIUM for every category.
    """

    area_sqft: float
    region_id: str | None = None
    tier: TierId | None = None
    benchmark: BenchmarkSet | None = None
    selections: list[ScenarioSelection] | None = None
    include_indirects: bool = False
    indirect_rates: IndirectRates | None = None


class CompareRequest(BaseModel):
    a: ScenarioRequest
    b: ScenarioRequest


class SoftCostsRequest(BaseModel):
    scenario: ScenarioRequest
    config: dict[str, Any] | None = None


def create_app(*, repository: BenchmarkLibraryRepository | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    repository
        Optional pre-built library repository for dependency injection (e.g.
        tests). If not provided, one is created from environment variables on
        first use.
    """
    from vmx.api.deps import cors_origins

    app = FastAPI(title="VMX", version=API_VERSION)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Store on app state so tests can inject a repository
    app.state.repository = repository

    def _get_repository() -> BenchmarkLibraryRepository:
        repo: BenchmarkLibraryRepository | None = app.state.repository
        if repo is not None:
            return repo
        from vmx.api.deps import create_repository

        repo = create_repository()
        app.state.repository = repo
        return repo

    def _resolve_benchmark(req: ScenarioRequest) -> tuple[BenchmarkSet, TierId]:
        repo = _get_repository()
        saved = repo.load_selection()
        tier = req.tier or saved.tier
        if req.benchmark is not None:
            return req.benchmark, tier
        region_id = req.region_id or saved.region_id
        try:
            return repo.get_benchmark(region_id, tier), tier
        except UnknownRegionError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc

    def _price(req: ScenarioRequest) -> tuple[ScenarioResult, TierId]:
        benchmark, tier = _resolve_benchmark(req)
        selections = req.selections if req.selections is not None else build_default_selections()
        try:
            result = compute_scenario_result(req.area_sqft, benchmark, selections)
        except ScenarioError as exc:
            logger.info("Scenario rejected: %s", exc)
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except VmxError as exc:
            logger.exception("Error while pricing scenario")
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return result, tier

    # ------------------------------------------------------------------
    # GET /api/health, /api/categories
    # ------------------------------------------------------------------

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": API_VERSION}

    @app.get("/api/categories")
    def categories() -> list[dict[str, Any]]:
        return [c.model_dump(mode="json") for c in VMX_CATEGORIES]

    # ------------------------------------------------------------------
    # Library
    # ------------------------------------------------------------------

    @app.get("/api/library")
    def library() -> dict[str, Any]:
        return _get_repository().load_library().model_dump(mode="json")

    @app.post("/api/regions", status_code=201)
    def add_region(body: RegionNameRequest) -> dict[str, Any]:
        region = _get_repository().add_region(body.name)
        return region.model_dump(mode="json")

    @app.patch("/api/regions/{region_id}")
    def rename_region(region_id: str, body: RegionNameRequest) -> dict[str, Any]:
        try:
            region = _get_repository().update_region_name(region_id, body.name)
        except UnknownRegionError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return region.model_dump(mode="json")

    @app.get("/api/benchmarks/{region_id}/{tier}")
    def get_benchmark(region_id: str, tier: TierId) -> dict[str, Any]:
        try:
            benchmark = _get_repository().get_benchmark(region_id, tier)
        except UnknownRegionError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return benchmark.model_dump(mode="json")

    @app.put("/api/benchmarks/{region_id}/{tier}")
    def put_benchmark(region_id: str, tier: TierId, body: dict[str, Any]) -> dict[str, Any]:
        try:
            benchmark = _get_repository().update_benchmark(region_id, tier, body)
        except UnknownRegionError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return benchmark.model_dump(mode="json")

    @app.post("/api/benchmarks/{region_id}/{tier}/calibrate")
    def calibrate(
        region_id: str,
        tier: TierId,
        options: DerivationOptions | None = None,
    ) -> dict[str, Any]:
        try:
            benchmark = _get_repository().calibrate(region_id, tier, options)
        except UnknownRegionError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return benchmark.model_dump(mode="json")

    @app.post("/api/benchmarks/{region_id}/{tier}/reset")
    def reset(region_id: str, tier: TierId) -> dict[str, Any]:
        try:
            benchmark = _get_repository().reset_tier_to_demo(region_id, tier)
        except UnknownRegionError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return benchmark.model_dump(mode="json")

    @app.post("/api/benchmarks/{region_id}/copy")
    def copy_tier(region_id: str, body: CopyTierRequest) -> dict[str, Any]:
        try:
            benchmark = _get_repository().copy_tier(region_id, body.from_tier, body.to_tier)
        except UnknownRegionError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return benchmark.model_dump(mode="json")

    @app.get("/api/selection")
    def get_selection() -> dict[str, Any]:
        return _get_repository().load_selection().model_dump(mode="json")

    @app.put("/api/selection")
    def put_selection(body: SelectionRequest) -> dict[str, Any]:
        try:
            selection = _get_repository().save_selection(body.region_id, body.tier)
        except UnknownRegionError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return selection.model_dump(mode="json")

    # ------------------------------------------------------------------
    # Scenarios
    # ------------------------------------------------------------------

    @app.post("/api/scenario")
    def scenario(body: ScenarioRequest) -> dict[str, Any]:
        result, tier = _price(body)
        response: dict[str, Any] = {
            "result": result.model_dump(mode="json"),
            "summary_dict": result.to_summary_dict(),
            "watchouts": [w.model_dump(mode="json") for w in compute_watchouts(result)],
        }
        if body.include_indirects:
            rates = body.indirect_rates or default_indirect_rates(tier)
            indirects = compute_construction_indirects(result.total_cost, result.area_sqft, rates)
            response["indirects"] = indirects.model_dump(mode="json")
        return response

    @app.post("/api/scenario/compare")
    def compare(body: CompareRequest) -> dict[str, Any]:
        result_a, _ = _price(body.a)
        result_b, _ = _price(body.b)
        return {
            "a": result_a.model_dump(mode="json"),
            "b": result_b.model_dump(mode="json"),
            "comparison": compare_scenarios(result_a, result_b).model_dump(mode="json"),
            "drivers_vs_a": compute_driver_lines(result_b, result_a).model_dump(mode="json"),
        }

    @app.post("/api/soft-costs")
    def soft_costs(body: SoftCostsRequest) -> dict[str, Any]:
        result, _ = _price(body.scenario)
        config = parse_soft_costs_config(body.config)
        schedule = compute_cashflow_schedule(result, config)
        return {
            "config": config.model_dump(mode="json"),
            "totals": schedule.totals.model_dump(mode="json"),
            "cashflow": [row.model_dump(mode="json") for row in schedule.rows],
        }

    return app
