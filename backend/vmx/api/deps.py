"""Dependency wiring for FastAPI endpoints."""

from __future__ import annotations

import logging
import os

from vmx.data.library import BenchmarkLibraryRepository
from vmx.factory import create_default_repository

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:3000"


def create_repository() -> BenchmarkLibraryRepository:
    """Create the library repository from environment configuration.

    Reads VMX_STORE_PATH. When it is unset the library is kept in memory and
    resets to the demo data on restart.
    """
    store_path = os.environ.get("VMX_STORE_PATH", "").strip()
    if not store_path:
        logger.info("VMX_STORE_PATH not set; benchmark library is in-memory only")
        return create_default_repository()
    logger.info("Using benchmark library store at %s", store_path)
    return create_default_repository(store_path)


def cors_origins() -> list[str]:
    """Allowed CORS origins from VMX_CORS_ORIGINS (comma-separated)."""
    raw = os.environ.get("VMX_CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
