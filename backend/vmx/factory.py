"""Factory functions for creating pre-configured library repositories."""

from __future__ import annotations

from typing import TYPE_CHECKING

from vmx.data.library import BenchmarkLibraryRepository
from vmx.data.store import InMemoryStore, JsonFileStore

if TYPE_CHECKING:
    from pathlib import Path

    from vmx.data.store import KeyValueStore


def create_default_repository(store_path: Path | str | None = None) -> BenchmarkLibraryRepository:
    """Create a BenchmarkLibraryRepository with a sensible store.

    With a *store_path* the library is kept in a JSON file at that path;
    without one it lives in memory and starts from the demo library.

    Example::

        from vmx import create_default_repository, TierId

        repo = create_default_repository()
        benchmark = repo.get_benchmark("us", TierId.RESERVE)
    """
    store: KeyValueStore = JsonFileStore(store_path) if store_path else InMemoryStore()
    return BenchmarkLibraryRepository(store)
