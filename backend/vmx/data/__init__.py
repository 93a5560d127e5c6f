"""Benchmark data layer for the VMX budgeting engine."""

from vmx.data.categories import CATEGORY_LABELS, VMX_CATEGORIES
from vmx.data.demo import DEMO_BENCHMARK, DEMO_BENCHMARK_ME, build_demo_library
from vmx.data.store import InMemoryStore, JsonFileStore, KeyValueStore

__all__ = [
    "CATEGORY_LABELS",
    "DEMO_BENCHMARK",
    "DEMO_BENCHMARK_ME",
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "VMX_CATEGORIES",
    "build_demo_library",
]
