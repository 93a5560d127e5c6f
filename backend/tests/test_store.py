"""Tests for the key-value stores backing the benchmark library."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from vmx.data.store import InMemoryStore, JsonFileStore
from vmx.factory import create_default_repository

if TYPE_CHECKING:
    from pathlib import Path


class TestInMemoryStore:
    def test_get_missing(self) -> None:
        assert InMemoryStore().get("nope") is None

    def test_set_then_get(self) -> None:
        store = InMemoryStore()
        store.set("k", "v")
        assert store.get("k") == "v"

    def test_initial_contents_are_copied(self) -> None:
        initial = {"k": "v"}
        store = InMemoryStore(initial)
        store.set("k", "changed")
        assert initial["k"] == "v"


class TestJsonFileStore:
    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert JsonFileStore(tmp_path / "store.json").get("k") is None

    def test_set_creates_file(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "store.json"
        store = JsonFileStore(path)
        store.set("k", "v")

        assert path.exists()
        assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v"}

    def test_values_persist_across_instances(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        JsonFileStore(path).set("a", "1")
        JsonFileStore(path).set("b", "2")
        assert JsonFileStore(path).get("a") == "1"
        assert JsonFileStore(path).get("b") == "2"

    def test_corrupt_file_is_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        path.write_text("{not json", encoding="utf-8")
        store = JsonFileStore(path)

        assert store.get("k") is None
        store.set("k", "v")
        assert store.get("k") == "v"

    def test_invalid_utf8_file_is_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        path.write_bytes(b"\xff\xfe{not utf8")
        store = JsonFileStore(path)

        assert store.get("k") is None
        store.set("k", "v")
        assert store.get("k") == "v"

    def test_non_object_file_is_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert JsonFileStore(path).get("k") is None

    def test_path_property(self, tmp_path: Path) -> None:
        assert JsonFileStore(str(tmp_path / "s.json")).path == tmp_path / "s.json"


class TestCreateDefaultRepository:
    def test_in_memory_by_default(self) -> None:
        repo = create_default_repository()
        assert [r.id for r in repo.load_library().regions] == ["us", "me"]

    def test_file_backed(self, tmp_path: Path) -> None:
        path = tmp_path / "library.json"
        create_default_repository(path).add_region("Aspen")

        reopened = create_default_repository(path)
        assert reopened.load_library().regions[0].id == "aspen"

    def test_unreadable_file_falls_back_to_demo(self, tmp_path: Path) -> None:
        path = tmp_path / "library.json"
        path.write_bytes(b"\xff\xfe")
        assert [r.id for r in create_default_repository(path).load_library().regions] == ["us", "me"]
