from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from split_macros.exceptions import StoreUnavailableError
from split_macros.store.sqlite_store import SqliteKeyValueStore

if TYPE_CHECKING:
    from pathlib import Path


class TestSqliteKeyValueStore:
    def test_get_returns_none_on_miss(self, tmp_path: Path) -> None:
        store = SqliteKeyValueStore(tmp_path / "splits.db")
        assert store.get("missing") is None

    def test_set_and_get(self, tmp_path: Path) -> None:
        store = SqliteKeyValueStore(tmp_path / "splits.db")
        store.set("k", '{"a": 1}')
        assert store.get("k") == '{"a": 1}'

    def test_set_replaces_value(self, tmp_path: Path) -> None:
        store = SqliteKeyValueStore(tmp_path / "splits.db")
        store.set("k", "old")
        store.set("k", "new")
        assert store.get("k") == "new"

    def test_delete(self, tmp_path: Path) -> None:
        store = SqliteKeyValueStore(tmp_path / "splits.db")
        store.set("a", "1")
        store.set("b", "2")
        store.delete("a")
        assert store.get("a") is None
        assert store.get("b") == "2"

    def test_scan_uses_glob_and_sorts(self, tmp_path: Path) -> None:
        store = SqliteKeyValueStore(tmp_path / "splits.db")
        store.set_many(
            [
                ("game:team:NYY:2025:2025-04-02:2", "{}"),
                ("game:team:NYY:2025:2025-04-01:1", "{}"),
                ("game:team:NYY:2024:2024-04-01:1", "{}"),
                ("game:team:BOS:2025:2025-04-01:1", "{}"),
            ]
        )
        assert store.scan("game:team:NYY:2025:????-??-??:*") == [
            "game:team:NYY:2025:2025-04-01:1",
            "game:team:NYY:2025:2025-04-02:2",
        ]

    def test_scan_is_case_sensitive(self, tmp_path: Path) -> None:
        store = SqliteKeyValueStore(tmp_path / "splits.db")
        store.set("splits:team:NYY:2025", "{}")
        assert store.scan("splits:team:nyy:*") == []

    def test_scan_escaped_metacharacter(self, tmp_path: Path) -> None:
        store = SqliteKeyValueStore(tmp_path / "splits.db")
        store.set("a*b", "1")
        store.set("axb", "2")
        assert store.scan("a[*]b") == ["a*b"]

    def test_get_many_preserves_order_and_skips_missing(self, tmp_path: Path) -> None:
        store = SqliteKeyValueStore(tmp_path / "splits.db")
        store.set_many([("a", "1"), ("b", "2"), ("c", "3")])
        assert store.get_many(["c", "missing", "a"]) == [("c", "3"), ("a", "1")]

    def test_get_many_large_batch(self, tmp_path: Path) -> None:
        store = SqliteKeyValueStore(tmp_path / "splits.db")
        items = [(f"k{i:04d}", str(i)) for i in range(1200)]
        store.set_many(items)
        assert store.get_many([key for key, _ in items]) == items

    def test_get_many_empty(self, tmp_path: Path) -> None:
        store = SqliteKeyValueStore(tmp_path / "splits.db")
        assert store.get_many([]) == []

    def test_auto_creates_parent_dirs(self, tmp_path: Path) -> None:
        store = SqliteKeyValueStore(tmp_path / "deep" / "nested" / "splits.db")
        store.set("k", "v")
        assert store.get("k") == "v"

    def test_wal_mode_enabled(self, tmp_path: Path) -> None:
        store = SqliteKeyValueStore(tmp_path / "splits.db")
        store.set("k", "v")
        with store._pool.connection() as conn:
            journal_mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
        assert journal_mode == "wal"

    def test_unopenable_database_is_unavailable(self, tmp_path: Path) -> None:
        store = SqliteKeyValueStore(tmp_path)
        with pytest.raises(StoreUnavailableError, match="unavailable"):
            store.get("k")
