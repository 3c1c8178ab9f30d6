from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from queue import Empty, Full, Queue
from typing import TYPE_CHECKING

from split_macros.exceptions import StoreUnavailableError

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from pathlib import Path

logger = logging.getLogger(__name__)

# Keys per IN (...) query.
_FETCH_CHUNK = 500


class SqliteConnectionPool:
    """Thread-safe connection pool for SQLite."""

    def __init__(self, db_path: Path, max_connections: int = 5) -> None:
        self._db_path = db_path
        self._max_connections = max_connections
        self._pool: Queue[sqlite3.Connection] = Queue(maxsize=max_connections)
        self._schema_lock = threading.Lock()
        self._schema_initialized = False

    def _ensure_initialized(self, conn: sqlite3.Connection) -> None:
        if self._schema_initialized:
            return
        with self._schema_lock:
            if self._schema_initialized:
                return
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute(
                "CREATE TABLE IF NOT EXISTS kv ("
                "  key TEXT NOT NULL PRIMARY KEY,"
                "  value TEXT NOT NULL"
                ")"
            )
            conn.commit()
            self._schema_initialized = True

    def _create_connection(self) -> sqlite3.Connection:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
        conn.execute("PRAGMA busy_timeout=5000")
        self._ensure_initialized(conn)
        return conn

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Acquire a connection from the pool, returning it when done."""
        try:
            conn = self._pool.get_nowait()
        except Empty:
            conn = self._create_connection()

        try:
            yield conn
        finally:
            try:
                self._pool.put_nowait(conn)
            except Full:
                conn.close()

    def close(self) -> None:
        while True:
            try:
                self._pool.get_nowait().close()
            except Empty:
                return


class SqliteKeyValueStore:
    """Key-value store backed by a single SQLite table.

    ``scan`` uses SQLite ``GLOB``, which shares ``*``/``?``/``[...]`` syntax
    with Redis ``SCAN MATCH``.
    """

    def __init__(self, db_path: Path, max_connections: int = 5) -> None:
        self._db_path = db_path
        self._pool = SqliteConnectionPool(db_path, max_connections=max_connections)

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        try:
            with self._pool.connection() as conn:
                yield conn
        except (sqlite3.Error, OSError) as e:
            raise StoreUnavailableError(f"SQLite store at {self._db_path} unavailable", cause=e) from e

    def get(self, key: str) -> str | None:
        with self._connection() as conn:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        return None if row is None else row[0]

    def set(self, key: str, value: str) -> None:
        with self._connection() as conn:
            conn.execute("INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)", (key, value))
            conn.commit()

    def set_many(self, items: Sequence[tuple[str, str]]) -> None:
        with self._connection() as conn:
            conn.executemany("INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)", items)
            conn.commit()

    def delete(self, key: str) -> None:
        with self._connection() as conn:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()

    def scan(self, pattern: str) -> list[str]:
        with self._connection() as conn:
            rows = conn.execute("SELECT key FROM kv WHERE key GLOB ? ORDER BY key", (pattern,)).fetchall()
        logger.debug("SQLite scan %s matched %d keys", pattern, len(rows))
        return [row[0] for row in rows]

    def get_many(self, keys: Sequence[str]) -> list[tuple[str, str]]:
        found: dict[str, str] = {}
        with self._connection() as conn:
            for start in range(0, len(keys), _FETCH_CHUNK):
                chunk = list(keys[start : start + _FETCH_CHUNK])
                placeholders = ",".join("?" for _ in chunk)
                rows = conn.execute(f"SELECT key, value FROM kv WHERE key IN ({placeholders})", chunk).fetchall()
                found.update(rows)
        return [(key, found[key]) for key in keys if key in found]

    def close(self) -> None:
        self._pool.close()
