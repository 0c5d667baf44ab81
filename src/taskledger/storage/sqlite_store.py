# src/taskledger/storage/sqlite_store.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
import threading
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from .keys import StoreKey, encode_key

logger = logging.getLogger(__name__)


class SqliteRecordStore:
    """
    SQLite-backed RecordStore.

    One table, `records(key TEXT PRIMARY KEY, value TEXT)`, values stored as
    JSON text. Keys are flattened by `encode_key` (task:7, owner:<hex>,
    counter:next_id).

    Connections:
    - outside a transaction, each call opens its own short-lived connection
    - inside `transaction()`, all calls on the same thread share one
      connection opened with BEGIN IMMEDIATE, so concurrent writers serialize
      at the database and a failing block leaves nothing behind
    """

    def __init__(self, db_path: str | Path = "taskledger.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._local = threading.local()
        self._ensure_schema()
        logger.info("SqliteRecordStore ready db=%s records=%s", self._db_path, self.count_records())

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _open(self) -> sqlite3.Connection:
        # isolation_level=None: we issue BEGIN/COMMIT ourselves.
        conn = sqlite3.connect(str(self._db_path), timeout=30.0, isolation_level=None)
        with contextlib.suppress(sqlite3.DatabaseError):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    @contextlib.contextmanager
    def _conn(self) -> Iterator[sqlite3.Connection]:
        active: sqlite3.Connection | None = getattr(self._local, "conn", None)
        if active is not None:
            yield active
            return
        conn = self._open()
        try:
            yield conn
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        with self._conn() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS records (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )

    # ---- RecordStore API ----

    def get(self, key: StoreKey) -> Any | None:
        with self._conn() as conn:
            row = conn.execute("SELECT value FROM records WHERE key = ?", (encode_key(key),)).fetchone()
        if row is None:
            return None
        return json.loads(row[0])

    def set(self, key: StoreKey, value: Any) -> None:
        raw = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
        with self._conn() as conn:
            conn.execute(
                """
                INSERT INTO records(key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (encode_key(key), raw),
            )

    def has(self, key: StoreKey) -> bool:
        with self._conn() as conn:
            row = conn.execute("SELECT 1 FROM records WHERE key = ?", (encode_key(key),)).fetchone()
        return row is not None

    def count_records(self) -> int:
        with self._conn() as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM records").fetchone()
        return int(n)

    @contextlib.contextmanager
    def transaction(self) -> Iterator[None]:
        if getattr(self._local, "conn", None) is not None:
            # Nested: join the outer transaction.
            yield
            return

        conn = self._open()
        self._local.conn = conn
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield
            except BaseException:
                conn.execute("ROLLBACK")
                logger.debug("SqliteRecordStore: transaction rolled back db=%s", self._db_path)
                raise
            conn.execute("COMMIT")
        finally:
            self._local.conn = None
            conn.close()
