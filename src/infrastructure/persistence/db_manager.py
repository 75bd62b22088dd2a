from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from typing import Iterator

from infrastructure.persistence.store import StoreError

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Owns the single SQLite connection shared by the store classes."""

    def __init__(self, db_path: str = "savepet.db"):
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.RLock()

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            if self.db_path != ":memory:":
                self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Serialize a read-modify-write and commit (or roll back) it as a unit."""
        with self._lock:
            conn = self.get_connection()
            try:
                yield conn
            except sqlite3.Error as exc:
                conn.rollback()
                raise StoreError(f"SQLite operation failed on {self.db_path}: {exc}") from exc
            except Exception:
                conn.rollback()
                raise
            else:
                conn.commit()

    def initialize(self) -> None:
        logger.info("Initializing SQLite schema path=%s", self.db_path)
        with self.transaction() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS transactions (
                id          INTEGER PRIMARY KEY AUTOINCREMENT,
                type        TEXT NOT NULL CHECK(type IN ('income','expense')),
                amount      TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                created_at  TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_transactions_created_at ON transactions(created_at);

            CREATE TABLE IF NOT EXISTS budget (
                id            INTEGER PRIMARY KEY CHECK(id = 1),
                period        TEXT NOT NULL DEFAULT 'weekly',
                target_amount TEXT NOT NULL,
                start_date    TEXT NOT NULL,
                end_date      TEXT NOT NULL,
                updated_at    TEXT NOT NULL,
                version       INTEGER NOT NULL DEFAULT 1
            );

            CREATE TABLE IF NOT EXISTS characters (
                id                INTEGER PRIMARY KEY AUTOINCREMENT,
                name              TEXT NOT NULL,
                level             INTEGER NOT NULL DEFAULT 1 CHECK(level >= 1),
                experience        INTEGER NOT NULL DEFAULT 0 CHECK(experience >= 0),
                stage             TEXT NOT NULL DEFAULT 'EGG',
                created_at        TEXT NOT NULL,
                last_evolution_at TEXT,
                version           INTEGER NOT NULL DEFAULT 1
            );

            CREATE TABLE IF NOT EXISTS missions (
                id            INTEGER PRIMARY KEY AUTOINCREMENT,
                stage         TEXT NOT NULL,
                mission_type  TEXT NOT NULL,
                description   TEXT NOT NULL DEFAULT '',
                target_amount TEXT NOT NULL,
                completed     INTEGER NOT NULL DEFAULT 0,
                completed_at  TEXT,
                UNIQUE(stage, mission_type)
            );
        """)

    def close(self) -> None:
        with self._lock:
            if self._conn:
                self._conn.close()
                self._conn = None
