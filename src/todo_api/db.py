from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from threading import RLock
from typing import Generator, Optional

from .errors import StoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "todos"
    id: str = "id"
    text: str = "text"
    completed: str = "completed"
    created_at: str = "createdAt"


COLS = _Cols()

# Millisecond-resolution UTC timestamp; CURRENT_TIMESTAMP only has seconds
_NOW_SQL = "(strftime('%Y-%m-%d %H:%M:%f', 'now'))"


class Database:
    """
    Owner of the single SQLite connection shared by all requests.

    The connection is opened once by ``open()`` and released by ``close()``;
    the application lifespan drives both. ``transaction()`` serialises access
    to the connection and commits or rolls back the unit of work.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._lock = RLock()
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def path(self) -> str:
        return self._db_path

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self) -> None:
        with self._lock:
            if self._conn is not None:
                return
            try:
                os.makedirs(os.path.dirname(self._db_path) or ".", exist_ok=True)
                conn = sqlite3.connect(self._db_path, check_same_thread=False)
            except (OSError, sqlite3.Error) as e:
                raise StoreError(f"could not open database at {self._db_path}") from e
            conn.row_factory = sqlite3.Row
            self._conn = conn
            self._init_db()
            logger.info("Connected to SQLite database at %s", self._db_path)

    def close(self) -> None:
        with self._lock:
            if self._conn is None:
                return
            try:
                self._conn.close()
            except sqlite3.Error:
                logger.exception("Error closing database")
                raise
            finally:
                self._conn = None
            logger.info("Database connection closed.")

    def __enter__(self) -> "Database":
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Yield the shared connection inside a transaction.

        Commits on success, rolls back on any error, and re-raises
        ``sqlite3.Error`` as ``StoreError``.
        """
        with self._lock:
            if self._conn is None:
                raise StoreError("database is not open")
            conn = self._conn
            try:
                yield conn
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise StoreError(str(e)) from e
            except BaseException:
                conn.rollback()
                raise

    def _init_db(self) -> None:
        with self.transaction() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {COLS.table} (
                    {COLS.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {COLS.text} TEXT NOT NULL,
                    {COLS.completed} BOOLEAN DEFAULT 0,
                    {COLS.created_at} DATETIME DEFAULT {_NOW_SQL}
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{COLS.table}_created_at ON {COLS.table}({COLS.created_at})"
            )
