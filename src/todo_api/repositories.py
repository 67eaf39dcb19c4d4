from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import Request

from .db import COLS, Database
from .errors import StoreError
from .models import TodoEntity
from .schemas import TodoCreate, TodoUpdate

_SELECT_BY_ID = f"SELECT * FROM {COLS.table} WHERE {COLS.id} = ?"

# SQLite INTEGER is a signed 64-bit value; no row can carry an id outside it
_MIN_ID = -(2**63)
_MAX_ID = 2**63 - 1


def _storable_id(todo_id: int) -> bool:
    return _MIN_ID <= todo_id <= _MAX_ID


def _parse_created_at(value: object) -> datetime:
    # Stored as 'YYYY-MM-DD HH:MM:SS[.fff]' in UTC
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(str(value))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _row_to_entity(row: sqlite3.Row) -> TodoEntity:
    try:
        created_at = _parse_created_at(row[COLS.created_at])
    except ValueError as e:
        raise StoreError(f"unreadable {COLS.created_at} for todo {row[COLS.id]}") from e
    return {
        "id": int(row[COLS.id]),
        "text": str(row[COLS.text]),
        "completed": bool(row[COLS.completed]),
        "created_at": created_at,
    }


# PUBLIC_INTERFACE
class TodoRepository:
    """
    SQL for the todos table on top of an injected ``Database`` handle.

    Each method is one unit of work: a single transaction on the shared
    connection. Statements are fixed and parameterised.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    def list(self) -> List[TodoEntity]:
        """Return every Todo, newest first."""
        with self._db.transaction() as conn:
            rows = conn.execute(
                f"SELECT * FROM {COLS.table} ORDER BY {COLS.created_at} DESC, {COLS.id} DESC"
            ).fetchall()
            return [_row_to_entity(r) for r in rows]

    def get(self, todo_id: int) -> Optional[TodoEntity]:
        """Return a Todo by id, or None if not found."""
        if not _storable_id(todo_id):
            return None
        with self._db.transaction() as conn:
            row = conn.execute(_SELECT_BY_ID, (todo_id,)).fetchone()
            return _row_to_entity(row) if row else None

    def create(self, data: TodoCreate) -> TodoEntity:
        """Insert a new Todo (completed=false, store-assigned id/createdAt) and return it as stored."""
        with self._db.transaction() as conn:
            cur = conn.execute(f"INSERT INTO {COLS.table} ({COLS.text}) VALUES (?)", (data.text,))
            row = conn.execute(_SELECT_BY_ID, (cur.lastrowid,)).fetchone()
            if row is None:
                raise StoreError(f"todo {cur.lastrowid} vanished after insert")
            return _row_to_entity(row)

    def update(self, todo_id: int, data: TodoUpdate) -> Optional[TodoEntity]:
        """
        Apply the supplied fields of ``data`` and return the updated Todo.

        Unsupplied fields keep their stored value. Returns None when no row
        with ``todo_id`` exists at the time of the update.
        """
        if not _storable_id(todo_id):
            return None
        completed = None if data.completed is None else int(data.completed)
        with self._db.transaction() as conn:
            cur = conn.execute(
                f"""
                UPDATE {COLS.table}
                SET {COLS.text} = COALESCE(?, {COLS.text}),
                    {COLS.completed} = COALESCE(?, {COLS.completed})
                WHERE {COLS.id} = ?
                """,
                (data.text, completed, todo_id),
            )
            if cur.rowcount == 0:
                return None
            row = conn.execute(_SELECT_BY_ID, (todo_id,)).fetchone()
            return _row_to_entity(row) if row else None

    def delete(self, todo_id: int) -> bool:
        """Delete a Todo by id. Return True if deleted, False if not found."""
        if not _storable_id(todo_id):
            return False
        with self._db.transaction() as conn:
            cur = conn.execute(f"DELETE FROM {COLS.table} WHERE {COLS.id} = ?", (todo_id,))
            return cur.rowcount > 0


# PUBLIC_INTERFACE
def get_repository(request: Request) -> TodoRepository:
    """
    FastAPI dependency returning a repository bound to the application's
    store handle (opened by the lifespan and kept on ``app.state.db``).
    """
    return TodoRepository(request.app.state.db)
