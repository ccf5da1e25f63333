from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Generator, List, Optional

from .models import TodoEntity
from .repositories import Repository
from .schemas import TodoCreate, TodoUpdate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "todos"
    id: str = "id"
    title: str = "title"
    complete: str = "complete"
    owner_id: str = "owner_id"
    created_at: str = "created_at"
    updated_at: str = "updated_at"


_COLS = _Cols()

# SQLite INTEGER is a signed 64-bit value
_MIN_ID = -(2 ** 63)
_MAX_ID = 2 ** 63 - 1


def _storable_id(todo_id: int) -> bool:
    return _MIN_ID <= todo_id <= _MAX_ID


class SQLiteRepository(Repository):
    """
    Lightweight SQLite repository implementing the Repository interface.
    """

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_COLS.title} TEXT NOT NULL CHECK (length(trim({_COLS.title})) > 0),
                    {_COLS.complete} INTEGER NOT NULL DEFAULT 0,
                    {_COLS.owner_id} TEXT NOT NULL,
                    {_COLS.created_at} TEXT NOT NULL,
                    {_COLS.updated_at} TEXT NOT NULL
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_owner_id ON {_COLS.table}({_COLS.owner_id})"
            )
        logger.debug("Initialized sqlite schema at %s", self._db_path)

    def _row_to_entity(self, row: sqlite3.Row) -> TodoEntity:
        return {
            "id": int(row[_COLS.id]),
            "title": str(row[_COLS.title]),
            "complete": bool(row[_COLS.complete]),
            "owner_id": str(row[_COLS.owner_id]),
            "created_at": datetime.fromisoformat(row[_COLS.created_at]),
            "updated_at": datetime.fromisoformat(row[_COLS.updated_at]),
        }

    def _select(self, conn: sqlite3.Connection, todo_id: int) -> Optional[sqlite3.Row]:
        return conn.execute(f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (todo_id,)).fetchone()

    def find_by_id(self, todo_id: int) -> Optional[TodoEntity]:
        if not _storable_id(todo_id):
            return None
        with self._conn() as conn:
            row = self._select(conn, todo_id)
            return self._row_to_entity(row) if row else None

    def find_all_by_owner(self, owner_id: str) -> List[TodoEntity]:
        with self._conn() as conn:
            rows = conn.execute(
                f"SELECT * FROM {_COLS.table} WHERE {_COLS.owner_id} = ? ORDER BY {_COLS.id}",
                (owner_id,),
            ).fetchall()
            return [self._row_to_entity(r) for r in rows]

    def insert(self, owner_id: str, data: TodoCreate) -> TodoEntity:
        now = datetime.now().isoformat()
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                INSERT INTO {_COLS.table} ({_COLS.title}, {_COLS.complete}, {_COLS.owner_id},
                    {_COLS.created_at}, {_COLS.updated_at})
                VALUES (?, ?, ?, ?, ?)
                """,
                (data.title, 1 if data.complete else 0, owner_id, now, now),
            )
            row = self._select(conn, cur.lastrowid)
            assert row is not None
            return self._row_to_entity(row)

    def update(self, todo_id: int, data: TodoUpdate) -> Optional[TodoEntity]:
        if not _storable_id(todo_id):
            return None
        with self._conn() as conn:
            row = self._select(conn, todo_id)
            if not row:
                return None
            current = self._row_to_entity(row)

            title = data.title if "title" in data.model_fields_set else current["title"]
            complete = data.complete if "complete" in data.model_fields_set else current["complete"]
            conn.execute(
                f"""
                UPDATE {_COLS.table}
                SET {_COLS.title} = ?, {_COLS.complete} = ?, {_COLS.updated_at} = ?
                WHERE {_COLS.id} = ?
                """,
                (title, 1 if complete else 0, datetime.now().isoformat(), todo_id),
            )
            row2 = self._select(conn, todo_id)
            assert row2 is not None
            return self._row_to_entity(row2)

    def delete(self, todo_id: int) -> bool:
        if not _storable_id(todo_id):
            return False
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?", (todo_id,))
            return cur.rowcount > 0

    def delete_all_by_owner(self, owner_id: str) -> int:
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.owner_id} = ?", (owner_id,))
            return cur.rowcount

    def exists(self, todo_id: int) -> bool:
        if not _storable_id(todo_id):
            return False
        with self._conn() as conn:
            row = conn.execute(
                f"SELECT 1 FROM {_COLS.table} WHERE {_COLS.id} = ?", (todo_id,)
            ).fetchone()
            return row is not None

    def count(self) -> int:
        with self._conn() as conn:
            row = conn.execute(f"SELECT COUNT(*) AS cnt FROM {_COLS.table}").fetchone()
            return int(row["cnt"]) if row else 0
