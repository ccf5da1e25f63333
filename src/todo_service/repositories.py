from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from functools import lru_cache
from threading import RLock
from typing import List, Optional

from .models import TodoEntity
from .schemas import TodoCreate, TodoUpdate
from .settings import get_settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for todo storage backends."""

    @abstractmethod
    def find_by_id(self, todo_id: int) -> Optional[TodoEntity]:
        """Return a TodoEntity by id, or None if not found."""

    @abstractmethod
    def find_all_by_owner(self, owner_id: str) -> List[TodoEntity]:
        """Return every TodoEntity owned by owner_id, in id order."""

    @abstractmethod
    def insert(self, owner_id: str, data: TodoCreate) -> TodoEntity:
        """Create and return a new TodoEntity owned by owner_id."""

    @abstractmethod
    def update(self, todo_id: int, data: TodoUpdate) -> Optional[TodoEntity]:
        """
        Apply the fields explicitly set on data to an existing TodoEntity.
        Return the updated entity or None if not found. The owner never changes.
        """

    @abstractmethod
    def delete(self, todo_id: int) -> bool:
        """Delete a TodoEntity by id. Return True if deleted, False if not found."""

    @abstractmethod
    def delete_all_by_owner(self, owner_id: str) -> int:
        """Delete every TodoEntity owned by owner_id and return how many were removed."""

    @abstractmethod
    def exists(self, todo_id: int) -> bool:
        """Return True if a TodoEntity with this id is stored."""

    @abstractmethod
    def count(self) -> int:
        """Return the number of stored TodoEntities across all owners."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: dict[int, TodoEntity] = {}
        self._next_id = 1

    def _now(self) -> datetime:
        return datetime.now()

    def _allocate_id(self) -> int:
        with self._lock:
            i = self._next_id
            self._next_id += 1
            return i

    def find_by_id(self, todo_id: int) -> Optional[TodoEntity]:
        with self._lock:
            item = self._items.get(todo_id)
            return None if item is None else item.copy()

    def find_all_by_owner(self, owner_id: str) -> List[TodoEntity]:
        with self._lock:
            owned = [t for t in self._items.values() if t["owner_id"] == owner_id]
            return [t.copy() for t in sorted(owned, key=lambda t: t["id"])]

    def insert(self, owner_id: str, data: TodoCreate) -> TodoEntity:
        now = self._now()
        entity: TodoEntity = {
            "id": self._allocate_id(),
            "title": data.title,
            "complete": data.complete,
            "owner_id": owner_id,
            "created_at": now,
            "updated_at": now,
        }
        with self._lock:
            self._items[entity["id"]] = entity
        return entity.copy()

    def update(self, todo_id: int, data: TodoUpdate) -> Optional[TodoEntity]:
        with self._lock:
            existing = self._items.get(todo_id)
            if existing is None:
                return None

            # Update only provided fields
            updated = existing.copy()
            if "title" in data.model_fields_set:
                updated["title"] = data.title
            if "complete" in data.model_fields_set:
                updated["complete"] = data.complete
            updated["updated_at"] = self._now()

            self._items[todo_id] = updated
            return updated.copy()

    def delete(self, todo_id: int) -> bool:
        with self._lock:
            return self._items.pop(todo_id, None) is not None

    def delete_all_by_owner(self, owner_id: str) -> int:
        with self._lock:
            doomed = [i for i, t in self._items.items() if t["owner_id"] == owner_id]
            for i in doomed:
                del self._items[i]
            return len(doomed)

    def exists(self, todo_id: int) -> bool:
        with self._lock:
            return todo_id in self._items

    def count(self) -> int:
        with self._lock:
            return len(self._items)


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_repository() -> Repository:
    """
    Factory to return the configured repository based on settings.
    - memory: InMemoryRepository
    - sqlite: SQLiteRepository (stdlib sqlite3)

    The instance is shared for the lifetime of the process; call
    get_repository.cache_clear() to rebuild it after changing settings.
    """
    settings = get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteRepository

        logger.info("Using SQLite todo repository at %s", settings.sqlite_db_path)
        return SQLiteRepository(settings.sqlite_db_path)
    logger.info("Using in-memory todo repository")
    return InMemoryRepository()
