from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TypedDict


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A lightweight domain model representing a Todo item for non-ORM storage
    backends.

    Fields:
    - id: Unique integer identifier issued by the repository
    - title: Short title (1..200 chars, trimmed on input via schemas)
    - complete: Boolean completion flag
    - owner_id: Identifier of the actor that created the todo; never changes
    - created_at: Local creation timestamp (datetime)
    - updated_at: Local last update timestamp (datetime)
    """

    id: int
    title: str
    complete: bool
    owner_id: str
    created_at: datetime
    updated_at: datetime


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Actor:
    """The authenticated identity a request is made on behalf of."""

    id: str
