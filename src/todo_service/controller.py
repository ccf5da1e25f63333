"""
Ownership-scoped controller for the todo resource.

Every operation receives the requesting actor explicitly and only ever reads or
writes todos owned by that actor. Lookups by id go through find_owned(), which
raises TodoNotFound both for missing ids and for ids owned by someone else.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from fastapi import Depends
from pydantic import ValidationError

from .errors import TodoNotFound
from .models import Actor, TodoEntity
from .repositories import Repository, get_repository
from .schemas import TodoCreate, TodoForm, TodoUpdate

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class Outcome(str, enum.Enum):
    """
    Kind of a write Result. The HTTP layer redirects to the list for every
    kind except VALIDATION_FAILED, which redisplays the rejected form.
    """

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    VALIDATION_FAILED = "validation_failed"


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Result:
    """
    Outcome of a write operation.

    - todo: the stored record after the write (the removed record for a single delete)
    - form: the rejected submission when kind is VALIDATION_FAILED
    - errors: pydantic error details when kind is VALIDATION_FAILED
    - count: number of records removed by a delete
    """

    kind: Outcome
    todo: Optional[TodoEntity] = None
    form: Optional[TodoForm] = None
    errors: List[Dict[str, Any]] = field(default_factory=list)
    count: int = 0

    @property
    def ok(self) -> bool:
        return self.kind is not Outcome.VALIDATION_FAILED


def _validation_failed(form: TodoForm, exc: ValidationError) -> Result:
    return Result(
        kind=Outcome.VALIDATION_FAILED,
        form=form,
        errors=exc.errors(include_url=False, include_context=False),
    )


# PUBLIC_INTERFACE
class TodoResourceController:
    """CRUD operations on todos, scoped to the owning actor."""

    def __init__(self, repository: Repository) -> None:
        self._repo = repository

    def find_owned(self, actor: Actor, todo_id: int) -> TodoEntity:
        """
        Return the todo with this id if actor owns it.

        Raises:
            TodoNotFound: if the todo does not exist or belongs to another actor.
        """
        todo = self._repo.find_by_id(todo_id)
        if todo is None or todo["owner_id"] != actor.id:
            logger.debug("Todo %s not available to %s", todo_id, actor.id)
            raise TodoNotFound(todo_id)
        return todo

    def list(self, actor: Actor) -> List[TodoEntity]:
        return self._repo.find_all_by_owner(actor.id)

    def prepare_new(self, actor: Actor) -> TodoForm:
        """Blank, unsaved todo used to populate a new-item form."""
        return TodoForm()

    def fetch_for_edit(self, actor: Actor, todo_id: int) -> TodoEntity:
        return self.find_owned(actor, todo_id)

    def create(self, actor: Actor, form: TodoForm) -> Result:
        try:
            data = TodoCreate.model_validate(form.model_dump())
        except ValidationError as exc:
            logger.info("Rejected new todo for %s: %d error(s)", actor.id, exc.error_count())
            return _validation_failed(form, exc)

        todo = self._repo.insert(actor.id, data)
        logger.info("Created todo %s for %s", todo["id"], actor.id)
        return Result(kind=Outcome.CREATED, todo=todo)

    def update(self, actor: Actor, todo_id: int, form: TodoForm) -> Result:
        """
        Apply the fields the client actually submitted. Omitted fields keep
        their current values.
        """
        self.find_owned(actor, todo_id)
        try:
            changes = TodoUpdate.model_validate(form.model_dump(exclude_unset=True))
        except ValidationError as exc:
            logger.info("Rejected update of todo %s for %s", todo_id, actor.id)
            return _validation_failed(form, exc)

        todo = self._repo.update(todo_id, changes)
        if todo is None:
            # Removed between the ownership check and the write.
            raise TodoNotFound(todo_id)
        logger.info("Updated todo %s for %s", todo_id, actor.id)
        return Result(kind=Outcome.UPDATED, todo=todo)

    def destroy(self, actor: Actor, todo_id: int) -> Result:
        todo = self.find_owned(actor, todo_id)
        if not self._repo.delete(todo_id):
            raise TodoNotFound(todo_id)
        logger.info("Deleted todo %s for %s", todo_id, actor.id)
        return Result(kind=Outcome.DELETED, todo=todo, count=1)

    def mark_complete(self, actor: Actor, todo_id: int) -> Result:
        """Set complete to True. There is no way back through the controller."""
        self.find_owned(actor, todo_id)
        todo = self._repo.update(todo_id, TodoUpdate(complete=True))
        if todo is None:
            raise TodoNotFound(todo_id)
        logger.info("Marked todo %s complete for %s", todo_id, actor.id)
        return Result(kind=Outcome.UPDATED, todo=todo)

    def delete_all(self, actor: Actor) -> Result:
        removed = self._repo.delete_all_by_owner(actor.id)
        logger.info("Deleted %d todo(s) for %s", removed, actor.id)
        return Result(kind=Outcome.DELETED, count=removed)


# PUBLIC_INTERFACE
def get_controller(repo: Repository = Depends(get_repository)) -> TodoResourceController:
    """FastAPI dependency building a controller over the configured repository."""
    return TodoResourceController(repo)
