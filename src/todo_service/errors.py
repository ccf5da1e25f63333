from __future__ import annotations


class TodoServiceError(Exception):
    """Base class for errors raised by the todo service."""


# PUBLIC_INTERFACE
class TodoNotFound(TodoServiceError):
    """
    Raised when a todo cannot be used by the requesting actor.

    The same error (and message) covers an id that does not exist and an id that
    belongs to another actor, so callers cannot probe for other users' records.
    """

    message = "Todo not found"

    def __init__(self, todo_id: int) -> None:
        super().__init__(self.message)
        self.todo_id = todo_id
