from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel, Field

from ..auth import get_current_actor
from ..controller import Outcome, Result, TodoResourceController, get_controller
from ..models import Actor
from ..schemas import TodoForm, TodoOut

router = APIRouter(
    prefix="/api/v1/todos",
    tags=["todos"],
)

_NOT_FOUND = {404: {"description": "Todo not found"}}
_REDIRECT = {303: {"description": "Redirect to the todo list"}}
_INVALID = {422: {"description": "Submitted todo failed validation"}}


class TodoListEnvelope(BaseModel):
    """
    Envelope for list responses.
    """
    items: List[TodoOut] = Field(..., description="Todo items owned by the current user")
    total: int = Field(..., description="Number of items returned")


def _respond(request: Request, result: Result):
    """
    Translate a controller Result into an HTTP response.

    - Successful writes redirect (303) to the todo list.
    - Validation failures return 422 with the rejected submission so the client
      can redisplay its form.
    """
    if result.kind is Outcome.VALIDATION_FAILED:
        return JSONResponse(
            status_code=422,
            content={
                "error": "ValidationFailed",
                "message": "Todo could not be saved",
                "detail": jsonable_encoder(result.errors),
                "todo": jsonable_encoder(result.form),
            },
        )
    return RedirectResponse(url=str(request.url_for("list_todos")), status_code=status.HTTP_303_SEE_OTHER)


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=TodoListEnvelope,
    summary="List Todos",
    description="List every Todo owned by the current user.",
)
def list_todos(
    actor: Actor = Depends(get_current_actor),
    controller: TodoResourceController = Depends(get_controller),
) -> TodoListEnvelope:
    items = controller.list(actor)
    return TodoListEnvelope(items=[TodoOut(**it) for it in items], total=len(items))  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.get(
    "/new",
    response_model=TodoForm,
    summary="New Todo",
    description="Return a blank Todo for populating a creation form. Nothing is saved.",
)
def new_todo(
    actor: Actor = Depends(get_current_actor),
    controller: TodoResourceController = Depends(get_controller),
) -> TodoForm:
    return controller.prepare_new(actor)


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}/edit",
    response_model=TodoOut,
    summary="Edit Todo",
    description="Fetch one of the current user's Todo items for editing.",
    responses=_NOT_FOUND,
)
def edit_todo(
    todo_id: int,
    actor: Actor = Depends(get_current_actor),
    controller: TodoResourceController = Depends(get_controller),
) -> TodoOut:
    return TodoOut(**controller.fetch_for_edit(actor, todo_id))  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.post(
    "/",
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Create Todo",
    description="Create a Todo owned by the current user, then redirect to the list.",
    responses={**_REDIRECT, **_INVALID},
)
def create_todo(
    request: Request,
    payload: TodoForm,
    actor: Actor = Depends(get_current_actor),
    controller: TodoResourceController = Depends(get_controller),
):
    return _respond(request, controller.create(actor, payload))


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Update Todo",
    description="Update the submitted fields of one of the current user's Todo items.",
    responses={**_REDIRECT, **_INVALID, **_NOT_FOUND},
)
def update_todo(
    request: Request,
    todo_id: int,
    payload: TodoForm,
    actor: Actor = Depends(get_current_actor),
    controller: TodoResourceController = Depends(get_controller),
):
    return _respond(request, controller.update(actor, todo_id, payload))


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}/completed",
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Complete Todo",
    description="Mark one of the current user's Todo items as complete.",
    responses={**_REDIRECT, **_NOT_FOUND},
)
def complete_todo(
    request: Request,
    todo_id: int,
    actor: Actor = Depends(get_current_actor),
    controller: TodoResourceController = Depends(get_controller),
):
    return _respond(request, controller.mark_complete(actor, todo_id))


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Delete Todo",
    description="Delete one of the current user's Todo items.",
    responses={**_REDIRECT, **_NOT_FOUND},
)
def delete_todo(
    request: Request,
    todo_id: int,
    actor: Actor = Depends(get_current_actor),
    controller: TodoResourceController = Depends(get_controller),
):
    return _respond(request, controller.destroy(actor, todo_id))


# PUBLIC_INTERFACE
@router.delete(
    "/",
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Delete All Todos",
    description="Delete every Todo owned by the current user. Other users' items are untouched.",
    responses=_REDIRECT,
)
def delete_all_todos(
    request: Request,
    actor: Actor = Depends(get_current_actor),
    controller: TodoResourceController = Depends(get_controller),
):
    return _respond(request, controller.delete_all(actor))
