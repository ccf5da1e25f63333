from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

TITLE_MAX_LENGTH = 200


def _clean_title(value: str) -> str:
    """
    Strip whitespace and enforce 1..200 length.
    """
    s = value.strip()
    if not (1 <= len(s) <= TITLE_MAX_LENGTH):
        raise ValueError(f"title length must be between 1 and {TITLE_MAX_LENGTH} characters")
    return s


# PUBLIC_INTERFACE
class TodoForm(BaseModel):
    """
    The fields a client may submit for a Todo item.

    Only 'title' and 'complete' are accepted; anything else (such as 'id' or
    'owner_id') is rejected so that ownership can never be assigned from a request.
    Values are not checked for business rules here: the controller validates them
    and hands the rejected form back when they fail.
    """

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "title": "Buy milk",
                "complete": False,
            }
        },
    )

    title: Optional[str] = Field(default=None, description="Short title for the todo item")
    complete: bool = Field(default=False, description="Completion status flag")


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Validated data for creating a new Todo item.
    """

    title: str = Field(..., description="Short title for the todo item", min_length=1, max_length=TITLE_MAX_LENGTH)
    complete: bool = Field(default=False, description="Completion status flag")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _clean_title(v)


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Validated changes for an existing Todo item.
    All fields are optional; only fields present in model_fields_set are applied.
    """

    title: Optional[str] = Field(
        default=None, description="Short title for the todo item", min_length=1, max_length=TITLE_MAX_LENGTH
    )
    complete: Optional[bool] = Field(default=None, description="Completion status flag")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> str:
        """
        A submitted title must not be null or blank.
        """
        if v is None:
            raise ValueError("title is required")
        return _clean_title(v)

    @field_validator("complete")
    @classmethod
    def validate_complete(cls, v: Optional[bool]) -> bool:
        if v is None:
            raise ValueError("complete must be true or false")
        return v


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 123,
                "title": "Buy milk",
                "complete": False,
                "owner_id": "alice",
                "created_at": "2025-01-25T10:15:30.123456",
                "updated_at": "2025-01-26T09:00:00.000001",
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the todo item")
    title: str = Field(..., description="Short title for the todo item")
    complete: bool = Field(..., description="Completion status flag")
    owner_id: str = Field(..., description="Identifier of the user owning the todo item")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
