# src/ambitask/api/schemas.py

"""Pydantic request/response schemas for the Task API (camelCase on the wire)."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: Any) -> Any:
    # Older clients send dueAt="" to mean "no due time".
    if isinstance(value, str) and not value.strip():
        return None
    return value


class TaskCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    completed: bool = False
    important: bool = False
    due_at: datetime | None = Field(default=None, alias="dueAt")
    notified: bool = False

    @field_validator("due_at", mode="before")
    @classmethod
    def blank_due_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)


class TaskUpdate(BaseModel):
    """Sparse update: only fields present in the request body are applied."""

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    completed: bool | None = None
    important: bool | None = None
    due_at: datetime | None = Field(default=None, alias="dueAt")
    notified: bool | None = None

    @field_validator("due_at", mode="before")
    @classmethod
    def blank_due_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)

    def changes(self) -> dict[str, Any]:
        """
        Store-level changes (snake_case) for every field present in the body.

        Explicit nulls are passed through: the store reads dueAt=null as "clear"
        and rejects null for the other fields.
        """
        return {name: getattr(self, name) for name in self.model_fields_set}


class TaskResponse(BaseModel):
    id: str
    title: str
    completed: bool
    important: bool
    dueAt: datetime | None
    notified: bool
    createdAt: datetime
    updatedAt: datetime


class DeleteResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str
