from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.db.models import TaskPriority, TaskStatus
from app.utils.time import ensure_aware

TITLE_MAX_LENGTH = 255


def _clean_title(value):
    if not isinstance(value, str):
        return value
    value = value.strip()
    if not value:
        raise ValueError("Title is required")
    return value


class TaskCreate(BaseModel):
    title: str = Field(max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.pending
    priority: TaskPriority = TaskPriority.medium

    @field_validator("title", mode="before")
    @classmethod
    def clean_title(cls, value):
        return _clean_title(value)


class TaskUpdate(BaseModel):
    """
    Partial update; only fields present in the request body are applied.
    `model_fields_set` tells a supplied null apart from an absent field.
    """
    title: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None

    @field_validator("title", mode="before")
    @classmethod
    def clean_title(cls, value):
        return _clean_title(value)

    @model_validator(mode="after")
    def _reject_null_required(self):
        for name in ("title", "status", "priority"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: UUID
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    user_id: UUID
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _aware(cls, value: datetime) -> datetime:
        return ensure_aware(value)


class Pagination(BaseModel):
    page: int
    limit: int
    total: int


class TaskEnvelope(BaseModel):
    success: bool = True
    task: TaskOut


class TaskListEnvelope(BaseModel):
    success: bool = True
    count: int
    pagination: Pagination
    tasks: list[TaskOut]


class MessageEnvelope(BaseModel):
    success: bool = True
    message: str
