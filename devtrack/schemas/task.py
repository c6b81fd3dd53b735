from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator
from devtrack.constants import MAX_TIME_SPENT
from devtrack.schemas.base import CamelModel
from devtrack.utils.sanitization import sanitize_string, sanitize_tags

TaskStatus = Literal["pending", "in-progress", "completed"]
TaskPriority = Literal["low", "medium", "high"]


def clamp_seconds(v):
    if v is None:
        return v
    return max(v, 0)


class TaskCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    status: TaskStatus = "pending"
    priority: TaskPriority = "medium"
    notes: str = ""
    time_spent: int = Field(0, le=MAX_TIME_SPENT)
    tags: list[str] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)

    @field_validator("tags", mode="before")
    @classmethod
    def clean_tags(cls, v):
        return sanitize_tags(v)

    @field_validator("time_spent")
    @classmethod
    def non_negative(cls, v):
        return clamp_seconds(v)


class TaskUpdate(CamelModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    notes: str | None = None
    time_spent: int | None = Field(None, le=MAX_TIME_SPENT)
    tags: list[str] | None = None

    @field_validator("title", mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)

    @field_validator("tags", mode="before")
    @classmethod
    def clean_tags(cls, v):
        return sanitize_tags(v)

    @field_validator("time_spent")
    @classmethod
    def non_negative(cls, v):
        return clamp_seconds(v)

    def changes(self) -> dict:
        """Fields the caller actually sent; explicit nulls are dropped except for notes."""
        data = self.model_dump(exclude_unset=True)
        if "notes" in data and data["notes"] is None:
            data["notes"] = ""
        return {k: v for k, v in data.items() if v is not None}


class Task(CamelModel):
    id: str
    title: str
    status: TaskStatus
    priority: TaskPriority
    notes: str = ""
    time_spent: int = 0
    tags: list[str] = []
    user_id: str
    created_at: datetime | None = None
