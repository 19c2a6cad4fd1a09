from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

TaskStatus = Literal["pending", "in_progress", "completed"]


def _reject_bool(value):
    # int(True) == 1; a JSON boolean is never a duration
    if isinstance(value, bool):
        raise ValueError("duration must be a number of minutes, not a boolean")
    return value


Minutes = Annotated[int, BeforeValidator(_reject_bool), Field(ge=0)]


def _title_not_blank(value):
    if value is None:
        return value
    stripped = value.strip()
    if not stripped:
        raise ValueError("title must not be blank")
    return stripped


class CamelModel(BaseModel):
    # Wire format is camelCase (dueDate, createdAt); code uses snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskCreate(CamelModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    duration: Optional[Minutes] = None
    status: TaskStatus = "pending"

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        return _title_not_blank(value)


class TaskUpdate(CamelModel):
    """Full-field replacement body; dueDate and duration must be sent (may be null)."""
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    due_date: Optional[datetime]
    duration: Optional[Minutes]
    status: Optional[TaskStatus] = None

    @field_validator("title", "status")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value):
        return _title_not_blank(value)


class Task(TaskCreate):
    id: int
    created_at: datetime
    updated_at: datetime


class GeneratedTask(CamelModel):
    """Loose shape of the generation service output, before defaults are applied."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    duration: Optional[Minutes] = None
    status: Optional[str] = None

    @field_validator("due_date", mode="before")
    @classmethod
    def blank_as_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class AITaskRequest(BaseModel):
    text: Optional[str] = None
