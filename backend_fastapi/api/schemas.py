from datetime import date, datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator

from core.domain.models.task import Task, TaskPriority, TaskStatus

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class TaskCreate(BaseModel):
    """Cuerpo de POST /tasks. Campos desconocidos se rechazan."""

    model_config = ConfigDict(extra="forbid")

    title: Title
    description: str | None = ""
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.TODO
    due_date: date | None = Field(default=None, alias="dueDate")


class TaskUpdate(BaseModel):
    """
    Cuerpo de PATCH /tasks/{id}.

    Solo los campos presentes en el JSON se aplican. `description: null`
    la vacía y `dueDate: null` quita la fecha; `title`, `priority` y
    `status` no admiten null.
    """

    model_config = ConfigDict(extra="forbid")

    title: Title | None = None
    description: str | None = None
    priority: TaskPriority | None = None
    status: TaskStatus | None = None
    due_date: date | None = Field(default=None, alias="dueDate")

    @model_validator(mode="after")
    def _reject_null_required(self) -> "TaskUpdate":
        for name in ("title", "priority", "status"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self.model_fields_set}


class TaskResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    description: str
    priority: TaskPriority
    status: TaskStatus
    due_date: date | None = Field(default=None, alias="dueDate")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @classmethod
    def from_domain(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            priority=task.priority,
            status=task.status,
            due_date=task.due_date,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime


class DatabaseStatusResponse(BaseModel):
    status: str
    message: str | None = None
