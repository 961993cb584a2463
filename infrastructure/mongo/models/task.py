from datetime import date, datetime, time, timezone
from typing import Any

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.domain.models.task import Task, TaskPriority, TaskStatus


def due_date_to_mongo(value: date | None) -> datetime | None:
    # BSON no tiene tipo fecha sin hora: se guarda a medianoche UTC.
    if value is None:
        return None
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


class TaskMongo(BaseModel):
    """
    Modelo de Task para MongoDB.
    Representa cómo se almacena la tarea en la colección `tasks`.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    title: str
    description: str = ""
    priority: str = TaskPriority.MEDIUM.value
    status: str = TaskStatus.TODO.value
    due_date: datetime | None = Field(default=None, alias="dueDate")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @field_validator("id", mode="before")
    @classmethod
    def _object_id_to_str(cls, value: Any) -> Any:
        if isinstance(value, ObjectId):
            return str(value)
        return value

    def to_domain(self) -> Task:
        """
        Convierte el documento de MongoDB al modelo de dominio.

        Retorna:
            Task: La entidad de dominio.
        """
        return Task(
            id=self.id,
            title=self.title,
            description=self.description or "",
            priority=TaskPriority(self.priority),
            status=TaskStatus(self.status),
            due_date=self.due_date.date() if self.due_date else None,
            created_at=_as_utc(self.created_at),
            updated_at=_as_utc(self.updated_at),
        )

    @classmethod
    def document_from_domain(cls, task: Task, now: datetime) -> dict[str, Any]:
        """
        Construye el documento a insertar (sin `_id`, lo asigna MongoDB).

        Argumentos:
            task (Task): La tarea de dominio.
            now (datetime): Timestamp de creación.

        Retorna:
            dict: El documento listo para insert_one.
        """
        return {
            "title": task.title,
            "description": task.description or "",
            "priority": task.priority.value,
            "status": task.status.value,
            "dueDate": due_date_to_mongo(task.due_date),
            "createdAt": now,
            "updatedAt": now,
        }


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
