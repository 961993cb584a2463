import logging
from datetime import datetime, timezone
from typing import Any, Mapping
from uuid import uuid4

from sqlalchemy import delete, insert, select, update

from core.domain.models.task import Task, TaskPriority, TaskStatus
from core.domain.ports.task_repository import TaskRepository
from infrastructure.clock import MonotonicClock
from infrastructure.sqlalchemy.model.models import Base, tasks_table
from infrastructure.sqlalchemy.session.db import ConnectionManager

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite devuelve datetimes sin zona horaria.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_column(name: str, value: Any) -> Any:
    if name in ("priority", "status") and value is not None:
        return value.value
    return value


class SqlTaskRepository(TaskRepository):
    """
    Implementación de TaskRepository sobre el ConnectionManager (SQL).
    """

    def __init__(
        self, db: ConnectionManager, clock: MonotonicClock | None = None
    ) -> None:
        self._db = db
        self._clock = clock or MonotonicClock()
        self._schema_ready = False

    def create_schema(self) -> None:
        self._db.create_schema(Base.metadata)
        self._schema_ready = True

    def _ensure_schema(self) -> None:
        # Si la BDD no estaba lista al arrancar, el esquema se crea aquí.
        if not self._schema_ready:
            self.create_schema()

    def list(self) -> list[Task]:
        self._ensure_schema()
        result = self._db.query(
            select(tasks_table).order_by(tasks_table.c.created_at.desc())
        )
        return [self._to_domain(row) for row in result.rows]

    def get(self, task_id: str) -> Task | None:
        self._ensure_schema()
        result = self._db.query(
            select(tasks_table).where(tasks_table.c.id == task_id)
        )
        if not result.rows:
            return None
        return self._to_domain(result.rows[0])

    def add(self, task: Task) -> Task:
        self._ensure_schema()
        now = self._clock.now()
        task_id = uuid4().hex
        self._db.query(
            insert(tasks_table).values(
                id=task_id,
                title=task.title,
                description=task.description or "",
                priority=task.priority.value,
                status=task.status.value,
                due_date=task.due_date,
                created_at=now,
                updated_at=now,
            )
        )
        logger.debug(f"✓ Tarea {task_id} insertada")
        return Task(
            id=task_id,
            title=task.title,
            description=task.description or "",
            priority=task.priority,
            status=task.status,
            due_date=task.due_date,
            created_at=now,
            updated_at=now,
        )

    def update(self, task_id: str, changes: dict[str, Any]) -> Task | None:
        self._ensure_schema()
        values = {name: _to_column(name, value) for name, value in changes.items()}
        values["updated_at"] = self._clock.now()

        # Un único UPDATE con las columnas enviadas: escrituras concurrentes
        # sobre campos distintos no se pisan (last-write-wins por columna).
        result = self._db.query(
            update(tasks_table).where(tasks_table.c.id == task_id).values(**values)
        )
        if result.rowcount == 0:
            return None
        return self.get(task_id)

    def delete(self, task_id: str) -> bool:
        self._ensure_schema()
        result = self._db.query(delete(tasks_table).where(tasks_table.c.id == task_id))
        return result.rowcount > 0

    @staticmethod
    def _to_domain(row: Mapping[str, Any]) -> Task:
        return Task(
            id=row["id"],
            title=row["title"],
            description=row["description"] or "",
            priority=TaskPriority(row["priority"]),
            status=TaskStatus(row["status"]),
            due_date=row["due_date"],
            created_at=_as_utc(row["created_at"]),
            updated_at=_as_utc(row["updated_at"]),
        )
