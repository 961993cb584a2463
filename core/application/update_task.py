from dataclasses import dataclass, field
from typing import Any

from core.domain.errors import TaskNotFoundError
from core.domain.models.task import Task
from core.domain.ports.task_repository import TaskRepository

UPDATABLE_FIELDS = frozenset(
    {"title", "description", "priority", "status", "due_date"}
)


@dataclass(slots=True)
class UpdateTaskCommand:
    # Solo contiene los campos enviados por el cliente: ausente = sin cambios.
    changes: dict[str, Any] = field(default_factory=dict)


class UpdateTaskUseCase:
    def __init__(self, repository: TaskRepository) -> None:
        self._repository = repository

    def execute(self, task_id: str, cmd: UpdateTaskCommand) -> Task:
        unknown = set(cmd.changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Campos no actualizables: {sorted(unknown)}")

        changes = dict(cmd.changes)
        if "description" in changes and changes["description"] is None:
            changes["description"] = ""

        task = self._repository.update(task_id, changes)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task
