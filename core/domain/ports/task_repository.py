from abc import ABC, abstractmethod
from typing import Any

from core.domain.models.task import Task


class TaskRepository(ABC):
    @abstractmethod
    def list(self) -> list[Task]:
        """Todas las tareas, la más reciente primero."""
        raise NotImplementedError

    @abstractmethod
    def get(self, task_id: str) -> Task | None:
        raise NotImplementedError

    @abstractmethod
    def add(self, task: Task) -> Task:
        """Persiste una tarea nueva y la devuelve con id y timestamps."""
        raise NotImplementedError

    @abstractmethod
    def update(self, task_id: str, changes: dict[str, Any]) -> Task | None:
        """Aplica solo los campos presentes en `changes`."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, task_id: str) -> bool:
        raise NotImplementedError
