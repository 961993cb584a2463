from dataclasses import replace
from typing import Any
from uuid import uuid4

from core.domain.models.task import Task
from core.domain.ports.task_repository import TaskRepository
from infrastructure.clock import MonotonicClock


class InMemoryTaskRepository(TaskRepository):
    def __init__(self) -> None:
        self._data: dict[str, Task] = {}
        self._clock = MonotonicClock()

    def list(self) -> list[Task]:
        return sorted(self._data.values(), key=lambda t: t.created_at, reverse=True)

    def get(self, task_id: str) -> Task | None:
        task = self._data.get(task_id)
        return replace(task) if task else None

    def add(self, task: Task) -> Task:
        now = self._clock.now()
        stored = replace(task, id=uuid4().hex, created_at=now, updated_at=now)
        self._data[stored.id] = stored
        return replace(stored)

    def update(self, task_id: str, changes: dict[str, Any]) -> Task | None:
        task = self._data.get(task_id)
        if task is None:
            return None
        updated = replace(task, **changes, updated_at=self._clock.now())
        self._data[task_id] = updated
        return replace(updated)

    def delete(self, task_id: str) -> bool:
        return self._data.pop(task_id, None) is not None
