from dataclasses import dataclass
from datetime import date

from core.domain.models.task import Task, TaskPriority, TaskStatus
from core.domain.ports.task_repository import TaskRepository


@dataclass(slots=True)
class CreateTaskCommand:
    title: str
    description: str = ""
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.TODO
    due_date: date | None = None


class CreateTaskUseCase:
    def __init__(self, repository: TaskRepository) -> None:
        self._repository = repository

    def execute(self, cmd: CreateTaskCommand) -> Task:
        task = Task(
            title=cmd.title,
            description=cmd.description,
            priority=cmd.priority,
            status=cmd.status,
            due_date=cmd.due_date,
        )
        return self._repository.add(task)
