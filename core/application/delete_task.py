from dataclasses import dataclass

from core.domain.errors import TaskNotFoundError
from core.domain.ports.task_repository import TaskRepository


@dataclass(slots=True)
class DeleteTaskCommand:
    id: str


class DeleteTaskUseCase:
    def __init__(self, repository: TaskRepository) -> None:
        self._repository = repository

    def execute(self, cmd: DeleteTaskCommand) -> None:
        if not self._repository.delete(cmd.id):
            raise TaskNotFoundError(cmd.id)
