from fastapi import Request

from core.application.create_task import CreateTaskUseCase
from core.application.delete_task import DeleteTaskUseCase
from core.application.get_task import GetTaskUseCase
from core.application.list_tasks import ListTasksUseCase
from core.application.update_task import UpdateTaskUseCase
from infrastructure.container import Store, UseCases


def _use_cases(request: Request) -> UseCases:
    return request.app.state.use_cases


def get_store(request: Request) -> Store:
    return request.app.state.store


def list_tasks_use_case(request: Request) -> ListTasksUseCase:
    return _use_cases(request).list_tasks


def get_task_use_case(request: Request) -> GetTaskUseCase:
    return _use_cases(request).get_task


def create_task_use_case(request: Request) -> CreateTaskUseCase:
    return _use_cases(request).create_task


def update_task_use_case(request: Request) -> UpdateTaskUseCase:
    return _use_cases(request).update_task


def delete_task_use_case(request: Request) -> DeleteTaskUseCase:
    return _use_cases(request).delete_task
