from fastapi import APIRouter, Depends, Response, status

from backend_fastapi.api.deps import (
    create_task_use_case,
    delete_task_use_case,
    get_task_use_case,
    list_tasks_use_case,
    update_task_use_case,
)
from backend_fastapi.api.schemas import TaskCreate, TaskResponse, TaskUpdate
from core.application.create_task import CreateTaskCommand, CreateTaskUseCase
from core.application.delete_task import DeleteTaskCommand, DeleteTaskUseCase
from core.application.get_task import GetTaskCommand, GetTaskUseCase
from core.application.list_tasks import ListTasksUseCase
from core.application.update_task import UpdateTaskCommand, UpdateTaskUseCase

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Crear una nueva tarea",
)
def create_task(
    payload: TaskCreate,
    use_case: CreateTaskUseCase = Depends(create_task_use_case),
) -> TaskResponse:
    """
    Crea una nueva tarea.

    - **title**: Título (obligatorio).
    - **description**: Descripción opcional.
    - **priority**: low | medium | high (por defecto medium).
    - **status**: todo | in-progress | completed (por defecto todo).
    - **dueDate**: Fecha límite opcional (YYYY-MM-DD).
    """
    task = use_case.execute(
        CreateTaskCommand(
            title=payload.title,
            description=payload.description or "",
            priority=payload.priority,
            status=payload.status,
            due_date=payload.due_date,
        )
    )
    return TaskResponse.from_domain(task)


@router.get(
    "",
    response_model=list[TaskResponse],
    summary="Listar todas las tareas",
)
def list_tasks(
    use_case: ListTasksUseCase = Depends(list_tasks_use_case),
) -> list[TaskResponse]:
    """
    Obtiene todas las tareas, la más reciente primero.
    """
    return [TaskResponse.from_domain(task) for task in use_case.execute()]


@router.get(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Obtener una tarea por id",
)
def get_task(
    task_id: str,
    use_case: GetTaskUseCase = Depends(get_task_use_case),
) -> TaskResponse:
    return TaskResponse.from_domain(use_case.execute(GetTaskCommand(id=task_id)))


@router.patch(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Editar una tarea existente",
)
def update_task(
    task_id: str,
    payload: TaskUpdate,
    use_case: UpdateTaskUseCase = Depends(update_task_use_case),
) -> TaskResponse:
    """
    Modifica solo los campos enviados; el resto conserva su valor.

    - **task_id**: ID de la tarea a modificar.
    """
    task = use_case.execute(task_id, UpdateTaskCommand(changes=payload.changes()))
    return TaskResponse.from_domain(task)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Eliminar una tarea",
)
def delete_task(
    task_id: str,
    use_case: DeleteTaskUseCase = Depends(delete_task_use_case),
) -> Response:
    """
    Elimina una tarea de forma permanente.

    - **task_id**: ID de la tarea a eliminar.
    """
    use_case.execute(DeleteTaskCommand(id=task_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
