"""
Construcción explícita de las dependencias de infraestructura.

`open_store()` se llama una vez al arrancar el proceso y `close()` al
terminar; no hay contenedor implícito en tiempo de ejecución.
"""

import logging
from dataclasses import dataclass
from typing import Callable

from core.application.create_task import CreateTaskUseCase
from core.application.delete_task import DeleteTaskUseCase
from core.application.get_task import GetTaskUseCase
from core.application.list_tasks import ListTasksUseCase
from core.application.update_task import UpdateTaskUseCase
from core.domain.ports.task_repository import TaskRepository
from infrastructure.config import Settings
from infrastructure.mongo.repository.task_repository import MongoTaskRepository
from infrastructure.mongo.session.client import MongoConnection
from infrastructure.sqlalchemy.repository.task_repository import SqlTaskRepository
from infrastructure.sqlalchemy.session.db import ConnectionManager

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Store:
    repository: TaskRepository
    ping: Callable[[], bool]
    close: Callable[[], None]


def _open_sql_store(settings: Settings) -> Store:
    db = ConnectionManager(settings)
    try:
        reachable = db.initialize()
        repository = SqlTaskRepository(db)
        if reachable:
            repository.create_schema()
        else:
            logger.warning(
                "⚠️ Arrancando sin conexión a SQL: el esquema se creará en la "
                "primera operación con la BDD disponible."
            )
    except Exception:
        db.shutdown()
        raise
    return Store(repository=repository, ping=db.ping, close=db.shutdown)


def _open_mongo_store(settings: Settings) -> Store:
    connection = MongoConnection(settings)
    try:
        connection.initialize()
        repository = MongoTaskRepository(connection)
    except Exception:
        connection.shutdown()
        raise
    return Store(repository=repository, ping=connection.ping, close=connection.shutdown)


def open_store(settings: Settings) -> Store:
    backend = settings.store_backend
    logger.info(f"Abriendo almacenamiento '{backend}'")

    if backend == "mongo":
        return _open_mongo_store(settings)
    if backend == "sql":
        return _open_sql_store(settings)
    raise ValueError(f"STORE_BACKEND desconocido: {backend!r} (use 'sql' o 'mongo')")


@dataclass(slots=True)
class UseCases:
    list_tasks: ListTasksUseCase
    get_task: GetTaskUseCase
    create_task: CreateTaskUseCase
    update_task: UpdateTaskUseCase
    delete_task: DeleteTaskUseCase


def build_use_cases(repository: TaskRepository) -> UseCases:
    return UseCases(
        list_tasks=ListTasksUseCase(repository=repository),
        get_task=GetTaskUseCase(repository=repository),
        create_task=CreateTaskUseCase(repository=repository),
        update_task=UpdateTaskUseCase(repository=repository),
        delete_task=DeleteTaskUseCase(repository=repository),
    )
