import logging
from datetime import timedelta
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from core.domain.errors import StoreError
from core.domain.models.task import Task
from core.domain.ports.task_repository import TaskRepository
from infrastructure.clock import MonotonicClock
from infrastructure.mongo.models.task import TaskMongo, due_date_to_mongo
from infrastructure.mongo.session.client import MongoConnection

logger = logging.getLogger(__name__)

# Nombre de campo de dominio → nombre en el documento.
_DOCUMENT_FIELDS = {
    "title": "title",
    "description": "description",
    "priority": "priority",
    "status": "status",
    "due_date": "dueDate",
}


def _parse_id(task_id: str) -> ObjectId | None:
    try:
        return ObjectId(task_id)
    except (InvalidId, TypeError):
        return None


class MongoTaskRepository(TaskRepository):
    """
    Implementación de TaskRepository usando MongoDB (Synchronous).
    """

    def __init__(
        self, connection: MongoConnection, clock: MonotonicClock | None = None
    ) -> None:
        self.collection: Collection[Any] = connection.get_db().tasks
        # MongoDB guarda milisegundos.
        self._clock = clock or MonotonicClock(resolution=timedelta(milliseconds=1))

    def list(self) -> list[Task]:
        """
        Lista todas las tareas, la más reciente primero.

        Retorna:
            list[Task]: Lista de todas las tareas.
        """
        try:
            docs = self.collection.find().sort("createdAt", DESCENDING)
            return [TaskMongo(**doc).to_domain() for doc in docs]
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    def get(self, task_id: str) -> Task | None:
        """
        Obtiene una tarea por su ID.

        Argumentos:
            task_id (str): El ID de la tarea.

        Retorna:
            Task | None: La tarea encontrada o None si no existe.
        """
        object_id = _parse_id(task_id)
        if object_id is None:
            return None
        try:
            doc = self.collection.find_one({"_id": object_id})
        except PyMongoError as e:
            raise StoreError(str(e)) from e
        if not doc:
            return None
        return TaskMongo(**doc).to_domain()

    def add(self, task: Task) -> Task:
        """
        Inserta una tarea nueva; MongoDB asigna el `_id`.

        Argumentos:
            task (Task): La tarea a guardar.
        """
        document = TaskMongo.document_from_domain(task, self._clock.now())
        try:
            result = self.collection.insert_one(document)
        except PyMongoError as e:
            raise StoreError(str(e)) from e
        document["_id"] = result.inserted_id
        logger.debug(f"✓ Tarea {result.inserted_id} insertada en MongoDB")
        return TaskMongo(**document).to_domain()

    def update(self, task_id: str, changes: dict[str, Any]) -> Task | None:
        """
        Aplica un `$set` con los campos enviados y devuelve el documento actualizado.

        Argumentos:
            task_id (str): El ID de la tarea.
            changes (dict): Campos de dominio a modificar.
        """
        object_id = _parse_id(task_id)
        if object_id is None:
            return None

        update_fields: dict[str, Any] = {}
        for name, value in changes.items():
            if name == "due_date":
                value = due_date_to_mongo(value)
            elif name in ("priority", "status") and value is not None:
                value = value.value
            update_fields[_DOCUMENT_FIELDS[name]] = value
        update_fields["updatedAt"] = self._clock.now()

        try:
            doc = self.collection.find_one_and_update(
                {"_id": object_id},
                {"$set": update_fields},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise StoreError(str(e)) from e
        if not doc:
            return None
        return TaskMongo(**doc).to_domain()

    def delete(self, task_id: str) -> bool:
        """
        Elimina una tarea por su ID.

        Argumentos:
            task_id (str): El ID de la tarea a eliminar.

        Retorna:
            bool: True si se eliminó un documento.
        """
        object_id = _parse_id(task_id)
        if object_id is None:
            return False
        try:
            result = self.collection.delete_one({"_id": object_id})
        except PyMongoError as e:
            raise StoreError(str(e)) from e
        return result.deleted_count > 0
