class TaskNotFoundError(LookupError):
    """La tarea solicitada no existe (se traduce a 404)."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task with ID {task_id} not found")
        self.task_id = task_id


class StoreError(RuntimeError):
    """Fallo de conexión, del pool o de la consulta en el almacenamiento."""


class StoreUninitializedError(RuntimeError):
    """Se usó el almacenamiento antes de llamar a initialize()."""
