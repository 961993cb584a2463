"""
Cliente HTTP de la API de tareas.

Cualquier fallo (transporte o respuesta no 2xx) se convierte en ApiError con
un mensaje genérico; la causa real se registra en el log y queda encadenada
en `__cause__`.
"""

import logging
from typing import Any

import httpx

from infrastructure.config import load_settings

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."


class ApiError(Exception):
    def __init__(self, message: str = GENERIC_ERROR_MESSAGE) -> None:
        super().__init__(message)


class TaskApiClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or load_settings().api_url).rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "TaskApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, endpoint, **kwargs)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"API Error en {method} {endpoint}: {e}")
            raise ApiError() from e

        if response.status_code == httpx.codes.NO_CONTENT or not response.content:
            return None
        return response.json()

    def get_tasks(self) -> list[dict[str, Any]]:
        return self._request("GET", "/tasks")

    def get_task(self, task_id: str) -> dict[str, Any]:
        return self._request("GET", f"/tasks/{task_id}")

    def create_task(self, task: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/tasks", json=task)

    def update_task(self, task_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        return self._request("PATCH", f"/tasks/{task_id}", json=changes)

    def delete_task(self, task_id: str) -> None:
        self._request("DELETE", f"/tasks/{task_id}")

    def health_check(self) -> dict[str, Any]:
        return self._request("GET", "/health")
