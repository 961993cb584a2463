import logging
from typing import Any

import pymongo
from pymongo import MongoClient
from pymongo.database import Database

from core.domain.errors import StoreUninitializedError
from infrastructure.config import Settings
from infrastructure.retry import wait_until_ready

logger = logging.getLogger(__name__)


class MongoConnection:
    """
    Cliente de MongoDB con el mismo ciclo de vida que el pool SQL.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._client: MongoClient[Any] | None = None

    def initialize(self) -> bool:
        """
        Crea el cliente y hace ping con reintentos acotados.

        No lanza excepción si MongoDB no responde: registra el error y
        devuelve False.
        """
        if self._client is None:
            self._client = MongoClient(
                self._settings.mongo_uri,
                maxPoolSize=self._settings.db_pool_size,
                serverSelectionTimeoutMS=self._settings.mongo_server_selection_timeout_ms,
                tz_aware=True,
            )
        return wait_until_ready(
            self._probe,
            max_retries=self._settings.db_connect_retry_max,
            retry_delay_ms=self._settings.db_connect_retry_delay_ms,
            name="MongoDB",
        )

    def get_db(self) -> Database[Any]:
        """
        Obtiene la base de datos de MongoDB.

        Raises:
            StoreUninitializedError: Si se llama antes de initialize().
        """
        if self._client is None:
            raise StoreUninitializedError("MongoDB client is not initialized yet")
        return self._client[self._settings.mongo_db_name]

    def ping(self) -> bool:
        try:
            self._probe()
            return True
        except Exception as e:
            logger.warning(f"🔴 Mongo no disponible: {e}")
            return False

    def shutdown(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("Cliente MongoDB cerrado")

    def _probe(self) -> None:
        if self._client is None:
            raise StoreUninitializedError("MongoDB client is not initialized yet")
        # El ping tiene su propio plazo, independiente de serverSelectionTimeoutMS.
        with pymongo.timeout(self._settings.mongo_ping_timeout_ms / 1000):
            self._client.admin.command("ping")
