"""
Gestor de conexiones SQL sobre un pool de SQLAlchemy.

Ciclo de vida explícito:
    initialize() → crea el pool y verifica conectividad con reintentos acotados.
    query()      → ejecuta sentencias parametrizadas dentro de una transacción.
    shutdown()   → cierra el pool (idempotente).
"""

import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from typing import Any, Mapping

from sqlalchemy import MetaData, create_engine, text
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import QueuePool
from sqlalchemy.sql import Executable

from core.domain.errors import StoreError, StoreUninitializedError
from infrastructure.config import Settings
from infrastructure.retry import wait_until_ready

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class QueryResult:
    rows: list[Mapping[str, Any]] = field(default_factory=list)
    fields: list[str] = field(default_factory=list)
    rowcount: int = 0


def build_database_url(settings: Settings) -> URL:
    if settings.database_url:
        return make_url(settings.database_url)
    return URL.create(
        drivername=settings.db_driver,
        username=settings.db_user,
        password=settings.db_password or None,
        host=settings.db_host,
        port=settings.db_port,
        database=settings.db_name,
    )


class ConnectionManager:
    """
    Pool de conexiones compartido por todas las peticiones.

    El pool tiene un máximo de `db_pool_size` conexiones (sin overflow);
    cuando se agota, las peticiones esperan hasta `db_pool_timeout` segundos.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._engine: Engine | None = None
        self._executor: ThreadPoolExecutor | None = None

    # ──────────────────────────────────────────────────────────────────────────
    # Ciclo de vida
    # ──────────────────────────────────────────────────────────────────────────

    def initialize(self) -> bool:
        """
        Crea el pool y comprueba la conectividad con reintentos.

        Si la BDD no responde tras `db_connect_retry_max` intentos se registra
        el error y se devuelve False SIN lanzar excepción: el pool queda creado
        y las consultas fallarán con StoreError hasta que la BDD esté disponible.

        Returns:
            True si la verificación de conectividad tuvo éxito.
        """
        if self._engine is None:
            url = build_database_url(self._settings)
            connect_args: dict[str, Any] = {}
            if url.get_backend_name() == "sqlite":
                connect_args["check_same_thread"] = False

            self._engine = create_engine(
                url,
                poolclass=QueuePool,
                pool_size=self._settings.db_pool_size,
                max_overflow=0,
                pool_timeout=self._settings.db_pool_timeout,
                pool_pre_ping=True,
                connect_args=connect_args,
            )
            logger.info(
                f"Pool SQL creado para {url.render_as_string(hide_password=True)} "
                f"(pool_size={self._settings.db_pool_size})"
            )

        return wait_until_ready(
            self._probe,
            max_retries=self._settings.db_connect_retry_max,
            retry_delay_ms=self._settings.db_connect_retry_delay_ms,
            name="SQL",
        )

    def shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.info("Pool SQL cerrado")

    def __enter__(self) -> "ConnectionManager":
        self.initialize()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.shutdown()

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise StoreUninitializedError("Database pool is not initialized yet")
        return self._engine

    # ──────────────────────────────────────────────────────────────────────────
    # Consultas
    # ──────────────────────────────────────────────────────────────────────────

    def query(
        self,
        sql: str | Executable,
        params: Mapping[str, Any] | None = None,
        timeout: float | None = None,
    ) -> QueryResult:
        """
        Ejecuta una sentencia parametrizada en una transacción propia.

        Args:
            sql:     SQL con parámetros con nombre (`:id`) o sentencia Core.
            params:  Valores de los parámetros.
            timeout: Plazo máximo en segundos (por defecto `db_query_timeout`).

        Raises:
            StoreUninitializedError: Si se llama antes de initialize().
            StoreError: Si falla el pool, la conexión, la consulta o vence el plazo.
        """
        engine = self.engine
        statement = text(sql) if isinstance(sql, str) else sql
        deadline = timeout if timeout is not None else self._settings.db_query_timeout

        if deadline is None:
            return self._execute(engine, statement, params)

        future = self._get_executor().submit(self._execute, engine, statement, params)
        try:
            return future.result(timeout=deadline)
        except FutureTimeoutError as e:
            future.cancel()
            logger.error(f"⏰ Consulta SQL excedió el plazo de {deadline}s")
            raise StoreError(f"Query exceeded deadline of {deadline}s") from e

    def ping(self) -> bool:
        try:
            self._probe()
            return True
        except Exception as e:
            logger.warning(f"🔴 SQL no disponible: {e}")
            return False

    def create_schema(self, metadata: MetaData) -> None:
        try:
            metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            logger.error(f"❌ No se pudo crear el esquema: {e}")
            raise StoreError(str(e)) from e

    # ──────────────────────────────────────────────────────────────────────────
    # Métodos privados
    # ──────────────────────────────────────────────────────────────────────────

    def _probe(self) -> None:
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))

    @staticmethod
    def _execute(
        engine: Engine, statement: Executable, params: Mapping[str, Any] | None
    ) -> QueryResult:
        try:
            with engine.begin() as connection:
                if params:
                    result = connection.execute(statement, dict(params))
                else:
                    result = connection.execute(statement)
                if not result.returns_rows:
                    return QueryResult(rowcount=result.rowcount)
                fields = list(result.keys())
                rows = [dict(row._mapping) for row in result]
                return QueryResult(rows=rows, fields=fields, rowcount=len(rows))
        except SQLAlchemyError as e:
            logger.error(f"✗ Consulta SQL falló: {e}")
            raise StoreError(str(e)) from e

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self._settings.db_pool_size,
                thread_name_prefix="SqlQuery",
            )
        return self._executor
