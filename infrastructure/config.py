import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

_DEFAULT_ORIGINS = "http://localhost:3000,http://frontend:3000,http://127.0.0.1:3000"


def _as_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _as_optional_float(value: str | None) -> float | None:
    if value is None or not value.strip():
        return None
    return float(value)


def _split_origins(value: str) -> list[str]:
    if value.strip() == "*":
        return ["*"]
    return [origin.strip() for origin in value.split(",") if origin.strip()]


@dataclass(frozen=True, slots=True)
class Settings:
    """
    Configuración de la aplicación leída del entorno (y de `.env`).
    """

    store_backend: str = "sql"

    database_url: str | None = None
    db_driver: str = "postgresql+psycopg2"
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = ""
    db_name: str = "tasks"
    db_pool_size: int = 5
    db_pool_timeout: float = 30.0
    db_query_timeout: float | None = None
    db_connect_retry_max: int = 6
    db_connect_retry_delay_ms: int = 1000

    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db_name: str = "tasks"
    mongo_server_selection_timeout_ms: int = 30000
    mongo_ping_timeout_ms: int = 3000

    host: str = "127.0.0.1"
    port: int = 8000
    reload: bool = True
    log_level: str = "info"
    allowed_origins: list[str] = field(
        default_factory=lambda: _split_origins(_DEFAULT_ORIGINS)
    )
    api_url: str = "http://localhost:8000"


def load_settings() -> Settings:
    return Settings(
        store_backend=os.getenv("STORE_BACKEND", "sql").strip().lower(),
        database_url=os.getenv("DATABASE_URL") or None,
        db_driver=os.getenv("DB_DRIVER", "postgresql+psycopg2"),
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", ""),
        db_name=os.getenv("DB_NAME", "tasks"),
        db_pool_size=int(os.getenv("DB_POOL_SIZE", "5")),
        db_pool_timeout=float(os.getenv("DB_POOL_TIMEOUT", "30")),
        db_query_timeout=_as_optional_float(os.getenv("DB_QUERY_TIMEOUT")),
        db_connect_retry_max=int(os.getenv("DB_CONNECT_RETRY_MAX", "6")),
        db_connect_retry_delay_ms=int(os.getenv("DB_CONNECT_RETRY_DELAY", "1000")),
        mongo_uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
        mongo_db_name=os.getenv("MONGO_DB_NAME", "tasks"),
        mongo_server_selection_timeout_ms=int(
            os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "30000")
        ),
        mongo_ping_timeout_ms=int(os.getenv("MONGO_PING_TIMEOUT_MS", "3000")),
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=_as_bool(os.getenv("RELOAD", "true")),
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
        allowed_origins=_split_origins(os.getenv("ALLOWED_ORIGINS", _DEFAULT_ORIGINS)),
        api_url=os.getenv("API_URL", "http://localhost:8000").rstrip("/"),
    )
