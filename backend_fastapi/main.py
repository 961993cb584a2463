import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend_fastapi.api.errors import register_exception_handlers
from backend_fastapi.api.routes.health import router as health_router
from backend_fastapi.api.routes.tasks import router as tasks_router
from infrastructure.config import Settings, load_settings
from infrastructure.container import Store, build_use_cases, open_store
from infrastructure.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    store_factory: Callable[[Settings], Store] = open_store,
) -> FastAPI:
    """
    Construye la aplicación. El almacenamiento se abre en el arranque
    (lifespan) y se cierra al apagar, también si el arranque falla.
    """
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        store = store_factory(settings)
        try:
            app.state.store = store
            app.state.use_cases = build_use_cases(store.repository)
            yield
        finally:
            store.close()
            logger.info("Almacenamiento cerrado")

    app = FastAPI(
        title="Task Manager API",
        description="A simple task management API",
        version="1.0",
        lifespan=lifespan,
    )

    logger.info(f"Allowed CORS origins: {settings.allowed_origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=settings.allowed_origins != ["*"],
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Accept"],
    )

    register_exception_handlers(app)
    app.include_router(tasks_router)
    app.include_router(health_router)
    return app


def app_factory() -> FastAPI:
    """Punto de entrada para `uvicorn --factory backend_fastapi.main:app_factory`."""
    settings = load_settings()
    setup_logging(settings.log_level)
    return create_app(settings)
