import uvicorn

from infrastructure.config import load_settings
from infrastructure.logging_setup import setup_logging


def run() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)

    print(
        f"Starting server at http://{settings.host}:{settings.port} "
        f"(Reload: {settings.reload}, Store: {settings.store_backend})"
    )
    print(f"API documentation: http://{settings.host}:{settings.port}/docs")

    uvicorn.run(
        "backend_fastapi.main:app_factory",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    run()
