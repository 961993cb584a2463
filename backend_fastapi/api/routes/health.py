from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from backend_fastapi.api.deps import get_store
from backend_fastapi.api.schemas import DatabaseStatusResponse, HealthResponse
from infrastructure.container import Store

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse, summary="Estado del servicio")
def health() -> HealthResponse:
    return HealthResponse(status="ok", timestamp=datetime.now(timezone.utc))


@router.get(
    "/database",
    response_model=DatabaseStatusResponse,
    response_model_exclude_none=True,
    summary="Conectividad con la base de datos",
)
def database_status(store: Store = Depends(get_store)) -> DatabaseStatusResponse:
    """
    Hace ping al almacenamiento. Siempre responde 200; el estado va en el cuerpo.
    """
    if store.ping():
        return DatabaseStatusResponse(status="ok")
    return DatabaseStatusResponse(status="error", message="Store is unreachable")
