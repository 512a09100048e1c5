"""Health check routes."""

from fastapi import APIRouter, Depends

from datamover_coordinator.api.dependencies import get_coordinator
from datamover_coordinator.application.services import DataMoverCoordinator

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz(
    coordinator: DataMoverCoordinator = Depends(get_coordinator),
) -> dict[str, str]:
    """Liveness probe reporting the active operating mode."""

    return {"status": "ok", "mode": coordinator.operation_mode.value}


__all__ = ["router"]
