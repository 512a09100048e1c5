"""Management routes for inspecting transfer requests."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from datamover_coordinator.api.dependencies import get_coordinator
from datamover_coordinator.api.errors import raise_http_exception
from datamover_coordinator.application.services import DataMoverCoordinator
from datamover_coordinator.domain.monitoring_models import TransferRequestListResponse
from datamover_coordinator.domain.transfer_types import TransferKind

router = APIRouter(prefix="/management", tags=["data mover management"])


@router.get("/transfer-requests", response_model=TransferRequestListResponse, status_code=200)
async def list_transfer_requests(
    kind: TransferKind = Query(...),
    operation: str = Query(..., min_length=1),
    coordinator: DataMoverCoordinator = Depends(get_coordinator),
) -> TransferRequestListResponse:
    """List the transfer requests created for one backup or restore."""

    try:
        return await coordinator.list_transfer_requests(kind, operation)
    except Exception as exc:  # noqa: BLE001
        raise_http_exception(exc)


__all__ = ["router"]
