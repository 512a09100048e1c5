"""Delete item action routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from datamover_coordinator.api.dependencies import get_coordinator
from datamover_coordinator.api.errors import raise_http_exception
from datamover_coordinator.application.services import DataMoverCoordinator
from datamover_coordinator.domain.plugin_models import DeleteItemRequest

router = APIRouter(prefix="/delete", tags=["delete item actions"])


@router.post("/transfer-requests", status_code=204)
async def delete_transfer_request(
    request: DeleteItemRequest,
    coordinator: DataMoverCoordinator = Depends(get_coordinator),
) -> Response:
    """Delete the transfer request backing up an item of a deleted backup."""

    try:
        await coordinator.delete_transfer_request(request.item, request.backup_name)
    except Exception as exc:  # noqa: BLE001
        raise_http_exception(exc)
    return Response(status_code=204)


__all__ = ["router"]
