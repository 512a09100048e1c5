"""Restore item action routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Query, Response

from datamover_coordinator.api.dependencies import get_coordinator
from datamover_coordinator.api.errors import raise_http_exception
from datamover_coordinator.application.services import DataMoverCoordinator
from datamover_coordinator.domain.monitoring_models import (
    OperationProgressResponse,
    TransferRequestInfoResponse,
    TransferRequestListResponse,
)
from datamover_coordinator.domain.plugin_models import (
    CancelOperationRequest,
    RestoreItemRequest,
    RestoreItemResponse,
)

router = APIRouter(prefix="/restore", tags=["restore item actions"])


@router.post("/transfer-requests", response_model=RestoreItemResponse, status_code=200)
async def restore_transfer_request(
    request: RestoreItemRequest,
    coordinator: DataMoverCoordinator = Depends(get_coordinator),
) -> RestoreItemResponse:
    """Create the restore transfer for a backed-up transfer request item."""

    try:
        return await coordinator.restore_transfer_request(request.item, request.restore)
    except Exception as exc:  # noqa: BLE001
        raise_http_exception(exc)


@router.get(
    "/operations/progress",
    response_model=OperationProgressResponse,
    status_code=200,
)
async def restore_progress(
    operation_id: str = Query(default="", alias="operationId"),
    coordinator: DataMoverCoordinator = Depends(get_coordinator),
) -> OperationProgressResponse:
    """Report progress of a restore transfer."""

    try:
        progress = await coordinator.restore_progress(operation_id)
    except Exception as exc:  # noqa: BLE001
        raise_http_exception(exc)
    return OperationProgressResponse.from_progress(operation_id, progress)


@router.post("/operations/cancel", status_code=204)
async def cancel_restore(
    request: CancelOperationRequest,
    coordinator: DataMoverCoordinator = Depends(get_coordinator),
) -> Response:
    """Accept cancellation of a restore transfer."""

    try:
        await coordinator.cancel_restore(request.operation_id)
    except Exception as exc:  # noqa: BLE001
        raise_http_exception(exc)
    return Response(status_code=204)


@router.post(
    "/{restore_name}/wait",
    response_model=TransferRequestListResponse,
    status_code=200,
)
async def wait_for_restore(
    restore_name: str = Path(...),
    coordinator: DataMoverCoordinator = Depends(get_coordinator),
) -> TransferRequestListResponse:
    """Block until every restore transfer of a restore has completed."""

    try:
        requests = await coordinator.wait_for_restore_completion(restore_name)
    except Exception as exc:  # noqa: BLE001
        raise_http_exception(exc)
    return TransferRequestListResponse(
        transfer_requests=[TransferRequestInfoResponse.from_request(r) for r in requests]
    )


__all__ = ["router"]
