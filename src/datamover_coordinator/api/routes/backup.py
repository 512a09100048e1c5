"""Backup item action routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response

from datamover_coordinator.api.dependencies import get_coordinator
from datamover_coordinator.api.errors import raise_http_exception
from datamover_coordinator.application.services import DataMoverCoordinator
from datamover_coordinator.domain.monitoring_models import OperationProgressResponse
from datamover_coordinator.domain.plugin_models import (
    BackupItemRequest,
    BackupItemResponse,
    CancelOperationRequest,
)

router = APIRouter(prefix="/backup", tags=["backup item actions"])


@router.post("/snapshot-contents", response_model=BackupItemResponse, status_code=200)
async def backup_snapshot_content(
    request: BackupItemRequest,
    coordinator: DataMoverCoordinator = Depends(get_coordinator),
) -> BackupItemResponse:
    """Start moving the data of a snapshot content item."""

    try:
        return await coordinator.backup_snapshot_content(request.item, request.backup)
    except Exception as exc:  # noqa: BLE001
        raise_http_exception(exc)


@router.post("/transfer-requests", response_model=BackupItemResponse, status_code=200)
async def backup_transfer_request(
    request: BackupItemRequest,
    coordinator: DataMoverCoordinator = Depends(get_coordinator),
) -> BackupItemResponse:
    """Back up a transfer request item with its status copied into annotations."""

    try:
        return await coordinator.backup_transfer_request(request.item, request.backup)
    except Exception as exc:  # noqa: BLE001
        raise_http_exception(exc)


@router.get(
    "/operations/progress",
    response_model=OperationProgressResponse,
    status_code=200,
)
async def backup_progress(
    operation_id: str = Query(default="", alias="operationId"),
    coordinator: DataMoverCoordinator = Depends(get_coordinator),
) -> OperationProgressResponse:
    """Report progress of a backup transfer."""

    try:
        progress = await coordinator.backup_progress(operation_id)
    except Exception as exc:  # noqa: BLE001
        raise_http_exception(exc)
    return OperationProgressResponse.from_progress(operation_id, progress)


@router.post("/operations/cancel", status_code=204)
async def cancel_backup(
    request: CancelOperationRequest,
    coordinator: DataMoverCoordinator = Depends(get_coordinator),
) -> Response:
    """Accept cancellation of a backup transfer."""

    try:
        await coordinator.cancel_backup(request.operation_id)
    except Exception as exc:  # noqa: BLE001
        raise_http_exception(exc)
    return Response(status_code=204)


__all__ = ["router"]
