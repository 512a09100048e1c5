"""Progress models for tracked transfer operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from datamover_coordinator.domain.entities import TransferRequest
from datamover_coordinator.domain.transfer_types import TransferKind


@dataclass(slots=True, frozen=True)
class OperationProgress:
    """Progress of one tracked operation as reported to the host."""

    updated: datetime
    description: str = ""
    started: datetime | None = None
    completed: bool = False
    error: str | None = None


@dataclass(slots=True, frozen=True)
class SourceSnapshotState:
    """Readiness of the snapshot a backup transfer reads from."""

    name: str
    ready_to_use: bool = False
    snapshot_handle: str | None = None

    @property
    def is_ready(self) -> bool:
        """True once the snapshot is usable as a transfer source."""

        return self.ready_to_use and bool(self.snapshot_handle)


class MonitoringModel(BaseModel):
    """Base model for progress and management routes."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class OperationProgressResponse(MonitoringModel):
    """Progress payload returned by the progress endpoints."""

    operation_id: str = Field(alias="operationId")
    description: str = ""
    started: datetime | None = None
    updated: datetime
    completed: bool = False
    error: str | None = None

    @classmethod
    def from_progress(
        cls, operation_id: str, progress: OperationProgress
    ) -> OperationProgressResponse:
        """Build the response from a progress record."""

        return cls(
            operation_id=operation_id,
            description=progress.description,
            started=progress.started,
            updated=progress.updated,
            completed=progress.completed,
            error=progress.error,
        )


class TransferRequestInfoResponse(MonitoringModel):
    """One transfer request as shown by the management endpoint."""

    operation_id: str = Field(alias="operationId")
    kind: TransferKind
    namespace: str
    name: str
    labels: dict[str, str] = Field(default_factory=dict)
    phase: str | None = None
    batching_status: str | None = Field(default=None, alias="batchingStatus")

    @classmethod
    def from_request(cls, request: TransferRequest) -> TransferRequestInfoResponse:
        """Build the response from a stored request."""

        status = request.current_status
        return cls(
            operation_id=request.operation_id,
            kind=request.kind,
            namespace=request.namespace,
            name=request.name,
            labels=request.labels,
            phase=status.phase,
            batching_status=status.batching_status,
        )


class TransferRequestListResponse(MonitoringModel):
    """Collection wrapper for the management list endpoint."""

    transfer_requests: list[TransferRequestInfoResponse] = Field(alias="transferRequests")


__all__ = [
    "MonitoringModel",
    "OperationProgress",
    "OperationProgressResponse",
    "SourceSnapshotState",
    "TransferRequestInfoResponse",
    "TransferRequestListResponse",
]
