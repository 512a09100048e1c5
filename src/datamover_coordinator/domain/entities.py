"""Pydantic models mapped from Kubernetes-style resource JSON."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from datamover_coordinator.domain.operation_ids import encode_operation_id
from datamover_coordinator.domain.transfer_types import TransferKind


class ResourceModel(BaseModel):
    """Base model for resource payloads; unknown fields survive a round trip."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_item(self) -> dict[str, Any]:
        """Serialize back to the wire shape used by the host pipeline."""

        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class ObjectMeta(ResourceModel):
    """Subset of object metadata used by this service."""

    name: str | None = None
    generate_name: str | None = Field(default=None, alias="generateName")
    namespace: str | None = None
    uid: str | None = None
    labels: dict[str, str] | None = None
    annotations: dict[str, str] | None = None
    creation_timestamp: datetime | None = Field(default=None, alias="creationTimestamp")


class ObjectReference(ResourceModel):
    """Reference to another object by name."""

    name: str
    namespace: str | None = None


class PVCData(ResourceModel):
    """Descriptors of the backed-up volume claim."""

    name: str | None = None
    size: str | None = None
    storage_class_name: str | None = Field(default=None, alias="storageClassName")


class BackupDataReference(ResourceModel):
    """Backed-up data a restore transfer request is built from."""

    backed_up_pvc_data: PVCData = Field(default_factory=PVCData, alias="backedUpPVCData")
    restic_repository: str | None = Field(default=None, alias="resticRepository")
    volume_snapshot_class_name: str | None = Field(
        default=None, alias="volumeSnapshotClassName"
    )


class TransferRequestSpec(ResourceModel):
    """Write-once transfer request spec."""

    volume_snapshot_content: ObjectReference | None = Field(
        default=None, alias="volumeSnapshotContent"
    )
    restic_secret_ref: ObjectReference | None = Field(default=None, alias="resticSecretRef")
    protected_namespace: str | None = Field(default=None, alias="protectedNamespace")
    backup_ref: BackupDataReference | None = Field(
        default=None, alias="volumeSnapshotMoverBackupRef"
    )


class StatusCondition(ResourceModel):
    """Condition entry reported by the transfer worker."""

    type: str
    status: str
    reason: str | None = None
    message: str | None = None


class TransferRequestStatus(ResourceModel):
    """Status written by the external transfer worker."""

    phase: str | None = None
    batching_status: str | None = Field(default=None, alias="batchingStatus")
    start_timestamp: datetime | None = Field(default=None, alias="startTimestamp")
    completion_timestamp: datetime | None = Field(default=None, alias="completionTimestamp")
    restic_repository: str | None = Field(default=None, alias="resticRepository")
    source_pvc_data: PVCData | None = Field(default=None, alias="sourcePVCData")
    volume_snapshot_class_name: str | None = Field(
        default=None, alias="volumeSnapshotClassName"
    )
    snapshot_handle: str | None = Field(default=None, alias="snapshotHandle")
    conditions: list[StatusCondition] = Field(default_factory=list)


class TransferRequest(ResourceModel):
    """One asynchronous data-movement job for one volume object."""

    api_version: str = Field(
        default="datamover.oadp.openshift.io/v1alpha1", alias="apiVersion"
    )
    kind: TransferKind
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: TransferRequestSpec = Field(default_factory=TransferRequestSpec)
    status: TransferRequestStatus | None = None

    @property
    def namespace(self) -> str:
        """Namespace of the request, empty when unset."""

        return self.metadata.namespace or ""

    @property
    def name(self) -> str:
        """Server-assigned name, empty before creation."""

        return self.metadata.name or ""

    @property
    def labels(self) -> dict[str, str]:
        """Labels of the request."""

        return self.metadata.labels or {}

    @property
    def annotations(self) -> dict[str, str]:
        """Annotations of the request."""

        return self.metadata.annotations or {}

    @property
    def qualified_name(self) -> str:
        """`namespace/name` for logs and error messages."""

        return f"{self.namespace}/{self.name}"

    @property
    def operation_id(self) -> str:
        """Operation ID handed to the host for progress tracking."""

        return encode_operation_id(self.namespace, self.name)

    @property
    def current_status(self) -> TransferRequestStatus:
        """Status, or an empty status when the worker has not reported yet."""

        return self.status or TransferRequestStatus()


class SnapshotContentSpec(ResourceModel):
    """Spec subset of a snapshot content item."""

    volume_snapshot_ref: ObjectReference = Field(alias="volumeSnapshotRef")


class SnapshotContent(ResourceModel):
    """Source snapshot content item processed at backup time."""

    api_version: str | None = Field(default=None, alias="apiVersion")
    kind: str | None = None
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: SnapshotContentSpec

    @property
    def name(self) -> str:
        """Cluster-scoped name of the snapshot content."""

        return self.metadata.name or ""

    @property
    def labels(self) -> dict[str, str]:
        """Labels of the snapshot content."""

        return self.metadata.labels or {}


__all__ = [
    "BackupDataReference",
    "ObjectMeta",
    "ObjectReference",
    "PVCData",
    "ResourceModel",
    "SnapshotContent",
    "SnapshotContentSpec",
    "StatusCondition",
    "TransferRequest",
    "TransferRequestSpec",
    "TransferRequestStatus",
]
