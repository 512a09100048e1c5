"""Mirror transfer request status into annotations.

The host pipeline drops the status of custom resources when it persists them.
Fields a restore needs later are therefore copied into metadata annotations right
before the item leaves this service and read back from there on the other side.
The key set below is a versioned contract shared by both sides: a field that is not
listed cannot be recovered after the boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, fields

from datamover_coordinator.domain.entities import (
    PVCData,
    TransferRequest,
    TransferRequestStatus,
)
from datamover_coordinator.domain.errors import DataMoverValidationError

STATUS_ANNOTATIONS_VERSION = "v1"

RESTIC_REPOSITORY_ANNOTATION = "datamover.oadp.openshift.io/restic-repository"
SOURCE_PVC_NAME_ANNOTATION = "datamover.oadp.openshift.io/source-pvc-name"
SOURCE_PVC_SIZE_ANNOTATION = "datamover.oadp.openshift.io/source-pvc-size"
SOURCE_PVC_STORAGE_CLASS_ANNOTATION = "datamover.oadp.openshift.io/source-pvc-storageclass"
VOLUME_SNAPSHOT_CLASS_ANNOTATION = "datamover.oadp.openshift.io/volumesnapshotclass"
STATUS_ANNOTATIONS_VERSION_ANNOTATION = (
    "datamover.oadp.openshift.io/status-annotations-version"
)


@dataclass(slots=True, frozen=True)
class StatusSnapshot:
    """Whitelisted status fields; unset fields are empty strings."""

    restic_repository: str = ""
    source_pvc_name: str = ""
    source_pvc_size: str = ""
    source_pvc_storage_class: str = ""
    volume_snapshot_class: str = ""

    @classmethod
    def from_status(cls, status: TransferRequestStatus | None) -> StatusSnapshot:
        """Capture the whitelisted fields of a live status."""

        if status is None:
            return cls()
        pvc = status.source_pvc_data or PVCData()
        return cls(
            restic_repository=status.restic_repository or "",
            source_pvc_name=pvc.name or "",
            source_pvc_size=pvc.size or "",
            source_pvc_storage_class=pvc.storage_class_name or "",
            volume_snapshot_class=status.volume_snapshot_class_name or "",
        )

    @property
    def is_complete(self) -> bool:
        """True when every whitelisted field is populated."""

        return all(getattr(self, item.name) for item in fields(self))


STATUS_ANNOTATION_KEYS: dict[str, str] = {
    "restic_repository": RESTIC_REPOSITORY_ANNOTATION,
    "source_pvc_name": SOURCE_PVC_NAME_ANNOTATION,
    "source_pvc_size": SOURCE_PVC_SIZE_ANNOTATION,
    "source_pvc_storage_class": SOURCE_PVC_STORAGE_CLASS_ANNOTATION,
    "volume_snapshot_class": VOLUME_SNAPSHOT_CLASS_ANNOTATION,
}


def annotate_status(request: TransferRequest, snapshot: StatusSnapshot) -> TransferRequest:
    """Write the snapshot into the request annotations and return the request."""

    if request.metadata.annotations is None:
        request.metadata.annotations = {}
    annotations = request.metadata.annotations
    for field_name, annotation_key in STATUS_ANNOTATION_KEYS.items():
        annotations[annotation_key] = getattr(snapshot, field_name)
    annotations[STATUS_ANNOTATIONS_VERSION_ANNOTATION] = STATUS_ANNOTATIONS_VERSION
    return request


def extract_status(request: TransferRequest) -> StatusSnapshot:
    """Read the whitelisted fields back from annotations."""

    annotations = request.annotations
    version = annotations.get(STATUS_ANNOTATIONS_VERSION_ANNOTATION)
    # Items persisted before the version key existed carry v1 fields.
    if version is not None and version != STATUS_ANNOTATIONS_VERSION:
        raise DataMoverValidationError(
            f"Unsupported status annotations version '{version}' on "
            f"{request.kind} '{request.qualified_name}'."
        )
    values = {
        field_name: annotations.get(annotation_key, "")
        for field_name, annotation_key in STATUS_ANNOTATION_KEYS.items()
    }
    return StatusSnapshot(**values)


__all__ = [
    "RESTIC_REPOSITORY_ANNOTATION",
    "SOURCE_PVC_NAME_ANNOTATION",
    "SOURCE_PVC_SIZE_ANNOTATION",
    "SOURCE_PVC_STORAGE_CLASS_ANNOTATION",
    "STATUS_ANNOTATIONS_VERSION",
    "STATUS_ANNOTATIONS_VERSION_ANNOTATION",
    "STATUS_ANNOTATION_KEYS",
    "StatusSnapshot",
    "VOLUME_SNAPSHOT_CLASS_ANNOTATION",
    "annotate_status",
    "extract_status",
]
