"""Ownership labels tying transfer requests to the operation that created them."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

from datamover_coordinator.domain.transfer_types import GENERATE_NAME_PREFIXES, TransferKind

BACKUP_NAME_LABEL = "velero.io/backup-name"
RESTORE_NAME_LABEL = "velero.io/restore-name"
SOURCE_NAME_LABEL = "datamover.oadp.openshift.io/source-name"
PVC_NAME_LABEL = "datamover.oadp.openshift.io/pvc-name"

_LABEL_VALUE_MAX_LENGTH = 63
_LABEL_VALUE_HASH_LENGTH = 6
_REQUEST_NAME_HASH_LENGTH = 10


def valid_label_value(value: str) -> str:
    """Fit a value into the 63-character label limit.

    Longer values keep a prefix and gain a short content hash so distinct inputs
    stay distinct.
    """

    if len(value) <= _LABEL_VALUE_MAX_LENGTH:
        return value
    digest = hashlib.sha256(value.encode()).hexdigest()
    prefix_length = _LABEL_VALUE_MAX_LENGTH - _LABEL_VALUE_HASH_LENGTH
    return value[:prefix_length] + digest[:_LABEL_VALUE_HASH_LENGTH]


@dataclass(slots=True, frozen=True)
class OwnerKey:
    """(owning operation, source object) pair scoping one transfer request."""

    kind: TransferKind
    operation_name: str
    source_name: str

    @classmethod
    def for_backup(cls, backup_name: str, source_name: str) -> OwnerKey:
        """Owner key of a backup request created for one snapshot content."""

        return cls(TransferKind.BACKUP, backup_name, source_name)

    @classmethod
    def for_restore(cls, restore_name: str, pvc_name: str) -> OwnerKey:
        """Owner key of a restore request created for one volume claim."""

        return cls(TransferKind.RESTORE, restore_name, pvc_name)

    @property
    def operation_label(self) -> str:
        if self.kind is TransferKind.BACKUP:
            return BACKUP_NAME_LABEL
        return RESTORE_NAME_LABEL

    @property
    def source_label(self) -> str:
        if self.kind is TransferKind.BACKUP:
            return SOURCE_NAME_LABEL
        return PVC_NAME_LABEL

    def labels(self) -> dict[str, str]:
        """Labels stamped on, and used to look up, owned requests."""

        return {
            self.operation_label: valid_label_value(self.operation_name),
            self.source_label: valid_label_value(self.source_name),
        }

    def operation_selector(self) -> dict[str, str]:
        """Selector matching every request of the owning operation."""

        return {self.operation_label: valid_label_value(self.operation_name)}

    def request_name(self) -> str:
        """Fixed object name for the single request this owner may hold.

        Two creates for the same owner then collide on the name in the store.
        """

        rendered = ",".join(f"{key}={value}" for key, value in sorted(self.labels().items()))
        digest = hashlib.sha256(rendered.encode()).hexdigest()
        return GENERATE_NAME_PREFIXES[self.kind] + digest[:_REQUEST_NAME_HASH_LENGTH]

    def __str__(self) -> str:
        return f"{self.kind} {self.operation_name}/{self.source_name}"


def has_operation_label(
    labels: dict[str, str] | None,
    label_key: str,
    operation_name: str,
) -> bool:
    """Return whether labels tie an object to the named operation."""

    if not labels or not operation_name.strip():
        return False
    return labels.get(label_key) == valid_label_value(operation_name)


__all__ = [
    "BACKUP_NAME_LABEL",
    "OwnerKey",
    "PVC_NAME_LABEL",
    "RESTORE_NAME_LABEL",
    "SOURCE_NAME_LABEL",
    "has_operation_label",
    "valid_label_value",
]
