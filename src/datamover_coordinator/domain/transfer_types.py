"""Transfer kind, phase and mode helpers."""

from enum import StrEnum


class TransferKind(StrEnum):
    """Transfer request resource kinds."""

    BACKUP = "VolumeSnapshotBackup"
    RESTORE = "VolumeSnapshotRestore"


class TransferPhase(StrEnum):
    """Phases reported by the transfer worker."""

    NEW = "New"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    FAILED = "Failed"
    PARTIALLY_FAILED = "PartiallyFailed"


class OperationMode(StrEnum):
    """Process-wide operating mode selected at startup."""

    SNAPSHOT_ONLY = "snapshot_only"
    DATA_MOVER = "data_mover"


class CreationPolicy(StrEnum):
    """How a transfer request is created for an owning operation."""

    IDEMPOTENT = "idempotent"
    ALWAYS_CREATE = "always_create"


TERMINAL_PHASES = frozenset(
    {
        TransferPhase.COMPLETED,
        TransferPhase.FAILED,
        TransferPhase.PARTIALLY_FAILED,
    }
)

FAILED_PHASES = frozenset({TransferPhase.FAILED, TransferPhase.PARTIALLY_FAILED})

GENERATE_NAME_PREFIXES = {
    TransferKind.BACKUP: "vsb-",
    TransferKind.RESTORE: "vsr-",
}


__all__ = [
    "CreationPolicy",
    "FAILED_PHASES",
    "GENERATE_NAME_PREFIXES",
    "OperationMode",
    "TERMINAL_PHASES",
    "TransferKind",
    "TransferPhase",
]
