"""Domain public API."""

from datamover_coordinator.domain.entities import (
    ObjectMeta,
    SnapshotContent,
    TransferRequest,
    TransferRequestSpec,
    TransferRequestStatus,
)
from datamover_coordinator.domain.errors import (
    DataMoverError,
    DataMoverValidationError,
    InvalidOperationIDError,
    ReconciliationTimeoutError,
    TerminalFailureError,
    TransferRequestConflictError,
    TransferRequestNotFoundError,
    TransientFetchError,
)
from datamover_coordinator.domain.monitoring_models import (
    OperationProgress,
    OperationProgressResponse,
    SourceSnapshotState,
)
from datamover_coordinator.domain.operation_ids import (
    decode_operation_id,
    encode_operation_id,
)
from datamover_coordinator.domain.ownership import OwnerKey
from datamover_coordinator.domain.ports import (
    CredentialResolver,
    SourceReadinessProbe,
    TransferRequestStore,
)
from datamover_coordinator.domain.status_annotations import (
    StatusSnapshot,
    annotate_status,
    extract_status,
)
from datamover_coordinator.domain.transfer_types import (
    CreationPolicy,
    OperationMode,
    TransferKind,
    TransferPhase,
)

__all__ = [
    "CreationPolicy",
    "CredentialResolver",
    "DataMoverError",
    "DataMoverValidationError",
    "InvalidOperationIDError",
    "ObjectMeta",
    "OperationMode",
    "OperationProgress",
    "OperationProgressResponse",
    "OwnerKey",
    "ReconciliationTimeoutError",
    "SnapshotContent",
    "SourceReadinessProbe",
    "SourceSnapshotState",
    "StatusSnapshot",
    "TerminalFailureError",
    "TransferKind",
    "TransferPhase",
    "TransferRequest",
    "TransferRequestConflictError",
    "TransferRequestNotFoundError",
    "TransferRequestSpec",
    "TransferRequestStatus",
    "TransferRequestStore",
    "TransientFetchError",
    "annotate_status",
    "decode_operation_id",
    "encode_operation_id",
    "extract_status",
]
