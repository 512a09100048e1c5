"""Application services public API."""

from datamover_coordinator.application.services.datamover_coordinator import (
    DataMoverCoordinator,
)
from datamover_coordinator.application.services.progress_reporter import (
    ProgressReporter,
    UpdatedTimestampPolicy,
)
from datamover_coordinator.application.services.reconciliation_poller import (
    ReconciliationPoller,
)
from datamover_coordinator.application.services.transfer_request_manager import (
    TransferRequestManager,
)

__all__ = [
    "DataMoverCoordinator",
    "ProgressReporter",
    "ReconciliationPoller",
    "TransferRequestManager",
    "UpdatedTimestampPolicy",
]
