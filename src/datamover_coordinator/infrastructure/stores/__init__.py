"""Transfer request store implementations."""

from datamover_coordinator.infrastructure.stores.in_memory_transfer_request_store import (
    InMemoryTransferRequestStore,
)
from datamover_coordinator.infrastructure.stores.kubernetes_transfer_request_store import (
    KubernetesTransferRequestStore,
)

__all__ = ["InMemoryTransferRequestStore", "KubernetesTransferRequestStore"]
