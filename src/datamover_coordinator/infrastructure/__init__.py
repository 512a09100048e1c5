"""Infrastructure layer public API."""

from datamover_coordinator.infrastructure.collaborators import (
    KubernetesSecretCredentialResolver,
    KubernetesSourceReadinessProbe,
    StaticCredentialResolver,
    StaticSourceReadinessProbe,
)
from datamover_coordinator.infrastructure.kubernetes import (
    KubernetesApiClient,
    KubernetesApiError,
)
from datamover_coordinator.infrastructure.stores import (
    InMemoryTransferRequestStore,
    KubernetesTransferRequestStore,
)

__all__ = [
    "InMemoryTransferRequestStore",
    "KubernetesApiClient",
    "KubernetesApiError",
    "KubernetesSecretCredentialResolver",
    "KubernetesSourceReadinessProbe",
    "KubernetesTransferRequestStore",
    "StaticCredentialResolver",
    "StaticSourceReadinessProbe",
]
