"""Kubernetes API infrastructure adapters."""

from datamover_coordinator.infrastructure.kubernetes.client import (
    KubernetesApiClient,
    KubernetesApiError,
)

__all__ = ["KubernetesApiClient", "KubernetesApiError"]
