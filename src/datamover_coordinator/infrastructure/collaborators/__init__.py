"""Credential and source readiness adapters."""

from datamover_coordinator.infrastructure.collaborators.credentials import (
    KubernetesSecretCredentialResolver,
    StaticCredentialResolver,
    credential_secret_name,
)
from datamover_coordinator.infrastructure.collaborators.readiness import (
    KubernetesSourceReadinessProbe,
    StaticSourceReadinessProbe,
)

__all__ = [
    "KubernetesSecretCredentialResolver",
    "KubernetesSourceReadinessProbe",
    "StaticCredentialResolver",
    "StaticSourceReadinessProbe",
    "credential_secret_name",
]
