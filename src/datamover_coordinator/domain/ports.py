"""Ports for the remote object store and readiness collaborators."""

from __future__ import annotations

from typing import Protocol

from datamover_coordinator.domain.entities import TransferRequest
from datamover_coordinator.domain.monitoring_models import SourceSnapshotState
from datamover_coordinator.domain.transfer_types import TransferKind


class TransferRequestStore(Protocol):
    """Remote store holding transfer request objects."""

    async def get(self, kind: TransferKind, namespace: str, name: str) -> TransferRequest:
        """Return one request or raise `TransferRequestNotFoundError`."""

    async def list(
        self,
        kind: TransferKind,
        labels: dict[str, str],
        namespace: str | None = None,
    ) -> list[TransferRequest]:
        """Return requests whose labels contain every given label."""

    async def create(self, request: TransferRequest) -> TransferRequest:
        """Create a request, assigning its name from `generateName`.

        Raises `TransferRequestConflictError` when the store reports that the
        object already exists.
        """

    async def delete(self, kind: TransferKind, namespace: str, name: str) -> None:
        """Delete one request or raise `TransferRequestNotFoundError`."""


class CredentialResolver(Protocol):
    """Lookup of the credential secret a transfer uses."""

    async def resolve_secret_name(self, storage_location: str, namespace: str) -> str:
        """Return the secret name for a storage location after checking it exists."""


class SourceReadinessProbe(Protocol):
    """Readiness of snapshot contents used as transfer sources."""

    async def get_source(self, name: str) -> SourceSnapshotState:
        """Return the current readiness state of one snapshot content."""


__all__ = ["CredentialResolver", "SourceReadinessProbe", "TransferRequestStore"]
