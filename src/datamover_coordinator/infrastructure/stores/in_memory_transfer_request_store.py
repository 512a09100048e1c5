"""In-memory store for transfer request objects."""

from __future__ import annotations

import asyncio
import secrets
import string
from collections.abc import Iterable
from datetime import UTC, datetime
from uuid import uuid4

from datamover_coordinator.domain.entities import TransferRequest, TransferRequestStatus
from datamover_coordinator.domain.errors import (
    DataMoverValidationError,
    TransferRequestConflictError,
    TransferRequestNotFoundError,
)
from datamover_coordinator.domain.ports import TransferRequestStore
from datamover_coordinator.domain.transfer_types import TransferKind

_NAME_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
_NAME_SUFFIX_LENGTH = 5

_Key = tuple[TransferKind, str, str]


def _name_suffix() -> str:
    return "".join(secrets.choice(_NAME_SUFFIX_ALPHABET) for _ in range(_NAME_SUFFIX_LENGTH))


class InMemoryTransferRequestStore(TransferRequestStore):
    """Simple store for local development and tests.

    `unique_label_keys` makes the store reject a create whose values for those
    labels match an existing object of the same kind, the way an admission check
    would in a real cluster. `set_status` stands in for the external worker.
    """

    def __init__(self, unique_label_keys: Iterable[str] = ()) -> None:
        self._objects: dict[_Key, TransferRequest] = {}
        self._lock = asyncio.Lock()
        self._unique_label_keys = tuple(unique_label_keys)

    async def get(self, kind: TransferKind, namespace: str, name: str) -> TransferRequest:
        """Return one request."""

        async with self._lock:
            request = self._objects.get((kind, namespace, name))
            if request is None:
                raise TransferRequestNotFoundError(f"{kind} {namespace}/{name} not found.")
            return request.model_copy(deep=True)

    async def list(
        self,
        kind: TransferKind,
        labels: dict[str, str],
        namespace: str | None = None,
    ) -> list[TransferRequest]:
        """Return requests of the kind matching every label, in creation order."""

        async with self._lock:
            return [
                request.model_copy(deep=True)
                for (request_kind, request_namespace, _), request in self._objects.items()
                if request_kind is kind
                and (namespace is None or request_namespace == namespace)
                and all(request.labels.get(key) == value for key, value in labels.items())
            ]

    async def create(self, request: TransferRequest) -> TransferRequest:
        """Store a new request and assign its name from `generateName`."""

        if not request.namespace:
            raise DataMoverValidationError(f"{request.kind} needs a namespace.")
        created = request.model_copy(deep=True)

        async with self._lock:
            if not created.metadata.name:
                if not created.metadata.generate_name:
                    raise DataMoverValidationError(
                        f"{request.kind} needs a name or generateName."
                    )
                created.metadata.name = self._generate_name_unlocked(created)

            key = (created.kind, created.namespace, created.name)
            if key in self._objects:
                raise TransferRequestConflictError(
                    f"{created.kind} {created.qualified_name} already exists."
                )
            duplicate = self._find_label_duplicate_unlocked(created)
            if duplicate is not None:
                raise TransferRequestConflictError(
                    f"{created.kind} {duplicate.qualified_name} already exists with the same "
                    f"values for {', '.join(self._unique_label_keys)}."
                )

            created.metadata.uid = str(uuid4())
            created.metadata.creation_timestamp = datetime.now(tz=UTC)
            self._objects[key] = created
            return created.model_copy(deep=True)

    async def delete(self, kind: TransferKind, namespace: str, name: str) -> None:
        """Remove one request."""

        async with self._lock:
            if self._objects.pop((kind, namespace, name), None) is None:
                raise TransferRequestNotFoundError(f"{kind} {namespace}/{name} not found.")

    async def set_status(
        self,
        kind: TransferKind,
        namespace: str,
        name: str,
        status: TransferRequestStatus,
    ) -> None:
        """Replace the status of a stored request."""

        async with self._lock:
            request = self._objects.get((kind, namespace, name))
            if request is None:
                raise TransferRequestNotFoundError(f"{kind} {namespace}/{name} not found.")
            request.status = status.model_copy(deep=True)

    def _generate_name_unlocked(self, request: TransferRequest) -> str:
        prefix = request.metadata.generate_name or ""
        while True:
            name = f"{prefix}{_name_suffix()}"
            if (request.kind, request.namespace, name) not in self._objects:
                return name

    def _find_label_duplicate_unlocked(self, request: TransferRequest) -> TransferRequest | None:
        if not self._unique_label_keys:
            return None
        if any(key not in request.labels for key in self._unique_label_keys):
            return None
        for (kind, _, _), existing in self._objects.items():
            if kind is not request.kind:
                continue
            if all(
                existing.labels.get(key) == request.labels[key]
                for key in self._unique_label_keys
            ):
                return existing
        return None


__all__ = ["InMemoryTransferRequestStore"]
