"""Creation, lookup and cleanup of transfer request objects."""

from __future__ import annotations

import logging

from datamover_coordinator.application.services.reconciliation_poller import (
    ReconciliationPoller,
)
from datamover_coordinator.domain.entities import TransferRequest
from datamover_coordinator.domain.errors import (
    DataMoverValidationError,
    TransferRequestConflictError,
    TransferRequestNotFoundError,
)
from datamover_coordinator.domain.ownership import OwnerKey, has_operation_label
from datamover_coordinator.domain.ports import TransferRequestStore
from datamover_coordinator.domain.status_annotations import StatusSnapshot
from datamover_coordinator.domain.transfer_types import (
    FAILED_PHASES,
    GENERATE_NAME_PREFIXES,
    TransferKind,
    TransferPhase,
)

_CONDITION_RECONCILED = "Reconciled"
_CONDITION_FALSE = "False"
_REASON_ERROR = "Error"

logger = logging.getLogger(__name__)


def is_for_current_operation(request: TransferRequest, owner: OwnerKey) -> bool:
    """Return whether the request was created by the owner's operation."""

    return has_operation_label(request.labels, owner.operation_label, owner.operation_name)


def has_failed_status(request: TransferRequest) -> bool:
    """Return whether the worker reported a terminal failure for the request."""

    status = request.current_status
    if status.phase in FAILED_PHASES:
        return True
    return any(
        condition.type == _CONDITION_RECONCILED
        and condition.status == _CONDITION_FALSE
        and condition.reason == _REASON_ERROR
        for condition in status.conditions
    )


class TransferRequestManager:
    """Owns the create/read/delete side of transfer requests in the remote store.

    Idempotency relies on ownership labels and on the store's conflict signalling.
    Competing callers may live in other processes, so nothing here takes a lock.
    """

    def __init__(self, store: TransferRequestStore, poller: ReconciliationPoller) -> None:
        self._store = store
        self._poller = poller

    async def get(self, kind: TransferKind, namespace: str, name: str) -> TransferRequest:
        """Return one request, raising `TransferRequestNotFoundError` when missing."""

        return await self._store.get(kind, namespace, name)

    async def find(self, owner: OwnerKey) -> TransferRequest | None:
        """Return the current-operation request for the owner, if any."""

        candidates = await self._store.list(owner.kind, owner.labels())
        for candidate in candidates:
            if is_for_current_operation(candidate, owner):
                return candidate
            logger.warning(
                "Ignoring %s %s owned by another operation than %s.",
                candidate.kind,
                candidate.qualified_name,
                owner,
            )
        return None

    async def list_for_operation(
        self, kind: TransferKind, operation_name: str
    ) -> list[TransferRequest]:
        """Return every request labeled with the operation name."""

        owner = OwnerKey(kind, operation_name, "")
        requests = await self._store.list(kind, owner.operation_selector())
        return [request for request in requests if is_for_current_operation(request, owner)]

    async def create_if_absent(
        self,
        owner: OwnerKey,
        template: TransferRequest,
    ) -> tuple[TransferRequest, bool]:
        """Return the owner's request, creating it only when none exists."""

        existing = await self.find(owner)
        if existing is not None:
            logger.info(
                "Found existing %s %s for %s, skipping creation.",
                existing.kind,
                existing.qualified_name,
                owner,
            )
            return existing, False

        try:
            created = await self._create(owner, template, name=owner.request_name())
        except TransferRequestConflictError as exc:
            # Lost a race against another caller between lookup and create.
            winner = await self.find(owner)
            if winner is None:
                raise TransferRequestConflictError(
                    f"Creating {owner.kind} for {owner} conflicted but no owned "
                    "request could be read back."
                ) from exc
            logger.info(
                "Concurrent creation of %s for %s detected, adopting %s.",
                owner.kind,
                owner,
                winner.qualified_name,
            )
            return winner, False
        return created, True

    async def create(self, owner: OwnerKey, template: TransferRequest) -> TransferRequest:
        """Create a request under a generated name without looking for an existing one."""

        return await self._create(owner, template, name=None)

    async def _create(
        self,
        owner: OwnerKey,
        template: TransferRequest,
        *,
        name: str | None,
    ) -> TransferRequest:
        if template.kind is not owner.kind:
            raise DataMoverValidationError(
                f"Cannot create {template.kind} for owner of kind {owner.kind}."
            )
        if not template.namespace:
            raise DataMoverValidationError(f"{template.kind} for {owner} needs a namespace.")

        request = template.model_copy(deep=True)
        request.metadata.name = name
        request.metadata.generate_name = None if name else GENERATE_NAME_PREFIXES[owner.kind]
        request.metadata.labels = {**request.labels, **owner.labels()}
        request.status = None

        created = await self._store.create(request)
        logger.info("Created %s %s for %s.", created.kind, created.qualified_name, owner)

        # Read back so callers see the server-assigned identity and defaults.
        return await self._store.get(created.kind, created.namespace, created.name)

    async def delete(self, owner: OwnerKey) -> int:
        """Delete the owner's requests; already-deleted requests count as success."""

        deleted = 0
        for request in await self._store.list(owner.kind, owner.labels()):
            if not is_for_current_operation(request, owner):
                continue
            if await self.delete_request(request):
                deleted += 1
        return deleted

    async def delete_request(self, request: TransferRequest) -> bool:
        """Delete one request; return False when it was already gone."""

        try:
            await self._store.delete(request.kind, request.namespace, request.name)
        except TransferRequestNotFoundError:
            logger.info("%s %s was already deleted.", request.kind, request.qualified_name)
            return False
        logger.info("Deleted %s %s.", request.kind, request.qualified_name)
        return True

    async def wait_for_backup_status_data(self, namespace: str, name: str) -> TransferRequest:
        """Wait until a backup request carries every status field restores need."""

        return await self._poller.wait_until(
            lambda: self._store.get(TransferKind.BACKUP, namespace, name),
            is_ready=lambda request: StatusSnapshot.from_status(request.status).is_complete,
            is_terminal_failure=has_failed_status,
            description=f"{TransferKind.BACKUP} {namespace}/{name}",
        )

    async def wait_for_restore_status_data(
        self, restore_name: str, pvc_name: str
    ) -> list[TransferRequest]:
        """Wait until the restore request for a claim reports a phase and snapshot handle."""

        owner = OwnerKey.for_restore(restore_name, pvc_name)

        def is_ready(requests: list[TransferRequest]) -> bool:
            if not requests:
                return True
            status = requests[0].current_status
            return bool(status.phase) and bool(status.snapshot_handle)

        def is_terminal_failure(requests: list[TransferRequest]) -> bool:
            return bool(requests) and requests[0].current_status.phase in FAILED_PHASES

        return await self._poller.wait_until(
            lambda: self._store.list(TransferKind.RESTORE, owner.labels()),
            is_ready=is_ready,
            is_terminal_failure=is_terminal_failure,
            description=f"{TransferKind.RESTORE} list for {owner}",
        )

    async def wait_for_completion(self, request: TransferRequest) -> TransferRequest:
        """Wait until the worker reports the request Completed."""

        def is_ready(current: TransferRequest) -> bool:
            return current.current_status.phase == TransferPhase.COMPLETED

        return await self._poller.wait_until(
            lambda: self._store.get(request.kind, request.namespace, request.name),
            is_ready=is_ready,
            is_terminal_failure=has_failed_status,
            description=f"{request.kind} {request.qualified_name}",
        )

    async def wait_for_operation_completion(
        self, kind: TransferKind, operation_name: str
    ) -> list[TransferRequest]:
        """Wait for every request of one operation, each with its own budget."""

        requests = await self.list_for_operation(kind, operation_name)
        if not requests:
            return []
        return await self._poller.wait_all(
            [self.wait_for_completion(request) for request in requests]
        )


__all__ = [
    "TransferRequestManager",
    "has_failed_status",
    "is_for_current_operation",
]
