"""Progress of tracked transfer operations."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from enum import StrEnum

from datamover_coordinator.domain.errors import (
    InvalidOperationIDError,
    TransferRequestNotFoundError,
)
from datamover_coordinator.domain.monitoring_models import OperationProgress
from datamover_coordinator.domain.operation_ids import decode_operation_id
from datamover_coordinator.domain.ports import TransferRequestStore
from datamover_coordinator.domain.transfer_types import (
    FAILED_PHASES,
    TERMINAL_PHASES,
    TransferKind,
)

logger = logging.getLogger(__name__)


class UpdatedTimestampPolicy(StrEnum):
    """Source of the `updated` timestamp in progress records."""

    NOW = "now"
    COMPLETION = "completion"


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class ProgressReporter:
    """Derive progress records from transfer requests of one kind."""

    def __init__(
        self,
        store: TransferRequestStore,
        kind: TransferKind,
        updated_policy: UpdatedTimestampPolicy = UpdatedTimestampPolicy.NOW,
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._store = store
        self._kind = kind
        self._updated_policy = updated_policy
        self._now = now

    @property
    def kind(self) -> TransferKind:
        """Kind of transfer request this reporter reads."""

        return self._kind

    async def progress(self, operation_id: str) -> OperationProgress:
        """Return the progress of the operation; a single fetch, no waiting."""

        if not operation_id:
            raise InvalidOperationIDError(operation_id)
        namespace, name = decode_operation_id(operation_id)

        try:
            request = await self._store.get(self._kind, namespace, name)
        except TransferRequestNotFoundError as exc:
            raise TransferRequestNotFoundError(
                f"Error fetching {self._kind} for operation ID {operation_id}: {exc}"
            ) from exc

        status = request.current_status
        description = ""
        if status.phase and status.batching_status:
            description = f"Phase: {status.phase} BatchingStatus: {status.batching_status}"
        elif status.phase:
            description = f"Phase: {status.phase}"
        if description:
            logger.info("Current progress of %s is: %s", operation_id, description)

        completed = status.phase in TERMINAL_PHASES
        error = None
        if status.phase in FAILED_PHASES:
            error = f"{self._kind} has a failed status"

        updated = self._now()
        if (
            self._updated_policy is UpdatedTimestampPolicy.COMPLETION
            and status.completion_timestamp is not None
        ):
            updated = status.completion_timestamp

        return OperationProgress(
            description=description,
            started=status.start_timestamp,
            updated=updated,
            completed=completed,
            error=error,
        )

    async def cancel(self, operation_id: str) -> None:
        """Accept a cancel request without acting on it.

        Transfers cannot be aborted once their request exists; they run until the
        worker reports Completed or Failed.
        """

        logger.info(
            "Cancel requested for %s operation %s; transfers run to completion.",
            self._kind,
            operation_id,
        )


__all__ = ["ProgressReporter", "UpdatedTimestampPolicy"]
