"""Item actions delegating volume data movement to transfer requests."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from pydantic import ValidationError

from datamover_coordinator.application.services.progress_reporter import ProgressReporter
from datamover_coordinator.application.services.reconciliation_poller import (
    ReconciliationPoller,
)
from datamover_coordinator.application.services.transfer_request_manager import (
    TransferRequestManager,
)
from datamover_coordinator.domain.entities import (
    BackupDataReference,
    ObjectMeta,
    ObjectReference,
    PVCData,
    ResourceModel,
    SnapshotContent,
    TransferRequest,
    TransferRequestSpec,
)
from datamover_coordinator.domain.errors import DataMoverValidationError
from datamover_coordinator.domain.monitoring_models import (
    OperationProgress,
    TransferRequestInfoResponse,
    TransferRequestListResponse,
)
from datamover_coordinator.domain.ownership import (
    BACKUP_NAME_LABEL,
    OwnerKey,
    has_operation_label,
)
from datamover_coordinator.domain.plugin_models import (
    BackupItemResponse,
    BackupReference,
    ResourceIdentifier,
    RestoreItemResponse,
    RestoreReference,
)
from datamover_coordinator.domain.ports import CredentialResolver, SourceReadinessProbe
from datamover_coordinator.domain.status_annotations import (
    StatusSnapshot,
    annotate_status,
    extract_status,
)
from datamover_coordinator.domain.transfer_types import (
    CreationPolicy,
    OperationMode,
    TransferKind,
)

_DEFAULT_API_GROUP = "datamover.oadp.openshift.io"
_RESOURCE_NAMES = {
    TransferKind.BACKUP: "volumesnapshotbackups",
    TransferKind.RESTORE: "volumesnapshotrestores",
}

ModelT = TypeVar("ModelT", bound=ResourceModel)

logger = logging.getLogger(__name__)


def _parse_item(model: type[ModelT], item: dict[str, Any]) -> ModelT:
    try:
        return model.model_validate(item)
    except ValidationError as exc:
        raise DataMoverValidationError(
            f"Item cannot be read as {model.__name__}: {exc}"
        ) from exc


class DataMoverCoordinator:
    """Backup, restore and delete item actions for volume data movement.

    One class serves both tracking styles. With `supports_async_tracking` the
    actions return an operation ID right after creating a transfer request and the
    host polls `backup_progress`/`restore_progress`. Without it the actions wait
    for the request to complete before returning and hand out no operation ID.
    """

    def __init__(
        self,
        manager: TransferRequestManager,
        backup_progress_reporter: ProgressReporter,
        restore_progress_reporter: ProgressReporter,
        credential_resolver: CredentialResolver,
        source_readiness_probe: SourceReadinessProbe,
        poller: ReconciliationPoller,
        *,
        operation_mode: OperationMode,
        supports_async_tracking: bool = True,
        backup_creation_policy: CreationPolicy = CreationPolicy.IDEMPOTENT,
        restore_creation_policy: CreationPolicy = CreationPolicy.ALWAYS_CREATE,
        api_group: str = _DEFAULT_API_GROUP,
    ) -> None:
        self._manager = manager
        self._backup_progress_reporter = backup_progress_reporter
        self._restore_progress_reporter = restore_progress_reporter
        self._credential_resolver = credential_resolver
        self._source_readiness_probe = source_readiness_probe
        self._poller = poller
        self._operation_mode = operation_mode
        self._supports_async_tracking = supports_async_tracking
        self._backup_creation_policy = backup_creation_policy
        self._restore_creation_policy = restore_creation_policy
        self._api_group = api_group

    @property
    def operation_mode(self) -> OperationMode:
        """Operating mode fixed at construction."""

        return self._operation_mode

    @property
    def supports_async_tracking(self) -> bool:
        """Whether actions hand out operation IDs for progress polling."""

        return self._supports_async_tracking

    async def backup_snapshot_content(
        self,
        item: dict[str, Any],
        backup: BackupReference,
    ) -> BackupItemResponse:
        """Start data movement for one snapshot content of a running backup."""

        if self._operation_mode is not OperationMode.DATA_MOVER:
            return BackupItemResponse(item=item)

        content = _parse_item(SnapshotContent, item)
        if not has_operation_label(content.labels, BACKUP_NAME_LABEL, backup.name):
            logger.warning(
                "Stale snapshot content %s found for backup %s, skipping.",
                content.name,
                backup.name,
            )
            return BackupItemResponse(item=None)

        source_namespace = content.spec.volume_snapshot_ref.namespace
        if not source_namespace:
            raise DataMoverValidationError(
                f"Snapshot content {content.name} does not reference a namespaced snapshot."
            )

        await self._poller.wait_until(
            lambda: self._source_readiness_probe.get_source(content.name),
            is_ready=lambda state: state.is_ready,
            description=f"snapshot content {content.name} to have a ready snapshot handle",
        )

        secret_name = await self._credential_resolver.resolve_secret_name(
            backup.storage_location, backup.namespace
        )
        template = TransferRequest(
            kind=TransferKind.BACKUP,
            metadata=ObjectMeta(namespace=source_namespace),
            spec=TransferRequestSpec(
                volume_snapshot_content=ObjectReference(name=content.name),
                protected_namespace=backup.namespace,
                restic_secret_ref=ObjectReference(name=secret_name),
            ),
        )
        owner = OwnerKey.for_backup(backup.name, content.name)
        request = await self._create(owner, template, self._backup_creation_policy)
        operation_id = await self._track(request)

        logger.info(
            "Returning from snapshot content backup of %s with operation ID '%s'.",
            content.name,
            operation_id,
        )
        return BackupItemResponse(
            item=item,
            operation_id=operation_id,
            items_to_update=[self._resource_identifier(request)],
        )

    async def backup_transfer_request(
        self,
        item: dict[str, Any],
        backup: BackupReference,
    ) -> BackupItemResponse:
        """Back up a transfer request with its status mirrored into annotations."""

        if self._operation_mode is not OperationMode.DATA_MOVER:
            return BackupItemResponse(item=item)

        request = _parse_item(TransferRequest, item)
        if request.kind is not TransferKind.BACKUP:
            raise DataMoverValidationError(
                f"Expected a {TransferKind.BACKUP} item, got {request.kind}."
            )

        live = await self._manager.wait_for_backup_status_data(request.namespace, request.name)
        request.status = live.status
        annotate_status(request, StatusSnapshot.from_status(live.status))
        logger.info(
            "Mirrored status of %s %s into annotations for backup %s.",
            request.kind,
            request.qualified_name,
            backup.name,
        )
        return BackupItemResponse(item=request.to_item())

    async def backup_progress(self, operation_id: str) -> OperationProgress:
        """Progress of a backup transfer."""

        return await self._backup_progress_reporter.progress(operation_id)

    async def cancel_backup(self, operation_id: str) -> None:
        """Accept and ignore cancellation of a backup transfer."""

        await self._backup_progress_reporter.cancel(operation_id)

    async def restore_transfer_request(
        self,
        item: dict[str, Any],
        restore: RestoreReference,
    ) -> RestoreItemResponse:
        """Create the restore transfer for a backed-up transfer request."""

        if self._operation_mode is not OperationMode.DATA_MOVER:
            logger.info("Data mover disabled, skipping restore of %s item.", TransferKind.BACKUP)
            return RestoreItemResponse(skip_restore=True)

        backed_up = _parse_item(TransferRequest, item)
        snapshot = extract_status(backed_up)
        if not snapshot.source_pvc_name:
            raise DataMoverValidationError(
                f"{backed_up.kind} {backed_up.qualified_name} carries no source PVC "
                "annotation; it was not backed up with its status."
            )

        namespace = restore.namespace_mapping.get(backed_up.namespace, backed_up.namespace)
        template = TransferRequest(
            kind=TransferKind.RESTORE,
            metadata=ObjectMeta(namespace=namespace),
            spec=TransferRequestSpec(
                restic_secret_ref=backed_up.spec.restic_secret_ref,
                protected_namespace=backed_up.spec.protected_namespace,
                backup_ref=BackupDataReference(
                    backed_up_pvc_data=PVCData(
                        name=snapshot.source_pvc_name,
                        size=snapshot.source_pvc_size,
                        storage_class_name=snapshot.source_pvc_storage_class,
                    ),
                    restic_repository=snapshot.restic_repository,
                    volume_snapshot_class_name=snapshot.volume_snapshot_class,
                ),
            ),
        )
        owner = OwnerKey.for_restore(restore.name, snapshot.source_pvc_name)
        request = await self._create(owner, template, self._restore_creation_policy)
        operation_id = await self._track(request)

        logger.info(
            "Returning from transfer request restore of %s with operation ID '%s'.",
            backed_up.qualified_name,
            operation_id,
        )
        return RestoreItemResponse(skip_restore=True, operation_id=operation_id)

    async def restore_progress(self, operation_id: str) -> OperationProgress:
        """Progress of a restore transfer."""

        return await self._restore_progress_reporter.progress(operation_id)

    async def cancel_restore(self, operation_id: str) -> None:
        """Accept and ignore cancellation of a restore transfer."""

        await self._restore_progress_reporter.cancel(operation_id)

    async def wait_for_restore_completion(self, restore_name: str) -> list[TransferRequest]:
        """Wait for every restore transfer of a restore to complete."""

        return await self._manager.wait_for_operation_completion(
            TransferKind.RESTORE, restore_name
        )

    async def delete_transfer_request(self, item: dict[str, Any], backup_name: str) -> None:
        """Delete a backup transfer request when its backup is deleted."""

        request = _parse_item(TransferRequest, item)
        if not has_operation_label(request.labels, BACKUP_NAME_LABEL, backup_name):
            logger.info(
                "%s %s was not created by backup %s, skipping deletion.",
                request.kind,
                request.qualified_name,
                backup_name,
            )
            return
        await self._manager.delete_request(request)

    async def list_transfer_requests(
        self, kind: TransferKind, operation_name: str
    ) -> TransferRequestListResponse:
        """List the transfer requests of one backup or restore."""

        requests = await self._manager.list_for_operation(kind, operation_name)
        return TransferRequestListResponse(
            transfer_requests=[TransferRequestInfoResponse.from_request(r) for r in requests]
        )

    async def _create(
        self,
        owner: OwnerKey,
        template: TransferRequest,
        policy: CreationPolicy,
    ) -> TransferRequest:
        if policy is CreationPolicy.IDEMPOTENT:
            request, _ = await self._manager.create_if_absent(owner, template)
            return request
        # TODO: confirm whether restores can be re-executed for the same claim; if so
        # switch restores to CreationPolicy.IDEMPOTENT.
        return await self._manager.create(owner, template)

    async def _track(self, request: TransferRequest) -> str:
        if self._supports_async_tracking:
            return request.operation_id
        await self._manager.wait_for_completion(request)
        return ""

    def _resource_identifier(self, request: TransferRequest) -> ResourceIdentifier:
        return ResourceIdentifier(
            group=self._api_group,
            resource=_RESOURCE_NAMES[request.kind],
            namespace=request.namespace,
            name=request.name,
        )


__all__ = ["DataMoverCoordinator"]
