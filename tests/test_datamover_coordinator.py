from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any

import pytest

from datamover_coordinator.application.services import (
    DataMoverCoordinator,
    ProgressReporter,
    ReconciliationPoller,
    TransferRequestManager,
    UpdatedTimestampPolicy,
)
from datamover_coordinator.domain.entities import PVCData, TransferRequestStatus
from datamover_coordinator.domain.errors import (
    DataMoverValidationError,
    ReconciliationTimeoutError,
    TerminalFailureError,
    TransferRequestNotFoundError,
)
from datamover_coordinator.domain.ownership import (
    BACKUP_NAME_LABEL,
    PVC_NAME_LABEL,
    RESTORE_NAME_LABEL,
    SOURCE_NAME_LABEL,
)
from datamover_coordinator.domain.plugin_models import BackupReference, RestoreReference
from datamover_coordinator.domain.status_annotations import SOURCE_PVC_NAME_ANNOTATION
from datamover_coordinator.domain.transfer_types import OperationMode, TransferKind
from datamover_coordinator.infrastructure.collaborators import (
    StaticCredentialResolver,
    StaticSourceReadinessProbe,
)
from datamover_coordinator.infrastructure.stores import InMemoryTransferRequestStore

BACKUP = BackupReference(name="backup-1", namespace="openshift-adp", storage_location="aws")
RESTORE = RestoreReference(
    name="restore-1",
    namespace="openshift-adp",
    namespace_mapping={"app": "app-restored"},
)

Worker = Callable[[InMemoryTransferRequestStore], Awaitable[None]]


class Harness:
    """Coordinator over an in-memory store with a scripted transfer worker.

    The worker runs each time the poller sleeps, standing in for the external
    controller reconciling requests between polls.
    """

    def __init__(
        self,
        *,
        mode: OperationMode = OperationMode.DATA_MOVER,
        supports_async_tracking: bool = True,
        probe: StaticSourceReadinessProbe | None = None,
        resolver: StaticCredentialResolver | None = None,
        worker: Worker | None = None,
    ) -> None:
        self.store = InMemoryTransferRequestStore(
            unique_label_keys=(BACKUP_NAME_LABEL, SOURCE_NAME_LABEL)
        )
        self.now = 0.0
        self._worker = worker
        poller = ReconciliationPoller(
            interval_seconds=5.0,
            timeout_seconds=600.0,
            clock=lambda: self.now,
            sleep=self._sleep,
        )
        self.coordinator = DataMoverCoordinator(
            manager=TransferRequestManager(self.store, poller),
            backup_progress_reporter=ProgressReporter(
                self.store,
                TransferKind.BACKUP,
                updated_policy=UpdatedTimestampPolicy.COMPLETION,
            ),
            restore_progress_reporter=ProgressReporter(self.store, TransferKind.RESTORE),
            credential_resolver=resolver or StaticCredentialResolver(),
            source_readiness_probe=probe or StaticSourceReadinessProbe(),
            poller=poller,
            operation_mode=mode,
            supports_async_tracking=supports_async_tracking,
        )

    async def _sleep(self, seconds: float) -> None:
        self.now += seconds
        if self._worker is not None:
            await self._worker(self.store)

    def run(self, coroutine: Coroutine[Any, Any, Any]) -> Any:
        return asyncio.run(coroutine)


def complete_all(kind: TransferKind, **status: Any) -> Worker:
    async def worker(store: InMemoryTransferRequestStore) -> None:
        for request in await store.list(kind, {}):
            await store.set_status(
                kind,
                request.namespace,
                request.name,
                TransferRequestStatus(phase="Completed", **status),
            )

    return worker


def snapshot_content_item(
    name: str = "snapcontent-pvc-a",
    backup_name: str = "backup-1",
) -> dict[str, Any]:
    return {
        "apiVersion": "snapshot.storage.k8s.io/v1",
        "kind": "VolumeSnapshotContent",
        "metadata": {"name": name, "labels": {BACKUP_NAME_LABEL: backup_name}},
        "spec": {
            "driver": "ebs.csi.aws.com",
            "volumeSnapshotRef": {"name": "velero-pvc-a-snap", "namespace": "app"},
        },
    }


FULL_STATUS = {
    "restic_repository": "s3:s3.amazonaws.com/bucket/openshift-adp/app",
    "source_pvc_data": PVCData(name="pvc-a", size="10Gi", storage_class_name="gp3-csi"),
    "volume_snapshot_class_name": "csi-aws-vsc",
}


def test_backup_retry_returns_same_operation_and_single_request() -> None:
    harness = Harness()

    first = harness.run(
        harness.coordinator.backup_snapshot_content(snapshot_content_item(), BACKUP)
    )
    second = harness.run(
        harness.coordinator.backup_snapshot_content(snapshot_content_item(), BACKUP)
    )

    requests = harness.run(harness.store.list(TransferKind.BACKUP, {}))
    assert len(requests) == 1
    assert first.operation_id == second.operation_id == requests[0].operation_id
    assert first.operation_id.startswith("app/vsb-")
    assert first.item == snapshot_content_item()

    request = requests[0]
    assert request.labels == {
        BACKUP_NAME_LABEL: "backup-1",
        SOURCE_NAME_LABEL: "snapcontent-pvc-a",
    }
    assert request.spec.volume_snapshot_content is not None
    assert request.spec.volume_snapshot_content.name == "snapcontent-pvc-a"
    assert request.spec.protected_namespace == "openshift-adp"
    assert request.spec.restic_secret_ref is not None
    assert request.spec.restic_secret_ref.name == "aws-volsync-restic"

    [identifier] = first.items_to_update
    assert identifier.group == "datamover.oadp.openshift.io"
    assert identifier.resource == "volumesnapshotbackups"
    assert (identifier.namespace, identifier.name) == ("app", request.name)


def test_backup_progress_follows_worker_status() -> None:
    harness = Harness()
    response = harness.run(
        harness.coordinator.backup_snapshot_content(snapshot_content_item(), BACKUP)
    )
    namespace, name = response.operation_id.split("/")

    harness.run(
        harness.store.set_status(
            TransferKind.BACKUP,
            namespace,
            name,
            TransferRequestStatus(phase="InProgress", batching_status="Processing"),
        )
    )
    in_progress = harness.run(harness.coordinator.backup_progress(response.operation_id))

    assert in_progress.description == "Phase: InProgress BatchingStatus: Processing"
    assert in_progress.completed is False

    harness.run(
        harness.store.set_status(
            TransferKind.BACKUP, namespace, name, TransferRequestStatus(phase="Completed")
        )
    )
    completed = harness.run(harness.coordinator.backup_progress(response.operation_id))

    assert completed.completed is True
    assert completed.error is None


def test_progress_of_unknown_operation_is_not_found() -> None:
    harness = Harness()

    with pytest.raises(TransferRequestNotFoundError, match="nsX/reqY"):
        harness.run(harness.coordinator.restore_progress("nsX/reqY"))


def test_cancel_is_accepted_and_ignored() -> None:
    harness = Harness()
    response = harness.run(
        harness.coordinator.backup_snapshot_content(snapshot_content_item(), BACKUP)
    )

    harness.run(harness.coordinator.cancel_backup(response.operation_id))
    harness.run(harness.coordinator.cancel_restore("app/vsr-unknown"))

    assert len(harness.run(harness.store.list(TransferKind.BACKUP, {}))) == 1


def test_stale_snapshot_content_is_dropped_without_request() -> None:
    harness = Harness()

    response = harness.run(
        harness.coordinator.backup_snapshot_content(
            snapshot_content_item(backup_name="backup-0"), BACKUP
        )
    )

    assert response.item is None
    assert response.operation_id == ""
    assert harness.run(harness.store.list(TransferKind.BACKUP, {})) == []


def test_snapshot_only_mode_passes_items_through() -> None:
    harness = Harness(mode=OperationMode.SNAPSHOT_ONLY)

    backup = harness.run(
        harness.coordinator.backup_snapshot_content(snapshot_content_item(), BACKUP)
    )
    restore = harness.run(
        harness.coordinator.restore_transfer_request({"kind": "VolumeSnapshotBackup"}, RESTORE)
    )

    assert backup.item == snapshot_content_item()
    assert backup.operation_id == ""
    assert restore.skip_restore is True
    assert restore.operation_id == ""
    assert harness.run(harness.store.list(TransferKind.BACKUP, {})) == []


def test_backup_waits_for_source_readiness() -> None:
    probe = StaticSourceReadinessProbe(default_ready=False)
    harness = Harness(probe=probe)

    with pytest.raises(ReconciliationTimeoutError):
        harness.run(harness.coordinator.backup_snapshot_content(snapshot_content_item(), BACKUP))

    assert harness.now == 600.0
    assert harness.run(harness.store.list(TransferKind.BACKUP, {})) == []


def test_backup_requires_credential_secret() -> None:
    harness = Harness(resolver=StaticCredentialResolver(existing_secrets=[]))

    with pytest.raises(DataMoverValidationError, match="aws-volsync-restic"):
        harness.run(harness.coordinator.backup_snapshot_content(snapshot_content_item(), BACKUP))


def test_backup_rejects_unreadable_items() -> None:
    harness = Harness()

    with pytest.raises(DataMoverValidationError):
        harness.run(
            harness.coordinator.backup_snapshot_content({"metadata": {"name": "x"}}, BACKUP)
        )


def test_sync_tracking_waits_for_completion_and_hands_out_no_operation_id() -> None:
    harness = Harness(
        supports_async_tracking=False,
        worker=complete_all(TransferKind.BACKUP),
    )

    response = harness.run(
        harness.coordinator.backup_snapshot_content(snapshot_content_item(), BACKUP)
    )

    [request] = harness.run(harness.store.list(TransferKind.BACKUP, {}))
    assert response.operation_id == ""
    assert request.current_status.phase == "Completed"
    assert harness.now == 5.0


def _backed_up_item(harness: Harness) -> dict[str, Any]:
    """Run a backup through the status bridge and drop status like the host does."""

    response = harness.run(
        harness.coordinator.backup_snapshot_content(snapshot_content_item(), BACKUP)
    )
    namespace, name = response.operation_id.split("/")
    harness.run(
        harness.store.set_status(
            TransferKind.BACKUP,
            namespace,
            name,
            TransferRequestStatus(phase="Completed", **FULL_STATUS),
        )
    )
    live = harness.run(harness.store.get(TransferKind.BACKUP, namespace, name))
    bridged = harness.run(harness.coordinator.backup_transfer_request(live.to_item(), BACKUP))
    assert bridged.item is not None
    return {key: value for key, value in bridged.item.items() if key != "status"}


def test_status_bridge_waits_for_status_data_then_annotates() -> None:
    harness = Harness(worker=complete_all(TransferKind.BACKUP, **FULL_STATUS))
    response = harness.run(
        harness.coordinator.backup_snapshot_content(snapshot_content_item(), BACKUP)
    )
    namespace, name = response.operation_id.split("/")
    stale_item = harness.run(harness.store.get(TransferKind.BACKUP, namespace, name)).to_item()

    bridged = harness.run(harness.coordinator.backup_transfer_request(stale_item, BACKUP))

    assert bridged.item is not None
    annotations = bridged.item["metadata"]["annotations"]
    assert annotations[SOURCE_PVC_NAME_ANNOTATION] == "pvc-a"
    assert bridged.item["status"]["phase"] == "Completed"
    assert harness.now == 5.0


def test_restore_builds_request_from_annotations_with_namespace_mapping() -> None:
    harness = Harness()
    item = _backed_up_item(harness)

    response = harness.run(harness.coordinator.restore_transfer_request(item, RESTORE))

    assert response.skip_restore is True
    assert response.operation_id.startswith("app-restored/vsr-")
    [request] = harness.run(harness.store.list(TransferKind.RESTORE, {}))
    assert request.labels[RESTORE_NAME_LABEL] == "restore-1"
    assert request.labels[PVC_NAME_LABEL] == "pvc-a"
    backup_ref = request.spec.backup_ref
    assert backup_ref is not None
    assert backup_ref.backed_up_pvc_data.name == "pvc-a"
    assert backup_ref.backed_up_pvc_data.size == "10Gi"
    assert backup_ref.backed_up_pvc_data.storage_class_name == "gp3-csi"
    assert backup_ref.restic_repository == "s3:s3.amazonaws.com/bucket/openshift-adp/app"
    assert backup_ref.volume_snapshot_class_name == "csi-aws-vsc"
    assert request.spec.restic_secret_ref is not None
    assert request.spec.restic_secret_ref.name == "aws-volsync-restic"


def test_restore_creates_a_new_request_on_every_execution() -> None:
    harness = Harness()
    item = _backed_up_item(harness)

    first = harness.run(harness.coordinator.restore_transfer_request(item, RESTORE))
    second = harness.run(harness.coordinator.restore_transfer_request(item, RESTORE))

    assert first.operation_id != second.operation_id
    assert len(harness.run(harness.store.list(TransferKind.RESTORE, {}))) == 2


def test_restore_rejects_items_without_status_annotations() -> None:
    harness = Harness()
    item = {
        "apiVersion": "datamover.oadp.openshift.io/v1alpha1",
        "kind": "VolumeSnapshotBackup",
        "metadata": {"name": "vsb-abcde", "namespace": "app"},
        "spec": {},
    }

    with pytest.raises(DataMoverValidationError):
        harness.run(harness.coordinator.restore_transfer_request(item, RESTORE))


def test_wait_for_restore_completion_waits_for_every_request() -> None:
    harness = Harness(worker=complete_all(TransferKind.RESTORE))
    item = _backed_up_item(harness)
    harness.run(harness.coordinator.restore_transfer_request(item, RESTORE))
    harness.run(harness.coordinator.restore_transfer_request(item, RESTORE))

    completed = harness.run(harness.coordinator.wait_for_restore_completion("restore-1"))

    assert len(completed) == 2
    assert {request.current_status.phase for request in completed} == {"Completed"}


def test_wait_for_restore_completion_reports_failed_request() -> None:
    async def fail_all(store: InMemoryTransferRequestStore) -> None:
        for request in await store.list(TransferKind.RESTORE, {}):
            await store.set_status(
                TransferKind.RESTORE,
                request.namespace,
                request.name,
                TransferRequestStatus(phase="Failed"),
            )

    harness = Harness(worker=fail_all)
    item = _backed_up_item(harness)
    harness.run(harness.coordinator.restore_transfer_request(item, RESTORE))

    with pytest.raises(TerminalFailureError):
        harness.run(harness.coordinator.wait_for_restore_completion("restore-1"))


def test_wait_for_restore_completion_without_requests_returns_empty() -> None:
    harness = Harness()

    assert harness.run(harness.coordinator.wait_for_restore_completion("restore-9")) == []


def test_delete_removes_only_requests_of_the_deleted_backup() -> None:
    harness = Harness()
    harness.run(harness.coordinator.backup_snapshot_content(snapshot_content_item(), BACKUP))
    [request] = harness.run(harness.store.list(TransferKind.BACKUP, {}))
    item = request.to_item()

    harness.run(harness.coordinator.delete_transfer_request(item, "backup-2"))
    assert len(harness.run(harness.store.list(TransferKind.BACKUP, {}))) == 1

    harness.run(harness.coordinator.delete_transfer_request(item, "backup-1"))
    assert harness.run(harness.store.list(TransferKind.BACKUP, {})) == []

    harness.run(harness.coordinator.delete_transfer_request(item, "backup-1"))


def test_list_transfer_requests_reports_operation_requests() -> None:
    harness = Harness()
    harness.run(harness.coordinator.backup_snapshot_content(snapshot_content_item(), BACKUP))
    harness.run(
        harness.coordinator.backup_snapshot_content(
            snapshot_content_item(name="snapcontent-pvc-b"), BACKUP
        )
    )

    coordinator = harness.coordinator
    listing = harness.run(coordinator.list_transfer_requests(TransferKind.BACKUP, "backup-1"))
    other = harness.run(coordinator.list_transfer_requests(TransferKind.BACKUP, "backup-2"))

    assert len(listing.transfer_requests) == 2
    assert {info.labels[SOURCE_NAME_LABEL] for info in listing.transfer_requests} == {
        "snapcontent-pvc-a",
        "snapcontent-pvc-b",
    }
    assert other.transfer_requests == []
