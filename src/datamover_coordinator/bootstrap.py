"""Application bootstrap/wiring."""

import logging
from dataclasses import dataclass

from datamover_coordinator.application.services import (
    DataMoverCoordinator,
    ProgressReporter,
    ReconciliationPoller,
    TransferRequestManager,
    UpdatedTimestampPolicy,
)
from datamover_coordinator.config import Settings, StoreBackend
from datamover_coordinator.domain.ownership import BACKUP_NAME_LABEL, SOURCE_NAME_LABEL
from datamover_coordinator.domain.ports import (
    CredentialResolver,
    SourceReadinessProbe,
    TransferRequestStore,
)
from datamover_coordinator.domain.transfer_types import TransferKind
from datamover_coordinator.infrastructure.collaborators import (
    KubernetesSecretCredentialResolver,
    KubernetesSourceReadinessProbe,
    StaticCredentialResolver,
    StaticSourceReadinessProbe,
)
from datamover_coordinator.infrastructure.kubernetes import KubernetesApiClient
from datamover_coordinator.infrastructure.stores import (
    InMemoryTransferRequestStore,
    KubernetesTransferRequestStore,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class _StoreWiring:
    store: TransferRequestStore
    credential_resolver: CredentialResolver
    source_readiness_probe: SourceReadinessProbe


def _build_kubernetes_client(settings: Settings) -> KubernetesApiClient:
    if settings.kubernetes_api_url is None:
        raise ValueError(
            "DATAMOVER_KUBERNETES_API_URL is required when DATAMOVER_STORE_BACKEND=kubernetes."
        )
    return KubernetesApiClient(
        base_url=settings.kubernetes_api_url,
        token=settings.kubernetes_token,
        token_file=settings.kubernetes_token_file,
        verify_tls=settings.kubernetes_verify_tls,
        timeout_seconds=settings.kubernetes_timeout_seconds,
    )


def _build_store(settings: Settings) -> _StoreWiring:
    if settings.store_backend == StoreBackend.KUBERNETES:
        client = _build_kubernetes_client(settings)
        return _StoreWiring(
            store=KubernetesTransferRequestStore(
                client,
                api_group=settings.datamover_api_group,
                api_version=settings.datamover_api_version,
            ),
            credential_resolver=KubernetesSecretCredentialResolver(
                client, suffix=settings.credential_secret_suffix
            ),
            source_readiness_probe=KubernetesSourceReadinessProbe(client),
        )

    logger.warning(
        "Using the in-memory transfer request store; requests are lost on restart "
        "and no worker will reconcile them."
    )
    return _StoreWiring(
        store=InMemoryTransferRequestStore(
            unique_label_keys=(BACKUP_NAME_LABEL, SOURCE_NAME_LABEL)
        ),
        credential_resolver=StaticCredentialResolver(suffix=settings.credential_secret_suffix),
        source_readiness_probe=StaticSourceReadinessProbe(),
    )


def build_coordinator(settings: Settings) -> DataMoverCoordinator:
    """Compose service graph."""

    wiring = _build_store(settings)
    poller = ReconciliationPoller(
        interval_seconds=settings.poll_interval_seconds,
        timeout_seconds=settings.datamover_timeout_seconds,
    )
    logger.info(
        "Data mover mode is %s with async operation tracking %s.",
        settings.operation_mode,
        "enabled" if settings.async_operation_tracking else "disabled",
    )

    return DataMoverCoordinator(
        manager=TransferRequestManager(wiring.store, poller),
        backup_progress_reporter=ProgressReporter(
            wiring.store,
            TransferKind.BACKUP,
            updated_policy=UpdatedTimestampPolicy.COMPLETION,
        ),
        restore_progress_reporter=ProgressReporter(wiring.store, TransferKind.RESTORE),
        credential_resolver=wiring.credential_resolver,
        source_readiness_probe=wiring.source_readiness_probe,
        poller=poller,
        operation_mode=settings.operation_mode,
        supports_async_tracking=settings.async_operation_tracking,
        api_group=settings.datamover_api_group,
    )


__all__ = ["build_coordinator"]
