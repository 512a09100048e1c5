"""Credential secret resolution for transfer requests."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from urllib.parse import quote

from datamover_coordinator.domain.errors import DataMoverValidationError
from datamover_coordinator.domain.ports import CredentialResolver
from datamover_coordinator.infrastructure.kubernetes import (
    KubernetesApiClient,
    KubernetesApiError,
)

DEFAULT_SECRET_SUFFIX = "-volsync-restic"

logger = logging.getLogger(__name__)


def credential_secret_name(storage_location: str, suffix: str = DEFAULT_SECRET_SUFFIX) -> str:
    """Name of the credential secret prepared for a storage location."""

    if not storage_location:
        raise DataMoverValidationError("Storage location name cannot be empty.")
    return f"{storage_location}{suffix}"


class StaticCredentialResolver(CredentialResolver):
    """Resolve secret names without a cluster.

    With `existing_secrets` set, only `(namespace, name)` pairs in it resolve.
    """

    def __init__(
        self,
        suffix: str = DEFAULT_SECRET_SUFFIX,
        existing_secrets: Iterable[tuple[str, str]] | None = None,
    ) -> None:
        self._suffix = suffix
        self._existing = None if existing_secrets is None else set(existing_secrets)

    async def resolve_secret_name(self, storage_location: str, namespace: str) -> str:
        """Return the secret name for a storage location."""

        name = credential_secret_name(storage_location, self._suffix)
        if self._existing is not None and (namespace, name) not in self._existing:
            raise DataMoverValidationError(
                f"Credential secret {name} not found in namespace {namespace}."
            )
        return name


class KubernetesSecretCredentialResolver(CredentialResolver):
    """Resolve secret names after checking the secret exists in the cluster."""

    def __init__(self, client: KubernetesApiClient, suffix: str = DEFAULT_SECRET_SUFFIX) -> None:
        self._client = client
        self._suffix = suffix

    async def resolve_secret_name(self, storage_location: str, namespace: str) -> str:
        """Return the secret name once the API server confirms it exists."""

        name = credential_secret_name(storage_location, self._suffix)
        try:
            await self._client.get_json(
                f"/api/v1/namespaces/{quote(namespace, safe='')}/secrets/{quote(name, safe='')}"
            )
        except KubernetesApiError as exc:
            if exc.is_not_found:
                raise DataMoverValidationError(
                    f"Credential secret {name} not found in namespace {namespace}."
                ) from exc
            raise
        logger.info("Using credential secret %s/%s.", namespace, name)
        return name


__all__ = [
    "DEFAULT_SECRET_SUFFIX",
    "KubernetesSecretCredentialResolver",
    "StaticCredentialResolver",
    "credential_secret_name",
]
