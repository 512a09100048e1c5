"""Transfer request store backed by the Kubernetes API."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from datamover_coordinator.domain.entities import TransferRequest
from datamover_coordinator.domain.errors import (
    DataMoverValidationError,
    TransferRequestConflictError,
    TransferRequestNotFoundError,
)
from datamover_coordinator.domain.ports import TransferRequestStore
from datamover_coordinator.domain.transfer_types import TransferKind
from datamover_coordinator.infrastructure.kubernetes import (
    KubernetesApiClient,
    KubernetesApiError,
)

_PLURALS = {
    TransferKind.BACKUP: "volumesnapshotbackups",
    TransferKind.RESTORE: "volumesnapshotrestores",
}

logger = logging.getLogger(__name__)


def label_selector(labels: dict[str, str]) -> str:
    """Render an equality-based label selector."""

    return ",".join(f"{key}={value}" for key, value in sorted(labels.items()))


class KubernetesTransferRequestStore(TransferRequestStore):
    """Reads and writes transfer request custom resources.

    Namespace-less listing uses the cluster-wide collection path.
    """

    def __init__(
        self,
        client: KubernetesApiClient,
        api_group: str = "datamover.oadp.openshift.io",
        api_version: str = "v1alpha1",
    ) -> None:
        self._client = client
        self._api_group = api_group
        self._api_version = api_version

    async def get(self, kind: TransferKind, namespace: str, name: str) -> TransferRequest:
        """GET one transfer request."""

        path = self._path(kind, namespace, name)
        try:
            payload = await self._client.get_json(path)
        except KubernetesApiError as exc:
            if exc.is_not_found:
                raise TransferRequestNotFoundError(
                    f"{kind} {namespace}/{name} not found."
                ) from exc
            raise
        return self._to_request(kind, payload)

    async def list(
        self,
        kind: TransferKind,
        labels: dict[str, str],
        namespace: str | None = None,
    ) -> list[TransferRequest]:
        """List transfer requests by label selector."""

        if namespace is None:
            path = f"/apis/{self._api_group}/{self._api_version}/{_PLURALS[kind]}"
        else:
            path = self._path(kind, namespace)
        params = {"labelSelector": label_selector(labels)} if labels else None
        payload = await self._client.get_json(path, params=params)
        items = payload.get("items") or []
        return [self._to_request(kind, item) for item in items if isinstance(item, dict)]

    async def create(self, request: TransferRequest) -> TransferRequest:
        """POST a new transfer request."""

        if not request.namespace:
            raise DataMoverValidationError(f"{request.kind} needs a namespace.")
        body = request.model_copy(deep=True)
        body.api_version = f"{self._api_group}/{self._api_version}"
        try:
            payload = await self._client.post_json(
                self._path(request.kind, request.namespace),
                body.to_item(),
            )
        except KubernetesApiError as exc:
            if exc.is_conflict:
                raise TransferRequestConflictError(
                    f"{request.kind} in {request.namespace} already exists: {exc}"
                ) from exc
            raise
        return self._to_request(request.kind, payload)

    async def delete(self, kind: TransferKind, namespace: str, name: str) -> None:
        """DELETE one transfer request."""

        try:
            await self._client.delete(self._path(kind, namespace, name))
        except KubernetesApiError as exc:
            if exc.is_not_found:
                raise TransferRequestNotFoundError(
                    f"{kind} {namespace}/{name} not found."
                ) from exc
            raise

    def _path(self, kind: TransferKind, namespace: str, name: str | None = None) -> str:
        return KubernetesApiClient.namespaced_path(
            self._api_group, self._api_version, namespace, _PLURALS[kind], name
        )

    def _to_request(self, kind: TransferKind, payload: dict[str, object]) -> TransferRequest:
        # List items omit kind; fill it from the collection being read.
        data = {**payload, "kind": payload.get("kind") or kind.value}
        try:
            return TransferRequest.model_validate(data)
        except ValidationError as exc:
            logger.error("Unreadable %s payload from API server: %s", kind, exc)
            raise DataMoverValidationError(f"Unreadable {kind} payload: {exc}") from exc


__all__ = ["KubernetesTransferRequestStore", "label_selector"]
