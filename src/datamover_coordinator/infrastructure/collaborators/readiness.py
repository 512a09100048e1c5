"""Readiness of snapshot contents used as transfer sources."""

from __future__ import annotations

from urllib.parse import quote

from datamover_coordinator.domain.errors import DataMoverValidationError
from datamover_coordinator.domain.monitoring_models import SourceSnapshotState
from datamover_coordinator.domain.ports import SourceReadinessProbe
from datamover_coordinator.infrastructure.kubernetes import (
    KubernetesApiClient,
    KubernetesApiError,
)

_SNAPSHOT_CONTENTS_PATH = "/apis/snapshot.storage.k8s.io/v1/volumesnapshotcontents"


class StaticSourceReadinessProbe(SourceReadinessProbe):
    """Report sources from an in-process table.

    Names missing from the table are reported ready, with a handle derived from
    the name, unless `default_ready` is False.
    """

    def __init__(self, default_ready: bool = True) -> None:
        self._states: dict[str, SourceSnapshotState] = {}
        self._default_ready = default_ready

    def set_state(self, state: SourceSnapshotState) -> None:
        """Record the state reported for one snapshot content."""

        self._states[state.name] = state

    async def get_source(self, name: str) -> SourceSnapshotState:
        """Return the recorded state of a snapshot content."""

        state = self._states.get(name)
        if state is not None:
            return state
        if self._default_ready:
            return SourceSnapshotState(name=name, ready_to_use=True, snapshot_handle=name)
        return SourceSnapshotState(name=name)


class KubernetesSourceReadinessProbe(SourceReadinessProbe):
    """Read snapshot content status from the API server."""

    def __init__(self, client: KubernetesApiClient) -> None:
        self._client = client

    async def get_source(self, name: str) -> SourceSnapshotState:
        """GET the snapshot content and report its readiness."""

        try:
            payload = await self._client.get_json(
                f"{_SNAPSHOT_CONTENTS_PATH}/{quote(name, safe='')}"
            )
        except KubernetesApiError as exc:
            if exc.is_not_found:
                raise DataMoverValidationError(
                    f"Snapshot content {name} not found."
                ) from exc
            raise

        status = payload.get("status")
        if not isinstance(status, dict):
            return SourceSnapshotState(name=name)
        handle = status.get("snapshotHandle")
        return SourceSnapshotState(
            name=name,
            ready_to_use=status.get("readyToUse") is True,
            snapshot_handle=handle if isinstance(handle, str) else None,
        )


__all__ = ["KubernetesSourceReadinessProbe", "StaticSourceReadinessProbe"]
