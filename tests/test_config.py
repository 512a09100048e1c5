from __future__ import annotations

import pytest
from pydantic import ValidationError

from datamover_coordinator.config import Settings, StoreBackend, parse_duration
from datamover_coordinator.domain.transfer_types import OperationMode


@pytest.mark.parametrize(
    ("value", "seconds"),
    [
        ("10m", 600.0),
        ("90s", 90.0),
        ("1h30m", 5400.0),
        ("1.5s", 1.5),
        ("250ms", 0.25),
        ("0", 0.0),
    ],
)
def test_parse_duration(value: str, seconds: float) -> None:
    assert parse_duration(value) == pytest.approx(seconds)


@pytest.mark.parametrize("value", ["", "10", "ten minutes", "5m garbage", "m5"])
def test_parse_duration_rejects_invalid_values(value: str) -> None:
    with pytest.raises(ValueError):
        parse_duration(value)


def test_settings_defaults() -> None:
    settings = Settings()

    assert settings.datamover_timeout_seconds == 600.0
    assert settings.poll_interval_seconds == 5.0
    assert settings.operation_mode is OperationMode.SNAPSHOT_ONLY
    assert settings.async_operation_tracking is True
    assert settings.store_backend is StoreBackend.IN_MEMORY


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATAMOVER_VOLUME_SNAPSHOT_MOVER", "true")
    monkeypatch.setenv("DATAMOVER_DATAMOVER_TIMEOUT", "2m30s")
    monkeypatch.setenv("DATAMOVER_ASYNC_OPERATION_TRACKING", "false")

    settings = Settings()

    assert settings.operation_mode is OperationMode.DATA_MOVER
    assert settings.datamover_timeout_seconds == 150.0
    assert settings.async_operation_tracking is False


@pytest.mark.parametrize("timeout", ["forever", "0", "0s"])
def test_settings_reject_unusable_timeouts(timeout: str) -> None:
    with pytest.raises(ValidationError):
        Settings(datamover_timeout=timeout)


def test_settings_require_api_url_for_kubernetes_backend() -> None:
    with pytest.raises(ValidationError):
        Settings(store_backend=StoreBackend.KUBERNETES)


def test_settings_require_positive_poll_interval() -> None:
    with pytest.raises(ValidationError):
        Settings(poll_interval_seconds=0)
