"""Application settings."""

import re
from enum import StrEnum

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from datamover_coordinator.domain.transfer_types import OperationMode

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_DURATION_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


class StoreBackend(StrEnum):
    """Available adapters for the transfer request store."""

    IN_MEMORY = "in_memory"
    KUBERNETES = "kubernetes"


def parse_duration(value: str) -> float:
    """Parse a duration such as `10m`, `90s` or `1h30m` into seconds."""

    text = value.strip()
    if not text:
        raise ValueError("Duration cannot be empty.")
    if text == "0":
        return 0.0

    position = 0
    total = 0.0
    for match in _DURATION_PART.finditer(text):
        if match.start() != position:
            break
        total += float(match.group(1)) * _DURATION_UNIT_SECONDS[match.group(2)]
        position = match.end()
    if position != len(text):
        raise ValueError(f"Invalid duration '{value}'.")
    return total


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    app_name: str = "Datamover Coordinator"
    api_prefix: str = ""
    host: str = "0.0.0.0"
    port: int = 8085
    volume_snapshot_mover: bool = False
    async_operation_tracking: bool = True
    datamover_timeout: str = "10m"
    poll_interval_seconds: float = 5.0
    store_backend: StoreBackend = StoreBackend.IN_MEMORY
    kubernetes_api_url: str | None = None
    kubernetes_token: str | None = None
    kubernetes_token_file: str | None = None
    kubernetes_verify_tls: bool = True
    kubernetes_timeout_seconds: float = 10.0
    datamover_api_group: str = "datamover.oadp.openshift.io"
    datamover_api_version: str = "v1alpha1"
    credential_secret_suffix: str = "-volsync-restic"

    @field_validator("datamover_timeout")
    @classmethod
    def validate_datamover_timeout(cls, value: str) -> str:
        """Reject timeouts that do not parse as durations."""

        try:
            seconds = parse_duration(value)
        except ValueError as exc:
            raise ValueError(
                f"DATAMOVER_DATAMOVER_TIMEOUT is not a valid duration: {exc}"
            ) from exc
        if seconds <= 0:
            raise ValueError("DATAMOVER_DATAMOVER_TIMEOUT must be > 0.")
        return value

    @model_validator(mode="after")
    def validate_backend_settings(self) -> "Settings":
        """Ensure backend-specific settings are valid."""

        if self.store_backend == StoreBackend.KUBERNETES and not self.kubernetes_api_url:
            raise ValueError(
                "DATAMOVER_KUBERNETES_API_URL is required when "
                "DATAMOVER_STORE_BACKEND=kubernetes."
            )
        if self.poll_interval_seconds <= 0:
            raise ValueError("DATAMOVER_POLL_INTERVAL_SECONDS must be > 0.")
        if self.kubernetes_timeout_seconds <= 0:
            raise ValueError("DATAMOVER_KUBERNETES_TIMEOUT_SECONDS must be > 0.")
        return self

    @property
    def datamover_timeout_seconds(self) -> float:
        """Poll timeout in seconds."""

        return parse_duration(self.datamover_timeout)

    @property
    def operation_mode(self) -> OperationMode:
        """Operating mode selected by the data mover flag."""

        if self.volume_snapshot_mover:
            return OperationMode.DATA_MOVER
        return OperationMode.SNAPSHOT_ONLY

    model_config = SettingsConfigDict(env_prefix="DATAMOVER_", extra="ignore")


__all__ = ["Settings", "StoreBackend", "parse_duration"]
