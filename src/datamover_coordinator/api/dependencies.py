"""Dependency providers for FastAPI routes."""

from functools import lru_cache

from datamover_coordinator.application.services import DataMoverCoordinator
from datamover_coordinator.bootstrap import build_coordinator
from datamover_coordinator.config import Settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return singleton settings."""

    return Settings()


@lru_cache(maxsize=1)
def get_coordinator() -> DataMoverCoordinator:
    """Return singleton service graph."""

    return build_coordinator(get_settings())


__all__ = ["get_coordinator", "get_settings"]
