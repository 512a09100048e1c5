"""HTTP API layer."""

from datamover_coordinator.api.router import api_router

__all__ = ["api_router"]
