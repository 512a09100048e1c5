"""Route modules public API."""

from datamover_coordinator.api.routes.backup import router as backup_router
from datamover_coordinator.api.routes.delete import router as delete_router
from datamover_coordinator.api.routes.health import router as health_router
from datamover_coordinator.api.routes.management import router as management_router
from datamover_coordinator.api.routes.restore import router as restore_router

__all__ = [
    "backup_router",
    "delete_router",
    "health_router",
    "management_router",
    "restore_router",
]
