"""Top-level API router composition."""

from fastapi import APIRouter

from datamover_coordinator.api.routes import (
    backup_router,
    delete_router,
    health_router,
    management_router,
    restore_router,
)

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(backup_router)
api_router.include_router(restore_router)
api_router.include_router(delete_router)
api_router.include_router(management_router)

__all__ = ["api_router"]
