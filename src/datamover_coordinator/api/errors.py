"""Translation of domain errors to HTTP responses."""

from __future__ import annotations

import logging
from typing import NoReturn

from fastapi import HTTPException

from datamover_coordinator.domain.errors import (
    DataMoverValidationError,
    InvalidOperationIDError,
    ReconciliationTimeoutError,
    TerminalFailureError,
    TransferRequestConflictError,
    TransferRequestNotFoundError,
    TransientFetchError,
)

logger = logging.getLogger(__name__)


def raise_http_exception(exc: Exception) -> NoReturn:
    """Re-raise a service error as the matching `HTTPException`."""

    if isinstance(exc, InvalidOperationIDError | DataMoverValidationError):
        raise HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, TransferRequestNotFoundError):
        raise HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, TerminalFailureError | TransferRequestConflictError):
        raise HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, TransientFetchError):
        raise HTTPException(status_code=502, detail=str(exc))
    if isinstance(exc, ReconciliationTimeoutError):
        raise HTTPException(status_code=504, detail=str(exc))
    logger.exception("Unexpected data mover error", exc_info=exc)
    raise HTTPException(status_code=500, detail="Unexpected data mover error")


__all__ = ["raise_http_exception"]
