"""Domain exceptions for data mover operations."""


class DataMoverError(Exception):
    """Base class for data mover errors."""


class InvalidOperationIDError(DataMoverError):
    """Raised when an operation ID is empty or malformed."""

    def __init__(self, operation_id: str) -> None:
        super().__init__(f"Invalid operation ID '{operation_id}'.")
        self.operation_id = operation_id


class TransferRequestNotFoundError(DataMoverError):
    """Raised when a transfer request no longer exists."""


class TransferRequestConflictError(DataMoverError):
    """Raised when the store reports that a transfer request already exists."""


class DataMoverValidationError(DataMoverError):
    """Raised when an item or request cannot be interpreted."""


class ReconciliationTimeoutError(DataMoverError, TimeoutError):
    """Raised when a wait exhausts its budget before the condition holds."""


class TerminalFailureError(DataMoverError):
    """Raised when a watched object reaches a state it cannot recover from."""


class TransientFetchError(DataMoverError):
    """Raised when fetching a watched object fails during a wait."""


__all__ = [
    "DataMoverError",
    "DataMoverValidationError",
    "InvalidOperationIDError",
    "ReconciliationTimeoutError",
    "TerminalFailureError",
    "TransferRequestConflictError",
    "TransferRequestNotFoundError",
    "TransientFetchError",
]
