"""Operation ID codec for transfer request identities."""

from __future__ import annotations

from datamover_coordinator.domain.errors import InvalidOperationIDError

OPERATION_ID_SEPARATOR = "/"


def encode_operation_id(namespace: str, name: str) -> str:
    """Return the opaque operation ID for a transfer request identity."""

    return f"{namespace}{OPERATION_ID_SEPARATOR}{name}"


def decode_operation_id(operation_id: str) -> tuple[str, str]:
    """Split an operation ID back into `(namespace, name)`.

    The ID carries no state besides the identity, so any process instance can
    decode IDs handed out by another one.
    """

    segments = operation_id.split(OPERATION_ID_SEPARATOR)
    if len(segments) != 2 or not all(segments):
        raise InvalidOperationIDError(operation_id)
    namespace, name = segments
    return namespace, name


__all__ = [
    "OPERATION_ID_SEPARATOR",
    "decode_operation_id",
    "encode_operation_id",
]
