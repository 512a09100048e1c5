"""Bounded polling for conditions reconciled by external controllers."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from datamover_coordinator.domain.errors import (
    ReconciliationTimeoutError,
    TerminalFailureError,
    TransientFetchError,
)

_DEFAULT_INTERVAL_SECONDS = 5.0
_DEFAULT_TIMEOUT_SECONDS = 600.0

T = TypeVar("T")

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]

logger = logging.getLogger(__name__)


class ReconciliationPoller:
    """Wait for an externally reconciled condition with a fixed interval.

    Waits run as coroutines on the caller's event loop. Each call holds its caller
    for up to the timeout, so it belongs on background paths only; cancelling the
    awaiting task stops the wait between fetches.
    """

    def __init__(
        self,
        interval_seconds: float = _DEFAULT_INTERVAL_SECONDS,
        timeout_seconds: float = _DEFAULT_TIMEOUT_SECONDS,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._interval_seconds = max(interval_seconds, 0.0)
        self._timeout_seconds = max(timeout_seconds, 0.0)
        self._clock = clock
        self._sleep = sleep

    @property
    def interval_seconds(self) -> float:
        """Delay between two fetches."""

        return self._interval_seconds

    @property
    def timeout_seconds(self) -> float:
        """Default wait budget."""

        return self._timeout_seconds

    async def wait_until(
        self,
        fetch: Callable[[], Awaitable[T]],
        is_ready: Callable[[T], bool],
        is_terminal_failure: Callable[[T], bool] | None = None,
        *,
        description: str,
        interval_seconds: float | None = None,
        timeout_seconds: float | None = None,
    ) -> T:
        """Fetch until `is_ready` holds and return the last fetched value.

        The first fetch happens immediately. A terminal failure ends the wait at
        once instead of spending the rest of the budget. Fetch errors are not
        retried: they end the wait as `TransientFetchError`.
        """

        interval = self._interval_seconds if interval_seconds is None else interval_seconds
        timeout = self._timeout_seconds if timeout_seconds is None else timeout_seconds
        deadline = self._clock() + timeout

        while True:
            try:
                result = await fetch()
            except Exception as exc:
                raise TransientFetchError(f"Failed to get {description}: {exc}") from exc

            if is_terminal_failure is not None and is_terminal_failure(result):
                raise TerminalFailureError(f"{description} has failed status")

            if is_ready(result):
                return result

            remaining = deadline - self._clock()
            if remaining <= 0:
                logger.error("Timed out awaiting reconciliation of %s", description)
                raise ReconciliationTimeoutError(
                    f"Timed out after {timeout:g}s awaiting reconciliation of {description}"
                )

            logger.info("Waiting for %s. Retrying in %gs", description, interval)
            await self._sleep(min(interval, remaining))

    async def wait_all(self, waits: Sequence[Awaitable[T]]) -> list[T]:
        """Run waits concurrently and raise the first error once all have ended.

        A failing wait does not cancel or shorten the others.
        """

        results = await asyncio.gather(*waits, return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return list(results)


__all__ = ["Clock", "ReconciliationPoller", "Sleep"]
