"""Fixed-interval throttle for outbound GitHub calls."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable

LOGGER = logging.getLogger(__name__)


class Throttle:
    """Single gate enforcing a minimum interval between call batches.

    The gate is shared by every caller holding the same instance, so
    requests made for different credentials still serialise through it.
    """

    def __init__(
        self,
        min_interval: float = 1.0,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        self._min_interval = max(min_interval, 0.0)
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last_call: float | None = None

    @property
    def min_interval(self) -> float:
        return self._min_interval

    @property
    def last_call(self) -> float | None:
        return self._last_call

    async def wait(self) -> None:
        """Wait until ``min_interval`` has passed since the previous call."""

        # Held across the sleep so concurrent waiters are spaced out too.
        async with self._lock:
            if self._last_call is not None:
                delay = self._min_interval - (self._clock() - self._last_call)
                if delay > 0:
                    LOGGER.debug("Throttling GitHub calls for %.3fs", delay)
                    await (self._sleep or asyncio.sleep)(delay)
            self._last_call = self._clock()


__all__ = ["Throttle"]
