"""Concurrency Gauge — process-wide count of in-flight gateway requests.

The gauge is a single integer cell. ``increment`` and ``decrement`` are
serialised by a ``threading.Lock`` so every caller gets a distinct return
value; ``read`` is a plain attribute load, which is atomic for ints.

Overload is a strict comparison: with the default threshold of 50, exactly
50 concurrent requests is NOT overloaded, 51 is.

Callers must pair every ``increment`` with a ``decrement`` on all exit
paths. Use ``track()`` / ``atrack()`` rather than hand-written bookkeeping:

    with active_requests.track():
        ...  # request handling

    async with active_requests.atrack():
        ...
"""

from __future__ import annotations

import logging
import threading
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager

from policy_router.core.metrics import bind_active_requests
from policy_router.routing.types import OVERLOAD_THRESHOLD

logger = logging.getLogger(__name__)


class ConcurrencyGauge:
    """Thread-safe in-flight request counter with an overload predicate."""

    def __init__(self, threshold: int = OVERLOAD_THRESHOLD):
        self._threshold = threshold
        self._value = 0
        self._lock = threading.Lock()

    @property
    def threshold(self) -> int:
        return self._threshold

    def increment(self) -> int:
        """Add one and return the new value."""
        with self._lock:
            self._value += 1
            value = self._value
        if value == self._threshold + 1:
            logger.warning("Active requests crossed overload threshold (%d > %d)", value, self._threshold)
        return value

    def decrement(self) -> int:
        """Subtract one and return the new value.

        Must follow an earlier ``increment`` from the same logical request.
        """
        with self._lock:
            self._value -= 1
            value = self._value
        if value == self._threshold:
            logger.info("Active requests back at threshold (%d), overload cleared", value)
        return value

    def read(self) -> int:
        """Current value (racy snapshot)."""
        return self._value

    def overloaded(self) -> bool:
        """True iff the current value strictly exceeds the threshold."""
        return self.read() > self._threshold

    @contextmanager
    def track(self) -> Iterator[int]:
        """Count the enclosed block as one in-flight request.

        Yields the value returned by ``increment``. The matching decrement
        runs on every exit path, including exceptions.
        """
        value = self.increment()
        try:
            yield value
        finally:
            self.decrement()

    @asynccontextmanager
    async def atrack(self) -> AsyncIterator[int]:
        """Async variant of ``track()`` for coroutine handlers."""
        value = self.increment()
        try:
            yield value
        finally:
            self.decrement()

    def __repr__(self) -> str:
        return f"<ConcurrencyGauge value={self._value} threshold={self._threshold}>"


# Process-wide gauge, zero at import time and exported as a metric.
active_requests = ConcurrencyGauge()
bind_active_requests(active_requests)


def increment_active_requests() -> int:
    return active_requests.increment()


def decrement_active_requests() -> int:
    return active_requests.decrement()


def get_active_requests() -> int:
    return active_requests.read()


def should_activate_overload() -> bool:
    """Overload predicate of the process-wide gauge."""
    return active_requests.overloaded()
