"""Token bucket admission filter consulted once per inbound request."""
import threading
import time
from typing import Callable


class RateGate:
    """Process-wide token bucket: refills at ``rate`` units/sec, holds at most ``burst``.

    ``allow()`` never blocks; check-and-decrement happens under one lock so
    concurrent requests (threadpool or event loop) cannot double-spend a unit.
    """

    def __init__(
        self,
        rate: float = 2.0,
        burst: int = 4,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if rate <= 0:
            raise ValueError("rate must be positive")
        if burst < 1:
            raise ValueError("burst must be at least 1")
        self._rate = float(rate)
        self._burst = int(burst)
        self._clock = clock
        self._tokens = float(burst)
        self._last = clock()
        self._lock = threading.Lock()

    @property
    def rate(self) -> float:
        return self._rate

    @property
    def burst(self) -> int:
        return self._burst

    def _refill(self, now: float) -> None:
        elapsed = max(0.0, now - self._last)
        self._tokens = min(float(self._burst), self._tokens + elapsed * self._rate)
        self._last = now

    def allow(self) -> bool:
        """Take one unit if available. False means: reject with 429."""
        with self._lock:
            self._refill(self._clock())
            if self._tokens >= 1.0:
                self._tokens -= 1.0
                return True
            return False

    def available(self) -> float:
        """Units currently in the bucket (for diagnostics and tests)."""
        with self._lock:
            self._refill(self._clock())
            return self._tokens
