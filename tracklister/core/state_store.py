"""Pending OAuth ``state`` values: issued on redirect, consumed once on callback."""
import secrets
import threading
from collections import OrderedDict
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional


class StateStore:
    """Thread-safe in-memory map of state -> expiry.

    A state is valid for ``ttl`` after issue and only for one callback. The map
    is bounded by ``max_pending``; the oldest entries are dropped first.
    """

    def __init__(
        self,
        ttl: timedelta = timedelta(minutes=10),
        max_pending: int = 1024,
        now_fn: Optional[Callable[[], datetime]] = None,
    ) -> None:
        if ttl <= timedelta(0):
            raise ValueError("state TTL must be positive")
        self._ttl = ttl
        self._max_pending = max(1, max_pending)
        self._now = now_fn or (lambda: datetime.now(timezone.utc))
        self._pending: "OrderedDict[str, datetime]" = OrderedDict()
        self._lock = threading.Lock()

    def issue(self) -> str:
        """Create and remember a fresh unguessable state."""
        state = secrets.token_urlsafe(24)
        now = self._now()
        with self._lock:
            self._purge_expired(now)
            self._pending[state] = now + self._ttl
            while len(self._pending) > self._max_pending:
                self._pending.popitem(last=False)
        return state

    def consume(self, state: Optional[str]) -> bool:
        """True iff ``state`` was pending and unexpired; it is forgotten either way."""
        if not state:
            return False
        with self._lock:
            expires_at = self._pending.pop(state, None)
        if expires_at is None:
            return False
        return self._now() < expires_at

    def count(self) -> int:
        with self._lock:
            return len(self._pending)

    def _purge_expired(self, now: datetime) -> None:
        expired = [s for s, expires_at in self._pending.items() if expires_at <= now]
        for s in expired:
            del self._pending[s]
