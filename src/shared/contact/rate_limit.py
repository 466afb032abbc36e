"""In-memory sliding-window rate limiting for contact submissions."""

import time
from collections import deque
from threading import Lock
from typing import Deque, Dict, Optional

RATE_LIMIT_WINDOW_MS = 10 * 60 * 1000  # 10 minutes
RATE_LIMIT_MAX_REQUESTS = 10  # per window per client identifier


def now_ms() -> int:
    return int(time.time() * 1000)


class SlidingWindowRateLimiter:
    """
    Counts requests per client identifier over a trailing window.

    State lives only in this process and is lost on restart. A single lock
    guards the whole mapping so concurrent requests from the same client
    cannot lose updates.
    """

    def __init__(self, window_ms: int = RATE_LIMIT_WINDOW_MS, max_requests: int = RATE_LIMIT_MAX_REQUESTS):
        self.window_ms = window_ms
        self.max_requests = max_requests
        self._store: Dict[str, Deque[int]] = {}
        self._lock = Lock()
        self._last_sweep_ms: Optional[int] = None

    def _prune(self, request_times: Deque[int], now: int) -> None:
        while request_times and now - request_times[0] >= self.window_ms:
            request_times.popleft()

    def check_and_record(self, identifier: str, now: Optional[int] = None) -> int:
        """
        Drops expired timestamps, records this request and returns the in-window count.

        The request is recorded even when it pushes the count over the limit,
        so a flooding client keeps consuming window slots while rejected.
        """
        if now is None:
            now = now_ms()
        with self._lock:
            self._maybe_sweep(now)
            request_times = self._store.setdefault(identifier, deque())
            self._prune(request_times, now)
            request_times.append(now)
            return len(request_times)

    def is_over_limit(self, count: int) -> bool:
        return count > self.max_requests

    def retry_after_seconds(self, identifier: str, now: Optional[int] = None) -> int:
        """Seconds until the oldest in-window request for identifier expires (at least 1)."""
        if now is None:
            now = now_ms()
        with self._lock:
            request_times = self._store.get(identifier)
            if request_times:
                self._prune(request_times, now)
            if not request_times:
                return 1
            remaining_ms = request_times[0] + self.window_ms - now
        return max(-(-remaining_ms // 1000), 1)

    def count(self, identifier: str, now: Optional[int] = None) -> int:
        """In-window request count for identifier, without recording anything."""
        if now is None:
            now = now_ms()
        with self._lock:
            request_times = self._store.get(identifier)
            if not request_times:
                return 0
            return sum(1 for ts in request_times if now - ts < self.window_ms)

    def _maybe_sweep(self, now: int) -> None:
        # Caller holds the lock; sweep at most once per window length
        if self._last_sweep_ms is not None and now - self._last_sweep_ms < self.window_ms:
            return
        self._last_sweep_ms = now
        self._sweep_locked(now)

    def _sweep_locked(self, now: int) -> int:
        stale = []
        for identifier, request_times in self._store.items():
            self._prune(request_times, now)
            if not request_times:
                stale.append(identifier)
        for identifier in stale:
            del self._store[identifier]
        return len(stale)

    def sweep(self, now: Optional[int] = None) -> int:
        """Removes identifiers with no requests in the window. Returns how many were removed."""
        if now is None:
            now = now_ms()
        with self._lock:
            self._last_sweep_ms = now
            return self._sweep_locked(now)

    def tracked_identifiers(self) -> int:
        with self._lock:
            return len(self._store)

    def reset(self) -> None:
        with self._lock:
            self._store.clear()
            self._last_sweep_ms = None
