"""
Thread-safe request counters shared by all workers.

Every mutation holds the lock for a couple of integer additions only,
so workers never wait on each other for longer than that, and the
coordinator can read a consistent snapshot at any time.
"""

import threading
from typing import Optional

from .models import CounterSnapshot, RequestOutcome


class SharedCounters:
    """Success/failure accumulator for one run. Counts only ever grow."""

    def __init__(self):
        self._lock = threading.Lock()
        self._successes = 0
        self._failures = 0
        self._latency_total_ns = 0
        self._last_latency_ns = 0

    def increment_success(self, latency_ns: Optional[int] = None) -> None:
        """Count one successful request, optionally with its latency."""
        with self._lock:
            self._successes += 1
            if latency_ns is not None:
                self._latency_total_ns += latency_ns
                self._last_latency_ns = latency_ns

    def increment_failure(self, latency_ns: Optional[int] = None) -> None:
        """
        Count one failed request.

        Its latency becomes the latest sample but stays out of the
        success latency total.
        """
        with self._lock:
            self._failures += 1
            if latency_ns is not None:
                self._last_latency_ns = latency_ns

    def record(self, outcome: RequestOutcome) -> None:
        """Fold one request outcome into the counters."""
        if outcome.success:
            self.increment_success(outcome.latency_ns)
        else:
            self.increment_failure(outcome.latency_ns)

    def snapshot(self) -> CounterSnapshot:
        """Return a consistent point-in-time copy of all counters."""
        with self._lock:
            return CounterSnapshot(
                successes=self._successes,
                failures=self._failures,
                latency_total_ns=self._latency_total_ns,
                last_latency_ns=self._last_latency_ns,
            )
