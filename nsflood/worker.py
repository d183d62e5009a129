"""
Load-generating worker.

Each worker drives one serial stream of queries against the resolver as
fast as it answers, until the coordinator sets the stop event.
"""

import logging
import threading
import time
from typing import Optional

from .counters import SharedCounters
from .errors import RequestFailure
from .models import RequestOutcome, RunConfig
from .transports import BaseResolver

logger = logging.getLogger(__name__)


class Worker(threading.Thread):
    """
    One unthrottled query loop on its own thread.

    Workers only talk to each other through the shared counters. The stop
    event is checked between requests; a request already in flight always
    runs to completion or to its timeout first.
    """

    def __init__(
        self,
        config: RunConfig,
        resolver: BaseResolver,
        counters: SharedCounters,
        stop_event: threading.Event,
        abort_event: Optional[threading.Event] = None,
        index: int = 0,
    ):
        super().__init__(name=f"worker-{index}", daemon=True)
        self.config = config
        self.resolver = resolver
        self.counters = counters
        self.stop_event = stop_event
        self.abort_event = abort_event
        self.attempts = 0
        self.error: Optional[BaseException] = None
        self.finished = False  # set only when the loop saw the stop event

    def attempt(self) -> RequestOutcome:
        """
        Perform one timed resolution attempt.

        An answer that arrives after the configured timeout is a failure,
        as is a RequestFailure raised by the resolver. Any other exception
        propagates.
        """
        config = self.config
        start = time.perf_counter_ns()
        try:
            success = bool(self.resolver.resolve(config.nameserver, config.host, config.timeout))
        except RequestFailure:
            success = False
        latency_ns = time.perf_counter_ns() - start

        if latency_ns > config.timeout_ns:
            success = False

        return RequestOutcome(latency_ns=latency_ns, success=success)

    def run(self) -> None:
        logger.debug("%s started", self.name)
        try:
            while not self.stop_event.is_set():
                outcome = self.attempt()
                self.counters.record(outcome)
                self.attempts += 1
            self.finished = True
        except Exception as e:
            self.error = e
            logger.error("%s terminated abnormally: %r", self.name, e, exc_info=True)
        finally:
            if not self.finished:
                # Bring the rest of the run down with it
                self.stop_event.set()
                if self.abort_event is not None:
                    self.abort_event.set()
        logger.debug("%s stopped after %d requests", self.name, self.attempts)
