"""
Load run coordinator.

Owns the timing of a run:
- Starts one worker thread per configured worker
- Reads the shared counters once per interval and reports the delta
- Stops and drains the workers at the deadline
- Builds the final report
"""

import logging
import threading
import time
from typing import Callable, Optional

from .counters import SharedCounters
from .errors import WorkerPanic
from .models import (
    CounterSnapshot,
    IntervalSnapshot,
    RunConfig,
    RunResult,
    RunState,
)
from .statistics import StatisticsEngine
from .transports import BaseResolver
from .worker import Worker

logger = logging.getLogger(__name__)


# Types for reporting callbacks
IntervalCallback = Callable[[IntervalSnapshot], None]
ReportCallback = Callable[[RunResult], None]

# Extra time a worker gets beyond its request timeout to notice the stop event
DRAIN_GRACE = 1.0

_STATE_ORDER = list(RunState)


class LoadRunner:
    """
    Orchestrates a single load run.

    A runner is one-shot: it moves through CONFIGURING, RUNNING, DRAINING,
    REPORTED and TERMINATED exactly once.
    """

    def __init__(
        self,
        config: RunConfig,
        resolver: BaseResolver,
        interval: float = 1.0,
        on_interval: Optional[IntervalCallback] = None,
        on_report: Optional[ReportCallback] = None,
    ):
        """
        Initialize the runner.

        Args:
            config: Run configuration, validated when the run starts
            resolver: Resolver shared by all workers
            interval: Seconds between two counter reads
            on_interval: Called with every interval snapshot
            on_report: Called once with the finished run
        """
        self.config = config
        self.resolver = resolver
        self.interval = interval
        self.on_interval = on_interval
        self.on_report = on_report

        self.state = RunState.CONFIGURING
        self.counters = SharedCounters()
        self.workers: list[Worker] = []
        self._stop = threading.Event()
        self._abort = threading.Event()

    def _transition(self, state: RunState) -> None:
        if _STATE_ORDER.index(state) <= _STATE_ORDER.index(self.state):
            raise RuntimeError(f"cannot go from {self.state.value} to {state.value}")
        logger.debug("Run state: %s -> %s", self.state.value, state.value)
        self.state = state

    def run(self) -> RunResult:
        """
        Execute the run and return its result.

        Raises:
            ConfigurationError: invalid config, no worker was started
            SetupFailure: the resolver rejected the target, no worker was started
            WorkerPanic: a worker died or failed to stop; no report is built
        """
        if self.state is not RunState.CONFIGURING:
            raise RuntimeError("a LoadRunner can only run once")

        try:
            config = self.config.validate()
            self.resolver.prepare(config.nameserver, config.host)
        except Exception:
            self._transition(RunState.TERMINATED)
            raise

        self.workers = [
            Worker(config, self.resolver, self.counters, self._stop, self._abort, index=i)
            for i in range(config.workers)
        ]

        self._transition(RunState.RUNNING)
        logger.debug(
            "Starting %d workers against %s for %s (%.1fs)",
            config.workers, config.nameserver, config.host, config.duration,
        )

        intervals: list[IntervalSnapshot] = []
        start = time.monotonic()
        try:
            for worker in self.workers:
                worker.start()
            previous = self._report_loop(start, intervals)
        except BaseException:
            self._drain()
            self._transition(RunState.TERMINATED)
            raise

        self._drain()
        try:
            self._check_workers()
        except WorkerPanic:
            self._transition(RunState.TERMINATED)
            raise

        final = self.counters.snapshot()
        runtime = time.monotonic() - start

        # Requests that finished while draining still belong to the run
        if final.total > previous.total:
            drain = StatisticsEngine.calculate_interval(
                len(intervals) + 1, runtime, final, previous, drain=True
            )
            intervals.append(drain)
            self._emit(drain)

        report = StatisticsEngine.calculate_final_report(config, final, runtime, intervals)
        result = RunResult(config=config, report=report, intervals=intervals)

        if self.on_report:
            self.on_report(result)
        self._transition(RunState.REPORTED)
        self._transition(RunState.TERMINATED)
        return result

    def _report_loop(
        self,
        start: float,
        intervals: list[IntervalSnapshot],
    ) -> CounterSnapshot:
        """Sample the counters every interval until the deadline passes."""
        previous = CounterSnapshot()
        duration = self.config.duration

        while True:
            remaining = duration - (time.monotonic() - start)
            if remaining <= 0:
                break

            # Wakes up early if a worker dies
            if self._abort.wait(min(self.interval, remaining)):
                logger.debug("Worker failure, ending run early")
                break

            current = self.counters.snapshot()
            snapshot = StatisticsEngine.calculate_interval(
                len(intervals) + 1,
                time.monotonic() - start,
                current,
                previous,
            )
            intervals.append(snapshot)
            self._emit(snapshot)
            previous = current

        return previous

    def _emit(self, snapshot: IntervalSnapshot) -> None:
        if self.on_interval:
            self.on_interval(snapshot)

    def _drain(self) -> None:
        """Signal every worker to stop and wait for the started ones to exit."""
        self._transition(RunState.DRAINING)
        self._stop.set()

        deadline = time.monotonic() + self.config.timeout + DRAIN_GRACE
        for worker in self.workers:
            if worker.ident is None:
                continue
            worker.join(max(0.0, deadline - time.monotonic()))

        logger.debug("Drained %d workers", len(self.workers))

    def _check_workers(self) -> None:
        """Raise for the first worker that died or did not stop."""
        for worker in self.workers:
            if worker.error is not None:
                raise WorkerPanic(worker.name, worker.error)
            if worker.is_alive():
                raise WorkerPanic(
                    worker.name,
                    TimeoutError(
                        f"still busy {self.config.timeout + DRAIN_GRACE:.1f}s after stop"
                    ),
                )
            if not worker.finished:
                raise WorkerPanic(
                    worker.name,
                    RuntimeError("exited before the stop signal"),
                )
