"""
Statistics for load runs.

Turns raw counter snapshots into per-interval deltas and the final
aggregate report:
- Interval deltas: successes, failures and mean latency per tick
- Totals: success rate, runtime, throughput
- Interval spread: mean, peak, minimum and deviation of requests per tick
"""

from typing import Optional

import numpy as np

from .models import CounterSnapshot, FinalReport, IntervalSnapshot, RunConfig


class StatisticsEngine:
    """Calculates interval and final statistics from counter snapshots."""

    @staticmethod
    def interval_latency_ns(delta: CounterSnapshot) -> Optional[int]:
        """
        Latency to report for one interval.

        Mean latency of the requests that succeeded during the interval;
        when only failures completed, the most recent sample (a failed
        request's latency); None when nothing completed at all.
        """
        if delta.successes > 0:
            return delta.latency_total_ns // delta.successes
        if delta.total > 0:
            return delta.last_latency_ns
        return None

    @staticmethod
    def calculate_interval(
        index: int,
        elapsed: float,
        current: CounterSnapshot,
        previous: CounterSnapshot,
        drain: bool = False,
    ) -> IntervalSnapshot:
        """
        Build the delta between two consecutive counter reads.

        Args:
            index: Sequence number of the interval, starting at 1
            elapsed: Seconds since the run started
            current: Snapshot taken now
            previous: Snapshot taken at the end of the previous interval
            drain: Whether this interval covers the shutdown drain

        Returns:
            IntervalSnapshot with the counts gained since `previous`
        """
        delta = current - previous
        if delta.successes < 0 or delta.failures < 0:
            raise ValueError(
                f"counters went backwards: {previous} -> {current}"
            )

        return IntervalSnapshot(
            index=index,
            elapsed=elapsed,
            successes=delta.successes,
            failures=delta.failures,
            total=current.total,
            latency_ns=StatisticsEngine.interval_latency_ns(delta),
            drain=drain,
        )

    @staticmethod
    def calculate_final_report(
        config: RunConfig,
        final: CounterSnapshot,
        runtime: float,
        intervals: list[IntervalSnapshot],
    ) -> FinalReport:
        """
        Aggregate a finished run.

        Args:
            config: Configuration the run used
            final: Counter snapshot taken after every worker joined
            runtime: True elapsed wall time in seconds, drain included
            intervals: All interval snapshots of the run

        Returns:
            FinalReport with totals and interval spread
        """
        report = FinalReport(
            nameserver=config.nameserver,
            host=config.host,
            workers=config.workers,
            successes=final.successes,
            failures=final.failures,
            runtime=runtime,
        )

        # The drain tail is not a full tick, keep it out of the spread
        ticks = [i for i in intervals if not i.drain]
        if not ticks:
            return report

        counts = np.array([i.requests for i in ticks])
        report.intervals = len(ticks)
        report.mean_interval_requests = float(np.mean(counts))
        report.peak_interval_requests = int(np.max(counts))
        report.min_interval_requests = int(np.min(counts))
        report.stddev_interval_requests = float(np.std(counts))
        report.mean_latency_ns = StatisticsEngine._mean_latency(ticks)

        return report

    @staticmethod
    def _mean_latency(intervals: list[IntervalSnapshot]) -> Optional[int]:
        """Success-weighted mean of the interval latencies."""
        succeeded = [i for i in intervals if i.successes > 0]
        if not succeeded:
            return None
        weights = np.array([i.successes for i in succeeded], dtype=float)
        latencies = np.array([i.latency_ns for i in succeeded], dtype=float)
        return int(np.average(latencies, weights=weights))
