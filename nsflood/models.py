"""
Data models for nsflood.

Defines structured types for run configuration, per-request outcomes,
counter snapshots and the reports produced by a run.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .errors import ConfigurationError


class RecordType(Enum):
    """DNS record types to query."""
    A = "A"
    AAAA = "AAAA"
    CNAME = "CNAME"
    MX = "MX"
    TXT = "TXT"
    NS = "NS"


class RunState(Enum):
    """Lifecycle of a single load run."""
    CONFIGURING = "configuring"
    RUNNING = "running"
    DRAINING = "draining"
    REPORTED = "reported"
    TERMINATED = "terminated"


def default_workers() -> int:
    """Number of workers to use when none is given: the host CPU count."""
    return os.cpu_count() or 1


@dataclass(frozen=True)
class RunConfig:
    """Configuration for one load run. Shared read-only by all workers."""
    nameserver: str
    host: str
    duration: float = 60.0
    workers: int = field(default_factory=default_workers)
    timeout: float = 0.5
    port: int = 53
    record_type: RecordType = RecordType.A

    def validate(self) -> "RunConfig":
        """
        Check the configuration before any load is generated.

        Returns:
            The same config, so calls can be chained

        Raises:
            ConfigurationError: if any field is out of range
        """
        if self.workers < 1:
            raise ConfigurationError(f"worker count must be at least 1, got {self.workers}")
        if self.duration <= 0:
            raise ConfigurationError(f"duration must be positive, got {self.duration}")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")
        if not self.host:
            raise ConfigurationError("host name must not be empty")
        if not self.nameserver:
            raise ConfigurationError("nameserver must not be empty")
        if not 0 < self.port < 65536:
            raise ConfigurationError(f"port must be in 1..65535, got {self.port}")
        return self

    @property
    def timeout_ns(self) -> int:
        """Timeout in nanoseconds."""
        return int(self.timeout * 1_000_000_000)


@dataclass(frozen=True)
class RequestOutcome:
    """Result of one resolution attempt."""
    latency_ns: int
    success: bool


@dataclass(frozen=True)
class CounterSnapshot:
    """Point-in-time copy of the shared counters."""
    successes: int = 0
    failures: int = 0
    latency_total_ns: int = 0  # sum over successful requests
    last_latency_ns: int = 0

    @property
    def total(self) -> int:
        return self.successes + self.failures

    def __sub__(self, other: "CounterSnapshot") -> "CounterSnapshot":
        return CounterSnapshot(
            successes=self.successes - other.successes,
            failures=self.failures - other.failures,
            latency_total_ns=self.latency_total_ns - other.latency_total_ns,
            last_latency_ns=self.last_latency_ns,
        )


@dataclass(frozen=True)
class IntervalSnapshot:
    """Counters gained between two consecutive reads by the coordinator."""
    index: int
    elapsed: float
    successes: int
    failures: int
    total: int  # cumulative requests at the time of the read
    latency_ns: Optional[int]  # None when no request completed
    drain: bool = False

    @property
    def requests(self) -> int:
        """Requests completed within this interval."""
        return self.successes + self.failures


@dataclass
class FinalReport:
    """End-of-run aggregate statistics."""
    nameserver: str
    host: str
    workers: int
    successes: int
    failures: int
    runtime: float

    # Interval breakdown
    intervals: int = 0
    mean_interval_requests: float = 0.0
    peak_interval_requests: int = 0
    min_interval_requests: int = 0
    stddev_interval_requests: float = 0.0
    mean_latency_ns: Optional[int] = None

    @property
    def total(self) -> int:
        return self.successes + self.failures

    @property
    def success_rate(self) -> float:
        """Percentage of successful requests."""
        if self.total == 0:
            return 0.0
        return (self.successes / self.total) * 100

    @property
    def requests_per_second(self) -> int:
        """Throughput over the true runtime, drain included."""
        if self.runtime <= 0:
            return 0
        return int(self.total / self.runtime)


@dataclass
class RunResult:
    """A final report together with the intervals that produced it."""
    config: RunConfig
    report: FinalReport
    intervals: list[IntervalSnapshot] = field(default_factory=list)
