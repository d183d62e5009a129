"""
nsflood - Nameserver load generation and benchmarking tool.

Floods a nameserver with queries from many concurrent workers and reports
per-second and final throughput and success rate.
"""

__version__ = "1.0.0"

from .counters import SharedCounters
from .errors import ConfigurationError, SetupFailure, WorkerPanic
from .models import FinalReport, RunConfig, RunResult
from .runner import LoadRunner
from .transports import BaseResolver, UDPResolver

__all__ = [
    "__version__",
    "BaseResolver",
    "ConfigurationError",
    "FinalReport",
    "LoadRunner",
    "RunConfig",
    "RunResult",
    "SetupFailure",
    "SharedCounters",
    "UDPResolver",
    "WorkerPanic",
]
