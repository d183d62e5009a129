"""
Exception types for nsflood.

Per-request failures are absorbed into the counters; everything else
propagates to the command line and ends the run with a non-zero status.
"""


class NsfloodError(Exception):
    """Base class for all nsflood errors."""


class ConfigurationError(NsfloodError):
    """Invalid run configuration, detected before any worker starts."""


class SetupFailure(NsfloodError):
    """The resolver could not be initialised for the target nameserver."""


class RequestFailure(NsfloodError):
    """A single resolution attempt failed. Counted, never propagated."""


class WorkerPanic(NsfloodError):
    """A worker terminated abnormally. Fatal to the whole run."""

    def __init__(self, worker: str, cause: BaseException):
        super().__init__(f"{worker} terminated abnormally: {cause!r}")
        self.worker = worker
        self.cause = cause
