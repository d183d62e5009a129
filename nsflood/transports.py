"""
Resolver implementations used by the workers.

A resolver performs exactly one resolution attempt per call and returns
whether it succeeded. It must return within the given timeout: the
workers rely on it, since an in-flight call cannot be interrupted.
"""

import logging
from abc import ABC, abstractmethod

import dns.exception
import dns.inet
import dns.message
import dns.name
import dns.query
import dns.rcode
import dns.rdatatype

from .errors import SetupFailure
from .models import RecordType

logger = logging.getLogger(__name__)


class BaseResolver(ABC):
    """Base class for resolvers."""

    def prepare(self, nameserver: str, host: str) -> None:
        """
        Check that queries can be built for the target.

        Called once by the coordinator before any worker starts.

        Raises:
            SetupFailure: if the resolver cannot be used at all
        """

    @abstractmethod
    def resolve(self, nameserver: str, host: str, timeout: float) -> bool:
        """
        Perform one resolution attempt.

        Args:
            nameserver: Address of the nameserver to query
            host: Name to resolve
            timeout: Seconds to wait for an answer

        Returns:
            True on success, False on failure or timeout. Implementations
            may also raise RequestFailure, which counts as a failure.
        """
        pass


class UDPResolver(BaseResolver):
    """Plain DNS over UDP using dnspython."""

    def __init__(self, port: int = 53, record_type: RecordType = RecordType.A):
        self.port = port
        self.rdtype = dns.rdatatype.from_text(record_type.value)

    def prepare(self, nameserver: str, host: str) -> None:
        try:
            dns.inet.af_for_address(nameserver)
        except ValueError:
            raise SetupFailure(f"not a valid nameserver address: {nameserver!r}") from None

        try:
            dns.name.from_text(host)
        except dns.exception.DNSException as e:
            raise SetupFailure(f"not a valid query name: {host!r} ({e})") from e

        logger.debug(
            "Prepared UDP resolver for %s port %d (%s)",
            nameserver, self.port, dns.rdatatype.to_text(self.rdtype),
        )

    def resolve(self, nameserver: str, host: str, timeout: float) -> bool:
        # A fresh message per attempt gives every query its own id
        message = dns.message.make_query(host, self.rdtype)
        try:
            response = dns.query.udp(
                message,
                nameserver,
                timeout=timeout,
                port=self.port,
            )
        except (dns.exception.DNSException, OSError):
            return False
        # NOERROR without answer records (NODATA) is a failed lookup
        return response.rcode() == dns.rcode.NOERROR and bool(response.answer)
