"""Shared fixtures and stub resolvers for the nsflood tests."""

import contextlib
import socket
import threading
import time

import dns.message
import dns.rcode
import dns.rdatatype
import dns.rrset
import pytest

from nsflood.errors import RequestFailure, SetupFailure
from nsflood.transports import BaseResolver


class StubResolver(BaseResolver):
    """Answers every query with a fixed result after a fixed delay."""

    def __init__(self, success: bool = True, delay: float = 0.001):
        self.success = success
        self.delay = delay
        self.calls = 0
        self.prepared = False
        self._lock = threading.Lock()

    def prepare(self, nameserver, host):
        self.prepared = True

    def resolve(self, nameserver, host, timeout):
        with self._lock:
            self.calls += 1
        if self.delay:
            time.sleep(self.delay)
        return self.success


class AlternatingResolver(StubResolver):
    """Each thread alternates success, failure, success, ..."""

    def __init__(self, delay: float = 0.001):
        super().__init__(delay=delay)
        self._local = threading.local()

    def resolve(self, nameserver, host, timeout):
        super().resolve(nameserver, host, timeout)
        n = getattr(self._local, "n", 0)
        self._local.n = n + 1
        return n % 2 == 0


class RaisingResolver(StubResolver):
    """Raises the given exception after `after` successful calls."""

    def __init__(self, exc: BaseException, after: int = 0, delay: float = 0.001):
        super().__init__(delay=delay)
        self.exc = exc
        self.after = after

    def resolve(self, nameserver, host, timeout):
        super().resolve(nameserver, host, timeout)
        if self.calls > self.after:
            raise self.exc
        return True


class RejectingResolver(StubResolver):
    """Fails setup before any query is sent."""

    def prepare(self, nameserver, host):
        raise SetupFailure(f"cannot reach {nameserver}")


@pytest.fixture
def request_failure():
    return RequestFailure("no answer")


# Loopback answers for the record types the tests query
ANSWERS = {
    dns.rdatatype.A: "127.0.0.1",
    dns.rdatatype.AAAA: "::1",
}


@contextlib.contextmanager
def serve_udp(with_answers: bool):
    """
    Run a tiny UDP nameserver on localhost answering NOERROR to everything.

    With `with_answers` false every reply is NODATA: NOERROR and an empty
    answer section. Yields (address, port).
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(0.1)
    stop = threading.Event()

    def serve():
        while not stop.is_set():
            try:
                data, addr = sock.recvfrom(4096)
            except socket.timeout:
                continue
            except OSError:
                break
            query = dns.message.from_wire(data)
            response = dns.message.make_response(query)
            response.set_rcode(dns.rcode.NOERROR)
            question = query.question[0]
            if with_answers and question.rdtype in ANSWERS:
                response.answer.append(
                    dns.rrset.from_text(
                        question.name, 60, "IN", question.rdtype, ANSWERS[question.rdtype]
                    )
                )
            sock.sendto(response.to_wire(), addr)

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    try:
        yield sock.getsockname()
    finally:
        stop.set()
        thread.join(1)
        sock.close()


@pytest.fixture
def dns_server():
    with serve_udp(with_answers=True) as address:
        yield address


@pytest.fixture
def nodata_server():
    with serve_udp(with_answers=False) as address:
        yield address
