import pytest

from nsflood.errors import SetupFailure
from nsflood.models import RecordType, RunConfig
from nsflood.runner import LoadRunner
from nsflood.transports import UDPResolver


def test_prepare_rejects_malformed_address():
    with pytest.raises(SetupFailure):
        UDPResolver().prepare("not-an-address", "example.com")


def test_prepare_rejects_malformed_name():
    with pytest.raises(SetupFailure):
        UDPResolver().prepare("127.0.0.1", "a" * 70 + ".com")


def test_prepare_accepts_ipv6():
    UDPResolver().prepare("::1", "example.com")


def test_resolve_against_local_server(dns_server):
    address, port = dns_server
    resolver = UDPResolver(port=port, record_type=RecordType.AAAA)
    assert resolver.resolve(address, "example.com", timeout=1.0)


def test_resolve_times_out_as_failure():
    # TEST-NET-1 is never routed, so nothing answers
    assert not UDPResolver().resolve("192.0.2.1", "example.com", timeout=0.05)


def test_unreachable_nameserver_run():
    config = RunConfig(nameserver="192.0.2.1", host="example.com", duration=1, workers=2, timeout=0.05)
    result = LoadRunner(config, UDPResolver(), interval=0.25).run()

    assert result.report.successes == 0
    assert result.report.failures > 0
    assert result.report.success_rate == 0.0


def test_load_run_against_local_server(dns_server):
    address, port = dns_server
    config = RunConfig(nameserver=address, host="example.com", duration=0.5, workers=2, timeout=1.0, port=port)
    result = LoadRunner(config, UDPResolver(port=port), interval=0.1).run()

    assert result.report.successes > 0
    assert result.report.failures == 0


def test_nodata_reply_is_a_failure(nodata_server):
    address, port = nodata_server
    assert not UDPResolver(port=port).resolve(address, "example.com", timeout=1.0)


def test_load_run_against_nodata_server(nodata_server):
    address, port = nodata_server
    config = RunConfig(nameserver=address, host="example.com", duration=0.3, workers=1, timeout=1.0, port=port)
    result = LoadRunner(config, UDPResolver(port=port), interval=0.1).run()

    assert result.report.successes == 0
    assert result.report.failures > 0
