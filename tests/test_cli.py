import json

import pytest
from click.testing import CliRunner

from conftest import StubResolver
from nsflood import __version__, cli


@pytest.fixture
def resolvers(monkeypatch):
    """Replace the UDP resolver with a stub and remember what was built."""
    built = []

    def factory(success=True, **kwargs):
        resolver = StubResolver(success=success, delay=0.001)
        resolver.options = kwargs
        built.append(resolver)
        return resolver

    monkeypatch.setattr(cli, "UDPResolver", factory)
    return built


def invoke(*args):
    return CliRunner().invoke(cli.main, list(args))


def test_version():
    result = invoke("--version")
    assert result.exit_code == 0
    assert __version__ in result.output


def test_list_presets():
    result = invoke("--list-presets")
    assert result.exit_code == 0
    assert "cloudflare" in result.output
    assert "1.1.1.1" in result.output


def test_run_prints_intervals_and_report(resolvers):
    result = invoke("-t", "1", "-l", "2", "--timeout", "100000000", "127.0.0.1", "example.com")

    assert result.exit_code == 0, result.output
    assert "1s latency:" in result.output
    assert "Nameserver: 127.0.0.1" in result.output
    assert "Host: example.com" in result.output
    assert "CPUs Used: 2" in result.output
    assert "Failures: 0" in result.output
    assert "Success Rate: 100.00%" in result.output
    assert resolvers[0].options == {"port": 53, "record_type": cli.RecordType.A}


def test_preset_and_options(resolvers):
    result = invoke("-t", "1", "-l", "1", "-q", "-p", "5353", "-r", "aaaa", "--json", "google", "example.com")

    assert result.exit_code == 0, result.output
    assert "1s latency:" not in result.output
    data = json.loads(result.output)
    assert data["config"]["nameserver"] == "8.8.8.8"
    assert data["config"]["port"] == 5353
    assert data["config"]["record_type"] == "AAAA"
    assert resolvers[0].options["record_type"] is cli.RecordType.AAAA


def test_bad_nameserver_is_usage_error(resolvers):
    result = invoke("-t", "1", "not-a-server", "example.com")
    assert result.exit_code == 2
    assert resolvers == []


@pytest.mark.parametrize(
    "args",
    [
        ("-l", "0"),
        ("-t", "0"),
        ("--timeout", "0"),
    ],
)
def test_invalid_config_exits_non_zero(resolvers, args):
    result = invoke(*args, "127.0.0.1", "example.com")
    assert result.exit_code == 1
    assert "Error:" in result.output
    assert resolvers[0].calls == 0


def test_setup_failure_exits_non_zero():
    result = invoke("-t", "1", "-l", "1", "127.0.0.1", "bad..name")
    assert result.exit_code == 1
    assert "Error:" in result.output
