"""
Command-line interface for nsflood.

Floods one nameserver with queries for one host name and reports
throughput and success rate once per second and at the end of the run.
"""

import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .errors import NsfloodError
from .models import RecordType, RunConfig, default_workers
from .output import ConsoleOutput, JSONOutput, RichConsoleOutput
from .resolvers import list_presets, parse_nameserver
from .runner import LoadRunner
from .transports import UDPResolver


def setup_logging(verbose: bool) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def print_presets(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    for name, address in list_presets():
        click.echo(f"  {name:24} {address}")
    ctx.exit()


def nameserver_argument(ctx: click.Context, param: click.Parameter, value: str) -> str:
    try:
        return parse_nameserver(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from None


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__)
@click.argument("nameserver", callback=nameserver_argument)
@click.argument("host")
@click.option(
    "--time-secs", "-t",
    type=int,
    default=60,
    show_default=True,
    help="Time in seconds to run the test",
)
@click.option(
    "--cpus", "-l",
    type=int,
    default=None,
    help="Number of workers (default: host CPU count)",
)
@click.option(
    "--timeout",
    type=int,
    default=500_000_000,
    show_default=True,
    help="Duration to wait (in ns) before considering a request failed",
)
@click.option(
    "--port", "-p",
    type=int,
    default=53,
    show_default=True,
    help="Nameserver port",
)
@click.option(
    "--record-type", "-r",
    type=click.Choice([r.value for r in RecordType], case_sensitive=False),
    default=RecordType.A.value,
    show_default=True,
    help="Record type to query",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Output the final report as JSON to stdout",
)
@click.option(
    "--pretty",
    is_flag=True,
    help="Render the final report as a table",
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    help="Suppress the per-second lines",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Log worker and run lifecycle events",
)
@click.option(
    "--list-presets",
    is_flag=True,
    is_eager=True,
    expose_value=False,
    callback=print_presets,
    help="List nameserver presets and exit",
)
def main(
    nameserver: str,
    host: str,
    time_secs: int,
    cpus: Optional[int],
    timeout: int,
    port: int,
    record_type: str,
    as_json: bool,
    pretty: bool,
    quiet: bool,
    verbose: bool,
):
    """
    Nameserver benchmarking/flooding tool.

    Sends queries for HOST to NAMESERVER from every worker as fast as the
    server answers, for the given time.

    Examples:

    \b
      # One minute against a local resolver on all CPUs
      nsflood 127.0.0.1 example.com

    \b
      # Ten seconds, four workers, 50ms timeout
      nsflood -t 10 -l 4 --timeout 50000000 cloudflare example.com
    """
    setup_logging(verbose)

    config = RunConfig(
        nameserver=nameserver,
        host=host,
        duration=time_secs,
        workers=default_workers() if cpus is None else cpus,
        timeout=timeout / 1_000_000_000,
        port=port,
        record_type=RecordType(record_type.upper()),
    )

    runner = LoadRunner(
        config,
        UDPResolver(port=config.port, record_type=config.record_type),
        on_interval=None if quiet else ConsoleOutput.print_interval,
    )

    try:
        result = runner.run()
    except NsfloodError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("Interrupted", err=True)
        sys.exit(130)

    if as_json:
        JSONOutput.print(result)
    elif pretty:
        RichConsoleOutput.print(result)
    else:
        ConsoleOutput.print(result)


if __name__ == "__main__":
    main()
