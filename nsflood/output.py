"""
Output formatting for load runs.

Provides multiple output formats:
- Plain text: one line per interval and the final report
- JSON: Machine-readable final report with all intervals
- Rich: terminal table of the final report
"""

import json
from typing import Optional, TextIO

import click
from rich import box
from rich.console import Console
from rich.table import Table

from .models import FinalReport, IntervalSnapshot, RunResult


def format_duration(ns: Optional[int]) -> str:
    """
    Render a nanosecond duration in the largest unit that fits.

    Examples: 850ns, 12.5µs, 1.234ms, 2.004s
    """
    if ns is None:
        return "n/a"
    if ns < 1_000:
        return f"{ns}ns"
    # Round before picking the unit: 999.9996ms prints as 1s
    for unit, scale in (("µs", 1_000), ("ms", 1_000_000), ("s", 1_000_000_000)):
        value = round(ns / scale, 3)
        if value < 1_000 or unit == "s":
            break
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return f"{text}{unit}"


def seconds_to_ns(seconds: float) -> int:
    return int(round(seconds * 1_000_000_000))


class ConsoleOutput:
    """Plain text output formatter."""

    @staticmethod
    def format_interval(snapshot: IntervalSnapshot) -> str:
        """Format one periodic report line."""
        return (
            f"1s latency: {format_duration(snapshot.latency_ns)} | "
            f"Successes: {snapshot.successes} | "
            f"Failures: {snapshot.failures} | "
            f"Total Req: {snapshot.total}"
        )

    @staticmethod
    def print_interval(snapshot: IntervalSnapshot) -> None:
        """Print one periodic report line to stderr."""
        click.echo(ConsoleOutput.format_interval(snapshot), err=True)

    @staticmethod
    def format(report: FinalReport) -> str:
        """
        Format the final report.

        Args:
            report: FinalReport to format

        Returns:
            Multi-line report text
        """
        lines = [
            f"Nameserver: {report.nameserver}",
            f"Host: {report.host}",
            f"CPUs Used: {report.workers}",
            f"Successes: {report.successes}",
            f"Failures: {report.failures}",
            f"Success Rate: {report.success_rate:.2f}%",
            f"Runtime: {format_duration(seconds_to_ns(report.runtime))}",
            f"Requests: {report.requests_per_second}/s",
        ]
        return "\n".join(lines)

    @staticmethod
    def print(result: RunResult, file: Optional[TextIO] = None) -> None:
        """Print the final report to stdout."""
        click.echo(ConsoleOutput.format(result.report), file=file)


class JSONOutput:
    """JSON output formatter."""

    @staticmethod
    def format(result: RunResult, indent: int = 2) -> str:
        """
        Format a finished run as JSON.

        Args:
            result: RunResult to format
            indent: JSON indentation level

        Returns:
            JSON string
        """
        report = result.report
        config = result.config
        data = {
            "config": {
                "nameserver": config.nameserver,
                "host": config.host,
                "port": config.port,
                "record_type": config.record_type.value,
                "duration_seconds": config.duration,
                "workers": config.workers,
                "timeout_seconds": config.timeout,
            },
            "totals": {
                "successes": report.successes,
                "failures": report.failures,
                "requests": report.total,
                "success_rate_pct": round(report.success_rate, 2),
                "runtime_seconds": round(report.runtime, 6),
                "requests_per_second": report.requests_per_second,
            },
            "intervals_summary": {
                "count": report.intervals,
                "mean_requests": round(report.mean_interval_requests, 3),
                "peak_requests": report.peak_interval_requests,
                "min_requests": report.min_interval_requests,
                "stddev_requests": round(report.stddev_interval_requests, 3),
                "mean_latency_ns": report.mean_latency_ns,
            },
            "intervals": [
                {
                    "index": i.index,
                    "elapsed_seconds": round(i.elapsed, 6),
                    "successes": i.successes,
                    "failures": i.failures,
                    "total": i.total,
                    "latency_ns": i.latency_ns,
                    "drain": i.drain,
                }
                for i in result.intervals
            ],
        }

        return json.dumps(data, indent=indent)

    @staticmethod
    def print(result: RunResult) -> None:
        click.echo(JSONOutput.format(result))


class RichConsoleOutput:
    """Rich library console output with colors and tables."""

    @staticmethod
    def print(result: RunResult, console: Optional[Console] = None) -> None:
        """Print the final report as a rich table."""
        console = console or Console()
        report = result.report

        table = Table(
            title=f"{report.host} @ {report.nameserver}",
            box=box.ROUNDED,
            header_style="bold magenta",
            show_header=False,
        )
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")

        rate_style = "green" if report.success_rate >= 99 else "yellow" if report.success_rate >= 90 else "red"

        table.add_row("CPUs Used", str(report.workers))
        table.add_row("Successes", str(report.successes))
        table.add_row("Failures", str(report.failures))
        table.add_row("Success Rate", f"[{rate_style}]{report.success_rate:.2f}%[/{rate_style}]")
        table.add_row("Runtime", format_duration(seconds_to_ns(report.runtime)))
        table.add_row("Requests", f"{report.requests_per_second}/s")

        if report.intervals:
            table.add_section()
            table.add_row("Intervals", str(report.intervals))
            table.add_row("Mean req/interval", f"{report.mean_interval_requests:.1f}")
            table.add_row("Peak req/interval", str(report.peak_interval_requests))
            table.add_row("Min req/interval", str(report.min_interval_requests))
            table.add_row("Stddev", f"{report.stddev_interval_requests:.1f}")
            table.add_row("Mean latency", format_duration(report.mean_latency_ns))

        console.print()
        console.print(table)
        console.print()
