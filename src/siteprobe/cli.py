"""Command-line interface for SiteProbe."""

import asyncio
import json
import logging
from pathlib import Path
import sys

import click

from siteprobe import __version__
from siteprobe.core.errors import ScanError
from siteprobe.core.result import (
    Risk,
    ScanReport,
    ScanRequest,
    ScanStatus,
    ScanType,
    sort_by_risk,
)
from siteprobe.core.scanner import ScanConfig, Scanner
from siteprobe.scanners.headers import find_missing_header
from siteprobe.server import ServerConfig, run_server

# Same bounds as ScanConfig.
TIMEOUT_RANGE = click.FloatRange(min=0, max=120, min_open=True)

RISK_COLORS = {
    Risk.HIGH: "red",
    Risk.MEDIUM: "yellow",
    Risk.LOW: "green",
    Risk.NONE: "bright_black",
}


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """SiteProbe - single-page web security probe.

    Check a URL for missing security headers and insecure links, and
    optionally probe its query parameters for reflected XSS and SQL injection.
    """


@cli.command()
@click.argument("target", type=str)
@click.option(
    "--type",
    "-t",
    "scan_type",
    type=click.Choice([t.value for t in ScanType], case_sensitive=False),
    default=ScanType.QUICK.value,
    help="quick: passive checks only; full: also inject XSS/SQLi payloads",
    show_default=True,
)
@click.option(
    "--fetch-timeout",
    default=10.0,
    type=TIMEOUT_RANGE,
    help="Timeout in seconds for fetching the target page",
    show_default=True,
)
@click.option(
    "--probe-timeout",
    default=5.0,
    type=TIMEOUT_RANGE,
    help="Timeout in seconds for each XSS/SQLi probe request",
    show_default=True,
)
@click.option("--sort", is_flag=True, help="Order issues from high to low risk")
@click.option("--find", "find_header", help="Only report whether this security header is missing")
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Output file for scan results",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["json", "text"], case_sensitive=False),
    default="text",
    help="Output format",
    show_default=True,
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def scan(
    target: str,
    scan_type: str,
    fetch_timeout: float,
    probe_timeout: float,
    sort: bool,
    find_header: str | None,
    output: Path | None,
    format: str,
    verbose: bool,
) -> None:
    """Scan a target URL for security weaknesses.

    TARGET: The URL to scan (e.g., https://example.com/search?q=1)
    """
    setup_logging(verbose)

    config = ScanConfig(fetch_timeout=fetch_timeout, probe_timeout=probe_timeout)
    request = ScanRequest(url=target, scan_type=ScanType(scan_type.lower()))

    try:
        report = asyncio.run(run_scan(config, request))
    except ScanError as e:
        click.echo(f"Error: Failed to scan the URL. {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nScan interrupted by user", err=True)
        sys.exit(130)

    if find_header:
        found = find_missing_header(report.issues, find_header)
        if found:
            click.echo(f"Found: {find_header} is {found.risk.value} risk")
        else:
            click.echo("Header not found")
        return

    if sort:
        report = report.model_copy(update={"issues": sort_by_risk(report.issues)})

    if format == "json":
        output_json(report, output)
    else:
        output_text(report, output)

    sys.exit(1 if report.get_by_risk(Risk.HIGH) else 0)


async def run_scan(config: ScanConfig, request: ScanRequest) -> ScanReport:
    """Execute one scan with a fresh HTTP session."""
    async with Scanner(config) as scanner:
        return await scanner.scan(request)


def output_json(report: ScanReport, output_path: Path | None) -> None:
    """Output the report in its wire JSON form."""
    json_str = json.dumps(report.to_wire(), indent=2)

    if output_path:
        output_path.write_text(json_str)
        click.echo(f"Results written to {output_path}")
    else:
        click.echo(json_str)


def output_text(report: ScanReport, output_path: Path | None) -> None:
    """Output the report in human-readable text format.

    Issues are colored by risk on the terminal; files get plain text.
    """
    lines: list[str] = []

    lines.append("=" * 80)
    lines.append("SECURITY SCAN REPORT")
    lines.append("=" * 80)
    lines.append(f"Target: {report.url}")
    lines.append(f"Scan Type: {report.scan_type.value}")
    status_color = "green" if report.status == ScanStatus.SAFE else "red"
    lines.append(f"Status: {click.style(report.status.value, fg=status_color)}")
    lines.append("")

    lines.append("RISK SUMMARY")
    lines.append("-" * 80)
    for risk_name, count in report.summary().items():
        lines.append(f"  {risk_name.upper():8} {count}")
    lines.append("")

    lines.append("ISSUES")
    lines.append("-" * 80)
    for issue in report.issues:
        text = f"  {issue.message} ({issue.risk.value.upper()} risk)"
        lines.append(click.style(text, fg=RISK_COLORS[issue.risk]))

    inconclusive = [probe.probe for probe in report.probes if probe.inconclusive]
    if inconclusive:
        lines.append("")
        lines.append(f"Inconclusive probes: {', '.join(inconclusive)}")

    lines.append("")
    lines.append("=" * 80)

    output_str = "\n".join(lines)

    if output_path:
        output_path.write_text(click.unstyle(output_str))
        click.echo(f"Results written to {output_path}")
    else:
        click.echo(output_str)


@cli.command()
@click.option("--host", default="0.0.0.0", help="Interface to bind", show_default=True)
@click.option("--port", "-p", default=3001, type=int, help="Port to listen on", show_default=True)
@click.option("--fetch-timeout", default=10.0, type=TIMEOUT_RANGE, show_default=True)
@click.option("--probe-timeout", default=5.0, type=TIMEOUT_RANGE, show_default=True)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def serve(host: str, port: int, fetch_timeout: float, probe_timeout: float, verbose: bool) -> None:
    """Run the HTTP API (POST /scan)."""
    setup_logging(verbose)
    run_server(
        ServerConfig(host=host, port=port),
        ScanConfig(fetch_timeout=fetch_timeout, probe_timeout=probe_timeout),
    )


@cli.command()
def version() -> None:
    """Display version information."""
    click.echo(f"SiteProbe version {__version__}")


if __name__ == "__main__":
    cli()
