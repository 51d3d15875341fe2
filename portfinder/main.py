"""portfinder CLI entry point."""

import asyncio
import sys
from typing import Optional

import click
from dotenv import load_dotenv
from pydantic import ValidationError as PydanticValidationError

from .config import Settings, get_settings
from .console import configure_logging, format_outcome, print_error, print_result
from .exceptions import PortFinderError
from .models import ScanRequest
from .probe import PortProbe
from .scanner import RangeScanner
from .transport import AsyncioTransport


def load_settings() -> Settings:
    """Load settings, exiting with an error message if they are invalid."""
    try:
        return get_settings()
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or "settings"
        print_error(f"Invalid configuration for {field}: {error['msg']}")
        sys.exit(1)


def build_scanner(settings: Settings) -> RangeScanner:
    """Create the scanner used by the CLI."""
    return RangeScanner.from_settings(settings)


def build_probe(settings: Settings) -> PortProbe:
    """Create the single-port probe used by `check`."""
    return PortProbe(AsyncioTransport(host=settings.host))


@click.group(invoke_without_command=True)
@click.option("--log-level", default=None, help="Logging level (default: PORTFINDER_LOG_LEVEL or WARNING)")
@click.pass_context
def cli(ctx, log_level: Optional[str]):
    """portfinder - find a free port to listen on"""
    settings = load_settings()
    configure_logging(log_level or settings.log_level)
    if ctx.invoked_subcommand is None:
        ctx.invoke(find)


@cli.command()
@click.option("--start", "start_port", type=int, default=None, help="First port of the range")
@click.option("--end", "end_port", type=int, default=None, help="Last port of the range")
@click.option("--retries", type=int, default=None, help="Number of attempts over the range")
@click.option("--delay", "delay_ms", type=float, default=None, help="Delay between attempts (ms)")
@click.option("--host", default=None, help="Address to bind (default: all interfaces)")
@click.option("--strict/--no-strict", default=None, help="Fail on probe errors other than 'in use'")
def find(
    start_port: Optional[int] = None,
    end_port: Optional[int] = None,
    retries: Optional[int] = None,
    delay_ms: Optional[float] = None,
    host: Optional[str] = None,
    strict: Optional[bool] = None,
):
    """Print the lowest available port of a range."""
    settings = load_settings()
    overrides = {"host": host, "strict": strict}
    settings = settings.model_copy(
        update={k: v for k, v in overrides.items() if v is not None}
    )

    try:
        scanner = build_scanner(settings)
    except ValueError as e:
        print_error(f"Invalid configuration: {e}")
        sys.exit(1)

    try:
        request = ScanRequest.build(
            start_port=settings.start_port if start_port is None else start_port,
            end_port=settings.end_port if end_port is None else end_port,
            retries=settings.retries if retries is None else retries,
            delay_ms=settings.delay_ms if delay_ms is None else delay_ms,
        )
        port = asyncio.run(scanner.find_available_port(request))
    except PortFinderError as e:
        print_error(e.message)
        sys.exit(1)

    print_result(str(port))


@cli.command()
@click.argument("ports", nargs=-1, type=int, required=True)
@click.option("--host", default=None, help="Address to bind (default: all interfaces)")
def check(ports: tuple[int, ...], host: Optional[str] = None):
    """Probe each PORT once and report whether it is available."""
    settings = load_settings()
    if host is not None:
        settings = settings.model_copy(update={"host": host})
    probe = build_probe(settings)

    async def probe_all():
        return await asyncio.gather(*(probe.probe(p) for p in ports))

    outcomes = asyncio.run(probe_all())
    for outcome in outcomes:
        print_result(format_outcome(outcome))

    if not all(o.is_available for o in outcomes):
        sys.exit(1)


def entry():
    """Console script entry point."""
    load_dotenv()
    cli()


if __name__ == "__main__":
    entry()
