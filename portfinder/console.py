"""Terminal output helpers for the portfinder CLI."""

import logging
import sys

from .models import ProbeOutcome, ProbeStatus

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def print_error(message: str) -> None:
    """Print an error message."""
    print(f"Error: {message}", file=sys.stderr)


def print_result(message: str) -> None:
    """Print a result line on stdout."""
    print(message)


def format_outcome(outcome: ProbeOutcome) -> str:
    """Format a probe outcome as 'PORT: status'."""
    line = f"{outcome.port}: {outcome.status.value}"
    if outcome.status is ProbeStatus.FAILED:
        line += f" ({outcome.cause})"
    return line


def configure_logging(level: str) -> None:
    """Set the package log level, adding a stderr handler if none is configured."""
    log_level = getattr(logging, level.upper(), logging.WARNING)
    logging.getLogger("portfinder").setLevel(log_level)
    if not logging.root.handlers:
        logging.basicConfig(
            level=log_level,
            format=LOG_FORMAT,
            stream=sys.stderr,
        )
