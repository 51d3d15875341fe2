"""Find an unused port to listen on within a range."""

from .exceptions import (
    PortFinderError,
    ValidationError,
    ProbeFailure,
    PortRangeExhausted,
)
from .models import ProbeOutcome, ProbeStatus, ScanAttempt, ScanRequest
from .transport import AsyncioTransport, Transport
from .probe import PortProbe
from .scanner import RangeScanner, find_available_port, find_available_port_sync

__all__ = [
    "PortFinderError",
    "ValidationError",
    "ProbeFailure",
    "PortRangeExhausted",
    "ProbeOutcome",
    "ProbeStatus",
    "ScanAttempt",
    "ScanRequest",
    "AsyncioTransport",
    "Transport",
    "PortProbe",
    "RangeScanner",
    "find_available_port",
    "find_available_port_sync",
]
