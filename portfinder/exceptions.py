"""Exceptions raised by portfinder."""

from typing import Optional


class PortFinderError(Exception):
    """Base class for all portfinder errors."""

    error_type = "portfinder_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PortFinderError):
    """Malformed input to the range search. Raised before any probing."""

    error_type = "validation_error"

    def __init__(self, field: str, reason: str):
        super().__init__(f"Invalid {field}: {reason}")
        self.field = field
        self.reason = reason


class ProbeFailure(PortFinderError):
    """A single probe hit an error other than "address in use"."""

    error_type = "probe_failure"

    def __init__(self, port: int, cause: Optional[BaseException] = None):
        super().__init__(f"Error while probing port {port}: {cause}")
        self.port = port
        self.cause = cause


class PortRangeExhausted(PortFinderError):
    """No port in the range was available after every attempt."""

    error_type = "port_range_exhausted"

    def __init__(self, start_port: int, end_port: int, retries: int):
        super().__init__(
            f"No available port in range {start_port}-{end_port} "
            f"after {retries} attempts"
        )
        self.start_port = start_port
        self.end_port = end_port
        self.retries = retries
