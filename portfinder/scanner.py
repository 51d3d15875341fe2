"""Concurrent range search for an available port, with retries."""

import asyncio
import logging
from typing import TYPE_CHECKING, Awaitable, Callable, Optional

from .exceptions import PortRangeExhausted, ProbeFailure
from .models import (
    DEFAULT_DELAY_MS,
    DEFAULT_END_PORT,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_RETRIES,
    DEFAULT_START_PORT,
    ProbeOutcome,
    ScanAttempt,
    ScanRequest,
)
from .probe import PortProbe
from .transport import AsyncioTransport

if TYPE_CHECKING:
    from .config import Settings

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class RangeScanner:
    """Finds the lowest available port of a range.

    Every port of an attempt is probed concurrently and the attempt is
    only evaluated once all probes have finished, so the result does not
    depend on completion order.
    """

    def __init__(
        self,
        probe: Optional[PortProbe] = None,
        sleep: Optional[Sleep] = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        strict: bool = False,
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self.probe = probe or PortProbe()
        self.sleep = sleep or asyncio.sleep
        self.max_concurrency = max_concurrency
        self.strict = strict

    @classmethod
    def from_settings(cls, settings: "Settings") -> "RangeScanner":
        """Build a scanner probing on the configured host."""
        return cls(
            probe=PortProbe(AsyncioTransport(host=settings.host)),
            max_concurrency=settings.max_concurrency,
            strict=settings.strict,
        )

    async def scan_once(self, request: ScanRequest, number: int = 0) -> ScanAttempt:
        """Probe every port of the range once and wait for all of them."""
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def bounded_probe(port: int) -> ProbeOutcome:
            async with semaphore:
                return await self.probe.probe(port)

        outcomes = await asyncio.gather(*(bounded_probe(p) for p in request.ports()))
        return ScanAttempt(number=number, outcomes=tuple(outcomes))

    async def find_available_port(self, request: ScanRequest) -> int:
        """
        Return the lowest available port of the request's range.

        Raises PortRangeExhausted when no attempt found a free port, and
        ProbeFailure in strict mode when a probe errored.
        """
        for attempt in range(request.retries):
            result = await self.scan_once(request, number=attempt)

            failures = result.failures()
            if failures:
                if self.strict:
                    first = failures[0]
                    raise ProbeFailure(first.port, first.cause) from first.cause
                logger.debug(
                    f"{len(failures)} probe(s) failed in attempt {attempt + 1}, "
                    f"treating them as unavailable"
                )

            port = result.first_available()
            if port is not None:
                logger.info(f"Found available port {port}")
                return port

            if attempt < request.retries - 1:
                logger.warning(
                    f"No free port in range {request.start_port}-{request.end_port}. "
                    f"Waiting {request.delay_ms:g}ms before retrying "
                    f"({attempt + 1}/{request.retries})..."
                )
                await self.sleep(request.delay_seconds)

        raise PortRangeExhausted(request.start_port, request.end_port, request.retries)


async def find_available_port(
    start_port: int = DEFAULT_START_PORT,
    end_port: int = DEFAULT_END_PORT,
    retries: int = DEFAULT_RETRIES,
    delay_ms: float = DEFAULT_DELAY_MS,
    *,
    scanner: Optional[RangeScanner] = None,
) -> int:
    """
    Find an available port in [start_port, end_port].

    Raises ValidationError for bad arguments (before probing anything) and
    PortRangeExhausted if no port was free after `retries` attempts.
    """
    request = ScanRequest.build(
        start_port=start_port,
        end_port=end_port,
        retries=retries,
        delay_ms=delay_ms,
    )
    scanner = scanner or RangeScanner()
    return await scanner.find_available_port(request)


def find_available_port_sync(
    start_port: int = DEFAULT_START_PORT,
    end_port: int = DEFAULT_END_PORT,
    retries: int = DEFAULT_RETRIES,
    delay_ms: float = DEFAULT_DELAY_MS,
    *,
    scanner: Optional[RangeScanner] = None,
) -> int:
    """Blocking variant of find_available_port. Must not be called from a running loop."""
    return asyncio.run(
        find_available_port(start_port, end_port, retries, delay_ms, scanner=scanner)
    )
