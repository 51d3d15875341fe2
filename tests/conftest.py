"""Common test fixtures and stub collaborators."""

import asyncio
import errno
from collections import Counter
from contextlib import asynccontextmanager
from typing import Callable, Optional

import pytest

from portfinder import PortProbe, RangeScanner

AVAILABLE = "available"
OCCUPIED = "occupied"
FAILED = "failed"


class StubTransport:
    """In-memory transport.

    `state(port, call)` decides what the n-th bind of a port does (call
    counts from 1) and returns AVAILABLE, OCCUPIED or FAILED. `delays` maps
    ports to seconds spent before the bind resolves.
    """

    def __init__(
        self,
        state: Optional[Callable[[int, int], str]] = None,
        delays: Optional[dict] = None,
    ):
        self.state = state or (lambda port, call: AVAILABLE)
        self.delays = delays or {}
        self.calls: list[int] = []
        self.call_counts: Counter = Counter()
        self.entered: list[int] = []
        self.released: list[int] = []
        self.in_flight = 0
        self.max_in_flight = 0

    @asynccontextmanager
    async def listen(self, port: int):
        self.calls.append(port)
        self.call_counts[port] += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(port, 0))
            result = self.state(port, self.call_counts[port])
            if result == OCCUPIED:
                raise OSError(errno.EADDRINUSE, "Address already in use")
            if result == FAILED:
                raise PermissionError(errno.EACCES, "Permission denied")
        finally:
            self.in_flight -= 1

        self.entered.append(port)
        try:
            yield
        finally:
            self.released.append(port)


def occupied_ports(*ports: int) -> Callable[[int, int], str]:
    """State function where the given ports are always in use."""
    taken = set(ports)
    return lambda port, call: OCCUPIED if port in taken else AVAILABLE


class RecordingSleep:
    """Sleep stub that records requested delays without waiting."""

    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def make_scanner(recording_sleep):
    """Factory building a RangeScanner over a StubTransport."""

    def _make(transport: StubTransport, **kwargs) -> RangeScanner:
        kwargs.setdefault("sleep", recording_sleep)
        return RangeScanner(probe=PortProbe(transport), **kwargs)

    return _make
