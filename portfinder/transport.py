"""Bind/listen transports used by port probes."""

import asyncio
import errno
from contextlib import asynccontextmanager
from typing import AsyncContextManager, Optional, Protocol

# Windows reports WSAEADDRINUSE instead of EADDRINUSE
ADDRESS_IN_USE_ERRNOS = frozenset(
    {errno.EADDRINUSE, getattr(errno, "WSAEADDRINUSE", errno.EADDRINUSE)}
)


def is_address_in_use(exc: BaseException) -> bool:
    """Check if an exception is the "address already in use" bind failure."""
    return isinstance(exc, OSError) and exc.errno in ADDRESS_IN_USE_ERRNOS


class Transport(Protocol):
    """Anything that can hold a transient listener on a port.

    ``listen(port)`` binds and listens on entry, releases on exit, and raises
    OSError if the bind fails.
    """

    def listen(self, port: int) -> AsyncContextManager[None]:
        ...


class AsyncioTransport:
    """Transport backed by ``loop.create_server``.

    With ``host=None`` the listener binds the wildcard address of every
    available address family.
    """

    def __init__(self, host: Optional[str] = None, backlog: int = 1):
        self.host = host
        self.backlog = backlog

    @asynccontextmanager
    async def listen(self, port: int):
        loop = asyncio.get_running_loop()
        server = await loop.create_server(
            asyncio.Protocol,
            host=self.host,
            port=port,
            backlog=self.backlog,
            start_serving=False,
        )
        # Bound from here on; no await may happen outside the try
        try:
            await server.start_serving()
            yield
        finally:
            server.close()
            await server.wait_closed()
