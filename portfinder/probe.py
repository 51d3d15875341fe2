"""Single-port availability probe."""

import logging
from typing import Optional

from .models import ProbeOutcome, is_valid_port
from .transport import AsyncioTransport, Transport, is_address_in_use

logger = logging.getLogger(__name__)


class PortProbe:
    """Tests one port by binding a transient listener and releasing it."""

    def __init__(self, transport: Optional[Transport] = None):
        self.transport = transport or AsyncioTransport()

    async def probe(self, port: int) -> ProbeOutcome:
        """
        Probe a port. Never raises (except on cancellation).

        Returns Available if the bind succeeded, Occupied if the address is
        in use and Failed with the underlying cause for any other error.
        """
        if not is_valid_port(port):
            return ProbeOutcome.failed(
                port, ValueError(f"Invalid port: {port!r}. Must be between 0 and 65535.")
            )

        try:
            async with self.transport.listen(port):
                pass
        except Exception as e:
            if is_address_in_use(e):
                return ProbeOutcome.occupied(port)
            logger.debug(f"Probe of port {port} failed: {e!r}")
            return ProbeOutcome.failed(port, e)

        return ProbeOutcome.available(port)
