"""
Async TCP transport.

Connects to the camera's control port through a serial-to-Ethernet
bridge (or any TCP endpoint speaking the raw control protocol).

Example:
    >>> transport = AsyncTCPTransport("192.168.0.20", 53000)
    >>> async with transport:
    ...     transport.set_data_handler(print)
    ...     await transport.write(packet)
"""

from __future__ import annotations

import asyncio

from ambercam.exceptions import TransportError
from ambercam.protocol.constants import ProtocolConstants
from ambercam.transport.stream import StreamTransport


class AsyncTCPTransport(StreamTransport):
    """
    TCP transport using asyncio.open_connection.

    Attributes:
        host: Remote host name or address.
        port: Remote TCP port.
    """

    def __init__(
        self,
        host: str,
        port: int = ProtocolConstants.DEFAULT_TCP_PORT,
        connect_timeout: float | None = None,
    ) -> None:
        """
        Initialize the TCP transport.

        Args:
            host: Remote host name or address.
            port: Remote TCP port (default: 53000).
            connect_timeout: Seconds to wait for the connection, None to
                wait indefinitely.
        """
        super().__init__()
        self._host = host
        self._port = port
        self._connect_timeout = connect_timeout

    @property
    def host(self) -> str:
        """Get the remote host."""
        return self._host

    @property
    def port(self) -> int:
        """Get the remote port."""
        return self._port

    @property
    def port_name(self) -> str:
        """Get the transport identifier."""
        return f"tcp://{self._host}:{self._port}"

    async def _open_streams(self) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        try:
            return await asyncio.wait_for(
                asyncio.open_connection(self._host, self._port),
                timeout=self._connect_timeout,
            )
        except asyncio.TimeoutError:
            raise TransportError(
                f"Timed out connecting to {self.port_name} after {self._connect_timeout}s"
            ) from None
        except OSError as e:
            raise TransportError(f"Failed to connect to {self.port_name}: {e}") from e

    def __repr__(self) -> str:
        status = "open" if self.is_open else "closed"
        return f"AsyncTCPTransport({self._host!r}, {self._port}, {status})"
