"""
Abstract transport interface for camera control communication.

This module defines the abstract base class for all transport
implementations. Transports carry the raw byte stream between the host
and the camera's control port over a serial line or a TCP socket.

The transport layer is responsible for:
- Opening/closing the physical connection
- Writing raw bytes
- Delivering every received chunk to a data handler
- Reporting loss of the connection

Chunk boundaries carry no meaning: a single packet may arrive split over
several chunks and several packets may arrive in one.

Implementations:
- AsyncTCPTransport: asyncio socket
- AsyncSerialTransport: pyserial-asyncio based serial port
- MockTransport: For testing without hardware
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types import TracebackType

DataHandler = Callable[[bytes], None]
"""Callback receiving each inbound chunk."""

ConnectionLostHandler = Callable[[Exception | None], None]
"""Callback invoked once when the connection drops (None on clean EOF)."""


class AbstractTransport(ABC):
    """
    Abstract base class for camera transports.

    Inbound data is pushed rather than pulled: the owner registers a data
    handler and the transport calls it from the event loop for every chunk
    received. All transport implementations must inherit from this class
    and implement all abstract methods.

    Transports support async context manager protocol for safe resource
    management:

        async with AsyncTCPTransport("192.168.0.20", 53000) as transport:
            transport.set_data_handler(on_data)
            await transport.write(packet)

    Attributes:
        is_open: Whether the transport connection is currently open.
        port_name: Identifier for the transport (e.g., "tcp://host:port").
    """

    def __init__(self) -> None:
        self._data_handler: DataHandler | None = None
        self._connection_lost_handler: ConnectionLostHandler | None = None

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """
        Check if the transport connection is currently open.

        Returns:
            True if connected and ready for I/O, False otherwise.
        """
        ...

    @property
    @abstractmethod
    def port_name(self) -> str:
        """
        Get the transport identifier.

        Returns:
            Port name or identifier string (e.g., "/dev/ttyUSB0", "tcp://host:53000").
        """
        ...

    @abstractmethod
    async def open(self) -> None:
        """
        Open the transport connection and start delivering inbound data.

        Raises:
            TransportError: If the connection cannot be established.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """
        Close the transport connection.

        Releases the physical connection and any associated resources.
        Safe to call multiple times (idempotent). The connection lost
        handler is not called for an explicit close.
        """
        ...

    @abstractmethod
    async def write(self, data: bytes) -> None:
        """
        Write data to the transport.

        Args:
            data: A complete request packet.

        Raises:
            TransportError: If the transport is not open or write fails.
        """
        ...

    def set_data_handler(self, handler: DataHandler | None) -> None:
        """
        Register the callback receiving inbound chunks.

        Args:
            handler: Called with each chunk of received bytes, or None to
                stop delivery.
        """
        self._data_handler = handler

    def set_connection_lost_handler(self, handler: ConnectionLostHandler | None) -> None:
        """
        Register the callback invoked when the connection drops.

        Args:
            handler: Called with the causing exception, or None on EOF.
        """
        self._connection_lost_handler = handler

    def _deliver(self, data: bytes) -> None:
        """Pass a received chunk to the data handler, if any."""
        if self._data_handler is not None:
            self._data_handler(data)

    def _connection_lost(self, exc: Exception | None) -> None:
        """Notify the connection lost handler, if any."""
        if self._connection_lost_handler is not None:
            self._connection_lost_handler(exc)

    async def __aenter__(self) -> AbstractTransport:
        """Async context manager entry - opens the transport."""
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Async context manager exit - closes the transport."""
        await self.close()
