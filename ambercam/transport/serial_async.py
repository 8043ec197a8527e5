"""
Async serial transport using pyserial-asyncio.

Serial Configuration (Amber Radiance control port):
- Baud rate: 38400 (default)
- Data bits: 8
- Parity: None
- Stop bits: 1
- Flow control: None

Example:
    >>> transport = AsyncSerialTransport("/dev/ttyUSB0")
    >>> async with transport:
    ...     transport.set_data_handler(print)
    ...     await transport.write(packet)
"""

from __future__ import annotations

import asyncio

import serial
import serial_asyncio

from ambercam.exceptions import TransportError
from ambercam.protocol.constants import ProtocolConstants
from ambercam.transport.stream import StreamTransport


class AsyncSerialTransport(StreamTransport):
    """
    Async serial transport using pyserial-asyncio.

    Provides non-blocking serial communication using Python's asyncio
    framework. This is the transport for cameras wired directly to the
    host.

    Attributes:
        port_name: Serial port path (e.g., "/dev/ttyUSB0", "COM3").
        is_open: Whether the port is currently open.

    Example:
        >>> transport = AsyncSerialTransport("/dev/ttyUSB0", baudrate=38400)
        >>> await transport.open()
        >>> try:
        ...     await transport.write(packet)
        ... finally:
        ...     await transport.close()
    """

    def __init__(
        self,
        port: str,
        baudrate: int = ProtocolConstants.DEFAULT_BAUD_RATE,
    ) -> None:
        """
        Initialize the async serial transport.

        Args:
            port: Serial port path or pyserial URL (e.g., "/dev/ttyUSB0",
                "COM3", "socket://host:port").
            baudrate: Baud rate (default: 38400).
        """
        super().__init__()
        self._port = port
        self._baudrate = baudrate

    @property
    def port_name(self) -> str:
        """Get the serial port path."""
        return self._port

    @property
    def baudrate(self) -> int:
        """Get the configured baud rate."""
        return self._baudrate

    async def _open_streams(self) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        try:
            return await serial_asyncio.open_serial_connection(
                url=self._port,
                baudrate=self._baudrate,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                bytesize=serial.EIGHTBITS,
                # No flow control
                xonxoff=False,
                rtscts=False,
                dsrdtr=False,
            )
        except serial.SerialException as e:
            raise TransportError(f"Failed to open serial port {self._port}: {e}") from e
        except OSError as e:
            raise TransportError(f"OS error opening {self._port}: {e}") from e

    def __repr__(self) -> str:
        status = "open" if self.is_open else "closed"
        return f"AsyncSerialTransport({self._port!r}, baudrate={self._baudrate}, {status})"
