"""
Transport layer for camera control communication.

This package provides transport implementations for reaching the camera's
control port over various physical interfaces. The protocol layer only
sees AbstractTransport; the concrete class is chosen by configuration
(see ambercam.config.create_transport).

Available transports:
- AsyncTCPTransport: TCP socket (serial-to-Ethernet bridge)
- AsyncSerialTransport: Async serial port using pyserial-asyncio
- MockTransport: Mock transport for testing without hardware

Example:
    >>> from ambercam.transport import AsyncTCPTransport
    >>> async with AsyncTCPTransport("192.168.0.20", 53000) as transport:
    ...     transport.set_data_handler(print)
    ...     await transport.write(packet)
"""

from ambercam.transport.abc import AbstractTransport
from ambercam.transport.mock import MockTransport
from ambercam.transport.serial_async import AsyncSerialTransport
from ambercam.transport.stream import StreamTransport
from ambercam.transport.tcp import AsyncTCPTransport

__all__ = [
    "AbstractTransport",
    "AsyncSerialTransport",
    "AsyncTCPTransport",
    "MockTransport",
    "StreamTransport",
]
