"""
ambercam - Python library for controlling Amber Radiance 1 infrared cameras.

This library provides async communication with the camera's control port
over a serial line or a TCP socket: command packet framing, stream
reassembly of responses, and request/response matching with timeouts.

Example:
    >>> from ambercam import Camera, CameraConfig
    >>>
    >>> async def main():
    ...     config = CameraConfig(transport="tcp", host="192.168.0.20", port=53000)
    ...     async with Camera.from_config(config) as camera:
    ...         await camera.set_lut("color")
    ...         status = await camera.get_status()
    ...         print(status.num_power_cycles)
"""

from ambercam.camera import Camera, CameraState
from ambercam.config import CameraConfig, create_transport
from ambercam.exceptions import (
    AmberCamError,
    ChecksumError,
    ConnectionClosedError,
    ConnectionError,
    FrameError,
    InvalidOptionError,
    ParseError,
    ProtocolError,
    SequenceInUseError,
    TimeoutError,
    TransportError,
)
from ambercam.models.status import CameraStatus
from ambercam.protocol.constants import Command
from ambercam.protocol.options import UnknownMode
from ambercam.transport import AbstractTransport, AsyncSerialTransport, AsyncTCPTransport

__version__ = "0.1.0"
__all__ = [
    # Client
    "Camera",
    "CameraState",
    "Command",
    # Configuration
    "CameraConfig",
    "create_transport",
    # Models
    "CameraStatus",
    "UnknownMode",
    # Exceptions
    "AmberCamError",
    "ProtocolError",
    "ChecksumError",
    "FrameError",
    "SequenceInUseError",
    "TimeoutError",
    "ConnectionError",
    "ConnectionClosedError",
    "InvalidOptionError",
    "ParseError",
    "TransportError",
    # Transport
    "AbstractTransport",
    "AsyncSerialTransport",
    "AsyncTCPTransport",
    # Version
    "__version__",
]
