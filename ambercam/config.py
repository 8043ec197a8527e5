"""
Connection configuration.

CameraConfig describes how to reach a camera; create_transport() turns it
into the matching AbstractTransport so the protocol layer never deals with
a concrete transport class.

Example:
    >>> config = CameraConfig(transport="serial", port="/dev/ttyUSB0")
    >>> transport = create_transport(config)
    >>> transport
    AsyncSerialTransport('/dev/ttyUSB0', baudrate=38400, closed)
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ambercam.protocol.constants import ProtocolConstants
from ambercam.transport.abc import AbstractTransport
from ambercam.transport.serial_async import AsyncSerialTransport
from ambercam.transport.tcp import AsyncTCPTransport


class CameraConfig(BaseModel):
    """
    Camera connection settings.

    Attributes:
        transport: "tcp" for a socket connection, "serial" for a serial port.
        host: Remote host (TCP only).
        port: TCP port number, or serial device path.
        baudrate: Serial baud rate (serial only).
        response_timeout: Per-request response timeout in seconds.
        connect_timeout: TCP connect timeout in seconds (None waits forever).
    """

    model_config = ConfigDict(frozen=True)

    transport: Literal["tcp", "serial"] = "tcp"
    host: str | None = None
    port: int | str = ProtocolConstants.DEFAULT_TCP_PORT
    baudrate: int = Field(default=ProtocolConstants.DEFAULT_BAUD_RATE, gt=0)
    response_timeout: float = Field(default=ProtocolConstants.DEFAULT_RESPONSE_TIMEOUT, gt=0)
    connect_timeout: float | None = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _check_endpoint(self) -> CameraConfig:
        if self.transport == "tcp":
            if not self.host:
                raise ValueError("TCP transport requires a host")
            if not isinstance(self.port, int) or not 0 < self.port < 65536:
                raise ValueError(f"TCP port must be 1-65535, got {self.port!r}")
        elif not isinstance(self.port, str) or not self.port:
            raise ValueError("Serial transport requires a device path as port")
        return self


def create_transport(config: CameraConfig) -> AbstractTransport:
    """
    Build the transport described by config.

    Args:
        config: Validated connection settings.

    Returns:
        An unopened transport.
    """
    if config.transport == "serial":
        return AsyncSerialTransport(str(config.port), baudrate=config.baudrate)
    return AsyncTCPTransport(
        config.host,
        int(config.port),
        connect_timeout=config.connect_timeout,
    )
