"""
Amber Radiance 1 camera client.

This module provides the high-level interface to the camera's control
port. Each method maps onto one or two protocol commands; request framing
and response matching are handled by the RequestCorrelator.

The client tracks a simple connection state:
    DISCONNECTED -> connect() -> CONNECTED
    CONNECTED -> close() -> DISCONNECTED

Example:
    >>> from ambercam import Camera
    >>> from ambercam.transport import AsyncTCPTransport
    >>>
    >>> async def main():
    ...     async with Camera(AsyncTCPTransport("192.168.0.20")) as camera:
    ...         await camera.set_nuc("hot")
    ...         print(await camera.get_status())
"""

from __future__ import annotations

import logging
import struct
from enum import Enum, auto
from typing import TYPE_CHECKING

from ambercam.exceptions import ConnectionClosedError, ConnectionError, ParseError
from ambercam.models.status import CameraStatus
from ambercam.protocol.constants import Command, ProtocolConstants
from ambercam.protocol.correlator import RequestCorrelator
from ambercam.protocol.options import (
    AGC_MODES,
    ITT_MODES,
    LUT_MODES,
    NUC_MODES,
    OptionMap,
    UnknownMode,
)

if TYPE_CHECKING:
    from ambercam.config import CameraConfig
    from ambercam.transport.abc import AbstractTransport

# Module logger
logger = logging.getLogger(__name__)

_MODE_WORD = struct.Struct("<H")


class CameraState(Enum):
    """Camera connection states."""

    DISCONNECTED = auto()
    """Transport closed."""

    CONNECTED = auto()
    """Transport open, commands may be sent."""


class Camera:
    """
    Client for an Amber Radiance 1 infrared camera.

    One Camera owns one connection: its transport, sequence counter,
    receive buffer and pending requests are never shared.

    Attributes:
        state: Current connection state.
        transport: The underlying transport layer.
        response_timeout: Default per-request timeout in seconds.

    Example:
        >>> camera = Camera(AsyncSerialTransport("/dev/ttyUSB0"))
        >>> await camera.connect()
        >>> await camera.set_itt("s-curve")
        >>> await camera.get_itt()
        's-curve'
        >>> await camera.close()
    """

    def __init__(
        self,
        transport: AbstractTransport,
        response_timeout: float = ProtocolConstants.DEFAULT_RESPONSE_TIMEOUT,
    ) -> None:
        """
        Initialize the camera client.

        Args:
            transport: Transport layer for communication.
            response_timeout: Default response timeout in seconds.
        """
        self._transport = transport
        self._state = CameraState.DISCONNECTED
        self._correlator = RequestCorrelator(transport, timeout=response_timeout)

    @classmethod
    def from_config(cls, config: CameraConfig) -> Camera:
        """
        Create a camera with the transport described by config.

        Args:
            config: Connection settings.
        """
        from ambercam.config import create_transport

        return cls(create_transport(config), response_timeout=config.response_timeout)

    @property
    def state(self) -> CameraState:
        """Get the current connection state."""
        return self._state

    @property
    def is_connected(self) -> bool:
        """Check if the camera connection is open."""
        return self._state == CameraState.CONNECTED

    @property
    def transport(self) -> AbstractTransport:
        """Get the underlying transport."""
        return self._transport

    @property
    def response_timeout(self) -> float:
        """Default response timeout in seconds."""
        return self._correlator.timeout

    @response_timeout.setter
    def response_timeout(self, value: float) -> None:
        self._correlator.timeout = value

    async def connect(self) -> None:
        """
        Open the transport and start receiving responses.

        Safe to call when already connected.

        Raises:
            TransportError: If the transport cannot be opened.
        """
        if self._state == CameraState.CONNECTED:
            return

        self._transport.set_data_handler(self._correlator.data_received)
        self._transport.set_connection_lost_handler(self._on_connection_lost)
        if not self._transport.is_open:
            await self._transport.open()

        self._state = CameraState.CONNECTED
        logger.info("Connected to camera on %s", self._transport.port_name)

    async def close(self) -> None:
        """
        Close the connection.

        Requests still waiting for a response fail with
        ConnectionClosedError. Safe to call when not connected.
        """
        self._correlator.fail_all(ConnectionClosedError("Connection closed by client"))
        if self._state == CameraState.DISCONNECTED and not self._transport.is_open:
            return

        self._state = CameraState.DISCONNECTED
        try:
            await self._transport.close()
        finally:
            self._transport.set_data_handler(None)
            self._transport.set_connection_lost_handler(None)
            logger.info("Disconnected from camera on %s", self._transport.port_name)

    async def send(self, command: Command, *args: int, timeout: float | None = None) -> bytes:
        """
        Send a command from the command table and wait for the response.

        Args:
            command: Command to send.
            *args: Argument words.
            timeout: Response timeout in seconds, None for the default.

        Returns:
            Response payload (empty when the camera returns no data).

        Raises:
            ConnectionError: If not connected.
            TimeoutError: If no response arrives in time.
        """
        self._ensure_connected()
        return await self._correlator.send(
            command.command, command.subcommand, *args, timeout=timeout
        )

    # ===== Getters =====

    async def get_agc(self) -> bool:
        """
        Check whether automatic gain control is enabled.

        The camera only reports on/off, not the active AGC mode.
        """
        return bool(await self._get_mode_value(Command.AGC_GET))

    async def get_itt(self) -> str | UnknownMode:
        """Get the active Intensity Transform Table mode."""
        return await self._get_mode(Command.ITT_GET, ITT_MODES)

    async def get_lut(self) -> str | UnknownMode:
        """Get the active Look-Up Table mode."""
        return await self._get_mode(Command.LUT_GET, LUT_MODES)

    async def get_nuc(self) -> str | UnknownMode:
        """Get the active Non-Uniformity Correction mode."""
        return await self._get_mode(Command.NUC_GET, NUC_MODES)

    async def get_status(self) -> CameraStatus:
        """
        Read the camera's lifetime counters.

        Returns:
            CameraStatus with cooler cycles, power cycles and cooler time.

        Raises:
            ParseError: If the response payload is too short.
        """
        return CameraStatus.from_payload(await self.send(Command.STATUS_GET))

    # ===== Setters =====

    async def set_agc(self, mode: str) -> bytes:
        """
        Set automatic gain control.

        "off" disables AGC. Any other mode enables AGC and then selects
        the mode.

        Args:
            mode: One of off, full, midsize, center, horizon.

        Raises:
            InvalidOptionError: If mode is not recognized (nothing is sent).
        """
        value = AGC_MODES.validate(mode)
        if mode == "off":
            return await self.send(Command.AGC_OFF)
        await self.send(Command.AGC_ON)
        return await self.send(Command.AGC_SET, value)

    async def set_itt(self, mode: str) -> bytes:
        """
        Set the Intensity Transform Table.

        Args:
            mode: One of linear, inverse, s-curve, two-cycle.

        Raises:
            InvalidOptionError: If mode is not recognized (nothing is sent).
        """
        return await self.send(Command.ITT_SET, ITT_MODES.validate(mode))

    async def set_lut(self, mode: str) -> bytes:
        """
        Set the Look-Up Table.

        Args:
            mode: One of black-and-white, color, sepia.

        Raises:
            InvalidOptionError: If mode is not recognized (nothing is sent).
        """
        return await self.send(Command.LUT_SET, LUT_MODES.validate(mode))

    async def set_nuc(self, mode: str) -> bytes:
        """
        Set the Non-Uniformity Correction table.

        Args:
            mode: One of cold, mid, warm, hot.

        Raises:
            InvalidOptionError: If mode is not recognized (nothing is sent).
        """
        return await self.send(Command.NUC_SET, NUC_MODES.validate(mode))

    async def set_brightness(self, delta: int) -> bytes:
        """Step brightness up (delta > 0) or down (otherwise) by one."""
        return await self.send(Command.BRIGHTNESS_UP if delta > 0 else Command.BRIGHTNESS_DOWN)

    async def set_contrast(self, delta: int) -> bytes:
        """Step contrast up (delta > 0) or down (otherwise) by one."""
        return await self.send(Command.CONTRAST_UP if delta > 0 else Command.CONTRAST_DOWN)

    async def set_cooler(self, enabled: bool) -> bytes:
        """Switch the cryo cooler on or off."""
        return await self.send(Command.COOLER_ON if enabled else Command.COOLER_OFF)

    # ===== Toggles =====

    async def invert_image(self) -> bytes:
        """Toggle image polarity."""
        return await self.send(Command.INVERT_IMAGE)

    async def toggle_freeze_frame(self) -> bytes:
        """Toggle freeze frame."""
        return await self.send(Command.FREEZE_FRAME)

    async def toggle_color_bar(self, enabled: bool) -> bytes:
        """Show or hide the color bar overlay."""
        return await self.send(Command.COLOR_BAR_ON if enabled else Command.COLOR_BAR_OFF)

    async def toggle_osd(self, enabled: bool) -> bytes:
        """Show or hide the on-screen display."""
        return await self.send(Command.OSD_ON if enabled else Command.OSD_OFF)

    # ===== Calibration =====

    async def run_1_point_calibration(self) -> bytes:
        """Run a one-point calibration against the active NUC table."""
        return await self._calibrate(Command.CALIBRATE_1PT)

    async def run_2_point_calibration(self) -> bytes:
        """Run a two-point calibration against the active NUC table."""
        return await self._calibrate(Command.CALIBRATE_2PT)

    async def _calibrate(self, command: Command) -> bytes:
        # The active NUC value must be read before calibrating with it
        nuc_value = await self._get_mode_value(Command.NUC_GET)
        logger.debug("Running %s with NUC value %d", command.name, nuc_value)
        return await self.send(command, nuc_value, 0)

    # ===== Internals =====

    async def _get_mode_value(self, command: Command) -> int:
        payload = await self.send(command)
        if len(payload) < _MODE_WORD.size:
            raise ParseError(
                f"{command.name} response needs {_MODE_WORD.size} bytes, got {len(payload)}",
                record_type=command.name,
                raw_data=payload,
            )
        return _MODE_WORD.unpack_from(payload)[0]

    async def _get_mode(self, command: Command, options: OptionMap) -> str | UnknownMode:
        value = await self._get_mode_value(command)
        mode = options.name_for(value)
        if isinstance(mode, UnknownMode):
            logger.warning("Camera reported %s", mode)
        return mode

    def _on_connection_lost(self, exc: Exception | None) -> None:
        logger.warning("Connection to camera on %s lost", self._transport.port_name)
        self._state = CameraState.DISCONNECTED
        error = ConnectionClosedError("Connection lost")
        if exc is not None:
            error.__cause__ = exc
        self._correlator.fail_all(error)

    def _ensure_connected(self) -> None:
        """Verify the camera is connected."""
        if self._state != CameraState.CONNECTED:
            raise ConnectionError(f"Not connected (state: {self._state.name})")

    async def __aenter__(self) -> Camera:
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - close the connection."""
        await self.close()

    def __repr__(self) -> str:
        return f"Camera(state={self._state.name}, transport={self._transport.port_name})"
