"""
Amber Radiance control protocol command table and constants.

Every command packet names a function (command) and a subfunction
(subcommand). The pairs below are the complete set understood by the
camera firmware.
"""

from __future__ import annotations

from enum import Enum
from typing import Final


class Command(Enum):
    """
    Command table: operation name to (command, subcommand) pair.

    Example:
        >>> Command.NUC_SET.command, Command.NUC_SET.subcommand
        (7, 5)
    """

    # ===== Automatic Gain Control =====

    AGC_OFF = (1, 0)
    AGC_ON = (1, 1)
    AGC_GET = (1, 2)
    AGC_SET = (1, 3)

    # ===== Cryo Cooler / Status =====

    COOLER_OFF = (3, 2)
    COOLER_ON = (3, 3)
    STATUS_GET = (3, 5)

    # ===== Image Adjustment =====

    FREEZE_FRAME = (4, 1)
    BRIGHTNESS_UP = (4, 4)
    BRIGHTNESS_DOWN = (4, 5)
    CONTRAST_UP = (4, 6)
    CONTRAST_DOWN = (4, 7)

    # ===== Display Tables =====

    INVERT_IMAGE = (5, 0)
    LUT_SET = (5, 1)
    LUT_GET = (5, 2)
    ITT_SET = (5, 4)
    ITT_GET = (5, 5)
    COLOR_BAR_OFF = (5, 0x0C)
    COLOR_BAR_ON = (5, 0x0D)

    # ===== On-Screen Display =====

    OSD_OFF = (6, 0)
    OSD_ON = (6, 1)

    # ===== Non-Uniformity Correction =====

    CALIBRATE_1PT = (7, 1)
    CALIBRATE_2PT = (7, 2)
    NUC_SET = (7, 5)
    NUC_GET = (7, 6)

    @property
    def command(self) -> int:
        """Function number (header byte 3)."""
        return self.value[0]

    @property
    def subcommand(self) -> int:
        """Subfunction number (header byte 4)."""
        return self.value[1]

    def __repr__(self) -> str:
        return f"<Command.{self.name}: {self.command}/{self.subcommand}>"


class ProtocolConstants:
    """
    Amber Radiance protocol constants.

    Contains fixed header/footer values, packet layout offsets, timing
    defaults and transport settings.
    """

    # ===== Header Constants =====

    VERSION_MAJOR: Final[int] = 0x03
    """Protocol major revision (header byte 0)."""

    VERSION_MINOR: Final[int] = 0x00
    """Protocol minor revision (header byte 1)."""

    PROCESS_ID: Final[int] = 0x01
    """Process identifier (header byte 2)."""

    I_STATUS: Final[int] = 0xFF
    """Status byte A sent in requests (header byte 6)."""

    C_STATUS: Final[int] = 0xFF
    """Status byte B sent in requests (header byte 7)."""

    FOOTER_RESERVED: Final[bytes] = bytes([0x02, 0x00, 0x00])
    """Reserved bytes following the checksum in requests."""

    # ===== Packet Layout =====

    HEADER_SIZE: Final[int] = 8
    """Fixed header length in bytes."""

    LENGTH_PREFIX_SIZE: Final[int] = 2
    """Little-endian data length field following the header."""

    FOOTER_SIZE: Final[int] = 4
    """Checksum byte plus three reserved bytes."""

    SEQUENCE_OFFSET: Final[int] = 5
    """Offset of the sequence number in the header."""

    DATA_SIZE_OFFSET: Final[int] = 8
    """Offset of the data length field."""

    PAYLOAD_OFFSET: Final[int] = 10
    """Offset of the first payload byte."""

    MIN_PACKET_SIZE: Final[int] = 14
    """Header + length prefix + footer, with no payload."""

    SEQUENCE_MODULUS: Final[int] = 256
    """Sequence numbers wrap at this value."""

    FIRST_SEQUENCE: Final[int] = 1
    """Sequence number of the first packet on a connection."""

    # ===== Timing Constants (in seconds) =====

    DEFAULT_RESPONSE_TIMEOUT: Final[float] = 1.0
    """Default per-request response timeout."""

    # ===== Transport Configuration =====

    DEFAULT_BAUD_RATE: Final[int] = 38400
    """Default baud rate of the camera's serial control port."""

    DEFAULT_TCP_PORT: Final[int] = 53000
    """Default TCP port of serial-to-Ethernet bridges used with the camera."""

    READ_CHUNK_SIZE: Final[int] = 1024
    """Maximum bytes requested per stream read."""
