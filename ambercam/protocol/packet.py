"""
Amber Radiance packet encoding and decoding.

Packet layout (all multi-byte fields little-endian):

    offset  size  field
    0       1     major revision (0x03)
    1       1     minor revision (0x00)
    2       1     process id (0x01)
    3       1     function number (command)
    4       1     subfunction number (subcommand)
    5       1     sequence number (wraps at 256)
    6       1     IStatus (0xFF in requests)
    7       1     CStatus (0xFF in requests)
    8       2     data byte count N
    10      N     data (16-bit words)
    10+N    1     checksum: sum of bytes 0..9+N, modulo 256
    11+N    3     reserved (0x02 0x00 0x00 in requests)

A packet is therefore always 14 + N bytes long. Requests without
arguments still carry the 2-byte length field, set to zero.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from ambercam.exceptions import ChecksumError, FrameError
from ambercam.protocol.checksums import calculate_checksum
from ambercam.protocol.constants import ProtocolConstants

_HEADER = struct.Struct("<8B")
_DATA_SIZE = struct.Struct("<H")
_WORD = struct.Struct("<H")


@dataclass(frozen=True)
class DecodedPacket:
    """
    A validated response packet.

    Attributes:
        sequence: Sequence number echoed from the originating request.
        command: Function number.
        subcommand: Subfunction number.
        payload: Data block contents (empty when the packet carries none).
    """

    sequence: int
    command: int
    subcommand: int
    payload: bytes

    def __repr__(self) -> str:
        return (
            f"DecodedPacket(seq={self.sequence}, "
            f"{self.command}/{self.subcommand}, payload={self.payload.hex()})"
        )


def encode_packet(sequence: int, command: int, subcommand: int = 0, *words: int) -> bytes:
    """
    Build a complete request packet.

    Args:
        sequence: Sequence number (0-255).
        command: Function number (0-255).
        subcommand: Subfunction number (0-255).
        *words: Arguments, each encoded as a little-endian 16-bit word.

    Returns:
        Packet bytes, 14 + 2 * len(words) long.

    Raises:
        ValueError: If a header field is not a byte or an argument is not
            an unsigned 16-bit value.

    Example:
        >>> encode_packet(1, 4, 5).hex()
        '030001040501ffff00000c020000'
    """
    for field_name, value in (("sequence", sequence), ("command", command), ("subcommand", subcommand)):
        if not 0 <= value <= 0xFF:
            raise ValueError(f"{field_name} must be 0-255, got {value}")
    for word in words:
        if not 0 <= word <= 0xFFFF:
            raise ValueError(f"Argument words must be 0-65535, got {word}")

    header = _HEADER.pack(
        ProtocolConstants.VERSION_MAJOR,
        ProtocolConstants.VERSION_MINOR,
        ProtocolConstants.PROCESS_ID,
        command,
        subcommand,
        sequence,
        ProtocolConstants.I_STATUS,
        ProtocolConstants.C_STATUS,
    )
    data = _DATA_SIZE.pack(len(words) * _WORD.size) + b"".join(_WORD.pack(w) for w in words)

    body = header + data
    return body + bytes([calculate_checksum(body)]) + ProtocolConstants.FOOTER_RESERVED


def read_data_size(buffer: bytes | bytearray | memoryview) -> int:
    """
    Read the declared data byte count from a (possibly partial) packet.

    Args:
        buffer: At least the first 10 bytes of a packet.

    Returns:
        The little-endian 16-bit value at offset 8.
    """
    return _DATA_SIZE.unpack_from(buffer, ProtocolConstants.DATA_SIZE_OFFSET)[0]


def packet_size(data_size: int) -> int:
    """Total packet length for a data block of data_size bytes."""
    return ProtocolConstants.MIN_PACKET_SIZE + data_size


def decode_packet(packet: bytes | bytearray | memoryview, data_size: int) -> DecodedPacket:
    """
    Validate and decode a response packet.

    Only the checksum is verified. The camera answers with status bytes
    and reserved footer bytes that differ from the request constants, so
    those are not checked.

    Args:
        packet: Packet bytes, starting at the major revision byte.
        data_size: Declared data byte count (header bytes 8-9).

    Returns:
        The decoded packet.

    Raises:
        FrameError: If the buffer does not reach the checksum byte.
        ChecksumError: If the checksum byte doesn't match.
    """
    checksum_offset = ProtocolConstants.PAYLOAD_OFFSET + data_size
    if len(packet) <= checksum_offset:
        raise FrameError(
            f"Packet too short: need {checksum_offset + 1} bytes, have {len(packet)}"
        )

    expected = calculate_checksum(packet[:checksum_offset])
    received = packet[checksum_offset]
    if expected != received:
        raise ChecksumError("Incorrect checksum", expected=expected, received=received)

    return DecodedPacket(
        sequence=packet[ProtocolConstants.SEQUENCE_OFFSET],
        command=packet[3],
        subcommand=packet[4],
        payload=bytes(packet[ProtocolConstants.PAYLOAD_OFFSET:checksum_offset]),
    )
