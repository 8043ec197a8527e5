"""
8-bit additive checksum calculation and validation.

The control protocol uses a simple additive checksum:
- Sum every header and data byte
- Keep only the lower 8 bits (modulo 256)
- Transmit as a single raw byte

The checksum byte is the first byte of the 4-byte packet footer.
"""

from __future__ import annotations


def calculate_checksum(data: bytes | bytearray | memoryview) -> int:
    """
    Calculate 8-bit additive checksum over the specified data.

    Algorithm: Sum all bytes, keep only lower 8 bits.

    Args:
        data: Header and data block bytes (everything before the checksum).

    Returns:
        8-bit checksum value (0-255).

    Example:
        >>> calculate_checksum(bytes([0x03, 0x00, 0x01, 0x04, 0x05]))
        13
    """
    return sum(data) & 0xFF


def validate_checksum(
    packet: bytes | bytearray | memoryview,
    checksum_offset: int,
) -> bool:
    """
    Validate that the checksum byte matches the bytes preceding it.

    Args:
        packet: Packet bytes including the checksum byte.
        checksum_offset: Offset of the checksum byte in the packet.

    Returns:
        True if checksum is valid, False otherwise (including when the
        packet is too short to contain the checksum byte).
    """
    if len(packet) <= checksum_offset:
        return False
    return calculate_checksum(packet[:checksum_offset]) == packet[checksum_offset]


def append_checksum(data: bytes | bytearray) -> bytes:
    """
    Calculate checksum and append it as a single raw byte.

    Args:
        data: Data to checksum.

    Returns:
        Original data with the checksum byte appended.

    Example:
        >>> append_checksum(b"\\x01\\x02")
        b'\\x01\\x02\\x03'
    """
    return bytes(data) + bytes([calculate_checksum(data)])
