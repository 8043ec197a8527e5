"""
Protocol layer for Amber Radiance control communication.

This module contains the low-level protocol handling:
- Command table and protocol constants
- Checksum calculation and validation
- Packet encoding/decoding
- Stream reassembly
- Request/response correlation
- Mode option maps
"""

from ambercam.protocol.checksums import append_checksum, calculate_checksum, validate_checksum
from ambercam.protocol.constants import Command, ProtocolConstants
from ambercam.protocol.correlator import RequestCorrelator
from ambercam.protocol.options import (
    AGC_MODES,
    ITT_MODES,
    LUT_MODES,
    NUC_MODES,
    OptionMap,
    UnknownMode,
    validate_option,
)
from ambercam.protocol.packet import (
    DecodedPacket,
    decode_packet,
    encode_packet,
    packet_size,
    read_data_size,
)
from ambercam.protocol.reassembler import PacketReassembler

__all__ = [
    # Constants
    "Command",
    "ProtocolConstants",
    # Checksums
    "calculate_checksum",
    "validate_checksum",
    "append_checksum",
    # Packets
    "DecodedPacket",
    "encode_packet",
    "decode_packet",
    "packet_size",
    "read_data_size",
    # Stream
    "PacketReassembler",
    "RequestCorrelator",
    # Options
    "OptionMap",
    "UnknownMode",
    "validate_option",
    "AGC_MODES",
    "ITT_MODES",
    "NUC_MODES",
    "LUT_MODES",
]
