"""
Stream reassembly of response packets.

The transport delivers bytes in arbitrary chunks: the camera itself
writes a response one to three bytes at a time, and sockets may merge
several responses into one read. The reassembler keeps the unconsumed
tail of the stream and slices complete packets off its front using the
data length declared at offset 8.
"""

from __future__ import annotations

import logging

from ambercam.exceptions import ChecksumError
from ambercam.protocol.constants import ProtocolConstants
from ambercam.protocol.packet import DecodedPacket, decode_packet, packet_size, read_data_size

logger = logging.getLogger(__name__)


class PacketReassembler:
    """
    Accumulates inbound bytes and extracts complete packets.

    The reassembler is purely reactive: feed() is called for each inbound
    chunk and returns whatever packets became complete. Incomplete data
    stays buffered until more bytes arrive. Packets that fail checksum
    validation are dropped and counted; they never raise out of feed().

    Example:
        >>> reassembler = PacketReassembler()
        >>> reassembler.feed(packet[:5])
        []
        >>> reassembler.feed(packet[5:])
        [DecodedPacket(seq=1, 4/5, payload=)]
    """

    def __init__(self) -> None:
        self._buffer = bytearray()
        self._dropped_packets = 0

    @property
    def pending_bytes(self) -> int:
        """Number of buffered bytes not yet consumed as a packet."""
        return len(self._buffer)

    @property
    def dropped_packets(self) -> int:
        """Number of packets discarded because of checksum mismatches."""
        return self._dropped_packets

    def feed(self, data: bytes | bytearray | memoryview) -> list[DecodedPacket]:
        """
        Append a chunk and extract every packet now complete.

        Args:
            data: Raw bytes as received from the transport.

        Returns:
            Decoded packets in stream order (possibly empty).
        """
        self._buffer.extend(data)
        packets: list[DecodedPacket] = []

        while len(self._buffer) >= ProtocolConstants.PAYLOAD_OFFSET:
            data_size = read_data_size(self._buffer)
            total = packet_size(data_size)
            if len(self._buffer) < total:
                break

            raw = bytes(self._buffer[:total])
            del self._buffer[:total]

            try:
                packets.append(decode_packet(raw, data_size))
            except ChecksumError as e:
                self._dropped_packets += 1
                logger.warning("Dropping packet %s: %s", raw.hex(), e)

        return packets

    def clear(self) -> None:
        """Discard any buffered partial packet."""
        self._buffer.clear()

    def __repr__(self) -> str:
        return (
            f"PacketReassembler(pending_bytes={len(self._buffer)}, "
            f"dropped_packets={self._dropped_packets})"
        )
