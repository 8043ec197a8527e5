"""Shared fixtures and a simulated camera for tests."""

from __future__ import annotations

import asyncio
import contextlib
import struct

import pytest

from ambercam.protocol.checksums import calculate_checksum
from ambercam.transport.mock import MockTransport


class MockCamera:
    """
    Simulated camera based on bench-testing a real unit.

    Answers valid requests the way the hardware does: status bytes are
    0x00 rather than 0xFF, the footer is 0x00 0x00 0x00, and the response
    is written a few bytes at a time. Malformed requests get no response.
    """

    def __init__(self) -> None:
        self.image_inverted = False
        self.agc: int | bool = -1
        self.nuc = 1
        self.lut = 1
        self.itt = 1
        self.contrast = 100
        self.brightness = 100
        self.frozen = False
        self.cooler = True
        self.running_1pt_calibration = False
        self.running_2pt_calibration = False
        self.calibration_args: tuple[int, int] | None = None
        self.color_bar = False
        self.osd = True
        self.broken = False
        self.requests: list[tuple[int, int, int, bytes]] = []
        self._buffer = bytearray()

    def handle(self, data: bytes) -> list[bytes] | None:
        """Consume request bytes; return response chunks."""
        self._buffer.extend(data)
        chunks: list[bytes] = []
        while len(self._buffer) >= 10:
            size = struct.unpack_from("<H", self._buffer, 8)[0]
            total = 14 + size
            if len(self._buffer) < total:
                break
            packet = bytes(self._buffer[:total])
            del self._buffer[:total]
            chunks.extend(self._respond(packet, size) or [])
        return chunks or None

    def _respond(self, msg: bytes, size: int) -> list[bytes] | None:
        if msg[0] != 3 or msg[1] != 0 or msg[2] != 1 or msg[6] != 0xFF or msg[7] != 0xFF:
            return None
        if calculate_checksum(msg[: 10 + size]) != msg[10 + size]:
            return None
        if msg[11 + size : 14 + size] != bytes([2, 0, 0]):
            return None

        function, subfunction, message_id = msg[3], msg[4], msg[5]
        data = msg[10 : 10 + size]
        self.requests.append((function, subfunction, message_id, data))

        def arg(index: int = 0) -> int:
            return struct.unpack_from("<H", data, index * 2)[0]

        response = b""
        code = (function, subfunction)
        if code == (1, 0):
            self.agc = False
        elif code == (1, 1):
            self.agc = True
        elif code == (1, 2):
            response = bytes([0 if self.agc is False or self.agc == -1 else 1, 0])
        elif code == (1, 3):
            self.agc = arg()
        elif code == (3, 2):
            self.cooler = False
        elif code == (3, 3):
            self.cooler = True
        elif code == (3, 5):
            response = bytes([0xE6, 0x56, 0x63, 0x57, 0x22, 0x38, 0x57, 0x55])
        elif code == (4, 1):
            self.frozen = not self.frozen
        elif code == (4, 4):
            self.brightness += 1
        elif code == (4, 5):
            self.brightness -= 1
        elif code == (4, 6):
            self.contrast += 1
        elif code == (4, 7):
            self.contrast -= 1
        elif code == (5, 0):
            self.image_inverted = not self.image_inverted
        elif code == (5, 1):
            self.lut = arg()
        elif code == (5, 2):
            response = bytes([self.lut, 0])
        elif code == (5, 4):
            self.itt = arg()
        elif code == (5, 5):
            response = bytes([self.itt, 0])
        elif code == (5, 0x0C):
            self.color_bar = False
        elif code == (5, 0x0D):
            self.color_bar = True
        elif code == (6, 0):
            self.osd = False
        elif code == (6, 1):
            self.osd = True
        elif code == (7, 1):
            self.calibration_args = (arg(0), arg(1))
            self.running_1pt_calibration = True
        elif code == (7, 2):
            self.calibration_args = (arg(0), arg(1))
            self.running_2pt_calibration = True
        elif code == (7, 5):
            self.nuc = arg()
        elif code == (7, 6):
            response = bytes([self.nuc, 0])
        else:
            return None

        if self.broken:
            return None
        return build_response_chunks(function, subfunction, message_id, response)


def build_response(function: int, subfunction: int, sequence: int, payload: bytes = b"") -> bytes:
    """Build a response packet as the camera sends it."""
    body = bytes([3, 0, 1, function, subfunction, sequence, 0, 0]) + struct.pack("<H", len(payload)) + payload
    return body + bytes([calculate_checksum(body), 0, 0, 0])


def build_response_chunks(
    function: int, subfunction: int, sequence: int, payload: bytes = b""
) -> list[bytes]:
    """Split a response the way the camera writes it (1-3 bytes at a time)."""
    packet = build_response(function, subfunction, sequence, payload)
    chunks = [packet[0:1], packet[1:3], packet[3:5], packet[5:8], packet[8:10]]
    if payload:
        chunks.append(packet[10 : 10 + len(payload)])
    checksum_offset = 10 + len(payload)
    chunks.append(packet[checksum_offset : checksum_offset + 2])
    chunks.append(packet[checksum_offset + 2 :])
    return chunks


@contextlib.asynccontextmanager
async def serve_mock_camera(camera: MockCamera):
    """Serve a MockCamera on a local TCP port; yields the port number."""

    async def handle_client(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        try:
            while data := await reader.read(1024):
                for chunk in camera.handle(data) or []:
                    writer.write(chunk)
                    await writer.drain()
        except ConnectionError:
            pass
        finally:
            writer.close()

    server = await asyncio.start_server(handle_client, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    try:
        yield port
    finally:
        server.close()
        await server.wait_closed()


@pytest.fixture
def mock_camera():
    """Create a simulated camera."""
    return MockCamera()


@pytest.fixture
def mock_transport():
    """Create a MockTransport instance."""
    return MockTransport()


@pytest.fixture
def camera_transport(mock_camera, mock_transport):
    """Create a MockTransport answered by the simulated camera."""
    mock_transport.set_response_callback(mock_camera.handle)
    return mock_transport
