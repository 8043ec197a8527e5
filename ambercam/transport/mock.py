"""
Mock transport for testing.

This module provides a mock transport implementation that allows testing
the camera client without actual hardware. Inbound bytes are injected with
feed() or generated per request by a response callback, which may split a
response into any number of chunks to exercise stream reassembly.

Example:
    >>> from ambercam.transport import MockTransport
    >>> from ambercam import Camera
    >>>
    >>> mock = MockTransport()
    >>> mock.set_response_callback(simulated_camera.handle)
    >>>
    >>> async with Camera(mock) as camera:
    ...     await camera.set_nuc("hot")
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from ambercam.exceptions import TransportError
from ambercam.transport.abc import AbstractTransport

ResponseCallback = Callable[[bytes], bytes | Iterable[bytes] | None]


class MockTransport(AbstractTransport):
    """
    Mock transport for testing without hardware.

    Records every written packet for verification and delivers injected
    bytes to the registered data handler synchronously.

    Attributes:
        written_data: List of all bytes written to the transport.

    Example:
        >>> mock = MockTransport()
        >>> received = []
        >>> mock.set_data_handler(received.append)
        >>>
        >>> async with mock:
        ...     await mock.write(b"test")
        ...     mock.feed(b"\\x03\\x00")
        ...     assert mock.written_data == [b"test"]
        ...     assert received == [b"\\x03\\x00"]
    """

    def __init__(self, port_name: str = "mock://test") -> None:
        """
        Initialize the mock transport.

        Args:
            port_name: Identifier for the mock transport.
        """
        super().__init__()
        self._port_name = port_name
        self._is_open = False
        self._written_data: list[bytes] = []
        self._response_callback: ResponseCallback | None = None
        self._write_error: Exception | None = None

    @property
    def is_open(self) -> bool:
        """Check if the mock transport is open."""
        return self._is_open

    @property
    def port_name(self) -> str:
        """Get the mock port name."""
        return self._port_name

    @property
    def written_data(self) -> list[bytes]:
        """Get all data written to the transport."""
        return self._written_data.copy()

    @property
    def last_written(self) -> bytes | None:
        """Get the most recently written data."""
        return self._written_data[-1] if self._written_data else None

    def set_response_callback(self, callback: ResponseCallback | None) -> None:
        """
        Set a callback to dynamically generate responses.

        The callback receives each written packet and returns the response
        as bytes, as an iterable of chunks delivered one by one, or None
        for no response.

        Args:
            callback: Function that takes written bytes and returns response.
        """
        self._response_callback = callback

    def fail_writes(self, error: Exception | None) -> None:
        """
        Make subsequent writes raise TransportError.

        Args:
            error: Underlying cause, or None to restore normal writes.
        """
        self._write_error = error

    def feed(self, data: bytes) -> None:
        """
        Inject inbound bytes as if received from the camera.

        Args:
            data: Chunk delivered to the data handler unchanged.

        Raises:
            TransportError: If transport is not open.
        """
        if not self._is_open:
            raise TransportError("Mock transport not open")
        self._deliver(bytes(data))

    def drop_connection(self, error: Exception | None = None) -> None:
        """Simulate the peer closing the connection."""
        self._is_open = False
        self._connection_lost(error)

    def clear(self) -> None:
        """Clear the written data history."""
        self._written_data.clear()

    async def open(self) -> None:
        """Open the mock transport."""
        if self._is_open:
            raise TransportError("Mock transport already open")
        self._is_open = True

    async def close(self) -> None:
        """Close the mock transport."""
        self._is_open = False

    async def write(self, data: bytes) -> None:
        """
        Write data to the mock transport.

        Records the written data and delivers any callback-generated
        response.

        Args:
            data: Bytes to write.

        Raises:
            TransportError: If transport is not open or writes are failing.
        """
        if not self._is_open:
            raise TransportError("Mock transport not open")
        if self._write_error is not None:
            raise TransportError(f"Write failed: {self._write_error}") from self._write_error

        self._written_data.append(bytes(data))

        if self._response_callback is None:
            return

        response = self._response_callback(bytes(data))
        if response is None:
            return
        if isinstance(response, (bytes, bytearray)):
            response = [response]
        for chunk in response:
            self._deliver(bytes(chunk))

    def assert_written(self, expected: bytes, index: int = -1) -> None:
        """
        Assert that specific data was written.

        Args:
            expected: Expected bytes.
            index: Index in written_data list (-1 for last).

        Raises:
            AssertionError: If data doesn't match.
        """
        if not self._written_data:
            raise AssertionError("No data written to mock transport")

        actual = self._written_data[index]
        if actual != expected:
            raise AssertionError(f"Written data mismatch: expected {expected!r}, got {actual!r}")

    def assert_write_count(self, expected: int) -> None:
        """
        Assert number of write operations.

        Args:
            expected: Expected number of writes.

        Raises:
            AssertionError: If count doesn't match.
        """
        actual = len(self._written_data)
        if actual != expected:
            raise AssertionError(f"Write count mismatch: expected {expected}, got {actual}")

    def __repr__(self) -> str:
        status = "open" if self._is_open else "closed"
        return f"MockTransport({self._port_name!r}, {status})"
