"""
Exception hierarchy for ambercam.

All exceptions inherit from AmberCamError, providing a clean hierarchy
for error handling:

1. Protocol errors (framing, checksum, sequence reuse) are distinct from
   connection errors
2. Timeouts are surfaced only to the request that expired
3. Option errors are raised before any bytes are sent
4. All exceptions provide meaningful error messages
"""

from __future__ import annotations

from collections.abc import Sequence


class AmberCamError(Exception):
    """
    Base exception for all ambercam errors.

    All library-specific exceptions inherit from this class, allowing
    callers to catch all ambercam errors with a single except clause.
    """

    pass


class ProtocolError(AmberCamError):
    """
    Protocol-level error.

    Raised when the protocol is violated, such as:
    - Malformed or truncated packet
    - Checksum mismatch
    - Sequence number collision
    """

    pass


class ChecksumError(ProtocolError):
    """
    Checksum validation failure.

    Raised when a received packet's checksum byte doesn't match the sum of
    the bytes preceding it. The stream reassembler drops such packets.
    """

    def __init__(
        self,
        message: str = "Checksum validation failed",
        *,
        expected: int | None = None,
        received: int | None = None,
    ) -> None:
        super().__init__(message)
        self.expected = expected
        self.received = received

    def __str__(self) -> str:
        base = super().__str__()
        if self.expected is not None and self.received is not None:
            return f"{base} (expected 0x{self.expected:02X}, got 0x{self.received:02X})"
        return base


class FrameError(ProtocolError):
    """
    Packet framing error.

    Raised when a buffer is too small to hold the packet it declares.
    """

    pass


class SequenceInUseError(ProtocolError):
    """
    Sequence number collision.

    Raised when the next sequence number is still held by a pending
    request, i.e. 256 requests were issued while one was unanswered.
    """

    def __init__(self, sequence: int) -> None:
        super().__init__(f"Sequence number {sequence} is still pending")
        self.sequence = sequence


class TimeoutError(AmberCamError):  # noqa: A001 - intentionally shadows builtin
    """
    Response timeout.

    Raised when no response with the request's sequence number arrives
    within the configured window.
    """

    def __init__(
        self,
        message: str = "Response timeout",
        *,
        timeout_seconds: float | None = None,
    ) -> None:
        super().__init__(message)
        self.timeout_seconds = timeout_seconds

    def __str__(self) -> str:
        base = super().__str__()
        if self.timeout_seconds is not None:
            return f"{base} (after {self.timeout_seconds:.3f}s)"
        return base


class ConnectionError(AmberCamError):  # noqa: A001 - intentionally shadows builtin
    """
    Camera connection error.

    Raised when:
    - Operating on a camera that is not connected
    - The connection is closed or lost while requests are pending
    """

    pass


class ConnectionClosedError(ConnectionError):
    """
    Pending request rejected because the connection was closed.
    """

    def __init__(self, message: str = "Connection closed") -> None:
        super().__init__(message)


class InvalidOptionError(AmberCamError, ValueError):
    """
    Unrecognized mode name.

    Raised by mode setters before anything is written to the transport.
    The options attribute lists every valid name in table order.
    """

    def __init__(self, option: object, options: Sequence[str]) -> None:
        self.option = option
        self.options = list(options)
        listed = ", ".join(f'"{name}"' for name in self.options)
        super().__init__(f'Option "{option}" is invalid. Available options are [{listed}]')


class ParseError(AmberCamError):
    """
    Response payload parsing error.

    Raised when a response payload is too short for the value it should
    carry.
    """

    def __init__(
        self,
        message: str,
        *,
        record_type: str | None = None,
        raw_data: bytes | None = None,
    ) -> None:
        super().__init__(message)
        self.record_type = record_type
        self.raw_data = raw_data

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.record_type:
            parts.append(f"record_type={self.record_type}")
        if self.raw_data is not None:
            parts.append(f"data={self.raw_data.hex()}")
        return " ".join(parts)


class TransportError(AmberCamError):
    """
    Transport-level error.

    Raised for low-level transport issues:
    - Socket or serial port errors
    - Writing to a closed transport
    """

    pass
