"""
Request/response correlation by sequence number.

Every request carries a one-byte sequence number which the camera echoes
in its response. The correlator allocates sequence numbers, keeps one
single-shot future per in-flight request, and resolves the future whose
sequence number matches each decoded response.

Sequence numbers wrap at 256. Responses are assumed to return long before
256 further requests have been issued; if the next number is still
pending, send() raises SequenceInUseError instead of sharing the slot.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ambercam.exceptions import SequenceInUseError, TimeoutError
from ambercam.protocol.constants import ProtocolConstants
from ambercam.protocol.packet import encode_packet
from ambercam.protocol.reassembler import PacketReassembler

if TYPE_CHECKING:
    from ambercam.transport.abc import AbstractTransport

logger = logging.getLogger(__name__)


class RequestCorrelator:
    """
    Matches responses to in-flight requests.

    One correlator serves one connection: it owns the sequence counter,
    the receive buffer (via its PacketReassembler) and the map of pending
    futures. Register data_received() as the transport's data handler.

    Multiple send() calls may be outstanding at once. Each completes when
    its own response arrives, independent of issue order.

    Example:
        >>> correlator = RequestCorrelator(transport, timeout=1.0)
        >>> transport.set_data_handler(correlator.data_received)
        >>> payload = await correlator.send(7, 6)  # NUC_GET
    """

    def __init__(
        self,
        transport: AbstractTransport,
        timeout: float = ProtocolConstants.DEFAULT_RESPONSE_TIMEOUT,
        first_sequence: int = ProtocolConstants.FIRST_SEQUENCE,
    ) -> None:
        """
        Initialize the correlator.

        Args:
            transport: Transport that request packets are written to.
            timeout: Default response timeout in seconds.
            first_sequence: Sequence number of the first request.
        """
        self._transport = transport
        self.timeout = timeout
        self._sequence = first_sequence % ProtocolConstants.SEQUENCE_MODULUS
        self._pending: dict[int, asyncio.Future[bytes]] = {}
        self._reassembler = PacketReassembler()

    @property
    def timeout(self) -> float:
        """Default response timeout in seconds."""
        return self._timeout

    @timeout.setter
    def timeout(self, value: float) -> None:
        if value <= 0:
            raise ValueError(f"Timeout must be positive, got {value}")
        self._timeout = value

    @property
    def next_sequence(self) -> int:
        """Sequence number the next request will use."""
        return self._sequence

    @property
    def pending_count(self) -> int:
        """Number of requests awaiting a response."""
        return len(self._pending)

    @property
    def reassembler(self) -> PacketReassembler:
        """The receive buffer of this connection."""
        return self._reassembler

    def is_pending(self, sequence: int) -> bool:
        """Check if a request with this sequence number is in flight."""
        return sequence in self._pending

    async def send(
        self,
        command: int,
        subcommand: int = 0,
        *args: int,
        timeout: float | None = None,
    ) -> bytes:
        """
        Send a request and wait for its response.

        Args:
            command: Function number.
            subcommand: Subfunction number.
            *args: Argument words.
            timeout: Response timeout in seconds, None for the default.

        Returns:
            The response payload (empty if the response has no data).

        Raises:
            SequenceInUseError: If the next sequence number is still pending.
            TimeoutError: If no response arrives in time.
            ConnectionClosedError: If the connection is closed meanwhile.
            TransportError: If the packet cannot be written.
        """
        effective_timeout = timeout if timeout is not None else self._timeout

        sequence = self._sequence
        if sequence in self._pending:
            raise SequenceInUseError(sequence)
        packet = encode_packet(sequence, command, subcommand, *args)
        self._allocate_sequence()

        future: asyncio.Future[bytes] = asyncio.get_running_loop().create_future()
        self._pending[sequence] = future

        try:
            logger.debug(">>> %s", packet.hex(" "))
            await self._transport.write(packet)
            return await asyncio.wait_for(future, timeout=effective_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "No response to %d/%d (seq %d) within %.3fs",
                command,
                subcommand,
                sequence,
                effective_timeout,
            )
            raise TimeoutError(
                f"Response timeout for command {command}/{subcommand} (seq {sequence})",
                timeout_seconds=effective_timeout,
            ) from None
        finally:
            if self._pending.get(sequence) is future:
                del self._pending[sequence]

    def _allocate_sequence(self) -> int:
        """Return the current sequence number and advance the counter."""
        sequence = self._sequence
        self._sequence = (sequence + 1) % ProtocolConstants.SEQUENCE_MODULUS
        return sequence

    def data_received(self, data: bytes) -> None:
        """
        Handle an inbound chunk from the transport.

        Complete packets are matched to pending requests. Responses whose
        sequence number has no pending request (already timed out, or never
        sent) are ignored.
        """
        logger.debug("<<< %s", bytes(data).hex(" "))
        for packet in self._reassembler.feed(data):
            future = self._pending.get(packet.sequence)
            if future is None or future.done():
                logger.debug("Ignoring unmatched response %r", packet)
                continue
            future.set_result(packet.payload)

    def fail_all(self, exc: BaseException) -> None:
        """
        Reject every pending request with exc.

        Args:
            exc: Exception raised from each pending send().
        """
        if self._pending:
            logger.debug("Failing %d pending request(s): %s", len(self._pending), exc)
        for future in self._pending.values():
            if not future.done():
                future.set_exception(exc)

    def __repr__(self) -> str:
        return (
            f"RequestCorrelator(next_sequence={self._sequence}, "
            f"pending={len(self._pending)}, timeout={self._timeout})"
        )
