"""
Shared asyncio stream handling for socket and serial transports.

Both the TCP and serial transports obtain an (asyncio.StreamReader,
asyncio.StreamWriter) pair; only the way the pair is opened differs.
StreamTransport owns the pair, writes packets through the writer and runs
one background task that reads whatever bytes are available and hands
them to the data handler.
"""

from __future__ import annotations

import asyncio
import logging
from abc import abstractmethod

from ambercam.exceptions import TransportError
from ambercam.protocol.constants import ProtocolConstants
from ambercam.transport.abc import AbstractTransport

logger = logging.getLogger(__name__)


class StreamTransport(AbstractTransport):
    """
    Base class for transports built on asyncio streams.

    Subclasses implement _open_streams() and port_name.
    """

    def __init__(self, read_chunk_size: int = ProtocolConstants.READ_CHUNK_SIZE) -> None:
        super().__init__()
        self._read_chunk_size = read_chunk_size
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._read_task: asyncio.Task[None] | None = None

    @abstractmethod
    async def _open_streams(self) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        """
        Open the underlying connection.

        Raises:
            TransportError: If the connection cannot be established.
        """
        ...

    @property
    def is_open(self) -> bool:
        """Check if the connection is currently open."""
        return (
            self._writer is not None
            and not self._writer.is_closing()
            and self._reader is not None
        )

    async def open(self) -> None:
        """
        Open the connection and start the reader task.

        Raises:
            TransportError: If the connection cannot be established.
        """
        if self.is_open:
            return

        self._reader, self._writer = await self._open_streams()
        self._read_task = asyncio.create_task(
            self._read_loop(self._reader), name=f"ambercam-read-{self.port_name}"
        )
        logger.debug("Opened %s", self.port_name)

    async def close(self) -> None:
        """
        Stop the reader task and close the connection.

        Safe to call multiple times.
        """
        task, self._read_task = self._read_task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        writer, self._writer = self._writer, None
        self._reader = None
        if writer is not None:
            writer.close()
            try:
                await writer.wait_closed()
            except OSError as e:
                logger.debug("Error while closing %s: %s", self.port_name, e)
            logger.debug("Closed %s", self.port_name)

    async def write(self, data: bytes) -> None:
        """
        Write data and wait for the stream to drain.

        Raises:
            TransportError: If the connection is not open or write fails.
        """
        if not self.is_open:
            raise TransportError(f"{self.port_name} is not open")

        try:
            self._writer.write(data)
            await self._writer.drain()
        except OSError as e:
            raise TransportError(f"Write to {self.port_name} failed: {e}") from e

    async def _read_loop(self, reader: asyncio.StreamReader) -> None:
        """Deliver received chunks until EOF, error or cancellation."""
        error: Exception | None = None
        try:
            while True:
                data = await reader.read(self._read_chunk_size)
                if not data:
                    logger.warning("%s closed by peer", self.port_name)
                    break
                self._deliver(data)
        except OSError as e:
            logger.error("Read from %s failed: %s", self.port_name, e)
            error = TransportError(f"Read from {self.port_name} failed: {e}")
            error.__cause__ = e

        # Only reached when the connection dropped on its own
        self._read_task = None
        if self._writer is not None:
            self._writer.close()
        self._reader = None
        self._writer = None
        self._connection_lost(error)
