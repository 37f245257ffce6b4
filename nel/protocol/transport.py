from __future__ import annotations

import asyncio
import json
import struct
from typing import Any

import structlog

from .messages import Request

logger = structlog.get_logger()

# Frames are [4 bytes big-endian length][payload]
HEADER = struct.Struct(">I")
MAX_FRAME_SIZE = 10 * 1024 * 1024


class ProtocolError(Exception):
    """Protocol-level error."""

    pass


class FrameReader:
    """Reads length-prefixed frames from a stream, one at a time."""

    def __init__(self, reader: asyncio.StreamReader) -> None:
        self._reader = reader

    async def _read_exactly(self, size: int, what: str) -> bytes:
        try:
            return await self._reader.readexactly(size)
        except asyncio.IncompleteReadError as e:
            raise ProtocolError(f"Connection closed while reading frame {what}") from e
        except (ConnectionError, OSError) as e:
            raise ProtocolError(f"Connection lost: {e}") from e

    async def read_frame(self) -> bytes:
        """Wait for the next complete frame.

        Raises:
            ProtocolError: If the stream ends inside a frame or the frame is
                larger than ``MAX_FRAME_SIZE``
        """
        (length,) = HEADER.unpack(await self._read_exactly(HEADER.size, "length"))
        if length > MAX_FRAME_SIZE:
            raise ProtocolError(f"Frame too large: {length} bytes")
        return await self._read_exactly(length, "data")


class FrameWriter:
    """Frame writer; writes are buffered by the stream in call order."""

    def __init__(self, writer: asyncio.StreamWriter) -> None:
        self._writer = writer
        self._closed = False

    def write_frame(self, data: bytes) -> None:
        """Queue a frame on the stream without waiting for it to drain.

        Raises:
            ProtocolError: If connection is closed
        """
        if self._closed:
            raise ProtocolError("Connection closed")

        self._writer.write(HEADER.pack(len(data)) + data)

    async def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._writer.close()
            try:
                await self._writer.wait_closed()
            except (ConnectionError, OSError):
                pass


class MessageTransport:
    """JSON requests and replies over a framed stream pair."""

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        self._frame_reader = FrameReader(reader)
        self._frame_writer = FrameWriter(writer)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send_request(self, request: Request) -> None:
        """Send a request to the worker.

        Raises:
            ProtocolError: If transport is closed
        """
        if self._closed:
            raise ProtocolError("Transport closed")

        data = json.dumps(request.to_wire()).encode("utf-8")
        self._frame_writer.write_frame(data)
        logger.debug("sent_request", action=request.action.value, size=len(data))

    async def receive_reply(self) -> Any:
        """Wait for the next reply and decode it.

        Raises:
            ProtocolError: If transport is closed or the frame is not valid JSON
        """
        if self._closed:
            raise ProtocolError("Transport closed")

        frame = await self._frame_reader.read_frame()

        try:
            return json.loads(frame.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ProtocolError(f"Invalid reply frame: {e}") from e

    async def close(self) -> None:
        if not self._closed:
            self._closed = True
            await self._frame_writer.close()
