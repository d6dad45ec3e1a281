"""
Duplex stream handle over an aiohttp client websocket.

Automatic ping replies are disabled so that pings reach the caller as frames
and are answered explicitly.
"""

import asyncio
import enum
import logging
from typing import Any, Optional, Protocol

import aiohttp

from slack_thread_relay.errors import ConnectionError, StreamError

logger = logging.getLogger(__name__)


class FrameType(str, enum.Enum):
    PING = "ping"
    PONG = "pong"
    TEXT = "text"
    BINARY = "binary"
    CLOSE = "close"


class Frame:
    __slots__ = ("type", "data")

    def __init__(self, type: FrameType, data: Any = None):
        self.type = type
        self.data = data

    @classmethod
    def ping(cls, payload: bytes = b"") -> "Frame":
        return cls(FrameType.PING, payload)

    @classmethod
    def pong(cls, payload: bytes = b"") -> "Frame":
        return cls(FrameType.PONG, payload)

    @classmethod
    def text(cls, payload: str) -> "Frame":
        return cls(FrameType.TEXT, payload)

    @classmethod
    def binary(cls, payload: bytes) -> "Frame":
        return cls(FrameType.BINARY, payload)

    @classmethod
    def close(cls, reason: Optional[str] = None) -> "Frame":
        return cls(FrameType.CLOSE, reason)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Frame):
            return NotImplemented
        return self.type == other.type and self.data == other.data

    def __repr__(self) -> str:
        return f"Frame(type={self.type.value!r}, data={self.data!r})"


class FrameStream(Protocol):
    """What the supervisor needs from a connection."""

    async def receive_frame(self) -> Frame: ...

    async def send_frame(self, frame: Frame) -> None: ...

    async def close(self) -> None: ...


_CLOSED_TYPES = (aiohttp.WSMsgType.CLOSE, aiohttp.WSMsgType.CLOSING, aiohttp.WSMsgType.CLOSED)


class SocketConnection:
    """One connection epoch. Never reused after close()."""

    def __init__(self, session: aiohttp.ClientSession, ws: aiohttp.ClientWebSocketResponse):
        self._session = session
        self._ws = ws

    @property
    def closed(self) -> bool:
        return self._ws.closed

    async def receive_frame(self) -> Frame:
        try:
            msg = await self._ws.receive()
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise StreamError(f"receive failed: {e!r}") from e

        if msg.type == aiohttp.WSMsgType.TEXT:
            return Frame.text(msg.data)
        if msg.type == aiohttp.WSMsgType.PING:
            return Frame.ping(msg.data)
        if msg.type == aiohttp.WSMsgType.PONG:
            return Frame.pong(msg.data)
        if msg.type == aiohttp.WSMsgType.BINARY:
            return Frame.binary(msg.data)
        if msg.type in _CLOSED_TYPES:
            return Frame.close(msg.extra if isinstance(msg.extra, str) else None)
        if msg.type == aiohttp.WSMsgType.ERROR:
            raise StreamError(f"receive failed: {msg.data!r}")
        raise StreamError(f"unexpected websocket message type: {msg.type!r}")

    async def send_frame(self, frame: Frame) -> None:
        try:
            if frame.type == FrameType.PONG:
                await self._ws.pong(frame.data or b"")
            elif frame.type == FrameType.TEXT:
                await self._ws.send_str(frame.data)
            else:
                raise ValueError(f"cannot send {frame.type.value} frames")
        except (aiohttp.ClientError, ConnectionResetError) as e:
            raise StreamError(f"send failed: {e!r}") from e

    async def close(self) -> None:
        try:
            if not self._ws.closed:
                await self._ws.close()
        finally:
            if not self._session.closed:
                await self._session.close()


async def open_socket(url: str) -> SocketConnection:
    """Open a websocket against a Socket Mode URL."""
    session = aiohttp.ClientSession()
    try:
        ws = await session.ws_connect(url, autoping=False, autoclose=True)
    except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
        await session.close()
        raise ConnectionError(f"failed to open websocket: {e!r}") from e
    logger.debug("opened websocket to %s", url.split("?", 1)[0])
    return SocketConnection(session, ws)
