"""
Connection supervisor: keeps a Socket Mode connection alive and dispatches its frames.

Lifecycle:
  handshake (apps.connections.open) -> open stream -> receive loop
  receive loop ends on close, disconnect, or stream error -> close stream -> handshake ...

Frames are handled one at a time in arrival order. Every events_api envelope is
acknowledged exactly once after it has been handled, whether or not it led to
a reaction and whether or not the reaction succeeded. Failures of a single
event are logged and do not touch the connection.
"""

import logging
from typing import Awaitable, Callable

import httpx

from slack_thread_relay.api import SlackAPI
from slack_thread_relay.classifier import find_threaded_message
from slack_thread_relay.errors import DecodeError, ReactionError, StreamError
from slack_thread_relay.log import EventLogger
from slack_thread_relay.models.events import DisconnectEvent, EventCallbackPayload, EventsApiEnvelope, HelloEvent
from slack_thread_relay.reactions import PermalinkReposter
from slack_thread_relay.transport.envelope import build_ack, decode_frame, decode_payload
from slack_thread_relay.transport.websocket import Frame, FrameStream, FrameType, open_socket

logger = logging.getLogger(__name__)

Connector = Callable[[str], Awaitable[FrameStream]]


class ConnectionSupervisor:
    def __init__(
        self,
        api: SlackAPI,
        reposter: PermalinkReposter,
        connect: Connector = open_socket,
        debug_reconnects: bool = False,
    ):
        self._api = api
        self._reposter = reposter
        self._connect = connect
        self._debug_reconnects = debug_reconnects
        self._epoch = 0

    @property
    def epoch(self) -> int:
        """Number of connections opened so far."""
        return self._epoch

    async def run(self) -> None:
        """Run forever. Returns only by raising (HandshakeError, ConnectionError)."""
        while True:
            stream = await self._handshake()
            log = EventLogger(logger, {"epoch": self._epoch})
            try:
                await self._receive_loop(stream, log)
            finally:
                await stream.close()
            log.info("start reconnecting")

    async def _handshake(self) -> FrameStream:
        url = await self._api.open_connection()
        if self._debug_reconnects:
            url = str(httpx.URL(url).copy_add_param("debug_reconnects", "true"))
        stream = await self._connect(url)
        self._epoch += 1
        EventLogger(logger, {"epoch": self._epoch}).info("connected to WebSocket endpoint", fields={"host": httpx.URL(url).host})
        return stream

    async def _receive_loop(self, stream: FrameStream, log: EventLogger) -> None:
        while True:
            try:
                frame = await stream.receive_frame()
                if not await self.handle_frame(stream, frame, log):
                    return
            except StreamError as e:
                log.warning(f"stream failed, closing: {e}")
                return

    async def handle_frame(self, stream: FrameStream, frame: Frame, log: EventLogger) -> bool:
        """Handle one frame. Returns False when the connection should be dropped."""
        if frame.type == FrameType.PING:
            log.debug("send a pong in response to ping", fields={"payload": frame.data})
            await stream.send_frame(Frame.pong(frame.data))
            return True
        if frame.type == FrameType.PONG:
            log.debug("received a pong message", fields={"payload": frame.data})
            return True
        if frame.type == FrameType.TEXT:
            return await self.handle_text(stream, frame.data, log)
        if frame.type == FrameType.BINARY:
            log.info("ignore binary message", fields={"size": len(frame.data or b"")})
            return True
        log.info("received a close message, closing the stream", fields={"reason": frame.data})
        return False

    async def handle_text(self, stream: FrameStream, text: str, log: EventLogger) -> bool:
        log.debug("received a text message", fields={"payload": text})
        try:
            event = decode_frame(text)
        except DecodeError as e:
            log.error(f"dropping undecodable frame: {e}")
            return True

        if isinstance(event, HelloEvent):
            log.info("hello", fields={"app_id": event.app_id, "num_connections": event.num_connections})
            return True
        if isinstance(event, DisconnectEvent):
            log.info("disconnect is requested", fields={"reason": event.reason})
            return False

        elog = log.bind(envelope_id=event.envelope_id)
        if event.retry_attempt:
            elog.info("redelivered envelope", fields={"retry_attempt": event.retry_attempt, "retry_reason": event.retry_reason})
        await self.dispatch(event, elog)

        elog.info("send an acknowledge")
        await stream.send_frame(Frame.text(build_ack(event.envelope_id)))
        return True

    async def dispatch(self, envelope: EventsApiEnvelope, log: EventLogger) -> None:
        """Decode, classify and react to one envelope. Never raises for per-event failures."""
        try:
            payload = decode_payload(envelope.payload)
            if isinstance(payload, EventCallbackPayload):
                log = log.bind(event_id=payload.event_id)
            ref = find_threaded_message(payload, log)
            if ref is None:
                return
            await self._reposter.react(ref.channel, ref.message_ts, log)
        except DecodeError as e:
            log.error(f"dropping undecodable payload: {e}")
        except ReactionError as e:
            log.error(f"reaction failed: {e}", fields={"response": (e.details or {}).get("response")})
