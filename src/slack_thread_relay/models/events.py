"""
Socket Mode event models.

Three layers, each a tagged union:
  frame        hello | disconnect | events_api
  payload      event_callback | (anything else)
  event        message | (anything else)
Message events are further split on their optional `subtype`.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict


class FrameTag:
    HELLO = "hello"
    DISCONNECT = "disconnect"
    EVENTS_API = "events_api"


class PayloadTag:
    EVENT_CALLBACK = "event_callback"


class EventTag:
    MESSAGE = "message"


class MessageSubtype:
    FILE_SHARE = "file_share"


# --- frame layer ---

class ConnectionInfo(BaseModel):
    app_id: str


class HelloEvent(BaseModel):
    connection_info: ConnectionInfo
    num_connections: Optional[int] = None

    @property
    def app_id(self) -> str:
        return self.connection_info.app_id


class DisconnectEvent(BaseModel):
    reason: Optional[str] = None


class EventsApiEnvelope(BaseModel):
    """`payload` is kept raw; its shape depends on the payload's own `type`."""
    envelope_id: str
    payload: dict[str, Any]
    retry_attempt: Optional[int] = None
    retry_reason: Optional[str] = None


InboundEvent = Union[HelloEvent, DisconnectEvent, EventsApiEnvelope]


# --- message layer ---

class CommonMessageEvent(BaseModel):
    channel: str
    ts: str
    thread_ts: Optional[str] = None


class PlainMessage(CommonMessageEvent):
    """A message without a subtype."""


class FileShareMessage(CommonMessageEvent):
    """A message with subtype file_share."""


class OtherMessage(BaseModel):
    subtype: str


MessageEvent = Union[PlainMessage, FileShareMessage, OtherMessage]


# --- callback event / payload layer ---

class OtherEvent(BaseModel):
    """Catch-all for callback events that are not messages."""
    model_config = ConfigDict(extra="allow")

    type: Optional[str] = None


CallbackEvent = Union[PlainMessage, FileShareMessage, OtherMessage, OtherEvent]


class EventCallbackPayload(BaseModel):
    event_id: str
    event: CallbackEvent
    team_id: Optional[str] = None
    event_time: Optional[int] = None


class OtherPayload(BaseModel):
    """Catch-all for Events API payloads other than event_callback."""
    model_config = ConfigDict(extra="allow")

    type: Optional[str] = None


EventsApiPayload = Union[EventCallbackPayload, OtherPayload]
