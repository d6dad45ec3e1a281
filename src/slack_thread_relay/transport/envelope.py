"""
Envelope decoding and acknowledgment construction.

Each layer reads its discriminator first and dispatches through a table of
per-variant parsers. The outer frame layer rejects unknown tags; every inner
layer maps unknown (or missing) tags to its catch-all variant instead.
"""

import json
from typing import Any, Callable, Optional

from pydantic import BaseModel, ValidationError

from slack_thread_relay.errors import DecodeError
from slack_thread_relay.models.events import (
    CallbackEvent,
    DisconnectEvent,
    EventCallbackPayload,
    EventsApiEnvelope,
    EventsApiPayload,
    EventTag,
    FileShareMessage,
    FrameTag,
    HelloEvent,
    InboundEvent,
    MessageEvent,
    MessageSubtype,
    OtherEvent,
    OtherMessage,
    OtherPayload,
    PayloadTag,
    PlainMessage,
)


def _validate(model: type[BaseModel], raw: dict[str, Any], what: str) -> Any:
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise DecodeError(f"invalid {what}: {e.error_count()} error(s)", details={"errors": e.errors()}) from e


def _require_object(raw: Any, what: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise DecodeError(f"{what} is not an object: {type(raw).__name__}")
    return raw


def _read_tag(raw: dict[str, Any], field: str, what: str) -> Optional[str]:
    tag = raw.get(field)
    if tag is not None and not isinstance(tag, str):
        raise DecodeError(f"{what} {field} is not a string: {tag!r}")
    return tag


# --- frame layer ---

_FRAME_DECODERS: dict[str, Callable[[dict[str, Any]], InboundEvent]] = {
    FrameTag.HELLO: lambda raw: _validate(HelloEvent, raw, "hello frame"),
    FrameTag.DISCONNECT: lambda raw: _validate(DisconnectEvent, raw, "disconnect frame"),
    FrameTag.EVENTS_API: lambda raw: _validate(EventsApiEnvelope, raw, "events_api frame"),
}


def decode_frame(text: str) -> InboundEvent:
    """Decode one socket text frame. Unknown frame types are an error."""
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(f"frame is not valid JSON: {e}") from e
    raw = _require_object(raw, "frame")
    tag = _read_tag(raw, "type", "frame")
    if tag is None:
        raise DecodeError("frame has no type")
    decoder = _FRAME_DECODERS.get(tag)
    if decoder is None:
        raise DecodeError(f"unknown frame type: {tag}", details={"type": tag})
    return decoder(raw)


# --- payload layer ---

def _decode_event_callback(raw: dict[str, Any]) -> EventCallbackPayload:
    event_id = raw.get("event_id")
    if not isinstance(event_id, str):
        raise DecodeError("event_callback has no event_id")
    event = decode_callback_event(raw.get("event"))
    extra = {k: raw[k] for k in ("team_id", "event_time") if k in raw}
    try:
        return EventCallbackPayload(event_id=event_id, event=event, **extra)
    except ValidationError as e:
        raise DecodeError(f"invalid event_callback: {e.error_count()} error(s)", details={"errors": e.errors()}) from e


_PAYLOAD_DECODERS: dict[str, Callable[[dict[str, Any]], EventsApiPayload]] = {
    PayloadTag.EVENT_CALLBACK: _decode_event_callback,
}


def decode_payload(raw: Any) -> EventsApiPayload:
    """Decode the deferred payload of an events_api envelope."""
    raw = _require_object(raw, "events_api payload")
    tag = _read_tag(raw, "type", "payload")
    decoder = _PAYLOAD_DECODERS.get(tag) if tag is not None else None
    if decoder is None:
        return OtherPayload(type=tag)
    return decoder(raw)


# --- callback event layer ---

_EVENT_DECODERS: dict[str, Callable[[dict[str, Any]], CallbackEvent]] = {
    EventTag.MESSAGE: lambda raw: decode_message_event(raw),
}


def decode_callback_event(raw: Any) -> CallbackEvent:
    raw = _require_object(raw, "callback event")
    tag = _read_tag(raw, "type", "event")
    decoder = _EVENT_DECODERS.get(tag) if tag is not None else None
    if decoder is None:
        return OtherEvent(type=tag)
    return decoder(raw)


# --- message layer ---

_SUBTYPE_DECODERS: dict[str, Callable[[dict[str, Any]], MessageEvent]] = {
    MessageSubtype.FILE_SHARE: lambda raw: _validate(FileShareMessage, raw, "file_share message"),
}


def decode_message_event(raw: Any) -> MessageEvent:
    """Decode a message event in two passes.

    The subtype shares the flat object with the rest of the fields, so it is
    read on its own first; only the chosen variant validates the remainder.
    A null subtype counts as absent.
    """
    raw = _require_object(raw, "message event")
    subtype = _read_tag(raw, "subtype", "message")
    if subtype is None:
        return _validate(PlainMessage, raw, "message")
    decoder = _SUBTYPE_DECODERS.get(subtype)
    if decoder is None:
        return OtherMessage(subtype=subtype)
    return decoder(raw)


def build_ack(envelope_id: str) -> str:
    """Acknowledgment text for an events_api envelope."""
    return json.dumps({"envelope_id": envelope_id})
