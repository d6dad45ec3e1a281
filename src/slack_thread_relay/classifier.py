"""
Decides whether a callback event is a new reply inside a thread.
"""

import logging
from typing import NamedTuple, Optional

from slack_thread_relay.log import EventLogger
from slack_thread_relay.models.events import (
    CallbackEvent,
    EventCallbackPayload,
    EventsApiPayload,
    FileShareMessage,
    OtherEvent,
    OtherMessage,
    PlainMessage,
)

logger = logging.getLogger(__name__)


class ThreadReference(NamedTuple):
    channel: str
    message_ts: str


def classify(event: CallbackEvent, log: Optional[EventLogger] = None) -> Optional[ThreadReference]:
    """Return (channel, ts) for a threaded plain or file_share message, else None.

    The reference points at the reply itself (`ts`), not the thread root.
    Messages carrying any other subtype, thread broadcasts and edits included,
    are not eligible.
    """
    log = log.with_logger(logger) if log else EventLogger(logger)

    if isinstance(event, OtherEvent):
        log.info("ignore non message type", fields={"type": event.type})
        return None
    if isinstance(event, OtherMessage):
        log.info("not a threaded message because subtype is present", fields={"subtype": event.subtype})
        return None
    if not isinstance(event, (PlainMessage, FileShareMessage)):
        raise TypeError(f"not a callback event: {type(event).__name__}")

    if event.thread_ts is None:
        log.info("not a threaded message because thread_ts is none")
        return None
    return ThreadReference(event.channel, event.ts)


def find_threaded_message(payload: EventsApiPayload, log: Optional[EventLogger] = None) -> Optional[ThreadReference]:
    log = log.with_logger(logger) if log else EventLogger(logger)
    if not isinstance(payload, EventCallbackPayload):
        log.info("ignore non event_callback type", fields={"type": payload.type})
        return None
    return classify(payload.event, log)
