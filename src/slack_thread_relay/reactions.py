"""
Reposts a thread reply's permalink into its channel.

Two dependent calls, at most once each: chat.getPermalink, then
chat.postMessage with the permalink as text. The first failure ends the
sequence for that event.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from slack_thread_relay.api import SlackAPI
from slack_thread_relay.errors import ReactionError, RelayError
from slack_thread_relay.log import EventLogger

logger = logging.getLogger(__name__)


class PermalinkReposter:
    def __init__(self, api: SlackAPI):
        self._api = api

    async def react(self, channel: str, message_ts: str, log: Optional[EventLogger] = None) -> str:
        """Post the permalink of (channel, message_ts). Returns the new message's ts."""
        log = log.with_logger(logger) if log else EventLogger(logger)

        try:
            resp = await self._api.get_permalink(channel, message_ts)
        except (RelayError, ValidationError) as e:
            raise ReactionError(f"chat.getPermalink failed: {e}", details={"method": "chat.getPermalink"}) from e
        if not resp.ok or not resp.permalink:
            raise ReactionError(
                f"chat.getPermalink failed: {resp.rest()}",
                details={"method": "chat.getPermalink", "response": resp.rest()},
            )
        permalink = resp.permalink
        log.info("translated to permalink", fields={"permalink": permalink})

        try:
            posted = await self._api.post_message(channel, permalink)
        except (RelayError, ValidationError) as e:
            raise ReactionError(f"chat.postMessage failed: {e}", details={"method": "chat.postMessage"}) from e
        if not posted.ok or not posted.ts:
            raise ReactionError(
                f"chat.postMessage failed: {posted.rest()}",
                details={"method": "chat.postMessage", "response": posted.rest()},
            )
        log.info("posted a permalink", fields={"ts": posted.ts})
        return posted.ts
