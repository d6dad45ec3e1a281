"""
Slack Web API methods used by the relay.
"""

from pydantic import ValidationError

from slack_thread_relay.errors import HandshakeError, RelayError
from slack_thread_relay.models.api import ConnectionsOpenResponse, PermalinkResponse, PostMessageResponse
from slack_thread_relay.transport.http import HttpClient


class SlackAPI:
    def __init__(self, http: HttpClient):
        self._http = http

    async def open_connection(self) -> str:
        """apps.connections.open: fetch a fresh Socket Mode URL. Needs the app token."""
        try:
            raw = await self._http.post("/apps.connections.open")
            resp = ConnectionsOpenResponse.model_validate(raw)
        except (RelayError, ValidationError) as e:
            raise HandshakeError(f"failed to open connection: {e}") from e
        if not resp.ok or not resp.url:
            raise HandshakeError(f"failed to open connection: {resp.rest()}", details=resp.rest())
        return resp.url

    async def get_permalink(self, channel: str, message_ts: str) -> PermalinkResponse:
        """chat.getPermalink, form-encoded."""
        raw = await self._http.post_form("/chat.getPermalink", {"channel": channel, "message_ts": message_ts})
        return PermalinkResponse.model_validate(raw)

    async def post_message(self, channel: str, text: str) -> PostMessageResponse:
        """chat.postMessage, JSON body."""
        raw = await self._http.post_json("/chat.postMessage", {"channel": channel, "text": text})
        return PostMessageResponse.model_validate(raw)
