"""
ThreadRelay: wires configuration, Web API clients and the connection supervisor.
"""

from typing import Optional

import httpx

from slack_thread_relay.api import SlackAPI
from slack_thread_relay.config import RelayConfig
from slack_thread_relay.reactions import PermalinkReposter
from slack_thread_relay.supervisor import Connector, ConnectionSupervisor
from slack_thread_relay.transport.http import HttpClient
from slack_thread_relay.transport.websocket import open_socket


class ThreadRelay:
    """Reposts permalinks of new thread replies, forever."""

    def __init__(
        self,
        config: RelayConfig,
        connect: Connector = open_socket,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        # Socket Mode needs the app-level token; chat.* needs the bot token.
        self._app_http = HttpClient(config.app_token, base_url=config.api_base_url, transport=transport)
        self._bot_http = HttpClient(config.bot_token, base_url=config.api_base_url, transport=transport)
        self.connections = SlackAPI(self._app_http)
        self.web = SlackAPI(self._bot_http)
        self.reposter = PermalinkReposter(self.web)
        self.supervisor = ConnectionSupervisor(
            self.connections,
            self.reposter,
            connect=connect,
            debug_reconnects=config.debug_reconnects,
        )

    async def run(self) -> None:
        await self.supervisor.run()

    async def close(self) -> None:
        await self._app_http.close()
        await self._bot_http.close()

    async def __aenter__(self) -> "ThreadRelay":
        return self

    async def __aexit__(self, *_exc: object) -> None:
        await self.close()
