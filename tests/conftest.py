"""Shared fakes: a scripted Slack Web API and an in-memory frame stream."""

import json
from pathlib import Path
from typing import Any, Optional, Union

import httpx
import pytest

from slack_thread_relay.api import SlackAPI
from slack_thread_relay.errors import StreamError
from slack_thread_relay.reactions import PermalinkReposter
from slack_thread_relay.supervisor import ConnectionSupervisor
from slack_thread_relay.transport.http import HttpClient
from slack_thread_relay.transport.websocket import Frame

TESTDATA = Path(__file__).parent / "testdata"


def fixture_text(name: str) -> str:
    return (TESTDATA / name).read_text()


def fixture_json(name: str) -> dict[str, Any]:
    return json.loads(fixture_text(name))


class FakeSlack:
    """httpx.MockTransport handler. Each API method pops its next scripted response."""

    def __init__(self, timeline: Optional[list[str]] = None):
        self.responses: dict[str, list[Union[dict[str, Any], httpx.Response]]] = {}
        self.requests: list[httpx.Request] = []
        self.timeline = timeline if timeline is not None else []

    def script(self, method: str, *responses: Union[dict[str, Any], httpx.Response]) -> "FakeSlack":
        self.responses.setdefault(method, []).extend(responses)
        return self

    def calls(self, method: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith("/" + method)]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        method = request.url.path.rsplit("/", 1)[-1]
        self.requests.append(request)
        self.timeline.append(method)
        queue = self.responses.get(method) or []
        if not queue:
            return httpx.Response(200, json={"ok": False, "error": "no_more_scripted_responses"})
        resp = queue.pop(0)
        if isinstance(resp, httpx.Response):
            return resp
        return httpx.Response(200, json=resp)


class FakeStream:
    """In-memory stand-in for SocketConnection. Raises StreamError when drained."""

    def __init__(self, *frames: Union[Frame, Exception], timeline: Optional[list[str]] = None):
        self._frames = list(frames)
        self.sent: list[Frame] = []
        self.closed = False
        self.timeline = timeline if timeline is not None else []

    async def receive_frame(self) -> Frame:
        if not self._frames:
            raise StreamError("connection reset")
        item = self._frames.pop(0)
        if isinstance(item, Exception):
            self.timeline.append("recv:error")
            raise item
        self.timeline.append(f"recv:{item.type.value}")
        return item

    async def send_frame(self, frame: Frame) -> None:
        self.timeline.append(f"send:{frame.type.value}")
        self.sent.append(frame)

    async def close(self) -> None:
        self.timeline.append("close")
        self.closed = True


class FakeConnector:
    def __init__(self, *streams: FakeStream, timeline: Optional[list[str]] = None):
        self._streams = list(streams)
        self.urls: list[str] = []
        self.timeline = timeline if timeline is not None else []

    async def __call__(self, url: str) -> FakeStream:
        self.urls.append(url)
        self.timeline.append("connect")
        return self._streams.pop(0)


def make_api(fake: FakeSlack, token: str) -> SlackAPI:
    return SlackAPI(HttpClient(token, transport=httpx.MockTransport(fake)))


def make_supervisor(fake: FakeSlack, connector: FakeConnector, debug_reconnects: bool = False) -> ConnectionSupervisor:
    return ConnectionSupervisor(
        make_api(fake, "xapp-test"),
        PermalinkReposter(make_api(fake, "xoxb-test")),
        connect=connector,
        debug_reconnects=debug_reconnects,
    )


@pytest.fixture
def timeline() -> list[str]:
    return []


@pytest.fixture
def fake_slack(timeline: list[str]) -> FakeSlack:
    return FakeSlack(timeline)
