"""
REST HTTP client for the Slack Web API.
"""

import json
from typing import Any, Optional

import httpx

from slack_thread_relay.errors import RelayError

DEFAULT_BASE_URL = "https://slack.com/api"
USER_AGENT = "slack-thread-relay/0.1.0"


class HttpClient:
    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._token}"}

    async def _post(self, path: str, headers: dict[str, str], **kwargs: Any) -> Any:
        try:
            resp = await self._client.post(path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise RelayError("http_error", f"POST {path} failed: {e!r}") from e
        if resp.status_code >= 400:
            raise RelayError("http_error", f"HTTP {resp.status_code}: {resp.text[:200]}")
        try:
            return resp.json()
        except json.JSONDecodeError as e:
            raise RelayError("http_error", f"POST {path} returned non-JSON body: {resp.text[:200]}") from e

    async def post(self, path: str) -> Any:
        return await self._post(path, self._auth_headers())

    async def post_form(self, path: str, data: dict[str, str]) -> Any:
        return await self._post(path, self._auth_headers(), data=data)

    async def post_json(self, path: str, body: dict[str, Any]) -> Any:
        headers = self._auth_headers()
        # Slack warns about JSON bodies without an explicit charset
        headers["Content-Type"] = "application/json; charset=utf-8"
        return await self._post(path, headers, json=body)

    async def close(self) -> None:
        await self._client.aclose()
