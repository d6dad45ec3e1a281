"""
Web API response models.

Unknown fields are kept so that a failed call can be logged with its full body.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class ApiResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    ok: bool
    error: Optional[str] = None

    def rest(self) -> dict[str, Any]:
        """Everything except `ok`, for error reporting."""
        return self.model_dump(exclude={"ok"}, exclude_none=True)


class ConnectionsOpenResponse(ApiResponse):
    """apps.connections.open"""
    url: Optional[str] = None


class PermalinkResponse(ApiResponse):
    """chat.getPermalink"""
    channel: Optional[str] = None
    permalink: Optional[str] = None


class PostMessageResponse(ApiResponse):
    """chat.postMessage"""
    channel: Optional[str] = None
    ts: Optional[str] = None
