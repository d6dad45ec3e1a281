"""
Relay configuration, loaded from the process environment.
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, field_validator

from slack_thread_relay.errors import ConfigError

DEFAULT_API_URL = "https://slack.com/api"

APP_TOKEN_VAR = "SLACK_APP_TOKEN"
BOT_TOKEN_VAR = "SLACK_OAUTH_TOKEN"

_TRUTHY = {"1", "true", "yes", "on"}
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class RelayConfig(BaseModel):
    app_token: str
    bot_token: str
    api_base_url: str = DEFAULT_API_URL
    debug_reconnects: bool = False
    log_level: str = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def _check_log_level(cls, value: object) -> str:
        level = str(value).strip().upper()
        if level not in LOG_LEVELS:
            raise ConfigError(f"unknown log level: {value!r} (expected one of {', '.join(LOG_LEVELS)})")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RelayConfig":
        """Build a config from environment variables.

        The two tokens are required and distinct: SLACK_APP_TOKEN opens socket
        connections, SLACK_OAUTH_TOKEN authorizes the Web API calls.
        """
        env = os.environ if environ is None else environ
        return cls(
            app_token=_require(env, APP_TOKEN_VAR),
            bot_token=_require(env, BOT_TOKEN_VAR),
            api_base_url=env.get("SLACK_API_URL", "").strip() or DEFAULT_API_URL,
            debug_reconnects=env.get("RELAY_DEBUG_RECONNECTS", "").strip().lower() in _TRUTHY,
            log_level=env.get("RELAY_LOG_LEVEL", "").strip().upper() or "INFO",
        )


def _require(env: Mapping[str, str], name: str) -> str:
    value = env.get(name, "").strip()
    if not value:
        raise ConfigError(f"{name} is not given")
    return value
