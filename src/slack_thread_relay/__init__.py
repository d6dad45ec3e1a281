"""
slack-thread-relay: reposts permalinks of new Slack thread replies.

Socket Mode client with automatic reconnect, plus the two Web API calls
that resolve and post a reply's permalink.
"""

from slack_thread_relay.client import ThreadRelay
from slack_thread_relay.config import RelayConfig
from slack_thread_relay.classifier import ThreadReference, classify, find_threaded_message
from slack_thread_relay.errors import (
    RelayError,
    ConfigError,
    DecodeError,
    HandshakeError,
    ReactionError,
    StreamError,
    ConnectionError,
)
from slack_thread_relay.supervisor import ConnectionSupervisor

__version__ = "0.1.0"
__all__ = [
    "ThreadRelay",
    "RelayConfig",
    "ConnectionSupervisor",
    "ThreadReference",
    "classify",
    "find_threaded_message",
    "RelayError",
    "ConfigError",
    "DecodeError",
    "HandshakeError",
    "ReactionError",
    "StreamError",
    "ConnectionError",
]
