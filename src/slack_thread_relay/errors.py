"""
Relay error types.

Everything the relay raises derives from RelayError and carries a machine code.
"""

from typing import Any, Optional


class RelayError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class ConfigError(RelayError):
    def __init__(self, message: str):
        super().__init__("config_error", message)


class DecodeError(RelayError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("decode_error", message, details)


class HandshakeError(RelayError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("handshake_error", message, details)


class ReactionError(RelayError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("reaction_error", message, details)


class StreamError(RelayError):
    def __init__(self, message: str):
        super().__init__("stream_error", message)


class ConnectionError(RelayError):
    def __init__(self, message: str):
        super().__init__("connection_error", message)
