"""
Logging helpers.

Context (epoch, envelope_id, event_id) travels explicitly with an EventLogger
instead of living in global state; every record gets it both as `extra`
attributes and as key=value pairs after the message.
"""

import logging
from typing import Any, MutableMapping, Optional

# Attributes LogRecord sets itself; `extra` may not overwrite them.
_RESERVED = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime", "context"}


class EventLogger(logging.LoggerAdapter):
    def __init__(self, logger: logging.Logger, context: Optional[dict[str, Any]] = None):
        super().__init__(logger, dict(context or {}))

    @property
    def context(self) -> dict[str, Any]:
        return dict(self.extra)  # type: ignore[arg-type]

    def bind(self, **fields: Any) -> "EventLogger":
        """Return a logger with `fields` merged into the context."""
        return EventLogger(self.logger, {**self.context, **fields})

    def with_logger(self, logger: logging.Logger) -> "EventLogger":
        """Same context, records attributed to another module's logger."""
        return EventLogger(logger, self.context)

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        fields = {**self.context, **kwargs.pop("fields", {})}
        attrs = {k: v for k, v in fields.items() if k not in _RESERVED}
        kwargs["extra"] = {**kwargs.get("extra", {}), **attrs, "context": fields}
        if fields:
            rendered = " ".join(f"{k}={v}" for k, v in fields.items())
            msg = f"{msg} [{rendered}]"
        return msg, kwargs


def get_logger(name: str, **context: Any) -> EventLogger:
    return EventLogger(logging.getLogger(name), context)


def configure_logging(level: str = "INFO") -> None:
    """Install a rich console handler on the root logger. CLI use only."""
    from rich.logging import RichHandler

    logging.basicConfig(
        level=level.upper(),
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
