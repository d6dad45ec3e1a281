"""
Relay CLI, the `thread-relay` command.

Commands:
  thread-relay run              Connect and relay until a fatal error
  thread-relay classify <file>  Decode a captured frame and show the decision
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from slack_thread_relay import __version__
from slack_thread_relay.classifier import find_threaded_message
from slack_thread_relay.client import ThreadRelay
from slack_thread_relay.config import RelayConfig
from slack_thread_relay.errors import RelayError
from slack_thread_relay.log import configure_logging
from slack_thread_relay.models.events import EventsApiEnvelope
from slack_thread_relay.transport.envelope import decode_frame, decode_payload

console = Console()


@click.group()
@click.version_option(__version__)
def main():
    """Repost permalinks of new Slack thread replies."""


@main.command("run")
@click.option("--log-level", default=None, help="Log level (default: $RELAY_LOG_LEVEL or INFO)")
@click.option("--debug-reconnects", is_flag=True, default=False, help="Ask Slack to drop connections early")
def run_cmd(log_level: Optional[str], debug_reconnects: bool):
    """Connect over Socket Mode and relay until a fatal error."""
    updates = {}
    if log_level:
        updates["log_level"] = log_level
    if debug_reconnects:
        updates["debug_reconnects"] = True
    try:
        config = RelayConfig.model_validate({**RelayConfig.from_env().model_dump(), **updates})
    except RelayError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    configure_logging(config.log_level)

    async def _run():
        async with ThreadRelay(config) as relay:
            await relay.run()

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        pass
    except RelayError as e:
        console.print(f"[red]fatal ({e.code}): {e}[/red]")
        raise SystemExit(1)


@main.command("classify")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json-output", "--json", is_flag=True)
def classify_cmd(path: Path, json_output: bool):
    """Decode a captured Socket Mode frame and show whether it would be relayed."""
    try:
        event = decode_frame(path.read_text())
        if not isinstance(event, EventsApiEnvelope):
            result = None
            kind = type(event).__name__
        else:
            payload = decode_payload(event.payload)
            kind = type(getattr(payload, "event", payload)).__name__
            result = find_threaded_message(payload)
    except RelayError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    if json_output:
        click.echo(json.dumps({
            "kind": kind,
            "channel": result.channel if result else None,
            "message_ts": result.message_ts if result else None,
        }))
    elif result is None:
        console.print(f"[yellow]no action[/yellow] ({kind})")
    else:
        console.print(f"[green]repost[/green] channel={result.channel} ts={result.message_ts}")


if __name__ == "__main__":
    main()
