"""CLI: smsfwd send"""

import json
import time
from typing import Optional

import click
from rich.console import Console

from sms_forwarder.client import AsyncSmsRelay
from sms_forwarder.models.message import SmsMessage

console = Console()


def _load_forwarder():
    from sms_forwarder.cli.main import _load_forwarder
    return _load_forwarder()


def _run(coro):
    from sms_forwarder.cli.main import _run
    return _run(coro)


@click.command("send")
@click.argument("body")
@click.option("-f", "--from", "sender", required=True, help="Sender phone number")
@click.option("--timestamp", default=None, type=int, help="Epoch milliseconds (default: now)")
@click.option("--json-output", "--json", is_flag=True)
def send_cmd(body: str, sender: str, timestamp: Optional[int], json_output: bool):
    """Forward a test SMS through the active forwarder."""
    message = SmsMessage(
        sender=sender,
        body=body,
        timestamp=timestamp if timestamp is not None else int(time.time() * 1000),
    )

    async def _send():
        client = AsyncSmsRelay(forwarder=_load_forwarder())
        with console.status("Forwarding..."):
            return await client.forward(message)

    result = _run(_send())
    if json_output:
        click.echo(json.dumps(result.model_dump()))
    elif result.ok:
        console.print(f"[green]Forwarded via {result.forwarder}.[/green]")
    else:
        console.print(f"[red]Forwarding failed: {result.error}[/red]")
    if not result.ok:
        raise SystemExit(1)
