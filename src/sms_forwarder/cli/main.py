"""
SMS forwarder CLI: the `smsfwd` command.

Commands:
  smsfwd show                  Show the active forwarder
  smsfwd configure <type>      Set up a forwarder
  smsfwd reset                 Remove the active forwarder
  smsfwd relay link|check      Managed relay setup
  smsfwd send <body>           Forward a test message
"""

import asyncio
from typing import Optional

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install sms-forwarder[cli]")

from pydantic import ValidationError
from rich.markup import escape

from sms_forwarder.config import LOG_LEVELS, configure_logging, get_settings
from sms_forwarder.errors import ConfigError
from sms_forwarder.forwarders import Forwarder
from sms_forwarder.store import ForwarderStore
from sms_forwarder.transport.http import HttpTransport

console = Console()


def _get_store() -> ForwarderStore:
    return ForwarderStore(get_settings().config_file)


def _get_http() -> HttpTransport:
    return HttpTransport(timeout=get_settings().timeout)


def _load_forwarder(required: bool = True) -> Optional[Forwarder]:
    store = _get_store()
    try:
        forwarder = store.load(http=_get_http())
    except ConfigError as e:
        console.print(f"[red]Stored forwarder config is broken: {escape(str(e))}[/red]")
        raise SystemExit(1)
    if forwarder is None and required:
        console.print("[red]No forwarder configured. Run `smsfwd configure` first.[/red]")
        raise SystemExit(1)
    return forwarder


def _save_forwarder(forwarder: Forwarder) -> None:
    store = _get_store()
    store.save(forwarder)
    console.print(f"[dim]Saved to {store.path}[/dim]")


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option("0.1.0")
@click.option("--log-level", type=click.Choice(LOG_LEVELS, case_sensitive=False), default=None,
              help="Log level (default: $SMS_FORWARDER_LOG_LEVEL or WARNING)")
def main(log_level: Optional[str]):
    """Relay SMS messages to HTTP callbacks and Telegram."""
    try:
        settings = get_settings()
    except ValidationError as e:
        console.print(f"[red]Invalid SMS_FORWARDER_* settings:[/red]\n{escape(str(e))}")
        raise SystemExit(1)
    configure_logging(log_level or settings.log_level)


# Register subcommands from separate modules
from sms_forwarder.cli.configure import configure, reset, show
from sms_forwarder.cli.relay import relay
from sms_forwarder.cli.send import send_cmd

main.add_command(show)
main.add_command(configure)
main.add_command(reset)
main.add_command(relay)
main.add_command(send_cmd)


if __name__ == "__main__":
    main()
