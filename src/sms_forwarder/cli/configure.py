"""CLI: smsfwd show, smsfwd configure callback|telegram|relay|stdout|import, smsfwd reset"""

import json
from typing import Any, Callable, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sms_forwarder import codec
from sms_forwarder.errors import ConfigError
from sms_forwarder.forwarders import (
    Forwarder,
    HttpCallbackForwarder,
    ManagedRelayForwarder,
    StdoutForwarder,
    TelegramBotForwarder,
)
from sms_forwarder.models.config import DEFAULT_BOT_HANDLE, DEFAULT_RELAY_URL, HttpMethod

console = Console()


def _load_forwarder(required: bool = True) -> Optional[Forwarder]:
    from sms_forwarder.cli.main import _load_forwarder
    return _load_forwarder(required)


def _save_forwarder(forwarder: Forwarder) -> None:
    from sms_forwarder.cli.main import _save_forwarder
    _save_forwarder(forwarder)


def _get_store():
    from sms_forwarder.cli.main import _get_store
    return _get_store()


def _parse_pairs(values: tuple[str, ...], option: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for value in values:
        key, sep, val = value.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {value!r}", param_hint=option)
        pairs[key] = val
    return pairs


def _build(factory: Callable[..., Forwarder], *args: Any, **kwargs: Any) -> Forwarder:
    try:
        return factory(*args, **kwargs)
    except ConfigError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1)


def _print_setup_url(forwarder: ManagedRelayForwarder) -> None:
    console.print("Open this link to finish the setup, then run `smsfwd relay check`:")
    console.print(f"[bold cyan]{forwarder.get_setup_url()}[/bold cyan]", soft_wrap=True)


@click.command("show")
@click.option("--json-output", "--json", is_flag=True)
def show(json_output: bool):
    """Show the active forwarder."""
    forwarder = _load_forwarder(required=False)
    if forwarder is None:
        console.print("[yellow]No forwarder configured.[/yellow]")
        return
    if json_output:
        click.echo(codec.dumps(forwarder))
        return
    table = Table(title=forwarder.tag)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for name, value in forwarder.fields().items():
        if isinstance(forwarder, TelegramBotForwarder) and name == "token":
            value = value[:4] + "…"
        table.add_row(name, json.dumps(value) if isinstance(value, dict) else str(value))
    console.print(table)


@click.group()
def configure():
    """Set up the active forwarder."""


@configure.command("callback")
@click.argument("url")
@click.option("-m", "--method", type=click.Choice([m.value for m in HttpMethod], case_sensitive=False),
              default=HttpMethod.POST.value, show_default=True)
@click.option("--uri", "uri_pairs", multiple=True, metavar="KEY=VALUE", help="Extra query parameter")
@click.option("--body", "body_pairs", multiple=True, metavar="KEY=VALUE", help="Extra body field (POST/PUT)")
def configure_callback(url: str, method: str, uri_pairs: tuple[str, ...], body_pairs: tuple[str, ...]):
    """Forward to an HTTP callback URL."""
    if not url.startswith(("http://", "https://")):
        raise click.BadParameter("URL must start with http:// or https://", param_hint="URL")
    uri_payload = _parse_pairs(uri_pairs, "--uri")
    json_payload = _parse_pairs(body_pairs, "--body")
    forwarder = _build(HttpCallbackForwarder, url, method=method.upper(),
                       uri_payload=uri_payload, json_payload=json_payload)
    _save_forwarder(forwarder)
    console.print(f"[green]Forwarding to {url} ({forwarder.method.value}).[/green]")


@configure.command("telegram")
@click.option("--token", required=True, help="Telegram bot token")
@click.option("--chat-id", required=True, type=int, help="Telegram chat id")
def configure_telegram(token: str, chat_id: int):
    """Forward through your own Telegram bot."""
    _save_forwarder(_build(TelegramBotForwarder, token, chat_id))
    console.print(f"[green]Forwarding to Telegram chat {chat_id}.[/green]")


@configure.command("relay")
@click.argument("handle")
@click.option("--base-url", default=DEFAULT_RELAY_URL, show_default=True)
@click.option("--bot-handle", default=DEFAULT_BOT_HANDLE, show_default=True)
def configure_relay(handle: str, base_url: str, bot_handle: str):
    """Forward through the managed Telegram relay."""
    forwarder = _build(ManagedRelayForwarder, handle.lstrip("@"), base_url=base_url, bot_handle=bot_handle)
    _save_forwarder(forwarder)
    _print_setup_url(forwarder)


@configure.command("stdout")
def configure_stdout():
    """Print messages locally (dry run)."""
    _save_forwarder(StdoutForwarder())
    console.print("[green]Messages will be printed to stdout.[/green]")


@configure.command("import")
@click.argument("blob")
def configure_import(blob: str):
    """Import a forwarder from a JSON config blob (legacy formats accepted)."""
    try:
        forwarder = codec.loads(blob)
    except ConfigError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1)
    _save_forwarder(forwarder)
    console.print(f"[green]Imported {forwarder.tag}.[/green]")
    if isinstance(forwarder, ManagedRelayForwarder):
        _print_setup_url(forwarder)


@click.command("reset")
def reset():
    """Remove the active forwarder."""
    if _get_store().clear():
        console.print("[green]Forwarder removed.[/green]")
    else:
        console.print("[yellow]No forwarder configured.[/yellow]")
