"""CLI: smsfwd relay link|check"""

import click
from rich.console import Console

from sms_forwarder.forwarders import ManagedRelayForwarder

console = Console()


def _load_relay() -> ManagedRelayForwarder:
    from sms_forwarder.cli.main import _load_forwarder
    forwarder = _load_forwarder()
    if not isinstance(forwarder, ManagedRelayForwarder):
        console.print(f"[red]The active forwarder is {forwarder.tag}, not the managed relay.[/red]")
        raise SystemExit(1)
    return forwarder


def _run(coro):
    from sms_forwarder.cli.main import _run
    return _run(coro)


@click.group()
def relay():
    """Managed Telegram relay setup."""


@relay.command("link")
def relay_link():
    """Print the setup link for the managed relay."""
    forwarder = _load_relay()
    console.print(f"Confirmation code: [bold]{forwarder.code}[/bold]")
    console.print(f"[bold cyan]{forwarder.get_setup_url()}[/bold cyan]", soft_wrap=True)


@relay.command("check")
@click.option("--wait", "attempts", default=1, type=int, show_default=True,
              help="Number of checks before giving up")
@click.option("--interval", default=3.0, type=float, show_default=True,
              help="Seconds between checks")
def relay_check(attempts: int, interval: float):
    """Check whether the Telegram account is linked."""

    async def _check() -> bool:
        forwarder = _load_relay()
        with console.status(f"Checking @{forwarder.tg_handle}..."):
            return await forwarder.wait_until_linked(attempts=max(attempts, 1), interval=interval)

    if _run(_check()):
        console.print("[green]Linked! Messages will be forwarded to Telegram.[/green]")
    else:
        console.print("[yellow]Not linked yet. Open the link from `smsfwd relay link` and retry.[/yellow]")
        raise SystemExit(1)
