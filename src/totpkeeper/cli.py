"""CLI entry point for totpkeeper."""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.live import Live
from rich.table import Table

from totpkeeper.clock import TimeWindowClock
from totpkeeper.exceptions import InvalidSecret
from totpkeeper.registry import AccountRegistry, JsonFileStore
from totpkeeper.scheduler import CodeSnapshot, RefreshScheduler
from totpkeeper.totp import generate

console = Console()

BAR_WIDTH = 30


def format_code(code: str | None) -> str:
    """Split a 6-digit code in two groups for reading: ``123 456``."""
    if code is None:
        return "[red]invalid[/red]"
    if len(code) == 6:
        return f"{code[:3]} {code[3:]}"
    return code


def progress_bar(percent: float, width: int = BAR_WIDTH) -> str:
    filled = round(percent / 100 * width)
    return "█" * filled + "░" * (width - filled)


def _registry() -> AccountRegistry:
    from totpkeeper.config import settings

    registry = AccountRegistry(
        JsonFileStore(settings.store_path),
        time_step=settings.time_step,
        digits=settings.digits,
    )
    registry.load()
    return registry


def _codes_table(registry: AccountRegistry, snapshot: CodeSnapshot) -> Table:
    table = Table(title=f"{snapshot.seconds_remaining}s  {progress_bar(snapshot.progress_percent)}")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Code", justify="right", style="cyan")
    for account in registry.accounts():
        table.add_row(account.id, account.name, format_code(snapshot.codes.get(account.id)))
    return table


@click.group()
@click.option("--log-level", default=None, help="Override TOTPKEEPER_LOG_LEVEL.")
def main(log_level: str | None) -> None:
    """totpkeeper — TOTP codes for a local list of accounts."""
    from totpkeeper.config import settings

    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("name")
@click.argument("secret")
def add(name: str, secret: str) -> None:
    """Add an account after checking its base32 SECRET."""
    registry = _registry()
    try:
        account = registry.add(name, secret)
    except InvalidSecret:
        console.print("[red]Invalid secret key. Please check and try again.[/red]")
        raise SystemExit(1)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    console.print(f"[green]Added[/green] {account.name} ({account.id})")


@main.command()
@click.argument("account_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
def remove(account_id: str, yes: bool) -> None:
    """Delete the account with ACCOUNT_ID."""
    registry = _registry()
    account = registry.get(account_id)
    if account is None:
        console.print(f"[red]No account with id {account_id}[/red]")
        raise SystemExit(1)
    if not yes:
        click.confirm(f"Are you sure you want to delete {account.name}?", abort=True)
    registry.remove(account_id)
    console.print(f"[green]Removed[/green] {account.name}")


@main.command(name="list")
def list_accounts() -> None:
    """Show every account with its current code."""
    registry = _registry()
    if not registry.accounts():
        console.print("No accounts yet. Use [bold]totpkeeper add NAME SECRET[/bold].")
        return
    scheduler = RefreshScheduler(registry)
    console.print(_codes_table(registry, scheduler.tick()))


@main.command()
@click.argument("secret")
def code(secret: str) -> None:
    """Print the current code for SECRET without storing it."""
    from totpkeeper.config import settings

    clock = TimeWindowClock(time_step=settings.time_step)
    now = clock.unix_time()
    try:
        value = generate(secret, time_step=settings.time_step, digits=settings.digits, for_time=now)
    except InvalidSecret as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    console.print(f"{format_code(value)}  [dim]({clock.seconds_remaining(now)}s)[/dim]")


@main.command()
def watch() -> None:
    """Show live codes, refreshed at every window rollover, until Ctrl-C."""
    from totpkeeper.config import settings

    registry = _registry()
    scheduler = RefreshScheduler(registry, tick_interval=settings.tick_interval)

    with Live(console=console, auto_refresh=False) as live:

        def render(snapshot: CodeSnapshot) -> None:
            live.update(_codes_table(registry, snapshot), refresh=True)

        scheduler.subscribe(render)
        try:
            scheduler.run_forever()
        except KeyboardInterrupt:
            scheduler.stop()


if __name__ == "__main__":
    main()
