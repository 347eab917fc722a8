"""Database management commands."""

import logging

import click
from rich.console import Console

from stockfolio.cli.error_handler import handle_cli_errors
from stockfolio.config import config
from stockfolio.core.market.quote_store import get_last_refresh
from stockfolio.db.database import init_db

logger = logging.getLogger(__name__)


@click.group()
def db() -> None:
    """Database management commands.

    Initialize the local quote snapshot store.
    """
    pass


@db.command()
@click.pass_context
@handle_cli_errors
def init(ctx: click.Context) -> None:
    """
    Initialize the local database.

    Creates the SQLite tables used for quote snapshots. Safe to run
    more than once.

    \b
    Example:
        stockfolio db init
    """
    console: Console = ctx.obj["console"]

    config.ensure_directories()

    with console.status("[bold blue]Initializing database...[/bold blue]"):
        init_db()

    console.print("[green]Database initialized successfully![/green]")
    console.print(f"[dim]Database path: {config.db_path}[/dim]")

    last = get_last_refresh()
    if last is None:
        console.print("[dim]No quotes stored yet. Run: stockfolio quotes refresh[/dim]")
    else:
        console.print(f"[dim]Last snapshot: {last:%Y-%m-%d %H:%M} UTC[/dim]")
