"""Market data commands: live quotes, equity profiles, price history, movers."""

import logging
from datetime import UTC, datetime, timedelta

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from sqlalchemy.exc import SQLAlchemyError

from stockfolio.cli.error_handler import handle_cli_errors
from stockfolio.cli.formatting import (
    BORDER_PRIMARY,
    MISSING,
    format_missing,
    format_money,
    get_gain_color,
    print_empty_state,
)
from stockfolio.cli.validators import SYMBOL
from stockfolio.config import config
from stockfolio.core.data.exceptions import QuotePayloadError, QuoteServiceError
from stockfolio.core.data.gse_client import GSEClient
from stockfolio.core.market.quote_store import (
    get_last_refresh,
    get_latest_price_map,
    get_price_history,
    record_quotes,
    should_refresh,
)
from stockfolio.core.market.summary import summarize_market
from stockfolio.db.database import init_db

logger = logging.getLogger(__name__)


@click.group()
@click.pass_context
def quotes(ctx: click.Context) -> None:
    """
    Live GSE quotes, equity profiles and stored price history.

    \b
    Examples:
        stockfolio quotes list
        stockfolio quotes show MTNGH
        stockfolio quotes refresh --auto
        stockfolio quotes history GCB --days 30
        stockfolio quotes market
    """
    pass


def _change_text(change) -> Text:
    return Text(f"{float(change):+.2f}", style=get_gain_color(change))


@quotes.command("refresh")
@click.option("--auto", is_flag=True, help="Only refresh during trading hours and when the snapshot is stale")
@click.pass_context
@handle_cli_errors
def quotes_refresh(ctx: click.Context, auto: bool) -> None:
    """
    Fetch live quotes and store a snapshot.

    \b
    In --auto mode (for cron jobs), only refreshes if:
    - The GSE is in session (Mon-Fri 10:00-15:00 GMT)
    - The last snapshot is older than STOCKFOLIO_QUOTE_REFRESH minutes
    """
    console: Console = ctx.obj["console"]
    init_db()

    last = get_last_refresh()
    if last:
        console.print(f"[dim]Last snapshot: {last:%Y-%m-%d %H:%M} UTC[/dim]")

    if auto and not should_refresh():
        console.print("[yellow]Refresh conditions not met (outside trading hours or snapshot is recent)[/yellow]")
        console.print("[dim]Run without --auto to refresh now[/dim]")
        return

    with console.status("[bold blue]Fetching live quotes...[/bold blue]"):
        live = GSEClient().fetch_live()
        count = record_quotes(live)

    console.print(f"[green]Stored {count} quotes[/green]")


@quotes.command("list")
@click.option("--cached", is_flag=True, help="Show last stored prices instead of fetching")
@click.pass_context
@handle_cli_errors
def quotes_list(ctx: click.Context, cached: bool) -> None:
    """List current prices for all equities."""
    console: Console = ctx.obj["console"]
    currency = config.currency

    if cached:
        init_db()
        prices = get_latest_price_map()
        if not prices:
            print_empty_state(console, "stored quotes", "stockfolio quotes refresh")
            return

        table = Table(title="Last Stored Prices")
        table.add_column("Symbol", style="cyan")
        table.add_column(f"Price ({currency})", justify="right")
        for symbol in sorted(prices):
            table.add_row(symbol, format_money(prices[symbol]))
        console.print(table)
        return

    live = GSEClient().fetch_live()
    try:
        init_db()
        record_quotes(live)
    except SQLAlchemyError as e:
        logger.warning(f"Failed to store quote snapshot: {e}")

    table = Table(title="GSE Live Quotes")
    table.add_column("Symbol", style="cyan")
    table.add_column(f"Price ({currency})", justify="right")
    table.add_column("Change", justify="right")
    table.add_column("Volume", justify="right")

    for q in sorted(live, key=lambda q: q.symbol):
        table.add_row(q.symbol, format_money(q.price), _change_text(q.change), f"{q.volume:,}")

    console.print(table)


@quotes.command("show")
@click.argument("symbol", type=SYMBOL)
@click.pass_context
@handle_cli_errors
def quotes_show(ctx: click.Context, symbol: str) -> None:
    """Show an equity's company profile and fundamentals."""
    console: Console = ctx.obj["console"]
    currency = config.currency

    equity = GSEClient().fetch_equity(symbol)
    company = equity.company

    lines = [
        f"[bold]{company.name}[/bold] ({equity.symbol})",
        f"[dim]{format_missing(company.sector)} / {format_missing(company.industry)}[/dim]",
        "",
        f"[cyan]Price:[/cyan] {format_money(equity.price, currency)}",
        f"[cyan]EPS:[/cyan] {format_money(equity.eps)}",
        f"[cyan]DPS:[/cyan] {format_money(equity.dps)}",
        f"[cyan]Shares:[/cyan] {f'{equity.shares:,}' if equity.shares is not None else MISSING}",
        f"[cyan]Market Cap:[/cyan] {format_money(equity.market_cap, currency)}",
    ]
    if company.website:
        lines.append(f"[cyan]Website:[/cyan] {company.website}")

    console.print(Panel.fit("\n".join(lines), border_style=BORDER_PRIMARY))

    if company.directors:
        table = Table(title="Directors")
        table.add_column("Name")
        table.add_column("Position", style="dim")
        for d in company.directors:
            table.add_row(d.name, format_missing(d.position))
        console.print(table)


@quotes.command("history")
@click.argument("symbol", type=SYMBOL)
@click.option("--days", type=click.IntRange(min=1), default=30, help="How many days back")
@click.option("--limit", type=int, default=None, help="Maximum points (most recent kept)")
@click.pass_context
@handle_cli_errors
def quotes_history(ctx: click.Context, symbol: str, days: int, limit: int) -> None:
    """Show stored price history for a symbol."""
    console: Console = ctx.obj["console"]
    init_db()

    start = datetime.now(UTC) - timedelta(days=days)
    points = get_price_history(symbol, start_date=start, limit=limit)

    if not points:
        print_empty_state(console, f"price history for {symbol}", "stockfolio quotes refresh")
        return

    table = Table(title=f"Price History: {symbol}")
    table.add_column("Time (UTC)", style="dim")
    table.add_column("Price", justify="right")
    table.add_column("Change", justify="right")
    table.add_column("Volume", justify="right")

    for p in points:
        table.add_row(p.timestamp.strftime("%Y-%m-%d %H:%M"), format_money(p.price), _change_text(p.change), f"{p.volume:,}")

    console.print(table)

    first, last = points[0].price, points[-1].price
    if len(points) > 1 and first > 0:
        pct = (last - first) / first * 100
        style = get_gain_color(pct)
        console.print(f"[cyan]Period change:[/cyan] [{style}]{float(pct):+.2f}%[/{style}]")


@quotes.command("market")
@click.option("--top", "top_n", type=click.IntRange(min=1), default=5, help="Number of gainers/losers")
@click.option("--market-cap", is_flag=True, help="Fetch each equity profile to total market capitalization")
@click.pass_context
@handle_cli_errors
def quotes_market(ctx: click.Context, top_n: int, market_cap: bool) -> None:
    """Market summary with top gainers and losers."""
    console: Console = ctx.obj["console"]

    client = GSEClient()
    live = client.fetch_live()

    shares = None
    if market_cap:
        with console.status("[bold blue]Fetching equity profiles...[/bold blue]"):
            shares = _share_counts(client, [q.symbol for q in live])

    summary = summarize_market(live, top_n=top_n, shares=shares)
    cap_line = (
        f"[cyan]Market Cap:[/cyan] {format_money(summary.total_market_cap, config.currency)}\n" if market_cap else ""
    )

    console.print(
        Panel.fit(
            f"[bold]GSE Market Summary[/bold]\n"
            f"[cyan]Equities:[/cyan] {summary.total_stocks}   "
            f"[green]Up:[/green] {summary.advancers}   "
            f"[red]Down:[/red] {summary.decliners}\n"
            f"[cyan]Total Volume:[/cyan] {summary.total_volume:,}\n"
            f"{cap_line}"
            f"[dim]Updated {summary.last_updated:%Y-%m-%d %H:%M} UTC[/dim]",
            border_style=BORDER_PRIMARY,
        )
    )

    for title, movers in (("Top Gainers", summary.top_gainers), ("Top Losers", summary.top_losers)):
        if not movers:
            console.print(f"[dim]No {title.lower()}[/dim]")
            continue
        table = Table(title=title)
        table.add_column("Symbol", style="cyan")
        table.add_column("Price", justify="right")
        table.add_column("Change", justify="right")
        table.add_column("Volume", justify="right")
        for q in movers:
            table.add_row(q.symbol, format_money(q.price), _change_text(q.change), f"{q.volume:,}")
        console.print(table)


def _share_counts(client: GSEClient, symbols: list[str]) -> dict[str, int]:
    """Outstanding shares per symbol; profiles that fail or lack a count are skipped."""
    shares: dict[str, int] = {}
    for symbol in symbols:
        try:
            equity = client.fetch_equity(symbol)
        except (QuoteServiceError, QuotePayloadError) as e:
            logger.warning(f"No profile for {symbol}, left out of market cap: {e}")
            continue
        if equity.shares is not None:
            shares[equity.symbol] = equity.shares
    return shares
