"""Portfolio commands: list, create, record transactions, and value holdings."""

import json
import logging
from datetime import timedelta
from decimal import Decimal

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from sqlalchemy.exc import SQLAlchemyError

from stockfolio.cli.error_handler import handle_cli_errors
from stockfolio.cli.formatting import (
    BORDER_PRIMARY,
    BORDER_WARNING,
    MISSING,
    format_money,
    gain_text,
    get_transaction_color,
    pct_text,
    print_empty_state,
    print_next_steps,
)
from stockfolio.cli.validators import SYMBOL, parse_price_overrides
from stockfolio.config import config
from stockfolio.core.data.exceptions import QuoteServiceError
from stockfolio.core.data.gse_client import GSEClient
from stockfolio.core.data.portfolio_client import PortfolioClient
from stockfolio.core.data.quotes import build_price_map
from stockfolio.core.market.quote_store import get_latest_price_map, record_quotes
from stockfolio.core.portfolio.models import TransactionType
from stockfolio.core.portfolio.valuation import (
    PortfolioValuation,
    aggregate,
    valuate,
    valuate_portfolio,
)
from stockfolio.db.database import init_db

logger = logging.getLogger(__name__)


@click.group()
@click.pass_context
def portfolio(ctx: click.Context) -> None:
    """
    Manage portfolios and value holdings at market prices.

    Portfolios live in the portfolio service; buys and sells are sent
    there and holdings come back already updated.

    \b
    Examples:
        stockfolio portfolio create "Retirement"
        stockfolio portfolio buy <ID> MTNGH -q 100 -p 1.50
        stockfolio portfolio show <ID>
        stockfolio portfolio show <ID> --prices cached
        stockfolio portfolio show <ID> --price MTNGH=1.85
    """
    pass


def _cached_prices() -> dict[str, Decimal]:
    init_db()
    return get_latest_price_map(max_age=timedelta(minutes=config.quote_max_age_minutes))


def resolve_prices(console: Console, source: str) -> dict[str, Decimal]:
    """
    Assemble a price map from the chosen source.

    Live quotes are also stored as a snapshot. If the live API fails the
    last stored snapshot is used instead.
    """
    if source == "none":
        return {}
    if source == "cached":
        return _cached_prices()

    try:
        quotes = GSEClient().fetch_live()
    except QuoteServiceError as e:
        logger.warning(f"Live quotes unavailable, falling back to snapshot: {e}")
        console.print("[yellow]Live quotes unavailable, using last stored snapshot[/yellow]")
        return _cached_prices()

    try:
        init_db()
        record_quotes(quotes)
    except SQLAlchemyError as e:
        logger.warning(f"Failed to store quote snapshot: {e}")

    return build_price_map(quotes)


def _render_valuation(console: Console, valuation: PortfolioValuation) -> None:
    currency = config.currency
    portfolio_obj = valuation.portfolio
    totals = valuation.totals

    console.print(
        Panel.fit(
            f"[bold]{portfolio_obj.name}[/bold]\n"
            f"[dim]Created {portfolio_obj.created_at:%Y-%m-%d}  |  ID {portfolio_obj.id}[/dim]",
            border_style=BORDER_PRIMARY,
        )
    )

    if not valuation.stats:
        print_empty_state(
            console,
            "holdings",
            f"stockfolio portfolio buy {portfolio_obj.id} SYMBOL -q ... -p ...",
        )
        return

    table = Table(title="Holdings")
    table.add_column("Symbol", style="cyan")
    table.add_column("Shares", justify="right")
    table.add_column("Avg Cost", justify="right")
    table.add_column("Cost Basis", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Value", justify="right")
    table.add_column("Gain/Loss", justify="right")
    table.add_column("Return", justify="right")

    for stat in valuation.stats:
        table.add_row(
            stat.symbol,
            f"{stat.item.quantity:,}",
            format_money(stat.item.average_buy_price),
            format_money(stat.cost_basis),
            format_money(stat.current_price) if stat.has_price else Text(MISSING, style="dim"),
            format_money(stat.current_value) if stat.has_price else Text(MISSING, style="dim"),
            gain_text(stat.gain_loss),
            pct_text(stat.gain_loss_pct),
        )

    console.print(table)
    console.print()

    value_label = "Current Value (partial)" if totals.is_partial else "Current Value"
    console.print(f"[cyan]Total Cost Basis:[/cyan] {format_money(totals.total_cost_basis, currency)}")

    if not totals.has_any_price:
        console.print(f"[cyan]{value_label}:[/cyan] [dim]{MISSING}[/dim]")
        console.print("[yellow]No price data available for any holding[/yellow]")
        return

    console.print(f"[cyan]{value_label}:[/cyan] {format_money(totals.total_current_value, currency)}")
    gain_line = Text.assemble(
        ("Total Gain/Loss: ", "cyan"),
        gain_text(totals.total_gain_loss, currency),
        " (",
        pct_text(totals.total_gain_loss_pct),
        ")",
    )
    console.print(gain_line)

    if totals.is_partial:
        console.print()
        console.print(
            Panel.fit(
                f"No price for: {', '.join(totals.missing_symbols)}\n"
                "Their cost basis is included but they add nothing to current value.",
                title="Partial valuation",
                border_style=BORDER_WARNING,
            )
        )


@portfolio.command("list")
@click.pass_context
@handle_cli_errors
def portfolio_list(ctx: click.Context) -> None:
    """List all portfolios."""
    console: Console = ctx.obj["console"]

    portfolios = PortfolioClient().list_portfolios()
    if not portfolios:
        print_empty_state(console, "portfolios", 'stockfolio portfolio create "My Portfolio"')
        return

    table = Table(title="Portfolios")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Holdings", justify="right")
    table.add_column("Transactions", justify="right")
    table.add_column("Cost Basis", justify="right")
    table.add_column("Created", style="dim")

    for p in portfolios:
        cost_basis = aggregate(valuate(item, None) for item in p.items).total_cost_basis
        table.add_row(
            p.id,
            p.name,
            str(len(p.items)),
            str(len(p.transactions)),
            format_money(cost_basis),
            p.created_at.strftime("%Y-%m-%d"),
        )

    console.print(table)


@portfolio.command("create")
@click.argument("name")
@click.pass_context
@handle_cli_errors
def portfolio_create(ctx: click.Context, name: str) -> None:
    """Create a new, empty portfolio."""
    console: Console = ctx.obj["console"]

    created = PortfolioClient().create_portfolio(name)

    console.print(f"[green]Created portfolio {created.name}[/green]")
    console.print(f"  ID: {created.id}")
    print_next_steps(console, [
        ("Add a position", f"stockfolio portfolio buy {created.id} SYMBOL -q ... -p ..."),
        ("Value holdings", f"stockfolio portfolio show {created.id}"),
    ])


@portfolio.command("delete")
@click.argument("portfolio_id")
@click.confirmation_option(prompt="Delete this portfolio and all its transactions?")
@click.pass_context
@handle_cli_errors
def portfolio_delete(ctx: click.Context, portfolio_id: str) -> None:
    """Delete a portfolio."""
    console: Console = ctx.obj["console"]

    PortfolioClient().delete_portfolio(portfolio_id)
    console.print(f"[green]Deleted portfolio {portfolio_id}[/green]")


def _record_transaction(
    ctx: click.Context,
    portfolio_id: str,
    symbol: str,
    transaction_type: TransactionType,
    quantity: int,
    price: float,
) -> None:
    console: Console = ctx.obj["console"]
    currency = config.currency

    updated = PortfolioClient().add_transaction(
        portfolio_id,
        symbol=symbol,
        transaction_type=transaction_type,
        quantity=quantity,
        price_per_share=Decimal(str(price)),
    )

    verb = "purchase" if transaction_type is TransactionType.BUY else "sale"
    console.print(f"[green]Recorded {verb} of {symbol} in {updated.name}[/green]")
    console.print(f"  Shares: {quantity:,}")
    console.print(f"  Price: {format_money(price, currency)}")
    console.print(f"  Total: {format_money(quantity * Decimal(str(price)), currency)}")

    holding = next((i for i in updated.items if i.symbol.upper() == symbol), None)
    if holding is not None:
        console.print(
            f"  Position: {holding.quantity:,} shares @ {format_money(holding.average_buy_price, currency)} avg"
        )
    else:
        console.print("  Position: closed")

    console.print()
    console.print(f"[dim]Run `stockfolio portfolio show {portfolio_id}` to see your positions[/dim]")


@portfolio.command("buy")
@click.argument("portfolio_id")
@click.argument("symbol", type=SYMBOL)
@click.option("--quantity", "-q", type=click.IntRange(min=1), required=True, help="Number of shares")
@click.option("--price", "-p", type=click.FloatRange(min=0), required=True, help="Price per share")
@click.pass_context
@handle_cli_errors
def portfolio_buy(ctx: click.Context, portfolio_id: str, symbol: str, quantity: int, price: float) -> None:
    """Record a share purchase."""
    _record_transaction(ctx, portfolio_id, symbol, TransactionType.BUY, quantity, price)


@portfolio.command("sell")
@click.argument("portfolio_id")
@click.argument("symbol", type=SYMBOL)
@click.option("--quantity", "-q", type=click.IntRange(min=1), required=True, help="Shares to sell")
@click.option("--price", "-p", type=click.FloatRange(min=0), required=True, help="Sale price per share")
@click.pass_context
@handle_cli_errors
def portfolio_sell(ctx: click.Context, portfolio_id: str, symbol: str, quantity: int, price: float) -> None:
    """Record a share sale."""
    _record_transaction(ctx, portfolio_id, symbol, TransactionType.SELL, quantity, price)


@portfolio.command("show")
@click.argument("portfolio_id")
@click.option(
    "--prices",
    "price_source",
    type=click.Choice(["live", "cached", "none"]),
    default="live",
    help="Where current prices come from",
)
@click.option("--price", "overrides", multiple=True, metavar="SYMBOL=PRICE", help="Override a price (repeatable)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
@handle_cli_errors
def portfolio_show(
    ctx: click.Context, portfolio_id: str, price_source: str, overrides: tuple[str, ...], as_json: bool
) -> None:
    """Show holdings with cost basis, market value and gain/loss."""
    console: Console = ctx.obj["console"]

    manual_prices = parse_price_overrides(overrides)
    portfolio_obj = PortfolioClient().get_portfolio(portfolio_id)

    prices = resolve_prices(console, price_source) if portfolio_obj.items else {}
    prices.update(manual_prices)

    valuation = valuate_portfolio(portfolio_obj, prices)

    if as_json:
        click.echo(json.dumps(valuation.to_dict(), indent=2))
        return

    _render_valuation(console, valuation)


@portfolio.command("history")
@click.argument("portfolio_id")
@click.option("--symbol", type=SYMBOL, default=None, help="Only show this symbol")
@click.option("--limit", type=int, default=20, help="Maximum results")
@click.pass_context
@handle_cli_errors
def portfolio_history(ctx: click.Context, portfolio_id: str, symbol: str, limit: int) -> None:
    """Show the transaction log, newest first."""
    console: Console = ctx.obj["console"]

    portfolio_obj = PortfolioClient().get_portfolio(portfolio_id)
    transactions = [
        t for t in sorted(portfolio_obj.transactions, key=lambda t: t.timestamp, reverse=True)
        if symbol is None or t.symbol.upper() == symbol
    ][:limit]

    if not transactions:
        console.print("[yellow]No transactions found[/yellow]")
        return

    title = f"Transactions: {portfolio_obj.name}"
    if symbol:
        title += f" ({symbol})"
    table = Table(title=title)
    table.add_column("Date", style="dim")
    table.add_column("Symbol", style="cyan")
    table.add_column("Type", justify="center")
    table.add_column("Shares", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Total", justify="right")

    for t in transactions:
        type_text = Text(
            t.transaction_type.value.upper(),
            style=get_transaction_color(t.transaction_type.value),
        )
        table.add_row(
            t.timestamp.strftime("%Y-%m-%d %H:%M"),
            t.symbol,
            type_text,
            f"{t.quantity:,}",
            format_money(t.price_per_share),
            format_money(t.total),
        )

    console.print(table)
