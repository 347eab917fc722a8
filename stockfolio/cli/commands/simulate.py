"""What-if growth simulation command."""

import json
import random

import click
from rich.console import Console
from rich.panel import Panel

from stockfolio.cli.error_handler import handle_cli_errors
from stockfolio.cli.formatting import BORDER_PRIMARY, BORDER_WARNING, format_money, pct_text
from stockfolio.cli.validators import validate_positive_float
from stockfolio.config import config
from stockfolio.core.portfolio.constants import (
    SIM_DEFAULT_MONTHS,
    SIM_MAX_ANNUAL_RATE,
    SIM_MIN_ANNUAL_RATE,
)
from stockfolio.core.portfolio.simulator import simulate as run_simulation

DISCLAIMER = (
    "This is a toy projection using one random annual rate between "
    f"{SIM_MIN_ANNUAL_RATE:+.0%} and {SIM_MAX_ANNUAL_RATE:+.0%}. "
    "It is not a forecast or investment advice."
)


@click.command()
@click.argument("amount", type=float, callback=validate_positive_float("Amount"))
@click.option("--months", "-m", type=click.IntRange(min=1), default=SIM_DEFAULT_MONTHS,
              help=f"Investment horizon in months (default: {SIM_DEFAULT_MONTHS})")
@click.option("--seed", type=int, default=None, help="Seed for a reproducible result")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
@handle_cli_errors
def simulate(ctx: click.Context, amount: float, months: int, seed: int, as_json: bool) -> None:
    """
    Simulate growth of an investment over N months.

    \b
    Examples:
        stockfolio simulate 1000
        stockfolio simulate 5000 --months 24
        stockfolio simulate 1000 --seed 42 --json
    """
    console: Console = ctx.obj["console"]

    rng = random.Random(seed) if seed is not None else None
    result = run_simulation(amount, months, rng=rng)

    if as_json:
        data = result.to_dict()
        data["disclaimer"] = DISCLAIMER
        click.echo(json.dumps(data, indent=2))
        return

    currency = config.currency
    console.print(
        Panel.fit(
            f"[bold]Growth Simulation[/bold]\n\n"
            f"[cyan]Invested:[/cyan] {format_money(result.principal, currency)}\n"
            f"[cyan]Horizon:[/cyan] {result.months} months\n"
            f"[cyan]Annual Rate:[/cyan] {result.annual_rate:+.2%} "
            f"[dim]({result.monthly_rate:+.3%} / month)[/dim]\n"
            f"[cyan]Projected Value:[/cyan] {format_money(result.projected_value, currency)}",
            border_style=BORDER_PRIMARY,
        )
    )
    console.print("Growth: ", pct_text(result.growth_pct))
    console.print(Panel(f"[yellow]{DISCLAIMER}[/yellow]", border_style=BORDER_WARNING))
