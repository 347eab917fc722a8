"""
Stockfolio CLI - GSE market data and portfolio tracker.

Entry point for the command-line interface. Provides commands for:
- Portfolio management (create, buy/sell, valuation with gain/loss)
- Live GSE quotes, company profiles and stored price history
- Market summary (advancers, decliners, top movers)
- What-if growth simulation
- Database management (quote snapshot store)

Usage:
    stockfolio --help
    stockfolio portfolio list
    stockfolio portfolio show 1
    stockfolio portfolio buy 1 MTNGH -q 100 -p 1.85
    stockfolio quotes list
    stockfolio quotes refresh --auto
    stockfolio simulate 1000 --months 12
    stockfolio db init
"""

import logging
from collections import OrderedDict

import click
from rich.console import Console

from stockfolio import __version__
from stockfolio.cli.commands import db, portfolio, quotes, simulate
from stockfolio.config import config


class OrderedGroup(click.Group):
    """Custom group that displays commands in organized categories."""

    COMMAND_GROUPS: OrderedDict[str, list[str]] = OrderedDict([
        ("Tracking", ["portfolio"]),
        ("Market", ["quotes"]),
        ("Planning", ["simulate"]),
        ("Setup", ["db"]),
    ])

    def format_commands(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """Write commands in organized groups."""
        for group_name, cmd_names in self.COMMAND_GROUPS.items():
            commands = []
            for cmd_name in cmd_names:
                cmd = self.get_command(ctx, cmd_name)
                if cmd:
                    help_text = cmd.get_short_help_str(limit=formatter.width)
                    commands.append((cmd_name, help_text))

            if commands:
                with formatter.section(group_name):
                    formatter.write_dl(commands)


# Global console for rich output
console = Console()


@click.group(cls=OrderedGroup)
@click.version_option(version=__version__, prog_name="stockfolio")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """
    Stockfolio - GSE market data and portfolio tracker.

    \b
    Examples:
        stockfolio portfolio create "Retirement"
        stockfolio portfolio buy 1 MTNGH -q 100 -p 1.85
        stockfolio portfolio show 1              # Valuation with live prices
        stockfolio portfolio show 1 --json       # Output as JSON
        stockfolio quotes market                 # Top gainers and losers
        stockfolio simulate 1000 --months 24     # What-if projection
    """
    level = logging.DEBUG if verbose else getattr(logging, config.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    ctx.ensure_object(dict)
    ctx.obj["console"] = console


# Register command groups
cli.add_command(portfolio.portfolio)
cli.add_command(quotes.quotes)
cli.add_command(simulate.simulate)
cli.add_command(db.db)


def main() -> None:
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
