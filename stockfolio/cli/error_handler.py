"""Shared CLI error handling decorator.

Eliminates duplicate exception handling across CLI commands by catching
the service and payload errors in a single decorator. Commands can still
handle command-specific exceptions internally before the decorator catches
the rest.

Usage:
    @click.command()
    @click.pass_context
    @handle_cli_errors
    def my_command(ctx, ...):
        ...
"""

import functools
import logging

import click
from rich.console import Console

from stockfolio.core.data.exceptions import (
    ConfigError,
    PortfolioNotFoundError,
    PortfolioPayloadError,
    PortfolioServiceError,
    QuotePayloadError,
    QuoteServiceError,
)

logger = logging.getLogger(__name__)


def handle_cli_errors(f):
    """Decorator that catches common CLI exceptions with Rich-formatted output.

    Handles portfolio service, market data and configuration errors plus
    unexpected exceptions with consistent formatting and exit codes.

    Must be applied AFTER @click.pass_context so the first positional arg
    is the Click context (which provides the console via ctx.obj["console"]).
    """

    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        # Get console from Click context if available
        ctx = click.get_current_context(silent=True)
        console = ctx.obj["console"] if ctx and ctx.obj and "console" in ctx.obj else Console()

        try:
            return f(*args, **kwargs)
        except SystemExit:
            raise  # Don't intercept explicit exits
        except PortfolioNotFoundError as e:
            console.print(f"[red]{e}[/red]")
            console.print("[dim]Run `stockfolio portfolio list` to see available portfolios[/dim]")
            raise SystemExit(1)
        except PortfolioServiceError as e:
            console.print(f"[red]Portfolio Service Error:[/red] {e}")
            console.print("[yellow]Check that the portfolio service is running (STOCKFOLIO_API_URL).[/yellow]")
            raise SystemExit(1)
        except QuoteServiceError as e:
            console.print(f"[red]Market Data Error:[/red] {e}")
            console.print("[yellow]The GSE API may be unavailable. Try again later or use --cached.[/yellow]")
            raise SystemExit(1)
        except (QuotePayloadError, PortfolioPayloadError) as e:
            console.print(f"[red]Unexpected Response:[/red] {e}")
            raise SystemExit(1)
        except ConfigError as e:
            console.print(f"[red]Configuration Error:[/red] {e}")
            raise SystemExit(1)
        except ValueError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise SystemExit(1)
        except click.exceptions.Exit:
            raise  # Don't intercept Click exits
        except click.ClickException:
            raise  # Usage errors raised inside a command keep Click's formatting
        except Exception as e:
            logger.exception("Unexpected error in %s command", f.__name__)
            console.print(f"[red]Unexpected error:[/red] {e}")
            raise SystemExit(1)

    return wrapper
