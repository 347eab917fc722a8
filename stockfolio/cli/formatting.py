"""Centralized formatting utilities for CLI output.

Provides consistent colors, number formats, and hints across all CLI
commands. Unknown values (missing prices) always render as MISSING, never
as zero.
"""

from decimal import Decimal
from typing import Optional, Union

from rich.console import Console
from rich.text import Text


# =============================================================================
# Borders
# =============================================================================

BORDER_PRIMARY = "blue"      # Main content panels
BORDER_WARNING = "yellow"    # Warning panels (partial data, disclaimers)

# Missing value indicator
MISSING = "-"

Numeric = Union[int, float, Decimal]


# =============================================================================
# Gain/Loss Colors
# =============================================================================


def get_gain_color(value: Optional[Numeric]) -> str:
    """Get Rich color for a gain/loss or change value."""
    if value is None:
        return "dim"
    if value > 0:
        return "green"
    elif value < 0:
        return "red"
    return "white"


def get_transaction_color(transaction_type: str) -> str:
    """Get Rich color based on transaction direction."""
    colors = {
        "buy": "green",
        "sell": "red",
    }
    return colors.get(transaction_type.lower(), "white")


# =============================================================================
# Number Formatting
# =============================================================================


def format_money(value: Optional[Numeric], currency: str = "", signed: bool = False) -> str:
    """
    Format an amount with thousands separators and 2 decimals.

    Args:
        value: Amount, or None for unknown
        currency: Optional currency label appended after the number
        signed: Prefix positive values with "+"

    Returns:
        Formatted string, or MISSING for None
    """
    if value is None:
        return MISSING
    text = f"{float(value):+,.2f}" if signed else f"{float(value):,.2f}"
    return f"{text} {currency}" if currency else text


def format_pct(value: Optional[Numeric]) -> str:
    """Format a percentage with sign, or MISSING for None."""
    if value is None:
        return MISSING
    return f"{float(value):+.2f}%"


def gain_text(value: Optional[Numeric], currency: str = "") -> Text:
    """Colored, signed gain/loss amount."""
    return Text(format_money(value, currency, signed=True), style=get_gain_color(value))


def pct_text(value: Optional[Numeric]) -> Text:
    """Colored, signed percentage."""
    return Text(format_pct(value), style=get_gain_color(value))


# =============================================================================
# Helper Functions for Consistent Output
# =============================================================================


def format_missing(value, default: str = MISSING):
    """
    Return value or standard missing indicator.

    Args:
        value: The value to check
        default: Fallback for None values (default: "-")

    Returns:
        Original value if not None, else default
    """
    return value if value is not None else default


def print_next_steps(console: Console, steps: list[tuple[str, str]]) -> None:
    """
    Print standardized next-step hints.

    Args:
        console: Rich console instance
        steps: List of (label, command) tuples
    """
    console.print()
    console.print("[dim]Next steps:[/dim]")
    for label, cmd in steps:
        console.print(f"  [dim]{label}:[/dim]  {cmd}")


def print_empty_state(console: Console, entity: str, hint: str) -> None:
    """
    Print standardized empty state message.

    Args:
        console: Rich console instance
        entity: What's empty (e.g., "portfolios", "holdings")
        hint: Command to get started
    """
    console.print(f"[yellow]No {entity} found.[/yellow]")
    console.print(f"[dim]Get started: {hint}[/dim]")
