"""
Input validation utilities for CLI commands.

Provides reusable validation callbacks and helper functions for:
- Symbol format validation
- Numeric bounds checking
- SYMBOL=PRICE override parsing
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

import click

# GSE symbol format: 1-10 uppercase alphanumeric chars, dots, hyphens
# Covers standard (MTNGH), numeric (GCB) and suffixed (SCB-PREF) symbols.
SYMBOL_PATTERN = re.compile(r"^[A-Z0-9.\-]{1,10}$")


def _validate_symbol_format(value: str) -> str:
    """
    Core symbol validation logic.

    Args:
        value: The symbol value (should already be uppercase/stripped)

    Returns:
        The validated symbol

    Raises:
        ValueError: If symbol format is invalid
    """
    if not SYMBOL_PATTERN.match(value):
        raise ValueError(
            f"Invalid symbol format: '{value}'. "
            "Expected 1-10 uppercase characters (e.g., MTNGH, GCB, SCB-PREF)"
        )
    return value


def validate_positive_float(
    name: str, min_val: Optional[float] = None, max_val: Optional[float] = None
):
    """
    Create a validator for positive float values with optional bounds.

    Args:
        name: Name of the parameter (for error messages)
        min_val: Optional minimum value (inclusive)
        max_val: Optional maximum value (inclusive)

    Returns:
        Click callback function for validation
    """
    def validator(ctx: click.Context, param: click.Parameter, value: Optional[float]) -> Optional[float]:
        if value is None:
            return None

        if value <= 0:
            raise click.BadParameter(f"{name} must be greater than 0")

        if min_val is not None and value < min_val:
            raise click.BadParameter(f"{name} must be at least {min_val}")

        if max_val is not None and value > max_val:
            raise click.BadParameter(f"{name} must be at most {max_val}")

        return value

    return validator


def parse_price_overrides(values: tuple[str, ...]) -> dict[str, Decimal]:
    """
    Parse ``SYMBOL=PRICE`` pairs into a price map.

    Args:
        values: Raw option values, e.g. ("MTNGH=1.85", "gcb=5.2")

    Returns:
        Dict mapping upper-cased symbol -> price

    Raises:
        click.BadParameter: On a malformed pair or a negative price
    """
    prices: dict[str, Decimal] = {}
    for raw in values:
        symbol, sep, price_text = raw.partition("=")
        if not sep:
            raise click.BadParameter(f"Expected SYMBOL=PRICE, got '{raw}'")

        try:
            symbol = _validate_symbol_format(symbol.strip().upper())
        except ValueError as e:
            raise click.BadParameter(str(e))

        try:
            price = Decimal(price_text.strip())
        except InvalidOperation:
            raise click.BadParameter(f"Invalid price for {symbol}: '{price_text}'")
        if not price.is_finite() or price < 0:
            raise click.BadParameter(f"Price for {symbol} must be a non-negative number")

        prices[symbol] = price
    return prices


class SymbolType(click.ParamType):
    """Custom Click parameter type for GSE symbols."""

    name = "symbol"

    def convert(self, value, param, ctx):
        if not value:
            self.fail("Symbol is required", param, ctx)

        value = value.upper().strip()

        try:
            return _validate_symbol_format(value)
        except ValueError as e:
            self.fail(str(e), param, ctx)


# Singleton instance for reuse
SYMBOL = SymbolType()
