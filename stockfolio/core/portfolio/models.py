"""
Portfolio domain types.

Read-only views of what the portfolio service owns:
- Transaction: Immutable buy/sell record, append-only
- PortfolioItem: Net position in one symbol with weighted average cost
- Portfolio: Named collection of items and their transaction log

Each type parses itself from the service's JSON shape via ``from_dict``.
Holdings are never recomputed here; the service applies buys and sells.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping, Union

from stockfolio.core.data.exceptions import PortfolioPayloadError

Number = Union[int, float, Decimal, str]

# Symbol -> most recently known market price
PriceMap = Mapping[str, Decimal]


def to_decimal(value: Number) -> Decimal:
    """Convert a numeric value to Decimal safely."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


# Fractional seconds beyond microseconds (e.g. nanosecond server timestamps)
_EXCESS_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def _parse_timestamp(value: Any, field_name: str) -> datetime:
    """Parse an ISO 8601 timestamp into an aware UTC datetime."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        try:
            dt = datetime.fromisoformat(_EXCESS_FRACTION_RE.sub(r"\1", value))
        except ValueError as e:
            raise PortfolioPayloadError(f"Invalid timestamp for {field_name}: {value!r}") from e
    else:
        raise PortfolioPayloadError(f"Invalid timestamp for {field_name}: {value!r}")

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _require(payload: Mapping[str, Any], key: str, kind: str) -> Any:
    if not isinstance(payload, Mapping):
        raise PortfolioPayloadError(f"{kind} payload must be an object, got {type(payload).__name__}")
    if key not in payload or payload[key] is None:
        raise PortfolioPayloadError(f"{kind} payload missing field: {key}")
    return payload[key]


def _parse_int(value: Any, field_name: str) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        if isinstance(value, float) and value.is_integer():
            return int(value)
        raise PortfolioPayloadError(f"{field_name} must be an integer, got {value!r}")
    return value


def _parse_decimal(value: Any, field_name: str) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise PortfolioPayloadError(f"{field_name} must be a number, got {value!r}")
    try:
        return to_decimal(value)
    except InvalidOperation as e:
        raise PortfolioPayloadError(f"{field_name} must be a number, got {value!r}") from e


class TransactionType(str, Enum):
    """Direction of a transaction. Values match the service wire format."""

    BUY = "Buy"
    SELL = "Sell"

    @classmethod
    def parse(cls, value: str) -> "TransactionType":
        """Parse a wire value, accepting any letter case."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        raise PortfolioPayloadError(f"Unknown transaction type: {value!r}")


@dataclass(frozen=True)
class Transaction:
    """Immutable buy/sell record."""

    id: str
    symbol: str
    transaction_type: TransactionType
    quantity: int
    price_per_share: Decimal
    timestamp: datetime

    @property
    def total(self) -> Decimal:
        """Cash amount of the transaction (quantity * price)."""
        return self.quantity * self.price_per_share

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Transaction":
        return cls(
            id=str(_require(payload, "id", "Transaction")),
            symbol=str(_require(payload, "symbol", "Transaction")),
            transaction_type=TransactionType.parse(
                _require(payload, "transaction_type", "Transaction")
            ),
            quantity=_parse_int(_require(payload, "quantity", "Transaction"), "quantity"),
            price_per_share=_parse_decimal(
                _require(payload, "price_per_share", "Transaction"), "price_per_share"
            ),
            timestamp=_parse_timestamp(_require(payload, "timestamp", "Transaction"), "timestamp"),
        )


@dataclass(frozen=True)
class PortfolioItem:
    """
    Net position in one symbol.

    ``average_buy_price`` is the weighted average cost per share as
    maintained by the portfolio service.
    """

    symbol: str
    quantity: int
    average_buy_price: Decimal

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "PortfolioItem":
        return cls(
            symbol=str(_require(payload, "symbol", "PortfolioItem")),
            quantity=_parse_int(_require(payload, "quantity", "PortfolioItem"), "quantity"),
            average_buy_price=_parse_decimal(
                _require(payload, "average_buy_price", "PortfolioItem"), "average_buy_price"
            ),
        )


@dataclass(frozen=True)
class Portfolio:
    """Named portfolio with holdings (one per symbol) and its transaction log."""

    id: str
    name: str
    created_at: datetime
    updated_at: datetime
    items: tuple[PortfolioItem, ...] = field(default_factory=tuple)
    transactions: tuple[Transaction, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Portfolio":
        """
        Build a Portfolio from the portfolio service JSON shape.

        Args:
            payload: Decoded JSON object

        Returns:
            Portfolio instance

        Raises:
            PortfolioPayloadError: If a field is missing or malformed
        """
        items = payload.get("items", []) if isinstance(payload, Mapping) else None
        transactions = payload.get("transactions", []) if isinstance(payload, Mapping) else None
        if not isinstance(items, list) or not isinstance(transactions, list):
            raise PortfolioPayloadError("Portfolio items and transactions must be lists")

        return cls(
            id=str(_require(payload, "id", "Portfolio")),
            name=str(_require(payload, "name", "Portfolio")),
            created_at=_parse_timestamp(_require(payload, "created_at", "Portfolio"), "created_at"),
            updated_at=_parse_timestamp(_require(payload, "updated_at", "Portfolio"), "updated_at"),
            items=tuple(PortfolioItem.from_dict(i) for i in items),
            transactions=tuple(Transaction.from_dict(t) for t in transactions),
        )
