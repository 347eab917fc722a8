"""
Portfolio valuation against a snapshot of market prices.

Provides:
- Holding valuation (cost basis, current value, gain/loss)
- Portfolio aggregation with an explicit "no price data" state
- One-call valuation of a Portfolio against a PriceMap

All functions are pure. A missing price is an expected condition (stale
quote, new listing, fetch failure) and is reported as None on the result,
never as a zero value.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, Optional

from stockfolio.core.portfolio.constants import PERCENT
from stockfolio.core.portfolio.models import (
    Number,
    Portfolio,
    PortfolioItem,
    PriceMap,
    to_decimal,
)

_ZERO = Decimal("0")


def _to_float(value: Optional[Decimal]) -> Optional[float]:
    # NaN and infinity have no JSON form
    if value is None or not value.is_finite():
        return None
    return float(value)


@dataclass(frozen=True)
class HoldingStat:
    """Valuation of a single holding. Recomputed per call, never stored."""

    item: PortfolioItem
    cost_basis: Decimal
    current_price: Optional[Decimal] = None
    current_value: Optional[Decimal] = None
    gain_loss: Optional[Decimal] = None
    gain_loss_pct: Optional[Decimal] = None  # None when cost_basis is 0

    @property
    def symbol(self) -> str:
        return self.item.symbol

    @property
    def has_price(self) -> bool:
        return self.current_price is not None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation (Decimal -> float; None and non-finite -> None)."""
        return {
            "symbol": self.item.symbol,
            "quantity": self.item.quantity,
            "average_buy_price": _to_float(to_decimal(self.item.average_buy_price)),
            "cost_basis": _to_float(self.cost_basis),
            "current_price": _to_float(self.current_price),
            "current_value": _to_float(self.current_value),
            "gain_loss": _to_float(self.gain_loss),
            "gain_loss_pct": _to_float(self.gain_loss_pct),
        }


@dataclass(frozen=True)
class PortfolioTotals:
    """Portfolio-level totals folded from holding stats."""

    total_cost_basis: Decimal
    total_current_value: Decimal
    total_gain_loss: Optional[Decimal]
    total_gain_loss_pct: Optional[Decimal]
    has_any_price: bool
    missing_symbols: tuple[str, ...] = field(default_factory=tuple)  # Holdings without a price

    @property
    def is_partial(self) -> bool:
        """True when some, but not all, holdings contributed a current value."""
        return self.has_any_price and bool(self.missing_symbols)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_cost_basis": _to_float(self.total_cost_basis),
            "total_current_value": _to_float(self.total_current_value),
            "total_gain_loss": _to_float(self.total_gain_loss),
            "total_gain_loss_pct": _to_float(self.total_gain_loss_pct),
            "has_any_price": self.has_any_price,
            "is_partial": self.is_partial,
            "missing_symbols": list(self.missing_symbols),
        }


@dataclass(frozen=True)
class PortfolioValuation:
    """Holding stats and totals for one portfolio."""

    portfolio: Portfolio
    stats: tuple[HoldingStat, ...]
    totals: PortfolioTotals

    def to_dict(self) -> dict[str, Any]:
        return {
            "portfolio_id": self.portfolio.id,
            "name": self.portfolio.name,
            "holdings": [s.to_dict() for s in self.stats],
            "totals": self.totals.to_dict(),
        }


def valuate(item: PortfolioItem, current_price: Optional[Number]) -> HoldingStat:
    """
    Value one holding at the given price.

    Args:
        item: Holding with quantity and average cost per share
        current_price: Latest market price, or None when unknown.
            A non-finite price (NaN, infinity) is treated as unknown.

    Returns:
        HoldingStat. Price-derived fields are None when the price is
        unknown; gain_loss_pct is None when cost basis is zero.
    """
    avg_cost = to_decimal(item.average_buy_price)
    cost_basis = item.quantity * avg_cost

    price = to_decimal(current_price) if current_price is not None else None
    if price is None or not price.is_finite():
        return HoldingStat(item=item, cost_basis=cost_basis)

    current_value = item.quantity * price
    gain_loss = current_value - cost_basis
    gain_loss_pct = (
        gain_loss / cost_basis * PERCENT
        if cost_basis.is_finite() and cost_basis > 0
        else None
    )

    return HoldingStat(
        item=item,
        cost_basis=cost_basis,
        current_price=price,
        current_value=current_value,
        gain_loss=gain_loss,
        gain_loss_pct=gain_loss_pct,
    )


def aggregate(stats: Iterable[HoldingStat]) -> PortfolioTotals:
    """
    Fold holding stats into portfolio totals.

    Unpriced holdings add their cost basis but nothing to current value, so
    a total with missing prices is partial (see PortfolioTotals.is_partial).
    Gain/loss totals are None until at least one price is known and the
    portfolio has nonzero cost basis.

    Args:
        stats: Holding stats, typically from valuate()

    Returns:
        PortfolioTotals. An empty input yields zero totals, None gain/loss
        and has_any_price False.
    """
    total_cost_basis = _ZERO
    total_current_value = _ZERO
    has_any_price = False
    missing: list[str] = []

    for stat in stats:
        total_cost_basis += stat.cost_basis
        if stat.current_value is not None:
            total_current_value += stat.current_value
        if stat.current_price is not None:
            has_any_price = True
        else:
            missing.append(stat.symbol)

    if not has_any_price or total_cost_basis == 0:
        total_gain_loss = None
        total_gain_loss_pct = None
    else:
        total_gain_loss = total_current_value - total_cost_basis
        total_gain_loss_pct = (
            total_gain_loss / total_cost_basis * PERCENT if total_cost_basis.is_finite() else None
        )

    return PortfolioTotals(
        total_cost_basis=total_cost_basis,
        total_current_value=total_current_value,
        total_gain_loss=total_gain_loss,
        total_gain_loss_pct=total_gain_loss_pct,
        has_any_price=has_any_price,
        missing_symbols=tuple(missing),
    )


def valuate_portfolio(portfolio: Portfolio, prices: PriceMap) -> PortfolioValuation:
    """
    Value every holding of a portfolio and aggregate the totals.

    Args:
        portfolio: Portfolio as returned by the portfolio service
        prices: Symbol -> current price. Symbols are matched
            case-insensitively; symbols absent from the map are valued
            without a price.

    Returns:
        PortfolioValuation with stats in holding order
    """
    by_symbol = {symbol.strip().upper(): price for symbol, price in prices.items()}
    stats = tuple(
        valuate(item, by_symbol.get(item.symbol.strip().upper()))
        for item in portfolio.items
    )
    return PortfolioValuation(portfolio=portfolio, stats=stats, totals=aggregate(stats))
