"""Market summary: breadth, volume, market cap and top movers from live quotes."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from stockfolio.core.data.quotes import LiveQuote


@dataclass(frozen=True)
class MarketSummary:
    """Snapshot of the whole market at one refresh."""

    total_volume: int
    total_stocks: int
    advancers: int
    decliners: int
    total_market_cap: Optional[Decimal] = None  # None when no share counts are known
    top_gainers: tuple[LiveQuote, ...] = field(default_factory=tuple)
    top_losers: tuple[LiveQuote, ...] = field(default_factory=tuple)
    last_updated: Optional[datetime] = None


def _total_market_cap(quotes: list[LiveQuote], shares: Mapping[str, int]) -> Optional[Decimal]:
    counts = {symbol.strip().upper(): n for symbol, n in shares.items()}
    caps = [q.price * counts[q.symbol] for q in quotes if q.symbol in counts]
    if not caps:
        return None
    return sum(caps, Decimal("0"))


def summarize_market(
    quotes: Iterable[LiveQuote],
    top_n: int = 5,
    now: Optional[datetime] = None,
    shares: Optional[Mapping[str, int]] = None,
) -> MarketSummary:
    """
    Summarize live quotes.

    Gainers are quotes with positive change, largest first; losers have
    negative change, most negative first. Unchanged quotes are in neither.

    Args:
        quotes: Live quotes for the market
        top_n: How many gainers and losers to keep
        now: Timestamp for the summary (defaults to now)
        shares: Outstanding share count per symbol. Market cap sums
            price * shares over quotes that have a count.

    Returns:
        MarketSummary
    """
    quotes = list(quotes)
    gainers = sorted((q for q in quotes if q.change > 0), key=lambda q: q.change, reverse=True)
    losers = sorted((q for q in quotes if q.change < 0), key=lambda q: q.change)

    return MarketSummary(
        total_volume=sum(q.volume for q in quotes),
        total_stocks=len(quotes),
        advancers=len(gainers),
        decliners=len(losers),
        total_market_cap=_total_market_cap(quotes, shares or {}),
        top_gainers=tuple(gainers[:top_n]),
        top_losers=tuple(losers[:top_n]),
        last_updated=now or datetime.now(UTC),
    )
