"""
Quote snapshot storage and refresh scheduling.

Each refresh appends the observed live quotes, so the table serves both
as the last-known price source (when the live API is unreachable) and as
a per-symbol price history. Designed to be called via CLI commands or
cron jobs.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

from sqlalchemy import and_, func
from sqlmodel import select

from stockfolio.config import config
from stockfolio.core.data.quotes import LiveQuote
from stockfolio.db.database import get_session
from stockfolio.db.models import QuoteRecord

logger = logging.getLogger(__name__)

# GSE trading session: Monday-Friday 10:00-15:00 GMT
GSE_TIMEZONE = "Africa/Accra"
GSE_OPEN_HOUR = 10
GSE_CLOSE_HOUR = 15


@dataclass(frozen=True)
class PricePoint:
    """One observation in a symbol's price history."""

    timestamp: datetime
    price: Decimal
    change: Decimal
    volume: int


def _to_utc(dt: datetime) -> datetime:
    """Convert a datetime to timezone-aware UTC.

    Naive values are taken to be UTC already. SQLite keeps only the
    wall-clock digits, so values read back from the table come in naive
    and every value written or compared must be converted to UTC first.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def record_quotes(quotes: Iterable[LiveQuote], fetched_at: Optional[datetime] = None) -> int:
    """
    Append live quotes to the snapshot table.

    Args:
        quotes: Live quotes from GSEClient.fetch_live()
        fetched_at: Observation time (defaults to now)

    Returns:
        Number of rows written
    """
    observed = _to_utc(fetched_at or datetime.now(UTC))
    count = 0

    with get_session() as session:
        for quote in quotes:
            session.add(
                QuoteRecord(
                    symbol=quote.symbol,
                    name=quote.name,
                    price=quote.price,
                    change=quote.change,
                    volume=quote.volume,
                    fetched_at=observed,
                )
            )
            count += 1

    logger.info(f"Recorded {count} quotes at {observed:%Y-%m-%d %H:%M} UTC")
    return count


def get_latest_price_map(
    max_age: Optional[timedelta] = None,
    now: Optional[datetime] = None,
) -> dict[str, Decimal]:
    """
    Last-known price per symbol from stored snapshots.

    Args:
        max_age: Ignore observations older than this (default: no limit)
        now: Reference time for max_age (defaults to now)

    Returns:
        Dict mapping symbol -> price. Empty if nothing stored.
    """
    latest_query = select(
        QuoteRecord.symbol, func.max(QuoteRecord.fetched_at).label("latest")
    )
    if max_age is not None:
        cutoff = _to_utc(now or datetime.now(UTC)) - max_age
        latest_query = latest_query.where(QuoteRecord.fetched_at >= cutoff)
    latest = latest_query.group_by(QuoteRecord.symbol).subquery()

    statement = select(QuoteRecord).join(
        latest,
        and_(
            QuoteRecord.symbol == latest.c.symbol,
            QuoteRecord.fetched_at == latest.c.latest,
        ),
    )

    with get_session() as session:
        records = session.exec(statement).all()
        return {r.symbol: Decimal(str(r.price)) for r in records}


def get_price_history(
    symbol: str,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    limit: Optional[int] = None,
) -> list[PricePoint]:
    """
    Retrieve stored observations for one symbol.

    Args:
        symbol: Ticker symbol (any case)
        start_date: Filter observations >= this date
        end_date: Filter observations <= this date
        limit: Maximum number of points, keeping the most recent

    Returns:
        List of PricePoint ordered by timestamp ascending.
        Timestamps are timezone-aware UTC.
    """
    query = select(QuoteRecord).where(QuoteRecord.symbol == symbol.strip().upper())

    if start_date:
        query = query.where(QuoteRecord.fetched_at >= _to_utc(start_date))
    if end_date:
        query = query.where(QuoteRecord.fetched_at <= _to_utc(end_date))

    # Newest first so limit keeps the most recent points
    query = query.order_by(QuoteRecord.fetched_at.desc())
    if limit:
        query = query.limit(limit)

    with get_session() as session:
        records = session.exec(query).all()
        points = [
            PricePoint(
                timestamp=_to_utc(r.fetched_at),
                price=Decimal(str(r.price)),
                change=Decimal(str(r.change)),
                volume=r.volume,
            )
            for r in records
        ]

    points.reverse()
    return points


def get_last_refresh() -> Optional[datetime]:
    """Time of the most recent stored observation, or None."""
    with get_session() as session:
        last = session.exec(select(func.max(QuoteRecord.fetched_at))).one()
    return _to_utc(last) if last is not None else None


def is_trading_hours(now: Optional[datetime] = None) -> bool:
    """Check whether the GSE is in session (Mon-Fri 10:00-15:00 GMT)."""
    now = now or datetime.now(UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    try:
        local = now.astimezone(ZoneInfo(GSE_TIMEZONE))
    except Exception as e:
        # Accra is GMT year-round; UTC is equivalent if tzdata is missing
        logger.warning(f"Timezone conversion failed: {e}. Falling back to UTC.")
        local = now.astimezone(UTC)

    if local.weekday() >= 5:
        return False
    return GSE_OPEN_HOUR <= local.hour < GSE_CLOSE_HOUR


def should_refresh(now: Optional[datetime] = None) -> bool:
    """
    Check if an automatic quote refresh should run.

    Returns True if:
    - The GSE is in session
    - No snapshot exists, or the last one is older than
      config.quote_refresh_minutes

    Returns:
        True if a refresh should be taken, False otherwise
    """
    now = now or datetime.now(UTC)

    if not is_trading_hours(now):
        logger.info("Outside GSE trading hours (Mon-Fri 10:00-15:00 GMT), skipping refresh")
        return False

    last = get_last_refresh()
    if last is None:
        return True

    age = _to_utc(now) - last
    if age < timedelta(minutes=config.quote_refresh_minutes):
        logger.info(f"Last refresh {age} ago, within {config.quote_refresh_minutes} minute interval")
        return False
    return True
