"""
Quote snapshot database models for Stockfolio.

Defines the schema for:
- QuoteRecord: One observed live quote; rows are append-only, so the
  table doubles as a per-symbol price time series
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class QuoteRecord(SQLModel, table=True):
    """
    Live quote observed at a refresh.

    Never updated once written. The newest row per symbol is the
    last-known price used when live data is unavailable.
    """

    __tablename__ = "quote_records"

    id: Optional[int] = Field(default=None, primary_key=True)
    symbol: str = Field(max_length=20, index=True)
    name: str = Field(max_length=100)  # Name as reported by the API

    price: Decimal = Field(max_digits=14, decimal_places=4)
    change: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=4)  # Absolute change on the day
    volume: int = Field(default=0)

    # Stored as UTC; SQLite drops the offset so reads come back naive
    fetched_at: datetime = Field(sa_type=DateTime(timezone=True), index=True)

    # Audit timestamp
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
