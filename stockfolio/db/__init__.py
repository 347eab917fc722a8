"""
Database module for Stockfolio.

Provides SQLModel definitions and connection management for quote snapshots.
"""

from stockfolio.db.database import get_engine, get_session, init_db, reset_engine
from stockfolio.db.models import QuoteRecord

__all__ = [
    # Models
    "QuoteRecord",
    # Database
    "get_engine",
    "get_session",
    "init_db",
    "reset_engine",
]
