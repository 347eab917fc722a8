"""
Pytest configuration and shared fixtures for Stockfolio tests.

This module provides common fixtures used across all test modules,
including portfolio service payloads, GSE quote payloads, database
fixtures, and mock HTTP helpers.
"""

from decimal import Decimal
from pathlib import Path
from typing import Any, Generator
from unittest.mock import MagicMock

import pytest
import requests

from stockfolio.core.portfolio.models import Portfolio, PortfolioItem


# ==============================================================================
# Autouse Fixtures - Run automatically for all tests
# ==============================================================================


@pytest.fixture(autouse=True)
def set_test_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Point the global config at test services.

    The config singleton reads the environment at import time, so its
    attributes are patched directly. Tests that need the database use
    tmp_db, which also resets the engine.
    """
    from stockfolio.config import config

    monkeypatch.setattr(config, "api_url", "http://portfolio.test")
    monkeypatch.setattr(config, "gse_api_url", "http://gse.test")
    monkeypatch.setattr(config, "db_path", tmp_path / "unused.db")
    monkeypatch.setattr(config, "currency", "GHS")
    monkeypatch.setattr(config, "request_delay_seconds", 0)
    monkeypatch.setattr(config, "retry_backoff_seconds", 0)


# ==============================================================================
# Portfolio Service Fixtures
# ==============================================================================


@pytest.fixture
def transaction_payload() -> dict[str, Any]:
    """One buy as returned by the portfolio service."""
    return {
        "id": "tx-1",
        "symbol": "MTNGH",
        "transaction_type": "Buy",
        "quantity": 100,
        "price_per_share": 2.5,
        "timestamp": "2024-03-01T10:15:00.123456789Z",
    }


@pytest.fixture
def portfolio_payload(transaction_payload: dict[str, Any]) -> dict[str, Any]:
    """
    Portfolio with two holdings and one transaction.

    MTNGH: 100 @ 2.50 (cost basis 250.00)
    GCB:    50 @ 1.00 (cost basis  50.00)
    """
    return {
        "id": "pf-1",
        "name": "Retirement",
        "created_at": "2024-03-01T09:00:00Z",
        "updated_at": "2024-03-01T10:15:00Z",
        "items": [
            {"symbol": "MTNGH", "quantity": 100, "average_buy_price": 2.5},
            {"symbol": "GCB", "quantity": 50, "average_buy_price": 1.0},
        ],
        "transactions": [
            transaction_payload,
            {
                "id": "tx-2",
                "symbol": "GCB",
                "transaction_type": "Buy",
                "quantity": 50,
                "price_per_share": 1.0,
                "timestamp": "2024-03-02T11:00:00Z",
            },
        ],
    }


@pytest.fixture
def empty_portfolio_payload() -> dict[str, Any]:
    """Portfolio with no holdings."""
    return {
        "id": "pf-2",
        "name": "Empty",
        "created_at": "2024-03-01T09:00:00Z",
        "updated_at": "2024-03-01T09:00:00Z",
        "items": [],
        "transactions": [],
    }


@pytest.fixture
def sample_portfolio(portfolio_payload: dict[str, Any]) -> Portfolio:
    """Parsed two-holding portfolio."""
    return Portfolio.from_dict(portfolio_payload)


@pytest.fixture
def make_item():
    """Factory for PortfolioItem."""

    def _make(symbol: str = "MTNGH", quantity: int = 100, avg: str = "2.50") -> PortfolioItem:
        return PortfolioItem(symbol=symbol, quantity=quantity, average_buy_price=Decimal(avg))

    return _make


# ==============================================================================
# GSE Market Data Fixtures
# ==============================================================================


@pytest.fixture
def live_payload() -> list[dict[str, Any]]:
    """GET /live response."""
    return [
        {"name": "MTNGH", "price": 3.0, "change": 0.05, "volume": 120000},
        {"name": "GCB", "price": 5.2, "change": -0.1, "volume": 3400},
        {"name": "SCB", "price": 20.0, "change": 0, "volume": 0},
        {"name": "CAL", "price": 0.4, "change": 0.02, "volume": 9000},
    ]


@pytest.fixture
def equity_detail_payload() -> dict[str, Any]:
    """GET /equities/mtngh response."""
    return {
        "name": "MTNGH",
        "price": 3.0,
        "capital": 3000000000,
        "dps": 0.2,
        "eps": 0.35,
        "shares": 12290474360,
        "company": {
            "name": "Scancom PLC",
            "sector": "Communication Services",
            "industry": "Telecommunications",
            "address": "Airport City, Accra",
            "email": "info@mtn.com.gh",
            "telephone": "+233 24 430 0000",
            "facsimile": None,
            "website": "https://mtn.com.gh",
            "directors": [
                {"name": "Ishmael Yamson", "position": "Chairman"},
                {"name": "Selorm Adadevoh", "position": "CEO"},
            ],
        },
    }


# ==============================================================================
# HTTP Mock Helpers
# ==============================================================================


def _make_response(status_code: int = 200, payload: Any = None, text: str = "") -> MagicMock:
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.text = text
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def make_response():
    """Factory for mock requests.Response objects."""
    return _make_response


@pytest.fixture
def mock_session() -> MagicMock:
    """A mock requests.Session."""
    return MagicMock(spec=requests.Session)


# ==============================================================================
# Database Fixtures
# ==============================================================================


@pytest.fixture
def tmp_db_path(tmp_path: Path) -> Path:
    """Provide a temporary database path."""
    return tmp_path / "test_stockfolio.db"


@pytest.fixture
def tmp_db(tmp_db_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """
    Set up a temporary database for testing.

    Monkeypatches the database path and initializes the schema.
    """
    monkeypatch.setenv("STOCKFOLIO_DB_PATH", str(tmp_db_path))

    # Patch the config singleton directly since it reads env at import time
    from stockfolio.config import config

    monkeypatch.setattr(config, "db_path", tmp_db_path)

    # Reset any existing engine to force creation with new path
    from stockfolio.db.database import reset_engine

    reset_engine()

    from stockfolio.db import init_db

    init_db()

    yield tmp_db_path

    # Cleanup
    reset_engine()
    if tmp_db_path.exists():
        tmp_db_path.unlink()
