"""Exceptions raised at Stockfolio's I/O boundaries.

The valuation engine itself never raises: missing prices and empty
portfolios are reported through None/False values on its results.
"""


class StockfolioError(Exception):
    """Base class for all Stockfolio errors."""


class ConfigError(StockfolioError):
    """Configuration value is missing or invalid."""


class QuoteServiceError(StockfolioError):
    """GSE market data API request failed after all retries."""


class QuotePayloadError(StockfolioError):
    """GSE market data response does not match any known quote shape."""


class PortfolioServiceError(StockfolioError):
    """Portfolio service request failed."""


class PortfolioNotFoundError(PortfolioServiceError):
    """Requested portfolio does not exist."""

    def __init__(self, portfolio_id: str):
        self.portfolio_id = portfolio_id
        super().__init__(f"Portfolio not found: {portfolio_id}")


class PortfolioPayloadError(StockfolioError):
    """Portfolio service response is missing fields or has wrong types."""
