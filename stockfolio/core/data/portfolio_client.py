"""
REST client for the portfolio service.

The service owns portfolios, their holdings and transaction logs; it
applies buys and sells to holdings. This client only reads portfolios and
submits requests, returning the service's view as domain objects.
"""

import logging
from decimal import Decimal
from typing import Any, Optional, Union

import requests

from stockfolio.config import Config, config as default_config
from stockfolio.core.data.exceptions import (
    PortfolioNotFoundError,
    PortfolioPayloadError,
    PortfolioServiceError,
)
from stockfolio.core.portfolio.models import Portfolio, TransactionType

logger = logging.getLogger(__name__)


class PortfolioClient:
    """Client for the ``/api/portfolios`` endpoints."""

    def __init__(
        self,
        cfg: Optional[Config] = None,
        session: Optional[requests.Session] = None,
    ):
        self.config = cfg or default_config
        self.config.validate()
        self.base_url = f"{self.config.api_url.rstrip('/')}/api/portfolios"
        self.session = session or requests.Session()

    def _request(
        self,
        method: str,
        path: str = "",
        portfolio_id: Optional[str] = None,
        json: Optional[dict] = None,
    ) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method, url, json=json, timeout=self.config.request_timeout_seconds
            )
        except requests.RequestException as e:
            raise PortfolioServiceError(f"Portfolio service unreachable: {e}") from e

        if response.status_code == 404 and portfolio_id is not None:
            raise PortfolioNotFoundError(portfolio_id)
        if not response.ok:
            raise PortfolioServiceError(
                f"Portfolio service returned {response.status_code} for {method} {url}: "
                f"{response.text[:200]}"
            )
        return response

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise PortfolioPayloadError("Portfolio service returned invalid JSON") from e

    def list_portfolios(self) -> list[Portfolio]:
        """Fetch all portfolios."""
        data = self._decode(self._request("GET"))
        if not isinstance(data, list):
            raise PortfolioPayloadError("Expected a list of portfolios")
        return [Portfolio.from_dict(p) for p in data]

    def get_portfolio(self, portfolio_id: str) -> Portfolio:
        """
        Fetch one portfolio with its holdings and transactions.

        Raises:
            PortfolioNotFoundError: If the service has no such portfolio
        """
        response = self._request("GET", f"/{portfolio_id}", portfolio_id=portfolio_id)
        return Portfolio.from_dict(self._decode(response))

    def create_portfolio(self, name: str) -> Portfolio:
        """Create an empty portfolio."""
        name = name.strip()
        if not name:
            raise ValueError("Portfolio name must not be empty")
        response = self._request("POST", json={"name": name})
        portfolio = Portfolio.from_dict(self._decode(response))
        logger.info("Created portfolio %s (%s)", portfolio.name, portfolio.id)
        return portfolio

    def delete_portfolio(self, portfolio_id: str) -> None:
        """Delete a portfolio."""
        self._request("DELETE", f"/{portfolio_id}", portfolio_id=portfolio_id)
        logger.info("Deleted portfolio %s", portfolio_id)

    def add_transaction(
        self,
        portfolio_id: str,
        symbol: str,
        transaction_type: Union[TransactionType, str],
        quantity: int,
        price_per_share: Union[int, float, Decimal],
    ) -> Portfolio:
        """
        Submit a buy or sell to the service.

        Args:
            portfolio_id: Target portfolio
            symbol: Ticker symbol
            transaction_type: TransactionType or "Buy"/"Sell"
            quantity: Number of shares, must be positive
            price_per_share: Price paid or received, must not be negative

        Returns:
            The portfolio as updated by the service
        """
        tx_type = TransactionType.parse(transaction_type)
        if quantity <= 0:
            raise ValueError("Quantity must be positive")
        if price_per_share < 0:
            raise ValueError("Price must not be negative")

        payload = {
            "symbol": symbol.strip().upper(),
            "transaction_type": tx_type.value,
            "quantity": int(quantity),
            "price_per_share": float(price_per_share),
        }
        response = self._request(
            "POST", f"/{portfolio_id}/transactions", portfolio_id=portfolio_id, json=payload
        )
        logger.info(
            "Recorded %s of %d %s in portfolio %s",
            tx_type.value, quantity, payload["symbol"], portfolio_id,
        )
        return Portfolio.from_dict(self._decode(response))
