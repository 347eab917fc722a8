"""
Ghana Stock Exchange market data client.

Fetches live quotes, the equities listing and per-equity detail from the
public GSE API. Requests are spaced out to respect the API rate limit and
retried with exponential backoff.
"""

import logging
import time
from typing import Any, Optional

import requests

from stockfolio.config import Config, config as default_config
from stockfolio.core.data.exceptions import QuotePayloadError, QuoteServiceError
from stockfolio.core.data.quotes import (
    EquityDetail,
    EquitySummary,
    LiveQuote,
    parse_detail,
    parse_live,
    parse_summary,
)

logger = logging.getLogger(__name__)


class GSEClient:
    """
    Client for the GSE market data API.

    Usage:
        client = GSEClient()
        quotes = client.fetch_live()
        prices = build_price_map(quotes)
    """

    def __init__(
        self,
        cfg: Optional[Config] = None,
        session: Optional[requests.Session] = None,
    ):
        self.config = cfg or default_config
        self.config.validate()
        self.base_url = self.config.gse_api_url.rstrip("/")
        self.session = session or requests.Session()

    def _get_json(self, path: str) -> Any:
        """GET a path once. Raises QuoteServiceError on transport or HTTP failure."""
        url = f"{self.base_url}{path}"

        # Stay well under the API's 60 req/s limit
        if self.config.request_delay_seconds > 0:
            time.sleep(self.config.request_delay_seconds)

        try:
            response = self.session.get(url, timeout=self.config.request_timeout_seconds)
        except requests.RequestException as e:
            raise QuoteServiceError(f"Request to {url} failed: {e}") from e

        if not response.ok:
            raise QuoteServiceError(f"GSE API request failed with status {response.status_code}: {url}")

        try:
            return response.json()
        except ValueError as e:
            raise QuoteServiceError(f"Failed to parse JSON response from {url}") from e

    def _get_json_with_retry(self, path: str) -> Any:
        """GET with exponential backoff, up to config.max_retries retries."""
        delay = self.config.retry_backoff_seconds
        attempt = 0

        while True:
            try:
                return self._get_json(path)
            except QuoteServiceError as e:
                if attempt >= self.config.max_retries:
                    logger.error("GSE request %s failed after %d attempts: %s", path, attempt + 1, e)
                    raise
                attempt += 1
                logger.warning("GSE request %s failed (attempt %d): %s", path, attempt, e)
                time.sleep(delay)
                delay *= 2

    def fetch_live(self) -> list[LiveQuote]:
        """Fetch live trading data for all listed equities."""
        data = self._get_json_with_retry("/live")
        if not isinstance(data, list):
            raise QuotePayloadError("Expected a list from /live")
        quotes = [parse_live(item) for item in data]
        logger.info("Fetched %d live quotes", len(quotes))
        return quotes

    def fetch_equities(self) -> list[EquitySummary]:
        """Fetch the equities listing (symbol and last price)."""
        data = self._get_json_with_retry("/equities")
        if not isinstance(data, list):
            raise QuotePayloadError("Expected a list from /equities")
        return [parse_summary(item) for item in data]

    def fetch_equity(self, symbol: str) -> EquityDetail:
        """
        Fetch the detailed profile for one equity.

        Args:
            symbol: Ticker symbol (any case)

        Returns:
            EquityDetail with company profile and fundamentals
        """
        data = self._get_json_with_retry(f"/equities/{symbol.strip().lower()}")
        if not isinstance(data, dict):
            raise QuotePayloadError(f"Expected an object from /equities/{symbol}")
        return parse_detail(data)
