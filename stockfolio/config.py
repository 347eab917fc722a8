"""
Configuration management for Stockfolio.

Centralizes all configuration from environment variables with sensible defaults.
This is the SINGLE SOURCE OF TRUTH for all application configuration.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


@dataclass
class Config:
    """
    Application configuration loaded from environment variables.

    Optional:
        STOCKFOLIO_API_URL: Base URL of the portfolio service
        STOCKFOLIO_GSE_API_URL: Base URL of the GSE market data API
        STOCKFOLIO_DB_PATH: Path to SQLite quote snapshot database
        STOCKFOLIO_CURRENCY: Currency label used in output
        STOCKFOLIO_LOG_LEVEL: Logging level name (DEBUG, INFO, WARNING, ...)
    """

    # Remote services
    api_url: str = field(
        default_factory=lambda: os.getenv(
            "STOCKFOLIO_API_URL", "http://localhost:3000"
        )
    )
    gse_api_url: str = field(
        default_factory=lambda: os.getenv(
            "STOCKFOLIO_GSE_API_URL", "https://dev.kwayisi.org/apis/gse"
        )
    )

    # Storage paths
    db_path: Path = field(
        default_factory=lambda: Path(
            os.getenv("STOCKFOLIO_DB_PATH", "./data/stockfolio.db")
        )
    )

    # Display
    currency: str = field(
        default_factory=lambda: os.getenv("STOCKFOLIO_CURRENCY", "GHS")
    )
    log_level: str = field(
        default_factory=lambda: os.getenv("STOCKFOLIO_LOG_LEVEL", "WARNING")
    )

    # ========================================================================
    # HTTP Request Configuration
    # GSE API allows 60 req/s; 0.1s delay keeps us near 10 req/s
    # ========================================================================
    request_timeout_seconds: float = field(
        default_factory=lambda: float(
            os.getenv("STOCKFOLIO_REQUEST_TIMEOUT", "30")
        )
    )
    max_retries: int = field(
        default_factory=lambda: int(
            os.getenv("STOCKFOLIO_MAX_RETRIES", "3")
        )
    )
    retry_backoff_seconds: float = field(
        default_factory=lambda: float(
            os.getenv("STOCKFOLIO_RETRY_BACKOFF", "1.0")
        )
    )
    request_delay_seconds: float = field(
        default_factory=lambda: float(
            os.getenv("STOCKFOLIO_REQUEST_DELAY", "0.1")
        )
    )

    # ========================================================================
    # Quote Snapshot Configuration
    # ========================================================================
    quote_max_age_minutes: int = field(
        default_factory=lambda: int(
            os.getenv("STOCKFOLIO_QUOTE_MAX_AGE", "1440")
        )
    )
    quote_refresh_minutes: int = field(
        default_factory=lambda: int(
            os.getenv("STOCKFOLIO_QUOTE_REFRESH", "60")
        )
    )

    def __post_init__(self) -> None:
        """Convert string paths to Path objects if needed."""
        if isinstance(self.db_path, str):
            self.db_path = Path(self.db_path)

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigError: If a URL or retry setting is invalid.
        """
        from stockfolio.core.data.exceptions import ConfigError

        for name in ("api_url", "gse_api_url"):
            url = getattr(self, name)
            if not url.startswith(("http://", "https://")):
                raise ConfigError(
                    f"Invalid {name}: {url!r}. Must start with http:// or https://"
                )

        if self.max_retries < 0:
            raise ConfigError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.retry_backoff_seconds < 0 or self.request_delay_seconds < 0:
            raise ConfigError("Retry backoff and request delay must be >= 0")
        if self.request_timeout_seconds <= 0:
            raise ConfigError("Request timeout must be positive")

    def ensure_directories(self) -> None:
        """Create data directories if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)


# Global configuration instance
config = Config()
