"""Settings sourced from environment variables."""

import os
from dataclasses import dataclass
from typing import Optional

from capitrack.domain.currency import DEFAULT_EXCHANGE_RATE_URL, ExchangeRateProvider

DEFAULT_BASE_CURRENCY = "CNY"


@dataclass(frozen=True)
class Settings:
    """Runtime configuration.

    Attributes:
        database_path: SQLite file path, None for the default location
        base_currency: Currency that reports are converted into
        exchange_rate_api_key: Exchange rate API key, None to use fallback rates
        exchange_rate_url: Exchange rate API base URL
    """

    database_path: Optional[str] = None
    base_currency: str = DEFAULT_BASE_CURRENCY
    exchange_rate_api_key: Optional[str] = None
    exchange_rate_url: str = DEFAULT_EXCHANGE_RATE_URL

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        base_currency = os.getenv("CAPITRACK_BASE_CURRENCY", DEFAULT_BASE_CURRENCY)
        return cls(
            database_path=os.getenv("CAPITRACK_DB_PATH") or None,
            base_currency=base_currency.strip().upper() or DEFAULT_BASE_CURRENCY,
            exchange_rate_api_key=os.getenv("CAPITRACK_EXCHANGE_RATE_API_KEY") or None,
            exchange_rate_url=os.getenv("CAPITRACK_EXCHANGE_RATE_URL") or DEFAULT_EXCHANGE_RATE_URL,
        )

    def build_rate_provider(self) -> ExchangeRateProvider:
        """Create a rate provider from these settings."""
        return ExchangeRateProvider(
            api_key=self.exchange_rate_api_key,
            base_url=self.exchange_rate_url,
        )
