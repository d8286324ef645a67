"""Exchange rate resolution and currency conversion.

Rates are expressed as units of currency per 1 USD. A successful fetch is
kept in an ExchangeRateCache for 24 hours; any failure degrades to a static
fallback table so financial figures never fail because the rate service is
unavailable.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import requests

from capitrack.domain.entities import OperationResult

logger = logging.getLogger(__name__)

RATE_BASE_CURRENCY = "USD"
CACHE_DURATION_SECONDS = 24 * 60 * 60
DEFAULT_EXCHANGE_RATE_URL = "https://v6.exchangerate-api.com/v6"
REQUEST_TIMEOUT_SECONDS = 10

# Approximate rates, only used when the live table is unavailable.
FALLBACK_RATES: dict[str, float] = {
    "USD": 1.0,
    "CNY": 7.25,
    "EUR": 0.92,
    "GBP": 0.79,
    "JPY": 149.5,
    "CAD": 1.36,
    "AUD": 1.53,
    "HKD": 7.82,
    "SGD": 1.34,
    "KRW": 1320.0,
}

Fetcher = Callable[[str, str], dict[str, Any]]
Clock = Callable[[], float]


class RateFetchError(Exception):
    """The remote rate service did not return a usable table."""


@dataclass(frozen=True)
class RateTable:
    """Snapshot of USD-based rates used for one computation.

    Attributes:
        rates: Mapping of currency code to units per 1 USD
        using_fallback: True when rates come from the static fallback table
        error: Reason the live table could not be used, if any
    """

    rates: dict[str, float]
    using_fallback: bool = False
    error: Optional[str] = None

    def rate(self, from_currency: str, to_currency: str) -> float:
        """Return the multiplier converting from_currency into to_currency.

        A currency missing from the table counts as 1 on its side.
        """
        if from_currency == to_currency:
            return 1.0
        from_rate = self._lookup(from_currency)
        to_rate = self._lookup(to_currency)
        return to_rate / from_rate

    def convert(self, amount: float, from_currency: str, to_currency: str) -> float:
        """Convert an amount between currencies."""
        if from_currency == to_currency:
            return amount
        return amount * self.rate(from_currency, to_currency)

    def _lookup(self, currency: str) -> float:
        value = self.rates.get(currency)
        if not value:
            logger.warning("No exchange rate for %s, treating it as 1", currency)
            return 1.0
        return float(value)


def fallback_rate_table(error: Optional[str] = None) -> RateTable:
    """Return the static fallback table."""
    return RateTable(rates=dict(FALLBACK_RATES), using_fallback=True, error=error)


@dataclass
class ExchangeRateCache:
    """Single-slot cache of the last successful rate fetch.

    Concurrent writers may race; the last write wins and the payload is the
    same within a cache window.
    """

    ttl_seconds: float = CACHE_DURATION_SECONDS
    base: Optional[str] = None
    rates: dict[str, float] = field(default_factory=dict)
    fetched_at: Optional[float] = None

    def get(self, now: float) -> Optional[dict[str, float]]:
        """Return cached rates if still within the cache window."""
        if self.fetched_at is None or not self.rates:
            return None
        if now - self.fetched_at >= self.ttl_seconds:
            return None
        return self.rates

    def set(self, rates: dict[str, float], now: float, base: str = RATE_BASE_CURRENCY) -> None:
        """Overwrite the slot with a fresh table."""
        self.base = base
        self.rates = dict(rates)
        self.fetched_at = now

    def clear(self) -> None:
        """Drop the cached table."""
        self.base = None
        self.rates = {}
        self.fetched_at = None


def fetch_rates_from_api(api_key: str, base_url: str = DEFAULT_EXCHANGE_RATE_URL) -> dict[str, Any]:
    """Fetch the latest USD-based rate payload from the exchange rate API.

    Args:
        api_key: Provider API key
        base_url: Provider base URL

    Returns:
        Decoded JSON payload

    Raises:
        RateFetchError: On network errors, HTTP errors or invalid JSON
    """
    url = f"{base_url.rstrip('/')}/{api_key}/latest/{RATE_BASE_CURRENCY}"
    try:
        response = requests.get(
            url,
            timeout=REQUEST_TIMEOUT_SECONDS,
            headers={"Accept": "application/json"},
        )
        response.raise_for_status()
        return response.json()
    except requests.RequestException as exc:
        raise RateFetchError(f"Exchange rate request failed: {exc}") from exc
    except ValueError as exc:
        raise RateFetchError(f"Exchange rate response is not JSON: {exc}") from exc


class ExchangeRateProvider:
    """Resolve conversion rates between ISO currency codes."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        cache: Optional[ExchangeRateCache] = None,
        fetcher: Optional[Fetcher] = None,
        clock: Optional[Clock] = None,
        base_url: str = DEFAULT_EXCHANGE_RATE_URL,
    ):
        """Initialize the provider.

        Args:
            api_key: Exchange rate API key; without one the fallback table is used
            cache: Rate cache, shared between providers if desired
            fetcher: Callable (api_key, base_url) -> payload, defaults to HTTP
            clock: Callable returning the current time in seconds
            base_url: Exchange rate API base URL
        """
        self.api_key = api_key
        self.cache = cache if cache is not None else ExchangeRateCache()
        self.fetcher = fetcher or fetch_rates_from_api
        self.clock = clock or time.time
        self.base_url = base_url

    def check_configuration(self) -> OperationResult:
        """Report whether live rates can be fetched at all."""
        if not self.api_key:
            return OperationResult(
                success=False,
                error="Exchange rate API key is not configured; using fallback rates",
            )
        if not self.base_url:
            return OperationResult(
                success=False,
                error="Exchange rate API URL is not configured; using fallback rates",
            )
        return OperationResult(success=True)

    def get_rates(self) -> RateTable:
        """Return the current rate table, fetching when the cache is stale."""
        now = self.clock()
        cached = self.cache.get(now)
        if cached is not None:
            return RateTable(rates=cached)

        if not self.api_key:
            return fallback_rate_table("Exchange rate API key is not configured")

        try:
            payload = self.fetcher(self.api_key, self.base_url)
        except RateFetchError as exc:
            logger.warning("Failed to fetch exchange rates: %s", exc)
            return fallback_rate_table(str(exc))

        if not isinstance(payload, dict) or payload.get("result") != "success":
            result = payload.get("result") if isinstance(payload, dict) else None
            logger.warning("Exchange rate API returned result=%r", result)
            return fallback_rate_table(f"Exchange rate API returned result={result!r}")

        rates = payload.get("conversion_rates")
        if not isinstance(rates, dict) or not rates:
            logger.warning("Exchange rate API returned no conversion rates")
            return fallback_rate_table("Exchange rate API returned no conversion rates")

        try:
            normalized = {code: float(value) for code, value in rates.items()}
        except (TypeError, ValueError) as exc:
            logger.warning("Exchange rate API returned an unusable rate: %s", exc)
            return fallback_rate_table(f"Exchange rate API returned an unusable rate: {exc}")

        self.cache.set(normalized, now)
        logger.info("Fetched %d exchange rates", len(normalized))
        return RateTable(rates=normalized)

    def rate(self, from_currency: str, to_currency: str) -> float:
        """Return the multiplier converting from_currency into to_currency."""
        if from_currency == to_currency:
            return 1.0
        return self.get_rates().rate(from_currency, to_currency)

    def convert(self, amount: float, from_currency: str, to_currency: str) -> float:
        """Convert an amount between currencies."""
        return amount * self.rate(from_currency, to_currency)
