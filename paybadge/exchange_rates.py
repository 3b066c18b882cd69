"""Cryptocurrency exchange rate client.

Fetches rates from the exchange-rate API over HTTP:
- Single rates (``/rate/{FROM}/{TO}``)
- Several rates against one base currency
- Currency conversion
- Supported currency list (with a static fallback)
- API health check

Currency codes are upper-cased before building request paths.
"""

import logging
from typing import Iterable, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://exchange-rate.profullstack.com"
DEFAULT_TIMEOUT = 10.0

FALLBACK_CURRENCIES = ["BTC", "ETH", "SOL", "USDC", "USDT", "ADA", "DOT", "LINK", "UNI", "MATIC"]
MINIMAL_CURRENCIES = ["BTC", "ETH", "SOL", "USDC"]

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class ExchangeRateError(Exception):
    """Raised when an exchange rate can't be fetched or parsed."""

    def __init__(self, from_currency: str, to_currency: str, reason: str):
        super().__init__(
            f"Failed to fetch exchange rate for {from_currency}/{to_currency}: {reason}"
        )
        self.from_currency = from_currency
        self.to_currency = to_currency
        self.reason = reason


def _parse_rate(value: object) -> Optional[float]:
    """Parse a rate field, returning None for missing, zero or non-numeric values."""
    if value is None or isinstance(value, bool):
        return None
    try:
        rate = float(value)
    except (TypeError, ValueError):
        return None
    if rate != rate or rate == 0:
        return None
    return rate


class ExchangeRateClient:
    """HTTP client for the exchange rate API.

    Args:
        base_url: API root URL
        timeout: Request timeout in seconds
        http_client: Optional preconfigured httpx client. A client
                     created here is closed by ``close()``.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.Client(timeout=timeout, headers=JSON_HEADERS)

    def __enter__(self) -> "ExchangeRateClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying http client if this instance created it."""
        if self._owns_client:
            self.http_client.close()

    def rate_url(self, from_currency: str, to_currency: str = "USD") -> str:
        """Build the normalized rate endpoint URL for a currency pair."""
        return f"{self.base_url}/rate/{from_currency.upper()}/{to_currency.upper()}"

    def get_current_rate(self, from_currency: str, to_currency: str = "USD") -> float:
        """Fetch the current exchange rate for a currency pair.

        Args:
            from_currency: Source currency (e.g. 'BTC', case-insensitive)
            to_currency: Target currency (e.g. 'USD', case-insensitive)

        Returns:
            The exchange rate

        Raises:
            ExchangeRateError: On transport errors, non-2xx responses or
                               a payload without a numeric ``rate``
        """
        url = self.rate_url(from_currency, to_currency)

        try:
            response = self.http_client.get(url, headers=JSON_HEADERS)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise ExchangeRateError(
                from_currency, to_currency, f"API error: {status} {e.response.reason_phrase}"
            ) from e
        except httpx.HTTPError as e:
            raise ExchangeRateError(from_currency, to_currency, str(e) or type(e).__name__) from e
        except ValueError as e:
            raise ExchangeRateError(from_currency, to_currency, "Invalid JSON response") from e

        rate = _parse_rate(data.get("rate")) if isinstance(data, dict) else None
        if rate is None:
            raise ExchangeRateError(
                from_currency, to_currency, "Invalid exchange rate data received"
            )

        return rate

    def get_multiple_rates(
        self,
        currencies: Iterable[str],
        base_currency: str = "USD",
    ) -> dict[str, Optional[float]]:
        """Fetch rates for several currencies against one base currency.

        Failures are logged and recorded as None rather than raised.

        Returns:
            Mapping of each requested currency code (as given) to its rate
        """
        rates: dict[str, Optional[float]] = {}

        for currency in currencies:
            try:
                rates[currency] = self.get_current_rate(currency, base_currency)
            except ExchangeRateError as e:
                logger.warning("Failed to fetch rate for %s: %s", currency, e.reason)
                rates[currency] = None

        return rates

    def convert_currency(
        self,
        amount: float,
        from_currency: str,
        to_currency: str = "USD",
    ) -> float:
        """Convert an amount between currencies.

        Same-currency conversions return ``amount`` without a request.

        Raises:
            ExchangeRateError: If the rate can't be fetched
        """
        if from_currency.upper() == to_currency.upper():
            return amount

        return amount * self.get_current_rate(from_currency, to_currency)

    def get_supported_currencies(self) -> list[str]:
        """Fetch the list of supported currency codes.

        Falls back to a static list when the endpoint is unavailable.
        """
        try:
            response = self.http_client.get(f"{self.base_url}/currencies", headers=JSON_HEADERS)
        except httpx.HTTPError as e:
            logger.warning("Error getting supported currencies, using fallback: %s", e)
            return list(FALLBACK_CURRENCIES)

        if not response.is_success:
            return list(FALLBACK_CURRENCIES)

        try:
            data = response.json()
        except ValueError:
            logger.warning("Invalid currencies payload, using fallback")
            return list(FALLBACK_CURRENCIES)

        currencies = data.get("currencies") if isinstance(data, dict) else None
        return list(currencies) if currencies else list(MINIMAL_CURRENCIES)

    def check_api_health(self) -> bool:
        """Check whether the exchange rate API responds successfully."""
        try:
            response = self.http_client.get(f"{self.base_url}/health", headers=JSON_HEADERS)
        except httpx.HTTPError as e:
            logger.warning("Exchange rate API health check failed: %s", e)
            return False

        return response.is_success
