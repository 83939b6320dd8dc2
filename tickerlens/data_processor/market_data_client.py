"""
Async Market Data Client

This module defines a class that talks to the Alpha Vantage query endpoint
for the four series the dashboard charts (annual earnings, monthly adjusted
prices for dividends, annual cash flow, annual income statements) plus the
symbol search used by the autocomplete box. It uses HTTPX and asyncio so the
dashboard can issue all series requests concurrently.

Provider failures are raised as typed exceptions from tickerlens.utils.errors;
callers decide whether a failure is soft (search) or hard (charts).
"""

from typing import Any, Dict, List, Optional

import httpx

from tickerlens.utils.config_loader import MarketDataConfig, get_secret
from tickerlens.utils.errors import (
    EmptyPayloadError,
    MissingConfigurationError,
    ProviderError,
    RateLimitError,
)
from tickerlens.utils.logger import get_logger

SYMBOL_SEARCH = "SYMBOL_SEARCH"
EARNINGS = "EARNINGS"
MONTHLY_ADJUSTED = "TIME_SERIES_MONTHLY_ADJUSTED"
CASH_FLOW = "CASH_FLOW"
INCOME_STATEMENT = "INCOME_STATEMENT"

# Keys Alpha Vantage uses instead of an HTTP error status.
ERROR_KEY = "Error Message"
RATE_LIMIT_KEYS = ("Note", "Information")


class AlphaVantageClient:
    """
    Asynchronous client for the Alpha Vantage query API.

    Attributes:
        base_url (str): Query endpoint.
        api_key (Optional[str]): API key, or None when not configured.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        config: Optional[MarketDataConfig] = None,
    ):
        """
        Initialize the client. Missing arguments are resolved from the environment.

        Args:
            base_url (Optional[str]): Override for the query endpoint.
            api_key (Optional[str]): Override for the API key.
            config (Optional[MarketDataConfig]): Names of the env variables and defaults.
        """
        self.config = config or MarketDataConfig()
        self.base_url = base_url or get_secret(self.config.base_url_env) or self.config.default_base_url
        self.api_key = api_key if api_key is not None else get_secret(self.config.api_key_env)
        self.logger = get_logger(self.__class__.__name__)

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def _require_api_key(self) -> str:
        if not self.api_key:
            raise MissingConfigurationError(self.config.api_key_env, "Alpha Vantage")
        return self.api_key

    async def fetch(self, session: httpx.AsyncClient, params: Dict[str, str]) -> Dict[str, Any]:
        """
        Perform a single API call and return the decoded JSON payload.

        Args:
            session (httpx.AsyncClient): Shared HTTP client.
            params (Dict[str, str]): Query parameters, without the API key.

        Returns:
            Dict[str, Any]: Decoded payload.

        Raises:
            MissingConfigurationError: If no API key is configured (no request is sent).
            ProviderError: If the payload carries an explicit error message.
            RateLimitError: If the payload carries a rate-limit note.
            httpx.HTTPError: On transport failures or 4xx/5xx responses.
        """
        api_key = self._require_api_key()
        function = params.get("function")
        self.logger.info(f"Fetching {function} with params: {params}")

        response = await session.get(self.base_url, params={**params, "apikey": api_key})
        response.raise_for_status()
        data = response.json()

        if not isinstance(data, dict):
            raise ProviderError("Unexpected response format from Alpha Vantage", function)
        if data.get(ERROR_KEY):
            self.logger.error(f"Alpha Vantage error for {function}: {data[ERROR_KEY]}")
            raise ProviderError(data[ERROR_KEY], function)
        for key in RATE_LIMIT_KEYS:
            if data.get(key):
                self.logger.warning(f"Alpha Vantage rate limit for {function}: {data[key]}")
                raise RateLimitError(data[key], function)
        return data

    async def query(self, params: Dict[str, str]) -> Dict[str, Any]:
        """Run one request on a short-lived client. No timeout is applied."""
        self._require_api_key()
        async with httpx.AsyncClient(timeout=None) as session:
            return await self.fetch(session, params)

    # ------------------------------------------------------------------
    # Endpoint helpers
    # ------------------------------------------------------------------
    async def symbol_search(self, keywords: str) -> List[Dict[str, str]]:
        data = await self.query({"function": SYMBOL_SEARCH, "keywords": keywords})
        return list(data.get("bestMatches") or [])

    async def annual_earnings(self, symbol: str) -> List[Dict[str, str]]:
        data = await self.query({"function": EARNINGS, "symbol": symbol})
        records = list(data.get("annualEarnings") or [])
        if not records:
            raise EmptyPayloadError("No earnings data available for this ticker")
        return records

    async def monthly_adjusted(self, symbol: str) -> Dict[str, Dict[str, str]]:
        data = await self.query({"function": MONTHLY_ADJUSTED, "symbol": symbol})
        return dict(data.get("Monthly Adjusted Time Series") or {})

    async def cash_flow(self, symbol: str) -> List[Dict[str, str]]:
        data = await self.query({"function": CASH_FLOW, "symbol": symbol})
        records = list(data.get("annualReports") or [])
        if not records:
            raise EmptyPayloadError("No cash flow data available for this ticker")
        return records

    async def income_statement(self, symbol: str) -> List[Dict[str, str]]:
        data = await self.query({"function": INCOME_STATEMENT, "symbol": symbol})
        records = list(data.get("annualReports") or [])
        if not records:
            raise EmptyPayloadError("No income statement data available for this ticker")
        return records
