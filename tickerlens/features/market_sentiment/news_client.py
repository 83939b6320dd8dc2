#tickerlens/features/market_sentiment/news_client.py
"""
Dashboard-side access to the news proxy.

The proxy (tickerlens.api.news_api) holds the NewsAPI key; this module only
knows the proxy URL. fetch_stock_news never raises: failures come back as a
StockNewsResult with success=False and an error message.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from tickerlens.utils.config_loader import NewsConfig, get_secret
from tickerlens.utils.logger import get_logger

logger = get_logger("news_client")

INVALID_RESPONSE_MESSAGE = "Invalid response from news service"

COMPANY_NAMES: Dict[str, str] = {
    "AAPL": "Apple",
    "MSFT": "Microsoft",
    "GOOGL": "Google",
    "GOOG": "Google",
    "AMZN": "Amazon",
    "TSLA": "Tesla",
    "META": "Meta",
    "NVDA": "NVIDIA",
    "NFLX": "Netflix",
    "AMD": "AMD",
    "INTC": "Intel",
    "CRM": "Salesforce",
    "ORCL": "Oracle",
    "PYPL": "PayPal",
    "ADBE": "Adobe",
    "SPOT": "Spotify",
    "UBER": "Uber",
    "LYFT": "Lyft",
    "TWTR": "Twitter",
    "SNAP": "Snapchat",
    "SQ": "Block",
    "ROKU": "Roku",
}


@dataclass
class StockNewsResult:
    success: bool
    text: str = ""
    articles: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None


def get_company_name(symbol: str) -> str:
    """Company name for a better news search; the symbol itself when unknown."""
    return COMPANY_NAMES.get(symbol.upper(), symbol)


def _json_object(response: httpx.Response) -> Optional[Dict[str, Any]]:
    """Decoded JSON body if it is an object, else None."""
    try:
        data = response.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


async def fetch_stock_news(
    symbol: str,
    company_name: Optional[str] = None,
    proxy_url: Optional[str] = None,
    config: Optional[NewsConfig] = None,
) -> StockNewsResult:
    """
    Fetch combined recent news text for a stock via the news proxy.

    Args:
        symbol (str): Ticker symbol.
        company_name (Optional[str]): Search phrase override.
        proxy_url (Optional[str]): Base URL of the proxy.
        config (Optional[NewsConfig]): Proxy URL env variable and default.

    Returns:
        StockNewsResult: Text and article metadata, or success=False with an error.
    """
    config = config or NewsConfig()
    base_url = (proxy_url or get_secret(config.proxy_url_env) or config.default_proxy_url).rstrip("/")
    params = {"symbol": symbol}
    if company_name:
        params["companyName"] = company_name

    logger.info(f"Fetching news for {symbol}...")
    try:
        async with httpx.AsyncClient() as session:
            response = await session.get(
                f"{base_url}/api/news",
                params=params,
                headers={"Content-Type": "application/json"},
            )

        if response.is_error:
            error = (_json_object(response) or {}).get("error")
            return StockNewsResult(
                success=False,
                error=error or f"API error: {response.status_code}",
            )

        data = _json_object(response)
        if data is None:
            logger.error(f"News service returned a non-object body for {symbol}")
            return StockNewsResult(success=False, error=INVALID_RESPONSE_MESSAGE)

        logger.info(f"Found news for {symbol}")
        return StockNewsResult(
            success=True,
            text=str(data.get("text") or ""),
            articles=list(data.get("articles") or []),
        )

    except httpx.HTTPError as e:
        logger.error(f"Error fetching stock news: {e}")
        return StockNewsResult(success=False, error=str(e) or "Unknown error occurred")
