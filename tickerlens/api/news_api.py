"""
News proxy router.

Fetches financial news for a ticker from NewsAPI on the server, so the
NewsAPI key never reaches the dashboard, and returns one combined text block
plus the articles it came from.
"""

from typing import Optional

import httpx
from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from tickerlens.config.api_models import ErrorResponse, NewsQuery, NewsResponse
from tickerlens.features.market_sentiment.feeds.news_feed import NewsFeed, NewsFeedError
from tickerlens.monitoring.error_logging import ErrorComponent, FallbackReason, create_component_logger
from tickerlens.utils.logger import get_logger

# ------------------------------------------------------------
# Router & Logger Setup
# ------------------------------------------------------------
router = APIRouter()
logger = get_logger("news_api")
error_logger = create_component_logger(ErrorComponent.NEWS_PROXY)

UPSTREAM_FAILURE = "Failed to fetch news from NewsAPI. Please try again later."


def get_news_feed() -> NewsFeed:
    return NewsFeed()


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


# ------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------
@router.get("/news", response_model=NewsResponse, responses={400: {"model": ErrorResponse}})
async def get_news(
    symbol: Optional[str] = Query(None, description="Stock ticker symbol (e.g., AAPL)"),
    companyName: Optional[str] = Query(None, description="Company name used as the search phrase"),
):
    """
    Return combined recent financial news for a symbol.

    Status codes:
        400: symbol missing or malformed.
        404: no usable article among the newest ones.
        500: NewsAPI key not configured, or NewsAPI answered with a non-ok status.
        other: NewsAPI's own HTTP error status, passed through.
    """
    if not symbol:
        return _error("Symbol parameter is required", 400)

    try:
        query = NewsQuery(symbol=symbol, company_name=companyName or None)
    except ValidationError as ve:
        logger.warning(f"Rejected news query for {symbol!r}: {ve.errors()[0]['msg']}")
        error_logger.log_fallback(
            FallbackReason.INVALID_INPUT, ve, {"symbol": symbol}, fallback_action="Returned 400"
        )
        return _error(ve.errors()[0]["msg"], 400)

    logger.info(f"News request received: symbol={query.symbol}, company={query.company_name}")
    try:
        text, articles = await get_news_feed().collect(query.symbol, query.company_name)
    except NewsFeedError as e:
        error_logger.log_error(
            "News lookup failed", e, {"symbol": query.symbol, "status_code": e.status_code}
        )
        return _error(str(e), e.status_code)
    except (httpx.HTTPError, ValueError) as e:
        error_logger.log_error("NewsAPI request failed", e, {"symbol": query.symbol}, severity="error")
        return _error(UPSTREAM_FAILURE, 500)

    return NewsResponse(text=text, articles=articles)
