# tickerlens/features/search/search_engine.py
"""
Ticker search with a static fallback.

Live results come from the Alpha Vantage SYMBOL_SEARCH endpoint. Whenever the
live path is unavailable (no key, explicit provider error, rate limit,
transport failure) the engine answers from the static table instead, so the
search box never shows an error.
"""

from typing import List, Optional

import httpx

from tickerlens.data_processor.market_data_client import AlphaVantageClient
from tickerlens.features.search.candidates import (
    SuggestionCandidate,
    fallback_suggestions,
    rank_live_matches,
)
from tickerlens.monitoring.error_logging import ErrorComponent, ErrorLogger, FallbackReason
from tickerlens.utils.config_loader import SearchConfig
from tickerlens.utils.errors import ProviderError, RateLimitError
from tickerlens.utils.logger import get_logger

logger = get_logger("ticker_search")


class TickerSearchEngine:
    """Produces ranked suggestion candidates for partial query text."""

    def __init__(
        self,
        client: Optional[AlphaVantageClient] = None,
        config: Optional[SearchConfig] = None,
        error_logger: Optional[ErrorLogger] = None,
    ):
        self.client = client or AlphaVantageClient()
        self.config = config or SearchConfig()
        self.error_logger = error_logger or ErrorLogger(component=ErrorComponent.TICKER_SEARCH)

    def _fallback(
        self,
        query: str,
        reason: FallbackReason,
        exception: Optional[Exception] = None,
    ) -> List[SuggestionCandidate]:
        self.error_logger.log_fallback(
            reason=reason,
            exception=exception,
            context={"query": query},
            fallback_action="Using static suggestions",
        )
        return fallback_suggestions(query, limit=self.config.max_fallback_results)

    async def search(self, query: str) -> List[SuggestionCandidate]:
        """
        Search for tickers matching the query.

        Args:
            query (str): Partial symbol or company name.

        Returns:
            List[SuggestionCandidate]: Ranked suggestions (possibly empty).
        """
        query = (query or "").strip()
        if len(query) < self.config.min_query_length:
            return []

        if not self.client.has_api_key:
            logger.warning("Alpha Vantage API key not found. Using fallback suggestions.")
            return self._fallback(query, FallbackReason.MISSING_API_KEY)

        try:
            matches = await self.client.symbol_search(query)
        except RateLimitError as e:
            return self._fallback(query, FallbackReason.RATE_LIMITED, e)
        except ProviderError as e:
            return self._fallback(query, FallbackReason.PROVIDER_ERROR, e)
        except httpx.TimeoutException as e:
            return self._fallback(query, FallbackReason.TIMEOUT, e)
        except httpx.HTTPError as e:
            return self._fallback(query, FallbackReason.NETWORK_FAILURE, e)
        except ValueError as e:  # undecodable JSON body
            return self._fallback(query, FallbackReason.PROVIDER_ERROR, e)

        results = rank_live_matches(matches, limit=self.config.max_live_results)
        logger.info(f"Search '{query}' returned {len(results)} suggestions")
        return results
