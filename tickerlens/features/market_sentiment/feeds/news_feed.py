# tickerlens/features/market_sentiment/feeds/news_feed.py

from typing import List, Optional, Tuple

import httpx

from tickerlens.config.api_models import NewsArticle
from tickerlens.utils.config_loader import NewsConfig, get_secret
from tickerlens.utils.errors import SentimentServiceError
from tickerlens.utils.logger import get_logger

logger = get_logger("NewsFeed")

FINANCIAL_KEYWORDS = "(earnings OR revenue OR financial OR quarterly OR stock OR shares)"
REMOVED_MARKER = "removed"


class NewsFeedError(SentimentServiceError):
    """News lookup failure carrying the HTTP status the proxy should answer with."""

    def __init__(self, message: str, status_code: int = 500):
        self.status_code = status_code
        super().__init__(message)


class NewsFeed:
    """
    Server-side NewsAPI lookup for the financial news of one company.

    Keeps the NewsAPI key on the server and turns the newest articles into
    one block of text for the sentiment model.
    """

    def __init__(self, api_key: Optional[str] = None, config: Optional[NewsConfig] = None):
        self.config = config or NewsConfig()
        self.api_key = api_key if api_key is not None else get_secret(self.config.api_key_env)

    def build_params(self, search_query: str) -> dict:
        return {
            "q": f"{search_query} AND {FINANCIAL_KEYWORDS}",
            "domains": ",".join(self.config.domains),
            "language": "en",
            "sortBy": "publishedAt",
            "pageSize": str(self.config.page_size),
            "apiKey": self.api_key,
        }

    async def fetch_data(self, symbol: str, company_name: Optional[str] = None) -> List[NewsArticle]:
        """
        Fetch the newest financial articles for a company.

        Args:
            symbol (str): Ticker symbol.
            company_name (Optional[str]): Preferred search phrase.

        Returns:
            List[NewsArticle]: Articles in NewsAPI order (newest first).

        Raises:
            NewsFeedError: Missing key, upstream HTTP error or non-ok status.
        """
        if not self.api_key:
            raise NewsFeedError(
                f"NewsAPI key not configured. Please add {self.config.api_key_env} to your "
                ".env.local file. Get your free key at https://newsapi.org/",
                status_code=500,
            )

        logger.info(f"Fetching news for {symbol}...")
        async with httpx.AsyncClient() as session:
            response = await session.get(
                self.config.base_url,
                params=self.build_params(company_name or symbol),
                headers={"User-Agent": "TickerLens/1.0"},
            )

        if response.is_error:
            raise NewsFeedError(
                f"NewsAPI error: {response.status_code} {response.reason_phrase}. "
                "Please check your API key and try again.",
                status_code=response.status_code,
            )

        data = response.json()
        if data.get("status") != "ok":
            raise NewsFeedError(f"NewsAPI returned error: {data.get('status')}", status_code=500)

        return [NewsArticle(**article) for article in data.get("articles") or []]

    def validate_data(self, articles: List[NewsArticle]) -> List[NewsArticle]:
        """
        Keep the usable articles among the first few.

        An article is usable when it has both a title and a description and
        neither contains NewsAPI's "[Removed]" placeholder.
        """
        valid = []
        for article in articles[: self.config.max_articles]:
            title = (article.title or "").strip()
            description = (article.description or "").strip()
            if not title or not description:
                continue
            if REMOVED_MARKER in title.lower() or REMOVED_MARKER in description.lower():
                continue
            valid.append(article)
        return valid

    def combine_text(self, articles: List[NewsArticle]) -> str:
        """Join "title. description" of each article and cap the length."""
        combined = " ".join(
            f"{article.title.strip()}. {article.description.strip()}" for article in articles
        )
        limit = self.config.max_text_length
        if len(combined) > limit:
            return combined[:limit] + "..."
        return combined

    async def collect(self, symbol: str, company_name: Optional[str] = None) -> Tuple[str, List[NewsArticle]]:
        """
        Fetch, filter and combine news for a symbol.

        Returns:
            Tuple[str, List[NewsArticle]]: Combined text and the articles it came from.

        Raises:
            NewsFeedError: As fetch_data, or 404 when no usable article remains.
        """
        articles = self.validate_data(await self.fetch_data(symbol, company_name))
        if not articles:
            raise NewsFeedError(
                f"No recent financial news found for {symbol}. "
                "Try a different stock symbol or check back later.",
                status_code=404,
            )
        logger.info(f"Found {len(articles)} articles for {symbol}")
        return self.combine_text(articles), articles
