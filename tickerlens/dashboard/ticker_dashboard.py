# tickerlens/dashboard/ticker_dashboard.py
"""
Ticker Dashboard (async core)

Holds the per-panel state behind the Streamlit page. One analysis runs the
four market-data panels and the news sentiment flow concurrently; each panel
owns its own state and a failure in one never touches another.

Nothing is retried automatically: a panel in the error state is re-run with
refresh(). In-flight requests are never cancelled, so a slow response from an
older analysis can still overwrite the state of a newer one.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from tickerlens.dashboard.utils import get_ui_logger
from tickerlens.data_processor.market_data_client import AlphaVantageClient
from tickerlens.features.charts.chart_adapter import (
    MOBILE_BREAKPOINT,
    ChartSpec,
    ResponsiveProfile,
    cash_flow_chart,
    dividends_chart,
    earnings_chart,
    income_statement_chart,
)
from tickerlens.features.market_sentiment.news_client import (
    StockNewsResult,
    fetch_stock_news,
    get_company_name,
)
from tickerlens.features.market_sentiment.normalizer import build_summary
from tickerlens.features.market_sentiment.sentiment_client import SentimentClient
from tickerlens.features.metrics.aggregator import (
    AggregationResult,
    build_cash_flow,
    build_dividends,
    build_earnings,
    build_income_statement,
)
from tickerlens.features.metrics.summaries import (
    summarize_cash_flow,
    summarize_dividends,
    summarize_earnings,
    summarize_income,
)
from tickerlens.monitoring.error_logging import ErrorComponent, ErrorLogger
from tickerlens.utils.config_loader import DashboardConfig
from tickerlens.utils.errors import SentimentServiceError, TickerLensError, describe_http_error

logger = get_ui_logger("ticker_dashboard")

EARNINGS = "earnings"
DIVIDENDS = "dividends"
CASH_FLOW = "cash_flow"
INCOME_STATEMENT = "income_statement"
SENTIMENT = "sentiment"

SENTIMENT_FAILURE = "Failed to analyze stock sentiment. Please try again."

CHART_BUILDERS: Dict[str, Callable[..., ChartSpec]] = {
    EARNINGS: earnings_chart,
    DIVIDENDS: dividends_chart,
    CASH_FLOW: cash_flow_chart,
    INCOME_STATEMENT: income_statement_chart,
}


# -------------------------------
# Panel state
# -------------------------------
class PanelStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class PanelState:
    status: PanelStatus = PanelStatus.IDLE
    data: Any = None
    summary: Any = None
    error: Optional[str] = None

    @property
    def is_loading(self) -> bool:
        return self.status is PanelStatus.LOADING

    @property
    def is_error(self) -> bool:
        return self.status is PanelStatus.ERROR

    @property
    def is_success(self) -> bool:
        return self.status is PanelStatus.SUCCESS


# -------------------------------
# Chart panel
# -------------------------------
class ChartPanel:
    """
    One market-data panel: fetch, aggregate, summarize.

    Args:
        name (str): Panel key (also used in log context).
        label (str): Human label used in the generic failure message.
        fetch: Coroutine function taking a ticker and returning the raw payload.
        build: Aggregation function returning an AggregationResult.
        summarize: Summary function over the aggregated series.
        error_logger (ErrorLogger): Structured error sink.
        mobile_breakpoint (int): First viewport width drawn with the desktop profile.
    """

    def __init__(
        self,
        name: str,
        label: str,
        fetch: Callable[[str], Awaitable[Any]],
        build: Callable[[Any], AggregationResult],
        summarize: Callable[[Any], Any],
        error_logger: ErrorLogger,
        mobile_breakpoint: int = MOBILE_BREAKPOINT,
    ):
        self.name = name
        self.label = label
        self.fetch = fetch
        self.build = build
        self.summarize = summarize
        self.error_logger = error_logger
        self.mobile_breakpoint = mobile_breakpoint
        self.ticker: Optional[str] = None
        self.state = PanelState()

    @property
    def failure_message(self) -> str:
        return f"Failed to fetch {self.label} data"

    async def load(self, ticker: str) -> PanelState:
        self.ticker = ticker
        self.state = PanelState(status=PanelStatus.LOADING)
        logger.info(f"Loading {self.name} for {ticker}")

        try:
            payload = await self.fetch(ticker)
        except (TickerLensError, httpx.HTTPError, ValueError) as e:
            self.error_logger.log_error(
                f"{self.label.capitalize()} fetch failed", e, {"ticker": ticker, "panel": self.name}
            )
            self.state = PanelState(status=PanelStatus.ERROR, error=describe_http_error(e, self.failure_message))
            return self.state

        result = self.build(payload)
        if not result.ok:
            self.error_logger.log_error(result.error, context={"ticker": ticker, "panel": self.name})
            self.state = PanelState(status=PanelStatus.ERROR, error=result.error)
            return self.state

        self.state = PanelState(
            status=PanelStatus.SUCCESS,
            data=result.data,
            summary=self.summarize(result.data),
        )
        logger.info(f"{self.name} for {ticker}: {len(result.data)} periods")
        return self.state

    async def refresh(self) -> PanelState:
        """Re-run the last load (user-triggered retry)."""
        if not self.ticker:
            return self.state
        return await self.load(self.ticker)

    def chart_spec(self, viewport_width: int) -> Optional[ChartSpec]:
        if not self.state.is_success:
            return None
        profile = ResponsiveProfile.for_viewport(viewport_width, self.mobile_breakpoint)
        return CHART_BUILDERS[self.name](self.ticker, self.state.data, profile=profile)


# -------------------------------
# Sentiment panel
# -------------------------------
class SentimentLoader:
    """
    News-based sentiment for a ticker: fetch news through the proxy, then
    classify the combined text with the dashboard timeout.
    """

    def __init__(
        self,
        client: SentimentClient,
        error_logger: ErrorLogger,
        news_fetcher: Callable[..., Awaitable[StockNewsResult]] = fetch_stock_news,
        timeout: float = 15.0,
    ):
        self.client = client
        self.error_logger = error_logger
        self.news_fetcher = news_fetcher
        self.timeout = timeout
        self.ticker: Optional[str] = None
        self.state = PanelState()

    async def load(self, ticker: str) -> PanelState:
        self.ticker = ticker
        self.state = PanelState(status=PanelStatus.LOADING)

        news = await self.news_fetcher(ticker, get_company_name(ticker))
        if not news.success:
            message = news.error or "Failed to fetch news"
            self.error_logger.log_error("News fetch failed", context={"ticker": ticker, "error": message})
            self.state = PanelState(status=PanelStatus.ERROR, error=message)
            return self.state

        logger.info(f"News text preview for {ticker}: {news.text[:200]}...")
        try:
            verdict = await self.client.analyze(
                news.text, timeout=self.timeout, failure_message=SENTIMENT_FAILURE
            )
        except SentimentServiceError as e:
            self.error_logger.log_error("Sentiment analysis failed", e, {"ticker": ticker})
            self.state = PanelState(status=PanelStatus.ERROR, error=str(e))
            return self.state

        verdict.summary = build_summary(ticker, verdict.sentiment)
        verdict.news_articles = news.articles
        verdict.news_text = news.text
        self.state = PanelState(status=PanelStatus.SUCCESS, data=verdict)
        return self.state

    async def refresh(self) -> PanelState:
        if not self.ticker:
            return self.state
        return await self.load(self.ticker)


# -------------------------------
# Dashboard
# -------------------------------
class TickerDashboard:
    """
    Owns the four chart panels and the sentiment panel for one page.

    Attributes:
        panels (Dict[str, ChartPanel]): Chart panels keyed by series name.
        sentiment (SentimentLoader): News sentiment panel.
        ticker (Optional[str]): Last analyzed ticker.
    """

    def __init__(
        self,
        market_client: Optional[AlphaVantageClient] = None,
        sentiment_client: Optional[SentimentClient] = None,
        news_fetcher: Optional[Callable[..., Awaitable[StockNewsResult]]] = None,
        config: Optional[DashboardConfig] = None,
        error_log_dir: Optional[str] = None,
    ):
        self.config = config or DashboardConfig()
        self.market_client = market_client or AlphaVantageClient(config=self.config.market_data)
        self.sentiment_client = sentiment_client or SentimentClient(config=self.config.sentiment)

        chart_errors = ErrorLogger(component=ErrorComponent.MARKET_DATA, log_dir=error_log_dir)
        limit = self.config.market_data.max_periods
        mobile_breakpoint = self.config.charts.mobile_breakpoint
        client = self.market_client

        self.panels: Dict[str, ChartPanel] = {
            EARNINGS: ChartPanel(
                EARNINGS, "earnings", client.annual_earnings,
                partial(build_earnings, limit=limit), summarize_earnings, chart_errors, mobile_breakpoint,
            ),
            DIVIDENDS: ChartPanel(
                DIVIDENDS, "dividends", client.monthly_adjusted,
                partial(build_dividends, limit=limit), summarize_dividends, chart_errors, mobile_breakpoint,
            ),
            CASH_FLOW: ChartPanel(
                CASH_FLOW, "cash flow", client.cash_flow,
                partial(build_cash_flow, limit=limit), summarize_cash_flow, chart_errors, mobile_breakpoint,
            ),
            INCOME_STATEMENT: ChartPanel(
                INCOME_STATEMENT, "income statement", client.income_statement,
                partial(build_income_statement, limit=limit), summarize_income, chart_errors, mobile_breakpoint,
            ),
        }
        self.sentiment = SentimentLoader(
            client=self.sentiment_client,
            error_logger=ErrorLogger(component=ErrorComponent.SENTIMENT, log_dir=error_log_dir),
            news_fetcher=news_fetcher or fetch_stock_news,
            timeout=self.config.sentiment.dashboard_timeout,
        )
        self.ticker: Optional[str] = None

    async def analyze(self, ticker: str) -> Dict[str, PanelState]:
        """
        Run every panel for a ticker concurrently.

        Args:
            ticker (str): Ticker symbol; surrounding whitespace is ignored.

        Returns:
            Dict[str, PanelState]: Final state per panel, including "sentiment".

        Raises:
            ValueError: If the ticker is blank.
        """
        ticker = (ticker or "").strip().upper()
        if not ticker:
            raise ValueError("Please enter a ticker symbol")

        self.ticker = ticker
        logger.info(f"Starting analysis for {ticker}")
        await asyncio.gather(
            *(panel.load(ticker) for panel in self.panels.values()),
            self.sentiment.load(ticker),
        )
        return self.states()

    async def refresh(self, name: str) -> PanelState:
        """Retry one panel by name."""
        if name == SENTIMENT:
            return await self.sentiment.refresh()
        return await self.panels[name].refresh()

    def states(self) -> Dict[str, PanelState]:
        states = {name: panel.state for name, panel in self.panels.items()}
        states[SENTIMENT] = self.sentiment.state
        return states
