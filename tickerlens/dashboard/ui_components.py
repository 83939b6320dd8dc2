# tickerlens/dashboard/ui_components.py

from typing import Dict, List, Optional

import streamlit as st

from tickerlens.dashboard.utils import get_ui_logger, run_async
from tickerlens.features.search.candidates import SuggestionCandidate
from tickerlens.features.search.search_engine import TickerSearchEngine
from tickerlens.utils.config_loader import DashboardConfig

# ==========================================================
# Logging configuration
# ==========================================================
logger = get_ui_logger(__name__)

QUERY_KEY = "ticker_query"
COMMITTED_KEY = "committed_ticker"


# ==========================================================
# Sidebar UI Components Class
# ==========================================================
class SidebarUI:
    """
    Sidebar with layout and service status.

    Streamlit cannot read the browser width, so the chart layout profile is
    chosen here: the compact option builds charts with the mobile profile.
    """

    def __init__(self, config: DashboardConfig, has_market_key: bool):
        self.config = config
        self.has_market_key = has_market_key

    def render(self) -> int:
        """
        Render the sidebar.

        Returns:
            int: Viewport width to build chart specs with.
        """
        st.sidebar.title("TickerLens")

        compact = st.sidebar.toggle("Compact (mobile) chart layout", value=False)
        viewport_width = (
            self.config.charts.mobile_breakpoint - 1 if compact else self.config.charts.viewport_width
        )

        st.sidebar.markdown("**Services**")
        if self.has_market_key:
            st.sidebar.markdown("✅ Market data key configured")
        else:
            st.sidebar.markdown(
                f"⚠️ `{self.config.market_data.api_key_env}` not set: "
                "suggestions use the built-in list and charts are unavailable"
            )
        st.sidebar.caption(f"Chart layout: {'mobile' if compact else 'desktop'} ({viewport_width}px)")
        return viewport_width


# ==========================================================
# Ticker search box
# ==========================================================
class TickerSearchBox:
    """
    Ticker input with suggestions.

    Streamlit reruns the script when the input is committed (Enter or blur),
    so each committed text triggers at most one search. Results are cached
    per query in the session.

    Committing the input with no suggestions to pick from, or picking a
    suggestion, stores the ticker under COMMITTED_KEY for the next run to
    analyze (see take_committed_ticker).
    """

    def __init__(self, engine: TickerSearchEngine, min_typing_length: int = 3):
        self.engine = engine
        self.min_typing_length = min_typing_length

    def suggestions_for(self, query: str) -> List[SuggestionCandidate]:
        cache: Dict[str, List[SuggestionCandidate]] = st.session_state.setdefault("suggestion_cache", {})
        if query not in cache:
            cache[query] = run_async(self.engine.search(query))
            logger.info(f"Suggestions for '{query}': {[c.symbol for c in cache[query]]}")
        return cache[query]

    def live_suggestions(self, query: str) -> List[SuggestionCandidate]:
        if len(query) < self.min_typing_length:
            return []
        return self.suggestions_for(query)

    def _on_query_committed(self) -> None:
        query = str(st.session_state.get(QUERY_KEY) or "").strip().upper()
        if query and not self.live_suggestions(query):
            logger.info(f"Committed ticker from input: {query}")
            st.session_state[COMMITTED_KEY] = query

    def _on_suggestion_picked(self, key: str) -> None:
        symbol = st.session_state.get(key)
        if symbol:
            logger.info(f"Committed ticker from suggestions: {symbol}")
            st.session_state[COMMITTED_KEY] = symbol

    def render(self) -> Optional[str]:
        """
        Render the input and the suggestion picker.

        Returns:
            Optional[str]: Ticker to analyze (selected suggestion or raw input).
        """
        query = st.text_input(
            "Stock ticker",
            key=QUERY_KEY,
            placeholder="Search by symbol or company, e.g. AAPL or Apple",
            on_change=self._on_query_committed,
        ).strip().upper()

        if not query:
            return None

        suggestions = self.live_suggestions(query)
        if not suggestions:
            return query

        options = [query] + [c.symbol for c in suggestions if c.symbol != query]
        labels = {c.symbol: c.label for c in suggestions}
        key = f"suggestion_{query}"
        return st.selectbox(
            "Suggestions",
            options=options,
            format_func=lambda symbol: labels.get(symbol, symbol),
            key=key,
            on_change=self._on_suggestion_picked,
            args=(key,),
        )


def take_committed_ticker() -> Optional[str]:
    """Ticker committed by the search box since the last run, cleared on read."""
    return st.session_state.pop(COMMITTED_KEY, None)
