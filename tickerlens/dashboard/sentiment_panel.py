# tickerlens/dashboard/sentiment_panel.py

from typing import Optional

import plotly.graph_objects as go
import streamlit as st
from streamlit.delta_generator import DeltaGenerator

from tickerlens.dashboard.ticker_dashboard import SentimentLoader
from tickerlens.dashboard.utils import (
    DEFAULT_BAR_HEIGHT,
    SENTIMENT_COLORS,
    SENTIMENT_ICONS,
    get_ui_logger,
    run_async,
)
from tickerlens.features.market_sentiment.normalizer import SentimentVerdict
from tickerlens.features.market_sentiment.sentiment_client import SentimentClient
from tickerlens.utils.errors import SentimentServiceError

# -------------------------------
# Logging configuration
# -------------------------------
logger = get_ui_logger(__name__)


# -------------------------------
# Charts
# -------------------------------
def probability_figure(verdict: SentimentVerdict, title: str) -> go.Figure:
    labels = ["positive", "neutral", "negative"]
    values = [verdict.probabilities[label] for label in labels]
    fig = go.Figure(
        go.Bar(
            x=values,
            y=[label.capitalize() for label in labels],
            orientation="h",
            marker=dict(color=[SENTIMENT_COLORS[label] for label in labels]),
            text=[f"{v * 100:.1f}%" for v in values],
            textposition="outside",
        )
    )
    fig.update_layout(
        title=title,
        xaxis=dict(title="Probability", range=[0, 1]),
        template="plotly_white",
        height=DEFAULT_BAR_HEIGHT,
        margin=dict(l=40, r=40, t=40, b=40),
    )
    return fig


def render_verdict(verdict: SentimentVerdict, title: str, container: Optional[DeltaGenerator] = None) -> None:
    """Verdict headline, confidence and the three-class probability bars."""
    target = container or st
    icon = SENTIMENT_ICONS.get(verdict.sentiment, "")
    color = SENTIMENT_COLORS.get(verdict.sentiment, "#9ca3af")
    target.markdown(
        f"<h3 style='color:{color};'>{icon} {verdict.sentiment.capitalize()}</h3>",
        unsafe_allow_html=True,
    )
    target.metric("Confidence", f"{verdict.confidence * 100:.1f}%")
    target.plotly_chart(probability_figure(verdict, title), use_container_width=True)
    if verdict.model:
        target.caption(f"Model: {verdict.model}" + (f" ({verdict.source})" if verdict.source else ""))
    if verdict.note:
        target.caption(verdict.note)


# -------------------------------
# Ticker sentiment panel
# -------------------------------
class SentimentPanel:
    """
    Displays the news-based sentiment verdict for the analyzed ticker.
    """

    def __init__(self, loader: SentimentLoader):
        self.loader = loader

    def render_articles(self, verdict: SentimentVerdict) -> None:
        if not verdict.news_articles:
            return
        with st.expander(f"News analyzed ({len(verdict.news_articles)} articles)"):
            for article in verdict.news_articles:
                source = (article.get("source") or {}).get("name") or "Unknown source"
                published = (article.get("publishedAt") or "")[:10]
                title = article.get("title") or ""
                url = article.get("url")
                st.markdown(f"**[{title}]({url})**" if url else f"**{title}**")
                st.caption(f"{source} · {published}")
                if article.get("description"):
                    st.write(article["description"])

    def render(self) -> None:
        st.markdown(
            "<h4 style='border-bottom:1px solid #ccc; padding-bottom:5px;'>Market Sentiment</h4>",
            unsafe_allow_html=True,
        )
        state = self.loader.state

        if state.is_loading:
            st.info("Analyzing recent news...")
            return
        if state.is_error:
            st.error(state.error)
            if st.button("Try Again", key="retry_sentiment"):
                run_async(self.loader.refresh())
                st.rerun()
            return
        if not state.is_success:
            st.caption("Enter a ticker to analyze news sentiment.")
            return

        verdict: SentimentVerdict = state.data
        col_a, col_b = st.columns([5, 5])
        with col_a:
            render_verdict(verdict, f"{self.loader.ticker} - News Sentiment", container=st)
        with col_b:
            st.markdown("**Summary**")
            st.write(verdict.summary)
            self.render_articles(verdict)


# -------------------------------
# Free-text analyzer
# -------------------------------
def render_text_analyzer(client: SentimentClient, timeout: float) -> None:
    """Classify arbitrary financial text with the analyzer timeout."""
    st.markdown(
        "<h4 style='border-bottom:1px solid #ccc; padding-bottom:5px;'>Sentiment Analyzer</h4>",
        unsafe_allow_html=True,
    )
    text = st.text_area(
        "Financial text",
        key="analyzer_text",
        height=160,
        placeholder="Paste a headline, earnings call excerpt or news paragraph...",
    )
    if st.button("Analyze Sentiment", key="analyze_text"):
        try:
            st.session_state["analyzer_result"] = run_async(client.analyze(text, timeout=timeout))
            st.session_state["analyzer_error"] = None
        except SentimentServiceError as e:
            logger.warning(f"Free-text analysis failed: {e}")
            st.session_state["analyzer_result"] = None
            st.session_state["analyzer_error"] = str(e)

    if st.session_state.get("analyzer_error"):
        st.error(st.session_state["analyzer_error"])
    result = st.session_state.get("analyzer_result")
    if result is not None:
        render_verdict(result, "Sentiment Probabilities")
