# tickerlens/dashboard/app.py

import os

import streamlit as st

from tickerlens.dashboard.chart_panels import render_chart_panels
from tickerlens.dashboard.sentiment_panel import SentimentPanel, render_text_analyzer
from tickerlens.dashboard.ticker_dashboard import TickerDashboard
from tickerlens.dashboard.ui_components import SidebarUI, TickerSearchBox, take_committed_ticker
from tickerlens.dashboard.utils import get_ui_logger, run_async
from tickerlens.features.search.search_engine import TickerSearchEngine
from tickerlens.monitoring.error_logging import ErrorComponent, ErrorLogger
from tickerlens.utils.config_loader import DashboardConfig, load_typed_config

logger = get_ui_logger("app")

DEFAULT_CONFIG_PATH = "configs/dashboard_config.yaml"


@st.cache_resource
def load_app_config() -> DashboardConfig:
    path = os.environ.get("TICKERLENS_CONFIG", DEFAULT_CONFIG_PATH)
    if not os.path.exists(path):
        logger.warning(f"Config file {path} not found, using defaults")
        return load_typed_config()
    return load_typed_config(path)


def get_dashboard(config: DashboardConfig) -> TickerDashboard:
    if "dashboard" not in st.session_state:
        st.session_state["dashboard"] = TickerDashboard(
            config=config, error_log_dir=config.logging.error_log_dir
        )
    return st.session_state["dashboard"]


def get_search_engine(dashboard: TickerDashboard, config: DashboardConfig) -> TickerSearchEngine:
    if "search_engine" not in st.session_state:
        st.session_state["search_engine"] = TickerSearchEngine(
            client=dashboard.market_client,
            config=config.search,
            error_logger=ErrorLogger(
                component=ErrorComponent.TICKER_SEARCH, log_dir=config.logging.error_log_dir
            ),
        )
    return st.session_state["search_engine"]


def render_ticker_tab(dashboard: TickerDashboard, config: DashboardConfig, viewport_width: int) -> None:
    engine = get_search_engine(dashboard, config)

    col_input, col_button = st.columns([8, 2])
    with col_input:
        ticker = TickerSearchBox(engine, config.search.min_typing_length).render()
    with col_button:
        st.markdown("<div style='height:28px'></div>", unsafe_allow_html=True)
        analyze_clicked = st.button("Analyze", type="primary", use_container_width=True)

    committed = take_committed_ticker()
    if analyze_clicked and not ticker:
        st.warning("Please enter a ticker symbol")
    else:
        target = ticker if analyze_clicked else committed
        if target:
            with st.spinner(f"Analyzing {target}..."):
                run_async(dashboard.analyze(target))
            logger.info(f"Analysis complete for {target}")

    if dashboard.ticker:
        st.markdown(f"### {dashboard.ticker}")
    SentimentPanel(dashboard.sentiment).render()

    st.markdown("<div style='height:20px'></div>", unsafe_allow_html=True)
    render_chart_panels(dashboard.panels, viewport_width)


def main():
    st.set_page_config(page_title="TickerLens", layout="wide")

    # -------------------------------
    # Title
    # -------------------------------
    st.markdown(
        "<h2 style='text-align:center; margin-bottom:20px;'>TickerLens Financial Dashboard</h2>",
        unsafe_allow_html=True,
    )

    config = load_app_config()
    dashboard = get_dashboard(config)
    viewport_width = SidebarUI(config, dashboard.market_client.has_api_key).render()

    tab_ticker, tab_text = st.tabs(["Ticker Dashboard", "Sentiment Analyzer"])
    with tab_ticker:
        render_ticker_tab(dashboard, config, viewport_width)
    with tab_text:
        render_text_analyzer(dashboard.sentiment_client, timeout=config.sentiment.analyzer_timeout)

    logger.info("Dashboard render complete.")


if __name__ == "__main__":
    main()
