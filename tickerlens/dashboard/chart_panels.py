# tickerlens/dashboard/chart_panels.py

from typing import Callable, Dict, List, Tuple

import streamlit as st

from tickerlens.dashboard.ticker_dashboard import (
    CASH_FLOW,
    DIVIDENDS,
    EARNINGS,
    INCOME_STATEMENT,
    ChartPanel,
)
from tickerlens.dashboard.utils import (
    DEFAULT_CHART_HEIGHT,
    format_money,
    format_signed_percent,
    get_ui_logger,
    run_async,
)
from tickerlens.features.charts.plotly_renderer import to_plotly_figure

# -------------------------------
# Logging configuration
# -------------------------------
logger = get_ui_logger(__name__)

PANEL_TITLES = {
    EARNINGS: "Earnings History",
    DIVIDENDS: "Annual Dividends",
    CASH_FLOW: "Cash Flow Analysis",
    INCOME_STATEMENT: "Income Statement",
}


# -------------------------------
# Summary cards
# -------------------------------
def earnings_metrics(summary) -> List[Tuple[str, str]]:
    return [
        ("Latest EPS", format_money(summary.latest_eps)),
        ("YoY Growth", format_signed_percent(summary.yoy_growth)),
        ("Average EPS", format_money(summary.average_eps)),
        ("Growth Years", str(summary.growth_years)),
    ]


def dividend_metrics(summary) -> List[Tuple[str, str]]:
    return [
        ("Latest Annual", format_money(summary.latest_total)),
        ("5-Year Average", format_money(summary.five_year_average)),
        ("Growth Years", str(summary.growth_years)),
        ("Total Payments", str(summary.total_payments)),
    ]


def cash_flow_metrics(summary) -> List[Tuple[str, str]]:
    return [
        ("Operating CF", format_money(summary.latest_operating_cashflow, "B", 1)),
        ("Free CF", format_money(summary.latest_free_cash_flow, "B", 1)),
        ("Average FCF", format_money(summary.average_free_cash_flow, "B", 1)),
        ("FCF Conversion", format_signed_percent(summary.fcf_conversion).lstrip("+")),
    ]


def income_metrics(summary) -> List[Tuple[str, str]]:
    return [
        ("Revenue", format_money(summary.latest_revenue, "B", 1)),
        ("Net Income", format_money(summary.latest_net_income, "B", 1)),
        ("Net Margin", format_signed_percent(summary.net_margin).lstrip("+")),
        ("Revenue Growth", format_signed_percent(summary.revenue_growth)),
    ]


SUMMARY_METRICS: Dict[str, Callable[..., List[Tuple[str, str]]]] = {
    EARNINGS: earnings_metrics,
    DIVIDENDS: dividend_metrics,
    CASH_FLOW: cash_flow_metrics,
    INCOME_STATEMENT: income_metrics,
}


# -------------------------------
# Chart Panel View
# -------------------------------
class ChartPanelView:
    """
    Renders one chart panel: loading/error/success state, the Plotly figure,
    the summary cards and a retry button on failure.
    """

    def __init__(self, panel: ChartPanel, viewport_width: int):
        self.panel = panel
        self.viewport_width = viewport_width

    def render_error(self) -> None:
        st.error(self.panel.state.error)
        if st.button("Try Again", key=f"retry_{self.panel.name}"):
            logger.info(f"Retrying {self.panel.name} for {self.panel.ticker}")
            run_async(self.panel.refresh())
            st.rerun()

    def render_summary(self) -> None:
        summary = self.panel.state.summary
        if summary is None:
            return
        metrics = SUMMARY_METRICS[self.panel.name](summary)
        for column, (label, value) in zip(st.columns(len(metrics)), metrics):
            column.metric(label, value)

    def render(self) -> None:
        st.markdown(
            f"<h4 style='border-bottom:1px solid #ccc; padding-bottom:5px;'>"
            f"{PANEL_TITLES[self.panel.name]}</h4>",
            unsafe_allow_html=True,
        )
        state = self.panel.state

        if state.is_loading:
            st.info(f"Loading {self.panel.label} data...")
            return
        if state.is_error:
            self.render_error()
            return
        if not state.is_success:
            st.caption("Search for a ticker to see this chart.")
            return

        spec = self.panel.chart_spec(self.viewport_width)
        st.plotly_chart(to_plotly_figure(spec, height=DEFAULT_CHART_HEIGHT), use_container_width=True)
        self.render_summary()


def render_chart_panels(panels: Dict[str, ChartPanel], viewport_width: int) -> None:
    """Lay the four chart panels out in two rows of two."""
    names = [EARNINGS, DIVIDENDS, CASH_FLOW, INCOME_STATEMENT]
    for row in (names[:2], names[2:]):
        for column, name in zip(st.columns(2), row):
            with column:
                ChartPanelView(panels[name], viewport_width).render()
