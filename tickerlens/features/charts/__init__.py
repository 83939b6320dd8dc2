"""Chart specs built from yearly series, and their Plotly rendering."""

from .chart_adapter import (
    BASELINE_COLOR,
    DECLINE_COLOR,
    GROWTH_COLOR,
    NEGATIVE_COLOR,
    UNCHANGED_COLOR,
    ChartSpec,
    ResponsiveProfile,
    SeriesSpec,
    cash_flow_chart,
    dividends_chart,
    earnings_chart,
    income_statement_chart,
    trend_colors,
)
from .plotly_renderer import to_plotly_figure

__all__ = [
    "BASELINE_COLOR",
    "DECLINE_COLOR",
    "GROWTH_COLOR",
    "NEGATIVE_COLOR",
    "UNCHANGED_COLOR",
    "ChartSpec",
    "ResponsiveProfile",
    "SeriesSpec",
    "cash_flow_chart",
    "dividends_chart",
    "earnings_chart",
    "income_statement_chart",
    "to_plotly_figure",
    "trend_colors",
]
