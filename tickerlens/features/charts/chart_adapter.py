# tickerlens/features/charts/chart_adapter.py
"""
Chart Presentation Adapter

Turns aggregated yearly series into declarative chart specs: category labels,
numeric series, point colours and per-category tooltip lines. Everything here
is derived from its inputs; nothing is cached between builds.

The responsive profile is picked once, when a spec is built. A viewport
resize needs a rebuild.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from tickerlens.features.metrics.aggregator import (
    CashFlowPoint,
    EarningsPoint,
    IncomePoint,
    YearlyDividend,
    margin,
    yoy_growth,
)

# -------------------------------
# Palette
# -------------------------------
BASELINE_COLOR = "#3b82f6"
GROWTH_COLOR = "#22c55e"
DECLINE_COLOR = "#f59e0b"
NEGATIVE_COLOR = "#ef4444"
UNCHANGED_COLOR = "#9ca3af"

MOBILE_BREAKPOINT = 768
DEFAULT_VIEWPORT_WIDTH = 1280

BAR = "bar"
LINE = "line"


# -------------------------------
# Responsive profiles
# -------------------------------
@dataclass(frozen=True)
class ResponsiveProfile:
    """Fixed layout values for one viewport class."""

    name: str
    viewport_width: int
    title_font_size: int
    featured_title_font_size: int
    axis_font_size: int
    tooltip_font_size: int
    grid_side_percent: int
    bar_width: float
    line_width: int
    featured_line_width: int

    @property
    def is_mobile(self) -> bool:
        return self.name == "mobile"

    @classmethod
    def for_viewport(cls, width: int, breakpoint: int = MOBILE_BREAKPOINT) -> "ResponsiveProfile":
        """
        Pick the mobile profile below the breakpoint, the desktop one otherwise.

        Args:
            width (int): Viewport width in pixels.
            breakpoint (int): First width that counts as desktop.

        Returns:
            ResponsiveProfile: Profile for this width.
        """
        if width < breakpoint:
            return cls(
                name="mobile",
                viewport_width=width,
                title_font_size=14,
                featured_title_font_size=16,
                axis_font_size=10,
                tooltip_font_size=11,
                grid_side_percent=8,
                bar_width=0.6,
                line_width=2,
                featured_line_width=3,
            )
        return cls(
            name="desktop",
            viewport_width=width,
            title_font_size=18,
            featured_title_font_size=20,
            axis_font_size=12,
            tooltip_font_size=12,
            grid_side_percent=5,
            bar_width=0.5,
            line_width=3,
            featured_line_width=4,
        )


# -------------------------------
# Spec types
# -------------------------------
@dataclass
class SeriesSpec:
    name: str
    kind: str
    values: List[float]
    colors: Optional[List[str]] = None
    color: Optional[str] = None
    dashed: bool = False
    area_fill: bool = False
    line_width: Optional[int] = None


@dataclass
class ChartSpec:
    """Everything a renderer needs to draw one chart."""

    title: str
    subtitle: str
    categories: List[str]
    series: List[SeriesSpec]
    tooltips: List[List[str]]
    y_axis_title: str
    profile: ResponsiveProfile
    title_font_size: int

    def tooltip_for(self, index: int) -> List[str]:
        return self.tooltips[index]


# -------------------------------
# Helpers
# -------------------------------
def trend_colors(values: Sequence[float]) -> List[str]:
    """
    Point colours for a single-series bar chart.

    A negative value is always NEGATIVE_COLOR. Otherwise the first period is
    BASELINE_COLOR and later periods compare against the previous value:
    higher is GROWTH_COLOR, lower is DECLINE_COLOR, equal is UNCHANGED_COLOR.
    """
    colors = []
    for index, value in enumerate(values):
        if value < 0:
            colors.append(NEGATIVE_COLOR)
        elif index == 0:
            colors.append(BASELINE_COLOR)
        elif value > values[index - 1]:
            colors.append(GROWTH_COLOR)
        elif value < values[index - 1]:
            colors.append(DECLINE_COLOR)
        else:
            colors.append(UNCHANGED_COLOR)
    return colors


def format_growth(growth: float) -> str:
    sign = "+" if growth > 0 else ""
    return f"{sign}{growth:.1f}%"


def format_percent(value: Optional[float]) -> str:
    return "n/a" if value is None else f"{value:.1f}%"


def format_billions(value: float) -> str:
    return f"${value:.1f}B"


def _resolve_profile(profile: Optional[ResponsiveProfile], viewport_width: int) -> ResponsiveProfile:
    return profile or ResponsiveProfile.for_viewport(viewport_width)


def _growth_line(label: str, values: Sequence[float], index: int) -> Optional[str]:
    if index == 0:
        return None
    growth = yoy_growth(values[index], values[index - 1])
    if growth is None:
        return None
    return f"{label}: {format_growth(growth)}"


# -------------------------------
# Builders
# -------------------------------
def earnings_chart(
    ticker: str,
    points: Sequence[EarningsPoint],
    viewport_width: int = DEFAULT_VIEWPORT_WIDTH,
    profile: Optional[ResponsiveProfile] = None,
) -> ChartSpec:
    """Annual EPS bar chart coloured by year-over-year trend."""
    profile = _resolve_profile(profile, viewport_width)
    values = [p.reported_eps for p in points]

    tooltips = []
    for index, point in enumerate(points):
        lines = [point.year, f"Annual EPS: ${point.reported_eps:.2f}"]
        growth = _growth_line("YoY Growth", values, index)
        if growth:
            lines.append(growth)
        tooltips.append(lines)

    return ChartSpec(
        title=f"{ticker.upper()} Earnings History",
        subtitle="Annual EPS Performance",
        categories=[p.year for p in points],
        series=[SeriesSpec(name="Annual EPS", kind=BAR, values=values, colors=trend_colors(values))],
        tooltips=tooltips,
        y_axis_title="EPS ($)",
        profile=profile,
        title_font_size=profile.featured_title_font_size,
    )


def dividends_chart(
    ticker: str,
    points: Sequence[YearlyDividend],
    viewport_width: int = DEFAULT_VIEWPORT_WIDTH,
    profile: Optional[ResponsiveProfile] = None,
) -> ChartSpec:
    """Annual dividend-per-share bar chart coloured by trend."""
    profile = _resolve_profile(profile, viewport_width)
    values = [p.total_dividend for p in points]

    tooltips = []
    for index, point in enumerate(points):
        lines = [
            point.year,
            f"Annual Dividend: ${point.total_dividend:.2f}",
            f"Payments: {len(point.payments)} times",
        ]
        growth = _growth_line("Growth", values, index)
        if growth:
            lines.append(growth)
        tooltips.append(lines)

    return ChartSpec(
        title=f"{ticker.upper()} Annual Dividends",
        subtitle="Yearly dividend payments per share",
        categories=[p.year for p in points],
        series=[SeriesSpec(name="Annual Dividend", kind=BAR, values=values, colors=trend_colors(values))],
        tooltips=tooltips,
        y_axis_title="Dividend ($)",
        profile=profile,
        title_font_size=profile.title_font_size,
    )


def cash_flow_chart(
    ticker: str,
    points: Sequence[CashFlowPoint],
    viewport_width: int = DEFAULT_VIEWPORT_WIDTH,
    profile: Optional[ResponsiveProfile] = None,
) -> ChartSpec:
    """Operating CF, free CF and net income as fixed-colour lines ($B)."""
    profile = _resolve_profile(profile, viewport_width)

    series = [
        SeriesSpec(
            name="Operating Cash Flow",
            kind=LINE,
            values=[p.operating_cashflow for p in points],
            color=BASELINE_COLOR,
            area_fill=True,
            line_width=profile.line_width,
        ),
        SeriesSpec(
            name="Free Cash Flow",
            kind=LINE,
            values=[p.free_cash_flow for p in points],
            color=GROWTH_COLOR,
            line_width=profile.line_width,
        ),
        SeriesSpec(
            name="Net Income",
            kind=LINE,
            values=[p.net_income for p in points],
            color=DECLINE_COLOR,
            dashed=True,
            line_width=profile.line_width,
        ),
    ]

    tooltips = [
        [
            p.year,
            f"Operating CF: {format_billions(p.operating_cashflow)}",
            f"Free CF: {format_billions(p.free_cash_flow)}",
            f"Net Income: {format_billions(p.net_income)}",
            f"CapEx: {format_billions(p.capital_expenditures)}",
            f"Dividends: {format_billions(p.dividend_payout)}",
        ]
        for p in points
    ]

    return ChartSpec(
        title=f"{ticker.upper()} Cash Flow Analysis",
        subtitle="Operating, Free Cash Flow & Net Income ($ Billions)",
        categories=[p.year for p in points],
        series=series,
        tooltips=tooltips,
        y_axis_title="Amount ($ Billions)",
        profile=profile,
        title_font_size=profile.title_font_size,
    )


def income_statement_chart(
    ticker: str,
    points: Sequence[IncomePoint],
    viewport_width: int = DEFAULT_VIEWPORT_WIDTH,
    profile: Optional[ResponsiveProfile] = None,
) -> ChartSpec:
    """Revenue, gross profit, operating income and net income lines ($B) with margins."""
    profile = _resolve_profile(profile, viewport_width)

    series = [
        SeriesSpec(
            name="Total Revenue",
            kind=LINE,
            values=[p.total_revenue for p in points],
            color=BASELINE_COLOR,
            area_fill=True,
            line_width=profile.featured_line_width,
        ),
        SeriesSpec(
            name="Gross Profit",
            kind=LINE,
            values=[p.gross_profit for p in points],
            color=GROWTH_COLOR,
            line_width=profile.line_width,
        ),
        SeriesSpec(
            name="Operating Income",
            kind=LINE,
            values=[p.operating_income for p in points],
            color=DECLINE_COLOR,
            line_width=profile.line_width,
        ),
        SeriesSpec(
            name="Net Income",
            kind=LINE,
            values=[p.net_income for p in points],
            color=NEGATIVE_COLOR,
            line_width=profile.line_width,
        ),
    ]

    tooltips = []
    for p in points:
        tooltips.append([
            p.year,
            f"Revenue: {format_billions(p.total_revenue)}",
            f"Gross Profit: {format_billions(p.gross_profit)} "
            f"({format_percent(margin(p.gross_profit, p.total_revenue))})",
            f"Operating Income: {format_billions(p.operating_income)} "
            f"({format_percent(margin(p.operating_income, p.total_revenue))})",
            f"Net Income: {format_billions(p.net_income)} "
            f"({format_percent(margin(p.net_income, p.total_revenue))})",
            f"Operating Expenses: {format_billions(p.operating_expenses)}",
        ])

    return ChartSpec(
        title=f"{ticker.upper()} Income Statement",
        subtitle="Revenue, Profit & Operating Performance ($ Billions)",
        categories=[p.year for p in points],
        series=series,
        tooltips=tooltips,
        y_axis_title="Amount ($ Billions)",
        profile=profile,
        title_font_size=profile.title_font_size,
    )
