# tickerlens/features/metrics/summaries.py
"""Headline numbers shown in the summary cards under each chart."""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from tickerlens.features.metrics.aggregator import (
    CashFlowPoint,
    EarningsPoint,
    IncomePoint,
    YearlyDividend,
    fcf_conversion,
    margin,
    yoy_growth,
)


@dataclass(frozen=True)
class EarningsSummary:
    latest_eps: float
    yoy_growth: Optional[float]
    average_eps: float
    growth_years: int


@dataclass(frozen=True)
class DividendSummary:
    latest_total: float
    five_year_average: float
    growth_years: int
    total_payments: int


@dataclass(frozen=True)
class CashFlowSummary:
    latest_operating_cashflow: float
    latest_free_cash_flow: float
    average_free_cash_flow: float
    fcf_conversion: Optional[float]


@dataclass(frozen=True)
class IncomeSummary:
    latest_revenue: float
    latest_net_income: float
    net_margin: Optional[float]
    revenue_growth: Optional[float]


def count_growth_years(values: Sequence[float]) -> int:
    """Number of periods strictly above the period before them."""
    return sum(1 for index in range(1, len(values)) if values[index] > values[index - 1])


def _previous(values: List[float]) -> Optional[float]:
    return values[-2] if len(values) >= 2 else None


def summarize_earnings(points: Sequence[EarningsPoint]) -> Optional[EarningsSummary]:
    if not points:
        return None
    eps = [p.reported_eps for p in points]
    return EarningsSummary(
        latest_eps=eps[-1],
        yoy_growth=yoy_growth(eps[-1], _previous(eps)),
        average_eps=sum(eps) / len(eps),
        growth_years=count_growth_years(eps),
    )


def summarize_dividends(points: Sequence[YearlyDividend]) -> Optional[DividendSummary]:
    if not points:
        return None
    totals = [p.total_dividend for p in points]
    recent = totals[-5:]
    return DividendSummary(
        latest_total=totals[-1],
        five_year_average=sum(recent) / len(recent),
        growth_years=count_growth_years(totals),
        total_payments=sum(len(p.payments) for p in points),
    )


def summarize_cash_flow(points: Sequence[CashFlowPoint]) -> Optional[CashFlowSummary]:
    if not points:
        return None
    latest = points[-1]
    return CashFlowSummary(
        latest_operating_cashflow=latest.operating_cashflow,
        latest_free_cash_flow=latest.free_cash_flow,
        average_free_cash_flow=sum(p.free_cash_flow for p in points) / len(points),
        fcf_conversion=fcf_conversion(latest.free_cash_flow, latest.net_income),
    )


def summarize_income(points: Sequence[IncomePoint]) -> Optional[IncomeSummary]:
    if not points:
        return None
    revenue = [p.total_revenue for p in points]
    latest = points[-1]
    return IncomeSummary(
        latest_revenue=latest.total_revenue,
        latest_net_income=latest.net_income,
        net_margin=margin(latest.net_income, latest.total_revenue),
        revenue_growth=yoy_growth(revenue[-1], _previous(revenue)),
    )
