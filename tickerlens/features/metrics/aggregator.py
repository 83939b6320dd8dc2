# tickerlens/features/metrics/aggregator.py
"""
Metric Aggregator

Pure transforms from raw Alpha Vantage records (newest first, numbers as
strings) into display-ready yearly series (oldest first, at most the ten most
recent periods), plus the derived ratios shown in tooltips and summary
cards.

Monetary cash-flow and income-statement fields are converted to billions of
dollars. EPS and per-share dividends are left as reported.
"""

import math
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, Generic, Iterable, List, Mapping, Optional, Sequence, TypeVar

import pandas as pd

from tickerlens.utils.errors import TickerLensError
from tickerlens.utils.logger import get_logger

logger = get_logger("metric_aggregator")

MAX_PERIODS = 10
BILLION = 1_000_000_000
DIVIDEND_FIELD = "7. dividend amount"

T = TypeVar("T")


# -------------------------------
# Yearly aggregates
# -------------------------------
@dataclass(frozen=True)
class DividendPayment:
    date: str
    dividend: float


@dataclass
class YearlyDividend:
    year: str
    total_dividend: float = 0.0
    payments: List[DividendPayment] = field(default_factory=list)


@dataclass(frozen=True)
class EarningsPoint:
    year: str
    fiscal_date_ending: str
    reported_eps: float
    estimated_eps: Optional[float] = None
    surprise: Optional[float] = None
    surprise_percentage: Optional[float] = None


@dataclass(frozen=True)
class CashFlowPoint:
    """One fiscal year of cash flow, in $B. capital_expenditures is an absolute value."""
    year: str
    operating_cashflow: float
    capital_expenditures: float
    free_cash_flow: float
    net_income: float
    dividend_payout: float


@dataclass(frozen=True)
class IncomePoint:
    """One fiscal year of the income statement, in $B."""
    year: str
    total_revenue: float
    gross_profit: float
    operating_income: float
    net_income: float
    operating_expenses: float


@dataclass
class AggregationResult(Generic[T]):
    """Outcome of a build_* call: either data or a failure reason for the panel."""
    data: List[T] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# -------------------------------
# Parsing helpers
# -------------------------------
def parse_amount(value: Any) -> float:
    """
    Parse a numeric-as-string provider field.

    Returns 0.0 for missing values, the provider's "None" placeholder,
    unparseable strings and NaN/inf.
    """
    if value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def _parse_optional(value: Any) -> Optional[float]:
    if value in (None, "", "None"):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def year_of(date_string: str) -> str:
    """Year digits of an ISO date ("2024-03-28" -> "2024")."""
    return str(date_string)[:4]


def _most_recent(records: Sequence[T], limit: int) -> List[T]:
    return list(records[:limit])


# -------------------------------
# Series builders
# -------------------------------
def aggregate_dividends(
    monthly_series: Mapping[str, Mapping[str, Any]], limit: int = MAX_PERIODS
) -> List[YearlyDividend]:
    """
    Group monthly adjusted records into yearly dividend totals.

    Args:
        monthly_series: Mapping of ISO date -> monthly record holding "7. dividend amount".
        limit: Number of most recent years to keep.

    Returns:
        List[YearlyDividend]: Oldest year first. Years without a positive payment are omitted.
    """
    yearly: Dict[str, YearlyDividend] = {}

    for date, record in monthly_series.items():
        amount = parse_amount((record or {}).get(DIVIDEND_FIELD))
        if amount <= 0:
            continue
        year = year_of(date)
        bucket = yearly.setdefault(year, YearlyDividend(year=year))
        bucket.total_dividend += amount
        bucket.payments.append(DividendPayment(date=date, dividend=amount))

    newest_first = sorted(yearly.values(), key=lambda d: int(d.year), reverse=True)
    return list(reversed(newest_first[:limit]))


def aggregate_earnings(
    annual_earnings: Sequence[Mapping[str, Any]], limit: int = MAX_PERIODS
) -> List[EarningsPoint]:
    """Keep the most recent annual EPS records and return them oldest first."""
    points = [
        EarningsPoint(
            year=year_of(record.get("fiscalDateEnding", "")),
            fiscal_date_ending=record.get("fiscalDateEnding", ""),
            reported_eps=parse_amount(record.get("reportedEPS")),
            estimated_eps=_parse_optional(record.get("estimatedEPS")),
            surprise=_parse_optional(record.get("surprise")),
            surprise_percentage=_parse_optional(record.get("surprisePercentage")),
        )
        for record in _most_recent(annual_earnings, limit)
    ]
    return list(reversed(points))


def aggregate_cash_flow(
    annual_reports: Sequence[Mapping[str, Any]], limit: int = MAX_PERIODS
) -> List[CashFlowPoint]:
    """Convert annual cash flow reports to $B points sorted by ascending year."""
    points = []
    for report in _most_recent(annual_reports, limit):
        operating = parse_amount(report.get("operatingCashflow"))
        capex = abs(parse_amount(report.get("capitalExpenditures")))
        points.append(
            CashFlowPoint(
                year=year_of(report.get("fiscalDateEnding", "")),
                operating_cashflow=operating / BILLION,
                capital_expenditures=capex / BILLION,
                free_cash_flow=free_cash_flow(operating, capex) / BILLION,
                net_income=parse_amount(report.get("netIncome")) / BILLION,
                dividend_payout=parse_amount(report.get("dividendPayout")) / BILLION,
            )
        )
    return sorted(points, key=lambda p: int(p.year or 0))


def aggregate_income_statement(
    annual_reports: Sequence[Mapping[str, Any]], limit: int = MAX_PERIODS
) -> List[IncomePoint]:
    """Convert annual income statements to $B points sorted by ascending year."""
    points = [
        IncomePoint(
            year=year_of(report.get("fiscalDateEnding", "")),
            total_revenue=parse_amount(report.get("totalRevenue")) / BILLION,
            gross_profit=parse_amount(report.get("grossProfit")) / BILLION,
            operating_income=parse_amount(report.get("operatingIncome")) / BILLION,
            net_income=parse_amount(report.get("netIncome")) / BILLION,
            operating_expenses=parse_amount(report.get("operatingExpenses")) / BILLION,
        )
        for report in _most_recent(annual_reports, limit)
    ]
    return sorted(points, key=lambda p: int(p.year or 0))


# -------------------------------
# Derived ratios
# -------------------------------
def yoy_growth(current: float, previous: Optional[float]) -> Optional[float]:
    """
    Year-over-year growth in percent.

    Returns None when there is no previous period or the previous value is zero.
    """
    if previous is None or previous == 0:
        return None
    return (current - previous) / abs(previous) * 100


def free_cash_flow(operating_cashflow: float, capital_expenditures: float) -> float:
    return operating_cashflow - abs(capital_expenditures)


def fcf_conversion(free_cash: float, net_income: float) -> Optional[float]:
    """Free cash flow as a percentage of net income; None when net income is zero."""
    if net_income == 0:
        return None
    return free_cash / net_income * 100


def margin(line_item: float, revenue: float) -> Optional[float]:
    """Line item as a percentage of revenue; None when revenue is zero."""
    if revenue == 0:
        return None
    return line_item / revenue * 100


def growth_series(values: Sequence[float]) -> List[Optional[float]]:
    """YoY growth for every period; the first period has no previous value."""
    return [
        yoy_growth(value, values[index - 1] if index > 0 else None)
        for index, value in enumerate(values)
    ]


def series_to_frame(points: Iterable[Any]) -> pd.DataFrame:
    """Tabular view of a yearly series for the dashboard data tables."""
    rows = []
    for point in points:
        row = asdict(point)
        if "payments" in row:
            row["payments"] = len(row["payments"])
        rows.append(row)
    return pd.DataFrame(rows)


# -------------------------------
# Failure boundary
# -------------------------------
def _build(
    transform: Callable[..., List[T]],
    payload: Any,
    empty_message: str,
    limit: int,
) -> AggregationResult[T]:
    if isinstance(payload, Exception):
        return AggregationResult(error=str(payload) or empty_message)
    try:
        data = transform(payload, limit=limit)
    except (TypeError, ValueError, AttributeError, TickerLensError) as exc:
        logger.error(f"Aggregation failed: {exc}")
        return AggregationResult(error=str(exc) or empty_message)
    if not data:
        return AggregationResult(error=empty_message)
    return AggregationResult(data=data)


def build_dividends(payload: Any, limit: int = MAX_PERIODS) -> AggregationResult[YearlyDividend]:
    return _build(aggregate_dividends, payload or {}, "No dividends data available for this ticker", limit)


def build_earnings(payload: Any, limit: int = MAX_PERIODS) -> AggregationResult[EarningsPoint]:
    return _build(aggregate_earnings, payload or [], "No earnings data available for this ticker", limit)


def build_cash_flow(payload: Any, limit: int = MAX_PERIODS) -> AggregationResult[CashFlowPoint]:
    return _build(aggregate_cash_flow, payload or [], "No cash flow data available for this ticker", limit)


def build_income_statement(payload: Any, limit: int = MAX_PERIODS) -> AggregationResult[IncomePoint]:
    return _build(
        aggregate_income_statement, payload or [], "No income statement data available for this ticker", limit
    )
