"""Metric aggregation: raw provider records -> yearly series, ratios and summaries."""

from .aggregator import (
    AggregationResult,
    CashFlowPoint,
    DividendPayment,
    EarningsPoint,
    IncomePoint,
    YearlyDividend,
    aggregate_cash_flow,
    aggregate_dividends,
    aggregate_earnings,
    aggregate_income_statement,
    build_cash_flow,
    build_dividends,
    build_earnings,
    build_income_statement,
    fcf_conversion,
    free_cash_flow,
    growth_series,
    margin,
    parse_amount,
    yoy_growth,
)

__all__ = [
    "AggregationResult",
    "CashFlowPoint",
    "DividendPayment",
    "EarningsPoint",
    "IncomePoint",
    "YearlyDividend",
    "aggregate_cash_flow",
    "aggregate_dividends",
    "aggregate_earnings",
    "aggregate_income_statement",
    "build_cash_flow",
    "build_dividends",
    "build_earnings",
    "build_income_statement",
    "fcf_conversion",
    "free_cash_flow",
    "growth_series",
    "margin",
    "parse_amount",
    "yoy_growth",
]
