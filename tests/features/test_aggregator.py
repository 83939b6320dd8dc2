import math

import pandas as pd
import pytest

from tickerlens.features.metrics.aggregator import (
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
    series_to_frame,
    yoy_growth,
)
from tickerlens.utils.errors import RateLimitError
from tests.mocks.market_data_mocks import (
    annual_earnings_records,
    cash_flow_reports,
    income_statement_reports,
    monthly_adjusted_series,
)


# -------------------------------------------------------------------------
# Parsing
# -------------------------------------------------------------------------

@pytest.mark.parametrize(
    "raw, expected",
    [("1.25", 1.25), ("-3", -3.0), (None, 0.0), ("None", 0.0), ("", 0.0), ("abc", 0.0), ("nan", 0.0), ("inf", 0.0)],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


# -------------------------------------------------------------------------
# Dividends
# -------------------------------------------------------------------------

def test_dividend_totals_equal_sum_of_payments():
    yearly = aggregate_dividends(monthly_adjusted_series())

    for entry in yearly:
        assert entry.total_dividend == pytest.approx(sum(p.dividend for p in entry.payments))
    assert [d.year for d in yearly] == ["2023", "2024"]
    assert yearly[1].total_dividend == pytest.approx(0.99)
    assert len(yearly[1].payments) == 4


def test_years_without_positive_payments_are_omitted():
    yearly = aggregate_dividends(monthly_adjusted_series())
    assert "2022" not in [d.year for d in yearly]


def test_dividends_keep_ten_most_recent_years_ascending():
    series = {f"{year}-06-30": {"7. dividend amount": "0.10"} for year in range(2005, 2025)}

    yearly = aggregate_dividends(series)

    assert len(yearly) == 10
    assert [d.year for d in yearly] == [str(y) for y in range(2015, 2025)]


# -------------------------------------------------------------------------
# Scalar series
# -------------------------------------------------------------------------

def test_earnings_most_recent_ten_oldest_first():
    points = aggregate_earnings(annual_earnings_records(12))

    assert len(points) == 10
    assert points[0].year == "2015"
    assert points[-1].year == "2024"
    assert points[-1].reported_eps == pytest.approx(6.0)


def test_earnings_eps_not_rescaled_and_bad_values_default_to_zero():
    records = [{"fiscalDateEnding": "2024-12-31", "reportedEPS": "None", "estimatedEPS": "1.10"}]

    point = aggregate_earnings(records)[0]

    assert point.reported_eps == 0.0
    assert point.estimated_eps == pytest.approx(1.10)
    assert point.surprise is None


def test_cash_flow_free_cash_flow_in_billions():
    points = aggregate_cash_flow(cash_flow_reports())

    latest = points[-1]
    assert latest.year == "2024"
    assert latest.operating_cashflow == pytest.approx(50.0)
    assert latest.capital_expenditures == pytest.approx(10.0)
    assert latest.free_cash_flow == pytest.approx(40.0)
    assert latest.dividend_payout == pytest.approx(15.0)


def test_cash_flow_positive_capex_is_still_subtracted():
    points = aggregate_cash_flow(cash_flow_reports())

    assert points[0].year == "2023"
    assert points[0].free_cash_flow == pytest.approx(36.0)
    assert points[0].dividend_payout == 0.0


def test_income_statement_sorted_and_scaled():
    points = aggregate_income_statement(income_statement_reports())

    assert [p.year for p in points] == ["2023", "2024"]
    assert points[-1].total_revenue == pytest.approx(400.0)
    assert points[-1].net_income == pytest.approx(100.0)


# -------------------------------------------------------------------------
# Ratios
# -------------------------------------------------------------------------

def test_growth_unavailable_when_previous_is_zero():
    assert yoy_growth(5.0, 0.0) is None
    assert yoy_growth(5.0, None) is None


def test_growth_uses_absolute_previous():
    assert yoy_growth(1.0, -2.0) == pytest.approx(150.0)
    assert yoy_growth(110.0, 100.0) == pytest.approx(10.0)


def test_growth_series_first_period_unavailable():
    growth = growth_series([0.0, 2.0, 3.0])
    assert growth[0] is None
    assert growth[1] is None
    assert growth[2] == pytest.approx(50.0)


def test_free_cash_flow_and_conversion():
    assert free_cash_flow(50.0, -10.0) == pytest.approx(40.0)
    assert fcf_conversion(40.0, 50.0) == pytest.approx(80.0)
    assert fcf_conversion(40.0, 0.0) is None


def test_margin_guarded_against_zero_revenue():
    assert margin(25.0, 100.0) == pytest.approx(25.0)
    assert margin(25.0, 0.0) is None


# -------------------------------------------------------------------------
# Failure boundary
# -------------------------------------------------------------------------

def test_build_reports_empty_dividends_as_no_data():
    result = build_dividends({"2024-01-31": {"7. dividend amount": "0.0000"}})

    assert not result.ok
    assert result.data == []
    assert result.error == "No dividends data available for this ticker"


@pytest.mark.parametrize(
    "builder, message",
    [
        (build_earnings, "No earnings data available for this ticker"),
        (build_cash_flow, "No cash flow data available for this ticker"),
        (build_income_statement, "No income statement data available for this ticker"),
        (build_dividends, "No dividends data available for this ticker"),
    ],
)
def test_build_none_payload(builder, message):
    result = builder(None)
    assert result.error == message


def test_build_passes_provider_error_message_through():
    result = build_earnings(RateLimitError("Thank you for using Alpha Vantage!"))

    assert not result.ok
    assert result.error == "Thank you for using Alpha Vantage!"


def test_build_does_not_raise_on_malformed_payload():
    result = build_cash_flow([None])

    assert not result.ok
    assert result.error


def test_build_success_respects_limit():
    result = build_earnings(annual_earnings_records(8), limit=5)

    assert result.ok
    assert [p.year for p in result.data] == ["2020", "2021", "2022", "2023", "2024"]


def test_series_to_frame_counts_payments():
    frame = series_to_frame(aggregate_dividends(monthly_adjusted_series()))

    assert isinstance(frame, pd.DataFrame)
    assert list(frame["year"]) == ["2023", "2024"]
    assert list(frame["payments"]) == [2, 4]
    assert not math.isnan(frame["total_dividend"].sum())
