from tickerlens.features.charts.chart_adapter import cash_flow_chart, earnings_chart
from tickerlens.features.charts.plotly_renderer import hover_text, to_plotly_figure
from tickerlens.features.metrics.aggregator import CashFlowPoint, EarningsPoint


def earnings_spec(viewport_width=1280):
    points = [
        EarningsPoint(year="2023", fiscal_date_ending="2023-09-30", reported_eps=6.0),
        EarningsPoint(year="2024", fiscal_date_ending="2024-09-30", reported_eps=6.6),
    ]
    return earnings_chart("AAPL", points, viewport_width=viewport_width)


def cash_flow_spec():
    points = [
        CashFlowPoint("2023", 45.0, 9.0, 36.0, 30.0, 14.0),
        CashFlowPoint("2024", 50.0, 10.0, 40.0, 40.0, 15.0),
    ]
    return cash_flow_chart("AAPL", points)


def test_hover_text_joins_tooltip_lines():
    assert hover_text(earnings_spec()) == [
        "2023<br>Annual EPS: $6.00",
        "2024<br>Annual EPS: $6.60<br>YoY Growth: +10.0%",
    ]


def test_bar_figure():
    fig = to_plotly_figure(earnings_spec())

    assert len(fig.data) == 1
    bar = fig.data[0]
    assert bar.type == "bar"
    assert list(bar.x) == ["2023", "2024"]
    assert list(bar.marker.color) == ["#3b82f6", "#22c55e"]
    assert bar.width == 0.5
    assert bar.hoverinfo == "text"
    assert fig.layout.xaxis.type == "category"
    assert fig.layout.yaxis.title.text == "EPS ($)"
    assert fig.layout.title.text == "AAPL Earnings History<br><sup>Annual EPS Performance</sup>"
    assert fig.layout.title.font.size == 20
    assert fig.layout.showlegend is False
    assert fig.layout.margin.l == 64
    assert fig.layout.height == 420


def test_mobile_layout():
    fig = to_plotly_figure(earnings_spec(viewport_width=375), height=300)

    assert fig.data[0].width == 0.6
    assert fig.layout.margin.l == 30
    assert fig.layout.xaxis.tickfont.size == 10
    assert fig.layout.hoverlabel.font.size == 11
    assert fig.layout.height == 300


def test_line_figure_hover_only_on_first_series():
    fig = to_plotly_figure(cash_flow_spec())

    assert [trace.type for trace in fig.data] == ["scatter"] * 3
    assert fig.data[0].fill == "tozeroy"
    assert fig.data[0].hoverinfo == "text"
    assert fig.data[1].hoverinfo == "skip"
    assert fig.data[2].line.dash == "dash"
    assert fig.data[1].line.dash == "solid"
    assert fig.data[0].mode == "lines+markers"
    assert fig.layout.showlegend is True
