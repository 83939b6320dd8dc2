# tickerlens/features/charts/plotly_renderer.py

import plotly.graph_objects as go

from tickerlens.features.charts.chart_adapter import BAR, ChartSpec, SeriesSpec

DEFAULT_HEIGHT = 420


def hover_text(spec: ChartSpec) -> list:
    return ["<br>".join(spec.tooltip_for(index)) for index in range(len(spec.categories))]


def _trace(spec: ChartSpec, series: SeriesSpec, hover: list = None):
    hover_kwargs = dict(hovertext=hover, hoverinfo="text") if hover else dict(hoverinfo="skip")

    if series.kind == BAR:
        return go.Bar(
            x=spec.categories,
            y=series.values,
            name=series.name,
            marker=dict(color=series.colors or series.color),
            width=spec.profile.bar_width,
            **hover_kwargs,
        )

    return go.Scatter(
        x=spec.categories,
        y=series.values,
        mode="lines+markers",
        name=series.name,
        line=dict(
            color=series.color,
            width=series.line_width,
            dash="dash" if series.dashed else "solid",
        ),
        fill="tozeroy" if series.area_fill else "none",
        **hover_kwargs,
    )


def to_plotly_figure(spec: ChartSpec, height: int = DEFAULT_HEIGHT) -> go.Figure:
    """
    Render a chart spec as a Plotly figure.

    The per-category tooltip is attached to the first series only so that a
    hover shows one block of lines per year.

    Args:
        spec (ChartSpec): Declarative chart description.
        height (int): Figure height in pixels.

    Returns:
        go.Figure: Figure ready for st.plotly_chart.
    """
    fig = go.Figure()
    hover = hover_text(spec)
    for position, series in enumerate(spec.series):
        fig.add_trace(_trace(spec, series, hover if position == 0 else None))

    profile = spec.profile
    side_margin = round(profile.viewport_width * profile.grid_side_percent / 100)
    fig.update_layout(
        title=dict(
            text=f"{spec.title}<br><sup>{spec.subtitle}</sup>",
            font=dict(size=spec.title_font_size),
        ),
        xaxis=dict(type="category", tickfont=dict(size=profile.axis_font_size)),
        yaxis=dict(title=spec.y_axis_title, tickfont=dict(size=profile.axis_font_size)),
        hoverlabel=dict(font=dict(size=profile.tooltip_font_size)),
        showlegend=len(spec.series) > 1,
        template="plotly_white",
        height=height,
        margin=dict(l=side_margin, r=side_margin, t=80, b=40),
    )
    return fig
