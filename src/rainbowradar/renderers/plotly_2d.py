"""Plotly 2D interactive rainbow likelihood map.

Cells are plotted in plain longitude/latitude; no tile server is involved.
Supports wheel zoom and drag panning.
"""

import math

import plotly.graph_objects as go

from rainbowradar.models import EvaluationResult, GeoPoint
from rainbowradar.renderers.static import HEAT_COLORS
from rainbowradar.sun import antisolar_azimuth

_BG = "#1b1b1b"
_OBSERVER_COLOR = "#ffffff"

_COLORSCALE = [
    [i / (len(HEAT_COLORS) - 1), color] for i, color in enumerate(HEAT_COLORS)
]


def render_plotly_chart(
    center: GeoPoint, result: EvaluationResult, legend_title: str = "Rainbow likelihood"
) -> go.Figure:
    """Render an EvaluationResult as an interactive heat scatter.

    Args:
        center: Observer location (drawn as a white dot).
        result: Evaluated grid.
        legend_title: Colorbar title.

    Returns:
        Plotly Figure object.
    """
    cell_trace = go.Scatter(
        x=[c.point.lng for c in result.cells],
        y=[c.point.lat for c in result.cells],
        mode="markers",
        marker=dict(
            size=14,
            symbol="square",
            color=[c.score for c in result.cells],
            colorscale=_COLORSCALE,
            cmin=0.0,
            cmax=1.0,
            opacity=0.8,
            colorbar=dict(title=legend_title),
            line=dict(width=0),
        ),
        customdata=[[c.bearing_deg, c.score] for c in result.cells],
        hovertemplate="bearing %{customdata[0]:.0f}°<br>score %{customdata[1]:.2f}<extra></extra>",
        name="cells",
    )

    # Antisolar direction: a line from the observer across the grid
    theta = math.radians(antisolar_azimuth(result.sun))
    lats = [c.point.lat for c in result.cells] or [center.lat]
    reach = max(max(lats) - min(lats), 0.05) / 2
    direction_trace = go.Scatter(
        x=[
            center.lng,
            center.lng + reach * math.sin(theta) / math.cos(math.radians(center.lat)),
        ],
        y=[center.lat, center.lat + reach * math.cos(theta)],
        mode="lines",
        line=dict(color=_OBSERVER_COLOR, width=1, dash="dot"),
        hoverinfo="skip",
        name="antisolar",
    )

    observer_trace = go.Scatter(
        x=[center.lng],
        y=[center.lat],
        mode="markers",
        marker=dict(size=10, color=_OBSERVER_COLOR),
        hoverinfo="skip",
        name="observer",
    )

    fig = go.Figure(data=[cell_trace, direction_trace, observer_trace])
    fig.update_layout(
        paper_bgcolor=_BG,
        plot_bgcolor=_BG,
        showlegend=False,
        margin=dict(l=0, r=0, t=0, b=0),
        height=600,
        dragmode="pan",
        font=dict(color="#dddddd"),
        xaxis=dict(visible=False),
        # Keep ground distances roughly square at the observer's latitude
        yaxis=dict(
            visible=False,
            scaleanchor="x",
            scaleratio=1 / math.cos(math.radians(center.lat)),
        ),
    )

    fig._config = {"scrollZoom": True, "displayModeBar": False}  # type: ignore[attr-defined]

    return fig
