"""
charts.py
---------
Plotly figures for the dashboard. Every builder takes already-derived data
(series, ForecastResult, comparison frame) and only draws it.
"""

from __future__ import annotations
from typing import Sequence

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from storecast.core.forecast import ForecastResult
from storecast.core.stitcher import FORECAST, PAST

COLORS = {
    "Historical": "#607d8b",
    "Forecast":   "#4fc3f7",
    "Past":       "#90a4ae",
    "Band":       "rgba(79,195,247,0.15)",
}


def plot_base(height=420, y_title="Weekly Sales ($)"):
    return dict(
        template="plotly_dark", paper_bgcolor="#0e1117", plot_bgcolor="#0e1117",
        height=height, margin=dict(l=20, r=20, t=35, b=20),
        legend=dict(orientation="h", yanchor="bottom", y=1.02),
        xaxis=dict(showgrid=True, gridcolor="#1e2130", title="Week"),
        yaxis=dict(showgrid=True, gridcolor="#1e2130", title=y_title),
    )


def placeholder_figure(message: str, height=320) -> go.Figure:
    fig = go.Figure()
    fig.update_layout(
        template="plotly_dark", paper_bgcolor="#0e1117", plot_bgcolor="#0e1117", height=height,
        xaxis=dict(visible=False), yaxis=dict(visible=False),
        annotations=[dict(text=message, showarrow=False, font=dict(size=16, color="#78909c"))],
    )
    return fig


def history_figure(series: pd.Series, title: str = "") -> go.Figure:
    fig = go.Figure()
    fig.add_trace(go.Scatter(x=series.index, y=series.values, mode="lines", name="Weekly sales",
                             line=dict(color=COLORS["Historical"], width=2)))
    fig.update_layout(**plot_base(380), title=title)
    return fig


def forecast_figure(
    history: pd.Series,
    result: ForecastResult,
    output_weeks: Sequence[int],
    level: int | None = None,
    title: str = "",
) -> go.Figure:
    """History line, dashed forecast line and a shaded confidence band (ribbon)."""
    weeks = list(output_weeks)
    fig = go.Figure()
    fig.add_trace(go.Scatter(x=history.index, y=history.values, mode="lines", name="Historical",
                             line=dict(color=COLORS["Historical"], width=2)))
    if level is not None and level in result.intervals:
        lower, upper = result.band(level)
        fig.add_trace(go.Scatter(x=weeks + weeks[::-1], y=list(upper) + list(lower)[::-1],
                                 fill="toself", fillcolor=COLORS["Band"],
                                 line=dict(color="rgba(0,0,0,0)"),
                                 name=f"{level}% interval", hoverinfo="skip"))
    fig.add_trace(go.Scatter(x=weeks, y=result.point, mode="lines+markers", name="Forecast",
                             line=dict(color=COLORS["Forecast"], width=2.5, dash="dash"),
                             marker=dict(size=5)))
    if len(history):
        fig.add_vline(x=int(history.index.max()), line_dash="dot", line_color="#546e7a",
                      annotation_text="  forecast start", annotation_position="top right",
                      annotation_font_color="#78909c")
    fig.update_layout(**plot_base(460), title=title)
    return fig


def comparison_figure(comparison: pd.DataFrame, title: str = "") -> go.Figure:
    """Bars for past and forecast weeks, colored by label."""
    fig = go.Figure()
    for label in (PAST, FORECAST):
        part = comparison[comparison["label"] == label]
        fig.add_trace(go.Bar(x=part["week"], y=part["value"], name=label,
                             marker_color=COLORS[label]))
    fig.update_layout(**plot_base(400), title=title, bargap=0.15)
    return fig


def distribution_figure(series: pd.Series) -> go.Figure:
    fig = px.histogram(x=series.values, nbins=30, color_discrete_sequence=[COLORS["Forecast"]],
                       template="plotly_dark")
    fig.update_layout(paper_bgcolor="#0e1117", plot_bgcolor="#0e1117",
                      height=300, margin=dict(l=10, r=10, t=10, b=10),
                      xaxis_title="Weekly Sales ($)", yaxis_title="Weeks")
    return fig


def summary_table(series: pd.Series) -> pd.DataFrame:
    values = series.values.astype(float)
    return pd.DataFrame({
        "Statistic": ["Weeks", "Mean", "Median", "Min", "Max", "Std"],
        "Value": [len(values), np.mean(values), np.median(values),
                  np.min(values), np.max(values), np.std(values, ddof=1) if len(values) > 1 else 0.0],
    })
