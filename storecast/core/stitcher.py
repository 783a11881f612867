"""stitcher.py — Past-vs-forecast comparison series."""
from __future__ import annotations
from typing import Sequence

import numpy as np
import pandas as pd

from storecast.core.errors import EmptyForecast
from storecast.core.forecast import ForecastResult

PAST = "Past"
FORECAST = "Forecast"


def stitch(
    series: pd.Series,
    forecast_result: ForecastResult,
    output_weeks: Sequence[int],
    past_window_weeks: int,
) -> pd.DataFrame:
    """
    Concatenate the last `past_window_weeks` of history with the forecast.

    A history shorter than the window is used whole. Returns a frame with
    columns week, value, label (Past rows first, weeks ascending).
    """
    if len(forecast_result.point) == 0:
        raise EmptyForecast("Forecast has no points to compare against")
    if past_window_weeks <= 0:
        raise ValueError(f"past_window_weeks must be positive, got {past_window_weeks}")
    if len(output_weeks) != len(forecast_result.point):
        raise ValueError(
            f"{len(output_weeks)} output weeks for {len(forecast_result.point)} forecast points"
        )

    tail = series.sort_index().tail(past_window_weeks)
    past = pd.DataFrame({"week": tail.index.astype(int), "value": tail.values.astype(float), "label": PAST})
    future = pd.DataFrame({
        "week": np.asarray(output_weeks, dtype=int),
        "value": np.asarray(forecast_result.point, dtype=float),
        "label": FORECAST,
    })

    if not past.empty and future["week"].min() <= past["week"].max():
        raise ValueError(
            f"Forecast starts at week {future['week'].min()} but history runs to week {past['week'].max()}"
        )
    if not future["week"].is_monotonic_increasing:
        raise ValueError("output_weeks must be ascending")

    return pd.concat([past, future], ignore_index=True)
