import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from storecast.core.forecast import ForecastResult


class FakeOracle:
    """Deterministic stand-in for ARIMA: flat forecast at the last value, ±level bands."""

    def __init__(self):
        self.calls = []

    def fit_and_forecast(self, series, horizon_length, confidence_levels=()):
        self.calls.append((series.copy(), horizon_length, sorted(confidence_levels)))
        point = np.full(horizon_length, float(series.iloc[-1]))
        intervals = {lvl: (point - lvl, point + lvl) for lvl in confidence_levels}
        return ForecastResult(point=point, intervals=intervals)


def make_records(stores: dict[str, tuple[int, float]], n_weeks: int = 40) -> pd.DataFrame:
    """Normalized sales table; each store maps to (first week, base sales)."""
    rows = []
    for store_id, (first_week, base) in stores.items():
        for week in range(first_week, first_week + n_weeks):
            rows.append({"store_id": store_id, "week": week, "weekly_sales": base + week})
    return pd.DataFrame(rows)


def make_series(values, first_week: int = 1) -> pd.Series:
    weeks = pd.Index(range(first_week, first_week + len(values)), name="week")
    return pd.Series(np.asarray(values, dtype=float), index=weeks, name="weekly_sales")


@pytest.fixture
def fake_oracle():
    return FakeOracle()


@pytest.fixture
def ten_weeks():
    """Weeks 1..10 with sales 100, 110, ..., 190."""
    return make_series([100 + 10 * i for i in range(10)])
