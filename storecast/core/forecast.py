"""forecast.py — Oracle output container and the oracle call contract."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, Protocol

import numpy as np
import pandas as pd

from storecast.core.errors import EmptyForecast, OracleError


@dataclass(frozen=True)
class ForecastResult:
    """Point forecast plus one (lower, upper) band per requested confidence level."""
    point: np.ndarray
    intervals: dict[int, tuple[np.ndarray, np.ndarray]] = field(default_factory=dict)

    @property
    def levels(self) -> list[int]:
        return sorted(self.intervals)

    @property
    def lower(self) -> np.ndarray | None:
        return self.intervals[self.levels[-1]][0] if self.intervals else None

    @property
    def upper(self) -> np.ndarray | None:
        return self.intervals[self.levels[-1]][1] if self.intervals else None

    def band(self, level: int) -> tuple[np.ndarray, np.ndarray]:
        if level not in self.intervals:
            raise KeyError(f"No {level}% band in forecast (have {self.levels})")
        return self.intervals[level]

    def to_frame(self, output_weeks: Iterable[int]) -> pd.DataFrame:
        """Tabulate the forecast: week, forecast, and lower_/upper_ columns per level."""
        df = pd.DataFrame({"week": list(output_weeks), "forecast": self.point})
        for level in self.levels:
            lo, hi = self.intervals[level]
            df[f"lower_{level}"] = lo
            df[f"upper_{level}"] = hi
        return df


class ForecastOracle(Protocol):
    def fit_and_forecast(
        self,
        series: pd.Series,
        horizon_length: int,
        confidence_levels: Iterable[int],
    ) -> ForecastResult: ...


def check_result(
    result: ForecastResult,
    horizon_length: int,
    levels: Iterable[int] = (),
) -> ForecastResult:
    """
    Reject oracle output that does not fit the plan it was asked for.

    An empty point forecast is an EmptyForecast; a wrong length, a missing
    requested band or a band of the wrong length is an OracleError.
    """
    n = len(result.point)
    if n == 0:
        raise EmptyForecast(f"Oracle returned no points for a {horizon_length}-week horizon")
    if n != horizon_length:
        raise OracleError(f"Oracle returned {n} points for a {horizon_length}-week horizon")
    for level, (lo, hi) in result.intervals.items():
        if len(lo) != n or len(hi) != n:
            raise OracleError(f"{level}% band length does not match point forecast")
    missing = sorted({int(c) for c in levels} - set(result.intervals))
    if missing:
        raise OracleError(f"Oracle left out requested bands: {missing}")
    return result
