"""arima_model.py — Auto-fitted seasonal ARIMA forecasting oracle."""
from __future__ import annotations
import logging, warnings
from typing import Iterable
import numpy as np, pandas as pd
from pmdarima import auto_arima
from statsmodels.tsa.statespace.sarimax import SARIMAX

from storecast.core.errors import OracleError
from storecast.core.forecast import ForecastResult, check_result

warnings.filterwarnings("ignore")
logger = logging.getLogger(__name__)


class AutoARIMAForecaster:
    """
    Picks (p,d,q)(P,D,Q,m) with a stepwise auto-ARIMA search, refits that
    order as a SARIMAX model and forecasts with one band per confidence level.

    Seasonality (period `seasonal_period`) is only searched when the series
    spans at least two full seasons; shorter series get a non-seasonal fit.
    """

    def __init__(self, seasonal_period=52, max_order=3):
        self.seasonal_period = seasonal_period; self.max_order = max_order

    def select_order(self, y: np.ndarray):
        seasonal = self.seasonal_period > 1 and len(y) >= 2 * self.seasonal_period
        search = auto_arima(
            y, seasonal=seasonal, m=self.seasonal_period if seasonal else 1,
            max_p=self.max_order, max_q=self.max_order, max_P=1, max_Q=1,
            stepwise=True, error_action="ignore", suppress_warnings=True, trace=False,
        )
        return search.order, search.seasonal_order

    def fit_and_forecast(
        self,
        series: pd.Series,
        horizon_length: int,
        confidence_levels: Iterable[int] = (),
    ) -> ForecastResult:
        y = np.asarray(series, dtype=float)
        levels = sorted({int(c) for c in confidence_levels})
        try:
            order, seasonal_order = self.select_order(y)
            fit = SARIMAX(y, order=order, seasonal_order=seasonal_order,
                          enforce_stationarity=False, enforce_invertibility=False).fit(disp=False)
            fc = fit.get_forecast(steps=horizon_length)
            point = np.maximum(0, np.asarray(fc.predicted_mean, dtype=float))
            intervals = {}
            for level in levels:
                ci = np.asarray(fc.conf_int(alpha=1 - level / 100), dtype=float)
                intervals[level] = (np.maximum(0, ci[:, 0]), ci[:, 1])
        except Exception as e:
            raise OracleError(f"ARIMA fit failed on {len(y)} points: {e}") from e

        logger.info(f"ARIMA{order}{seasonal_order} → {horizon_length} weeks, bands {levels}")
        return check_result(ForecastResult(point=point, intervals=intervals), horizon_length, levels)
