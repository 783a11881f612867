"""
test_arima_model.py
-------------------
Tests for the auto-ARIMA oracle and the ForecastResult contract.
"""
import numpy as np
import pytest

from conftest import make_series
from storecast.core.errors import EmptyForecast, OracleError
from storecast.core.forecast import ForecastResult, check_result
from storecast.models.arima_model import AutoARIMAForecaster


def trending_series(n=40, seed=0):
    rng = np.random.default_rng(seed)
    return make_series(1000 + 5 * np.arange(n) + rng.normal(0, 10, n))


class TestAutoARIMAForecaster:
    def test_forecast_lengths_and_bands(self):
        oracle = AutoARIMAForecaster(seasonal_period=52, max_order=2)
        result = oracle.fit_and_forecast(trending_series(), 6, {80, 95})
        assert len(result.point) == 6
        assert result.levels == [80, 95]
        lo80, hi80 = result.band(80)
        lo95, hi95 = result.band(95)
        assert np.all(lo95 <= lo80 + 1e-9) and np.all(hi80 <= hi95 + 1e-9)
        assert np.all(result.point >= 0)

    def test_no_levels_means_no_band(self):
        result = AutoARIMAForecaster(max_order=1).fit_and_forecast(trending_series(), 3, [])
        assert result.lower is None and result.upper is None

    def test_fit_failure_is_oracle_error(self):
        series = make_series([1.0, np.nan, 3.0, np.nan, 5.0])
        with pytest.raises(OracleError):
            AutoARIMAForecaster(max_order=1).fit_and_forecast(series, 2, [95])


class TestForecastResult:
    def test_lower_upper_use_widest_band(self):
        point = np.array([10.0, 10.0])
        result = ForecastResult(point=point, intervals={80: (point - 1, point + 1), 95: (point - 3, point + 3)})
        assert list(result.lower) == [7.0, 7.0]
        assert list(result.upper) == [13.0, 13.0]

    def test_missing_band_raises(self):
        with pytest.raises(KeyError):
            ForecastResult(point=np.ones(2)).band(90)

    def test_to_frame(self):
        point = np.array([1.0, 2.0])
        frame = ForecastResult(point=point, intervals={90: (point - 1, point + 1)}).to_frame([5, 6])
        assert list(frame.columns) == ["week", "forecast", "lower_90", "upper_90"]
        assert list(frame["week"]) == [5, 6]

    def test_check_result_rejects_wrong_length(self):
        with pytest.raises(OracleError):
            check_result(ForecastResult(point=np.ones(3)), horizon_length=4)

    def test_check_result_rejects_ragged_band(self):
        point = np.ones(3)
        with pytest.raises(OracleError):
            check_result(ForecastResult(point=point, intervals={95: (point[:2], point)}), horizon_length=3)

    def test_check_result_empty_forecast(self):
        with pytest.raises(EmptyForecast):
            check_result(ForecastResult(point=np.array([])), horizon_length=13)

    def test_check_result_rejects_missing_band(self):
        point = np.ones(3)
        result = ForecastResult(point=point, intervals={80: (point, point)})
        assert check_result(result, horizon_length=3, levels=[80]) is result
        with pytest.raises(OracleError, match=r"\[95\]"):
            check_result(result, horizon_length=3, levels=[80, 95])
