"""
test_metrics.py
---------------
Unit tests for the metrics and holdout accuracy modules.
"""
import numpy as np
import pytest

from conftest import FakeOracle, make_series
from storecast.core.errors import EmptyForecast, InsufficientData, InvalidHorizon, OracleError
from storecast.core.forecast import ForecastResult
from storecast.evaluation.holdout import holdout_accuracy
from storecast.evaluation.metrics import compute_all_metrics, empirical_coverage, mae, mape, rmse, smape


# ── Metric Tests ──────────────────────────────────────────────────────────────

class TestMetrics:
    # four holdout weeks of one store, in dollars
    actual = np.array([24_000.0, 26_000.0, 31_000.0, 25_000.0])

    def test_exact_forecast_scores_zero(self):
        scores = compute_all_metrics(self.actual, self.actual)
        assert scores == pytest.approx({"mae": 0.0, "rmse": 0.0, "mape": 0.0, "smape": 0.0})

    def test_mae_and_rmse_in_dollars(self):
        forecast = np.full(4, 26_000.0)  # off by 2000, 0, 5000, 1000
        assert mae(self.actual, forecast) == pytest.approx(2_000.0)
        assert rmse(self.actual, forecast) == pytest.approx(np.sqrt(7_500_000.0))
        assert rmse(self.actual, forecast) > mae(self.actual, forecast)

    def test_mape_percent_of_weekly_sales(self):
        forecast = self.actual * 1.1
        assert mape(self.actual, forecast) == pytest.approx(10.0)

    def test_mape_closed_store_week(self):
        actual = np.array([0.0, 20_000.0])
        forecast = np.array([500.0, 20_000.0])
        # the zero-sales week is divided by epsilon=1 dollar, not by zero
        assert mape(actual, forecast) == pytest.approx(100.0 * 500.0 / 2)

    def test_smape_bounded_and_symmetric(self):
        forecast = np.array([0.0, 0.0, 31_000.0, 25_000.0])
        assert smape(self.actual, forecast) == pytest.approx(100.0)
        assert smape(self.actual, forecast) == pytest.approx(smape(forecast, self.actual))

    def test_compute_all_metrics_accepts_lists(self):
        scores = compute_all_metrics(list(self.actual), [25_000.0] * 4)
        assert set(scores) == {"mae", "rmse", "mape", "smape"}
        assert all(isinstance(v, float) for v in scores.values())

    def test_coverage_counts_weeks_inside_band(self):
        lower, upper = np.full(4, 23_000.0), np.full(4, 27_000.0)
        # the 31k holiday week falls outside
        assert empirical_coverage(self.actual, lower, upper) == pytest.approx(0.75)


# ── Holdout Tests ─────────────────────────────────────────────────────────────

class TestHoldout:
    def test_scores_last_weeks(self, fake_oracle):
        series = make_series([100.0] * 20 + [110.0] * 4)
        result = holdout_accuracy(series, fake_oracle, holdout_weeks=4, confidence_level=95)
        trained_on, horizon, levels = fake_oracle.calls[0]
        assert len(trained_on) == 20 and horizon == 4 and levels == [95]
        assert result["mae"] == pytest.approx(10.0)
        assert result["coverage"] == pytest.approx(1.0)
        assert result["holdout_weeks"] == 4

    def test_too_short(self, fake_oracle):
        with pytest.raises(InsufficientData):
            holdout_accuracy(make_series([1.0, 2.0, 3.0]), fake_oracle, holdout_weeks=2, confidence_level=90)
        assert fake_oracle.calls == []

    def test_non_positive_holdout(self, fake_oracle):
        with pytest.raises(InvalidHorizon):
            holdout_accuracy(make_series(range(20)), fake_oracle, holdout_weeks=0, confidence_level=90)

    def test_empty_oracle_output(self):
        class EmptyOracle(FakeOracle):
            def fit_and_forecast(self, series, horizon_length, confidence_levels=()):
                return ForecastResult(point=np.array([]))

        with pytest.raises(EmptyForecast):
            holdout_accuracy(make_series(range(20)), EmptyOracle(), holdout_weeks=4, confidence_level=95)

    def test_oracle_without_requested_band(self):
        class BandlessOracle(FakeOracle):
            def fit_and_forecast(self, series, horizon_length, confidence_levels=()):
                return super().fit_and_forecast(series, horizon_length, ())

        with pytest.raises(OracleError):
            holdout_accuracy(make_series(range(20)), BandlessOracle(), holdout_weeks=4, confidence_level=95)
