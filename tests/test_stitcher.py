"""
test_stitcher.py
----------------
Unit tests for past-vs-forecast stitching.
"""
import numpy as np
import pytest

from conftest import make_series
from storecast.core.errors import EmptyForecast
from storecast.core.forecast import ForecastResult
from storecast.core.planner import plan_full_history
from storecast.core.stitcher import FORECAST, PAST, stitch


def flat_forecast(n: int, value: float = 500.0) -> ForecastResult:
    return ForecastResult(point=np.full(n, value))


class TestStitch:
    def test_sorted_and_segments_do_not_interleave(self, ten_weeks):
        plan = plan_full_history(ten_weeks, 5)
        out = stitch(ten_weeks, flat_forecast(5), plan.output_weeks, past_window_weeks=4)
        assert out["week"].is_monotonic_increasing
        past = out[out["label"] == PAST]
        future = out[out["label"] == FORECAST]
        assert past["week"].max() < future["week"].min()
        assert list(out["label"]) == [PAST] * 4 + [FORECAST] * 5

    def test_past_segment_is_tail(self, ten_weeks):
        out = stitch(ten_weeks, flat_forecast(2), (11, 12), past_window_weeks=3)
        past = out[out["label"] == PAST]
        assert list(past["week"]) == [8, 9, 10]
        assert list(past["value"]) == [170.0, 180.0, 190.0]

    def test_forecast_segment_zips_weeks_and_points(self, ten_weeks):
        result = ForecastResult(point=np.array([1.0, 2.0, 3.0]))
        out = stitch(ten_weeks, result, (11, 12, 13), past_window_weeks=1)
        future = out[out["label"] == FORECAST]
        assert list(zip(future["week"], future["value"])) == [(11, 1.0), (12, 2.0), (13, 3.0)]

    def test_window_larger_than_history_takes_all(self, ten_weeks):
        out = stitch(ten_weeks, flat_forecast(3), (11, 12, 13), past_window_weeks=500)
        assert (out["label"] == PAST).sum() == 10

    @pytest.mark.parametrize("window", [1, 6, 10, 25])
    def test_point_count(self, ten_weeks, window):
        weeks = (11, 12, 13, 14)
        out = stitch(ten_weeks, flat_forecast(4), weeks, past_window_weeks=window)
        assert len(out) == len(ten_weeks.tail(window)) + len(weeks)

    def test_gap_between_segments_is_allowed(self, ten_weeks):
        out = stitch(ten_weeks, flat_forecast(2), (20, 21), past_window_weeks=2)
        assert list(out["week"]) == [9, 10, 20, 21]

    def test_empty_forecast_raises(self, ten_weeks):
        with pytest.raises(EmptyForecast):
            stitch(ten_weeks, ForecastResult(point=np.array([])), (), past_window_weeks=4)

    def test_overlapping_weeks_rejected(self, ten_weeks):
        with pytest.raises(ValueError):
            stitch(ten_weeks, flat_forecast(2), (10, 11), past_window_weeks=4)

    def test_length_mismatch_rejected(self, ten_weeks):
        with pytest.raises(ValueError):
            stitch(ten_weeks, flat_forecast(3), (11, 12), past_window_weeks=4)

    def test_non_positive_window_rejected(self, ten_weeks):
        with pytest.raises(ValueError):
            stitch(ten_weeks, flat_forecast(1), (11,), past_window_weeks=0)

    def test_unsorted_history_is_ordered(self):
        series = make_series([1, 2, 3, 4]).sort_index(ascending=False)
        out = stitch(series, flat_forecast(1), (5,), past_window_weeks=2)
        assert list(out["week"]) == [3, 4, 5]
