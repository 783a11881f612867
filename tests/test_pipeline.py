"""
test_pipeline.py
----------------
Tests for the batch forecast report.
"""
import pandas as pd

from conftest import FakeOracle, make_records
import storecast.pipeline as pipeline
from storecast.core.planner import TrainingWindow
from storecast.core.selection import ForecastMode, Selection


def write_sales_csv(path, n_weeks=30):
    records = make_records({"1": (1, 100.0), "2": (1, 900.0)}, n_weeks=n_weeks)
    records.rename(columns={"store_id": "Store", "week": "Week", "weekly_sales": "Weekly_Sales"}) \
        .to_csv(path, index=False)


def make_config(tmp_path, training="history"):
    write_sales_csv(tmp_path / "sales.csv")
    return {
        "data": {"source": str(tmp_path / "sales.csv")},
        "forecast": {"seasonal_period": 52, "max_order": 1, "quarterly_training": training,
                     "default_confidence": 90},
        "evaluation": {"holdout_weeks": 4, "output_dir": str(tmp_path / "out")},
    }


class TestForecastStore:
    def test_table_and_summary_row(self, fake_oracle):
        records = make_records({"1": (1, 100.0)}, n_weeks=30)
        sel = Selection(store_id="1", mode=ForecastMode.WEEKLY, target_week=35, confidence_level=80)
        table, row = pipeline.forecast_store(records, sel, fake_oracle, TrainingWindow.HISTORY, holdout_weeks=4)
        assert list(table["week"]) == [31, 32, 33, 34, 35]
        assert list(table.columns) == ["store_id", "week", "forecast", "lower_80", "upper_80"]
        assert row["current_week"] == 30 and row["horizon"] == 5
        assert "mae" in row


class TestRunReport:
    def test_writes_outputs(self, tmp_path, monkeypatch):
        monkeypatch.setattr(pipeline, "AutoARIMAForecaster", lambda **kw: FakeOracle())
        summary = pipeline.run_report(make_config(tmp_path), quarters=2)
        out = tmp_path / "out"
        assert (out / "forecast_1.csv").exists() and (out / "forecast_2.csv").exists()
        assert len(pd.read_csv(out / "forecast_1.csv")) == 26
        assert list(summary["store_id"]) == ["1", "2"]

    def test_failed_store_is_recorded_and_skipped(self, tmp_path, monkeypatch):
        monkeypatch.setattr(pipeline, "AutoARIMAForecaster", lambda **kw: FakeOracle())
        summary = pipeline.run_report(make_config(tmp_path, training="target_window"), stores=["1", "404"])
        errors = dict(zip(summary["store_id"].astype(str), summary["error"]))
        assert errors["1"].startswith("InsufficientData")
        assert errors["404"].startswith("EmptySelection")
        assert not (tmp_path / "out" / "forecast_1.csv").exists()
