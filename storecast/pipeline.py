"""
pipeline.py
-----------
Batch forecast report: data → per-store plan → ARIMA forecast → holdout accuracy → CSVs.

Writes one forecast_<store>.csv per store plus summary.csv with holdout
metrics. A store whose forecast cannot be produced is logged and skipped;
its row in summary.csv carries the error.

Usage:
    python -m storecast.pipeline
    python -m storecast.pipeline --stores 1 2 3 --mode weekly --target-week 170
"""

from __future__ import annotations
import argparse
import logging
from pathlib import Path

import pandas as pd

from storecast.core.errors import StorecastError
from storecast.core.forecast import check_result
from storecast.core.planner import TrainingWindow, plan_for_selection
from storecast.core.selection import ForecastMode, Selection
from storecast.core.series import current_week_of, filter_series
from storecast.evaluation.holdout import holdout_accuracy
from storecast.models.arima_model import AutoARIMAForecaster
from storecast.utils.data_loader import PROJECT_ROOT, DataStore, load_config

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


def forecast_store(
    records: pd.DataFrame,
    selection: Selection,
    oracle,
    training: TrainingWindow,
    holdout_weeks: int,
) -> tuple[pd.DataFrame, dict]:
    """Forecast one store; returns (forecast table, summary row)."""
    series = filter_series(records, selection.store_id)
    current_week = current_week_of(series)
    plan = plan_for_selection(series, current_week, selection, training)
    result = oracle.fit_and_forecast(plan.training_series, plan.horizon_length, [selection.confidence_level])
    check_result(result, plan.horizon_length, [selection.confidence_level])

    table = result.to_frame(plan.output_weeks)
    table.insert(0, "store_id", selection.store_id)
    row = {
        "store_id": selection.store_id,
        "current_week": current_week,
        "training_weeks": len(plan.training_series),
        "horizon": plan.horizon_length,
        "forecast_total": float(result.point.sum()),
    }
    if holdout_weeks > 0:
        try:
            row.update(holdout_accuracy(series, oracle, holdout_weeks, selection.confidence_level))
        except StorecastError as e:
            logger.warning(f"Store {selection.store_id}: holdout skipped ({e})")
    return table, row


def run_report(
    config: dict,
    stores: list[str] | None = None,
    mode: ForecastMode = ForecastMode.QUARTERLY,
    quarters: int = 1,
    target_week: int | None = None,
    confidence: int | None = None,
) -> pd.DataFrame:
    fc = config["forecast"]
    out_dir = Path(config["evaluation"]["output_dir"])
    if not out_dir.is_absolute():
        out_dir = PROJECT_ROOT / out_dir
    out_dir.mkdir(parents=True, exist_ok=True)

    data = DataStore.from_config(config)
    records = data.records
    oracle = AutoARIMAForecaster(seasonal_period=fc["seasonal_period"], max_order=fc["max_order"])
    training = TrainingWindow(fc["quarterly_training"])
    holdout_weeks = config["evaluation"].get("holdout_weeks", 0)
    confidence = confidence or fc["default_confidence"]

    rows = []
    for store_id in stores or data.stores():
        logger.info(f"▶ Store {store_id}")
        try:
            selection = Selection(store_id=store_id, mode=mode, quarter_count=quarters,
                                  target_week=target_week, confidence_level=confidence)
            table, row = forecast_store(records, selection, oracle, training, holdout_weeks)
        except StorecastError as e:
            logger.error(f"Store {store_id}: {type(e).__name__}: {e}")
            rows.append({"store_id": store_id, "error": f"{type(e).__name__}: {e}"})
            continue
        table.to_csv(out_dir / f"forecast_{store_id}.csv", index=False)
        rows.append(row)

    summary = pd.DataFrame(rows)
    summary.to_csv(out_dir / "summary.csv", index=False)
    logger.info(f"✅ Outputs → {out_dir}/")
    return summary


def main():
    parser = argparse.ArgumentParser(description="Store sales forecast report")
    parser.add_argument("--config", default="configs/default.yaml")
    parser.add_argument("--stores", nargs="+", help="Subset of store ids (default: all)")
    parser.add_argument("--mode", choices=["quarterly", "weekly"], default="quarterly")
    parser.add_argument("--quarters", type=int, choices=range(1, 9), default=1)
    parser.add_argument("--target-week", type=int)
    parser.add_argument("--confidence", type=int, choices=[80, 85, 90, 95])
    args = parser.parse_args()

    summary = run_report(
        load_config(args.config),
        stores=args.stores,
        mode=ForecastMode(args.mode.capitalize()),
        quarters=args.quarters,
        target_week=args.target_week,
        confidence=args.confidence,
    )
    print(summary.to_string(index=False))


if __name__ == "__main__":
    main()
