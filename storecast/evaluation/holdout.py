"""
holdout.py
----------
Holdout accuracy for the forecasting oracle.

The last `holdout_weeks` of a store's history are hidden, the model is fit
on the rest, and its forecast is scored against what actually happened:

    Train:   [=================]
    Score:                      [--- holdout ---]
"""

from __future__ import annotations
import logging

import numpy as np
import pandas as pd

from storecast.core.errors import InsufficientData, InvalidHorizon
from storecast.core.forecast import ForecastOracle, check_result
from storecast.core.planner import MIN_TRAINING_POINTS, plan_full_history
from storecast.evaluation.metrics import compute_all_metrics, empirical_coverage

logger = logging.getLogger(__name__)


def holdout_accuracy(
    series: pd.Series,
    oracle: ForecastOracle,
    holdout_weeks: int,
    confidence_level: int,
) -> dict[str, float]:
    """
    Score a forecast of the last `holdout_weeks` weeks against the actuals.

    Returns:
        dict with mae, rmse, mape, smape, coverage (share of actuals inside
        the `confidence_level` band) and holdout_weeks
    """
    if holdout_weeks < 1:
        raise InvalidHorizon(f"holdout_weeks must be positive, got {holdout_weeks}")
    train, actual = series.iloc[:-holdout_weeks], series.iloc[-holdout_weeks:]
    if len(train) < MIN_TRAINING_POINTS or len(actual) < holdout_weeks:
        raise InsufficientData(
            f"{len(series)} weeks of history is too short for a {holdout_weeks}-week holdout"
        )

    plan = plan_full_history(train, holdout_weeks)
    result = oracle.fit_and_forecast(plan.training_series, plan.horizon_length, [confidence_level])
    check_result(result, plan.horizon_length, [confidence_level])

    y_true = actual.values.astype(float)
    metrics = compute_all_metrics(y_true, np.asarray(result.point, dtype=float))
    lower, upper = result.band(confidence_level)
    metrics["coverage"] = empirical_coverage(y_true, lower, upper)
    metrics["holdout_weeks"] = holdout_weeks

    logger.info(
        f"Holdout ({holdout_weeks}w): MAE={metrics['mae']:.1f} | "
        f"MAPE={metrics['mape']:.1f}% | coverage={metrics['coverage']:.0%}"
    )
    return metrics
