"""
metrics.py
----------
Accuracy of a weekly sales forecast against the weeks that actually happened.

All functions take aligned arrays of weekly_sales (one entry per week) and
return a plain float, so the dashboard KPI cards and summary.csv can show
them directly. Error metrics are in sales dollars or percent.
"""

from __future__ import annotations
import numpy as np


def mae(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Average dollars per week the forecast is off by."""
    return float(np.mean(np.abs(y_true - y_pred)))


def rmse(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    # same unit as mae; a single missed holiday week pushes it up much more
    return float(np.sqrt(np.mean((y_true - y_pred) ** 2)))


def mape(y_true: np.ndarray, y_pred: np.ndarray, epsilon: float = 1.0) -> float:
    """
    Percentage error averaged over weeks.

    A week with sales below `epsilon` dollars (a closed store, a clipped
    negative) is divided by `epsilon` instead of its own value.
    """
    denom = np.maximum(np.abs(y_true), epsilon)
    return float(100.0 * np.mean(np.abs(y_true - y_pred) / denom))


def smape(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Percentage error against the mean of actual and forecast, in [0, 200]."""
    denom = (np.abs(y_true) + np.abs(y_pred)) / 2 + 1e-8
    return float(100.0 * np.mean(np.abs(y_true - y_pred) / denom))


def empirical_coverage(y_true: np.ndarray, lower: np.ndarray, upper: np.ndarray) -> float:
    """Share of held-out weeks whose sales landed inside the confidence band."""
    return float(((y_true >= lower) & (y_true <= upper)).mean())


def compute_all_metrics(y_true: np.ndarray, y_pred: np.ndarray) -> dict[str, float]:
    """mae/rmse/mape/smape for one store's holdout weeks, keyed by name."""
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)
    return {
        "mae": mae(y_true, y_pred),
        "rmse": rmse(y_true, y_pred),
        "mape": mape(y_true, y_pred),
        "smape": smape(y_true, y_pred),
    }
