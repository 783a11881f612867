"""
planner.py
----------
Forecast window planning: user-facing horizon → (training slice, horizon, week labels).

    Quarterly  (current_week=c, quarters=q, h=13q)
        train:  [c ........ c+h]        (target window, dashboard default)
        output:    c+1 .... c+h

    Weekly     (current_week=c, target_week=t, h=t-c)
        train:  [1 ........ t]
        output:    c+1 .... t

    Full history (h)
        train:  [1 ........ last]
        output:    last+1 .... last+h

The quarterly target-window slice trains on the weeks being forecast rather
than on history. It is kept as the default because that is what the
dashboard has always shown; pass TrainingWindow.HISTORY to train on
weeks <= current_week instead.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum

import pandas as pd

from storecast.core.errors import EmptySelection, InsufficientData, InvalidHorizon
from storecast.core.selection import MAX_QUARTERS, WEEKS_PER_QUARTER, ForecastMode, Selection

logger = logging.getLogger(__name__)

MIN_TRAINING_POINTS = 2


class TrainingWindow(str, Enum):
    TARGET_WINDOW = "target_window"
    HISTORY = "history"


@dataclass(frozen=True)
class ForecastPlan:
    """Everything the oracle needs for one forecast, plus the output week labels."""
    training_series: pd.Series
    horizon_length: int
    output_weeks: tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.output_weeks) != self.horizon_length:
            raise ValueError(
                f"output_weeks has {len(self.output_weeks)} entries, expected {self.horizon_length}"
            )


def _require_training(training: pd.Series, what: str) -> None:
    if len(training) < MIN_TRAINING_POINTS:
        raise InsufficientData(
            f"{what}: training window has {len(training)} point(s), "
            f"need at least {MIN_TRAINING_POINTS}"
        )


def _weeks_after(week: int, horizon_length: int) -> tuple[int, ...]:
    return tuple(range(week + 1, week + horizon_length + 1))


def plan_quarterly(
    series: pd.Series,
    current_week: int,
    quarter_count: int,
    training: TrainingWindow | str = TrainingWindow.TARGET_WINDOW,
) -> ForecastPlan:
    """Plan a forecast of `quarter_count` 13-week quarters after `current_week`."""
    if not 1 <= quarter_count <= MAX_QUARTERS:
        raise InvalidHorizon(f"quarter_count must be in [1, {MAX_QUARTERS}], got {quarter_count}")
    horizon_length = WEEKS_PER_QUARTER * quarter_count

    training = TrainingWindow(training)
    weeks = series.index
    if training is TrainingWindow.TARGET_WINDOW:
        mask = (weeks >= current_week) & (weeks <= current_week + horizon_length)
    else:
        mask = weeks <= current_week
    training_series = series[mask]
    _require_training(training_series, f"quarterly ({training.value})")

    return ForecastPlan(
        training_series=training_series,
        horizon_length=horizon_length,
        output_weeks=_weeks_after(current_week, horizon_length),
    )


def plan_weekly(series: pd.Series, current_week: int, target_week: int | None) -> ForecastPlan:
    """Plan a forecast running from the week after `current_week` up to `target_week`."""
    if target_week is None:
        raise InvalidHorizon("No target week selected")
    horizon_length = int(target_week) - int(current_week)
    if horizon_length < 1:
        raise InvalidHorizon(
            f"target_week ({target_week}) must be after current_week ({current_week})"
        )

    training_series = series[series.index <= target_week]
    _require_training(training_series, "weekly")

    return ForecastPlan(
        training_series=training_series,
        horizon_length=horizon_length,
        output_weeks=_weeks_after(current_week, horizon_length),
    )


def plan_full_history(series: pd.Series, horizon_length: int) -> ForecastPlan:
    """
    Plan a fixed-horizon forecast trained on the entire series.

    No minimum-length guard beyond a non-empty series: a degenerate series is
    left for the oracle to reject.
    """
    if series.empty:
        raise EmptySelection("Cannot plan a forecast for an empty series")
    if horizon_length < 1:
        raise InvalidHorizon(f"horizon_length must be positive, got {horizon_length}")

    last_week = int(series.index.max())
    return ForecastPlan(
        training_series=series,
        horizon_length=int(horizon_length),
        output_weeks=_weeks_after(last_week, int(horizon_length)),
    )


def plan_for_selection(
    series: pd.Series,
    current_week: int,
    selection: Selection,
    training: TrainingWindow | str = TrainingWindow.TARGET_WINDOW,
) -> ForecastPlan:
    """Dispatch to the planner matching the selected forecast mode."""
    if selection.mode is ForecastMode.QUARTERLY:
        plan = plan_quarterly(series, current_week, selection.quarter_count, training)
    else:
        plan = plan_weekly(series, current_week, selection.target_week)
    logger.debug(
        f"{selection.mode.value} plan for store {selection.store_id}: "
        f"{len(plan.training_series)} training weeks, horizon {plan.horizon_length}"
    )
    return plan
