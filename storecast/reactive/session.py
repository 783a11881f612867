"""
session.py
----------
Per-user dashboard state: one Selection snapshot plus the dependency graph of
everything derived from it.

    records ─┐
    store_id ┴─ series ─┬─ current_week ─┐
                        │  mode, quarters, target_week ┴─ forecast_plan ─┐
                        │                              confidence_level ─┴─ forecast
                        ├─ interval_plan ─── (+ confidence_level) ─ interval_forecast
                        ├─ comparison_plan ─ comparison_forecast ─┐
                        │          (compare_enabled, future_weeks) │
                        ├────────────────── (+ past_weeks) ────────┴─ comparison
                        └─ holdout (+ confidence_level)

Every node lists exactly the Selection fields it reads, so changing the
store recomputes everything while toggling the comparison only refits the
comparison forecast. Sessions never share a graph; only the records frame
is shared, read-only.
"""

from __future__ import annotations
import logging
from dataclasses import fields
from typing import Any

import pandas as pd

from storecast.core.forecast import ForecastOracle, ForecastResult, check_result
from storecast.core.planner import ForecastPlan, TrainingWindow, plan_full_history, plan_quarterly, plan_weekly
from storecast.core.selection import ForecastMode, Selection
from storecast.core.series import current_week_of, filter_series
from storecast.core.stitcher import stitch
from storecast.evaluation.holdout import holdout_accuracy
from storecast.reactive.graph import DependencyGraph, NodeState

logger = logging.getLogger(__name__)

SELECTION_FIELDS = tuple(f.name for f in fields(Selection))


class DashboardSession:
    """
    Args:
        records : normalized sales table shared by all sessions
        oracle  : forecasting oracle (fit_and_forecast)
        config  : parsed configs/default.yaml; missing keys fall back to defaults
    """

    def __init__(self, records: pd.DataFrame, oracle: ForecastOracle, config: dict | None = None) -> None:
        config = config or {}
        fc = config.get("forecast", {})
        self.oracle = oracle
        self.training = TrainingWindow(fc.get("quarterly_training", TrainingWindow.TARGET_WINDOW))
        self.interval_horizon = int(fc.get("interval_horizon", 52))
        self.holdout_weeks = int(config.get("evaluation", {}).get("holdout_weeks", 13))
        self.selection: Selection | None = None

        g = self.graph = DependencyGraph()
        g.add_input("records", records)
        for name in SELECTION_FIELDS:
            g.add_input(name)

        g.add_node("series", ("records", "store_id"), filter_series)
        g.add_node("current_week", ("series",), current_week_of)
        g.add_node(
            "forecast_plan",
            ("series", "current_week", "mode", "quarter_count", "target_week"),
            self._plan,
        )
        g.add_node(
            "forecast",
            ("forecast_plan", "confidence_level"),
            lambda forecast_plan, confidence_level: self._run_oracle(forecast_plan, [confidence_level]),
        )
        g.add_node(
            "interval_plan", ("series",),
            lambda series: plan_full_history(series, self.interval_horizon),
        )
        g.add_node(
            "interval_forecast",
            ("interval_plan", "confidence_level"),
            lambda interval_plan, confidence_level: self._run_oracle(interval_plan, [confidence_level]),
        )
        g.add_node(
            "comparison_plan",
            ("series", "compare_enabled", "comparison_future_weeks"),
            lambda series, compare_enabled, comparison_future_weeks: (
                plan_full_history(series, comparison_future_weeks) if compare_enabled else None
            ),
        )
        g.add_node(
            "comparison_forecast", ("comparison_plan",),
            lambda comparison_plan: self._run_oracle(comparison_plan, []) if comparison_plan is not None else None,
        )
        g.add_node(
            "comparison",
            ("series", "comparison_plan", "comparison_forecast", "comparison_past_weeks"),
            self._stitch,
        )
        g.add_node("holdout", ("series", "confidence_level"), self._holdout)

    # ── Node functions ────────────────────────────────────────────────────────

    def _plan(self, series, current_week, mode, quarter_count, target_week) -> ForecastPlan:
        if ForecastMode(mode) is ForecastMode.QUARTERLY:
            return plan_quarterly(series, current_week, quarter_count, self.training)
        return plan_weekly(series, current_week, target_week)

    def _run_oracle(self, plan: ForecastPlan, levels: list[int]) -> ForecastResult:
        result = self.oracle.fit_and_forecast(plan.training_series, plan.horizon_length, levels)
        return check_result(result, plan.horizon_length, levels)

    @staticmethod
    def _stitch(series, comparison_plan, comparison_forecast, comparison_past_weeks) -> pd.DataFrame | None:
        if comparison_plan is None:
            return None
        return stitch(series, comparison_forecast, comparison_plan.output_weeks, comparison_past_weeks)

    def _holdout(self, series, confidence_level) -> dict[str, float] | None:
        if self.holdout_weeks < 1:
            return None
        return holdout_accuracy(series, self.oracle, self.holdout_weeks, confidence_level)

    # ── Public API ────────────────────────────────────────────────────────────

    def update(self, selection: Selection, max_passes: int = 3) -> list[str]:
        """
        Apply a new Selection snapshot and bring every derived value up to date.

        Returns the names of the Selection fields that changed.
        """
        changed = selection.changed_fields(self.selection)
        self.selection = selection
        for name in changed:
            self.graph.set_input(name, getattr(selection, name))
        if changed:
            logger.info(f"Selection changed: {', '.join(changed)} (store {selection.store_id})")
        self.refresh(max_passes)
        return changed

    def refresh(self, max_passes: int = 3) -> bool:
        """Run recompute passes until one completes; returns False if none did."""
        for _ in range(max_passes):
            if self.graph.recompute():
                return True
        logger.warning(f"Recompute did not settle after {max_passes} passes")
        return False

    def state(self, name: str) -> NodeState:
        return self.graph.state(name)

    def get(self, name: str) -> Any:
        return self.graph.get(name)
