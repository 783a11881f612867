"""series.py — Per-store weekly sales series."""
from __future__ import annotations
import logging

import pandas as pd

from storecast.core.errors import EmptySelection

logger = logging.getLogger(__name__)


def filter_series(records: pd.DataFrame, store_id: str) -> pd.Series:
    """
    Project the sales table onto one store.

    Args:
        records  : normalized frame with store_id, week, weekly_sales
        store_id : store to select

    Returns:
        weekly_sales indexed by week, ascending, one value per week
    """
    store_df = records[records["store_id"] == str(store_id)]
    if store_df.empty:
        raise EmptySelection(f"No sales records for store {store_id!r}")

    series = store_df.groupby("week")["weekly_sales"].sum().sort_index()
    series.index = series.index.astype(int)
    series.index.name = "week"
    series.name = "weekly_sales"
    logger.debug(f"Store {store_id}: {len(series)} weeks ({series.index.min()}–{series.index.max()})")
    return series


def current_week_of(series: pd.Series) -> int:
    """Last observed week of a series; forecasts start right after it."""
    if series.empty:
        raise EmptySelection("Series is empty")
    return int(series.index.max())
