"""
data_loader.py — Loads the weekly store sales table and the YAML config.
"""
from __future__ import annotations
import logging
from pathlib import Path
import pandas as pd
import yaml

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
REQUIRED_COLUMNS = {"Store": "store_id", "Week": "week", "Weekly_Sales": "weekly_sales"}


def _resolve(path: str | Path) -> Path:
    p = Path(path)
    return p if p.is_absolute() else PROJECT_ROOT / p


def load_config(path: str = "configs/default.yaml") -> dict:
    with open(_resolve(path)) as f:
        return yaml.safe_load(f)


def normalize_sales(raw: pd.DataFrame) -> pd.DataFrame:
    """Rename to store_id/week/weekly_sales, drop incomplete rows, clip negative sales."""
    missing = [c for c in REQUIRED_COLUMNS if c not in raw.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}.")

    df = raw[list(REQUIRED_COLUMNS)].rename(columns=REQUIRED_COLUMNS)
    df["week"] = pd.to_numeric(df["week"], errors="coerce")
    df["weekly_sales"] = pd.to_numeric(df["weekly_sales"], errors="coerce")

    n_before = len(df)
    df = df.dropna().copy()
    if len(df) < n_before:
        logger.warning(f"Dropped {n_before - len(df)} rows with missing store/week/sales")

    negative = df["weekly_sales"] < 0
    if negative.any():
        logger.warning(f"Clipping {int(negative.sum())} negative weekly_sales values to 0")
        df.loc[negative, "weekly_sales"] = 0.0

    if pd.api.types.is_float_dtype(df["store_id"]):
        df["store_id"] = df["store_id"].astype(int)
    df["store_id"] = df["store_id"].astype(str)
    df["week"] = df["week"].astype(int)
    df["weekly_sales"] = df["weekly_sales"].astype(float)
    return df.sort_values(["store_id", "week"]).reset_index(drop=True)


def _is_url(source: str) -> bool:
    return str(source).startswith(("http://", "https://"))


def load_sales_data(config: dict) -> pd.DataFrame:
    """Read the configured CSV (path or URL), generating demo data first if allowed and missing."""
    data_cfg = config["data"]
    source = data_cfg["source"]

    if not _is_url(source):
        source = _resolve(source)
        if not source.exists():
            if not data_cfg.get("generate_demo", False):
                raise FileNotFoundError(f"Sales data not found: {source}")
            from storecast.utils.generate_demo_data import write_demo_data
            write_demo_data(config, source)

    logger.info(f"Loading weekly sales from {source}...")
    df = normalize_sales(pd.read_csv(source))
    logger.info(f"Loaded {len(df):,} rows for {df['store_id'].nunique()} stores")
    return df


class DataStore:
    """
    Read-only holder of the normalized sales table.

    The frame is loaded once and shared between dashboard sessions; every
    accessor hands out a copy so no caller can mutate the shared table.
    """

    def __init__(self, records: pd.DataFrame) -> None:
        self._records = normalize_sales(records) if "Store" in records.columns else records.copy()

    @classmethod
    def from_config(cls, config: dict) -> "DataStore":
        return cls(load_sales_data(config))

    @property
    def records(self) -> pd.DataFrame:
        return self._records.copy()

    def stores(self) -> list[str]:
        ids = self._records["store_id"].unique()
        return sorted(ids, key=lambda s: (not s.isdigit(), int(s) if s.isdigit() else 0, s))

    def last_week(self) -> int:
        return int(self._records["week"].max())
