"""
generate_demo_data.py — Generates synthetic weekly store sales (no dataset download needed).
Usage: python -m storecast.utils.generate_demo_data
"""
import logging
from pathlib import Path
import numpy as np
import pandas as pd

from storecast.utils.data_loader import PROJECT_ROOT, load_config

logger = logging.getLogger(__name__)

# Thanksgiving / Christmas weeks of a 52-week year, counted from a February start
HOLIDAY_WEEKS = {42: 1.35, 46: 1.6, 47: 1.25}


def generate_weekly_sales(n_stores=10, n_weeks=143, seed=42):
    rng = np.random.default_rng(seed)
    weeks = np.arange(1, n_weeks + 1)
    rows = []
    for store in range(1, n_stores + 1):
        base = rng.uniform(0.4e6, 2.0e6)
        trend = rng.uniform(-0.001, 0.002) * base
        sales = (base + trend * weeks
                 + 0.08 * base * np.sin(2 * np.pi * weeks / 52 + rng.uniform(0, 2 * np.pi))
                 + rng.normal(0, 0.04 * base, n_weeks))
        for wk, lift in HOLIDAY_WEEKS.items():
            sales[(weeks - 1) % 52 == wk - 1] *= lift
        rows.append(pd.DataFrame({"Store": store, "Week": weeks,
                                  "Weekly_Sales": np.maximum(0, sales).round(2)}))
    return pd.concat(rows, ignore_index=True)


def write_demo_data(config: dict, path: Path) -> pd.DataFrame:
    data_cfg = config["data"]
    df = generate_weekly_sales(n_stores=data_cfg.get("n_demo_stores", 10),
                               n_weeks=data_cfg.get("n_demo_weeks", 143))
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    logger.info(f"✅ Demo data saved to {path} ({df['Store'].nunique()} stores × {df['Week'].nunique()} weeks)")
    return df


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
    cfg = load_config()
    write_demo_data(cfg, PROJECT_ROOT / cfg["data"]["source"])


if __name__ == "__main__":
    main()
