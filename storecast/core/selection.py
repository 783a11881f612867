"""
selection.py
------------
Immutable snapshot of the user's dashboard controls.

The UI rebuilds a Selection on every interaction; derived values only ever
read it, they never mutate it.
"""

from __future__ import annotations
from dataclasses import dataclass, fields, replace
from enum import Enum

WEEKS_PER_QUARTER = 13
MAX_QUARTERS = 8
CONFIDENCE_LEVELS = (80, 85, 90, 95)


class ForecastMode(str, Enum):
    QUARTERLY = "Quarterly"
    WEEKLY = "Weekly"


@dataclass(frozen=True)
class Selection:
    store_id: str
    mode: ForecastMode = ForecastMode.QUARTERLY
    quarter_count: int = 1
    target_week: int | None = None
    confidence_level: int = 95
    compare_enabled: bool = False
    comparison_past_weeks: int = 26
    comparison_future_weeks: int = 13

    def __post_init__(self) -> None:
        object.__setattr__(self, "store_id", str(self.store_id))
        object.__setattr__(self, "mode", ForecastMode(self.mode))
        if not 1 <= self.quarter_count <= MAX_QUARTERS:
            raise ValueError(f"quarter_count must be in [1, {MAX_QUARTERS}], got {self.quarter_count}")
        if self.confidence_level not in CONFIDENCE_LEVELS:
            raise ValueError(f"confidence_level must be one of {CONFIDENCE_LEVELS}, got {self.confidence_level}")
        if self.comparison_past_weeks <= 0 or self.comparison_future_weeks <= 0:
            raise ValueError("comparison window sizes must be positive")

    def with_changes(self, **changes) -> "Selection":
        return replace(self, **changes)

    def changed_fields(self, other: "Selection | None") -> list[str]:
        """Names of fields whose value differs from `other` (all of them if None)."""
        names = [f.name for f in fields(self)]
        if other is None:
            return names
        return [n for n in names if getattr(self, n) != getattr(other, n)]
