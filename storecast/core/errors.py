"""
errors.py
---------
Recoverable forecasting errors.

Every error here is a deterministic function of the current selection, so
none of them is retried. The dashboard renders `placeholder` in place of the
chart and waits for the next selection change.
"""

from __future__ import annotations


class StorecastError(ValueError):
    """Base class for errors that map to a placeholder instead of a chart."""

    placeholder = "Forecast unavailable"


class EmptySelection(StorecastError):
    """No records exist for the selected store."""

    placeholder = "No data for the selected store"


class InsufficientData(StorecastError):
    """Training window holds too few points to fit a model."""

    placeholder = "Insufficient data for forecast"


class InvalidHorizon(StorecastError):
    """Requested forecast horizon is not a positive number of weeks."""

    placeholder = "Choose a forecast horizon after the current week"


class EmptyForecast(StorecastError):
    """The oracle returned no forecast points."""

    placeholder = "Model returned an empty forecast"


class OracleError(StorecastError):
    """The underlying fit/forecast call failed."""

    placeholder = "Model could not be fitted to this series"
