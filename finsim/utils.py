"""General utilities for FinSim

Contents
--------
- Numeric coercion and clamping (used by the request models)
- Rounding helpers (half-up to cents, half-up to integers)
- Rate conversions (annual percent -> monthly decimal)
- Percentile extraction (nearest rank on a sorted sample)
- Calendar helpers (month offsets)
- Reporting helpers (pandas frames for schedules, projections, forecasts)
- Formatting helpers (format_currency)
"""

from __future__ import annotations

import math
from datetime import date
from typing import TYPE_CHECKING, Any, Optional, Sequence

import numpy as np
import pandas as pd

if TYPE_CHECKING:
    from .cashflow import CashFlowDay
    from .growth import GrowthProjectionEntry, MonteCarloYearEntry
    from .payoff import PayoffMonthSummary

__all__ = [
    # Coercion / clamping
    "coerce_number",
    "clamp",
    # Rounding
    "round_cents",
    "round_half_up",
    # Rates
    "annual_percent_to_monthly",
    # Percentiles
    "nearest_rank",
    # Calendar
    "shift_months",
    # Reporting
    "schedule_frame",
    "projection_frame",
    "monte_carlo_frame",
    "forecast_frame",
    # Formatting
    "format_currency",
]


# ---------------------------------------------------------------------------
# Coercion / clamping
# ---------------------------------------------------------------------------

def coerce_number(value: Any, default: float = 0.0) -> float:
    """Convert *value* to a finite float, falling back to *default*.

    Accepts numbers, numeric strings and booleans. ``None``, unparsable
    strings, NaN and infinities all map to *default*.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        return float(default)
    if not math.isfinite(number):
        return float(default)
    return number


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp *value* into ``[lower, upper]``."""
    return min(max(value, lower), upper)


# ---------------------------------------------------------------------------
# Rounding
# ---------------------------------------------------------------------------

def round_cents(value):
    """Round to two decimals, ties away from -inf (half-up).

    Works on scalars and arrays. Python's built-in ``round`` uses banker's
    rounding, which would make e.g. 0.125 -> 0.12 instead of 0.13.
    """
    rounded = np.floor(np.asarray(value, dtype=float) * 100.0 + 0.5) / 100.0
    if rounded.ndim == 0:
        return float(rounded)
    return rounded


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward +inf."""
    return int(math.floor(value + 0.5))


# ---------------------------------------------------------------------------
# Rates
# ---------------------------------------------------------------------------

def annual_percent_to_monthly(annual_percent: float) -> float:
    """Convert a nominal annual rate in percent to a simple monthly decimal.

    Uses ``annual_percent / 100 / 12`` (no compounding), the convention
    for credit-card APRs and for the growth projections alike.
    """
    return annual_percent / 100.0 / 12.0


# ---------------------------------------------------------------------------
# Percentiles
# ---------------------------------------------------------------------------

def nearest_rank(sorted_values: Sequence[float] | np.ndarray, level: float) -> float:
    """Pick the value at index ``floor(n * level)`` of an ascending sample.

    No interpolation: the result is always one of the observed values,
    so bands built from it are ordered whenever the levels are.
    """
    values = np.asarray(sorted_values, dtype=float)
    if values.size == 0:
        raise ValueError("cannot take a percentile of an empty sample.")
    idx = min(int(math.floor(values.size * level)), values.size - 1)
    return float(values[idx])


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------

def shift_months(day: date, months: int) -> date:
    """Move *day* by a number of calendar months (clipped to month end)."""
    return (pd.Timestamp(day) + pd.DateOffset(months=months)).date()


# ---------------------------------------------------------------------------
# Reporting helpers
# ---------------------------------------------------------------------------

def schedule_frame(schedule: Sequence[PayoffMonthSummary]) -> pd.DataFrame:
    """Flatten a payoff schedule to one row per (month, debt)."""
    rows = [
        {
            "month": entry.month,
            "debt_id": debt.id,
            "name": debt.name,
            "balance": debt.balance,
            "payment": debt.payment,
            "interest": debt.interest,
            "principal": debt.principal,
        }
        for entry in schedule
        for debt in entry.debts
    ]
    columns = ["month", "debt_id", "name", "balance", "payment", "interest", "principal"]
    if not rows:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame(rows, columns=columns)


def projection_frame(projection: Sequence[GrowthProjectionEntry]) -> pd.DataFrame:
    """Deterministic projection as a year-indexed frame."""
    df = pd.DataFrame(
        [
            {
                "year": p.year,
                "balance": p.balance,
                "contributions": p.contributions,
                "growth": p.growth,
            }
            for p in projection
        ],
        columns=["year", "balance", "contributions", "growth"],
    )
    return df.set_index("year")


def monte_carlo_frame(entries: Sequence[MonteCarloYearEntry]) -> pd.DataFrame:
    """Monte Carlo bands as a year-indexed frame with ``<profile>_<band>`` columns."""
    rows = []
    for entry in entries:
        row = {"year": entry.year}
        for profile, band in entry.bands().items():
            row[f"{profile}_low"] = band.low
            row[f"{profile}_mid"] = band.mid
            row[f"{profile}_high"] = band.high
        rows.append(row)
    if not rows:
        return pd.DataFrame().rename_axis("year")
    return pd.DataFrame(rows).set_index("year")


def forecast_frame(forecast: Sequence[CashFlowDay]) -> pd.DataFrame:
    """Daily forecast as a date-indexed frame."""
    df = pd.DataFrame(
        [
            {
                "date": pd.Timestamp(day.date),
                "projected_balance": day.projected_balance,
                "income": day.income,
                "expenses": day.expenses,
                "label": day.label,
            }
            for day in forecast
        ],
        columns=["date", "projected_balance", "income", "expenses", "label"],
    )
    return df.set_index("date")


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def format_currency(value: float, decimals: int = 2, symbol: str = "$") -> str:
    """
    Format a monetary amount for tables and chart annotations.

    Parameters
    ----------
    value : float
        Amount in currency units.
    decimals : int, default 2
        Number of decimal places.
    symbol : str, default '$'
        Currency symbol prefix.

    Examples
    --------
    >>> format_currency(1234.5)
    '$1,234.50'
    >>> format_currency(-80, decimals=0)
    '-$80'
    """
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.{decimals}f}"
