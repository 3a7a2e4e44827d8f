"""
Global constants for FinSim.

Purpose
-------
Centralizes default values and magic numbers used throughout the FinSim
codebase: simulation horizons, paid-off thresholds, Monte Carlo risk
profiles, health-score thresholds and the input bounds the calling layer
enforces before invoking the engine.

Usage
-----
>>> from finsim.constants import MAX_PAYOFF_MONTHS, DEFAULT_N_TRIALS
>>>
>>> result = simulate_payoff(debts, "avalanche")
>>> assert result.months <= MAX_PAYOFF_MONTHS

Categories
----------
- Debt payoff: month cap, paid-off epsilon, strategies
- Growth: risk profiles, trial counts, percentile levels
- Health score: grade thresholds, component weights
- Cash flow: default horizon, low-balance alert
- Input bounds: clamping ranges applied by finsim.config
- Plotting: figure sizes, transparency values
"""

from typing import Dict, Tuple

__all__ = [
    # Debt payoff
    "MAX_PAYOFF_MONTHS",
    "PAID_OFF_EPSILON",
    "STRATEGIES",
    "CONDENSED_HEAD_MONTHS",
    "CONDENSED_STRIDE",
    # Growth
    "MONTHS_PER_YEAR",
    "DEFAULT_N_TRIALS",
    "DEFAULT_ANNUAL_RETURN_PERCENT",
    "DEFAULT_PROJECTION_YEARS",
    "RISK_PROFILE_PARAMS",
    "PERCENTILE_LEVELS",
    # Health score
    "COMPONENT_MAX_SCORE",
    "GRADE_THRESHOLDS",
    "SAVINGS_RATE_TARGET",
    "DTI_TARGET",
    "EMERGENCY_MONTHS_MINIMUM",
    "EMERGENCY_MONTHS_TARGET",
    "UTILIZATION_TARGET",
    # Cash flow
    "DEFAULT_FORECAST_DAYS",
    "LOW_BALANCE_THRESHOLD",
    "RECURRING_LOOKBACK_MONTHS",
    # Input bounds
    "MAX_EXTRA_MONTHLY",
    "MAX_DEBTS",
    "MAX_NAME_LENGTH",
    "MAX_DESCRIPTION_LENGTH",
    "MAX_SCENARIO_JSON",
    "YEARS_BOUNDS",
    "ANNUAL_RETURN_BOUNDS",
    "INITIAL_BALANCE_BOUNDS",
    "MONTHLY_CONTRIBUTION_BOUNDS",
    "FORECAST_DAYS_BOUNDS",
    # Plotting
    "DEFAULT_FIGSIZE",
    "DEFAULT_FIGSIZE_WIDE",
    "DEFAULT_ALPHA_BANDS",
    "DEFAULT_LINEWIDTH",
    "DEFAULT_LINEWIDTH_THICK",
]


# =============================================================================
# Debt Payoff
# =============================================================================

MAX_PAYOFF_MONTHS: int = 360
"""Hard cap on simulated months (30 years)."""

PAID_OFF_EPSILON: float = 0.01
"""Balances at or below one cent count as paid off."""

STRATEGIES: Tuple[str, ...] = ("avalanche", "snowball")
"""Supported attack orders."""

CONDENSED_HEAD_MONTHS: int = 12
"""Number of leading months always kept in a condensed schedule."""

CONDENSED_STRIDE: int = 3
"""After the head, keep every n-th schedule entry."""


# =============================================================================
# Growth Projection
# =============================================================================

MONTHS_PER_YEAR: int = 12
"""Number of months in a year (used for compounding and array sizing)."""

DEFAULT_N_TRIALS: int = 50
"""Monte Carlo trials per risk profile."""

DEFAULT_ANNUAL_RETURN_PERCENT: float = 7.0
"""Annual return used when the caller does not provide one."""

DEFAULT_PROJECTION_YEARS: int = 30
"""Projection horizon used when the caller does not provide one."""

RISK_PROFILE_PARAMS: Dict[str, Tuple[float, float]] = {
    "conservative": (0.05, 0.08),
    "moderate": (0.07, 0.12),
    "aggressive": (0.10, 0.18),
}
"""(average annual return, annual spread) per profile, as decimals.

Monthly returns are drawn as avg/12 + spread/12 * U(-1, 1).
"""

PERCENTILE_LEVELS: Tuple[float, float, float] = (0.10, 0.50, 0.90)
"""Low / mid / high band levels."""


# =============================================================================
# Health Score
# =============================================================================

COMPONENT_MAX_SCORE: int = 20
"""Each of the five components contributes at most 20 points."""

GRADE_THRESHOLDS: Tuple[Tuple[int, str], ...] = (
    (90, "A"),
    (80, "B"),
    (65, "C"),
    (50, "D"),
)
"""Minimum overall score per letter grade; anything lower is an F."""

SAVINGS_RATE_TARGET: float = 20.0
"""Savings rate (% of income) below which a recommendation is emitted."""

DTI_TARGET: float = 36.0
"""Debt-to-income ratio (%) above which a recommendation is emitted."""

EMERGENCY_MONTHS_MINIMUM: float = 3.0
"""Emergency fund coverage (months) considered the bare minimum."""

EMERGENCY_MONTHS_TARGET: float = 6.0
"""Emergency fund coverage (months) considered healthy."""

UTILIZATION_TARGET: float = 30.0
"""Credit utilization (%) above which a recommendation is emitted."""


# =============================================================================
# Cash Flow
# =============================================================================

DEFAULT_FORECAST_DAYS: int = 90
"""Forecast horizon used when the caller does not provide one."""

LOW_BALANCE_THRESHOLD: float = 500.0
"""Projected balances below this value raise the low-balance alert."""

RECURRING_LOOKBACK_MONTHS: int = 2
"""History window used to detect recurring transactions."""


# =============================================================================
# Input Bounds (enforced by finsim.config before invoking the engine)
# =============================================================================

MAX_EXTRA_MONTHLY: float = 100_000.0
MAX_DEBTS: int = 50
MAX_NAME_LENGTH: int = 200
MAX_DESCRIPTION_LENGTH: int = 2_000
MAX_SCENARIO_JSON: int = 50_000

YEARS_BOUNDS: Tuple[int, int] = (1, 50)
ANNUAL_RETURN_BOUNDS: Tuple[float, float] = (-50.0, 100.0)
INITIAL_BALANCE_BOUNDS: Tuple[float, float] = (0.0, 1e9)
MONTHLY_CONTRIBUTION_BOUNDS: Tuple[float, float] = (0.0, 1e6)
FORECAST_DAYS_BOUNDS: Tuple[int, int] = (1, 365)


# =============================================================================
# Plotting Defaults
# =============================================================================

DEFAULT_FIGSIZE: Tuple[int, int] = (14, 8)
"""Default figure size (width, height) in inches for standard plots."""

DEFAULT_FIGSIZE_WIDE: Tuple[int, int] = (14, 6)
"""Figure size for wide aspect ratio plots (timeseries, schedules)."""

DEFAULT_ALPHA_BANDS: float = 0.2
"""Default alpha for percentile band fills."""

DEFAULT_LINEWIDTH: float = 1.0
"""Default line width for standard plot lines."""

DEFAULT_LINEWIDTH_THICK: float = 2.0
"""Line width for emphasized lines (medians, thresholds)."""
