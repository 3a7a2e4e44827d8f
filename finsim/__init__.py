"""
FinSim - Personal Finance Simulation Engine

Pure computations behind a personal-finance dashboard: debt payoff
plans, investment growth projections, a financial health score and
cash-flow forecasts.

Modules
-------
- payoff        : Avalanche/snowball amortization simulator and comparison
- growth        : Deterministic growth projection and Monte Carlo bands
- health        : Financial health score, grade and recommendations
- cashflow      : Day-by-day balance forecast from recurring flows
- config        : Request validation/clamping and application settings
- serialization : JSON payloads and saved-scenario envelopes
- plotting      : Matplotlib charts for results
- utils         : Shared helpers (rounding, percentiles, DataFrames)

"""

from .payoff import DebtRecord, simulate_payoff, compare_strategies
from .growth import project_growth, monte_carlo
from .health import HealthScoreInput, score_health
from .cashflow import RecurringFlow, forecast_cash_flow
from . import utils

__version__ = "0.1.0"
