"""
Configuration and request validation for FinSim.

Purpose
-------
The simulation engine trusts its inputs. This module is the layer that
earns that trust: Pydantic models that coerce and clamp raw request data
(JSON bodies, CLI files) into the bounds the engine expects, plus the
environment-driven application settings.

Clamping rules
--------------
- Debts: non-numeric values become 0, balance and minimum >= 0, rate in
  [0, 100], names truncated to 200 characters, at most 50 debts.
- Extra monthly payment: [0, 100000].
- Projections: years in [1, 50] (default 30), annual return in
  [-50, 100] percent (default 7), initial balance in [0, 1e9], monthly
  contribution in [0, 1e6].
- Forecast horizon: [1, 365] days (default 90).

Models accept both snake_case and camelCase keys, so request bodies can
be validated directly.

Example
-------
>>> req = PayoffRequest.model_validate({
...     "strategy": "snowball",
...     "extraMonthly": 250_000,
...     "debts": [{"id": "visa", "name": "Visa", "balance": "1200", "rate": 140, "minimum": 50}],
... })
>>> req.extra_monthly
100000.0
>>> req.debts[0].rate
100.0
"""

from __future__ import annotations

import datetime
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from .cashflow import RecurringFlow, TransactionRecord
from .constants import (
    ANNUAL_RETURN_BOUNDS,
    DEFAULT_ANNUAL_RETURN_PERCENT,
    DEFAULT_FORECAST_DAYS,
    DEFAULT_N_TRIALS,
    DEFAULT_PROJECTION_YEARS,
    FORECAST_DAYS_BOUNDS,
    INITIAL_BALANCE_BOUNDS,
    LOW_BALANCE_THRESHOLD,
    MAX_DEBTS,
    MAX_EXTRA_MONTHLY,
    MAX_NAME_LENGTH,
    MONTHLY_CONTRIBUTION_BOUNDS,
    YEARS_BOUNDS,
)
from .health import AccountSnapshot, HealthScoreInput
from .payoff import DebtRecord
from .utils import clamp, coerce_number

__all__ = [
    "DebtInput",
    "PayoffRequest",
    "ProjectionRequest",
    "MonteCarloConfig",
    "RecurringFlowInput",
    "ForecastRequest",
    "TransactionInput",
    "AccountInput",
    "HealthRequest",
    "AccountHistoryRequest",
    "AppSettings",
    "get_settings",
]


_REQUEST_CONFIG = ConfigDict(
    frozen=True,
    extra="ignore",
    alias_generator=to_camel,
    populate_by_name=True,
)


# ---------------------------------------------------------------------------
# Debt payoff
# ---------------------------------------------------------------------------

class DebtInput(BaseModel):
    """
    One debt from a request body.

    Attributes
    ----------
    id : str
        Identifier; missing or empty values become "".
    name : str
        Display name; defaults to "Unknown", truncated to 200 characters.
    balance : float
        Current balance, floored at 0.
    rate : float
        Annual interest rate in percent, clamped to [0, 100].
    minimum : float
        Minimum monthly payment, floored at 0.
    """

    model_config = _REQUEST_CONFIG

    id: str = Field(default="", description="Debt identifier")
    name: str = Field(
        default="Unknown",
        max_length=MAX_NAME_LENGTH,
        description="Display name"
    )
    balance: float = Field(default=0.0, ge=0, description="Current balance")
    rate: float = Field(default=0.0, ge=0, le=100, description="Annual rate (%)")
    minimum: float = Field(default=0.0, ge=0, description="Minimum monthly payment")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v) if v else ""

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v):
        return (str(v) if v else "Unknown")[:MAX_NAME_LENGTH]

    @field_validator("balance", "minimum", mode="before")
    @classmethod
    def floor_at_zero(cls, v):
        return max(0.0, coerce_number(v))

    @field_validator("rate", mode="before")
    @classmethod
    def clamp_rate(cls, v):
        return clamp(coerce_number(v), 0.0, 100.0)

    def to_record(self) -> DebtRecord:
        return DebtRecord(
            id=self.id,
            name=self.name,
            balance=self.balance,
            annual_rate_percent=self.rate,
            minimum_payment=self.minimum,
        )


class PayoffRequest(BaseModel):
    """
    Parameters for a payoff simulation or strategy comparison.

    An empty ``debts`` list is valid here; callers must check
    ``has_debts`` and report "no debts" instead of simulating.
    """

    model_config = _REQUEST_CONFIG

    strategy: Literal["avalanche", "snowball"] = Field(
        default="avalanche",
        description="Attack order for the extra budget"
    )
    extra_monthly: float = Field(
        default=0.0,
        ge=0,
        le=MAX_EXTRA_MONTHLY,
        description="Extra payment per month"
    )
    debts: List[DebtInput] = Field(
        default_factory=list,
        max_length=MAX_DEBTS,
        validation_alias=AliasChoices("debts", "customDebts"),
        description="Debts to simulate"
    )

    @field_validator("extra_monthly", mode="before")
    @classmethod
    def clamp_extra(cls, v):
        return clamp(coerce_number(v), 0.0, MAX_EXTRA_MONTHLY)

    @property
    def has_debts(self) -> bool:
        return bool(self.debts)

    def records(self) -> List[DebtRecord]:
        return [d.to_record() for d in self.debts]


# ---------------------------------------------------------------------------
# Growth projection
# ---------------------------------------------------------------------------

class ProjectionRequest(BaseModel):
    """Parameters for the deterministic and Monte Carlo growth projections."""

    model_config = _REQUEST_CONFIG

    years: int = Field(
        default=DEFAULT_PROJECTION_YEARS,
        ge=YEARS_BOUNDS[0],
        le=YEARS_BOUNDS[1],
        description="Projection horizon in years"
    )
    annual_return: float = Field(
        default=DEFAULT_ANNUAL_RETURN_PERCENT,
        ge=ANNUAL_RETURN_BOUNDS[0],
        le=ANNUAL_RETURN_BOUNDS[1],
        description="Expected annual return (%)"
    )
    monthly_contribution: float = Field(
        default=0.0,
        ge=MONTHLY_CONTRIBUTION_BOUNDS[0],
        le=MONTHLY_CONTRIBUTION_BOUNDS[1],
        description="Amount added every month"
    )
    initial_balance: float = Field(
        default=0.0,
        ge=INITIAL_BALANCE_BOUNDS[0],
        le=INITIAL_BALANCE_BOUNDS[1],
        description="Starting balance"
    )

    @field_validator("years", mode="before")
    @classmethod
    def clamp_years(cls, v):
        # 0 and unparsable values fall back to the default horizon.
        years = coerce_number(v) or DEFAULT_PROJECTION_YEARS
        return int(clamp(years, *YEARS_BOUNDS))

    @field_validator("annual_return", mode="before")
    @classmethod
    def clamp_annual_return(cls, v):
        if v is None:
            return DEFAULT_ANNUAL_RETURN_PERCENT
        rate = coerce_number(v, default=DEFAULT_ANNUAL_RETURN_PERCENT)
        return clamp(rate, *ANNUAL_RETURN_BOUNDS)

    @field_validator("monthly_contribution", mode="before")
    @classmethod
    def clamp_contribution(cls, v):
        return clamp(coerce_number(v), *MONTHLY_CONTRIBUTION_BOUNDS)

    @field_validator("initial_balance", mode="before")
    @classmethod
    def clamp_initial(cls, v):
        return clamp(coerce_number(v), *INITIAL_BALANCE_BOUNDS)


class MonteCarloConfig(BaseModel):
    """
    Configuration for the Monte Carlo band.

    Attributes
    ----------
    n_trials : int
        Trials per risk profile (1-10,000).
    seed : int, optional
        Random seed for reproducibility. If None, draws fresh entropy.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    n_trials: int = Field(
        default=DEFAULT_N_TRIALS,
        ge=1,
        le=10_000,
        description="Trials per risk profile"
    )
    seed: Optional[int] = Field(
        default=None,
        description="Random seed for reproducibility"
    )


# ---------------------------------------------------------------------------
# Cash-flow forecast
# ---------------------------------------------------------------------------

class RecurringFlowInput(BaseModel):
    model_config = _REQUEST_CONFIG

    amount: float = Field(description="Flow amount (sign ignored for expenses)")
    day_of_month: int = Field(ge=1, le=31, description="Day of month the flow fires")
    description: str = Field(default="", max_length=MAX_NAME_LENGTH)

    def to_flow(self) -> RecurringFlow:
        return RecurringFlow(
            amount=self.amount,
            day_of_month=self.day_of_month,
            description=self.description,
        )


class ForecastRequest(BaseModel):
    """Starting balance, recurring patterns and horizon for a forecast."""

    model_config = _REQUEST_CONFIG

    current_balance: float = Field(default=0.0, description="Balance before day one")
    recurring_income: List[RecurringFlowInput] = Field(default_factory=list)
    recurring_expenses: List[RecurringFlowInput] = Field(default_factory=list)
    days: int = Field(
        default=DEFAULT_FORECAST_DAYS,
        ge=FORECAST_DAYS_BOUNDS[0],
        le=FORECAST_DAYS_BOUNDS[1],
        description="Forecast horizon in days"
    )

    @field_validator("days", mode="before")
    @classmethod
    def clamp_days(cls, v):
        days = coerce_number(v) or DEFAULT_FORECAST_DAYS
        return int(clamp(days, *FORECAST_DAYS_BOUNDS))

    def income_flows(self) -> List[RecurringFlow]:
        return [f.to_flow() for f in self.recurring_income]

    def expense_flows(self) -> List[RecurringFlow]:
        return [f.to_flow() for f in self.recurring_expenses]


class TransactionInput(BaseModel):
    """A transaction from history, used to detect recurring flows."""

    model_config = _REQUEST_CONFIG

    date: datetime.date
    amount: float
    type: str = Field(default="expense")
    description: str = Field(default="")
    is_recurring: bool = Field(default=False)

    def to_record(self) -> TransactionRecord:
        return TransactionRecord(
            date=self.date,
            amount=self.amount,
            type=self.type,
            description=self.description,
            is_recurring=self.is_recurring,
        )


class AccountInput(BaseModel):
    model_config = _REQUEST_CONFIG

    type: Literal["bank", "investment", "credit_card", "loan", "income"]
    balance: float = 0.0
    subtype: Optional[str] = None
    credit_limit: Optional[float] = Field(default=None, ge=0)
    is_active: bool = Field(default=True, description="Closed accounts are ignored")

    def to_snapshot(self) -> AccountSnapshot:
        return AccountSnapshot(
            type=self.type,
            balance=self.balance,
            subtype=self.subtype,
            credit_limit=self.credit_limit,
            is_active=self.is_active,
        )


# ---------------------------------------------------------------------------
# Health score
# ---------------------------------------------------------------------------

class HealthRequest(BaseModel):
    """Aggregated figures for scoring; no clamping is applied."""

    model_config = _REQUEST_CONFIG

    monthly_income: float = 0.0
    monthly_expenses: float = 0.0
    total_debt: float = 0.0
    total_assets: float = 0.0
    total_investments: float = 0.0
    emergency_fund_balance: float = 0.0
    credit_utilization: float = 0.0

    def to_input(self) -> HealthScoreInput:
        return HealthScoreInput(**self.model_dump())


class AccountHistoryRequest(BaseModel):
    """Raw accounts and transactions to aggregate before scoring."""

    model_config = _REQUEST_CONFIG

    accounts: List[AccountInput] = Field(default_factory=list)
    transactions: List[TransactionInput] = Field(default_factory=list)
    total_debt: float = Field(default=0.0, description="Outstanding debt balances")
    total_investments: float = Field(default=0.0, description="Value of holdings")

    def snapshots(self) -> List[AccountSnapshot]:
        return [a.to_snapshot() for a in self.accounts]

    def records(self) -> List[TransactionRecord]:
        return [t.to_record() for t in self.transactions]


# ---------------------------------------------------------------------------
# Application Settings (Environment Variables)
# ---------------------------------------------------------------------------

class AppSettings(BaseSettings):
    """
    Global application settings loaded from environment variables.

    Supports .env files for local development. Environment variables
    are prefixed with FINSIM_ (e.g., FINSIM_LOG_LEVEL=DEBUG).

    Attributes
    ----------
    log_level : str
        Logging level: "DEBUG", "INFO", "WARNING", "ERROR"
    default_seed : int, optional
        Seed used by the CLI when none is given on the command line
    default_trials : int
        Monte Carlo trials per profile used by the CLI
    low_balance_threshold : float
        Projected balance below which the forecast raises an alert
    """

    model_config = SettingsConfigDict(
        env_prefix="FINSIM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level"
    )
    default_seed: Optional[int] = Field(
        default=None,
        description="Monte Carlo seed when none is given"
    )
    default_trials: int = Field(
        default=DEFAULT_N_TRIALS,
        ge=1,
        le=10_000,
        description="Monte Carlo trials per profile"
    )
    low_balance_threshold: float = Field(
        default=LOW_BALANCE_THRESHOLD,
        description="Low-balance alert threshold"
    )


@lru_cache()
def get_settings() -> AppSettings:
    """Get cached settings instance."""
    return AppSettings()
