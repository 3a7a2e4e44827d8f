"""Investment growth projections for FinSim

Two projections of a balance that receives a fixed monthly contribution:

- ``project_growth``: deterministic, monthly compounding at
  ``annual_return_percent / 100 / 12``. Yearly snapshots report the balance,
  the cumulative contributions (starting from the initial balance) and the
  growth ``balance - contributions``.
- ``monte_carlo``: 50 randomized trials for each of three risk profiles.
  Each month a trial earns ``avg/12 + spread/12 * U(-1, 1)``. The noise is
  uniform, not normal: a known simplification that keeps the band widths
  comparable with previously published figures, so it is kept as is.
  Per year the 10th/50th/90th percentiles of the trial balances form the
  low/mid/high band.

Randomness is explicit: pass ``seed`` or a ``numpy.random.Generator``.

Typical usage
-------------
>>> projection = project_growth(years=10, annual_return_percent=7.0,
...                             monthly_contribution=500.0, initial_balance=10_000.0)
>>> projection[-1].year
10
>>> bands = monte_carlo(10, 10_000.0, 500.0, seed=42)
>>> b = bands[-1].moderate
>>> b.low <= b.mid <= b.high
True
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple, Union

import numpy as np

from .constants import (
    DEFAULT_N_TRIALS,
    MONTHS_PER_YEAR,
    PERCENTILE_LEVELS,
    RISK_PROFILE_PARAMS,
)
from .exceptions import ConfigurationError
from .utils import annual_percent_to_monthly, nearest_rank, round_cents

if TYPE_CHECKING:
    from .config import ProjectionRequest

__all__ = [
    "GrowthProjectionEntry",
    "RiskProfile",
    "RISK_PROFILES",
    "get_risk_profile",
    "PercentileBand",
    "MonteCarloYearEntry",
    "GrowthReport",
    "project_growth",
    "simulate_trials",
    "percentile_band",
    "monte_carlo",
    "build_growth_report",
]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GrowthProjectionEntry:
    year: int
    balance: float
    contributions: float
    growth: float


@dataclass(frozen=True)
class RiskProfile:
    """Annual average return and spread of a Monte Carlo risk profile (decimals)."""

    name: str
    average_return: float
    spread: float

    def monthly_returns(self, draws: np.ndarray) -> np.ndarray:
        """Map U(-1, 1) draws to monthly arithmetic returns."""
        return self.average_return / MONTHS_PER_YEAR + self.spread / MONTHS_PER_YEAR * draws


RISK_PROFILES: Tuple[RiskProfile, ...] = tuple(
    RiskProfile(name, avg, spread) for name, (avg, spread) in RISK_PROFILE_PARAMS.items()
)


def get_risk_profile(name: str) -> RiskProfile:
    for profile in RISK_PROFILES:
        if profile.name == name:
            return profile
    raise ConfigurationError(
        f"unknown risk profile {name!r}; expected one of "
        f"{tuple(p.name for p in RISK_PROFILES)}."
    )


@dataclass(frozen=True)
class PercentileBand:
    low: float
    mid: float
    high: float


@dataclass(frozen=True)
class MonteCarloYearEntry:
    year: int
    conservative: PercentileBand
    moderate: PercentileBand
    aggressive: PercentileBand

    def bands(self) -> Dict[str, PercentileBand]:
        """Bands keyed by profile name, in profile order."""
        return {p.name: getattr(self, p.name) for p in RISK_PROFILES}


@dataclass(frozen=True)
class GrowthReport:
    """Deterministic projection and Monte Carlo bands for one set of parameters."""

    projection: Tuple[GrowthProjectionEntry, ...]
    monte_carlo: Tuple[MonteCarloYearEntry, ...]
    params: "ProjectionRequest"


# ---------------------------------------------------------------------------
# Deterministic projection
# ---------------------------------------------------------------------------

def project_growth(
    years: int,
    annual_return_percent: float,
    monthly_contribution: float,
    initial_balance: float,
) -> List[GrowthProjectionEntry]:
    """Compound monthly for *years* and snapshot every year.

    Contributions are added after the month's return is applied. All
    reported values are rounded to cents; the running balance is not.
    """
    monthly_rate = annual_percent_to_monthly(annual_return_percent)
    balance = float(initial_balance)
    contributed = float(initial_balance)

    projection: List[GrowthProjectionEntry] = []
    for year in range(1, int(years) + 1):
        for _ in range(MONTHS_PER_YEAR):
            balance = balance * (1.0 + monthly_rate) + monthly_contribution
            contributed += monthly_contribution
        projection.append(
            GrowthProjectionEntry(
                year=year,
                balance=round_cents(balance),
                contributions=round_cents(contributed),
                growth=round_cents(balance - contributed),
            )
        )
    return projection


# ---------------------------------------------------------------------------
# Monte Carlo
# ---------------------------------------------------------------------------

def simulate_trials(
    profile: Union[RiskProfile, str],
    years: int,
    initial_balance: float,
    monthly_contribution: float,
    *,
    n_trials: int = DEFAULT_N_TRIALS,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
) -> np.ndarray:
    """
    Year-end balances of independent trials for one risk profile.

    All trials advance together as a vector; they share no state, so the
    result does not depend on how trials are grouped.

    Returns
    -------
    np.ndarray
        Shape ``(n_trials, years)``; entry ``[i, y]`` is trial *i*'s
        balance at the end of year ``y + 1``, rounded to cents.
    """
    if isinstance(profile, str):
        profile = get_risk_profile(profile)
    if rng is None:
        rng = np.random.default_rng(seed)

    balances = np.full(int(n_trials), float(initial_balance))
    year_end = np.empty((int(n_trials), int(years)), dtype=float)
    for y in range(int(years)):
        draws = rng.uniform(-1.0, 1.0, size=(MONTHS_PER_YEAR, int(n_trials)))
        for returns in profile.monthly_returns(draws):
            balances = balances * (1.0 + returns) + monthly_contribution
        year_end[:, y] = round_cents(balances)
    return year_end


def percentile_band(values: np.ndarray) -> PercentileBand:
    """Low/mid/high band of a sample (nearest rank, no interpolation)."""
    ordered = np.sort(np.asarray(values, dtype=float))
    low, mid, high = (nearest_rank(ordered, level) for level in PERCENTILE_LEVELS)
    return PercentileBand(low=low, mid=mid, high=high)


def monte_carlo(
    years: int,
    initial_balance: float,
    monthly_contribution: float,
    *,
    n_trials: int = DEFAULT_N_TRIALS,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
) -> List[MonteCarloYearEntry]:
    """
    Percentile bands per year for the conservative, moderate and
    aggressive profiles.

    Parameters
    ----------
    years : int
        Horizon in years (caller-clamped to [1, 50]).
    initial_balance, monthly_contribution : float
        Starting balance and monthly addition.
    n_trials : int, default 50
        Trials per profile.
    seed : int, optional
        Seed for a fresh ``numpy.random.default_rng``. Ignored when *rng*
        is given.
    rng : numpy.random.Generator, optional
        Entropy source to draw from.
    """
    if rng is None:
        rng = np.random.default_rng(seed)
    logger.debug(
        "monte carlo: %d profiles x %d trials x %d years",
        len(RISK_PROFILES), n_trials, years,
    )

    runs = {
        profile.name: simulate_trials(
            profile, years, initial_balance, monthly_contribution,
            n_trials=n_trials, rng=rng,
        )
        for profile in RISK_PROFILES
    }

    entries: List[MonteCarloYearEntry] = []
    for y in range(int(years)):
        bands = {name: percentile_band(trials[:, y]) for name, trials in runs.items()}
        entries.append(MonteCarloYearEntry(year=y + 1, **bands))
    return entries


def build_growth_report(
    request: "ProjectionRequest",
    *,
    n_trials: int = DEFAULT_N_TRIALS,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
) -> GrowthReport:
    """Run both projections for an already-clamped request."""
    projection = project_growth(
        request.years,
        request.annual_return,
        request.monthly_contribution,
        request.initial_balance,
    )
    bands = monte_carlo(
        request.years,
        request.initial_balance,
        request.monthly_contribution,
        n_trials=n_trials,
        seed=seed,
        rng=rng,
    )
    return GrowthReport(projection=tuple(projection), monte_carlo=tuple(bands), params=request)
