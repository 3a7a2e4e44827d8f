"""
Debt payoff simulation for FinSim.

Purpose
-------
Month-by-month amortization of a set of debts under one of two attack
orders:

- avalanche : extra money goes to the highest annual rate first
- snowball  : extra money goes to the lowest starting balance first

Every month each outstanding debt accrues simple monthly interest
(rate / 100 / 12) and receives its minimum payment, capped at what is
owed. The extra budget (the user's extra payment plus the minimums of
debts already paid off) goes to a single debt, the first outstanding one
in the attack order. Budget that debt cannot absorb is dropped for the
month; it is not spilled onto the next debt.

The attack order is computed once per call. It is not re-sorted as
balances move, so under snowball a debt that shrinks below the current
target is not promoted.

Simulation stops when every balance is at or below one cent, or after
360 months. Hitting the cap is a valid outcome: the schedule then ends
with debts still outstanding.

Example
-------
>>> debts = [
...     DebtRecord("visa", "Visa", 500.0, 20.0, 25.0),
...     DebtRecord("car", "Car loan", 3000.0, 5.0, 60.0),
... ]
>>> result = simulate_payoff(debts, "avalanche", extra_monthly=100.0)
>>> [p.id for p in result.debt_payoff_order]
['visa', 'car']
>>> cmp = compare_strategies(debts, extra_monthly=100.0)
>>> cmp.interest_saved >= 0
True
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Sequence, Tuple

from .constants import (
    CONDENSED_HEAD_MONTHS,
    CONDENSED_STRIDE,
    MAX_PAYOFF_MONTHS,
    PAID_OFF_EPSILON,
    STRATEGIES,
)
from .exceptions import ConfigurationError
from .utils import annual_percent_to_monthly

__all__ = [
    "DebtRecord",
    "PayoffMonthEntry",
    "PayoffMonthSummary",
    "PayoffOrderEntry",
    "PayoffResult",
    "StrategyComparison",
    "order_debts",
    "simulate_payoff",
    "compare_strategies",
    "condense_schedule",
]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DebtRecord:
    """
    A single debt as supplied by the caller.

    Parameters
    ----------
    id : str
        Identifier echoed back in schedules and payoff order.
    name : str
        Display name.
    balance : float
        Current balance (>= 0).
    annual_rate_percent : float
        Nominal annual interest rate in percent, in [0, 100].
    minimum_payment : float
        Minimum monthly payment (>= 0).
    """

    id: str
    name: str
    balance: float
    annual_rate_percent: float
    minimum_payment: float

    @property
    def monthly_rate(self) -> float:
        return annual_percent_to_monthly(self.annual_rate_percent)


@dataclass(frozen=True)
class PayoffMonthEntry:
    """One debt's activity in one simulated month.

    ``balance`` is the balance after this month's payment. ``principal``
    is ``payment - interest`` and is negative when the payment does not
    cover the interest.
    """

    id: str
    name: str
    balance: float
    payment: float
    interest: float
    principal: float


@dataclass(frozen=True)
class PayoffMonthSummary:
    month: int
    debts: Tuple[PayoffMonthEntry, ...]
    total_balance: float
    total_payment: float
    total_interest: float

    @property
    def total_principal(self) -> float:
        return sum(d.principal for d in self.debts)


@dataclass(frozen=True)
class PayoffOrderEntry:
    id: str
    name: str
    payoff_month: int


@dataclass(frozen=True)
class PayoffResult:
    """
    Outcome of a payoff simulation.

    Attributes
    ----------
    strategy : str
        "avalanche" or "snowball".
    months : int
        Number of simulated months (<= 360).
    total_paid : float
        Sum of all payments.
    total_interest : float
        Sum of all accrued interest.
    schedule : tuple of PayoffMonthSummary
        One entry per simulated month.
    debt_payoff_order : tuple of PayoffOrderEntry
        Debts in the order their balance first reached zero.
    """

    strategy: str
    months: int
    total_paid: float
    total_interest: float
    schedule: Tuple[PayoffMonthSummary, ...]
    debt_payoff_order: Tuple[PayoffOrderEntry, ...]

    @property
    def final_balance(self) -> float:
        """Total outstanding balance after the last simulated month."""
        if not self.schedule:
            return 0.0
        return self.schedule[-1].total_balance

    @property
    def is_paid_off(self) -> bool:
        """False when the month cap was reached with debts outstanding."""
        if not self.schedule:
            return True
        return all(d.balance <= PAID_OFF_EPSILON for d in self.schedule[-1].debts)

    def condensed(self) -> "PayoffResult":
        """Copy of this result with a condensed schedule (see condense_schedule)."""
        return replace(self, schedule=tuple(condense_schedule(self.schedule)))


@dataclass(frozen=True)
class StrategyComparison:
    avalanche: PayoffResult
    snowball: PayoffResult
    interest_saved: float
    months_saved: int


# ---------------------------------------------------------------------------
# Simulation
# ---------------------------------------------------------------------------

def order_debts(debts: Sequence[DebtRecord], strategy: str) -> List[DebtRecord]:
    """Return the attack order for *strategy*.

    The sort is stable: debts with equal rate (avalanche) or equal balance
    (snowball) keep their input order.
    """
    if strategy == "avalanche":
        return sorted(debts, key=lambda d: -d.annual_rate_percent)
    if strategy == "snowball":
        return sorted(debts, key=lambda d: d.balance)
    raise ConfigurationError(
        f"strategy must be one of {STRATEGIES}, got {strategy!r}."
    )


def simulate_payoff(
    debts: Sequence[DebtRecord],
    strategy: str = "avalanche",
    extra_monthly: float = 0.0,
) -> PayoffResult:
    """
    Simulate paying down *debts* month by month.

    Parameters
    ----------
    debts : sequence of DebtRecord
        Non-empty list of debts. The caller is responsible for reporting
        "no debts" instead of calling with an empty list.
    strategy : {"avalanche", "snowball"}
        Attack order for the extra budget.
    extra_monthly : float, default 0.0
        Extra amount paid every month on top of the minimums, already
        clamped by the caller to [0, 100000].

    Returns
    -------
    PayoffResult
    """
    ordered = order_debts(debts, strategy)
    # Working balances are positional so duplicate ids cannot collide.
    balances: List[float] = [d.balance for d in ordered]
    paid_off: Dict[int, int] = {}

    schedule: List[PayoffMonthSummary] = []
    payoff_order: List[PayoffOrderEntry] = []
    total_paid = 0.0
    total_interest = 0.0
    month = 0

    while month < MAX_PAYOFF_MONTHS:
        outstanding = [i for i, bal in enumerate(balances) if bal > PAID_OFF_EPSILON]
        if not outstanding:
            break
        month += 1

        freed_minimums = sum(
            d.minimum_payment
            for d, bal in zip(ordered, balances)
            if bal <= PAID_OFF_EPSILON
        )
        extra_budget = extra_monthly + freed_minimums

        opening: Dict[int, float] = {}
        interest: Dict[int, float] = {}
        payment: Dict[int, float] = {}
        for i in outstanding:
            debt = ordered[i]
            opening[i] = balances[i]
            interest[i] = opening[i] * debt.monthly_rate
            payment[i] = min(debt.minimum_payment, opening[i] + interest[i])

        # Extra budget goes to the top-priority outstanding debt only.
        if extra_budget > 0:
            target = outstanding[0]
            max_extra = min(
                extra_budget,
                opening[target] + interest[target] - payment[target] + PAID_OFF_EPSILON,
            )
            if max_extra > 0:
                payment[target] += max_extra

        entries: List[PayoffMonthEntry] = []
        month_payment = 0.0
        month_interest = 0.0
        for i in outstanding:
            debt = ordered[i]
            balances[i] = max(0.0, opening[i] + interest[i] - payment[i])
            entries.append(
                PayoffMonthEntry(
                    id=debt.id,
                    name=debt.name,
                    balance=balances[i],
                    payment=payment[i],
                    interest=interest[i],
                    principal=payment[i] - interest[i],
                )
            )
            month_payment += payment[i]
            month_interest += interest[i]

            if balances[i] <= PAID_OFF_EPSILON and i not in paid_off:
                paid_off[i] = month
                payoff_order.append(PayoffOrderEntry(debt.id, debt.name, month))

        total_paid += month_payment
        total_interest += month_interest
        schedule.append(
            PayoffMonthSummary(
                month=month,
                debts=tuple(entries),
                total_balance=sum(balances),
                total_payment=month_payment,
                total_interest=month_interest,
            )
        )

    if any(bal > PAID_OFF_EPSILON for bal in balances):
        logger.debug(
            "%s payoff reached the %d-month cap with %.2f outstanding",
            strategy, MAX_PAYOFF_MONTHS, sum(balances),
        )

    return PayoffResult(
        strategy=strategy,
        months=month,
        total_paid=total_paid,
        total_interest=total_interest,
        schedule=tuple(schedule),
        debt_payoff_order=tuple(payoff_order),
    )


def compare_strategies(
    debts: Sequence[DebtRecord],
    extra_monthly: float = 0.0,
) -> StrategyComparison:
    """Run both strategies on the same debts.

    ``interest_saved`` and ``months_saved`` are snowball minus avalanche,
    so positive values mean avalanche is cheaper / faster.
    """
    avalanche = simulate_payoff(debts, "avalanche", extra_monthly)
    snowball = simulate_payoff(debts, "snowball", extra_monthly)
    return StrategyComparison(
        avalanche=avalanche,
        snowball=snowball,
        interest_saved=snowball.total_interest - avalanche.total_interest,
        months_saved=snowball.months - avalanche.months,
    )


def condense_schedule(schedule: Sequence[PayoffMonthSummary]) -> List[PayoffMonthSummary]:
    """Thin a schedule for display.

    Keeps the first 12 months, then every third entry, and always the
    final month.
    """
    last = len(schedule) - 1
    return [
        entry
        for i, entry in enumerate(schedule)
        if i < CONDENSED_HEAD_MONTHS or i % CONDENSED_STRIDE == 0 or i == last
    ]
