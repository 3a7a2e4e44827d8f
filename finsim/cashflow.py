"""Cash-flow forecasting for FinSim

Projects an account balance day by day from recurring income and expense
patterns. A recurring flow fires on every date whose day-of-month equals
its ``day_of_month``. Flows on the 29th-31st therefore do not fire in
months that lack that day; this matches how the patterns are detected
(average day of past occurrences) and is kept deliberately.

Contents
--------
- RecurringFlow / CashFlowDay / TransactionRecord value objects
- forecast_cash_flow: the day-by-day projection
- detect_recurring_flows: derive patterns from recent recurring transactions
- summarize_forecast: projection plus low-balance alert

Example
-------
>>> from datetime import date
>>> days = forecast_cash_flow(
...     1000.0,
...     [RecurringFlow(2000.0, 1, "Pay")],
...     [RecurringFlow(-500.0, 15, "Rent")],
...     days=31,
...     start=date(2025, 1, 1),
... )
>>> days[0].projected_balance, days[0].label
(3000.0, '+Pay')
>>> days[14].projected_balance, days[14].label
(2500.0, '-Rent')
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .constants import (
    DEFAULT_FORECAST_DAYS,
    LOW_BALANCE_THRESHOLD,
    RECURRING_LOOKBACK_MONTHS,
)
from .utils import round_cents, round_half_up, shift_months

__all__ = [
    "RecurringFlow",
    "CashFlowDay",
    "TransactionRecord",
    "ForecastSummary",
    "forecast_cash_flow",
    "detect_recurring_flows",
    "summarize_forecast",
]


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RecurringFlow:
    amount: float
    day_of_month: int
    description: str


@dataclass(frozen=True)
class CashFlowDay:
    date: date
    projected_balance: float
    income: float
    expenses: float
    label: Optional[str] = None


@dataclass(frozen=True)
class TransactionRecord:
    """A decrypted transaction as stored by the application.

    ``type`` is "income", "expense" or "transfer"; expense amounts may be
    negative.
    """

    date: date
    amount: float
    type: str
    description: str = ""
    is_recurring: bool = False


@dataclass(frozen=True)
class ForecastSummary:
    forecast: Tuple[CashFlowDay, ...]
    current_balance: float
    recurring_income: Tuple[RecurringFlow, ...]
    recurring_expenses: Tuple[RecurringFlow, ...]
    low_balance_alert: bool
    minimum_projected_balance: float


# ---------------------------------------------------------------------------
# Forecast
# ---------------------------------------------------------------------------

def forecast_cash_flow(
    current_balance: float,
    recurring_income: Sequence[RecurringFlow],
    recurring_expenses: Sequence[RecurringFlow],
    days: int = DEFAULT_FORECAST_DAYS,
    *,
    start: Optional[date] = None,
) -> List[CashFlowDay]:
    """
    Project the balance for *days* consecutive days starting at *start*.

    Parameters
    ----------
    current_balance : float
        Balance before the first projected day.
    recurring_income, recurring_expenses : sequence of RecurringFlow
        Patterns to apply. Expense amounts are used as absolute values.
    days : int, default 90
        Horizon, caller-clamped to [1, 365].
    start : date, optional
        First projected day; defaults to today.
    """
    start = start or date.today()
    balance = float(current_balance)

    forecast: List[CashFlowDay] = []
    for offset in range(int(days)):
        day = start + timedelta(days=offset)
        income = 0.0
        expenses = 0.0
        labels: List[str] = []

        for flow in recurring_income:
            if flow.day_of_month == day.day:
                income += flow.amount
                labels.append(f"+{flow.description}")
        for flow in recurring_expenses:
            if flow.day_of_month == day.day:
                expenses += abs(flow.amount)
                labels.append(f"-{flow.description}")

        balance = balance + income - expenses
        forecast.append(
            CashFlowDay(
                date=day,
                projected_balance=round_cents(balance),
                income=income,
                expenses=expenses,
                label=", ".join(labels) if labels else None,
            )
        )
    return forecast


def detect_recurring_flows(
    transactions: Iterable[TransactionRecord],
    *,
    as_of: Optional[date] = None,
    lookback_months: int = RECURRING_LOOKBACK_MONTHS,
) -> Tuple[List[RecurringFlow], List[RecurringFlow]]:
    """
    Derive recurring income and expense patterns from transaction history.

    Only transactions flagged ``is_recurring`` and dated within the last
    *lookback_months* calendar months are used. They are grouped by
    description; each group yields one flow with the average amount and
    the average day-of-month rounded half-up. The group's type is taken
    from its first transaction.

    Returns
    -------
    (income, expenses) : tuple of lists
        Flows in order of first appearance.
    """
    as_of = as_of or date.today()
    since = shift_months(as_of, -lookback_months)

    groups: Dict[str, Dict[str, list]] = {}
    kinds: Dict[str, str] = {}
    for t in transactions:
        if not t.is_recurring or t.date < since:
            continue
        group = groups.setdefault(t.description, {"amounts": [], "days": []})
        kinds.setdefault(t.description, t.type)
        group["amounts"].append(t.amount)
        group["days"].append(t.date.day)

    income: List[RecurringFlow] = []
    expenses: List[RecurringFlow] = []
    for description, group in groups.items():
        amounts, days = group["amounts"], group["days"]
        flow = RecurringFlow(
            amount=sum(amounts) / len(amounts),
            day_of_month=round_half_up(sum(days) / len(days)),
            description=description,
        )
        if kinds[description] == "income":
            income.append(flow)
        else:
            expenses.append(flow)
    return income, expenses


def summarize_forecast(
    current_balance: float,
    recurring_income: Sequence[RecurringFlow],
    recurring_expenses: Sequence[RecurringFlow],
    days: int = DEFAULT_FORECAST_DAYS,
    *,
    start: Optional[date] = None,
    low_balance_threshold: float = LOW_BALANCE_THRESHOLD,
) -> ForecastSummary:
    """Forecast plus the low-balance alert and minimum projected balance."""
    forecast = forecast_cash_flow(
        current_balance, recurring_income, recurring_expenses, days, start=start
    )
    balances = [d.projected_balance for d in forecast]
    return ForecastSummary(
        forecast=tuple(forecast),
        current_balance=current_balance,
        recurring_income=tuple(recurring_income),
        recurring_expenses=tuple(recurring_expenses),
        low_balance_alert=any(b < low_balance_threshold for b in balances),
        minimum_projected_balance=min(balances) if balances else round_cents(current_balance),
    )
