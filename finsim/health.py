"""
Financial health score for FinSim.

Five components worth up to 20 points each are summed into a 0-100 score:

================== ============================================ ===========================
Component          Raw value                                    Score
================== ============================================ ===========================
savings rate       (income - expenses) / income * 100           clamp(rate, 0, 20)
debt-to-income     debt / (income * 12) * 100                   <=0:20 <=20:18 <=36:14 <=50:8 else 2
emergency fund     savings balance / monthly expenses (months)  >=6:20 >=3:14 >=1:8 else 2
investment rate    investments / (income * 12) * 100            >=100:20 >=50:16 >=25:12 >=10:8 else 4
credit utilization used credit / credit limit * 100             <=10:20 <=30:16 <=50:10 <=75:5 else 1
================== ============================================ ===========================

Zero income or expenses never raise: the ratios fall back to sentinel
values (savings 0, DTI 100, coverage 0, investment 0).

Grades: A >= 90, B >= 80, C >= 65, D >= 50, otherwise F.

Recommendations are emitted in a fixed order (savings, DTI, emergency
below 3 months, emergency between 3 and 6 months, utilization), or a
single positive message when nothing needs attention.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

from .constants import (
    COMPONENT_MAX_SCORE,
    DTI_TARGET,
    EMERGENCY_MONTHS_MINIMUM,
    EMERGENCY_MONTHS_TARGET,
    GRADE_THRESHOLDS,
    SAVINGS_RATE_TARGET,
    UTILIZATION_TARGET,
)
from .utils import clamp, round_half_up

if TYPE_CHECKING:
    from .cashflow import TransactionRecord

__all__ = [
    "HealthScoreInput",
    "ComponentScore",
    "HealthComponents",
    "HealthScoreResult",
    "AccountSnapshot",
    "score_health",
    "letter_grade",
    "aggregate_health_input",
]

POSITIVE_MESSAGE = "Excellent financial health! Consider increasing investment contributions."


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HealthScoreInput:
    """
    Already-aggregated figures for one user.

    Attributes
    ----------
    monthly_income, monthly_expenses : float
        Totals for the current month (expenses as a positive amount).
    total_debt : float
        Sum of outstanding debt balances.
    total_assets : float
        Bank plus investment account balances.
    total_investments : float
        Current value of investment holdings.
    emergency_fund_balance : float
        Balance of savings accounts.
    credit_utilization : float
        Used credit as a percentage of total credit limits.
    """

    monthly_income: float
    monthly_expenses: float
    total_debt: float = 0.0
    total_assets: float = 0.0
    total_investments: float = 0.0
    emergency_fund_balance: float = 0.0
    credit_utilization: float = 0.0


@dataclass(frozen=True)
class ComponentScore:
    score: int
    value: float
    label: str


@dataclass(frozen=True)
class HealthComponents:
    savings_rate: ComponentScore
    debt_to_income: ComponentScore
    emergency_fund: ComponentScore
    investment_rate: ComponentScore
    credit_utilization: ComponentScore

    def total(self) -> int:
        return (
            self.savings_rate.score
            + self.debt_to_income.score
            + self.emergency_fund.score
            + self.investment_rate.score
            + self.credit_utilization.score
        )


@dataclass(frozen=True)
class HealthScoreResult:
    overall_score: int
    grade: str
    components: HealthComponents
    recommendations: Tuple[str, ...]


@dataclass(frozen=True)
class AccountSnapshot:
    """Minimal account view needed to aggregate a HealthScoreInput.

    ``type`` is one of "bank", "investment", "credit_card", "loan",
    "income". Inactive accounts are skipped during aggregation.
    """

    type: str
    balance: float
    subtype: Optional[str] = None
    credit_limit: Optional[float] = None
    is_active: bool = True


# ---------------------------------------------------------------------------
# Component scores
# ---------------------------------------------------------------------------

def _dti_score(dti: float) -> int:
    if dti <= 0:
        return 20
    if dti <= 20:
        return 18
    if dti <= 36:
        return 14
    if dti <= 50:
        return 8
    return 2


def _emergency_score(months: float) -> int:
    if months >= 6:
        return 20
    if months >= 3:
        return 14
    if months >= 1:
        return 8
    return 2


def _investment_score(rate: float) -> int:
    if rate >= 100:
        score = 20
    elif rate >= 50:
        score = 16
    elif rate >= 25:
        score = 12
    elif rate >= 10:
        score = 8
    else:
        score = 4
    return min(COMPONENT_MAX_SCORE, score)


def _utilization_score(utilization: float) -> int:
    if utilization <= 10:
        return 20
    if utilization <= 30:
        return 16
    if utilization <= 50:
        return 10
    if utilization <= 75:
        return 5
    return 1


def letter_grade(score: float) -> str:
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return "F"


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

def score_health(data: HealthScoreInput) -> HealthScoreResult:
    """Score *data* on the 0-100 scale and build recommendations."""
    income = data.monthly_income
    expenses = data.monthly_expenses

    savings_rate = (income - expenses) / income * 100 if income > 0 else 0.0
    savings_score = clamp(savings_rate, 0.0, float(COMPONENT_MAX_SCORE))

    dti = data.total_debt / (income * 12) * 100 if income > 0 else 100.0
    dti_score = _dti_score(dti)

    emergency_months = data.emergency_fund_balance / expenses if expenses > 0 else 0.0
    emergency_score = _emergency_score(emergency_months)

    investment_rate = data.total_investments / (income * 12) * 100 if income > 0 else 0.0
    investment_score = _investment_score(investment_rate)

    utilization = data.credit_utilization
    utilization_score = _utilization_score(utilization)

    # The savings score is continuous; only the sum is rounded.
    overall = round_half_up(
        savings_score + dti_score + emergency_score + investment_score + utilization_score
    )

    recommendations: List[str] = []
    if savings_rate < SAVINGS_RATE_TARGET:
        recommendations.append(
            f"Increase savings rate from {savings_rate:.1f}% to at least 20% of income"
        )
    if dti > DTI_TARGET:
        recommendations.append(
            f"Reduce debt-to-income ratio from {dti:.1f}%; target under 36%"
        )
    if emergency_months < EMERGENCY_MONTHS_MINIMUM:
        shortfall = round_half_up(expenses * 3 - data.emergency_fund_balance)
        recommendations.append(
            "Build emergency fund to at least 3 months of expenses "
            f"({shortfall} more needed)"
        )
    if EMERGENCY_MONTHS_MINIMUM <= emergency_months < EMERGENCY_MONTHS_TARGET:
        recommendations.append(
            f"Grow emergency fund from {emergency_months:.1f} to 6 months of expenses"
        )
    if utilization > UTILIZATION_TARGET:
        recommendations.append(
            f"Lower credit utilization from {utilization:.0f}% to under 30%"
        )
    if not recommendations:
        recommendations.append(POSITIVE_MESSAGE)

    components = HealthComponents(
        savings_rate=ComponentScore(
            round_half_up(savings_score), savings_rate, f"{savings_rate:.1f}% savings rate"
        ),
        debt_to_income=ComponentScore(dti_score, dti, f"{dti:.1f}% DTI ratio"),
        emergency_fund=ComponentScore(
            emergency_score, emergency_months, f"{emergency_months:.1f} months coverage"
        ),
        investment_rate=ComponentScore(
            investment_score, investment_rate, f"{investment_rate:.1f}% invested"
        ),
        credit_utilization=ComponentScore(
            utilization_score, utilization, f"{utilization:.0f}% utilization"
        ),
    )

    return HealthScoreResult(
        overall_score=overall,
        grade=letter_grade(overall),
        components=components,
        recommendations=tuple(recommendations),
    )


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def aggregate_health_input(
    accounts: Iterable[AccountSnapshot],
    transactions: Iterable["TransactionRecord"],
    total_debt: float = 0.0,
    total_investments: float = 0.0,
    *,
    as_of: Optional[date] = None,
) -> HealthScoreInput:
    """
    Build a HealthScoreInput from raw account and transaction records.

    Income and expenses are summed over the calendar month containing
    *as_of* (today by default). Emergency fund is the balance of bank
    accounts with subtype "savings". Credit utilization is 0 when no
    credit card carries a limit. Inactive accounts are ignored.
    """
    as_of = as_of or date.today()
    accounts = [a for a in accounts if a.is_active]

    this_month = [
        t for t in transactions
        if t.date.year == as_of.year and t.date.month == as_of.month
    ]
    income = sum(t.amount for t in this_month if t.type == "income")
    expenses = sum(abs(t.amount) for t in this_month if t.type == "expense")

    total_assets = sum(a.balance for a in accounts if a.type in ("bank", "investment"))
    emergency = sum(
        a.balance for a in accounts if a.type == "bank" and a.subtype == "savings"
    )

    cards = [a for a in accounts if a.type == "credit_card"]
    used = sum(abs(a.balance) for a in cards)
    limit = sum(a.credit_limit or 0.0 for a in cards)
    utilization = used / limit * 100 if limit > 0 else 0.0

    return HealthScoreInput(
        monthly_income=income,
        monthly_expenses=expenses,
        total_debt=total_debt,
        total_assets=total_assets,
        total_investments=total_investments,
        emergency_fund_balance=emergency,
        credit_utilization=utilization,
    )
