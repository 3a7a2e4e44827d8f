"""
Type definitions for FinSim.

Purpose
-------
TypedDict definitions for the JSON shapes produced by
``finsim.serialization``. These shapes are the stable interface consumed
by the UI and by saved scenarios, so keys are camelCase.

Type Definitions
----------------
PayoffResultDict
    Payoff simulation: {"strategy", "months", "totalPaid", ...}
StrategyComparisonDict
    Both strategies plus {"interestSaved", "monthsSaved"}
GrowthProjectionDict / MonteCarloYearDict
    Deterministic and Monte Carlo projection rows
HealthScoreDict
    Health score with components and recommendations
CashFlowDayDict
    One forecast day ("label" only present when flows fired)
ScenarioDict
    Saved-scenario envelope
"""

from typing import Any, Dict, List, Optional
from typing_extensions import NotRequired, TypedDict

__all__ = [
    "PayoffMonthEntryDict",
    "PayoffMonthDict",
    "PayoffOrderDict",
    "PayoffResultDict",
    "StrategyComparisonDict",
    "GrowthProjectionDict",
    "PercentileBandDict",
    "MonteCarloYearDict",
    "ComponentScoreDict",
    "HealthScoreDict",
    "CashFlowDayDict",
    "RecurringFlowDict",
    "ScenarioDict",
]


class PayoffMonthEntryDict(TypedDict):
    id: str
    name: str
    balance: float
    payment: float
    interest: float
    principal: float


class PayoffMonthDict(TypedDict):
    month: int
    debts: List[PayoffMonthEntryDict]
    totalBalance: float
    totalPayment: float
    totalInterest: float


class PayoffOrderDict(TypedDict):
    id: str
    name: str
    payoffMonth: int


class PayoffResultDict(TypedDict):
    """
    Payoff simulation output.

    Examples
    --------
    >>> result: PayoffResultDict = to_json_dict(simulate_payoff(debts, "avalanche"))
    >>> result["debtPayoffOrder"][0]["payoffMonth"]
    14
    """

    strategy: str
    months: int
    totalPaid: float
    totalInterest: float
    schedule: List[PayoffMonthDict]
    debtPayoffOrder: List[PayoffOrderDict]


class StrategyComparisonDict(TypedDict):
    avalanche: PayoffResultDict
    snowball: PayoffResultDict
    interestSaved: float
    monthsSaved: int


class GrowthProjectionDict(TypedDict):
    year: int
    balance: float
    contributions: float
    growth: float


class PercentileBandDict(TypedDict):
    low: float
    mid: float
    high: float


class MonteCarloYearDict(TypedDict):
    year: int
    conservative: PercentileBandDict
    moderate: PercentileBandDict
    aggressive: PercentileBandDict


class ComponentScoreDict(TypedDict):
    score: int
    value: float
    label: str


class HealthScoreDict(TypedDict):
    """
    Health score output.

    ``components`` keys: savingsRate, debtToIncome, emergencyFund,
    investmentRate, creditUtilization.
    """

    overallScore: int
    grade: str
    components: Dict[str, ComponentScoreDict]
    recommendations: List[str]


class CashFlowDayDict(TypedDict):
    date: str
    projectedBalance: float
    income: float
    expenses: float
    label: NotRequired[str]


class RecurringFlowDict(TypedDict):
    amount: float
    dayOfMonth: int
    description: str


class ScenarioDict(TypedDict):
    """Saved-scenario envelope; parameters and results are free-form JSON."""

    schema_version: str
    name: str
    description: Optional[str]
    type: str
    parameters: Any
    results: Optional[Any]
