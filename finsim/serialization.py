"""
Serialization module for FinSim results and saved scenarios.

Purpose
-------
Converts engine results into the JSON shapes other layers depend on (UI
payloads, saved "what-if" scenarios) and validates scenario envelopes
before they are handed to storage.

Supports serialization of:
- PayoffResult and StrategyComparison
- Growth projections, Monte Carlo bands and GrowthReport
- HealthScoreResult
- Cash-flow forecasts and ForecastSummary
- Saved-scenario envelopes (JSON text with a schema version)

Design Principles
-----------------
- Stable: camelCase keys matching the published JSON interface
- Validated: scenario envelopes are checked before serialization
- Backward compatible: loading warns on schema version mismatch

Example
-------
>>> from finsim.payoff import DebtRecord, simulate_payoff
>>> from finsim.serialization import to_json_dict, build_scenario, scenario_to_json
>>>
>>> result = simulate_payoff([DebtRecord("a", "Visa", 500, 20, 25)], "avalanche")
>>> payload = to_json_dict(result)
>>> scenario = build_scenario("Visa plan", "debt-payoff", {"extraMonthly": 0}, payload)
>>> text = scenario_to_json(scenario)
"""

from __future__ import annotations

import json
import warnings
from typing import Any, Dict, List, Optional, Sequence, Union

from .cashflow import CashFlowDay, ForecastSummary, RecurringFlow
from .config import PayoffRequest
from .constants import MAX_DESCRIPTION_LENGTH, MAX_NAME_LENGTH, MAX_SCENARIO_JSON
from .exceptions import ScenarioError
from .growth import GrowthProjectionEntry, GrowthReport, MonteCarloYearEntry, PercentileBand
from .health import ComponentScore, HealthScoreResult
from .payoff import (
    DebtRecord,
    PayoffMonthSummary,
    PayoffResult,
    StrategyComparison,
)
from .types import (
    CashFlowDayDict,
    GrowthProjectionDict,
    HealthScoreDict,
    MonteCarloYearDict,
    PayoffMonthDict,
    PayoffResultDict,
    RecurringFlowDict,
    ScenarioDict,
    StrategyComparisonDict,
)

__all__ = [
    "SCHEMA_VERSION",
    "SCENARIO_TYPES",
    "payoff_result_to_dict",
    "comparison_to_dict",
    "projection_to_dict",
    "monte_carlo_to_dict",
    "growth_report_to_dict",
    "health_result_to_dict",
    "forecast_to_dict",
    "forecast_summary_to_dict",
    "to_json_dict",
    "dumps",
    "debts_from_json",
    "build_scenario",
    "scenario_to_json",
    "scenario_from_json",
]


# ---------------------------------------------------------------------------
# Schema Version
# ---------------------------------------------------------------------------

SCHEMA_VERSION = "0.1.0"

SCENARIO_TYPES = ("debt-payoff", "debt-compare", "investment-growth")


# ---------------------------------------------------------------------------
# Debt payoff
# ---------------------------------------------------------------------------

def _month_to_dict(entry: PayoffMonthSummary) -> PayoffMonthDict:
    return {
        "month": entry.month,
        "debts": [
            {
                "id": d.id,
                "name": d.name,
                "balance": d.balance,
                "payment": d.payment,
                "interest": d.interest,
                "principal": d.principal,
            }
            for d in entry.debts
        ],
        "totalBalance": entry.total_balance,
        "totalPayment": entry.total_payment,
        "totalInterest": entry.total_interest,
    }


def payoff_result_to_dict(result: PayoffResult) -> PayoffResultDict:
    """
    Convert PayoffResult to its JSON representation.

    Parameters
    ----------
    result : PayoffResult
        Result to serialize. Condense it first (``result.condensed()``)
        for display payloads.

    Returns
    -------
    dict
        camelCase payload (see finsim.types.PayoffResultDict)
    """
    return {
        "strategy": result.strategy,
        "months": result.months,
        "totalPaid": result.total_paid,
        "totalInterest": result.total_interest,
        "schedule": [_month_to_dict(m) for m in result.schedule],
        "debtPayoffOrder": [
            {"id": p.id, "name": p.name, "payoffMonth": p.payoff_month}
            for p in result.debt_payoff_order
        ],
    }


def comparison_to_dict(comparison: StrategyComparison) -> StrategyComparisonDict:
    return {
        "avalanche": payoff_result_to_dict(comparison.avalanche),
        "snowball": payoff_result_to_dict(comparison.snowball),
        "interestSaved": comparison.interest_saved,
        "monthsSaved": comparison.months_saved,
    }


def debts_from_json(data: Union[List[Dict[str, Any]], Dict[str, Any]]) -> List[DebtRecord]:
    """
    Parse debts from a JSON payload.

    Accepts either a bare list of debts or an object with a ``debts`` (or
    ``customDebts``) key. Values are coerced and clamped by
    ``finsim.config.DebtInput``.
    """
    if isinstance(data, list):
        data = {"debts": data}
    return PayoffRequest.model_validate(data).records()


# ---------------------------------------------------------------------------
# Growth
# ---------------------------------------------------------------------------

def projection_to_dict(projection: Sequence[GrowthProjectionEntry]) -> List[GrowthProjectionDict]:
    return [
        {
            "year": p.year,
            "balance": p.balance,
            "contributions": p.contributions,
            "growth": p.growth,
        }
        for p in projection
    ]


def _band_to_dict(band: PercentileBand) -> Dict[str, float]:
    return {"low": band.low, "mid": band.mid, "high": band.high}


def monte_carlo_to_dict(entries: Sequence[MonteCarloYearEntry]) -> List[MonteCarloYearDict]:
    return [
        {
            "year": e.year,
            "conservative": _band_to_dict(e.conservative),
            "moderate": _band_to_dict(e.moderate),
            "aggressive": _band_to_dict(e.aggressive),
        }
        for e in entries
    ]


def growth_report_to_dict(report: GrowthReport) -> Dict[str, Any]:
    """Projection, Monte Carlo bands and the effective (clamped) parameters."""
    params = report.params
    return {
        "projection": projection_to_dict(report.projection),
        "monteCarlo": monte_carlo_to_dict(report.monte_carlo),
        "params": {
            "initialBalance": params.initial_balance,
            "monthlyContribution": params.monthly_contribution,
            "annualReturn": params.annual_return,
            "years": params.years,
        },
    }


# ---------------------------------------------------------------------------
# Health score
# ---------------------------------------------------------------------------

def _component_to_dict(component: ComponentScore) -> Dict[str, Any]:
    return {"score": component.score, "value": component.value, "label": component.label}


def health_result_to_dict(result: HealthScoreResult) -> HealthScoreDict:
    c = result.components
    return {
        "overallScore": result.overall_score,
        "grade": result.grade,
        "components": {
            "savingsRate": _component_to_dict(c.savings_rate),
            "debtToIncome": _component_to_dict(c.debt_to_income),
            "emergencyFund": _component_to_dict(c.emergency_fund),
            "investmentRate": _component_to_dict(c.investment_rate),
            "creditUtilization": _component_to_dict(c.credit_utilization),
        },
        "recommendations": list(result.recommendations),
    }


# ---------------------------------------------------------------------------
# Cash flow
# ---------------------------------------------------------------------------

def _day_to_dict(day: CashFlowDay) -> CashFlowDayDict:
    out: CashFlowDayDict = {
        "date": day.date.isoformat(),
        "projectedBalance": day.projected_balance,
        "income": day.income,
        "expenses": day.expenses,
    }
    if day.label is not None:
        out["label"] = day.label
    return out


def _flow_to_dict(flow: RecurringFlow) -> RecurringFlowDict:
    return {
        "amount": flow.amount,
        "dayOfMonth": flow.day_of_month,
        "description": flow.description,
    }


def forecast_to_dict(forecast: Sequence[CashFlowDay]) -> List[CashFlowDayDict]:
    return [_day_to_dict(d) for d in forecast]


def forecast_summary_to_dict(summary: ForecastSummary) -> Dict[str, Any]:
    return {
        "forecast": forecast_to_dict(summary.forecast),
        "currentBalance": summary.current_balance,
        "recurringIncome": [_flow_to_dict(f) for f in summary.recurring_income],
        "recurringExpenses": [_flow_to_dict(f) for f in summary.recurring_expenses],
        "lowBalanceAlert": summary.low_balance_alert,
        "minimumProjectedBalance": summary.minimum_projected_balance,
    }


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def to_json_dict(obj: Any) -> Any:
    """
    Convert any FinSim result to its JSON representation.

    Sequences of projection rows, Monte Carlo rows and forecast days are
    converted element-wise.

    Raises
    ------
    TypeError
        If *obj* is not a FinSim result.
    """
    if isinstance(obj, PayoffResult):
        return payoff_result_to_dict(obj)
    if isinstance(obj, StrategyComparison):
        return comparison_to_dict(obj)
    if isinstance(obj, GrowthReport):
        return growth_report_to_dict(obj)
    if isinstance(obj, HealthScoreResult):
        return health_result_to_dict(obj)
    if isinstance(obj, ForecastSummary):
        return forecast_summary_to_dict(obj)
    if isinstance(obj, (list, tuple)):
        if not obj:
            return []
        first = obj[0]
        if isinstance(first, GrowthProjectionEntry):
            return projection_to_dict(obj)
        if isinstance(first, MonteCarloYearEntry):
            return monte_carlo_to_dict(obj)
        if isinstance(first, CashFlowDay):
            return forecast_to_dict(obj)
    raise TypeError(f"cannot serialize object of type {type(obj).__name__}")


def dumps(obj: Any, *, indent: Optional[int] = 2) -> str:
    """JSON text of a FinSim result."""
    return json.dumps(to_json_dict(obj), indent=indent)


# ---------------------------------------------------------------------------
# Saved scenarios
# ---------------------------------------------------------------------------

def _payload_size(value: Any, what: str) -> int:
    try:
        return len(json.dumps(value, separators=(",", ":"), ensure_ascii=False))
    except (TypeError, ValueError) as e:
        raise ScenarioError(f"{what} must be JSON-serializable: {e}") from e


def build_scenario(
    name: str,
    scenario_type: str,
    parameters: Any,
    results: Any = None,
    description: Optional[str] = None,
) -> ScenarioDict:
    """
    Validate and assemble a saved-scenario envelope.

    Parameters
    ----------
    name : str
        Non-blank, at most 200 characters (surrounding whitespace is
        stripped).
    scenario_type : str
        One of "debt-payoff", "debt-compare", "investment-growth".
    parameters : any JSON value
        Inputs of the scenario; required, at most 50,000 characters once
        serialized compactly.
    results : any JSON value, optional
        Outputs, same size limit.
    description : str, optional
        At most 2,000 characters.

    Raises
    ------
    ScenarioError
        If any of the rules above is violated.
    """
    if not isinstance(name, str) or not name.strip():
        raise ScenarioError("name is required")
    if len(name) > MAX_NAME_LENGTH:
        raise ScenarioError(f"name must be {MAX_NAME_LENGTH} characters or fewer")
    if description is not None and (
        not isinstance(description, str) or len(description) > MAX_DESCRIPTION_LENGTH
    ):
        raise ScenarioError(
            f"description must be a string of {MAX_DESCRIPTION_LENGTH} characters or fewer"
        )
    if scenario_type not in SCENARIO_TYPES:
        raise ScenarioError(f"type must be one of: {', '.join(SCENARIO_TYPES)}")
    if parameters is None:
        raise ScenarioError("parameters is required")
    if _payload_size(parameters, "parameters") > MAX_SCENARIO_JSON:
        raise ScenarioError("parameters payload too large")
    if results is not None and _payload_size(results, "results") > MAX_SCENARIO_JSON:
        raise ScenarioError("results payload too large")

    return {
        "schema_version": SCHEMA_VERSION,
        "name": name.strip(),
        "description": description,
        "type": scenario_type,
        "parameters": parameters,
        "results": results,
    }


def scenario_to_json(scenario: ScenarioDict, *, indent: Optional[int] = 2) -> str:
    return json.dumps(scenario, indent=indent)


def scenario_from_json(text: str) -> ScenarioDict:
    """
    Parse and re-validate a saved scenario.

    Warns when the stored schema version differs from the current one; the
    stored version is kept on the returned envelope.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ScenarioError(f"scenario is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ScenarioError("scenario must be a JSON object")

    schema_version = data.get("schema_version", "0.0.0")
    if schema_version != SCHEMA_VERSION:
        warnings.warn(
            f"Scenario schema version {schema_version} differs from current "
            f"version {SCHEMA_VERSION}. May encounter compatibility issues.",
            UserWarning,
        )

    scenario = build_scenario(
        name=data.get("name"),
        scenario_type=data.get("type"),
        parameters=data.get("parameters"),
        results=data.get("results"),
        description=data.get("description"),
    )
    scenario["schema_version"] = schema_version
    return scenario
