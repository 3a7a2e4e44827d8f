"""
Unit tests for serialization.py module.

Tests the camelCase JSON payloads and saved-scenario envelopes.
"""

import json
from datetime import date

import pytest

from finsim.cashflow import RecurringFlow, summarize_forecast
from finsim.config import ProjectionRequest
from finsim.exceptions import ScenarioError
from finsim.growth import build_growth_report
from finsim.health import score_health
from finsim.payoff import compare_strategies, simulate_payoff
from finsim.serialization import (
    SCHEMA_VERSION,
    build_scenario,
    debts_from_json,
    dumps,
    scenario_from_json,
    scenario_to_json,
    to_json_dict,
)


# ============================================================================
# RESULT PAYLOADS
# ============================================================================

class TestResultPayloads:
    """Tests for to_json_dict() on each result type."""

    def test_payoff_keys(self, two_debts):
        payload = to_json_dict(simulate_payoff(two_debts, "avalanche", 100.0))

        assert set(payload) == {
            "strategy", "months", "totalPaid", "totalInterest", "schedule", "debtPayoffOrder",
        }
        month = payload["schedule"][0]
        assert set(month) == {"month", "debts", "totalBalance", "totalPayment", "totalInterest"}
        assert set(month["debts"][0]) == {"id", "name", "balance", "payment", "interest", "principal"}
        assert set(payload["debtPayoffOrder"][0]) == {"id", "name", "payoffMonth"}

    def test_comparison_keys(self, diverging_debts):
        payload = to_json_dict(compare_strategies(diverging_debts, 100.0))

        assert payload["avalanche"]["strategy"] == "avalanche"
        assert payload["snowball"]["strategy"] == "snowball"
        assert "interestSaved" in payload
        assert isinstance(payload["monthsSaved"], int)

    def test_growth_report(self, seed):
        request = ProjectionRequest(years=3, annual_return=5.0)
        payload = to_json_dict(build_growth_report(request, n_trials=5, seed=seed))

        assert [p["year"] for p in payload["projection"]] == [1, 2, 3]
        assert set(payload["monteCarlo"][0]) == {"year", "conservative", "moderate", "aggressive"}
        assert set(payload["monteCarlo"][0]["moderate"]) == {"low", "mid", "high"}
        assert payload["params"] == {
            "initialBalance": 0.0,
            "monthlyContribution": 0.0,
            "annualReturn": 5.0,
            "years": 3,
        }

    def test_health(self, health_input):
        payload = to_json_dict(score_health(health_input))

        assert payload["overallScore"] == 78
        assert payload["grade"] == "C"
        assert set(payload["components"]) == {
            "savingsRate", "debtToIncome", "emergencyFund", "investmentRate", "creditUtilization",
        }
        assert payload["components"]["emergencyFund"]["score"] == 14
        assert isinstance(payload["recommendations"], list)

    def test_forecast_label_omitted(self, paycheck, rent, start_date):
        summary = summarize_forecast(1000.0, paycheck, rent, 3, start=start_date)
        payload = to_json_dict(summary)

        first, second = payload["forecast"][0], payload["forecast"][1]
        assert first["date"] == "2025-01-01"
        assert first["label"] == "+Pay"
        assert first["projectedBalance"] == 3000.0
        assert "label" not in second
        assert payload["recurringIncome"] == [{"amount": 2000.0, "dayOfMonth": 1, "description": "Pay"}]
        assert payload["lowBalanceAlert"] is False

    def test_sequences(self, paycheck, start_date):
        from finsim.cashflow import forecast_cash_flow
        from finsim.growth import project_growth

        assert to_json_dict([]) == []
        assert len(to_json_dict(project_growth(2, 5.0, 0.0, 100.0))) == 2
        assert len(to_json_dict(forecast_cash_flow(0.0, paycheck, [], 5, start=start_date))) == 5

    def test_unknown_type(self):
        with pytest.raises(TypeError):
            to_json_dict(object())

    def test_dumps_is_valid_json(self, single_debt):
        text = dumps(simulate_payoff(single_debt).condensed())
        assert json.loads(text)["strategy"] == "avalanche"


class TestDebtsFromJson:
    """Tests for debts_from_json()."""

    def test_list(self):
        debts = debts_from_json([{"id": "a", "name": "A", "balance": "100", "rate": 5, "minimum": 10}])
        assert debts[0].balance == 100.0

    def test_object(self):
        debts = debts_from_json({"customDebts": [{"balance": 100, "rate": 500}]})
        assert debts[0].annual_rate_percent == 100.0


# ============================================================================
# SCENARIOS
# ============================================================================

class TestScenario:
    """Tests for build_scenario() and the JSON round trip."""

    def test_build(self):
        scenario = build_scenario("  Plan A  ", "debt-payoff", {"extraMonthly": 100})

        assert scenario["schema_version"] == SCHEMA_VERSION
        assert scenario["name"] == "Plan A"
        assert scenario["type"] == "debt-payoff"
        assert scenario["results"] is None
        assert scenario["description"] is None

    def test_round_trip(self, single_debt):
        results = to_json_dict(simulate_payoff(single_debt).condensed())
        scenario = build_scenario("Card", "debt-payoff", {"extraMonthly": 0}, results, "minimums only")

        assert scenario_from_json(scenario_to_json(scenario)) == scenario

    @pytest.mark.parametrize("name", ["", "   ", None, "x" * 201])
    def test_bad_name(self, name):
        with pytest.raises(ScenarioError, match="name"):
            build_scenario(name, "debt-payoff", {})

    def test_bad_type(self):
        with pytest.raises(ScenarioError, match="type must be one of"):
            build_scenario("Plan", "retirement", {})

    def test_parameters_required(self):
        with pytest.raises(ScenarioError, match="parameters is required"):
            build_scenario("Plan", "debt-compare", None)

    def test_description_too_long(self):
        with pytest.raises(ScenarioError, match="description"):
            build_scenario("Plan", "investment-growth", {}, description="d" * 2001)

    def test_payload_too_large(self):
        big = {"blob": "x" * 50_000}
        with pytest.raises(ScenarioError, match="parameters payload too large"):
            build_scenario("Plan", "debt-payoff", big)
        with pytest.raises(ScenarioError, match="results payload too large"):
            build_scenario("Plan", "debt-payoff", {}, results=big)

    def test_payload_size_counts_compact_json(self):
        # 40,001 characters compact, 60,000 with the default ", " separator
        ones = [1] * 20_000
        scenario = build_scenario("Plan", "debt-payoff", ones, results=ones)
        assert len(scenario["parameters"]) == 20_000

    def test_payload_size_counts_characters_not_escapes(self):
        # 30,011 characters, over 180,000 once escaped as \u00e9
        accented = {"note": "\u00e9" * 30_000}
        scenario = build_scenario("Plan", "investment-growth", accented)
        assert scenario["parameters"] is accented

    def test_not_serializable(self):
        with pytest.raises(ScenarioError, match="JSON-serializable"):
            build_scenario("Plan", "debt-payoff", {"when": date(2025, 1, 1)})

    def test_version_mismatch_warns(self):
        text = json.dumps({
            "schema_version": "0.0.1",
            "name": "Old",
            "type": "investment-growth",
            "parameters": {"years": 10},
        })

        with pytest.warns(UserWarning, match="schema version"):
            scenario = scenario_from_json(text)
        assert scenario["schema_version"] == "0.0.1"
        assert scenario["name"] == "Old"

    def test_invalid_json(self):
        with pytest.raises(ScenarioError, match="not valid JSON"):
            scenario_from_json("{not json")

    def test_not_an_object(self):
        with pytest.raises(ScenarioError):
            scenario_from_json("[1, 2]")
