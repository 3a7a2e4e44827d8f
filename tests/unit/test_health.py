"""
Unit tests for health.py module.

Tests the financial health score:
- Component thresholds and the overall sum
- Zero income / zero expense guards
- Grades and recommendations
- Aggregation from raw accounts and transactions
"""

from dataclasses import replace
from datetime import date

import pytest

from finsim.cashflow import TransactionRecord
from finsim.health import (
    POSITIVE_MESSAGE,
    AccountSnapshot,
    HealthScoreInput,
    aggregate_health_input,
    letter_grade,
    score_health,
)


# ============================================================================
# SCORING
# ============================================================================

class TestScoreHealth:
    """Tests for score_health()."""

    def test_reference_household(self, health_input):
        """20% savings, no debt, 3 months coverage, nothing invested."""
        result = score_health(health_input)
        c = result.components

        assert c.savings_rate.score == 20
        assert c.debt_to_income.score == 20
        assert c.emergency_fund.score == 14
        assert c.investment_rate.score == 4
        assert c.credit_utilization.score == 20
        assert result.overall_score == 78
        assert result.grade == "C"
        assert result.recommendations == (
            "Grow emergency fund from 3.0 to 6 months of expenses",
        )

    def test_repeatable(self, health_input):
        assert score_health(health_input) == score_health(health_input)

    def test_labels(self, health_input):
        c = score_health(health_input).components

        assert c.savings_rate.label == "20.0% savings rate"
        assert c.debt_to_income.label == "0.0% DTI ratio"
        assert c.emergency_fund.label == "3.0 months coverage"
        assert c.investment_rate.label == "0.0% invested"
        assert c.credit_utilization.label == "0% utilization"

    def test_perfect_score(self):
        data = HealthScoreInput(
            monthly_income=10_000.0,
            monthly_expenses=5000.0,
            total_investments=120_000.0,
            emergency_fund_balance=60_000.0,
            credit_utilization=5.0,
        )
        result = score_health(data)

        assert result.overall_score == 100
        assert result.grade == "A"
        assert result.recommendations == (POSITIVE_MESSAGE,)

    def test_zero_income(self):
        """No income: savings 0, DTI treated as 100%, investment rate 0."""
        result = score_health(HealthScoreInput(monthly_income=0.0, monthly_expenses=0.0))
        c = result.components

        assert c.savings_rate.value == 0.0
        assert c.debt_to_income.value == 100.0
        assert c.debt_to_income.score == 2
        assert c.emergency_fund.value == 0.0
        assert c.emergency_fund.score == 2
        assert c.investment_rate.value == 0.0
        assert result.overall_score == 28
        assert result.grade == "F"

    def test_zero_income_recommendations(self):
        result = score_health(HealthScoreInput(monthly_income=0.0, monthly_expenses=0.0))

        assert result.recommendations == (
            "Increase savings rate from 0.0% to at least 20% of income",
            "Reduce debt-to-income ratio from 100.0%; target under 36%",
            "Build emergency fund to at least 3 months of expenses (0 more needed)",
        )

    def test_negative_savings_rate_scores_zero(self, health_input):
        result = score_health(replace(health_input, monthly_expenses=6000.0))

        assert result.components.savings_rate.value == pytest.approx(-20.0)
        assert result.components.savings_rate.score == 0

    def test_fractional_savings_rounded_in_sum(self):
        """12.5% savings: component shows 13, overall rounds 58.5 to 59."""
        result = score_health(HealthScoreInput(monthly_income=4000.0, monthly_expenses=3500.0))

        assert result.components.savings_rate.score == 13
        assert result.overall_score == 59

    @pytest.mark.parametrize("debt,expected", [
        (0.0, 20),
        (6000.0, 18),     # 10%
        (18_000.0, 14),   # 30%
        (27_000.0, 8),    # 45%
        (36_000.0, 2),    # 60%
    ])
    def test_dti_thresholds(self, health_input, debt, expected):
        result = score_health(replace(health_input, total_debt=debt))
        assert result.components.debt_to_income.score == expected

    @pytest.mark.parametrize("fund,expected", [
        (24_000.0, 20),   # 6 months
        (12_000.0, 14),   # 3 months
        (4000.0, 8),      # 1 month
        (3999.0, 2),
    ])
    def test_emergency_thresholds(self, health_input, fund, expected):
        result = score_health(replace(health_input, emergency_fund_balance=fund))
        assert result.components.emergency_fund.score == expected

    @pytest.mark.parametrize("investments,expected", [
        (60_000.0, 20),   # 100% of annual income
        (36_000.0, 16),   # 60%
        (18_000.0, 12),   # 30%
        (9000.0, 8),      # 15%
        (3000.0, 4),      # 5%
    ])
    def test_investment_thresholds(self, health_input, investments, expected):
        result = score_health(replace(health_input, total_investments=investments))
        assert result.components.investment_rate.score == expected

    @pytest.mark.parametrize("utilization,expected", [
        (10.0, 20),
        (30.0, 16),
        (50.0, 10),
        (75.0, 5),
        (76.0, 1),
    ])
    def test_utilization_thresholds(self, health_input, utilization, expected):
        result = score_health(replace(health_input, credit_utilization=utilization))
        assert result.components.credit_utilization.score == expected

    def test_recommendation_order(self):
        data = HealthScoreInput(
            monthly_income=3000.0,
            monthly_expenses=2900.0,
            total_debt=50_000.0,
            emergency_fund_balance=1000.0,
            credit_utilization=80.0,
        )
        recommendations = score_health(data).recommendations

        assert len(recommendations) == 4
        assert recommendations[0].startswith("Increase savings rate")
        assert recommendations[1].startswith("Reduce debt-to-income")
        assert recommendations[2] == (
            "Build emergency fund to at least 3 months of expenses (7700 more needed)"
        )
        assert recommendations[3] == "Lower credit utilization from 80% to under 30%"


class TestLetterGrade:
    """Tests for letter_grade()."""

    @pytest.mark.parametrize("score,grade", [
        (100, "A"), (90, "A"), (89, "B"), (80, "B"), (79, "C"),
        (65, "C"), (64, "D"), (50, "D"), (49, "F"), (0, "F"),
    ])
    def test_boundaries(self, score, grade):
        assert letter_grade(score) == grade


# ============================================================================
# AGGREGATION
# ============================================================================

class TestAggregateHealthInput:
    """Tests for aggregate_health_input()."""

    def test_aggregates_current_month(self):
        accounts = [
            AccountSnapshot("bank", 2000.0, subtype="checking"),
            AccountSnapshot("bank", 9000.0, subtype="savings"),
            AccountSnapshot("investment", 15_000.0),
            AccountSnapshot("credit_card", -500.0, credit_limit=2000.0),
            AccountSnapshot("credit_card", 300.0, credit_limit=3000.0),
        ]
        transactions = [
            TransactionRecord(date(2025, 3, 1), 4000.0, "income", "Salary"),
            TransactionRecord(date(2025, 3, 3), -1500.0, "expense", "Rent"),
            TransactionRecord(date(2025, 3, 9), 200.0, "expense", "Groceries"),
            TransactionRecord(date(2025, 3, 10), 700.0, "transfer", "To savings"),
            TransactionRecord(date(2025, 2, 27), 4000.0, "income", "Salary"),
        ]
        data = aggregate_health_input(
            accounts, transactions, total_debt=5000.0, total_investments=15_000.0,
            as_of=date(2025, 3, 20),
        )

        assert data.monthly_income == 4000.0
        assert data.monthly_expenses == 1700.0
        assert data.total_assets == 26_000.0
        assert data.emergency_fund_balance == 9000.0
        assert data.credit_utilization == pytest.approx(16.0)
        assert data.total_debt == 5000.0
        assert data.total_investments == 15_000.0

    def test_no_credit_limit(self):
        accounts = [AccountSnapshot("credit_card", 400.0)]
        data = aggregate_health_input(accounts, [], as_of=date(2025, 3, 20))
        assert data.credit_utilization == 0.0

    def test_inactive_accounts_ignored(self):
        accounts = [
            AccountSnapshot("bank", 6000.0, subtype="savings"),
            AccountSnapshot("bank", 4000.0, subtype="savings", is_active=False),
            AccountSnapshot("credit_card", -900.0, credit_limit=1000.0, is_active=False),
            AccountSnapshot("credit_card", -100.0, credit_limit=1000.0),
        ]
        data = aggregate_health_input(accounts, [], as_of=date(2025, 3, 20))

        assert data.total_assets == 6000.0
        assert data.emergency_fund_balance == 6000.0
        assert data.credit_utilization == pytest.approx(10.0)

    def test_income_account_accepted(self):
        accounts = [
            AccountSnapshot("income", 3000.0),
            AccountSnapshot("bank", 1000.0, subtype="checking"),
        ]
        data = aggregate_health_input(accounts, [], as_of=date(2025, 3, 20))

        assert data.total_assets == 1000.0
        assert data.emergency_fund_balance == 0.0
        assert data.credit_utilization == 0.0
