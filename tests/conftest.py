"""
Pytest configuration and fixtures for FinSim test suite.

This module provides reusable fixtures for testing all FinSim components.
"""

from datetime import date
from typing import List

import pytest

from finsim.cashflow import RecurringFlow, TransactionRecord
from finsim.health import HealthScoreInput
from finsim.payoff import DebtRecord


# ---------------------------------------------------------------------------
# Date Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def start_date() -> date:
    """Standard forecast start date for tests."""
    return date(2025, 1, 1)


@pytest.fixture
def seed() -> int:
    """Standard random seed for reproducibility."""
    return 42


# ---------------------------------------------------------------------------
# Debt Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def single_debt() -> List[DebtRecord]:
    """
    One credit card paid with minimums only.

    Balance: 1,200 at 24% APR (2% monthly), minimum 50
    """
    return [DebtRecord("card", "Card", 1200.0, 24.0, 50.0)]


@pytest.fixture
def two_debts() -> List[DebtRecord]:
    """
    Small high-rate debt and a larger low-rate one.

    A is both the highest rate and the lowest balance, so avalanche and
    snowball attack it first.
    """
    return [
        DebtRecord("a", "A", 500.0, 20.0, 25.0),
        DebtRecord("b", "B", 3000.0, 5.0, 60.0),
    ]


@pytest.fixture
def diverging_debts() -> List[DebtRecord]:
    """Debts where avalanche and snowball pick different targets."""
    return [
        DebtRecord("loan", "Loan", 500.0, 5.0, 25.0),
        DebtRecord("card", "Card", 2000.0, 25.0, 50.0),
    ]


@pytest.fixture
def underwater_debt() -> List[DebtRecord]:
    """Minimum payment below monthly interest; never paid off."""
    return [DebtRecord("x", "Underwater", 10_000.0, 24.0, 50.0)]


# ---------------------------------------------------------------------------
# Health Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def health_input() -> HealthScoreInput:
    """20% savings rate, no debt, 3 months of emergency coverage."""
    return HealthScoreInput(
        monthly_income=5000.0,
        monthly_expenses=4000.0,
        total_debt=0.0,
        total_assets=10_000.0,
        total_investments=0.0,
        emergency_fund_balance=12_000.0,
        credit_utilization=0.0,
    )


# ---------------------------------------------------------------------------
# Cash-flow Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def paycheck() -> List[RecurringFlow]:
    return [RecurringFlow(2000.0, 1, "Pay")]


@pytest.fixture
def rent() -> List[RecurringFlow]:
    return [RecurringFlow(-500.0, 15, "Rent")]


@pytest.fixture
def transactions() -> List[TransactionRecord]:
    """
    Transaction history as of 2025-03-15.

    Salary and Rent recur twice in the lookback window; the December
    salary is too old and Groceries is not flagged recurring.
    """
    return [
        TransactionRecord(date(2024, 12, 1), 2800.0, "income", "Salary", True),
        TransactionRecord(date(2025, 2, 1), 3000.0, "income", "Salary", True),
        TransactionRecord(date(2025, 3, 1), 3200.0, "income", "Salary", True),
        TransactionRecord(date(2025, 2, 3), -1200.0, "expense", "Rent", True),
        TransactionRecord(date(2025, 3, 4), -1200.0, "expense", "Rent", True),
        TransactionRecord(date(2025, 3, 5), -150.0, "expense", "Groceries", False),
    ]
