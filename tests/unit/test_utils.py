"""
Unit tests for utils.py module.

Tests coercion, rounding, percentile and reporting helpers.
"""

from datetime import date

import numpy as np
import pandas as pd
import pytest

from finsim.cashflow import forecast_cash_flow
from finsim.growth import monte_carlo, project_growth
from finsim.payoff import simulate_payoff
from finsim.utils import (
    annual_percent_to_monthly,
    clamp,
    coerce_number,
    forecast_frame,
    format_currency,
    monte_carlo_frame,
    nearest_rank,
    projection_frame,
    round_cents,
    round_half_up,
    schedule_frame,
    shift_months,
)


class TestCoercion:
    """Tests for coerce_number() and clamp()."""

    @pytest.mark.parametrize("value,expected", [
        (3, 3.0), ("2.5", 2.5), (True, 1.0), (None, 0.0), ("abc", 0.0),
        (float("nan"), 0.0), (float("inf"), 0.0), ({}, 0.0),
    ])
    def test_coerce_number(self, value, expected):
        assert coerce_number(value) == expected

    def test_coerce_default(self):
        assert coerce_number(None, default=7.0) == 7.0

    def test_clamp(self):
        assert clamp(5, 0, 10) == 5
        assert clamp(-1, 0, 10) == 0
        assert clamp(11, 0, 10) == 10


class TestRounding:
    """Tests for round_cents() and round_half_up()."""

    def test_round_cents_half_up(self):
        assert round_cents(0.125) == 0.13
        assert round_cents(2.675000001) == 2.68
        assert round_cents(-1.005) == -1.0

    def test_round_cents_returns_float(self):
        assert isinstance(round_cents(1), float)

    def test_round_cents_array(self):
        np.testing.assert_array_equal(round_cents(np.array([0.125, 1.111])), [0.13, 1.11])

    @pytest.mark.parametrize("value,expected", [(2.5, 3), (3.5, 4), (-2.5, -2), (2.4, 2)])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected


class TestRatesAndPercentiles:

    def test_annual_percent_to_monthly(self):
        assert annual_percent_to_monthly(12.0) == pytest.approx(0.01)

    def test_nearest_rank(self):
        values = list(range(10))
        assert nearest_rank(values, 0.1) == 1
        assert nearest_rank(values, 0.5) == 5
        assert nearest_rank(values, 0.9) == 9
        assert nearest_rank(values, 1.0) == 9

    def test_nearest_rank_empty(self):
        with pytest.raises(ValueError):
            nearest_rank([], 0.5)


class TestShiftMonths:

    def test_back_two_months(self):
        assert shift_months(date(2025, 3, 15), -2) == date(2025, 1, 15)

    def test_clips_to_month_end(self):
        assert shift_months(date(2025, 3, 31), -1) == date(2025, 2, 28)


class TestFrames:
    """Tests for the DataFrame reporting helpers."""

    def test_schedule_frame(self, two_debts):
        result = simulate_payoff(two_debts, "avalanche", 100.0)
        df = schedule_frame(result.schedule)

        assert list(df.columns) == ["month", "debt_id", "name", "balance", "payment", "interest", "principal"]
        assert len(df) == sum(len(m.debts) for m in result.schedule)
        assert df.groupby("month")["payment"].sum().iloc[0] == pytest.approx(185.0)

    def test_schedule_frame_empty(self):
        assert schedule_frame([]).empty

    def test_projection_frame(self):
        df = projection_frame(project_growth(3, 5.0, 100.0, 0.0))

        assert df.index.name == "year"
        assert list(df.index) == [1, 2, 3]
        assert list(df.columns) == ["balance", "contributions", "growth"]

    def test_monte_carlo_frame(self, seed):
        df = monte_carlo_frame(monte_carlo(2, 1000.0, 0.0, n_trials=5, seed=seed))

        assert list(df.index) == [1, 2]
        assert "moderate_mid" in df.columns
        assert len(df.columns) == 9
        assert (df["aggressive_low"] <= df["aggressive_high"]).all()

    def test_forecast_frame(self, paycheck, start_date):
        df = forecast_frame(forecast_cash_flow(0.0, paycheck, [], 10, start=start_date))

        assert isinstance(df.index, pd.DatetimeIndex)
        assert df["projected_balance"].iloc[-1] == 2000.0
        assert df["label"].iloc[0] == "+Pay"


class TestFormatCurrency:

    @pytest.mark.parametrize("value,kwargs,expected", [
        (1234.5, {}, "$1,234.50"),
        (-80, {"decimals": 0}, "-$80"),
        (0, {}, "$0.00"),
        (1_000_000, {"decimals": 0, "symbol": "€"}, "€1,000,000"),
    ])
    def test_format(self, value, kwargs, expected):
        assert format_currency(value, **kwargs) == expected
