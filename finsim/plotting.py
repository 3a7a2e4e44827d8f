"""
Plotting utilities for FinSim results.

Purpose
-------
Matplotlib charts for the views built on top of the engine:

- plot_payoff_schedule     : remaining balance per debt over time
- plot_strategy_comparison : total balance under avalanche vs snowball
- plot_growth              : deterministic projection with optional
                             Monte Carlo percentile bands
- plot_cash_flow           : projected daily balance with flow markers

Every function accepts an existing ``ax`` (or creates a figure of
``figsize``), an optional ``save_path``, and returns ``(fig, ax)`` when
``return_fig_ax`` is True.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.ticker import FuncFormatter

from .cashflow import CashFlowDay
from .constants import (
    DEFAULT_ALPHA_BANDS,
    DEFAULT_FIGSIZE,
    DEFAULT_FIGSIZE_WIDE,
    DEFAULT_LINEWIDTH,
    DEFAULT_LINEWIDTH_THICK,
    LOW_BALANCE_THRESHOLD,
)
from .growth import RISK_PROFILES, GrowthProjectionEntry, MonteCarloYearEntry
from .payoff import PayoffResult, StrategyComparison
from .utils import format_currency

__all__ = [
    "plot_payoff_schedule",
    "plot_strategy_comparison",
    "plot_growth",
    "plot_cash_flow",
]

_PROFILE_COLORS = {
    "conservative": "tab:blue",
    "moderate": "tab:orange",
    "aggressive": "tab:red",
}

def _currency_axis() -> FuncFormatter:
    return FuncFormatter(lambda x, pos: format_currency(x, decimals=0))


def _figure(ax, figsize):
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure
    return fig, ax


def _finish(fig, ax, save_path: Optional[str], return_fig_ax: bool):
    if save_path:
        fig.savefig(save_path, bbox_inches='tight', dpi=150)
    return (fig, ax) if return_fig_ax else None


# ---------------------------------------------------------------------------
# Debt payoff
# ---------------------------------------------------------------------------

def plot_payoff_schedule(
    result: PayoffResult,
    *,
    ax=None,
    figsize: Tuple[int, int] = DEFAULT_FIGSIZE_WIDE,
    title: Optional[str] = None,
    stacked: bool = True,
    save_path: Optional[str] = None,
    return_fig_ax: bool = False,
):
    """
    Remaining balance per debt, month by month.

    Parameters
    ----------
    result : PayoffResult
        Full (not condensed) simulation result.
    stacked : bool, default True
        Stack debts so the top edge is the total balance.
    ax : matplotlib Axes, optional
        Axes to draw on; a new figure is created otherwise.
    figsize, title, save_path, return_fig_ax
        See module docstring.
    """
    fig, ax = _figure(ax, figsize)

    months = np.array([m.month for m in result.schedule])
    # Debts drop out of the schedule once paid; missing months are zero.
    names = {}
    for entry in result.schedule:
        for debt in entry.debts:
            names.setdefault(debt.id, debt.name)
    balances = np.zeros((len(names), len(months)))
    row = {debt_id: i for i, debt_id in enumerate(names)}
    for j, entry in enumerate(result.schedule):
        for debt in entry.debts:
            balances[row[debt.id], j] = debt.balance

    labels = list(names.values())
    if stacked and len(months):
        ax.stackplot(months, balances, labels=labels, alpha=0.8)
    else:
        for i, label in enumerate(labels):
            ax.plot(months, balances[i], linewidth=DEFAULT_LINEWIDTH_THICK, label=label)

    for payoff in result.debt_payoff_order:
        ax.axvline(payoff.payoff_month, color='black', linestyle=':', linewidth=DEFAULT_LINEWIDTH, alpha=0.5)

    ax.set_xlabel("Month")
    ax.set_ylabel("Remaining balance")
    ax.yaxis.set_major_formatter(_currency_axis())
    ax.set_title(title or (
        f"{result.strategy.title()} payoff: {result.months} months, "
        f"{format_currency(result.total_interest)} interest"
    ))
    ax.legend(loc='best', fontsize=8)
    ax.grid(True, alpha=0.3)
    return _finish(fig, ax, save_path, return_fig_ax)


def plot_strategy_comparison(
    comparison: StrategyComparison,
    *,
    ax=None,
    figsize: Tuple[int, int] = DEFAULT_FIGSIZE_WIDE,
    title: Optional[str] = None,
    save_path: Optional[str] = None,
    return_fig_ax: bool = False,
):
    """Total remaining balance under both strategies on one axis."""
    fig, ax = _figure(ax, figsize)

    for result, style in ((comparison.avalanche, '-'), (comparison.snowball, '--')):
        months = [m.month for m in result.schedule]
        totals = [m.total_balance for m in result.schedule]
        ax.plot(
            months, totals, linestyle=style, linewidth=DEFAULT_LINEWIDTH_THICK,
            label=f"{result.strategy} ({result.months} months)",
        )

    ax.set_xlabel("Month")
    ax.set_ylabel("Total balance")
    ax.yaxis.set_major_formatter(_currency_axis())
    ax.set_title(title or (
        f"Avalanche saves {format_currency(comparison.interest_saved)} "
        f"and {comparison.months_saved} months"
    ))
    ax.legend(loc='best')
    ax.grid(True, alpha=0.3)
    return _finish(fig, ax, save_path, return_fig_ax)


# ---------------------------------------------------------------------------
# Growth
# ---------------------------------------------------------------------------

def plot_growth(
    projection: Sequence[GrowthProjectionEntry],
    monte_carlo: Optional[Sequence[MonteCarloYearEntry]] = None,
    *,
    ax=None,
    figsize: Tuple[int, int] = DEFAULT_FIGSIZE,
    title: Optional[str] = "Investment growth projection",
    show_contributions: bool = True,
    save_path: Optional[str] = None,
    return_fig_ax: bool = False,
):
    """
    Deterministic balance path with optional Monte Carlo bands.

    Each risk profile is drawn as a shaded low-high band around its
    median (mid) line.
    """
    fig, ax = _figure(ax, figsize)

    years = [p.year for p in projection]
    ax.plot(years, [p.balance for p in projection], color='black',
            linewidth=DEFAULT_LINEWIDTH_THICK, label="Projected balance")
    if show_contributions:
        ax.plot(years, [p.contributions for p in projection], color='gray',
                linestyle='--', linewidth=DEFAULT_LINEWIDTH, label="Contributions")

    if monte_carlo:
        mc_years = [e.year for e in monte_carlo]
        for profile in RISK_PROFILES:
            bands = [getattr(e, profile.name) for e in monte_carlo]
            color = _PROFILE_COLORS.get(profile.name)
            ax.fill_between(
                mc_years,
                [b.low for b in bands],
                [b.high for b in bands],
                color=color, alpha=DEFAULT_ALPHA_BANDS,
            )
            ax.plot(mc_years, [b.mid for b in bands], color=color,
                    linewidth=DEFAULT_LINEWIDTH, label=f"{profile.name.title()} (P10-P90)")

    ax.set_xlabel("Year")
    ax.set_ylabel("Balance")
    ax.yaxis.set_major_formatter(_currency_axis())
    if title:
        ax.set_title(title)
    ax.legend(loc='upper left')
    ax.grid(True, alpha=0.3)
    return _finish(fig, ax, save_path, return_fig_ax)


# ---------------------------------------------------------------------------
# Cash flow
# ---------------------------------------------------------------------------

def plot_cash_flow(
    forecast: Sequence[CashFlowDay],
    *,
    ax=None,
    figsize: Tuple[int, int] = DEFAULT_FIGSIZE_WIDE,
    title: Optional[str] = "Cash-flow forecast",
    low_balance_threshold: Optional[float] = LOW_BALANCE_THRESHOLD,
    save_path: Optional[str] = None,
    return_fig_ax: bool = False,
):
    """Projected balance as a step line; income and expense days marked."""
    fig, ax = _figure(ax, figsize)

    dates = [d.date for d in forecast]
    ax.step(dates, [d.projected_balance for d in forecast], where='post',
            linewidth=DEFAULT_LINEWIDTH_THICK, label="Projected balance")

    income_days = [d for d in forecast if d.income > 0]
    expense_days = [d for d in forecast if d.expenses > 0]
    if income_days:
        ax.scatter([d.date for d in income_days], [d.projected_balance for d in income_days],
                   marker='^', color='green', zorder=3, label="Income")
    if expense_days:
        ax.scatter([d.date for d in expense_days], [d.projected_balance for d in expense_days],
                   marker='v', color='red', zorder=3, label="Expenses")

    if low_balance_threshold is not None:
        ax.axhline(low_balance_threshold, color='red', linestyle='--',
                   linewidth=DEFAULT_LINEWIDTH, alpha=0.6, label="Low-balance alert")

    ax.set_xlabel("Date")
    ax.set_ylabel("Balance")
    ax.yaxis.set_major_formatter(_currency_axis())
    if title:
        ax.set_title(title)
    fig.autofmt_xdate()
    ax.legend(loc='best')
    ax.grid(True, alpha=0.3)
    return _finish(fig, ax, save_path, return_fig_ax)
