"""
Command-Line Interface for FinSim.

Purpose
-------
Runs the simulation engine on JSON input files and prints a summary
table, optionally writing the full result as JSON (or CSV) and a chart.

Commands
--------
- payoff   : Simulate a debt payoff plan with one strategy
- compare  : Compare avalanche and snowball on the same debts
- project  : Project investment growth with Monte Carlo bands
- health   : Compute the financial health score
- forecast : Forecast the daily cash-flow balance

Example Usage
-------------
    # Payoff plan with $200/month extra
    $ finsim payoff debts.json --strategy avalanche --extra 200 -o plan.json

    # 20-year projection, reproducible bands, chart saved to disk
    $ finsim project --years 20 --contribution 500 --seed 42 --plot growth.png

    # 60-day forecast from recurring transactions
    $ finsim forecast history.json --days 60

    # Show version
    $ finsim --version
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any, Optional

import click
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.table import Table

from .config import (
    AccountHistoryRequest,
    ForecastRequest,
    HealthRequest,
    PayoffRequest,
    ProjectionRequest,
    TransactionInput,
    get_settings,
)
from .exceptions import FinSimError

# Version
__version__ = "0.1.0"

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_json(path: Path) -> Any:
    try:
        with open(path, "r") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        click.echo(f"Error loading {path}: {e}", err=True)
        sys.exit(1)


def _validate(model, data: Any):
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        click.echo(f"Invalid input: {e}", err=True)
        sys.exit(1)


def _write_output(output: Path, payload: Any, frame=None) -> None:
    """Write JSON, or CSV when *output* ends in .csv and a frame is available."""
    output.parent.mkdir(parents=True, exist_ok=True)
    if output.suffix.lower() == ".csv":
        if frame is None:
            click.echo("Error: CSV output is not available for this command", err=True)
            sys.exit(1)
        frame.to_csv(output)
    else:
        with open(output, "w") as f:
            json.dump(payload, f, indent=2)


def _save_plot(plot_fn, path: Path, *args, **kwargs) -> None:
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    fig, _ = plot_fn(*args, return_fig_ax=True, **kwargs)
    fig.savefig(path, bbox_inches="tight", dpi=150)
    plt.close(fig)


def _emit(ctx: click.Context, table: Table, lines) -> None:
    """Print a Rich table, or plain lines when Rich output is disabled."""
    if ctx.obj.get("quiet"):
        return
    console: Optional[Console] = ctx.obj.get("console")
    if console is not None:
        console.print(table)
    else:
        for line in lines:
            click.echo(line)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@click.group()
@click.version_option(version=__version__, prog_name="finsim")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--plain", is_flag=True, help="Plain text output instead of tables")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, quiet: bool, plain: bool, verbose: bool) -> None:
    """
    FinSim - Personal finance simulation engine.

    Debt payoff plans, investment growth projections, financial health
    scores and cash-flow forecasts from JSON inputs.

    Use 'finsim COMMAND --help' for command-specific help.
    """
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["console"] = None if plain else Console()
    ctx.obj["settings"] = settings


@main.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--strategy", "-s",
    type=click.Choice(["avalanche", "snowball"]),
    default=None,
    help="Attack order (default: value in file, else avalanche)"
)
@click.option("--extra", "-e", type=float, default=None, help="Extra monthly payment")
@click.option("--full-schedule", is_flag=True, help="Do not condense the schedule in the output")
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None,
              help="Write result to JSON (or CSV schedule with .csv)")
@click.option("--plot", type=click.Path(path_type=Path), default=None, help="Save a chart (PNG/SVG)")
@click.pass_context
def payoff(
    ctx: click.Context,
    input_file: Path,
    strategy: Optional[str],
    extra: Optional[float],
    full_schedule: bool,
    output: Optional[Path],
    plot: Optional[Path],
) -> None:
    """
    Simulate a debt payoff plan.

    INPUT_FILE is a JSON list of debts, or an object with "debts",
    "strategy" and "extraMonthly".

    Example:
        finsim payoff debts.json --strategy snowball --extra 150
    """
    from .payoff import simulate_payoff
    from .serialization import payoff_result_to_dict
    from .utils import format_currency, schedule_frame

    data = _load_json(input_file)
    if isinstance(data, list):
        data = {"debts": data}
    if strategy is not None:
        data["strategy"] = strategy
    if extra is not None:
        data["extraMonthly"] = extra
    request = _validate(PayoffRequest, data)

    if not request.has_debts:
        click.echo("No debts to calculate")
        return

    try:
        result = simulate_payoff(request.records(), request.strategy, request.extra_monthly)
    except FinSimError as e:
        click.echo(f"Error during simulation: {e}", err=True)
        sys.exit(1)

    table = Table(title=f"{result.strategy.title()} Payoff Plan", show_header=True)
    table.add_column("Debt", style="cyan")
    table.add_column("Paid off in month", justify="right", style="green")
    for p in result.debt_payoff_order:
        table.add_row(p.name, str(p.payoff_month))
    table.add_row("", "")
    table.add_row("Months", str(result.months))
    table.add_row("Total paid", format_currency(result.total_paid))
    table.add_row("Total interest", format_currency(result.total_interest))

    lines = [
        f"Months: {result.months}",
        f"Total paid: {format_currency(result.total_paid)}",
        f"Total interest: {format_currency(result.total_interest)}",
    ]
    if not result.is_paid_off:
        lines.append("Warning: debts remain after the 30-year cap")
        table.caption = "Debts remain after the 30-year cap"
    _emit(ctx, table, lines)

    if output:
        shown = result if full_schedule else result.condensed()
        _write_output(output, payoff_result_to_dict(shown), schedule_frame(result.schedule))
        if not ctx.obj["quiet"]:
            click.echo(f"Results saved to {output}")

    if plot:
        from .plotting import plot_payoff_schedule
        _save_plot(plot_payoff_schedule, plot, result)


@main.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("--extra", "-e", type=float, default=None, help="Extra monthly payment")
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None,
              help="Write comparison to JSON")
@click.option("--plot", type=click.Path(path_type=Path), default=None, help="Save a chart (PNG/SVG)")
@click.pass_context
def compare(
    ctx: click.Context,
    input_file: Path,
    extra: Optional[float],
    output: Optional[Path],
    plot: Optional[Path],
) -> None:
    """
    Compare avalanche and snowball strategies.

    Example:
        finsim compare debts.json --extra 100
    """
    from .payoff import compare_strategies
    from .serialization import comparison_to_dict, payoff_result_to_dict
    from .utils import format_currency

    data = _load_json(input_file)
    if isinstance(data, list):
        data = {"debts": data}
    if extra is not None:
        data["extraMonthly"] = extra
    request = _validate(PayoffRequest, data)

    if not request.has_debts:
        click.echo("No debts to compare")
        return

    try:
        comparison = compare_strategies(request.records(), request.extra_monthly)
    except FinSimError as e:
        click.echo(f"Error during simulation: {e}", err=True)
        sys.exit(1)

    table = Table(title="Strategy Comparison", show_header=True)
    table.add_column("Strategy", style="cyan")
    table.add_column("Months", justify="right")
    table.add_column("Total interest", justify="right", style="green")
    for result in (comparison.avalanche, comparison.snowball):
        table.add_row(result.strategy, str(result.months), format_currency(result.total_interest))

    lines = [
        f"{r.strategy}: {r.months} months, {format_currency(r.total_interest)} interest"
        for r in (comparison.avalanche, comparison.snowball)
    ]
    lines.append(f"Interest saved by avalanche: {format_currency(comparison.interest_saved)}")
    lines.append(f"Months saved by avalanche: {comparison.months_saved}")
    table.caption = (
        f"Avalanche saves {format_currency(comparison.interest_saved)} "
        f"and {comparison.months_saved} months"
    )
    _emit(ctx, table, lines)

    if output:
        payload = comparison_to_dict(comparison)
        # Display payloads carry condensed schedules.
        payload["avalanche"] = payoff_result_to_dict(comparison.avalanche.condensed())
        payload["snowball"] = payoff_result_to_dict(comparison.snowball.condensed())
        _write_output(output, payload)
        if not ctx.obj["quiet"]:
            click.echo(f"Results saved to {output}")

    if plot:
        from .plotting import plot_strategy_comparison
        _save_plot(plot_strategy_comparison, plot, comparison)


@main.command()
@click.option("--years", "-y", type=float, default=None, help="Horizon in years (1-50, default 30)")
@click.option("--annual-return", "-r", type=float, default=None, help="Annual return in percent (default 7)")
@click.option("--contribution", "-c", type=float, default=0.0, help="Monthly contribution")
@click.option("--initial", "-i", type=float, default=0.0, help="Initial balance")
@click.option("--seed", "-s", type=int, default=None, help="Random seed for reproducibility")
@click.option("--trials", "-n", type=int, default=None, help="Monte Carlo trials per profile")
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None,
              help="Write result to JSON (or CSV projection with .csv)")
@click.option("--plot", type=click.Path(path_type=Path), default=None, help="Save a chart (PNG/SVG)")
@click.pass_context
def project(
    ctx: click.Context,
    years: Optional[float],
    annual_return: Optional[float],
    contribution: float,
    initial: float,
    seed: Optional[int],
    trials: Optional[int],
    output: Optional[Path],
    plot: Optional[Path],
) -> None:
    """
    Project investment growth with Monte Carlo bands.

    Example:
        finsim project --years 25 --annual-return 6 --contribution 400 --seed 7
    """
    from .config import MonteCarloConfig
    from .growth import build_growth_report
    from .serialization import growth_report_to_dict
    from .utils import format_currency, monte_carlo_frame, projection_frame

    settings = ctx.obj["settings"]
    request = _validate(ProjectionRequest, {
        "years": years,
        "annualReturn": annual_return,
        "monthlyContribution": contribution,
        "initialBalance": initial,
    })
    mc = _validate(MonteCarloConfig, {
        "n_trials": trials if trials is not None else settings.default_trials,
        "seed": seed if seed is not None else settings.default_seed,
    })

    try:
        report = build_growth_report(request, n_trials=mc.n_trials, seed=mc.seed)
    except FinSimError as e:
        click.echo(f"Error during projection: {e}", err=True)
        sys.exit(1)
    final = report.projection[-1]
    bands = report.monte_carlo[-1].bands()

    table = Table(title=f"Growth after {final.year} years", show_header=True)
    table.add_column("Scenario", style="cyan")
    table.add_column("Low (P10)", justify="right")
    table.add_column("Mid (P50)", justify="right", style="green")
    table.add_column("High (P90)", justify="right")
    table.add_row(
        f"Fixed {request.annual_return:g}%", "", format_currency(final.balance), ""
    )
    for name, band in bands.items():
        table.add_row(
            name.title(),
            format_currency(band.low),
            format_currency(band.mid),
            format_currency(band.high),
        )
    table.caption = (
        f"Contributions {format_currency(final.contributions)}, "
        f"growth {format_currency(final.growth)}"
    )

    lines = [
        f"Balance after {final.year} years: {format_currency(final.balance)}",
        f"Contributions: {format_currency(final.contributions)}",
        f"Growth: {format_currency(final.growth)}",
    ]
    lines += [
        f"{name}: {format_currency(b.low)} / {format_currency(b.mid)} / {format_currency(b.high)}"
        for name, b in bands.items()
    ]
    _emit(ctx, table, lines)

    if output:
        frame = projection_frame(report.projection).join(monte_carlo_frame(report.monte_carlo))
        _write_output(output, growth_report_to_dict(report), frame)
        if not ctx.obj["quiet"]:
            click.echo(f"Results saved to {output}")

    if plot:
        from .plotting import plot_growth
        _save_plot(plot_growth, plot, report.projection, report.monte_carlo)


@main.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("--as-of", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="Reference date for aggregation (default: today)")
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None,
              help="Write result to JSON")
@click.pass_context
def health(
    ctx: click.Context,
    input_file: Path,
    as_of,
    output: Optional[Path],
) -> None:
    """
    Compute the financial health score.

    INPUT_FILE holds either the aggregated figures (monthlyIncome,
    monthlyExpenses, totalDebt, ...) or raw "accounts" and "transactions"
    plus "totalDebt" and "totalInvestments".

    Example:
        finsim health household.json
    """
    from .health import aggregate_health_input, score_health
    from .serialization import health_result_to_dict

    data = _load_json(input_file)
    if not isinstance(data, dict):
        click.echo("Error: health input must be a JSON object", err=True)
        sys.exit(1)

    if "accounts" in data:
        history = _validate(AccountHistoryRequest, data)
        score_input = aggregate_health_input(
            history.snapshots(),
            history.records(),
            total_debt=history.total_debt,
            total_investments=history.total_investments,
            as_of=as_of.date() if as_of else None,
        )
    else:
        score_input = _validate(HealthRequest, data).to_input()

    result = score_health(score_input)

    table = Table(title=f"Financial Health: {result.overall_score}/100 ({result.grade})",
                  show_header=True)
    table.add_column("Component", style="cyan")
    table.add_column("Score", justify="right", style="green")
    table.add_column("Detail")
    c = result.components
    for label, component in (
        ("Savings rate", c.savings_rate),
        ("Debt-to-income", c.debt_to_income),
        ("Emergency fund", c.emergency_fund),
        ("Investment rate", c.investment_rate),
        ("Credit utilization", c.credit_utilization),
    ):
        table.add_row(label, f"{component.score}/20", component.label)
    table.caption = "\n".join(result.recommendations)

    lines = [f"Score: {result.overall_score} ({result.grade})"]
    lines += [f"- {r}" for r in result.recommendations]
    _emit(ctx, table, lines)

    if output:
        _write_output(output, health_result_to_dict(result))
        if not ctx.obj["quiet"]:
            click.echo(f"Results saved to {output}")


@main.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("--days", "-d", type=int, default=None, help="Forecast horizon (1-365, default 90)")
@click.option("--start", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="First forecast day (default: today)")
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None,
              help="Write result to JSON (or CSV forecast with .csv)")
@click.option("--plot", type=click.Path(path_type=Path), default=None, help="Save a chart (PNG/SVG)")
@click.pass_context
def forecast(
    ctx: click.Context,
    input_file: Path,
    days: Optional[int],
    start,
    output: Optional[Path],
    plot: Optional[Path],
) -> None:
    """
    Forecast the daily balance from recurring flows.

    INPUT_FILE holds "currentBalance" plus either "recurringIncome" /
    "recurringExpenses" patterns or a "transactions" history from which
    recurring patterns are detected.

    Example:
        finsim forecast budget.json --days 60 --start 2025-01-01
    """
    from .cashflow import detect_recurring_flows, summarize_forecast
    from .serialization import forecast_summary_to_dict
    from .utils import forecast_frame, format_currency

    settings = ctx.obj["settings"]
    data = _load_json(input_file)
    if not isinstance(data, dict):
        click.echo("Error: forecast input must be a JSON object", err=True)
        sys.exit(1)
    if days is not None:
        data["days"] = days
    request = _validate(ForecastRequest, data)
    start_day: Optional[date] = start.date() if start else None

    if "transactions" in data:
        transactions = [_validate(TransactionInput, t).to_record() for t in data["transactions"]]
        income, expenses = detect_recurring_flows(transactions, as_of=start_day)
        logger.debug("detected %d income and %d expense flows", len(income), len(expenses))
    else:
        income, expenses = request.income_flows(), request.expense_flows()

    summary = summarize_forecast(
        request.current_balance,
        income,
        expenses,
        request.days,
        start=start_day,
        low_balance_threshold=settings.low_balance_threshold,
    )

    table = Table(title=f"{request.days}-day Cash-flow Forecast", show_header=True)
    table.add_column("Date", style="cyan")
    table.add_column("Flows")
    table.add_column("Balance", justify="right", style="green")
    for day in summary.forecast:
        if day.label:
            table.add_row(day.date.isoformat(), day.label, format_currency(day.projected_balance))
    final = summary.forecast[-1]
    table.add_row(final.date.isoformat(), "end", format_currency(final.projected_balance))
    table.caption = (
        f"Minimum projected balance {format_currency(summary.minimum_projected_balance)}"
        + (" - LOW BALANCE ALERT" if summary.low_balance_alert else "")
    )

    lines = [
        f"Final balance: {format_currency(final.projected_balance)}",
        f"Minimum projected balance: {format_currency(summary.minimum_projected_balance)}",
    ]
    if summary.low_balance_alert:
        lines.append("Low balance alert")
    _emit(ctx, table, lines)

    if output:
        _write_output(output, forecast_summary_to_dict(summary), forecast_frame(summary.forecast))
        if not ctx.obj["quiet"]:
            click.echo(f"Results saved to {output}")

    if plot:
        from .plotting import plot_cash_flow
        _save_plot(plot_cash_flow, plot, summary.forecast,
                   low_balance_threshold=settings.low_balance_threshold)


if __name__ == "__main__":
    main()
