#!/usr/bin/env python3
"""
Budget CLI - Budget snapshots, projections and installment payoff.
"""

import click

from ..budget.models import DEFAULT_CATEGORY, BudgetSnapshot, LineItem
from ..budget.projection import (
    ProjectionEngine,
    best_month,
    installment_payoff,
    monthly_average,
    to_dataframe,
    worst_month,
)
from ..core.errors import ObligationError
from ..core.json_utils import format_json
from ..schedule.models import Installment
from .context import get_engine, parse_budget_period, parse_money


def _parse_item(value: str) -> tuple[str, LineItem]:
    """Parse "CATEGORY:NAME:AMOUNT" (category optional)."""
    parts = value.rsplit(":", 2)
    if len(parts) == 2:
        parts = [DEFAULT_CATEGORY, *parts]
    if len(parts) != 3 or not parts[1]:
        raise click.BadParameter(f"Invalid item {value!r}, expected CATEGORY:NAME:AMOUNT", param_hint="--item")
    category, name, amount = parts
    return category or DEFAULT_CATEGORY, LineItem(name=name, amount=parse_money(amount, "--item"))


@click.group()
def snapshot() -> None:
    """Create and inspect budget snapshots."""
    pass


@snapshot.command("save")
@click.argument("period_str", metavar="PERIOD")
@click.option("--projected-salary", help="Projected salary for the period")
@click.option("--actual-salary", help="Actual salary (overrides projected once set)")
@click.option("--item", "items", multiple=True, help="Line item as CATEGORY:NAME:AMOUNT")
@click.option("--fold-in/--no-fold-in", default=True, help="Add stored obligation schedules of the period")
@click.option("--draft", is_flag=True, help="Keep the snapshot in draft status")
@click.pass_context
def save_snapshot(
    ctx: click.Context,
    period_str: str,
    projected_salary: str | None,
    actual_salary: str | None,
    items: tuple,
    fold_in: bool,
    draft: bool,
) -> None:
    """
    Create or update the budget snapshot of a month half.

    Examples:
      obligations snapshot save 2026-01-1/2 --projected-salary 11000 --item Food:Groceries:800
      obligations snapshot save 2026-01-1/2 --actual-salary 9500 --no-fold-in
    """
    engine = get_engine(ctx)
    period = parse_budget_period(period_str)
    snap = engine.snapshots.get_snapshot(period) or BudgetSnapshot(period=period)

    if projected_salary is not None:
        snap.projected_salary = parse_money(projected_salary, "--projected-salary")
    if actual_salary is not None:
        snap.actual_salary = parse_money(actual_salary, "--actual-salary")
    for raw in items:
        category, item = _parse_item(raw)
        snap.add_item(category, item)

    added = 0
    if fold_in:
        added = snap.fold_in_schedules(engine.schedules.all_schedules(), engine.obligations.list_obligations())
    snap.status = "draft" if draft else "saved"
    engine.snapshots.save_snapshot(snap)

    click.echo(
        f"Saved snapshot {snap.period} ({snap.status}): total {snap.total_amount}, {added} obligations folded in"
    )


@snapshot.command("show")
@click.argument("period_str", metavar="PERIOD")
@click.pass_context
def show_snapshot(ctx: click.Context, period_str: str) -> None:
    """Show a budget snapshot."""
    engine = get_engine(ctx)
    snap = engine.snapshots.get_snapshot(parse_budget_period(period_str))
    if snap is None:
        raise click.ClickException(f"No snapshot for {period_str}")

    click.echo(f"Snapshot {snap.period} ({snap.status})")
    click.echo(f"  Projected Salary: {snap.projected_salary if snap.projected_salary is not None else '-'}")
    click.echo(f"  Actual Salary: {snap.actual_salary if snap.actual_salary is not None else '-'}")
    for category, category_items in sorted(snap.categories.items()):
        click.echo(f"  {category}:")
        for item in category_items:
            marker = " " if item.included else "x"
            click.echo(f"    [{marker}] {item.name:<24} {str(item.amount):>10}")
    click.echo(f"  Total: {snap.total_amount}")
    click.echo(f"  Remaining: {snap.income - snap.total_amount}")


@click.command()
@click.argument("start_str", metavar="START")
@click.argument("end_str", metavar="END")
@click.option("--averages", is_flag=True, help="Also show monthly averages with best and worst month")
@click.option("--json", "as_json", is_flag=True, help="Output projections as JSON")
@click.pass_context
def project(ctx: click.Context, start_str: str, end_str: str, averages: bool, as_json: bool) -> None:
    """
    Project income, obligated spend and remaining from START to END.

    Examples:
      obligations project 2026-01-1/2 2026-06-2/2 --averages
    """
    engine = get_engine(ctx)
    start = parse_budget_period(start_str, "START")
    end = parse_budget_period(end_str, "END")
    projections = ProjectionEngine(engine.snapshots).project(start, end)

    if as_json:
        click.echo(format_json([p.to_dict() for p in projections]))
        return

    if not projections:
        click.echo("No periods in range")
        return

    df = to_dataframe(projections)
    for column in ["income", "total_obligated", "remaining"]:
        df[column] = df[column] / 100
    click.echo(df.to_string(index=False, float_format=lambda v: f"{v:.2f}"))

    if averages:
        monthly = monthly_average(projections)
        click.echo("\nMonthly averages:")
        for avg in monthly:
            click.echo(f"  {str(avg.period):<16} {str(avg.average_remaining):>12}")
        best = best_month(monthly)
        worst = worst_month(monthly)
        if best and worst:
            click.echo(f"Best month: {best.period} ({best.average_remaining})")
            click.echo(f"Worst month: {worst.period} ({worst.average_remaining})")


@click.command()
@click.argument("installment_id")
@click.pass_context
def payoff(ctx: click.Context, installment_id: str) -> None:
    """Show the payoff projection of an installment."""
    engine = get_engine(ctx)
    try:
        installment = engine.obligations.get_obligation(installment_id)
    except ObligationError as e:
        raise click.ClickException(str(e)) from e
    if not isinstance(installment, Installment):
        raise click.ClickException(f"Not an installment: {installment_id}")

    result = installment_payoff(installment, engine.schedules.list_for_obligation(installment_id))
    click.echo(f"{installment.name}: paid {result.paid_to_date} of {result.total_amount}")
    click.echo(f"  Remaining Balance: {result.remaining_balance}")
    click.echo(f"  Payments Remaining: {result.periods_remaining}")
    if result.is_paid_off:
        click.echo("  ✅ Paid off")
    else:
        click.echo(f"  Next Payment: #{result.next_payment_number}")
        click.echo(f"  Projected Completion: {result.projected_completion}")
