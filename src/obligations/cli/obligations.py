#!/usr/bin/env python3
"""
Obligation CLI - Create and manage billers and installments.
"""

import uuid

import click

from ..core.errors import ObligationError
from ..schedule.models import ActivationWindow, Biller, Installment
from .context import get_engine, parse_date, parse_money, parse_period


@click.group()
def obligation() -> None:
    """Create, list, deactivate and delete obligations."""
    pass


@obligation.command("add-biller")
@click.argument("name")
@click.option("--amount", required=True, help="Expected amount per month (e.g. 1500.00)")
@click.option("--due-day", type=int, help="Day of month the bill is due")
@click.option("--activation", "activation_str", required=True, help="First month to schedule (YYYY-MM)")
@click.option("--activation-day", type=int, help="Activation day, used when there is no due day")
@click.option("--category", default="", help="Category tag")
@click.option("--account", help="Paying account id")
@click.option("--id", "obligation_id", help="Obligation id (default: generated)")
@click.option("--horizon", type=int, help="Months to schedule (default: SCHEDULE_HORIZON_MONTHS)")
@click.pass_context
def add_biller(
    ctx: click.Context,
    name: str,
    amount: str,
    due_day: int | None,
    activation_str: str,
    activation_day: int | None,
    category: str,
    account: str | None,
    obligation_id: str | None,
    horizon: int | None,
) -> None:
    """
    Add a biller and generate its schedules.

    Examples:
      obligations obligation add-biller Internet --amount 1500 --due-day 10 --activation 2026-01
    """
    engine = get_engine(ctx)
    biller = Biller(
        id=obligation_id or str(uuid.uuid4()),
        name=name,
        category=category,
        expected_amount=parse_money(amount, "--amount"),
        activation=ActivationWindow(parse_period(activation_str, "--activation"), activation_day),
        due_day=due_day,
        linked_account_id=account,
    )

    try:
        stored = engine.service.create_obligation(biller, horizon or engine.config.schedule.horizon_months)
    except (ObligationError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"✅ Biller {biller.name} ({biller.id}): {len(stored)} schedules generated")


@obligation.command("add-installment")
@click.argument("name")
@click.option("--total", required=True, help="Total amount of the loan")
@click.option("--term", type=int, required=True, help="Number of monthly payments")
@click.option("--period-amount", help="Amount per payment (default: total split evenly)")
@click.option("--start", "start_str", help="Start date (YYYY-MM-DD), defaults to today")
@click.option("--category", default="", help="Category tag")
@click.option("--account", help="Installment account id")
@click.option("--id", "obligation_id", help="Obligation id (default: generated)")
@click.pass_context
def add_installment(
    ctx: click.Context,
    name: str,
    total: str,
    term: int,
    period_amount: str | None,
    start_str: str | None,
    category: str,
    account: str | None,
    obligation_id: str | None,
) -> None:
    """
    Add an installment and generate its full term of schedules.

    Examples:
      obligations obligation add-installment Laptop --total 60000 --period-amount 5000 --term 12 --start 2026-01-05
    """
    engine = get_engine(ctx)
    installment = Installment(
        id=obligation_id or str(uuid.uuid4()),
        name=name,
        category=category,
        total_amount=parse_money(total, "--total"),
        term_periods=term,
        period_amount=parse_money(period_amount, "--period-amount") if period_amount else None,
        start_date=parse_date(start_str, "--start"),
        linked_account_id=account,
    )

    try:
        stored = engine.service.create_obligation(installment, engine.config.schedule.horizon_months)
    except (ObligationError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"✅ Installment {installment.name} ({installment.id}): {len(stored)} schedules generated")


@obligation.command("list")
@click.pass_context
def list_obligations(ctx: click.Context) -> None:
    """List all obligations."""
    engine = get_engine(ctx)
    items = engine.obligations.list_obligations()
    if not items:
        click.echo("No obligations found")
        return

    for item in items:
        if isinstance(item, Biller):
            status = f"until {item.deactivation}" if item.deactivation else "open-ended"
            click.echo(f"{item.id}  biller       {item.name:<24} {str(item.expected_amount):>12}  ({status})")
        else:
            click.echo(
                f"{item.id}  installment  {item.name:<24} {str(item.expected_amount):>12}  "
                f"(paid {item.cumulative_paid} of {item.total_amount})"
            )


@obligation.command()
@click.argument("biller_id")
@click.option("--from", "window_str", required=True, help="First month no longer scheduled (YYYY-MM)")
@click.pass_context
def deactivate(ctx: click.Context, biller_id: str, window_str: str) -> None:
    """Soft-deactivate a biller. Existing schedules are kept."""
    engine = get_engine(ctx)
    try:
        biller = engine.service.deactivate(biller_id, parse_period(window_str, "--from"))
    except ObligationError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Biller {biller.name} deactivated from {biller.deactivation}")


@obligation.command()
@click.argument("obligation_id")
@click.confirmation_option(prompt="Delete this obligation and all of its schedules?")
@click.pass_context
def delete(ctx: click.Context, obligation_id: str) -> None:
    """Delete an obligation and cascade to its schedules."""
    engine = get_engine(ctx)
    try:
        count = engine.service.delete_obligation(obligation_id)
    except ObligationError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Deleted obligation {obligation_id} and {count} schedules")
