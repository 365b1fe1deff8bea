#!/usr/bin/env python3
"""
Schedule CLI - Generate and inspect payment schedules.
"""

import click

from ..core.errors import ObligationError
from ..ledger.models import CreditAccount
from ..schedule.generator import generate as generate_schedules
from ..schedule.linked_accounts import sync_linked_billers
from ..schedule.models import PaymentSchedule
from ..schedule.status import derive_status
from .context import get_engine, parse_date


def _format_schedule(schedule: PaymentSchedule, status: str | None = None) -> str:
    paid = str(schedule.paid_amount) if schedule.paid_amount is not None else "-"
    line = f"{schedule.label:<28} expected {str(schedule.expected_amount):>10}  paid {paid:>10}"
    if status:
        line += f"  {status}"
    if schedule.id:
        line += f"  [{schedule.id}]"
    return line


@click.group()
def schedule() -> None:
    """Generate and inspect payment schedules."""
    pass


@schedule.command()
@click.argument("obligation_id")
@click.option("--horizon", type=int, help="Months to schedule for billers (default: SCHEDULE_HORIZON_MONTHS)")
@click.option("--save", is_flag=True, help="Store schedules for periods that have none yet")
@click.pass_context
def generate(ctx: click.Context, obligation_id: str, horizon: int | None, save: bool) -> None:
    """
    Preview (or store) the schedules generated for an obligation.

    Examples:
      obligations schedule generate internet
      obligations schedule generate internet --horizon 24 --save
    """
    engine = get_engine(ctx)
    try:
        obligation = engine.obligations.get_obligation(obligation_id)
        generated = generate_schedules(obligation, horizon or engine.config.schedule.horizon_months)
    except (ObligationError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    for item in generated:
        click.echo(_format_schedule(item))

    if save:
        stored = engine.schedules.add_schedules(generated)
        click.echo(f"\nStored {len(stored)} new schedules ({len(generated) - len(stored)} already existed)")


@schedule.command("list")
@click.argument("obligation_id")
@click.option("--as-of", "as_of_str", help="Reference date for status (YYYY-MM-DD), defaults to today")
@click.pass_context
def list_schedules(ctx: click.Context, obligation_id: str, as_of_str: str | None) -> None:
    """List stored schedules of an obligation with their status."""
    engine = get_engine(ctx)
    as_of = parse_date(as_of_str, "--as-of")
    try:
        obligation = engine.obligations.get_obligation(obligation_id)
    except ObligationError as e:
        raise click.ClickException(str(e)) from e

    schedules = engine.schedules.list_for_obligation(obligation_id)
    click.echo(f"{obligation.name}: {len(schedules)} schedules")
    for item in schedules:
        click.echo(_format_schedule(item, derive_status(item, as_of).value))


@schedule.command()
@click.argument("schedule_id")
@click.option("--as-of", "as_of_str", help="Reference date for status (YYYY-MM-DD), defaults to today")
@click.pass_context
def status(ctx: click.Context, schedule_id: str, as_of_str: str | None) -> None:
    """Show one schedule's payment state."""
    engine = get_engine(ctx)
    as_of = parse_date(as_of_str, "--as-of")
    try:
        item = engine.schedules.get_schedule(schedule_id)
    except ObligationError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Schedule: {item.label}")
    click.echo(f"  Status: {derive_status(item, as_of).value}")
    click.echo(f"  Expected: {item.expected_amount}")
    click.echo(f"  Paid: {item.paid_amount if item.paid_amount is not None else '-'}")
    if item.date_paid:
        click.echo(f"  Date Paid: {item.date_paid.isoformat()}")
    if item.linked_transaction_id:
        click.echo(f"  Transaction: {item.linked_transaction_id}")


@schedule.command("sync-linked")
@click.option(
    "--account",
    "accounts",
    multiple=True,
    required=True,
    help="Credit account and its billing day as ACCOUNT_ID:DAY (repeatable)",
)
@click.pass_context
def sync_linked(ctx: click.Context, accounts: tuple[str, ...]) -> None:
    """
    Set unpaid schedules of linked loan billers from their account's cycle totals.

    Examples:
      obligations schedule sync-linked --account card-1:12
    """
    engine = get_engine(ctx)
    try:
        parsed = [CreditAccount.parse(text) for text in accounts]
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--account") from e

    results = sync_linked_billers(engine.obligations, engine.schedules, engine.ledger, parsed)
    if not results:
        click.echo("No linked billers for the given accounts")
        return

    for result in results:
        click.echo(
            f"{result.biller_id} ({result.account_id}): {len(result.updated)} updated, "
            f"{result.unchanged} unchanged, {result.skipped_paid} paid"
        )
        for item in result.updated:
            click.echo(f"  {_format_schedule(item)}")
