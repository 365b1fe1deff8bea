#!/usr/bin/env python3
"""
Reconciliation CLI - Compare schedules against the ledger.
"""

import click

from ..core.dates import TimingBucket
from ..core.errors import ObligationError
from ..core.json_utils import format_json
from ..reconcile.reconciler import SyncReport
from .context import get_engine, parse_date, parse_money, parse_period


def _echo_report(report: SyncReport) -> None:
    stored = str(report.stored_paid_amount) if report.stored_paid_amount is not None else "-"
    marker = "✅" if report.in_sync else "⚠️"
    click.echo(f"{marker} {report.period} [{report.schedule_id}]")
    click.echo(f"   Stored: {stored}  Ledger: {report.ledger_derived_paid_amount}  Difference: {report.difference}")
    click.echo(f"   Match: {report.match_method}  Recommendation: {report.recommendation.value}")


@click.command()
@click.argument("obligation_id")
@click.argument("period_str", metavar="PERIOD")
@click.option("--timing", type=click.Choice([t.value for t in TimingBucket]), help="Timing half")
@click.option("--json", "as_json", is_flag=True, help="Output the report as JSON")
@click.pass_context
def reconcile(ctx: click.Context, obligation_id: str, period_str: str, timing: str | None, as_json: bool) -> None:
    """
    Reconcile an obligation's schedule for one month.

    Examples:
      obligations reconcile internet 2026-01
      obligations reconcile internet "January 2026" --json
    """
    engine = get_engine(ctx)
    period = parse_period(period_str)
    try:
        report = engine.reconciler.reconcile(obligation_id, period, TimingBucket(timing) if timing else None)
    except ObligationError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(format_json(report.to_dict()))
    else:
        _echo_report(report)


@click.command()
@click.argument("schedule_id")
@click.argument("amount")
@click.option("--link", "link_transaction_id", help="Ledger transaction to link to the schedule")
@click.pass_context
def correct(ctx: click.Context, schedule_id: str, amount: str, link_transaction_id: str | None) -> None:
    """Correct a schedule's paid amount, optionally linking a ledger transaction."""
    engine = get_engine(ctx)
    try:
        updated = engine.reconciler.apply_correction(schedule_id, parse_money(amount), link_transaction_id)
    except (ObligationError, KeyError, ValueError) as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Corrected {updated.label}: paid {updated.paid_amount}")


@click.command()
@click.option("--as-of", "as_of_str", help="Only schedules whose month has started by this date (YYYY-MM-DD)")
@click.option("--json", "as_json", is_flag=True, help="Output the sweep as JSON")
@click.pass_context
def sweep(ctx: click.Context, as_of_str: str | None, as_json: bool) -> None:
    """Reconcile every stored schedule and list orphaned ledger entries."""
    engine = get_engine(ctx)
    as_of = parse_date(as_of_str, "--as-of") if as_of_str else None
    try:
        result = engine.reconciler.sweep(as_of)
    except ObligationError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(format_json(result.to_dict()))
        return

    click.echo(f"Checked {len(result.reports)} schedules")
    for report in result.discrepancies:
        _echo_report(report)
    for tx in result.orphaned:
        click.echo(f"⚠️ Orphaned ledger entry {tx.id}: {tx.name} {tx.amount} on {tx.date.isoformat()}")
    if result.is_clean:
        click.echo("✅ Everything in sync")
