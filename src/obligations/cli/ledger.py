#!/usr/bin/env python3
"""
Ledger CLI - Apply payments and manage ledger transactions.
"""

import click

from ..core.errors import ObligationError, PartialApplyFailure
from ..ledger.billing_cycles import cycle_total, recent_cycles
from ..ledger.models import LedgerTransaction
from .context import get_engine, parse_date, parse_money, parse_period


@click.command()
@click.argument("schedule_id")
@click.argument("amount")
@click.option("--account", required=True, help="Paying account id")
@click.option("--date", "date_str", help="Payment date (YYYY-MM-DD), defaults to today")
@click.option("--note", help="Optional note")
@click.pass_context
def pay(
    ctx: click.Context, schedule_id: str, amount: str, account: str, date_str: str | None, note: str | None
) -> None:
    """
    Record a payment against a schedule.

    Examples:
      obligations pay 3f2c... 1500.00 --account X --date 2026-01-10
    """
    engine = get_engine(ctx)
    money = parse_money(amount)
    paid_on = parse_date(date_str, "--date")

    try:
        updated = engine.applier.apply_payment(schedule_id, money, paid_on, account, note)
    except PartialApplyFailure as e:
        click.echo(f"❌ {e}", err=True)
        if not e.rolled_back:
            click.echo("   Run 'obligations sweep' to review the orphaned ledger entry", err=True)
        raise click.ClickException(str(e)) from e
    except ObligationError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"✅ Paid {updated.paid_amount} on {updated.label} (transaction {updated.linked_transaction_id})")


@click.group()
def ledger() -> None:
    """Inspect and edit ledger transactions."""
    pass


@ledger.command("list")
@click.option("--period", "period_str", help="Only transactions in this month (YYYY-MM)")
@click.option("--account", help="Only transactions of this account")
@click.option("--include-voided", is_flag=True, help="Include voided transactions")
@click.pass_context
def list_transactions(
    ctx: click.Context, period_str: str | None, account: str | None, include_voided: bool
) -> None:
    """List ledger transactions."""
    engine = get_engine(ctx)
    if period_str:
        transactions = engine.ledger.get_transactions_for_period_and_account(
            parse_period(period_str, "--period"), account, include_voided
        )
    else:
        transactions = [
            t
            for t in engine.ledger.all_transactions()
            if (include_voided or t.is_live) and (account is None or t.account_id == account)
        ]

    if not transactions:
        click.echo("No transactions found")
        return

    for tx in transactions:
        flags = []
        if tx.voided:
            flags.append("voided")
        if tx.orphaned:
            flags.append("orphaned")
        if tx.linked_schedule_id:
            flags.append(f"schedule {tx.linked_schedule_id}")
        click.echo(
            f"{tx.date.isoformat()}  {tx.name:<24} {str(tx.amount):>10}  {tx.account_id:<10} "
            f"{', '.join(flags)}  [{tx.id}]"
        )


@ledger.command()
@click.argument("name")
@click.argument("amount")
@click.option("--account", required=True, help="Account id")
@click.option("--date", "date_str", help="Transaction date (YYYY-MM-DD), defaults to today")
@click.option("--note", help="Optional note")
@click.pass_context
def add(ctx: click.Context, name: str, amount: str, account: str, date_str: str | None, note: str | None) -> None:
    """Record an unlinked ledger transaction (e.g. a payment made outside the engine)."""
    engine = get_engine(ctx)
    tx = engine.ledger.create_transaction(
        LedgerTransaction(
            name=name,
            date=parse_date(date_str, "--date"),
            amount=parse_money(amount),
            account_id=account,
            note=note,
        )
    )
    click.echo(f"Added transaction {tx.id}")


@ledger.command()
@click.argument("transaction_id")
@click.pass_context
def delete(ctx: click.Context, transaction_id: str) -> None:
    """Delete a transaction; a linked schedule reverts to unpaid."""
    engine = get_engine(ctx)
    tx = engine.ledger.delete_transaction(transaction_id)
    if tx is None:
        raise click.ClickException(f"Ledger transaction not found: {transaction_id}")
    click.echo(f"Deleted transaction {transaction_id}")


@ledger.command()
@click.argument("transaction_id")
@click.pass_context
def void(ctx: click.Context, transaction_id: str) -> None:
    """Void a transaction; a linked schedule reverts to unpaid."""
    engine = get_engine(ctx)
    try:
        engine.ledger.void_transaction(transaction_id)
    except KeyError as e:
        raise click.ClickException(f"Ledger transaction not found: {transaction_id}") from e
    click.echo(f"Voided transaction {transaction_id}")


@ledger.command()
@click.argument("account_id")
@click.option("--billing-day", type=click.IntRange(1, 31), required=True, help="Day the account bills on")
@click.option("--count", type=click.IntRange(min=1), default=6, show_default=True, help="Cycles to show")
@click.option("--as-of", "as_of_str", help="Show cycles up to this date (YYYY-MM-DD), defaults to today")
@click.pass_context
def cycles(ctx: click.Context, account_id: str, billing_day: int, count: int, as_of_str: str | None) -> None:
    """
    Total a credit account's transactions per billing cycle.

    Examples:
      obligations ledger cycles card-1 --billing-day 12 --count 3
    """
    engine = get_engine(ctx)
    as_of = parse_date(as_of_str, "--as-of")
    for item in recent_cycles(billing_day, count, as_of):
        totals = cycle_total(engine.ledger, account_id, item)
        click.echo(f"{item.label:<28} {str(totals.total):>10}  ({len(totals.transactions)} transactions)")
