#!/usr/bin/env python3
"""
Linked-Account Billers

A loan-category biller linked to a credit account pays off that account's
statement. Its expected amount for a period is what was charged to the
account during the billing cycle the period is billed from, not the fixed
amount stored on the biller.

Syncing writes those cycle totals onto the biller's unpaid schedules. Paid
schedules keep the amount they were paid against. A cycle with no
transactions leaves the schedule's amount alone.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from ..core.money import Money
from ..ledger.billing_cycles import BillingCycle, cycle_total
from ..ledger.datastore import LedgerStore
from ..ledger.models import CreditAccount
from .datastore import ObligationStore, ScheduleStore
from .models import Biller, ObligationKind, PaymentSchedule

logger = logging.getLogger(__name__)

LINKED_CATEGORY_PREFIX = "Loans"


def uses_linked_account(biller: Biller) -> bool:
    """True for loan-category billers that name a linked account."""
    return biller.category.startswith(LINKED_CATEGORY_PREFIX) and bool(biller.linked_account_id)


@dataclass
class LinkedAmount:
    """Expected amount of one schedule and whether it came from the linked account."""

    amount: Money
    from_linked_account: bool
    cycle: BillingCycle | None = None


def schedule_expected_amount(
    biller: Biller,
    schedule: PaymentSchedule,
    accounts: Mapping[str, CreditAccount],
    ledger: LedgerStore,
) -> LinkedAmount:
    """
    Expected amount of a biller schedule, taken from the linked account when possible.

    Falls back to the schedule's own expected amount when the biller is not
    linked, the account is unknown, or the cycle has no transactions.
    """
    fallback = LinkedAmount(schedule.expected_amount, False)
    if not uses_linked_account(biller):
        return fallback

    account = accounts.get(biller.linked_account_id)  # type: ignore[arg-type]
    if account is None:
        logger.warning(
            "Linked account %s not found for biller %s (%s)", biller.linked_account_id, biller.id, biller.name
        )
        return fallback

    cycle = BillingCycle.for_period(schedule.period, account.billing_day)
    totals = cycle_total(ledger, account.id, cycle)
    if not totals.transactions:
        logger.debug("No transactions on %s in cycle %s for %s", account.id, cycle.label, schedule.label)
        return LinkedAmount(schedule.expected_amount, False, cycle)
    return LinkedAmount(totals.total, True, cycle)


@dataclass
class LinkedSyncResult:
    """Outcome of syncing one linked biller."""

    biller_id: str
    account_id: str
    updated: list[PaymentSchedule] = field(default_factory=list)
    unchanged: int = 0
    skipped_paid: int = 0


def sync_linked_biller(
    biller: Biller, account: CreditAccount, schedules: ScheduleStore, ledger: LedgerStore
) -> LinkedSyncResult:
    """Set the expected amount of each unpaid schedule of a linked biller from its cycle total."""
    result = LinkedSyncResult(biller_id=biller.id, account_id=account.id)
    accounts = {account.id: account}

    for schedule in schedules.list_for_obligation(biller.id):
        if schedule.has_payment:
            result.skipped_paid += 1
            continue
        linked = schedule_expected_amount(biller, schedule, accounts, ledger)
        if not linked.from_linked_account or linked.amount == schedule.expected_amount:
            result.unchanged += 1
            continue
        updated = schedules.update_expected_amount(schedule.id, linked.amount)  # type: ignore[arg-type]
        if updated is None:
            # Paid since it was listed
            result.skipped_paid += 1
            continue
        result.updated.append(updated)

    logger.info(
        "Synced linked biller %s from account %s: %d updated, %d unchanged, %d paid",
        biller.id,
        account.id,
        len(result.updated),
        result.unchanged,
        result.skipped_paid,
    )
    return result


def sync_linked_billers(
    obligations: ObligationStore,
    schedules: ScheduleStore,
    ledger: LedgerStore,
    accounts: Iterable[CreditAccount],
) -> list[LinkedSyncResult]:
    """Sync every linked biller whose account is among `accounts`."""
    by_id = {account.id: account for account in accounts}
    results = []
    for biller in obligations.list_obligations(kind=ObligationKind.BILLER):
        if not uses_linked_account(biller):  # type: ignore[arg-type]
            continue
        account = by_id.get(biller.linked_account_id)  # type: ignore[arg-type, union-attr]
        if account is None:
            logger.debug(
                "No billing day given for account %s of biller %s", biller.linked_account_id, biller.id
            )
            continue
        results.append(sync_linked_biller(biller, account, schedules, ledger))  # type: ignore[arg-type]
    return results
