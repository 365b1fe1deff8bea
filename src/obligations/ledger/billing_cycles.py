#!/usr/bin/env python3
"""
Credit Account Billing Cycles

A credit account bills on a fixed day of the month. Each billing cycle runs
from that day up to the day before the next billing day. Billing days past
the end of a short month fall on its last day, so a day-31 account opens
its February cycle on Feb 28 and the cycles stay contiguous.

Transactions posted to the account are totalled per cycle; linked billers
take their expected amount from these totals.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta

from ..core.dates import Period
from ..core.money import Money
from .datastore import LedgerStore
from .models import LedgerTransaction

logger = logging.getLogger(__name__)

# Day of a schedule's month whose cycle that schedule is billed from
CYCLE_REFERENCE_DAY = 15


@dataclass(frozen=True)
class BillingCycle:
    """One billing cycle of a credit account, both ends inclusive."""

    start: date
    end: date

    @classmethod
    def starting_in(cls, period: Period, billing_day: int) -> "BillingCycle":
        """Cycle that opens on the billing day of `period`."""
        if not 1 <= billing_day <= 31:
            raise ValueError(f"Billing day must be between 1 and 31, got {billing_day}")
        start = period.day(billing_day)
        end = period.shift(1).day(billing_day) - timedelta(days=1)
        return cls(start=start, end=end)

    @classmethod
    def containing(cls, value: date, billing_day: int) -> "BillingCycle":
        period = Period.from_date(value)
        cycle = cls.starting_in(period, billing_day)
        if value < cycle.start:
            cycle = cls.starting_in(period.shift(-1), billing_day)
        return cycle

    @classmethod
    def for_period(cls, period: Period, billing_day: int) -> "BillingCycle":
        """Cycle a schedule for `period` is billed from (the one holding its 15th)."""
        return cls.containing(period.day(CYCLE_REFERENCE_DAY), billing_day)

    def contains(self, value: date) -> bool:
        return self.start <= value <= self.end

    @property
    def label(self) -> str:
        """Display form, e.g. "Jan 12 - Feb 11, 2026"."""
        return f"{self.start:%b} {self.start.day} - {self.end:%b} {self.end.day}, {self.end.year}"


@dataclass
class CycleTotal:
    """Live transactions posted to an account within one billing cycle."""

    cycle: BillingCycle
    transactions: list[LedgerTransaction] = field(default_factory=list)

    @property
    def total(self) -> Money:
        return Money.sum([t.amount for t in self.transactions])


def recent_cycles(billing_day: int, count: int, as_of: date) -> list[BillingCycle]:
    """
    The last `count` cycles, oldest first, ending with the one holding `as_of`.

    Raises:
        ValueError: If count < 1 or the billing day is out of range
    """
    if count < 1:
        raise ValueError(f"count must be at least 1, got {count}")
    current = BillingCycle.containing(as_of, billing_day)
    first = Period.from_date(current.start).shift(-(count - 1))
    return [BillingCycle.starting_in(first.shift(i), billing_day) for i in range(count)]


def aggregate_by_cycle(
    transactions: Iterable[LedgerTransaction], cycles: Iterable[BillingCycle]
) -> list[CycleTotal]:
    """Bucket transactions into cycles. Transactions outside every cycle are dropped."""
    totals = [CycleTotal(cycle) for cycle in cycles]
    for tx in transactions:
        for bucket in totals:
            if bucket.cycle.contains(tx.date):
                bucket.transactions.append(tx)
                break
    return totals


def cycle_total(ledger: LedgerStore, account_id: str, cycle: BillingCycle) -> CycleTotal:
    """Live transactions of one account within one cycle, read from the ledger."""
    transactions = ledger.get_transactions_for_account(account_id, cycle.start, cycle.end)
    logger.debug("Account %s cycle %s: %d transactions", account_id, cycle.label, len(transactions))
    return CycleTotal(cycle, transactions)
