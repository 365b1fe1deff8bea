#!/usr/bin/env python3
"""
Payment Reconciler

Compares the payment state stored on schedules against ledger evidence and
reports the discrepancy. Reconciliation only reads; `apply_correction` is the
single explicit mutation path.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

from ..core.dates import Period, TimingBucket
from ..core.errors import DuplicatePaymentError, InvalidPaymentAmountError, ScheduleNotFoundError
from ..core.money import Money
from ..ledger.datastore import LedgerStore
from ..ledger.models import LedgerTransaction
from ..payments.applier import recompute_cumulative_paid
from ..schedule.datastore import ObligationStore, ScheduleStore
from ..schedule.models import Installment, PaymentSchedule
from .matcher import MatchResult, MatchStrategy, default_strategies

logger = logging.getLogger(__name__)


class Recommendation(Enum):
    """What to do about a reconciliation result."""

    NO_ACTION = "no action"
    ACCEPT_LEDGER = "accept ledger value"
    INVESTIGATE = "investigate manually"


@dataclass
class SyncReport:
    """Stored vs. ledger-derived payment state for one schedule."""

    obligation_id: str
    schedule_id: str
    period: Period
    timing: TimingBucket | None
    stored_paid_amount: Money | None
    ledger_derived_paid_amount: Money
    match_method: str
    matched_transaction_ids: list[str] = field(default_factory=list)

    @property
    def difference(self) -> Money:
        """Stored minus ledger-derived (an unset stored amount counts as zero)."""
        stored = self.stored_paid_amount if self.stored_paid_amount is not None else Money.zero()
        return stored - self.ledger_derived_paid_amount

    @property
    def in_sync(self) -> bool:
        return self.difference.is_zero()

    @property
    def recommendation(self) -> Recommendation:
        if self.in_sync:
            return Recommendation.NO_ACTION
        stored = self.stored_paid_amount
        if stored is not None and not stored.is_zero() and self.ledger_derived_paid_amount.is_zero():
            # Paid on record but nothing in the ledger: cash payment or a naming mismatch
            return Recommendation.INVESTIGATE
        return Recommendation.ACCEPT_LEDGER

    def to_dict(self) -> dict[str, Any]:
        return {
            "obligation_id": self.obligation_id,
            "schedule_id": self.schedule_id,
            "period": self.period.to_key(),
            "timing": self.timing.value if self.timing else None,
            "stored_paid_amount": (
                self.stored_paid_amount.to_cents() if self.stored_paid_amount is not None else None
            ),
            "ledger_derived_paid_amount": self.ledger_derived_paid_amount.to_cents(),
            "difference": self.difference.to_cents(),
            "in_sync": self.in_sync,
            "recommendation": self.recommendation.value,
            "match_method": self.match_method,
            "matched_transaction_ids": list(self.matched_transaction_ids),
        }


@dataclass
class SweepReport:
    """Result of reconciling every stored schedule."""

    as_of: date | None
    reports: list[SyncReport] = field(default_factory=list)
    orphaned: list[LedgerTransaction] = field(default_factory=list)

    @property
    def discrepancies(self) -> list[SyncReport]:
        return [r for r in self.reports if not r.in_sync]

    @property
    def is_clean(self) -> bool:
        return not self.discrepancies and not self.orphaned

    def to_dict(self) -> dict[str, Any]:
        return {
            "as_of": self.as_of.isoformat() if self.as_of else None,
            "checked": len(self.reports),
            "discrepancies": [r.to_dict() for r in self.discrepancies],
            "orphaned": [t.to_dict() for t in self.orphaned],
        }


class Reconciler:
    """Reconciles schedules against the ledger."""

    def __init__(
        self,
        obligations: ObligationStore,
        schedules: ScheduleStore,
        ledger: LedgerStore,
        strategies: list[MatchStrategy] | None = None,
        fuzzy_matching: bool = True,
    ):
        """
        Initialize the reconciler.

        Args:
            obligations: Obligation Store
            schedules: Schedule Store
            ledger: Ledger Store
            strategies: Matching strategies in the order they are tried
                (default: linked transaction, then fuzzy match)
            fuzzy_matching: Whether the default strategies include fuzzy matching
        """
        self.obligations = obligations
        self.schedules = schedules
        self.ledger = ledger
        self.strategies = strategies if strategies is not None else default_strategies(fuzzy_matching)

    def _match(self, schedule: PaymentSchedule) -> MatchResult:
        obligation = self.obligations.get_obligation(schedule.obligation_id)
        for strategy in self.strategies:
            if strategy.applies_to(schedule):
                return strategy.match(schedule, obligation, self.ledger)
        return MatchResult(method="none")

    def reconcile_schedule(self, schedule: PaymentSchedule) -> SyncReport:
        """Build the sync report for one stored schedule."""
        result = self._match(schedule)
        report = SyncReport(
            obligation_id=schedule.obligation_id,
            schedule_id=schedule.id,  # type: ignore[arg-type]
            period=schedule.period,
            timing=schedule.timing,
            stored_paid_amount=schedule.paid_amount,
            ledger_derived_paid_amount=result.amount,
            match_method=result.method,
            matched_transaction_ids=result.transaction_ids,
        )
        logger.debug(
            "Reconciled %s: stored=%s ledger=%s (%s)",
            schedule.id,
            schedule.paid_amount,
            result.amount,
            report.recommendation.value,
        )
        return report

    def reconcile(self, obligation_id: str, period: Period, timing: TimingBucket | None = None) -> SyncReport:
        """
        Reconcile an obligation's schedule for one period.

        Args:
            obligation_id: Biller or installment id
            period: Calendar month
            timing: Timing half, to disambiguate if needed

        Returns:
            SyncReport

        Raises:
            ObligationNotFoundError: Unknown obligation
            ScheduleNotFoundError: No schedule for that period
        """
        self.obligations.get_obligation(obligation_id)
        schedule = self.schedules.find(obligation_id, period, timing)
        if schedule is None:
            raise ScheduleNotFoundError(f"No schedule for obligation {obligation_id} in {period}")
        return self.reconcile_schedule(schedule)

    def apply_correction(
        self, schedule_id: str, new_paid_amount: Money, link_transaction_id: str | None = None
    ) -> PaymentSchedule:
        """
        Overwrite a schedule's paid amount, optionally linking a ledger entry.

        Re-validates that at most one live ledger transaction is linked to the
        schedule. Linking goes through the ledger's unique link index, so a
        schedule that gained a different link concurrently is rejected.

        Args:
            schedule_id: Schedule to correct
            new_paid_amount: Corrected paid amount (>= 0)
            link_transaction_id: Ledger entry to link, e.g. a fuzzy match

        Returns:
            The updated schedule

        Raises:
            ScheduleNotFoundError: Unknown schedule
            InvalidPaymentAmountError: Negative amount
            DuplicatePaymentError: The schedule has, or would get, more than one live link
        """
        schedule = self.schedules.get_schedule(schedule_id)
        if new_paid_amount < Money.zero():
            raise InvalidPaymentAmountError(f"Corrected amount cannot be negative, got {new_paid_amount}")

        linked = self.ledger.transactions_for_schedule(schedule_id)
        if len(linked) > 1:
            raise DuplicatePaymentError(schedule_id, linked[0].id)

        date_paid = None
        account_id = None
        if link_transaction_id is not None:
            if schedule.linked_transaction_id not in (None, link_transaction_id):
                raise DuplicatePaymentError(schedule_id, schedule.linked_transaction_id)
            tx = self.ledger.link_transaction(link_transaction_id, schedule_id)
            date_paid = tx.date
            account_id = tx.account_id

        updated = self.schedules.update_paid_amount(
            schedule_id, new_paid_amount, link_transaction_id, date_paid=date_paid, account_id=account_id
        )

        obligation = self.obligations.get_obligation(schedule.obligation_id)
        if isinstance(obligation, Installment):
            recompute_cumulative_paid(obligation, self.obligations, self.schedules)

        logger.info(
            "Corrected schedule %s paid amount to %s%s",
            schedule_id,
            new_paid_amount,
            f" (linked {link_transaction_id})" if link_transaction_id else "",
        )
        return updated

    def sweep(self, as_of: date | None = None) -> SweepReport:
        """
        Reconcile every stored schedule and collect orphaned ledger entries.

        Args:
            as_of: Only check schedules whose period has started by this date

        Returns:
            SweepReport
        """
        sweep = SweepReport(as_of=as_of)
        for schedule in self.schedules.all_schedules():
            if as_of is not None and schedule.period.first_day > as_of:
                continue
            sweep.reports.append(self.reconcile_schedule(schedule))
        sweep.orphaned = self.ledger.orphaned_transactions()

        if sweep.orphaned:
            logger.warning("Sweep found %d orphaned ledger entries", len(sweep.orphaned))
        logger.info(
            "Sweep checked %d schedules: %d discrepancies", len(sweep.reports), len(sweep.discrepancies)
        )
        return sweep
