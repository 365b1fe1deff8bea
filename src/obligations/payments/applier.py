#!/usr/bin/env python3
"""
Payment Applier

State transitions that record a payment against one schedule instance,
together with the ledger entry that evidences it. The ledger's unique link
index is the guard against double payment: a second attempt on the same
schedule, whether sequential, concurrent or a caller retry, fails with
DuplicatePaymentError instead of recording money twice.
"""

import logging
from datetime import date

from ..core.errors import (
    DuplicatePaymentError,
    InvalidPaymentAmountError,
    OutOfOrderPaymentError,
    PartialApplyFailure,
)
from ..core.money import Money
from ..ledger.datastore import LedgerStore
from ..ledger.models import LedgerTransaction
from ..schedule.datastore import ObligationStore, ScheduleStore
from ..schedule.models import Installment, ObligationKind, PaymentSchedule

logger = logging.getLogger(__name__)


def recompute_cumulative_paid(
    installment: Installment, obligations: ObligationStore, schedules: ScheduleStore
) -> Money:
    """
    Recompute an installment's cumulative paid amount from its schedules and save it.

    Always a full re-sum over the stored schedules, never an increment.
    """
    paid = [s.paid_amount for s in schedules.list_for_obligation(installment.id) if s.paid_amount is not None]
    total = Money.sum(paid)
    installment.cumulative_paid = total
    obligations.save_obligation(installment)
    logger.debug("Installment %s cumulative paid is now %s", installment.id, total)
    return total


class PaymentApplier:
    """Applies and reverts payments on payment schedules."""

    def __init__(self, obligations: ObligationStore, schedules: ScheduleStore, ledger: LedgerStore):
        """
        Initialize the applier and subscribe to ledger deletion events.

        Args:
            obligations: Obligation Store
            schedules: Schedule Store
            ledger: Ledger Store
        """
        self.obligations = obligations
        self.schedules = schedules
        self.ledger = ledger
        ledger.subscribe(self.revert_transaction)

    def apply_payment(
        self,
        schedule_id: str,
        amount: Money,
        paid_on: date,
        account_id: str,
        note: str | None = None,
    ) -> PaymentSchedule:
        """
        Record a payment on a schedule and create its ledger entry.

        Both writes happen or neither does. The ledger entry is written first
        (its unique link index is the concurrency guard); if the schedule
        update then fails the entry is rolled back, or marked orphaned if the
        rollback itself fails.

        Args:
            schedule_id: Target schedule
            amount: Amount paid, must be positive
            paid_on: Payment date
            account_id: Paying account
            note: Optional free-text note

        Returns:
            The updated schedule

        Raises:
            ScheduleNotFoundError: Unknown schedule
            DuplicatePaymentError: Schedule already has a linked transaction
            InvalidPaymentAmountError: amount <= 0
            OutOfOrderPaymentError: Installment schedule is not the next payable one
            PartialApplyFailure: Ledger entry written but schedule update failed
        """
        schedule = self.schedules.get_schedule(schedule_id)
        if schedule.linked_transaction_id is not None:
            raise DuplicatePaymentError(schedule_id, schedule.linked_transaction_id)
        if not amount.is_positive():
            raise InvalidPaymentAmountError(f"Payment amount must be positive, got {amount}")

        obligation = self.obligations.get_obligation(schedule.obligation_id)
        if schedule.obligation_kind is ObligationKind.INSTALLMENT:
            next_schedule = self.next_payable(schedule.obligation_id)
            if next_schedule is None or next_schedule.id != schedule.id:
                raise OutOfOrderPaymentError(
                    schedule_id,
                    schedule.payment_number,
                    next_schedule.payment_number if next_schedule else None,
                )

        transaction = self.ledger.create_transaction(
            LedgerTransaction(
                name=obligation.name,
                date=paid_on,
                amount=amount,
                account_id=account_id,
                linked_schedule_id=schedule_id,
                note=note,
            )
        )

        try:
            updated = self.schedules.record_payment(
                schedule_id, amount, paid_on, account_id, transaction.id, note  # type: ignore[arg-type]
            )
        except Exception as e:
            rolled_back = self._roll_back(transaction)
            if isinstance(e, DuplicatePaymentError) and rolled_back:
                raise
            logger.error(
                "Partial payment application on schedule %s: ledger entry %s written, schedule update failed: %s",
                schedule_id,
                transaction.id,
                e,
            )
            raise PartialApplyFailure(schedule_id, transaction.id, rolled_back) from e  # type: ignore[arg-type]

        if isinstance(obligation, Installment):
            self.recompute_cumulative_paid(obligation)

        logger.info(
            "Applied payment of %s to schedule %s (%s %s) via transaction %s",
            amount,
            schedule_id,
            obligation.name,
            schedule.label,
            transaction.id,
        )
        return updated

    def _roll_back(self, transaction: LedgerTransaction) -> bool:
        """Undo a ledger write. Returns False (and orphans the entry) if that fails."""
        try:
            self.ledger.delete_transaction(transaction.id, notify=False)  # type: ignore[arg-type]
            return True
        except Exception:
            logger.exception("Rollback of ledger entry %s failed; marking orphaned", transaction.id)
            self.ledger.mark_orphaned(transaction.id)  # type: ignore[arg-type]
            return False

    def next_payable(self, installment_id: str) -> PaymentSchedule | None:
        """Lowest-numbered installment schedule with no payment recorded."""
        unpaid = [s for s in self.schedules.list_for_obligation(installment_id) if not s.has_payment]
        if not unpaid:
            return None
        return min(unpaid, key=lambda s: s.payment_number or 0)

    def recompute_cumulative_paid(self, installment: Installment) -> Money:
        return recompute_cumulative_paid(installment, self.obligations, self.schedules)

    def revert_transaction(self, transaction: LedgerTransaction) -> bool:
        """
        Return a schedule to unpaid after its ledger entry was deleted or voided.

        Idempotent: reverting an already-reverted schedule, or an event for a
        transaction with no link, is a no-op.

        Returns:
            True if a schedule was changed
        """
        schedule_id = transaction.linked_schedule_id
        if not schedule_id:
            return False

        changed = self.schedules.clear_payment(schedule_id, transaction.id)
        if not changed:
            return False

        schedule = self.schedules.get_schedule(schedule_id)
        if schedule.obligation_kind is ObligationKind.INSTALLMENT:
            obligation = self.obligations.get_obligation(schedule.obligation_id)
            self.recompute_cumulative_paid(obligation)  # type: ignore[arg-type]

        logger.info("Reverted schedule %s after ledger transaction %s was removed", schedule_id, transaction.id)
        return True
