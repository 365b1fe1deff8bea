#!/usr/bin/env python3
"""
Error Taxonomy for the Obligation Engine

Generation and payment errors are raised synchronously to the caller and are
never retried inside the engine. Reconciliation discrepancies are not errors;
they are reported as data in a SyncReport.
"""


class ObligationError(Exception):
    """Base class for all engine errors."""


class InvalidObligationError(ObligationError, ValueError):
    """Raised when an obligation has an unusable cadence or amount."""


class MissingCadenceAnchorError(InvalidObligationError):
    """Raised when an obligation has no day or date to schedule from."""


class ObligationNotFoundError(ObligationError, KeyError):
    """Raised when an obligation id is not in the Obligation Store."""


class ScheduleNotFoundError(ObligationError, KeyError):
    """Raised when a payment schedule id (or period) has no stored schedule."""


class DuplicatePaymentError(ObligationError):
    """Raised when a schedule already has a linked ledger transaction."""

    def __init__(self, schedule_id: str, existing_transaction_id: str | None = None):
        self.schedule_id = schedule_id
        self.existing_transaction_id = existing_transaction_id
        detail = f" (linked to transaction {existing_transaction_id})" if existing_transaction_id else ""
        super().__init__(f"Schedule {schedule_id} already has a recorded payment{detail}")


class InvalidPaymentAmountError(ObligationError, ValueError):
    """Raised when a payment amount is not strictly positive."""


class OutOfOrderPaymentError(ObligationError):
    """Raised when an installment payment skips a lower-numbered unpaid schedule."""

    def __init__(self, schedule_id: str, payment_number: int | None, expected_number: int | None):
        self.schedule_id = schedule_id
        self.payment_number = payment_number
        self.expected_number = expected_number
        super().__init__(
            f"Installment payment {payment_number} cannot be applied before payment {expected_number}"
        )


class InvalidPeriodRangeError(ObligationError, ValueError):
    """
    Start period after end period.

    Projection treats a reversed range as an empty result rather than raising;
    this exists for callers that want to surface the condition themselves.
    """


class PartialApplyFailure(ObligationError):
    """
    Ledger entry was written but the schedule update failed.

    Attributes:
        schedule_id: Schedule the payment targeted
        transaction_id: Ledger entry that was created
        rolled_back: True if the ledger entry was deleted again, False if it was
            left in place and marked orphaned for the reconciliation sweep
    """

    def __init__(self, schedule_id: str, transaction_id: str, rolled_back: bool):
        self.schedule_id = schedule_id
        self.transaction_id = transaction_id
        self.rolled_back = rolled_back
        outcome = "ledger entry rolled back" if rolled_back else "ledger entry marked orphaned"
        super().__init__(
            f"Payment for schedule {schedule_id} only partially applied "
            f"(transaction {transaction_id}): {outcome}"
        )
