"""
Obligation Scheduling Package

Billers and installments, the schedules generated from them, and the stores
that hold both.

Key Components:
- models: Biller, Installment, PaymentSchedule
- generator: Deterministic schedule generation
- status: pending/overdue/partial/paid derivation with an explicit as-of date
- datastore: Obligation and Schedule stores
- service: Create, edit (regenerate future), deactivate, delete
- linked_accounts: Expected amounts of billers linked to a credit account
"""

from .datastore import ObligationStore, ScheduleStore
from .generator import biller_start_period, generate
from .linked_accounts import LinkedSyncResult, sync_linked_billers, uses_linked_account
from .models import (
    ActivationWindow,
    Biller,
    Installment,
    Obligation,
    ObligationKind,
    PaymentSchedule,
    obligation_from_dict,
)
from .service import ObligationService
from .status import ScheduleStatus, derive_status, is_outstanding

__all__ = [
    "ActivationWindow",
    "Biller",
    "Installment",
    "LinkedSyncResult",
    "Obligation",
    "ObligationKind",
    "ObligationService",
    "ObligationStore",
    "PaymentSchedule",
    "ScheduleStatus",
    "ScheduleStore",
    "biller_start_period",
    "derive_status",
    "generate",
    "is_outstanding",
    "obligation_from_dict",
    "sync_linked_billers",
    "uses_linked_account",
]
