"""
Ledger Package

Ledger transactions, the store that enforces one live transaction per
payment schedule, and the billing cycles of credit accounts.
"""

from .billing_cycles import BillingCycle, CycleTotal, aggregate_by_cycle, cycle_total, recent_cycles
from .datastore import LedgerStore, TransactionListener
from .models import CreditAccount, LedgerTransaction

__all__ = [
    "BillingCycle",
    "CreditAccount",
    "CycleTotal",
    "LedgerStore",
    "LedgerTransaction",
    "TransactionListener",
    "aggregate_by_cycle",
    "cycle_total",
    "recent_cycles",
]
