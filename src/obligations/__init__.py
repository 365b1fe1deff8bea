"""
Recurring Obligations - Scheduling and Reconciliation Engine

Turns recurring financial commitments (bills and installment loans) into
dated payment schedules, tracks their paid state, reconciles that state
against an independent ledger, and projects period budgets.

Domain Packages:
- core: Money and period primitives, errors, configuration
- schedule: Obligation model, schedule generation, status, lifecycle
- ledger: Ledger transactions and the link-enforcing Ledger Store
- payments: Payment application and ledger-driven reversion
- reconcile: Linked/fuzzy matching, sync reports, corrections, sweeps
- budget: Budget snapshots and the projection engine
- cli: Command-line interface

Example Usage:
    from obligations.schedule import Biller, generate
    from obligations.payments import PaymentApplier
    from obligations.reconcile import Reconciler
"""

__version__ = "0.1.0"

from .core.config import Environment, get_config
from .core.dates import BudgetPeriod, Period, TimingBucket
from .core.money import Money

__all__ = [
    "BudgetPeriod",
    "Environment",
    "Money",
    "Period",
    "TimingBucket",
    "get_config",
]
