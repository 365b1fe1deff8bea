"""
Payment Application Package

Atomic payment application (ledger entry plus schedule update) and the
revert path driven by ledger deletions.
"""

from .applier import PaymentApplier, recompute_cumulative_paid

__all__ = [
    "PaymentApplier",
    "recompute_cumulative_paid",
]
