"""
Reconciliation Package

Compares stored schedule payments against ledger evidence.

Key Components:
- matcher: Linked-transaction and fuzzy matching strategies
- reconciler: Sync reports, explicit corrections, full sweeps
"""

from .matcher import (
    FuzzyMatchStrategy,
    LinkedTransactionStrategy,
    MatchResult,
    MatchStrategy,
    default_strategies,
)
from .reconciler import Reconciler, Recommendation, SweepReport, SyncReport

__all__ = [
    # Matching
    "FuzzyMatchStrategy",
    "LinkedTransactionStrategy",
    "MatchResult",
    "MatchStrategy",
    "default_strategies",
    # Reconciliation
    "Recommendation",
    "Reconciler",
    "SweepReport",
    "SyncReport",
]
