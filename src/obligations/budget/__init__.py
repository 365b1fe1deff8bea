"""
Budget Package

Budget snapshots per month half and the projection engine over them.
"""

from .datastore import BudgetSnapshotStore
from .models import BudgetSnapshot, LineItem
from .projection import (
    InstallmentPayoff,
    MonthlyAverage,
    PeriodProjection,
    ProjectionEngine,
    best_month,
    installment_payoff,
    monthly_average,
    to_dataframe,
    worst_month,
)

__all__ = [
    "BudgetSnapshot",
    "BudgetSnapshotStore",
    "InstallmentPayoff",
    "LineItem",
    "MonthlyAverage",
    "PeriodProjection",
    "ProjectionEngine",
    "best_month",
    "installment_payoff",
    "monthly_average",
    "to_dataframe",
    "worst_month",
]
