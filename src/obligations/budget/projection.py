#!/usr/bin/env python3
"""
Projection Engine

Read-side aggregation of budget snapshots into per-period income, obligated
spend and remaining figures, with monthly averages and installment payoff
projections for reporting.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Any

import pandas as pd

from ..core.dates import BudgetPeriod, Period
from ..core.money import Money
from ..schedule.models import Installment, PaymentSchedule
from .datastore import BudgetSnapshotStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PeriodProjection:
    """Income, obligated spend and remaining for one month half."""

    period: BudgetPeriod
    income: Money
    total_obligated: Money
    remaining: Money
    has_snapshot: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "period": self.period.to_key(),
            "income": self.income.to_cents(),
            "total_obligated": self.total_obligated.to_cents(),
            "remaining": self.remaining.to_cents(),
            "has_snapshot": self.has_snapshot,
        }


@dataclass(frozen=True)
class MonthlyAverage:
    """Average remaining across the timing halves of one calendar month."""

    period: Period
    average_remaining: Money
    halves: int


@dataclass(frozen=True)
class InstallmentPayoff:
    """Where an installment stands and when it is projected to be paid off."""

    installment_id: str
    total_amount: Money
    paid_to_date: Money
    remaining_balance: Money
    periods_remaining: int
    next_payment_number: int | None
    projected_completion: Period | None

    @property
    def is_paid_off(self) -> bool:
        return self.periods_remaining == 0


class ProjectionEngine:
    """Projects budget figures over a range of month halves."""

    def __init__(self, snapshots: BudgetSnapshotStore):
        self.snapshots = snapshots

    def project_period(self, period: BudgetPeriod) -> PeriodProjection:
        snapshot = self.snapshots.get_snapshot(period)
        if snapshot is None:
            zero = Money.zero()
            return PeriodProjection(period, zero, zero, zero, has_snapshot=False)

        income = snapshot.income
        # Live sum; total_amount is only a cache
        obligated = snapshot.included_total()
        return PeriodProjection(period, income, obligated, income - obligated)

    def project(self, start: BudgetPeriod, end: BudgetPeriod) -> list[PeriodProjection]:
        """
        Project every month half from `start` to `end` inclusive.

        A reversed range yields an empty list rather than an error. Periods
        without a snapshot project as zero income and zero obligated.
        """
        if start > end:
            logger.debug("Empty projection range %s .. %s", start, end)
            return []

        projections = []
        current = start
        while current <= end:
            projections.append(self.project_period(current))
            current = current.next()
        return projections


def to_dataframe(projections: Iterable[PeriodProjection]) -> pd.DataFrame:
    """Tabulate projections with amounts in cents."""
    rows = [
        {
            "year": p.period.period.year,
            "month": p.period.period.month,
            "timing": p.period.timing.value,
            "income": p.income.to_cents(),
            "total_obligated": p.total_obligated.to_cents(),
            "remaining": p.remaining.to_cents(),
        }
        for p in projections
    ]
    return pd.DataFrame(
        rows, columns=["year", "month", "timing", "income", "total_obligated", "remaining"]
    )


def monthly_average(projections: Sequence[PeriodProjection]) -> list[MonthlyAverage]:
    """
    Average `remaining` over the timing halves of each month.

    Averages are rounded half-even to whole cents. Result is chronological.
    """
    df = to_dataframe(projections)
    if df.empty:
        return []

    grouped = df.groupby(["year", "month"], sort=True)["remaining"].agg(["sum", "count"])
    averages = []
    for (year, month), row in grouped.iterrows():
        average = (Decimal(int(row["sum"])) / Decimal(int(row["count"]))).quantize(
            Decimal("1"), rounding=ROUND_HALF_EVEN
        )
        averages.append(
            MonthlyAverage(
                period=Period(year=int(year), month=int(month)),
                average_remaining=Money.from_cents(int(average)),
                halves=int(row["count"]),
            )
        )
    return averages


def best_month(averages: Sequence[MonthlyAverage]) -> MonthlyAverage | None:
    """Month with the highest average remaining; ties go to the earliest."""
    best = None
    for avg in sorted(averages, key=lambda a: a.period):
        if best is None or avg.average_remaining > best.average_remaining:
            best = avg
    return best


def worst_month(averages: Sequence[MonthlyAverage]) -> MonthlyAverage | None:
    """Month with the lowest average remaining; ties go to the earliest."""
    worst = None
    for avg in sorted(averages, key=lambda a: a.period):
        if worst is None or avg.average_remaining < worst.average_remaining:
            worst = avg
    return worst


def installment_payoff(installment: Installment, schedules: Iterable[PaymentSchedule]) -> InstallmentPayoff:
    """
    Project the payoff of an installment from its stored schedules.

    Args:
        installment: The installment
        schedules: Its payment schedules

    Returns:
        InstallmentPayoff
    """
    ordered = sorted(schedules, key=lambda s: s.payment_number or 0)
    paid = Money.sum(s.paid_amount for s in ordered if s.paid_amount is not None)
    unpaid = [s for s in ordered if not s.has_payment]
    return InstallmentPayoff(
        installment_id=installment.id,
        total_amount=installment.total_amount,
        paid_to_date=paid,
        remaining_balance=installment.total_amount - paid,
        periods_remaining=len(unpaid),
        next_payment_number=unpaid[0].payment_number if unpaid else None,
        projected_completion=unpaid[-1].period if unpaid else None,
    )
