#!/usr/bin/env python3
"""
Budget Snapshot Domain Models

A budget snapshot is a manually curated configuration of one month half:
line items grouped by category, each with an "included" flag, plus the
projected and actual salary for the period.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from ..core.dates import BudgetPeriod, TimingBucket
from ..core.money import Money
from ..schedule.models import Obligation, PaymentSchedule

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "Uncategorized"


@dataclass
class LineItem:
    """One budgeted amount in a snapshot category."""

    name: str
    amount: Money
    included: bool = True
    obligation_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "amount": self.amount.to_cents(),
            "included": self.included,
            "obligation_id": self.obligation_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LineItem":
        return cls(
            name=data["name"],
            amount=Money.from_cents(data["amount"]),
            included=data.get("included", True),
            obligation_id=data.get("obligation_id"),
        )


@dataclass
class BudgetSnapshot:
    """
    Budget configuration for one month half.

    `total_amount` caches the sum of included line items. It is recomputed
    whenever the snapshot is saved and is never affected by salary figures.
    """

    period: BudgetPeriod
    status: str = "draft"
    categories: dict[str, list[LineItem]] = field(default_factory=dict)
    projected_salary: Money | None = None
    actual_salary: Money | None = None
    total_amount: Money = field(default_factory=Money.zero)

    @property
    def income(self) -> Money:
        """Actual salary once present, else projected salary, else zero. Never both."""
        if self.actual_salary is not None:
            return self.actual_salary
        if self.projected_salary is not None:
            return self.projected_salary
        return Money.zero()

    def line_items(self) -> list[LineItem]:
        return [item for items in self.categories.values() for item in items]

    def included_total(self) -> Money:
        """Live sum of included line items."""
        return Money.sum(item.amount for item in self.line_items() if item.included)

    def recompute_total(self) -> Money:
        self.total_amount = self.included_total()
        return self.total_amount

    def add_item(self, category: str, item: LineItem) -> None:
        self.categories.setdefault(category, []).append(item)

    def _schedule_timing(self, schedule: PaymentSchedule) -> TimingBucket | None:
        if schedule.timing is not None:
            return schedule.timing
        if schedule.due_date is not None:
            return TimingBucket.for_day(schedule.due_date.day)
        return None

    def fold_in_schedules(
        self, schedules: Iterable[PaymentSchedule], obligations: Iterable[Obligation]
    ) -> int:
        """
        Add generated obligation schedules of this period as line items.

        Schedules fall in this snapshot when their month matches and their
        timing half (billers) or due date half (installments) matches. An
        obligation already present as a line item is left alone so manual
        edits to its amount survive.

        Returns:
            Number of line items added
        """
        by_id = {o.id: o for o in obligations}
        present = {item.obligation_id for item in self.line_items() if item.obligation_id}
        added = 0
        for schedule in schedules:
            if schedule.period != self.period.period:
                continue
            if self._schedule_timing(schedule) not in (None, self.period.timing):
                continue
            if schedule.obligation_id in present:
                continue
            obligation = by_id.get(schedule.obligation_id)
            if obligation is None:
                logger.warning("Schedule %s references unknown obligation %s", schedule.id, schedule.obligation_id)
                continue
            self.add_item(
                obligation.category or DEFAULT_CATEGORY,
                LineItem(name=obligation.name, amount=schedule.expected_amount, obligation_id=obligation.id),
            )
            present.add(obligation.id)
            added += 1
        return added

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "period": self.period.to_key(),
            "status": self.status,
            "categories": {name: [item.to_dict() for item in items] for name, items in self.categories.items()},
            "projected_salary": self.projected_salary.to_cents() if self.projected_salary is not None else None,
            "actual_salary": self.actual_salary.to_cents() if self.actual_salary is not None else None,
            "total_amount": self.total_amount.to_cents(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BudgetSnapshot":
        """Create BudgetSnapshot from dictionary."""
        projected = data.get("projected_salary")
        actual = data.get("actual_salary")
        return cls(
            period=BudgetPeriod.parse(data["period"]),
            status=data.get("status", "draft"),
            categories={
                name: [LineItem.from_dict(item) for item in items]
                for name, items in data.get("categories", {}).items()
            },
            projected_salary=Money.from_cents(projected) if projected is not None else None,
            actual_salary=Money.from_cents(actual) if actual is not None else None,
            total_amount=Money.from_cents(data.get("total_amount", 0)),
        )
