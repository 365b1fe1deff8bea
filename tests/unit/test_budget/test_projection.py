#!/usr/bin/env python3
"""Tests for the projection engine."""

from datetime import date

import pytest

from obligations.budget.datastore import BudgetSnapshotStore
from obligations.budget.models import BudgetSnapshot, LineItem
from obligations.budget.projection import (
    MonthlyAverage,
    ProjectionEngine,
    best_month,
    installment_payoff,
    monthly_average,
    to_dataframe,
    worst_month,
)
from obligations.core.dates import BudgetPeriod, Period, TimingBucket
from obligations.core.money import Money


def half(year, month, timing="1/2") -> BudgetPeriod:
    return BudgetPeriod(Period(year, month), TimingBucket(timing))


def save(store, period, salary, obligated, actual=None):
    snapshot = BudgetSnapshot(
        period=period,
        projected_salary=Money.from_dollars(salary) if salary is not None else None,
        actual_salary=Money.from_dollars(actual) if actual is not None else None,
    )
    snapshot.add_item("Bills", LineItem("Bills", Money.from_dollars(obligated)))
    return store.save_snapshot(snapshot)


@pytest.mark.budget
class TestProject:
    """Per-period projection."""

    def setup_method(self):
        self.store = BudgetSnapshotStore()
        self.engine = ProjectionEngine(self.store)

    def test_salary_scenario(self):
        """Projected 11000, obligated 8000, then actual 9500."""
        snapshot = save(self.store, half(2026, 1), 11000, 8000)
        [projection] = self.engine.project(half(2026, 1), half(2026, 1))
        assert projection.remaining == Money.from_dollars(3000)

        snapshot.actual_salary = Money.from_dollars(9500)
        [projection] = self.engine.project(half(2026, 1), half(2026, 1))
        assert projection.income == Money.from_dollars(9500)
        assert projection.remaining == Money.from_dollars(1500)
        assert snapshot.total_amount == Money.from_dollars(8000)

    def test_reversed_range_is_empty(self):
        assert self.engine.project(half(2026, 2), half(2026, 1)) == []
        assert self.engine.project(half(2026, 1, "2/2"), half(2026, 1, "1/2")) == []

    def test_range_covers_every_half(self):
        save(self.store, half(2026, 1), 11000, 8000)
        projections = self.engine.project(half(2026, 1), half(2026, 2, "2/2"))

        assert [p.period.to_key() for p in projections] == [
            "2026-01-1/2",
            "2026-01-2/2",
            "2026-02-1/2",
            "2026-02-2/2",
        ]
        assert projections[0].has_snapshot
        assert not projections[1].has_snapshot
        assert projections[1].remaining == Money.zero()

    def test_uses_live_included_sum(self):
        snapshot = save(self.store, half(2026, 1), 11000, 8000)
        snapshot.categories["Bills"][0].included = False
        [projection] = self.engine.project(half(2026, 1), half(2026, 1))
        assert projection.total_obligated == Money.zero()


@pytest.mark.budget
class TestMonthlyAverages:
    """Same-month halves averaged, best and worst month."""

    def setup_method(self):
        self.store = BudgetSnapshotStore()
        self.engine = ProjectionEngine(self.store)

    def test_average_of_halves(self):
        save(self.store, half(2026, 1), 5000, 2000)
        save(self.store, half(2026, 1, "2/2"), 5000, 4000)
        averages = monthly_average(self.engine.project(half(2026, 1), half(2026, 1, "2/2")))

        assert averages == [MonthlyAverage(Period(2026, 1), Money.from_dollars(2000), 2)]

    def test_half_cent_rounds_half_even(self):
        save(self.store, half(2026, 1), 0, 0)
        self.store.get_snapshot(half(2026, 1)).projected_salary = Money.from_cents(1)
        averages = monthly_average(self.engine.project(half(2026, 1), half(2026, 1, "2/2")))
        assert averages[0].average_remaining == Money.zero()

    def test_best_and_worst_with_ties(self):
        averages = [
            MonthlyAverage(Period(2026, 3), Money.from_cents(100), 2),
            MonthlyAverage(Period(2026, 1), Money.from_cents(100), 2),
            MonthlyAverage(Period(2026, 2), Money.from_cents(-50), 2),
            MonthlyAverage(Period(2026, 4), Money.from_cents(-50), 2),
        ]
        assert best_month(averages).period == Period(2026, 1)
        assert worst_month(averages).period == Period(2026, 2)

    def test_empty(self):
        assert monthly_average([]) == []
        assert best_month([]) is None
        assert worst_month([]) is None

    def test_dataframe_columns(self):
        save(self.store, half(2026, 1), 11000, 8000)
        df = to_dataframe(self.engine.project(half(2026, 1), half(2026, 1, "2/2")))
        assert list(df.columns) == ["year", "month", "timing", "income", "total_obligated", "remaining"]
        assert df["remaining"].tolist() == [300000, 0]


@pytest.mark.budget
class TestInstallmentPayoff:
    """Payoff projection from stored schedules."""

    def test_laptop_after_three_payments(self, engine, laptop_installment):
        engine.service.create_obligation(laptop_installment, 1)
        for month in (1, 2, 3):
            schedule = engine.applier.next_payable("laptop")
            engine.applier.apply_payment(schedule.id, Money.from_dollars(5000), date(2026, month, 5), "card-1")

        payoff = installment_payoff(laptop_installment, engine.schedules.list_for_obligation("laptop"))

        assert payoff.paid_to_date == Money.from_dollars(15000)
        assert payoff.remaining_balance == Money.from_dollars(45000)
        assert payoff.periods_remaining == 9
        assert payoff.next_payment_number == 4
        assert payoff.projected_completion == Period(2026, 12)
        assert not payoff.is_paid_off
