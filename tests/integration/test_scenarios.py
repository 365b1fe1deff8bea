#!/usr/bin/env python3
"""
End-to-end scenarios across generation, payments, reconciliation and budgets.

These use the in-memory engine so each scenario starts from empty stores.
"""

from datetime import date

import pytest

from obligations.budget.models import BudgetSnapshot, LineItem
from obligations.budget.projection import ProjectionEngine, installment_payoff
from obligations.core.dates import BudgetPeriod, Period, TimingBucket
from obligations.core.errors import DuplicatePaymentError
from obligations.core.money import Money
from obligations.ledger.models import LedgerTransaction
from obligations.schedule.status import ScheduleStatus, derive_status


@pytest.mark.integration
class TestBillerLifecycle:
    """A monthly biller from creation to reconciliation."""

    def test_paid_january_reconciles_and_later_months_age(self, engine, internet_biller):
        january, february, march = engine.service.create_obligation(internet_biller, 3)

        engine.applier.apply_payment(january.id, Money.from_dollars(1500), date(2026, 1, 10), "X")

        report = engine.reconciler.reconcile("internet", Period(2026, 1))
        assert report.in_sync
        assert report.match_method == "linked"

        as_of = date(2026, 2, 25)
        january = engine.schedules.get_schedule(january.id)
        assert derive_status(january, as_of) is ScheduleStatus.PAID
        assert derive_status(february, as_of) is ScheduleStatus.OVERDUE
        assert derive_status(march, as_of) is ScheduleStatus.PENDING

    def test_second_payment_for_same_month_is_refused(self, engine, internet_biller):
        january = engine.service.create_obligation(internet_biller, 1)[0]
        engine.applier.apply_payment(january.id, Money.from_dollars(1500), date(2026, 1, 10), "X")

        with pytest.raises(DuplicatePaymentError):
            engine.applier.apply_payment(january.id, Money.from_dollars(1500), date(2026, 1, 11), "X")

        assert len(engine.ledger.all_transactions()) == 1

    def test_deleting_the_payment_reverts_the_schedule(self, engine, internet_biller):
        january = engine.service.create_obligation(internet_biller, 1)[0]
        paid = engine.applier.apply_payment(january.id, Money.from_dollars(1500), date(2026, 1, 10), "X")

        engine.ledger.delete_transaction(paid.linked_transaction_id)

        reverted = engine.schedules.get_schedule(january.id)
        assert reverted.paid_amount is None
        assert reverted.linked_transaction_id is None
        assert derive_status(reverted, date(2026, 2, 1)) is ScheduleStatus.OVERDUE
        assert engine.reconciler.reconcile("internet", Period(2026, 1)).in_sync

    def test_payment_recorded_outside_the_engine_is_found_by_sweep(self, engine, internet_biller):
        engine.service.create_obligation(internet_biller, 2)
        legacy = engine.ledger.create_transaction(
            LedgerTransaction(
                name="Internet", date=date(2026, 2, 8), amount=Money.from_dollars(1500), account_id="X"
            )
        )

        sweep = engine.reconciler.sweep(as_of=date(2026, 2, 28))
        [discrepancy] = sweep.discrepancies
        assert discrepancy.period == Period(2026, 2)
        assert discrepancy.matched_transaction_ids == [legacy.id]

        engine.reconciler.apply_correction(discrepancy.schedule_id, Money.from_dollars(1500), legacy.id)

        assert engine.reconciler.sweep(as_of=date(2026, 2, 28)).is_clean


@pytest.mark.integration
class TestInstallmentLifecycle:
    """The laptop installment over its full term."""

    def test_payments_accumulate_and_payoff_shrinks(self, engine, laptop_installment):
        schedules = engine.service.create_obligation(laptop_installment, 12)
        assert len(schedules) == 12
        assert Money.sum(s.expected_amount for s in schedules) == Money.from_dollars(60000)

        for schedule in schedules[:3]:
            engine.applier.apply_payment(schedule.id, Money.from_dollars(5000), schedule.due_date, "card-1")

        laptop = engine.obligations.get_obligation("laptop")
        assert laptop.cumulative_paid == Money.from_dollars(15000)

        payoff = installment_payoff(laptop, engine.schedules.list_for_obligation("laptop"))
        assert payoff.remaining_balance == Money.from_dollars(45000)
        assert payoff.periods_remaining == 9
        assert payoff.next_payment_number == 4
        assert payoff.projected_completion == Period(2026, 12)

    def test_reverted_installment_payment_restores_balance(self, engine, laptop_installment):
        first = engine.service.create_obligation(laptop_installment, 12)[0]
        paid = engine.applier.apply_payment(first.id, Money.from_dollars(5000), date(2026, 1, 5), "card-1")

        engine.ledger.void_transaction(paid.linked_transaction_id)

        assert engine.obligations.get_obligation("laptop").cumulative_paid == Money.zero()


@pytest.mark.integration
class TestBudgetProjection:
    """Snapshots feed the projection of remaining funds."""

    def test_actual_salary_replaces_projected(self, engine, internet_biller):
        engine.service.create_obligation(internet_biller, 1)
        period = BudgetPeriod(Period(2026, 1), TimingBucket.FIRST_HALF)

        snapshot = BudgetSnapshot(period=period, projected_salary=Money.from_dollars(11000))
        snapshot.add_item("Housing", LineItem(name="Rent", amount=Money.from_dollars(6500)))
        schedules = engine.schedules.all_schedules()
        added = snapshot.fold_in_schedules(schedules, engine.obligations.list_obligations())
        assert added == 1
        engine.snapshots.save_snapshot(snapshot)

        projections = ProjectionEngine(engine.snapshots)
        assert projections.project_period(period).remaining == Money.from_dollars(3000)

        snapshot.actual_salary = Money.from_dollars(9500)
        engine.snapshots.save_snapshot(snapshot)
        assert projections.project_period(period).remaining == Money.from_dollars(1500)

    def test_excluded_items_do_not_count(self, engine):
        period = BudgetPeriod(Period(2026, 1), TimingBucket.SECOND_HALF)
        snapshot = BudgetSnapshot(period=period, projected_salary=Money.from_dollars(4000))
        snapshot.add_item("Fun", LineItem(name="Concert", amount=Money.from_dollars(300), included=False))
        snapshot.add_item("Food", LineItem(name="Groceries", amount=Money.from_dollars(800)))
        engine.snapshots.save_snapshot(snapshot)

        projection = ProjectionEngine(engine.snapshots).project_period(period)

        assert projection.total_obligated == Money.from_dollars(800)
        assert projection.remaining == Money.from_dollars(3200)
