#!/usr/bin/env python3
"""Tests for the Obligation and Schedule stores."""

from datetime import date

import pytest

from obligations.core.dates import Period, TimingBucket
from obligations.core.errors import DuplicatePaymentError, ObligationNotFoundError, ScheduleNotFoundError
from obligations.core.money import Money
from obligations.schedule.datastore import ObligationStore, ScheduleStore
from obligations.schedule.generator import generate
from obligations.schedule.models import ObligationKind


@pytest.mark.schedule
class TestObligationStore:
    """Test obligation persistence and filtering."""

    def test_get_unknown_raises(self):
        with pytest.raises(ObligationNotFoundError):
            ObligationStore().get_obligation("missing")

    def test_list_filters(self, internet_biller, laptop_installment):
        store = ObligationStore()
        store.save_obligation(internet_biller)
        store.save_obligation(laptop_installment)

        assert [o.id for o in store.list_obligations()] == ["internet", "laptop"]
        assert [o.id for o in store.list_obligations(kind=ObligationKind.INSTALLMENT)] == ["laptop"]

        internet_biller.deactivate(Period(2026, 2))
        assert [o.id for o in store.list_obligations(active_in=Period(2026, 3))] == ["laptop"]
        assert [o.id for o in store.list_obligations(active_in=Period(2026, 1))] == ["internet", "laptop"]

    def test_delete(self, internet_biller):
        store = ObligationStore()
        store.save_obligation(internet_biller)
        store.delete_obligation("internet")
        assert store.item_count() == 0
        with pytest.raises(ObligationNotFoundError):
            store.delete_obligation("internet")


@pytest.mark.schedule
class TestScheduleStore:
    """Test schedule persistence and conditional updates."""

    def setup_method(self):
        self.store = ScheduleStore()

    def test_add_assigns_ids_and_skips_existing_natural_keys(self, internet_biller):
        inserted = self.store.add_schedules(generate(internet_biller, 3))
        assert len(inserted) == 3
        assert all(s.id for s in inserted)

        again = self.store.add_schedules(generate(internet_biller, 4))
        assert [s.period for s in again] == [Period(2026, 4)]
        assert self.store.item_count() == 4

    def test_biller_period_in_the_other_half_is_not_a_new_schedule(self, internet_biller):
        self.store.add_schedules(generate(internet_biller, 1))
        internet_biller.due_day = 25

        assert self.store.add_schedules(generate(internet_biller, 1)) == []
        assert self.store.find("internet", Period(2026, 1)).timing is TimingBucket.FIRST_HALF

    def test_replace_unpaid_swaps_future_schedules(self, internet_biller):
        self.store.add_schedules(generate(internet_biller, 3))
        internet_biller.expected_amount = Money.from_dollars(1800)

        removed, inserted = self.store.replace_unpaid(
            "internet", generate(internet_biller, 3), not_before=date(2026, 2, 1)
        )

        assert [s.period for s in removed] == [Period(2026, 2), Period(2026, 3)]
        assert [s.period for s in inserted] == [Period(2026, 2), Period(2026, 3)]
        amounts = [s.expected_amount for s in self.store.list_for_obligation("internet")]
        assert amounts == [Money.from_dollars(1500), Money.from_dollars(1800), Money.from_dollars(1800)]

    def test_find(self, internet_biller):
        self.store.add_schedules(generate(internet_biller, 3))
        found = self.store.find("internet", Period(2026, 2))
        assert found is not None and found.period == Period(2026, 2)
        assert self.store.find("internet", Period(2026, 2), TimingBucket.FIRST_HALF) is found
        assert self.store.find("internet", Period(2026, 2), TimingBucket.SECOND_HALF) is None
        assert self.store.find("internet", Period(2027, 1)) is None

    def test_get_unknown_raises(self):
        with pytest.raises(ScheduleNotFoundError):
            self.store.get_schedule("missing")

    def test_record_payment_is_conditional(self, internet_biller):
        schedule = self.store.add_schedules(generate(internet_biller, 1))[0]
        self.store.record_payment(schedule.id, Money.from_dollars(1500), date(2026, 1, 10), "X", "tx-1")

        with pytest.raises(DuplicatePaymentError) as exc_info:
            self.store.record_payment(schedule.id, Money.from_dollars(1500), date(2026, 1, 11), "X", "tx-2")

        assert exc_info.value.existing_transaction_id == "tx-1"
        assert self.store.get_schedule(schedule.id).linked_transaction_id == "tx-1"

    def test_clear_payment_only_for_matching_transaction(self, internet_biller):
        schedule = self.store.add_schedules(generate(internet_biller, 1))[0]
        self.store.record_payment(schedule.id, Money.from_dollars(1500), date(2026, 1, 10), "X", "tx-1")

        assert not self.store.clear_payment(schedule.id, "tx-other")
        assert self.store.clear_payment(schedule.id, "tx-1")
        # Second revert is a no-op
        assert not self.store.clear_payment(schedule.id, "tx-1")

        cleared = self.store.get_schedule(schedule.id)
        assert cleared.paid_amount is None
        assert cleared.date_paid is None
        assert cleared.linked_account_id is None
        assert cleared.linked_transaction_id is None

    def test_delete_unpaid_keeps_paid_and_past(self, internet_biller):
        schedules = self.store.add_schedules(generate(internet_biller, 4))
        self.store.record_payment(schedules[2].id, Money.from_dollars(1500), date(2026, 3, 10), "X", "tx-1")

        deleted = self.store.delete_unpaid("internet", not_before=date(2026, 2, 1))

        assert sorted(s.period for s in deleted) == [Period(2026, 2), Period(2026, 4)]
        remaining = self.store.list_for_obligation("internet")
        assert [s.period for s in remaining] == [Period(2026, 1), Period(2026, 3)]

    def test_delete_for_obligation(self, internet_biller, laptop_installment):
        self.store.add_schedules(generate(internet_biller, 3))
        self.store.add_schedules(generate(laptop_installment, 1))
        assert self.store.delete_for_obligation("laptop") == 12
        assert self.store.item_count() == 3
