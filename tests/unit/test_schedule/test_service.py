#!/usr/bin/env python3
"""Tests for the obligation lifecycle service."""

from datetime import date

import pytest

from obligations.core.dates import Period, TimingBucket
from obligations.core.errors import InvalidObligationError, MissingCadenceAnchorError, ObligationNotFoundError
from obligations.core.money import Money


@pytest.mark.schedule
class TestObligationService:
    """Creation, edits, deactivation and deletion."""

    def test_create_stores_obligation_and_schedules(self, engine, internet_biller):
        stored = engine.service.create_obligation(internet_biller, 3)
        assert len(stored) == 3
        assert engine.obligations.get_obligation("internet") is internet_biller
        assert engine.schedules.item_count() == 3

    def test_create_unschedulable_obligation_has_no_side_effects(self, engine, internet_biller):
        internet_biller.due_day = None
        with pytest.raises(MissingCadenceAnchorError):
            engine.service.create_obligation(internet_biller, 3)
        assert engine.obligations.item_count() == 0

    def test_edit_regenerates_only_future_unpaid(self, engine, internet_biller):
        schedules = engine.service.create_obligation(internet_biller, 4)
        engine.applier.apply_payment(schedules[1].id, Money.from_dollars(1500), date(2026, 2, 10), "X")

        internet_biller.expected_amount = Money.from_dollars(1800)
        engine.service.edit_obligation(internet_biller, 4, as_of=date(2026, 2, 25))

        by_period = {s.period: s for s in engine.schedules.list_for_obligation("internet")}
        # January elapsed unpaid, February paid: both untouched
        assert by_period[Period(2026, 1)].expected_amount == Money.from_dollars(1500)
        assert by_period[Period(2026, 2)].expected_amount == Money.from_dollars(1500)
        assert by_period[Period(2026, 2)].paid_amount == Money.from_dollars(1500)
        # March and April regenerated at the new amount
        assert by_period[Period(2026, 3)].expected_amount == Money.from_dollars(1800)
        assert by_period[Period(2026, 4)].expected_amount == Money.from_dollars(1800)
        assert len(by_period) == 4

    def test_due_day_move_keeps_one_schedule_per_period(self, engine, internet_biller):
        january = engine.service.create_obligation(internet_biller, 3)[0]
        engine.applier.apply_payment(january.id, Money.from_dollars(1500), date(2026, 1, 10), "X")

        internet_biller.due_day = 25
        engine.service.edit_obligation(internet_biller, 3, as_of=date(2026, 1, 15))

        schedules = engine.schedules.list_for_obligation("internet")
        assert [s.period for s in schedules] == [Period(2026, 1), Period(2026, 2), Period(2026, 3)]
        # The paid January instance stays in its original half
        assert schedules[0].id == january.id
        assert schedules[0].timing is TimingBucket.FIRST_HALF
        assert schedules[0].paid_amount == Money.from_dollars(1500)
        assert [s.timing for s in schedules[1:]] == [TimingBucket.SECOND_HALF] * 2
        assert schedules[1].due_date == date(2026, 2, 25)

    def test_start_date_move_keeps_payment_numbers_unique(self, engine, laptop_installment):
        engine.service.create_obligation(laptop_installment, 1)
        for month in (1, 2):
            schedule = engine.applier.next_payable("laptop")
            engine.applier.apply_payment(schedule.id, Money.from_dollars(5000), date(2026, month, 5), "card-1")

        laptop_installment.start_date = date(2026, 3, 5)
        engine.service.edit_obligation(laptop_installment, 1, as_of=date(2026, 3, 1))

        schedules = engine.schedules.list_for_obligation("laptop")
        numbers = sorted(s.payment_number for s in schedules)
        assert numbers == list(range(1, 13))
        by_number = {s.payment_number: s for s in schedules}
        assert by_number[1].period == Period(2026, 1)
        assert by_number[2].period == Period(2026, 2)
        assert by_number[3].period == Period(2026, 5)
        assert by_number[12].period == Period(2027, 2)
        assert engine.applier.next_payable("laptop").payment_number == 3

    def test_edit_unknown_obligation(self, engine, internet_biller):
        with pytest.raises(ObligationNotFoundError):
            engine.service.edit_obligation(internet_biller, 3, as_of=date(2026, 1, 1))

    def test_deactivate_is_soft(self, engine, internet_biller):
        engine.service.create_obligation(internet_biller, 6)
        engine.service.deactivate("internet", Period(2026, 4))

        assert engine.schedules.item_count() == 6
        assert engine.obligations.get_obligation("internet").deactivation == Period(2026, 4)

    def test_only_billers_can_be_deactivated(self, engine, laptop_installment):
        engine.service.create_obligation(laptop_installment, 1)
        with pytest.raises(InvalidObligationError):
            engine.service.deactivate("laptop", Period(2026, 4))

    def test_delete_cascades_to_schedules(self, engine, internet_biller, laptop_installment):
        engine.service.create_obligation(internet_biller, 3)
        engine.service.create_obligation(laptop_installment, 3)

        assert engine.service.delete_obligation("laptop") == 12
        assert engine.schedules.list_for_obligation("laptop") == []
        assert engine.schedules.item_count() == 3
