#!/usr/bin/env python3
"""Tests for schedule status derivation."""

from datetime import date

import pytest

from obligations.core.money import Money
from obligations.schedule.generator import generate
from obligations.schedule.status import ScheduleStatus, derive_status, is_outstanding


@pytest.mark.schedule
class TestDeriveStatus:
    """Status is a pure function of the schedule and the as-of date."""

    def test_unpaid_first_half_becomes_overdue_after_day_21(self, internet_biller):
        january = generate(internet_biller, 1)[0]
        assert derive_status(january, date(2026, 1, 21)) is ScheduleStatus.PENDING
        assert derive_status(january, date(2026, 1, 22)) is ScheduleStatus.OVERDUE

    def test_unpaid_installment_becomes_overdue_after_month_end(self, laptop_installment):
        first = generate(laptop_installment, 1)[0]
        assert derive_status(first, date(2026, 1, 31)) is ScheduleStatus.PENDING
        assert derive_status(first, date(2026, 2, 1)) is ScheduleStatus.OVERDUE

    def test_partial_and_paid(self, internet_biller):
        schedule = generate(internet_biller, 1)[0]
        schedule.paid_amount = Money.from_dollars(700)
        assert derive_status(schedule, date(2026, 1, 5)) is ScheduleStatus.PARTIAL

        schedule.paid_amount = Money.from_dollars(1500)
        assert derive_status(schedule, date(2027, 1, 1)) is ScheduleStatus.PAID

        schedule.paid_amount = Money.from_dollars(1600)
        assert derive_status(schedule, date(2026, 1, 5)) is ScheduleStatus.PAID

    def test_zero_paid_counts_as_unpaid(self, internet_biller):
        schedule = generate(internet_biller, 1)[0]
        schedule.paid_amount = Money.zero()
        assert derive_status(schedule, date(2026, 1, 5)) is ScheduleStatus.PENDING

    def test_is_outstanding(self, internet_biller):
        schedule = generate(internet_biller, 1)[0]
        assert is_outstanding(schedule, date(2026, 1, 5))
        schedule.paid_amount = Money.from_dollars(1500)
        assert not is_outstanding(schedule, date(2026, 1, 5))
