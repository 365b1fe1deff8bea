#!/usr/bin/env python3
"""Tests for schedule-to-ledger matching strategies."""

from datetime import date

import pytest

from obligations.core.money import Money
from obligations.ledger.datastore import LedgerStore
from obligations.ledger.models import LedgerTransaction
from obligations.reconcile.matcher import (
    FuzzyMatchStrategy,
    LinkedTransactionStrategy,
    default_strategies,
)
from obligations.schedule.generator import generate


@pytest.mark.reconcile
class TestFuzzyMatchStrategy:
    """Fuzzy candidates need name, exact amount, month and timing half."""

    def setup_method(self):
        self.strategy = FuzzyMatchStrategy()
        self.ledger = LedgerStore()

    def _january(self, biller):
        schedule = generate(biller, 1)[0]
        schedule.id = "s-jan"
        return schedule

    def _tx(self, name="Comcast INTERNET bill", day=10, cents=150000, schedule_id=None):
        return self.ledger.create_transaction(
            LedgerTransaction(
                name, date(2026, 1, day), Money.from_cents(cents), "X", linked_schedule_id=schedule_id
            )
        )

    def test_substring_name_case_insensitive(self, internet_biller):
        self._tx()
        result = self.strategy.match(self._january(internet_biller), internet_biller, self.ledger)
        assert result.method == "fuzzy"
        assert result.amount == Money.from_dollars(1500)

    def test_amount_must_match_exactly(self, internet_biller):
        self._tx(cents=150001)
        self._tx(cents=149999)
        result = self.strategy.match(self._january(internet_biller), internet_biller, self.ledger)
        assert result.transactions == []

    def test_timing_half_must_match_for_billers(self, internet_biller):
        self._tx(day=25)
        result = self.strategy.match(self._january(internet_biller), internet_biller, self.ledger)
        assert result.transactions == []

    def test_other_month_and_name_excluded(self, internet_biller):
        self.ledger.create_transaction(
            LedgerTransaction("Internet", date(2026, 2, 10), Money.from_cents(150000), "X")
        )
        self._tx(name="Water")
        result = self.strategy.match(self._january(internet_biller), internet_biller, self.ledger)
        assert result.transactions == []

    def test_linked_to_other_schedule_excluded(self, internet_biller):
        self._tx(schedule_id="someone-else")
        result = self.strategy.match(self._january(internet_biller), internet_biller, self.ledger)
        assert result.transactions == []

    def test_multiple_candidates_summed(self, internet_biller):
        self._tx(day=3)
        self._tx(day=15)
        result = self.strategy.match(self._january(internet_biller), internet_biller, self.ledger)
        assert result.amount == Money.from_dollars(3000)
        assert len(result.transaction_ids) == 2

    def test_installments_ignore_timing_half(self, laptop_installment):
        schedule = generate(laptop_installment, 1)[0]
        self._tx(name="Laptop payment", day=28, cents=500000)
        result = self.strategy.match(schedule, laptop_installment, self.ledger)
        assert result.amount == Money.from_dollars(5000)


@pytest.mark.reconcile
class TestStrategySelection:
    """Linked first, fuzzy second."""

    def test_linked_applies_only_with_link(self, internet_biller):
        schedule = generate(internet_biller, 1)[0]
        assert not LinkedTransactionStrategy().applies_to(schedule)
        assert FuzzyMatchStrategy().applies_to(schedule)
        schedule.linked_transaction_id = "tx-1"
        assert LinkedTransactionStrategy().applies_to(schedule)
        assert not FuzzyMatchStrategy().applies_to(schedule)

    def test_linked_transaction_gone(self, internet_biller):
        schedule = generate(internet_biller, 1)[0]
        schedule.linked_transaction_id = "deleted"
        result = LinkedTransactionStrategy().match(schedule, internet_biller, LedgerStore())
        assert result.amount == Money.zero()

    def test_default_strategies(self):
        assert [s.name for s in default_strategies()] == ["linked", "fuzzy"]
        assert [s.name for s in default_strategies(fuzzy_matching=False)] == ["linked"]
