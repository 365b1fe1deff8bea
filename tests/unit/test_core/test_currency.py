#!/usr/bin/env python3
"""Tests for integer-cent currency helpers."""

from decimal import Decimal

import pytest

from obligations.core.currency import (
    allocate_remainder,
    cents_to_decimal,
    cents_to_dollars_str,
    decimal_to_cents,
    parse_dollars_to_cents,
    split_evenly,
)


@pytest.mark.currency
class TestCurrencyConversion:
    """Test conversions between strings, Decimals and cents."""

    def test_cents_to_dollars_str(self):
        assert cents_to_dollars_str(150000) == "1500.00"
        assert cents_to_dollars_str(5) == "0.05"
        assert cents_to_dollars_str(-1234) == "-12.34"

    def test_parse_dollars_to_cents(self):
        assert parse_dollars_to_cents("12.34") == 1234
        assert parse_dollars_to_cents("$1,234.56") == 123456
        assert parse_dollars_to_cents("12") == 1200
        assert parse_dollars_to_cents("12.3") == 1230
        assert parse_dollars_to_cents("") == 0

    def test_decimal_round_trip(self):
        assert decimal_to_cents(Decimal("12.345")) == 1234
        assert cents_to_decimal(1234) == Decimal("12.34")

    def test_decimal_to_cents_rejects_non_numbers(self):
        with pytest.raises(ValueError):
            decimal_to_cents("not a number")
        with pytest.raises(ValueError):
            decimal_to_cents(Decimal("NaN"))


@pytest.mark.currency
class TestAllocation:
    """Test remainder allocation and even splits."""

    def test_allocate_remainder_puts_remainder_last(self):
        assert allocate_remainder([333, 333, 333], 1000) == [333, 333, 334]

    def test_allocate_remainder_empty(self):
        assert allocate_remainder([], 100) == []

    def test_split_evenly_sums_exactly(self):
        parts = split_evenly(100000, 7)
        assert sum(parts) == 100000
        assert parts[:-1] == [14285] * 6
        assert parts[-1] == 14290

    def test_split_evenly_requires_positive_parts(self):
        with pytest.raises(ValueError):
            split_evenly(100, 0)
