#!/usr/bin/env python3
"""
Date and Period Primitive Types

Calendar units schedules are keyed on:
- Period: a calendar month (month name + year)
- TimingBucket: the half of a month a due day falls into
- BudgetPeriod: a month split into its two timing halves
"""

import calendar
import re
from dataclasses import dataclass
from datetime import date
from enum import Enum

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

# Last day of month that still belongs to the first timing bucket
FIRST_HALF_LAST_DAY = 21

_ISO_MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})$")
_NAMED_MONTH_RE = re.compile(r"^([A-Za-z]+)\s+(\d{4})$")
_BUDGET_PERIOD_RE = re.compile(r"^(\d{4})-(\d{1,2})-([12])/2$")


class TimingBucket(Enum):
    """Half of the month a due day falls into."""

    FIRST_HALF = "1/2"  # days 1-21
    SECOND_HALF = "2/2"  # days 22-31

    @classmethod
    def for_day(cls, day: int) -> "TimingBucket":
        """
        Classify a day-of-month.

        Raises:
            ValueError: If day is outside 1-31
        """
        if not 1 <= day <= 31:
            raise ValueError(f"Day of month out of range: {day}")
        return cls.FIRST_HALF if day <= FIRST_HALF_LAST_DAY else cls.SECOND_HALF

    @property
    def order(self) -> int:
        return 0 if self is TimingBucket.FIRST_HALF else 1


@dataclass(frozen=True, order=True)
class Period:
    """A calendar month. Orders chronologically."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month out of range: {self.month}")

    @classmethod
    def from_name(cls, month_name: str, year: int | str) -> "Period":
        """
        Build from a month name ("January") and year.

        Raises:
            ValueError: If the month name is not recognised
        """
        normalized = month_name.strip().capitalize()
        if normalized not in MONTH_NAMES:
            raise ValueError(f"Invalid month name: {month_name}")
        return cls(year=int(year), month=MONTH_NAMES.index(normalized) + 1)

    @classmethod
    def from_date(cls, value: date) -> "Period":
        return cls(year=value.year, month=value.month)

    @classmethod
    def parse(cls, text: str) -> "Period":
        """
        Parse "2026-01" or "January 2026".

        Raises:
            ValueError: If the text matches neither format
        """
        text = text.strip()
        iso = _ISO_MONTH_RE.match(text)
        if iso:
            return cls(year=int(iso.group(1)), month=int(iso.group(2)))
        named = _NAMED_MONTH_RE.match(text)
        if named:
            return cls.from_name(named.group(1), named.group(2))
        raise ValueError(f"Invalid period: {text!r} (expected YYYY-MM or 'Month YYYY')")

    @property
    def month_name(self) -> str:
        return MONTH_NAMES[self.month - 1]

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    def day(self, day_of_month: int) -> date:
        """Date for a day in this month, clamped to the month's length."""
        days_in_month = calendar.monthrange(self.year, self.month)[1]
        return date(self.year, self.month, min(max(day_of_month, 1), days_in_month))

    def shift(self, months: int) -> "Period":
        """Period `months` calendar months later (negative for earlier)."""
        index = self.year * 12 + (self.month - 1) + months
        return Period(year=index // 12, month=index % 12 + 1)

    def months_until(self, other: "Period") -> int:
        """Number of months from this period to `other` (negative if earlier)."""
        return (other.year - self.year) * 12 + (other.month - self.month)

    def contains(self, value: date) -> bool:
        return value.year == self.year and value.month == self.month

    def to_key(self) -> str:
        """Storage key, e.g. "2026-01"."""
        return f"{self.year:04d}-{self.month:02d}"

    def __str__(self) -> str:
        return f"{self.month_name} {self.year}"


@dataclass(frozen=True)
class BudgetPeriod:
    """
    A month half: the unit budget snapshots and projections work in.

    Ordered month-major with the first half before the second half.
    """

    period: Period
    timing: TimingBucket

    @classmethod
    def parse(cls, text: str) -> "BudgetPeriod":
        """
        Parse "2026-01-1/2" style keys.

        Raises:
            ValueError: If the text is not a budget period key
        """
        match = _BUDGET_PERIOD_RE.match(text.strip())
        if not match:
            raise ValueError(f"Invalid budget period: {text!r} (expected YYYY-MM-1/2 or YYYY-MM-2/2)")
        period = Period(year=int(match.group(1)), month=int(match.group(2)))
        return cls(period=period, timing=TimingBucket(f"{match.group(3)}/2"))

    @classmethod
    def for_date(cls, value: date) -> "BudgetPeriod":
        return cls(period=Period.from_date(value), timing=TimingBucket.for_day(value.day))

    @property
    def start_date(self) -> date:
        if self.timing is TimingBucket.FIRST_HALF:
            return self.period.first_day
        return self.period.day(FIRST_HALF_LAST_DAY + 1)

    @property
    def end_date(self) -> date:
        if self.timing is TimingBucket.FIRST_HALF:
            return self.period.day(FIRST_HALF_LAST_DAY)
        return self.period.last_day

    def next(self) -> "BudgetPeriod":
        if self.timing is TimingBucket.FIRST_HALF:
            return BudgetPeriod(period=self.period, timing=TimingBucket.SECOND_HALF)
        return BudgetPeriod(period=self.period.shift(1), timing=TimingBucket.FIRST_HALF)

    def _sort_key(self) -> tuple[int, int, int]:
        return (self.period.year, self.period.month, self.timing.order)

    def __lt__(self, other: "BudgetPeriod") -> bool:
        return self._sort_key() < other._sort_key()

    def __le__(self, other: "BudgetPeriod") -> bool:
        return self._sort_key() <= other._sort_key()

    def __gt__(self, other: "BudgetPeriod") -> bool:
        return self._sort_key() > other._sort_key()

    def __ge__(self, other: "BudgetPeriod") -> bool:
        return self._sort_key() >= other._sort_key()

    def to_key(self) -> str:
        """Storage key, e.g. "2026-01-1/2"."""
        return f"{self.period.to_key()}-{self.timing.value}"

    def __str__(self) -> str:
        return f"{self.period} ({self.timing.value})"
