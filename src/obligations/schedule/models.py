#!/usr/bin/env python3
"""
Obligation Domain Models

Typed representation of the two kinds of recurring obligation (Biller and
Installment) and of the dated PaymentSchedule instances generated from them.
Amounts use the Money primitive; periods use Period/TimingBucket.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, ClassVar, Union

from ..core.currency import split_evenly
from ..core.dates import BudgetPeriod, Period, TimingBucket
from ..core.errors import MissingCadenceAnchorError
from ..core.money import Money


class ObligationKind(Enum):
    """Discriminator for the owner of a payment schedule."""

    BILLER = "biller"
    INSTALLMENT = "installment"


def _date_or_none(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


def _money_or_none(value: int | None) -> Money | None:
    return Money.from_cents(value) if value is not None else None


@dataclass(frozen=True)
class ActivationWindow:
    """Month (and optionally day) a biller starts being scheduled."""

    period: Period
    day: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"month": self.period.month_name, "year": self.period.year, "day": self.day}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ActivationWindow":
        day = data.get("day")
        return cls(
            period=Period.from_name(data["month"], data["year"]),
            day=int(day) if day not in (None, "") else None,
        )


@dataclass
class Biller:
    """
    A recurring bill paid once per calendar month.

    The timing bucket is derived, never stored: the bucketing day is the due
    day if present, otherwise the activation day.
    """

    id: str
    name: str
    category: str
    expected_amount: Money
    activation: ActivationWindow
    due_day: int | None = None
    deactivation: Period | None = None
    created_at: date | None = None
    linked_account_id: str | None = None

    kind: ClassVar[ObligationKind] = ObligationKind.BILLER

    @property
    def bucketing_day(self) -> int | None:
        """Day used to derive the timing bucket (due day, else activation day)."""
        if self.due_day is not None:
            return self.due_day
        return self.activation.day

    @property
    def timing_bucket(self) -> TimingBucket:
        """
        Timing bucket of this biller.

        Raises:
            MissingCadenceAnchorError: If neither a due day nor an activation day is set
        """
        day = self.bucketing_day
        if day is None:
            raise MissingCadenceAnchorError(f"Biller {self.id} ({self.name}) has no due day or activation day")
        return TimingBucket.for_day(day)

    @property
    def is_open_ended(self) -> bool:
        return self.deactivation is None

    def is_active_in(self, period: Period) -> bool:
        """True if schedules may be generated for `period`."""
        if period < self.activation.period:
            return False
        return self.deactivation is None or period < self.deactivation

    def deactivate(self, window: Period) -> None:
        """Soft-deactivate: stop scheduling from `window` onwards. Nothing is deleted."""
        self.deactivation = window

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "kind": self.kind.value,
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "expected_amount": self.expected_amount.to_cents(),
            "activation": self.activation.to_dict(),
            "due_day": self.due_day,
            "deactivation": (
                {"month": self.deactivation.month_name, "year": self.deactivation.year}
                if self.deactivation
                else None
            ),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "linked_account_id": self.linked_account_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Biller":
        """Create Biller from dictionary."""
        deactivation = data.get("deactivation")
        return cls(
            id=data["id"],
            name=data["name"],
            category=data.get("category", ""),
            expected_amount=Money.from_cents(data["expected_amount"]),
            activation=ActivationWindow.from_dict(data["activation"]),
            due_day=data.get("due_day"),
            deactivation=Period.from_name(deactivation["month"], deactivation["year"]) if deactivation else None,
            created_at=_date_or_none(data.get("created_at")),
            linked_account_id=data.get("linked_account_id"),
        )


@dataclass
class Installment:
    """
    A fixed-term loan repaid in `term_periods` monthly payments.

    `cumulative_paid` is a cache of the sum of this installment's schedule
    payments. It is recomputed from the schedules on every payment mutation
    and never incremented in place.
    """

    id: str
    name: str
    category: str
    total_amount: Money
    term_periods: int
    period_amount: Money | None = None
    start_date: date | None = None
    created_at: date | None = None
    linked_account_id: str | None = None
    cumulative_paid: Money = field(default_factory=Money.zero)

    kind: ClassVar[ObligationKind] = ObligationKind.INSTALLMENT

    @property
    def anchor_date(self) -> date:
        """
        Date the term is counted from (start date, else creation date).

        Raises:
            MissingCadenceAnchorError: If neither is set
        """
        anchor = self.start_date or self.created_at
        if anchor is None:
            raise MissingCadenceAnchorError(f"Installment {self.id} ({self.name}) has no start or creation date")
        return anchor

    @property
    def expected_amount(self) -> Money:
        """Regular per-period amount."""
        if self.period_amount is not None:
            return self.period_amount
        return self.period_amounts(max(self.term_periods, 1))[0]

    def period_amounts(self, periods: int) -> list[Money]:
        """
        Per-period expected amounts for a term of `periods`.

        With an explicit period amount every period carries it. Otherwise the
        total is split evenly and the remainder lands on the last period.
        """
        if self.period_amount is not None:
            return [self.period_amount] * periods
        return [Money.from_cents(c) for c in split_evenly(self.total_amount.to_cents(), periods)]

    @property
    def remaining_balance(self) -> Money:
        return self.total_amount - self.cumulative_paid

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "kind": self.kind.value,
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "total_amount": self.total_amount.to_cents(),
            "term_periods": self.term_periods,
            "period_amount": self.period_amount.to_cents() if self.period_amount is not None else None,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "linked_account_id": self.linked_account_id,
            "cumulative_paid": self.cumulative_paid.to_cents(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Installment":
        """Create Installment from dictionary."""
        return cls(
            id=data["id"],
            name=data["name"],
            category=data.get("category", ""),
            total_amount=Money.from_cents(data["total_amount"]),
            term_periods=int(data["term_periods"]),
            period_amount=_money_or_none(data.get("period_amount")),
            start_date=_date_or_none(data.get("start_date")),
            created_at=_date_or_none(data.get("created_at")),
            linked_account_id=data.get("linked_account_id"),
            cumulative_paid=Money.from_cents(data.get("cumulative_paid", 0)),
        )


Obligation = Union[Biller, Installment]


def obligation_from_dict(data: dict[str, Any]) -> Obligation:
    """Create a Biller or Installment from a dict carrying a `kind` field."""
    kind = ObligationKind(data["kind"])
    if kind is ObligationKind.BILLER:
        return Biller.from_dict(data)
    return Installment.from_dict(data)


@dataclass
class PaymentSchedule:
    """
    One payable instance of an obligation for one period.

    Billers carry a timing bucket, installments carry a payment number.
    Unsaved schedules (fresh from the generator) have `id=None`.
    """

    obligation_kind: ObligationKind
    obligation_id: str
    period: Period
    expected_amount: Money

    timing: TimingBucket | None = None
    payment_number: int | None = None
    due_date: date | None = None

    # Payment state
    paid_amount: Money | None = None
    date_paid: date | None = None
    linked_account_id: str | None = None
    linked_transaction_id: str | None = None
    note: str | None = None

    id: str | None = None

    @property
    def natural_key(self) -> tuple[str, str, str]:
        """
        Unique key of a schedule within its obligation.

        A biller has one schedule per period whatever its timing half; an
        installment has one schedule per payment number whatever its period.
        """
        if self.obligation_kind is ObligationKind.INSTALLMENT:
            slot = f"#{self.payment_number}"
        else:
            slot = self.period.to_key()
        return (self.obligation_kind.value, self.obligation_id, slot)

    @property
    def has_payment(self) -> bool:
        """True once any payment has been recorded or linked."""
        return self.paid_amount is not None or self.linked_transaction_id is not None

    @property
    def end_date(self) -> date:
        """Last day of the period this schedule covers (timing half for billers)."""
        if self.timing is not None:
            return BudgetPeriod(period=self.period, timing=self.timing).end_date
        return self.period.last_day

    @property
    def label(self) -> str:
        if self.payment_number is not None:
            return f"#{self.payment_number} {self.period}"
        if self.timing is not None:
            return f"{self.period} ({self.timing.value})"
        return str(self.period)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "obligation_kind": self.obligation_kind.value,
            "obligation_id": self.obligation_id,
            "month": self.period.month_name,
            "year": self.period.year,
            "timing": self.timing.value if self.timing else None,
            "payment_number": self.payment_number,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "expected_amount": self.expected_amount.to_cents(),
            "paid_amount": self.paid_amount.to_cents() if self.paid_amount is not None else None,
            "date_paid": self.date_paid.isoformat() if self.date_paid else None,
            "linked_account_id": self.linked_account_id,
            "linked_transaction_id": self.linked_transaction_id,
            "note": self.note,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PaymentSchedule":
        """Create PaymentSchedule from dictionary."""
        timing = data.get("timing")
        return cls(
            id=data.get("id"),
            obligation_kind=ObligationKind(data["obligation_kind"]),
            obligation_id=data["obligation_id"],
            period=Period.from_name(data["month"], data["year"]),
            timing=TimingBucket(timing) if timing else None,
            payment_number=data.get("payment_number"),
            due_date=_date_or_none(data.get("due_date")),
            expected_amount=Money.from_cents(data["expected_amount"]),
            paid_amount=_money_or_none(data.get("paid_amount")),
            date_paid=_date_or_none(data.get("date_paid")),
            linked_account_id=data.get("linked_account_id"),
            linked_transaction_id=data.get("linked_transaction_id"),
            note=data.get("note"),
        )
