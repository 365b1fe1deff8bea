#!/usr/bin/env python3
"""
Ledger Domain Models

A ledger transaction is a money-movement record owned by the Ledger Store.
The engine reads transactions for reconciliation and creates them when a
payment is applied.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any

from ..core.dates import Period, TimingBucket
from ..core.money import Money


@dataclass
class LedgerTransaction:
    """
    Money-movement record.

    Payment entries created by the engine carry a positive amount (money paid
    out towards an obligation) and a `linked_schedule_id`.
    """

    name: str
    date: date
    amount: Money
    account_id: str

    linked_schedule_id: str | None = None
    note: str | None = None
    voided: bool = False
    # Set when a partial payment application could not be rolled back
    orphaned: bool = False

    id: str | None = None

    @property
    def is_live(self) -> bool:
        """Counts towards the one-link-per-schedule rule."""
        return not self.voided

    @property
    def period(self) -> Period:
        return Period.from_date(self.date)

    @property
    def timing(self) -> TimingBucket:
        return TimingBucket.for_day(self.date.day)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "date": self.date.isoformat(),
            "amount": self.amount.to_cents(),
            "account_id": self.account_id,
            "linked_schedule_id": self.linked_schedule_id,
            "note": self.note,
            "voided": self.voided,
            "orphaned": self.orphaned,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LedgerTransaction":
        """Create LedgerTransaction from dictionary."""
        return cls(
            id=data.get("id"),
            name=data["name"],
            date=date.fromisoformat(data["date"]),
            amount=Money.from_cents(data["amount"]),
            account_id=data["account_id"],
            linked_schedule_id=data.get("linked_schedule_id"),
            note=data.get("note"),
            voided=data.get("voided", False),
            orphaned=data.get("orphaned", False),
        )


@dataclass(frozen=True)
class CreditAccount:
    """A payment account that bills on a fixed day of each month."""

    id: str
    billing_day: int
    name: str | None = None

    def __post_init__(self) -> None:
        if not 1 <= self.billing_day <= 31:
            raise ValueError(f"Billing day must be between 1 and 31, got {self.billing_day}")

    @classmethod
    def parse(cls, text: str) -> "CreditAccount":
        """Parse the `ACCOUNT_ID:BILLING_DAY` form used on the command line."""
        account_id, sep, day = text.rpartition(":")
        if not sep or not account_id or not day.isdigit():
            raise ValueError(f"Invalid credit account: {text}. Use ACCOUNT_ID:BILLING_DAY")
        return cls(id=account_id, billing_day=int(day))
