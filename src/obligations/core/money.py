#!/usr/bin/env python3
"""
Money Primitive Type

Immutable currency value wrapper that uses integer cents internally.
Prevents floating-point errors and provides type-safe currency operations.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from .currency import (
    cents_to_decimal,
    cents_to_dollars_str,
    decimal_to_cents,
    parse_dollars_to_cents,
)


@dataclass(frozen=True, order=True)
class Money:
    """
    Immutable money value in cents.

    Supports both positive and negative amounts. Obligation amounts and
    payments are positive; ledger entries may carry either sign.

    Examples:
        >>> bill = Money.from_dollars(1500)
        >>> str(bill)
        '1500.00'

        >>> paid = Money.from_dollars("750.50")
        >>> str(bill - paid)
        '749.50'

        >>> Money.sum([bill, paid])
        Money(cents=225050)
    """

    cents: int

    @classmethod
    def from_cents(cls, cents: int) -> "Money":
        """Create Money from cents."""
        return cls(cents=cents)

    @classmethod
    def from_dollars(cls, dollars: str | int) -> "Money":
        """
        Parse from a decimal string like '1500.00' or integer whole units.

        Args:
            dollars: String like "12.34" or integer like 12

        Returns:
            Money object
        """
        if isinstance(dollars, int):
            return cls(cents=dollars * 100)
        return cls(cents=parse_dollars_to_cents(dollars))

    @classmethod
    def from_decimal(cls, amount: Decimal | int | str) -> "Money":
        """Create Money from a Decimal amount, rounding half-even to cents."""
        return cls(cents=decimal_to_cents(amount))

    @classmethod
    def zero(cls) -> "Money":
        """The zero amount."""
        return cls(cents=0)

    @classmethod
    def sum(cls, amounts: Iterable["Money"]) -> "Money":
        """Sum an iterable of Money values (empty sums to zero)."""
        return cls(cents=sum(amount.cents for amount in amounts))

    def to_cents(self) -> int:
        """Get value in cents."""
        return self.cents

    def to_decimal(self) -> Decimal:
        """Get value as a two-place Decimal."""
        return cents_to_decimal(self.cents)

    def is_zero(self) -> bool:
        return self.cents == 0

    def is_positive(self) -> bool:
        return self.cents > 0

    def abs(self) -> "Money":
        return Money(cents=abs(self.cents))

    # Arithmetic only combines Money with Money, or Money with an int multiplier
    def __add__(self, other: "Money") -> "Money":
        return Money(cents=self.cents + other.cents)

    def __sub__(self, other: "Money") -> "Money":
        return Money(cents=self.cents - other.cents)

    def __neg__(self) -> "Money":
        return Money(cents=-self.cents)

    def __mul__(self, multiplier: int) -> "Money":
        return Money(cents=self.cents * multiplier)

    def __str__(self) -> str:
        """Format as plain decimal string."""
        return cents_to_dollars_str(self.cents)
