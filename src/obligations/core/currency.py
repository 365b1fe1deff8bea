#!/usr/bin/env python3
"""
Currency Conversion and Handling Utilities

All obligation, payment and budget amounts are handled as integer cents.

Currency Systems:
- Internal calculations use cents: 100 cents = 1.00
- Store and API boundaries may carry Decimal or string amounts
- Display uses plain decimal strings: "1500.00"

Key Principles:
- Never use floating-point arithmetic for currency calculations
- Parse strings and Decimals straight to integer cents
- Allocate division remainders explicitly so totals stay exact
"""

from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation


def cents_to_dollars_str(cents: int) -> str:
    """
    Convert cents to a decimal string using pure integer arithmetic.

    Args:
        cents: Amount in cents

    Returns:
        Formatted amount string

    Example:
        cents_to_dollars_str(150000) -> "1500.00"
    """
    is_negative = cents < 0
    abs_cents = abs(int(cents))

    whole = abs_cents // 100
    remainder = abs_cents % 100

    if is_negative:
        return f"-{whole}.{remainder:02d}"
    return f"{whole}.{remainder:02d}"


def parse_dollars_to_cents(dollars_str: str) -> int:
    """
    Parse an amount string to cents using integer arithmetic only.

    Args:
        dollars_str: String representation of an amount

    Returns:
        Amount in cents

    Raises:
        ValueError: If the string is not a plain decimal amount

    Examples:
        parse_dollars_to_cents("12.34") -> 1234
        parse_dollars_to_cents("$12.34") -> 1234
        parse_dollars_to_cents("1,234.56") -> 123456
        parse_dollars_to_cents("12") -> 1200
    """
    clean = dollars_str.replace("$", "").replace(",", "").strip()

    if not clean:
        return 0

    is_negative = clean.startswith("-")
    if is_negative:
        clean = clean[1:]

    if "." in clean:
        whole_str, frac_str = clean.split(".", 1)
        whole = int(whole_str) if whole_str else 0
        # Fractional cents are truncated
        cents = int(frac_str.ljust(2, "0")[:2])
        total = whole * 100 + cents
    else:
        total = int(clean) * 100

    return -total if is_negative else total


def decimal_to_cents(amount: Decimal | int | str) -> int:
    """
    Convert a Decimal (or int/str) amount to cents, rounding half-even.

    Raises:
        ValueError: If the amount cannot be interpreted as a number
    """
    try:
        value = Decimal(str(amount)) if not isinstance(amount, Decimal) else amount
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount: {amount!r}") from e
    if not value.is_finite():
        raise ValueError(f"Invalid amount: {amount!r}")
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_EVEN))


def cents_to_decimal(cents: int) -> Decimal:
    """Convert cents to a two-place Decimal."""
    return (Decimal(cents) / 100).quantize(Decimal("0.01"))


def allocate_remainder(amounts: list[int], total: int) -> list[int]:
    """
    Allocate remainder from integer division to ensure exact sum.

    The last item gets any remainder to guarantee the sum equals the total.
    Used when an installment total is split evenly across its term.

    Args:
        amounts: List of calculated amounts before remainder allocation
        total: Target total that amounts should sum to

    Returns:
        List of amounts with remainder allocated to last item
    """
    if not amounts:
        return amounts

    amounts_copy = amounts.copy()
    current_sum = sum(amounts_copy[:-1])
    amounts_copy[-1] = total - current_sum
    return amounts_copy


def split_evenly(total: int, parts: int) -> list[int]:
    """
    Split a cents total into `parts` near-equal amounts that sum exactly.

    Example:
        split_evenly(1000, 3) -> [333, 333, 334]
    """
    if parts <= 0:
        raise ValueError("parts must be positive")
    base = total // parts
    return allocate_remainder([base] * parts, total)


def format_cents(cents: int) -> str:
    """Format cents as an amount string."""
    return cents_to_dollars_str(cents)
