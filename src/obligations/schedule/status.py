#!/usr/bin/env python3
"""
Payment Schedule Status Derivation

Status is computed on read, never stored. The reference date is always an
explicit argument so results are deterministic.
"""

from datetime import date
from enum import Enum

from .models import PaymentSchedule


class ScheduleStatus(Enum):
    """Derived payment state of a schedule."""

    PENDING = "pending"  # nothing paid, period not yet elapsed
    OVERDUE = "overdue"  # nothing paid, period elapsed
    PARTIAL = "partial"  # 0 < paid < expected
    PAID = "paid"  # paid >= expected


def derive_status(schedule: PaymentSchedule, as_of: date) -> ScheduleStatus:
    """
    Derive the status of a schedule as of a given date.

    A period has elapsed once `as_of` is past the schedule's end date: the
    last day of its timing half for billers, the last day of the month for
    installments. A recorded paid amount of zero counts as unpaid.

    Args:
        schedule: Schedule to classify
        as_of: Reference date ("today")

    Returns:
        ScheduleStatus
    """
    paid = schedule.paid_amount
    if paid is not None and paid.is_positive():
        if paid >= schedule.expected_amount:
            return ScheduleStatus.PAID
        return ScheduleStatus.PARTIAL

    if as_of > schedule.end_date:
        return ScheduleStatus.OVERDUE
    return ScheduleStatus.PENDING


def is_outstanding(schedule: PaymentSchedule, as_of: date) -> bool:
    """True if the schedule still needs money (pending, overdue or partial)."""
    return derive_status(schedule, as_of) is not ScheduleStatus.PAID
