#!/usr/bin/env python3
"""
Schedule Generator

Expands an obligation into a bounded, ordered sequence of unsaved
PaymentSchedule instances. Generation is pure: it reads nothing but the
obligation and the horizon, so the same inputs always yield the same output.
"""

import logging

from ..core.dates import Period
from ..core.errors import InvalidObligationError
from .models import Biller, Installment, Obligation, PaymentSchedule

logger = logging.getLogger(__name__)


def generate(obligation: Obligation, horizon_periods: int) -> list[PaymentSchedule]:
    """
    Generate payment schedules for an obligation.

    Args:
        obligation: Biller or Installment
        horizon_periods: Number of monthly periods to cover for billers.
            Installments always cover their full term.

    Returns:
        Schedules ordered chronologically, with `id=None`

    Raises:
        InvalidObligationError: If amounts are unusable
        MissingCadenceAnchorError: If there is no day/date to schedule from
        ValueError: If horizon_periods < 1
    """
    if horizon_periods < 1:
        raise ValueError(f"horizon_periods must be at least 1, got {horizon_periods}")

    if isinstance(obligation, Biller):
        return generate_biller_schedules(obligation, horizon_periods)
    return generate_installment_schedules(obligation)


def biller_start_period(biller: Biller) -> Period:
    """Later of the creation month and the activation month."""
    start = biller.activation.period
    if biller.created_at is not None:
        start = max(start, Period.from_date(biller.created_at))
    return start


def generate_biller_schedules(biller: Biller, horizon_periods: int) -> list[PaymentSchedule]:
    """
    One schedule per month from the start period for `horizon_periods` months.

    Months at or after the deactivation window are skipped. Each schedule
    snapshots the biller's current timing bucket and expected amount.
    """
    if biller.expected_amount.to_cents() < 0:
        raise InvalidObligationError(f"Biller {biller.id} has negative expected amount {biller.expected_amount}")

    timing = biller.timing_bucket
    due_day = biller.bucketing_day
    start = biller_start_period(biller)

    schedules = []
    for offset in range(horizon_periods):
        period = start.shift(offset)
        if not biller.is_active_in(period):
            continue
        schedules.append(
            PaymentSchedule(
                obligation_kind=biller.kind,
                obligation_id=biller.id,
                period=period,
                expected_amount=biller.expected_amount,
                timing=timing,
                due_date=period.day(due_day),  # type: ignore[arg-type]
            )
        )

    logger.debug("Generated %d schedules for biller %s starting %s", len(schedules), biller.id, start)
    return schedules


def generate_installment_schedules(installment: Installment) -> list[PaymentSchedule]:
    """
    Exactly one schedule per term period, numbered 1..N from the anchor date.

    A non-positive term is clamped to a single period with a warning.
    """
    if installment.period_amount is not None and not installment.period_amount.is_positive():
        raise InvalidObligationError(
            f"Installment {installment.id} has non-positive period amount {installment.period_amount}"
        )
    if installment.period_amount is None and not installment.total_amount.is_positive():
        raise InvalidObligationError(
            f"Installment {installment.id} has non-positive total amount {installment.total_amount}"
        )

    term = installment.term_periods
    if term <= 0:
        logger.warning(
            "Installment %s (%s) has term_periods=%d; scheduling a single period instead",
            installment.id,
            installment.name,
            term,
        )
        term = 1

    anchor = installment.anchor_date
    start = Period.from_date(anchor)
    amounts = installment.period_amounts(term)

    if not amounts[0].is_positive():
        raise InvalidObligationError(
            f"Installment {installment.id} total {installment.total_amount} is too small for {term} periods"
        )

    schedules = []
    for number, amount in enumerate(amounts, start=1):
        period = start.shift(number - 1)
        schedules.append(
            PaymentSchedule(
                obligation_kind=installment.kind,
                obligation_id=installment.id,
                period=period,
                expected_amount=amount,
                payment_number=number,
                due_date=period.day(anchor.day),
                linked_account_id=installment.linked_account_id,
            )
        )

    logger.debug("Generated %d schedules for installment %s starting %s", len(schedules), installment.id, start)
    return schedules
