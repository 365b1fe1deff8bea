#!/usr/bin/env python3
"""
Obligation Lifecycle Service

Creation, edits, soft deactivation and cascading deletion of obligations,
keeping their stored schedules consistent.
"""

import logging
from datetime import date

from ..core.dates import Period
from ..core.errors import InvalidObligationError
from .datastore import ObligationStore, ScheduleStore
from .generator import generate
from .models import Biller, Obligation, PaymentSchedule

logger = logging.getLogger(__name__)


class ObligationService:
    """Owns the obligation -> schedules direction of the data flow."""

    def __init__(self, obligations: ObligationStore, schedules: ScheduleStore):
        self.obligations = obligations
        self.schedules = schedules

    def create_obligation(self, obligation: Obligation, horizon_periods: int) -> list[PaymentSchedule]:
        """
        Save a new obligation and store its generated schedules.

        Generation runs before anything is saved, so an unschedulable
        obligation is rejected without side effects.

        Returns:
            The stored schedules
        """
        generated = generate(obligation, horizon_periods)
        self.obligations.save_obligation(obligation)
        stored = self.schedules.add_schedules(generated)
        logger.info(
            "Created %s %s (%s) with %d schedules", obligation.kind.value, obligation.id, obligation.name, len(stored)
        )
        return stored

    def regenerate_future(
        self, obligation: Obligation, horizon_periods: int, as_of: date
    ) -> list[PaymentSchedule]:
        """
        Replace future unpaid schedules with ones generated from the obligation.

        Only schedules with no recorded payment whose period has not elapsed
        by `as_of` are deleted; paid and past schedules are never touched.

        Returns:
            The newly stored schedules
        """
        generated = [s for s in generate(obligation, horizon_periods) if s.end_date >= as_of]
        removed, stored = self.schedules.replace_unpaid(obligation.id, generated, not_before=as_of)
        logger.info(
            "Regenerated schedules for %s: removed %d unpaid, stored %d", obligation.id, len(removed), len(stored)
        )
        return stored

    def edit_obligation(self, updated: Obligation, horizon_periods: int, as_of: date) -> list[PaymentSchedule]:
        """
        Save an edited obligation and regenerate its future unpaid schedules.

        Raises:
            ObligationNotFoundError: If the obligation does not exist yet
        """
        existing = self.obligations.get_obligation(updated.id)
        if existing.kind is not updated.kind:
            raise InvalidObligationError(
                f"Cannot change obligation {updated.id} from {existing.kind.value} to {updated.kind.value}"
            )
        # Validate before persisting the edit
        generate(updated, horizon_periods)
        self.obligations.save_obligation(updated)
        return self.regenerate_future(updated, horizon_periods, as_of)

    def deactivate(self, biller_id: str, window: Period) -> Biller:
        """
        Soft-deactivate a biller from `window` onwards.

        Existing schedules stay in place; generation simply stops emitting
        periods at or after the window.
        """
        biller = self.obligations.get_obligation(biller_id)
        if not isinstance(biller, Biller):
            raise InvalidObligationError(f"Only billers can be deactivated: {biller_id}")
        biller.deactivate(window)
        self.obligations.save_obligation(biller)
        logger.info("Deactivated biller %s from %s", biller_id, window)
        return biller

    def delete_obligation(self, obligation_id: str) -> int:
        """
        Delete an obligation and cascade to its schedules.

        Returns:
            Number of schedules deleted
        """
        self.obligations.delete_obligation(obligation_id)
        count = self.schedules.delete_for_obligation(obligation_id)
        logger.info("Deleted obligation %s and %d schedules", obligation_id, count)
        return count
