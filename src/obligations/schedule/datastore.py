#!/usr/bin/env python3
"""
Obligation and Schedule Stores

In-memory stores with optional JSON-file persistence. Every conditional
update (record a first payment, delete unpaid schedules) runs entirely under
the store locks, so the condition and the write cannot interleave with a
concurrent caller in this or another process.
"""

import logging
import uuid
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import fields
from datetime import date
from pathlib import Path
from typing import Any

from ..core.dates import Period, TimingBucket
from ..core.datastore_mixin import JsonStoreMixin
from ..core.errors import DuplicatePaymentError, ObligationNotFoundError, ScheduleNotFoundError
from ..core.money import Money
from .models import Obligation, ObligationKind, PaymentSchedule, obligation_from_dict

logger = logging.getLogger(__name__)


class ObligationStore(JsonStoreMixin):
    """Persists Biller and Installment definitions."""

    def __init__(self, path: Path | None = None):
        super().__init__(path)
        self._obligations: dict[str, Obligation] = {}
        self._load()

    def _records_to_json(self) -> list[dict[str, Any]]:
        return [o.to_dict() for o in self._obligations.values()]

    def _records_from_json(self, data: list[dict[str, Any]]) -> None:
        self._obligations = {item["id"]: obligation_from_dict(item) for item in data}

    def get_obligation(self, obligation_id: str) -> Obligation:
        """
        Raises:
            ObligationNotFoundError: If the id is unknown
        """
        with self._reading():
            try:
                return self._obligations[obligation_id]
            except KeyError:
                raise ObligationNotFoundError(f"Obligation not found: {obligation_id}") from None

    def list_obligations(
        self, kind: ObligationKind | None = None, active_in: Period | None = None
    ) -> list[Obligation]:
        """
        List obligations, optionally filtered.

        Args:
            kind: Only billers or only installments
            active_in: Only billers active in this period (installments always pass)
        """
        with self._reading():
            result = list(self._obligations.values())
        if kind is not None:
            result = [o for o in result if o.kind is kind]
        if active_in is not None:
            result = [
                o
                for o in result
                if o.kind is ObligationKind.INSTALLMENT or o.is_active_in(active_in)  # type: ignore[union-attr]
            ]
        return sorted(result, key=lambda o: (o.name.lower(), o.id))

    def save_obligation(self, obligation: Obligation) -> Obligation:
        with self._writing():
            self._obligations[obligation.id] = obligation
            self._persist()
        return obligation

    def delete_obligation(self, obligation_id: str) -> None:
        with self._writing():
            if self._obligations.pop(obligation_id, None) is None:
                raise ObligationNotFoundError(f"Obligation not found: {obligation_id}")
            self._persist()

    def item_count(self) -> int:
        return len(self._obligations)

    def summary_text(self) -> str:
        billers = len(self.list_obligations(kind=ObligationKind.BILLER))
        installments = self.item_count() - billers
        return f"Obligations: {billers} billers, {installments} installments"


class ScheduleStore(JsonStoreMixin):
    """
    Persists PaymentSchedule instances.

    Enforces uniqueness of the natural key (owner plus period for billers,
    owner plus payment number for installments) and assigns ids on insert.
    """

    def __init__(self, path: Path | None = None):
        super().__init__(path)
        self._schedules: dict[str, PaymentSchedule] = {}
        self._load()

    def _records_to_json(self) -> list[dict[str, Any]]:
        return [s.to_dict() for s in self._schedules.values()]

    def _records_from_json(self, data: list[dict[str, Any]]) -> None:
        schedules = [PaymentSchedule.from_dict(item) for item in data]
        self._schedules = {s.id: s for s in schedules if s.id}

    def add_schedules(self, schedules: Iterable[PaymentSchedule]) -> list[PaymentSchedule]:
        """
        Insert unsaved schedules, assigning ids.

        Schedules whose natural key already exists are skipped; the stored
        instance is left untouched.

        Returns:
            The schedules that were actually inserted
        """
        inserted = []
        with self._writing():
            existing = {s.natural_key for s in self._schedules.values()}
            for schedule in schedules:
                if schedule.natural_key in existing:
                    logger.debug("Skipping existing schedule %s", schedule.natural_key)
                    continue
                schedule.id = schedule.id or str(uuid.uuid4())
                self._schedules[schedule.id] = schedule
                existing.add(schedule.natural_key)
                inserted.append(schedule)
            self._persist()
        return inserted

    def replace_unpaid(
        self, obligation_id: str, schedules: Iterable[PaymentSchedule], not_before: date | None = None
    ) -> tuple[list[PaymentSchedule], list[PaymentSchedule]]:
        """
        Delete an obligation's unpaid schedules and insert new ones in one write.

        Returns:
            Tuple of (deleted schedules, inserted schedules)
        """
        with self._writing():
            removed = self.delete_unpaid(obligation_id, not_before=not_before)
            inserted = self.add_schedules(schedules)
        return removed, inserted

    @contextmanager
    def _restore_on_failure(self, schedule: PaymentSchedule) -> Iterator[None]:
        """Put back the schedule's field values if the enclosed update raises."""
        saved = {f.name: getattr(schedule, f.name) for f in fields(schedule)}
        try:
            yield
        except Exception:
            for name, value in saved.items():
                setattr(schedule, name, value)
            raise

    def get_schedule(self, schedule_id: str) -> PaymentSchedule:
        """
        Raises:
            ScheduleNotFoundError: If the id is unknown
        """
        with self._reading():
            try:
                return self._schedules[schedule_id]
            except KeyError:
                raise ScheduleNotFoundError(f"Payment schedule not found: {schedule_id}") from None

    def list_for_obligation(self, obligation_id: str) -> list[PaymentSchedule]:
        """Schedules of one obligation, ordered by period then payment number."""
        with self._reading():
            result = [s for s in self._schedules.values() if s.obligation_id == obligation_id]
        return sorted(result, key=lambda s: (s.period, s.payment_number or 0))

    def find(
        self, obligation_id: str, period: Period, timing: TimingBucket | None = None
    ) -> PaymentSchedule | None:
        """Schedule of an obligation for a period (and timing half, if given)."""
        for schedule in self.list_for_obligation(obligation_id):
            if schedule.period == period and (timing is None or schedule.timing in (timing, None)):
                return schedule
        return None

    def all_schedules(self) -> list[PaymentSchedule]:
        with self._reading():
            result = list(self._schedules.values())
        return sorted(result, key=lambda s: (s.period, s.obligation_id, s.payment_number or 0))

    def record_payment(
        self,
        schedule_id: str,
        paid_amount: Money,
        date_paid: date,
        account_id: str,
        transaction_id: str,
        note: str | None = None,
    ) -> PaymentSchedule:
        """
        Record the first payment on a schedule.

        Conditional update: succeeds only while the schedule has no linked
        transaction.

        Raises:
            ScheduleNotFoundError: If the id is unknown
            DuplicatePaymentError: If a transaction is already linked
        """
        with self._writing():
            schedule = self.get_schedule(schedule_id)
            if schedule.linked_transaction_id is not None:
                raise DuplicatePaymentError(schedule_id, schedule.linked_transaction_id)
            with self._restore_on_failure(schedule):
                schedule.paid_amount = paid_amount
                schedule.date_paid = date_paid
                schedule.linked_account_id = account_id
                schedule.linked_transaction_id = transaction_id
                if note:
                    schedule.note = note
                self._persist()
            return schedule

    def update_expected_amount(self, schedule_id: str, expected_amount: Money) -> PaymentSchedule | None:
        """
        Change the expected amount of an unpaid schedule.

        Returns:
            The updated schedule, or None if it already has a payment

        Raises:
            ScheduleNotFoundError: If the id is unknown
        """
        with self._writing():
            schedule = self.get_schedule(schedule_id)
            if schedule.has_payment:
                return None
            with self._restore_on_failure(schedule):
                schedule.expected_amount = expected_amount
                self._persist()
            return schedule

    def update_paid_amount(
        self,
        schedule_id: str,
        paid_amount: Money | None,
        transaction_id: str | None = None,
        date_paid: date | None = None,
        account_id: str | None = None,
    ) -> PaymentSchedule:
        """
        Overwrite the paid amount (correction path), optionally linking a transaction.

        Payment date and account are only overwritten when given.

        Raises:
            ScheduleNotFoundError: If the id is unknown
            DuplicatePaymentError: If linking while a different transaction is linked
        """
        with self._writing():
            schedule = self.get_schedule(schedule_id)
            if transaction_id is not None and schedule.linked_transaction_id not in (None, transaction_id):
                raise DuplicatePaymentError(schedule_id, schedule.linked_transaction_id)
            with self._restore_on_failure(schedule):
                if transaction_id is not None:
                    schedule.linked_transaction_id = transaction_id
                schedule.paid_amount = paid_amount
                if date_paid is not None:
                    schedule.date_paid = date_paid
                if account_id is not None:
                    schedule.linked_account_id = account_id
                self._persist()
            return schedule

    def clear_payment(self, schedule_id: str, transaction_id: str | None = None) -> bool:
        """
        Null out all payment fields.

        When `transaction_id` is given the schedule is only cleared if it is
        linked to that transaction (or to none), so a stale event cannot wipe
        a newer payment.

        Returns:
            True if anything changed
        """
        with self._writing():
            schedule = self._schedules.get(schedule_id)
            if schedule is None:
                return False
            if transaction_id is not None and schedule.linked_transaction_id not in (None, transaction_id):
                logger.warning(
                    "Not clearing schedule %s: linked to %s, not %s",
                    schedule_id,
                    schedule.linked_transaction_id,
                    transaction_id,
                )
                return False
            if not schedule.has_payment and schedule.date_paid is None:
                return False
            with self._restore_on_failure(schedule):
                schedule.paid_amount = None
                schedule.date_paid = None
                schedule.linked_account_id = None
                schedule.linked_transaction_id = None
                self._persist()
            return True

    def delete_unpaid(self, obligation_id: str, not_before: date | None = None) -> list[PaymentSchedule]:
        """
        Delete schedules of an obligation that have no payment recorded.

        Args:
            obligation_id: Owner whose schedules to delete
            not_before: Only delete schedules whose period ends on or after this date

        Returns:
            The deleted schedules
        """
        with self._writing():
            doomed = [
                s
                for s in self._schedules.values()
                if s.obligation_id == obligation_id
                and not s.has_payment
                and (not_before is None or s.end_date >= not_before)
            ]
            for schedule in doomed:
                del self._schedules[schedule.id]  # type: ignore[arg-type]
            self._persist()
        return doomed

    def delete_for_obligation(self, obligation_id: str) -> int:
        """Cascade delete all schedules of an obligation. Returns the count."""
        with self._writing():
            ids = [sid for sid, s in self._schedules.items() if s.obligation_id == obligation_id]
            for sid in ids:
                del self._schedules[sid]
            self._persist()
        return len(ids)

    def item_count(self) -> int:
        return len(self._schedules)

    def summary_text(self) -> str:
        paid = sum(1 for s in self._schedules.values() if s.has_payment)
        return f"Schedules: {self.item_count()} ({paid} with payments)"
