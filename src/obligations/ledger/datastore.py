#!/usr/bin/env python3
"""
Ledger Store

Holds ledger transactions and enforces the uniqueness of
`linked_schedule_id` among live (non-voided) transactions inside the store
locks, which is what closes the race between two concurrent payment attempts
on the same schedule. Deleting or voiding a transaction notifies subscribed
listeners so linked schedules can be reverted.
"""

import logging
import uuid
from collections.abc import Callable
from datetime import date
from pathlib import Path
from typing import Any

from ..core.dates import Period
from ..core.datastore_mixin import JsonStoreMixin
from ..core.errors import DuplicatePaymentError
from .models import LedgerTransaction

logger = logging.getLogger(__name__)

TransactionListener = Callable[[LedgerTransaction], None]


class LedgerStore(JsonStoreMixin):
    """Persists ledger transactions with a unique live link per schedule."""

    def __init__(self, path: Path | None = None):
        super().__init__(path)
        self._transactions: dict[str, LedgerTransaction] = {}
        # Unique index: schedule id -> live transaction id
        self._link_index: dict[str, str] = {}
        self._listeners: list[TransactionListener] = []
        self._load()

    def _records_to_json(self) -> list[dict[str, Any]]:
        return [t.to_dict() for t in self._transactions.values()]

    def _records_from_json(self, data: list[dict[str, Any]]) -> None:
        self._transactions = {}
        self._link_index = {}
        for item in data:
            tx = LedgerTransaction.from_dict(item)
            if tx.id is None:
                continue
            self._transactions[tx.id] = tx
            if tx.linked_schedule_id and tx.is_live:
                self._link_index[tx.linked_schedule_id] = tx.id

    def subscribe(self, listener: TransactionListener) -> None:
        """Register a callback for transaction deletion and voiding."""
        self._listeners.append(listener)

    def _notify(self, transaction: LedgerTransaction) -> None:
        for listener in self._listeners:
            listener(transaction)

    def create_transaction(self, transaction: LedgerTransaction) -> LedgerTransaction:
        """
        Insert a transaction, assigning an id.

        Raises:
            DuplicatePaymentError: If a live transaction is already linked to
                the same schedule
        """
        with self._writing():
            schedule_id = transaction.linked_schedule_id
            if schedule_id and transaction.is_live and schedule_id in self._link_index:
                raise DuplicatePaymentError(schedule_id, self._link_index[schedule_id])
            transaction.id = transaction.id or str(uuid.uuid4())
            self._transactions[transaction.id] = transaction
            if schedule_id and transaction.is_live:
                self._link_index[schedule_id] = transaction.id
            self._persist()

        logger.debug("Created ledger transaction %s (%s, %s)", transaction.id, transaction.name, transaction.amount)
        return transaction

    def get_transaction(self, transaction_id: str) -> LedgerTransaction | None:
        with self._reading():
            return self._transactions.get(transaction_id)

    def get_transactions_for_period_and_account(
        self, period: Period, account_id: str | None = None, include_voided: bool = False
    ) -> list[LedgerTransaction]:
        """Transactions dated within a calendar month, optionally for one account."""
        with self._reading():
            result = [
                t
                for t in self._transactions.values()
                if period.contains(t.date)
                and (account_id is None or t.account_id == account_id)
                and (include_voided or t.is_live)
            ]
        return sorted(result, key=lambda t: (t.date, t.id or ""))

    def get_transactions_for_account(
        self, account_id: str, start: date, end: date, include_voided: bool = False
    ) -> list[LedgerTransaction]:
        """Transactions of one account dated from `start` to `end` inclusive."""
        with self._reading():
            result = [
                t
                for t in self._transactions.values()
                if t.account_id == account_id and start <= t.date <= end and (include_voided or t.is_live)
            ]
        return sorted(result, key=lambda t: (t.date, t.id or ""))

    def transactions_for_schedule(self, schedule_id: str) -> list[LedgerTransaction]:
        """Live transactions that name this schedule as their link."""
        with self._reading():
            return [t for t in self._transactions.values() if t.linked_schedule_id == schedule_id and t.is_live]

    def link_transaction(self, transaction_id: str, schedule_id: str) -> LedgerTransaction:
        """
        Tie an existing unlinked transaction to a schedule.

        Raises:
            KeyError: If the transaction does not exist
            ValueError: If it is voided or already linked elsewhere
            DuplicatePaymentError: If another live transaction holds the link
        """
        with self._writing():
            tx = self._transactions.get(transaction_id)
            if tx is None:
                raise KeyError(f"Ledger transaction not found: {transaction_id}")
            if not tx.is_live:
                raise ValueError(f"Ledger transaction {transaction_id} is voided")
            if tx.linked_schedule_id not in (None, schedule_id):
                raise ValueError(
                    f"Ledger transaction {transaction_id} is already linked to schedule {tx.linked_schedule_id}"
                )
            holder = self._link_index.get(schedule_id)
            if holder not in (None, transaction_id):
                raise DuplicatePaymentError(schedule_id, holder)
            tx.linked_schedule_id = schedule_id
            self._link_index[schedule_id] = transaction_id
            self._persist()
            return tx

    def _release_link(self, tx: LedgerTransaction) -> None:
        if tx.linked_schedule_id and self._link_index.get(tx.linked_schedule_id) == tx.id:
            del self._link_index[tx.linked_schedule_id]

    def delete_transaction(self, transaction_id: str, notify: bool = True) -> LedgerTransaction | None:
        """
        Delete a transaction and, unless told otherwise, notify listeners.

        Deleting an unknown id is a no-op and returns None.
        """
        with self._writing():
            tx = self._transactions.pop(transaction_id, None)
            if tx is None:
                return None
            self._release_link(tx)
            self._persist()

        logger.info("Deleted ledger transaction %s", transaction_id)
        if notify:
            self._notify(tx)
        return tx

    def void_transaction(self, transaction_id: str) -> LedgerTransaction:
        """
        Void a transaction: it stays in the ledger but no longer counts.

        Raises:
            KeyError: If the transaction does not exist
        """
        with self._writing():
            tx = self._transactions.get(transaction_id)
            if tx is None:
                raise KeyError(f"Ledger transaction not found: {transaction_id}")
            if tx.voided:
                return tx
            tx.voided = True
            self._release_link(tx)
            self._persist()

        logger.info("Voided ledger transaction %s", transaction_id)
        self._notify(tx)
        return tx

    def mark_orphaned(self, transaction_id: str) -> None:
        """Flag a transaction for the reconciliation sweep."""
        with self._writing():
            tx = self._transactions.get(transaction_id)
            if tx is None:
                return
            tx.orphaned = True
            self._persist()

    def orphaned_transactions(self) -> list[LedgerTransaction]:
        with self._reading():
            return [t for t in self._transactions.values() if t.orphaned and t.is_live]

    def all_transactions(self) -> list[LedgerTransaction]:
        with self._reading():
            result = list(self._transactions.values())
        return sorted(result, key=lambda t: (t.date, t.id or ""))

    def item_count(self) -> int:
        return len(self._transactions)

    def summary_text(self) -> str:
        linked = len(self._link_index)
        return f"Ledger: {self.item_count()} transactions ({linked} linked to schedules)"
