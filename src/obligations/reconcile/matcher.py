#!/usr/bin/env python3
"""
Schedule-to-Ledger Matching Strategies

Two explicit strategies behind one interface, tried in order:
1. Linked Transaction - the schedule's own linked ledger entry
2. Fuzzy Match - unlinked legacy entries matched by name, amount and period

All fuzzy matches require penny-perfect amounts - no tolerance for differences.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from ..core.money import Money
from ..ledger.datastore import LedgerStore
from ..ledger.models import LedgerTransaction
from ..schedule.models import Obligation, PaymentSchedule

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    """Ledger evidence found for one schedule."""

    method: str
    transactions: list[LedgerTransaction] = field(default_factory=list)

    @property
    def amount(self) -> Money:
        """Ledger-derived paid amount (sum of matched transactions)."""
        return Money.sum(t.amount for t in self.transactions)

    @property
    def transaction_ids(self) -> list[str]:
        return [t.id for t in self.transactions if t.id]


class MatchStrategy(ABC):
    """Finds ledger transactions that evidence payment of a schedule."""

    name: str = "strategy"

    @abstractmethod
    def applies_to(self, schedule: PaymentSchedule) -> bool:
        """Whether this strategy should be used for the schedule."""

    @abstractmethod
    def match(self, schedule: PaymentSchedule, obligation: Obligation, ledger: LedgerStore) -> MatchResult:
        """Return the matching transactions (possibly none)."""


class LinkedTransactionStrategy(MatchStrategy):
    """Exact path: the schedule carries a `linked_transaction_id`."""

    name = "linked"

    def applies_to(self, schedule: PaymentSchedule) -> bool:
        return schedule.linked_transaction_id is not None

    def match(self, schedule: PaymentSchedule, obligation: Obligation, ledger: LedgerStore) -> MatchResult:
        tx = ledger.get_transaction(schedule.linked_transaction_id)  # type: ignore[arg-type]
        if tx is None or not tx.is_live:
            # Deleted or voided independently of the engine
            logger.debug(
                "Linked transaction %s of schedule %s is gone", schedule.linked_transaction_id, schedule.id
            )
            return MatchResult(method=self.name)
        return MatchResult(method=self.name, transactions=[tx])


class FuzzyMatchStrategy(MatchStrategy):
    """
    Fallback for schedules without a link.

    A transaction is a candidate when all of these hold:
    - its name contains the obligation's name (case-insensitive)
    - its amount equals the schedule's expected amount exactly
    - it is dated in the schedule's month, and for billers in the same
      timing bucket as the schedule
    - it is not linked to a different schedule
    """

    name = "fuzzy"

    def applies_to(self, schedule: PaymentSchedule) -> bool:
        return schedule.linked_transaction_id is None

    def is_candidate(
        self, transaction: LedgerTransaction, schedule: PaymentSchedule, obligation: Obligation
    ) -> bool:
        if transaction.linked_schedule_id not in (None, schedule.id):
            return False
        if obligation.name.lower() not in transaction.name.lower():
            return False
        if transaction.amount != schedule.expected_amount:
            return False
        if not schedule.period.contains(transaction.date):
            return False
        if schedule.timing is not None and transaction.timing is not schedule.timing:
            return False
        return True

    def match(self, schedule: PaymentSchedule, obligation: Obligation, ledger: LedgerStore) -> MatchResult:
        candidates = [
            tx
            for tx in ledger.get_transactions_for_period_and_account(schedule.period)
            if self.is_candidate(tx, schedule, obligation)
        ]
        logger.debug(
            "Fuzzy match for %s %s: %d candidate(s)", obligation.name, schedule.label, len(candidates)
        )
        return MatchResult(method=self.name, transactions=candidates)


def default_strategies(fuzzy_matching: bool = True) -> list[MatchStrategy]:
    """Exact-link first, fuzzy fallback second (unless disabled)."""
    strategies: list[MatchStrategy] = [LinkedTransactionStrategy()]
    if fuzzy_matching:
        strategies.append(FuzzyMatchStrategy())
    return strategies
