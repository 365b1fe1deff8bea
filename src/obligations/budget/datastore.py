#!/usr/bin/env python3
"""
Budget Snapshot Store

One snapshot per month half, keyed by "YYYY-MM-1/2".
"""

import logging
from pathlib import Path
from typing import Any

from ..core.dates import BudgetPeriod
from ..core.datastore_mixin import JsonStoreMixin
from .models import BudgetSnapshot

logger = logging.getLogger(__name__)


class BudgetSnapshotStore(JsonStoreMixin):
    """Persists budget snapshots."""

    def __init__(self, path: Path | None = None):
        super().__init__(path)
        self._snapshots: dict[str, BudgetSnapshot] = {}
        self._load()

    def _records_to_json(self) -> list[dict[str, Any]]:
        return [s.to_dict() for s in self.list_snapshots()]

    def _records_from_json(self, data: list[dict[str, Any]]) -> None:
        snapshots = [BudgetSnapshot.from_dict(item) for item in data]
        self._snapshots = {s.period.to_key(): s for s in snapshots}

    def get_snapshot(self, period: BudgetPeriod) -> BudgetSnapshot | None:
        with self._reading():
            return self._snapshots.get(period.to_key())

    def save_snapshot(self, snapshot: BudgetSnapshot) -> BudgetSnapshot:
        """Save a snapshot, recomputing its total from the included line items."""
        snapshot.recompute_total()
        with self._writing():
            self._snapshots[snapshot.period.to_key()] = snapshot
            self._persist()
        logger.debug("Saved budget snapshot %s (total %s)", snapshot.period, snapshot.total_amount)
        return snapshot

    def list_snapshots(self) -> list[BudgetSnapshot]:
        """All snapshots in chronological order."""
        with self._reading():
            result = list(self._snapshots.values())
        return sorted(result, key=lambda s: s.period)

    def item_count(self) -> int:
        return len(self._snapshots)

    def summary_text(self) -> str:
        saved = sum(1 for s in self._snapshots.values() if s.status == "saved")
        return f"Budget snapshots: {self.item_count()} ({saved} saved)"
