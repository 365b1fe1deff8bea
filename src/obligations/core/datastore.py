#!/usr/bin/env python3
"""
DataStore Protocol - Standard metadata interface for the engine's stores.

Every store (obligations, schedules, ledger, budget snapshots) keeps its
records in memory and can optionally persist them to a JSON file. This
protocol covers the metadata side shared by all of them, separate from the
domain operations each store exposes.
"""

from datetime import datetime
from typing import Protocol


class DataStore(Protocol):
    """
    Protocol for store metadata queries.

    Lets CLI status output and diagnostics describe any store without
    knowing its record type.
    """

    def exists(self) -> bool:
        """
        Check if persisted data exists.

        Returns:
            True if the backing file exists (always False for in-memory stores)
        """
        ...

    def last_modified(self) -> datetime | None:
        """
        Get timestamp of most recent persisted modification.

        Returns:
            datetime of last modification, or None if nothing is persisted
        """
        ...

    def age_days(self) -> int | None:
        """
        Get age of persisted data in days since last modification.

        Returns:
            Number of days since last modification, or None if nothing is persisted
        """
        ...

    def item_count(self) -> int:
        """
        Get count of records currently held.

        Interpretation varies by store:
        - Obligations: billers + installments
        - Schedules: payment schedule instances
        - Ledger: transactions (including voided)
        - Snapshots: budget periods configured
        """
        ...

    def summary_text(self) -> str:
        """
        Get human-readable summary of current store state.

        Returns:
            Brief text description for display in CLI output and logs
        """
        ...
