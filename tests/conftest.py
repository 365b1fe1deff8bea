"""
Pytest Configuration and Shared Fixtures

Provides common test fixtures and configuration for the entire test suite.
"""

from datetime import date
from pathlib import Path

import pytest

from obligations.budget.datastore import BudgetSnapshotStore
from obligations.core import config as config_module
from obligations.core.dates import Period
from obligations.core.money import Money
from obligations.ledger.datastore import LedgerStore
from obligations.payments.applier import PaymentApplier
from obligations.reconcile.reconciler import Reconciler
from obligations.schedule.datastore import ObligationStore, ScheduleStore
from obligations.schedule.models import ActivationWindow, Biller, Installment
from obligations.schedule.service import ObligationService


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """Set up test environment variables."""
    # Ensure tests don't use real data
    monkeypatch.setenv("OBLIGATIONS_ENV", "test")
    monkeypatch.setenv("OBLIGATIONS_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("SCHEDULE_HORIZON_MONTHS", raising=False)
    monkeypatch.delenv("FUZZY_MATCHING", raising=False)
    monkeypatch.delenv("DEBUG", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    # Drop any configuration cached by a previous test
    monkeypatch.setattr(config_module, "_config", None)


@pytest.fixture
def internet_biller() -> Biller:
    """Biller "Internet": 1500 due on the 10th, active from January 2026."""
    return Biller(
        id="internet",
        name="Internet",
        category="Utilities",
        expected_amount=Money.from_dollars(1500),
        activation=ActivationWindow(Period(2026, 1)),
        due_day=10,
    )


@pytest.fixture
def laptop_installment() -> Installment:
    """Installment "Laptop": 60000 over 12 monthly payments of 5000."""
    return Installment(
        id="laptop",
        name="Laptop",
        category="Electronics",
        total_amount=Money.from_dollars(60000),
        term_periods=12,
        period_amount=Money.from_dollars(5000),
        start_date=date(2026, 1, 5),
        linked_account_id="card-1",
    )


class EngineStores:
    """Stores and services wired together, in memory unless given a data directory."""

    def __init__(self, data_dir: Path | None = None):
        def path(name: str) -> Path | None:
            return data_dir / name if data_dir is not None else None

        self.obligations = ObligationStore(path("obligations.json"))
        self.schedules = ScheduleStore(path("schedules.json"))
        self.ledger = LedgerStore(path("ledger.json"))
        self.snapshots = BudgetSnapshotStore(path("budget_snapshots.json"))
        self.service = ObligationService(self.obligations, self.schedules)
        self.applier = PaymentApplier(self.obligations, self.schedules, self.ledger)
        self.reconciler = Reconciler(self.obligations, self.schedules, self.ledger)


@pytest.fixture
def engine() -> EngineStores:
    """Fresh in-memory engine."""
    return EngineStores()


@pytest.fixture
def file_engine(tmp_path):
    """Factory for engines whose stores share one set of JSON files."""

    def make() -> EngineStores:
        return EngineStores(tmp_path / "stores")

    return make


# Test markers for categorizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for complete workflows")
    config.addinivalue_line("markers", "currency: Tests for currency handling and precision")
    config.addinivalue_line("markers", "schedule: Tests for schedule generation and status")
    config.addinivalue_line("markers", "payments: Tests for payment application")
    config.addinivalue_line("markers", "reconcile: Tests for ledger reconciliation")
    config.addinivalue_line("markers", "budget: Tests for budget snapshots and projections")
    config.addinivalue_line("markers", "slow: Tests that take a long time to run")
    config.addinivalue_line("markers", "performance: Performance tests with realistic data volumes")
