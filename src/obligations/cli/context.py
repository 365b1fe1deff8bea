#!/usr/bin/env python3
"""
Shared CLI plumbing: store wiring and argument parsing helpers.
"""

from dataclasses import dataclass
from datetime import date, datetime

import click

from ..budget.datastore import BudgetSnapshotStore
from ..core.config import Config, get_config
from ..core.dates import BudgetPeriod, Period
from ..core.money import Money
from ..ledger.datastore import LedgerStore
from ..payments.applier import PaymentApplier
from ..reconcile.reconciler import Reconciler
from ..schedule.datastore import ObligationStore, ScheduleStore
from ..schedule.service import ObligationService


@dataclass
class Engine:
    """All stores and services over the configured data directory."""

    config: Config
    obligations: ObligationStore
    schedules: ScheduleStore
    ledger: LedgerStore
    snapshots: BudgetSnapshotStore
    service: ObligationService
    applier: PaymentApplier
    reconciler: Reconciler

    @classmethod
    def from_config(cls, config: Config | None = None) -> "Engine":
        config = config or get_config()
        obligations = ObligationStore(config.storage.obligations_file)
        schedules = ScheduleStore(config.storage.schedules_file)
        ledger = LedgerStore(config.storage.ledger_file)
        return cls(
            config=config,
            obligations=obligations,
            schedules=schedules,
            ledger=ledger,
            snapshots=BudgetSnapshotStore(config.storage.snapshots_file),
            service=ObligationService(obligations, schedules),
            # Subscribes to ledger deletions so reverts happen from any command
            applier=PaymentApplier(obligations, schedules, ledger),
            reconciler=Reconciler(obligations, schedules, ledger, fuzzy_matching=config.schedule.fuzzy_matching),
        )


def get_engine(ctx: click.Context) -> Engine:
    """Engine for this invocation, created on first use."""
    ctx.ensure_object(dict)
    if "engine" not in ctx.obj:
        ctx.obj["engine"] = Engine.from_config(ctx.obj.get("config"))
    return ctx.obj["engine"]


def parse_money(value: str, param: str = "amount") -> Money:
    try:
        return Money.from_dollars(value)
    except ValueError as e:
        raise click.BadParameter(f"Invalid amount: {value}", param_hint=param) from e


def parse_period(value: str, param: str = "period") -> Period:
    try:
        return Period.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint=param) from e


def parse_budget_period(value: str, param: str = "period") -> BudgetPeriod:
    try:
        return BudgetPeriod.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint=param) from e


def parse_date(value: str | None, param: str = "date") -> date:
    """Parse YYYY-MM-DD, defaulting to today."""
    if not value:
        return date.today()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as e:
        raise click.BadParameter(f"Invalid date format: {value}. Use YYYY-MM-DD", param_hint=param) from e
