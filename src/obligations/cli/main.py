#!/usr/bin/env python3
"""
Main CLI Entry Point for the Obligation Engine

Provides a unified command-line interface over the configured data directory.
"""

import logging
import os

import click

from ..core.config import get_config, reload_config
from ..core.datastore import DataStore
from .context import get_engine


@click.group()
@click.option(
    "--config-env",
    type=click.Choice(["development", "test", "production"]),
    help="Override environment configuration",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_env: str | None, verbose: bool, debug: bool) -> None:
    """
    Recurring Obligations - Scheduling and Reconciliation Engine

    Schedules bills and installment loans, records payments against a
    ledger, reconciles the two, and projects period budgets.
    """
    ctx.ensure_object(dict)

    if config_env:
        os.environ["OBLIGATIONS_ENV"] = config_env
        config_obj = reload_config()
    else:
        config_obj = get_config()

    if debug:
        os.environ["LOG_LEVEL"] = "DEBUG"
        logging.getLogger().setLevel(logging.DEBUG)
        logging.getLogger("obligations").setLevel(logging.DEBUG)

    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug
    ctx.obj["config"] = config_obj

    if verbose:
        click.echo(f"Environment: {config_obj.environment.value}")
        click.echo(f"Data directory: {config_obj.data_dir}")

    if debug:
        click.echo("Debug logging enabled")


@main.command()
def version() -> None:
    """Show version information."""
    from obligations import __version__

    click.echo(f"Recurring Obligations v{__version__}")


@main.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show current configuration."""
    config_obj = ctx.obj["config"]

    click.echo("Current Configuration:")
    click.echo(f"  Environment: {config_obj.environment.value}")
    click.echo(f"  Data Directory: {config_obj.data_dir}")
    click.echo(f"  Schedule Horizon: {config_obj.schedule.horizon_months} months")
    click.echo(f"  Fuzzy Matching: {config_obj.schedule.fuzzy_matching}")
    click.echo(f"  Debug Mode: {config_obj.debug}")
    click.echo(f"  Log Level: {config_obj.log_level}")


@main.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show what each store currently holds."""
    engine = get_engine(ctx)
    stores: list[DataStore] = [engine.obligations, engine.schedules, engine.ledger, engine.snapshots]
    for store in stores:
        age = store.age_days()
        suffix = f" (updated {age} days ago)" if age is not None else " (not saved yet)"
        click.echo(f"{store.summary_text()}{suffix}")


from .budget import payoff, project, snapshot  # noqa: E402
from .ledger import ledger, pay  # noqa: E402
from .obligations import obligation  # noqa: E402
from .reconcile import correct, reconcile, sweep  # noqa: E402
from .schedules import schedule  # noqa: E402

main.add_command(obligation)
main.add_command(schedule)
main.add_command(pay)
main.add_command(ledger)
main.add_command(reconcile)
main.add_command(correct)
main.add_command(sweep)
main.add_command(snapshot)
main.add_command(project)
main.add_command(payoff)


if __name__ == "__main__":
    main()
