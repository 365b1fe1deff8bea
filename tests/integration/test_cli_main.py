#!/usr/bin/env python3
"""
Integration tests for the top-level `obligations` command group.

Covers the global options and the informational commands; the domain
commands are exercised in test_cli_workflow.py.
"""

from datetime import date

import click
import pytest
from click.testing import CliRunner

from obligations import __version__
from obligations.cli.context import parse_date
from obligations.cli.main import main

SUBCOMMANDS = [
    "obligation",
    "schedule",
    "pay",
    "ledger",
    "reconcile",
    "correct",
    "sweep",
    "snapshot",
    "project",
    "payoff",
    "status",
]


@pytest.fixture
def runner():
    return CliRunner()


@pytest.mark.integration
class TestGlobalOptions:
    """Options accepted by the command group itself."""

    def test_help_lists_every_subcommand(self, runner):
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "Recurring Obligations" in result.output
        for name in SUBCOMMANDS:
            assert name in result.output

    @pytest.mark.parametrize("name", SUBCOMMANDS)
    def test_each_subcommand_has_help(self, runner, name):
        result = runner.invoke(main, [name, "--help"])
        assert result.exit_code == 0, result.output

    def test_unknown_subcommand_is_usage_error(self, runner):
        result = runner.invoke(main, ["frobnicate"])
        assert result.exit_code == 2

    def test_verbose_prints_data_directory(self, runner, tmp_path):
        result = runner.invoke(main, ["--verbose", "version"])

        assert result.exit_code == 0
        assert f"Data directory: {tmp_path / 'data'}" in result.output

    def test_config_env_reloads_configuration(self, runner):
        result = runner.invoke(main, ["--config-env", "test", "config"])

        assert result.exit_code == 0
        assert "Environment: test" in result.output


@pytest.mark.integration
class TestInformationalCommands:
    """version, config and status."""

    def test_version_matches_package(self, runner):
        result = runner.invoke(main, ["version"])

        assert result.exit_code == 0
        assert result.output.strip() == f"Recurring Obligations v{__version__}"

    def test_config_shows_schedule_settings(self, runner):
        result = runner.invoke(main, ["config"])

        assert result.exit_code == 0
        assert "Schedule Horizon: 12 months" in result.output
        assert "Fuzzy Matching: True" in result.output
        assert "Log Level: INFO" in result.output

    def test_config_reflects_environment_overrides(self, runner, monkeypatch):
        monkeypatch.setenv("SCHEDULE_HORIZON_MONTHS", "6")

        result = runner.invoke(main, ["config"])

        assert "Schedule Horizon: 6 months" in result.output

    def test_status_summarizes_empty_stores(self, runner):
        result = runner.invoke(main, ["status"])

        assert result.exit_code == 0
        assert "Obligations: 0 billers, 0 installments (not saved yet)" in result.output
        assert "Schedules: 0 (0 with payments)" in result.output
        assert "Ledger: 0 transactions" in result.output
        assert "Budget snapshots: 0 (0 saved)" in result.output

    def test_status_after_saving_an_obligation(self, runner):
        runner.invoke(
            main,
            ["obligation", "add-biller", "Rent", "--amount", "900", "--due-day", "1", "--activation", "2026-01"],
        )

        result = runner.invoke(main, ["status"])

        assert "Obligations: 1 billers, 0 installments (updated 0 days ago)" in result.output
        assert "Schedules: 12 (0 with payments)" in result.output


@pytest.mark.integration
class TestDateArguments:
    """Date options are ISO dates and default to today."""

    def test_iso_date(self):
        assert parse_date("2026-01-10") == date(2026, 1, 10)

    def test_missing_date_is_today(self):
        assert parse_date(None) == date.today()

    @pytest.mark.parametrize("value", ["01/10/2026", "2026-13-01", "tomorrow"])
    def test_other_formats_rejected(self, value):
        with pytest.raises(click.BadParameter, match="Use YYYY-MM-DD"):
            parse_date(value, "--date")
