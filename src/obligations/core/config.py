#!/usr/bin/env python3
"""
Configuration Management for the Obligation Engine

Handles environment-based configuration with defaults and validation.
Supports multiple environments (development, test, production).
"""

import logging
import os
import tempfile
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _jsonable(items: list[tuple[str, Any]]) -> dict[str, Any]:
    """asdict() factory: paths become strings and enums their values."""
    result = {}
    for key, value in items:
        if isinstance(value, Path):
            value = str(value)
        elif isinstance(value, Enum):
            value = value.value
        result[key] = value
    return result


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


@dataclass
class StorageConfig:
    """Locations of the JSON-backed stores."""

    obligations_file: Path
    schedules_file: Path
    ledger_file: Path
    snapshots_file: Path


@dataclass
class ScheduleConfig:
    """Schedule generation and reconciliation settings."""

    horizon_months: int = 12
    fuzzy_matching: bool = True


@dataclass
class Config:
    """
    Main configuration class.

    Loads configuration from environment variables with defaults and
    validation for each environment type.
    """

    environment: Environment

    data_dir: Path

    storage: StorageConfig
    schedule: ScheduleConfig

    # Application settings
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "Config":
        """Create configuration from environment variables."""
        env = Environment(os.getenv("OBLIGATIONS_ENV", "development"))

        if env == Environment.TEST:
            default_test_dir = Path(tempfile.gettempdir()) / "test_obligations"
            data_dir = Path(os.getenv("OBLIGATIONS_DATA_DIR", str(default_test_dir)))
        else:
            data_dir = Path(os.getenv("OBLIGATIONS_DATA_DIR", "./data")).expanduser().resolve()

        data_dir.mkdir(parents=True, exist_ok=True)

        storage = StorageConfig(
            obligations_file=data_dir / "obligations.json",
            schedules_file=data_dir / "schedules.json",
            ledger_file=data_dir / "ledger.json",
            snapshots_file=data_dir / "budget_snapshots.json",
        )

        schedule = ScheduleConfig(
            horizon_months=int(os.getenv("SCHEDULE_HORIZON_MONTHS", "12")),
            fuzzy_matching=os.getenv("FUZZY_MATCHING", "true").lower() == "true",
        )

        return cls(
            environment=env,
            data_dir=data_dir,
            storage=storage,
            schedule=schedule,
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> list:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.data_dir.exists():
            errors.append(f"data_dir does not exist: {self.data_dir}")

        if self.schedule.horizon_months < 1:
            errors.append("SCHEDULE_HORIZON_MONTHS must be at least 1")

        if not isinstance(logging.getLevelName(self.log_level), int):
            errors.append(f"Unknown LOG_LEVEL: {self.log_level}")

        return errors

    def setup_logging(self) -> None:
        """Configure logging based on configuration."""
        level = getattr(logging, self.log_level, logging.INFO)

        if self.environment == Environment.DEVELOPMENT:
            format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_str = "%(asctime)s - %(levelname)s - %(message)s"

        logging.basicConfig(level=level, format=format_str, datefmt="%Y-%m-%d %H:%M:%S")

        if self.debug:
            logging.getLogger("obligations").setLevel(logging.DEBUG)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a JSON-friendly dictionary."""
        return asdict(self, dict_factory=_jsonable)


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        config = Config.from_environment()

        errors = config.validate()
        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        config.setup_logging()
        _config = config

    return _config


def reload_config() -> Config:
    """Reload configuration from environment (useful for testing)."""
    global _config
    _config = None
    return get_config()


def get_data_dir() -> Path:
    """Get the data directory path."""
    return get_config().data_dir


def is_test() -> bool:
    """Check if running in test environment."""
    return get_config().environment == Environment.TEST
