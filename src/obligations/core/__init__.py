"""
Core Utilities Package

Shared primitives and infrastructure used by every obligation domain.

This package provides:
- Money with integer-cent arithmetic
- Calendar periods and timing halves
- The engine's error taxonomy
- Configuration management for environment-specific settings
- JSON file IO and the store metadata protocol
"""

from .config import (
    Config,
    Environment,
    get_config,
    get_data_dir,
    is_test,
    reload_config,
)
from .currency import (
    allocate_remainder,
    cents_to_dollars_str,
    format_cents,
    parse_dollars_to_cents,
    split_evenly,
)
from .dates import MONTH_NAMES, BudgetPeriod, Period, TimingBucket
from .errors import (
    DuplicatePaymentError,
    InvalidObligationError,
    InvalidPaymentAmountError,
    InvalidPeriodRangeError,
    MissingCadenceAnchorError,
    ObligationError,
    ObligationNotFoundError,
    OutOfOrderPaymentError,
    PartialApplyFailure,
    ScheduleNotFoundError,
)
from .money import Money

__all__ = [
    # Configuration
    "Config",
    "Environment",
    "get_config",
    "get_data_dir",
    "is_test",
    "reload_config",
    # Currency
    "allocate_remainder",
    "cents_to_dollars_str",
    "format_cents",
    "parse_dollars_to_cents",
    "split_evenly",
    # Primitives
    "MONTH_NAMES",
    "BudgetPeriod",
    "Money",
    "Period",
    "TimingBucket",
    # Errors
    "DuplicatePaymentError",
    "InvalidObligationError",
    "InvalidPaymentAmountError",
    "InvalidPeriodRangeError",
    "MissingCadenceAnchorError",
    "ObligationError",
    "ObligationNotFoundError",
    "OutOfOrderPaymentError",
    "PartialApplyFailure",
    "ScheduleNotFoundError",
]
