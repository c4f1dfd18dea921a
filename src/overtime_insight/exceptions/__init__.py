"""Exception hierarchy for Overtime Insight."""

from .base import OvertimeInsightError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidWorkHoursError,
)

__all__ = [
    "OvertimeInsightError",
    "ConfigurationError",
    "InvalidConfigError",
    "InvalidWorkHoursError",
]
