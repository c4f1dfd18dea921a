"""Configuration exceptions: settings files, env vars, work-hour overrides."""

from pathlib import Path
from typing import Any, Optional

from .base import OvertimeInsightError


class ConfigurationError(OvertimeInsightError):
    """Base class for configuration-related errors."""

    def __init__(self, message: str, config_file: Optional[Path] = None):
        details = {"config_file": str(config_file)} if config_file else None
        super().__init__(message, details=details)
        self.config_file = config_file


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(f"Invalid configuration for {key}: {value}")
        self.details = {"key": key, "value": str(value), "reason": reason}
        self.key = key
        self.value = value
        self.reason = reason


class InvalidWorkHoursError(ConfigurationError):
    """Raised when a manual work-hours override like "9-18" cannot be parsed."""

    def __init__(self, value: str, reason: str):
        super().__init__(f"Invalid work hours: {value!r}")
        self.details = {"value": value, "reason": reason}
        self.value = value
        self.reason = reason
