"""Configuration loading and management for Overtime Insight.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.overtime-insight.toml)
    3. Project config (./overtime-insight.toml)
    4. Explicit config file
    5. Environment variables (OVERTIME_* prefix)
    6. Caller overrides (passed as kwargs)

Example:
    >>> config = load_config(custom_work_hours="10-19", trend=True)
    >>> config.custom_work_hours
    '10-19'
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .core.working_hours import parse_custom_work_hours
from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

GLOBAL_CONFIG_NAME = ".overtime-insight.toml"
PROJECT_CONFIG_NAME = "overtime-insight.toml"
ENV_PREFIX = "OVERTIME_"


@dataclass(frozen=True)
class ThresholdConfig:
    """Heuristic thresholds used across the analyzers.

    Attributes:
        Weekend overtime:
            weekend_span_threshold: Minimum first-to-last span (hours) for real overtime
            weekend_commit_threshold: Minimum commits on the day for real overtime

        Trend:
            trend_stable_delta: Half-vs-half index difference still considered stable

        Team analysis:
            team_min_commits: Commits a contributor needs to count as core
            team_max_users: Cap on analyzed core contributors
            team_min_core_contributors: Below this, team analysis is skipped

        Project classification:
            moonlighting_ratio: Night share of weekday commits that flags moonlighting
    """

    # === Weekend overtime ===
    weekend_span_threshold: float = 3.0
    weekend_commit_threshold: int = 3

    # === Trend ===
    trend_stable_delta: float = 10.0

    # === Team analysis ===
    team_min_commits: int = 20
    team_max_users: int = 30
    team_min_core_contributors: int = 3

    # === Project classification ===
    moonlighting_ratio: float = 0.25

    def __post_init__(self) -> None:
        """Validate threshold configuration."""
        if self.weekend_span_threshold < 0:
            raise ValueError("weekend_span_threshold must be non-negative")
        if self.weekend_commit_threshold < 1:
            raise ValueError("weekend_commit_threshold must be at least 1")
        if self.trend_stable_delta < 0:
            raise ValueError("trend_stable_delta must be non-negative")
        if self.team_min_commits < 1:
            raise ValueError("team_min_commits must be at least 1")
        if self.team_max_users < 1:
            raise ValueError("team_max_users must be at least 1")
        if self.team_min_core_contributors < 1:
            raise ValueError("team_min_core_contributors must be at least 1")
        if not 0.0 <= self.moonlighting_ratio <= 1.0:
            raise ValueError("moonlighting_ratio must be between 0.0 and 1.0")


DEFAULT_THRESHOLDS = ThresholdConfig()


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for one analysis run.

    Attributes:
        custom_work_hours: Manual "start-end" override such as "9-18"
        since: Inclusive ISO start date of the analyzed range
        until: Inclusive ISO end date of the analyzed range
        trend: Also compute the month-by-month trend
        skip_team_analysis: Do not build per-contributor patterns
        verbosity: Logging verbosity level
        thresholds: Nested heuristic thresholds
    """

    custom_work_hours: Optional[str] = None
    since: Optional[str] = None
    until: Optional[str] = None

    # Feature flags
    trend: bool = False
    skip_team_analysis: bool = False

    # Output control
    verbosity: Verbosity = "normal"

    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.custom_work_hours is not None:
            # Raises InvalidWorkHoursError on malformed input
            parse_custom_work_hours(self.custom_work_hours)

        since = _parse_date("since", self.since)
        until = _parse_date("until", self.until)
        if since is not None and until is not None and since > until:
            raise ValueError(f"since ({self.since}) must not be after until ({self.until})")

        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be one of quiet/normal/verbose")


def _parse_date(name: str, value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"{name} must be an ISO date (YYYY-MM-DD), got '{value}'")


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides from the caller

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If a config file is unreadable or a value is invalid
        InvalidWorkHoursError: If custom_work_hours is malformed
    """
    merged: dict = {}

    global_config = Path.home() / GLOBAL_CONFIG_NAME
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}", config_file)
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    # Boolean verbosity flags map onto the verbosity field
    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update(overrides)

    thresholds_dict = merged.pop("thresholds", None)
    if thresholds_dict is not None:
        if isinstance(thresholds_dict, dict):
            try:
                merged["thresholds"] = ThresholdConfig(**thresholds_dict)
            except TypeError as e:
                raise ConfigurationError(f"Invalid [thresholds] config: {e}")
            except ValueError as e:
                raise InvalidConfigError("thresholds", thresholds_dict, str(e))
        elif isinstance(thresholds_dict, ThresholdConfig):
            merged["thresholds"] = thresholds_dict
        else:
            raise InvalidConfigError("thresholds", thresholds_dict, "expected a table")

    try:
        return AnalysisConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from OVERTIME_* environment variables.

    Supported environment variables:
        OVERTIME_CUSTOM_WORK_HOURS: "start-end", e.g. 9-18
        OVERTIME_SINCE / OVERTIME_UNTIL: YYYY-MM-DD
        OVERTIME_TREND: bool (true/false/1/0)
        OVERTIME_SKIP_TEAM_ANALYSIS: bool
        OVERTIME_VERBOSITY: quiet/normal/verbose

    Returns:
        Dict of field_name -> parsed_value for any OVERTIME_* vars found.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Args:
        value: Raw string from environment
        type_hint: Type annotation from dataclass

    Returns:
        Parsed value or None if the type is not settable from the environment

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    # String (including Literal types like Verbosity)
    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}", path)
