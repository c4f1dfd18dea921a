"""Public API for Overtime Insight.

This module provides the main entry points. Callers hand over commit-time
samples (or an already aggregated SampleSet) and get back one report.

Example:
    >>> from overtime_insight import analyze_samples
    >>>
    >>> report = analyze_samples(samples)
    >>> report.result.index996
    42
    >>>
    >>> # With customization
    >>> report = analyze_samples(samples, custom_work_hours="10-19", trend=True)
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from .config import AnalysisConfig, load_config
from .core.classifier import classify_project
from .core.models import (
    ParsedSampleSet,
    ProjectClassificationResult,
    Result996,
    TeamAnalysis,
    TimezoneAnalysisResult,
    TrendAnalysisResult,
    ValidationResult,
)
from .core.parser import index_for, parse_sample_set, validate_parsed
from .core.team import run_team_analysis
from .core.timezone import analyze_timezone
from .core.trend import analyze_trend
from .logging_config import get_logger, setup_logging_for
from .samples.aggregation import aggregate_samples, build_contributor_samples
from .samples.models import CommitTimeSample, ContributorSamples, SampleSet

logger = get_logger(__name__)


@dataclass
class OvertimeReport:
    """Everything computed for one repository (or one merged set of repositories)."""

    parsed: ParsedSampleSet
    result: Result996
    validation: ValidationResult
    classification: ProjectClassificationResult
    timezone: Optional[TimezoneAnalysisResult] = None
    team: Optional[TeamAnalysis] = None
    trend: Optional[TrendAnalysisResult] = None


def _resolve_config(
    config: Optional[AnalysisConfig], config_file: Optional[Path], overrides: dict
) -> AnalysisConfig:
    if config is not None:
        return config
    return load_config(config_file=config_file, **overrides)


def analyze(
    data: SampleSet,
    config: Optional[AnalysisConfig] = None,
    contributors: Optional[Sequence[ContributorSamples]] = None,
    config_file: Optional[Path] = None,
    **overrides,
) -> OvertimeReport:
    """Analyze an aggregated sample set.

    Pipeline:
    1. Resolve configuration (explicit config, or TOML + env + overrides)
    2. Detect working hours and split commits into work/overtime tallies
    3. Compute the 996 index and validate the parsed data
    4. Classify the project and, when offsets are known, check timezones
    5. Analyze the team when per-contributor samples are supplied

    Args:
        data: Aggregated samples for the analyzed range
        config: Ready-made configuration; when given, config_file and
            overrides are ignored
        contributors: Per-contributor samples for team analysis
        config_file: Optional explicit config file path
        **overrides: Configuration overrides (e.g., custom_work_hours="9-18")

    Returns:
        OvertimeReport; ``team`` is None when contributors are missing, team
        analysis is disabled or too few core contributors remain

    Raises:
        ConfigurationError: If configuration is invalid
        InvalidWorkHoursError: If the manual working-hours override is malformed
    """
    config = _resolve_config(config, config_file, overrides)
    setup_logging_for(config.verbosity)
    thresholds = config.thresholds

    logger.info(f"Analyzing {data.total_commits} commits")

    parsed = parse_sample_set(
        data,
        custom_work_hours=config.custom_work_hours,
        since=config.since,
        until=config.until,
        weekend_span_threshold=thresholds.weekend_span_threshold,
        weekend_commit_threshold=thresholds.weekend_commit_threshold,
    )
    result = index_for(parsed)
    validation = validate_parsed(parsed)
    for warning in validation.warnings:
        logger.warning(warning)
    for error in validation.errors:
        logger.error(error)

    classification = classify_project(data, moonlighting_ratio=thresholds.moonlighting_ratio)

    timezone = None
    if data.timezone_data is not None:
        timezone = analyze_timezone(data.timezone_data, data.by_hour)

    team = None
    if contributors and not config.skip_team_analysis:
        team = run_team_analysis(
            [c.contributor for c in contributors],
            contributors,
            result.index996,
            min_commits=thresholds.team_min_commits,
            max_users=thresholds.team_max_users,
            min_core_contributors=thresholds.team_min_core_contributors,
        )

    logger.info(f"996 index: {result.index996} ({result.index996_str})")

    return OvertimeReport(
        parsed=parsed,
        result=result,
        validation=validation,
        classification=classification,
        timezone=timezone,
        team=team,
    )


def analyze_samples(
    samples: Sequence[CommitTimeSample],
    config: Optional[AnalysisConfig] = None,
    config_file: Optional[Path] = None,
    **overrides,
) -> OvertimeReport:
    """Aggregate raw commit-time samples and analyze them.

    Adds the monthly trend when ``config.trend`` is set, and groups samples
    per author for team analysis unless ``config.skip_team_analysis`` is set.

    Args:
        samples: Commit-time samples, already filtered upstream
        config: Ready-made configuration
        config_file: Optional explicit config file path
        **overrides: Configuration overrides

    Returns:
        OvertimeReport
    """
    config = _resolve_config(config, config_file, overrides)

    data = aggregate_samples(samples)
    contributors = None if config.skip_team_analysis else build_contributor_samples(samples)

    report = analyze(data, config=config, contributors=contributors)

    if config.trend:
        report.trend = analyze_trend(
            samples,
            since=config.since,
            until=config.until,
            stable_delta=config.thresholds.trend_stable_delta,
        )
    return report
