"""Per-contributor work patterns and team-level statistics.

The team baseline end hour is computed once per batch and then passed, as a
plain value, to the intensity classification of every contributor.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..logging_config import get_logger
from ..math import Statistics
from ..samples.models import ContributorInfo, ContributorSamples, DailyCommitTime, TimeCount
from .calculator import calculate_996_index
from .models import (
    HealthAssessment,
    IntensityDistribution,
    IntensityLevel,
    OvertimeStats,
    TeamAnalysis,
    TeamPercentiles,
    TeamStatistics,
    UserWorkPattern,
    WorkloadSplit,
)
from .parser import week_tallies
from .working_hours import detect_working_hours

logger = get_logger(__name__)

DEFAULT_BASELINE_END_HOUR = 18.0
MODERATE_HOURS_PAST_BASELINE = 2
MIN_DAYS_FOR_AVERAGES = 10
MIN_SAMPLES_FOR_AVERAGES = 20
WORKDAY_OVERTIME_SHARE = 0.8
HEAVY_MINORITY_RATIO = 0.3
INDEX_GAP_WARNING = 20

DEFAULT_MIN_COMMITS = 20
DEFAULT_MAX_USERS = 30
DEFAULT_MIN_CORE_CONTRIBUTORS = 3


def filter_core_contributors(
    contributors: Sequence[ContributorInfo],
    min_commits: int = DEFAULT_MIN_COMMITS,
    max_users: int = DEFAULT_MAX_USERS,
) -> list[ContributorInfo]:
    """Contributors with at least ``min_commits``, busiest first, at most ``max_users``."""
    ranked = sorted(contributors, key=lambda c: c.commits, reverse=True)
    return [c for c in ranked if c.commits >= min_commits][:max_users]


def classify_intensity(end_hour: float, baseline_end_hour: float = DEFAULT_BASELINE_END_HOUR) -> IntensityLevel:
    if end_hour < baseline_end_hour:
        return IntensityLevel.NORMAL
    if end_hour < baseline_end_hour + MODERATE_HOURS_PAST_BASELINE:
        return IntensityLevel.MODERATE
    return IntensityLevel.HEAVY


def _has_enough(series: Sequence[DailyCommitTime]) -> bool:
    return len(series) >= MIN_DAYS_FOR_AVERAGES or len(series) >= MIN_SAMPLES_FOR_AVERAGES


def _average_times(
    first_commits: Sequence[DailyCommitTime], latest_commits: Sequence[DailyCommitTime]
) -> dict:
    enough_start = _has_enough(first_commits)
    enough_end = _has_enough(latest_commits)
    if not enough_start and not enough_end:
        return {}

    result: dict = {"valid_days": min(len(first_commits), len(latest_commits))}
    if enough_start:
        minutes = [c.minutes_from_midnight for c in first_commits]
        result["avg_start_time_mean"] = Statistics.mean(minutes) / 60
        result["avg_start_time_median"] = Statistics.median(minutes) / 60
    if enough_end:
        minutes = [c.minutes_from_midnight for c in latest_commits]
        result["avg_end_time_mean"] = Statistics.mean(minutes) / 60
        result["avg_end_time_median"] = Statistics.median(minutes) / 60
    return result


def _personal_tallies(
    time_distribution: Sequence[TimeCount], start_hour: float, end_hour: float
) -> tuple[int, int]:
    """(work, overtime) counts using the uncapped personal window."""
    work = 0
    overtime = 0
    for bucket in time_distribution:
        hour = int(bucket.time.split(":", 1)[0])
        if start_hour <= hour < end_hour:
            work += bucket.count
        else:
            overtime += bucket.count
    return work, overtime


def analyze_user(
    samples: ContributorSamples,
    total_commits: int,
    baseline_end_hour: float = DEFAULT_BASELINE_END_HOUR,
) -> UserWorkPattern:
    """
    Build one contributor's work pattern and personal 996 index.

    The personal window is detected from the contributor's 24-hour histogram
    alone, so its start falls back to the default start hour.

    Args:
        samples: The contributor's own histograms and daily extremes
        total_commits: Commits across all contributors, for the percentage
        baseline_end_hour: Team baseline used for the intensity level

    Returns:
        UserWorkPattern
    """
    contributor = samples.contributor
    window = detect_working_hours(samples.time_distribution, [])

    work, overtime = _personal_tallies(samples.time_distribution, window.start_hour, window.end_hour)
    weekday, weekend = week_tallies(samples.day_distribution)
    result = calculate_996_index(
        WorkloadSplit(
            work=work,
            overtime=overtime,
            weekday=weekday,
            weekend=weekend,
            bucket_count=len(samples.time_distribution),
        )
    )

    workday_overtime = Statistics.round_half_up(overtime * WORKDAY_OVERTIME_SHARE)
    percentage = contributor.commits / total_commits * 100 if total_commits > 0 else 0.0

    return UserWorkPattern(
        author=contributor.author,
        email=contributor.email,
        total_commits=contributor.commits,
        commit_percentage=percentage,
        time_distribution=list(samples.time_distribution),
        working_hours=window,
        index996=result.index996,
        overtime_stats=OvertimeStats(
            workday_overtime=workday_overtime,
            weekend_overtime=overtime - workday_overtime,
            total_overtime=overtime,
        ),
        intensity_level=classify_intensity(window.end_hour, baseline_end_hour),
        **_average_times(samples.daily_first_commits, samples.daily_latest_commits),
    )


def compute_baseline_end_hour(patterns: Sequence[UserWorkPattern]) -> float:
    """Median (P50) of detected end hours, 18 when there are none."""
    end_hours = sorted(p.working_hours.end_hour for p in patterns if p.working_hours.end_hour)
    if not end_hours:
        return DEFAULT_BASELINE_END_HOUR
    return Statistics.percentile(end_hours, 50)


def _team_statistics(patterns: Sequence[UserWorkPattern]) -> TeamStatistics:
    indices = sorted(p.index996 for p in patterns)
    median = Statistics.percentile(indices, 50)
    return TeamStatistics(
        median996=median,
        mean996=Statistics.mean(indices),
        range=(indices[0], indices[-1]) if indices else (0, 0),
        percentiles=TeamPercentiles(
            p25=Statistics.percentile(indices, 25),
            p50=median,
            p75=Statistics.percentile(indices, 75),
            p90=Statistics.percentile(indices, 90),
        ),
    )


def assess_team_health(
    overall_index: int, team_median_index: float, distribution: IntensityDistribution
) -> HealthAssessment:
    """Band the team median into a conclusion and flag skewing outliers."""
    if team_median_index < 40:
        conclusion = "The team keeps a healthy pace with a good work-life balance."
    elif team_median_index < 60:
        conclusion = "The team pace is acceptable, with some overtime."
    elif team_median_index < 80:
        conclusion = "Overtime is common across the team; keep an eye on members' health."
    else:
        conclusion = "The team works under heavy overtime and needs close attention."

    heavy_count = len(distribution.heavy)
    total = len(distribution.normal) + len(distribution.moderate) + heavy_count

    warning: Optional[str] = None
    if heavy_count > 0 and heavy_count / total < HEAVY_MINORITY_RATIO:
        heavy_pct = Statistics.round_half_up(heavy_count / total * 100)
        warning = (
            f"{heavy_count} member(s) ({heavy_pct}%) show heavy overtime; "
            "check individual workloads."
        )

    if overall_index - team_median_index > INDEX_GAP_WARNING:
        gap_warning = (
            f"The overall index ({Statistics.round_half_up(overall_index)}) is well above the "
            f"team median ({Statistics.round_half_up(team_median_index)}); a few high-volume "
            "contributors may be inflating it."
        )
        warning = f"{warning} {gap_warning}" if warning else gap_warning

    return HealthAssessment(
        overall_index=overall_index,
        team_median_index=team_median_index,
        conclusion=conclusion,
        warning=warning,
    )


def analyze_team(
    patterns: Sequence[UserWorkPattern],
    filter_threshold: int,
    total_contributors: int,
    overall_index: int,
) -> TeamAnalysis:
    """
    Classify contributors against the team baseline and summarize the team.

    Args:
        patterns: Per-contributor patterns from ``analyze_user``
        filter_threshold: Commit threshold used to select them
        total_contributors: Contributors before filtering
        overall_index: Repository-wide 996 index

    Returns:
        TeamAnalysis built from new, reclassified pattern records
    """
    baseline = compute_baseline_end_hour(patterns)
    classified = [
        replace(p, intensity_level=classify_intensity(p.working_hours.end_hour, baseline))
        for p in patterns
    ]

    distribution = IntensityDistribution(
        normal=[p for p in classified if p.intensity_level is IntensityLevel.NORMAL],
        moderate=[p for p in classified if p.intensity_level is IntensityLevel.MODERATE],
        heavy=[p for p in classified if p.intensity_level is IntensityLevel.HEAVY],
    )
    statistics = _team_statistics(classified)

    return TeamAnalysis(
        core_contributors=classified,
        total_analyzed=len(classified),
        total_contributors=total_contributors,
        filter_threshold=filter_threshold,
        baseline_end_hour=baseline,
        distribution=distribution,
        statistics=statistics,
        health_assessment=assess_team_health(overall_index, statistics.median996, distribution),
    )


def run_team_analysis(
    all_contributors: Sequence[ContributorInfo],
    contributor_samples: Sequence[ContributorSamples],
    overall_index: int,
    min_commits: int = DEFAULT_MIN_COMMITS,
    max_users: int = DEFAULT_MAX_USERS,
    min_core_contributors: int = DEFAULT_MIN_CORE_CONTRIBUTORS,
) -> Optional[TeamAnalysis]:
    """
    Filter core contributors and analyze them as a team.

    Args:
        all_contributors: Every contributor with commit counts
        contributor_samples: Per-contributor samples (extra entries are ignored)
        overall_index: Repository-wide 996 index
        min_commits: Commits needed to count as core
        max_users: Cap on analyzed contributors
        min_core_contributors: Minimum core contributors for a team analysis

    Returns:
        TeamAnalysis, or None when too few core contributors remain
    """
    core = filter_core_contributors(all_contributors, min_commits, max_users)
    if len(core) < min_core_contributors:
        logger.info(
            f"Only {len(core)} core contributor(s) with >= {min_commits} commits; "
            "skipping team analysis"
        )
        return None

    samples_by_key = {s.contributor.email: s for s in contributor_samples}
    selected = [samples_by_key[c.email] for c in core if c.email in samples_by_key]
    total_commits = sum(c.commits for c in all_contributors)

    patterns = [analyze_user(s, total_commits) for s in selected]
    logger.debug(f"Analyzed {len(patterns)} of {len(all_contributors)} contributors")
    return analyze_team(patterns, min_commits, len(all_contributors), overall_index)
