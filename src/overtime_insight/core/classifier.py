"""Corporate versus open-source project classification.

Three activity dimensions plus the contributor count feed a weighted
decision. All shape checks run over a weekday-only hourly histogram.
"""

from __future__ import annotations

from typing import Optional, Sequence

from ..logging_config import get_logger
from ..math import Statistics
from ..samples.aggregation import hour_counts_array
from ..samples.models import DayHourCommit, SampleSet, TimeCount
from .models import (
    MoonlightingResult,
    ProjectClassificationResult,
    ProjectType,
    RegularityDetails,
    RegularityResult,
    WeekendActivityResult,
)
from .parser import week_tallies

logger = get_logger(__name__)

DEFAULT_MOONLIGHTING_RATIO = 0.25
NIGHT_SHARE_LIMIT = 0.15
MORNING_RISE_FACTOR = 1.2
EVENING_RISE_FACTOR = 1.5

LARGE_COMMUNITY = 50
IRREGULAR_SCORE = 25
OPEN_SOURCE_SCORE = 60
UNCERTAIN_SCORE = 40
MAX_CONFIDENCE = 95


def _window_mean(counts: Sequence[float], start: int, end: int) -> float:
    return Statistics.mean(counts[start:end])


def weekday_hour_counts(
    by_hour: Sequence[TimeCount],
    by_day: Sequence[TimeCount],
    day_hour_commits: Sequence[DayHourCommit] = (),
) -> list[float]:
    """
    Hourly commit counts restricted to Monday-Friday.

    Exact when per-weekday-hour counts exist, otherwise the global hourly
    histogram scaled by the weekday share of all commits.

    Returns:
        24 counts indexed by hour, or an empty list with no weekday commits
    """
    if day_hour_commits:
        counts = [0.0] * 24
        for item in day_hour_commits:
            if 1 <= item.weekday <= 5 and 0 <= item.hour < 24:
                counts[item.hour] += item.count
        return counts if sum(counts) > 0 else []

    weekday, weekend = week_tallies(by_day)
    if weekday == 0:
        return []
    share = weekday / (weekday + weekend)
    return [count * share for count in hour_counts_array(by_hour)]


def has_morning_uptrend(counts: Sequence[float]) -> bool:
    if not any(counts[6:12]):
        return False
    return _window_mean(counts, 9, 12) > _window_mean(counts, 6, 9) * MORNING_RISE_FACTOR


def has_afternoon_peak(counts: Sequence[float]) -> bool:
    afternoon = _window_mean(counts, 14, 18)
    return afternoon > _window_mean(counts, 9, 12) and afternoon > _window_mean(counts, 19, 22)


def has_evening_downtrend(counts: Sequence[float]) -> bool:
    """True unless hours 21-22 rise well above 18-20: mean(21-22) < 1.5 * mean(18-20)."""
    if not any(counts[18:23]):
        return True
    return _window_mean(counts, 21, 23) < EVENING_RISE_FACTOR * _window_mean(counts, 18, 21)


def has_low_night_activity(counts: Sequence[float]) -> bool:
    total = sum(counts)
    if total == 0:
        return True
    night = sum(counts[22:24]) + sum(counts[0:6])
    return night / total < NIGHT_SHARE_LIMIT


def _regularity_description(score: int) -> str:
    if score >= 75:
        return "high regularity (typical office schedule)"
    if score >= 50:
        return "medium regularity"
    if score >= 25:
        return "low regularity (possibly open source)"
    return "no regularity (typical open source)"


def detect_regularity(weekday_counts: Sequence[float]) -> RegularityResult:
    """Score 25 points per office-like shape feature of the weekday histogram."""
    if not weekday_counts:
        return RegularityResult(
            score=50,
            description="insufficient data",
            details=RegularityDetails(
                morning_uptrend=False,
                afternoon_peak=False,
                evening_downtrend=False,
                night_low_activity=False,
            ),
        )

    details = RegularityDetails(
        morning_uptrend=has_morning_uptrend(weekday_counts),
        afternoon_peak=has_afternoon_peak(weekday_counts),
        evening_downtrend=has_evening_downtrend(weekday_counts),
        night_low_activity=has_low_night_activity(weekday_counts),
    )
    score = 25 * sum(
        (details.morning_uptrend, details.afternoon_peak, details.evening_downtrend, details.night_low_activity)
    )
    return RegularityResult(score=score, description=_regularity_description(score), details=details)


def detect_weekend_activity(weekday: int, weekend: int) -> WeekendActivityResult:
    total = weekday + weekend
    if total == 0:
        return WeekendActivityResult(ratio=0.0, description="no data")

    ratio = weekend / total
    if ratio >= 0.30:
        level = "high"
    elif ratio >= 0.15:
        level = "medium"
    else:
        level = "low"
    return WeekendActivityResult(ratio=ratio, description=f"{ratio * 100:.1f}% ({level} weekend activity)")


def detect_moonlighting(
    weekday_counts: Sequence[float], threshold: float = DEFAULT_MOONLIGHTING_RATIO
) -> MoonlightingResult:
    """Night (19:00-23:59) share of daytime (09:00-17:59) plus night commits."""
    if not weekday_counts:
        return MoonlightingResult(is_active=False, night_ratio=0.0, description="no data")

    day = sum(weekday_counts[9:18])
    night = sum(weekday_counts[19:24])
    if day + night == 0:
        return MoonlightingResult(is_active=False, night_ratio=0.0, description="no data")

    ratio = night / (day + night)
    is_active = ratio >= threshold
    verdict = "evening-heavy side project pattern" if is_active else "daytime-dominated"
    return MoonlightingResult(
        is_active=is_active,
        night_ratio=ratio,
        description=f"{ratio * 100:.1f}% of weekday commits after 19:00 ({verdict})",
    )


def decide(
    regularity: RegularityResult,
    weekend: WeekendActivityResult,
    moonlighting: MoonlightingResult,
    contributors: int,
) -> tuple[ProjectType, int, str]:
    """
    Combine the dimensions into a project type.

    Returns:
        (project_type, confidence, reasoning)
    """
    if contributors >= LARGE_COMMUNITY:
        confidence = min(MAX_CONFIDENCE, Statistics.round_half_up(70 + contributors / 10))
        return (
            ProjectType.OPEN_SOURCE,
            confidence,
            f"Large contributor base ({contributors} contributors)",
        )
    if regularity.score <= IRREGULAR_SCORE:
        return (
            ProjectType.OPEN_SOURCE,
            90,
            f"Commit times follow no office schedule (regularity {regularity.score}/100)",
        )

    reasons: list[str] = []
    score = 0

    if regularity.score < 30:
        score += 60
        reasons.append(f"very low regularity ({regularity.score}/100)")
    elif regularity.score < 50:
        score += 40
        reasons.append(f"low regularity ({regularity.score}/100)")
    elif regularity.score < 75:
        score += 20
        reasons.append(f"medium regularity ({regularity.score}/100)")

    if 20 <= contributors < LARGE_COMMUNITY:
        score += 20
        reasons.append(f"many contributors ({contributors})")
    elif 10 <= contributors < 20:
        score += 10
        reasons.append(f"several contributors ({contributors})")

    weekend_pct = weekend.ratio * 100
    if weekend.ratio >= 0.30:
        score += 30
        reasons.append(f"high weekend activity ({weekend_pct:.1f}%)")
    elif weekend.ratio >= 0.20:
        score += 20
        reasons.append(f"medium weekend activity ({weekend_pct:.1f}%)")
    elif weekend.ratio >= 0.15:
        score += 10
        reasons.append(f"some weekend activity ({weekend_pct:.1f}%)")

    if moonlighting.is_active:
        score += 20
        reasons.append("evening commits rival daytime commits")

    if score >= OPEN_SOURCE_SCORE:
        confidence = min(MAX_CONFIDENCE, Statistics.round_half_up(50 + score / 2))
        return ProjectType.OPEN_SOURCE, confidence, "Open-source traits: " + "; ".join(reasons)
    if score >= UNCERTAIN_SCORE:
        return ProjectType.UNCERTAIN, 50, "Mixed traits: " + "; ".join(reasons)
    confidence = min(MAX_CONFIDENCE, Statistics.round_half_up(80 - score))
    return ProjectType.CORPORATE, confidence, "Matches an office work schedule"


def classify_project(
    data: SampleSet,
    contributors: Optional[int] = None,
    moonlighting_ratio: float = DEFAULT_MOONLIGHTING_RATIO,
) -> ProjectClassificationResult:
    """
    Classify a repository as corporate, open source or uncertain.

    Args:
        data: Aggregated samples
        contributors: Distinct contributor count, defaults to ``data.contributors``
        moonlighting_ratio: Night share at which moonlighting is flagged

    Returns:
        ProjectClassificationResult
    """
    contributor_count = data.contributors if contributors is None else contributors
    weekday_counts = weekday_hour_counts(data.by_hour, data.by_day, data.day_hour_commits)

    regularity = detect_regularity(weekday_counts)
    weekend = detect_weekend_activity(*week_tallies(data.by_day))
    moonlighting = detect_moonlighting(weekday_counts, moonlighting_ratio)

    project_type, confidence, reasoning = decide(regularity, weekend, moonlighting, contributor_count)
    logger.debug(f"Classified project as {project_type.value} ({confidence}%): {reasoning}")

    return ProjectClassificationResult(
        project_type=project_type,
        confidence=confidence,
        regularity=regularity,
        weekend_activity=weekend,
        moonlighting=moonlighting,
        contributors=contributor_count,
        reasoning=reasoning,
    )
