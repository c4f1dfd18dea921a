"""Cross-timezone collaboration detection."""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..logging_config import get_logger
from ..samples.aggregation import hour_counts_array
from ..samples.models import TimeCount, TimezoneData
from .models import TimezoneAnalysisResult, TimezoneGroup

logger = get_logger(__name__)

CROSS_TIMEZONE_THRESHOLD = 0.01
SLEEP_RATIO_THRESHOLD = 0.01
SLEEP_WINDOW_HOURS = 5
MAX_TIMEZONE_GROUPS = 5
WARNING_GROUPS = 3


def find_sleep_window(hour_data: Sequence[TimeCount]) -> tuple[float, tuple[int, ...]]:
    """
    Quietest run of consecutive hours, wrapping past midnight.

    Returns:
        (share of all commits inside the window, window hours); (0.0, ())
        when there are no commits
    """
    counts = hour_counts_array(hour_data)
    total = sum(counts)
    if total == 0:
        return 0.0, ()

    best_start = 0
    best_sum: Optional[int] = None
    for start in range(24):
        window_sum = sum(counts[(start + i) % 24] for i in range(SLEEP_WINDOW_HOURS))
        if best_sum is None or window_sum < best_sum:
            best_sum = window_sum
            best_start = start

    window = tuple((best_start + i) % 24 for i in range(SLEEP_WINDOW_HOURS))
    return best_sum / total, window


def _base_confidence(total_commits: int) -> int:
    if total_commits < 50:
        return 30
    if total_commits < 200:
        return 50
    if total_commits < 500:
        return 70
    return 85


def format_timezone_warning(result: TimezoneAnalysisResult) -> Optional[str]:
    """Human-readable notice for cross-timezone projects, None otherwise."""
    if not result.is_cross_timezone:
        return None

    lines = [
        "This project may involve cross-timezone collaboration "
        f"(non-dominant timezones: {result.cross_timezone_ratio * 100:.1f}%); "
        "working-hour results may be inaccurate."
    ]
    if result.timezone_groups:
        lines.append("Main timezones:")
        for group in result.timezone_groups[:WARNING_GROUPS]:
            lines.append(f"  {group.offset}: {group.ratio * 100:.1f}%")
    return "\n".join(lines)


def analyze_timezone(timezone_data: TimezoneData, hour_data: Sequence[TimeCount]) -> TimezoneAnalysisResult:
    """
    Decide whether commits come from more than one timezone.

    Two signals are combined: the share of commits outside the dominant UTC
    offset, and the share of commits inside the quietest five-hour window.
    Either reaching 1% marks the project as cross-timezone.

    Args:
        timezone_data: Commit counts per UTC offset, busiest first
        hour_data: Hourly or half-hourly histogram

    Returns:
        TimezoneAnalysisResult; a neutral result when there are no commits
    """
    total = timezone_data.total_commits
    if total == 0:
        return TimezoneAnalysisResult(
            is_cross_timezone=False,
            cross_timezone_ratio=0.0,
            dominant_timezone=None,
            dominant_ratio=0.0,
            sleep_period_ratio=0.0,
            confidence=0,
        )

    if timezone_data.timezones:
        dominant = timezone_data.timezones[0]
        dominant_ratio = dominant.count / total
        cross_ratio = 1 - dominant_ratio
        dominant_offset: Optional[str] = dominant.offset
        groups = tuple(
            TimezoneGroup(offset=tz.offset, count=tz.count, ratio=tz.count / total)
            for tz in timezone_data.timezones[:MAX_TIMEZONE_GROUPS]
        )
    else:
        dominant_ratio = 0.0
        cross_ratio = 0.0
        dominant_offset = None
        groups = ()

    sleep_ratio, sleep_window = find_sleep_window(hour_data)

    offsets_differ = cross_ratio >= CROSS_TIMEZONE_THRESHOLD
    sleepless = sleep_ratio >= SLEEP_RATIO_THRESHOLD

    confidence = _base_confidence(total)
    if offsets_differ and sleepless:
        confidence = min(95, confidence + 15)

    result = TimezoneAnalysisResult(
        is_cross_timezone=offsets_differ or sleepless,
        cross_timezone_ratio=cross_ratio,
        dominant_timezone=dominant_offset,
        dominant_ratio=dominant_ratio,
        sleep_period_ratio=sleep_ratio,
        confidence=confidence,
        sleep_window=sleep_window,
        timezone_groups=groups,
    )
    if result.is_cross_timezone:
        logger.info(f"Cross-timezone activity detected (dominant {dominant_offset}, {dominant_ratio:.1%})")
        result = replace(result, warning=format_timezone_warning(result))
    return result
