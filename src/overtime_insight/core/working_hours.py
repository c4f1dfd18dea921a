"""Working-hour window inference.

Detection is a chain of small stages, each a total function:

    filter_first_commits -> estimate_start_quantiles -> snap_start_range
        -> detect_end_hour_window -> choose_end_window

``detect_working_hours`` composes them; every stage can be exercised on its
own.
"""

from __future__ import annotations

import math
from datetime import date
from typing import Sequence

from ..exceptions import InvalidWorkHoursError
from ..logging_config import get_logger
from ..math import Statistics
from ..samples.models import DailyCommitTime, TimeCount
from .end_hour import detect_end_hour_window
from .models import (
    STANDARD_WORK_HOURS,
    DetectionMethod,
    EndDetectionMethod,
    EndHourWindow,
    HourRange,
    WorkTimeWindow,
)

logger = get_logger(__name__)

MIN_VALID_MINUTES = 5 * 60
MAX_VALID_MINUTES = 12 * 60
DEFAULT_START_MINUTES = 9 * 60
START_LOWER_QUANTILE = 0.1
START_UPPER_QUANTILE = 0.2
RELIABLE_CONFIDENCE = 60
CONFIDENCE_CEILING = 90
CONFIDENCE_HALF_DAYS = 50


def filter_first_commits(daily_first_commits: Sequence[DailyCommitTime]) -> list[int]:
    """Minutes of weekday first commits between 05:00 (inclusive) and 12:00 (exclusive)."""
    minutes = []
    for item in daily_first_commits:
        if not MIN_VALID_MINUTES <= item.minutes_from_midnight < MAX_VALID_MINUTES:
            continue
        if date.fromisoformat(item.date).isoweekday() <= 5:
            minutes.append(item.minutes_from_midnight)
    return minutes


def estimate_start_quantiles(minutes: Sequence[int]) -> tuple[int, int, DetectionMethod]:
    """10th and 20th percentile first-commit minute, or 09:00/09:30 without samples."""
    if not minutes:
        return DEFAULT_START_MINUTES, DEFAULT_START_MINUTES + 30, DetectionMethod.DEFAULT
    ordered = sorted(minutes)
    lower = int(Statistics.nearest_rank_quantile(ordered, START_LOWER_QUANTILE))
    upper = int(Statistics.nearest_rank_quantile(ordered, START_UPPER_QUANTILE))
    return lower, upper, DetectionMethod.QUANTILE_WINDOW


def round_down_to_half_hour(minutes: float) -> int:
    return math.floor(minutes / 30) * 30


def snap_start_range(lower_minutes: float, upper_minutes: float) -> HourRange:
    """Snap two start estimates to a 30-60 minute window inside 05:00-12:00."""
    bounded_lower = max(MIN_VALID_MINUTES, min(lower_minutes, MAX_VALID_MINUTES))
    bounded_upper = max(MIN_VALID_MINUTES, min(upper_minutes, MAX_VALID_MINUTES))

    snapped_lower = round_down_to_half_hour(bounded_lower)
    snapped_upper = round_down_to_half_hour(max(bounded_upper, snapped_lower + 30))

    start = min(snapped_lower, snapped_upper)
    end = max(snapped_upper, start + 30)
    end = min(end, start + 60, MAX_VALID_MINUTES)
    return HourRange(start / 60, end / 60)


def standard_end_range(start_hour: float, end_hour: float) -> HourRange:
    """One-hour window ending at the standard nine-hour shift end."""
    start_minutes = round_down_to_half_hour(max(start_hour * 60, MIN_VALID_MINUTES))
    raw_end = max(end_hour * 60, start_minutes + STANDARD_WORK_HOURS * 60)
    end_minutes = round_down_to_half_hour(min(raw_end, 24 * 60))
    if end_minutes <= 0:
        end_minutes = min((start_hour + 1) * 60, 24 * 60)
    range_start = max(start_minutes, end_minutes - 60)
    return HourRange(range_start / 60, end_minutes / 60)


def choose_end_window(
    observed: EndHourWindow, start_hour: float, standard_end_hour: float
) -> tuple[float, HourRange, EndDetectionMethod]:
    """Keep the observed end window only when it came from the backward scan."""
    if observed.method is EndDetectionMethod.BACKWARD_THRESHOLD:
        return observed.end_hour, observed.range, EndDetectionMethod.BACKWARD_THRESHOLD
    return (
        standard_end_hour,
        standard_end_range(start_hour, standard_end_hour),
        EndDetectionMethod.STANDARD_SHIFT,
    )


def estimate_confidence(sample_days: int) -> int:
    """Asymptotic confidence 90 * d / (d + 50), rounded; stays below 90."""
    if sample_days <= 0:
        return 0
    value = CONFIDENCE_CEILING * sample_days / (sample_days + CONFIDENCE_HALF_DAYS)
    return min(CONFIDENCE_CEILING - 1, Statistics.round_half_up(value))


def detect_working_hours(
    hour_data: Sequence[TimeCount],
    daily_first_commits: Sequence[DailyCommitTime] = (),
) -> WorkTimeWindow:
    """
    Infer the working-hour window of a repository or contributor.

    Args:
        hour_data: Hour-of-day histogram (24 or 48 buckets)
        daily_first_commits: Earliest commit per date

    Returns:
        WorkTimeWindow with start/end hours, ranges and confidence
    """
    minutes = filter_first_commits(daily_first_commits)
    lower, upper, method = estimate_start_quantiles(minutes)
    start_range = snap_start_range(lower, upper)
    start_hour = start_range.start_hour

    standard_end_hour = min(start_hour + STANDARD_WORK_HOURS, 24)
    observed = detect_end_hour_window(hour_data, start_hour, standard_end_hour)
    end_hour, end_range, end_method = choose_end_window(observed, start_hour, standard_end_hour)

    confidence = estimate_confidence(len(minutes))
    logger.debug(
        f"Working hours {start_hour:.1f}-{end_hour:.1f} from {len(minutes)} sample days "
        f"({method.value}/{end_method.value}, confidence {confidence})"
    )
    return WorkTimeWindow(
        start_hour=start_hour,
        end_hour=end_hour,
        is_reliable=confidence >= RELIABLE_CONFIDENCE,
        sample_count=len(minutes),
        detection_method=method,
        confidence=confidence,
        start_range=start_range,
        end_range=end_range,
        end_detection_method=end_method,
    )


def is_working_hour(hour: int, window: WorkTimeWindow) -> bool:
    """Whether an hour starting at ``hour``:00 lies in normal working time.

    Normal time is at most nine hours long, whatever end hour was detected.
    """
    hour_minutes = hour * 60
    start_minutes = window.start_hour * 60
    end_minutes = max(start_minutes, window.capped_end_hour * 60)
    return start_minutes <= hour_minutes < end_minutes


def parse_custom_work_hours(value: str) -> WorkTimeWindow:
    """
    Parse a manual override such as ``"9-18"``.

    Args:
        value: Two integer hours, 0-23, separated by "-", start before end

    Returns:
        A manual WorkTimeWindow with confidence 100

    Raises:
        InvalidWorkHoursError: If the value is malformed or out of range
    """
    parts = value.strip().split("-")
    if len(parts) != 2:
        raise InvalidWorkHoursError(value, 'expected "start-end", e.g. "9-18"')

    try:
        start_hour, end_hour = (int(part.strip()) for part in parts)
    except ValueError:
        raise InvalidWorkHoursError(value, "hours must be integers")

    if not (0 <= start_hour <= 23 and 0 <= end_hour <= 23):
        raise InvalidWorkHoursError(value, "hours must be between 0 and 23")
    if start_hour >= end_hour:
        raise InvalidWorkHoursError(value, "start hour must be earlier than end hour")

    return WorkTimeWindow(
        start_hour=start_hour,
        end_hour=end_hour,
        is_reliable=True,
        sample_count=-1,
        detection_method=DetectionMethod.MANUAL,
        confidence=100,
        start_range=HourRange(start_hour, min(end_hour, start_hour + 1)),
        end_range=HourRange(max(start_hour, end_hour - 1), end_hour),
        end_detection_method=EndDetectionMethod.MANUAL,
    )
