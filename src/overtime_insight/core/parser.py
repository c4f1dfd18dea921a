"""Turn a sample set into the per-repository analysis bundle."""

from __future__ import annotations

from typing import Optional, Sequence

from ..logging_config import get_logger
from ..samples.aggregation import bucket_hour
from ..samples.models import SampleSet, TimeCount
from .calculator import calculate_996_index
from .models import ParsedSampleSet, Result996, ValidationResult, WorkloadSplit, WorkTimeWindow
from .overtime import (
    DEFAULT_WEEKEND_COMMIT_THRESHOLD,
    DEFAULT_WEEKEND_SPAN_THRESHOLD,
    calculate_late_night_analysis,
    calculate_weekday_overtime,
    calculate_weekend_overtime,
)
from .working_hours import detect_working_hours, is_working_hour, parse_custom_work_hours

logger = get_logger(__name__)


def work_hour_tallies(hour_data: Sequence[TimeCount], window: WorkTimeWindow) -> tuple[int, int]:
    """(work, overtime) commit counts; half-hour buckets count by their hour."""
    work = 0
    overtime = 0
    for bucket in hour_data:
        hour = bucket_hour(bucket.time)
        if hour is not None and is_working_hour(hour, window):
            work += bucket.count
        else:
            overtime += bucket.count
    return work, overtime


def week_tallies(day_data: Sequence[TimeCount]) -> tuple[int, int]:
    """(weekday, weekend) commit counts; Monday-Friday are weekdays."""
    weekday = 0
    weekend = 0
    for bucket in day_data:
        if bucket.time.isdigit() and 1 <= int(bucket.time) <= 5:
            weekday += bucket.count
        else:
            weekend += bucket.count
    return weekday, weekend


def build_split(
    hour_data: Sequence[TimeCount], day_data: Sequence[TimeCount], window: WorkTimeWindow
) -> WorkloadSplit:
    work, overtime = work_hour_tallies(hour_data, window)
    weekday, weekend = week_tallies(day_data)
    return WorkloadSplit(
        work=work,
        overtime=overtime,
        weekday=weekday,
        weekend=weekend,
        bucket_count=len(hour_data),
    )


def parse_sample_set(
    data: SampleSet,
    custom_work_hours: Optional[str] = None,
    since: Optional[str] = None,
    until: Optional[str] = None,
    weekend_span_threshold: float = DEFAULT_WEEKEND_SPAN_THRESHOLD,
    weekend_commit_threshold: int = DEFAULT_WEEKEND_COMMIT_THRESHOLD,
) -> ParsedSampleSet:
    """
    Detect (or parse) the working window and classify every commit tally.

    Args:
        data: Aggregated sample set
        custom_work_hours: Manual "start-end" override such as "9-18"
        since: Inclusive range start
        until: Inclusive range end
        weekend_span_threshold: Minimum weekend span for real overtime
        weekend_commit_threshold: Minimum weekend commits for real overtime

    Returns:
        ParsedSampleSet; overtime distributions are None when their inputs
        are empty

    Raises:
        InvalidWorkHoursError: If custom_work_hours is malformed
    """
    if custom_work_hours:
        window = parse_custom_work_hours(custom_work_hours)
        custom_end_hour: Optional[int] = int(window.end_hour)
    else:
        window = detect_working_hours(data.by_hour, data.daily_first_commits)
        custom_end_hour = None

    weekday_overtime = None
    if data.day_hour_commits:
        weekday_overtime = calculate_weekday_overtime(
            data.day_hour_commits, window, data.daily_extremes, custom_end_hour
        )

    weekend_overtime = None
    if data.daily_extremes:
        weekend_overtime = calculate_weekend_overtime(
            data.daily_extremes,
            since,
            until,
            span_threshold=weekend_span_threshold,
            commit_threshold=weekend_commit_threshold,
        )

    late_night = None
    if data.daily_latest_commits and data.daily_first_commits:
        late_night = calculate_late_night_analysis(
            data.daily_latest_commits, data.daily_first_commits, window, since, until
        )

    return ParsedSampleSet(
        hour_data=data.by_hour,
        day_data=data.by_day,
        total_commits=data.total_commits,
        work_window=window,
        split=build_split(data.by_hour, data.by_day, window),
        daily_first_commits=data.daily_first_commits,
        weekday_overtime=weekday_overtime,
        weekend_overtime=weekend_overtime,
        late_night=late_night,
    )


def index_for(parsed: ParsedSampleSet) -> Result996:
    return calculate_996_index(parsed.split)


def validate_parsed(parsed: ParsedSampleSet) -> ValidationResult:
    """Check histogram conservation and flag suspicious distributions."""
    errors: list[str] = []
    warnings: list[str] = []

    hour_total = sum(b.count for b in parsed.hour_data)
    day_total = sum(b.count for b in parsed.day_data)
    if hour_total != parsed.total_commits:
        errors.append(
            f"Hour histogram total ({hour_total}) does not match total commits "
            f"({parsed.total_commits})"
        )
    if day_total != parsed.total_commits:
        errors.append(
            f"Weekday histogram total ({day_total}) does not match total commits "
            f"({parsed.total_commits})"
        )

    if parsed.total_commits == 0:
        warnings.append("No commits found")

    split = parsed.split
    if split.work == 0 and split.overtime > 0:
        warnings.append(
            "Every commit falls outside working hours; overtime is heavy or the "
            "working hours are wrong"
        )
    if split.weekday == 0 and split.weekend > 0:
        warnings.append("Every commit falls on a weekend")

    for message in errors:
        logger.warning(message)
    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)
