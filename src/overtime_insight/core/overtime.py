"""Overtime classification: weekday evenings, weekends and late nights."""

from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Optional, Sequence

from ..logging_config import get_logger
from ..samples.models import DailyCommitTime, DailyExtremes, DayHourCommit
from .models import (
    LateNightAnalysis,
    OvertimeSeverity,
    WeekdayOvertimeDistribution,
    WeekendOvertimeDistribution,
    WorkTimeWindow,
)

logger = get_logger(__name__)

WEEKDAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday")

DEFAULT_WEEKEND_SPAN_THRESHOLD = 3.0
DEFAULT_WEEKEND_COMMIT_THRESHOLD = 3

LATE_NIGHT_START = 21
MIDNIGHT_START = 23
DAWN_END = 6

# Upper bounds (hours past the end hour) of the severity buckets
SEVERITY_LIGHT_MAX = 2
SEVERITY_MODERATE_MAX = 4
SEVERITY_SEVERE_MAX = 6


def _iso_weekday(day: str) -> int:
    return date.fromisoformat(day).isoweekday()


def overtime_end_hour(window: WorkTimeWindow, custom_end_hour: Optional[int] = None) -> int:
    if custom_end_hour is not None:
        return custom_end_hour
    return math.ceil(window.end_hour)


def calculate_weekday_overtime(
    day_hour_commits: Sequence[DayHourCommit],
    window: WorkTimeWindow,
    daily_extremes: Sequence[DailyExtremes] = (),
    custom_end_hour: Optional[int] = None,
) -> WeekdayOvertimeDistribution:
    """
    Count after-hours commits per weekday and after-hours weekdays.

    Args:
        day_hour_commits: Commit counts per (weekday, hour)
        window: Working-hour window; its end hour is rounded up
        daily_extremes: Per-date extremes used to count overtime days
        custom_end_hour: Declared end hour; enables severity buckets

    Returns:
        WeekdayOvertimeDistribution; the peak day is the first maximum
    """
    end_hour = overtime_end_hour(window, custom_end_hour)

    counts = [0] * 5
    for item in day_hour_commits:
        if 1 <= item.weekday <= 5 and item.hour >= end_hour:
            counts[item.weekday - 1] += item.count

    peak_index = 0
    for index in range(1, 5):
        if counts[index] > counts[peak_index]:
            peak_index = index

    overtime_days = 0
    total_weekdays = 0
    severity = OvertimeSeverity() if custom_end_hour is not None else None
    for day in daily_extremes:
        if _iso_weekday(day.date) > 5:
            continue
        total_weekdays += 1
        if not _is_overtime_day(day, end_hour):
            continue
        overtime_days += 1
        if severity is not None:
            _bucket_severity(severity, day, custom_end_hour)

    return WeekdayOvertimeDistribution(
        monday=counts[0],
        tuesday=counts[1],
        wednesday=counts[2],
        thursday=counts[3],
        friday=counts[4],
        peak_day=WEEKDAY_NAMES[peak_index].capitalize(),
        peak_count=counts[peak_index],
        overtime_days=overtime_days,
        total_weekdays=total_weekdays,
        severity=severity,
    )


def _is_overtime_day(day: DailyExtremes, end_hour: int) -> bool:
    if day.last_minute is not None:
        return day.last_minute >= end_hour * 60
    return any(hour >= end_hour for hour in day.hours)


def _bucket_severity(severity: OvertimeSeverity, day: DailyExtremes, custom_end_hour: int) -> None:
    if day.last_minute is not None:
        last_minute = day.last_minute
    else:
        last_minute = max(day.hours) * 60
    hours_over = (last_minute - custom_end_hour * 60) / 60
    if hours_over <= SEVERITY_LIGHT_MAX:
        severity.light += 1
    elif hours_over <= SEVERITY_MODERATE_MAX:
        severity.moderate += 1
    elif hours_over <= SEVERITY_SEVERE_MAX:
        severity.severe += 1
    else:
        severity.extreme += 1


def count_weekend_days(start: date, end: date) -> int:
    """Saturdays and Sundays in the inclusive range [start, end]."""
    if end < start:
        return 0
    total_days = (end - start).days + 1
    full_weeks, remainder = divmod(total_days, 7)
    weekend_days = full_weeks * 2
    for offset in range(remainder):
        if (start + timedelta(days=full_weeks * 7 + offset)).isoweekday() >= 6:
            weekend_days += 1
    return weekend_days


def calculate_weekend_overtime(
    daily_extremes: Sequence[DailyExtremes],
    since: Optional[str] = None,
    until: Optional[str] = None,
    span_threshold: float = DEFAULT_WEEKEND_SPAN_THRESHOLD,
    commit_threshold: int = DEFAULT_WEEKEND_COMMIT_THRESHOLD,
) -> WeekendOvertimeDistribution:
    """
    Split active weekend days into real overtime and casual fixes.

    A day is real overtime when it spans at least ``span_threshold`` hours
    and has at least ``commit_threshold`` commits. Without minute precision
    the number of distinct hours touched stands in for the span, and without
    an exact count it also stands in for the commit count.

    Args:
        daily_extremes: Per-date extremes (all dates; weekdays are skipped)
        since: Inclusive range start used to count calendar weekend days
        until: Inclusive range end
        span_threshold: Minimum span in hours
        commit_threshold: Minimum commit count

    Returns:
        WeekendOvertimeDistribution; rates are None when no weekend day
        falls in the range
    """
    saturday_days = 0
    sunday_days = 0
    real_overtime_days = 0
    casual_fix_days = 0

    for day in daily_extremes:
        weekday = _iso_weekday(day.date)
        if weekday < 6:
            continue
        if weekday == 6:
            saturday_days += 1
        else:
            sunday_days += 1

        span = day.span_hours if day.span_hours is not None else len(day.hours)
        count = day.commit_count if day.commit_count is not None else len(day.hours)
        if span >= span_threshold and count >= commit_threshold:
            real_overtime_days += 1
        else:
            casual_fix_days += 1

    total_weekend_days = _weekend_days_in_range(daily_extremes, since, until)
    active_days = saturday_days + sunday_days
    if total_weekend_days > 0:
        activity_rate: Optional[float] = active_days / total_weekend_days * 100
        real_rate: Optional[float] = real_overtime_days / total_weekend_days * 100
    else:
        activity_rate = None
        real_rate = None

    return WeekendOvertimeDistribution(
        saturday_days=saturday_days,
        sunday_days=sunday_days,
        casual_fix_days=casual_fix_days,
        real_overtime_days=real_overtime_days,
        total_weekend_days=total_weekend_days,
        weekend_activity_rate=activity_rate,
        real_overtime_rate=real_rate,
    )


def _weekend_days_in_range(
    daily_extremes: Sequence[DailyExtremes], since: Optional[str], until: Optional[str]
) -> int:
    if since and until:
        return count_weekend_days(date.fromisoformat(since), date.fromisoformat(until))
    if not daily_extremes:
        return 0
    dates = sorted(day.date for day in daily_extremes)
    start = date.fromisoformat(since) if since else date.fromisoformat(dates[0])
    end = date.fromisoformat(until) if until else date.fromisoformat(dates[-1])
    return count_weekend_days(start, end)


def calculate_late_night_analysis(
    daily_latest_commits: Sequence[DailyCommitTime],
    daily_first_commits: Sequence[DailyCommitTime],
    window: WorkTimeWindow,
    since: Optional[str] = None,
    until: Optional[str] = None,
) -> LateNightAnalysis:
    """
    Band each day's latest commit into evening, late night, midnight or dawn.

    Latest-commit minutes are expected to be folded already, so a commit at
    01:30 counts for the previous date as minute 1530 (hour 25).

    Args:
        daily_latest_commits: Latest commit per (folded) date
        daily_first_commits: Earliest commit per date, used to count work days
        window: Working-hour window; its end hour is rounded up
        since: Inclusive range start
        until: Inclusive range end

    Returns:
        LateNightAnalysis with per-band day counts and midnight rate
    """
    end_hour = math.ceil(window.end_hour)

    evening = late_night = midnight = dawn = 0
    midnight_dates: set[str] = set()
    for item in daily_latest_commits:
        latest_hour = item.minutes_from_midnight // 60
        if end_hour <= latest_hour < LATE_NIGHT_START:
            evening += 1
        elif LATE_NIGHT_START <= latest_hour < MIDNIGHT_START:
            late_night += 1
        elif latest_hour >= MIDNIGHT_START:
            midnight += 1
            midnight_dates.add(item.date)
        elif latest_hour < DAWN_END:
            dawn += 1
            midnight_dates.add(item.date)

    work_dates = {item.date for item in daily_first_commits if _iso_weekday(item.date) <= 5}
    total_work_days = max(1, len(work_dates))
    midnight_days = len(midnight_dates)

    if since and until:
        span_days = abs((date.fromisoformat(until) - date.fromisoformat(since)).days)
        total_weeks = max(1, span_days // 7)
        total_months = max(1, span_days // 30)
    else:
        total_weeks = max(1, total_work_days // 5)
        total_months = max(1, total_work_days // 22)

    return LateNightAnalysis(
        evening=evening,
        late_night=late_night,
        midnight=midnight,
        dawn=dawn,
        midnight_days=midnight_days,
        total_work_days=total_work_days,
        midnight_rate=midnight_days / total_work_days * 100,
        total_weeks=total_weeks,
        total_months=total_months,
    )
