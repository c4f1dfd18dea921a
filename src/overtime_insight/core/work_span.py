"""Daily work spans: time from the first to the last commit of a day."""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Sequence

from ..math import Statistics
from ..samples.models import CommitTimeSample, DailyCommitTime
from .models import DailyWorkSpan

EMPTY_TIME = "--:--"
MAX_SPAN_HOURS = 24

# Days counted towards average start/end times
TYPICAL_DAY_MIN_SPAN_HOURS = 4
TYPICAL_DAY_MIN_LAST_MINUTE = 15 * 60


def format_minutes(minutes: float) -> str:
    """Render minutes from midnight as ``HH:MM``, suffixed ``+1`` past 24:00."""
    total = Statistics.round_half_up(minutes)
    suffix = ""
    if total >= 24 * 60:
        total -= 24 * 60
        suffix = "+1"
    hours, mins = divmod(total, 60)
    return f"{hours:02d}:{mins:02d}{suffix}"


def daily_work_spans(samples: Sequence[CommitTimeSample]) -> list[DailyWorkSpan]:
    """Spans per calendar date straight from samples, sorted by date."""
    minutes_by_date: dict[str, list[int]] = defaultdict(list)
    for sample in samples:
        minutes_by_date[sample.date].append(sample.minute_of_day)

    spans = []
    for day in sorted(minutes_by_date):
        minutes = minutes_by_date[day]
        first, last = min(minutes), max(minutes)
        spans.append(
            DailyWorkSpan(
                date=day,
                first_commit_minutes=first,
                last_commit_minutes=last,
                span_hours=(last - first) / 60,
                commit_count=len(minutes),
            )
        )
    return spans


def work_spans_from_daily(
    daily_first_commits: Sequence[DailyCommitTime],
    daily_latest_commits: Sequence[DailyCommitTime],
) -> list[DailyWorkSpan]:
    """
    Pair each date's first commit with its (folded) latest commit.

    Dates without both values are skipped, as are spans below 0 or above 24
    hours. ``commit_count`` is not known from these series and is set to 1.
    """
    latest = {item.date: item.minutes_from_midnight for item in daily_latest_commits}
    spans = []
    for first in daily_first_commits:
        last_minutes = latest.get(first.date)
        if last_minutes is None:
            continue
        span_hours = (last_minutes - first.minutes_from_midnight) / 60
        if 0 <= span_hours <= MAX_SPAN_HOURS:
            spans.append(
                DailyWorkSpan(
                    date=first.date,
                    first_commit_minutes=first.minutes_from_midnight,
                    last_commit_minutes=last_minutes,
                    span_hours=span_hours,
                    commit_count=1,
                )
            )
    return spans


def average_span(spans: Sequence[DailyWorkSpan]) -> float:
    return Statistics.mean([s.span_hours for s in spans])


def span_std_dev(spans: Sequence[DailyWorkSpan]) -> float:
    """Population standard deviation of span hours (0 for fewer than 2 spans)."""
    return Statistics.population_stdev([s.span_hours for s in spans])


def typical_days(spans: Sequence[DailyWorkSpan]) -> list[DailyWorkSpan]:
    """Weekday spans of at least 4 hours ending at or after 15:00.

    Falls back to every span when none qualifies.
    """
    selected = [
        s
        for s in spans
        if date.fromisoformat(s.date).isoweekday() <= 5
        and s.span_hours >= TYPICAL_DAY_MIN_SPAN_HOURS
        and s.last_commit_minutes >= TYPICAL_DAY_MIN_LAST_MINUTE
    ]
    return selected or list(spans)


def average_start_time(spans: Sequence[DailyWorkSpan]) -> str:
    days = typical_days(spans)
    if not days:
        return EMPTY_TIME
    return format_minutes(Statistics.mean([s.first_commit_minutes for s in days]))


def average_end_time(spans: Sequence[DailyWorkSpan]) -> str:
    days = typical_days(spans)
    if not days:
        return EMPTY_TIME
    return format_minutes(Statistics.mean([s.last_commit_minutes for s in days]))


def latest_end_time(spans: Sequence[DailyWorkSpan]) -> str:
    if not spans:
        return EMPTY_TIME
    return format_minutes(max(s.last_commit_minutes for s in spans))
