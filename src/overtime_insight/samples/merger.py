"""Merge sample sets from several repositories into one."""

from __future__ import annotations

from collections import Counter
from typing import Optional, Sequence

from ..logging_config import get_logger
from .aggregation import detect_granularity, empty_hour_histogram, fold_to_hours
from .models import (
    DailyCommitCount,
    DailyCommitTime,
    DailyExtremes,
    DayHourCommit,
    Granularity,
    SampleSet,
    TimeCount,
    TimezoneCount,
    TimezoneData,
)

logger = get_logger(__name__)


def merge_sample_sets(sample_sets: Sequence[SampleSet]) -> SampleSet:
    """
    Merge several sample sets.

    Histograms and counts are summed. For each date the earliest first commit
    and the latest last commit win, and hour sets are unioned. Half-hour
    histograms stay half-hour only when every input is half-hour; otherwise
    all inputs are folded to hours first. ``contributors`` is summed, so an
    author active in several repositories is counted once per repository.

    Args:
        sample_sets: Sample sets to merge

    Returns:
        A new SampleSet (an empty one for empty input)
    """
    if not sample_sets:
        return SampleSet(by_hour=empty_hour_histogram(), by_day=_empty_days(), total_commits=0)

    granularities = {detect_granularity(s.by_hour) for s in sample_sets}
    if granularities == {Granularity.HALF_HOUR}:
        granularity = Granularity.HALF_HOUR
        histograms = [s.by_hour for s in sample_sets]
    else:
        granularity = Granularity.HOUR
        histograms = [fold_to_hours(s.by_hour) for s in sample_sets]

    merged = SampleSet(
        by_hour=_sum_histograms(histograms, empty_hour_histogram(granularity)),
        by_day=_sum_histograms([s.by_day for s in sample_sets], _empty_days()),
        total_commits=sum(s.total_commits for s in sample_sets),
        daily_first_commits=_merge_daily(
            [s.daily_first_commits for s in sample_sets], prefer_later=False
        ),
        day_hour_commits=_merge_day_hour([s.day_hour_commits for s in sample_sets]),
        daily_latest_commits=_merge_daily(
            [s.daily_latest_commits for s in sample_sets], prefer_later=True
        ),
        daily_extremes=_merge_extremes([s.daily_extremes for s in sample_sets]),
        daily_commit_counts=_merge_counts([s.daily_commit_counts for s in sample_sets]),
        contributors=sum(s.contributors for s in sample_sets),
        first_commit_date=_min_date(s.first_commit_date for s in sample_sets),
        last_commit_date=_max_date(s.last_commit_date for s in sample_sets),
        granularity=granularity,
        timezone_data=_merge_timezones([s.timezone_data for s in sample_sets]),
    )
    logger.debug(f"Merged {len(sample_sets)} sample sets: {merged.total_commits} commits")
    return merged


def _empty_days() -> list[TimeCount]:
    return [TimeCount(str(d), 0) for d in range(1, 8)]


def _sum_histograms(histograms: list[list[TimeCount]], template: list[TimeCount]) -> list[TimeCount]:
    totals: Counter[str] = Counter()
    for histogram in histograms:
        for bucket in histogram:
            totals[bucket.time] += bucket.count
    return [TimeCount(b.time, totals.get(b.time, 0)) for b in template]


def _merge_daily(series: list[list[DailyCommitTime]], prefer_later: bool) -> list[DailyCommitTime]:
    best: dict[str, int] = {}
    for items in series:
        for item in items:
            current = best.get(item.date)
            minutes = item.minutes_from_midnight
            if current is None or (minutes > current if prefer_later else minutes < current):
                best[item.date] = minutes
    return [DailyCommitTime(d, best[d]) for d in sorted(best)]


def _merge_day_hour(series: list[list[DayHourCommit]]) -> list[DayHourCommit]:
    totals: Counter[tuple[int, int]] = Counter()
    for items in series:
        for item in items:
            totals[(item.weekday, item.hour)] += item.count
    return [DayHourCommit(w, h, c) for (w, h), c in sorted(totals.items())]


def _merge_extremes(series: list[list[DailyExtremes]]) -> list[DailyExtremes]:
    merged: dict[str, DailyExtremes] = {}
    for items in series:
        for item in items:
            current = merged.get(item.date)
            if current is None:
                merged[item.date] = item
                continue
            merged[item.date] = DailyExtremes(
                date=item.date,
                hours=current.hours | item.hours,
                first_minute=_pick(current.first_minute, item.first_minute, min),
                last_minute=_pick(current.last_minute, item.last_minute, max),
                commit_count=(
                    current.commit_count + item.commit_count
                    if current.commit_count is not None and item.commit_count is not None
                    else None
                ),
            )
    return [merged[d] for d in sorted(merged)]


def _pick(a: Optional[int], b: Optional[int], choose) -> Optional[int]:
    if a is None:
        return b
    if b is None:
        return a
    return choose(a, b)


def _merge_counts(series: list[list[DailyCommitCount]]) -> list[DailyCommitCount]:
    totals: Counter[str] = Counter()
    for items in series:
        for item in items:
            totals[item.date] += item.count
    return [DailyCommitCount(d, totals[d]) for d in sorted(totals)]


def _merge_timezones(series: list[Optional[TimezoneData]]) -> Optional[TimezoneData]:
    present = [data for data in series if data is not None]
    if not present:
        return None
    totals: Counter[str] = Counter()
    for data in present:
        for tz in data.timezones:
            totals[tz.offset] += tz.count
    return TimezoneData(
        total_commits=sum(data.total_commits for data in present),
        timezones=[TimezoneCount(o, c) for o, c in totals.most_common()],
    )


def _min_date(values) -> Optional[str]:
    present = [v for v in values if v]
    return min(present) if present else None


def _max_date(values) -> Optional[str]:
    present = [v for v in values if v]
    return max(present) if present else None
