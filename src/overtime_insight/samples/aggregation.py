"""Build pre-aggregated sample sets from raw commit-time samples.

Histograms produced here obey a conservation rule: the bucket counts of the
hour and weekday histograms each sum to ``total_commits``, and the folding
helpers (half-hour to hour, day-hour to weekday) preserve that sum.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from ..logging_config import get_logger
from .models import (
    CommitTimeSample,
    ContributorInfo,
    ContributorSamples,
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

# Commits before 06:00 belong to the previous working day
ROLLOVER_HOUR = 6
MINUTES_PER_DAY = 24 * 60

# Per-contributor windows for start/end-of-day samples
CONTRIBUTOR_FIRST_COMMIT_HOURS = (8, 12)
CONTRIBUTOR_LATEST_COMMIT_MIN = 16 * 60
CONTRIBUTOR_LATEST_COMMIT_MAX_NEXT_DAY = 2 * 60


def hour_label(hour: int) -> str:
    return f"{hour:02d}"


def half_hour_label(minute_of_day: int) -> str:
    hour, minute = divmod(minute_of_day, 60)
    return f"{hour:02d}:{'30' if minute >= 30 else '00'}"


def bucket_hour(label: str) -> Optional[int]:
    """Hour encoded in a histogram label ("09" or "09:30" -> 9)."""
    head = label.split(":", 1)[0]
    if not head.isdigit():
        return None
    hour = int(head)
    return hour if 0 <= hour < 24 else None


def empty_hour_histogram(granularity: Granularity = Granularity.HOUR) -> list[TimeCount]:
    if granularity is Granularity.HALF_HOUR:
        return [TimeCount(half_hour_label(m), 0) for m in range(0, MINUTES_PER_DAY, 30)]
    return [TimeCount(hour_label(h), 0) for h in range(24)]


def aggregate_samples(
    samples: Sequence[CommitTimeSample],
    granularity: Granularity = Granularity.HALF_HOUR,
) -> SampleSet:
    """
    Aggregate raw samples into a ``SampleSet``.

    Args:
        samples: Commit-time samples, already filtered upstream
        granularity: Bucket width of the hour-of-day histogram

    Returns:
        SampleSet with every histogram and per-day series populated
    """
    hour_counts: Counter[str] = Counter()
    day_counts: Counter[int] = Counter()
    day_hour_counts: Counter[tuple[int, int]] = Counter()
    first_by_date: dict[str, int] = {}
    latest_by_date: dict[str, int] = {}
    minutes_by_date: dict[str, list[int]] = defaultdict(list)
    offsets: Counter[str] = Counter()
    authors: set[str] = set()

    for sample in samples:
        if granularity is Granularity.HALF_HOUR:
            hour_counts[half_hour_label(sample.minute_of_day)] += 1
        else:
            hour_counts[hour_label(sample.hour)] += 1
        day_counts[sample.weekday] += 1
        day_hour_counts[(sample.weekday, sample.hour)] += 1

        minute = sample.minute_of_day
        current_first = first_by_date.get(sample.date)
        if current_first is None or minute < current_first:
            first_by_date[sample.date] = minute

        effective_date, effective_minute = _fold_past_midnight(sample.date, sample.hour, minute)
        current_latest = latest_by_date.get(effective_date)
        if current_latest is None or effective_minute > current_latest:
            latest_by_date[effective_date] = effective_minute

        minutes_by_date[sample.date].append(minute)

        if sample.utc_offset:
            offsets[sample.utc_offset] += 1
        if sample.author_key:
            authors.add(sample.author_key)

    by_hour = [TimeCount(b.time, hour_counts.get(b.time, 0)) for b in empty_hour_histogram(granularity)]
    by_day = [TimeCount(str(d), day_counts.get(d, 0)) for d in range(1, 8)]

    dates = sorted(minutes_by_date)
    daily_extremes = [
        DailyExtremes(
            date=d,
            hours=frozenset(m // 60 for m in minutes_by_date[d]),
            first_minute=min(minutes_by_date[d]),
            last_minute=max(minutes_by_date[d]),
            commit_count=len(minutes_by_date[d]),
        )
        for d in dates
    ]

    timezone_data = None
    if offsets:
        timezone_data = TimezoneData(
            total_commits=sum(offsets.values()),
            timezones=[TimezoneCount(o, c) for o, c in offsets.most_common()],
        )

    sample_set = SampleSet(
        by_hour=by_hour,
        by_day=by_day,
        total_commits=len(samples),
        daily_first_commits=[DailyCommitTime(d, first_by_date[d]) for d in sorted(first_by_date)],
        day_hour_commits=[DayHourCommit(w, h, c) for (w, h), c in sorted(day_hour_counts.items())],
        daily_latest_commits=[DailyCommitTime(d, latest_by_date[d]) for d in sorted(latest_by_date)],
        daily_extremes=daily_extremes,
        daily_commit_counts=[DailyCommitCount(d, len(minutes_by_date[d])) for d in dates],
        contributors=len(authors),
        first_commit_date=dates[0] if dates else None,
        last_commit_date=dates[-1] if dates else None,
        granularity=granularity,
        timezone_data=timezone_data,
    )
    logger.debug(
        f"Aggregated {sample_set.total_commits} samples over {len(dates)} days "
        f"({len(authors)} authors)"
    )
    return sample_set


def _fold_past_midnight(day: str, hour: int, minute_of_day: int) -> tuple[str, int]:
    """Attribute 00:00-05:59 commits to the previous date, past 24:00."""
    if hour >= ROLLOVER_HOUR:
        return day, minute_of_day
    previous = date.fromisoformat(day) - timedelta(days=1)
    return previous.isoformat(), minute_of_day + MINUTES_PER_DAY


def fold_to_hours(histogram: Iterable[TimeCount]) -> list[TimeCount]:
    """Fold any hour-of-day histogram ("HH" or "HH:MM" labels) into 24 hourly buckets."""
    counts = [0] * 24
    for bucket in histogram:
        hour = bucket_hour(bucket.time)
        if hour is not None:
            counts[hour] += bucket.count
    return [TimeCount(hour_label(h), counts[h]) for h in range(24)]


def fold_day_hour_to_weekdays(day_hour_commits: Iterable[DayHourCommit]) -> list[TimeCount]:
    """Collapse (weekday, hour) counts into a 7-bucket weekday histogram."""
    counts = [0] * 7
    for item in day_hour_commits:
        if 1 <= item.weekday <= 7:
            counts[item.weekday - 1] += item.count
    return [TimeCount(str(d), counts[d - 1]) for d in range(1, 8)]


def hour_counts_array(histogram: Iterable[TimeCount]) -> list[int]:
    """Hourly histogram as a plain 24-element list indexed by hour."""
    return [bucket.count for bucket in fold_to_hours(histogram)]


def detect_granularity(histogram: Sequence[TimeCount]) -> Granularity:
    if len(histogram) == 48:
        return Granularity.HALF_HOUR
    if len(histogram) == 24:
        return Granularity.HOUR
    has_colon = any(":" in bucket.time for bucket in histogram)
    return Granularity.HALF_HOUR if has_colon else Granularity.HOUR


def collect_contributors(samples: Iterable[CommitTimeSample]) -> list[ContributorInfo]:
    """Commit counts per author identity, sorted by commits descending."""
    counts: Counter[str] = Counter()
    names: dict[str, str] = {}
    for sample in samples:
        key = sample.author_key
        if not key:
            continue
        counts[key] += 1
        names.setdefault(key, sample.author or key)

    contributors = []
    for key, commits in counts.items():
        name = names[key]
        author = f"{name} <{key}>" if name != key else name
        contributors.append(ContributorInfo(author=author, email=key, name=name, commits=commits))
    contributors.sort(key=lambda c: c.commits, reverse=True)
    return contributors


def build_contributor_samples(
    samples: Sequence[CommitTimeSample],
    contributors: Optional[Sequence[ContributorInfo]] = None,
) -> list[ContributorSamples]:
    """
    Group samples by author and build each contributor's own histograms.

    Daily first commits keep weekdays between 08:00 and 12:00; daily latest
    commits keep weekdays at or after 16:00 or at or before 02:00. Both are
    per calendar date with no rollover.

    Args:
        samples: Samples carrying author identities
        contributors: Restrict to these contributors, in this order
            (defaults to everyone, by commit count)

    Returns:
        One ContributorSamples per contributor that has samples
    """
    if contributors is None:
        contributors = collect_contributors(samples)

    by_author: dict[str, list[CommitTimeSample]] = defaultdict(list)
    for sample in samples:
        if sample.author_key:
            by_author[sample.author_key].append(sample)

    result = []
    for contributor in contributors:
        own = by_author.get(contributor.email)
        if not own:
            continue
        result.append(_contributor_samples(contributor, own))
    return result


def _contributor_samples(
    contributor: ContributorInfo, samples: Sequence[CommitTimeSample]
) -> ContributorSamples:
    hour_counts = Counter(s.hour for s in samples)
    day_counts = Counter(s.weekday for s in samples)

    first_by_date: dict[str, int] = {}
    latest_by_date: dict[str, int] = {}
    start_hour, end_hour = CONTRIBUTOR_FIRST_COMMIT_HOURS
    for sample in samples:
        if date.fromisoformat(sample.date).isoweekday() > 5:
            continue
        minute = sample.minute_of_day
        if start_hour <= sample.hour < end_hour:
            current = first_by_date.get(sample.date)
            if current is None or minute < current:
                first_by_date[sample.date] = minute
        if minute >= CONTRIBUTOR_LATEST_COMMIT_MIN or minute <= CONTRIBUTOR_LATEST_COMMIT_MAX_NEXT_DAY:
            current = latest_by_date.get(sample.date)
            if current is None or minute > current:
                latest_by_date[sample.date] = minute

    return ContributorSamples(
        contributor=contributor,
        time_distribution=[TimeCount(hour_label(h), hour_counts.get(h, 0)) for h in range(24)],
        day_distribution=[TimeCount(str(d), day_counts.get(d, 0)) for d in range(1, 8)],
        daily_first_commits=[DailyCommitTime(d, first_by_date[d]) for d in sorted(first_by_date)],
        daily_latest_commits=[DailyCommitTime(d, latest_by_date[d]) for d in sorted(latest_by_date)],
    )
