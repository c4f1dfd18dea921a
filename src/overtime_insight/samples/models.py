"""Data models for commit-time samples and the aggregates built from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Granularity(Enum):
    """Bucket width of an hour-of-day histogram."""

    HOUR = "hour"
    HALF_HOUR = "half-hour"


@dataclass(frozen=True)
class CommitTimeSample:
    date: str  # YYYY-MM-DD in the committer's local time
    weekday: int  # 1-7, Monday = 1
    hour: int  # 0-23
    minute_of_day: int  # 0-1439
    author: Optional[str] = None  # display name
    email: Optional[str] = None  # identity key for per-contributor grouping
    utc_offset: Optional[str] = None  # "+0800"

    @property
    def author_key(self) -> Optional[str]:
        return self.email or self.author


@dataclass(frozen=True)
class TimeCount:
    time: str  # "HH", "HH:MM" or weekday "1".."7"
    count: int


@dataclass(frozen=True)
class DayHourCommit:
    weekday: int  # 1-7
    hour: int  # 0-23
    count: int


@dataclass(frozen=True)
class DailyCommitTime:
    date: str
    minutes_from_midnight: int  # latest values may exceed 1440 (rolled past midnight)


@dataclass(frozen=True)
class DailyExtremes:
    """Per-calendar-date commit extremes.

    ``hours`` is always present; minute-precision fields are optional so that
    callers holding only distinct-hour data can still be analyzed.
    """

    date: str
    hours: frozenset[int]  # distinct hours touched
    first_minute: Optional[int] = None
    last_minute: Optional[int] = None  # may exceed 1440
    commit_count: Optional[int] = None  # exact count when known

    @property
    def span_hours(self) -> Optional[float]:
        if self.first_minute is None or self.last_minute is None:
            return None
        return (self.last_minute - self.first_minute) / 60


@dataclass(frozen=True)
class DailyCommitCount:
    date: str
    count: int


@dataclass(frozen=True)
class TimezoneCount:
    offset: str  # "+0800"
    count: int


@dataclass(frozen=True)
class TimezoneData:
    total_commits: int
    timezones: list[TimezoneCount]  # sorted by count, descending


@dataclass(frozen=True)
class ContributorInfo:
    author: str  # "Name <email>" or bare name
    email: str
    name: str
    commits: int


@dataclass
class SampleSet:
    """Pre-aggregated commit-time data for one repository (or a merge of several)."""

    by_hour: list[TimeCount]  # 48 half-hour or 24 hourly buckets
    by_day: list[TimeCount]  # 7 buckets, "1".."7"
    total_commits: int
    daily_first_commits: list[DailyCommitTime] = field(default_factory=list)
    day_hour_commits: list[DayHourCommit] = field(default_factory=list)
    daily_latest_commits: list[DailyCommitTime] = field(default_factory=list)
    daily_extremes: list[DailyExtremes] = field(default_factory=list)
    daily_commit_counts: list[DailyCommitCount] = field(default_factory=list)
    contributors: int = 0
    first_commit_date: Optional[str] = None
    last_commit_date: Optional[str] = None
    granularity: Granularity = Granularity.HALF_HOUR
    timezone_data: Optional[TimezoneData] = None


@dataclass
class ContributorSamples:
    """One contributor's own histograms and daily extremes."""

    contributor: ContributorInfo
    time_distribution: list[TimeCount]  # 24 hourly buckets
    day_distribution: list[TimeCount]  # 7 buckets
    daily_first_commits: list[DailyCommitTime]  # weekday, 08:00-12:00
    daily_latest_commits: list[DailyCommitTime]  # weekday, >= 16:00 or <= 02:00
