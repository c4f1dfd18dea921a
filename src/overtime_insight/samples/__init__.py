"""Commit-time samples: models, aggregation and merging."""

from .aggregation import (
    aggregate_samples,
    build_contributor_samples,
    collect_contributors,
    detect_granularity,
    fold_day_hour_to_weekdays,
    fold_to_hours,
)
from .merger import merge_sample_sets
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

__all__ = [
    "CommitTimeSample",
    "ContributorInfo",
    "ContributorSamples",
    "DailyCommitCount",
    "DailyCommitTime",
    "DailyExtremes",
    "DayHourCommit",
    "Granularity",
    "SampleSet",
    "TimeCount",
    "TimezoneCount",
    "TimezoneData",
    "aggregate_samples",
    "build_contributor_samples",
    "collect_contributors",
    "detect_granularity",
    "fold_day_hour_to_weekdays",
    "fold_to_hours",
    "merge_sample_sets",
]
