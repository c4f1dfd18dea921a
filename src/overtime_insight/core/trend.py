"""Month-by-month trend of the 996 index and daily work spans."""

from __future__ import annotations

import calendar
from collections import defaultdict
from datetime import date
from typing import Optional, Sequence

from ..logging_config import get_logger
from ..math import Statistics
from ..samples.aggregation import aggregate_samples
from ..samples.models import CommitTimeSample, SampleSet
from .models import (
    ConfidenceLevel,
    DataQuality,
    MonthlyTrendData,
    Trend,
    TrendAnalysisResult,
    TrendSummary,
)
from .parser import index_for, parse_sample_set
from .work_span import (
    EMPTY_TIME,
    average_end_time,
    average_span,
    average_start_time,
    latest_end_time,
    span_std_dev,
    work_spans_from_daily,
)

logger = get_logger(__name__)

SUFFICIENT_WORK_DAYS = 10
LIMITED_WORK_DAYS = 5
HIGH_CONFIDENCE_COMMITS = 100
MEDIUM_CONFIDENCE_COMMITS = 50
DEFAULT_STABLE_DELTA = 10.0


def generate_months(since: str, until: str) -> list[str]:
    """Every ``YYYY-MM`` whose month overlaps [since, until]."""
    start = date.fromisoformat(since)
    end = date.fromisoformat(until)
    year, month = start.year, start.month
    months = []
    while date(year, month, 1) <= end:
        months.append(f"{year:04d}-{month:02d}")
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
    return months


def month_range(month: str) -> tuple[str, str]:
    """First and last ISO date of a ``YYYY-MM`` month."""
    year, month_num = (int(part) for part in month.split("-"))
    last_day = calendar.monthrange(year, month_num)[1]
    return date(year, month_num, 1).isoformat(), date(year, month_num, last_day).isoformat()


def classify_data_quality(work_days: int) -> DataQuality:
    if work_days >= SUFFICIENT_WORK_DAYS:
        return DataQuality.SUFFICIENT
    if work_days >= LIMITED_WORK_DAYS:
        return DataQuality.LIMITED
    return DataQuality.INSUFFICIENT


def classify_confidence(commits: int, work_days: int) -> ConfidenceLevel:
    if commits >= HIGH_CONFIDENCE_COMMITS and work_days >= SUFFICIENT_WORK_DAYS:
        return ConfidenceLevel.HIGH
    if commits >= MEDIUM_CONFIDENCE_COMMITS or work_days >= LIMITED_WORK_DAYS:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def empty_month(month: str) -> MonthlyTrendData:
    return MonthlyTrendData(
        month=month,
        index996=0,
        avg_work_span=0.0,
        work_span_std_dev=0.0,
        avg_start_time=EMPTY_TIME,
        avg_end_time=EMPTY_TIME,
        latest_end_time=EMPTY_TIME,
        total_commits=0,
        contributors=0,
        work_days=0,
        data_quality=DataQuality.INSUFFICIENT,
        confidence=ConfidenceLevel.LOW,
    )


def analyze_month(month: str, data: SampleSet) -> MonthlyTrendData:
    """
    Analyze one calendar month.

    Args:
        month: ``YYYY-MM``
        data: Sample set restricted to that month

    Returns:
        MonthlyTrendData; a zeroed placeholder when the month has no commits
    """
    if data.total_commits == 0:
        return empty_month(month)

    since, until = month_range(month)
    parsed = parse_sample_set(data, since=since, until=until)
    result = index_for(parsed)

    spans = work_spans_from_daily(data.daily_first_commits, data.daily_latest_commits)
    work_days = len(spans)

    return MonthlyTrendData(
        month=month,
        index996=result.index996,
        avg_work_span=average_span(spans),
        work_span_std_dev=span_std_dev(spans),
        avg_start_time=average_start_time(spans),
        avg_end_time=average_end_time(spans),
        latest_end_time=latest_end_time(spans),
        total_commits=data.total_commits,
        contributors=data.contributors,
        work_days=work_days,
        data_quality=classify_data_quality(work_days),
        confidence=classify_confidence(data.total_commits, work_days),
    )


def determine_trend(
    monthly_data: Sequence[MonthlyTrendData], stable_delta: float = DEFAULT_STABLE_DELTA
) -> Trend:
    """Compare the mean index of the first half of the months with the second half."""
    if len(monthly_data) < 2:
        return Trend.STABLE

    mid = len(monthly_data) // 2
    first_half = Statistics.mean([m.index996 for m in monthly_data[:mid]])
    second_half = Statistics.mean([m.index996 for m in monthly_data[mid:]])
    diff = second_half - first_half

    if abs(diff) < stable_delta:
        return Trend.STABLE
    return Trend.INCREASING if diff > 0 else Trend.DECREASING


def summarize(
    monthly_data: Sequence[MonthlyTrendData], stable_delta: float = DEFAULT_STABLE_DELTA
) -> TrendSummary:
    """Summary over months with sufficient data only."""
    valid = [m for m in monthly_data if m.data_quality is DataQuality.SUFFICIENT]
    if not valid:
        return TrendSummary(
            total_months=len(monthly_data),
            avg_index996=0.0,
            avg_work_span=0.0,
            trend=Trend.STABLE,
        )
    return TrendSummary(
        total_months=len(valid),
        avg_index996=Statistics.mean([m.index996 for m in valid]),
        avg_work_span=Statistics.mean([m.avg_work_span for m in valid]),
        trend=determine_trend(valid, stable_delta),
    )


def analyze_trend(
    samples: Sequence[CommitTimeSample],
    since: Optional[str] = None,
    until: Optional[str] = None,
    stable_delta: float = DEFAULT_STABLE_DELTA,
) -> TrendAnalysisResult:
    """
    Build the monthly trend for a set of samples.

    Args:
        samples: Commit-time samples, already filtered upstream
        since: Inclusive start date (defaults to the earliest sample)
        until: Inclusive end date (defaults to the latest sample)
        stable_delta: Index difference below which the trend is stable

    Returns:
        TrendAnalysisResult with one record per month
    """
    dates = sorted(s.date for s in samples)
    since = since or (dates[0] if dates else None)
    until = until or (dates[-1] if dates else None)
    if since is None or until is None:
        return TrendAnalysisResult(
            monthly_data=[], since=since or "", until=until or "", summary=summarize([])
        )

    by_month: dict[str, list[CommitTimeSample]] = defaultdict(list)
    for sample in samples:
        by_month[sample.date[:7]].append(sample)

    monthly_data = []
    for month in generate_months(since, until):
        month_samples = by_month.get(month, [])
        monthly_data.append(analyze_month(month, aggregate_samples(month_samples)))
        logger.debug(f"Trend month {month}: {len(month_samples)} commits")

    return TrendAnalysisResult(
        monthly_data=monthly_data,
        since=since,
        until=until,
        summary=summarize(monthly_data, stable_delta),
    )
