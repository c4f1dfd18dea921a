"""Tests for daily work spans."""

import pytest

from overtime_insight.core.models import DailyWorkSpan
from overtime_insight.core.work_span import (
    EMPTY_TIME,
    average_end_time,
    average_span,
    average_start_time,
    daily_work_spans,
    format_minutes,
    latest_end_time,
    span_std_dev,
    typical_days,
    work_spans_from_daily,
)
from overtime_insight.samples.models import DailyCommitTime


def span(day, first, last):
    return DailyWorkSpan(
        date=day,
        first_commit_minutes=first,
        last_commit_minutes=last,
        span_hours=(last - first) / 60,
        commit_count=1,
    )


class TestFormatMinutes:
    """Tests for HH:MM rendering."""

    def test_plain(self):
        """Minutes within the day render as HH:MM."""
        assert format_minutes(545) == "09:05"

    def test_past_midnight(self):
        """Minutes past 24:00 get a +1 suffix."""
        assert format_minutes(1530) == "01:30+1"
        assert format_minutes(1440) == "00:00+1"

    def test_rounds_half_up(self):
        """Fractional minutes round half up."""
        assert format_minutes(599.5) == "10:00"


class TestBuildingSpans:
    """Tests for span construction."""

    def test_daily_work_spans(self, make_sample):
        """Spans per date from raw samples."""
        spans = daily_work_spans(
            [
                make_sample("2024-03-05", "10:00"),
                make_sample("2024-03-04", "09:00"),
                make_sample("2024-03-04", "18:30"),
            ]
        )
        assert [s.date for s in spans] == ["2024-03-04", "2024-03-05"]
        assert spans[0].span_hours == 9.5
        assert spans[0].commit_count == 2
        assert spans[1].span_hours == 0.0

    def test_from_daily_series(self):
        """First and folded latest commits pair up per date."""
        spans = work_spans_from_daily(
            [
                DailyCommitTime("2024-03-04", 540),
                DailyCommitTime("2024-03-05", 600),
                DailyCommitTime("2024-03-06", 600),
            ],
            [
                DailyCommitTime("2024-03-04", 1530),
                DailyCommitTime("2024-03-06", 500),
            ],
        )
        assert len(spans) == 1
        assert spans[0].date == "2024-03-04"
        assert spans[0].span_hours == 16.5


class TestSpanStatistics:
    """Tests for span summaries."""

    def test_average_and_std_dev(self):
        """Mean and population standard deviation of span hours."""
        spans = [span(f"2024-03-{d:02d}", 0, h * 60) for d, h in zip(range(4, 12), [2, 4, 4, 4, 5, 5, 7, 9])]
        assert average_span(spans) == pytest.approx(5.0)
        assert span_std_dev(spans) == pytest.approx(2.0)

    def test_std_dev_single_span(self):
        """One span has no spread."""
        assert span_std_dev([span("2024-03-04", 540, 1080)]) == 0.0

    def test_typical_days(self):
        """Only long weekday spans ending after 15:00 are typical."""
        typical = span("2024-03-04", 540, 1080)
        short = span("2024-03-05", 540, 600)
        weekend = span("2024-03-09", 540, 1080)
        assert typical_days([typical, short, weekend]) == [typical]

    def test_typical_days_fallback(self):
        """Without a typical day every span is used."""
        short = span("2024-03-05", 540, 600)
        assert typical_days([short]) == [short]

    def test_average_times(self):
        """Average start and end over typical days."""
        spans = [span("2024-03-04", 540, 1080), span("2024-03-05", 600, 1140)]
        assert average_start_time(spans) == "09:30"
        assert average_end_time(spans) == "18:30"
        assert latest_end_time(spans) == "19:00"

    def test_empty(self):
        """No spans render as placeholders."""
        assert average_span([]) == 0.0
        assert average_start_time([]) == EMPTY_TIME
        assert average_end_time([]) == EMPTY_TIME
        assert latest_end_time([]) == EMPTY_TIME
