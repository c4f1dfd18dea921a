"""Tests for sample aggregation."""

from overtime_insight.samples.aggregation import (
    aggregate_samples,
    bucket_hour,
    build_contributor_samples,
    collect_contributors,
    detect_granularity,
    empty_hour_histogram,
    fold_day_hour_to_weekdays,
    fold_to_hours,
    hour_counts_array,
)
from overtime_insight.samples.models import (
    DailyCommitTime,
    DayHourCommit,
    Granularity,
    TimeCount,
)


class TestLabels:
    """Tests for histogram label helpers."""

    def test_bucket_hour(self):
        """Both label styles decode to the hour."""
        assert bucket_hour("09") == 9
        assert bucket_hour("09:30") == 9
        assert bucket_hour("23:00") == 23

    def test_bucket_hour_invalid(self):
        """Non-hour labels decode to None."""
        assert bucket_hour("x") is None
        assert bucket_hour("24") is None

    def test_empty_histograms(self):
        """Empty histograms have 24 or 48 zero buckets."""
        hourly = empty_hour_histogram()
        half_hourly = empty_hour_histogram(Granularity.HALF_HOUR)
        assert len(hourly) == 24 and hourly[9].time == "09"
        assert len(half_hourly) == 48 and half_hourly[19].time == "09:30"
        assert all(b.count == 0 for b in hourly + half_hourly)


class TestAggregateSamples:
    """Tests for aggregate_samples."""

    def test_histograms_conserve_total(self, office_samples):
        """Hour and weekday histograms each sum to total_commits."""
        data = aggregate_samples(office_samples)
        assert data.total_commits == len(office_samples) == 180
        assert sum(b.count for b in data.by_hour) == 180
        assert sum(b.count for b in data.by_day) == 180

    def test_half_hour_buckets(self, make_sample):
        """Half-hour histograms bucket minutes 30-59 into HH:30."""
        data = aggregate_samples([make_sample("2024-03-04", "09:45"), make_sample("2024-03-04", "09:10")])
        assert len(data.by_hour) == 48
        counts = {b.time: b.count for b in data.by_hour}
        assert counts["09:30"] == 1
        assert counts["09:00"] == 1
        assert data.granularity is Granularity.HALF_HOUR

    def test_hourly_buckets(self, make_sample):
        """Hourly granularity gives 24 buckets."""
        data = aggregate_samples([make_sample("2024-03-04", "09:45")], Granularity.HOUR)
        assert len(data.by_hour) == 24
        assert data.by_hour[9].count == 1

    def test_weekday_histogram(self, make_sample):
        """Weekday buckets are "1".."7" with Monday first."""
        data = aggregate_samples([make_sample("2024-03-04", "10:00"), make_sample("2024-03-10", "10:00")])
        assert [b.time for b in data.by_day] == ["1", "2", "3", "4", "5", "6", "7"]
        assert data.by_day[0].count == 1
        assert data.by_day[6].count == 1

    def test_latest_commit_rolls_over_midnight(self, make_sample):
        """A 01:30 commit is the previous day's latest commit at minute 1530."""
        data = aggregate_samples([make_sample("2024-03-04", "18:00"), make_sample("2024-03-05", "01:30")])
        latest = {c.date: c.minutes_from_midnight for c in data.daily_latest_commits}
        assert latest == {"2024-03-04": 1530}

    def test_first_commit_per_calendar_date(self, make_sample):
        """First commits are per calendar date with no rollover."""
        data = aggregate_samples([make_sample("2024-03-04", "18:00"), make_sample("2024-03-05", "01:30")])
        first = {c.date: c.minutes_from_midnight for c in data.daily_first_commits}
        assert first == {"2024-03-04": 1080, "2024-03-05": 90}

    def test_daily_extremes(self, make_sample):
        """Extremes record distinct hours, first/last minute and exact counts."""
        data = aggregate_samples(
            [
                make_sample("2024-03-09", "10:15"),
                make_sample("2024-03-09", "10:45"),
                make_sample("2024-03-09", "14:00"),
            ]
        )
        (day,) = data.daily_extremes
        assert day.date == "2024-03-09"
        assert day.hours == frozenset({10, 14})
        assert day.first_minute == 615
        assert day.last_minute == 840
        assert day.commit_count == 3
        assert day.span_hours == 3.75

    def test_day_hour_commits(self, make_sample):
        """Commits are counted per (weekday, hour)."""
        data = aggregate_samples([make_sample("2024-03-04", "19:10"), make_sample("2024-03-11", "19:50")])
        assert data.day_hour_commits == [DayHourCommit(1, 19, 2)]

    def test_dates_and_contributors(self, make_sample):
        """First/last dates and distinct authors are recorded."""
        data = aggregate_samples(
            [
                make_sample("2024-03-05", "10:00", author="bob"),
                make_sample("2024-03-04", "10:00", author="alice"),
                make_sample("2024-03-06", "10:00", author="alice"),
            ]
        )
        assert data.first_commit_date == "2024-03-04"
        assert data.last_commit_date == "2024-03-06"
        assert data.contributors == 2

    def test_timezone_distribution(self, make_sample):
        """Offsets are counted busiest first."""
        data = aggregate_samples(
            [
                make_sample("2024-03-04", "10:00", offset="-0500"),
                make_sample("2024-03-04", "11:00", offset="+0800"),
                make_sample("2024-03-04", "12:00", offset="+0800"),
            ]
        )
        assert data.timezone_data.total_commits == 3
        assert [(tz.offset, tz.count) for tz in data.timezone_data.timezones] == [
            ("+0800", 2),
            ("-0500", 1),
        ]

    def test_empty_input(self):
        """No samples give an empty but well-formed set."""
        data = aggregate_samples([])
        assert data.total_commits == 0
        assert len(data.by_hour) == 48
        assert data.first_commit_date is None
        assert data.timezone_data is None
        assert data.daily_extremes == []


class TestFolding:
    """Tests for histogram folding helpers."""

    def test_fold_to_hours_conserves(self):
        """Half-hour buckets fold into their hour without losing commits."""
        histogram = [TimeCount("09:00", 2), TimeCount("09:30", 3), TimeCount("18:30", 4)]
        folded = fold_to_hours(histogram)
        assert len(folded) == 24
        assert folded[9] == TimeCount("09", 5)
        assert folded[18] == TimeCount("18", 4)
        assert sum(b.count for b in folded) == 9

    def test_hour_counts_array(self):
        """Plain list indexed by hour."""
        counts = hour_counts_array([TimeCount("07:30", 1), TimeCount("07:00", 1)])
        assert counts[7] == 2
        assert len(counts) == 24

    def test_fold_day_hour_to_weekdays(self):
        """Per-weekday totals over all hours."""
        days = fold_day_hour_to_weekdays(
            [DayHourCommit(1, 9, 2), DayHourCommit(1, 20, 1), DayHourCommit(7, 11, 4)]
        )
        assert days[0] == TimeCount("1", 3)
        assert days[6] == TimeCount("7", 4)
        assert sum(d.count for d in days) == 7

    def test_detect_granularity(self):
        """48 buckets are half-hour and 24 are hourly."""
        assert detect_granularity(empty_hour_histogram(Granularity.HALF_HOUR)) is Granularity.HALF_HOUR
        assert detect_granularity(empty_hour_histogram()) is Granularity.HOUR
        assert detect_granularity([TimeCount("09:30", 1)]) is Granularity.HALF_HOUR
        assert detect_granularity([TimeCount("09", 1)]) is Granularity.HOUR


class TestContributors:
    """Tests for per-author grouping."""

    def test_collect_contributors_sorted(self, make_sample):
        """Contributors come busiest first with "name <email>" labels."""
        contributors = collect_contributors(
            [
                make_sample("2024-03-04", "10:00", author="alice"),
                make_sample("2024-03-04", "11:00", author="bob"),
                make_sample("2024-03-05", "11:00", author="bob"),
            ]
        )
        assert [c.name for c in contributors] == ["bob", "alice"]
        assert contributors[0].author == "bob <bob@example.com>"
        assert contributors[0].email == "bob@example.com"
        assert contributors[0].commits == 2

    def test_samples_without_author_are_skipped(self, make_sample):
        """Anonymous samples do not form a contributor."""
        assert collect_contributors([make_sample("2024-03-04", "10:00", author=None)]) == []

    def test_contributor_histograms(self, make_sample):
        """Each contributor gets a 24-hour and a weekday histogram of their own."""
        samples = [
            make_sample("2024-03-04", "10:00", author="alice"),
            make_sample("2024-03-04", "10:00", author="bob"),
            make_sample("2024-03-09", "15:00", author="alice"),
        ]
        by_name = {c.contributor.name: c for c in build_contributor_samples(samples)}
        alice = by_name["alice"]
        assert len(alice.time_distribution) == 24
        assert alice.time_distribution[10].count == 1
        assert alice.time_distribution[15].count == 1
        assert alice.day_distribution[5].count == 1  # Saturday

    def test_contributor_daily_windows(self, make_sample):
        """First commits keep weekday 08:00-12:00; latest keep >= 16:00 or <= 02:00."""
        samples = [
            make_sample("2024-03-04", "07:30"),
            make_sample("2024-03-04", "08:15"),
            make_sample("2024-03-04", "17:40"),
            make_sample("2024-03-05", "01:30"),
            make_sample("2024-03-05", "12:30"),
            make_sample("2024-03-09", "09:00"),  # Saturday: ignored
            make_sample("2024-03-09", "20:00"),
        ]
        (alice,) = build_contributor_samples(samples)
        assert alice.daily_first_commits == [DailyCommitTime("2024-03-04", 495)]
        assert alice.daily_latest_commits == [
            DailyCommitTime("2024-03-04", 1060),
            DailyCommitTime("2024-03-05", 90),
        ]

    def test_restricted_contributors(self, make_sample):
        """Only the requested contributors are built, in the requested order."""
        samples = [
            make_sample("2024-03-04", "10:00", author="alice"),
            make_sample("2024-03-04", "10:00", author="bob"),
        ]
        everyone = collect_contributors(samples)
        bob_only = [c for c in everyone if c.name == "bob"]
        result = build_contributor_samples(samples, bob_only)
        assert [r.contributor.name for r in result] == ["bob"]
