"""Tests for cross-timezone detection."""

import pytest

from overtime_insight.core.timezone import analyze_timezone, find_sleep_window, format_timezone_warning
from overtime_insight.samples.models import TimeCount, TimezoneCount, TimezoneData


def hours(counts_by_hour):
    return [TimeCount(f"{h:02d}", counts_by_hour.get(h, 0)) for h in range(24)]


def zones(*pairs):
    return TimezoneData(
        total_commits=sum(count for _, count in pairs),
        timezones=[TimezoneCount(offset, count) for offset, count in pairs],
    )


class TestFindSleepWindow:
    """Tests for the quietest five-hour window."""

    def test_no_commits(self):
        """An empty histogram has no window."""
        assert find_sleep_window(hours({})) == (0.0, ())

    def test_quiet_night(self):
        """The five zero hours are found."""
        data = hours({h: 1 for h in range(24) if not 2 <= h <= 6})
        ratio, window = find_sleep_window(data)
        assert window == (2, 3, 4, 5, 6)
        assert ratio == 0.0

    def test_window_wraps_midnight(self):
        """The window may start before midnight."""
        data = hours({h: 1 for h in range(3, 22)})
        _, window = find_sleep_window(data)
        assert window == (22, 23, 0, 1, 2)

    def test_half_hour_histogram(self):
        """Half-hour buckets are folded into hours first."""
        data = [TimeCount(f"{m // 60:02d}:{m % 60:02d}", 1) for m in range(0, 1440, 30)]
        ratio, window = find_sleep_window(data)
        assert ratio == pytest.approx(10 / 48)
        assert len(window) == 5


class TestAnalyzeTimezone:
    """Tests for analyze_timezone."""

    def test_no_commits(self):
        """Zero commits give a neutral result."""
        result = analyze_timezone(TimezoneData(total_commits=0, timezones=[]), hours({}))
        assert not result.is_cross_timezone
        assert result.dominant_timezone is None
        assert result.confidence == 0

    def test_single_timezone_office_hours(self):
        """One offset and quiet nights is not cross-timezone."""
        result = analyze_timezone(zones(("+0800", 40)), hours({h: 4 for h in range(9, 19)}))
        assert not result.is_cross_timezone
        assert result.dominant_timezone == "+0800"
        assert result.dominant_ratio == 1.0
        assert result.cross_timezone_ratio == 0.0
        assert result.sleep_period_ratio == 0.0
        assert result.confidence == 30
        assert result.warning is None

    def test_two_timezones_round_the_clock(self):
        """Both signals raise the confidence by 15."""
        result = analyze_timezone(zones(("+0800", 90), ("-0500", 10)), hours({h: 4 for h in range(24)}))
        assert result.is_cross_timezone
        assert result.cross_timezone_ratio == pytest.approx(0.1)
        assert result.confidence == 65
        assert "Main timezones:" in result.warning
        assert "+0800: 90.0%" in result.warning
        assert "-0500: 10.0%" in result.warning

    def test_sleepless_single_timezone(self):
        """Round-the-clock commits alone flag cross-timezone."""
        result = analyze_timezone(zones(("+0000", 240)), hours({h: 10 for h in range(24)}))
        assert result.is_cross_timezone
        assert result.cross_timezone_ratio == 0.0
        assert result.confidence == 70

    def test_groups_truncated(self):
        """At most five groups are kept and the warning lists three."""
        data = zones(*((f"+0{h}00", 10 - h) for h in range(7)))
        result = analyze_timezone(data, hours({10: data.total_commits}))
        assert len(result.timezone_groups) == 5
        assert sum(line.startswith("  ") for line in result.warning.splitlines()) == 3

    def test_confidence_capped(self):
        """Large projects with both signals stop at 95."""
        result = analyze_timezone(zones(("+0800", 400), ("+0100", 100)), hours({h: 20 for h in range(24)}))
        assert result.confidence == 95


class TestFormatTimezoneWarning:
    """Tests for format_timezone_warning."""

    def test_not_cross_timezone(self):
        """No warning for single-timezone projects."""
        result = analyze_timezone(zones(("+0800", 40)), hours({10: 40}))
        assert format_timezone_warning(result) is None

    def test_header(self):
        """The header reports the non-dominant share."""
        result = analyze_timezone(zones(("+0800", 75), ("+0000", 25)), hours({10: 100}))
        assert format_timezone_warning(result).startswith(
            "This project may involve cross-timezone collaboration (non-dominant timezones: 25.0%)"
        )
