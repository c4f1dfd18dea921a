"""Tests for the 996 index calculator."""

import pytest

from overtime_insight.core.calculator import INDEX_TOP_BAND, calculate_996_index, describe_index
from overtime_insight.core.models import WorkloadSplit


def split(work, overtime, weekday, weekend, bucket_count=24):
    return WorkloadSplit(
        work=work, overtime=overtime, weekday=weekday, weekend=weekend, bucket_count=bucket_count
    )


class TestCalculate996Index:
    """Tests for calculate_996_index."""

    @pytest.mark.parametrize(
        "work, overtime, weekday, weekend, bucket_count, ratio, index996",
        [
            (30, 10, 35, 5, 24, 35, 105),
            (1, 0, 1, 0, 1, -88, -264),
            (20, 5, 22, 2, 6, 28, 84),
        ],
    )
    def test_reference_values(self, work, overtime, weekday, weekend, bucket_count, ratio, index996):
        """Calibration cases keep their ratio and index."""
        result = calculate_996_index(split(work, overtime, weekday, weekend, bucket_count))
        assert result.overtime_ratio == ratio
        assert result.index996 == index996

    def test_weekday_only(self):
        """40% overtime with no weekend commits gives index 120."""
        result = calculate_996_index(split(60, 40, 100, 0))
        assert result.overtime_ratio == 40
        assert result.index996 == 120
        assert result.index996_str == "Extremely poor: overtime culture is severe"

    def test_weekend_commits_shift_work_to_overtime(self):
        """Weekend share of work commits counts as overtime: 30 + 70 * 20 / 100 = 44."""
        result = calculate_996_index(split(70, 30, 80, 20))
        assert result.overtime_ratio == 44
        assert result.index996 == 132
        assert result.index996_str == INDEX_TOP_BAND

    def test_ratio_rounds_up(self):
        """The percentage is rounded up: ceil(10 * 100 / 30) = 34."""
        result = calculate_996_index(split(20, 10, 30, 0))
        assert result.overtime_ratio == 34
        assert result.index996 == 102

    def test_amended_overtime_rounds_half_up(self):
        """An amended overtime of 0.5 commits rounds to 1."""
        result = calculate_996_index(split(1, 0, 1, 1))
        assert result.overtime_ratio == 100

    def test_no_commits(self):
        """Empty tallies degrade to 0 instead of raising."""
        result = calculate_996_index(split(0, 0, 0, 0))
        assert result.index996 == 0
        assert result.overtime_ratio == 0
        assert result.index996_str == "Very healthy: an ideal project"

    def test_no_weekday_or_weekend_commits(self):
        """Without a week split the weekend term is dropped."""
        result = calculate_996_index(split(90, 10, 0, 0))
        assert result.overtime_ratio == 10
        assert result.index996 == 30

    def test_unsaturated_short_day(self):
        """A short working day below nine active buckets gives a negative ratio."""
        result = calculate_996_index(split(50, 0, 50, 0, bucket_count=4))
        assert result.overtime_ratio == -55
        assert result.index996 == -165
        assert result.index996_str == "Very healthy: an ideal project"

    def test_no_unsaturation_with_full_histogram(self):
        """With 24 buckets a zero ratio stays zero."""
        result = calculate_996_index(split(50, 0, 50, 0))
        assert result.overtime_ratio == 0


class TestDescribeIndex:
    """Tests for the index bands."""

    def test_band_boundaries(self):
        """Band upper bounds are inclusive."""
        assert describe_index(0).startswith("Very healthy")
        assert describe_index(21).startswith("Healthy")
        assert describe_index(22).startswith("Acceptable")
        assert describe_index(63).startswith("Poor")
        assert describe_index(100).startswith("Very poor")
        assert describe_index(130).startswith("Extremely poor")

    def test_top_band(self):
        """Anything above 130 is the top band."""
        assert describe_index(131) == INDEX_TOP_BAND
