"""The 996 index: a calibrated overtime-intensity score.

Let y be commits inside the working window, x commits outside it, m weekday
commits and n weekend commits. Weekend commits are spread proportionally
over the normal/overtime split before the ratio is taken:

    amended = round(x + y * n / (m + n))
    ratio   = ceil(amended * 100 / (x + y))
    index   = ratio * 3

The factor 3 maps a canonical 9am-9pm six-day schedule (about 37.5%
overtime) to roughly 100.
"""

from __future__ import annotations

import math

from ..logging_config import get_logger
from ..math import Statistics
from .models import STANDARD_WORK_HOURS, Result996, WorkloadSplit

logger = get_logger(__name__)

INDEX_MULTIPLIER = 3

# Upper bound of each band, checked in order; anything above the last is the final band
INDEX_BANDS: list[tuple[int, str]] = [
    (0, "Very healthy: an ideal project"),
    (21, "Healthy: very little overtime"),
    (48, "Acceptable: occasional overtime"),
    (63, "Poor: overtime culture is fairly serious"),
    (100, "Very poor: close to a 996 schedule"),
    (130, "Extremely poor: overtime culture is severe"),
]
INDEX_TOP_BAND = "Overtime culture is at its most extreme"


def calculate_996_index(split: WorkloadSplit) -> Result996:
    """
    Compute the 996 index from a workload split.

    Degenerate inputs degrade instead of raising: with no weekday or weekend
    commits the weekend term is dropped, and with no commits in the working
    or overtime tallies the ratio is 0.

    Args:
        split: Work/overtime and weekday/weekend tallies

    Returns:
        Result996 with the index, its text band and the overtime ratio
    """
    y, x, m, n = split.work, split.overtime, split.weekday, split.weekend

    weekend_share = y * n / (m + n) if m + n > 0 else 0.0
    amended = Statistics.round_half_up(x + weekend_share)

    total = x + y
    if total <= 0:
        logger.debug("No commits in work/overtime tallies; overtime ratio is 0")
        ratio = 0
    else:
        ratio = math.ceil(amended * 100 / total)

    if ratio == 0 and 0 < split.bucket_count < STANDARD_WORK_HOURS and total > 0:
        ratio = _unsaturated_ratio(total, split.bucket_count)

    index996 = ratio * INDEX_MULTIPLIER
    return Result996(
        index996=index996,
        index996_str=describe_index(index996),
        overtime_ratio=ratio,
    )


def _unsaturated_ratio(total: int, bucket_count: int) -> int:
    """Negative percentage below a standard 9-hour day's throughput."""
    average = total / bucket_count
    mock_total = average * STANDARD_WORK_HOURS
    return math.ceil(total / mock_total * 100) - 100


def describe_index(index996: int) -> str:
    for upper, text in INDEX_BANDS:
        if index996 <= upper:
            return text
    return INDEX_TOP_BAND
