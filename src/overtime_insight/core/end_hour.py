"""End-of-day detection: walk back from late evening to the last busy hour."""

from __future__ import annotations

import math
from typing import Optional, Sequence

from ..logging_config import get_logger
from ..samples.aggregation import hour_counts_array
from ..samples.models import TimeCount
from .models import EndDetectionMethod, EndHourWindow, HourRange

logger = get_logger(__name__)

ACTIVITY_THRESHOLD_RATIO = 0.3
END_QUANTILE = 0.85


def detect_end_hour_window(
    hour_data: Sequence[TimeCount], start_hour: float, standard_end_hour: float
) -> EndHourWindow:
    """
    Estimate the end of the working day from an hour-of-day histogram.

    Half-hour histograms are folded to 24 hourly buckets first. The last hour
    (scanning 23 down to 0) whose count reaches 30% of the peak is the primary
    candidate; the hour at the 85th percentile of commit mass is the
    secondary one. The candidate is clamped between roughly one hour before
    the standard end and the last active hour, never before the start hour.

    Args:
        hour_data: Hour-of-day histogram (24 or 48 buckets)
        start_hour: Detected start of the working day
        standard_end_hour: start_hour + 9, capped at 24

    Returns:
        A one-hour EndHourWindow; method is BACKWARD_THRESHOLD when a last
        active hour was found, DEFAULT otherwise
    """
    default_end = min(standard_end_hour, 24)
    default_range_start = max(0, math.floor(default_end - 1))

    counts = [max(0, c) for c in hour_counts_array(hour_data)] if hour_data else []
    total = sum(counts)
    if total <= 0:
        return _fallback_window(default_range_start)

    last_active = find_last_active_hour(counts)
    quantile_raw = hour_at_quantile(counts, END_QUANTILE)
    quantile_hour = math.floor(quantile_raw) if quantile_raw is not None else None

    lower_bound = default_range_start
    if last_active is not None:
        lower_bound = min(lower_bound, last_active)
    lower_bound = max(lower_bound, max(0, math.floor(start_hour)))

    if last_active is not None:
        upper_bound = last_active
    else:
        upper_bound = max(math.floor(default_end), lower_bound)
    upper_bound = max(upper_bound, lower_bound)

    if last_active is not None:
        candidate = last_active
    elif quantile_hour is not None:
        candidate = quantile_hour
    else:
        candidate = math.floor(default_end)
    candidate = min(max(candidate, lower_bound), upper_bound)

    range_start = min(candidate, 23)
    range_end = min(range_start + 1, 24)
    method = (
        EndDetectionMethod.BACKWARD_THRESHOLD if last_active is not None else EndDetectionMethod.DEFAULT
    )
    logger.debug(
        f"End hour: last_active={last_active} quantile={quantile_hour} "
        f"bounds=[{lower_bound}, {upper_bound}] -> {range_end} ({method.value})"
    )
    return EndHourWindow(
        end_hour=range_end,
        range=HourRange(range_start, range_end),
        method=method,
    )


def find_last_active_hour(counts: Sequence[int]) -> Optional[int]:
    """Latest hour whose count is at least 30% of the peak (minimum 1)."""
    peak = max(counts, default=0)
    threshold = max(1, math.floor(peak * ACTIVITY_THRESHOLD_RATIO))
    for hour in range(23, -1, -1):
        if counts[hour] >= threshold:
            return hour
    return None


def hour_at_quantile(counts: Sequence[int], quantile: float) -> Optional[float]:
    """Fractional hour at which cumulative commit mass reaches ``quantile``.

    Mass inside the crossing hour is interpolated linearly.
    """
    total = sum(counts)
    if total <= 0:
        return None

    target = min(max(quantile, 0.0), 1.0)
    cumulative = 0
    for hour, count in enumerate(counts):
        if count <= 0:
            continue
        previous_ratio = cumulative / total
        cumulative += count
        if cumulative / total >= target:
            in_hour = target - previous_ratio
            if in_hour <= 0:
                return float(hour)
            portion = min(1.0, max(0.0, in_hour * total / count))
            return hour + portion
    return float(len(counts) - 1)


def _fallback_window(range_start: int) -> EndHourWindow:
    end = min(range_start + 1, 24)
    return EndHourWindow(
        end_hour=end,
        range=HourRange(range_start, end),
        method=EndDetectionMethod.DEFAULT,
    )
