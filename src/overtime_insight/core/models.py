"""Result records produced by the overtime-analytics engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..samples.models import DailyCommitTime, TimeCount

STANDARD_WORK_HOURS = 9


class DetectionMethod(Enum):
    """How the start of the working day was determined."""

    QUANTILE_WINDOW = "quantile-window"
    DEFAULT = "default"
    MANUAL = "manual"


class EndDetectionMethod(Enum):
    """How the end of the working day was determined."""

    BACKWARD_THRESHOLD = "backward-threshold"
    STANDARD_SHIFT = "standard-shift"
    DEFAULT = "default"
    MANUAL = "manual"


class DataQuality(Enum):
    SUFFICIENT = "sufficient"
    LIMITED = "limited"
    INSUFFICIENT = "insufficient"


class ConfidenceLevel(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Trend(Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class IntensityLevel(Enum):
    NORMAL = "normal"
    MODERATE = "moderate"
    HEAVY = "heavy"


class ProjectType(Enum):
    CORPORATE = "corporate"
    OPEN_SOURCE = "open_source"
    UNCERTAIN = "uncertain"


@dataclass(frozen=True)
class HourRange:
    start_hour: float
    end_hour: float


@dataclass(frozen=True)
class EndHourWindow:
    end_hour: float
    range: HourRange
    method: EndDetectionMethod  # BACKWARD_THRESHOLD or DEFAULT


@dataclass(frozen=True)
class WorkTimeWindow:
    """Inferred (or declared) working-hour window."""

    start_hour: float
    end_hour: float
    is_reliable: bool
    sample_count: int  # -1 for a manual window
    detection_method: DetectionMethod
    confidence: int  # 0-100
    start_range: HourRange
    end_range: HourRange
    end_detection_method: EndDetectionMethod

    @property
    def capped_end_hour(self) -> float:
        """End of normal hours; never more than 9 hours after the start."""
        return min(self.end_hour, self.start_hour + STANDARD_WORK_HOURS)


@dataclass(frozen=True)
class WorkloadSplit:
    """Commit tallies feeding the index formula."""

    work: int  # y: inside the working window
    overtime: int  # x: outside the working window
    weekday: int  # m: Monday-Friday
    weekend: int  # n: Saturday-Sunday
    bucket_count: int  # buckets in the histogram that produced work/overtime


@dataclass(frozen=True)
class Result996:
    index996: int
    index996_str: str
    overtime_ratio: int  # percentage, may be negative


@dataclass
class OvertimeSeverity:
    light: int = 0  # <= 2h past the end hour
    moderate: int = 0  # <= 4h
    severe: int = 0  # <= 6h
    extreme: int = 0  # > 6h


@dataclass
class WeekdayOvertimeDistribution:
    monday: int
    tuesday: int
    wednesday: int
    thursday: int
    friday: int
    peak_day: str
    peak_count: int
    overtime_days: int = 0
    total_weekdays: int = 0
    severity: Optional[OvertimeSeverity] = None  # only with a custom end hour

    def as_counts(self) -> dict[str, int]:
        return {
            "monday": self.monday,
            "tuesday": self.tuesday,
            "wednesday": self.wednesday,
            "thursday": self.thursday,
            "friday": self.friday,
        }


@dataclass
class WeekendOvertimeDistribution:
    saturday_days: int
    sunday_days: int
    casual_fix_days: int
    real_overtime_days: int
    total_weekend_days: int = 0
    weekend_activity_rate: Optional[float] = None  # percent
    real_overtime_rate: Optional[float] = None  # percent


@dataclass
class LateNightAnalysis:
    evening: int  # end hour - 21:00
    late_night: int  # 21:00 - 23:00
    midnight: int  # >= 23:00, including rolled-over hours
    dawn: int  # < 06:00
    midnight_days: int
    total_work_days: int
    midnight_rate: float  # percent
    total_weeks: int
    total_months: int


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class ParsedSampleSet:
    """Per-sample-set analysis bundle."""

    hour_data: list[TimeCount]
    day_data: list[TimeCount]
    total_commits: int
    work_window: WorkTimeWindow
    split: WorkloadSplit
    daily_first_commits: list[DailyCommitTime] = field(default_factory=list)
    weekday_overtime: Optional[WeekdayOvertimeDistribution] = None
    weekend_overtime: Optional[WeekendOvertimeDistribution] = None
    late_night: Optional[LateNightAnalysis] = None


@dataclass(frozen=True)
class DailyWorkSpan:
    date: str
    first_commit_minutes: int
    last_commit_minutes: int  # may exceed 1440
    span_hours: float
    commit_count: int


@dataclass
class MonthlyTrendData:
    month: str  # YYYY-MM
    index996: int
    avg_work_span: float  # hours
    work_span_std_dev: float  # hours
    avg_start_time: str  # HH:MM
    avg_end_time: str  # HH:MM, "+1" past midnight
    latest_end_time: str
    total_commits: int
    contributors: int
    work_days: int
    data_quality: DataQuality
    confidence: ConfidenceLevel


@dataclass
class TrendSummary:
    total_months: int
    avg_index996: float
    avg_work_span: float
    trend: Trend


@dataclass
class TrendAnalysisResult:
    monthly_data: list[MonthlyTrendData]
    since: str
    until: str
    summary: TrendSummary


@dataclass(frozen=True)
class OvertimeStats:
    workday_overtime: int
    weekend_overtime: int
    total_overtime: int


@dataclass(frozen=True)
class UserWorkPattern:
    author: str
    email: str
    total_commits: int
    commit_percentage: float
    time_distribution: list[TimeCount]
    working_hours: WorkTimeWindow
    index996: int
    overtime_stats: OvertimeStats
    intensity_level: IntensityLevel
    avg_start_time_mean: Optional[float] = None  # hours
    avg_start_time_median: Optional[float] = None
    avg_end_time_mean: Optional[float] = None
    avg_end_time_median: Optional[float] = None
    valid_days: Optional[int] = None


@dataclass
class IntensityDistribution:
    normal: list[UserWorkPattern]
    moderate: list[UserWorkPattern]
    heavy: list[UserWorkPattern]


@dataclass(frozen=True)
class TeamPercentiles:
    p25: float
    p50: float
    p75: float
    p90: float


@dataclass(frozen=True)
class TeamStatistics:
    median996: float
    mean996: float
    range: tuple[int, int]
    percentiles: TeamPercentiles


@dataclass(frozen=True)
class HealthAssessment:
    overall_index: int
    team_median_index: float
    conclusion: str
    warning: Optional[str] = None


@dataclass
class TeamAnalysis:
    core_contributors: list[UserWorkPattern]
    total_analyzed: int
    total_contributors: int
    filter_threshold: int
    baseline_end_hour: float
    distribution: IntensityDistribution
    statistics: TeamStatistics
    health_assessment: HealthAssessment


@dataclass(frozen=True)
class AuthorStats:
    name: str
    email: str
    total_commits: int
    index996: int
    index996_str: str
    overtime_ratio: int
    working_hour_commits: int
    overtime_commits: int
    weekday_commits: int
    weekend_commits: int


@dataclass
class AuthorRankingResult:
    authors: list[AuthorStats]  # index996 descending
    total_authors: int
    since: Optional[str] = None
    until: Optional[str] = None


@dataclass(frozen=True)
class RegularityDetails:
    morning_uptrend: bool
    afternoon_peak: bool
    evening_downtrend: bool
    night_low_activity: bool


@dataclass(frozen=True)
class RegularityResult:
    score: int  # 0-100
    description: str
    details: RegularityDetails


@dataclass(frozen=True)
class WeekendActivityResult:
    ratio: float  # 0-1
    description: str


@dataclass(frozen=True)
class MoonlightingResult:
    is_active: bool
    night_ratio: float  # night / (day + night)
    description: str


@dataclass(frozen=True)
class ProjectClassificationResult:
    project_type: ProjectType
    confidence: int
    regularity: RegularityResult
    weekend_activity: WeekendActivityResult
    moonlighting: MoonlightingResult
    contributors: int
    reasoning: str


@dataclass(frozen=True)
class TimezoneGroup:
    offset: str
    count: int
    ratio: float


@dataclass(frozen=True)
class TimezoneAnalysisResult:
    is_cross_timezone: bool
    cross_timezone_ratio: float
    dominant_timezone: Optional[str]
    dominant_ratio: float
    sleep_period_ratio: float
    confidence: int
    sleep_window: tuple[int, ...] = ()
    timezone_groups: tuple[TimezoneGroup, ...] = ()
    warning: Optional[str] = None
