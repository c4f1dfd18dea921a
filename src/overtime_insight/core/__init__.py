"""Analytics engine: working hours, overtime, index, trend, team and project analyzers."""

from .calculator import calculate_996_index, describe_index
from .classifier import classify_project
from .models import (
    AuthorRankingResult,
    AuthorStats,
    IntensityLevel,
    ParsedSampleSet,
    ProjectClassificationResult,
    ProjectType,
    Result996,
    TeamAnalysis,
    TimezoneAnalysisResult,
    TrendAnalysisResult,
    UserWorkPattern,
    ValidationResult,
    WorkloadSplit,
    WorkTimeWindow,
)
from .parser import index_for, parse_sample_set, validate_parsed
from .ranking import rank_authors
from .team import analyze_team, analyze_user, run_team_analysis
from .timezone import analyze_timezone
from .trend import analyze_trend
from .working_hours import detect_working_hours, is_working_hour, parse_custom_work_hours

__all__ = [
    "calculate_996_index",
    "describe_index",
    "classify_project",
    "index_for",
    "parse_sample_set",
    "validate_parsed",
    "rank_authors",
    "analyze_team",
    "analyze_user",
    "run_team_analysis",
    "analyze_timezone",
    "analyze_trend",
    "detect_working_hours",
    "is_working_hour",
    "parse_custom_work_hours",
    "AuthorRankingResult",
    "AuthorStats",
    "IntensityLevel",
    "ParsedSampleSet",
    "ProjectClassificationResult",
    "ProjectType",
    "Result996",
    "TeamAnalysis",
    "TimezoneAnalysisResult",
    "TrendAnalysisResult",
    "UserWorkPattern",
    "ValidationResult",
    "WorkloadSplit",
    "WorkTimeWindow",
]
