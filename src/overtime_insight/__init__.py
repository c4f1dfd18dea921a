"""
Overtime Insight - working-hour and overtime analytics for git history

Turns commit timestamps into a detected working window, overtime
distributions, a 996 index, a monthly trend and per-contributor patterns.
"""

__version__ = "0.1.0"

from .api import OvertimeReport, analyze, analyze_samples
from .config import AnalysisConfig, ThresholdConfig, load_config
from .core.ranking import rank_authors
from .samples.models import CommitTimeSample, SampleSet

__all__ = [
    "analyze",  # Aggregated SampleSet entry point
    "analyze_samples",  # Raw sample entry point
    "rank_authors",
    "OvertimeReport",
    "AnalysisConfig",
    "ThresholdConfig",
    "load_config",
    "CommitTimeSample",
    "SampleSet",
]
