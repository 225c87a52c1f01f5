"""
Moodcast — mood/energy pattern analysis and short-horizon forecasting.
"""

from moodcast.baselines import DEFAULT_BASELINES, BaselineTables
from moodcast.dip_finder import find_energy_dips
from moodcast.entries import (
    DailyPattern, EnergyDip, PredictionPoint, Sample, WeeklyPattern,
)
from moodcast.errors import InvalidInput, InvalidRange, MoodcastError
from moodcast.forecaster import Forecaster
from moodcast.pattern_analyzer import PatternAnalyzer, PatternSummary

__version__ = "0.3.0"

__all__ = [
    "DEFAULT_BASELINES", "BaselineTables",
    "DailyPattern", "EnergyDip", "PredictionPoint", "Sample", "WeeklyPattern",
    "Forecaster", "PatternAnalyzer", "PatternSummary",
    "InvalidInput", "InvalidRange", "MoodcastError",
    "find_energy_dips",
]
