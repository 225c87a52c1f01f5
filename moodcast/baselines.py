"""
Moodcast — Baseline Tables  (moodcast/baselines.py)
====================================================
Default circadian (hourly) and weekly mood/energy curves.  Used verbatim
when a bucket has no data, and as the smoothing prior otherwise.

Tables are immutable and injected into PatternAnalyzer / Forecaster;
DEFAULT_BASELINES is only the default argument, so alternate sets
(per-locale, per-cohort) can be swapped in without touching the code.
"""
from __future__ import annotations

from dataclasses import dataclass

from moodcast.entries import DailyPattern, WeeklyPattern
from moodcast.errors import InvalidInput


NEUTRAL_HOURLY = (50, 50)   # (mood, energy) when even the table has no entry
NEUTRAL_WEEKLY = (60, 60)


@dataclass(frozen=True)
class BaselineTables:
    daily:  tuple[DailyPattern, ...]
    weekly: tuple[WeeklyPattern, ...]

    def __post_init__(self):
        hours = sorted(p.hour for p in self.daily)
        days  = sorted(p.day_of_week for p in self.weekly)
        if hours != list(range(24)):
            raise InvalidInput("baseline daily table must cover hours 0-23 exactly once")
        if days != list(range(7)):
            raise InvalidInput("baseline weekly table must cover days 0-6 exactly once")
        # normalise ordering so lookups by index are valid
        object.__setattr__(self, "daily", tuple(sorted(self.daily, key=lambda p: p.hour)))
        object.__setattr__(self, "weekly", tuple(sorted(self.weekly, key=lambda p: p.day_of_week)))

    def daily_for(self, hour: int) -> DailyPattern:
        if 0 <= hour < len(self.daily):
            return self.daily[hour]
        mood, energy = NEUTRAL_HOURLY
        return DailyPattern(hour, mood, energy, 0)

    def weekly_for(self, day: int) -> WeeklyPattern:
        if 0 <= day < len(self.weekly):
            return self.weekly[day]
        mood, energy = NEUTRAL_WEEKLY
        return WeeklyPattern(day, mood, energy, 0)


_DAILY_TABLE = [
    # (hour, mood, energy)
    # late night — lowest points
    (0, 40, 25), (1, 35, 20), (2, 30, 15), (3, 28, 12), (4, 30, 15), (5, 35, 20),
    # early morning
    (6, 45, 30), (7, 50, 35), (8, 55, 45),
    # morning rise
    (9, 60, 60), (10, 65, 70), (11, 68, 75),
    # midday peak
    (12, 70, 75), (13, 68, 70),
    # afternoon dip
    (14, 60, 55), (15, 58, 50),
    # second wind
    (16, 62, 60), (17, 65, 65), (18, 63, 60),
    # evening decline
    (19, 60, 55), (20, 58, 50), (21, 55, 45),
    # wind down
    (22, 50, 35), (23, 45, 30),
]

_WEEKLY_TABLE = [
    # (day, mood, energy), 0 = Sunday
    (0, 55, 60),   # Sunday blues
    (1, 50, 65),   # Monday
    (2, 65, 70),
    (3, 68, 72),
    (4, 70, 70),
    (5, 72, 68),   # Friday
    (6, 75, 65),   # Saturday
]


DEFAULT_BASELINES = BaselineTables(
    daily=tuple(DailyPattern(h, m, e, 0) for h, m, e in _DAILY_TABLE),
    weekly=tuple(WeeklyPattern(d, m, e, 0) for d, m, e in _WEEKLY_TABLE),
)
