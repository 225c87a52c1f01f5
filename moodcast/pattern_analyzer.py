"""
Moodcast — Pattern Analyzer  (moodcast/pattern_analyzer.py)
============================================================
Summarizes a sample history into 24 hour-of-day and 7 day-of-week buckets,
blended with the baseline tables so sparse buckets stay stable.

    blended = round(raw_mean * w + baseline * (1 - w))
    hourly  w = min(n / 10, 0.8)
    weekly  w = min(n / 15, 0.7)

Empty buckets return the baseline entry verbatim (entryCount = 0).
The analyzer only computes; persisting the result is the caller's job.

Public API:
  PatternAnalyzer(baselines, tz).analyze_daily(samples)  -> list[DailyPattern]   (24)
  PatternAnalyzer(baselines, tz).analyze_weekly(samples) -> list[WeeklyPattern]  (7)
  PatternAnalyzer(baselines, tz).analyze(samples)        -> PatternSummary
"""
from __future__ import annotations

import logging
import math
import statistics
from dataclasses import dataclass
from datetime import timezone, tzinfo
from typing import Any, Optional

from moodcast.baselines import DEFAULT_BASELINES, BaselineTables
from moodcast.entries import (
    DailyPattern, WeeklyPattern, Sample,
    coerce_samples, day_of_week, hour_of_day,
)

logger = logging.getLogger(__name__)


HOURLY_SATURATION = 10     # samples for full trust, before the cap
HOURLY_CAP        = 0.8
WEEKLY_SATURATION = 15
WEEKLY_CAP        = 0.7


def round_half_up(x: float) -> int:
    """2.5 → 3, not banker's rounding."""
    return int(math.floor(x + 0.5))


def data_weight(count: int, saturation: int, cap: float) -> float:
    """Trust placed in a bucket's own mean; never exceeds `cap`."""
    if count <= 0:
        return 0.0
    return min(count / saturation, cap)


def blend(raw: float, baseline: float, weight: float) -> int:
    return round_half_up(raw * weight + baseline * (1 - weight))


@dataclass
class PatternSummary:
    daily:  list[DailyPattern]
    weekly: list[WeeklyPattern]

    def to_dict(self) -> dict:
        return {
            "daily":  [p.to_dict() for p in self.daily],
            "weekly": [p.to_dict() for p in self.weekly],
        }


class PatternAnalyzer:
    """Hour-of-day / day-of-week bucketing with baseline blending."""

    def __init__(self, baselines: BaselineTables = DEFAULT_BASELINES,
                 tz: Optional[tzinfo] = None):
        self.baselines = baselines
        self.tz = tz or timezone.utc

    def _bucket(self, samples: list[Sample], key_fn, size: int) -> list[list[Sample]]:
        buckets: list[list[Sample]] = [[] for _ in range(size)]
        for s in samples:
            buckets[key_fn(s.timestamp, self.tz)].append(s)
        return buckets

    def analyze_daily(self, samples: Any) -> list[DailyPattern]:
        samples = coerce_samples(samples)
        buckets = self._bucket(samples, hour_of_day, 24)

        patterns: list[DailyPattern] = []
        for hour, bucket in enumerate(buckets):
            base = self.baselines.daily_for(hour)
            n = len(bucket)
            if n == 0:
                patterns.append(DailyPattern(hour, base.average_mood, base.average_energy, 0))
                continue
            w = data_weight(n, HOURLY_SATURATION, HOURLY_CAP)
            patterns.append(DailyPattern(
                hour           = hour,
                average_mood   = blend(statistics.mean(s.mood for s in bucket), base.average_mood, w),
                average_energy = blend(statistics.mean(s.energy for s in bucket), base.average_energy, w),
                entry_count    = n,
            ))

        logger.debug(
            "daily patterns analyzed: %d samples, %d hours with data",
            len(samples), sum(1 for p in patterns if p.entry_count),
        )
        return patterns

    def analyze_weekly(self, samples: Any) -> list[WeeklyPattern]:
        samples = coerce_samples(samples)
        buckets = self._bucket(samples, day_of_week, 7)

        patterns: list[WeeklyPattern] = []
        for day, bucket in enumerate(buckets):
            base = self.baselines.weekly_for(day)
            n = len(bucket)
            if n == 0:
                patterns.append(WeeklyPattern(day, base.average_mood, base.average_energy, 0))
                continue
            w = data_weight(n, WEEKLY_SATURATION, WEEKLY_CAP)
            patterns.append(WeeklyPattern(
                day_of_week    = day,
                average_mood   = blend(statistics.mean(s.mood for s in bucket), base.average_mood, w),
                average_energy = blend(statistics.mean(s.energy for s in bucket), base.average_energy, w),
                entry_count    = n,
            ))

        logger.debug(
            "weekly patterns analyzed: %d samples, %d days with data",
            len(samples), sum(1 for p in patterns if p.entry_count),
        )
        return patterns

    def analyze(self, samples: Any) -> PatternSummary:
        samples = coerce_samples(samples)
        return PatternSummary(
            daily=self.analyze_daily(samples),
            weekly=self.analyze_weekly(samples),
        )
