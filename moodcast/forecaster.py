"""
Moodcast — Forecaster  (moodcast/forecaster.py)
================================================
Projects mood/energy for the next N hours from the blended hour/day
patterns, the short-term trend of the latest samples, a circadian term
and a small amount of noise that shrinks with horizon distance.

Per step i (1..hours_ahead):
  base        = mean(hour pattern, day pattern)
  confidence  = 0.6, raised by bucket entry counts
  trend       = mean(last 3) - mean(previous 3), weighted max(0.1, 0.4 - 0.03 i)
  circadian   = sin((h-6)/24·2π)·3  (mood),  sin((h-4)/24·2π)·4  (energy)
  noise       = (u-0.5)·4·f (mood), (u-0.5)·5·f (energy), f = max(0.2, 1 - 0.05 i)
  clamp to [10, 90], round

Missing pattern entries are a degraded-data state, not an error: lookup
falls back to the baseline table, then to a neutral constant.
"""
from __future__ import annotations

import logging
import math
import statistics
import time
from datetime import timezone, tzinfo
from typing import Any, Callable, Mapping, Optional, Sequence

import numpy as np

from moodcast.baselines import DEFAULT_BASELINES, BaselineTables
from moodcast.entries import (
    MS_PER_HOUR,
    DailyPattern, WeeklyPattern, PredictionPoint, Sample,
    coerce_samples, day_of_week, hour_of_day,
)
from moodcast.errors import InvalidInput, InvalidRange
from moodcast.pattern_analyzer import PatternAnalyzer, round_half_up

logger = logging.getLogger(__name__)


BASE_CONFIDENCE   = 0.6
TREND_WINDOW      = 10      # most recent samples considered for momentum
TREND_MIN_SAMPLES = 3
TREND_BONUS       = 0.1
PREDICTION_FLOOR  = 10
PREDICTION_CEIL   = 90


def calculate_trend(values: Sequence[float]) -> float:
    """mean(last 3) - mean(the 3 before).  0 when there is no earlier window."""
    if len(values) < 2:
        return 0.0
    recent = values[-3:]
    older  = values[-6:-3]
    if not older:
        return 0.0
    return statistics.mean(recent) - statistics.mean(older)


def trend_weight(step: int) -> float:
    return max(0.1, 0.4 - step * 0.03)


def noise_scale(step: int) -> float:
    return max(0.2, 1 - step * 0.05)


def circadian_offsets(hour: int) -> tuple[float, float]:
    """(mood, energy) offsets; mood peaks mid-afternoon, energy late morning."""
    mood   = math.sin((hour - 6) / 24 * 2 * math.pi) * 3
    energy = math.sin((hour - 4) / 24 * 2 * math.pi) * 4
    return mood, energy


def _clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def _now_ms() -> int:
    return int(time.time() * 1000)


def _index_patterns(patterns: Any, kind: type, key: str, field: str) -> dict[int, Any]:
    """list of patterns (objects or wire dicts) → {key: pattern}; first entry wins."""
    if not isinstance(patterns, (list, tuple)):
        raise InvalidInput(f"{field} must be a list, got {type(patterns).__name__}", field=field)
    index: dict[int, Any] = {}
    for item in patterns:
        if isinstance(item, Mapping):
            item = kind.from_dict(item)
        elif not isinstance(item, kind):
            raise InvalidInput(
                f"{field} entries must be {kind.__name__}, got {type(item).__name__}", field=field
            )
        index.setdefault(getattr(item, key), item)
    return index


class Forecaster:
    """Hour-step mood/energy forecaster."""

    def __init__(
        self,
        baselines: BaselineTables = DEFAULT_BASELINES,
        tz: Optional[tzinfo] = None,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        """
        Args:
            baselines: fallback/prior tables, shared with the analyzer
            tz: timezone used to derive future hour/day buckets
            rng: noise source; built from `seed` when omitted
            seed: seed for a fresh numpy Generator (None → OS entropy)
            clock: returns "now" in epoch ms
        """
        self.baselines = baselines
        self.tz = tz or timezone.utc
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.clock = clock or _now_ms
        self.analyzer = PatternAnalyzer(baselines, self.tz)

    # ── lookups ──────────────────────────────────────────────

    # supplied entry → baseline table → neutral constant (inside daily_for/weekly_for)
    def _hour_entry(self, index: dict[int, DailyPattern], hour: int) -> DailyPattern:
        if hour in index:
            return index[hour]
        return self.baselines.daily_for(hour)

    def _day_entry(self, index: dict[int, WeeklyPattern], day: int) -> WeeklyPattern:
        if day in index:
            return index[day]
        return self.baselines.weekly_for(day)

    # ── prediction ───────────────────────────────────────────

    def predict(
        self,
        samples: Any,
        daily_patterns: Any = None,
        weekly_patterns: Any = None,
        hours_ahead: int = 12,
        now_ms: Optional[int] = None,
    ) -> list[PredictionPoint]:
        """
        Forecast `hours_ahead` hourly points starting one hour after now.

        daily_patterns / weekly_patterns: analyzer output (or wire dicts).
        None regenerates them from `samples`.

        Raises:
            InvalidRange: hours_ahead is not a positive integer
            InvalidInput: samples or pattern arguments are not lists
        """
        if isinstance(hours_ahead, bool) or not isinstance(hours_ahead, int) or hours_ahead <= 0:
            raise InvalidRange(hours_ahead)

        samples = coerce_samples(samples)
        if daily_patterns is None:
            daily_patterns = self.analyzer.analyze_daily(samples)
        if weekly_patterns is None:
            weekly_patterns = self.analyzer.analyze_weekly(samples)
        hourly = _index_patterns(daily_patterns, DailyPattern, "hour", "daily_patterns")
        daily  = _index_patterns(weekly_patterns, WeeklyPattern, "day_of_week", "weekly_patterns")

        recent: list[Sample] = sorted(samples, key=lambda s: s.timestamp)[-TREND_WINDOW:]
        has_trend = len(recent) >= TREND_MIN_SAMPLES
        mood_trend = energy_trend = 0.0
        if has_trend:
            mood_trend   = calculate_trend([s.mood for s in recent])
            energy_trend = calculate_trend([s.energy for s in recent])

        now = self.clock() if now_ms is None else now_ms
        points: list[PredictionPoint] = []

        for i in range(1, hours_ahead + 1):
            future = now + i * MS_PER_HOUR
            hour = hour_of_day(future, self.tz)
            day  = day_of_week(future, self.tz)

            hour_p = self._hour_entry(hourly, hour)
            day_p  = self._day_entry(daily, day)

            mood   = (hour_p.average_mood + day_p.average_mood) / 2
            energy = (hour_p.average_energy + day_p.average_energy) / 2

            confidence = BASE_CONFIDENCE
            if hour_p.entry_count > 0 or day_p.entry_count > 0:
                hour_conf = min(hour_p.entry_count / 10, 1)
                day_conf  = min(day_p.entry_count / 15, 1)
                confidence = max(BASE_CONFIDENCE, (hour_conf + day_conf) / 2)

            if has_trend:
                w = trend_weight(i)
                mood   += mood_trend * w
                energy += energy_trend * w
                confidence = min(1.0, confidence + TREND_BONUS)

            circ_mood, circ_energy = circadian_offsets(hour)
            scale = noise_scale(i)
            mood   += circ_mood + (self.rng.random() - 0.5) * 4 * scale
            energy += circ_energy + (self.rng.random() - 0.5) * 5 * scale

            points.append(PredictionPoint(
                timestamp        = future,
                predicted_mood   = round_half_up(_clamp(mood, PREDICTION_FLOOR, PREDICTION_CEIL)),
                predicted_energy = round_half_up(_clamp(energy, PREDICTION_FLOOR, PREDICTION_CEIL)),
                confidence       = _clamp(round(confidence, 2), 0.0, 1.0),
            ))

        logger.debug(
            "forecast generated: %d samples, %d hours ahead, trend=%s",
            len(samples), hours_ahead, has_trend,
        )
        return points
