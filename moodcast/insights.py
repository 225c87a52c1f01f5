"""
Moodcast — Insights  (moodcast/insights.py)
============================================
Read-only queries over samples, patterns and a forecast, used by the
journal's insights screen and as context for the external suggestion
service (which does its own text generation).

Public API:
  build_insights(...)                        -> PatternInsights
  format_forecast_block(insights, preds, dips) -> str   # context block
"""
from __future__ import annotations

import math
import statistics
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional, Sequence

from moodcast.entries import (
    DAY_NAMES,
    DailyPattern, EnergyDip, PredictionPoint, Sample, WeeklyPattern,
    samples_in_range, to_datetime,
)
from moodcast.errors import InvalidInput
from moodcast.pattern_analyzer import round_half_up


TIMEFRAMES           = ("day", "week", "month", "all")
UPCOMING_DIP_ENERGY  = 40
_MS_PER_DAY          = 86_400_000


# ──────────────────────────────────────────────
# HELPERS
# ──────────────────────────────────────────────

def samples_for_timeframe(samples: Sequence[Sample], timeframe: str,
                          now_ms: int, tz: Optional[tzinfo] = None) -> list[Sample]:
    """'day' = since local midnight, 'week' = last 7 days, 'month' = last 30, 'all'."""
    tz = tz or timezone.utc
    if timeframe == "all":
        return sorted(samples, key=lambda s: s.timestamp)
    if timeframe == "day":
        now = to_datetime(now_ms, tz)
        midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
        start = int(midnight.timestamp() * 1000)
        return samples_in_range(samples, start, start + _MS_PER_DAY - 1)
    if timeframe == "week":
        return samples_in_range(samples, now_ms - 7 * _MS_PER_DAY, now_ms)
    if timeframe == "month":
        return samples_in_range(samples, now_ms - 30 * _MS_PER_DAY, now_ms)
    raise InvalidInput(
        f"timeframe must be one of {', '.join(TIMEFRAMES)}, got {timeframe!r}", field="timeframe"
    )


def average_levels(samples: Sequence[Sample]) -> tuple[int, int]:
    if not samples:
        return 0, 0
    return (
        round_half_up(statistics.mean(s.mood for s in samples)),
        round_half_up(statistics.mean(s.energy for s in samples)),
    )


def recent_shift(samples: Sequence[Sample]) -> tuple[int, int]:
    """(mood, energy) difference between the newer and the older half."""
    if len(samples) < 2:
        return 0, 0
    chron = sorted(samples, key=lambda s: s.timestamp)
    newer = chron[-math.ceil(len(chron) / 2):]
    older = chron[:len(chron) // 2]
    return (
        round_half_up(statistics.mean(s.mood for s in newer) - statistics.mean(s.mood for s in older)),
        round_half_up(statistics.mean(s.energy for s in newer) - statistics.mean(s.energy for s in older)),
    )


def best_day_of_week(weekly: Sequence[WeeklyPattern]) -> Optional[str]:
    if not weekly:
        return None
    best = max(weekly, key=lambda p: p.average_mood + p.average_energy)
    return DAY_NAMES[best.day_of_week]


def best_time_of_day(daily: Sequence[DailyPattern]) -> Optional[str]:
    if not daily:
        return None
    best = max(daily, key=lambda p: p.average_mood + p.average_energy)
    return f"{best.hour:02d}:00"


def upcoming_energy_dip(predictions: Sequence[PredictionPoint],
                        threshold: int = UPCOMING_DIP_ENERGY,
                        tz: Optional[tzinfo] = None) -> Optional[EnergyDip]:
    """First forecast point with energy strictly under `threshold`."""
    for p in predictions:
        if p.predicted_energy < threshold:
            return EnergyDip(
                timestamp=p.timestamp,
                energy=p.predicted_energy,
                time=to_datetime(p.timestamp, tz or timezone.utc).strftime("%H:%M"),
            )
    return None


# ──────────────────────────────────────────────
# DATA STRUCTURES
# ──────────────────────────────────────────────

@dataclass
class PatternInsights:
    timeframe:      str = "all"
    sample_count:   int = 0
    average_mood:   int = 0
    average_energy: int = 0
    mood_shift:     int = 0
    energy_shift:   int = 0
    best_day:       Optional[str] = None          # e.g. "Saturday"
    best_time:      Optional[str] = None          # e.g. "12:00"
    next_dip:       Optional[EnergyDip] = None
    dips:           list[EnergyDip] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "timeframe":     self.timeframe,
            "sampleCount":   self.sample_count,
            "averageMood":   self.average_mood,
            "averageEnergy": self.average_energy,
            "moodShift":     self.mood_shift,
            "energyShift":   self.energy_shift,
            "bestDay":       self.best_day,
            "bestTime":      self.best_time,
            "nextDip":       self.next_dip.to_dict() if self.next_dip else None,
            "dips":          [d.to_dict() for d in self.dips],
        }


def build_insights(
    samples: Sequence[Sample],
    daily: Sequence[DailyPattern],
    weekly: Sequence[WeeklyPattern],
    predictions: Sequence[PredictionPoint],
    dips: Sequence[EnergyDip] = (),
    timeframe: str = "all",
    now_ms: Optional[int] = None,
    tz: Optional[tzinfo] = None,
) -> PatternInsights:
    """
    Averages and shift are computed over the timeframe; best day/time come
    from the patterns (which always cover the full history).
    """
    tz = tz or timezone.utc
    if now_ms is None:
        now_ms = int(datetime.now(timezone.utc).timestamp() * 1000)
    window = samples_for_timeframe(samples, timeframe, now_ms, tz)

    avg_mood, avg_energy = average_levels(window)
    mood_shift, energy_shift = recent_shift(window)

    return PatternInsights(
        timeframe      = timeframe,
        sample_count   = len(window),
        average_mood   = avg_mood,
        average_energy = avg_energy,
        mood_shift     = mood_shift,
        energy_shift   = energy_shift,
        best_day       = best_day_of_week(weekly),
        best_time      = best_time_of_day(daily),
        next_dip       = upcoming_energy_dip(predictions, tz=tz),
        dips           = list(dips),
    )


# ──────────────────────────────────────────────
# CONTEXT BLOCK FORMATTER
# ──────────────────────────────────────────────

def format_forecast_block(insights: PatternInsights,
                          predictions: Sequence[PredictionPoint],
                          tz: Optional[tzinfo] = None) -> str:
    """
    Compact text block handed to the suggestion service as context.
    Returns empty string if there is no forecast.
    """
    if not predictions:
        return ""
    tz = tz or timezone.utc

    lines = [
        "━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━",
        f"  MOOD/ENERGY FORECAST  ({len(predictions)}h ahead, "
        f"{insights.sample_count} entries in '{insights.timeframe}')",
        "━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━",
    ]

    if insights.sample_count:
        lines.append(
            f"  Averages:  mood={insights.average_mood}/100  |  energy={insights.average_energy}/100"
        )
        if insights.mood_shift or insights.energy_shift:
            lines.append(
                f"  Recent shift:  mood {insights.mood_shift:+d}  |  energy {insights.energy_shift:+d}"
            )
    if insights.best_day:
        lines.append(f"  Best day: {insights.best_day}")
    if insights.best_time:
        lines.append(f"  Best time of day: {insights.best_time}")

    lines.append("  Next hours:")
    for p in predictions:
        label = to_datetime(p.timestamp, tz).strftime("%a %H:%M")
        lines.append(
            f"    {label}  mood={p.predicted_mood}  energy={p.predicted_energy}  conf={p.confidence:.2f}"
        )

    if insights.dips:
        lines.append("  Energy dips: " + ", ".join(f"{d.time} ({d.energy})" for d in insights.dips))
    elif insights.next_dip:
        lines.append(f"  Lower energy expected around {insights.next_dip.time} ({insights.next_dip.energy})")

    lines.append("━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━")
    return "\n".join(lines)
