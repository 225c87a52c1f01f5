"""
Moodcast — Journal Entities  (moodcast/entries.py)
===================================================
Typed value objects shared by the analyzer, forecaster and API layer.

Wire format (camelCase, as stored by the journal's key-value store):
    Sample         {id, timestamp, mood, energy, notes?}
    DailyPattern   {hour, averageMood, averageEnergy, entryCount}
    WeeklyPattern  {dayOfWeek, averageMood, averageEnergy, entryCount}
    PredictionPoint{timestamp, predictedMood, predictedEnergy, confidence}
    EnergyDip      {timestamp, energy, time}

Timestamps are UTC epoch milliseconds.  Hour-of-day and day-of-week are
always derived against an explicit tzinfo, never the host's local time.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Any, Iterable, Mapping, Optional

from moodcast.errors import InvalidInput


MS_PER_HOUR = 3_600_000
MAX_TIMESTAMP_MS = 253_402_300_799_999   # 9999-12-31T23:59:59.999Z
DAY_NAMES   = ["Sunday", "Monday", "Tuesday", "Wednesday",
               "Thursday", "Friday", "Saturday"]


# ──────────────────────────────────────────────
# HELPERS
# ──────────────────────────────────────────────

def _as_int(value: Any, field: str) -> int:
    # bool is an int subclass; a True mood is a caller bug
    if isinstance(value, bool):
        raise InvalidInput(f"{field} must be an integer", field=field)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise InvalidInput(f"{field} must be an integer, got {value!r}", field=field)


def _as_level(value: Any, field: str, lo: int = 0, hi: int = 100) -> int:
    level = _as_int(value, field)
    if not lo <= level <= hi:
        raise InvalidInput(f"{field} must be within [{lo}, {hi}], got {level}", field=field)
    return level


def _require(data: Mapping, key: str, kind: str) -> Any:
    if key not in data:
        raise InvalidInput(f"{kind} is missing '{key}'", field=key)
    return data[key]


def to_datetime(ts_ms: int, tz: Optional[tzinfo] = None) -> datetime:
    try:
        return datetime.fromtimestamp(ts_ms / 1000, tz=tz or timezone.utc)
    except (ValueError, OverflowError, OSError):
        raise InvalidInput(f"timestamp {ts_ms} is outside the supported date range", field="timestamp")


def hour_of_day(ts_ms: int, tz: Optional[tzinfo] = None) -> int:
    return to_datetime(ts_ms, tz).hour


def day_of_week(ts_ms: int, tz: Optional[tzinfo] = None) -> int:
    """0 = Sunday … 6 = Saturday."""
    return (to_datetime(ts_ms, tz).weekday() + 1) % 7


# ──────────────────────────────────────────────
# DATA STRUCTURES
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class Sample:
    """One self-reported reading.  Owned by the storage layer; never mutated here."""
    id:        str
    timestamp: int
    mood:      int
    energy:    int
    notes:     Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping) -> "Sample":
        if not isinstance(data, Mapping):
            raise InvalidInput(f"sample must be an object, got {type(data).__name__}")
        notes = data.get("notes")
        return cls(
            id        = str(_require(data, "id", "sample")),
            timestamp = _as_level(_require(data, "timestamp", "sample"), "timestamp", 0, MAX_TIMESTAMP_MS),
            mood      = _as_level(_require(data, "mood", "sample"), "mood"),
            energy    = _as_level(_require(data, "energy", "sample"), "energy"),
            notes     = str(notes) if notes is not None else None,
        )

    def to_dict(self) -> dict:
        out = {
            "id":        self.id,
            "timestamp": self.timestamp,
            "mood":      self.mood,
            "energy":    self.energy,
        }
        if self.notes is not None:
            out["notes"] = self.notes
        return out


@dataclass(frozen=True)
class DailyPattern:
    hour:           int
    average_mood:   int
    average_energy: int
    entry_count:    int = 0

    @classmethod
    def from_dict(cls, data: Mapping) -> "DailyPattern":
        if not isinstance(data, Mapping):
            raise InvalidInput(f"daily pattern must be an object, got {type(data).__name__}")
        return cls(
            hour           = _as_level(_require(data, "hour", "daily pattern"), "hour", 0, 23),
            average_mood   = _as_level(_require(data, "averageMood", "daily pattern"), "averageMood"),
            average_energy = _as_level(_require(data, "averageEnergy", "daily pattern"), "averageEnergy"),
            entry_count    = _as_int(data.get("entryCount", 0), "entryCount"),
        )

    def to_dict(self) -> dict:
        return {
            "hour":          self.hour,
            "averageMood":   self.average_mood,
            "averageEnergy": self.average_energy,
            "entryCount":    self.entry_count,
        }


@dataclass(frozen=True)
class WeeklyPattern:
    day_of_week:    int       # 0 = Sunday
    average_mood:   int
    average_energy: int
    entry_count:    int = 0

    @property
    def day_name(self) -> str:
        return DAY_NAMES[self.day_of_week]

    @classmethod
    def from_dict(cls, data: Mapping) -> "WeeklyPattern":
        if not isinstance(data, Mapping):
            raise InvalidInput(f"weekly pattern must be an object, got {type(data).__name__}")
        return cls(
            day_of_week    = _as_level(_require(data, "dayOfWeek", "weekly pattern"), "dayOfWeek", 0, 6),
            average_mood   = _as_level(_require(data, "averageMood", "weekly pattern"), "averageMood"),
            average_energy = _as_level(_require(data, "averageEnergy", "weekly pattern"), "averageEnergy"),
            entry_count    = _as_int(data.get("entryCount", 0), "entryCount"),
        )

    def to_dict(self) -> dict:
        return {
            "dayOfWeek":     self.day_of_week,
            "averageMood":   self.average_mood,
            "averageEnergy": self.average_energy,
            "entryCount":    self.entry_count,
        }


@dataclass(frozen=True)
class PredictionPoint:
    timestamp:        int
    predicted_mood:   int      # clamped to [10, 90]
    predicted_energy: int      # clamped to [10, 90]
    confidence:       float    # [0, 1], 2 decimals

    def to_dict(self) -> dict:
        return {
            "timestamp":       self.timestamp,
            "predictedMood":   self.predicted_mood,
            "predictedEnergy": self.predicted_energy,
            "confidence":      self.confidence,
        }


@dataclass(frozen=True)
class EnergyDip:
    timestamp: int
    energy:    int
    time:      str             # "HH:MM", 24h

    def to_dict(self) -> dict:
        return {"timestamp": self.timestamp, "energy": self.energy, "time": self.time}


# ──────────────────────────────────────────────
# INPUT COERCION
# ──────────────────────────────────────────────

def coerce_samples(samples: Any) -> list[Sample]:
    """
    Validate a sample argument.  Accepts a list/tuple of Sample objects or
    wire-format dicts; anything else is InvalidInput.
    """
    if not isinstance(samples, (list, tuple)):
        raise InvalidInput(
            f"samples must be a list, got {type(samples).__name__}", field="samples"
        )
    out: list[Sample] = []
    for item in samples:
        if isinstance(item, Sample):
            out.append(item)
        else:
            out.append(Sample.from_dict(item))
    return out


def samples_in_range(samples: Iterable[Sample], start_ms: int, end_ms: int) -> list[Sample]:
    """Samples with start_ms <= timestamp <= end_ms, oldest first."""
    return sorted(
        (s for s in samples if start_ms <= s.timestamp <= end_ms),
        key=lambda s: s.timestamp,
    )
