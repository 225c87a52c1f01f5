"""
Energy dip detection over a forecast.
"""
from __future__ import annotations

from datetime import timezone, tzinfo
from typing import Iterable, Optional

from moodcast.entries import EnergyDip, PredictionPoint, to_datetime

HIGH_CONFIDENCE       = 0.7
HIGH_CONFIDENCE_LIMIT = 30    # mostly user data: only flag clear dips
LOW_CONFIDENCE_LIMIT  = 35


def dip_threshold(confidence: float) -> int:
    return HIGH_CONFIDENCE_LIMIT if confidence > HIGH_CONFIDENCE else LOW_CONFIDENCE_LIMIT


def find_energy_dips(predictions: Iterable[PredictionPoint],
                     tz: Optional[tzinfo] = None) -> list[EnergyDip]:
    """Points whose predicted energy is at or under their confidence-adjusted threshold."""
    tz = tz or timezone.utc
    return [
        EnergyDip(
            timestamp=p.timestamp,
            energy=p.predicted_energy,
            time=to_datetime(p.timestamp, tz).strftime("%H:%M"),
        )
        for p in predictions
        if p.predicted_energy <= dip_threshold(p.confidence)
    ]
