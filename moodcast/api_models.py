"""
Request and response models for the Moodcast API with validation.
Wire names are camelCase, matching the journal's stored JSON.
"""

from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List

from moodcast.entries import MAX_TIMESTAMP_MS


# ══════════════════════════════════════════════
# SHARED ENTITIES
# ══════════════════════════════════════════════

class SampleModel(BaseModel):
    """One journal reading."""
    id: str = Field(..., min_length=1, max_length=128)
    timestamp: int = Field(..., ge=0, le=MAX_TIMESTAMP_MS)
    mood: int = Field(..., ge=0, le=100)
    energy: int = Field(..., ge=0, le=100)
    notes: Optional[str] = Field(None, max_length=2000)

    class Config:
        json_schema_extra = {
            "example": {"id": "e-1", "timestamp": 1760860800000, "mood": 62, "energy": 48},
        }


class DailyPatternModel(BaseModel):
    hour: int = Field(..., ge=0, le=23)
    average_mood: int = Field(..., ge=0, le=100, alias="averageMood")
    average_energy: int = Field(..., ge=0, le=100, alias="averageEnergy")
    entry_count: int = Field(0, ge=0, alias="entryCount")

    class Config:
        populate_by_name = True


class WeeklyPatternModel(BaseModel):
    day_of_week: int = Field(..., ge=0, le=6, alias="dayOfWeek")
    average_mood: int = Field(..., ge=0, le=100, alias="averageMood")
    average_energy: int = Field(..., ge=0, le=100, alias="averageEnergy")
    entry_count: int = Field(0, ge=0, alias="entryCount")

    class Config:
        populate_by_name = True


class PredictionModel(BaseModel):
    timestamp: int
    predicted_mood: int = Field(..., alias="predictedMood")
    predicted_energy: int = Field(..., alias="predictedEnergy")
    confidence: float

    class Config:
        populate_by_name = True


class EnergyDipModel(BaseModel):
    timestamp: int
    energy: int
    time: str


# ══════════════════════════════════════════════
# REQUEST MODELS
# ══════════════════════════════════════════════

class PatternsRequest(BaseModel):
    """Pattern analysis request."""
    samples: List[SampleModel] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "samples": [
                    {"id": "e-1", "timestamp": 1760860800000, "mood": 62, "energy": 48},
                    {"id": "e-2", "timestamp": 1760871600000, "mood": 70, "energy": 66},
                ],
            },
        }


class ForecastRequest(BaseModel):
    """Forecast request.  Omitted patterns are regenerated from the samples."""
    samples: List[SampleModel] = Field(default_factory=list)
    hours_ahead: Optional[int] = Field(None, alias="hoursAhead")
    daily_patterns: Optional[List[DailyPatternModel]] = Field(None, alias="dailyPatterns")
    weekly_patterns: Optional[List[WeeklyPatternModel]] = Field(None, alias="weeklyPatterns")
    seed: Optional[int] = Field(None, ge=0)
    now: Optional[int] = Field(None, ge=0, le=MAX_TIMESTAMP_MS, description="Reference time, epoch ms")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "samples": [
                    {"id": "e-1", "timestamp": 1760860800000, "mood": 62, "energy": 48},
                ],
                "hoursAhead": 12,
                "seed": 7,
            },
        }


class InsightsRequest(ForecastRequest):
    """Insights request."""
    timeframe: str = Field("all", pattern="^(day|week|month|all)$")


# ══════════════════════════════════════════════
# RESPONSE MODELS
# ══════════════════════════════════════════════

class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    error_code: str
    details: Optional[Dict[str, Any]] = None

    class Config:
        json_schema_extra = {
            "example": {
                "success": False,
                "error": "hours_ahead must be a positive integer, got 0",
                "error_code": "INVALID_RANGE",
                "details": {"hours_ahead": 0},
            },
        }


class PatternsResponse(BaseModel):
    success: bool = True
    daily: List[DailyPatternModel]
    weekly: List[WeeklyPatternModel]


class ForecastResponse(BaseModel):
    success: bool = True
    hours_ahead: int = Field(..., alias="hoursAhead")
    predictions: List[PredictionModel]

    class Config:
        populate_by_name = True


class DipsResponse(ForecastResponse):
    dips: List[EnergyDipModel]


class InsightsResponse(BaseModel):
    success: bool = True
    insights: Dict[str, Any]
    predictions: List[PredictionModel]
    context: str


class HealthCheckResponse(BaseModel):
    """Health check response."""
    success: bool = True
    status: str = "healthy"
    version: str
    timezone: str
