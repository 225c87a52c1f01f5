"""
Moodcast — FastAPI Backend
All pattern/forecast logic lives in moodcast/. This layer only validates
requests, picks the timezone/seed, and serializes results.
"""

import time
import statistics

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


from moodcast import __version__, config
from moodcast.api_models import (
    DipsResponse, ErrorResponse, ForecastRequest, ForecastResponse, HealthCheckResponse,
    InsightsRequest, InsightsResponse, PatternsRequest, PatternsResponse,
)
from moodcast.dip_finder import find_energy_dips
from moodcast.entries import DailyPattern, WeeklyPattern, coerce_samples
from moodcast.errors import InvalidRange, MoodcastError
from moodcast.forecaster import Forecaster
from moodcast.insights import build_insights, format_forecast_block
from moodcast.pattern_analyzer import PatternAnalyzer
from moodcast.structured_logging import logger, setup_json_logging

app = FastAPI(title="Moodcast", version=__version__)

_ERRORS = {422: {"model": ErrorResponse}}


@app.on_event("startup")
async def startup():
    setup_json_logging(config.LOG_FILE, config.LOG_LEVEL)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.log_request(request.method, request.url.path)
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    error = f"HTTP {response.status_code}" if response.status_code >= 400 else None
    logger.log_response(response.status_code, elapsed_ms, error=error)
    logger.clear_context()
    return response


@app.exception_handler(MoodcastError)
async def moodcast_error_handler(request: Request, exc: MoodcastError) -> JSONResponse:
    return exc.to_response()


# ── helpers ───────────────────────────────────────────────────────────────────

def _analyzer() -> PatternAnalyzer:
    return PatternAnalyzer(tz=config.TIMEZONE)


def _forecaster(seed) -> Forecaster:
    return Forecaster(tz=config.TIMEZONE, seed=seed if seed is not None else config.NOISE_SEED)


def _horizon(requested) -> int:
    hours = config.HOURS_AHEAD if requested is None else requested
    if hours > config.MAX_HOURS_AHEAD:
        raise InvalidRange(hours, config.MAX_HOURS_AHEAD)
    return hours


def _run_forecast(req: ForecastRequest):
    """→ (samples, daily, weekly, predictions, dips).  Omitted patterns are recomputed."""
    samples = coerce_samples([s.model_dump() for s in req.samples])
    hours = _horizon(req.hours_ahead)

    analyzer = _analyzer()
    if req.daily_patterns is not None:
        daily = [DailyPattern.from_dict(p.model_dump(by_alias=True)) for p in req.daily_patterns]
    else:
        daily = analyzer.analyze_daily(samples)
    if req.weekly_patterns is not None:
        weekly = [WeeklyPattern.from_dict(p.model_dump(by_alias=True)) for p in req.weekly_patterns]
    else:
        weekly = analyzer.analyze_weekly(samples)

    start = time.perf_counter()
    predictions = _forecaster(req.seed).predict(samples, daily, weekly, hours, now_ms=req.now)
    dips = find_energy_dips(predictions, tz=config.TIMEZONE)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.log_forecast(
        sample_count=len(samples),
        hours_ahead=hours,
        mean_confidence=statistics.mean(p.confidence for p in predictions),
        dip_count=len(dips),
        elapsed_ms=elapsed_ms,
    )
    return samples, daily, weekly, predictions, dips


# ══════════════════════════════════════════════
# HEALTH
# ══════════════════════════════════════════════

@app.get("/health", response_model=HealthCheckResponse)
async def health():
    return {
        "success": True,
        "status": "healthy",
        "version": __version__,
        "timezone": config.TIMEZONE_NAME,
    }


# ══════════════════════════════════════════════
# PATTERNS + FORECAST
# ══════════════════════════════════════════════

@app.post("/api/patterns", response_model=PatternsResponse)
async def analyze_patterns(req: PatternsRequest):
    samples = coerce_samples([s.model_dump() for s in req.samples])
    start = time.perf_counter()
    summary = _analyzer().analyze(samples)
    logger.log_pattern_analysis(
        sample_count=len(samples),
        hours_with_data=sum(1 for p in summary.daily if p.entry_count),
        days_with_data=sum(1 for p in summary.weekly if p.entry_count),
        elapsed_ms=(time.perf_counter() - start) * 1000,
    )
    return {"success": True, **summary.to_dict()}


@app.post("/api/forecast", response_model=ForecastResponse, responses=_ERRORS)
async def forecast(req: ForecastRequest):
    _, _, _, predictions, _ = _run_forecast(req)
    return {
        "success": True,
        "hoursAhead": len(predictions),
        "predictions": [p.to_dict() for p in predictions],
    }


@app.post("/api/forecast/dips", response_model=DipsResponse, responses=_ERRORS)
async def forecast_dips(req: ForecastRequest):
    _, _, _, predictions, dips = _run_forecast(req)
    return {
        "success": True,
        "hoursAhead": len(predictions),
        "predictions": [p.to_dict() for p in predictions],
        "dips": [d.to_dict() for d in dips],
    }


# ══════════════════════════════════════════════
# INSIGHTS
# ══════════════════════════════════════════════

@app.post("/api/insights", response_model=InsightsResponse, responses=_ERRORS)
async def insights(req: InsightsRequest):
    samples, daily, weekly, predictions, dips = _run_forecast(req)
    report = build_insights(
        samples, daily, weekly, predictions, dips,
        timeframe=req.timeframe,
        now_ms=req.now,
        tz=config.TIMEZONE,
    )
    return {
        "success": True,
        "insights": report.to_dict(),
        "predictions": [p.to_dict() for p in predictions],
        "context": format_forecast_block(report, predictions, tz=config.TIMEZONE),
    }
