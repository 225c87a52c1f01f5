"""Forecaster tests: horizon, bounds, confidence, trend, fallbacks."""

import sys
import os
_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _ROOT)

import random
from datetime import datetime, timezone
from types import MappingProxyType

import pytest

from moodcast.baselines import DEFAULT_BASELINES
from moodcast.entries import MS_PER_HOUR, DailyPattern, Sample, WeeklyPattern
from moodcast.errors import InvalidInput, InvalidRange
from moodcast.forecaster import Forecaster, calculate_trend, noise_scale, trend_weight
from moodcast.pattern_analyzer import PatternAnalyzer


# Monday 2024-01-08 08:00 UTC; first forecast step lands on Monday 09:00
NOW = int(datetime(2024, 1, 8, 8, tzinfo=timezone.utc).timestamp() * 1000)


class MidpointRandom:
    """Noise source that always returns 0.5, i.e. zero noise."""

    def random(self):
        return 0.5


class FixedRandom:
    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


@pytest.fixture
def forecaster():
    return Forecaster(rng=MidpointRandom(), clock=lambda: NOW)


@pytest.fixture
def baseline_patterns():
    return list(DEFAULT_BASELINES.daily), list(DEFAULT_BASELINES.weekly)


def make_samples(moods, energies=None):
    energies = energies or moods
    return [
        Sample(id=f"s-{i}", timestamp=NOW - (len(moods) - i) * MS_PER_HOUR, mood=m, energy=e)
        for i, (m, e) in enumerate(zip(moods, energies))
    ]


def with_counts(hour_count=0, day_count=0):
    daily = [DailyPattern(p.hour, p.average_mood, p.average_energy, hour_count if p.hour == 9 else 0)
             for p in DEFAULT_BASELINES.daily]
    weekly = [WeeklyPattern(p.day_of_week, p.average_mood, p.average_energy,
                            day_count if p.day_of_week == 1 else 0)
              for p in DEFAULT_BASELINES.weekly]
    return daily, weekly


# ============================================================================
# SHAPE
# ============================================================================

@pytest.mark.parametrize("hours", [1, 12, 48, 168])
def test_hourly_timestamps(forecaster, hours):
    """N points, strictly increasing, one hour apart, starting at now + 1h."""
    points = forecaster.predict([], None, None, hours)

    assert len(points) == hours
    assert points[0].timestamp == NOW + MS_PER_HOUR
    for prev, cur in zip(points, points[1:]):
        assert cur.timestamp - prev.timestamp == MS_PER_HOUR


def test_now_override(forecaster):
    points = forecaster.predict([], None, None, 2, now_ms=0)
    assert [p.timestamp for p in points] == [MS_PER_HOUR, 2 * MS_PER_HOUR]


# ============================================================================
# BASELINE SCENARIO
# ============================================================================

def test_empty_history_single_step(forecaster, baseline_patterns):
    """
    Monday 09:00: hour 60/60, Monday 50/65 → base 55/62.5,
    circadian +2.12 mood / +3.86 energy, no noise, no trend.
    """
    daily, weekly = baseline_patterns
    [point] = forecaster.predict([], daily, weekly, 1)

    assert point.predicted_mood == 57
    assert point.predicted_energy == 66
    assert point.confidence == 0.6


def test_missing_entries_fall_back_to_baselines(forecaster, baseline_patterns):
    """Empty or partial pattern lists degrade to the baseline tables."""
    daily, weekly = baseline_patterns
    expected = forecaster.predict([], daily, weekly, 24)

    assert forecaster.predict([], [], [], 24) == expected
    partial = [p for p in daily if p.hour != 9]
    assert forecaster.predict([], partial, weekly[:3], 24) == expected


def test_patterns_regenerated_when_omitted(forecaster):
    samples = make_samples([80, 20, 75, 30, 90])
    analyzer = PatternAnalyzer()
    explicit = forecaster.predict(samples, analyzer.analyze_daily(samples),
                                  analyzer.analyze_weekly(samples), 6)
    assert forecaster.predict(samples, None, None, 6) == explicit


def test_wire_dict_patterns_accepted(forecaster, baseline_patterns):
    daily, weekly = baseline_patterns
    expected = forecaster.predict([], daily, weekly, 3)
    assert forecaster.predict([], [p.to_dict() for p in daily], [p.to_dict() for p in weekly], 3) == expected


def test_read_only_mapping_patterns_accepted(forecaster, baseline_patterns):
    """Any Mapping is read like a wire dict, not only dict itself."""
    daily, weekly = baseline_patterns
    expected = forecaster.predict([], daily, weekly, 3)
    frozen_daily = [MappingProxyType(p.to_dict()) for p in daily]
    frozen_weekly = [MappingProxyType(p.to_dict()) for p in weekly]
    assert forecaster.predict([], frozen_daily, frozen_weekly, 3) == expected


# ============================================================================
# CONFIDENCE
# ============================================================================

@pytest.mark.parametrize("hour_count,day_count,expected", [
    (0, 0, 0.6),
    (5, 0, 0.6),     # (0.5 + 0) / 2 below the floor
    (10, 6, 0.7),    # (1 + 0.4) / 2
    (10, 15, 1.0),
    (40, 90, 1.0),
])
def test_confidence_from_entry_counts(forecaster, hour_count, day_count, expected):
    daily, weekly = with_counts(hour_count, day_count)
    [point] = forecaster.predict([], daily, weekly, 1)
    assert point.confidence == expected


# ============================================================================
# TREND
# ============================================================================

def test_calculate_trend():
    assert calculate_trend([]) == 0
    assert calculate_trend([50]) == 0
    assert calculate_trend([40, 50, 60]) == 0        # no earlier window
    assert calculate_trend([10, 10, 10, 40, 40, 40]) == 30
    assert calculate_trend([0, 0, 10, 20, 30]) == 20


def test_trend_weight_decays_to_floor():
    assert trend_weight(1) == pytest.approx(0.37)
    assert trend_weight(5) == pytest.approx(0.25)
    assert trend_weight(10) == pytest.approx(0.1)
    assert trend_weight(100) == 0.1


def test_noise_scale_shrinks_to_floor():
    assert noise_scale(1) == pytest.approx(0.95)
    assert noise_scale(16) == 0.2
    assert noise_scale(200) == 0.2


def test_rising_trend_applied(forecaster, baseline_patterns):
    """+30 momentum at weight 0.37 adds 11.1 to both levels, confidence +0.1."""
    daily, weekly = baseline_patterns
    samples = make_samples([40, 40, 40, 70, 70, 70])
    [point] = forecaster.predict(samples, daily, weekly, 1)

    assert point.predicted_mood == 68
    assert point.predicted_energy == 77
    assert point.confidence == 0.7


def test_three_samples_bump_confidence_only(forecaster, baseline_patterns):
    daily, weekly = baseline_patterns
    [point] = forecaster.predict(make_samples([10, 90, 50]), daily, weekly, 1)

    assert point.predicted_mood == 57
    assert point.predicted_energy == 66
    assert point.confidence == 0.7


def test_two_samples_no_trend(forecaster, baseline_patterns):
    daily, weekly = baseline_patterns
    [point] = forecaster.predict(make_samples([10, 90]), daily, weekly, 1)
    assert point.confidence == 0.6


def test_trend_uses_recency_not_input_order(forecaster, baseline_patterns):
    daily, weekly = baseline_patterns
    samples = make_samples([30, 35, 40, 60, 65, 70, 72, 74, 80, 85, 88, 90])
    shuffled = samples[:]
    random.Random(3).shuffle(shuffled)

    assert forecaster.predict(shuffled, daily, weekly, 8) == forecaster.predict(samples, daily, weekly, 8)


# ============================================================================
# BOUNDS + NOISE
# ============================================================================

def test_clamped_to_range(forecaster):
    high_d = [DailyPattern(h, 100, 100, 0) for h in range(24)]
    high_w = [WeeklyPattern(d, 100, 100, 0) for d in range(7)]
    low_d = [DailyPattern(h, 0, 0, 0) for h in range(24)]
    low_w = [WeeklyPattern(d, 0, 0, 0) for d in range(7)]

    assert all(p.predicted_mood == 90 and p.predicted_energy == 90
               for p in forecaster.predict([], high_d, high_w, 24))
    assert all(p.predicted_mood == 10 and p.predicted_energy == 10
               for p in forecaster.predict([], low_d, low_w, 24))


@pytest.mark.parametrize("seed", range(10))
def test_bounds_hold_for_volatile_history(seed):
    """Levels stay within [10, 90] and confidence within [0, 1]."""
    rnd = random.Random(seed)
    moods = [rnd.choice([0, 100]) for _ in range(30)]
    energies = [rnd.randint(0, 100) for _ in range(30)]
    forecaster = Forecaster(seed=seed, clock=lambda: NOW)

    for p in forecaster.predict(make_samples(moods, energies), None, None, 72):
        assert 10 <= p.predicted_mood <= 90
        assert 10 <= p.predicted_energy <= 90
        assert 0.0 <= p.confidence <= 1.0
        assert p.confidence == round(p.confidence, 2)


def test_seeded_forecasts_reproducible():
    samples = make_samples([55, 60, 58, 62, 70, 66, 64])
    a = Forecaster(seed=42, clock=lambda: NOW).predict(samples, None, None, 24)
    b = Forecaster(seed=42, clock=lambda: NOW).predict(samples, None, None, 24)
    assert a == b


def test_noise_amplitude_bounded(forecaster):
    """Extreme noise draws move each level by at most ±2 (mood) / ±2.5 (energy) before rounding."""
    neutral = forecaster.predict([], None, None, 24)
    for draw in (0.0, 0.999999):
        noisy = Forecaster(rng=FixedRandom(draw), clock=lambda: NOW).predict([], None, None, 24)
        for n, q in zip(neutral, noisy):
            assert abs(n.predicted_mood - q.predicted_mood) <= 3
            assert abs(n.predicted_energy - q.predicted_energy) <= 3


def test_low_draw_lowers_first_step():
    [low] = Forecaster(rng=FixedRandom(0.0), clock=lambda: NOW).predict([], None, None, 1)
    [mid] = Forecaster(rng=MidpointRandom(), clock=lambda: NOW).predict([], None, None, 1)
    # mood 57.12 - 1.9 → 55, energy 66.36 - 2.375 → 64
    assert (low.predicted_mood, low.predicted_energy) == (55, 64)
    assert (mid.predicted_mood, mid.predicted_energy) == (57, 66)


# ============================================================================
# ERRORS
# ============================================================================

@pytest.mark.parametrize("hours", [0, -1, 1.5, True, "12", None])
def test_invalid_horizon(forecaster, hours):
    with pytest.raises(InvalidRange):
        forecaster.predict([], None, None, hours)


@pytest.mark.parametrize("daily,weekly", [
    ("daily", None),
    (None, {"dayOfWeek": 1}),
    ([42], None),
    (None, [DailyPattern(9, 50, 50, 0)]),
    ([{"hour": 30, "averageMood": 50, "averageEnergy": 50}], None),
])
def test_malformed_patterns(forecaster, daily, weekly):
    with pytest.raises(InvalidInput):
        forecaster.predict([], daily, weekly, 3)


def test_malformed_samples(forecaster):
    with pytest.raises(InvalidInput):
        forecaster.predict("samples", None, None, 3)
