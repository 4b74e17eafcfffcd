"""Recovery state and race readiness from CTL/ATL/TSB history."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from ..dates import DateLike, days_between, today as local_today
from .training_load import FitnessDataPoint, analyze_trend

MIN_HISTORY_POINTS = 7
HIGH_CONFIDENCE_HISTORY_POINTS = 14
OVERREACHING_RAMP_RATE = 7.0


class FormStatus(Enum):
    """Form categories derived from TSB."""

    RACE_READY = "race_ready"
    FRESH = "fresh"
    OPTIMAL = "optimal"
    TIRED = "tired"
    OVERTRAINED = "overtrained"


class FatigueLevel(Enum):
    """Acute fatigue bands derived from ATL."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very_high"


class Confidence(Enum):
    """Confidence tier of a race-day projection."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class RecoveryAssessment:
    """Current fatigue and recovery needs."""

    fatigue_level: FatigueLevel
    suggested_recovery_days: int
    ramp_rate: float  # CTL change over the last 7 points
    is_overreaching: bool


@dataclass(frozen=True)
class RaceReadiness:
    """Projected race-day form and advice."""

    days_until_race: int
    current_form: FormStatus
    projected_tsb: float
    recommendation: str
    confidence: Confidence


# (ATL above this, level, suggested rest days), checked in order
FATIGUE_BANDS = (
    (90, FatigueLevel.VERY_HIGH, 3),
    (70, FatigueLevel.HIGH, 2),
    (40, FatigueLevel.MODERATE, 1),
)

# (days until race at most, advice), checked in order
RACE_RECOMMENDATIONS = (
    (2, "Race week - rest and stay fresh."),
    (14, "Taper phase - reduce volume, maintain intensity."),
    (28, "Final build - key workouts then begin taper."),
)
DEFAULT_RACE_RECOMMENDATION = "Continue building fitness with progressive overload."


def classify_form(tsb: float) -> FormStatus:
    """Categorize TSB into a form status."""
    if tsb > 15:
        return FormStatus.RACE_READY
    if tsb > 5:
        return FormStatus.FRESH
    if tsb >= -10:
        return FormStatus.OPTIMAL
    if tsb >= -25:
        return FormStatus.TIRED
    return FormStatus.OVERTRAINED


def assess_recovery(points: Sequence[FitnessDataPoint]) -> Optional[RecoveryAssessment]:
    """Assess current recovery state from daily fitness points.

    The ramp rate compares the latest CTL with the point seven entries back,
    so one point per day is expected.

    Returns:
        RecoveryAssessment, or None with fewer than 7 points
    """
    if len(points) < MIN_HISTORY_POINTS:
        return None

    latest = points[-1]
    ramp_rate = latest.ctl - points[-MIN_HISTORY_POINTS].ctl

    fatigue_level, recovery_days = FatigueLevel.LOW, 0
    for threshold, level, days in FATIGUE_BANDS:
        if latest.atl > threshold:
            fatigue_level, recovery_days = level, days
            break

    return RecoveryAssessment(
        fatigue_level=fatigue_level,
        suggested_recovery_days=recovery_days,
        ramp_rate=ramp_rate,
        is_overreaching=ramp_rate > OVERREACHING_RAMP_RATE,
    )


def _race_recommendation(days_until_race: int) -> str:
    for max_days, advice in RACE_RECOMMENDATIONS:
        if days_until_race <= max_days:
            return advice
    return DEFAULT_RACE_RECOMMENDATION


def assess_race_readiness(
    points: Sequence[FitnessDataPoint],
    race_date: DateLike,
    today: Optional[DateLike] = None,
) -> Optional[RaceReadiness]:
    """Project race-day form and assess readiness.

    Race-day TSB is extrapolated from the average daily TSB change over the
    last 7 points.

    Args:
        points: Daily fitness points in ascending date order
        race_date: Race date
        today: Reference date, defaults to the current local date

    Returns:
        RaceReadiness, or None with fewer than 7 points or a race in the past
    """
    if len(points) < MIN_HISTORY_POINTS:
        return None

    current_date = today if today is not None else local_today()
    days_until_race = days_between(current_date, race_date)
    if days_until_race < 0:
        return None

    latest = points[-1]
    trend = analyze_trend(points[-MIN_HISTORY_POINTS:])
    daily_tsb_change = trend.tsb_change / MIN_HISTORY_POINTS if trend is not None else 0.0

    if days_until_race <= 7 and len(points) >= HIGH_CONFIDENCE_HISTORY_POINTS:
        confidence = Confidence.HIGH
    elif days_until_race <= 21:
        confidence = Confidence.MEDIUM
    else:
        confidence = Confidence.LOW

    return RaceReadiness(
        days_until_race=days_until_race,
        current_form=classify_form(latest.tsb),
        projected_tsb=latest.tsb + daily_tsb_change * days_until_race,
        recommendation=_race_recommendation(days_until_race),
        confidence=confidence,
    )
