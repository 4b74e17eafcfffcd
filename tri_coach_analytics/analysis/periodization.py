"""Training periodization and plan generation module."""

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from ..dates import DateLike, days_between, today

logger = logging.getLogger(__name__)

MIN_PLAN_WEEKS = 4
MAX_PLAN_WEEKS = 52
SHORT_PLAN_MAX_WEEKS = 8


class InvalidArgumentError(ValueError):
    """Raised when a plan length falls outside the supported range."""

    def __init__(self, value, message: Optional[str] = None):
        self.value = value
        super().__init__(
            message or f"Total weeks must be between {MIN_PLAN_WEEKS} and {MAX_PLAN_WEEKS}, got {value}"
        )


class PeriodizationPhase(Enum):
    """Training phases in a periodized plan."""

    BASE = "base"  # Aerobic base building
    BUILD = "build"  # Increasing intensity
    PEAK = "peak"  # Race preparation
    TAPER = "taper"  # Pre-competition taper
    RECOVERY = "recovery"  # Post-competition recovery


class TrainingFocus(Enum):
    """Primary training focus of a phase."""

    AEROBIC_ENDURANCE = "aerobic_endurance"
    THRESHOLD_WORK = "threshold_work"
    VO2MAX = "vo2max"
    RACE_SPECIFIC = "race_specific"
    RECOVERY = "recovery"
    STRENGTH = "strength"


class IntensityDistribution(NamedTuple):
    """Share of training time (percent) in low, moderate and high intensity."""

    low: int
    moderate: int
    high: int


@dataclass(frozen=True)
class PhaseConfig:
    """A single phase of a periodized plan."""

    phase: PeriodizationPhase
    weeks: int
    focus: TrainingFocus
    intensity_distribution: IntensityDistribution


@dataclass(frozen=True)
class WeeklyVolume:
    """Volume target for one plan week, relative to the athlete's normal week."""

    week: int
    volume_multiplier: float
    phase: PeriodizationPhase


@dataclass(frozen=True)
class PeriodizationPlan:
    """Complete periodization plan for a training cycle."""

    total_weeks: int
    phases: Tuple[PhaseConfig, ...]
    weekly_volumes: Tuple[WeeklyVolume, ...]


# Classic periodization models (Lydiard, Coggan, Friel).
# Every PeriodizationPhase member needs an entry; there is no fallback.
INTENSITY_DISTRIBUTIONS: Dict[PeriodizationPhase, IntensityDistribution] = {
    PeriodizationPhase.BASE: IntensityDistribution(80, 15, 5),
    PeriodizationPhase.BUILD: IntensityDistribution(70, 20, 10),
    PeriodizationPhase.PEAK: IntensityDistribution(60, 25, 15),
    PeriodizationPhase.TAPER: IntensityDistribution(90, 5, 5),
    PeriodizationPhase.RECOVERY: IntensityDistribution(95, 5, 0),
}

TRAINING_FOCUS: Dict[PeriodizationPhase, TrainingFocus] = {
    PeriodizationPhase.BASE: TrainingFocus.AEROBIC_ENDURANCE,
    PeriodizationPhase.BUILD: TrainingFocus.THRESHOLD_WORK,
    PeriodizationPhase.PEAK: TrainingFocus.RACE_SPECIFIC,
    PeriodizationPhase.TAPER: TrainingFocus.RECOVERY,
    PeriodizationPhase.RECOVERY: TrainingFocus.RECOVERY,
}

PHASE_BASE_MULTIPLIERS: Dict[PeriodizationPhase, float] = {
    PeriodizationPhase.BASE: 0.8,
    PeriodizationPhase.BUILD: 1.0,
    PeriodizationPhase.PEAK: 1.1,
    PeriodizationPhase.TAPER: 0.5,
    PeriodizationPhase.RECOVERY: 0.6,
}

# 3:1 loading cycle keyed by (week_in_phase % 4); position 0 is the recovery week
CYCLE_FACTORS: Dict[int, float] = {1: 0.85, 2: 0.95, 3: 1.05, 0: 0.70}

TAPER_DECAY = 0.4


def is_periodization_phase(value) -> bool:
    """True for a PeriodizationPhase member or one of its string values."""
    if isinstance(value, PeriodizationPhase):
        return True
    return isinstance(value, str) and value in {p.value for p in PeriodizationPhase}


def is_training_focus(value) -> bool:
    """True for a TrainingFocus member or one of its string values."""
    if isinstance(value, TrainingFocus):
        return True
    return isinstance(value, str) and value in {f.value for f in TrainingFocus}


def intensity_distribution_for(phase: PeriodizationPhase) -> IntensityDistribution:
    """Recommended low/moderate/high intensity split for a phase."""
    return INTENSITY_DISTRIBUTIONS[PeriodizationPhase(phase)]


def training_focus_for(phase: PeriodizationPhase) -> TrainingFocus:
    """Recommended training focus for a phase."""
    return TRAINING_FOCUS[PeriodizationPhase(phase)]


def _phase_config(phase: PeriodizationPhase, weeks: int) -> PhaseConfig:
    return PhaseConfig(
        phase=phase,
        weeks=weeks,
        focus=training_focus_for(phase),
        intensity_distribution=intensity_distribution_for(phase),
    )


def plan_phases(total_weeks: int) -> List[PhaseConfig]:
    """Calculate the phase breakdown for a training plan.

    Short plans (8 weeks or less) run Base -> Build -> Taper. Longer plans run
    Base -> Build -> Peak -> Taper, with the taper omitted when it rounds
    down to zero weeks.

    Args:
        total_weeks: Total plan duration, 4 to 52 weeks

    Returns:
        Ordered list of phase configurations whose weeks sum to total_weeks

    Raises:
        InvalidArgumentError: if total_weeks is not an integer in [4, 52]
    """
    if isinstance(total_weeks, bool) or not isinstance(total_weeks, int):
        raise InvalidArgumentError(total_weeks, f"Total weeks must be an integer, got {total_weeks!r}")
    if total_weeks < MIN_PLAN_WEEKS or total_weeks > MAX_PLAN_WEEKS:
        raise InvalidArgumentError(total_weeks)

    if total_weeks <= SHORT_PLAN_MAX_WEEKS:
        base_weeks = max(2, int(total_weeks * 0.4))
        taper_weeks = min(2, int(total_weeks * 0.2))
        build_weeks = total_weeks - base_weeks - taper_weeks
        layout = [
            (PeriodizationPhase.BASE, base_weeks),
            (PeriodizationPhase.BUILD, build_weeks),
            (PeriodizationPhase.TAPER, taper_weeks),
        ]
    else:
        base_weeks = max(3, int(total_weeks * 0.35))
        taper_weeks = min(2, int(total_weeks * 0.15))
        peak_weeks = max(2, int(total_weeks * 0.15))
        build_weeks = total_weeks - base_weeks - peak_weeks - taper_weeks
        layout = [
            (PeriodizationPhase.BASE, base_weeks),
            (PeriodizationPhase.BUILD, build_weeks),
            (PeriodizationPhase.PEAK, peak_weeks),
            (PeriodizationPhase.TAPER, taper_weeks),
        ]

    phases = [_phase_config(phase, weeks) for phase, weeks in layout if weeks > 0]
    logger.debug(
        "Planned %d weeks as %s",
        total_weeks,
        ", ".join(f"{p.phase.value}={p.weeks}" for p in phases),
    )
    return phases


def round_multiplier(value: float) -> float:
    """Round to 2 decimals, half-up on the float's exact binary value."""
    return float(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _phase_volumes(phase: PhaseConfig, start_week: int) -> List[WeeklyVolume]:
    """Weekly volumes for one phase: 3:1 cycling, or linear decay for a taper."""
    base_multiplier = PHASE_BASE_MULTIPLIERS[phase.phase]
    volumes = []

    for i in range(phase.weeks):
        if phase.phase == PeriodizationPhase.TAPER:
            multiplier = base_multiplier * (1 - TAPER_DECAY * (i / phase.weeks))
        else:
            multiplier = base_multiplier * CYCLE_FACTORS[(i + 1) % 4]

        volumes.append(WeeklyVolume(
            week=start_week + i,
            volume_multiplier=round_multiplier(multiplier),
            phase=phase.phase,
        ))

    return volumes


def volumes_for(phases: Sequence[PhaseConfig]) -> List[WeeklyVolume]:
    """Weekly volume progression across all phases, numbered from week 1."""
    volumes: List[WeeklyVolume] = []
    current_week = 1

    for phase in phases:
        volumes.extend(_phase_volumes(phase, current_week))
        current_week += phase.weeks

    return volumes


def build_plan(total_weeks: int) -> PeriodizationPlan:
    """Generate a complete periodization plan for a training cycle."""
    phases = plan_phases(total_weeks)
    weekly_volumes = volumes_for(phases)

    return PeriodizationPlan(
        total_weeks=total_weeks,
        phases=tuple(phases),
        weekly_volumes=tuple(weekly_volumes),
    )


def phase_for_week(plan: PeriodizationPlan, week: int) -> Optional[PhaseConfig]:
    """Phase containing the given 1-based plan week, or None outside the plan."""
    end_week = 0
    for phase in plan.phases:
        start_week = end_week + 1
        end_week += phase.weeks
        if start_week <= week <= end_week:
            return phase
    return None


def current_week(plan_start: DateLike, on: Optional[DateLike] = None) -> Optional[int]:
    """1-based plan week for a date; the start date itself is week 1.

    Returns None for dates before the plan starts.
    """
    elapsed = days_between(plan_start, on if on is not None else today())
    if elapsed < 0:
        return None
    return elapsed // 7 + 1
