"""Periodization and training-load analytics."""

from .periodization import (
    InvalidArgumentError,
    IntensityDistribution,
    PeriodizationPhase,
    PeriodizationPlan,
    PhaseConfig,
    TrainingFocus,
    WeeklyVolume,
    build_plan,
    current_week,
    intensity_distribution_for,
    is_periodization_phase,
    is_training_focus,
    phase_for_week,
    plan_phases,
    training_focus_for,
    volumes_for,
)
from .training_load import (
    ActivityRecord,
    FitnessDataPoint,
    FormTrend,
    TrendDirection,
    WeeklyLoadSummary,
    aggregate_weekly_load,
    analyze_trend,
)
from .readiness import (
    Confidence,
    FatigueLevel,
    FormStatus,
    RaceReadiness,
    RecoveryAssessment,
    assess_race_readiness,
    assess_recovery,
    classify_form,
)

__all__ = [
    "InvalidArgumentError",
    "IntensityDistribution",
    "PeriodizationPhase",
    "PeriodizationPlan",
    "PhaseConfig",
    "TrainingFocus",
    "WeeklyVolume",
    "build_plan",
    "current_week",
    "intensity_distribution_for",
    "is_periodization_phase",
    "is_training_focus",
    "phase_for_week",
    "plan_phases",
    "training_focus_for",
    "volumes_for",
    "ActivityRecord",
    "FitnessDataPoint",
    "FormTrend",
    "TrendDirection",
    "WeeklyLoadSummary",
    "aggregate_weekly_load",
    "analyze_trend",
    "Confidence",
    "FatigueLevel",
    "FormStatus",
    "RaceReadiness",
    "RecoveryAssessment",
    "assess_race_readiness",
    "assess_recovery",
    "classify_form",
]
