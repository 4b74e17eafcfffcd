"""Fitness/fatigue/form trends and weekly training load aggregation."""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from ..dates import to_date, week_start

logger = logging.getLogger(__name__)

# TSB change over the window needed to call a trend improving or declining
TREND_THRESHOLD = 3.0


class TrendDirection(Enum):
    """Direction of form (TSB) over a window."""

    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


@dataclass(frozen=True)
class FitnessDataPoint:
    """Daily CTL/ATL/TSB snapshot."""

    date: date
    ctl: float  # Chronic Training Load (fitness)
    atl: float  # Acute Training Load (fatigue)
    tsb: float  # Training Stress Balance (form) = ctl - atl

    def __post_init__(self):
        object.__setattr__(self, "date", to_date(self.date))


@dataclass(frozen=True)
class ActivityRecord:
    """A completed workout with its training stress."""

    date: date
    duration: float  # minutes
    tss: float
    type: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "date", to_date(self.date))


@dataclass(frozen=True)
class FormTrend:
    """Form direction and load deltas over an analyzed window."""

    direction: TrendDirection
    tsb_change: float
    ctl_change: float
    atl_change: float
    current_tsb: float
    average_tsb: float


@dataclass(frozen=True)
class WeeklyLoadSummary:
    """Training load totals for one ISO week."""

    week_start: date  # Monday
    total_tss: float
    activity_count: int
    average_tss_per_activity: float
    total_duration: float  # minutes


def analyze_trend(points: Sequence[FitnessDataPoint]) -> Optional[FormTrend]:
    """Analyze form direction over a window of fitness data points.

    Deltas are last minus first over exactly the points given, so the caller
    picks the window by slicing (e.g. ``points[-7:]``). Points must be in
    ascending date order.

    Returns:
        FormTrend, or None when fewer than two points are supplied
    """
    if len(points) < 2:
        return None

    first = points[0]
    last = points[-1]

    tsb_change = last.tsb - first.tsb

    if tsb_change > TREND_THRESHOLD:
        direction = TrendDirection.IMPROVING
    elif tsb_change < -TREND_THRESHOLD:
        direction = TrendDirection.DECLINING
    else:
        direction = TrendDirection.STABLE

    return FormTrend(
        direction=direction,
        tsb_change=tsb_change,
        ctl_change=last.ctl - first.ctl,
        atl_change=last.atl - first.atl,
        current_tsb=last.tsb,
        average_tsb=float(np.mean([p.tsb for p in points])),
    )


def aggregate_weekly_load(activities: Sequence[ActivityRecord]) -> List[WeeklyLoadSummary]:
    """Group activities by ISO week (Monday start) and total each week.

    Weeks without activities are left out rather than zero-filled.

    Returns:
        Weekly summaries sorted by week start
    """
    if not activities:
        return []

    df = pd.DataFrame({
        "week_start": [week_start(a.date) for a in activities],
        "tss": [a.tss for a in activities],
        "duration": [a.duration for a in activities],
    })

    weekly = df.groupby("week_start", sort=True).agg(
        total_tss=("tss", "sum"),
        total_duration=("duration", "sum"),
        activity_count=("tss", "size"),
    )

    summaries = []
    for row in weekly.itertuples():
        activity_count = int(row.activity_count)
        total_tss = float(row.total_tss)
        summaries.append(WeeklyLoadSummary(
            week_start=row.Index,
            total_tss=total_tss,
            activity_count=activity_count,
            average_tss_per_activity=total_tss / activity_count if activity_count > 0 else 0.0,
            total_duration=float(row.total_duration),
        ))

    logger.debug("Aggregated %d activities into %d weeks", len(activities), len(summaries))
    return summaries
