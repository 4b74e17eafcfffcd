"""Tests for recovery and race readiness assessment."""

import pytest
from datetime import date, timedelta

from tri_coach_analytics.analysis.readiness import (
    Confidence,
    FatigueLevel,
    FormStatus,
    assess_race_readiness,
    assess_recovery,
    classify_form,
)
from tri_coach_analytics.analysis.training_load import FitnessDataPoint

TODAY = date(2025, 6, 1)


def generate_points(count, ctl=50.0, atl=50.0, tsb=0.0, end=TODAY):
    """Consecutive daily points ending on ``end``."""
    start = end - timedelta(days=count - 1)
    return [
        FitnessDataPoint(date=start + timedelta(days=i), ctl=ctl, atl=atl, tsb=tsb)
        for i in range(count)
    ]


class TestClassifyForm:
    """Test TSB form categories."""

    @pytest.mark.parametrize("tsb, expected", [
        (20, FormStatus.RACE_READY),
        (10, FormStatus.FRESH),
        (0, FormStatus.OPTIMAL),
        (-15, FormStatus.TIRED),
        (-30, FormStatus.OVERTRAINED),
    ])
    def test_bands(self, tsb, expected):
        assert classify_form(tsb) == expected

    @pytest.mark.parametrize("tsb, expected", [
        (15, FormStatus.FRESH),
        (5, FormStatus.OPTIMAL),
        (-10, FormStatus.OPTIMAL),
        (-25, FormStatus.TIRED),
    ])
    def test_boundaries(self, tsb, expected):
        assert classify_form(tsb) == expected


class TestAssessRecovery:
    """Test fatigue classification and ramp rate."""

    def test_insufficient_data(self):
        assert assess_recovery([]) is None
        assert assess_recovery(generate_points(6)) is None

    def test_very_high_fatigue(self):
        assessment = assess_recovery(generate_points(7, atl=95))
        assert assessment.fatigue_level == FatigueLevel.VERY_HIGH
        assert assessment.suggested_recovery_days == 3

    @pytest.mark.parametrize("atl, level, days", [
        (90, FatigueLevel.HIGH, 2),
        (71, FatigueLevel.HIGH, 2),
        (70, FatigueLevel.MODERATE, 1),
        (41, FatigueLevel.MODERATE, 1),
        (40, FatigueLevel.LOW, 0),
        (0, FatigueLevel.LOW, 0),
    ])
    def test_fatigue_bands(self, atl, level, days):
        """Band boundaries belong to the lower band."""
        assessment = assess_recovery(generate_points(7, atl=atl))
        assert assessment.fatigue_level == level
        assert assessment.suggested_recovery_days == days

    def test_ramp_rate_uses_point_seven_back(self):
        points = [
            FitnessDataPoint(date=TODAY - timedelta(days=7 - i), ctl=40 + 2 * i, atl=50, tsb=-10 + 2 * i)
            for i in range(8)
        ]
        assessment = assess_recovery(points)
        # latest ctl 54, points[-7] ctl 42
        assert assessment.ramp_rate == 12
        assert assessment.is_overreaching is True

    def test_ramp_rate_at_threshold_not_overreaching(self):
        points = generate_points(7, ctl=50)
        points[-1] = FitnessDataPoint(date=TODAY, ctl=57, atl=50, tsb=7)
        assessment = assess_recovery(points)
        assert assessment.ramp_rate == 7
        assert assessment.is_overreaching is False

    def test_detraining_ramp_rate(self):
        points = generate_points(7, ctl=60)
        points[-1] = FitnessDataPoint(date=TODAY, ctl=55, atl=50, tsb=5)
        assert assess_recovery(points).ramp_rate == -5


class TestAssessRaceReadiness:
    """Test race-day projection."""

    def test_insufficient_data(self):
        assert assess_race_readiness(generate_points(6), TODAY + timedelta(days=10), today=TODAY) is None

    def test_past_race(self):
        assert assess_race_readiness(generate_points(14), TODAY - timedelta(days=1), today=TODAY) is None

    def test_race_today(self):
        readiness = assess_race_readiness(generate_points(14), TODAY, today=TODAY)
        assert readiness.days_until_race == 0
        assert readiness.confidence == Confidence.HIGH

    def test_high_confidence_close_race_with_history(self):
        readiness = assess_race_readiness(generate_points(14), TODAY + timedelta(days=1), today=TODAY)
        assert readiness.days_until_race == 1
        assert readiness.confidence == Confidence.HIGH

    def test_medium_confidence_with_short_history(self):
        readiness = assess_race_readiness(generate_points(7), TODAY + timedelta(days=1), today=TODAY)
        assert readiness.confidence == Confidence.MEDIUM

    @pytest.mark.parametrize("days, expected", [
        (7, Confidence.HIGH),
        (8, Confidence.MEDIUM),
        (21, Confidence.MEDIUM),
        (22, Confidence.LOW),
    ])
    def test_confidence_tiers(self, days, expected):
        readiness = assess_race_readiness(generate_points(14), TODAY + timedelta(days=days), today=TODAY)
        assert readiness.confidence == expected

    @pytest.mark.parametrize("days, prefix", [
        (0, "Race week"),
        (2, "Race week"),
        (3, "Taper phase"),
        (14, "Taper phase"),
        (15, "Final build"),
        (28, "Final build"),
        (29, "Continue building"),
    ])
    def test_recommendation_buckets(self, days, prefix):
        readiness = assess_race_readiness(generate_points(14), TODAY + timedelta(days=days), today=TODAY)
        assert readiness.recommendation.startswith(prefix)

    def test_projection_follows_recent_trend(self):
        points = [
            FitnessDataPoint(date=TODAY - timedelta(days=6 - i), ctl=60, atl=74 - 2 * i, tsb=-14 + 2 * i)
            for i in range(7)
        ]
        readiness = assess_race_readiness(points, TODAY + timedelta(days=7), today=TODAY)
        # latest tsb -2, daily change 12 / 7
        assert readiness.projected_tsb == pytest.approx(10.0)
        assert readiness.current_form == FormStatus.OPTIMAL

    def test_flat_history_projects_current_form(self):
        readiness = assess_race_readiness(generate_points(10, tsb=8), TODAY + timedelta(days=30), today=TODAY)
        assert readiness.projected_tsb == pytest.approx(8.0)
        assert readiness.current_form == FormStatus.FRESH

    def test_accepts_iso_strings(self):
        readiness = assess_race_readiness(generate_points(7), "2025-06-11", today="2025-06-01")
        assert readiness.days_until_race == 10

    def test_defaults_to_current_date(self):
        race_date = date.today() + timedelta(days=40)
        readiness = assess_race_readiness(generate_points(7), race_date)
        assert readiness.days_until_race == 40
