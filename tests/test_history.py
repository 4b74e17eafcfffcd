"""Tests for history validation and import."""

import json
import logging
import pytest
from datetime import date

from tri_coach_analytics.analysis.data_validation import HistoryValidator
from tri_coach_analytics.analysis.training_load import ActivityRecord, FitnessDataPoint
from tri_coach_analytics.history import HistoryError, HistorySource


class TestHistoryValidator:
    """Test validation of activity and fitness rows."""

    def setup_method(self):
        self.validator = HistoryValidator()

    def test_valid_activities(self):
        activities = [
            ActivityRecord(date="2025-01-06", duration=60, tss=80),
            ActivityRecord(date="2025-01-06", duration=30, tss=20),
            ActivityRecord(date="2025-01-07", duration=90, tss=110),
        ]
        assert all(r.is_valid for r in self.validator.validate_activities(activities))

    def test_invalid_activity_values(self):
        activities = [
            ActivityRecord(date="2025-01-06", duration=60, tss=-5),
            ActivityRecord(date="2025-01-07", duration=60, tss=5000),
            ActivityRecord(date="2025-01-08", duration=float("nan"), tss=50),
        ]
        results = self.validator.validate_activities(activities)
        assert [r.is_valid for r in results] == [False, False, False]
        assert "outside physiological range" in results[0].reason

    def test_activity_out_of_order(self):
        activities = [
            ActivityRecord(date="2025-01-08", duration=60, tss=50),
            ActivityRecord(date="2025-01-06", duration=60, tss=50),
        ]
        results = self.validator.validate_activities(activities)
        assert results[0].is_valid
        assert not results[1].is_valid
        assert "out of order" in results[1].reason

    def test_fitness_tsb_must_match(self):
        points = [
            FitnessDataPoint(date="2025-01-06", ctl=50, atl=40, tsb=10),
            FitnessDataPoint(date="2025-01-07", ctl=50, atl=40, tsb=10.4),
            FitnessDataPoint(date="2025-01-08", ctl=50, atl=40, tsb=-10),
        ]
        results = self.validator.validate_fitness(points)
        assert [r.is_valid for r in results] == [True, True, False]
        assert "inconsistent" in results[2].reason

    def test_fitness_duplicate_date(self):
        points = [
            FitnessDataPoint(date="2025-01-06", ctl=50, atl=40, tsb=10),
            FitnessDataPoint(date="2025-01-06", ctl=51, atl=41, tsb=10),
        ]
        results = self.validator.validate_fitness(points)
        assert not results[1].is_valid

    def test_filter_logs_dropped_rows(self, caplog):
        points = [
            FitnessDataPoint(date="2025-01-06", ctl=50, atl=40, tsb=10),
            FitnessDataPoint(date="2025-01-07", ctl=-1, atl=40, tsb=-41),
            FitnessDataPoint(date="2025-01-08", ctl=52, atl=40, tsb=12),
        ]
        with caplog.at_level(logging.WARNING):
            kept = self.validator.filter_valid_fitness(points)
        assert [p.date for p in kept] == [date(2025, 1, 6), date(2025, 1, 8)]
        assert "Dropped fitness[1]" in caplog.text

    def test_validation_report(self):
        results = {
            "activities": self.validator.validate_activities([
                ActivityRecord(date="2025-01-06", duration=60, tss=80),
                ActivityRecord(date="2025-01-05", duration=60, tss=80),
            ]),
            "fitness": self.validator.validate_fitness([
                FitnessDataPoint(date="2025-01-06", ctl=50, atl=40, tsb=10),
            ]),
        }
        report = self.validator.generate_validation_report(results)
        assert report["total_points_validated"] == 3
        assert report["total_invalid_points"] == 1
        assert report["overall_validity_rate"] == pytest.approx(2 / 3)
        assert report["summary"]["activities"]["common_issues"] == ["ordering: 1"]

    def test_empty_report(self):
        report = self.validator.generate_validation_report({})
        assert report["overall_validity_rate"] == 1.0


class TestHistorySource:
    """Test CSV and JSON history import."""

    @pytest.fixture
    def activities_csv(self, tmp_path):
        path = tmp_path / "activities.csv"
        path.write_text(
            "date,duration,tss,type\n"
            "2025-01-13,45,40,Swim\n"
            "2025-01-06,60,100,Run\n"
            "2025-01-08,30,50,\n"
        )
        return path

    @pytest.fixture
    def fitness_csv(self, tmp_path):
        path = tmp_path / "fitness.csv"
        rows = ["date,ctl,atl,tsb"]
        for day in range(1, 11):
            rows.append(f"2025-01-{day:02d},{50 + day},{60 + day},-10")
        path.write_text("\n".join(rows) + "\n")
        return path

    def test_load_activities_sorted(self, activities_csv):
        activities = HistorySource(activities_path=activities_csv).load_activities()
        assert [a.date for a in activities] == [date(2025, 1, 6), date(2025, 1, 8), date(2025, 1, 13)]
        assert activities[0].type == "Run"
        assert activities[1].type is None
        assert activities[0].tss == 100.0

    def test_load_activities_date_range(self, activities_csv):
        source = HistorySource(activities_path=activities_csv)
        activities = source.load_activities(start="2025-01-07", end=date(2025, 1, 13))
        assert [a.date for a in activities] == [date(2025, 1, 8), date(2025, 1, 13)]

    def test_load_activities_empty_range(self, activities_csv):
        source = HistorySource(activities_path=activities_csv)
        assert source.load_activities(start="2025-02-01") == ()

    def test_load_fitness(self, fitness_csv):
        points = HistorySource(fitness_path=fitness_csv).load_fitness()
        assert len(points) == 10
        assert points[-1] == FitnessDataPoint(date="2025-01-10", ctl=60, atl=70, tsb=-10)

    def test_load_fitness_json(self, tmp_path):
        path = tmp_path / "fitness.json"
        path.write_text(json.dumps([
            {"date": "2025-01-02", "ctl": 51, "atl": 41, "tsb": 10},
            {"date": "2025-01-01", "ctl": 50, "atl": 40, "tsb": 10},
        ]))
        points = HistorySource(fitness_path=path).load_fitness()
        assert [p.date for p in points] == [date(2025, 1, 1), date(2025, 1, 2)]

    def test_invalid_rows_dropped(self, tmp_path):
        path = tmp_path / "fitness.csv"
        path.write_text("date,ctl,atl,tsb\n2025-01-01,50,40,10\n2025-01-02,50,40,30\n")
        points = HistorySource(fitness_path=path).load_fitness()
        assert len(points) == 1

    def test_validation_can_be_disabled(self, tmp_path):
        path = tmp_path / "fitness.csv"
        path.write_text("date,ctl,atl,tsb\n2025-01-01,50,40,10\n2025-01-02,50,40,30\n")
        points = HistorySource(fitness_path=path, validate=False).load_fitness()
        assert len(points) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(HistoryError, match="not found"):
            HistorySource(fitness_path=tmp_path / "nope.csv").load_fitness()

    def test_missing_columns(self, tmp_path):
        path = tmp_path / "fitness.csv"
        path.write_text("date,ctl\n2025-01-01,50\n")
        with pytest.raises(HistoryError, match="atl, tsb"):
            HistorySource(fitness_path=path).load_fitness()

    def test_non_numeric_values(self, tmp_path):
        path = tmp_path / "activities.csv"
        path.write_text("date,duration,tss\n2025-01-05,30,20\n2025-01-06,60,abc\n")
        with pytest.raises(HistoryError, match="non-numeric tss values.*2025-01-06"):
            HistorySource(activities_path=path).load_activities()

    def test_non_numeric_json_values(self, tmp_path):
        path = tmp_path / "fitness.json"
        path.write_text(json.dumps([{"date": "2025-01-01", "ctl": "high", "atl": 40, "tsb": 10}]))
        with pytest.raises(HistoryError, match="non-numeric ctl"):
            HistorySource(fitness_path=path).load_fitness()

    def test_empty_numeric_cell_dropped(self, tmp_path):
        path = tmp_path / "activities.csv"
        path.write_text("date,duration,tss\n2025-01-06,60,\n2025-01-07,45,50\n")
        activities = HistorySource(activities_path=path).load_activities()
        assert [a.date for a in activities] == [date(2025, 1, 7)]

    def test_bad_dates(self, tmp_path):
        path = tmp_path / "activities.csv"
        path.write_text("date,duration,tss\n01/06/2025,60,100\n")
        with pytest.raises(HistoryError, match="invalid dates"):
            HistorySource(activities_path=path).load_activities()
