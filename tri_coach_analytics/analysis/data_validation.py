"""Data validation for training history before it reaches the analytics.

Trend, ramp-rate and weekly-load calculations assume clean, date-ordered
input. This module flags rows that break those assumptions so loaders can
drop them before analysis.
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..config import config
from .training_load import ActivityRecord, FitnessDataPoint

logger = logging.getLogger(__name__)

# Allowed gap between a reported TSB and ctl - atl (rounding in exports)
TSB_TOLERANCE = 1.0


@dataclass
class ValidationResult:
    """Result of data validation check."""
    is_valid: bool
    reason: Optional[str] = None


class HistoryValidator:
    """Validator for activity and daily fitness history."""

    PHYSIOLOGICAL_BOUNDS = {
        'tss': {'min': 0, 'max': config.MAX_DAILY_TSS},
        'duration': {'min': 0, 'max': config.MAX_ACTIVITY_MINUTES},
        'ctl': {'min': 0, 'max': config.MAX_FITNESS},
        'atl': {'min': 0, 'max': config.MAX_FATIGUE},
    }

    def validate_metric(self, metric_name: str, value: float) -> ValidationResult:
        """Validate a single metric value against its physiological bounds."""
        if value is None or np.isnan(value) or np.isinf(value):
            return ValidationResult(False, f"Invalid numeric value for {metric_name}")

        bounds = self.PHYSIOLOGICAL_BOUNDS.get(metric_name)
        if bounds is None:
            return ValidationResult(True)

        if value < bounds['min'] or value > bounds['max']:
            return ValidationResult(
                False,
                f"{metric_name} {value} outside physiological range [{bounds['min']}, {bounds['max']}]",
            )

        return ValidationResult(True)

    def validate_activities(self, activities: Sequence[ActivityRecord]) -> List[ValidationResult]:
        """Validate each activity; dates must not go backwards."""
        results = []
        previous_date = None

        for activity in activities:
            result = self._first_failure([
                self.validate_metric('tss', activity.tss),
                self.validate_metric('duration', activity.duration),
            ])
            if result.is_valid and previous_date is not None and activity.date < previous_date:
                result = ValidationResult(False, f"out of order: {activity.date} after {previous_date}")
            if result.is_valid:
                previous_date = activity.date
            results.append(result)

        return results

    def validate_fitness(self, points: Sequence[FitnessDataPoint]) -> List[ValidationResult]:
        """Validate each fitness point; dates must be strictly ascending."""
        results = []
        previous_date = None

        for point in points:
            result = self._first_failure([
                self.validate_metric('ctl', point.ctl),
                self.validate_metric('atl', point.atl),
                self.validate_metric('tsb', point.tsb),
            ])
            if result.is_valid and abs(point.tsb - (point.ctl - point.atl)) > TSB_TOLERANCE:
                result = ValidationResult(
                    False,
                    f"tsb {point.tsb} inconsistent with ctl - atl = {point.ctl - point.atl:.1f}",
                )
            if result.is_valid and previous_date is not None and point.date <= previous_date:
                result = ValidationResult(False, f"out of order: {point.date} not after {previous_date}")
            if result.is_valid:
                previous_date = point.date
            results.append(result)

        return results

    def filter_valid_activities(self, activities: Sequence[ActivityRecord]) -> Tuple[ActivityRecord, ...]:
        """Drop invalid activities, logging each one."""
        return self._keep_valid('activities', activities, self.validate_activities(activities))

    def filter_valid_fitness(self, points: Sequence[FitnessDataPoint]) -> Tuple[FitnessDataPoint, ...]:
        """Drop invalid fitness points, logging each one."""
        return self._keep_valid('fitness', points, self.validate_fitness(points))

    def generate_validation_report(self, validation_results: Dict[str, List[ValidationResult]]) -> Dict[str, Any]:
        """Summarise validation results per history kind."""
        total_points = sum(len(results) for results in validation_results.values())
        invalid_points = sum(
            sum(1 for r in results if not r.is_valid)
            for results in validation_results.values()
        )

        summary = {}
        for name, results in validation_results.items():
            invalid_count = sum(1 for r in results if not r.is_valid)
            summary[name] = {
                'total_points': len(results),
                'invalid_points': invalid_count,
                'validity_rate': (len(results) - invalid_count) / len(results) if results else 1.0,
                'common_issues': self._summarize_issues([r for r in results if not r.is_valid]),
            }

        return {
            'overall_validity_rate': (total_points - invalid_points) / total_points if total_points > 0 else 1.0,
            'total_points_validated': total_points,
            'total_invalid_points': invalid_points,
            'summary': summary,
        }

    @staticmethod
    def _first_failure(results: List[ValidationResult]) -> ValidationResult:
        for result in results:
            if not result.is_valid:
                return result
        return ValidationResult(True)

    @staticmethod
    def _keep_valid(kind: str, rows: Sequence, results: List[ValidationResult]) -> tuple:
        kept = []
        for i, (row, result) in enumerate(zip(rows, results)):
            if result.is_valid:
                kept.append(row)
            else:
                logger.warning(f"Dropped {kind}[{i}] ({row.date}): {result.reason}")
        return tuple(kept)

    def _summarize_issues(self, invalid_results: List[ValidationResult]) -> List[str]:
        """Count invalid results by issue type."""
        issue_counts = {}
        for result in invalid_results:
            reason = result.reason or ''
            if 'outside physiological range' in reason:
                issue = 'range_violations'
            elif 'out of order' in reason:
                issue = 'ordering'
            elif 'inconsistent' in reason:
                issue = 'tsb_mismatch'
            else:
                issue = 'other'
            issue_counts[issue] = issue_counts.get(issue, 0) + 1

        return [f"{issue}: {count}" for issue, count in issue_counts.items()]
