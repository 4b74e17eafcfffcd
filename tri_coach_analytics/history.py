"""Activity and wellness history import from CSV or JSON exports.

Exports from training-log services carry one row per activity
(``date, duration, tss, type``) and one row per day of fitness metrics
(``date, ctl, atl, tsb``), with ``YYYY-MM-DD`` dates.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

import pandas as pd

from .analysis.data_validation import HistoryValidator
from .analysis.training_load import ActivityRecord, FitnessDataPoint
from .config import config
from .dates import DateLike, is_valid_iso_date, to_date

logger = logging.getLogger(__name__)

ACTIVITY_COLUMNS = ("date", "duration", "tss")
FITNESS_COLUMNS = ("date", "ctl", "atl", "tsb")


class HistoryError(ValueError):
    """Raised when a history file is missing or malformed."""


class HistorySource:
    """Read ordered activity and fitness history for one athlete."""

    def __init__(
        self,
        activities_path: Optional[Union[str, Path]] = None,
        fitness_path: Optional[Union[str, Path]] = None,
        validate: bool = True,
    ):
        self.activities_path = Path(activities_path) if activities_path else config.activities_path()
        self.fitness_path = Path(fitness_path) if fitness_path else config.fitness_path()
        self.validator = HistoryValidator() if validate else None

    def load_activities(
        self, start: Optional[DateLike] = None, end: Optional[DateLike] = None
    ) -> Tuple[ActivityRecord, ...]:
        """Activities in [start, end], sorted by date."""
        df = self._read(self.activities_path, ACTIVITY_COLUMNS)
        df = self._filter_dates(df, start, end)

        has_type = "type" in df.columns
        activities = tuple(
            ActivityRecord(
                date=row.date,
                duration=float(row.duration),
                tss=float(row.tss),
                type=row.type if has_type and isinstance(row.type, str) else None,
            )
            for row in df.itertuples(index=False)
        )

        if self.validator is not None:
            activities = self.validator.filter_valid_activities(activities)
        logger.info(f"Loaded {len(activities)} activities from {self.activities_path}")
        return activities

    def load_fitness(
        self, start: Optional[DateLike] = None, end: Optional[DateLike] = None
    ) -> Tuple[FitnessDataPoint, ...]:
        """Daily fitness points in [start, end], sorted by date."""
        df = self._read(self.fitness_path, FITNESS_COLUMNS)
        df = self._filter_dates(df, start, end)

        points = tuple(
            FitnessDataPoint(date=row.date, ctl=float(row.ctl), atl=float(row.atl), tsb=float(row.tsb))
            for row in df.itertuples(index=False)
        )

        if self.validator is not None:
            points = self.validator.filter_valid_fitness(points)
        logger.info(f"Loaded {len(points)} fitness points from {self.fitness_path}")
        return points

    @staticmethod
    def _read(path: Path, required_columns: Tuple[str, ...]) -> pd.DataFrame:
        if not path.exists():
            raise HistoryError(f"History file not found: {path}")

        try:
            if path.suffix.lower() == ".json":
                df = pd.read_json(path, orient="records", convert_dates=False)
            else:
                df = pd.read_csv(path, dtype={"date": str}, encoding="utf-8")
        except ValueError as e:
            raise HistoryError(f"Could not parse {path}: {e}") from e

        df.columns = df.columns.str.strip().str.lower()
        missing = [col for col in required_columns if col not in df.columns]
        if missing:
            raise HistoryError(f"{path} is missing columns: {', '.join(missing)}")

        dates = df["date"].astype(str).str.strip()
        bad_dates = [d for d in dates if not is_valid_iso_date(d)]
        if bad_dates:
            raise HistoryError(f"{path} has invalid dates (expected YYYY-MM-DD): {bad_dates[:3]}")

        df["date"] = [to_date(d) for d in dates]

        # Empty cells stay NaN and are left to the validator
        for col in required_columns:
            if col == "date":
                continue
            values = pd.to_numeric(df[col], errors="coerce")
            bad_rows = df.loc[values.isna() & df[col].notna(), "date"]
            if not bad_rows.empty:
                bad = ", ".join(d.isoformat() for d in bad_rows.head(3))
                raise HistoryError(f"{path} has non-numeric {col} values (rows dated {bad})")
            df[col] = values

        return df.sort_values("date", kind="stable").reset_index(drop=True)

    @staticmethod
    def _filter_dates(df: pd.DataFrame, start: Optional[DateLike], end: Optional[DateLike]) -> pd.DataFrame:
        if start is not None:
            start_date = to_date(start)
            df = df[df["date"].map(lambda d: d >= start_date).astype(bool)]
        if end is not None:
            end_date = to_date(end)
            df = df[df["date"].map(lambda d: d <= end_date).astype(bool)]
        return df
