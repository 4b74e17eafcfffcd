"""Configuration management for the triathlon coaching analytics."""

import os
from datetime import date
from pathlib import Path
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Application configuration."""

    # History files
    DATA_DIR: Path = Path(os.getenv("DATA_DIR", "./data"))
    ACTIVITIES_FILE: str = os.getenv("ACTIVITIES_FILE", "activities.csv")
    FITNESS_FILE: str = os.getenv("FITNESS_FILE", "fitness.csv")

    # Physiological Bounds - reject corrupted history rows
    MAX_DAILY_TSS: float = float(os.getenv("MAX_DAILY_TSS", "1000"))  # Max for ultra-endurance events
    MAX_ACTIVITY_MINUTES: float = float(os.getenv("MAX_ACTIVITY_MINUTES", "1440"))
    MAX_FITNESS: float = float(os.getenv("MAX_FITNESS", "400"))  # Elite athlete CTL
    MAX_FATIGUE: float = float(os.getenv("MAX_FATIGUE", "250"))

    # CLI defaults
    DEFAULT_PLAN_WEEKS: int = int(os.getenv("DEFAULT_PLAN_WEEKS", "12"))
    TREND_WINDOW: int = int(os.getenv("TREND_WINDOW", "7"))  # points, one per day

    # Application
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Race calendar
    TARGET_RACE_DATES: str = os.getenv("TARGET_RACE_DATES", "")

    @classmethod
    def activities_path(cls) -> Path:
        """Path of the activity history file."""
        return cls.DATA_DIR / cls.ACTIVITIES_FILE

    @classmethod
    def fitness_path(cls) -> Path:
        """Path of the daily CTL/ATL/TSB history file."""
        return cls.DATA_DIR / cls.FITNESS_FILE

    @classmethod
    def get_race_dates(cls) -> List[date]:
        """Parse and return sorted target race dates, skipping malformed entries."""
        from .dates import is_valid_iso_date, to_date

        race_dates = []
        for date_str in cls.TARGET_RACE_DATES.split(","):
            date_str = date_str.strip()
            if is_valid_iso_date(date_str):
                race_dates.append(to_date(date_str))

        return sorted(race_dates)

    @classmethod
    def get_next_race_date(cls, current_date: Optional[date] = None) -> Optional[date]:
        """Next configured race on or after current_date."""
        if current_date is None:
            current_date = date.today()

        for race_date in cls.get_race_dates():
            if race_date >= current_date:
                return race_date
        return None


config = Config()
