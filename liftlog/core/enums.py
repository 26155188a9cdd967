"""Shared enums for models and API."""

from enum import Enum, IntEnum


class ExerciseType(str, Enum):
    """How an exercise is measured and ranked."""

    WEIGHT_REPS = "weight_reps"  # Bench press, squat
    WEIGHT = "weight"  # Max lift only
    REPS = "reps"  # Push-ups
    DISTANCE = "distance"  # Walk
    TIME_DURATION = "time_duration"  # Planks, holds (longer is better)
    TIME_SPEED = "time_speed"  # Sprints (faster is better)
    DISTANCE_TIME = "distance_time"  # Run
    WEIGHT_TIME = "weight_time"  # Weighted hold
    REPS_TIME = "reps_time"  # Burpees for time
    WEIGHT_DISTANCE = "weight_distance"  # Farmer's walk
    REPS_DISTANCE = "reps_distance"  # Lunges over distance


class WeightUnit(str, Enum):
    KG = "kg"
    LBS = "lbs"


class DistanceUnit(str, Enum):
    KM = "km"
    MILES = "miles"


class ViewMode(str, Enum):
    """Which calendar screen the user last looked at."""

    CALENDAR = "calendar"
    AGENDA = "agenda"
    CHARTS = "charts"


class ChartPeriod(IntEnum):
    """Chart look-back choices. Values are the persisted keys, not day counts."""

    WEEK = 1
    MONTH = 30
    QUARTER = 90
    HALF_YEAR = 180
    YEAR = 365
    ALL_TIME = 0


class ChartMetric(str, Enum):
    BEST_WEIGHT = "bestWeight"
    BEST_REPS = "bestReps"
    TOTAL_VOLUME = "totalVolume"
    BEST_TIME = "bestTime"
    BEST_DISTANCE = "bestDistance"


class ThemePreference(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class ImportMode(str, Enum):
    """How imported exercise definitions combine with the current ones."""

    MERGE = "merge"  # Add only names not already present
    REPLACE = "replace"  # Wipe definitions, exercises and sets first
