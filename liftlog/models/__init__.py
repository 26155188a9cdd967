"""ORM models - import all so Base.metadata is complete for migrations."""

from liftlog.models.exercise import ExerciseDefinition, LoggedExercise
from liftlog.models.preference import Preference
from liftlog.models.set_record import SetRecord

__all__ = [
    "ExerciseDefinition",
    "LoggedExercise",
    "Preference",
    "SetRecord",
]
