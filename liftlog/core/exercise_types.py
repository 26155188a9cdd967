"""Static field table for the exercise types: which of weight/reps/distance/time each one records."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from liftlog.core.enums import ExerciseType
from liftlog.core.exceptions import SetValidationError, UnknownExerciseTypeError

SET_FIELDS = ("weight", "reps", "distance", "time")


@dataclass(frozen=True)
class FieldDescriptor:
    weight: bool = False
    reps: bool = False
    distance: bool = False
    time: bool = False

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(name for name in SET_FIELDS if getattr(self, name))


EXERCISE_TYPE_FIELDS: dict[ExerciseType, FieldDescriptor] = {
    ExerciseType.WEIGHT_REPS: FieldDescriptor(weight=True, reps=True),
    ExerciseType.WEIGHT: FieldDescriptor(weight=True),
    ExerciseType.REPS: FieldDescriptor(reps=True),
    ExerciseType.DISTANCE: FieldDescriptor(distance=True),
    ExerciseType.TIME_DURATION: FieldDescriptor(time=True),
    ExerciseType.TIME_SPEED: FieldDescriptor(time=True),
    ExerciseType.DISTANCE_TIME: FieldDescriptor(distance=True, time=True),
    ExerciseType.WEIGHT_TIME: FieldDescriptor(weight=True, time=True),
    ExerciseType.REPS_TIME: FieldDescriptor(reps=True, time=True),
    ExerciseType.WEIGHT_DISTANCE: FieldDescriptor(weight=True, distance=True),
    ExerciseType.REPS_DISTANCE: FieldDescriptor(reps=True, distance=True),
}

# Labels used in exports and pickers
EXERCISE_TYPE_LABELS: dict[ExerciseType, str] = {
    ExerciseType.WEIGHT_REPS: "Weight & Reps",
    ExerciseType.WEIGHT: "Weight Only",
    ExerciseType.REPS: "Reps Only",
    ExerciseType.DISTANCE: "Distance Only",
    ExerciseType.TIME_DURATION: "Duration",
    ExerciseType.TIME_SPEED: "Time Trial",
    ExerciseType.DISTANCE_TIME: "Distance & Time",
    ExerciseType.WEIGHT_TIME: "Weight & Time",
    ExerciseType.REPS_TIME: "Reps & Time",
    ExerciseType.WEIGHT_DISTANCE: "Weight & Distance",
    ExerciseType.REPS_DISTANCE: "Reps & Distance",
}


def resolve_exercise_type(tag: ExerciseType | str) -> ExerciseType:
    """Map a stored tag to its enum member. Unknown tags are a configuration error."""
    if isinstance(tag, ExerciseType):
        return tag
    try:
        return ExerciseType(tag)
    except ValueError:
        raise UnknownExerciseTypeError(tag) from None


def get_exercise_type_fields(exercise_type: ExerciseType | str) -> FieldDescriptor:
    return EXERCISE_TYPE_FIELDS[resolve_exercise_type(exercise_type)]


def set_value(set_data: Any, field: str) -> float | None:
    """Read one metric from a mapping, ORM row or pydantic model; None when absent."""
    if isinstance(set_data, Mapping):
        value = set_data.get(field)
    else:
        value = getattr(set_data, field, None)
    return float(value) if value is not None else None


def validate_set(exercise_type: ExerciseType | str, set_data: Any) -> None:
    """
    Check a set against its exercise type.
    Every field the type records must be present and > 0; fields it does not record must be absent.
    Raises SetValidationError listing every problem.
    """
    ex_type = resolve_exercise_type(exercise_type)
    descriptor = EXERCISE_TYPE_FIELDS[ex_type]
    errors: list[str] = []
    for field in SET_FIELDS:
        value = set_value(set_data, field)
        if getattr(descriptor, field):
            if value is None:
                errors.append(f"{field} is required")
            elif not value > 0:
                errors.append(f"{field} must be greater than 0")
        elif value is not None:
            errors.append(f"{field} is not recorded for this exercise type")
    if errors:
        raise SetValidationError(ex_type.value, errors)
