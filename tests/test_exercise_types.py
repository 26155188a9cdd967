"""Tests for the exercise type field table and set validation."""

import pytest

from liftlog.core.enums import ExerciseType
from liftlog.core.exceptions import SetValidationError, UnknownExerciseTypeError
from liftlog.core.exercise_types import (
    EXERCISE_TYPE_FIELDS,
    EXERCISE_TYPE_LABELS,
    get_exercise_type_fields,
    resolve_exercise_type,
    validate_set,
)


def test_every_type_has_fields_and_label():
    assert set(EXERCISE_TYPE_FIELDS) == set(ExerciseType)
    assert set(EXERCISE_TYPE_LABELS) == set(ExerciseType)
    for descriptor in EXERCISE_TYPE_FIELDS.values():
        assert descriptor.fields


def test_time_types_share_fields_but_not_identity():
    assert get_exercise_type_fields("time_duration").fields == ("time",)
    assert get_exercise_type_fields("time_speed").fields == ("time",)
    assert EXERCISE_TYPE_LABELS[ExerciseType.TIME_SPEED] == "Time Trial"


def test_fields_per_type():
    assert get_exercise_type_fields(ExerciseType.WEIGHT_REPS).fields == ("weight", "reps")
    assert get_exercise_type_fields("reps_distance").fields == ("reps", "distance")
    assert get_exercise_type_fields("weight_time").fields == ("weight", "time")


def test_unknown_type_is_reported():
    with pytest.raises(UnknownExerciseTypeError):
        resolve_exercise_type("cardio")
    with pytest.raises(UnknownExerciseTypeError):
        get_exercise_type_fields("weight-reps")


def test_validate_set_accepts_matching_fields():
    validate_set("weight_reps", {"weight": 100, "reps": 5})
    validate_set("distance_time", {"distance": 5.0, "time": 1500, "weight": None})


def test_validate_set_requires_positive_values():
    with pytest.raises(SetValidationError) as exc_info:
        validate_set("weight_reps", {"weight": 0, "reps": None})
    assert exc_info.value.errors == ["weight must be greater than 0", "reps is required"]
    assert exc_info.value.exercise_type == "weight_reps"


def test_validate_set_rejects_unused_fields():
    with pytest.raises(SetValidationError) as exc_info:
        validate_set(ExerciseType.REPS, {"reps": 10, "weight": 20})
    assert exc_info.value.errors == ["weight is not recorded for this exercise type"]
