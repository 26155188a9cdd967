"""Tests for set ranking and personal best detection."""

import itertools
import uuid

import pytest

from liftlog.core.enums import ExerciseType
from liftlog.core.exceptions import UnknownExerciseTypeError
from liftlog.core.exercise_types import get_exercise_type_fields
from liftlog.models.exercise import ExerciseDefinition, LoggedExercise
from liftlog.models.set_record import SetRecord
from liftlog.services.pr_detection import (
    COMPARISON_RULES,
    compare_sets,
    detect_pr,
    find_best_set,
    find_best_set_id,
    get_comparison_description,
    get_comparison_rule,
    is_new_personal_best,
)

ALL_TYPES = list(ExerciseType)


def _sets_for(exercise_type):
    """Every combination of a few values over the type's fields, plus an empty set."""
    fields = get_exercise_type_fields(exercise_type).fields
    grid = [None, 1, 5, 10]
    sets = [dict(zip(fields, values)) for values in itertools.product(grid, repeat=len(fields))]
    return sets


def test_examples():
    assert compare_sets({"time": 50}, {"time": 60}, "time_speed") > 0
    assert compare_sets({"time": 50}, {"time": 60}, "time_duration") < 0
    assert compare_sets({"weight": 100, "reps": 5}, {"weight": 100, "reps": 8}, "weight_reps") < 0
    assert compare_sets({"weight": 105, "reps": 1}, {"weight": 100, "reps": 8}, "weight_reps") > 0
    assert compare_sets({"distance": 5, "time": 1400}, {"distance": 5, "time": 1500}, "distance_time") > 0


@pytest.mark.parametrize("exercise_type", ALL_TYPES)
def test_equal_sets_compare_as_zero(exercise_type):
    for s in _sets_for(exercise_type):
        assert compare_sets(s, dict(s), exercise_type) == 0


@pytest.mark.parametrize("exercise_type", ALL_TYPES)
def test_comparison_is_antisymmetric(exercise_type):
    for a, b in itertools.product(_sets_for(exercise_type), repeat=2):
        assert compare_sets(a, b, exercise_type) == -compare_sets(b, a, exercise_type)


def test_present_value_beats_absent_value():
    # lower-is-better tie-break: an absent time counts as +inf
    assert compare_sets({"distance": 5, "time": 9999}, {"distance": 5}, "distance_time") > 0
    assert compare_sets({"time": 30}, {}, "time_speed") > 0
    assert compare_sets({"weight": 1}, {}, "weight") > 0


@pytest.mark.parametrize("exercise_type", ALL_TYPES)
def test_best_set_is_permutation_stable(exercise_type):
    candidates = [s for s in _sets_for(exercise_type) if all(v is not None for v in s.values())][:4]
    assert len(candidates) >= 3
    results = {
        tuple(sorted(find_best_set(list(perm), exercise_type).items()))
        for perm in itertools.permutations(candidates)
    }
    assert len(results) == 1


def test_find_best_set_edge_cases():
    assert find_best_set([], "weight_reps") is None
    assert find_best_set_id([], "weight_reps") is None

    first = {"id": "a", "weight": 100, "reps": 5}
    tie = {"id": "b", "weight": 100, "reps": 5}
    assert find_best_set([first, tie], "weight_reps") is first
    assert find_best_set_id([tie, first], "weight_reps") == "b"


@pytest.mark.parametrize("exercise_type", ALL_TYPES)
def test_first_set_is_always_a_personal_best(exercise_type):
    assert is_new_personal_best({}, None, exercise_type)
    assert is_new_personal_best({"weight": 1}, None, exercise_type.value)


def test_personal_best_must_strictly_beat_current():
    pb = {"weight": 100, "reps": 5}
    assert not is_new_personal_best({"weight": 100, "reps": 5}, pb, "weight_reps")
    assert not is_new_personal_best({"weight": 95, "reps": 10}, pb, "weight_reps")
    assert is_new_personal_best({"weight": 100, "reps": 6}, pb, "weight_reps")


def test_unknown_type_is_not_silently_ranked():
    with pytest.raises(UnknownExerciseTypeError):
        compare_sets({"weight": 1}, {"weight": 2}, "kettlebell")
    with pytest.raises(UnknownExerciseTypeError):
        is_new_personal_best({"weight": 1}, None, "kettlebell")
    with pytest.raises(UnknownExerciseTypeError):
        get_comparison_description("kettlebell")


def test_every_type_has_a_rule():
    assert set(COMPARISON_RULES) == set(ExerciseType)


@pytest.mark.parametrize("exercise_type", ALL_TYPES)
def test_description_matches_ranking(exercise_type):
    """The description's direction words agree with what compare_sets does."""
    rule = get_comparison_rule(exercise_type)
    description = get_comparison_description(exercise_type)

    primary = rule.primary.field
    smaller, larger = {primary: 10}, {primary: 20}
    if description.startswith("Faster"):
        assert compare_sets(smaller, larger, exercise_type) > 0
    else:
        assert compare_sets(larger, smaller, exercise_type) > 0

    if rule.tie_break is None:
        assert "If tied" not in description
        return
    assert "If tied" in description
    tie_field = rule.tie_break.field
    smaller = {primary: 10, tie_field: 1}
    larger = {primary: 10, tie_field: 2}
    if "If tied, faster time wins." in description:
        assert compare_sets(smaller, larger, exercise_type) > 0
    else:
        assert compare_sets(larger, smaller, exercise_type) > 0


def test_sets_may_be_objects():
    a = SetRecord(weight=100.0, reps=5)
    b = SetRecord(weight=100.0, reps=3)
    assert compare_sets(a, b, ExerciseType.WEIGHT_REPS) > 0


@pytest.mark.asyncio
async def test_detect_pr_against_stored_history(db):
    definition = ExerciseDefinition(name="Sprints", category="Cardio", type=ExerciseType.TIME_SPEED, unit="sec")
    db.add(definition)
    await db.flush()
    exercise = LoggedExercise(definition_id=definition.id, date="2024-01-01")
    db.add(exercise)
    await db.flush()

    is_pr, previous = await detect_pr(db, definition.id, {"time": 30}, definition.type)
    assert is_pr and previous is None

    stored = SetRecord(exercise_id=exercise.id, time=30)
    db.add(stored)
    await db.flush()

    is_pr, previous = await detect_pr(db, definition.id, {"time": 31}, definition.type)
    assert not is_pr
    assert previous.id == stored.id

    is_pr, _ = await detect_pr(db, definition.id, {"time": 29}, definition.type)
    assert is_pr

    # A stored candidate is not compared against itself
    is_pr, previous = await detect_pr(db, definition.id, stored, definition.type, exclude_set_id=stored.id)
    assert is_pr and previous is None

    is_pr, _ = await detect_pr(db, uuid.uuid4(), {"time": 45}, definition.type)
    assert is_pr
