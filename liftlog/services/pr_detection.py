"""PR detection: rank sets per exercise type and flag a set that beats the all-time best.

Each exercise type has a fixed rule: a primary metric and an optional tie-break,
each either "higher wins" or "lower wins". The same table drives compare_sets and
the human-readable description, so the two cannot drift apart.
"""

from __future__ import annotations

import math
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Sequence, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.core.enums import ExerciseType
from liftlog.core.exercise_types import resolve_exercise_type, set_value
from liftlog.services.workout_log import fetch_sets_for_definition

SetT = TypeVar("SetT")


@dataclass(frozen=True)
class Metric:
    field: str
    higher_is_better: bool = True

    @property
    def missing_value(self) -> float:
        # A recorded value always beats an absent one
        return 0.0 if self.higher_is_better else math.inf


@dataclass(frozen=True)
class ComparisonRule:
    primary: Metric
    tie_break: Metric | None = None

    @property
    def metrics(self) -> tuple[Metric, ...]:
        return (self.primary,) if self.tie_break is None else (self.primary, self.tie_break)


_WEIGHT = Metric("weight")
_REPS = Metric("reps")
_DISTANCE = Metric("distance")
_LONGER_TIME = Metric("time")
_FASTER_TIME = Metric("time", higher_is_better=False)

COMPARISON_RULES: dict[ExerciseType, ComparisonRule] = {
    ExerciseType.WEIGHT_REPS: ComparisonRule(_WEIGHT, _REPS),
    ExerciseType.WEIGHT: ComparisonRule(_WEIGHT),
    ExerciseType.REPS: ComparisonRule(_REPS),
    ExerciseType.DISTANCE: ComparisonRule(_DISTANCE),
    ExerciseType.TIME_DURATION: ComparisonRule(_LONGER_TIME),
    ExerciseType.TIME_SPEED: ComparisonRule(_FASTER_TIME),
    ExerciseType.DISTANCE_TIME: ComparisonRule(_DISTANCE, _FASTER_TIME),
    ExerciseType.WEIGHT_TIME: ComparisonRule(_WEIGHT, _FASTER_TIME),
    ExerciseType.REPS_TIME: ComparisonRule(_REPS, _FASTER_TIME),
    ExerciseType.WEIGHT_DISTANCE: ComparisonRule(_WEIGHT, _DISTANCE),
    ExerciseType.REPS_DISTANCE: ComparisonRule(_REPS, _DISTANCE),
}

_PRIMARY_PHRASES: dict[Metric, str] = {
    _WEIGHT: "Higher weight is better.",
    _REPS: "More reps is better.",
    _DISTANCE: "Longer distance is better.",
    _LONGER_TIME: "Longer duration is better (holds/planks).",
    _FASTER_TIME: "Faster time is better (sprints).",
}

_TIE_BREAK_PHRASES: dict[Metric, str] = {
    _REPS: "If tied, higher reps wins.",
    _DISTANCE: "If tied, longer distance wins.",
    _FASTER_TIME: "If tied, faster time wins.",
}


def get_comparison_rule(exercise_type: ExerciseType | str) -> ComparisonRule:
    return COMPARISON_RULES[resolve_exercise_type(exercise_type)]


def _metric_delta(a: Any, b: Any, metric: Metric) -> float:
    a_val = set_value(a, metric.field)
    b_val = set_value(b, metric.field)
    if a_val is None:
        a_val = metric.missing_value
    if b_val is None:
        b_val = metric.missing_value
    if a_val == b_val:
        return 0.0
    return a_val - b_val if metric.higher_is_better else b_val - a_val


def compare_sets(a: Any, b: Any, exercise_type: ExerciseType | str) -> float:
    """Positive if `a` outranks `b`, negative if `b` outranks `a`, 0 on a tie."""
    for metric in get_comparison_rule(exercise_type).metrics:
        delta = _metric_delta(a, b, metric)
        if delta != 0:
            return delta
    return 0.0


def find_best_set(sets: Sequence[SetT], exercise_type: ExerciseType | str) -> SetT | None:
    """Best set by the type's rule; the earliest set wins a tie. None for no sets."""
    best: SetT | None = None
    for current in sets:
        if best is None or compare_sets(current, best, exercise_type) > 0:
            best = current
    return best


def find_best_set_id(sets: Sequence[Any], exercise_type: ExerciseType | str) -> Any | None:
    """Id of the best set, for highlighting it in a workout."""
    best = find_best_set(sets, exercise_type)
    if best is None:
        return None
    return best["id"] if isinstance(best, Mapping) else getattr(best, "id", None)


def is_new_personal_best(
    new_set: Any,
    current_pb: Any | None,
    exercise_type: ExerciseType | str,
) -> bool:
    """The first recorded set is always a PB; afterwards it must strictly beat the PB."""
    if current_pb is None:
        resolve_exercise_type(exercise_type)
        return True
    return compare_sets(new_set, current_pb, exercise_type) > 0


def get_comparison_description(exercise_type: ExerciseType | str) -> str:
    rule = get_comparison_rule(exercise_type)
    text = _PRIMARY_PHRASES[rule.primary]
    if rule.tie_break is not None:
        text = f"{text} {_TIE_BREAK_PHRASES[rule.tie_break]}"
    return text


async def detect_pr(
    db: AsyncSession,
    definition_id: uuid.UUID,
    candidate: Any,
    exercise_type: ExerciseType | str,
    exclude_set_id: uuid.UUID | None = None,
) -> tuple[bool, Any | None]:
    """
    Compare a set against the all-time best for the exercise definition.
    Returns (is_pr, previous_best). Pass exclude_set_id when the candidate is
    already stored so it is not compared against itself.
    """
    history = await fetch_sets_for_definition(db, definition_id)
    if exclude_set_id is not None:
        history = [s for s in history if s.id != exclude_set_id]
    previous_best = find_best_set(history, exercise_type)
    return is_new_personal_best(candidate, previous_best, exercise_type), previous_best
