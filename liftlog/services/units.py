"""Unit conversion and display formatting.

Weights are stored in kg, distances in km and times in seconds regardless of
what the user sees. Pounds are rounded to the nearest 0.5 lb for display only;
never write a displayed value back to storage.
"""

from __future__ import annotations

import math
from typing import Any

from liftlog.core.constants import (
    DEFAULT_KG_INCREMENT,
    DEFAULT_LBS_INCREMENT,
    KG_TO_LBS,
    KM_TO_MILES,
    LBS_DISPLAY_STEP,
    LBS_TO_KG,
    MILES_TO_KM,
)
from liftlog.core.enums import DistanceUnit, ExerciseType, WeightUnit
from liftlog.core.exercise_types import resolve_exercise_type, set_value


def _round_half_up(value: float, decimals: int = 0) -> float:
    factor = 10 ** decimals
    return math.floor(value * factor + 0.5) / factor


def _format_number(value: float) -> str:
    """Shortest plain representation: 100.0 -> "100", 2.50 -> "2.5"."""
    if value == int(value):
        return str(int(value))
    return f"{value:.10f}".rstrip("0").rstrip(".")


# ── Weight ───────────────────────────────────────────────────────────────

def lbs_to_kg(lbs: float) -> float:
    """Pounds entered by the user to canonical kg (2 decimal places)."""
    return _round_half_up(lbs * LBS_TO_KG, 2)


def kg_to_lbs(kg: float) -> float:
    """Canonical kg to pounds for display, rounded to the nearest 0.5 lb."""
    return math.floor(kg * KG_TO_LBS / LBS_DISPLAY_STEP + 0.5) * LBS_DISPLAY_STEP


def format_weight(
    kg_value: float,
    display_unit: WeightUnit | str,
    decimals: int | None = None,
    include_unit: bool = True,
) -> str:
    """Weight in the user's unit. kg defaults to 1 decimal; lbs uses 0.5 lb rounding."""
    unit = WeightUnit(display_unit)
    if unit is WeightUnit.KG:
        display_value = _round_half_up(kg_value, 1 if decimals is None else decimals)
    else:
        display_value = kg_to_lbs(kg_value)
        if decimals is not None:
            display_value = _round_half_up(display_value, decimals)
    text = _format_number(display_value)
    return f"{text} {unit.value}" if include_unit else text


def default_increment(unit: WeightUnit | str) -> float:
    return DEFAULT_LBS_INCREMENT if WeightUnit(unit) is WeightUnit.LBS else DEFAULT_KG_INCREMENT


# ── Distance ─────────────────────────────────────────────────────────────

def km_to_miles(km: float) -> float:
    return _round_half_up(km * KM_TO_MILES, 2)


def miles_to_km(miles: float) -> float:
    return _round_half_up(miles * MILES_TO_KM, 2)


def format_distance(
    km_value: float,
    display_unit: DistanceUnit | str,
    decimals: int = 2,
    include_unit: bool = True,
) -> str:
    unit = DistanceUnit(display_unit)
    value = km_value if unit is DistanceUnit.KM else km_to_miles(km_value)
    text = _format_number(_round_half_up(value, decimals))
    return f"{text} {unit.value}" if include_unit else text


def _distance_suffix(unit: DistanceUnit) -> str:
    return "km" if unit is DistanceUnit.KM else "mi"


# ── Time ─────────────────────────────────────────────────────────────────

def format_time(seconds: float | None) -> str:
    """90 -> "1m 30s", 45 -> "45s"."""
    if not seconds:
        return "0s"
    total = int(seconds)
    mins, secs = divmod(total, 60)
    return f"{mins}m {secs}s" if mins > 0 else f"{secs}s"


def format_clock(seconds: float) -> str:
    """90 -> "1:30"."""
    mins, secs = divmod(int(seconds), 60)
    return f"{mins}:{secs:02d}"


# ── Sets ─────────────────────────────────────────────────────────────────

def format_set_for_display(
    exercise_type: ExerciseType | str,
    set_data: Any,
    weight_unit: WeightUnit | str = WeightUnit.KG,
    distance_unit: DistanceUnit | str = DistanceUnit.KM,
) -> str:
    """One-line summary of a set in the user's units, e.g. "100.0 kg × 5"."""
    ex_type = resolve_exercise_type(exercise_type)
    w_unit = WeightUnit(weight_unit)
    d_unit = DistanceUnit(distance_unit)

    weight = set_value(set_data, "weight")
    reps = set_value(set_data, "reps")
    distance = set_value(set_data, "distance")
    time = set_value(set_data, "time")

    if weight is None:
        weight_text = "0"
    elif w_unit is WeightUnit.LBS:
        weight_text = f"{kg_to_lbs(weight):.1f}"
    else:
        weight_text = f"{weight:.1f}"

    if distance is None:
        distance_text = "0"
    elif d_unit is DistanceUnit.MILES:
        distance_text = f"{distance * KM_TO_MILES:.2f}"
    else:
        distance_text = f"{distance:.2f}"

    reps_text = str(int(reps)) if reps is not None else "0"
    suffix = _distance_suffix(d_unit)

    if ex_type is ExerciseType.WEIGHT_REPS:
        return f"{weight_text} {w_unit.value} × {reps_text}"
    if ex_type is ExerciseType.DISTANCE_TIME:
        return f"{distance_text}{suffix} in {format_time(time)}"
    if ex_type is ExerciseType.WEIGHT_DISTANCE:
        return f"{weight_text} {w_unit.value} × {distance_text} {suffix}"
    if ex_type is ExerciseType.WEIGHT_TIME:
        return f"{weight_text} {w_unit.value} for {format_time(time)}"
    if ex_type is ExerciseType.REPS_DISTANCE:
        return f"{reps_text} × {distance_text} {suffix}"
    if ex_type is ExerciseType.REPS_TIME:
        return f"{reps_text} in {format_time(time)}"
    if ex_type is ExerciseType.WEIGHT:
        return f"{weight_text} {w_unit.value}"
    if ex_type is ExerciseType.REPS:
        return reps_text
    if ex_type is ExerciseType.DISTANCE:
        return f"{distance_text} {suffix}"
    # time_duration / time_speed
    return format_time(time)


# ── 1RM ──────────────────────────────────────────────────────────────────

def calculate_one_rep_max(weight: float, reps: int) -> float | None:
    """Epley: 1RM = weight * (1 + reps/30). Only meaningful for 1-10 reps."""
    if reps < 1 or reps > 10 or weight <= 0:
        return None
    if reps == 1:
        return weight
    return weight * (1 + reps / 30)


def format_one_rep_max(one_rm: float | None, weight_unit: WeightUnit | str = WeightUnit.KG) -> str:
    if one_rm is None:
        return "N/A"
    if WeightUnit(weight_unit) is WeightUnit.LBS:
        return f"{kg_to_lbs(one_rm):.1f} lbs"
    return f"{one_rm:.1f} kg"
