"""Logged exercise and set endpoints. New and edited sets are checked for personal bests."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.api.v1.deps import get_preferences
from liftlog.core.exceptions import SetValidationError, UnknownExerciseTypeError
from liftlog.db.session import get_db
from liftlog.models.set_record import SetRecord
from liftlog.schemas.exercise import (
    LoggedExerciseCreate,
    LoggedExerciseRead,
    SetLogResult,
    SetRecordCreate,
    SetRecordRead,
    SetRecordUpdate,
)
from liftlog.services import workout_log
from liftlog.services.dates import parse_date_param
from liftlog.services.pr_detection import detect_pr, find_best_set_id
from liftlog.services.preferences import PreferenceManager
from liftlog.services.units import format_set_for_display

logger = logging.getLogger(__name__)

router = APIRouter()


def _invalid_set(exc: SetValidationError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={"exercise_type": exc.exercise_type, "errors": exc.errors},
    )


def _unknown_type(exc: UnknownExerciseTypeError) -> HTTPException:
    logger.error("Unknown exercise type %r", exc.tag)
    return HTTPException(status_code=400, detail=str(exc))


async def _log_result(
    db: AsyncSession,
    exercise,
    record: SetRecord,
    preferences: PreferenceManager,
) -> SetLogResult:
    """PB check against every other stored set of the definition, plus the best set of this exercise."""
    is_pb, previous_best = await detect_pr(
        db, exercise.definition_id, record, exercise.type, exclude_set_id=record.id
    )
    sets = await workout_log.fetch_sets_for_exercise(db, exercise.id)
    units = preferences.units
    return SetLogResult(
        set=SetRecordRead.model_validate(record),
        is_personal_best=is_pb,
        previous_best=SetRecordRead.model_validate(previous_best) if previous_best is not None else None,
        best_set_id=find_best_set_id(sets, exercise.type),
        display=format_set_for_display(exercise.type, record, units.weight_unit, units.distance_unit),
    )


@router.get("", response_model=list[LoggedExerciseRead])
async def list_exercises_for_date(
    date: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    """Exercises logged on a date (today when missing or malformed)."""
    return await workout_log.fetch_exercises_for_date(db, parse_date_param(date))


@router.get("/last", response_model=LoggedExerciseRead | None)
async def last_exercise(
    name: str,
    exclude_date: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    """Most recent session of an exercise, for 'last time' hints while logging."""
    return await workout_log.fetch_last_exercise_by_name(db, name, exclude_date)


@router.post("", response_model=LoggedExerciseRead, status_code=201)
async def log_exercise(
    payload: LoggedExerciseCreate,
    db: AsyncSession = Depends(get_db),
):
    """Start (or reopen) an exercise on a date."""
    if await workout_log.get_definition(db, payload.definition_id) is None:
        raise HTTPException(status_code=404, detail="Exercise definition not found")
    return await workout_log.log_exercise(db, payload.definition_id, payload.date)


@router.get("/{exercise_id}", response_model=LoggedExerciseRead)
async def get_exercise(
    exercise_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    exercise = await workout_log.get_logged_exercise(db, exercise_id)
    if not exercise:
        raise HTTPException(status_code=404, detail="Exercise not found")
    return exercise


@router.delete("/{exercise_id}", status_code=204)
async def delete_exercise(
    exercise_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete a logged exercise and its sets."""
    if not await workout_log.delete_exercise(db, exercise_id):
        raise HTTPException(status_code=404, detail="Exercise not found")
    return None


@router.post("/{exercise_id}/sets", response_model=SetLogResult, status_code=201)
async def add_set(
    exercise_id: UUID,
    payload: SetRecordCreate,
    db: AsyncSession = Depends(get_db),
    preferences: PreferenceManager = Depends(get_preferences),
):
    """Add a set. Values are canonical units (kg, km, seconds)."""
    exercise = await workout_log.get_logged_exercise(db, exercise_id)
    if not exercise:
        raise HTTPException(status_code=404, detail="Exercise not found")
    try:
        record = await workout_log.add_set(db, exercise, payload)
        return await _log_result(db, exercise, record, preferences)
    except SetValidationError as e:
        raise _invalid_set(e) from e
    except UnknownExerciseTypeError as e:
        raise _unknown_type(e) from e


@router.patch("/sets/{set_id}", response_model=SetLogResult)
async def update_set(
    set_id: UUID,
    payload: SetRecordUpdate,
    db: AsyncSession = Depends(get_db),
    preferences: PreferenceManager = Depends(get_preferences),
):
    """Edit a set (partial). The edited set is re-checked for a personal best."""
    record = await workout_log.get_set(db, set_id)
    if not record:
        raise HTTPException(status_code=404, detail="Set not found")
    exercise = await workout_log.get_logged_exercise(db, record.exercise_id)
    try:
        record = await workout_log.update_set(db, record, exercise.type, payload)
        return await _log_result(db, exercise, record, preferences)
    except SetValidationError as e:
        raise _invalid_set(e) from e
    except UnknownExerciseTypeError as e:
        raise _unknown_type(e) from e


@router.delete("/sets/{set_id}", status_code=204)
async def delete_set(
    set_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    record = await workout_log.get_set(db, set_id)
    if not record:
        raise HTTPException(status_code=404, detail="Set not found")
    await workout_log.delete_set(db, record)
    return None
