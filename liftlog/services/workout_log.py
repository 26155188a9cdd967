"""Queries and writes for exercise definitions, logged exercises and sets.

Every function takes the caller's AsyncSession, the way endpoint code does;
SqlWorkoutStorage wraps the read side with one session per call.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from liftlog.core.enums import ExerciseType
from liftlog.core.exercise_types import validate_set
from liftlog.models.exercise import ExerciseDefinition, LoggedExercise
from liftlog.models.set_record import SetRecord
from liftlog.schemas.exercise import (
    ExerciseDefinitionCreate,
    ExerciseDefinitionUpdate,
    LoggedExerciseRead,
    SetValues,
    UsedExercise,
)
from liftlog.services.dates import get_today

logger = logging.getLogger(__name__)


def _with_sets(stmt):
    # populate_existing so collections already in the session pick up new sets
    return stmt.options(
        selectinload(LoggedExercise.definition),
        selectinload(LoggedExercise.sets),
    ).execution_options(populate_existing=True)


def _to_read(rows: list[LoggedExercise]) -> list[LoggedExerciseRead]:
    return [LoggedExerciseRead.model_validate(row) for row in rows]


# ── Definitions ──────────────────────────────────────────────────────────

async def list_definitions(db: AsyncSession) -> list[ExerciseDefinition]:
    result = await db.execute(select(ExerciseDefinition).order_by(ExerciseDefinition.name))
    return list(result.scalars().all())


async def get_definition(db: AsyncSession, definition_id: uuid.UUID) -> ExerciseDefinition | None:
    result = await db.execute(select(ExerciseDefinition).where(ExerciseDefinition.id == definition_id))
    return result.scalar_one_or_none()


async def get_definition_by_name(
    db: AsyncSession,
    name: str,
    exclude_id: uuid.UUID | None = None,
) -> ExerciseDefinition | None:
    """Case- and whitespace-insensitive lookup, so "Squat" and " squat" are the same exercise."""
    stmt = select(ExerciseDefinition).where(func.lower(ExerciseDefinition.name) == name.strip().lower())
    if exclude_id is not None:
        stmt = stmt.where(ExerciseDefinition.id != exclude_id)
    result = await db.execute(stmt.limit(1))
    return result.scalar_one_or_none()


async def create_definition(db: AsyncSession, payload: ExerciseDefinitionCreate) -> ExerciseDefinition:
    data = payload.model_dump()
    data["name"] = data["name"].strip()
    definition = ExerciseDefinition(**data)
    db.add(definition)
    await db.flush()
    await db.refresh(definition)
    return definition


async def update_definition(
    db: AsyncSession,
    definition: ExerciseDefinition,
    payload: ExerciseDefinitionUpdate,
) -> ExerciseDefinition:
    changes = payload.model_dump(exclude_unset=True)
    for field in ("name", "category"):
        if changes.get(field) is not None:
            changes[field] = changes[field].strip()
    for field, value in changes.items():
        setattr(definition, field, value)
    await db.flush()
    await db.refresh(definition)
    logger.info("Updated exercise definition %s (%s)", definition.id, ", ".join(sorted(changes)))
    return definition


async def set_definitions_category(db: AsyncSession, ids: list[uuid.UUID], category: str) -> int:
    """Move every listed definition to one category. Returns how many rows changed."""
    result = await db.execute(
        update(ExerciseDefinition)
        .where(ExerciseDefinition.id.in_(ids))
        .values(category=category.strip())
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount


async def delete_definitions(db: AsyncSession, ids: list[uuid.UUID]) -> int:
    """Delete definitions; their logged exercises and sets go with them (ON DELETE CASCADE)."""
    result = await db.execute(
        delete(ExerciseDefinition)
        .where(ExerciseDefinition.id.in_(ids))
        .execution_options(synchronize_session="fetch")
    )
    logger.info("Deleted %d exercise definitions", result.rowcount)
    return result.rowcount


# ── Logged exercises ─────────────────────────────────────────────────────

async def get_logged_exercise(db: AsyncSession, exercise_id: uuid.UUID) -> LoggedExercise | None:
    result = await db.execute(_with_sets(select(LoggedExercise).where(LoggedExercise.id == exercise_id)))
    return result.scalar_one_or_none()


async def log_exercise(db: AsyncSession, definition_id: uuid.UUID, date: str | None = None) -> LoggedExercise:
    """Return the exercise for (definition, date), creating it if this is the first entry that day."""
    date = date or get_today()
    result = await db.execute(
        _with_sets(
            select(LoggedExercise).where(
                LoggedExercise.definition_id == definition_id,
                LoggedExercise.date == date,
            )
        ).limit(1)
    )
    existing = result.scalar_one_or_none()
    if existing is not None:
        return existing

    exercise = LoggedExercise(definition_id=definition_id, date=date)
    db.add(exercise)
    await db.flush()
    created = await get_logged_exercise(db, exercise.id)
    logger.debug("Logged exercise %s on %s", definition_id, date)
    return created


async def delete_exercise(db: AsyncSession, exercise_id: uuid.UUID) -> bool:
    exercise = await get_logged_exercise(db, exercise_id)
    if exercise is None:
        return False
    await db.delete(exercise)
    await db.flush()
    return True


async def fetch_dates_with_exercises(db: AsyncSession, start_date: str, end_date: str) -> list[str]:
    """Distinct dates in [start_date, end_date] with at least one logged exercise, ascending."""
    result = await db.execute(
        select(LoggedExercise.date)
        .where(LoggedExercise.date >= start_date, LoggedExercise.date <= end_date)
        .distinct()
        .order_by(LoggedExercise.date)
    )
    return [row for row in result.scalars().all()]


async def fetch_all_exercises_with_sets(db: AsyncSession) -> list[LoggedExerciseRead]:
    result = await db.execute(
        _with_sets(select(LoggedExercise)).order_by(LoggedExercise.date, LoggedExercise.created_at)
    )
    return _to_read(list(result.scalars().all()))


async def fetch_exercises_for_date(db: AsyncSession, date: str) -> list[LoggedExerciseRead]:
    result = await db.execute(
        _with_sets(select(LoggedExercise))
        .where(LoggedExercise.date == date)
        .order_by(LoggedExercise.created_at)
    )
    return _to_read(list(result.scalars().all()))


async def fetch_used_exercises(db: AsyncSession) -> list[UsedExercise]:
    """Definitions logged at least once, by name."""
    result = await db.execute(
        select(ExerciseDefinition.name, ExerciseDefinition.type)
        .join(LoggedExercise, LoggedExercise.definition_id == ExerciseDefinition.id)
        .group_by(ExerciseDefinition.id, ExerciseDefinition.name, ExerciseDefinition.type)
        .order_by(ExerciseDefinition.name)
    )
    return [UsedExercise(name=row.name, type=row.type) for row in result.all()]


async def fetch_exercise_history(
    db: AsyncSession,
    exercise_name: str,
    start_date: str,
    end_date: str,
) -> list[LoggedExerciseRead]:
    """Every logged instance of the named exercise in the date range, oldest first."""
    result = await db.execute(
        _with_sets(select(LoggedExercise))
        .join(ExerciseDefinition, ExerciseDefinition.id == LoggedExercise.definition_id)
        .where(
            ExerciseDefinition.name == exercise_name,
            LoggedExercise.date >= start_date,
            LoggedExercise.date <= end_date,
        )
        .order_by(LoggedExercise.date, LoggedExercise.created_at)
    )
    return _to_read(list(result.scalars().all()))


async def fetch_last_exercise_by_name(
    db: AsyncSession,
    exercise_name: str,
    exclude_date: str | None = None,
) -> LoggedExerciseRead | None:
    """Most recent instance of the exercise, optionally skipping a date (e.g. today)."""
    stmt = (
        _with_sets(select(LoggedExercise))
        .join(ExerciseDefinition, ExerciseDefinition.id == LoggedExercise.definition_id)
        .where(ExerciseDefinition.name == exercise_name)
    )
    if exclude_date is not None:
        stmt = stmt.where(LoggedExercise.date != exclude_date)
    result = await db.execute(
        stmt.order_by(LoggedExercise.date.desc(), LoggedExercise.created_at.desc()).limit(1)
    )
    row = result.scalar_one_or_none()
    return LoggedExerciseRead.model_validate(row) if row is not None else None


# ── Sets ─────────────────────────────────────────────────────────────────

async def fetch_sets_for_definition(db: AsyncSession, definition_id: uuid.UUID) -> list[SetRecord]:
    """All sets ever logged for a definition, in entry order."""
    result = await db.execute(
        select(SetRecord)
        .join(LoggedExercise, LoggedExercise.id == SetRecord.exercise_id)
        .where(LoggedExercise.definition_id == definition_id)
        .order_by(LoggedExercise.date, SetRecord.timestamp)
    )
    return list(result.scalars().all())


async def fetch_sets_for_exercise(db: AsyncSession, exercise_id: uuid.UUID) -> list[SetRecord]:
    result = await db.execute(
        select(SetRecord).where(SetRecord.exercise_id == exercise_id).order_by(SetRecord.timestamp)
    )
    return list(result.scalars().all())


async def get_set(db: AsyncSession, set_id: uuid.UUID) -> SetRecord | None:
    result = await db.execute(select(SetRecord).where(SetRecord.id == set_id))
    return result.scalar_one_or_none()


async def add_set(
    db: AsyncSession,
    exercise: LoggedExercise,
    values: SetValues,
) -> SetRecord:
    """Validate against the exercise type and store. Raises SetValidationError."""
    data = values.model_dump()
    validate_set(exercise.type, data)
    record = SetRecord(**data)
    exercise.sets.append(record)
    await db.flush()
    await db.refresh(record)
    return record


async def update_set(
    db: AsyncSession,
    record: SetRecord,
    exercise_type: ExerciseType,
    values: SetValues,
) -> SetRecord:
    """Apply only the fields sent, then re-validate the whole set."""
    changes = values.model_dump(exclude_unset=True)
    merged = {
        "weight": record.weight,
        "reps": record.reps,
        "distance": record.distance,
        "time": record.time,
        **changes,
    }
    validate_set(exercise_type, merged)
    for field, value in changes.items():
        setattr(record, field, value)
    await db.flush()
    await db.refresh(record)
    return record


async def delete_set(db: AsyncSession, record: SetRecord) -> None:
    await db.delete(record)
    await db.flush()
