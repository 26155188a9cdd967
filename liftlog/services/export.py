"""CSV export of every logged set, for spreadsheets."""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.core.exercise_types import EXERCISE_TYPE_LABELS, resolve_exercise_type
from liftlog.models.exercise import ExerciseDefinition, LoggedExercise
from liftlog.models.set_record import SetRecord
from liftlog.services.units import format_clock

logger = logging.getLogger(__name__)

CSV_HEADERS = (
    "Date",
    "Exercise",
    "Category",
    "Type",
    "Set #",
    "Weight",
    "Reps",
    "Distance",
    "Time (seconds)",
    "Time (formatted)",
)
NO_DATA_MESSAGE = "No workout data to export"


@dataclass
class ExportResult:
    success: bool
    file_name: str | None = None
    content: str | None = None
    record_count: int = 0
    error: str | None = None


def export_file_name(on: date | None = None) -> str:
    return f"workout-export-{(on or date.today()).isoformat()}.csv"


def _cell(value: float | int | None) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


async def fetch_export_rows(db: AsyncSession) -> list[list[str]]:
    """
    One row per set, newest date first, then exercise name, then entry order.
    Set numbers restart for each exercise instance; exercises without sets are skipped.
    """
    result = await db.execute(
        select(
            LoggedExercise.id,
            LoggedExercise.date,
            ExerciseDefinition.name,
            ExerciseDefinition.category,
            ExerciseDefinition.type,
            SetRecord.weight,
            SetRecord.reps,
            SetRecord.distance,
            SetRecord.time,
        )
        .join(ExerciseDefinition, ExerciseDefinition.id == LoggedExercise.definition_id)
        .join(SetRecord, SetRecord.exercise_id == LoggedExercise.id)
        .order_by(LoggedExercise.date.desc(), ExerciseDefinition.name, SetRecord.timestamp)
    )

    rows: list[list[str]] = []
    current_exercise = None
    set_number = 0
    for row in result.all():
        if row.weight is None and row.reps is None and row.distance is None and row.time is None:
            continue
        if row.id != current_exercise:
            current_exercise = row.id
            set_number = 1
        else:
            set_number += 1
        label = EXERCISE_TYPE_LABELS[resolve_exercise_type(row.type)]
        rows.append(
            [
                row.date,
                row.name,
                row.category,
                label,
                str(set_number),
                _cell(row.weight),
                _cell(row.reps),
                _cell(row.distance),
                _cell(row.time),
                format_clock(row.time) if row.time else "",
            ]
        )
    return rows


def render_csv(rows: list[list[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    writer.writerows(rows)
    return buffer.getvalue()


async def export_csv(db: AsyncSession, on: date | None = None) -> ExportResult:
    rows = await fetch_export_rows(db)
    if not rows:
        return ExportResult(success=False, error=NO_DATA_MESSAGE)
    file_name = export_file_name(on)
    logger.info("Exported %d sets to %s", len(rows), file_name)
    return ExportResult(
        success=True,
        file_name=file_name,
        content=render_csv(rows),
        record_count=len(rows),
    )
