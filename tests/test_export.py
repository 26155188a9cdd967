"""Tests for CSV export."""

from datetime import date, datetime, timezone

import pytest

from liftlog.core.enums import ExerciseType
from liftlog.models.set_record import SetRecord
from liftlog.schemas.exercise import ExerciseDefinitionCreate, SetValues
from liftlog.services import workout_log
from liftlog.services.export import NO_DATA_MESSAGE, export_csv, export_file_name


def test_export_file_name():
    assert export_file_name(date(2026, 1, 28)) == "workout-export-2026-01-28.csv"


@pytest.mark.asyncio
async def test_export_empty_database(db):
    result = await export_csv(db)
    assert not result.success
    assert result.error == NO_DATA_MESSAGE


@pytest.mark.asyncio
async def test_export_rows(db):
    squat = await workout_log.create_definition(
        db, ExerciseDefinitionCreate(name="Squat", category="Legs, Glutes", type=ExerciseType.WEIGHT_REPS)
    )
    run = await workout_log.create_definition(
        db, ExerciseDefinitionCreate(name="Run", category="Cardio", type=ExerciseType.DISTANCE_TIME)
    )
    plank = await workout_log.create_definition(
        db, ExerciseDefinitionCreate(name="Plank", category="Core", type=ExerciseType.TIME_DURATION)
    )

    day1 = await workout_log.log_exercise(db, squat.id, "2024-01-01")
    await workout_log.add_set(db, day1, SetValues(weight=100, reps=5))
    await workout_log.add_set(db, day1, SetValues(weight=105, reps=3))
    squat_day3 = await workout_log.log_exercise(db, squat.id, "2024-01-03")
    await workout_log.add_set(db, squat_day3, SetValues(weight=110, reps=2))
    run_day3 = await workout_log.log_exercise(db, run.id, "2024-01-03")
    await workout_log.add_set(db, run_day3, SetValues(distance=5, time=1500))
    await workout_log.log_exercise(db, plank.id, "2024-01-02")

    result = await export_csv(db, on=date(2024, 1, 4))

    assert result.success
    assert result.file_name == "workout-export-2024-01-04.csv"
    assert result.record_count == 4
    assert result.content.splitlines() == [
        "Date,Exercise,Category,Type,Set #,Weight,Reps,Distance,Time (seconds),Time (formatted)",
        "2024-01-03,Run,Cardio,Distance & Time,1,,,5,1500,25:00",
        '2024-01-03,Squat,"Legs, Glutes",Weight & Reps,1,110,2,,,',
        '2024-01-01,Squat,"Legs, Glutes",Weight & Reps,1,100,5,,,',
        '2024-01-01,Squat,"Legs, Glutes",Weight & Reps,2,105,3,,,',
    ]


@pytest.mark.asyncio
async def test_empty_sets_do_not_leave_gaps_in_numbering(db):
    bench = await workout_log.create_definition(
        db, ExerciseDefinitionCreate(name="Bench", category="Chest", type=ExerciseType.WEIGHT_REPS)
    )
    exercise = await workout_log.log_exercise(db, bench.id, "2024-01-01")
    for second, values in enumerate([{"weight": 100, "reps": 5}, {}, {"weight": 105, "reps": 3}]):
        db.add(
            SetRecord(
                exercise_id=exercise.id,
                timestamp=datetime(2024, 1, 1, 12, 0, second, tzinfo=timezone.utc),
                **values,
            )
        )
    await db.flush()

    result = await export_csv(db)

    assert result.record_count == 2
    assert [line.split(",")[4] for line in result.content.splitlines()[1:]] == ["1", "2"]
