"""Starter exercise definitions, inserted on first start."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from liftlog.core.enums import ExerciseType
from liftlog.models.exercise import ExerciseDefinition

logger = logging.getLogger(__name__)

# (name, category, type, unit, description)
SEED_DEFINITIONS: tuple[tuple[str, str, ExerciseType, str, str], ...] = (
    # Chest
    ("Barbell Bench Press", "Chest", ExerciseType.WEIGHT_REPS, "kg", "Standard bench press with barbell"),
    ("Dumbbell Bench Press", "Chest", ExerciseType.WEIGHT_REPS, "kg", "Bench press with dumbbells"),
    ("Incline Bench Press", "Chest", ExerciseType.WEIGHT_REPS, "kg", "Bench press on incline bench"),
    ("Push-ups", "Chest", ExerciseType.REPS, "reps", "Bodyweight push-ups"),
    # Back
    ("Deadlifts", "Back", ExerciseType.WEIGHT_REPS, "kg", "Conventional barbell deadlift"),
    ("Barbell Rows", "Back", ExerciseType.WEIGHT_REPS, "kg", "Bent-over barbell row"),
    ("Lat Pulldown", "Back", ExerciseType.WEIGHT_REPS, "kg", "Cable lat pulldown"),
    ("Pull-ups", "Back", ExerciseType.REPS, "reps", "Bodyweight pull-ups"),
    # Legs
    ("Barbell Squat", "Legs", ExerciseType.WEIGHT_REPS, "kg", "Back squat with barbell"),
    ("Leg Press", "Legs", ExerciseType.WEIGHT_REPS, "kg", "Machine leg press"),
    ("Walking Lunges", "Legs", ExerciseType.REPS_DISTANCE, "reps", "Lunges over a set distance"),
    # Shoulders
    ("Overhead Press", "Shoulders", ExerciseType.WEIGHT_REPS, "kg", "Standing barbell press"),
    ("Lateral Raises", "Shoulders", ExerciseType.WEIGHT_REPS, "kg", "Dumbbell lateral raises"),
    # Arms
    ("Barbell Curl", "Arms", ExerciseType.WEIGHT_REPS, "kg", "Standing barbell curl"),
    ("Tricep Dips", "Arms", ExerciseType.REPS, "reps", "Bodyweight dips"),
    # Core
    ("Plank", "Core", ExerciseType.TIME_DURATION, "sec", "Front plank hold"),
    ("Weighted Plank", "Core", ExerciseType.WEIGHT_TIME, "kg", "Plank with a plate on the back"),
    # Strength tests and carries
    ("One Rep Max Squat", "Legs", ExerciseType.WEIGHT, "kg", "Single heaviest squat"),
    ("Farmer's Walk", "Full Body", ExerciseType.WEIGHT_DISTANCE, "kg", "Loaded carry over distance"),
    # Cardio
    ("Running", "Cardio", ExerciseType.DISTANCE_TIME, "km", "Outdoor or treadmill run"),
    ("Cycling", "Cardio", ExerciseType.DISTANCE_TIME, "km", "Road or stationary bike"),
    ("Walking", "Cardio", ExerciseType.DISTANCE, "km", "Walk, distance only"),
    ("Sprints", "Cardio", ExerciseType.TIME_SPEED, "sec", "Timed sprint, faster is better"),
    ("Burpees", "Cardio", ExerciseType.REPS_TIME, "reps", "Burpees for time"),
    ("Jump Rope", "Cardio", ExerciseType.REPS_TIME, "reps", "Skips for time"),
)


async def seed_definitions(db: AsyncSession) -> int:
    """Insert any starter definition not already present by name. Returns how many were added."""
    result = await db.execute(select(ExerciseDefinition.name))
    existing = {name.lower() for name in result.scalars().all()}
    added = 0
    for name, category, ex_type, unit, description in SEED_DEFINITIONS:
        if name.lower() in existing:
            continue
        db.add(
            ExerciseDefinition(
                name=name,
                category=category,
                type=ex_type,
                unit=unit,
                description=description,
            )
        )
        added += 1
    if added:
        await db.flush()
        logger.info("Seeded %d exercise definitions", added)
    return added
