"""Read-side storage used by the calendar service.

The protocol is what CalendarDataService depends on; SqlWorkoutStorage backs it
with the SQLite database, opening one session per call so concurrent fetches
never share a session.
"""

from __future__ import annotations

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from liftlog.schemas.calendar import ChartDataPoint, ExerciseHistoryEntry
from liftlog.schemas.exercise import LoggedExerciseRead, UsedExercise
from liftlog.services import workout_log
from liftlog.services.aggregation import build_chart_points, build_set_history


class WorkoutStorage(Protocol):
    async def get_dates_with_exercises(self, start_date: str, end_date: str) -> list[str]: ...

    async def get_all_exercises_with_sets(self) -> list[LoggedExerciseRead]: ...

    async def get_used_exercises(self) -> list[UsedExercise]: ...

    async def get_exercise_history_for_chart(
        self, exercise_name: str, start_date: str, end_date: str
    ) -> list[ChartDataPoint]: ...

    async def get_exercise_history_with_sets(
        self, exercise_name: str, start_date: str, end_date: str
    ) -> list[ExerciseHistoryEntry]: ...


class SqlWorkoutStorage:
    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    async def get_dates_with_exercises(self, start_date: str, end_date: str) -> list[str]:
        async with self._session_maker() as db:
            return await workout_log.fetch_dates_with_exercises(db, start_date, end_date)

    async def get_all_exercises_with_sets(self) -> list[LoggedExerciseRead]:
        async with self._session_maker() as db:
            return await workout_log.fetch_all_exercises_with_sets(db)

    async def get_used_exercises(self) -> list[UsedExercise]:
        async with self._session_maker() as db:
            return await workout_log.fetch_used_exercises(db)

    async def get_exercise_history_for_chart(
        self, exercise_name: str, start_date: str, end_date: str
    ) -> list[ChartDataPoint]:
        async with self._session_maker() as db:
            history = await workout_log.fetch_exercise_history(db, exercise_name, start_date, end_date)
        return build_chart_points(history)

    async def get_exercise_history_with_sets(
        self, exercise_name: str, start_date: str, end_date: str
    ) -> list[ExerciseHistoryEntry]:
        async with self._session_maker() as db:
            history = await workout_log.fetch_exercise_history(db, exercise_name, start_date, end_date)
        return build_set_history(history)
