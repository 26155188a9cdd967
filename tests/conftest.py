"""
Shared fixtures. Database tests run against a fresh in-memory SQLite database
(aiosqlite) per test; service tests use the in-memory fakes below.
"""

import asyncio
import os
import uuid
from datetime import datetime, timezone

# Settings are cached on first import; point them at memory before anything loads
os.environ["DATABASE_PATH"] = ":memory:"
os.environ["SEED_ON_STARTUP"] = "false"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from liftlog.db.base import Base  # noqa: E402
from liftlog.db.session import build_engine, build_session_maker  # noqa: E402
from liftlog.schemas.calendar import ChartDataPoint, ExerciseHistoryEntry  # noqa: E402
from liftlog.schemas.exercise import LoggedExerciseRead, SetRecordRead  # noqa: E402
from liftlog.services.aggregation import build_chart_points, build_set_history  # noqa: E402

import liftlog.models  # noqa: E402, F401 - register all models


@pytest_asyncio.fixture
async def session_maker():
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield build_session_maker(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


# ─── Fakes ───────────────────────────────────────────────────────────────────


class FakeWorkoutStorage:
    """In-memory WorkoutStorage. Set `fail` to make every call raise, `delay` to slow calls down."""

    def __init__(self, exercises=None):
        self.exercises = list(exercises or [])
        self.fail = False
        self.delay = 0.0
        self.calls: list[str] = []

    async def _tick(self, name: str):
        self.calls.append(name)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise OSError("storage unavailable")

    async def get_dates_with_exercises(self, start_date, end_date):
        await self._tick("dates")
        return sorted({e.date for e in self.exercises if start_date <= e.date <= end_date})

    async def get_all_exercises_with_sets(self):
        await self._tick("all")
        return list(self.exercises)

    async def get_used_exercises(self):
        await self._tick("used")
        seen = {}
        for e in self.exercises:
            seen.setdefault(e.name, {"name": e.name, "type": e.type})
        return [seen[name] for name in sorted(seen)]

    def _history(self, exercise_name, start_date, end_date):
        return [
            e for e in sorted(self.exercises, key=lambda e: e.date)
            if e.name == exercise_name and start_date <= e.date <= end_date
        ]

    async def get_exercise_history_for_chart(self, exercise_name, start_date, end_date) -> list[ChartDataPoint]:
        await self._tick(f"chart:{exercise_name}")
        return build_chart_points(self._history(exercise_name, start_date, end_date))

    async def get_exercise_history_with_sets(
        self, exercise_name, start_date, end_date
    ) -> list[ExerciseHistoryEntry]:
        await self._tick(f"history:{exercise_name}")
        return build_set_history(self._history(exercise_name, start_date, end_date))


class FakePreferenceStore:
    def __init__(self, values=None):
        self.values = dict(values or {})
        self.fail_reads = False
        self.fail_writes = False

    async def get(self, key):
        if self.fail_reads:
            raise OSError("preferences unavailable")
        return self.values.get(key)

    async def set(self, key, value):
        if self.fail_writes:
            raise OSError("disk full")
        self.values[key] = value


@pytest.fixture
def preference_store():
    return FakePreferenceStore()


@pytest.fixture
def storage_factory():
    return FakeWorkoutStorage


@pytest.fixture
def make_exercise():
    """make_exercise("Bench", "weight_reps", "2024-01-01", [{"weight": 100, "reps": 5}])"""

    def _make(name, exercise_type, date, sets=()):
        return LoggedExerciseRead(
            id=uuid.uuid4(),
            definition_id=uuid.uuid5(uuid.NAMESPACE_URL, name),
            name=name,
            type=exercise_type,
            date=date,
            sets=[
                SetRecordRead(
                    id=uuid.uuid4(),
                    timestamp=datetime(2024, 1, 1, 12, 0, i, tzinfo=timezone.utc),
                    **values,
                )
                for i, values in enumerate(sets)
            ],
        )

    return _make
