"""User preferences: units, theme and calendar view state.

PreferenceManager owns the in-memory copy. Setters change it immediately and
persist in the background; a failed write is logged and the new value stays
in effect for the session.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Protocol

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from liftlog.core.constants import (
    CALENDAR_VIEW_KEY,
    CHART_EXERCISES_KEY,
    CHART_PERIOD_KEY,
    DISTANCE_UNIT_KEY,
    SHOW_EMPTY_DAYS_KEY,
    THEME_KEY,
    USED_EXERCISE_FILTER_KEY,
    WEIGHT_INCREMENT_KEY,
    WEIGHT_UNIT_KEY,
)
from liftlog.core.enums import ChartPeriod, DistanceUnit, ThemePreference, ViewMode, WeightUnit
from liftlog.models.preference import Preference
from liftlog.schemas.calendar import ChartExercise
from liftlog.schemas.preferences import PreferencesRead, UnitPreferences, ViewPreferences
from liftlog.services.units import default_increment

logger = logging.getLogger(__name__)


class PreferenceStore(Protocol):
    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any) -> None: ...


class SqlPreferenceStore:
    """Key/value rows in the preferences table."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    async def get(self, key: str) -> Any | None:
        async with self._session_maker() as db:
            result = await db.execute(select(Preference.value).where(Preference.key == key))
            return result.scalar_one_or_none()

    async def set(self, key: str, value: Any) -> None:
        """Insert or overwrite in one statement."""
        now = datetime.now(timezone.utc)
        stmt = insert(Preference).values(key=key, value=value, updated_at=now)
        stmt = stmt.on_conflict_do_update(
            index_elements=[Preference.key],
            set_={"value": stmt.excluded.value, "updated_at": stmt.excluded.updated_at},
        )
        async with self._session_maker() as db:
            await db.execute(stmt)
            await db.commit()


# (attribute on UnitPreferences / ViewPreferences, key, validator)
_UNIT_FIELDS: tuple[tuple[str, str, TypeAdapter], ...] = (
    ("weight_unit", WEIGHT_UNIT_KEY, TypeAdapter(WeightUnit)),
    ("distance_unit", DISTANCE_UNIT_KEY, TypeAdapter(DistanceUnit)),
)
_INCREMENT_ADAPTER = TypeAdapter(float)
_VIEW_FIELDS: tuple[tuple[str, str, TypeAdapter], ...] = (
    ("view_mode", CALENDAR_VIEW_KEY, TypeAdapter(ViewMode)),
    ("show_rest_days", SHOW_EMPTY_DAYS_KEY, TypeAdapter(bool)),
    ("chart_period", CHART_PERIOD_KEY, TypeAdapter(ChartPeriod)),
    ("chart_exercises", CHART_EXERCISES_KEY, TypeAdapter(list[ChartExercise])),
    ("theme", THEME_KEY, TypeAdapter(ThemePreference)),
    ("show_only_used_exercises", USED_EXERCISE_FILTER_KEY, TypeAdapter(bool)),
)


def _parse(adapter: TypeAdapter, key: str, raw: Any) -> Any | None:
    if raw is None:
        return None
    try:
        return adapter.validate_python(raw)
    except ValidationError:
        logger.warning("Ignoring invalid stored value for %s: %r", key, raw)
        return None


class PreferenceManager:
    def __init__(self, store: PreferenceStore):
        self._store = store
        self.units = UnitPreferences()
        self.view = ViewPreferences()
        self._pending: set[asyncio.Task] = set()
        # Writes go through one lock so they reach the store in the order they were made
        self._write_lock = asyncio.Lock()

    def snapshot(self) -> PreferencesRead:
        return PreferencesRead(units=self.units, view=self.view)

    async def load(self) -> PreferencesRead:
        """Read every key at once. Missing or invalid values fall back to defaults."""
        fields = (*_UNIT_FIELDS, *_VIEW_FIELDS)
        keys = [key for _, key, _ in fields] + [WEIGHT_INCREMENT_KEY]
        try:
            raw_values = await asyncio.gather(*(self._store.get(key) for key in keys))
        except Exception:
            logger.exception("Failed to load preferences, using defaults")
            return self.snapshot()
        raw = dict(zip(keys, raw_values))

        unit_values = {}
        for attr, key, adapter in _UNIT_FIELDS:
            value = _parse(adapter, key, raw[key])
            if value is not None:
                unit_values[attr] = value
        weight_unit = unit_values.get("weight_unit", WeightUnit.KG)
        increment = _parse(_INCREMENT_ADAPTER, WEIGHT_INCREMENT_KEY, raw[WEIGHT_INCREMENT_KEY])
        unit_values["weight_increment"] = (
            increment if increment is not None and increment > 0 else default_increment(weight_unit)
        )
        self.units = UnitPreferences(**unit_values)

        view_values = {}
        for attr, key, adapter in _VIEW_FIELDS:
            value = _parse(adapter, key, raw[key])
            if value is not None:
                view_values[attr] = value
        self.view = ViewPreferences(**view_values)

        logger.info(
            "Preferences loaded: weight=%s distance=%s view=%s",
            self.units.weight_unit.value,
            self.units.distance_unit.value,
            self.view.view_mode.value,
        )
        return self.snapshot()

    # ── Persistence ──────────────────────────────────────────────────────

    async def _persist(self, key: str, value: Any) -> None:
        async with self._write_lock:
            try:
                await self._store.set(key, value)
            except Exception:
                logger.exception("Failed to save preference %s", key)

    def _schedule(self, key: str, value: Any) -> None:
        task = asyncio.create_task(self._persist(key, value))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def flush(self) -> None:
        """Wait for every scheduled write (shutdown, tests)."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    # ── Units ────────────────────────────────────────────────────────────

    def set_weight_unit(self, unit: WeightUnit | str) -> None:
        unit = WeightUnit(unit)
        self.units = self.units.model_copy(update={"weight_unit": unit})
        self._schedule(WEIGHT_UNIT_KEY, unit.value)

    def set_distance_unit(self, unit: DistanceUnit | str) -> None:
        unit = DistanceUnit(unit)
        self.units = self.units.model_copy(update={"distance_unit": unit})
        self._schedule(DISTANCE_UNIT_KEY, unit.value)

    def set_weight_increment(self, increment: float) -> None:
        if not increment > 0:
            raise ValueError("weight increment must be greater than 0")
        self.units = self.units.model_copy(update={"weight_increment": float(increment)})
        self._schedule(WEIGHT_INCREMENT_KEY, float(increment))

    # ── View ─────────────────────────────────────────────────────────────

    def set_view_mode(self, mode: ViewMode | str) -> None:
        mode = ViewMode(mode)
        self.view = self.view.model_copy(update={"view_mode": mode})
        self._schedule(CALENDAR_VIEW_KEY, mode.value)

    def set_show_rest_days(self, show: bool) -> None:
        self.view = self.view.model_copy(update={"show_rest_days": show})
        self._schedule(SHOW_EMPTY_DAYS_KEY, show)

    def set_chart_period(self, period: ChartPeriod | int) -> None:
        period = ChartPeriod(period)
        self.view = self.view.model_copy(update={"chart_period": period})
        self._schedule(CHART_PERIOD_KEY, period.value)

    def set_chart_exercises(self, exercises: list[ChartExercise]) -> None:
        self.view = self.view.model_copy(update={"chart_exercises": list(exercises)})
        self._schedule(CHART_EXERCISES_KEY, [e.model_dump() for e in exercises])

    def set_theme(self, theme: ThemePreference | str) -> None:
        theme = ThemePreference(theme)
        self.view = self.view.model_copy(update={"theme": theme})
        self._schedule(THEME_KEY, theme.value)

    def set_show_only_used_exercises(self, show: bool) -> None:
        self.view = self.view.model_copy(update={"show_only_used_exercises": show})
        self._schedule(USED_EXERCISE_FILTER_KEY, show)
