"""Calendar, agenda and chart state for the calendar screens.

CalendarDataService keeps the screen inputs (visible month, selected date,
agenda page size) and the last computed CalendarSnapshot. Every refresh takes a
new generation number; a refresh that finishes after a newer one started is
dropped instead of overwriting newer state.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from liftlog.core.constants import CALENDAR_BUFFER_MONTHS, DEFAULT_DAYS_TO_SHOW, LOAD_MORE_DAYS
from liftlog.core.enums import ChartPeriod, ViewMode
from liftlog.schemas.calendar import CalendarSnapshot, ChartDataPoint, ChartSeries, ExerciseHistoryEntry
from liftlog.services.aggregation import (
    add_chart_exercise,
    build_agenda,
    build_calendar_marks,
    chart_date_range,
    remove_chart_exercise,
)
from liftlog.services.dates import get_calendar_date_range, get_today, parse_date_param
from liftlog.services.preferences import PreferenceManager
from liftlog.services.storage import WorkoutStorage

logger = logging.getLogger(__name__)


class CalendarDataService:
    def __init__(
        self,
        storage: WorkoutStorage,
        preferences: PreferenceManager,
        today: Callable[[], str] = get_today,
    ):
        self._storage = storage
        self._preferences = preferences
        self._today = today
        self.current_month = today()
        self.selected_date = today()
        self.days_to_show = DEFAULT_DAYS_TO_SHOW
        self._generation = 0
        self._snapshot = self._empty_snapshot()

    @property
    def snapshot(self) -> CalendarSnapshot:
        return self._snapshot

    @property
    def generation(self) -> int:
        return self._generation

    def _empty_snapshot(self) -> CalendarSnapshot:
        view = self._preferences.view
        return CalendarSnapshot(
            current_month=self.current_month,
            selected_date=self.selected_date,
            view_mode=view.view_mode,
            days_to_show=self.days_to_show,
            show_rest_days=view.show_rest_days,
            chart_period=view.chart_period,
            selected_exercises=view.chart_exercises,
        )

    async def _load_chart(self, names: list[str], period: ChartPeriod, today: str) -> ChartSeries:
        start, end = chart_date_range(period, today)
        points: dict[str, list[ChartDataPoint]] = {}
        history: dict[str, list[ExerciseHistoryEntry]] = {}
        # One exercise at a time; both forms of its history are fetched together
        for name in names:
            points[name], history[name] = await asyncio.gather(
                self._storage.get_exercise_history_for_chart(name, start, end),
                self._storage.get_exercise_history_with_sets(name, start, end),
            )
        return ChartSeries(points=points, history=history)

    async def refresh(self) -> CalendarSnapshot:
        """
        Recompute the snapshot from storage.
        On a storage error the previous snapshot is kept and returned.
        """
        self._generation += 1
        token = self._generation
        today = self._today()
        current_month = self.current_month
        selected_date = self.selected_date
        days_to_show = self.days_to_show
        view = self._preferences.view

        try:
            month_range = get_calendar_date_range(current_month, CALENDAR_BUFFER_MONTHS)
            dates, exercises, used = await asyncio.gather(
                self._storage.get_dates_with_exercises(month_range.start, month_range.end),
                self._storage.get_all_exercises_with_sets(),
                self._storage.get_used_exercises(),
            )
            chart = await self._load_chart(
                [e.name for e in view.chart_exercises], view.chart_period, today
            )
        except Exception:
            if token != self._generation:
                logger.debug("Calendar refresh %d failed after being superseded", token, exc_info=True)
            else:
                logger.exception("Calendar refresh %d failed, keeping previous data", token)
            return self._snapshot

        if token != self._generation:
            logger.debug("Discarding calendar refresh %d, superseded by %d", token, self._generation)
            return self._snapshot

        self._snapshot = CalendarSnapshot(
            generation=token,
            current_month=current_month,
            selected_date=selected_date,
            view_mode=view.view_mode,
            marked_dates=build_calendar_marks(dates),
            agenda=build_agenda(exercises, days_to_show, view.show_rest_days, today=today),
            days_to_show=days_to_show,
            show_rest_days=view.show_rest_days,
            chart_period=view.chart_period,
            selected_exercises=view.chart_exercises,
            chart=chart,
            available_exercises=used,
        )
        return self._snapshot

    # ── Inputs ───────────────────────────────────────────────────────────

    async def set_current_month(self, month: str | None) -> CalendarSnapshot:
        self.current_month = parse_date_param(month, self._today())
        return await self.refresh()

    async def set_selected_date(self, date: str | None) -> CalendarSnapshot:
        self.selected_date = parse_date_param(date, self._today())
        return await self.refresh()

    async def load_more(self) -> CalendarSnapshot:
        """Grow the agenda page when the last refresh reported more days."""
        if not self._snapshot.agenda.has_more_data:
            return self._snapshot
        self.days_to_show += LOAD_MORE_DAYS
        return await self.refresh()

    async def set_view_mode(self, mode: ViewMode | str) -> CalendarSnapshot:
        self._preferences.set_view_mode(mode)
        return await self.refresh()

    async def set_show_rest_days(self, show: bool) -> CalendarSnapshot:
        self._preferences.set_show_rest_days(show)
        return await self.refresh()

    async def toggle_rest_days(self) -> CalendarSnapshot:
        return await self.set_show_rest_days(not self._preferences.view.show_rest_days)

    async def set_chart_period(self, period: ChartPeriod | int) -> CalendarSnapshot:
        self._preferences.set_chart_period(period)
        return await self.refresh()

    async def add_chart_exercise(self, name: str) -> CalendarSnapshot:
        selected = self._preferences.view.chart_exercises
        updated = add_chart_exercise(selected, name)
        if len(updated) == len(selected):
            return self._snapshot
        self._preferences.set_chart_exercises(updated)
        return await self.refresh()

    async def remove_chart_exercise(self, name: str) -> CalendarSnapshot:
        self._preferences.set_chart_exercises(
            remove_chart_exercise(self._preferences.view.chart_exercises, name)
        )
        return await self.refresh()

    async def clear_chart_exercises(self) -> CalendarSnapshot:
        self._preferences.set_chart_exercises([])
        return await self.refresh()
