"""Turn logged exercises into calendar marks, agenda sections and chart series.

Pure functions over already-fetched data; nothing here touches storage or
mutates the records it is given.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from liftlog.core.constants import CHART_COLORS, MARKED_DOT_COLOR, PERIOD_DAYS
from liftlog.core.enums import ChartMetric, ChartPeriod, ExerciseType
from liftlog.core.exercise_types import set_value
from liftlog.schemas.calendar import (
    AgendaPage,
    CalendarMark,
    ChartDataPoint,
    ChartExercise,
    DaySection,
    ExerciseHistoryEntry,
)
from liftlog.schemas.exercise import LoggedExerciseRead, SetRecordRead
from liftlog.services.dates import (
    DateRange,
    add_days,
    format_display_date,
    get_today,
    iter_dates_descending,
)
from liftlog.services.pr_detection import find_best_set, get_comparison_rule


def build_calendar_marks(dates: Iterable[str]) -> dict[str, CalendarMark]:
    return {d: CalendarMark(marked=True, dot_color=MARKED_DOT_COLOR) for d in dates}


def group_by_date(exercises: Iterable[LoggedExerciseRead]) -> dict[str, list[LoggedExerciseRead]]:
    """Bucket exercises by date, keeping the order they were given in."""
    grouped: dict[str, list[LoggedExerciseRead]] = {}
    for exercise in exercises:
        grouped.setdefault(exercise.date, []).append(exercise)
    return grouped


def build_agenda(
    exercises: Sequence[LoggedExerciseRead],
    days_to_show: int,
    show_rest_days: bool,
    today: str | None = None,
) -> AgendaPage:
    """
    Newest-first day sections, paginated to days_to_show.

    With show_rest_days every date from max(today, most recent log) down to the
    oldest log gets a section, empty ones being rest days. has_more_data is set
    when the full date sequence is longer than the page.
    """
    grouped = group_by_date(exercises)
    logged_dates = sorted(grouped, reverse=True)
    if not logged_dates:
        return AgendaPage()

    if show_rest_days:
        today = today or get_today()
        newest = max(logged_dates[0], today)
        candidates = list(iter_dates_descending(newest, logged_dates[-1]))
    else:
        candidates = logged_dates

    sections = [
        DaySection(date=d, title=format_display_date(d), data=grouped.get(d, []))
        for d in candidates[:days_to_show]
    ]
    return AgendaPage(
        sections=sections,
        has_more_data=len(candidates) > days_to_show,
        total_days=len(candidates),
    )


def chart_date_range(period: ChartPeriod | int, today: str | None = None) -> DateRange:
    end = today or get_today()
    return DateRange(add_days(end, -PERIOD_DAYS[ChartPeriod(period)]), end)


def _best_time(sets: Sequence[Any], exercise_type: ExerciseType | str) -> float:
    times = [t for t in (set_value(s, "time") for s in sets) if t is not None]
    if not times:
        return 0.0
    # Where time is ranked lower-is-better, the best time is the fastest
    lower_wins = any(
        m.field == "time" and not m.higher_is_better for m in get_comparison_rule(exercise_type).metrics
    )
    return min(times) if lower_wins else max(times)


def _max_field(sets: Sequence[Any], field: str) -> float:
    return max((v for v in (set_value(s, field) for s in sets) if v is not None), default=0.0)


def summarize_day(date: str, sets: Sequence[Any], exercise_type: ExerciseType | str) -> ChartDataPoint:
    """One chart point: per-metric bests, volume and the primary metric of the day's best set."""
    best = find_best_set(sets, exercise_type)
    value = 0.0
    if best is not None:
        value = set_value(best, get_comparison_rule(exercise_type).primary.field) or 0.0

    volume = 0.0
    for s in sets:
        weight, reps = set_value(s, "weight"), set_value(s, "reps")
        if weight is not None and reps is not None:
            volume += weight * reps

    return ChartDataPoint(
        date=date,
        value=value,
        best_weight=_max_field(sets, "weight"),
        best_reps=_max_field(sets, "reps"),
        best_distance=_max_field(sets, "distance"),
        best_time=_best_time(sets, exercise_type),
        total_volume=round(volume, 2),
        set_count=len(sets),
    )


def _sets_by_date(exercises: Iterable[LoggedExerciseRead]) -> dict[str, list[SetRecordRead]]:
    by_date: dict[str, list[SetRecordRead]] = {}
    for exercise in exercises:
        by_date.setdefault(exercise.date, []).extend(exercise.sets)
    return by_date


def build_chart_points(exercises: Sequence[LoggedExerciseRead]) -> list[ChartDataPoint]:
    """Best-value-per-day series for one exercise, oldest first. Days without sets are skipped."""
    if not exercises:
        return []
    exercise_type = exercises[0].type
    return [
        summarize_day(d, sets, exercise_type)
        for d, sets in sorted(_sets_by_date(exercises).items())
        if sets
    ]


def build_set_history(exercises: Sequence[LoggedExerciseRead]) -> list[ExerciseHistoryEntry]:
    """Full sets per day for drill-down tables, oldest first."""
    return [
        ExerciseHistoryEntry(date=d, sets=sets)
        for d, sets in sorted(_sets_by_date(exercises).items())
        if sets
    ]


_METRIC_FIELDS: dict[ChartMetric, str] = {
    ChartMetric.BEST_WEIGHT: "best_weight",
    ChartMetric.BEST_REPS: "best_reps",
    ChartMetric.TOTAL_VOLUME: "total_volume",
    ChartMetric.BEST_TIME: "best_time",
    ChartMetric.BEST_DISTANCE: "best_distance",
}


def metric_value(point: ChartDataPoint, metric: ChartMetric | str) -> float:
    return getattr(point, _METRIC_FIELDS[ChartMetric(metric)]) or 0.0


def add_chart_exercise(selected: Sequence[ChartExercise], name: str) -> list[ChartExercise]:
    """Append an exercise with the next palette color. Already-selected names are ignored."""
    if any(e.name == name for e in selected):
        return list(selected)
    color = CHART_COLORS[len(selected) % len(CHART_COLORS)]
    return [*selected, ChartExercise(name=name, color=color)]


def remove_chart_exercise(selected: Sequence[ChartExercise], name: str) -> list[ChartExercise]:
    return [e for e in selected if e.name != name]
