"""Calendar screens: month marks, agenda, charts and the inputs that drive them."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from liftlog.api.v1.deps import get_calendar_service
from liftlog.core.enums import ChartMetric, ChartPeriod, ViewMode
from liftlog.schemas.calendar import AgendaPage, CalendarMark, CalendarSnapshot, ChartSeries
from liftlog.services.aggregation import metric_value
from liftlog.services.calendar_data import CalendarDataService

router = APIRouter()


class ChartExerciseRequest(BaseModel):
    name: str


@router.get("", response_model=CalendarSnapshot)
async def get_snapshot(service: CalendarDataService = Depends(get_calendar_service)):
    """Refresh and return everything the calendar screens show."""
    return await service.refresh()


@router.get("/marks", response_model=dict[str, CalendarMark])
async def get_marks(
    month: str | None = None,
    service: CalendarDataService = Depends(get_calendar_service),
):
    """Dates with workouts around a month (YYYY-MM-DD anywhere in it; today when omitted)."""
    if month is not None:
        return (await service.set_current_month(month)).marked_dates
    return (await service.refresh()).marked_dates


@router.get("/agenda", response_model=AgendaPage)
async def get_agenda(
    show_rest_days: bool | None = None,
    service: CalendarDataService = Depends(get_calendar_service),
):
    if show_rest_days is not None:
        return (await service.set_show_rest_days(show_rest_days)).agenda
    return (await service.refresh()).agenda


@router.post("/agenda/load-more", response_model=AgendaPage)
async def load_more(service: CalendarDataService = Depends(get_calendar_service)):
    """Show 30 more days when the agenda has more."""
    return (await service.load_more()).agenda


@router.get("/charts", response_model=ChartSeries)
async def get_charts(
    period: int | None = None,
    service: CalendarDataService = Depends(get_calendar_service),
):
    """Selected exercises' chart data; `period` is one of 1, 30, 90, 180, 365 or 0 (all time)."""
    if period is not None:
        try:
            chart_period = ChartPeriod(period)
        except ValueError:
            raise HTTPException(status_code=422, detail=f"Unsupported chart period: {period}") from None
        return (await service.set_chart_period(chart_period)).chart
    return (await service.refresh()).chart


@router.get("/charts/series")
async def get_metric_series(
    metric: ChartMetric = ChartMetric.BEST_WEIGHT,
    service: CalendarDataService = Depends(get_calendar_service),
):
    """Plot-ready values of one metric per selected exercise."""
    snapshot = await service.refresh()
    return {
        "metric": metric.value,
        "series": [
            {
                "name": exercise.name,
                "color": exercise.color,
                "points": [
                    {"date": p.date, "value": metric_value(p, metric)}
                    for p in snapshot.chart.points.get(exercise.name, [])
                ],
            }
            for exercise in snapshot.selected_exercises
        ],
    }


@router.post("/charts/exercises", response_model=CalendarSnapshot)
async def add_chart_exercise(
    payload: ChartExerciseRequest,
    service: CalendarDataService = Depends(get_calendar_service),
):
    return await service.add_chart_exercise(payload.name)


@router.delete("/charts/exercises/{name}", response_model=CalendarSnapshot)
async def remove_chart_exercise(
    name: str,
    service: CalendarDataService = Depends(get_calendar_service),
):
    return await service.remove_chart_exercise(name)


@router.delete("/charts/exercises", response_model=CalendarSnapshot)
async def clear_chart_exercises(service: CalendarDataService = Depends(get_calendar_service)):
    return await service.clear_chart_exercises()


@router.put("/selected-date", response_model=CalendarSnapshot)
async def select_date(
    date: str | None = None,
    service: CalendarDataService = Depends(get_calendar_service),
):
    """Select a day; malformed dates fall back to today."""
    return await service.set_selected_date(date)


@router.put("/view-mode", response_model=CalendarSnapshot)
async def set_view_mode(
    mode: ViewMode,
    service: CalendarDataService = Depends(get_calendar_service),
):
    return await service.set_view_mode(mode)
