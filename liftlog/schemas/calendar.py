"""Calendar, agenda and chart view models."""

from pydantic import BaseModel, Field

from liftlog.core.constants import MARKED_DOT_COLOR
from liftlog.core.enums import ChartPeriod, ViewMode
from liftlog.schemas.exercise import LoggedExerciseRead, SetRecordRead, UsedExercise


class CalendarMark(BaseModel):
    marked: bool = True
    dot_color: str = MARKED_DOT_COLOR


class DaySection(BaseModel):
    """One agenda day. Empty data means a rest day."""

    date: str
    title: str
    data: list[LoggedExerciseRead] = []


class AgendaPage(BaseModel):
    sections: list[DaySection] = []
    has_more_data: bool = False
    total_days: int = 0


class ChartExercise(BaseModel):
    name: str = Field(..., min_length=1)
    color: str


class ChartDataPoint(BaseModel):
    """Per-day summary for one exercise. `value` is the primary metric of the day's best set."""

    date: str
    value: float = 0.0
    best_weight: float = 0.0
    best_reps: float = 0.0
    best_distance: float = 0.0
    best_time: float = 0.0
    total_volume: float = 0.0
    set_count: int = 0


class ExerciseHistoryEntry(BaseModel):
    date: str
    sets: list[SetRecordRead] = []


class ChartSeries(BaseModel):
    points: dict[str, list[ChartDataPoint]] = {}
    history: dict[str, list[ExerciseHistoryEntry]] = {}


class CalendarSnapshot(BaseModel):
    """Everything the calendar screens render, computed in one refresh."""

    generation: int = 0
    current_month: str
    selected_date: str
    view_mode: ViewMode = ViewMode.CALENDAR
    marked_dates: dict[str, CalendarMark] = {}
    agenda: AgendaPage = Field(default_factory=AgendaPage)
    days_to_show: int
    show_rest_days: bool = False
    chart_period: ChartPeriod = ChartPeriod.QUARTER
    selected_exercises: list[ChartExercise] = []
    chart: ChartSeries = Field(default_factory=ChartSeries)
    available_exercises: list[UsedExercise] = []
