"""Preference schemas - unit and view preferences persisted in the key/value store."""

from pydantic import BaseModel, Field

from liftlog.core.constants import DEFAULT_KG_INCREMENT
from liftlog.core.enums import ChartPeriod, DistanceUnit, ThemePreference, ViewMode, WeightUnit
from liftlog.schemas.calendar import ChartExercise


class UnitPreferences(BaseModel):
    weight_unit: WeightUnit = WeightUnit.KG
    distance_unit: DistanceUnit = DistanceUnit.KM
    weight_increment: float = Field(default=DEFAULT_KG_INCREMENT, gt=0)


class ViewPreferences(BaseModel):
    view_mode: ViewMode = ViewMode.CALENDAR
    show_rest_days: bool = False
    chart_period: ChartPeriod = ChartPeriod.QUARTER
    chart_exercises: list[ChartExercise] = []
    theme: ThemePreference = ThemePreference.SYSTEM
    show_only_used_exercises: bool = False


class PreferencesRead(BaseModel):
    units: UnitPreferences
    view: ViewPreferences


class UnitPreferencesUpdate(BaseModel):
    weight_unit: WeightUnit | None = None
    distance_unit: DistanceUnit | None = None
    weight_increment: float | None = Field(None, gt=0)


class ViewPreferencesUpdate(BaseModel):
    view_mode: ViewMode | None = None
    show_rest_days: bool | None = None
    chart_period: ChartPeriod | None = None
    theme: ThemePreference | None = None
    show_only_used_exercises: bool | None = None
