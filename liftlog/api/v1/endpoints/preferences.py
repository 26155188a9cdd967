"""Preference endpoints. Changes apply immediately; saving happens in the background."""

from fastapi import APIRouter, Depends

from liftlog.api.v1.deps import get_preferences
from liftlog.schemas.preferences import PreferencesRead, UnitPreferencesUpdate, ViewPreferencesUpdate
from liftlog.services.preferences import PreferenceManager

router = APIRouter()


@router.get("", response_model=PreferencesRead)
async def get_preferences_endpoint(preferences: PreferenceManager = Depends(get_preferences)):
    return preferences.snapshot()


@router.patch("/units", response_model=PreferencesRead)
async def update_units(
    payload: UnitPreferencesUpdate,
    preferences: PreferenceManager = Depends(get_preferences),
):
    if payload.weight_unit is not None:
        preferences.set_weight_unit(payload.weight_unit)
    if payload.distance_unit is not None:
        preferences.set_distance_unit(payload.distance_unit)
    if payload.weight_increment is not None:
        preferences.set_weight_increment(payload.weight_increment)
    return preferences.snapshot()


@router.patch("/view", response_model=PreferencesRead)
async def update_view(
    payload: ViewPreferencesUpdate,
    preferences: PreferenceManager = Depends(get_preferences),
):
    """Theme and calendar view settings (chart exercises are managed under /calendar)."""
    if payload.view_mode is not None:
        preferences.set_view_mode(payload.view_mode)
    if payload.show_rest_days is not None:
        preferences.set_show_rest_days(payload.show_rest_days)
    if payload.chart_period is not None:
        preferences.set_chart_period(payload.chart_period)
    if payload.theme is not None:
        preferences.set_theme(payload.theme)
    if payload.show_only_used_exercises is not None:
        preferences.set_show_only_used_exercises(payload.show_only_used_exercises)
    return preferences.snapshot()
