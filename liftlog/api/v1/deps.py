"""Request dependencies for objects built once at startup."""

from fastapi import Request

from liftlog.services.calendar_data import CalendarDataService
from liftlog.services.preferences import PreferenceManager


def get_preferences(request: Request) -> PreferenceManager:
    return request.app.state.preferences


def get_calendar_service(request: Request) -> CalendarDataService:
    return request.app.state.calendar
