"""API v1 router aggregation."""

from fastapi import APIRouter

from liftlog.api.v1.endpoints import (
    backup,
    calendar,
    exercise_definitions,
    exercises,
    export,
    health,
    pr,
    preferences,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(
    exercise_definitions.router, prefix="/exercise-definitions", tags=["exercise-definitions"]
)
api_router.include_router(exercises.router, prefix="/exercises", tags=["exercises"])

api_router.include_router(calendar.router, prefix="/calendar", tags=["calendar"])
api_router.include_router(preferences.router, prefix="/preferences", tags=["preferences"])
api_router.include_router(pr.router, prefix="/pr", tags=["pr"])
api_router.include_router(export.router, prefix="/export", tags=["export"])
api_router.include_router(backup.router, prefix="/backup", tags=["backup"])
