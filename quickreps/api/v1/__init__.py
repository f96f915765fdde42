"""API v1 router aggregation."""

from fastapi import APIRouter

from quickreps.api.v1.endpoints import (
    auth,
    buffer,
    exercises,
    health,
    logs,
    profile,
    sets,
    summary,
    telemetry,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(profile.router, prefix="/profile", tags=["profile"])
api_router.include_router(exercises.router, prefix="/exercises", tags=["exercises"])
api_router.include_router(buffer.router, prefix="/exercises", tags=["quick-entry"])
api_router.include_router(sets.router, prefix="/sets", tags=["sets"])
api_router.include_router(summary.router, prefix="/summary", tags=["summary"])
api_router.include_router(telemetry.router, prefix="/telemetry", tags=["telemetry"])
api_router.include_router(logs.router, prefix="/logs", tags=["logs"])
