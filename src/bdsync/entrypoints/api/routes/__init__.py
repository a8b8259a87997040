"""API route modules."""

from fastapi import APIRouter

from bdsync.entrypoints.api.routes.analysis import router as analysis_router
from bdsync.entrypoints.api.routes.dashboard import router as dashboard_router
from bdsync.entrypoints.api.routes.invitations import router as invitations_router
from bdsync.entrypoints.api.routes.meetings import router as meetings_router
from bdsync.entrypoints.api.routes.session import router as session_router
from bdsync.entrypoints.api.routes.teams import router as teams_router

# Create main API router
api_router = APIRouter()

api_router.include_router(session_router)  # No session required
api_router.include_router(invitations_router)
api_router.include_router(dashboard_router)
api_router.include_router(teams_router)
api_router.include_router(meetings_router)
api_router.include_router(analysis_router)

__all__ = ["api_router"]
