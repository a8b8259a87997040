"""Dashboard API route.

Resolves the landing surface from the signed-in user's role and team.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from bdsync.core.auth.guards import DashboardView, route_dashboard
from bdsync.core.exceptions import BdSyncError
from bdsync.entrypoints.api.deps import get_team_service
from bdsync.entrypoints.api.errors import to_http_exception
from bdsync.entrypoints.api.middleware.session_guard import RequireSession
from bdsync.entrypoints.api.routes.teams import TeamResponse
from bdsync.services import TeamService

router = APIRouter(tags=["dashboard"])

TeamServiceDep = Annotated[TeamService, Depends(get_team_service)]


class DashboardResponse(BaseModel):
    """Landing surface for the signed-in user."""

    view: DashboardView
    location: str | None = None
    team_id: str | None = None
    teams: list[TeamResponse] | None = None


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(user: RequireSession, teams: TeamServiceDep) -> DashboardResponse:
    """Get the dashboard decision, with the team overview for admins."""
    decision = route_dashboard(user)
    response = DashboardResponse(
        view=decision.view,
        location=decision.location,
        team_id=decision.team_id,
    )
    if decision.view is DashboardView.ADMIN_OVERVIEW:
        try:
            response.teams = [TeamResponse.from_team(t) for t in await teams.list_teams()]
        except BdSyncError as e:
            raise to_http_exception(e) from e
    return response
