"""Team API routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from bdsync.core.domain_types import Team
from bdsync.core.exceptions import BdSyncError
from bdsync.entrypoints.api.deps import get_meeting_service, get_team_service
from bdsync.entrypoints.api.errors import to_http_exception
from bdsync.entrypoints.api.middleware.session_guard import RequireAdmin, RequireTeamAccess
from bdsync.entrypoints.api.routes.meetings import MeetingResponse
from bdsync.entrypoints.api.routes.session import ProfileResponse
from bdsync.services import MeetingService, TeamService

router = APIRouter(prefix="/teams", tags=["teams"])

TeamServiceDep = Annotated[TeamService, Depends(get_team_service)]
MeetingServiceDep = Annotated[MeetingService, Depends(get_meeting_service)]


class TeamResponse(BaseModel):
    """Response for a team."""

    id: str
    name: str
    member_ids: list[str] = Field(default_factory=list)

    @classmethod
    def from_team(cls, team: Team) -> TeamResponse:
        """Build from a Team."""
        return cls(id=team.id, name=team.name, member_ids=list(team.member_ids))


class TeamListResponse(BaseModel):
    """Response for listing teams."""

    teams: list[TeamResponse]
    total: int


class CreateTeamRequest(BaseModel):
    """Request to create a team."""

    name: str = Field(..., min_length=1, max_length=200)


class WorkspaceResponse(BaseModel):
    """A team's workspace: the team, its members and its latest meeting."""

    team: TeamResponse
    members: list[ProfileResponse]
    latest_meeting: MeetingResponse | None = None


class InviteLinkResponse(BaseModel):
    """Invitation link for a team."""

    team_id: str
    link: str


@router.get("", response_model=TeamListResponse)
async def list_teams(_: RequireAdmin, service: TeamServiceDep) -> TeamListResponse:
    """List all teams. Admin only."""
    try:
        teams = await service.list_teams()
    except BdSyncError as e:
        raise to_http_exception(e) from e
    return TeamListResponse(teams=[TeamResponse.from_team(t) for t in teams], total=len(teams))


@router.post("", response_model=TeamResponse, status_code=201)
async def create_team(
    body: CreateTeamRequest,
    _: RequireAdmin,
    service: TeamServiceDep,
) -> TeamResponse:
    """Create a team. Admin only."""
    try:
        team = await service.create_team(body.name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except BdSyncError as e:
        raise to_http_exception(e) from e
    return TeamResponse.from_team(team)


@router.get("/{team_id}", response_model=WorkspaceResponse)
async def get_workspace(
    team_id: str,
    _: RequireTeamAccess,
    teams: TeamServiceDep,
    meetings: MeetingServiceDep,
) -> WorkspaceResponse:
    """Get a team's workspace."""
    try:
        team = await teams.get_team(team_id)
        members = await teams.list_members(team_id)
        latest = await meetings.latest_meeting(team_id)
    except BdSyncError as e:
        raise to_http_exception(e) from e
    return WorkspaceResponse(
        team=TeamResponse.from_team(team),
        members=[ProfileResponse.from_profile(m) for m in members],
        latest_meeting=MeetingResponse.from_meeting(latest) if latest else None,
    )


@router.get("/{team_id}/invite-link", response_model=InviteLinkResponse)
async def get_invite_link(
    team_id: str,
    _: RequireAdmin,
    service: TeamServiceDep,
) -> InviteLinkResponse:
    """Get the invitation link for a team. Admin only."""
    try:
        link = service.invite_link(team_id)
    except BdSyncError as e:
        raise to_http_exception(e) from e
    return InviteLinkResponse(team_id=team_id, link=link)
