"""Invitation API routes.

Viewing an invitation needs no session; accepting one does.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from bdsync.core.auth.guards import team_path
from bdsync.core.exceptions import BdSyncError
from bdsync.entrypoints.api.deps import get_invitation_service
from bdsync.entrypoints.api.errors import to_http_exception
from bdsync.entrypoints.api.middleware.session_guard import RequireSession, SessionDep
from bdsync.entrypoints.api.routes.teams import TeamResponse
from bdsync.services import InvitationService

router = APIRouter(prefix="/join", tags=["invitations"])

InvitationServiceDep = Annotated[InvitationService, Depends(get_invitation_service)]


class InvitationResponse(BaseModel):
    """Invitation view: the team and who would accept it."""

    team: TeamResponse
    signed_in: bool
    email: str | None = None


class JoinResponse(BaseModel):
    """Result of accepting an invitation."""

    team: TeamResponse
    location: str
    simulated: bool = False


@router.get("/{team_id}", response_model=InvitationResponse)
async def get_invitation(
    team_id: str,
    session: SessionDep,
    service: InvitationServiceDep,
) -> InvitationResponse:
    """Show the team an invitation link points at."""
    try:
        team = await service.get_invitation(team_id)
    except BdSyncError as e:
        raise to_http_exception(e) from e
    user = session.user
    return InvitationResponse(
        team=TeamResponse.from_team(team),
        signed_in=user is not None,
        email=user.email if user else None,
    )


@router.post("/{team_id}", response_model=JoinResponse)
async def accept_invitation(
    team_id: str,
    _: RequireSession,
    session: SessionDep,
    service: InvitationServiceDep,
) -> JoinResponse:
    """Join the signed-in user to the team."""
    try:
        team = await service.accept(team_id)
    except BdSyncError as e:
        raise to_http_exception(e) from e
    return JoinResponse(
        team=TeamResponse.from_team(team),
        location=team_path(team_id),
        simulated=session.is_demo,
    )
