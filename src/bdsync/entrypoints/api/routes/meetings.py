"""Meeting API routes."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from bdsync.core.domain_types import Meeting, MeetingAnalysis
from bdsync.core.exceptions import BdSyncError
from bdsync.entrypoints.api.deps import get_meeting_service
from bdsync.entrypoints.api.errors import to_http_exception
from bdsync.entrypoints.api.middleware.session_guard import RequireTeamAccess
from bdsync.services import MeetingService

router = APIRouter(prefix="/teams/{team_id}/meetings", tags=["meetings"])

MeetingServiceDep = Annotated[MeetingService, Depends(get_meeting_service)]


class MeetingResponse(BaseModel):
    """Response for a meeting."""

    id: str
    team_id: str
    date: str
    raw_notes: str
    analysis: MeetingAnalysis | None = None
    created_at: int | datetime | None = None
    created_by: str | None = None
    last_edited_by: str | None = None
    last_edited_at: str | None = None

    @classmethod
    def from_meeting(cls, meeting: Meeting) -> MeetingResponse:
        """Build from a Meeting."""
        return cls(
            id=meeting.id,
            team_id=meeting.team_id,
            date=meeting.date,
            raw_notes=meeting.raw_notes,
            analysis=meeting.analysis,
            created_at=meeting.created_at,
            created_by=meeting.created_by,
            last_edited_by=meeting.last_edited_by,
            last_edited_at=meeting.last_edited_at,
        )


class MeetingListResponse(BaseModel):
    """Response for a team's meeting history."""

    meetings: list[MeetingResponse]
    total: int


class SaveMeetingRequest(BaseModel):
    """Request to record or edit a meeting."""

    raw_notes: str = Field(..., min_length=1)
    analysis: MeetingAnalysis | None = None


@router.get("", response_model=MeetingListResponse)
async def list_meetings(
    team_id: str,
    _: RequireTeamAccess,
    service: MeetingServiceDep,
) -> MeetingListResponse:
    """List a team's meetings, newest first."""
    try:
        meetings = await service.list_meetings(team_id)
    except BdSyncError as e:
        raise to_http_exception(e) from e
    return MeetingListResponse(
        meetings=[MeetingResponse.from_meeting(m) for m in meetings],
        total=len(meetings),
    )


@router.post("", response_model=MeetingResponse, status_code=201)
async def record_meeting(
    team_id: str,
    body: SaveMeetingRequest,
    _: RequireTeamAccess,
    service: MeetingServiceDep,
) -> MeetingResponse:
    """Record a new meeting."""
    try:
        meeting = await service.save_meeting(team_id, body.raw_notes, body.analysis)
    except BdSyncError as e:
        raise to_http_exception(e) from e
    return MeetingResponse.from_meeting(meeting)


@router.put("/{meeting_id}", response_model=MeetingResponse)
async def edit_meeting(
    team_id: str,
    meeting_id: str,
    body: SaveMeetingRequest,
    _: RequireTeamAccess,
    service: MeetingServiceDep,
) -> MeetingResponse:
    """Edit the notes and analysis of a meeting."""
    try:
        meeting = await service.save_meeting(
            team_id,
            body.raw_notes,
            body.analysis,
            meeting_id=meeting_id,
        )
    except BdSyncError as e:
        raise to_http_exception(e) from e
    return MeetingResponse.from_meeting(meeting)
