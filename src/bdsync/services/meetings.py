"""Meeting history service."""

from __future__ import annotations

import time
from datetime import UTC, datetime

import structlog

from bdsync.core.collections import COLLECTION_MEETINGS
from bdsync.core.domain_types import Meeting, MeetingAnalysis
from bdsync.core.exceptions import NotFoundError
from bdsync.services.workspace import WorkspaceBackends, require_team_member

logger = structlog.get_logger()


class MeetingService:
    """Records and lists the meetings of a team."""

    def __init__(self, backends: WorkspaceBackends) -> None:
        """Initialize the meeting service.

        Args:
            backends: Live and demo stores.
        """
        self._backends = backends

    async def list_meetings(self, team_id: str) -> list[Meeting]:
        """List a team's meetings, newest first."""
        require_team_member(self._backends.session, team_id)
        documents = await self._backends.store.query_documents(
            COLLECTION_MEETINGS, "teamId", team_id
        )
        meetings = [Meeting.from_document(meeting_id, data) for meeting_id, data in documents]
        meetings.sort(key=lambda m: _parse_date(m.date), reverse=True)
        return meetings

    async def latest_meeting(self, team_id: str) -> Meeting | None:
        """Most recent meeting of a team, if any."""
        meetings = await self.list_meetings(team_id)
        return meetings[0] if meetings else None

    async def save_meeting(
        self,
        team_id: str,
        raw_notes: str,
        analysis: MeetingAnalysis | None,
        meeting_id: str | None = None,
    ) -> Meeting:
        """Record a new meeting or edit an existing one.

        Args:
            team_id: Team the meeting belongs to.
            raw_notes: Notes as typed.
            analysis: Structured analysis of the notes.
            meeting_id: Existing meeting to edit. A new meeting is
                recorded if not provided.

        Returns:
            The stored meeting.

        Raises:
            NotFoundError: If ``meeting_id`` does not name a meeting of
                ``team_id``.
        """
        user = require_team_member(self._backends.session, team_id)
        store = self._backends.store
        now = datetime.now(UTC).isoformat()
        analysis_doc = analysis.model_dump(mode="json") if analysis is not None else None

        if meeting_id is None:
            document = {
                "teamId": team_id,
                "rawNotes": raw_notes,
                "analysis": analysis_doc,
                "date": now,
                "createdAt": int(time.time() * 1000),
                "createdBy": user.label,
                "lastEditedBy": user.label,
                "lastEditedAt": now,
            }
            meeting_id = await store.add_document(COLLECTION_MEETINGS, document)
            logger.info("meeting_recorded", team_id=team_id, meeting_id=meeting_id)
            return Meeting.from_document(meeting_id, document)

        existing = await store.get_document(COLLECTION_MEETINGS, meeting_id)
        if existing is None or existing.get("teamId") != team_id:
            raise NotFoundError(f"Meeting not found: {meeting_id}")

        changes = {
            "rawNotes": raw_notes,
            "analysis": analysis_doc,
            "lastEditedBy": user.label,
            "lastEditedAt": now,
        }
        await store.update_document(COLLECTION_MEETINGS, meeting_id, changes)
        logger.info("meeting_updated", team_id=team_id, meeting_id=meeting_id)
        return Meeting.from_document(meeting_id, {**existing, **changes})


def _parse_date(value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return datetime.min.replace(tzinfo=UTC)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
