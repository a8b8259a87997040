"""Tests for the meeting service."""

from __future__ import annotations

import pytest

from bdsync.core.auth.types import UserProfile
from bdsync.core.collections import COLLECTION_MEETINGS
from bdsync.core.domain_types import MeetingAnalysis
from bdsync.core.exceptions import AccessDeniedError, NotFoundError
from bdsync.services import MeetingService, WorkspaceBackends
from tests.fixtures.mocks import demo_session, signed_in_session, store_with


class TestMeetingService:
    """Test recording and listing meetings."""

    @pytest.mark.asyncio
    async def test_record_stamps_editor(
        self, member_profile: UserProfile, sample_analysis: MeetingAnalysis
    ) -> None:
        """New meetings carry creation and edit stamps."""
        session, _, store = await signed_in_session(member_profile)
        service = MeetingService(WorkspaceBackends(session, store))

        meeting = await service.save_meeting("team-alpha", "Notes", sample_analysis)

        assert meeting.team_id == "team-alpha"
        assert meeting.created_by == "Alan Turing"
        assert meeting.last_edited_by == "Alan Turing"
        assert meeting.last_edited_at == meeting.date
        assert isinstance(meeting.created_at, int)
        stored = await store.get_document(COLLECTION_MEETINGS, meeting.id)
        assert stored is not None
        assert stored["rawNotes"] == "Notes"
        assert stored["analysis"]["action_items"][0]["owner"] == "Alan"

    @pytest.mark.asyncio
    async def test_list_newest_first(self, member_profile: UserProfile) -> None:
        """History is sorted by date, newest first, and scoped to the team."""
        session, _, store = await signed_in_session(member_profile)
        for meeting_id, team_id, date in [
            ("m1", "team-alpha", "2024-01-01T09:00:00+00:00"),
            ("m2", "team-alpha", "2024-03-01T09:00:00+00:00"),
            ("m3", "team-beta", "2024-04-01T09:00:00+00:00"),
            ("m4", "team-alpha", "2024-02-01T09:00:00"),
        ]:
            await store.set_document(
                COLLECTION_MEETINGS, meeting_id, {"teamId": team_id, "date": date}
            )
        service = MeetingService(WorkspaceBackends(session, store))

        meetings = await service.list_meetings("team-alpha")
        latest = await service.latest_meeting("team-alpha")

        assert [m.id for m in meetings] == ["m2", "m4", "m1"]
        assert latest is not None
        assert latest.id == "m2"

    @pytest.mark.asyncio
    async def test_latest_meeting_empty(self, member_profile: UserProfile) -> None:
        """A team without meetings has no latest meeting."""
        session, _, store = await signed_in_session(member_profile)
        service = MeetingService(WorkspaceBackends(session, store))

        assert await service.latest_meeting("team-alpha") is None

    @pytest.mark.asyncio
    async def test_edit_updates_notes_and_stamps(
        self,
        admin_profile: UserProfile,
        member_profile: UserProfile,
        sample_analysis: MeetingAnalysis,
    ) -> None:
        """Edits keep the creator and update the edit stamps."""
        store = store_with(member_profile, admin_profile)
        session, _, _ = await signed_in_session(member_profile, store)
        member_service = MeetingService(WorkspaceBackends(session, store))
        created = await member_service.save_meeting("team-alpha", "Draft", None)

        admin_session, _, _ = await signed_in_session(admin_profile, store)
        admin_service = MeetingService(WorkspaceBackends(admin_session, store))
        edited = await admin_service.save_meeting(
            "team-alpha", "Final", sample_analysis, meeting_id=created.id
        )

        assert edited.raw_notes == "Final"
        assert edited.analysis == sample_analysis
        assert edited.created_by == "Alan Turing"
        assert edited.last_edited_by == "Grace Hopper"
        assert edited.date == created.date

    @pytest.mark.asyncio
    async def test_edit_other_team_meeting_not_found(self, admin_profile: UserProfile) -> None:
        """A meeting id from another team is treated as missing."""
        session, _, store = await signed_in_session(admin_profile)
        await store.set_document(COLLECTION_MEETINGS, "m1", {"teamId": "team-beta", "date": ""})
        service = MeetingService(WorkspaceBackends(session, store))

        with pytest.raises(NotFoundError):
            await service.save_meeting("team-alpha", "notes", None, meeting_id="m1")
        with pytest.raises(NotFoundError):
            await service.save_meeting("team-alpha", "notes", None, meeting_id="missing")

    @pytest.mark.asyncio
    async def test_member_denied_other_team(self, member_profile: UserProfile) -> None:
        """Members cannot read or write another team's meetings."""
        session, _, store = await signed_in_session(member_profile)
        service = MeetingService(WorkspaceBackends(session, store))

        with pytest.raises(AccessDeniedError):
            await service.list_meetings("team-beta")
        with pytest.raises(AccessDeniedError):
            await service.save_meeting("team-beta", "notes", None)

        assert store.count(COLLECTION_MEETINGS) == 0


class TestMeetingServiceDemo:
    """Test Demo Mode isolation."""

    @pytest.mark.asyncio
    async def test_demo_meetings_stay_in_memory(self) -> None:
        """Demo writes never reach the live store."""
        session, _, live = await demo_session()
        backends = WorkspaceBackends(session, live)
        service = MeetingService(backends)

        meeting = await service.save_meeting("team-alpha", "Demo notes", None)

        assert meeting.created_by == "Demo Admin"
        assert [m.id for m in await service.list_meetings("team-alpha")] == [meeting.id]
        assert live.count(COLLECTION_MEETINGS) == 0
        assert backends.demo.count(COLLECTION_MEETINGS) == 1

    @pytest.mark.asyncio
    async def test_demo_store_reset_on_exit(self) -> None:
        """Leaving Demo Mode discards the demo meetings."""
        session, _, live = await demo_session()
        backends = WorkspaceBackends(session, live)
        await MeetingService(backends).save_meeting("team-alpha", "Demo notes", None)

        await session.logout()

        assert backends.demo.count(COLLECTION_MEETINGS) == 0
        assert backends.demo.count("teams") == 3
        assert backends.store is live
