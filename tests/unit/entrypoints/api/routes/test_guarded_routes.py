"""Tests for the session guards applied to API routes."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

from fastapi import FastAPI
from fastapi.testclient import TestClient

from bdsync.core.auth.types import UserProfile
from bdsync.core.domain_types import Team
from bdsync.entrypoints.api.deps import get_session_manager
from tests.fixtures.mocks import make_session


def _client(app: FastAPI, session: MagicMock) -> TestClient:
    app.dependency_overrides[get_session_manager] = lambda: session
    return TestClient(app)


class TestLoadingGate:
    """Test that nothing gated answers while the session resolves."""

    def test_loading_returns_503(self, app: FastAPI, member_profile: UserProfile) -> None:
        """Even with a user present, loading answers 503 with Retry-After."""
        client = _client(app, make_session(member_profile, loading=True))

        response = client.get("/api/v1/dashboard")

        assert response.status_code == 503
        assert response.headers["Retry-After"] == "1"

    def test_signed_out_returns_401(self, client: TestClient) -> None:
        """Signed-out callers are pointed at the sign-in entry point."""
        response = client.get("/api/v1/teams/team-alpha")

        assert response.status_code == 401
        assert response.headers["Location"] == "/login"


class TestDashboard:
    """Test GET /dashboard."""

    def test_admin_overview_lists_teams(
        self,
        app: FastAPI,
        admin_profile: UserProfile,
        mock_team_service: MagicMock,
    ) -> None:
        """Admins get the overview with every team."""
        mock_team_service.list_teams = AsyncMock(
            return_value=[Team(id="team-alpha", name="Alpha Squad (Enterprise)")]
        )
        client = _client(app, make_session(admin_profile))

        data = client.get("/api/v1/dashboard").json()

        assert data["view"] == "admin_overview"
        assert data["teams"][0]["id"] == "team-alpha"

    def test_member_redirected_to_workspace(
        self,
        app: FastAPI,
        member_profile: UserProfile,
        mock_team_service: MagicMock,
    ) -> None:
        """Members with a team are redirected without a team listing."""
        client = _client(app, make_session(member_profile))

        data = client.get("/api/v1/dashboard").json()

        assert data["view"] == "team_workspace"
        assert data["location"] == "/team/team-alpha"
        assert data["teams"] is None
        mock_team_service.list_teams.assert_not_called()

    def test_member_without_team(self, app: FastAPI, unassigned_profile: UserProfile) -> None:
        """Members without a team await an invitation."""
        client = _client(app, make_session(unassigned_profile))

        data = client.get("/api/v1/dashboard").json()

        assert data["view"] == "awaiting_invitation"


class TestTeamRoutes:
    """Test team routes and their guards."""

    def test_member_cannot_list_teams(self, app: FastAPI, member_profile: UserProfile) -> None:
        """Admin routes answer 403 to members."""
        client = _client(app, make_session(member_profile))

        assert client.get("/api/v1/teams").status_code == 403
        assert client.get("/api/v1/teams/team-alpha/invite-link").status_code == 403

    def test_member_denied_other_team(self, app: FastAPI, member_profile: UserProfile) -> None:
        """Members cannot open another team's workspace."""
        client = _client(app, make_session(member_profile))

        response = client.get("/api/v1/teams/team-beta")

        assert response.status_code == 403
        assert "permission" in response.json()["detail"]

    def test_workspace(
        self,
        app: FastAPI,
        member_profile: UserProfile,
        mock_team_service: MagicMock,
        mock_meeting_service: MagicMock,
    ) -> None:
        """Members see their team, its roster and the latest meeting."""
        mock_team_service.get_team = AsyncMock(return_value=Team(id="team-alpha", name="Alpha"))
        mock_team_service.list_members = AsyncMock(return_value=[member_profile])
        mock_meeting_service.latest_meeting = AsyncMock(return_value=None)
        client = _client(app, make_session(member_profile))

        data = client.get("/api/v1/teams/team-alpha").json()

        assert data["team"]["name"] == "Alpha"
        assert data["members"][0]["uid"] == member_profile.uid
        assert data["latest_meeting"] is None

    def test_create_team(
        self,
        app: FastAPI,
        admin_profile: UserProfile,
        mock_team_service: MagicMock,
    ) -> None:
        """Admins create teams."""
        mock_team_service.create_team = AsyncMock(return_value=Team(id="t9", name="Delta"))
        client = _client(app, make_session(admin_profile))

        response = client.post("/api/v1/teams", json={"name": "Delta"})

        assert response.status_code == 201
        assert response.json()["id"] == "t9"

    def test_create_team_blank_name(
        self,
        app: FastAPI,
        admin_profile: UserProfile,
        mock_team_service: MagicMock,
    ) -> None:
        """Blank names are rejected."""
        mock_team_service.create_team = AsyncMock(side_effect=ValueError("blank"))
        client = _client(app, make_session(admin_profile))

        response = client.post("/api/v1/teams", json={"name": "   "})

        assert response.status_code == 400

    def test_invite_link(
        self,
        app: FastAPI,
        admin_profile: UserProfile,
        mock_team_service: MagicMock,
    ) -> None:
        """Admins fetch invitation links."""
        mock_team_service.invite_link = MagicMock(
            return_value="http://localhost:3000/#/join/team-alpha"
        )
        client = _client(app, make_session(admin_profile))

        data = client.get("/api/v1/teams/team-alpha/invite-link").json()

        assert data["link"].endswith("/#/join/team-alpha")
