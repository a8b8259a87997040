"""Tests for session API routes."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from bdsync.core.auth.demo import demo_admin_profile
from bdsync.core.auth.types import UserProfile
from bdsync.core.exceptions import IdentityProviderError
from bdsync.entrypoints.api.deps import get_session_manager
from tests.fixtures.domain_objects import auth_error, network_error
from tests.fixtures.mocks import make_session


class TestGetSession:
    """Test GET /session."""

    def test_signed_out(self, client: TestClient) -> None:
        """Should report a resolved, signed-out session."""
        response = client.get("/api/v1/session")

        assert response.status_code == 200
        data = response.json()
        assert data["user"] is None
        assert data["loading"] is False
        assert data["phase"] == "signed_out"

    def test_signed_in(self, app: FastAPI, member_profile: UserProfile) -> None:
        """Should include the profile with snake_case fields."""
        app.dependency_overrides[get_session_manager] = lambda: make_session(member_profile)

        data = TestClient(app).get("/api/v1/session").json()

        assert data["phase"] == "signed_in"
        assert data["user"]["team_id"] == "team-alpha"
        assert data["user"]["role"] == "member"


class TestLoginView:
    """Test GET /login."""

    def test_loading(self, app: FastAPI) -> None:
        """Should ask the client to wait while loading."""
        app.dependency_overrides[get_session_manager] = lambda: make_session(loading=True)

        data = TestClient(app).get("/api/v1/login").json()

        assert data == {"outcome": "loading", "location": None}

    def test_signed_in_redirects_home(self, app: FastAPI, admin_profile: UserProfile) -> None:
        """Signed-in users are sent to the dashboard."""
        app.dependency_overrides[get_session_manager] = lambda: make_session(admin_profile)

        data = TestClient(app).get("/api/v1/login").json()

        assert data == {"outcome": "redirect", "location": "/"}


class TestSignIn:
    """Test POST /session/sign-in."""

    def test_sign_in_forwards_credential(
        self, client: TestClient, mock_session: MagicMock
    ) -> None:
        """Should pass the credential to the session."""
        response = client.post("/api/v1/session/sign-in", json={"credential": "google-token"})

        assert response.status_code == 200
        mock_session.sign_in.assert_awaited_once_with("google-token")

    def test_demo_fallback_returns_demo_session(self, app: FastAPI) -> None:
        """A configuration failure still answers 200 with the demo admin."""
        session = make_session()

        async def enter_demo(credential: str | None) -> None:
            session.state = make_session(demo_admin_profile(), is_demo=True).state

        session.sign_in = AsyncMock(side_effect=enter_demo)
        app.dependency_overrides[get_session_manager] = lambda: session

        data = TestClient(app).post("/api/v1/session/sign-in", json={}).json()

        assert data["is_demo"] is True
        assert data["user"]["uid"] == "demo-admin-123"

    @pytest.mark.parametrize(
        ("error_factory", "status_code"),
        [(auth_error, 401), (network_error, 502)],
    )
    def test_provider_errors(
        self,
        client: TestClient,
        mock_session: MagicMock,
        error_factory: Callable[[], IdentityProviderError],
        status_code: int,
    ) -> None:
        """Non-configuration failures surface with the provider code."""
        error = error_factory()
        mock_session.sign_in = AsyncMock(side_effect=error)

        response = client.post("/api/v1/session/sign-in", json={"credential": "x"})

        assert response.status_code == status_code
        assert response.json()["detail"]["code"] == error.code


class TestLogout:
    """Test POST /session/logout."""

    def test_logout(self, client: TestClient, mock_session: MagicMock) -> None:
        """Should log the session out."""
        response = client.post("/api/v1/session/logout")

        assert response.status_code == 200
        mock_session.logout.assert_awaited_once()
