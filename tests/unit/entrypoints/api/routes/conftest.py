"""Shared fixtures for API route tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from bdsync.entrypoints.api.deps import (
    get_analyzer,
    get_invitation_service,
    get_meeting_service,
    get_session_manager,
    get_team_service,
)
from bdsync.entrypoints.api.routes import api_router
from tests.fixtures.mocks import make_session


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a signed-out, resolved session."""
    return make_session()


@pytest.fixture
def mock_team_service() -> MagicMock:
    """Create mock team service."""
    return MagicMock()


@pytest.fixture
def mock_meeting_service() -> MagicMock:
    """Create mock meeting service."""
    return MagicMock()


@pytest.fixture
def mock_invitation_service() -> MagicMock:
    """Create mock invitation service."""
    return MagicMock()


@pytest.fixture
def mock_analyzer() -> MagicMock:
    """Create mock analyzer."""
    return MagicMock()


@pytest.fixture
def app(
    mock_session: MagicMock,
    mock_team_service: MagicMock,
    mock_meeting_service: MagicMock,
    mock_invitation_service: MagicMock,
    mock_analyzer: MagicMock,
) -> FastAPI:
    """Create test app with all routes and mocked dependencies."""
    app = FastAPI()
    app.include_router(api_router, prefix="/api/v1")
    app.dependency_overrides[get_session_manager] = lambda: mock_session
    app.dependency_overrides[get_team_service] = lambda: mock_team_service
    app.dependency_overrides[get_meeting_service] = lambda: mock_meeting_service
    app.dependency_overrides[get_invitation_service] = lambda: mock_invitation_service
    app.dependency_overrides[get_analyzer] = lambda: mock_analyzer
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client."""
    return TestClient(app)
