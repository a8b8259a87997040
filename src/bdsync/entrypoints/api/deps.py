"""Dependency injection and application lifespan management."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from fastapi import Request

from bdsync.adapters.identity import FirebaseAuthConfig, FirebaseIdentityProvider
from bdsync.adapters.llm import MeetingAnalyzer
from bdsync.adapters.llm.analyzer import DEFAULT_MODEL
from bdsync.adapters.store import FirestoreDocumentStore, InMemoryDocumentStore
from bdsync.core.auth.classification import ConfigErrorPolicy
from bdsync.core.auth.session import DEFAULT_RESOLVE_TIMEOUT_SECONDS, SessionManager
from bdsync.core.exceptions import SessionError
from bdsync.core.interfaces import Analyzer, DocumentStore
from bdsync.services import InvitationService, MeetingService, TeamService, WorkspaceBackends

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = structlog.get_logger()


class Settings:
    """Application settings loaded from environment."""

    def __init__(self) -> None:
        """Load settings from environment variables."""
        # Firebase
        self.firebase_api_key = os.getenv("FIREBASE_API_KEY", "")
        self.firebase_project_id = os.getenv("FIREBASE_PROJECT_ID", "")
        self.firebase_auth_request_uri = os.getenv(
            "FIREBASE_AUTH_REQUEST_URI", "http://localhost"
        )

        # "firestore" needs a project id; "memory" keeps profiles in process
        default_store = "firestore" if self.firebase_project_id else "memory"
        self.profile_store = os.getenv("PROFILE_STORE", default_store).lower()

        # Gemini
        self.gemini_api_key = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY", "")
        self.gemini_model = os.getenv("GEMINI_MODEL", DEFAULT_MODEL)

        # Base URL for invitation links
        self.app_base_url = os.getenv("APP_BASE_URL", "http://localhost:3000")

        self.session_resolve_timeout = float(
            os.getenv("SESSION_RESOLVE_TIMEOUT_SECONDS", str(DEFAULT_RESOLVE_TIMEOUT_SECONDS))
        )

        # Comma-separated overrides of the errors that trigger Demo Mode
        self.demo_config_error_codes = os.getenv("DEMO_CONFIG_ERROR_CODES", "")
        self.demo_config_error_markers = os.getenv("DEMO_CONFIG_ERROR_MARKERS", "")


settings = Settings()


def build_profile_store(settings: Settings) -> DocumentStore:
    """Create the hosted document store named by the settings.

    Raises:
        RuntimeError: If PROFILE_STORE is unknown or Firestore has no project.
    """
    if settings.profile_store == "memory":
        logger.info("profile_store_selected", store="memory")
        return InMemoryDocumentStore()
    if settings.profile_store == "firestore":
        if not settings.firebase_project_id:
            raise RuntimeError("PROFILE_STORE=firestore but FIREBASE_PROJECT_ID not configured")
        logger.info(
            "profile_store_selected",
            store="firestore",
            project_id=settings.firebase_project_id,
        )
        return FirestoreDocumentStore(settings.firebase_project_id)
    raise RuntimeError(
        f"Invalid PROFILE_STORE: {settings.profile_store}. Must be one of: firestore, memory"
    )


def build_identity_provider(settings: Settings) -> FirebaseIdentityProvider:
    """Create the Firebase identity provider."""
    policy = ConfigErrorPolicy.from_strings(
        settings.demo_config_error_codes,
        settings.demo_config_error_markers,
    )
    return FirebaseIdentityProvider(
        FirebaseAuthConfig(
            api_key=settings.firebase_api_key,
            request_uri=settings.firebase_auth_request_uri,
        ),
        policy=policy,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan - setup and teardown.

    This context manager handles:
    - Identity provider and profile store setup
    - Session manager initialization
    - Feature services and analyzer wiring
    """
    store = build_profile_store(settings)
    session = SessionManager(
        build_identity_provider(settings),
        store,
        resolve_timeout=settings.session_resolve_timeout,
    )
    try:
        await session.initialize()
    except SessionError as e:
        # The session is already reset to signed-out; keep serving.
        logger.error("session_initialize_failed", error=str(e))

    backends = WorkspaceBackends(session, store)

    app.state.settings = settings
    app.state.session = session
    app.state.backends = backends
    app.state.team_service = TeamService(backends, settings.app_base_url)
    app.state.meeting_service = MeetingService(backends)
    app.state.invitation_service = InvitationService(backends)
    app.state.analyzer = MeetingAnalyzer(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
    )
    logger.info("app_started", analyzer_configured=app.state.analyzer.configured)

    yield

    backends.close()
    await session.close()
    logger.info("app_stopped")


def get_session_manager(request: Request) -> SessionManager:
    """Get the session manager from app state.

    Args:
        request: The current request.

    Returns:
        The process-wide SessionManager.
    """
    session: SessionManager = request.app.state.session
    return session


def get_team_service(request: Request) -> TeamService:
    """Get the team service from app state."""
    service: TeamService = request.app.state.team_service
    return service


def get_meeting_service(request: Request) -> MeetingService:
    """Get the meeting service from app state."""
    service: MeetingService = request.app.state.meeting_service
    return service


def get_invitation_service(request: Request) -> InvitationService:
    """Get the invitation service from app state."""
    service: InvitationService = request.app.state.invitation_service
    return service


def get_analyzer(request: Request) -> Analyzer:
    """Get the meeting analyzer from app state."""
    analyzer: Analyzer = request.app.state.analyzer
    return analyzer
