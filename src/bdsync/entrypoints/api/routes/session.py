"""Session API routes.

Sign-in, logout and the login-view decision. None of these require a
signed-in session.
"""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from bdsync.core.auth.guards import RouteOutcome, login_route
from bdsync.core.auth.types import SessionPhase, SessionState, UserProfile, UserRole
from bdsync.core.exceptions import IdentityProviderError
from bdsync.entrypoints.api.errors import to_http_exception
from bdsync.entrypoints.api.middleware.session_guard import SessionDep

router = APIRouter(tags=["session"])


class ProfileResponse(BaseModel):
    """Profile of the signed-in user."""

    uid: str
    email: str
    display_name: str | None = None
    role: UserRole
    team_id: str | None = None
    photo_url: str | None = None

    @classmethod
    def from_profile(cls, profile: UserProfile) -> ProfileResponse:
        """Build from a UserProfile."""
        return cls(
            uid=profile.uid,
            email=profile.email,
            display_name=profile.display_name,
            role=profile.role,
            team_id=profile.team_id,
            photo_url=profile.photo_url,
        )


class SessionResponse(BaseModel):
    """Current session snapshot."""

    user: ProfileResponse | None = None
    loading: bool
    is_demo: bool
    phase: SessionPhase
    error: str | None = None

    @classmethod
    def from_state(cls, state: SessionState) -> SessionResponse:
        """Build from a SessionState snapshot."""
        return cls(
            user=ProfileResponse.from_profile(state.user) if state.user else None,
            loading=state.loading,
            is_demo=state.is_demo,
            phase=state.phase,
            error=state.error,
        )


class RouteDecisionResponse(BaseModel):
    """What a guarded view should do."""

    outcome: RouteOutcome
    location: str | None = None


class SignInRequest(BaseModel):
    """Sign-in request."""

    credential: str | None = None


@router.get("/session", response_model=SessionResponse)
async def get_session(session: SessionDep) -> SessionResponse:
    """Get the current session snapshot."""
    return SessionResponse.from_state(session.state)


@router.get("/login", response_model=RouteDecisionResponse)
async def get_login_view(session: SessionDep) -> RouteDecisionResponse:
    """Decide whether to show the sign-in entry point."""
    decision = login_route(session.state)
    return RouteDecisionResponse(outcome=decision.outcome, location=decision.location)


@router.post("/session/sign-in", response_model=SessionResponse)
async def sign_in(body: SignInRequest, session: SessionDep) -> SessionResponse:
    """Sign in with an IdP credential.

    Configuration errors from the identity provider switch the session
    into Demo Mode and still return 200. Other failures return 401, or
    502 when the provider could not be reached.
    """
    try:
        await session.sign_in(body.credential)
    except IdentityProviderError as e:
        raise to_http_exception(e) from None
    return SessionResponse.from_state(session.state)


@router.post("/session/logout", response_model=SessionResponse)
async def logout(session: SessionDep) -> SessionResponse:
    """Sign out, or leave Demo Mode."""
    await session.logout()
    return SessionResponse.from_state(session.state)
