"""Session guards for API routes.

Applies the route guards to the process-wide session on every request.
Nothing is cached between requests.
"""

from typing import Annotated

import structlog
from fastapi import Depends, HTTPException

from bdsync.core.auth.guards import LOGIN_PATH, RouteOutcome, can_access_team, protected_route
from bdsync.core.auth.session import SessionManager
from bdsync.core.auth.types import UserProfile
from bdsync.entrypoints.api.deps import get_session_manager

logger = structlog.get_logger()

SessionDep = Annotated[SessionManager, Depends(get_session_manager)]

# Seconds clients should wait before retrying while the session resolves.
RETRY_AFTER_SECONDS = 1


async def require_session(session: SessionDep) -> UserProfile:
    """Require a resolved, signed-in session.

    Args:
        session: The process-wide session manager.

    Returns:
        The signed-in profile.

    Raises:
        HTTPException: 503 while the session is resolving, 401 when
            nobody is signed in.
    """
    state = session.state
    decision = protected_route(state)

    if decision.outcome is RouteOutcome.LOADING:
        raise HTTPException(
            status_code=503,
            detail="Session is still resolving",
            headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
        )
    if decision.outcome is RouteOutcome.REDIRECT or state.user is None:
        raise HTTPException(
            status_code=401,
            detail="Sign in required",
            headers={"Location": decision.location or LOGIN_PATH},
        )
    return state.user


async def require_admin(
    user: Annotated[UserProfile, Depends(require_session)],
) -> UserProfile:
    """Require the admin role.

    Raises:
        HTTPException: 403 if the user is not an admin.
    """
    if not user.is_admin:
        logger.warning("admin_required", uid=user.uid)
        raise HTTPException(status_code=403, detail="Admin role required")
    return user


async def require_team_member(
    team_id: str,
    user: Annotated[UserProfile, Depends(require_session)],
) -> UserProfile:
    """Require access to the team named in the path.

    Raises:
        HTTPException: 403 if a member asks for another team.
    """
    if not can_access_team(user, team_id):
        logger.warning("team_access_denied", uid=user.uid, team_id=team_id)
        raise HTTPException(
            status_code=403,
            detail="You do not have permission to view this team's workspace.",
        )
    return user


RequireSession = Annotated[UserProfile, Depends(require_session)]
RequireAdmin = Annotated[UserProfile, Depends(require_admin)]
RequireTeamAccess = Annotated[UserProfile, Depends(require_team_member)]
