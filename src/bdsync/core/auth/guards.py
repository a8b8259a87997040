"""Route guards and team-scoped access checks.

Everything here is a pure function of the session snapshot or the
profile: no I/O, no caching. Callers re-evaluate on every navigation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from bdsync.core.auth.types import SessionState, UserProfile, UserRole
from bdsync.core.exceptions import AccessDeniedError

LOGIN_PATH = "/login"
HOME_PATH = "/"


def team_path(team_id: str) -> str:
    """Location of a team's workspace."""
    return f"/team/{team_id}"


class RouteOutcome(str, Enum):
    """What a guarded route should do."""

    RENDER = "render"
    LOADING = "loading"
    REDIRECT = "redirect"


class DashboardView(str, Enum):
    """Surfaces the dashboard entry point can resolve to."""

    ADMIN_OVERVIEW = "admin_overview"
    TEAM_WORKSPACE = "team_workspace"
    AWAITING_INVITATION = "awaiting_invitation"
    SIGN_IN = "sign_in"


@dataclass(frozen=True)
class RouteDecision:
    """Outcome of a guard with an optional redirect target."""

    outcome: RouteOutcome
    location: str | None = None


@dataclass(frozen=True)
class DashboardDecision:
    """Outcome of the dashboard router.

    Attributes:
        view: Surface to show.
        location: Redirect target, set for TEAM_WORKSPACE and SIGN_IN.
        team_id: Team of the member being redirected.
    """

    view: DashboardView
    location: str | None = None
    team_id: str | None = None


def protected_route(state: SessionState) -> RouteDecision:
    """Gate content that requires a resolved, signed-in session.

    Loading always wins, even if a user is already present.
    """
    if state.loading:
        return RouteDecision(RouteOutcome.LOADING)
    if state.user is None:
        return RouteDecision(RouteOutcome.REDIRECT, LOGIN_PATH)
    return RouteDecision(RouteOutcome.RENDER)


def login_route(state: SessionState) -> RouteDecision:
    """Decide what the sign-in entry point shows."""
    if state.loading:
        return RouteDecision(RouteOutcome.LOADING)
    if state.user is not None:
        return RouteDecision(RouteOutcome.REDIRECT, HOME_PATH)
    return RouteDecision(RouteOutcome.RENDER)


def route_dashboard(user: UserProfile | None) -> DashboardDecision:
    """Pick the landing surface from role and team assignment.

    - admin: team overview, whatever the team assignment
    - member with a team: redirect to that team's workspace
    - member without a team: awaiting-invitation view
    """
    if user is None:
        return DashboardDecision(DashboardView.SIGN_IN, location=LOGIN_PATH)
    if user.role == UserRole.ADMIN:
        return DashboardDecision(DashboardView.ADMIN_OVERVIEW)
    if user.team_id:
        return DashboardDecision(
            DashboardView.TEAM_WORKSPACE,
            location=team_path(user.team_id),
            team_id=user.team_id,
        )
    return DashboardDecision(DashboardView.AWAITING_INVITATION)


def can_access_team(user: UserProfile, team_id: str) -> bool:
    """Whether ``user`` may open the workspace of ``team_id``.

    Members are restricted to their own team. Admins are never denied.
    """
    if user.role == UserRole.MEMBER:
        return user.team_id == team_id
    return True


def require_team_access(user: UserProfile, team_id: str) -> None:
    """Raise if ``user`` may not open the workspace of ``team_id``.

    Raises:
        AccessDeniedError: If the member belongs to another team.
    """
    if not can_access_team(user, team_id):
        raise AccessDeniedError(
            "You do not have permission to view this team's workspace.",
            team_id=team_id,
        )
