"""Auth domain types, session lifecycle and route guards."""

from bdsync.core.auth.classification import ConfigErrorPolicy, classify_provider_error
from bdsync.core.auth.demo import DEMO_ADMIN_UID, demo_admin_profile
from bdsync.core.auth.guards import (
    DashboardDecision,
    DashboardView,
    RouteDecision,
    RouteOutcome,
    can_access_team,
    login_route,
    protected_route,
    require_team_access,
    route_dashboard,
)
from bdsync.core.auth.session import SessionManager
from bdsync.core.auth.types import (
    AuthErrorKind,
    Identity,
    SessionPhase,
    SessionState,
    UserProfile,
    UserRole,
)

__all__ = [
    "AuthErrorKind",
    "ConfigErrorPolicy",
    "DEMO_ADMIN_UID",
    "DashboardDecision",
    "DashboardView",
    "Identity",
    "RouteDecision",
    "RouteOutcome",
    "SessionManager",
    "SessionPhase",
    "SessionState",
    "UserProfile",
    "UserRole",
    "can_access_team",
    "classify_provider_error",
    "demo_admin_profile",
    "login_route",
    "protected_route",
    "require_team_access",
    "route_dashboard",
]
