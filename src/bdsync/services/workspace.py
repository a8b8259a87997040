"""Backend selection and caller checks shared by the feature services."""

from __future__ import annotations

import structlog

from bdsync.adapters.store.memory import InMemoryDocumentStore
from bdsync.core.auth.guards import require_team_access
from bdsync.core.auth.session import SessionManager
from bdsync.core.auth.types import SessionState, UserProfile
from bdsync.core.exceptions import AccessDeniedError, NotSignedInError
from bdsync.core.interfaces import DocumentStore
from bdsync.demo.seed import build_demo_store

logger = structlog.get_logger()


class WorkspaceBackends:
    """Routes feature reads and writes to the live or the demo store.

    The demo store is rebuilt from the seed whenever the session leaves
    Demo Mode, so nothing recorded during a demo survives it.
    """

    def __init__(
        self,
        session: SessionManager,
        live: DocumentStore,
        demo: InMemoryDocumentStore | None = None,
    ) -> None:
        """Initialize the backends.

        Args:
            session: Session whose demo flag selects the backend.
            live: Hosted document store.
            demo: Demo store. A freshly seeded one is built if not provided.
        """
        self._session = session
        self.live = live
        self.demo = demo or build_demo_store()
        self._was_demo = session.is_demo
        self._unsubscribe = session.subscribe(self._on_session_change)

    @property
    def session(self) -> SessionManager:
        """The session the backends follow."""
        return self._session

    @property
    def store(self) -> DocumentStore:
        """Store for the current session mode."""
        if self._session.is_demo:
            return self.demo
        return self.live

    def close(self) -> None:
        """Stop following the session."""
        self._unsubscribe()

    def _on_session_change(self, state: SessionState) -> None:
        if self._was_demo and not state.is_demo:
            self.demo = build_demo_store()
            logger.info("demo_store_reset")
        self._was_demo = state.is_demo


def require_user(session: SessionManager) -> UserProfile:
    """Return the signed-in profile.

    Raises:
        NotSignedInError: If nobody is signed in.
    """
    user = session.user
    if user is None:
        raise NotSignedInError("Sign in required.")
    return user


def require_admin(session: SessionManager) -> UserProfile:
    """Return the signed-in profile if it holds the admin role.

    Raises:
        NotSignedInError: If nobody is signed in.
        AccessDeniedError: If the user is not an admin.
    """
    user = require_user(session)
    if not user.is_admin:
        raise AccessDeniedError("Admin role required.")
    return user


def require_team_member(session: SessionManager, team_id: str) -> UserProfile:
    """Return the signed-in profile if it may open ``team_id``.

    Raises:
        NotSignedInError: If nobody is signed in.
        AccessDeniedError: If the member belongs to another team.
    """
    user = require_user(session)
    require_team_access(user, team_id)
    return user
