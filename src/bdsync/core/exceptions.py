"""Domain-specific exceptions.

All exceptions in the bdsync system inherit from BdSyncError,
making it easy to catch all system errors while still being able
to handle specific error types.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bdsync.core.auth.types import AuthErrorKind


class BdSyncError(Exception):
    """Base exception for all bdsync errors."""

    pass


class IdentityProviderError(BdSyncError):
    """Identity provider operation failed.

    Carries a tagged ``kind`` so callers branch on the failure class
    instead of inspecting message text:

    - CONFIG: the provider itself is misconfigured (bad API key,
      unauthorized domain, provider internal error). Recovered by
      entering Demo Mode.
    - AUTH: the user-facing sign-in failed (cancelled, bad credential).
    - NETWORK: transport failure talking to the provider.

    Attributes:
        kind: Failure class.
        code: Provider error code, e.g. ``auth/unauthorized-domain``.
    """

    def __init__(self, message: str, *, kind: AuthErrorKind, code: str) -> None:
        """Initialize IdentityProviderError.

        Args:
            message: Human-readable provider message.
            kind: Failure class.
            code: Provider error code.
        """
        super().__init__(message)
        self.kind = kind
        self.code = code

    @property
    def message(self) -> str:
        """Return the provider message."""
        return str(self)


class SessionError(BdSyncError):
    """The session could not subscribe to the identity provider.

    The session is reset to signed-out before this is raised.
    """

    pass


class StoreUnavailableError(BdSyncError):
    """Document store transport failure."""

    pass


class NotSignedInError(BdSyncError):
    """Operation requires an authenticated session."""

    pass


class AccessDeniedError(BdSyncError):
    """The current user may not access the requested resource."""

    def __init__(self, message: str, *, team_id: str | None = None) -> None:
        """Initialize AccessDeniedError.

        Args:
            message: Error description.
            team_id: Team the user tried to reach, if any.
        """
        super().__init__(message)
        self.team_id = team_id


class NotFoundError(BdSyncError):
    """Requested document does not exist."""

    pass
