"""Auth domain types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class UserRole(str, Enum):
    """Roles a profile can hold. Exactly one per profile."""

    ADMIN = "admin"
    MEMBER = "member"


class AuthErrorKind(str, Enum):
    """Failure classes reported by the identity provider adapter."""

    CONFIG = "config"
    AUTH = "auth"
    NETWORK = "network"


class SessionPhase(str, Enum):
    """Derived lifecycle phase of the session."""

    UNRESOLVED = "unresolved"
    SIGNED_OUT = "signed_out"
    AUTHENTICATING = "authenticating"
    SIGNED_IN = "signed_in"


class Identity(BaseModel):
    """Raw identity record emitted by the identity provider."""

    model_config = ConfigDict(frozen=True)

    uid: str
    email: str | None = None
    display_name: str | None = None
    photo_url: str | None = None


class UserProfile(BaseModel):
    """Authoritative profile of an authenticated principal.

    Stored in the ``users`` collection keyed by ``uid`` using the
    camelCase field names of the hosted store.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    uid: str
    email: str = ""
    display_name: str | None = Field(default=None, alias="displayName")
    role: UserRole = UserRole.MEMBER
    team_id: str | None = Field(default=None, alias="teamId")
    photo_url: str | None = Field(default=None, alias="photoURL")

    @classmethod
    def default_for(cls, identity: Identity) -> UserProfile:
        """Build the profile created on a user's first sign-in."""
        return cls(
            uid=identity.uid,
            email=identity.email or "",
            display_name=identity.display_name or "User",
            role=UserRole.MEMBER,
            team_id=None,
            photo_url=identity.photo_url or "",
        )

    @property
    def is_admin(self) -> bool:
        """Whether the profile holds the admin role."""
        return self.role == UserRole.ADMIN

    @property
    def label(self) -> str:
        """Name used to stamp edits made by this user."""
        return self.display_name or self.email or "Unknown"

    def to_document(self) -> dict[str, Any]:
        """Serialize for the document store."""
        return self.model_dump(mode="json", by_alias=True)


@dataclass(frozen=True)
class SessionState:
    """Immutable snapshot of the session published to consumers.

    Attributes:
        user: Current profile, or None when signed out.
        loading: True only while the initial identity state resolves.
        is_demo: True once the session runs in Demo Mode.
        error: Last surfaced session error, if any.
        authenticating: True while an interactive sign-in is in flight.
    """

    user: UserProfile | None = None
    loading: bool = True
    is_demo: bool = False
    error: str | None = None
    authenticating: bool = False

    @property
    def phase(self) -> SessionPhase:
        """Lifecycle phase derived from the snapshot."""
        if self.loading:
            return SessionPhase.UNRESOLVED
        if self.user is not None:
            return SessionPhase.SIGNED_IN
        if self.authenticating:
            return SessionPhase.AUTHENTICATING
        return SessionPhase.SIGNED_OUT
