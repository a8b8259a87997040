"""Protocol definitions for all external dependencies.

This module defines the interfaces (Protocols) that adapters must implement.
The core domain only depends on these protocols, never on concrete
implementations: the session manager and services see an identity
provider and a document store, not Firebase or Firestore.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from bdsync.core.auth.types import Identity
    from bdsync.core.domain_types import MeetingAnalysis

Unsubscribe = Callable[[], None]
AuthStateListener = Callable[["Identity | None"], Awaitable[None]]
DocumentListener = Callable[[dict[str, Any] | None], Awaitable[None]]
ErrorListener = Callable[[Exception], Awaitable[None]]


@runtime_checkable
class IdentityProvider(Protocol):
    """Interface for the hosted identity provider.

    Implementations must deliver the current auth state to a listener as
    soon as it subscribes, then push every later change.
    """

    async def subscribe_auth_state(self, listener: AuthStateListener) -> Unsubscribe:
        """Subscribe to sign-in / sign-out events.

        Args:
            listener: Receives an Identity, or None when signed out.

        Returns:
            Handle that releases the subscription.
        """
        ...

    async def sign_in(self, credential: str | None = None) -> Identity:
        """Run the interactive sign-in flow.

        Args:
            credential: IdP credential produced by the interactive step.

        Returns:
            The signed-in identity.

        Raises:
            IdentityProviderError: Tagged with the failure kind.
        """
        ...

    async def sign_out(self) -> None:
        """Sign the current identity out."""
        ...


@runtime_checkable
class DocumentStore(Protocol):
    """Interface for the hosted document database.

    Documents are plain dicts keyed by collection and document id.
    Transport failures raise StoreUnavailableError.
    """

    async def subscribe_document(
        self,
        collection: str,
        key: str,
        on_snapshot: DocumentListener,
        on_error: ErrorListener | None = None,
    ) -> Unsubscribe:
        """Watch a single document.

        The current contents (or None when missing) are pushed on
        subscription, then again after every change.
        """
        ...

    async def get_document(self, collection: str, key: str) -> dict[str, Any] | None:
        """Read a document, None when missing."""
        ...

    async def set_document(
        self,
        collection: str,
        key: str,
        value: dict[str, Any],
        merge: bool = False,
    ) -> None:
        """Upsert a document."""
        ...

    async def update_document(self, collection: str, key: str, fields: dict[str, Any]) -> None:
        """Update fields of an existing document.

        Raises:
            NotFoundError: If the document does not exist.
        """
        ...

    async def add_document(self, collection: str, value: dict[str, Any]) -> str:
        """Insert a document with a generated id and return the id."""
        ...

    async def query_documents(
        self,
        collection: str,
        field: str | None = None,
        value: Any = None,
    ) -> list[tuple[str, dict[str, Any]]]:
        """List (id, contents) pairs, optionally filtered by field equality."""
        ...

    async def array_union(
        self,
        collection: str,
        key: str,
        field: str,
        values: list[Any],
    ) -> None:
        """Add values to an array field, skipping ones already present."""
        ...


@runtime_checkable
class Analyzer(Protocol):
    """Interface for generating a structured analysis from meeting notes."""

    async def analyze(self, raw_notes: str) -> MeetingAnalysis:
        """Analyze raw meeting notes."""
        ...
