"""Process-wide session manager.

The session manager owns the authentication state of the application.
It bridges the identity provider's auth-state stream and the live
profile document of the signed-in user, and publishes one immutable
SessionState snapshot to every consumer.

It is constructed once at application start and handed to consumers
explicitly. Only the session manager mutates the state; everybody else
reads snapshots or registers listeners.

Lifecycle:

    Unresolved --(signed-out event)--> SignedOut
    Unresolved --(identity + profile)--> SignedIn
    SignedOut --sign_in()--> Authenticating --(stream)--> SignedIn
    SignedOut/Authenticating --sign_in() config error--> DemoActive + SignedIn(demo admin)
    SignedIn --logout()--> SignedOut
    DemoActive --logout()--> SignedOut (demo cleared, stream re-subscribed)

While Demo Mode is active the identity stream is not subscribed and no
profile document is read or written.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import replace
from typing import Any

import structlog
from pydantic import ValidationError

from bdsync.core.auth.demo import demo_admin_profile
from bdsync.core.auth.types import AuthErrorKind, Identity, SessionState, UserProfile
from bdsync.core.collections import COLLECTION_USERS
from bdsync.core.exceptions import IdentityProviderError, SessionError, StoreUnavailableError
from bdsync.core.interfaces import DocumentStore, IdentityProvider, Unsubscribe

logger = structlog.get_logger()

SessionListener = Callable[[SessionState], None]

DEFAULT_RESOLVE_TIMEOUT_SECONDS = 10.0


class SessionManager:
    """Owns user, loading and demo state for the whole process.

    Usage:
        async with SessionManager(identity, profiles) as session:
            await session.sign_in(credential)
            session.user  # UserProfile | None
    """

    def __init__(
        self,
        identity: IdentityProvider,
        profiles: DocumentStore,
        resolve_timeout: float = DEFAULT_RESOLVE_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the session manager.

        Args:
            identity: Identity provider client.
            profiles: Document store holding the ``users`` collection.
            resolve_timeout: Seconds ``initialize`` waits for the first
                identity resolution before forcing loading off.
        """
        self._identity = identity
        self._profiles = profiles
        self._resolve_timeout = resolve_timeout
        self._state = SessionState()
        self._listeners: list[SessionListener] = []
        self._auth_unsubscribe: Unsubscribe | None = None
        self._profile_unsubscribe: Unsubscribe | None = None
        self._profile_uid: str | None = None
        self._creating: set[str] = set()
        self._resolved = asyncio.Event()
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> SessionManager:
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def state(self) -> SessionState:
        """Current immutable snapshot."""
        return self._state

    @property
    def user(self) -> UserProfile | None:
        """Current profile, None when signed out."""
        return self._state.user

    @property
    def loading(self) -> bool:
        """Whether the initial identity state is still resolving."""
        return self._state.loading

    @property
    def is_demo(self) -> bool:
        """Whether the session runs in Demo Mode."""
        return self._state.is_demo

    def subscribe(self, listener: SessionListener) -> Unsubscribe:
        """Register a listener called with every new snapshot.

        Args:
            listener: Callable receiving the new SessionState.

        Returns:
            Handle that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def initialize(self) -> None:
        """Subscribe to the identity stream and wait for the first resolution.

        Skips the subscription entirely while Demo Mode is active.

        Raises:
            SessionError: If the identity subscription cannot be opened.
                The session is reset to signed-out first.
        """
        if self._state.is_demo:
            self._update(loading=False)
            return
        if self._auth_unsubscribe is not None:
            return

        try:
            self._auth_unsubscribe = await self._identity.subscribe_auth_state(
                self._on_auth_state
            )
        except Exception as e:
            logger.error("auth_subscription_failed", error=str(e))
            self._update(user=None, loading=False, error=f"Login Error: {e}")
            raise SessionError(f"Could not subscribe to identity provider: {e}") from e

        await self._wait_for_resolution()

    async def sign_in(self, credential: str | None = None) -> None:
        """Start an interactive sign-in.

        A successful sign-in does not touch the state directly; the
        identity stream delivers the new identity. Configuration-class
        failures switch the session into Demo Mode.

        Args:
            credential: IdP credential forwarded to the identity provider.

        Raises:
            IdentityProviderError: For any failure that is not a
                configuration error. State is left unchanged.
        """
        async with self._lock:
            if self._state.is_demo:
                logger.info("sign_in_skipped_demo_mode")
                return

            self._update(authenticating=True, error=None)
            try:
                await self._identity.sign_in(credential)
            except IdentityProviderError as e:
                self.handle_sign_in_failure(e)
            finally:
                if self._state.authenticating:
                    self._update(authenticating=False)

    def handle_sign_in_failure(self, error: IdentityProviderError) -> None:
        """Recover from a failed sign-in.

        Configuration errors enter Demo Mode; everything else is re-raised
        so the caller can show it to the user.

        Args:
            error: The tagged provider failure.

        Raises:
            IdentityProviderError: If the error is not a configuration error.
        """
        logger.error(
            "sign_in_failed",
            code=error.code,
            kind=error.kind.value,
            error=error.message,
        )
        if error.kind is not AuthErrorKind.CONFIG:
            raise error
        self._enter_demo_mode(error)

    async def logout(self) -> None:
        """Sign out, or leave Demo Mode.

        Leaving Demo Mode re-runs ``initialize`` so the real identity
        stream is subscribed again.
        """
        async with self._lock:
            if self._state.is_demo:
                logger.info("demo_mode_exited")
                self._update(is_demo=False, user=None)
                try:
                    await self.initialize()
                except SessionError as e:
                    logger.warning("auth_resubscribe_failed", error=str(e))
                return

            await self._identity.sign_out()
            self._release_profile_subscription()
            self._update(user=None)
            logger.info("signed_out")

    async def close(self) -> None:
        """Release the identity and profile subscriptions."""
        self._release_auth_subscription()
        self._release_profile_subscription()

    async def _wait_for_resolution(self) -> None:
        if not self._state.loading:
            return
        try:
            await asyncio.wait_for(self._resolved.wait(), timeout=self._resolve_timeout)
        except TimeoutError:
            logger.warning(
                "session_resolution_timed_out",
                timeout_seconds=self._resolve_timeout,
            )
            self._update(loading=False)

    async def _on_auth_state(self, identity: Identity | None) -> None:
        if self._state.is_demo:
            logger.debug("auth_event_ignored_in_demo_mode")
            return

        if identity is None:
            self._release_profile_subscription()
            self._update(user=None, loading=False)
            return

        if identity.uid == self._profile_uid and self._profile_unsubscribe is not None:
            return

        self._release_profile_subscription()
        self._profile_uid = identity.uid

        async def on_snapshot(data: dict[str, Any] | None) -> None:
            await self._on_profile_snapshot(identity, data)

        try:
            unsubscribe = await self._profiles.subscribe_document(
                COLLECTION_USERS,
                identity.uid,
                on_snapshot,
                on_error=self._on_profile_error,
            )
        except Exception as e:
            if self._profile_uid == identity.uid:
                self._profile_uid = None
            logger.error("profile_subscription_failed", uid=identity.uid, error=str(e))
            self._update(user=None, loading=False, error=f"Login Error: {e}")
            return

        if self._profile_uid != identity.uid:
            # Switched user, signed out or entered demo while subscribing.
            _safe_unsubscribe(unsubscribe, "profile")
            return
        self._profile_unsubscribe = unsubscribe

    async def _on_profile_snapshot(self, identity: Identity, data: dict[str, Any] | None) -> None:
        if self._state.is_demo or identity.uid != self._profile_uid:
            return

        if data is not None:
            try:
                profile = UserProfile.model_validate(data)
            except ValidationError as e:
                logger.error("profile_document_invalid", uid=identity.uid, error=str(e))
                self._update(loading=False)
                return
            self._update(user=profile, loading=False, error=None)
            return

        if identity.uid in self._creating:
            return
        self._creating.add(identity.uid)
        profile = UserProfile.default_for(identity)
        try:
            await self._profiles.set_document(
                COLLECTION_USERS,
                identity.uid,
                profile.to_document(),
            )
        except StoreUnavailableError as e:
            logger.error("profile_create_failed", uid=identity.uid, error=str(e))
            self._update(loading=False)
            return
        finally:
            self._creating.discard(identity.uid)

        logger.info("profile_created", uid=identity.uid)
        if identity.uid == self._profile_uid and not self._state.is_demo:
            self._update(user=profile, loading=False, error=None)

    async def _on_profile_error(self, error: Exception) -> None:
        logger.error("profile_subscription_error", uid=self._profile_uid, error=str(error))
        self._update(loading=False)

    def _enter_demo_mode(self, error: IdentityProviderError) -> None:
        logger.warning("demo_mode_entered", code=error.code)
        self._release_auth_subscription()
        self._release_profile_subscription()
        self._update(
            user=demo_admin_profile(),
            loading=False,
            is_demo=True,
            authenticating=False,
            error=None,
        )

    def _release_auth_subscription(self) -> None:
        unsubscribe, self._auth_unsubscribe = self._auth_unsubscribe, None
        if unsubscribe is not None:
            _safe_unsubscribe(unsubscribe, "auth")

    def _release_profile_subscription(self) -> None:
        unsubscribe, self._profile_unsubscribe = self._profile_unsubscribe, None
        self._profile_uid = None
        if unsubscribe is not None:
            _safe_unsubscribe(unsubscribe, "profile")

    def _update(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        if not self._state.loading:
            self._resolved.set()
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception as e:
                logger.warning("session_listener_failed", error=str(e))


def _safe_unsubscribe(unsubscribe: Unsubscribe, kind: str) -> None:
    try:
        unsubscribe()
    except Exception as e:
        logger.warning("unsubscribe_failed", subscription=kind, error=str(e))
