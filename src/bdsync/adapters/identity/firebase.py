"""Firebase Authentication identity provider.

Talks to the Identity Toolkit REST API. Sign-in exchanges an IdP
credential (a Google ID token) through ``accounts:signInWithIdp``;
the signed-in identity is held in memory and pushed to auth-state
listeners.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

import httpx
import structlog

from bdsync.core.auth.classification import ConfigErrorPolicy, classify_provider_error
from bdsync.core.auth.types import Identity
from bdsync.core.exceptions import IdentityProviderError
from bdsync.core.interfaces import AuthStateListener, Unsubscribe

logger = structlog.get_logger()

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"

# Identity Toolkit reasons and message tokens mapped to client error codes.
_REST_ERROR_CODES = {
    "API_KEY_INVALID": "auth/api-key-not-valid",
    "UNAUTHORIZED_DOMAIN": "auth/unauthorized-domain",
    "INVALID_IDP_RESPONSE": "auth/invalid-credential",
    "USER_DISABLED": "auth/user-disabled",
    "OPERATION_NOT_ALLOWED": "auth/operation-not-allowed",
    "INTERNAL_ERROR": "auth/internal-error",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "auth/too-many-requests",
}


@dataclass(frozen=True)
class FirebaseAuthConfig:
    """Firebase Authentication configuration."""

    api_key: str
    request_uri: str = "http://localhost"
    provider_id: str = "google.com"
    base_url: str = IDENTITY_TOOLKIT_URL
    timeout_seconds: float = 10.0


class FirebaseIdentityProvider:
    """Identity provider backed by Firebase Authentication.

    Every listener receives the current identity on subscription and
    every later change made through ``sign_in`` or ``sign_out``.
    """

    def __init__(
        self,
        config: FirebaseAuthConfig,
        policy: ConfigErrorPolicy | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            config: Firebase configuration.
            policy: Classification policy for provider errors.
            client: Shared HTTP client. A client per request is used if
                not provided.
        """
        self._config = config
        self._policy = policy or ConfigErrorPolicy()
        self._client = client
        self._current: Identity | None = None
        self._listeners: list[AuthStateListener] = []

    @property
    def current(self) -> Identity | None:
        """Identity signed in through this provider, if any."""
        return self._current

    async def subscribe_auth_state(self, listener: AuthStateListener) -> Unsubscribe:
        """Register a listener and deliver the current state to it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        await listener(self._current)
        return unsubscribe

    async def sign_in(self, credential: str | None = None) -> Identity:
        """Exchange an IdP credential for a Firebase identity.

        Args:
            credential: Google ID token from the interactive step.

        Returns:
            The signed-in identity.

        Raises:
            IdentityProviderError: Tagged with the failure kind.
        """
        if not self._config.api_key:
            raise self._error("auth/api-key-not-valid", "Firebase api-key is not configured.")
        if not credential:
            raise self._error("auth/missing-credential", "No sign-in credential was provided.")

        body = {
            "postBody": urlencode(
                {"id_token": credential, "providerId": self._config.provider_id}
            ),
            "requestUri": self._config.request_uri,
            "returnSecureToken": True,
            "returnIdpCredential": True,
        }
        data = await self._post("accounts:signInWithIdp", body)

        identity = Identity(
            uid=data["localId"],
            email=data.get("email"),
            display_name=data.get("displayName"),
            photo_url=data.get("photoUrl"),
        )
        self._current = identity
        logger.info("identity_signed_in", uid=identity.uid)
        await self._notify()
        return identity

    async def sign_out(self) -> None:
        """Forget the current identity and notify listeners."""
        if self._current is None:
            return
        logger.info("identity_signed_out", uid=self._current.uid)
        self._current = None
        await self._notify()

    async def _post(self, method: str, body: dict[str, Any]) -> dict[str, Any]:
        url = f"{self._config.base_url}/{method}"
        params = {"key": self._config.api_key}
        try:
            if self._client is not None:
                response = await self._client.post(
                    url, params=params, json=body, timeout=self._config.timeout_seconds
                )
            else:
                async with httpx.AsyncClient(timeout=self._config.timeout_seconds) as client:
                    response = await client.post(url, params=params, json=body)
        except httpx.TransportError as e:
            raise self._error("auth/network-request-failed", str(e)) from e

        if response.is_success:
            result: dict[str, Any] = response.json()
            return result
        raise self._response_error(response)

    def _response_error(self, response: httpx.Response) -> IdentityProviderError:
        if response.status_code >= 500:
            return self._error(
                "auth/internal-error",
                f"Identity provider returned {response.status_code}",
            )

        try:
            error = response.json().get("error", {})
        except ValueError:
            error = {}
        message = str(error.get("message") or response.text or "Sign-in failed")
        reason = _reason(error) or message.split(":", 1)[0].strip()
        code = _REST_ERROR_CODES.get(reason, "auth/" + reason.lower().replace("_", "-"))
        return self._error(code, message)

    def _error(self, code: str, message: str) -> IdentityProviderError:
        kind = classify_provider_error(code, message, self._policy)
        return IdentityProviderError(message, kind=kind, code=code)

    async def _notify(self) -> None:
        for listener in list(self._listeners):
            await listener(self._current)


def _reason(error: dict[str, Any]) -> str | None:
    for detail in error.get("details") or []:
        if isinstance(detail, dict) and detail.get("reason"):
            return str(detail["reason"])
    return None
