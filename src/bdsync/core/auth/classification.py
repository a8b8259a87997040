"""Classification of identity provider failures.

Which provider errors count as a configuration problem decides whether
a failed sign-in drops the session into Demo Mode. The boundary is an
allow-list of codes plus message markers so deployments can tune it
without code changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from bdsync.core.auth.types import AuthErrorKind

DEFAULT_CONFIG_ERROR_CODES = frozenset(
    {
        "auth/api-key-not-valid",
        "auth/internal-error",
        "auth/unauthorized-domain",
    }
)
DEFAULT_CONFIG_ERROR_MARKERS = ("api-key", "domain")
DEFAULT_NETWORK_ERROR_CODES = frozenset({"auth/network-request-failed"})


@dataclass(frozen=True)
class ConfigErrorPolicy:
    """Allow-list deciding which provider failures are configuration errors.

    Attributes:
        codes: Provider codes treated as configuration errors.
        markers: Substrings that mark a message as a configuration error.
        network_codes: Provider codes treated as transport failures.
    """

    codes: frozenset[str] = DEFAULT_CONFIG_ERROR_CODES
    markers: tuple[str, ...] = DEFAULT_CONFIG_ERROR_MARKERS
    network_codes: frozenset[str] = field(default=DEFAULT_NETWORK_ERROR_CODES)

    @classmethod
    def from_strings(
        cls,
        codes: str | None = None,
        markers: str | None = None,
    ) -> ConfigErrorPolicy:
        """Build a policy from comma-separated overrides.

        Empty or missing values keep the defaults.
        """
        parsed_codes = _split(codes)
        parsed_markers = _split(markers)
        return cls(
            codes=frozenset(parsed_codes) if parsed_codes else DEFAULT_CONFIG_ERROR_CODES,
            markers=tuple(parsed_markers) if parsed_markers else DEFAULT_CONFIG_ERROR_MARKERS,
        )


def classify_provider_error(
    code: str,
    message: str = "",
    policy: ConfigErrorPolicy | None = None,
) -> AuthErrorKind:
    """Map a provider error code and message to a failure class.

    Args:
        code: Provider error code, e.g. ``auth/unauthorized-domain``.
        message: Provider message.
        policy: Classification policy. Uses defaults if not provided.

    Returns:
        CONFIG, NETWORK or AUTH.
    """
    policy = policy or ConfigErrorPolicy()
    if code in policy.codes:
        return AuthErrorKind.CONFIG
    lowered = (message or "").lower()
    if any(marker.lower() in lowered for marker in policy.markers):
        return AuthErrorKind.CONFIG
    if code in policy.network_codes:
        return AuthErrorKind.NETWORK
    return AuthErrorKind.AUTH


def _split(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]
