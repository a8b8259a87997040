"""Identity provider adapters."""

from bdsync.adapters.identity.firebase import FirebaseAuthConfig, FirebaseIdentityProvider

__all__ = ["FirebaseAuthConfig", "FirebaseIdentityProvider"]
