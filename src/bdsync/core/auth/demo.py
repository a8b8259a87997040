"""The fixed identity used while the session runs in Demo Mode."""

from __future__ import annotations

from bdsync.core.auth.types import UserProfile, UserRole

DEMO_ADMIN_UID = "demo-admin-123"
DEMO_ADMIN_EMAIL = "admin@bdsync.demo"
DEMO_ADMIN_NAME = "Demo Admin"
DEMO_ADMIN_PHOTO_URL = (
    "https://ui-avatars.com/api/?name=Demo+Admin&background=0ea5e9&color=fff"
)


def demo_admin_profile() -> UserProfile:
    """Return the locally fabricated demo administrator.

    Never written to the profile store.
    """
    return UserProfile(
        uid=DEMO_ADMIN_UID,
        email=DEMO_ADMIN_EMAIL,
        display_name=DEMO_ADMIN_NAME,
        role=UserRole.ADMIN,
        team_id=None,
        photo_url=DEMO_ADMIN_PHOTO_URL,
    )
