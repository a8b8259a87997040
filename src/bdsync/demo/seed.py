"""Demo seed data.

Demo Mode never touches the hosted store. Its teams and meetings live
in an in-memory store seeded with the teams below, and the store is
reset when Demo Mode is exited. The demo members are fixed and never
stored.
"""

from __future__ import annotations

from bdsync.adapters.store.memory import InMemoryDocumentStore
from bdsync.core.auth.types import UserProfile
from bdsync.core.collections import COLLECTION_TEAMS
from bdsync.core.domain_types import Team

DEMO_TEAMS = (
    Team(id="team-alpha", name="Alpha Squad (Enterprise)"),
    Team(id="team-beta", name="Beta Force (SMB)"),
    Team(id="team-gamma", name="Gamma Growth (Partnerships)"),
)

DEMO_MEMBERS = (
    UserProfile(uid="1", display_name="Sarah Jenkins", email="sarah@example.com"),
    UserProfile(uid="2", display_name="Mike Ross", email="mike@example.com"),
    UserProfile(uid="3", display_name="Jessica Pearson", email="jessica@example.com"),
)


def build_demo_store() -> InMemoryDocumentStore:
    """Build a demo store preloaded with the demo teams."""
    return InMemoryDocumentStore(
        {
            COLLECTION_TEAMS: {
                team.id: team.model_dump(by_alias=True, exclude={"id"}) for team in DEMO_TEAMS
            },
        }
    )
