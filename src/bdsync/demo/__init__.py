"""Demo Mode seed data."""

from bdsync.demo.seed import DEMO_MEMBERS, DEMO_TEAMS, build_demo_store

__all__ = ["DEMO_MEMBERS", "DEMO_TEAMS", "build_demo_store"]
