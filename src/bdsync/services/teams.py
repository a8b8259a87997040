"""Team administration service."""

from __future__ import annotations

import time

import structlog

from bdsync.core.auth.types import UserProfile
from bdsync.core.collections import COLLECTION_TEAMS, COLLECTION_USERS
from bdsync.core.domain_types import Team
from bdsync.core.exceptions import NotFoundError
from bdsync.demo.seed import DEMO_MEMBERS
from bdsync.services.workspace import WorkspaceBackends, require_admin, require_team_member

logger = structlog.get_logger()


class TeamService:
    """Lists, creates and describes teams for the current session."""

    def __init__(self, backends: WorkspaceBackends, app_base_url: str) -> None:
        """Initialize the team service.

        Args:
            backends: Live and demo stores.
            app_base_url: Public base URL used in invitation links.
        """
        self._backends = backends
        self._app_base_url = app_base_url.rstrip("/")

    async def list_teams(self) -> list[Team]:
        """List every team. Admin only."""
        require_admin(self._backends.session)
        documents = await self._backends.store.query_documents(COLLECTION_TEAMS)
        return [Team.from_document(team_id, data) for team_id, data in documents]

    async def create_team(self, name: str) -> Team:
        """Create an empty team. Admin only.

        Args:
            name: Team display name.

        Returns:
            The created team.

        Raises:
            ValueError: If the name is blank.
        """
        admin = require_admin(self._backends.session)
        name = name.strip()
        if not name:
            raise ValueError("Team name must not be blank")

        team_id = await self._backends.store.add_document(
            COLLECTION_TEAMS,
            {"name": name, "memberIds": [], "createdAt": int(time.time() * 1000)},
        )
        logger.info("team_created", team_id=team_id, created_by=admin.uid)
        return Team(id=team_id, name=name)

    async def get_team(self, team_id: str) -> Team:
        """Fetch a team the current user may access.

        Raises:
            NotFoundError: If the team does not exist.
        """
        require_team_member(self._backends.session, team_id)
        data = await self._backends.store.get_document(COLLECTION_TEAMS, team_id)
        if data is None:
            raise NotFoundError(f"Team not found: {team_id}")
        return Team.from_document(team_id, data)

    async def list_members(self, team_id: str) -> list[UserProfile]:
        """List the profiles assigned to a team."""
        require_team_member(self._backends.session, team_id)
        if self._backends.session.is_demo:
            return list(DEMO_MEMBERS)
        documents = await self._backends.store.query_documents(
            COLLECTION_USERS, "teamId", team_id
        )
        return [UserProfile.model_validate(data) for _, data in documents]

    def invite_link(self, team_id: str) -> str:
        """Build the invitation link for a team. Admin only."""
        require_admin(self._backends.session)
        return f"{self._app_base_url}/#/join/{team_id}"
