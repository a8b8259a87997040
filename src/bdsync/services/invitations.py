"""Team invitation service."""

from __future__ import annotations

import structlog

from bdsync.core.collections import COLLECTION_TEAMS, COLLECTION_USERS
from bdsync.core.domain_types import Team
from bdsync.core.exceptions import NotFoundError
from bdsync.services.workspace import WorkspaceBackends, require_user

logger = structlog.get_logger()

DEMO_INVITATION_TEAM_NAME = "Demo Team"


class InvitationService:
    """Resolves invitation links and joins users to teams."""

    def __init__(self, backends: WorkspaceBackends) -> None:
        """Initialize the invitation service.

        Args:
            backends: Live and demo stores.
        """
        self._backends = backends

    async def get_invitation(self, team_id: str) -> Team:
        """Look up the team an invitation link points at.

        Does not require a signed-in user.

        Raises:
            NotFoundError: If the team does not exist.
        """
        if self._backends.session.is_demo:
            return Team(id=team_id, name=DEMO_INVITATION_TEAM_NAME)

        data = await self._backends.live.get_document(COLLECTION_TEAMS, team_id)
        if data is None:
            raise NotFoundError("Team not found.")
        return Team.from_document(team_id, data)

    async def accept(self, team_id: str) -> Team:
        """Join the signed-in user to a team.

        The profile subscription delivers the new team assignment to the
        session; nothing is changed on the session directly. In Demo
        Mode the join is simulated and nothing is written.

        Raises:
            NotSignedInError: If nobody is signed in.
            NotFoundError: If the team does not exist.
        """
        user = require_user(self._backends.session)
        team = await self.get_invitation(team_id)

        if self._backends.session.is_demo:
            logger.info("demo_join_simulated", team_id=team_id)
            return team

        store = self._backends.live
        await store.update_document(COLLECTION_USERS, user.uid, {"teamId": team_id})
        await store.array_union(COLLECTION_TEAMS, team_id, "memberIds", [user.uid])
        logger.info("team_joined", uid=user.uid, team_id=team_id)
        if user.uid in team.member_ids:
            return team
        return team.model_copy(update={"member_ids": [*team.member_ids, user.uid]})
