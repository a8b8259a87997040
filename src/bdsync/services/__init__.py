"""Application services."""

from bdsync.services.invitations import InvitationService
from bdsync.services.meetings import MeetingService
from bdsync.services.teams import TeamService
from bdsync.services.workspace import WorkspaceBackends

__all__ = [
    "InvitationService",
    "MeetingService",
    "TeamService",
    "WorkspaceBackends",
]
