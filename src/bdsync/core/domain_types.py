"""Domain types for teams and meetings."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Team(BaseModel):
    """A team of members sharing a meeting workspace."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    member_ids: list[str] = Field(default_factory=list, alias="memberIds")

    @classmethod
    def from_document(cls, team_id: str, data: dict[str, Any]) -> Team:
        """Build from a stored document and its id."""
        return cls.model_validate({**data, "id": team_id})


class ActionItem(BaseModel):
    """A task with an owner, extracted from meeting notes."""

    task: str
    owner: str


class MeetingAnalysis(BaseModel):
    """Structured analysis attached to a meeting."""

    summary: str = Field(description="A professional executive summary of the meeting.")
    action_items: list[ActionItem] = Field(
        default_factory=list,
        description="A list of actionable tasks derived from the notes.",
    )
    suggestions: str = Field(
        default="",
        description=(
            "One strategic insight, risk identification, or growth opportunity "
            "based on the discussion."
        ),
    )


class Meeting(BaseModel):
    """A recorded team meeting."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    team_id: str = Field(alias="teamId")
    date: str
    raw_notes: str = Field(default="", alias="rawNotes")
    analysis: MeetingAnalysis | None = None
    created_at: int | datetime | None = Field(default=None, alias="createdAt")
    created_by: str | None = Field(default=None, alias="createdBy")
    last_edited_by: str | None = Field(default=None, alias="lastEditedBy")
    last_edited_at: str | None = Field(default=None, alias="lastEditedAt")

    @classmethod
    def from_document(cls, meeting_id: str, data: dict[str, Any]) -> Meeting:
        """Build from a stored document and its id."""
        return cls.model_validate({**data, "id": meeting_id})
