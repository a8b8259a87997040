"""Gemini meeting analyzer with pydantic-ai structured output."""

from __future__ import annotations

from typing import Any

import structlog
from pydantic_ai import Agent
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.output import PromptedOutput
from pydantic_ai.providers.google import GoogleProvider

from bdsync.core.domain_types import ActionItem, MeetingAnalysis

logger = structlog.get_logger()

DEFAULT_MODEL = "gemini-3-flash-preview"

INSTRUCTIONS = "You are a Business Development Consultant. Analyze these raw meeting notes."

DEMO_ANALYSIS = MeetingAnalysis(
    summary=(
        "[DEMO] The team discussed Q3 pipeline targets and identified a need for two new "
        "SDR hires. Client acquisition costs have decreased by 15%, but retention in the "
        "SMB sector is a concern."
    ),
    action_items=[
        ActionItem(task="Draft job description for SDR roles", owner="Sarah"),
        ActionItem(task="Prepare SMB retention analysis report", owner="Mike"),
        ActionItem(task="Schedule sync with Marketing regarding lead quality", owner="Jessica"),
    ],
    suggestions=(
        "Consider implementing a 'Customer Health Score' metric for SMB clients to "
        "preemptively identify churn risks."
    ),
)


class MeetingAnalyzer:
    """Produces a MeetingAnalysis from raw notes with Gemini.

    Without an API key, or when the model call fails, the fixed demo
    analysis is returned so the workspace keeps working.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        max_retries: int = 2,
        agent: Agent[None, MeetingAnalysis] | None = None,
    ) -> None:
        """Initialize the analyzer.

        Args:
            api_key: Gemini API key. Empty or None disables the model.
            model: Gemini model name.
            max_retries: Max retries on output validation failure.
            agent: Pre-built agent, used instead of building one.
        """
        self._model_name = model
        self._agent = agent
        if self._agent is None and api_key:
            self._agent = Agent(
                GoogleModel(model, provider=GoogleProvider(api_key=api_key)),
                name="meeting-analyzer",
                instructions=INSTRUCTIONS,
                output_type=PromptedOutput(MeetingAnalysis),
                retries=max_retries,
            )

    @property
    def configured(self) -> bool:
        """Whether a model is available."""
        return self._agent is not None

    async def analyze(self, raw_notes: str) -> MeetingAnalysis:
        """Analyze raw meeting notes.

        Args:
            raw_notes: Notes as typed during the meeting.

        Returns:
            The model's analysis, or the demo analysis as a fallback.
        """
        if self._agent is None:
            logger.info("analysis_demo_fallback", reason="no_api_key")
            return DEMO_ANALYSIS.model_copy(deep=True)

        try:
            result: Any = await self._agent.run(raw_notes)
        except Exception as e:
            logger.error("analysis_failed", model=self._model_name, error=str(e))
            return DEMO_ANALYSIS.model_copy(deep=True)

        analysis: MeetingAnalysis = result.output
        logger.info(
            "analysis_generated",
            model=self._model_name,
            action_items=len(analysis.action_items),
        )
        return analysis
