"""Meeting analysis API route."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from bdsync.core.domain_types import MeetingAnalysis
from bdsync.core.interfaces import Analyzer
from bdsync.entrypoints.api.deps import get_analyzer
from bdsync.entrypoints.api.middleware.session_guard import RequireSession

router = APIRouter(tags=["analysis"])

AnalyzerDep = Annotated[Analyzer, Depends(get_analyzer)]


class AnalysisRequest(BaseModel):
    """Request to analyze raw meeting notes."""

    raw_notes: str = Field(..., min_length=1)


@router.post("/analysis", response_model=MeetingAnalysis)
async def analyze_notes(
    body: AnalysisRequest,
    _: RequireSession,
    analyzer: AnalyzerDep,
) -> MeetingAnalysis:
    """Generate a structured analysis from raw notes.

    Falls back to the demo analysis when the model is unavailable.
    """
    return await analyzer.analyze(body.raw_notes)
