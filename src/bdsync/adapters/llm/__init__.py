"""LLM adapters."""

from bdsync.adapters.llm.analyzer import DEMO_ANALYSIS, MeetingAnalyzer

__all__ = ["DEMO_ANALYSIS", "MeetingAnalyzer"]
