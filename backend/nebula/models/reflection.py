"""
Reflection Schemas
==================
Pydantic models for reflection analysis.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from nebula.models.common import CamelModel, GenerationSource


class ReflectionSubmission(CamelModel):
    """What the user answered in a reflection session."""

    mood: Optional[str] = Field(
        default="neutral",
        description="One of positive, neutral, negative. Anything else, null included, is read as neutral.",
    )
    answers: dict[str, str] = Field(
        default_factory=dict,
        description="Keyed 'question1', 'question2', ... parallel to questions. May be sparse.",
    )
    questions: list[str] = Field(default_factory=list)


class ReflectionAnalysis(CamelModel):
    summary: str
    insights: list[str]
    recommendations: list[str]
    suggested_quests: list[str]


class ReflectionAnalysisRequest(ReflectionSubmission):
    user_id: str = Field(..., min_length=1)


class ReflectionAnalysisResponse(CamelModel):
    analysis: ReflectionAnalysis
    source: GenerationSource
