"""
Quest Schemas
=============
Pydantic models for quest recommendations. These are the contract
between the NEBULA client and the backend.

Key design decisions:
- Python attributes are snake_case, the wire format is camelCase
  (estimatedTime, completedQuests, ...). Both spellings are accepted
  on input so remote JSON and client payloads validate alike.
- Every Quest field is required. A quest that reaches the client is
  always fully populated, whichever tier produced it.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from nebula.models.common import CamelModel, GenerationSource


# ---------------------------------------------------------------------------
# Allowed values
# ---------------------------------------------------------------------------

QuestDifficulty = Literal["Easy", "Medium", "Hard"]
QuestType = Literal["daily", "weekly", "longterm"]


# ---------------------------------------------------------------------------
# Feature snapshot (input)
# ---------------------------------------------------------------------------

class Skill(CamelModel):
    name: str
    level: int


class CompletedQuest(CamelModel):
    title: str


class ReflectionEntry(CamelModel):
    date: str
    mood: str


class QuestFeatureSnapshot(CamelModel):
    """A user's current skills and recent history."""

    skills: list[Skill] = Field(default_factory=list)
    completed_quests: list[CompletedQuest] = Field(
        default_factory=list,
        description="Recently completed quests, most recent first.",
    )
    recent_reflections: list[ReflectionEntry] = Field(
        default_factory=list,
        description="Mood of the user's latest reflections.",
    )


# ---------------------------------------------------------------------------
# Quest (output)
# ---------------------------------------------------------------------------

class Quest(CamelModel):
    """A single recommended quest."""

    id: str = Field(..., description="Unique within the response, e.g. 'quest-<ns>-1'.")
    title: str
    description: str
    difficulty: QuestDifficulty
    type: QuestType
    estimated_time: str = Field(..., description="Human readable, e.g. '45 min'.")
    xp: int = Field(..., ge=0)
    tags: list[str]


# ---------------------------------------------------------------------------
# Request / response
# ---------------------------------------------------------------------------

class QuestRecommendationRequest(QuestFeatureSnapshot):
    """Payload the client sends to ask for quest recommendations."""

    user_id: str = Field(..., min_length=1)


class QuestRecommendations(CamelModel):
    """Quests plus the tier they came from. Also the API response body."""

    quests: list[Quest]
    source: GenerationSource
