"""
Quest Recommendation Service
============================
Recommends personalised quests from a user's feature snapshot.

Tiers (see services/generation.py for the routing rules):
    remote    → chat model, reply parsed as a JSON array of quests
    heuristic → five quests built around the user's strongest and
                weakest skill
    fallback  → three fixed quests (reflection, planning, learning)

The heuristic output order is fixed and clients rely on it:
    1. daily    Medium  75 XP  deepen the highest skill
    2. daily    Easy    50 XP  improve the lowest skill
    3. weekly   Easy   100 XP  weekly reflection routine
    4. weekly   Hard   150 XP  skill combination
    5. longterm Hard   500 XP  30-day habit
"""

from __future__ import annotations

import logging

from nebula.models.quest import Quest, QuestFeatureSnapshot, QuestRecommendations, Skill
from nebula.services.generation import TieredGenerationService
from nebula.services.parsing import parse_quests
from nebula.services.prompts import QUEST_SYSTEM_PROMPT, build_quest_prompt
from nebula.services.quest_ids import quest_ids

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Used when the snapshot carries no skills at all
DEFAULT_HIGHEST_SKILL = Skill(name="Productivity", level=5)
DEFAULT_LOWEST_SKILL = Skill(name="Meditation", level=2)

# ---------------------------------------------------------------------------
# Static fallback
# ---------------------------------------------------------------------------

FALLBACK_QUESTS: tuple[dict, ...] = (
    {
        "title": "Daily reflection",
        "description": (
            "Take 15 minutes to reflect on your day and write down the "
            "most important insights."
        ),
        "difficulty": "Easy",
        "type": "daily",
        "estimated_time": "15 min",
        "xp": 30,
        "tags": ["Reflection", "Mindfulness"],
    },
    {
        "title": "Weekly planning",
        "description": (
            "Draw up a detailed plan for the coming week with goals and priorities."
        ),
        "difficulty": "Medium",
        "type": "weekly",
        "estimated_time": "45 min",
        "xp": 75,
        "tags": ["Planning", "Organisation", "Productivity"],
    },
    {
        "title": "Learning project",
        "description": (
            "Pick a new topic or skill and put together a 30-day learning plan."
        ),
        "difficulty": "Hard",
        "type": "longterm",
        "estimated_time": "30 min daily",
        "xp": 300,
        "tags": ["Education", "Growth", "Skills"],
    },
)


def fallback_quests() -> list[Quest]:
    """Fixed quests served when every other tier has failed."""
    return [
        Quest(id=quest_id, **template)
        for quest_id, template in zip(quest_ids(len(FALLBACK_QUESTS)), FALLBACK_QUESTS)
    ]


# ---------------------------------------------------------------------------
# Heuristic
# ---------------------------------------------------------------------------

def _skill_extremes(skills: list[Skill]) -> tuple[Skill, Skill]:
    """Highest and lowest skill by level, first occurrence wins ties."""
    if not skills:
        return DEFAULT_HIGHEST_SKILL, DEFAULT_LOWEST_SKILL
    highest = max(skills, key=lambda s: s.level)
    lowest = min(skills, key=lambda s: s.level)
    return highest, lowest


def heuristic_quests(snapshot: QuestFeatureSnapshot) -> list[Quest]:
    """Five quests derived from the snapshot without any external call."""
    highest, lowest = _skill_extremes(snapshot.skills)
    ids = quest_ids(5)

    return [
        Quest(
            id=ids[0],
            title=f"Deepen {highest.name}",
            description=(
                f"Use your strength in {highest.name} (Level {highest.level}) "
                "to take on a demanding project."
            ),
            difficulty="Medium",
            type="daily",
            estimated_time="45 min",
            xp=75,
            tags=[highest.name, "Strengths", "Challenge"],
        ),
        Quest(
            id=ids[1],
            title=f"Improve {lowest.name}",
            description=(
                f"Work on your development in {lowest.name} (Level {lowest.level}) "
                "with a basic exercise."
            ),
            difficulty="Easy",
            type="daily",
            estimated_time="20 min",
            xp=50,
            tags=[lowest.name, "Growth", "Fundamentals"],
        ),
        Quest(
            id=ids[2],
            title="Weekly reflection routine",
            description=(
                "Reflect in depth on the progress and challenges of your week."
            ),
            difficulty="Easy",
            type="weekly",
            estimated_time="60 min",
            xp=100,
            tags=["Reflection", "Mindfulness", "Planning"],
        ),
        Quest(
            id=ids[3],
            title="Skill combination",
            description=(
                "Combine two of your skills in a creative project to discover synergies."
            ),
            difficulty="Hard",
            type="weekly",
            estimated_time="120 min",
            xp=150,
            tags=["Creativity", "Synergy", "Project"],
        ),
        Quest(
            id=ids[4],
            title="30-day habit",
            description=(
                "Establish a new daily habit over 30 days that supports several "
                "of your development areas."
            ),
            difficulty="Hard",
            type="longterm",
            estimated_time="15 min daily",
            xp=500,
            tags=["Habit building", "Consistency", "Long-term growth"],
        ),
    ]


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class QuestGenerationService(TieredGenerationService[list[Quest]]):
    """Produces quest recommendations for users."""

    domain = "quest recommendations"
    system_prompt = QUEST_SYSTEM_PROMPT

    def build_prompt(self, payload: QuestFeatureSnapshot) -> str:
        return build_quest_prompt(payload)

    def parse(self, raw_response: str) -> list[Quest]:
        return parse_quests(raw_response)

    def heuristic(self, payload: QuestFeatureSnapshot) -> list[Quest]:
        return heuristic_quests(payload)

    def fallback(self) -> list[Quest]:
        return fallback_quests()

    async def generate_recommendations(
        self, user_id: str, snapshot: QuestFeatureSnapshot
    ) -> QuestRecommendations:
        """Recommend quests for *user_id*. Always returns a populated result."""
        quests, source = await self.generate(user_id, snapshot)
        logger.debug("Recommending %d quests for user %s (source=%s)", len(quests), user_id, source.value)
        return QuestRecommendations(quests=quests, source=source)


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_default_service: QuestGenerationService | None = None


def get_quest_service() -> QuestGenerationService:
    global _default_service
    if _default_service is None:
        _default_service = QuestGenerationService()
    return _default_service
