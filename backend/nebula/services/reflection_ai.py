"""
Reflection Analysis Service
===========================
Analyses a reflection submission (mood + answers to prompts).

Tiers (see services/generation.py for the routing rules):
    remote    → chat model, reply parsed as one analysis object
    heuristic → three fixed analyses keyed by mood; answers are not read
    fallback  → one fixed analysis apologising that no detailed
                analysis was possible
"""

from __future__ import annotations

import logging
from typing import Optional

from nebula.models.common import GenerationSource
from nebula.models.reflection import (
    ReflectionAnalysis,
    ReflectionAnalysisResponse,
    ReflectionSubmission,
)
from nebula.services.generation import TieredGenerationService
from nebula.services.parsing import parse_analysis
from nebula.services.prompts import REFLECTION_SYSTEM_PROMPT, build_reflection_prompt

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Heuristic analyses keyed by mood
# ---------------------------------------------------------------------------

MOOD_ANALYSES: dict[str, dict] = {
    "positive": {
        "summary": (
            "Based on your reflection you seem very productive and positive today. "
            "You have made good progress on your goals and show an optimistic "
            "attitude towards the challenges ahead."
        ),
        "insights": [
            "You show strong intrinsic motivation",
            "You focus on solutions rather than problems",
            "You recognise and appreciate your successes",
        ],
        "recommendations": [
            "Use your positive energy to push a demanding project forward",
            "Share your successes with others to inspire them",
            "Set yourself a new, ambitious goal for the coming week",
        ],
        "suggested_quests": [
            "Challenge quest: learn a new skill: +100 XP",
            "Inspiration quest: share your success story: +50 XP",
            "Planning quest: set a new goal with concrete steps: +75 XP",
        ],
    },
    "negative": {
        "summary": (
            "Your reflection shows that you went through some challenges today. "
            "It seems to have been a demanding day, but you show resilience and "
            "the will to keep going."
        ),
        "insights": [
            "You are able to recognise and name difficulties",
            "You tend to be too self-critical",
            "You have room for more self-compassion",
        ],
        "recommendations": [
            "Take time for self-care and recovery",
            "Reflect on past successes to regain perspective",
            "Share your challenges with someone you trust or a mentor",
        ],
        "suggested_quests": [
            "Self-care quest: 30 minutes of relaxation: +40 XP",
            "Reflection quest: write down three positive things about today: +30 XP",
            "Connection quest: reach out to a friend for support: +50 XP",
        ],
    },
    "neutral": {
        "summary": (
            "Based on your reflection you seem to have had a balanced day. You are "
            "making steady progress on your goals and have gained valuable insights "
            "about yourself."
        ),
        "insights": [
            "You show a balanced perspective on your experiences",
            "You focus on continuous progress rather than perfection",
            "You are aware of your strengths and areas for improvement",
        ],
        "recommendations": [
            "Try getting up 30 minutes earlier tomorrow for more focus time",
            "Schedule a short meditation to improve your concentration",
            "Set a specific goal for the next step in your main project",
        ],
        "suggested_quests": [
            "Optimise your morning routine: +50 XP",
            "15 minutes of meditation: +30 XP",
            "Move your main project forward: +100 XP",
        ],
    },
}

FALLBACK_ANALYSIS: dict = {
    "summary": (
        "Thank you for your reflection. Due to technical difficulties no detailed "
        "analysis could be produced."
    ),
    "insights": [
        "Regular reflection is an important part of personal growth",
        "Awareness of your thoughts and feelings strengthens your emotional intelligence",
    ],
    "recommendations": [
        "Keep up your regular reflection practice",
        "Try to recognise patterns in your thoughts and behaviour",
    ],
    "suggested_quests": [
        "Continue daily reflection: +30 XP",
        "Establish a journaling practice: +50 XP",
    ],
}


def heuristic_analysis(mood: Optional[str]) -> ReflectionAnalysis:
    """Coarse three-bucket analysis: positive, negative, everything else."""
    if mood == "positive":
        return ReflectionAnalysis(**MOOD_ANALYSES["positive"])
    if mood == "negative":
        return ReflectionAnalysis(**MOOD_ANALYSES["negative"])
    return ReflectionAnalysis(**MOOD_ANALYSES["neutral"])


def fallback_analysis() -> ReflectionAnalysis:
    return ReflectionAnalysis(**FALLBACK_ANALYSIS)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class ReflectionAnalysisService(TieredGenerationService[ReflectionAnalysis]):
    """Analyses reflection submissions."""

    domain = "reflection analysis"
    system_prompt = REFLECTION_SYSTEM_PROMPT

    def build_prompt(self, payload: ReflectionSubmission) -> str:
        return build_reflection_prompt(payload)

    def parse(self, raw_response: str) -> ReflectionAnalysis:
        return parse_analysis(raw_response)

    def heuristic(self, payload: ReflectionSubmission) -> ReflectionAnalysis:
        return heuristic_analysis(payload.mood)

    def fallback(self) -> ReflectionAnalysis:
        return fallback_analysis()

    async def analyze_submission(
        self, user_id: str, submission: ReflectionSubmission
    ) -> ReflectionAnalysisResponse:
        """Analyse *submission* for *user_id*. Always returns a populated result."""
        analysis, source = await self.generate(user_id, submission)
        if source is GenerationSource.HEURISTIC:
            logger.debug("Mood '%s' analysed heuristically for user %s", submission.mood, user_id)
        return ReflectionAnalysisResponse(analysis=analysis, source=source)


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_default_service: ReflectionAnalysisService | None = None


def get_reflection_service() -> ReflectionAnalysisService:
    global _default_service
    if _default_service is None:
        _default_service = ReflectionAnalysisService()
    return _default_service
