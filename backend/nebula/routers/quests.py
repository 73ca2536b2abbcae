"""
Quests Router
=============
POST /api/v1/quests/recommendations: Personalised quest recommendations.

Calls the QuestGenerationService which:
  1. Asks the chat model for quests when real generation is configured
  2. Otherwise builds five quests around the user's strongest and
     weakest skill
  3. Serves three fixed quests if either of the above fails

The endpoint always answers 200 with a fully populated list. Only a
malformed request body is rejected (422, by FastAPI validation).
"""

from __future__ import annotations

from fastapi import APIRouter, status

from nebula.models.quest import QuestRecommendationRequest, QuestRecommendations
from nebula.services.quest_ai import get_quest_service

router = APIRouter(prefix="/api/v1/quests", tags=["quests"])


@router.post(
    "/recommendations",
    response_model=QuestRecommendations,
    status_code=status.HTTP_200_OK,
    summary="Recommend quests for a user",
    description=(
        "Returns quest recommendations personalised from the submitted skills, "
        "completed quests and recent reflection moods. `source` tells which tier "
        "produced them: remote, heuristic or fallback."
    ),
)
async def recommend_quests(body: QuestRecommendationRequest) -> QuestRecommendations:
    """Recommend quests for the user in the request body."""
    service = get_quest_service()
    return await service.generate_recommendations(body.user_id, body)
