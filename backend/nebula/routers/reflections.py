"""
Reflections Router
==================
POST /api/v1/reflections/analysis: Analyse a reflection submission.

Never fails on the generation side: the ReflectionAnalysisService
degrades from the chat model to a mood-keyed analysis to a fixed
apology analysis, and the response says which one was used.
"""

from __future__ import annotations

from fastapi import APIRouter, status

from nebula.models.reflection import ReflectionAnalysisRequest, ReflectionAnalysisResponse
from nebula.services.reflection_ai import get_reflection_service

router = APIRouter(prefix="/api/v1/reflections", tags=["reflections"])


@router.post(
    "/analysis",
    response_model=ReflectionAnalysisResponse,
    status_code=status.HTTP_200_OK,
    summary="Analyse a reflection",
)
async def analyse_reflection(body: ReflectionAnalysisRequest) -> ReflectionAnalysisResponse:
    service = get_reflection_service()
    return await service.analyze_submission(body.user_id, body)
