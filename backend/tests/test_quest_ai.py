"""
Tests for QuestGenerationService
================================
Covers:
- Heuristic: five quests in fixed order with the literal
  type / difficulty / xp table, every field populated
- Heuristic: highest/lowest skill selection, first occurrence wins ties,
  Productivity/Meditation defaults for an empty skill list
- Heuristic: repeated calls identical except ids, ids unique
- Static fallback: three fixed quests
- Routing: remote disabled → heuristic, no HTTP request made
- Routing: placeholder key → heuristic even with USE_REAL_API
- Remote success → parsed quests, source=remote
- Remote transport failure / non-2xx / timeout / non-JSON reply →
  exact static fallback, heuristic not attempted
- Heuristic failure on a malformed snapshot → static fallback

Run: pytest backend/tests/test_quest_ai.py -v
"""

from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import patch

import httpx
import pytest
import respx
from httpx import Response

from nebula.config import Settings
from nebula.models.common import GenerationSource
from nebula.models.quest import CompletedQuest, Quest, QuestFeatureSnapshot, ReflectionEntry, Skill
from nebula.services.quest_ai import (
    FALLBACK_QUESTS,
    QuestGenerationService,
    fallback_quests,
    heuristic_quests,
)

USER_ID = "user-42"
API_URL = "https://api.openai.com/v1/chat/completions"

# (type, difficulty, xp) per position of the heuristic output
_HEURISTIC_TABLE = [
    ("daily", "Medium", 75),
    ("daily", "Easy", 50),
    ("weekly", "Easy", 100),
    ("weekly", "Hard", 150),
    ("longterm", "Hard", 500),
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _snapshot(*skills: tuple[str, int]) -> QuestFeatureSnapshot:
    return QuestFeatureSnapshot(
        skills=[Skill(name=name, level=level) for name, level in skills],
        completed_quests=[CompletedQuest(title="Morning run")],
        recent_reflections=[ReflectionEntry(date="2026-10-17", mood="positive")],
    )


def _without_ids(quests: list[Quest]) -> list[dict]:
    return [q.model_dump(exclude={"id"}) for q in quests]


def _remote_settings() -> Settings:
    return Settings(use_real_api=True, openai_api_key="sk-test", openai_api_url=API_URL)


def _completion(content: str) -> Response:
    return Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})


_REMOTE_QUESTS = [
    {
        "title": "Sketch a moon base",
        "description": "Spend half an hour drawing.",
        "difficulty": "Easy",
        "type": "daily",
        "estimatedTime": "30 min",
        "xp": 40,
        "tags": ["Creativity"],
    },
    {
        "id": "remote-2",
        "title": "Read one chapter",
        "description": "Pick any non-fiction book.",
        "difficulty": "Medium",
        "type": "weekly",
        "estimatedTime": "60 min",
        "xp": 80,
        "tags": ["Learning", "Focus"],
    },
]


# ---------------------------------------------------------------------------
# Heuristic
# ---------------------------------------------------------------------------

class TestHeuristicQuests:

    def test_returns_five_quests_in_fixed_order(self):
        quests = heuristic_quests(_snapshot(("Coding", 7), ("Fitness", 3)))

        assert len(quests) == 5
        assert [(q.type, q.difficulty, q.xp) for q in quests] == _HEURISTIC_TABLE

    def test_every_field_populated(self):
        for quest in heuristic_quests(_snapshot(("Coding", 7))):
            assert quest.id
            assert quest.title
            assert quest.description
            assert quest.estimated_time
            assert quest.tags

    def test_highest_and_lowest_skill_referenced(self):
        quests = heuristic_quests(_snapshot(("Coding", 4), ("Fitness", 9), ("Cooking", 1)))

        assert quests[0].title == "Deepen Fitness"
        assert "Level 9" in quests[0].description
        assert quests[0].tags[0] == "Fitness"
        assert quests[1].title == "Improve Cooking"
        assert "Level 1" in quests[1].description
        assert quests[1].tags[0] == "Cooking"

    def test_ties_broken_by_first_occurrence(self):
        quests = heuristic_quests(
            _snapshot(("Alpha", 5), ("Beta", 8), ("Gamma", 8), ("Delta", 2), ("Epsilon", 2))
        )

        assert quests[0].title == "Deepen Beta"
        assert quests[1].title == "Improve Delta"

    def test_single_skill_is_both_highest_and_lowest(self):
        quests = heuristic_quests(_snapshot(("Writing", 6)))

        assert quests[0].title == "Deepen Writing"
        assert quests[1].title == "Improve Writing"

    def test_empty_skills_use_defaults(self):
        quests = heuristic_quests(QuestFeatureSnapshot())

        assert quests[0].title == "Deepen Productivity"
        assert "Productivity (Level 5)" in quests[0].description
        assert quests[1].title == "Improve Meditation"
        assert "Meditation (Level 2)" in quests[1].description

    def test_later_quests_are_not_parameterised(self):
        a = heuristic_quests(_snapshot(("Coding", 7)))
        b = heuristic_quests(_snapshot(("Painting", 1)))

        assert _without_ids(a)[2:] == _without_ids(b)[2:]

    def test_repeated_calls_identical_except_ids(self):
        snapshot = _snapshot(("Coding", 7), ("Fitness", 3))

        first = heuristic_quests(snapshot)
        second = heuristic_quests(snapshot)

        assert _without_ids(first) == _without_ids(second)
        all_ids = [q.id for q in first + second]
        assert len(set(all_ids)) == len(all_ids)

    def test_ids_carry_ordinal_suffix(self):
        quests = heuristic_quests(QuestFeatureSnapshot())

        assert [q.id.rsplit("-", 1)[1] for q in quests] == ["1", "2", "3", "4", "5"]
        assert all(q.id.startswith("quest-") for q in quests)


# ---------------------------------------------------------------------------
# Static fallback
# ---------------------------------------------------------------------------

class TestFallbackQuests:

    def test_three_fixed_quests(self):
        quests = fallback_quests()

        assert [(q.type, q.difficulty, q.xp) for q in quests] == [
            ("daily", "Easy", 30),
            ("weekly", "Medium", 75),
            ("longterm", "Hard", 300),
        ]
        assert [q.title for q in quests] == [
            "Daily reflection",
            "Weekly planning",
            "Learning project",
        ]

    def test_matches_templates(self):
        assert _without_ids(fallback_quests()) == [dict(t) for t in FALLBACK_QUESTS]


# ---------------------------------------------------------------------------
# Routing
# ---------------------------------------------------------------------------

class TestRouting:

    @pytest.mark.asyncio
    @respx.mock(assert_all_called=False)
    async def test_remote_disabled_uses_heuristic_without_http(self):
        route = respx.post(API_URL).mock(return_value=_completion("[]"))
        service = QuestGenerationService(settings=Settings(use_real_api=False, openai_api_key="sk-test"))

        result = await service.generate_recommendations(USER_ID, _snapshot(("Coding", 7)))

        assert result.source is GenerationSource.HEURISTIC
        assert len(result.quests) == 5
        assert not route.called

    @pytest.mark.asyncio
    @respx.mock(assert_all_called=False)
    async def test_placeholder_key_uses_heuristic(self):
        route = respx.post(API_URL).mock(return_value=_completion("[]"))
        service = QuestGenerationService(
            settings=Settings(use_real_api=True, openai_api_key="mock-api-key")
        )

        result = await service.generate_recommendations(USER_ID, QuestFeatureSnapshot())

        assert result.source is GenerationSource.HEURISTIC
        assert not route.called

    @pytest.mark.asyncio
    async def test_heuristic_failure_serves_fallback(self):
        service = QuestGenerationService(settings=Settings(use_real_api=False))
        malformed = SimpleNamespace(skills=42)

        result = await service.generate_recommendations(USER_ID, malformed)

        assert result.source is GenerationSource.FALLBACK
        assert _without_ids(result.quests) == _without_ids(fallback_quests())


class TestRemoteTier:

    @pytest.mark.asyncio
    @respx.mock
    async def test_remote_success_returns_parsed_quests(self):
        respx.post(API_URL).mock(return_value=_completion(json.dumps(_REMOTE_QUESTS)))
        service = QuestGenerationService(settings=_remote_settings())

        result = await service.generate_recommendations(USER_ID, _snapshot(("Coding", 7)))

        assert result.source is GenerationSource.REMOTE
        assert [q.title for q in result.quests] == ["Sketch a moon base", "Read one chapter"]
        assert result.quests[0].id.startswith("quest-")
        assert result.quests[1].id == "remote-2"

    @pytest.mark.asyncio
    @respx.mock
    async def test_prompt_carries_snapshot_data(self):
        route = respx.post(API_URL).mock(return_value=_completion(json.dumps(_REMOTE_QUESTS)))
        service = QuestGenerationService(settings=_remote_settings())

        await service.generate_recommendations(USER_ID, _snapshot(("Coding", 7)))

        body = json.loads(route.calls.last.request.content)
        user_prompt = body["messages"][1]["content"]
        assert "- Coding: Level 7" in user_prompt
        assert "- Morning run" in user_prompt
        assert "- 2026-10-17: positive" in user_prompt
        assert USER_ID not in user_prompt

    @pytest.mark.asyncio
    @respx.mock
    async def test_transport_failure_serves_exact_fallback(self):
        respx.post(API_URL).mock(side_effect=httpx.ConnectError("connection refused"))
        service = QuestGenerationService(settings=_remote_settings())

        with patch("nebula.services.quest_ai.heuristic_quests") as heuristic:
            result = await service.generate_recommendations(USER_ID, _snapshot(("Coding", 7)))

        assert result.source is GenerationSource.FALLBACK
        assert _without_ids(result.quests) == _without_ids(fallback_quests())
        heuristic.assert_not_called()

    @pytest.mark.asyncio
    @respx.mock
    async def test_timeout_serves_fallback(self):
        respx.post(API_URL).mock(side_effect=httpx.ReadTimeout("timed out"))
        service = QuestGenerationService(settings=_remote_settings())

        result = await service.generate_recommendations(USER_ID, QuestFeatureSnapshot())

        assert result.source is GenerationSource.FALLBACK
        assert len(result.quests) == 3

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_2xx_serves_fallback(self):
        respx.post(API_URL).mock(return_value=Response(429, text="rate limited"))
        service = QuestGenerationService(settings=_remote_settings())

        result = await service.generate_recommendations(USER_ID, QuestFeatureSnapshot())

        assert result.source is GenerationSource.FALLBACK
        assert _without_ids(result.quests) == _without_ids(fallback_quests())

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_json_reply_serves_exact_fallback(self):
        respx.post(API_URL).mock(return_value=_completion("Sure! Here are some quest ideas for you."))
        service = QuestGenerationService(settings=_remote_settings())

        result = await service.generate_recommendations(USER_ID, _snapshot(("Coding", 7)))

        assert result.source is GenerationSource.FALLBACK
        assert _without_ids(result.quests) == _without_ids(fallback_quests())

    @pytest.mark.asyncio
    @respx.mock
    async def test_schema_mismatch_serves_fallback(self):
        respx.post(API_URL).mock(return_value=_completion(json.dumps([{"title": "Only a title"}])))
        service = QuestGenerationService(settings=_remote_settings())

        result = await service.generate_recommendations(USER_ID, QuestFeatureSnapshot())

        assert result.source is GenerationSource.FALLBACK
