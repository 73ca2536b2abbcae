"""
Response Parser
===============
Decodes the text a chat model produced into quests or a reflection
analysis.

Handles common model response quirks: markdown code fences, leading or
trailing whitespace, and commentary before/after the JSON. Anything
that still does not decode or validate raises ResponseDecodeError; the
caller decides what to do with it.
"""

from __future__ import annotations

import json

from pydantic import ValidationError

from nebula.models.quest import Quest
from nebula.models.reflection import ReflectionAnalysis
from nebula.services.quest_ids import quest_ids


class ResponseDecodeError(Exception):
    """Model output is not JSON of the expected shape."""

    def __init__(self, message: str, raw: str = "") -> None:
        self.raw = raw
        super().__init__(message)


def _strip_fences(raw_response: str) -> str:
    text = (raw_response or "").strip()

    # Strip markdown code fences if present
    if text.startswith("```"):
        text = text.split("\n", 1)[-1]
    if text.endswith("```"):
        text = text.rsplit("```", 1)[0]
    return text.strip()


def _extract_json(raw_response: str, opener: str, closer: str) -> str:
    text = _strip_fences(raw_response)

    # Cut away commentary around the outermost array/object
    if not text.startswith(("[", "{")):
        start = text.find(opener)
        end = text.rfind(closer) + 1
        if start != -1 and end > start:
            text = text[start:end]
    return text


def _load(raw_response: str, opener: str, closer: str):
    text = _extract_json(raw_response, opener, closer)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ResponseDecodeError(f"Response is not valid JSON: {exc}", raw_response) from exc


def parse_quests(raw_response: str) -> list[Quest]:
    """Decode a JSON array of quests.

    Also accepts ``{"quests": [...]}``, which some models return despite
    being asked for a bare array. Quests without an id, or repeating an
    id already used in the batch, get a fresh one.
    """
    text = _strip_fences(raw_response)
    first_array, first_object = text.find("["), text.find("{")
    if first_object != -1 and (first_array == -1 or first_object < first_array):
        parsed = _load(raw_response, "{", "}")
        if isinstance(parsed, dict):
            parsed = parsed.get("quests")
    else:
        parsed = _load(raw_response, "[", "]")

    if not isinstance(parsed, list) or not parsed:
        raise ResponseDecodeError("Expected a non-empty JSON array of quests", raw_response)
    if not all(isinstance(item, dict) for item in parsed):
        raise ResponseDecodeError("Every quest must be a JSON object", raw_response)

    seen: set[str] = set()
    items = []
    for fresh_id, item in zip(quest_ids(len(parsed)), parsed):
        quest_id = str(item.get("id") or "")
        if not quest_id or quest_id in seen:
            quest_id = fresh_id
        seen.add(quest_id)
        items.append({**item, "id": quest_id})

    try:
        return [Quest.model_validate(item) for item in items]
    except ValidationError as exc:
        raise ResponseDecodeError(f"Quest does not match schema: {exc}", raw_response) from exc


def parse_analysis(raw_response: str) -> ReflectionAnalysis:
    """Decode a single reflection analysis object."""
    parsed = _load(raw_response, "{", "}")
    if not isinstance(parsed, dict):
        raise ResponseDecodeError("Expected a JSON object", raw_response)
    try:
        return ReflectionAnalysis.model_validate(parsed)
    except ValidationError as exc:
        raise ResponseDecodeError(f"Analysis does not match schema: {exc}", raw_response) from exc
