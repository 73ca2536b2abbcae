"""
Prompt templates for the remote generation tier.

Only feature data the user supplied for this request goes into a prompt;
the user id never leaves the process.
"""

from __future__ import annotations

from nebula.models.quest import QuestFeatureSnapshot
from nebula.models.reflection import ReflectionSubmission

QUEST_SYSTEM_PROMPT = (
    "You are a quest designer in the NEBULA ODYSSEY system for personal development. "
    "Return ONLY valid JSON with no markdown formatting and no explanation."
)

REFLECTION_SYSTEM_PROMPT = (
    "You are an expert in personal development and reflection in the NEBULA ODYSSEY system. "
    "Return ONLY valid JSON with no markdown formatting and no explanation."
)


def _bullets(lines: list[str]) -> str:
    return "\n".join(f"- {line}" for line in lines) or "- none"


def build_quest_prompt(snapshot: QuestFeatureSnapshot) -> str:
    skills = _bullets([f"{s.name}: Level {s.level}" for s in snapshot.skills])
    completed = _bullets([q.title for q in snapshot.completed_quests])
    moods = _bullets([f"{r.date}: {r.mood}" for r in snapshot.recent_reflections])

    return f"""\
Generate personalised quest recommendations for a user in the NEBULA ODYSSEY universe \
based on the following data:

Skills:
{skills}

Recently completed quests:
{completed}

Mood from recent reflections:
{moods}

Generate 5 personalised quests across the categories daily, weekly and longterm with \
varying difficulty. Each quest must have: title, description, difficulty \
(Easy, Medium or Hard), type (daily, weekly or longterm), estimatedTime, xp (integer) \
and tags (list of strings).

Format the answer as a JSON array of quest objects.
"""


def build_reflection_prompt(submission: ReflectionSubmission) -> str:
    pairs = "\n\n".join(
        f"Question: {question}\nAnswer: {submission.answers.get(f'question{i + 1}') or 'No answer'}"
        for i, question in enumerate(submission.questions)
    )

    return f"""\
Analyse the following reflection answers of a user in the NEBULA ODYSSEY universe:

Mood: {submission.mood or "neutral"}

{pairs}

Please produce an in-depth analysis with:
1. A summary of the main points
2. Important insights and realisations
3. Recommendations for the further journey in the NEBULA ODYSSEY universe
4. Suggested quests or missions

Format the answer as a JSON object with the fields: summary, insights, \
recommendations, suggestedQuests. insights, recommendations and suggestedQuests \
are lists of strings.
"""
