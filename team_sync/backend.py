"""Remote backing services consulted before local computation.

Every method may fail; the service facade catches the failure and falls
back to the local engines with the same return shape.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Any

from crewai import LLM

from team_sync.activity_models import QuizContext, TeamContext


logger = logging.getLogger(__name__)


class BackendError(Exception):
    """Transport failure or malformed payload from a backing service."""


class TeamSyncBackend:
    """Base backend: every operation is unavailable until overridden."""

    async def fetch_ideas(self, team: TeamContext, quiz: QuizContext) -> list[dict[str, Any]]:
        raise BackendError("idea service not configured")

    async def fetch_analytics(self, range_: str) -> dict[str, Any]:
        raise BackendError("analytics service not configured")

    async def post_award(self, team_id: str, event: str, meta: dict[str, Any]) -> dict[str, Any]:
        raise BackendError("gamification service not configured")


# ---------------------------------------------------------------------------
# LLM-backed idea generation
# ---------------------------------------------------------------------------
_IDEA_PROMPT = """You suggest team-building activities.
Team: department={department}, work mode={mode}, size={size}.
Quiz: energy={energy}, budget={budget}, interests={interests}.
Return ONLY a JSON array of 3 to 5 objects with keys:
"id", "title", "description", "duration" (minutes, integer), "tags" (list of strings),
"department_scope" (list of departments, use ["{department}"] for department-specific ideas),
"hero_alignment", "reasoning".
At least one idea must be specific to the {department} department."""

_JSON_ARRAY = re.compile(r"\[.*\]", re.DOTALL)


def build_idea_prompt(team: TeamContext, quiz: QuizContext) -> str:
    return _IDEA_PROMPT.format(
        department=team.department,
        mode=team.mode,
        size=team.size,
        energy=quiz.energy,
        budget=quiz.budget,
        interests=", ".join(quiz.interests) or "none",
    )


def parse_ideas(text: str) -> list[dict[str, Any]]:
    """Extract the JSON array of ideas from an LLM reply.

    Raises:
        BackendError: If no JSON array of objects can be read.
    """
    match = _JSON_ARRAY.search(text or "")
    if match is None:
        raise BackendError("LLM reply contains no JSON array")
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise BackendError(f"LLM reply is not valid JSON: {e}") from e
    if not isinstance(data, list) or not all(isinstance(x, dict) for x in data):
        raise BackendError("LLM reply is not a list of idea objects")
    return data


class LLMIdeaBackend(TeamSyncBackend):
    """Asks each configured LLM in turn for ideas; first parsable reply wins."""

    def __init__(self, llms: list[tuple[str, LLM]]) -> None:
        self._llms = llms

    async def fetch_ideas(self, team: TeamContext, quiz: QuizContext) -> list[dict[str, Any]]:
        if not self._llms:
            raise BackendError("no LLM configured")

        prompt = build_idea_prompt(team, quiz)
        last_error: Exception | None = None
        for label, llm in self._llms:
            try:
                reply = await asyncio.to_thread(llm.call, prompt)
                return parse_ideas(str(reply))
            except Exception as e:
                logger.warning("Idea LLM %s failed: %s", label, e)
                last_error = e
        raise BackendError(f"all idea LLMs failed: {last_error}")
