"""Tests for team_sync/backend.py."""

import asyncio
import json
from unittest.mock import MagicMock

import pytest

from team_sync.activity_models import QuizContext, TeamContext
from team_sync.backend import (
    BackendError,
    LLMIdeaBackend,
    TeamSyncBackend,
    build_idea_prompt,
    parse_ideas,
)


IDEAS = [
    {"id": "r1", "title": "Remote Riddles", "department_scope": ["QA"]},
    {"id": "r2", "title": "Lunch Roulette"},
]


def _llm(reply=None, error=None):
    llm = MagicMock()
    if error is not None:
        llm.call.side_effect = error
    else:
        llm.call.return_value = reply
    return llm


class TestParseIdeas:
    def test_plain_array(self):
        assert parse_ideas(json.dumps(IDEAS)) == IDEAS

    def test_array_inside_prose(self):
        text = "Sure! Here you go:\n```json\n" + json.dumps(IDEAS) + "\n```\nEnjoy."
        assert parse_ideas(text) == IDEAS

    def test_no_array(self):
        with pytest.raises(BackendError, match="no JSON array"):
            parse_ideas("I cannot help with that.")

    def test_invalid_json(self):
        with pytest.raises(BackendError, match="not valid JSON"):
            parse_ideas("[{'id': 'single quotes'}]")

    def test_non_object_items(self):
        with pytest.raises(BackendError, match="list of idea objects"):
            parse_ideas('["a", "b"]')


class TestBuildIdeaPrompt:
    def test_mentions_context(self):
        prompt = build_idea_prompt(
            TeamContext(department="QA", mode="remote", size=6),
            QuizContext(energy="high", interests=["games", "music"]),
        )
        assert "department=QA" in prompt
        assert "interests=games, music" in prompt
        assert '["QA"]' in prompt

    def test_no_interests(self):
        assert "interests=none" in build_idea_prompt(TeamContext(), QuizContext())


class TestBaseBackend:
    def test_every_operation_unavailable(self):
        backend = TeamSyncBackend()
        with pytest.raises(BackendError):
            asyncio.run(backend.fetch_ideas(TeamContext(), QuizContext()))
        with pytest.raises(BackendError):
            asyncio.run(backend.fetch_analytics("4w"))
        with pytest.raises(BackendError):
            asyncio.run(backend.post_award("t", "save", {}))


class TestLLMIdeaBackend:
    def test_first_reply_wins(self):
        first, second = _llm(json.dumps(IDEAS)), _llm("[]")
        backend = LLMIdeaBackend([("primary", first), ("openrouter", second)])
        assert asyncio.run(backend.fetch_ideas(TeamContext(), QuizContext())) == IDEAS
        second.call.assert_not_called()

    def test_falls_through_on_error(self):
        broken = _llm(error=RuntimeError("rate limited"))
        backend = LLMIdeaBackend([("primary", broken), ("openrouter", _llm(json.dumps(IDEAS)))])
        assert asyncio.run(backend.fetch_ideas(TeamContext(), QuizContext())) == IDEAS

    def test_falls_through_on_unparsable_reply(self):
        backend = LLMIdeaBackend([("primary", _llm("no ideas today")), ("openrouter", _llm(json.dumps(IDEAS)))])
        assert asyncio.run(backend.fetch_ideas(TeamContext(), QuizContext())) == IDEAS

    def test_all_failed(self):
        backend = LLMIdeaBackend([("primary", _llm(error=RuntimeError("down")))])
        with pytest.raises(BackendError, match="all idea LLMs failed"):
            asyncio.run(backend.fetch_ideas(TeamContext(), QuizContext()))

    def test_no_llms(self):
        with pytest.raises(BackendError, match="no LLM configured"):
            asyncio.run(LLMIdeaBackend([]).fetch_ideas(TeamContext(), QuizContext()))

    def test_analytics_still_unavailable(self):
        with pytest.raises(BackendError):
            asyncio.run(LLMIdeaBackend([("p", _llm("[]"))]).fetch_analytics("4w"))
