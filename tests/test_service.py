"""Tests for team_sync/service.py."""

import asyncio
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from team_sync.activity_models import ACTIVITIES, Activity, QuizContext, TeamContext
from team_sync.backend import BackendError, LLMIdeaBackend, TeamSyncBackend
from team_sync.engine.persona import derive_persona
from team_sync.engine.seeded_random import XorShift32
from team_sync.engine.selection import MAX_RECOMMENDATIONS, MIN_RECOMMENDATIONS
from team_sync.service import TeamSyncService, build_service
from team_sync.settings import EngineSettings


FAST = EngineSettings(fetch_latency_ms=0, write_latency_ms=0)


def _fixed_rng(team, quiz, department):
    return XorShift32(42)


class _StubBackend(TeamSyncBackend):
    """Returns canned payloads; anything left as None raises."""

    def __init__(self, ideas=None, analytics=None, award_error=False):
        self.ideas = ideas
        self.analytics = analytics
        self.award_error = award_error
        self.awards = []

    async def fetch_ideas(self, team, quiz):
        if self.ideas is None:
            raise BackendError("down")
        return self.ideas

    async def fetch_analytics(self, range_):
        if self.analytics is None:
            raise BackendError("down")
        return self.analytics

    async def post_award(self, team_id, event, meta):
        if self.award_error:
            raise BackendError("down")
        self.awards.append((team_id, event, meta))
        return {}


@pytest.fixture
def service():
    return TeamSyncService(settings=FAST, rng_factory=_fixed_rng)


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------
class TestGetRecommendations:
    def test_shape(self, service):
        recs = asyncio.run(service.get_recommendations(TeamContext(department="QA"), QuizContext()))
        assert MIN_RECOMMENDATIONS <= len(recs) <= MAX_RECOMMENDATIONS
        assert all(r.source == "catalog" for r in recs)
        assert any(r.department_exclusive and r.activity.id == "qa1" for r in recs)
        assert service.latest_recommendations == recs

    def test_fixed_rng_is_reproducible(self, service):
        team, quiz = TeamContext(department="Dev"), QuizContext(interests=["creative"])
        first = asyncio.run(service.get_recommendations(team, quiz))
        second = asyncio.run(service.get_recommendations(team, quiz))
        assert first == second

    def test_custom_activity_list(self):
        acts = [ACTIVITIES["x1"], ACTIVITIES["x2"]]
        svc = TeamSyncService(settings=FAST, activities=acts, rng_factory=_fixed_rng)
        recs = asyncio.run(svc.get_recommendations(TeamContext(), QuizContext()))
        assert len(recs) == 3
        assert recs[-1].activity.placeholder


class TestGenerateAiIdeas:
    def test_local_pool_without_backend(self, service):
        recs = asyncio.run(service.generate_ai_ideas(TeamContext(department="Marketing"), QuizContext()))
        assert all(r.source == "local-ai" for r in recs)
        assert any(r.department_exclusive for r in recs)
        assert all(60 <= r.fit_score <= 98 for r in recs)

    def test_backend_failure_falls_back(self):
        svc = TeamSyncService(settings=FAST, backend=_StubBackend(), rng_factory=_fixed_rng)
        recs = asyncio.run(svc.generate_ai_ideas(TeamContext(department="Sales"), QuizContext()))
        assert all(r.source == "local-ai" for r in recs)
        assert MIN_RECOMMENDATIONS <= len(recs) <= MAX_RECOMMENDATIONS

    def test_malformed_ideas_fall_back(self):
        backend = _StubBackend(ideas=[{"id": "r1"}, {"title": "no id"}])
        svc = TeamSyncService(settings=FAST, backend=backend, rng_factory=_fixed_rng)
        recs = asyncio.run(svc.generate_ai_ideas(TeamContext(department="Sales"), QuizContext()))
        assert all(r.source == "local-ai" for r in recs)

    def test_remote_ideas_used(self):
        ideas = [{"id": f"r{i}", "title": f"Remote {i}"} for i in range(4)]
        ideas.append({"id": "r-sales", "title": "Sales Only", "department_scope": "Sales"})
        svc = TeamSyncService(settings=FAST, backend=_StubBackend(ideas=ideas), rng_factory=_fixed_rng)
        recs = asyncio.run(svc.generate_ai_ideas(TeamContext(department="Sales"), QuizContext()))
        assert all(r.source == "remote-ai" for r in recs)
        assert any(r.activity.id == "r-sales" and r.department_exclusive for r in recs)

    def test_empty_remote_array_falls_back(self):
        svc = TeamSyncService(settings=FAST, backend=_StubBackend(ideas=[]), rng_factory=_fixed_rng)
        recs = asyncio.run(svc.generate_ai_ideas(TeamContext(department="Sales"), QuizContext()))
        assert all(r.source == "local-ai" for r in recs)
        assert not any(r.activity.placeholder for r in recs)
        assert any(r.department_exclusive for r in recs)

    def test_short_remote_array_falls_back(self):
        backend = _StubBackend(ideas=[{"id": "r1", "title": "Remote One"}])
        svc = TeamSyncService(settings=FAST, backend=backend, rng_factory=_fixed_rng)
        recs = asyncio.run(svc.generate_ai_ideas(TeamContext(department="Sales"), QuizContext()))
        assert all(r.source == "local-ai" for r in recs)
        assert "r1" not in {r.activity.id for r in recs}
        assert any(r.department_exclusive for r in recs)

    def test_remote_without_exclusive_gets_local_exclusive(self):
        ideas = [{"id": f"r{i}", "title": f"Remote {i}"} for i in range(3)]
        svc = TeamSyncService(settings=FAST, backend=_StubBackend(ideas=ideas), rng_factory=_fixed_rng)
        recs = asyncio.run(svc.generate_ai_ideas(TeamContext(department="Sales"), QuizContext()))
        assert all(r.source == "remote-ai" for r in recs)
        assert MIN_RECOMMENDATIONS <= len(recs) <= MAX_RECOMMENDATIONS
        assert not any(r.activity.placeholder for r in recs)
        assert any(r.department_exclusive for r in recs)

    def test_overwrites_latest(self, service):
        asyncio.run(service.get_recommendations(TeamContext(), QuizContext()))
        recs = asyncio.run(service.generate_ai_ideas(TeamContext(), QuizContext()))
        assert service.latest_recommendations == recs


# ---------------------------------------------------------------------------
# Engagement log
# ---------------------------------------------------------------------------
class TestEngagement:
    def test_save_idempotent(self, service):
        assert asyncio.run(service.save_activity(ACTIVITIES["x1"])) is True
        assert asyncio.run(service.save_activity(ACTIVITIES["x1"])) is True
        assert len(service.store.saved()) == 1

    def test_placeholder_not_saved(self, service):
        ph = Activity(id="placeholder-0", title="More ideas", placeholder=True)
        assert asyncio.run(service.save_activity(ph)) is False
        assert service.store.saved() == []

    def test_submit_feedback(self, service):
        event = asyncio.run(service.submit_feedback("qa1", "like", comment="#bugs great", rating=5))
        assert event.activity_title == "Bug Hunt Bingo"
        assert service.store.feedback() == [event]


# ---------------------------------------------------------------------------
# Analytics and persona
# ---------------------------------------------------------------------------
class TestGetAnalytics:
    def test_local_snapshot(self, service):
        asyncio.run(service.save_activity(ACTIVITIES["x1"]))
        asyncio.run(service.submit_feedback("x1", "like"))
        snap = asyncio.run(service.get_analytics("12w"))
        assert snap.range == "12w"
        assert len(snap.trends) == 12
        assert snap.success.completion_rate == 0.5
        assert service.latest_analytics == snap

    def test_empty_log(self, service):
        snap = asyncio.run(service.get_analytics())
        assert snap.success.completion_rate == 0.0
        assert snap.success.like_ratio == 0.0
        assert snap.success.avg_rating == 0.0

    def test_malformed_remote_falls_back(self):
        svc = TeamSyncService(settings=FAST, backend=_StubBackend(analytics={"oops": 1}))
        snap = asyncio.run(svc.get_analytics("4w"))
        assert len(snap.trends) == 4

    def test_remote_snapshot_used(self):
        payload = {
            "range": "4w",
            "success": {"completion_rate": 0.9, "like_ratio": 0.8, "avg_rating": 4.5},
            "sentiment": {"score": 0.6, "label": "positive"},
            "trends": [],
            "hero_breakdown": [],
        }
        svc = TeamSyncService(settings=FAST, backend=_StubBackend(analytics=payload))
        snap = asyncio.run(svc.get_analytics("4w"))
        assert snap.success.completion_rate == 0.9
        assert snap.trends == []

    def test_concurrent_refreshes_last_resolved_wins(self, service):
        async def _both():
            return await asyncio.gather(service.get_analytics("4w"), service.get_analytics("12w"))

        asyncio.run(_both())
        assert service.latest_analytics.range in ("4w", "12w")


class TestGeneratePersona:
    def test_uses_saved_heroes(self, service):
        asyncio.run(service.save_activity(ACTIVITIES["lead1"]))
        persona = asyncio.run(service.generate_persona(TeamContext(department="Leadership"), QuizContext()))
        assert persona.name == "Leadership Strategist Collective"

    def test_injected_persona_fn(self):
        calls = []

        def _persona(team, quiz, saved, feedback):
            calls.append((team.department, len(saved), len(feedback)))
            return derive_persona(team, quiz, saved, feedback)

        svc = TeamSyncService(settings=FAST, persona_fn=_persona)
        asyncio.run(svc.generate_persona(TeamContext(department="QA"), QuizContext()))
        assert calls == [("QA", 0, 0)]


# ---------------------------------------------------------------------------
# Gamification
# ---------------------------------------------------------------------------
class TestRecordAward:
    def test_local_award(self, service):
        delta = asyncio.run(service.record_award("team-1", "save", {"activity_id": "x1"}))
        assert delta.points_awarded == 10
        assert [b.id for b in delta.new_badges] == ["first_save"]
        state = asyncio.run(service.get_gamification("team-1"))
        assert state.points == 10

    def test_mirrored_to_backend(self):
        backend = _StubBackend()
        svc = TeamSyncService(settings=FAST, backend=backend)
        asyncio.run(svc.record_award("t", "like", {"activity_id": "a1"}))
        assert backend.awards == [("t", "like", {"activity_id": "a1"})]

    def test_backend_failure_keeps_local_state(self):
        svc = TeamSyncService(settings=FAST, backend=_StubBackend(award_error=True))
        delta = asyncio.run(svc.record_award("t", "save"))
        assert delta.state.points == 10
        assert asyncio.run(svc.get_gamification("t")).has_badge("first_save")

    def test_notice_delay_from_settings(self):
        settings = EngineSettings(fetch_latency_ms=0, write_latency_ms=0, badge_notice_seconds=1.0)
        svc = TeamSyncService(settings=settings)
        t0 = datetime(2026, 1, 1, tzinfo=timezone.utc)
        asyncio.run(svc.record_award("t", "save", now=t0))
        assert svc.gamification.last_earned("t", now=t0.replace(second=2)) is None


# ---------------------------------------------------------------------------
# build_service
# ---------------------------------------------------------------------------
class TestBuildService:
    def test_local_by_default(self):
        svc = build_service(FAST)
        assert svc.backend is None

    @patch("team_sync.service.get_available_llms", return_value=[("primary", object())])
    def test_llm_backend_when_enabled(self, mock_llms):
        svc = build_service(EngineSettings(fetch_latency_ms=0, write_latency_ms=0, use_llm=True))
        assert isinstance(svc.backend, LLMIdeaBackend)

    @patch("team_sync.service.get_available_llms", return_value=[])
    def test_enabled_without_llms_stays_local(self, mock_llms):
        svc = build_service(EngineSettings(fetch_latency_ms=0, write_latency_ms=0, use_llm=True))
        assert svc.backend is None
