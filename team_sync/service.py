"""Async facade over the engines: the operations collaborators call.

Each call awaits an artificial latency. Backend failures of any kind are
logged and replaced by the local deterministic result, so callers always get
the same return shape.

Two refreshes started concurrently (e.g. recommendations and analytics, or
two recommendation fetches) are not ordered: whichever resolves last
overwrites ``latest_recommendations`` / ``latest_analytics``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime
import logging
from typing import Any, Literal

from pydantic import BaseModel

from team_sync.activity_models import Activity, QuizContext, TeamContext, catalog
from team_sync.backend import BackendError, LLMIdeaBackend, TeamSyncBackend
from team_sync.engagement_models import FeedbackEvent, Reaction, SavedActivity
from team_sync.engagement_store import EngagementStore
from team_sync.engine.analytics import (
    AnalyticsRange,
    AnalyticsSnapshot,
    build_analytics_snapshot,
)
from team_sync.engine.gamification import AwardDelta, GamificationEngine, GamificationState
from team_sync.engine.persona import PersonaProfile, derive_persona
from team_sync.engine.seeded_random import XorShift32, rng_for_context
from team_sync.engine.selection import (
    MIN_RECOMMENDATIONS,
    ScoredActivity,
    generate_ideas,
    recommend_from_catalog,
)
from team_sync.idea_pool import build_idea_pool
from team_sync.llm_config import get_available_llms
from team_sync.settings import EngineSettings


logger = logging.getLogger(__name__)

RecommendationSource = Literal["catalog", "local-ai", "remote-ai"]
RngFactory = Callable[[TeamContext, QuizContext, str], XorShift32]
SnapshotFn = Callable[[list[FeedbackEvent], list[SavedActivity], AnalyticsRange], AnalyticsSnapshot]
PersonaFn = Callable[[TeamContext, QuizContext, list[SavedActivity], list[FeedbackEvent]], PersonaProfile]


class Recommendation(BaseModel):
    """A selected activity as shown to the user."""

    activity: Activity
    fit_score: float
    department_exclusive: bool = False
    source: RecommendationSource = "catalog"


def _to_recommendations(
    picks: list[ScoredActivity],
    department: str,
    source: RecommendationSource,
) -> list[Recommendation]:
    return [
        Recommendation(
            activity=activity,
            fit_score=score,
            department_exclusive=activity.is_exclusive_to(department),
            source=source,
        )
        for activity, score in picks
    ]


class TeamSyncService:
    """Recommendations, engagement log, analytics and gamification for one session."""

    def __init__(
        self,
        store: EngagementStore | None = None,
        gamification: GamificationEngine | None = None,
        backend: TeamSyncBackend | None = None,
        activities: list[Activity] | None = None,
        settings: EngineSettings | None = None,
        snapshot_fn: SnapshotFn = build_analytics_snapshot,
        persona_fn: PersonaFn = derive_persona,
        rng_factory: RngFactory = rng_for_context,
    ) -> None:
        self.settings = settings or EngineSettings()
        self.store = store or EngagementStore()
        self.gamification = gamification or GamificationEngine(
            notice_seconds=self.settings.badge_notice_seconds,
        )
        self.backend = backend
        self._activities = activities if activities is not None else catalog()
        self._snapshot_fn = snapshot_fn
        self._persona_fn = persona_fn
        self._rng_factory = rng_factory

        self.latest_recommendations: list[Recommendation] = []
        self.latest_analytics: AnalyticsSnapshot | None = None

    # ------------------------------------------------------------------
    # Recommendations
    # ------------------------------------------------------------------
    async def get_recommendations(self, team: TeamContext, quiz: QuizContext) -> list[Recommendation]:
        """3..5 catalog activities for the team/quiz context."""
        await self._fetch_delay()
        rng = self._rng_factory(team, quiz, team.department)
        picks = recommend_from_catalog(team, quiz, self._activities, rng)
        self.latest_recommendations = _to_recommendations(picks, team.department, "catalog")
        return self.latest_recommendations

    async def generate_ai_ideas(self, team: TeamContext, quiz: QuizContext) -> list[Recommendation]:
        """3..5 ideas from the remote backend, or the local idea pool when it fails or returns too few."""
        await self._fetch_delay()
        rng = self._rng_factory(team, quiz, team.department)

        pool: list[Activity] | None = None
        if self.backend is not None:
            try:
                raw = await self.backend.fetch_ideas(team, quiz)
                pool = [Activity.model_validate(item) for item in raw]
                if len(pool) < MIN_RECOMMENDATIONS:
                    raise BackendError(
                        f"backend returned {len(pool)} ideas, need at least {MIN_RECOMMENDATIONS}"
                    )
            except Exception:
                logger.warning("Idea backend unavailable, using local idea pool", exc_info=True)
                pool = None
        source: RecommendationSource = "local-ai" if pool is None else "remote-ai"

        if pool is not None and not any(a.is_exclusive_to(team.department) for a in pool):
            # no remote idea is exclusive to the department, so borrow the local ones
            pool.extend(a for a in build_idea_pool(team.department) if a.is_exclusive_to(team.department))

        picks = generate_ideas(team, quiz, rng, pool=pool)
        self.latest_recommendations = _to_recommendations(picks, team.department, source)
        return self.latest_recommendations

    # ------------------------------------------------------------------
    # Engagement log
    # ------------------------------------------------------------------
    async def save_activity(self, activity: Activity, department: str | None = None) -> bool:
        """Save once per activity id; repeated saves are accepted and ignored."""
        await self._write_delay()
        if activity.placeholder:
            return False
        self.store.save_activity(activity, department=department)
        return True

    async def submit_feedback(
        self,
        activity_id: str,
        reaction: Reaction | None,
        title: str = "",
        comment: str = "",
        rating: float | None = None,
    ) -> FeedbackEvent:
        await self._write_delay()
        return self.store.add_feedback(
            activity_id,
            reaction,
            title=title,
            comment=comment,
            rating=rating,
        )

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------
    async def get_analytics(self, range_: AnalyticsRange = "4w") -> AnalyticsSnapshot:
        """Remote snapshot if available, otherwise recomputed from the local log."""
        await self._fetch_delay()
        snapshot: AnalyticsSnapshot | None = None
        if self.backend is not None:
            try:
                payload = await self.backend.fetch_analytics(range_)
                snapshot = AnalyticsSnapshot.model_validate(payload)
            except Exception:
                logger.warning("Analytics backend unavailable, deriving locally", exc_info=True)
        if snapshot is None:
            snapshot = self._snapshot_fn(self.store.feedback(), self.store.saved(), range_)
        self.latest_analytics = snapshot
        return snapshot

    async def generate_persona(self, team: TeamContext, quiz: QuizContext) -> PersonaProfile:
        await self._fetch_delay()
        return self._persona_fn(team, quiz, self.store.saved(), self.store.feedback())

    # ------------------------------------------------------------------
    # Gamification
    # ------------------------------------------------------------------
    async def record_award(
        self,
        team_id: str,
        event: str,
        meta: dict[str, Any] | None = None,
        now: datetime | None = None,
    ) -> AwardDelta:
        """Apply the award locally, then mirror it to the backend if one answers."""
        delta = self.gamification.record_award(team_id, event, meta, now=now)
        await self._write_delay()
        if self.backend is not None:
            try:
                await self.backend.post_award(team_id, event, dict(meta or {}))
            except Exception:
                logger.warning("Award for team %s not mirrored to backend", team_id, exc_info=True)
        return delta

    async def get_gamification(self, team_id: str) -> GamificationState:
        await self._fetch_delay()
        return self.gamification.get_state(team_id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    async def _fetch_delay(self) -> None:
        await asyncio.sleep(self.settings.fetch_latency_ms / 1000)

    async def _write_delay(self) -> None:
        await asyncio.sleep(self.settings.write_latency_ms / 1000)


def build_service(settings: EngineSettings | None = None) -> TeamSyncService:
    """Service wired from settings; adds the LLM idea backend when enabled."""
    settings = settings or EngineSettings.from_env()
    backend: TeamSyncBackend | None = None
    if settings.use_llm:
        llms = get_available_llms()
        if llms:
            backend = LLMIdeaBackend(llms)
        else:
            logger.warning("TEAM_SYNC_USE_LLM is set but no LLM is configured; using local ideas")
    return TeamSyncService(backend=backend, settings=settings)
