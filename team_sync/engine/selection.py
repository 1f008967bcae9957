"""Recommendation selection: rank, shuffle-truncate, guarantee department coverage.

Selection is deliberately not pure top-K. After sorting by score a
Fisher-Yates shuffle decides which candidates survive, so lower-scoring
activities can appear and repeated requests show variety.
"""

from __future__ import annotations

import logging

from team_sync.activity_models import Activity, QuizContext, TeamContext
from team_sync.engine.fit_scoring import (
    AI_POOL_WEIGHTS,
    CATALOG_WEIGHTS,
    score_activities,
)
from team_sync.engine.seeded_random import XorShift32
from team_sync.idea_pool import build_idea_pool


logger = logging.getLogger(__name__)

MIN_RECOMMENDATIONS = 3
MAX_RECOMMENDATIONS = 5

ScoredActivity = tuple[Activity, float]


def _clamp_count(n: int) -> int:
    return max(MIN_RECOMMENDATIONS, min(MAX_RECOMMENDATIONS, n))


# ---------------------------------------------------------------------------
# Target counts
# ---------------------------------------------------------------------------
def ai_pool_target_count(rng: XorShift32) -> int:
    """3..7 drawn from *rng*, then clamped to 3..5."""
    return _clamp_count(int(rng.random() * 5) + 3)


def catalog_target_count(pool_size: int) -> int:
    return _clamp_count(pool_size)


# ---------------------------------------------------------------------------
# Placeholders
# ---------------------------------------------------------------------------
def _placeholder(index: int) -> Activity:
    return Activity(
        id=f"placeholder-{index}",
        title="More ideas loading…",
        description="Adjust your quiz or try another set to see fresh picks tailored to your team.",
        duration=30,
        budget="medium",
        tags=["ideas", "personalized"],
        hero_alignment="Ally",
        placeholder=True,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def select_recommendations(
    scored: list[ScoredActivity],
    department: str,
    count: int,
    rng: XorShift32,
) -> list[ScoredActivity]:
    """Pick ``count`` (clamped to 3..5) scored activities.

    If no pick is exclusive to *department* while some candidate is, the
    lowest-scoring pick is swapped for the best-scoring exclusive candidate.
    Short pools are padded with placeholder activities scored 0.
    """
    target = _clamp_count(count)
    ranked = sorted(scored, key=lambda pair: pair[1], reverse=True)
    picks = rng.shuffled(ranked)[:target]

    if not any(a.is_exclusive_to(department) for a, _ in picks):
        # ranked is score-descending, so the first exclusive hit is the best one
        best_exclusive = next((p for p in ranked if p[0].is_exclusive_to(department)), None)
        if best_exclusive is not None and picks:
            min_idx = min(range(len(picks)), key=lambda i: picks[i][1])
            logger.debug(
                "Swapping %s for department-exclusive %s",
                picks[min_idx][0].id, best_exclusive[0].id,
            )
            picks[min_idx] = best_exclusive

    picks.sort(key=lambda pair: pair[1], reverse=True)

    missing = MIN_RECOMMENDATIONS - len(picks)
    picks.extend((_placeholder(i), 0.0) for i in range(max(0, missing)))
    return picks


def recommend_from_catalog(
    team: TeamContext,
    quiz: QuizContext,
    activities: list[Activity],
    rng: XorShift32,
) -> list[ScoredActivity]:
    """Catalog path: base-0 weights, count fixed by pool size."""
    scored = score_activities(activities, team, quiz, rng, CATALOG_WEIGHTS)
    count = catalog_target_count(len(activities))
    return select_recommendations(scored, team.department, count, rng)


def generate_ideas(
    team: TeamContext,
    quiz: QuizContext,
    rng: XorShift32,
    pool: list[Activity] | None = None,
) -> list[ScoredActivity]:
    """AI-pool path: base-50 clamped weights, count drawn from *rng*.

    *pool* defaults to the local idea pool for the team's department; remote
    ideas are passed in here too so both sources share one selection step.
    """
    count = ai_pool_target_count(rng)
    candidates = pool if pool is not None else build_idea_pool(team.department, rng)
    scored = score_activities(candidates, team, quiz, rng, AI_POOL_WEIGHTS)
    return select_recommendations(scored, team.department, count, rng)
