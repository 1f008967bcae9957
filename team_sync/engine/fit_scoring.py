"""Fit scoring for one activity against team + quiz context.

One weight table drives both the AI-pool scorer (base 50, clamped to
[60, 98]) and the catalog scorer (base 0, unclamped).
All functions are *pure* apart from drawing jitter from the supplied rng.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from team_sync.activity_models import Activity, QuizContext, TeamContext
from team_sync.engine.seeded_random import XorShift32


# ---------------------------------------------------------------------------
# Weight tables
# ---------------------------------------------------------------------------
_TAG_BOOSTS: dict[str, int] = {
    "collaboration": 3,
    "communication": 3,
    "creativity": 2,
    "problem-solving": 2,
    "remote-friendly": 2,
    "hybrid": 2,
    "quick-setup": 1,
    "chill": 1,
    "balanced": 1,
    "high": 1,
}


class ScoreWeights(BaseModel):
    """Configurable weight table for ``compute_fit_score``."""

    base: float = 0
    department_match: float = 55
    interest_tag: float = 6
    mode_match: float = 6
    mode_partial: float = 3
    energy_match: float = 4
    budget_match: float = 0
    budget_partial: float = 0
    tag_boosts: dict[str, int] = Field(default_factory=lambda: dict(_TAG_BOOSTS))
    jitter: int = Field(default=3, ge=0)
    clamp_min: float | None = None
    clamp_max: float | None = None


AI_POOL_WEIGHTS = ScoreWeights(base=50, clamp_min=60, clamp_max=98)
CATALOG_WEIGHTS = ScoreWeights(base=0, budget_match=4, budget_partial=2)


# Mode tags appear in two spellings across the catalog and the idea pool.
_MODE_TAGS: dict[str, set[str]] = {
    "remote": {"remote", "remote-friendly"},
    "in_person": {"in_person", "in-person"},
    "hybrid": {"hybrid"},
}


# ---------------------------------------------------------------------------
# Result model
# ---------------------------------------------------------------------------
class FitScore(BaseModel):
    """Score for a single activity with its per-factor breakdown."""

    activity_id: str
    score: float
    components: dict[str, float] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Factor helpers
# ---------------------------------------------------------------------------
def _mode_points(tags: set[str], mode: str, weights: ScoreWeights) -> float:
    if tags & _MODE_TAGS.get(mode, {mode}):
        return weights.mode_match
    if mode == "hybrid" and tags & (_MODE_TAGS["remote"] | _MODE_TAGS["in_person"]):
        return weights.mode_partial
    return 0


def _budget_points(activity: Activity, quiz: QuizContext, weights: ScoreWeights) -> float:
    if activity.budget == quiz.budget:
        return weights.budget_match
    if quiz.budget == "medium" and activity.budget == "low":
        return weights.budget_partial
    return 0


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def compute_fit_score(
    activity: Activity,
    team: TeamContext,
    quiz: QuizContext,
    rng: XorShift32,
    weights: ScoreWeights = CATALOG_WEIGHTS,
) -> FitScore:
    """Score *activity* for the team/quiz context.

    Factors are added in a fixed order: department match, interest overlap,
    work mode, energy, budget, per-tag boosts, then seeded jitter. The total
    is clamped only when the weight table defines bounds.
    """
    tags = set(activity.tags)
    parts: dict[str, float] = {"base": weights.base}

    parts["department"] = (
        weights.department_match if activity.is_exclusive_to(team.department) else 0
    )
    overlap = len(set(quiz.interests) & tags)
    parts["interests"] = overlap * weights.interest_tag
    parts["mode"] = _mode_points(tags, team.mode, weights)
    parts["energy"] = weights.energy_match if quiz.energy in tags else 0
    parts["budget"] = _budget_points(activity, quiz, weights)
    parts["tag_boosts"] = sum(weights.tag_boosts.get(t, 0) for t in tags)
    parts["jitter"] = rng.randint(-weights.jitter, weights.jitter) if weights.jitter else 0

    score = sum(parts.values())
    if weights.clamp_min is not None:
        score = max(weights.clamp_min, score)
    if weights.clamp_max is not None:
        score = min(weights.clamp_max, score)

    return FitScore(activity_id=activity.id, score=score, components=parts)


def score_activities(
    activities: list[Activity],
    team: TeamContext,
    quiz: QuizContext,
    rng: XorShift32,
    weights: ScoreWeights = CATALOG_WEIGHTS,
) -> list[tuple[Activity, float]]:
    """Score every activity, preserving input order."""
    return [
        (a, compute_fit_score(a, team, quiz, rng, weights).score)
        for a in activities
    ]
