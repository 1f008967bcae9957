"""Team persona composition from hero breakdown and team/quiz context."""

from __future__ import annotations

from pydantic import BaseModel, Field

from team_sync.activity_models import QuizContext, TeamContext
from team_sync.engagement_models import FeedbackEvent, SavedActivity
from team_sync.engine.analytics import (
    DEFAULT_HERO,
    HeroShare,
    derive_hero_alignment_breakdown,
)


class PersonaProfile(BaseModel):
    """A playful descriptive profile of the team."""

    name: str
    summary: str
    tone: list[str] = Field(default_factory=lambda: ["playful", "supportive"])
    motivators: list[str] = Field(default_factory=lambda: ["connection", "recognition"])
    constraints: list[str] = Field(default_factory=lambda: ["low friction", "time-bound"])
    hero_breakdown: list[HeroShare] = Field(default_factory=list)


WITTY_LABELS: list[str] = [
    "The Office Meets Avengers Squad",
    "Figma Files & Friday Fun",
    "Coffee-fueled Collaborators",
    "The Agile Assemble",
]

_MODE_LABELS: dict[str, str] = {
    "remote": "remote",
    "in_person": "in-person",
    "hybrid": "hybrid",
}


def witty_label(department: str, size: int) -> str:
    return WITTY_LABELS[(len(department) + size) % len(WITTY_LABELS)]


def derive_persona(
    team: TeamContext,
    quiz: QuizContext,
    saved: list[SavedActivity],
    feedback: list[FeedbackEvent],
) -> PersonaProfile:
    breakdown = derive_hero_alignment_breakdown(saved, feedback)
    top = breakdown[0].hero if breakdown else DEFAULT_HERO
    label = witty_label(team.department, team.size)
    mode = _MODE_LABELS.get(team.mode, team.mode)

    return PersonaProfile(
        name=f"{team.department} {top} Collective",
        summary=(
            f"{label}: a {mode} crew with {quiz.energy} energy, "
            f"rallying behind {top.lower()} vibes."
        ),
        hero_breakdown=breakdown,
    )
