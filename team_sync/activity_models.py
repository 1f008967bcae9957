"""Activity catalog and team/quiz context models.

Defines the static activity catalog (14 activities: cross-department,
department-exclusive and general) plus the TeamContext / QuizContext inputs
produced by onboarding and the quiz.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Dimension enums
# ---------------------------------------------------------------------------
Budget = Literal["low", "medium", "high"]
WorkMode = Literal["remote", "in_person", "hybrid"]
Energy = Literal["chill", "balanced", "high"]


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------
class Activity(BaseModel):
    """A single team-building activity."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: str = ""
    duration: int = Field(default=30, ge=0)  # minutes
    budget: Budget = "medium"
    tags: list[str] = Field(default_factory=list)
    department_scope: list[str] = Field(default_factory=list)  # empty = all departments
    hero_alignment: str | None = None
    microcopy: str = ""
    reasoning: str = ""
    placeholder: bool = False

    @field_validator("department_scope", mode="before")
    @classmethod
    def _coerce_scope(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value else []
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: object) -> object:
        return [] if value is None else value

    def is_exclusive_to(self, department: str) -> bool:
        """True when this activity is scoped to *department* alone."""
        return self.department_scope == [department]


class TeamContext(BaseModel):
    """Team info captured during onboarding."""

    name: str = Field(default="", max_length=60)
    department: str = Field(default="General", min_length=1, max_length=40)
    mode: WorkMode = "hybrid"
    size: int = Field(default=0, ge=0)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if value and not value.strip():
            raise ValueError("team name cannot be only whitespace")
        return value.strip()


class QuizContext(BaseModel):
    """Quiz answers used to steer recommendations."""

    energy: Energy = "balanced"
    budget: Budget = "medium"
    interests: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Static catalog
# ---------------------------------------------------------------------------
_BOTH_MODES = ["remote", "in_person"]

ACTIVITIES: dict[str, Activity] = {
    # Cross-department
    "x1": Activity(
        id="x1",
        title="Team Spotify Playlist",
        description="Everyone adds 1-2 songs. Hit play to kick off your sync with shared vibes.",
        duration=15,
        budget="low",
        tags=["fun", "music", *_BOTH_MODES, "chill", "cross_department"],
        hero_alignment="Innovator",
        microcopy="Assemble your sonic squad, cue the theme tune!",
    ),
    "x2": Activity(
        id="x2",
        title="Digital Show & Tell",
        description="Each teammate shares a meaningful item or link in 60 seconds.",
        duration=20,
        budget="low",
        tags=["sharing", *_BOTH_MODES, "balanced", "cross_department"],
        hero_alignment="Guardian",
        microcopy="Every hero has an origin story. What's yours?",
    ),
    # Department-exclusive
    "lead1": Activity(
        id="lead1",
        title="Vision Mapping Workshop",
        description="Co-create a North Star and 3 horizon goals with interactive prompts.",
        duration=60,
        budget="medium",
        tags=["strategy", "facilitated", *_BOTH_MODES, "balanced"],
        department_scope=["Leadership"],
        hero_alignment="Strategist",
        microcopy="Lead the league and chart a course worthy of legends.",
    ),
    "sales1": Activity(
        id="sales1",
        title="Pitch Battle Royale",
        description="Friendly competition: rapid-fire pitches on fun prompts, with peer votes.",
        duration=30,
        budget="low",
        tags=["games", "competitive", *_BOTH_MODES, "high"],
        department_scope=["Sales"],
        hero_alignment="Vanguard",
        microcopy="Dial up the charisma, it's showtime!",
    ),
    "prod1": Activity(
        id="prod1",
        title="Lightning Discovery Jam",
        description="5x5 ideation: five minutes per prompt to uncover real user pains.",
        duration=45,
        budget="low",
        tags=["product", "discovery", *_BOTH_MODES, "creative", "balanced"],
        department_scope=["Product"],
        hero_alignment="Innovator",
        microcopy="Prototype your destiny, one idea at a time.",
    ),
    "ops1": Activity(
        id="ops1",
        title="Process Kaizen Sprint",
        description="Pick one workflow and shave off 10% friction with quick wins.",
        duration=40,
        budget="low",
        tags=["process", "efficiency", *_BOTH_MODES, "chill"],
        department_scope=["Operations"],
        hero_alignment="Architect",
        microcopy="Order from chaos. Optimize like a mastermind.",
    ),
    "qa1": Activity(
        id="qa1",
        title="Bug Hunt Bingo",
        description="Turn exploratory testing into a game. First to bingo wins.",
        duration=50,
        budget="low",
        tags=["quality", "games", *_BOTH_MODES, "balanced"],
        department_scope=["QA"],
        hero_alignment="Guardian",
        microcopy="Defend the realm and banish bugs with righteous clicks.",
    ),
    "dev1": Activity(
        id="dev1",
        title="Architecture Kata",
        description="Small groups sketch and debate designs for a fun, fictional system.",
        duration=60,
        budget="low",
        tags=["engineering", "architecture", *_BOTH_MODES, "creative", "balanced"],
        department_scope=["Dev"],
        hero_alignment="Strategist",
        microcopy="Refactor reality and design like a hero engineer.",
    ),
    # General
    "a1": Activity(
        id="a1",
        title="Two Truths & a Lie",
        description="A quick icebreaker where each person shares two truths and one lie.",
        duration=20,
        budget="low",
        tags=["games", *_BOTH_MODES, "chill"],
        hero_alignment="Vanguard",
        microcopy="Unmask the legend and spot the decoy.",
    ),
    "a2": Activity(
        id="a2",
        title="Virtual Escape Room",
        description="Collaborate to solve puzzles in a themed virtual escape experience.",
        duration=60,
        budget="medium",
        tags=["games", "remote", "balanced"],
        hero_alignment="Guardian",
        microcopy="Decode the enigma, teamwork saves the day.",
    ),
    "a3": Activity(
        id="a3",
        title="Cooking Class",
        description="Team up to learn a new dish and share a meal together.",
        duration=90,
        budget="high",
        tags=["food", "in_person", "creative", "balanced"],
        hero_alignment="Innovator",
        microcopy="Stir up synergy where flavor meets teamwork.",
    ),
    "a4": Activity(
        id="a4",
        title="Outdoor Scavenger Hunt",
        description="Explore your area and complete fun challenges along the way.",
        duration=90,
        budget="low",
        tags=["outdoors", "high", "in_person"],
        hero_alignment="Vanguard",
        microcopy="Adventure assembled. Ready, set, quest!",
    ),
    "a5": Activity(
        id="a5",
        title="Mindfulness Session",
        description="A guided session to reduce stress and improve focus.",
        duration=30,
        budget="low",
        tags=["wellness", "remote", "chill", "in_person"],
        hero_alignment="Guardian",
        microcopy="Quiet the noise and center your inner hero.",
    ),
    "a6": Activity(
        id="a6",
        title="Team Mural",
        description="Create a collaborative digital mural to express team identity.",
        duration=45,
        budget="low",
        tags=["creative", "remote", "balanced"],
        hero_alignment="Innovator",
        microcopy="Sketch the saga: your team, your legend.",
    ),
}


def get_activity(activity_id: str) -> Activity | None:
    """Look up a catalog activity by ID."""
    return ACTIVITIES.get(activity_id)


def catalog() -> list[Activity]:
    """All catalog activities in registry order."""
    return list(ACTIVITIES.values())


def activities_for(department: str) -> list[Activity]:
    """Activities open to everyone plus those scoped to *department*."""
    return [
        a for a in ACTIVITIES.values()
        if not a.department_scope or department in a.department_scope
    ]
