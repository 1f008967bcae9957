"""Points and badges state machine.

Each engagement event appends to the team's history, adds points from a
fixed table and then evaluates the badge rules in order. Rules are
idempotent: a badge already held is never evaluated again.

Accepted quirk: when several badges fire in one transition only the last one
becomes ``last_earned_badge_id``; the others are still recorded in ``badges``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any
import logging

from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------
class Badge(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    description: str = ""
    earned_at: datetime


class AwardEvent(BaseModel):
    """One entry of the points ledger."""

    event: str
    points: int = Field(ge=0)
    meta: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime


class GamificationState(BaseModel):
    """Per-team points, badges and ledger.

    ``last_earned_badge_id`` / ``last_earned_at`` are a UI notification
    pointer; they are excluded from dumps and from ``durable_view``.
    """

    team_id: str = ""
    points: int = Field(default=0, ge=0)
    badges: list[Badge] = Field(default_factory=list)
    history: list[AwardEvent] = Field(default_factory=list)
    last_earned_badge_id: str | None = Field(default=None, exclude=True)
    last_earned_at: datetime | None = Field(default=None, exclude=True)

    def has_badge(self, badge_id: str) -> bool:
        return any(b.id == badge_id for b in self.badges)

    def badge_ids(self) -> list[str]:
        return [b.id for b in self.badges]

    def durable_view(self) -> dict[str, Any]:
        return self.model_dump()


class AwardDelta(BaseModel):
    """What one ``record_award`` call changed."""

    team_id: str
    event: str
    points_awarded: int
    new_badges: list[Badge] = Field(default_factory=list)
    state: GamificationState


# ---------------------------------------------------------------------------
# Points table
# ---------------------------------------------------------------------------
EVENT_POINTS: dict[str, int] = {
    "save": 10,
    "feedback": 5,
    "like": 3,
    "dislike": 1,
    "rating": 6,
}
UNKNOWN_EVENT_POINTS = 2


def points_for(event: str) -> int:
    return EVENT_POINTS.get(event, UNKNOWN_EVENT_POINTS)


# ---------------------------------------------------------------------------
# Badge rules (evaluated in list order)
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class BadgeRule:
    id: str
    name: str
    description: str
    check: Callable[[GamificationState, str], bool]


def _feedback_entries(state: GamificationState) -> int:
    return sum(1 for h in state.history if h.event in ("feedback", "rating"))


BADGE_RULES: list[BadgeRule] = [
    BadgeRule(
        id="first_save",
        name="First Save",
        description="Saved your first activity.",
        check=lambda state, event: event == "save",
    ),
    BadgeRule(
        id="feedback_apprentice",
        name="Feedback Apprentice",
        description="Left feedback or ratings 5 times.",
        check=lambda state, event: _feedback_entries(state) >= 5,
    ),
    BadgeRule(
        id="points_100",
        name="Points Milestone 100",
        description="Reached 100 points.",
        check=lambda state, event: state.points >= 100,
    ),
]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------
class GamificationEngine:
    """Incremental award engine holding one state per team.

    One logical writer per team is assumed; calls are not interleaved.
    """

    def __init__(
        self,
        notice_seconds: float = 4.0,
        rules: list[BadgeRule] | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._states: dict[str, GamificationState] = {}
        self._notice = timedelta(seconds=notice_seconds)
        self._rules = list(rules) if rules is not None else list(BADGE_RULES)
        self._clock = clock

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def record_award(
        self,
        team_id: str,
        event: str,
        meta: dict[str, Any] | None = None,
        now: datetime | None = None,
    ) -> AwardDelta:
        """Apply one engagement event and return what changed."""
        now = now or self._clock()
        state = self._state(team_id)

        pts = points_for(event)
        state.history.append(AwardEvent(event=event, points=pts, meta=dict(meta or {}), created_at=now))
        state.points += pts

        new_badges: list[Badge] = []
        for rule in self._rules:
            if state.has_badge(rule.id) or not rule.check(state, event):
                continue
            badge = Badge(id=rule.id, name=rule.name, description=rule.description, earned_at=now)
            state.badges.append(badge)
            new_badges.append(badge)

        if new_badges:
            state.last_earned_badge_id = new_badges[-1].id
            state.last_earned_at = now
            logger.info("Team %s earned %s", team_id or "(anonymous)", ", ".join(b.id for b in new_badges))

        return AwardDelta(
            team_id=team_id,
            event=event,
            points_awarded=pts,
            new_badges=new_badges,
            state=state.model_copy(deep=True),
        )

    def get_state(self, team_id: str) -> GamificationState:
        """Deep copy of the team's state (empty for unknown teams)."""
        return self._state(team_id).model_copy(deep=True)

    def last_earned(self, team_id: str, now: datetime | None = None) -> str | None:
        """The transient "just earned" badge id, cleared once the notice delay passes."""
        state = self._state(team_id)
        if state.last_earned_badge_id is None or state.last_earned_at is None:
            return None
        now = now or self._clock()
        if now - state.last_earned_at >= self._notice:
            state.last_earned_badge_id = None
            state.last_earned_at = None
            return None
        return state.last_earned_badge_id

    def reset(self, team_id: str | None = None) -> None:
        if team_id is None:
            self._states.clear()
        else:
            self._states.pop(team_id, None)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _state(self, team_id: str) -> GamificationState:
        if team_id not in self._states:
            self._states[team_id] = GamificationState(team_id=team_id)
        return self._states[team_id]
