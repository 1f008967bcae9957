"""Engagement log records: saved activities and feedback events."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from team_sync.activity_models import Activity


Reaction = Literal["like", "dislike"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FeedbackEvent(BaseModel):
    """One reaction/comment/rating left on an activity. Immutable once appended."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    activity_id: str = Field(..., min_length=1)
    activity_title: str = ""
    reaction: Reaction | None = None
    comment: str = ""
    rating: float | None = Field(default=None, ge=0, le=5)
    created_at: datetime | None = None


class SavedActivity(BaseModel):
    """A saved activity plus the context it was saved in."""

    model_config = ConfigDict(frozen=True)

    activity: Activity
    department_scope: list[str] = Field(default_factory=list)
    hero_alignment: str = "Ally"
    saved_at: datetime = Field(default_factory=_utcnow)

    @property
    def activity_id(self) -> str:
        return self.activity.id
