"""Append-only engagement log: saved activities and feedback events.

Single owner per session; the service receives it by injection and tests
call ``reset()`` between cases.
"""

from __future__ import annotations

from datetime import datetime, timezone
import threading
import uuid

from team_sync.activity_models import Activity, get_activity
from team_sync.engagement_models import FeedbackEvent, Reaction, SavedActivity


class EngagementStore:
    """Container for the saved list and the feedback log."""

    def __init__(self) -> None:
        self._saved: list[SavedActivity] = []
        self._feedback: list[FeedbackEvent] = []
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def save_activity(
        self,
        activity: Activity,
        department: str | None = None,
        saved_at: datetime | None = None,
    ) -> bool:
        """Save *activity* once. Returns ``False`` when it was already saved."""
        with self._lock:
            if any(s.activity.id == activity.id for s in self._saved):
                return False
            entry = SavedActivity(
                activity=activity,
                department_scope=[department] if department else list(activity.department_scope),
                hero_alignment=activity.hero_alignment or "Ally",
                saved_at=saved_at or datetime.now(timezone.utc),
            )
            self._saved = [*self._saved, entry]
            return True

    def add_feedback(
        self,
        activity_id: str,
        reaction: Reaction | None,
        title: str = "",
        comment: str = "",
        rating: float | None = None,
        created_at: datetime | None = None,
    ) -> FeedbackEvent:
        """Append a feedback event; the title falls back to the catalog entry."""
        if not title:
            known = get_activity(activity_id) or self._saved_activity(activity_id)
            title = known.title if known else ""
        event = FeedbackEvent(
            id=uuid.uuid4().hex,
            activity_id=activity_id,
            activity_title=title,
            reaction=reaction,
            comment=comment or "",
            rating=rating,
            created_at=created_at or datetime.now(timezone.utc),
        )
        with self._lock:
            self._feedback = [*self._feedback, event]
        return event

    def reset(self) -> None:
        with self._lock:
            self._saved = []
            self._feedback = []

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def saved(self) -> list[SavedActivity]:
        with self._lock:
            return list(self._saved)

    def feedback(self) -> list[FeedbackEvent]:
        with self._lock:
            return list(self._feedback)

    def _saved_activity(self, activity_id: str) -> Activity | None:
        with self._lock:
            return next((s.activity for s in self._saved if s.activity.id == activity_id), None)
