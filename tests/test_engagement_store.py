"""Tests for team_sync/engagement_store.py."""

from datetime import datetime, timezone

from pydantic import ValidationError
import pytest

from team_sync.activity_models import ACTIVITIES, Activity
from team_sync.engagement_store import EngagementStore


@pytest.fixture
def store():
    return EngagementStore()


class TestSaveActivity:
    def test_idempotent(self, store):
        assert store.save_activity(ACTIVITIES["x1"]) is True
        assert store.save_activity(ACTIVITIES["x1"]) is False
        assert len(store.saved()) == 1

    def test_department_recorded(self, store):
        store.save_activity(ACTIVITIES["a1"], department="Sales")
        assert store.saved()[0].department_scope == ["Sales"]

    def test_scope_falls_back_to_activity(self, store):
        store.save_activity(ACTIVITIES["qa1"])
        assert store.saved()[0].department_scope == ["QA"]

    def test_missing_hero_defaults_to_ally(self, store):
        store.save_activity(Activity(id="z", title="Z"))
        assert store.saved()[0].hero_alignment == "Ally"

    def test_saved_at_kept(self, store):
        when = datetime(2026, 2, 1, tzinfo=timezone.utc)
        store.save_activity(ACTIVITIES["x2"], saved_at=when)
        assert store.saved()[0].saved_at == when


class TestAddFeedback:
    def test_title_from_catalog(self, store):
        event = store.add_feedback("x1", "like")
        assert event.activity_title == "Team Spotify Playlist"

    def test_title_from_saved_entry(self, store):
        store.save_activity(Activity(id="idea-9", title="Remote Idea"))
        assert store.add_feedback("idea-9", "dislike").activity_title == "Remote Idea"

    def test_unknown_title_empty(self, store):
        assert store.add_feedback("ghost", None).activity_title == ""

    def test_explicit_title_wins(self, store):
        assert store.add_feedback("x1", "like", title="Custom").activity_title == "Custom"

    def test_ids_unique_and_timestamped(self, store):
        a = store.add_feedback("x1", "like")
        b = store.add_feedback("x1", "like")
        assert a.id != b.id
        assert a.created_at is not None

    def test_rating_out_of_range(self, store):
        with pytest.raises(ValidationError):
            store.add_feedback("x1", None, rating=6)
        assert store.feedback() == []

    def test_append_order(self, store):
        store.add_feedback("x1", "like", comment="first")
        store.add_feedback("x2", "dislike", comment="second")
        assert [f.comment for f in store.feedback()] == ["first", "second"]


class TestSnapshots:
    def test_reads_are_copies(self, store):
        store.add_feedback("x1", "like")
        store.feedback().clear()
        store.saved().append(None)
        assert len(store.feedback()) == 1
        assert store.saved() == []

    def test_reset(self, store):
        store.save_activity(ACTIVITIES["x1"])
        store.add_feedback("x1", "like")
        store.reset()
        assert store.saved() == []
        assert store.feedback() == []
