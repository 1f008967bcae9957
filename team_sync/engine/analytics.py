"""Analytics derivation from the engagement log.

Turns a snapshot of feedback events and saved activities into success
metrics, a sentiment summary, week-bucketed trends and a hero breakdown.
All functions are *pure*; "now" is injectable for trend bucketing.
"""

from __future__ import annotations

import math
import re
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Literal

from pydantic import BaseModel, Field

from team_sync.engagement_models import FeedbackEvent, SavedActivity


AnalyticsRange = Literal["4w", "12w", "all"]
SentimentLabel = Literal["positive", "negative", "mixed"]

WEEK = timedelta(weeks=1)


# ---------------------------------------------------------------------------
# Result models
# ---------------------------------------------------------------------------
class EngagementTotals(BaseModel):
    feedback: int = 0
    likes: int = 0
    dislikes: int = 0
    saved: int = 0
    rated: int = 0


class SuccessMetrics(BaseModel):
    """Completion, like ratio and average rating."""

    completion_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    like_ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    avg_rating: float = Field(default=0.0, ge=0.0, le=5.0)
    totals: EngagementTotals = Field(default_factory=EngagementTotals)


class SentimentMentions(BaseModel):
    positive: int = 0
    negative: int = 0
    neutral: int = 0


class SentimentSummary(BaseModel):
    """Aggregate signed sentiment with its label."""

    score: float = Field(default=0.0, ge=-1.0, le=1.0)
    label: SentimentLabel = "mixed"
    mentions: SentimentMentions = Field(default_factory=SentimentMentions)


class TrendBucket(BaseModel):
    """Engagement counts for one week."""

    label: str
    week_start: datetime
    likes: int = 0
    dislikes: int = 0
    total: int = 0
    tags: dict[str, int] = Field(default_factory=dict)
    top_tag: str = ""
    top_tag_count: int = 0


class HeroShare(BaseModel):
    hero: str
    weight: float
    pct: float = Field(ge=0.0)


class AnalyticsSnapshot(BaseModel):
    """Everything the analytics dashboard shows for one range."""

    range: AnalyticsRange = "4w"
    success: SuccessMetrics
    sentiment: SentimentSummary
    trends: list[TrendBucket]
    hero_breakdown: list[HeroShare]


# ---------------------------------------------------------------------------
# Success metrics
# ---------------------------------------------------------------------------
def derive_success_metrics(
    feedback: list[FeedbackEvent],
    saved: list[SavedActivity],
) -> SuccessMetrics:
    """Completion rate, like ratio and average rating.

    completion_rate = min(1, feedback / (saved * 2)) when anything is saved,
    0.15 when only feedback exists, else 0. Without explicit ratings the
    average is estimated from reactions (like=5, dislike=2).
    """
    total = len(feedback)
    likes = sum(1 for f in feedback if f.reaction == "like")
    dislikes = sum(1 for f in feedback if f.reaction == "dislike")
    ratings = [f.rating for f in feedback if f.rating is not None]

    if saved:
        completion = min(1.0, total / (len(saved) * 2))
    elif total:
        completion = 0.15
    else:
        completion = 0.0

    like_ratio = likes / total if total else 0.0

    if ratings:
        avg = sum(ratings) / len(ratings)
    elif total:
        avg = (likes * 5 + dislikes * 2) / total
    else:
        avg = 0.0

    return SuccessMetrics(
        completion_rate=completion,
        like_ratio=like_ratio,
        avg_rating=avg,
        totals=EngagementTotals(
            feedback=total,
            likes=likes,
            dislikes=dislikes,
            saved=len(saved),
            rated=len(ratings),
        ),
    )


# ---------------------------------------------------------------------------
# Sentiment
# ---------------------------------------------------------------------------
POSITIVE_WORDS: tuple[str, ...] = (
    "love", "great", "good", "fun", "amazing",
    "awesome", "engaging", "useful", "enjoy", "nice",
)
NEGATIVE_WORDS: tuple[str, ...] = (
    "bad", "boring", "slow", "confusing", "hate",
    "meh", "bug", "issue", "hard", "annoy",
)
_SENTIMENT_THRESHOLD = 0.25


def event_sentiment(event: FeedbackEvent) -> float:
    """Signed score for one event: keywords if commented, else reaction + rating."""
    comment = event.comment.lower()
    if comment:
        hits = sum(1 for w in POSITIVE_WORDS if w in comment)
        misses = sum(1 for w in NEGATIVE_WORDS if w in comment)
        return float(hits - misses)

    local = 0.0
    if event.reaction == "like":
        local += 0.5
    elif event.reaction == "dislike":
        local -= 0.5
    if event.rating is not None:
        local += (event.rating - 3) * 0.2
    return local


def _classify(score: float) -> str:
    if score > _SENTIMENT_THRESHOLD:
        return "positive"
    if score < -_SENTIMENT_THRESHOLD:
        return "negative"
    return "neutral"


def derive_sentiment_summary(feedback: list[FeedbackEvent]) -> SentimentSummary:
    mentions = Counter[str]()
    total = 0.0
    for event in feedback:
        local = event_sentiment(event)
        total += local
        mentions[_classify(local)] += 1

    score = max(-1.0, min(1.0, total / len(feedback))) if feedback else 0.0
    label = _classify(score)

    return SentimentSummary(
        score=score,
        label="mixed" if label == "neutral" else label,
        mentions=SentimentMentions(**mentions),
    )


# ---------------------------------------------------------------------------
# Trends
# ---------------------------------------------------------------------------
_HASHTAG = re.compile(r"#([a-z0-9_]+)")


def week_count(range_: AnalyticsRange, feedback_count: int = 0) -> int:
    """4 / 12 weeks, or for "all" between 4 and 24 depending on volume."""
    if range_ == "4w":
        return 4
    if range_ == "12w":
        return 12
    return max(4, min(24, math.ceil(feedback_count / 5)))


def extract_hashtags(comment: str) -> list[str]:
    return _HASHTAG.findall(comment.lower())


def derive_trend_buckets(
    feedback: list[FeedbackEvent],
    range_: AnalyticsRange = "4w",
    now: datetime | None = None,
) -> list[TrendBucket]:
    """Bucket feedback by elapsed weeks, oldest bucket first.

    Events without ``created_at`` are spread round-robin by their position.
    Events older than the range land in the oldest bucket, future-dated ones
    in the newest.
    """
    now = now or datetime.now(timezone.utc)
    weeks = week_count(range_, len(feedback))

    buckets = [
        TrendBucket(label=f"W{weeks - i}", week_start=now - (weeks - i) * WEEK)
        for i in range(weeks)
    ]
    tallies: list[Counter[str]] = [Counter() for _ in range(weeks)]

    for idx, event in enumerate(feedback):
        if event.created_at is not None:
            created = event.created_at
            if (created.tzinfo is None) != (now.tzinfo is None):
                created = created.replace(tzinfo=now.tzinfo)
            weeks_ago = math.floor((now - created) / WEEK)
        else:
            weeks_ago = idx % weeks
        bucket_idx = max(0, min(weeks - 1, weeks - 1 - weeks_ago))

        bucket = buckets[bucket_idx]
        if event.reaction == "like":
            bucket.likes += 1
        elif event.reaction == "dislike":
            bucket.dislikes += 1
        bucket.total += 1
        tallies[bucket_idx].update(extract_hashtags(event.comment))

    for bucket, tally in zip(buckets, tallies):
        bucket.tags = dict(tally)
        if tally:
            # most_common keeps insertion order among equal counts
            bucket.top_tag, bucket.top_tag_count = tally.most_common(1)[0]

    return buckets


# ---------------------------------------------------------------------------
# Hero alignment
# ---------------------------------------------------------------------------
DEFAULT_HERO = "Ally"

_TITLE_HEROES: list[tuple[str, str]] = [
    ("strategy", "Strategist"),
    ("architecture", "Strategist"),
    ("games", "Vanguard"),
    ("quality", "Guardian"),
    ("wellness", "Guardian"),
    ("creative", "Innovator"),
    ("product", "Innovator"),
]


def hero_for_title(title: str) -> str:
    lowered = title.lower()
    return next((hero for key, hero in _TITLE_HEROES if key in lowered), DEFAULT_HERO)


def derive_hero_alignment_breakdown(
    saved: list[SavedActivity],
    feedback: list[FeedbackEvent],
) -> list[HeroShare]:
    """Weighted hero vote, normalised by the positive-weighted total.

    Saved activities weigh +2 under their stored hero; likes +1 and dislikes
    -0.5 under the hero inferred from the activity title.
    """
    weights: dict[str, float] = {}

    for item in saved:
        hero = item.hero_alignment or DEFAULT_HERO
        weights[hero] = weights.get(hero, 0.0) + 2

    for event in feedback:
        if event.reaction is None:
            continue
        hero = hero_for_title(event.activity_title)
        delta = 1.0 if event.reaction == "like" else -0.5
        weights[hero] = weights.get(hero, 0.0) + delta

    positive_total = sum(w for w in weights.values() if w > 0) or 1.0
    shares = [
        HeroShare(hero=hero, weight=w, pct=max(0.0, w / positive_total))
        for hero, w in weights.items()
    ]
    return sorted(shares, key=lambda s: s.pct, reverse=True)


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------
def build_analytics_snapshot(
    feedback: list[FeedbackEvent],
    saved: list[SavedActivity],
    range_: AnalyticsRange = "4w",
    now: datetime | None = None,
) -> AnalyticsSnapshot:
    return AnalyticsSnapshot(
        range=range_,
        success=derive_success_metrics(feedback, saved),
        sentiment=derive_sentiment_summary(feedback),
        trends=derive_trend_buckets(feedback, range_, now),
        hero_breakdown=derive_hero_alignment_breakdown(saved, feedback),
    )
