"""Team-building recommendation, engagement analytics and gamification engines."""

from .activity_models import ACTIVITIES, Activity, QuizContext, TeamContext

__all__ = [
    "ACTIVITIES",
    "Activity",
    "QuizContext",
    "TeamContext",
]
