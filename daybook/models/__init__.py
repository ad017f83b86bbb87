"""SQLAlchemy models and declarative base."""

from daybook.models.base import Base  # noqa: F401
from daybook.models.entities import (  # noqa: F401
    DiaryEntry,
    Habit,
    HabitCompletion,
    MediaAttachment,
    MoodRecord,
    PeriodInsight,
    User,
)
from daybook.models.enums import (  # noqa: F401
    HabitStatus,
    InsightPeriod,
    MediaType,
    MoodCategory,
)

__all__ = [
    "Base",
    "User",
    "DiaryEntry",
    "MoodRecord",
    "Habit",
    "HabitCompletion",
    "MediaAttachment",
    "PeriodInsight",
    "MoodCategory",
    "HabitStatus",
    "InsightPeriod",
    "MediaType",
]
