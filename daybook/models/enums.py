from __future__ import annotations

from enum import Enum


class MoodCategory(str, Enum):
    """Closed set of mood ratings, in declaration order.

    ``UNKNOWN`` never comes from a client; it stands in for rows whose stored
    category is missing or not one of the five ratings.
    """

    EXCELLENT = "excellent"
    GOOD = "good"
    NEUTRAL = "neutral"
    SAD = "sad"
    TERRIBLE = "terrible"
    UNKNOWN = "unknown"

    @classmethod
    def rated(cls) -> tuple["MoodCategory", ...]:
        return (cls.EXCELLENT, cls.GOOD, cls.NEUTRAL, cls.SAD, cls.TERRIBLE)

    @classmethod
    def parse(cls, value: object) -> "MoodCategory":
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.UNKNOWN
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.UNKNOWN


class HabitStatus(str, Enum):
    """Lifecycle state of a habit; archived habits are soft-deleted."""

    ACTIVE = "active"
    ARCHIVED = "archived"


class InsightPeriod(str, Enum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
