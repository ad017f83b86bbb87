from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from daybook.models import InsightPeriod, MoodCategory


class InsightGenerateRequest(BaseModel):
    """Generate an insight for a period; the window defaults to the trailing period."""

    period: InsightPeriod
    period_start: datetime | None = None
    period_end: datetime | None = None

    @model_validator(mode="after")
    def _window_is_complete(self) -> "InsightGenerateRequest":
        if (self.period_start is None) != (self.period_end is None):
            raise ValueError("period_start and period_end must be provided together")
        return self


class HabitSnapshotItem(BaseModel):
    id: str
    name: str


class PeriodInsightItem(BaseModel):
    """Stored summary of a user's moods over a period."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    period: InsightPeriod
    period_start: datetime
    period_end: datetime
    average_mood_score: Decimal | None = None
    dominant_mood: MoodCategory | None = None
    mood_distribution: dict[MoodCategory, int] = Field(default_factory=dict)
    top_habits_correlation: list[HabitSnapshotItem] = Field(default_factory=list)
    insights: str | None = None
    generated_at: datetime
    updated_at: datetime
