from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from daybook.models import MoodCategory
from daybook.services.insights import MoodChart, MoodTrendPoint


class MoodRecordUpsert(BaseModel):
    """Payload to record the mood of a day."""

    date: datetime = Field(..., description="Instant within the day being rated.")
    mood: MoodCategory = Field(..., description="One of excellent, good, neutral, sad, terrible.")
    mood_intensity: int = Field(..., ge=1, le=10, description="Intensity from 1 to 10.")
    notes: str | None = Field(default=None, description="Free-form notes for the day.")

    @field_validator("mood")
    @classmethod
    def _reject_unknown(cls, value: MoodCategory) -> MoodCategory:
        if value is MoodCategory.UNKNOWN:
            raise ValueError("mood must be a rated category")
        return value


class MoodRecordItem(BaseModel):
    """Serializable view of a stored mood record."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    date: datetime
    mood: MoodCategory
    mood_intensity: int
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    @field_validator("mood", mode="before")
    @classmethod
    def _tolerate_malformed(cls, value: object) -> MoodCategory:
        return MoodCategory.parse(value)


class MoodTrendPointItem(BaseModel):
    """Average intensity for one local day."""

    date: str
    average_intensity: float
    sample_count: int

    @classmethod
    def from_domain(cls, point: MoodTrendPoint) -> "MoodTrendPointItem":
        return cls(
            date=point.date,
            average_intensity=point.average_intensity,
            sample_count=point.sample_count,
        )


class MoodChartItem(BaseModel):
    """Distribution and trend data for mood charts."""

    distribution: dict[MoodCategory, int]
    trend: list[MoodTrendPointItem]
    average_intensity: float = Field(..., ge=0)
    dominant_mood: MoodCategory | None = None
    sample_count: int = Field(..., ge=0)

    @classmethod
    def from_domain(cls, chart: MoodChart) -> "MoodChartItem":
        return cls(
            distribution=dict(chart.distribution),
            trend=[MoodTrendPointItem.from_domain(point) for point in chart.trend],
            average_intensity=chart.average_intensity,
            dominant_mood=chart.dominant_mood,
            sample_count=chart.sample_count,
        )
