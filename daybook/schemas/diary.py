from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from daybook.models import MoodCategory


class DiaryEntryCreate(BaseModel):
    """Payload to create a diary entry."""

    date: datetime = Field(..., description="Day the entry is written for.")
    title: str | None = Field(default=None, max_length=255)
    content: str | None = None
    mood: MoodCategory | None = Field(default=None, description="Optional mood snapshot.")
    mood_intensity: int | None = Field(default=None, ge=1, le=10)


class DiaryEntryUpdate(BaseModel):
    """Fields of today's entry that may be edited."""

    title: str | None = Field(default=None, max_length=255)
    content: str | None = None


class DiaryEntryItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str | None = None
    content: str | None = None
    mood: str | None = None
    mood_intensity: int | None = None
    date: datetime
    created_at: datetime
    updated_at: datetime
