from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from daybook.models import HabitStatus


class HabitCreate(BaseModel):
    """Payload to define a new habit."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    color: str | None = Field(default=None, description="Hex color such as #4CAF50.")
    icon: str | None = Field(default=None, max_length=50)


class HabitUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    color: str | None = None
    icon: str | None = Field(default=None, max_length=50)


class HabitItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    name: str
    description: str | None = None
    color: str | None = None
    icon: str | None = None
    status: HabitStatus
    created_at: datetime
    updated_at: datetime


class HabitCompletionToggle(BaseModel):
    """Completion state of a habit for the day containing ``date``."""

    date: datetime
    completed: bool
    notes: str | None = None


class HabitCompletionItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    habit_id: UUID
    user_id: UUID
    date: datetime
    completed: bool
    notes: str | None = None
    completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
