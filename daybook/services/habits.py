from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from daybook.core.errors import ForbiddenError, NotFoundError
from daybook.models import Habit, HabitCompletion, HabitStatus
from daybook.services.day_bucket import (
    day_bucket_statement,
    find_day_record,
    upsert_day_record,
)


logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HabitService:
    """Manage habits and their per-day completion records."""

    def __init__(
        self,
        session: AsyncSession,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._session = session
        self._clock = clock

    async def list_habits(self, user_id: UUID) -> list[Habit]:
        """Return the user's active habits, oldest first."""
        stmt = (
            select(Habit)
            .where(Habit.user_id == user_id)
            .where(Habit.status == HabitStatus.ACTIVE.value)
            .order_by(Habit.created_at)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def create_habit(
        self,
        user_id: UUID,
        *,
        name: str,
        description: str | None = None,
        color: str | None = None,
        icon: str | None = None,
    ) -> Habit:
        habit = Habit(
            user_id=user_id,
            name=self._require_name(name),
            description=self._strip_or_none(description),
            color=self._validate_color(color),
            icon=self._strip_or_none(icon),
            status=HabitStatus.ACTIVE.value,
            created_at=self._clock(),
        )
        self._session.add(habit)
        await self._session.flush()
        return habit

    async def update_habit(
        self,
        user_id: UUID,
        habit_id: UUID,
        *,
        name: str | None = None,
        description: str | None = None,
        color: str | None = None,
        icon: str | None = None,
    ) -> Habit:
        """Overwrite the provided fields; omitted fields keep their values."""
        habit = await self._get_owned_habit(user_id, habit_id)
        if name is not None:
            habit.name = self._require_name(name)
        if description is not None:
            habit.description = self._strip_or_none(description)
        if color is not None:
            habit.color = self._validate_color(color)
        if icon is not None:
            habit.icon = self._strip_or_none(icon)
        await self._session.flush()
        return habit

    async def archive_habit(self, user_id: UUID, habit_id: UUID) -> Habit:
        """Hide a habit from listings; its completions are kept."""
        habit = await self._get_owned_habit(user_id, habit_id)
        habit.status = HabitStatus.ARCHIVED.value
        await self._session.flush()
        logger.info("Archived habit %s for user %s", habit_id, user_id)
        return habit

    async def completions_for_day(self, user_id: UUID, date: datetime) -> list[HabitCompletion]:
        stmt = day_bucket_statement(HabitCompletion, {"user_id": user_id}, date)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def completions_for_range(
        self,
        user_id: UUID,
        habit_id: UUID,
        start: datetime,
        end: datetime,
    ) -> list[HabitCompletion]:
        """Return a habit's completion records within ``[start, end]`` by date."""
        await self._get_owned_habit(user_id, habit_id)
        stmt = (
            select(HabitCompletion)
            .where(HabitCompletion.habit_id == habit_id)
            .where(HabitCompletion.date >= start)
            .where(HabitCompletion.date <= end)
            .order_by(HabitCompletion.date)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def toggle_completion(
        self,
        user_id: UUID,
        habit_id: UUID,
        *,
        date: datetime,
        completed: bool,
        notes: str | None = None,
    ) -> HabitCompletion:
        """Set the habit's completion state for ``date``'s local day.

        ``completed_at`` is stamped when the day flips to completed, kept if it
        already was, and cleared when the day is marked not completed.
        """
        await self._get_owned_habit(user_id, habit_id)
        owner = {"habit_id": habit_id, "user_id": user_id}
        normalized_notes = self._strip_or_none(notes)
        now = self._clock()

        def apply(record: HabitCompletion) -> None:
            if completed and not record.completed:
                record.completed_at = now
            elif not completed:
                record.completed_at = None
            record.completed = completed
            if normalized_notes is not None:
                record.notes = normalized_notes

        await upsert_day_record(
            self._session,
            HabitCompletion,
            owner,
            date,
            apply=apply,
            create=lambda: HabitCompletion(
                habit_id=habit_id,
                user_id=user_id,
                date=date,
                completed=completed,
                notes=normalized_notes,
                completed_at=now if completed else None,
            ),
        )
        record = await find_day_record(self._session, HabitCompletion, owner, date)
        if record is None:  # pragma: no cover - the upsert just wrote it
            raise RuntimeError("Habit completion missing after upsert.")
        return record

    async def _get_owned_habit(self, user_id: UUID, habit_id: UUID) -> Habit:
        habit = await self._session.get(Habit, habit_id)
        if habit is None:
            raise NotFoundError(f"Habit {habit_id} not found.")
        if habit.user_id != user_id:
            raise ForbiddenError("Habit belongs to another user.")
        return habit

    def _require_name(self, name: str) -> str:
        normalized = (name or "").strip()
        if not normalized:
            raise ValueError("Habit name must not be empty.")
        return normalized

    def _validate_color(self, color: str | None) -> str | None:
        if not color:
            return None
        if not _HEX_COLOR.match(color):
            raise ValueError("Habit color must be a hex value like #4CAF50.")
        return color

    def _strip_or_none(self, value: str | None) -> str | None:
        if value is None:
            return None
        stripped = value.strip()
        return stripped or None
