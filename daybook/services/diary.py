from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from daybook.core.errors import ForbiddenError
from daybook.models import DiaryEntry, MoodCategory
from daybook.services.day_bucket import find_day_record


def _local_now() -> datetime:
    return datetime.now().astimezone()


class DiaryService:
    """Create, list and edit free-text diary entries."""

    def __init__(
        self,
        session: AsyncSession,
        *,
        clock: Callable[[], datetime] = _local_now,
    ):
        self._session = session
        self._clock = clock

    async def list_entries(
        self,
        user_id: UUID,
        *,
        limit: int = 50,
        offset: int = 0,
    ) -> list[DiaryEntry]:
        stmt = (
            select(DiaryEntry)
            .where(DiaryEntry.user_id == user_id)
            .order_by(DiaryEntry.date.desc())
            .limit(max(1, limit))
            .offset(max(0, offset))
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_entry_by_date(self, user_id: UUID, date: datetime) -> DiaryEntry | None:
        return await find_day_record(self._session, DiaryEntry, {"user_id": user_id}, date)

    async def create_entry(
        self,
        user_id: UUID,
        *,
        date: datetime,
        title: str | None = None,
        content: str | None = None,
        mood: MoodCategory | str | None = None,
        mood_intensity: int | None = None,
    ) -> DiaryEntry:
        """Persist a new entry; several entries on one day are allowed."""
        category = None
        if mood is not None:
            category = MoodCategory.parse(mood)
            if category is MoodCategory.UNKNOWN:
                raise ValueError(f"Unsupported mood category: {mood!r}.")
        if mood_intensity is not None and not 1 <= mood_intensity <= 10:
            raise ValueError("Mood intensity must be between 1 and 10.")

        entry = DiaryEntry(
            user_id=user_id,
            date=date,
            title=self._strip_or_none(title),
            content=content,
            mood=category.value if category else None,
            mood_intensity=mood_intensity,
        )
        self._session.add(entry)
        await self._session.flush()
        return entry

    async def update_entry(
        self,
        user_id: UUID,
        entry_id: UUID,
        *,
        title: str | None = None,
        content: str | None = None,
    ) -> DiaryEntry:
        """Edit today's entry. Entries of other days or users are read-only."""
        entry = await self.get_entry_by_date(user_id, self._clock())
        if entry is None or entry.id != entry_id:
            raise ForbiddenError("Only today's diary entry can be edited.")
        if title is not None:
            entry.title = self._strip_or_none(title)
        if content is not None:
            entry.content = content
        await self._session.flush()
        return entry

    def _strip_or_none(self, value: str | None) -> str | None:
        if value is None:
            return None
        stripped = value.strip()
        return stripped or None
