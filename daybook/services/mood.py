from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from daybook.models import MoodCategory, MoodRecord
from daybook.services.day_bucket import find_day_record, upsert_day_record
from daybook.services.insights import MoodChart, build_mood_chart


class MoodService:
    """Record daily mood ratings and read them back for charts and insights."""

    _MIN_INTENSITY = 1
    _MAX_INTENSITY = 10

    def __init__(self, session: AsyncSession):
        self._session = session

    async def record_mood(
        self,
        user_id: UUID,
        *,
        date: datetime,
        mood: MoodCategory | str,
        mood_intensity: int,
        notes: str | None = None,
    ) -> MoodRecord:
        """Store the user's mood for ``date``'s local day, replacing any earlier rating.

        The returned record is re-read from the day bucket after the write.
        """
        category = self._validate_category(mood)
        self._validate_intensity(mood_intensity)
        normalized_notes = self._normalize_text(notes)

        def apply(record: MoodRecord) -> None:
            record.mood = category.value
            record.mood_intensity = mood_intensity
            if normalized_notes is not None:
                record.notes = normalized_notes

        await upsert_day_record(
            self._session,
            MoodRecord,
            {"user_id": user_id},
            date,
            apply=apply,
            create=lambda: MoodRecord(
                user_id=user_id,
                date=date,
                mood=category.value,
                mood_intensity=mood_intensity,
                notes=normalized_notes,
            ),
        )
        record = await self.get_mood_by_date(user_id, date)
        if record is None:  # pragma: no cover - the upsert just wrote it
            raise RuntimeError("Mood record missing after upsert.")
        return record

    async def get_mood_by_date(self, user_id: UUID, date: datetime) -> MoodRecord | None:
        return await find_day_record(self._session, MoodRecord, {"user_id": user_id}, date)

    async def list_moods(
        self,
        user_id: UUID,
        start: datetime,
        end: datetime,
    ) -> list[MoodRecord]:
        """Return the user's mood records within ``[start, end]``, newest first."""
        stmt = (
            select(MoodRecord)
            .where(MoodRecord.user_id == user_id)
            .where(MoodRecord.date >= start)
            .where(MoodRecord.date <= end)
            .order_by(MoodRecord.date.desc())
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def chart(self, user_id: UUID, start: datetime, end: datetime) -> MoodChart:
        """Chart the window, grouping trend days in the zone of ``start``."""
        records = await self.list_moods(user_id, start, end)
        return build_mood_chart(records, start.tzinfo)

    def _validate_category(self, mood: MoodCategory | str) -> MoodCategory:
        category = MoodCategory.parse(mood)
        if category is MoodCategory.UNKNOWN:
            raise ValueError(f"Unsupported mood category: {mood!r}.")
        return category

    def _validate_intensity(self, intensity: int) -> None:
        if intensity < self._MIN_INTENSITY or intensity > self._MAX_INTENSITY:
            raise ValueError("Mood intensity must be between 1 and 10.")

    def _normalize_text(self, value: str | None) -> str | None:
        if not value:
            return None
        normalized = value.strip()
        return normalized or None
